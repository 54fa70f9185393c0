"""Ledger consistency checks."""

from lifeledger.validation.validator import (
    TRANSFER_LABEL,
    UNCATEGORIZED_LABEL,
    UNKNOWN_ACCOUNT_LABEL,
    LedgerValidator,
    account_label,
    category_label,
)

__all__ = [
    "TRANSFER_LABEL",
    "UNCATEGORIZED_LABEL",
    "UNKNOWN_ACCOUNT_LABEL",
    "LedgerValidator",
    "account_label",
    "category_label",
]
