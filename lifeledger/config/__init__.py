"""Configuration package."""

from lifeledger.config.settings import (
    AppSettings,
    InterpreterSettings,
    LedgerSettings,
    ReceiptSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "InterpreterSettings",
    "LedgerSettings",
    "ReceiptSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
