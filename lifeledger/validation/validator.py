"""
Ledger Consistency Checks

DESIGN DECISION: The store accepts records whose references don't line up
(a deleted category, an income booked on an expense category). Rejecting
them at write time would lose user data, so instead:

1. The aggregation engine silently leaves such transactions out of
   type-specific buckets
2. This validator REPORTS the problem so it can be shown or logged
3. Display code labels the transaction "Uncategorized" rather than failing

IMPORTANT: Validation NEVER silently fixes issues.
"""

from typing import Iterable, Optional

from lifeledger.models.ledger import (
    Account,
    Budget,
    Category,
    CategoryType,
    Transaction,
    TransactionType,
)
from lifeledger.models.validation import ValidationIssue, ValidationResult


TRANSFER_LABEL = "Transfer"
UNCATEGORIZED_LABEL = "Uncategorized"
UNKNOWN_ACCOUNT_LABEL = "Unknown"


def _index(records: Iterable) -> dict:
    return {record.id: record for record in records if record.id is not None}


def category_label(
    transaction: Transaction,
    categories: Iterable[Category],
) -> str:
    """Display name of a transaction's category, never failing."""
    if transaction.type == TransactionType.TRANSFER:
        return TRANSFER_LABEL
    category = _index(categories).get(transaction.category_id)
    return category.name if category else UNCATEGORIZED_LABEL


def account_label(account_id: Optional[int], accounts: Iterable[Account]) -> str:
    account = _index(accounts).get(account_id)
    return account.name if account else UNKNOWN_ACCOUNT_LABEL


class LedgerValidator:
    """
    Checks records against the categories and accounts they reference.
    """

    def check_transaction(
        self,
        transaction: Transaction,
        categories: Iterable[Category],
        accounts: Iterable[Account],
    ) -> ValidationResult:
        issues = []
        category_index = _index(categories)
        account_index = _index(accounts)

        if transaction.type == TransactionType.TRANSFER:
            for field in ("from_account_id", "to_account_id"):
                if getattr(transaction, field) not in account_index:
                    issues.append(ValidationIssue(
                        field=field,
                        issue_type="missing_reference",
                        message=f"Transfer account #{getattr(transaction, field)} does not exist",
                        severity="warning",
                    ))
            if transaction.from_account_id == transaction.to_account_id:
                issues.append(ValidationIssue(
                    field="to_account_id",
                    issue_type="invalid_value",
                    message="Transfer source and destination are the same account",
                    severity="error",
                    suggested_fix="Pick a different destination account",
                ))
        else:
            category = category_index.get(transaction.category_id)
            if category is None:
                issues.append(ValidationIssue(
                    field="category_id",
                    issue_type="missing_reference",
                    message=f"Category #{transaction.category_id} does not exist",
                    severity="warning",
                    suggested_fix=f"The transaction is shown as {UNCATEGORIZED_LABEL}",
                ))
            elif category.type.value != transaction.type.value:
                issues.append(ValidationIssue(
                    field="category_id",
                    issue_type="type_mismatch",
                    message=(
                        f"{transaction.type.value.capitalize()} booked on "
                        f"{category.type.value} category '{category.name}'"
                    ),
                    severity="warning",
                    suggested_fix="It is left out of category breakdowns",
                ))

        if transaction.account_id not in account_index:
            issues.append(ValidationIssue(
                field="account_id",
                issue_type="missing_reference",
                message=f"Account #{transaction.account_id} does not exist",
                severity="warning",
            ))

        return ValidationResult(
            entity_type="transactions",
            entity_id=transaction.id,
            issues=issues,
        )

    def check_budget(
        self,
        budget: Budget,
        categories: Iterable[Category],
    ) -> ValidationResult:
        issues = []
        category = _index(categories).get(budget.category_id)

        if category is None:
            issues.append(ValidationIssue(
                field="category_id",
                issue_type="missing_reference",
                message=f"Budget category #{budget.category_id} does not exist",
                severity="warning",
                suggested_fix="Nothing will be counted against this budget",
            ))
        elif category.type != CategoryType.EXPENSE:
            issues.append(ValidationIssue(
                field="category_id",
                issue_type="type_mismatch",
                message=f"Budget set on income category '{category.name}'",
                severity="warning",
                suggested_fix="Budgets only count expenses",
            ))

        return ValidationResult(
            entity_type="budgets",
            entity_id=budget.id,
            issues=issues,
        )
