"""
Tests for ledger consistency checks and display labels.
"""

import pytest
from datetime import datetime
from decimal import Decimal

from lifeledger.models import (
    TRANSFER_CATEGORY_ID,
    Account,
    Budget,
    Category,
    CategoryType,
    Transaction,
    TransactionType,
)
from lifeledger.validation import (
    LedgerValidator,
    account_label,
    category_label,
)


FOOD = Category(id=1, name="Food & Dining", type=CategoryType.EXPENSE)
SALARY = Category(id=2, name="Salary", type=CategoryType.INCOME)
CASH = Account(id=1, name="Cash")
BANK = Account(id=2, name="Bank Account")


def _transaction(**kwargs):
    fields = dict(
        amount=Decimal("10"),
        type=TransactionType.EXPENSE,
        category_id=1,
        account_id=1,
        date=datetime(2024, 5, 2),
    )
    fields.update(kwargs)
    return Transaction(**fields)


def _transfer(from_account_id, to_account_id):
    return _transaction(
        type=TransactionType.TRANSFER,
        category_id=TRANSFER_CATEGORY_ID,
        from_account_id=from_account_id,
        to_account_id=to_account_id,
    )


class TestLabels:
    """Tests for display fallbacks."""

    def test_category_label(self):
        assert category_label(_transaction(), [FOOD]) == "Food & Dining"
        assert category_label(_transaction(category_id=9), [FOOD]) == "Uncategorized"
        assert category_label(_transfer(1, 2), [FOOD]) == "Transfer"

    def test_account_label(self):
        assert account_label(2, [CASH, BANK]) == "Bank Account"
        assert account_label(7, [CASH, BANK]) == "Unknown"
        assert account_label(None, [CASH]) == "Unknown"


class TestTransactionChecks:
    """Tests for LedgerValidator.check_transaction."""

    def test_consistent_transaction(self):
        result = LedgerValidator().check_transaction(_transaction(), [FOOD], [CASH])
        assert result.issues == []
        assert result.entity_type == "transactions"

    def test_missing_category(self):
        result = LedgerValidator().check_transaction(
            _transaction(category_id=5), [FOOD], [CASH]
        )
        assert [i.issue_type for i in result.issues] == ["missing_reference"]
        assert result.is_valid

    def test_type_mismatch(self):
        result = LedgerValidator().check_transaction(
            _transaction(type=TransactionType.INCOME), [FOOD], [CASH]
        )
        assert [i.issue_type for i in result.issues] == ["type_mismatch"]
        assert result.issues[0].severity == "warning"

    def test_missing_account(self):
        result = LedgerValidator().check_transaction(
            _transaction(account_id=4), [FOOD], [CASH]
        )
        assert [i.field for i in result.issues] == ["account_id"]

    def test_transfer_to_same_account_is_an_error(self):
        result = LedgerValidator().check_transaction(_transfer(1, 1), [FOOD], [CASH, BANK])
        assert result.has_errors
        assert result.issues[0].field == "to_account_id"

    def test_transfer_with_unknown_account(self):
        result = LedgerValidator().check_transaction(_transfer(1, 3), [FOOD], [CASH, BANK])
        assert [i.field for i in result.issues] == ["to_account_id"]
        assert not result.has_errors


class TestBudgetChecks:
    """Tests for LedgerValidator.check_budget."""

    def _budget(self, category_id):
        return Budget(category_id=category_id, amount=Decimal("100"), start_date=datetime(2024, 5, 1))

    def test_budget_on_expense_category(self):
        assert LedgerValidator().check_budget(self._budget(1), [FOOD, SALARY]).issues == []

    def test_budget_on_income_category(self):
        result = LedgerValidator().check_budget(self._budget(2), [FOOD, SALARY])
        assert [i.issue_type for i in result.issues] == ["type_mismatch"]

    def test_budget_on_missing_category(self):
        result = LedgerValidator().check_budget(self._budget(3), [FOOD, SALARY])
        assert [i.issue_type for i in result.issues] == ["missing_reference"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
