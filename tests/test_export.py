"""
Tests for CSV/JSON export and import.
"""

import json
import pytest
from datetime import datetime
from decimal import Decimal

from lifeledger.analytics import calculate_balance, category_breakdown
from lifeledger.export import (
    CSV_COLUMNS,
    ImportFormatError,
    export_ledger_json,
    export_transactions_csv,
    import_ledger_json,
    import_transactions_csv,
)
from lifeledger.models import (
    TRANSFER_CATEGORY_ID,
    Category,
    CategoryType,
    Transaction,
    TransactionType,
)


FOOD = Category(id=1, name="Food & Dining", type=CategoryType.EXPENSE, is_default=True)
SALARY = Category(id=2, name="Salary", type=CategoryType.INCOME, is_default=True)
CATEGORIES = [FOOD, SALARY]

LUNCH = Transaction(
    id=1,
    amount=Decimal("12.50"),
    type=TransactionType.EXPENSE,
    category_id=1,
    account_id=1,
    date=datetime(2024, 5, 3, 14, 0),
    description="Lunch",
    tags=["work", "team"],
)
PAYDAY = Transaction(
    id=2,
    amount=Decimal("3000"),
    type=TransactionType.INCOME,
    category_id=2,
    account_id=1,
    date=datetime(2024, 5, 1, 9, 0),
    description="May salary",
    currency="EUR",
)
SAVINGS = Transaction(
    id=3,
    amount=Decimal("200"),
    type=TransactionType.TRANSFER,
    category_id=TRANSFER_CATEGORY_ID,
    account_id=1,
    date=datetime(2024, 5, 4),
    description="To savings, monthly",
    from_account_id=1,
    to_account_id=2,
)


class TestCsvExport:
    """Tests for the CSV layout."""

    def test_header_and_rows(self):
        content = export_transactions_csv([LUNCH, PAYDAY], CATEGORIES)
        lines = content.splitlines()

        assert lines[0] == ",".join(CSV_COLUMNS)
        assert lines[1] == "2024-05-03,expense,Food & Dining,12.50,Lunch,work; team,USD"
        assert lines[2] == "2024-05-01,income,Salary,3000,May salary,,EUR"

    def test_transfer_and_dangling_category_labels(self):
        orphan = LUNCH.model_copy(update={"category_id": 42, "tags": []})
        content = export_transactions_csv([SAVINGS, orphan], CATEGORIES)
        lines = content.splitlines()

        assert lines[1] == '2024-05-04,transfer,Transfer,200,"To savings, monthly",,USD'
        assert ",Uncategorized," in lines[2]

    def test_empty_export_is_header_only(self):
        assert export_transactions_csv([], CATEGORIES) == ",".join(CSV_COLUMNS) + "\n"


class TestCsvImport:
    """Tests for reading CSV exports back."""

    def test_round_trip_keeps_aggregates(self):
        content = export_transactions_csv([LUNCH, PAYDAY, SAVINGS], CATEGORIES)
        imported = import_transactions_csv(content, CATEGORIES, account_id=5)

        assert [t.amount for t in imported] == [Decimal("12.50"), Decimal("3000"), Decimal("200")]
        assert imported[0].tags == ["work", "team"]
        assert imported[0].date == datetime(2024, 5, 3)
        assert imported[1].currency == "EUR"
        assert imported[2].type == TransactionType.TRANSFER
        assert imported[2].category_id == TRANSFER_CATEGORY_ID
        assert all(t.id is None for t in imported)

        assert calculate_balance(imported) == calculate_balance([LUNCH, PAYDAY, SAVINGS])
        assert category_breakdown(imported, CATEGORIES) == category_breakdown(
            [LUNCH, PAYDAY, SAVINGS], CATEGORIES
        )

    def test_unknown_category_without_fallback(self):
        content = export_transactions_csv([LUNCH], CATEGORIES)
        with pytest.raises(ImportFormatError, match="unknown expense category 'Food & Dining'"):
            import_transactions_csv(content, [SALARY], account_id=1)

    def test_unknown_category_with_fallback(self):
        content = export_transactions_csv([LUNCH], CATEGORIES)
        imported = import_transactions_csv(content, [SALARY], account_id=1, fallback_category_id=9)
        assert imported[0].category_id == 9

    def test_wrong_header(self):
        with pytest.raises(ImportFormatError, match="Expected columns"):
            import_transactions_csv("when,what\n2024-05-01,x\n", CATEGORIES, account_id=1)

    def test_bad_amount_reports_line(self):
        content = ",".join(CSV_COLUMNS) + "\n2024-05-03,expense,Food & Dining,abc,Lunch,,USD\n"
        with pytest.raises(ImportFormatError, match="Line 2"):
            import_transactions_csv(content, CATEGORIES, account_id=1)

    def test_bad_type(self):
        content = ",".join(CSV_COLUMNS) + "\n2024-05-03,gift,Food & Dining,5,Lunch,,USD\n"
        with pytest.raises(ImportFormatError):
            import_transactions_csv(content, CATEGORIES, account_id=1)


class TestJson:
    """Tests for the JSON snapshot."""

    def test_export_layout(self):
        content = export_ledger_json([LUNCH], CATEGORIES, exported_at=datetime(2024, 5, 31, 18, 0))
        data = json.loads(content)

        assert set(data) == {"transactions", "categories", "exported_at"}
        assert data["exported_at"] == "2024-05-31T18:00:00"
        assert data["transactions"][0]["description"] == "Lunch"
        assert len(data["categories"]) == 2
        # pretty-printed
        assert "\n  " in content

    def test_round_trip(self):
        exported_at = datetime(2024, 5, 31, 18, 0)
        content = export_ledger_json([LUNCH, PAYDAY, SAVINGS], CATEGORIES, exported_at)
        snapshot = import_ledger_json(content)

        assert snapshot.transactions == [LUNCH, PAYDAY, SAVINGS]
        assert snapshot.categories == CATEGORIES
        assert snapshot.exported_at == exported_at

    def test_invalid_json(self):
        with pytest.raises(ImportFormatError):
            import_ledger_json('{"transactions": "nope"}')


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
