"""
Ledger Export and Import

CSV: one row per transaction with the fixed columns
    Date, Type, Category, Amount, Description, Tags, Currency
dates as yyyy-MM-dd and tags joined with "; ".

JSON: the transaction and category collections plus an export timestamp,
pretty-printed.

Re-importing an export reproduces the same aggregates: amounts, types,
categories and calendar dates survive the round trip. CSV drops the time of
day, receipts and transfer accounts, so the JSON export is the lossless one.
"""

import csv
import io
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional

from pydantic import BaseModel, Field, ValidationError

from lifeledger.models.ledger import (
    TRANSFER_CATEGORY_ID,
    Category,
    Transaction,
    TransactionType,
)
from lifeledger.validation import category_label


CSV_COLUMNS = ["Date", "Type", "Category", "Amount", "Description", "Tags", "Currency"]
CSV_DATE_FORMAT = "%Y-%m-%d"
TAG_SEPARATOR = "; "


class ImportFormatError(Exception):
    """Export file could not be read back."""
    pass


class LedgerSnapshot(BaseModel):
    """Contents of a JSON export."""

    transactions: list[Transaction] = Field(default_factory=list)
    categories: list[Category] = Field(default_factory=list)
    exported_at: datetime


# =============================================================================
# EXPORT
# =============================================================================

def export_transactions_csv(
    transactions: Iterable[Transaction],
    categories: Iterable[Category],
) -> str:
    categories = list(categories)

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)

    for t in transactions:
        writer.writerow([
            t.date.strftime(CSV_DATE_FORMAT),
            t.type.value,
            category_label(t, categories),
            str(t.amount),
            t.description,
            TAG_SEPARATOR.join(t.tags),
            t.currency,
        ])

    return buffer.getvalue()


def export_ledger_json(
    transactions: Iterable[Transaction],
    categories: Iterable[Category],
    exported_at: Optional[datetime] = None,
) -> str:
    snapshot = LedgerSnapshot(
        transactions=list(transactions),
        categories=list(categories),
        exported_at=exported_at or datetime.now(),
    )
    return snapshot.model_dump_json(indent=2)


# =============================================================================
# IMPORT
# =============================================================================

def import_ledger_json(content: str) -> LedgerSnapshot:
    try:
        return LedgerSnapshot.model_validate_json(content)
    except ValidationError as e:
        raise ImportFormatError(f"Invalid ledger export: {e}") from e


def import_transactions_csv(
    content: str,
    categories: Iterable[Category],
    account_id: int,
    fallback_category_id: Optional[int] = None,
) -> list[Transaction]:
    """
    Parse a CSV export back into unsaved transactions.

    Categories are matched by name and type. Rows whose category can't be
    matched use `fallback_category_id`, or fail when none is given.
    Transfers come back as transfers within `account_id`.
    """
    by_name = {
        (c.type.value, c.name.lower()): c.id
        for c in categories
        if c.id is not None
    }

    reader = csv.DictReader(io.StringIO(content))
    if reader.fieldnames != CSV_COLUMNS:
        raise ImportFormatError(
            f"Expected columns {CSV_COLUMNS}, got {reader.fieldnames}"
        )

    transactions = []
    # line 1 is the header
    for line, row in enumerate(reader, start=2):
        try:
            transaction_type = TransactionType(row["Type"])
            amount = Decimal(row["Amount"])
            when = datetime.strptime(row["Date"], CSV_DATE_FORMAT)
        except (ValueError, InvalidOperation) as e:
            raise ImportFormatError(f"Line {line}: {e}") from e

        tags = [tag for tag in (row["Tags"] or "").split(TAG_SEPARATOR) if tag]
        fields = dict(
            amount=amount,
            type=transaction_type,
            account_id=account_id,
            date=when,
            description=row["Description"] or "",
            tags=tags,
            currency=row["Currency"],
        )

        if transaction_type == TransactionType.TRANSFER:
            fields.update(
                category_id=TRANSFER_CATEGORY_ID,
                from_account_id=account_id,
                to_account_id=account_id,
            )
        else:
            category_id = by_name.get(
                (transaction_type.value, (row["Category"] or "").lower()),
                fallback_category_id,
            )
            if category_id is None:
                raise ImportFormatError(
                    f"Line {line}: unknown {transaction_type.value} category "
                    f"'{row['Category']}'"
                )
            fields["category_id"] = category_id

        try:
            transactions.append(Transaction(**fields))
        except ValidationError as e:
            raise ImportFormatError(f"Line {line}: {e}") from e

    return transactions
