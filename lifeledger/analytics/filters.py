"""
Ledger Filters

Pure predicates over immutable transaction fields. Each returns a new list
in the input order, so filters compose by successive application and the
order of composition never changes the result set.
"""

from datetime import datetime
from typing import Iterable

from lifeledger.analytics.periods import wall_clock
from lifeledger.models.analytics import PeriodWindow
from lifeledger.models.ledger import Transaction, TransactionType


def filter_by_date_range(
    transactions: Iterable[Transaction],
    start: datetime,
    end: datetime,
) -> list[Transaction]:
    """
    Transactions dated inside the inclusive [start, end] interval.

    Bounds and dates are compared on their wall-clock fields.
    """
    start, end = wall_clock(start), wall_clock(end)
    return [t for t in transactions if start <= wall_clock(t.date) <= end]


def filter_by_window(
    transactions: Iterable[Transaction],
    window: PeriodWindow,
) -> list[Transaction]:
    return filter_by_date_range(transactions, window.start, window.end)


def filter_by_type(
    transactions: Iterable[Transaction],
    transaction_type: TransactionType,
) -> list[Transaction]:
    transaction_type = TransactionType(transaction_type)
    return [t for t in transactions if t.type == transaction_type]


def filter_by_category(
    transactions: Iterable[Transaction],
    category_id: int,
) -> list[Transaction]:
    return [t for t in transactions if t.category_id == category_id]


def filter_by_account(
    transactions: Iterable[Transaction],
    account_id: int,
) -> list[Transaction]:
    """Transactions booked on, or transferring into or out of, an account."""
    return [
        t for t in transactions
        if account_id in (t.account_id, t.from_account_id, t.to_account_id)
    ]
