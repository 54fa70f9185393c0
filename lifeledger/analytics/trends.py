"""
Trend Builder

Income/expense per calendar month over a sliding window ending at the
current month.

Not incremental: every call rescans the whole ledger once per month,
O(month_count x transaction_count). That is fine for a client-local ledger
of bounded size.
"""

from datetime import datetime
from typing import Iterable, Optional

from lifeledger.analytics.aggregator import calculate_total
from lifeledger.analytics.filters import filter_by_window
from lifeledger.analytics.periods import month_offset, resolve_period
from lifeledger.models.analytics import MonthlyTrendPoint
from lifeledger.models.ledger import PeriodKind, Transaction, TransactionType


MONTH_LABEL_FORMAT = "%b %Y"


def monthly_trend(
    transactions: Iterable[Transaction],
    month_count: int = 6,
    now: Optional[datetime] = None,
) -> list[MonthlyTrendPoint]:
    """
    `month_count` consecutive months, oldest first, ending with the month
    of `now` (defaults to the current local time).
    """
    transactions = list(transactions)
    now = now or datetime.now()

    points = []
    for i in range(month_count - 1, -1, -1):
        window = resolve_period(PeriodKind.MONTH, month_offset(now, -i))
        in_month = filter_by_window(transactions, window)

        points.append(MonthlyTrendPoint(
            label=window.start.strftime(MONTH_LABEL_FORMAT),
            month_start=window.start,
            income=calculate_total(in_month, TransactionType.INCOME),
            expense=calculate_total(in_month, TransactionType.EXPENSE),
        ))

    return points
