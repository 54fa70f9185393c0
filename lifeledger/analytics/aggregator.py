"""
Aggregator

Sums, per-category breakdowns and budget consumption over a transaction
set. Every function here is referentially transparent: inputs are never
mutated and identical inputs always give identical outputs, so results are
recomputed from the full ledger on every change instead of being cached.

DESIGN DECISION: Bad references never raise. A transaction whose category
is missing, or whose type doesn't match its category's type, simply falls
into no bucket of a breakdown. Zero denominators give a 0 percentage.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Optional, Union

from lifeledger.analytics.filters import (
    filter_by_category,
    filter_by_type,
    filter_by_window,
)
from lifeledger.analytics.periods import resolve_period
from lifeledger.models.analytics import (
    BudgetAlertLevel,
    BudgetProgress,
    CategoryTotal,
    PeriodSummary,
)
from lifeledger.models.ledger import (
    Budget,
    Category,
    PeriodKind,
    Transaction,
    TransactionType,
)


ZERO = Decimal("0")


def percentage_of(part: Decimal, whole: Decimal) -> float:
    """`part` as a percentage of `whole`; 0 when `whole` is 0."""
    if not whole:
        return 0.0
    return float(part / whole * 100)


def calculate_total(
    transactions: Iterable[Transaction],
    transaction_type: Optional[TransactionType] = None,
) -> Decimal:
    """
    Sum of amounts, optionally restricted to one transaction type.

    Transfers never match the income or expense filter.
    """
    if transaction_type is not None:
        transactions = filter_by_type(transactions, transaction_type)
    return sum((t.amount for t in transactions), ZERO)


def calculate_balance(transactions: Iterable[Transaction]) -> Decimal:
    """Income minus expense."""
    transactions = list(transactions)
    return (
        calculate_total(transactions, TransactionType.INCOME)
        - calculate_total(transactions, TransactionType.EXPENSE)
    )


def category_breakdown(
    transactions: Iterable[Transaction],
    categories: Iterable[Category],
) -> list[CategoryTotal]:
    """
    Per-category totals with their share of the grand total.

    Only transactions whose category id AND type match a category count.
    Categories with nothing spent are dropped. Sorted by total, largest
    first; ties keep the order of `categories`.
    """
    transactions = list(transactions)

    totals = []
    for category in categories:
        matching = [
            t for t in transactions
            if t.category_id == category.id and t.type.value == category.type.value
        ]
        total = calculate_total(matching)
        if total > 0:
            totals.append((category, total))

    grand_total = sum((total for _, total in totals), ZERO)

    breakdown = [
        CategoryTotal(
            category=category,
            total=total,
            percentage=percentage_of(total, grand_total),
        )
        for category, total in totals
    ]
    # sorted() is stable, also with reverse=True
    return sorted(breakdown, key=lambda entry: entry.total, reverse=True)


def budget_progress(
    budget: Budget,
    transactions: Iterable[Transaction],
) -> BudgetProgress:
    """
    How much of a budget its current period has consumed.

    The window is the budget period containing `budget.start_date`.
    A zero budget amount reports a 0 percentage.
    """
    window = resolve_period(budget.period.period_kind, budget.start_date)

    relevant = filter_by_window(transactions, window)
    relevant = filter_by_type(relevant, TransactionType.EXPENSE)
    relevant = filter_by_category(relevant, budget.category_id)

    spent = calculate_total(relevant)

    return BudgetProgress(
        spent=spent,
        remaining=budget.amount - spent,
        percentage=percentage_of(spent, budget.amount),
        is_over_budget=spent > budget.amount,
    )


def budget_alert_level(
    budget: Budget,
    progress: BudgetProgress,
) -> BudgetAlertLevel:
    """Flag for a budget: over, at its alert threshold, or fine."""
    if progress.is_over_budget:
        return BudgetAlertLevel.OVER
    if progress.percentage >= budget.alert_threshold:
        return BudgetAlertLevel.WARNING
    return BudgetAlertLevel.OK


def summarize_period(
    transactions: Iterable[Transaction],
    kind: PeriodKind,
    reference: Union[date, datetime],
) -> PeriodSummary:
    """Income, expense and balance of the period containing `reference`."""
    window = resolve_period(kind, reference)
    in_window = filter_by_window(transactions, window)

    income = calculate_total(in_window, TransactionType.INCOME)
    expense = calculate_total(in_window, TransactionType.EXPENSE)

    return PeriodSummary(
        window=window,
        income=income,
        expense=expense,
        balance=income - expense,
    )
