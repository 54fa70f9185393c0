"""
Result Models for the Aggregation Engine

Everything the analytics functions return. All of these are derived values:
they are recomputed from the ledger on every read and never persisted.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from lifeledger.models.ledger import Budget, Category, PeriodKind


class PeriodWindow(BaseModel):
    """
    Inclusive [start, end] instant interval.

    `end` is the last representable microsecond of the period, so a
    transaction stamped exactly at either bound is inside the window.
    """
    model_config = ConfigDict(frozen=True)

    kind: PeriodKind
    start: datetime
    end: datetime

    @model_validator(mode='after')
    def validate_bounds(self) -> 'PeriodWindow':
        if self.end < self.start:
            raise ValueError("Period end cannot be before start")
        return self

    def contains(self, instant: datetime) -> bool:
        """Inclusive membership test on wall-clock fields."""
        start, end = self.start.replace(tzinfo=None), self.end.replace(tzinfo=None)
        return start <= instant.replace(tzinfo=None) <= end


class CategoryTotal(BaseModel):
    """One slice of a category breakdown."""

    category: Category
    total: Decimal
    percentage: float = Field(
        ...,
        ge=0.0,
        description="Share of the breakdown's grand total (0-100)"
    )


class BudgetProgress(BaseModel):
    """Consumption of a budget over its current period."""

    spent: Decimal
    remaining: Decimal = Field(
        ...,
        description="Negative once the budget is exceeded"
    )
    percentage: float = Field(
        ...,
        ge=0.0,
        description="Spent as a percentage of the budget amount"
    )
    is_over_budget: bool


class BudgetAlertLevel(str, Enum):
    """How a budget should be flagged to the user."""
    OK = "ok"
    WARNING = "warning"  # alert threshold reached
    OVER = "over"        # spent more than the budget amount


class PeriodSummary(BaseModel):
    """Income, expense and balance over one period window."""

    window: PeriodWindow
    income: Decimal
    expense: Decimal
    balance: Decimal


class MonthlyTrendPoint(BaseModel):
    """One calendar month of the income/expense trend."""

    label: str = Field(
        ...,
        description="Month label, e.g. 'Oct 2026'"
    )
    month_start: datetime
    income: Decimal
    expense: Decimal


class BudgetStatus(BaseModel):
    """One line of the budget report."""

    budget: Budget
    category_name: str
    progress: BudgetProgress
    alert_level: BudgetAlertLevel
