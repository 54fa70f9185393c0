"""Budget and financial-aggregation engine."""

from lifeledger.analytics.aggregator import (
    budget_alert_level,
    budget_progress,
    calculate_balance,
    calculate_total,
    category_breakdown,
    percentage_of,
    summarize_period,
)
from lifeledger.analytics.filters import (
    filter_by_account,
    filter_by_category,
    filter_by_date_range,
    filter_by_type,
    filter_by_window,
)
from lifeledger.analytics.periods import month_offset, resolve_period, wall_clock
from lifeledger.analytics.plans import (
    compute_available_days,
    plan_budget_usage,
    planned_holiday_days,
)
from lifeledger.analytics.trends import monthly_trend

__all__ = [
    "budget_alert_level",
    "budget_progress",
    "calculate_balance",
    "calculate_total",
    "category_breakdown",
    "compute_available_days",
    "filter_by_account",
    "filter_by_category",
    "filter_by_date_range",
    "filter_by_type",
    "filter_by_window",
    "month_offset",
    "monthly_trend",
    "percentage_of",
    "plan_budget_usage",
    "planned_holiday_days",
    "resolve_period",
    "summarize_period",
    "wall_clock",
]
