"""
Plan and holiday arithmetic.

Plan budgets are tracked by hand (`Plan.spent`), independently of ledger
transactions, so nothing here looks at transactions.
"""

from typing import Iterable

from lifeledger.analytics.aggregator import percentage_of
from lifeledger.models.ledger import Plan, PlanStatus, PlanType


def plan_budget_usage(plan: Plan) -> float:
    """Percentage of a plan's budget already spent, 0 for unbudgeted plans."""
    return percentage_of(plan.spent, plan.budget)


def planned_holiday_days(plans: Iterable[Plan]) -> int:
    """Leave days committed by confirmed trips."""
    return sum(
        plan.holidays_used
        for plan in plans
        if plan.status == PlanStatus.CONFIRMED and plan.type == PlanType.TRIP
    )


def compute_available_days(total_days: int, used_days: int, planned_days: int) -> int:
    # may go negative when trips overbook the allowance
    return total_days - used_days - planned_days
