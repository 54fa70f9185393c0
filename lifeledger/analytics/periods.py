"""
Period Resolver

Turns a reference instant into the inclusive calendar window around it.
Weeks start on Monday; months and years follow the calendar boundaries of
the reference's own (local) date. Instants are compared by their wall-clock
fields: tzinfo is dropped, never converted, so naive and aware dates can
share one ledger.
"""

from datetime import date, datetime, time, timedelta
from typing import Union

from dateutil.relativedelta import relativedelta

from lifeledger.models.analytics import PeriodWindow
from lifeledger.models.ledger import PeriodKind


_ONE_MICROSECOND = timedelta(microseconds=1)


def wall_clock(instant: datetime) -> datetime:
    """`instant` with its tzinfo dropped, calendar fields untouched."""
    return instant.replace(tzinfo=None)


def _as_datetime(reference: Union[date, datetime]) -> datetime:
    if isinstance(reference, datetime):
        return wall_clock(reference)
    return datetime.combine(reference, time.min)


def start_of_day(instant: datetime) -> datetime:
    return instant.replace(hour=0, minute=0, second=0, microsecond=0)


def resolve_period(
    kind: PeriodKind,
    reference: Union[date, datetime],
) -> PeriodWindow:
    """
    Compute the inclusive [start, end] window of `kind` containing `reference`.

    `end` is one microsecond before the next period starts.
    """
    kind = PeriodKind(kind)
    day = start_of_day(_as_datetime(reference))

    if kind == PeriodKind.WEEK:
        start = day - timedelta(days=day.weekday())
        next_start = start + timedelta(days=7)
    elif kind == PeriodKind.MONTH:
        start = day.replace(day=1)
        next_start = start + relativedelta(months=1)
    else:
        start = day.replace(month=1, day=1)
        next_start = start + relativedelta(years=1)

    return PeriodWindow(kind=kind, start=start, end=next_start - _ONE_MICROSECOND)


def month_offset(reference: Union[date, datetime], months: int) -> datetime:
    """First instant of the calendar month `months` away from `reference`."""
    first = start_of_day(_as_datetime(reference)).replace(day=1)
    return first + relativedelta(months=months)
