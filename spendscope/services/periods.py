"""Temporal resolver.

Maps a named time period to a concrete ``[start, end]`` interval using
calendar boundaries. Weeks start on Monday. All functions are pure given
``now``.
"""

from datetime import datetime, time, timedelta
from typing import Optional

from dateutil.relativedelta import relativedelta

from spendscope.domain.models import TimePeriod

Interval = tuple[Optional[datetime], Optional[datetime]]


def start_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.min, tzinfo=moment.tzinfo)


def end_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.max, tzinfo=moment.tzinfo)


def resolve_interval(
    period: TimePeriod,
    now: datetime,
    current_start: Optional[datetime] = None,
    current_end: Optional[datetime] = None,
    custom_default_months: int = 1,
) -> Interval:
    """Resolve a time period to its interval.

    Args:
        period: Period token
        now: Reference instant
        current_start: Previously chosen start bound (``CUSTOM`` only)
        current_end: Previously chosen end bound (``CUSTOM`` only)
        custom_default_months: Window used when a custom bound is missing

    Returns:
        ``(start, end)``; ``(None, None)`` for ``ALL``

    Example:
        >>> resolve_interval(TimePeriod.WEEK, datetime(2024, 5, 15, 10, 30))
        (datetime(2024, 5, 13, 0, 0), datetime(2024, 5, 19, 23, 59, 59, 999999))
    """
    if period == TimePeriod.DAY:
        return start_of_day(now), end_of_day(now)

    if period == TimePeriod.WEEK:
        monday = now - timedelta(days=now.weekday())
        sunday = monday + timedelta(days=6)
        return start_of_day(monday), end_of_day(sunday)

    if period == TimePeriod.MONTH:
        first = now.replace(day=1)
        last = first + relativedelta(months=1, days=-1)
        return start_of_day(first), end_of_day(last)

    if period == TimePeriod.YEAR:
        return (
            start_of_day(now.replace(month=1, day=1)),
            end_of_day(now.replace(month=12, day=31)),
        )

    if period == TimePeriod.CUSTOM:
        start = current_start
        if start is None:
            start = now - relativedelta(months=custom_default_months)
        end = current_end if current_end is not None else now
        return start, end

    if period == TimePeriod.ALL:
        return None, None

    raise ValueError(f"Unknown time period: {period}")
