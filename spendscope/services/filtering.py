"""Filter engine.

Applies the date interval, category allow-list and free-text search of a
FilterOptions value to a transaction collection. Filtering is stable (input
order is preserved) and fails open: a record whose date cannot be compared
is kept rather than dropped.
"""

import logging
from collections.abc import Iterable
from datetime import date, datetime, time
from typing import Any, Optional, TypeVar

from spendscope.domain.models import FilterOptions, NormalizedTransaction, TimePeriod
from spendscope.services.normalizer import (
    UNCATEGORIZED,
    resolve_category,
    resolve_timestamp,
)
from spendscope.services.search import build_matcher

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _as_datetime(bound: Any, end: bool) -> Any:
    # Plain dates cover the whole day
    if isinstance(bound, datetime):
        # Compared in local wall-clock time, like normalized timestamps
        if bound.tzinfo is not None:
            return bound.astimezone().replace(tzinfo=None)
        return bound
    if isinstance(bound, date):
        return datetime.combine(bound, time.max if end else time.min)
    return bound


def is_within_interval(moment: datetime, start: Any, end: Any) -> bool:
    """Check ``start <= moment <= end`` (closed interval).

    Raises:
        ValueError: If the interval is inverted
        TypeError: If the values cannot be compared
    """
    moment = _as_datetime(moment, end=False)
    start = _as_datetime(start, end=False)
    end = _as_datetime(end, end=True)
    if start > end:
        raise ValueError(f"Invalid interval: {start} is after {end}")
    return start <= moment <= end


def _record_view(raw: Any, uncategorized_label: str) -> tuple[Optional[datetime], str]:
    if isinstance(raw, NormalizedTransaction):
        return raw.timestamp, raw.category
    return resolve_timestamp(raw), resolve_category(raw, uncategorized_label)


def filter_transactions(
    transactions: Iterable[T],
    filters: FilterOptions,
    uncategorized_label: str = UNCATEGORIZED,
) -> list[T]:
    """Return the records passing every filter stage, in input order.

    Stages:
    1. Date range, only when both bounds are set. Records without a
       resolvable timestamp always pass; a failed comparison passes with a
       warning.
    2. Category allow-list; an empty allow-list passes everything.
    3. Free-text search; an empty query passes everything.

    Args:
        transactions: Raw or normalized transaction records
        filters: Filter configuration
        uncategorized_label: Category name for records without one

    Returns:
        The passing records (the original objects, not copies)
    """
    start, end = filters.start_date, filters.end_date
    date_filter = (
        filters.time_period != TimePeriod.ALL
        and start is not None
        and end is not None
    )
    allowed = set(filters.categories)
    matches = build_matcher(filters.search, uncategorized_label)

    result = []
    comparison_failures = 0
    last_error: Optional[Exception] = None

    for raw in transactions:
        timestamp, category = _record_view(raw, uncategorized_label)

        if date_filter and timestamp is not None:
            try:
                if not is_within_interval(timestamp, start, end):
                    continue
            except (TypeError, ValueError, OverflowError) as e:
                comparison_failures += 1
                last_error = e

        if allowed and category not in allowed:
            continue

        if not matches(raw):
            continue

        result.append(raw)

    if comparison_failures:
        logger.warning(
            f"Date comparison failed for {comparison_failures} transaction(s); "
            f"kept them unfiltered ({last_error})"
        )

    return result
