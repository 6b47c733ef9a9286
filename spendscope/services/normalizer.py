"""Transaction normalizer.

Extracts the canonical view of heterogeneous transaction records. Records
arrive either as mappings (decoded API payloads) or as objects exposing the
same names as attributes.

Field resolution:
- amount: ``amount`` (number or numeric string)
- category: ``category`` (string, or mapping/object carrying ``name``)
- timestamp: ``time_of_transaction`` first, then ``date``
- expense flag: ``is_expense`` / ``isExpense``, else ``type == "expense"``
"""

import logging
import math
from collections.abc import Iterable, Mapping
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from dateutil.parser import isoparse

from spendscope.domain.models import NormalizedTransaction

logger = logging.getLogger(__name__)

UNCATEGORIZED = "Uncategorized"

# Exact transaction time first, coarser date second
TIMESTAMP_FIELDS = ("time_of_transaction", "date")
EXPENSE_FLAG_FIELDS = ("is_expense", "isExpense")

_MISSING = object()


def _field(raw: Any, name: str, default: Any = None) -> Any:
    if isinstance(raw, Mapping):
        return raw.get(name, default)
    return getattr(raw, name, default)


def resolve_amount(raw: Any) -> Optional[Decimal]:
    """Coerce the record's amount to a finite Decimal.

    Returns:
        The amount, or None when it is missing, non-numeric or not finite
    """
    value = _field(raw, "amount")

    if value is None or isinstance(value, bool):
        return None

    try:
        if isinstance(value, float):
            if not math.isfinite(value):
                return None
            amount = Decimal(str(value))
        elif isinstance(value, (int, Decimal)):
            amount = Decimal(value)
        else:
            amount = Decimal(str(value).strip().replace(",", ""))
    except (InvalidOperation, ValueError, TypeError):
        return None

    # Beyond double range the amount counts as infinite
    if not amount.is_finite() or not math.isfinite(float(amount)):
        return None
    return amount


def resolve_category(raw: Any, fallback: str = UNCATEGORIZED) -> str:
    """Resolve the display name of the record's category.

    A plain string is used verbatim; a mapping or object contributes its
    ``name``. Anything that does not yield a non-empty name falls back.
    """
    category = _field(raw, "category")

    if isinstance(category, str):
        name = category
    elif category is None:
        name = None
    else:
        name = _field(category, "name")

    if isinstance(name, str) and name:
        return name
    return fallback


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str):
        try:
            parsed = isoparse(value.strip())
        except (ValueError, OverflowError):
            return None
    else:
        return None

    # Aware timestamps are compared in local wall-clock time
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def resolve_timestamp(raw: Any) -> Optional[datetime]:
    """Resolve the record's timestamp, preferring the exact transaction time.

    Returns:
        Parsed timestamp, or None if no field parses (the record is then
        never excluded by a date range)
    """
    for name in TIMESTAMP_FIELDS:
        parsed = _parse_timestamp(_field(raw, name))
        if parsed is not None:
            return parsed
    return None


def resolve_is_expense(raw: Any) -> bool:
    for name in EXPENSE_FLAG_FIELDS:
        flag = _field(raw, name, _MISSING)
        if flag is not _MISSING and flag is not None:
            if isinstance(flag, str):
                return flag.strip().lower() in ("true", "1", "yes")
            return bool(flag)

    kind = _field(raw, "type")
    kind = getattr(kind, "value", kind)
    return isinstance(kind, str) and kind.lower() == "expense"


def normalize_transaction(
    raw: Any, uncategorized_label: str = UNCATEGORIZED
) -> Optional[NormalizedTransaction]:
    """Build the canonical record for a raw transaction.

    Already-normalized records pass through unchanged.

    Returns:
        NormalizedTransaction, or None when the amount is not a finite
        number (the record is rejected from aggregation)
    """
    if isinstance(raw, NormalizedTransaction):
        return raw

    amount = resolve_amount(raw)
    if amount is None:
        logger.debug(f"Skipping transaction with malformed amount: {_field(raw, 'amount')!r}")
        return None

    return NormalizedTransaction(
        amount=amount,
        category=resolve_category(raw, uncategorized_label),
        timestamp=resolve_timestamp(raw),
        is_expense=resolve_is_expense(raw),
        description=str(_field(raw, "description") or ""),
        merchant_name=str(_field(raw, "merchant_name") or ""),
    )


def extract_categories(
    transactions: Iterable[Any], uncategorized_label: str = UNCATEGORIZED
) -> list[str]:
    """Return the sorted, unique category names found in the records."""
    names = set()
    for raw in transactions:
        if isinstance(raw, NormalizedTransaction):
            names.add(raw.category)
        else:
            names.add(resolve_category(raw, uncategorized_label))
    return sorted(names)


def sort_newest_first(transactions: Iterable[Any]) -> list[Any]:
    """Order records newest first; records without a timestamp go last.

    The sort is stable, so records sharing a timestamp keep input order.
    """
    dated = []
    undated = []
    for raw in transactions:
        if isinstance(raw, NormalizedTransaction):
            stamp = raw.timestamp
        else:
            stamp = resolve_timestamp(raw)
        if stamp is None:
            undated.append(raw)
        else:
            dated.append((stamp, raw))

    dated.sort(key=lambda pair: pair[0], reverse=True)
    return [raw for _, raw in dated] + undated
