"""Display formatting helpers for chart labels and tooltips."""

from decimal import Decimal
from typing import Optional, Union

Number = Union[Decimal, int, float]


def format_currency(value: Number, currency: str = "KES", decimal_places: int = 2) -> str:
    """Format an amount with currency code and thousands separators.

    Example:
        >>> format_currency(Decimal("1234.5"))
        'KES 1,234.50'
    """
    return f"{currency} {value:,.{decimal_places}f}"


def format_tooltip_value(
    value: Number,
    total: Optional[Number] = None,
    currency: str = "KES",
    decimal_places: int = 2,
) -> str:
    """Format an amount, appending its share of ``total`` when positive.

    Example:
        >>> format_tooltip_value(Decimal("25"), Decimal("200"))
        'KES 25.00 (12.5%)'
    """
    tooltip = format_currency(value, currency, decimal_places)
    if total and total > 0:
        percentage = value / total * 100
        tooltip += f" ({percentage:.1f}%)"
    return tooltip


def abbreviate_label(label: str, max_length: int = 12) -> str:
    """Truncate a label to ``max_length`` characters, ending in '...'."""
    if len(label) <= max_length:
        return label
    return f"{label[:max_length - 3]}..."
