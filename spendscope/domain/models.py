"""Domain models for the spendscope analytics pipeline.

All models are immutable (frozen dataclasses). Every value flowing through
the pipeline is recomputed on each run and never mutated in place.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Union


class TimePeriod(Enum):
    """Named time period selectable in the filter UI."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    CUSTOM = "custom"
    ALL = "all"

    @classmethod
    def parse(cls, value: Union["TimePeriod", str]) -> "TimePeriod":
        """Coerce a token (enum member or string) to a TimePeriod.

        Raises:
            ValueError: If the token is not a known period
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown time period: {value!r}") from None


class ChartKind(Enum):
    """Supported visualization families."""

    LINE = "line"
    BAR = "bar"
    PIE = "pie"
    DONUT = "donut"
    AREA = "area"
    TIME_SERIES = "timeSeries"
    HEATMAP = "heatmap"


@dataclass(frozen=True, slots=True)
class FilterOptions:
    """User-selected filter configuration.

    An empty ``categories`` tuple means no category restriction. Bounds are
    both None for ``ALL``; during ``CUSTOM`` editing either may be None until
    the user supplies it.

    Every editing method returns a new instance.
    """

    time_period: TimePeriod = TimePeriod.ALL
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    categories: tuple[str, ...] = ()
    search: str = ""

    def __post_init__(self) -> None:
        """Coerce loose inputs into canonical field types."""
        object.__setattr__(self, "time_period", TimePeriod.parse(self.time_period))
        categories = self.categories
        if isinstance(categories, str):
            categories = (categories,)
        object.__setattr__(self, "categories", tuple(categories))

    @property
    def has_category_restriction(self) -> bool:
        return bool(self.categories)

    def with_time_period(
        self,
        period: Union[TimePeriod, str],
        now: Optional[datetime] = None,
        custom_default_months: int = 1,
    ) -> "FilterOptions":
        """Switch to a named period, resolving its bounds against ``now``.

        ``CUSTOM`` keeps any previously chosen bounds.
        """
        from spendscope.services.periods import resolve_interval

        period = TimePeriod.parse(period)
        start, end = resolve_interval(
            period,
            now or datetime.now(),
            current_start=self.start_date,
            current_end=self.end_date,
            custom_default_months=custom_default_months,
        )
        return replace(self, time_period=period, start_date=start, end_date=end)

    def with_start_date(self, start: datetime) -> "FilterOptions":
        """Set the start bound manually; the period becomes ``CUSTOM``."""
        return replace(self, start_date=start, time_period=TimePeriod.CUSTOM)

    def with_end_date(self, end: datetime) -> "FilterOptions":
        """Set the end bound manually; the period becomes ``CUSTOM``."""
        return replace(self, end_date=end, time_period=TimePeriod.CUSTOM)

    def toggle_category(self, name: str) -> "FilterOptions":
        """Add the category to the allow-list, or remove it if present."""
        if name in self.categories:
            return replace(
                self, categories=tuple(c for c in self.categories if c != name)
            )
        return replace(self, categories=self.categories + (name,))

    def clear_categories(self) -> "FilterOptions":
        return replace(self, categories=())

    def select_all_categories(self, available: list[str]) -> "FilterOptions":
        return replace(self, categories=tuple(available))

    def with_search(self, query: str) -> "FilterOptions":
        return replace(self, search=query or "")

    def effective(
        self, now: Optional[datetime] = None, custom_default_months: int = 1
    ) -> "FilterOptions":
        """Return filters with concrete bounds substituted where missing.

        ``ALL`` never carries bounds. Any other period missing one or both
        bounds has them filled in by the temporal resolver, so a
        misconfigured filter degrades to the period's default window.
        """
        if self.time_period == TimePeriod.ALL:
            if self.start_date is None and self.end_date is None:
                return self
            return replace(self, start_date=None, end_date=None)

        if self.start_date is not None and self.end_date is not None:
            return self

        return self.with_time_period(self.time_period, now, custom_default_months)


DEFAULT_FILTERS = FilterOptions()


def get_default_filters() -> FilterOptions:
    """Return the default filter configuration (all time, all categories).

    Always the same immutable value; never derived from the current date.
    """
    return DEFAULT_FILTERS


@dataclass(frozen=True, slots=True)
class NormalizedTransaction:
    """Canonical, type-coerced view of a raw transaction record."""

    amount: Decimal
    category: str
    timestamp: Optional[datetime]
    is_expense: bool
    description: str = ""
    merchant_name: str = ""


@dataclass(frozen=True, slots=True)
class CategorySummaryEntry:
    """One slice of the expense category breakdown."""

    name: str
    amount: Decimal
    percentage: float


@dataclass(frozen=True, slots=True)
class MonthlyTotals:
    """Income and expense sums for one calendar month (``YYYY-MM``)."""

    month: str
    income: Decimal = Decimal("0")
    expenses: Decimal = Decimal("0")

    @property
    def net(self) -> Decimal:
        return self.income - self.expenses


@dataclass(frozen=True, slots=True)
class HeatCell:
    """Summed expense amount for a weekday / time-of-day bucket."""

    weekday: int  # 0 = Monday
    time_slot: int  # index into TIME_SLOT_LABELS
    amount: Decimal


WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
TIME_SLOT_LABELS = ("Morning", "Afternoon", "Evening", "Night")


@dataclass(frozen=True, slots=True)
class AnalyticsSummary:
    """Aggregated view of a filtered transaction collection.

    ``transaction_count`` counts every filtered record, including those
    whose amount could not be coerced.
    """

    total_income: Decimal = Decimal("0")
    total_expenses: Decimal = Decimal("0")
    category_breakdown: tuple[CategorySummaryEntry, ...] = ()
    monthly_totals: tuple[MonthlyTotals, ...] = ()
    heatmap: tuple[HeatCell, ...] = ()
    transaction_count: int = 0

    @property
    def net_amount(self) -> Decimal:
        return self.total_income - self.total_expenses

    @property
    def is_empty(self) -> bool:
        return self.transaction_count == 0


@dataclass(frozen=True, slots=True)
class ChartPoint:
    """Generic ``{x, y}`` point used by bar, donut, line and area charts."""

    x: str
    y: Decimal


@dataclass(frozen=True, slots=True)
class PieSlice:
    """Pie chart slice with display colour and a preformatted tooltip."""

    name: str
    amount: Decimal
    color: str
    legend_label: str
    tooltip: str


@dataclass(frozen=True, slots=True)
class LegendItem:
    name: str
    color: str


@dataclass(frozen=True, slots=True)
class SeriesDataset:
    """One or more ``{x, y}`` series plus the legend describing them."""

    series: tuple[tuple[ChartPoint, ...], ...] = ()
    legend: tuple[LegendItem, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not any(self.series)


@dataclass(frozen=True, slots=True)
class HeatPoint:
    x: int
    y: int
    heat: Decimal


@dataclass(frozen=True, slots=True)
class HeatMapDataset:
    """Heat map grid with axis labels."""

    data: tuple[HeatPoint, ...] = ()
    x_labels: tuple[str, ...] = field(default=WEEKDAY_LABELS)
    y_labels: tuple[str, ...] = field(default=TIME_SLOT_LABELS)

    @property
    def is_empty(self) -> bool:
        return not self.data
