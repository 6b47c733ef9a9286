"""Chart-data adapters.

Pure mappings from an AnalyticsSummary to the dataset shape each chart kind
consumes. Adapters never recompute totals or re-filter records; they only
reshape the summary and add presentation details (colours, labels,
tooltips). Every adapter returns an empty dataset for an empty summary.

Adapters are looked up by chart kind, so the rendering side picks a
dataset by capability rather than by platform.
"""

from typing import Any, Callable, Optional

from spendscope.domain.models import (
    AnalyticsSummary,
    ChartKind,
    ChartPoint,
    HeatMapDataset,
    HeatPoint,
    LegendItem,
    PieSlice,
    SeriesDataset,
)
from spendscope.domain.settings import AnalyticsSettings
from spendscope.services.formatting import abbreviate_label, format_tooltip_value

INCOME_COLOR = "#4CAF50"
EXPENSE_COLOR = "#F44336"
OVERVIEW_COLOR = "#1E88E5"

ChartAdapter = Callable[[AnalyticsSummary, AnalyticsSettings], Any]


def _palette_color(settings: AnalyticsSettings, index: int) -> str:
    palette = settings.charts.palette
    return palette[index % len(palette)]


def bar_dataset(summary: AnalyticsSummary, settings: AnalyticsSettings) -> tuple[ChartPoint, ...]:
    """Income, Expenses and Net, always in that order, as raw values."""
    if summary.is_empty:
        return ()
    return (
        ChartPoint("Income", summary.total_income),
        ChartPoint("Expenses", summary.total_expenses),
        ChartPoint("Net", summary.net_amount),
    )


def line_dataset(summary: AnalyticsSummary, settings: AnalyticsSettings) -> SeriesDataset:
    """Overview line through Income, Expenses and Net."""
    points = bar_dataset(summary, settings)
    if not points:
        return SeriesDataset()
    return SeriesDataset(
        series=(points,),
        legend=(LegendItem("Overview", OVERVIEW_COLOR),),
    )


def pie_dataset(summary: AnalyticsSummary, settings: AnalyticsSettings) -> tuple[PieSlice, ...]:
    """One slice per breakdown entry (including "Others"), in breakdown order."""
    display = settings.display
    return tuple(
        PieSlice(
            name=entry.name,
            amount=entry.amount,
            color=_palette_color(settings, index),
            legend_label=abbreviate_label(entry.name, settings.charts.label_max_length),
            tooltip=format_tooltip_value(
                entry.amount,
                summary.total_expenses,
                display.currency,
                display.decimal_places,
            ),
        )
        for index, entry in enumerate(summary.category_breakdown)
    )


def donut_dataset(summary: AnalyticsSummary, settings: AnalyticsSettings) -> tuple[ChartPoint, ...]:
    return tuple(ChartPoint(entry.name, entry.amount) for entry in summary.category_breakdown)


def area_dataset(summary: AnalyticsSummary, settings: AnalyticsSettings) -> SeriesDataset:
    """Expense amount per category as a single area series."""
    if not summary.category_breakdown:
        return SeriesDataset()

    points = donut_dataset(summary, settings)
    legend = tuple(
        LegendItem(entry.name, _palette_color(settings, index))
        for index, entry in enumerate(summary.category_breakdown)
    )
    return SeriesDataset(series=(points,), legend=legend)


def time_series_dataset(summary: AnalyticsSummary, settings: AnalyticsSettings) -> SeriesDataset:
    """Monthly income and expense series, oldest month first."""
    if not summary.monthly_totals:
        return SeriesDataset()

    income = tuple(ChartPoint(m.month, m.income) for m in summary.monthly_totals)
    expenses = tuple(ChartPoint(m.month, m.expenses) for m in summary.monthly_totals)
    return SeriesDataset(
        series=(income, expenses),
        legend=(
            LegendItem("Income", INCOME_COLOR),
            LegendItem("Expenses", EXPENSE_COLOR),
        ),
    )


def heatmap_dataset(summary: AnalyticsSummary, settings: AnalyticsSettings) -> HeatMapDataset:
    """Weekday (x) by time-of-day (y) grid of expense amounts."""
    if summary.is_empty:
        return HeatMapDataset()
    return HeatMapDataset(
        data=tuple(HeatPoint(c.weekday, c.time_slot, c.amount) for c in summary.heatmap)
    )


ADAPTERS: dict[ChartKind, ChartAdapter] = {
    ChartKind.LINE: line_dataset,
    ChartKind.BAR: bar_dataset,
    ChartKind.PIE: pie_dataset,
    ChartKind.DONUT: donut_dataset,
    ChartKind.AREA: area_dataset,
    ChartKind.TIME_SERIES: time_series_dataset,
    ChartKind.HEATMAP: heatmap_dataset,
}


def get_adapter(kind: ChartKind) -> ChartAdapter:
    """Return the adapter for a chart kind.

    Raises:
        KeyError: If no adapter is registered for the kind
    """
    try:
        kind = ChartKind(kind)
    except ValueError:
        raise KeyError(kind) from None
    return ADAPTERS[kind]


def available_chart_kinds(
    summary: AnalyticsSummary, settings: Optional[AnalyticsSettings] = None
) -> tuple[ChartKind, ...]:
    """Chart kinds worth offering for the given summary.

    - line and bar: whenever there is any filtered record
    - pie and donut: when the category breakdown is non-empty
    - area and time series: more than ``trend_min_records`` records
    - heat map: more than ``heatmap_min_records`` records
    """
    settings = settings or AnalyticsSettings()
    if summary.is_empty:
        return ()

    count = summary.transaction_count
    kinds = [ChartKind.LINE, ChartKind.BAR]
    if summary.category_breakdown:
        kinds += [ChartKind.PIE, ChartKind.DONUT]
    if count > settings.charts.trend_min_records:
        kinds += [ChartKind.AREA, ChartKind.TIME_SERIES]
    if count > settings.charts.heatmap_min_records:
        kinds.append(ChartKind.HEATMAP)
    return tuple(kinds)


def build_datasets(
    summary: AnalyticsSummary,
    kinds: tuple[ChartKind, ...],
    settings: Optional[AnalyticsSettings] = None,
) -> dict[ChartKind, Any]:
    """Run the adapter of every requested chart kind."""
    settings = settings or AnalyticsSettings()
    return {kind: get_adapter(kind)(summary, settings) for kind in kinds}
