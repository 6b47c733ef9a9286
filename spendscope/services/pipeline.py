"""Analytics pipeline.

A single pure function of (transactions, filters): normalize, filter,
aggregate and adapt. Nothing is retained between runs; re-running with the
same inputs (and the same ``now``) yields an equal result.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from spendscope.domain.models import (
    AnalyticsSummary,
    ChartKind,
    FilterOptions,
    get_default_filters,
)
from spendscope.domain.settings import AnalyticsSettings
from spendscope.services.aggregator import AggregationService
from spendscope.services.charts import available_chart_kinds, build_datasets
from spendscope.services.filtering import filter_transactions
from spendscope.services.normalizer import extract_categories

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardData:
    """Everything the dashboard renders for one pipeline run."""

    filters: FilterOptions
    transactions: tuple[Any, ...] = ()
    summary: AnalyticsSummary = field(default_factory=AnalyticsSummary)
    available_charts: tuple[ChartKind, ...] = ()
    datasets: dict[ChartKind, Any] = field(default_factory=dict)
    categories: tuple[str, ...] = ()

    def dataset(self, kind: ChartKind) -> Any:
        """Dataset for a chart kind, or None if that kind is not available."""
        return self.datasets.get(kind)


class AnalyticsService:
    """Runs the transaction analytics pipeline.

    Example:
        >>> service = AnalyticsService()
        >>> data = service.run(transactions, get_default_filters())
        >>> data.summary.total_expenses
        Decimal('150')
    """

    def __init__(self, settings: Optional[AnalyticsSettings] = None):
        self.settings = settings or AnalyticsSettings()
        self._aggregator = AggregationService(self.settings.breakdown)

    def run(
        self,
        transactions: Iterable[Any],
        filters: Optional[FilterOptions] = None,
        now: Optional[datetime] = None,
    ) -> DashboardData:
        """Run the full pipeline.

        Args:
            transactions: Raw transaction records
            filters: Filter configuration (defaults to all time, all categories)
            now: Reference instant for filling in missing period bounds

        Returns:
            DashboardData for the filtered records
        """
        records = list(transactions)
        uncategorized = self.settings.breakdown.uncategorized_label

        effective = (filters or get_default_filters()).effective(
            now, self.settings.custom_period_default_months
        )

        filtered = filter_transactions(records, effective, uncategorized)
        summary = self._aggregator.summarize(filtered)
        kinds = available_chart_kinds(summary, self.settings)

        logger.debug(
            f"Pipeline run: {len(filtered)}/{len(records)} transactions, "
            f"charts={[k.value for k in kinds]}"
        )

        return DashboardData(
            filters=effective,
            transactions=tuple(filtered),
            summary=summary,
            available_charts=kinds,
            datasets=build_datasets(summary, kinds, self.settings),
            categories=tuple(extract_categories(records, uncategorized)),
        )


def run_pipeline(
    transactions: Iterable[Any],
    filters: Optional[FilterOptions] = None,
    settings: Optional[AnalyticsSettings] = None,
    now: Optional[datetime] = None,
) -> DashboardData:
    """Convenience wrapper around ``AnalyticsService.run``."""
    return AnalyticsService(settings).run(transactions, filters, now)
