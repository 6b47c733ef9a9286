"""Dashboard state.

Holds the two pipeline inputs (raw transactions and filters) in Observable
containers and re-runs the analytics pipeline whenever either changes. The
newest result always replaces the previous one.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional

from spendscope.domain.models import FilterOptions, get_default_filters
from spendscope.domain.settings import AnalyticsSettings
from spendscope.services.pipeline import AnalyticsService, DashboardData
from spendscope.state.observable import Observable

logger = logging.getLogger(__name__)


@dataclass
class DashboardState:
    """Reactive dashboard state.

    ``clock`` supplies the reference instant for period bounds; tests pass a
    fixed clock.

    Example:
        >>> state = DashboardState()
        >>> state.data.subscribe(lambda d: print(d.summary.net_amount))
        >>> state.transactions.set(fetched)
        >>> state.update_filters(lambda f: f.with_time_period("month"))
    """

    settings: AnalyticsSettings = field(default_factory=AnalyticsSettings)
    clock: Callable[[], datetime] = datetime.now

    transactions: Observable[list[Any]] = field(default_factory=lambda: Observable([]))
    filters: Observable[FilterOptions] = field(
        default_factory=lambda: Observable(get_default_filters())
    )
    data: Observable[Optional[DashboardData]] = field(
        default_factory=lambda: Observable(None)
    )

    def __post_init__(self) -> None:
        self._service = AnalyticsService(self.settings)
        self.transactions.subscribe(lambda _: self.refresh())
        self.filters.subscribe(lambda _: self.refresh())
        self.refresh()

    def refresh(self) -> DashboardData:
        """Recompute the dashboard data from the current inputs."""
        result = self._service.run(
            self.transactions.value, self.filters.value, now=self.clock()
        )
        self.data.set(result)
        return result

    def update_filters(self, fn: Callable[[FilterOptions], FilterOptions]) -> None:
        """Apply an editing function to the current filters."""
        self.filters.update(fn)

    def select_period(self, period: str) -> None:
        now = self.clock()
        self.update_filters(
            lambda f: f.with_time_period(
                period, now, self.settings.custom_period_default_months
            )
        )

    def reset_filters(self) -> None:
        self.filters.set(get_default_filters())
