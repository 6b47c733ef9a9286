"""Aggregation service.

Computes income/expense totals, the expense category breakdown (top-N plus
an "Others" bucket), monthly totals and the weekday/time-of-day spending
grid from a filtered transaction collection.

Output is fully deterministic: identical input always yields an identical
summary.
"""

from collections import defaultdict
from collections.abc import Iterable
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from spendscope.domain.models import (
    TIME_SLOT_LABELS,
    WEEKDAY_LABELS,
    AnalyticsSummary,
    CategorySummaryEntry,
    HeatCell,
    MonthlyTotals,
    NormalizedTransaction,
)
from spendscope.domain.settings import BreakdownSettings
from spendscope.services.normalizer import normalize_transaction

ZERO = Decimal("0")


def time_slot(moment: datetime) -> int:
    """Bucket an instant into Morning/Afternoon/Evening/Night (0-3)."""
    hour = moment.hour
    if 6 <= hour < 12:
        return 0
    if 12 <= hour < 17:
        return 1
    if 17 <= hour < 21:
        return 2
    return 3


def percentage_of(amount: Decimal, total: Decimal) -> float:
    """Share of ``total`` in percent; 0.0 when the total is zero."""
    if not total:
        return 0.0
    return float(amount / total * 100)


class AggregationService:
    """Summarizes transaction collections.

    Example:
        >>> service = AggregationService()
        >>> summary = service.summarize([
        ...     {"amount": 100, "category": "Food", "is_expense": True},
        ...     {"amount": 1000, "is_expense": False},
        ... ])
        >>> summary.net_amount
        Decimal('900')
    """

    def __init__(self, settings: Optional[BreakdownSettings] = None):
        self.settings = settings or BreakdownSettings()

    def summarize(self, transactions: Iterable[Any]) -> AnalyticsSummary:
        """Aggregate a (filtered) transaction collection.

        Records with a malformed amount still count toward
        ``transaction_count`` but contribute to no sum.

        Args:
            transactions: Raw or normalized records

        Returns:
            AnalyticsSummary with totals, breakdown, monthly totals and heat map
        """
        count = 0
        normalized: list[NormalizedTransaction] = []
        for raw in transactions:
            count += 1
            record = normalize_transaction(raw, self.settings.uncategorized_label)
            if record is not None:
                normalized.append(record)

        total_income = sum((t.amount for t in normalized if not t.is_expense), ZERO)
        total_expenses = sum((t.amount for t in normalized if t.is_expense), ZERO)

        return AnalyticsSummary(
            total_income=total_income,
            total_expenses=total_expenses,
            category_breakdown=self.category_breakdown(normalized, total_expenses),
            monthly_totals=self.monthly_totals(normalized),
            heatmap=self.spending_heatmap(normalized),
            transaction_count=count,
        )

    def category_breakdown(
        self,
        transactions: list[NormalizedTransaction],
        total_expenses: Decimal,
    ) -> tuple[CategorySummaryEntry, ...]:
        """Group expenses by category, keep the top N and fold the rest.

        Groups are ordered by summed amount, descending; ties keep the order
        in which categories were first encountered. The remainder beyond the
        top N becomes one "Others" entry unless it sums to exactly zero.
        """
        if not total_expenses:
            return ()

        # dict keeps first-encountered order for the stable sort below
        totals: dict[str, Decimal] = {}
        for t in transactions:
            if t.is_expense:
                totals[t.category] = totals.get(t.category, ZERO) + t.amount

        ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
        top_n = self.settings.top_n

        entries = [
            CategorySummaryEntry(
                name=name,
                amount=amount,
                percentage=percentage_of(amount, total_expenses),
            )
            for name, amount in ranked[:top_n]
        ]

        remainder = sum((amount for _, amount in ranked[top_n:]), ZERO)
        if remainder != 0:
            entries.append(
                CategorySummaryEntry(
                    name=self.settings.others_label,
                    amount=remainder,
                    percentage=percentage_of(remainder, total_expenses),
                )
            )

        return tuple(entries)

    def monthly_totals(
        self, transactions: list[NormalizedTransaction]
    ) -> tuple[MonthlyTotals, ...]:
        """Income and expense sums per calendar month, oldest first.

        Records without a timestamp are left out of the monthly view.
        """
        monthly = defaultdict(lambda: {"income": ZERO, "expenses": ZERO})

        for t in transactions:
            if t.timestamp is None:
                continue
            key = t.timestamp.strftime("%Y-%m")
            if t.is_expense:
                monthly[key]["expenses"] += t.amount
            else:
                monthly[key]["income"] += t.amount

        return tuple(
            MonthlyTotals(month=key, income=data["income"], expenses=data["expenses"])
            for key, data in sorted(monthly.items())
        )

    def spending_heatmap(
        self, transactions: list[NormalizedTransaction]
    ) -> tuple[HeatCell, ...]:
        """Expense sums per weekday and time of day.

        Every cell of the grid is present (row-major by weekday), including
        cells with no spending.
        """
        grid = defaultdict(lambda: ZERO)
        for t in transactions:
            if t.is_expense and t.timestamp is not None:
                grid[(t.timestamp.weekday(), time_slot(t.timestamp))] += t.amount

        return tuple(
            HeatCell(weekday=day, time_slot=slot, amount=grid[(day, slot)])
            for day in range(len(WEEKDAY_LABELS))
            for slot in range(len(TIME_SLOT_LABELS))
        )


def summarize(
    transactions: Iterable[Any], settings: Optional[BreakdownSettings] = None
) -> AnalyticsSummary:
    """Aggregate transactions with the given (or default) breakdown settings."""
    return AggregationService(settings).summarize(transactions)
