"""Tests for the end-to-end analytics pipeline."""

import pytest
from datetime import datetime
from decimal import Decimal

from spendscope.domain.models import (
    ChartKind,
    FilterOptions,
    TimePeriod,
    get_default_filters,
)
from spendscope.domain.settings import AnalyticsSettings
from spendscope.services.filtering import filter_transactions
from spendscope.services.pipeline import AnalyticsService, DashboardData, run_pipeline


@pytest.fixture
def service():
    return AnalyticsService()


class TestScenarios:
    """Reference scenarios for the whole pipeline."""

    def test_default_filters(self, service, now):
        data = service.run(
            [
                {"amount": 100, "category": "Food", "is_expense": True},
                {"amount": 50, "category": "Food", "is_expense": True},
                {"amount": 1000, "is_expense": False},
            ],
            get_default_filters(),
            now=now,
        )
        summary = data.summary
        assert summary.total_income == Decimal("1000")
        assert summary.total_expenses == Decimal("150")
        assert summary.net_amount == Decimal("850")
        assert [(e.name, e.amount, e.percentage) for e in summary.category_breakdown] == [
            ("Food", Decimal("150"), 100.0)
        ]

    def test_six_categories(self, service, now):
        records = [
            {"amount": a, "category": f"Cat{i}", "is_expense": True}
            for i, a in enumerate([100, 90, 80, 70, 60, 10])
        ]
        others = service.run(records, now=now).summary.category_breakdown[-1]
        assert others.name == "Others"
        assert others.amount == Decimal("10")
        assert others.percentage == pytest.approx(10 / 410 * 100)

    def test_category_filter(self, service, make_transaction, now):
        records = [
            make_transaction(category="Food", amount=100),
            make_transaction(category="Transport", amount=40),
            make_transaction(category="Food", amount=25),
        ]
        data = service.run(records, get_default_filters().toggle_category("Food"), now=now)
        assert data.transactions == (records[0], records[2])
        assert data.summary.total_expenses == Decimal("125")
        assert [e.name for e in data.summary.category_breakdown] == ["Food"]

    def test_malformed_amount(self, service, make_transaction, now):
        records = [
            make_transaction(amount="abc"),
            make_transaction(amount=30),
            make_transaction(amount=70, is_expense=False),
        ]
        data = service.run(records, now=now)
        assert data.summary.total_expenses == Decimal("30")
        assert data.summary.total_income == Decimal("70")
        assert len(data.transactions) == 3

    def test_huge_amount_does_not_break_pipeline(self, service, make_transaction, now):
        records = [make_transaction(amount="1e1000000"), make_transaction(amount=10)]
        data = service.run(records, now=now)
        assert data.summary.total_expenses == Decimal("10")
        assert len(data.transactions) == 2

    def test_week_period(self, service, sample_transactions, now):
        filters = get_default_filters().with_time_period("week", now)
        data = service.run(sample_transactions, filters, now=now)
        assert [t["transaction_id"] for t in data.transactions] == ["TX2", "TX3", "TX5"]
        assert data.summary.total_income == Decimal("0")
        assert data.summary.total_expenses == Decimal("1569.50")


class TestPipelineProperties:
    """Invariants that hold for any input."""

    def test_all_filters_keep_everything(self, service, sample_transactions, now):
        data = service.run(sample_transactions, FilterOptions(time_period=TimePeriod.ALL), now=now)
        assert list(data.transactions) == sample_transactions

    def test_result_matches_filter_engine(self, service, sample_transactions, now):
        filters = get_default_filters().with_time_period("month", now).toggle_category("Food")
        data = service.run(sample_transactions, filters, now=now)
        assert list(data.transactions) == filter_transactions(sample_transactions, filters)

    def test_idempotent(self, service, sample_transactions, now):
        filters = get_default_filters().with_time_period("year", now)
        first = service.run(sample_transactions, filters, now=now)
        second = service.run(sample_transactions, filters, now=now)
        assert first == second

    def test_totals_reconcile_across_charts(self, service, sample_transactions, now):
        data = service.run(sample_transactions, now=now)
        summary = data.summary
        bar = dict((p.x, p.y) for p in data.dataset(ChartKind.BAR))
        donut_total = sum(p.y for p in data.dataset(ChartKind.DONUT))
        pie_total = sum(s.amount for s in data.dataset(ChartKind.PIE))
        assert bar["Expenses"] == summary.total_expenses == donut_total == pie_total
        assert bar["Net"] == summary.net_amount

    def test_input_not_mutated(self, service, sample_transactions, now):
        snapshot = [dict(t) for t in sample_transactions]
        service.run(sample_transactions, get_default_filters().toggle_category("Food"), now=now)
        assert sample_transactions == snapshot

    def test_accepts_generators(self, service, sample_transactions, now):
        data = service.run((t for t in sample_transactions), now=now)
        assert len(data.transactions) == 5
        assert data.categories == ("Food", "Salary", "Transport", "Utilities")


class TestPipelineOutput:
    """Tests for the assembled DashboardData."""

    def test_empty_input(self, service, now):
        data = service.run([], now=now)
        assert data.transactions == ()
        assert data.summary.total_expenses == 0
        assert data.summary.category_breakdown == ()
        assert data.available_charts == ()
        assert data.datasets == {}
        assert data.dataset(ChartKind.BAR) is None

    def test_filtered_to_nothing(self, service, sample_transactions, now):
        filters = get_default_filters().toggle_category("Rent")
        data = service.run(sample_transactions, filters, now=now)
        assert data.summary.is_empty
        assert data.available_charts == ()
        # Categories come from the unfiltered input
        assert "Food" in data.categories

    def test_datasets_for_available_charts_only(self, service, sample_transactions, now):
        data = service.run(sample_transactions, now=now)
        assert set(data.datasets) == set(data.available_charts)

    def test_custom_period_without_bounds_uses_defaults(self, service, sample_transactions, now):
        data = service.run(sample_transactions, FilterOptions(time_period="custom"), now=now)
        assert data.filters.start_date == datetime(2024, 4, 15, 10, 30)
        assert data.filters.end_date == now
        assert [t["transaction_id"] for t in data.transactions] == ["TX1", "TX2", "TX3", "TX4"]

    def test_settings_flow_through(self, sample_transactions, now):
        settings = AnalyticsSettings()
        settings.breakdown.top_n = 1
        settings.breakdown.others_label = "Everything else"
        data = run_pipeline(sample_transactions, settings=settings, now=now)
        assert [e.name for e in data.summary.category_breakdown] == [
            "Utilities", "Everything else"
        ]

    def test_run_pipeline_defaults(self, sample_transactions):
        data = run_pipeline(sample_transactions)
        assert isinstance(data, DashboardData)
        assert data.filters == get_default_filters()
