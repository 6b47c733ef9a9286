"""Tests for DashboardState."""

import pytest
from decimal import Decimal

from spendscope.domain.models import ChartKind, TimePeriod, get_default_filters
from spendscope.state.dashboard_state import DashboardState


@pytest.fixture
def state(now, qtbot):
    return DashboardState(clock=lambda: now)


class TestDashboardState:
    """Tests for recomputation on input changes."""

    def test_initial_data_is_empty(self, state):
        data = state.data.value
        assert data is not None
        assert data.summary.is_empty
        assert data.available_charts == ()

    def test_transactions_change_triggers_refresh(self, state, sample_transactions):
        received = []
        state.data.subscribe(received.append)

        state.transactions.set(sample_transactions)

        assert len(received) == 1
        assert received[0].summary.total_expenses == Decimal("1649.50")
        assert state.data.value is received[0]

    def test_filter_update_recomputes(self, state, sample_transactions):
        state.transactions.set(sample_transactions)

        state.update_filters(lambda f: f.toggle_category("Food"))

        data = state.data.value
        assert [t["transaction_id"] for t in data.transactions] == ["TX2", "TX4"]
        assert data.summary.total_expenses == Decimal("530.50")

    def test_select_period_uses_clock(self, state, sample_transactions):
        state.transactions.set(sample_transactions)

        state.select_period("week")

        filters = state.filters.value
        assert filters.time_period == TimePeriod.WEEK
        assert filters.start_date.day == 13
        assert [t["transaction_id"] for t in state.data.value.transactions] == [
            "TX2", "TX3", "TX5"
        ]

    def test_latest_input_wins(self, state, sample_transactions):
        """Each change replaces the previous result; nothing stale survives."""
        state.transactions.set(sample_transactions)
        state.select_period("week")
        state.update_filters(lambda f: f.toggle_category("Utilities"))
        state.transactions.set(sample_transactions[:3])

        data = state.data.value
        assert data.transactions == ()
        assert data.filters.categories == ("Utilities",)

    def test_reset_filters(self, state, sample_transactions):
        state.transactions.set(sample_transactions)
        state.select_period("day")

        state.reset_filters()

        assert state.filters.value == get_default_filters()
        assert len(state.data.value.transactions) == 5
        assert ChartKind.PIE in state.data.value.available_charts

    def test_unknown_period_rejected(self, state):
        with pytest.raises(ValueError):
            state.select_period("fortnight")
        assert state.filters.value == get_default_filters()
