"""Pytest fixtures and configuration."""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from datetime import datetime


@pytest.fixture
def now():
    """Fixed reference instant: Wednesday 2024-05-15 10:30."""
    return datetime(2024, 5, 15, 10, 30)


@pytest.fixture
def make_transaction():
    """Factory fixture for creating raw transaction payloads."""

    def _make(**kwargs):
        defaults = {
            "transaction_id": "TX0001",
            "amount": 100,
            "description": "Test Transaction",
            "merchant_name": "Test Merchant",
            "category": "Food",
            "time_of_transaction": "2024-05-15T12:00:00",
            "is_expense": True,
        }
        defaults.update(kwargs)
        return {k: v for k, v in defaults.items() if v is not ...}

    return _make


@pytest.fixture
def sample_transactions(make_transaction):
    """A small month of mixed income and expenses."""
    return [
        make_transaction(
            transaction_id="TX1",
            amount=2500,
            description="Salary",
            category={"id": 1, "name": "Salary"},
            time_of_transaction="2024-05-01T09:00:00",
            is_expense=False,
        ),
        make_transaction(
            transaction_id="TX2",
            amount="450.50",
            description="Weekly groceries",
            merchant_name="Naivas",
            category={"id": 2, "name": "Food"},
            time_of_transaction="2024-05-13T18:15:00",
        ),
        make_transaction(
            transaction_id="TX3",
            amount=120,
            description="Matatu fare",
            merchant_name="City Hoppa",
            category="Transport",
            time_of_transaction="2024-05-14T07:45:00",
        ),
        make_transaction(
            transaction_id="TX4",
            amount=80,
            description="Coffee",
            merchant_name="Java House",
            category="Food",
            time_of_transaction=...,
            date="2024-04-20",
        ),
        make_transaction(
            transaction_id="TX5",
            amount=999,
            description="Electricity token",
            merchant_name="KPLC",
            category="Utilities",
            time_of_transaction="2024-05-19T22:00:00",
        ),
    ]
