"""Shared fixtures for the finance_tracker test suite."""

from __future__ import annotations

import pytest

from factories import make_txn


@pytest.fixture
def sample_transactions():
    return [
        make_txn(5000, 'Salary', '2024-01-05', 'Monthly Salary'),
        make_txn(-1500, 'Housing', '2024-01-07', 'Rent Payment'),
        make_txn(-200, 'Food', '2024-01-08', 'Grocery Shopping'),
    ]


@pytest.fixture
def month_of_transactions():
    return [
        make_txn(5000, 'Salary', '2024-03-01T09:00:00', 'Monthly Salary'),
        make_txn(-1500, 'Housing', '2024-03-03T12:00:00', 'Rent Payment'),
        make_txn(-200, 'Food', '2024-03-04T18:30:00', 'Grocery Shopping'),
        make_txn(-100, 'Transportation', '2024-03-05T08:15:00', 'Fuel'),
        make_txn(1000, 'Investment', '2024-03-06T10:00:00', 'Stock Dividends'),
        make_txn(-45.5, 'Food', '2024-03-06T20:00:00', 'Dinner out'),
    ]
