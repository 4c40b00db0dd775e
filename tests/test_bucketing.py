"""Tests for day and month bucketing of transactions."""

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from finance_tracker.bucketing import TIMEFRAMES, bucket_window, bucketize, bucketize_timeframe
from finance_tracker.errors import ValidationError

from factories import make_txn


def test_empty_input_yields_zeroed_day_buckets() -> None:
    buckets = bucketize([], 'day', 7, date(2024, 1, 10))
    assert len(buckets) == 7
    assert [b.label for b in buckets] == ['Jan 4', 'Jan 5', 'Jan 6', 'Jan 7', 'Jan 8', 'Jan 9', 'Jan 10']
    assert all(b.income == 0 and b.expenses == 0 for b in buckets)


def test_day_buckets_cross_month_boundary() -> None:
    buckets = bucketize([], 'day', 3, datetime(2024, 3, 1, 15, 30))
    assert [b.label for b in buckets] == ['Feb 28', 'Feb 29', 'Mar 1']
    assert buckets[0].start == datetime(2024, 2, 28)


def test_day_buckets_sum_income_and_expenses(month_of_transactions) -> None:
    buckets = bucketize(month_of_transactions, 'day', 7, date(2024, 3, 7))
    by_label = {b.label: b for b in buckets}
    assert by_label['Mar 1'].income == 5000
    assert by_label['Mar 3'].expenses == 1500
    assert by_label['Mar 6'].income == 1000
    assert by_label['Mar 6'].expenses == pytest.approx(45.5)
    assert by_label['Mar 2'].income == 0 and by_label['Mar 2'].expenses == 0
    assert by_label['Mar 7'].income == 0


def test_buckets_are_chronological(month_of_transactions) -> None:
    buckets = bucketize(month_of_transactions, 'day', 30, date(2024, 3, 31))
    starts = [b.start for b in buckets]
    assert starts == sorted(starts)
    assert buckets[-1].label == 'Mar 31'


def test_transactions_outside_window_are_ignored(month_of_transactions) -> None:
    buckets = bucketize(month_of_transactions, 'day', 2, date(2024, 3, 4))
    assert [b.label for b in buckets] == ['Mar 3', 'Mar 4']
    assert sum(b.income for b in buckets) == 0
    assert sum(b.expenses for b in buckets) == 1700


def test_month_buckets_match_month_and_year() -> None:
    txns = [
        make_txn(100, date='2023-03-15'),
        make_txn(200, date='2024-03-15'),
        make_txn(-50, date='2024-02-01'),
        make_txn(-25, date='2024-01-31T23:59:00'),
    ]
    buckets = bucketize(txns, 'month', 3, date(2024, 3, 20))
    assert [b.label for b in buckets] == ['Jan', 'Feb', 'Mar']
    assert [b.income for b in buckets] == [0, 0, 200]
    assert [b.expenses for b in buckets] == [25, 50, 0]
    assert buckets[0].start == datetime(2024, 1, 1)


def test_month_buckets_cross_year_boundary() -> None:
    buckets = bucketize([], 'month', 4, date(2024, 2, 10))
    assert [b.label for b in buckets] == ['Nov', 'Dec', 'Jan', 'Feb']
    assert buckets[0].start == datetime(2023, 11, 1)


def test_bucket_sums_match_window_totals(month_of_transactions) -> None:
    extra = month_of_transactions + [make_txn(-999, date='2024-01-01'), make_txn(999, date='2024-05-01')]
    start, end = bucket_window('day', 10, date(2024, 3, 8))
    buckets = bucketize(extra, 'day', 10, date(2024, 3, 8))
    in_window = [t for t in extra if start <= t.date <= end]
    assert sum(b.income + b.expenses for b in buckets) == pytest.approx(
        sum(abs(t.amount) for t in in_window)
    )


def test_bucket_window_bounds() -> None:
    start, end = bucket_window('month', 2, date(2024, 3, 5))
    assert start == datetime(2024, 2, 1)
    assert end == datetime(2024, 3, 31, 23, 59, 59, 999999)
    start, end = bucket_window('day', 1, datetime(2024, 3, 5, 10))
    assert start == datetime(2024, 3, 5)
    assert end == datetime(2024, 3, 5, 23, 59, 59, 999999)


@pytest.mark.parametrize('count', [0, -3])
def test_non_positive_bucket_count_rejected(count) -> None:
    with pytest.raises(ValidationError):
        bucketize([], 'day', count, date(2024, 1, 1))


def test_unknown_granularity_rejected() -> None:
    with pytest.raises(ValidationError):
        bucketize([], 'week', 4, date(2024, 1, 1))


def test_bucketize_is_idempotent(month_of_transactions) -> None:
    first = bucketize(month_of_transactions, 'day', 7, date(2024, 3, 7))
    second = bucketize(month_of_transactions, 'day', 7, date(2024, 3, 7))
    assert first == second


def test_timeframe_presets() -> None:
    assert bucketize_timeframe([], '30days', date(2024, 3, 31))[0].label == 'Mar 2'
    assert len(bucketize_timeframe([], '1year', date(2024, 3, 31))) == 12
    assert TIMEFRAMES['6months'] == ('month', 6)
    with pytest.raises(ValidationError):
        bucketize_timeframe([], '2weeks', date(2024, 3, 31))


def test_timezone_aware_transactions_land_in_their_day() -> None:
    aware = make_txn(100, 'Gift', datetime(2024, 3, 5, 10, 0, tzinfo=timezone.utc))
    buckets = bucketize([aware], 'day', 7, date(2024, 3, 7))
    assert sum(b.income for b in buckets) == 100
    assert [b.income for b in buckets if b.label == 'Mar 5'] == [100]
