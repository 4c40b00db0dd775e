"""Unit tests for finance_tracker.filtering.

These use small hand-built transaction lists so every expected result
can be read off the fixture directly.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from finance_tracker.errors import ValidationError
from finance_tracker.filtering import (
    filter_transactions,
    matches_criteria,
    recent_transactions,
    search_transactions,
    sort_transactions,
)
from finance_tracker.models import FilterCriteria

from factories import make_txn


def march(**kwargs) -> FilterCriteria:
    return FilterCriteria(start_date=date(2024, 3, 1), end_date=date(2024, 3, 31), **kwargs)


def test_date_range_is_inclusive_on_both_ends() -> None:
    first = make_txn(10, date='2024-03-01T00:00:00')
    last = make_txn(20, date='2024-03-31T23:59:00')
    before = make_txn(30, date='2024-02-29T23:59:59')
    after = make_txn(40, date='2024-04-01T00:00:00')
    result = filter_transactions([before, first, last, after], march())
    assert result == [first, last]


def test_datetime_bounds_compare_exact_instants() -> None:
    criteria = FilterCriteria(datetime(2024, 3, 1, 12), datetime(2024, 3, 1, 18))
    morning = make_txn(10, date='2024-03-01T09:00:00')
    noon = make_txn(10, date='2024-03-01T12:00:00')
    evening = make_txn(10, date='2024-03-01T20:00:00')
    assert filter_transactions([morning, noon, evening], criteria) == [noon]


def test_type_filter(month_of_transactions) -> None:
    income = filter_transactions(month_of_transactions, march(type='income'))
    expenses = filter_transactions(month_of_transactions, march(type='expense'))
    assert [t.category for t in income] == ['Salary', 'Investment']
    assert all(t.amount < 0 for t in expenses)
    assert len(income) + len(expenses) == len(month_of_transactions)


def test_type_filter_trusts_amount_sign() -> None:
    mislabeled = make_txn(-50, 'Food', date='2024-03-02', type='income')
    assert filter_transactions([mislabeled], march(type='income')) == []
    assert filter_transactions([mislabeled], march(type='expense')) == [mislabeled]


def test_category_filter_is_exact_and_case_sensitive() -> None:
    upper = make_txn(-10, 'Food', date='2024-03-02')
    lower = make_txn(-20, 'food', date='2024-03-02')
    assert filter_transactions([upper, lower], march(category='Food')) == [upper]


def test_amount_bounds_use_signed_amount(month_of_transactions) -> None:
    result = filter_transactions(month_of_transactions, march(min_amount=-200, max_amount=1000))
    assert sorted(t.amount for t in result) == [-200, -100, -45.5, 1000]


def test_filter_is_sound_and_complete(month_of_transactions) -> None:
    criteria = march(type='expense', category='Food', max_amount=-100)
    result = filter_transactions(month_of_transactions, criteria)
    assert all(matches_criteria(t, criteria) for t in result)
    excluded = [t for t in month_of_transactions if t not in result]
    assert not any(matches_criteria(t, criteria) for t in excluded)
    assert [t.description for t in result] == ['Grocery Shopping']


def test_filter_does_not_mutate_input(month_of_transactions) -> None:
    snapshot = list(month_of_transactions)
    filter_transactions(month_of_transactions, march(type='income'))
    assert month_of_transactions == snapshot


def test_filter_rejects_inverted_range(month_of_transactions) -> None:
    criteria = FilterCriteria(start_date=date(2024, 4, 1), end_date=date(2024, 3, 1))
    with pytest.raises(ValidationError):
        filter_transactions(month_of_transactions, criteria)


def test_filter_rejects_inverted_amount_range(month_of_transactions) -> None:
    with pytest.raises(ValidationError):
        filter_transactions(month_of_transactions, march(min_amount=10, max_amount=-10))


def test_filter_empty_input() -> None:
    assert filter_transactions([], march()) == []


def test_search_matches_description_or_category(month_of_transactions) -> None:
    assert [t.description for t in search_transactions(month_of_transactions, 'FOOD')] == [
        'Grocery Shopping', 'Dinner out'
    ]
    assert [t.category for t in search_transactions(month_of_transactions, 'rent')] == ['Housing']


def test_blank_search_returns_everything(month_of_transactions) -> None:
    assert search_transactions(month_of_transactions, '') == month_of_transactions
    assert search_transactions(month_of_transactions, '   ') == month_of_transactions
    assert search_transactions(month_of_transactions, None) == month_of_transactions


def test_sort_by_amount_descending(month_of_transactions) -> None:
    amounts = [t.amount for t in sort_transactions(month_of_transactions, 'amount', 'desc')]
    assert amounts == [5000, 1000, -45.5, -100, -200, -1500]


def test_sort_by_date_ascending(month_of_transactions) -> None:
    shuffled = list(reversed(month_of_transactions))
    assert sort_transactions(shuffled, 'date', 'asc') == month_of_transactions


def test_sort_is_stable_for_ties() -> None:
    a = make_txn(-10, 'Food', description='a')
    b = make_txn(-10, 'Food', description='b')
    c = make_txn(-10, 'Food', description='c')
    for direction in ('asc', 'desc'):
        result = sort_transactions([a, b, c], 'category', direction)
        assert [t.description for t in result] == ['a', 'b', 'c']
        result = sort_transactions([a, b, c], 'amount', direction)
        assert [t.description for t in result] == ['a', 'b', 'c']


@pytest.mark.parametrize('field,direction', [('description', 'asc'), ('date', 'up')])
def test_sort_rejects_unknown_arguments(month_of_transactions, field, direction) -> None:
    with pytest.raises(ValidationError):
        sort_transactions(month_of_transactions, field, direction)


def test_filter_accepts_timezone_aware_transactions() -> None:
    aware = make_txn(100, 'Gift', datetime(2024, 3, 5, 10, 0, tzinfo=timezone.utc))
    assert filter_transactions([aware], march()) == [aware]
    assert filter_transactions([aware], march(type='expense')) == []


def test_recent_transactions_newest_first(month_of_transactions) -> None:
    recent = recent_transactions(month_of_transactions, limit=2)
    assert [t.date for t in recent] == sorted((t.date for t in month_of_transactions), reverse=True)[:2]
    assert recent_transactions(month_of_transactions, limit=50) == sort_transactions(month_of_transactions)
    assert recent_transactions([]) == []


def test_recent_transactions_rejects_non_positive_limit() -> None:
    with pytest.raises(ValidationError):
        recent_transactions([], limit=0)
