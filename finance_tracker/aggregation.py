"""Headline statistics and the end-to-end reporting pipeline.

The functions here combine :mod:`filtering`, :mod:`bucketing` and
:mod:`categories` into the figures shown on the dashboard cards and the
report view. Every call recomputes from the transactions it is given;
nothing is cached between calls.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Iterable, Optional, Tuple

from .bucketing import bucketize
from .categories import breakdown_by_category
from .errors import DivisionUndefined, ValidationError
from .filtering import filter_transactions, search_transactions, sort_transactions
from .logging_setup import get_logger
from .models import FilterCriteria, Report, Stats, Totals, Transaction, bound_instant, parse_bound, to_datetime

logger = get_logger(__name__)


def compute_totals(transactions: Iterable[Transaction]) -> Totals:
    """Sum positive amounts as income and negative amounts as expenses."""
    income = 0.0
    expenses = 0.0
    for t in transactions:
        if t.amount > 0:
            income += t.amount
        elif t.amount < 0:
            expenses += abs(t.amount)
    return Totals(income=income, expenses=expenses)


def savings_rate(income: float, expenses: float) -> int:
    """Percentage of income left after expenses, rounded half up.

    Raises
    ------
    DivisionUndefined
        If ``income`` is zero.
    """
    if income == 0:
        raise DivisionUndefined("Savings rate is undefined when income is zero")
    return int(math.floor((income - expenses) / income * 100 + 0.5))


def _in_range(moment: datetime, start: datetime, end: datetime) -> bool:
    return start <= moment <= end


def compute_stats(
    transactions: Iterable[Transaction],
    window: Optional[Tuple[Any, Any]] = None,
    now: Optional[Any] = None,
) -> Stats:
    """Compute the dashboard card figures.

    ``total_balance`` covers every transaction regardless of ``window``.
    The monthly figures cover the current calendar month up to ``now``.
    ``window_totals`` covers the inclusive ``(start, end)`` window, or all
    transactions when no window is given. When monthly income is zero the
    savings rate is reported as ``None``.
    """
    items = list(transactions)
    current = datetime.now() if now is None else to_datetime(now, 'now')
    month_start = current.replace(day=1, hour=0, minute=0, second=0, microsecond=0)

    total_balance = sum(t.amount for t in items)
    monthly = compute_totals(t for t in items if _in_range(t.date, month_start, current))

    if window is None:
        window_totals = compute_totals(items)
    else:
        start, end = _window_bounds(window)
        window_totals = compute_totals(t for t in items if _in_range(t.date, start, end))

    try:
        rate: Optional[int] = savings_rate(monthly.income, monthly.expenses)
    except DivisionUndefined:
        logger.debug("No income since %s; savings rate reported as undefined", month_start.date())
        rate = None

    return Stats(
        total_balance=total_balance,
        monthly_income=monthly.income,
        monthly_expenses=monthly.expenses,
        savings_rate=rate,
        window_totals=window_totals,
    )


def _window_bounds(window: Tuple[Any, Any]) -> Tuple[datetime, datetime]:
    try:
        raw_start, raw_end = window
    except (TypeError, ValueError):
        raise ValidationError(f"window must be a (start, end) pair, got {window!r}") from None
    start = bound_instant(parse_bound(raw_start, 'window start'), end=False)
    end = bound_instant(parse_bound(raw_end, 'window end'), end=True)
    if start > end:
        raise ValidationError(f"window start {raw_start} is after window end {raw_end}")
    return start, end


def build_report(
    transactions: Iterable[Transaction],
    criteria: FilterCriteria,
    granularity: str = 'day',
    bucket_count: int = 7,
    reference_date: Optional[Any] = None,
    search: Optional[str] = None,
    sort_field: str = 'date',
    direction: str = 'desc',
) -> Report:
    """Run the full pipeline: filter, search, sort, bucket, total and break down.

    The bucketed series ends at ``reference_date``, which defaults to the
    end of the criteria window.
    """
    filtered = filter_transactions(transactions, criteria)
    if search:
        filtered = search_transactions(filtered, search)
    ordered = sort_transactions(filtered, sort_field, direction)
    if reference_date is None:
        reference_date = criteria.end_date
    report = Report(
        transactions=ordered,
        totals=compute_totals(ordered),
        series=bucketize(ordered, granularity, bucket_count, reference_date),
        category_breakdown=breakdown_by_category(ordered),
    )
    logger.debug(
        "build_report: %d transactions, %d buckets, %d categories",
        len(report.transactions), len(report.series), len(report.category_breakdown),
    )
    return report
