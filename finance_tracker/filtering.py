"""Filtering, text search and ordering of transaction lists.

All functions are pure: they return new lists and never mutate the
transactions handed to them.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional

from .errors import ValidationError
from .logging_setup import get_logger
from .models import ALL, FilterCriteria, Transaction, bound_instant

logger = get_logger(__name__)

SORT_FIELDS = ('date', 'amount', 'category')
SORT_DIRECTIONS = ('asc', 'desc')

_SORT_KEYS: Dict[str, Callable[[Transaction], object]] = {
    'date': lambda t: t.date,
    'amount': lambda t: t.amount,
    'category': lambda t: t.category,
}


def matches_criteria(transaction: Transaction, criteria: FilterCriteria) -> bool:
    """Return ``True`` when ``transaction`` satisfies every active predicate."""
    start = bound_instant(criteria.start_date, end=False)
    end = bound_instant(criteria.end_date, end=True)
    return _matches(transaction, criteria, start, end)


def _matches(transaction: Transaction, criteria: FilterCriteria, start, end) -> bool:
    if not start <= transaction.date <= end:
        return False
    if criteria.type != ALL and transaction.flow != criteria.type:
        return False
    if criteria.category != ALL and transaction.category != criteria.category:
        return False
    if criteria.min_amount is not None and transaction.amount < criteria.min_amount:
        return False
    if criteria.max_amount is not None and transaction.amount > criteria.max_amount:
        return False
    return True


def filter_transactions(
    transactions: Iterable[Transaction], criteria: FilterCriteria
) -> List[Transaction]:
    """Keep the transactions that satisfy ``criteria``.

    The date range is inclusive at both ends. The type filter follows the
    sign of ``amount`` (see :attr:`Transaction.flow`). Amount bounds compare
    against the signed amount.

    Raises
    ------
    ValidationError
        If the date range or the amount range is inverted.
    """
    criteria.validate()
    start = bound_instant(criteria.start_date, end=False)
    end = bound_instant(criteria.end_date, end=True)
    source = list(transactions)
    kept = [t for t in source if _matches(t, criteria, start, end)]
    logger.debug("filter_transactions kept %d of %d", len(kept), len(source))
    return kept


def search_transactions(transactions: Iterable[Transaction], term: Optional[str]) -> List[Transaction]:
    """Case-insensitive substring search over description and category."""
    items = list(transactions)
    if term is None or not term.strip():
        return items
    needle = term.lower()
    return [
        t for t in items
        if needle in t.description.lower() or needle in t.category.lower()
    ]


def sort_transactions(
    transactions: Iterable[Transaction], field: str = 'date', direction: str = 'desc'
) -> List[Transaction]:
    """Stable sort by ``field``; equal keys keep their input order."""
    if field not in SORT_FIELDS:
        raise ValidationError(f"Unknown sort field {field!r}; expected one of {SORT_FIELDS}")
    if direction not in SORT_DIRECTIONS:
        raise ValidationError(f"Unknown sort direction {direction!r}; expected 'asc' or 'desc'")
    # sorted() keeps ties in input order for reverse=True as well
    return sorted(transactions, key=_SORT_KEYS[field], reverse=direction == 'desc')


def recent_transactions(transactions: Iterable[Transaction], limit: int = 5) -> List[Transaction]:
    """The ``limit`` most recent transactions, newest first."""
    if limit <= 0:
        raise ValidationError(f"limit must be positive, got {limit}")
    return sort_transactions(transactions, 'date', 'desc')[:limit]
