"""Category breakdown of transaction amounts."""

from __future__ import annotations

from typing import Iterable, List

from .errors import ValidationError
from .frames import transactions_to_frame
from .models import CategoryTotal, Transaction


def breakdown_by_category(transactions: Iterable[Transaction]) -> List[CategoryTotal]:
    """Total absolute amount per category, largest first.

    Categories are grouped by their exact, case-sensitive label, so
    ``"Food"`` and ``"food"`` are reported separately. Income and expense
    records of the same category are added together; filter by type first
    to separate them. Ties keep the order in which categories first appear.
    """
    df = transactions_to_frame(transactions)
    if df.empty:
        return []
    totals = df['Amount'].abs().groupby(df['Category'], sort=False).sum()
    totals = totals.sort_values(ascending=False, kind='mergesort')
    return [CategoryTotal(category=str(name), total=float(value)) for name, value in totals.items()]


def top_categories(transactions: Iterable[Transaction], limit: int = 5) -> List[CategoryTotal]:
    if limit <= 0:
        raise ValidationError(f"limit must be positive, got {limit}")
    return breakdown_by_category(transactions)[:limit]


def category_names(transactions: Iterable[Transaction]) -> List[str]:
    """Distinct category labels in first-seen order."""
    return list(dict.fromkeys(t.category for t in transactions))
