"""Time bucketing of transactions for the income/expense trend charts.

A window of ``bucket_count`` consecutive days or calendar months is laid
out backwards from a reference date. Every bucket in the window is
returned, empty ones included, so the x-axis of a chart stays continuous.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple

import pandas as pd

from .errors import ValidationError
from .frames import transactions_to_frame
from .logging_setup import get_logger
from .models import Bucket, Transaction, to_datetime

logger = get_logger(__name__)

DAY = 'day'
MONTH = 'month'
GRANULARITIES = (DAY, MONTH)

# Timeframe presets offered by the dashboard and analytics views.
TIMEFRAMES: Dict[str, Tuple[str, int]] = {
    '7days': (DAY, 7),
    '30days': (DAY, 30),
    '90days': (DAY, 90),
    '1month': (MONTH, 1),
    '3months': (MONTH, 3),
    '6months': (MONTH, 6),
    '1year': (MONTH, 12),
}


def _validate(granularity: str, bucket_count: Any) -> None:
    if granularity not in GRANULARITIES:
        raise ValidationError(f"Unknown granularity {granularity!r}; expected 'day' or 'month'")
    if isinstance(bucket_count, bool) or not isinstance(bucket_count, int):
        raise ValidationError(f"bucket_count must be an integer, got {bucket_count!r}")
    if bucket_count <= 0:
        raise ValidationError(f"bucket_count must be positive, got {bucket_count}")


def _reference(reference_date: Any) -> datetime:
    if reference_date is None:
        return datetime.now()
    return to_datetime(reference_date, 'reference_date')


def _bucket_keys(granularity: str, bucket_count: int, reference: datetime) -> List[Any]:
    """Bucket keys oldest first; days are normalized timestamps, months are periods."""
    if granularity == DAY:
        day = pd.Timestamp(reference).normalize()
        keys = [day - pd.Timedelta(days=i) for i in range(bucket_count)]
    else:
        month = pd.Period(pd.Timestamp(reference), freq='M')
        keys = [month - i for i in range(bucket_count)]
    keys.reverse()
    return keys


def _key_start(key: Any) -> datetime:
    if isinstance(key, pd.Period):
        return key.start_time.to_pydatetime()
    return key.to_pydatetime()


def _label(granularity: str, start: datetime) -> str:
    if granularity == DAY:
        return f"{start:%b} {start.day}"
    return f"{start:%b}"


def bucket_window(
    granularity: str, bucket_count: int, reference_date: Any = None
) -> Tuple[datetime, datetime]:
    """Inclusive ``(start, end)`` instants covered by a bucket window."""
    _validate(granularity, bucket_count)
    keys = _bucket_keys(granularity, bucket_count, _reference(reference_date))
    start = _key_start(keys[0])
    if granularity == DAY:
        following = _key_start(keys[-1]) + timedelta(days=1)
    else:
        following = _key_start(keys[-1] + 1)
    return start, following - timedelta(microseconds=1)


def bucketize(
    transactions: Iterable[Transaction],
    granularity: str,
    bucket_count: int,
    reference_date: Any = None,
) -> List[Bucket]:
    """Sum income and expenses per day or calendar month.

    Parameters
    ----------
    transactions : iterable of Transaction
        Records to assign. Records outside the window are ignored.
    granularity : {'day', 'month'}
        Bucket size.
    bucket_count : int
        Number of buckets; the newest one contains ``reference_date``.
    reference_date : date-like, optional
        End of the window. Defaults to now.

    Returns
    -------
    list of Bucket
        Exactly ``bucket_count`` buckets, oldest first.
    """
    _validate(granularity, bucket_count)
    reference = _reference(reference_date)
    keys = _bucket_keys(granularity, bucket_count, reference)

    income = pd.Series(dtype=float)
    expenses = pd.Series(dtype=float)
    df = transactions_to_frame(transactions)
    if not df.empty:
        if granularity == DAY:
            group_keys = df['Date'].dt.normalize()
        else:
            group_keys = df['Date'].dt.to_period('M')
        amounts = df['Amount']
        income = amounts.where(amounts > 0, 0.0).groupby(group_keys).sum()
        expenses = amounts.where(amounts < 0, 0.0).abs().groupby(group_keys).sum()

    buckets = []
    for key in keys:
        start = _key_start(key)
        buckets.append(Bucket(
            label=_label(granularity, start),
            start=start,
            income=float(income.get(key, 0.0)),
            expenses=float(expenses.get(key, 0.0)),
        ))
    logger.debug(
        "bucketize produced %d %s buckets ending %s from %d transactions",
        len(buckets), granularity, reference.date(), len(df),
    )
    return buckets


def bucketize_timeframe(
    transactions: Iterable[Transaction], timeframe: str, reference_date: Optional[Any] = None
) -> List[Bucket]:
    """Bucket using one of the named :data:`TIMEFRAMES` presets."""
    try:
        granularity, count = TIMEFRAMES[timeframe]
    except KeyError:
        raise ValidationError(
            f"Unknown timeframe {timeframe!r}; expected one of {sorted(TIMEFRAMES)}"
        ) from None
    return bucketize(transactions, granularity, count, reference_date)
