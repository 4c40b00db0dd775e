"""Conversions between result dataclasses and pandas DataFrames.

Charts and the command-line summary work on DataFrames; the aggregation
modules work on :class:`~finance_tracker.models.Transaction` lists. The
column names match the headers of the transaction export.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence

import numpy as np
import pandas as pd

from .models import Bucket, CategoryTotal, Transaction

TRANSACTION_COLUMNS = ['ID', 'Date', 'Type', 'Category', 'Description', 'Amount', 'Flow']
SERIES_COLUMNS = ['Label', 'Start', 'Income', 'Expenses', 'Net']
BREAKDOWN_COLUMNS = ['Category', 'Total']


def transactions_to_frame(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """Build a DataFrame with one row per transaction, in input order."""
    rows = [
        {
            'ID': t.id,
            'Date': t.date,
            'Type': t.type,
            'Category': t.category,
            'Description': t.description,
            'Amount': t.amount,
        }
        for t in transactions
    ]
    df = pd.DataFrame(rows, columns=TRANSACTION_COLUMNS[:-1])
    df['Date'] = pd.to_datetime(df['Date'])
    df['Amount'] = pd.to_numeric(df['Amount'], errors='coerce').fillna(0.0).astype(float)
    df['Flow'] = np.where(
        df['Amount'] > 0,
        'income',
        np.where(df['Amount'] < 0, 'expense', df['Type']),
    )
    return df


def frame_to_transactions(df: pd.DataFrame) -> List[Transaction]:
    """Inverse of :func:`transactions_to_frame`; also accepts store query frames."""
    if df is None or df.empty:
        return []
    renamed = df.rename(columns={
        'ID': 'id',
        'Date': 'date',
        'Type': 'type',
        'Category': 'category',
        'Description': 'description',
        'Amount': 'amount',
    })
    cleaned = renamed.astype(object).where(pd.notna(renamed), None)
    records = cleaned.to_dict(orient='records')
    return [Transaction.from_record(record) for record in records]


def buckets_to_frame(buckets: Sequence[Bucket]) -> pd.DataFrame:
    df = pd.DataFrame(
        [
            {
                'Label': b.label,
                'Start': b.start,
                'Income': b.income,
                'Expenses': b.expenses,
                'Net': b.net,
            }
            for b in buckets
        ],
        columns=SERIES_COLUMNS,
    )
    return df


def breakdown_to_frame(breakdown: Sequence[CategoryTotal]) -> pd.DataFrame:
    return pd.DataFrame(
        [{'Category': c.category, 'Total': c.total} for c in breakdown],
        columns=BREAKDOWN_COLUMNS,
    )
