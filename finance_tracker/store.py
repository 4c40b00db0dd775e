"""SQLite-backed transaction store.

Implements the two operations the reporting layer needs from persistence:
a filtered, ordered range query and the insert of a new transaction.
Database errors (``sqlite3.Error``) propagate to the caller.
"""

from __future__ import annotations

import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Iterator, List, Optional, Tuple, Union

import pandas as pd

from . import config
from .errors import ValidationError
from .filtering import SORT_DIRECTIONS, SORT_FIELDS
from .logging_setup import get_logger
from .models import (
    ALL,
    EXPENSE,
    INCOME,
    TRANSACTION_TYPES,
    FilterCriteria,
    Transaction,
    bound_instant,
    to_amount,
    to_datetime,
)

logger = get_logger(__name__)

PathLike = Union[str, Path]

SCHEMA_SQL = """
PRAGMA journal_mode=WAL;
PRAGMA synchronous=NORMAL;

CREATE TABLE IF NOT EXISTS transactions (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    type TEXT NOT NULL,
    amount REAL NOT NULL,
    currency TEXT NOT NULL DEFAULT 'USD',
    category TEXT NOT NULL,
    description TEXT,
    date TEXT NOT NULL,
    receipt_url TEXT,
    created_at TEXT
);

CREATE INDEX IF NOT EXISTS ix_txn_user_date ON transactions (user_id, date);
CREATE INDEX IF NOT EXISTS ix_txn_category ON transactions (category);
CREATE INDEX IF NOT EXISTS ix_txn_amount ON transactions (amount);
"""

_COLUMNS = "id, user_id, type, amount, currency, category, description, date, receipt_url"


def _iso(moment: datetime) -> str:
    # Fixed width so that string comparison in SQL matches chronological order.
    return moment.isoformat(timespec='microseconds')


@contextmanager
def connect(db_path: Optional[PathLike] = None) -> Iterator[sqlite3.Connection]:
    if db_path:
        target = Path(db_path)
        target.parent.mkdir(parents=True, exist_ok=True)
    else:
        config.ensure_data_directories()
        target = config.DB_PATH
    conn = sqlite3.connect(str(target))
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()


def init_db(db_path: Optional[PathLike] = None) -> None:
    with connect(db_path) as conn:
        conn.executescript(SCHEMA_SQL)
        conn.commit()


def insert_transaction(
    user_id: str,
    type: str,
    amount: Any,
    category: str,
    description: str = '',
    date: Any = None,
    currency: Optional[str] = None,
    db_path: Optional[PathLike] = None,
) -> Transaction:
    """Persist a new transaction and return it.

    ``amount`` may be given unsigned; it is stored positive for income and
    negative for expenses so that the sign always agrees with ``type``.
    """
    if type not in TRANSACTION_TYPES:
        raise ValidationError(f"Transaction type must be 'income' or 'expense', got {type!r}")
    if not category:
        raise ValidationError("Transaction category is required")
    value = abs(to_amount(amount))
    if value == 0:
        raise ValidationError("Transaction amount must be non-zero")
    signed = value if type == INCOME else -value

    txn = Transaction(
        id=str(uuid.uuid4()),
        date=datetime.now() if date is None else to_datetime(date),
        type=type,
        amount=signed,
        category=category,
        description=description or '',
        user_id=user_id,
        currency=currency or config.CURRENCY,
    )
    with connect(db_path) as conn:
        conn.execute(
            f"INSERT INTO transactions ({_COLUMNS}, created_at) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                txn.id, txn.user_id, txn.type, txn.amount, txn.currency, txn.category,
                txn.description, _iso(txn.date), txn.receipt_url, _iso(datetime.now()),
            ),
        )
        conn.commit()
    logger.debug("Inserted %s transaction %s for user %s", type, txn.id, user_id)
    return txn


def _build_query(
    user_id: str,
    criteria: FilterCriteria,
    sort_field: str,
    direction: str,
) -> Tuple[str, List[Any]]:
    criteria.validate()
    if sort_field not in SORT_FIELDS:
        raise ValidationError(f"Unknown sort field {sort_field!r}")
    if direction not in SORT_DIRECTIONS:
        raise ValidationError(f"Unknown sort direction {direction!r}")

    where: List[str] = ["user_id = ?", "date >= ?", "date <= ?"]
    params: List[Any] = [
        user_id,
        _iso(bound_instant(criteria.start_date, end=False)),
        _iso(bound_instant(criteria.end_date, end=True)),
    ]
    if criteria.type == INCOME:
        where.append("(amount > 0 OR (amount = 0 AND type = ?))")
        params.append(INCOME)
    elif criteria.type == EXPENSE:
        where.append("(amount < 0 OR (amount = 0 AND type = ?))")
        params.append(EXPENSE)
    if criteria.category != ALL:
        where.append("category = ?")
        params.append(criteria.category)
    if criteria.min_amount is not None:
        where.append("amount >= ?")
        params.append(criteria.min_amount)
    if criteria.max_amount is not None:
        where.append("amount <= ?")
        params.append(criteria.max_amount)

    order = 'ASC' if direction == 'asc' else 'DESC'
    sql = f"SELECT {_COLUMNS} FROM transactions WHERE " + " AND ".join(where)
    # rowid keeps insertion order among equal sort keys
    sql += f" ORDER BY {sort_field} {order}, rowid ASC"
    return sql, params


def query_transactions(
    user_id: str,
    criteria: FilterCriteria,
    sort_field: str = 'date',
    direction: str = 'desc',
    db_path: Optional[PathLike] = None,
) -> List[Transaction]:
    """Fetch a user's transactions matching ``criteria`` in the requested order."""
    sql, params = _build_query(user_id, criteria, sort_field, direction)
    with connect(db_path) as conn:
        rows = conn.execute(sql, params).fetchall()
    return [Transaction.from_record(dict(row)) for row in rows]


def query_frame(
    user_id: str,
    criteria: FilterCriteria,
    sort_field: str = 'date',
    direction: str = 'desc',
    db_path: Optional[PathLike] = None,
) -> pd.DataFrame:
    """Same as :func:`query_transactions` but returns a DataFrame."""
    sql, params = _build_query(user_id, criteria, sort_field, direction)
    with connect(db_path) as conn:
        df = pd.read_sql_query(sql, conn, params=params)
    if not df.empty:
        df['date'] = pd.to_datetime(df['date'])
    return df


def fetch_categories(user_id: str, db_path: Optional[PathLike] = None) -> List[str]:
    with connect(db_path) as conn:
        rows = conn.execute(
            "SELECT DISTINCT category FROM transactions WHERE user_id = ? ORDER BY category",
            (user_id,),
        ).fetchall()
    return [r[0] for r in rows if r[0] is not None]


def fetch_all(user_id: str, db_path: Optional[PathLike] = None) -> List[Transaction]:
    """Every transaction of a user, oldest first (used for lifetime balance)."""
    with connect(db_path) as conn:
        rows = conn.execute(
            f"SELECT {_COLUMNS} FROM transactions WHERE user_id = ? ORDER BY date ASC, rowid ASC",
            (user_id,),
        ).fetchall()
    return [Transaction.from_record(dict(row)) for row in rows]
