"""Data contracts shared by the filtering, bucketing and aggregation modules.

Every result type is a frozen dataclass.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, List, Mapping, Optional

import pandas as pd

from .errors import ValidationError

INCOME = 'income'
EXPENSE = 'expense'
ALL = 'all'
TRANSACTION_TYPES = (INCOME, EXPENSE)
FILTER_TYPES = (ALL, INCOME, EXPENSE)


def to_datetime(value: Any, field_name: str = 'date') -> datetime:
    """Coerce ``value`` into a timezone-naive ``datetime``.

    Accepts ``datetime``/``date`` objects, pandas timestamps and ISO-like
    strings. Timezone-aware values keep their wall-clock time and drop the
    zone.
    """
    if isinstance(value, datetime) and not hasattr(value, 'to_pydatetime'):
        return value.replace(tzinfo=None)
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime(value.year, value.month, value.day)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"Missing {field_name}")
    ts = pd.to_datetime(value, errors='coerce')
    if pd.isna(ts):
        raise ValidationError(f"Unable to parse {field_name}: {value!r}")
    if ts.tzinfo is not None:
        ts = ts.tz_localize(None)
    return ts.to_pydatetime()


def to_amount(value: Any, field_name: str = 'amount') -> float:
    """Parse a signed amount, accepting ``$``/``,`` decorated strings."""
    if value is None or isinstance(value, bool):
        raise ValidationError(f"Missing {field_name}")
    if isinstance(value, str):
        cleaned = value.strip().replace('$', '').replace(',', '')
        if cleaned.startswith('(') and cleaned.endswith(')'):
            cleaned = f"-{cleaned[1:-1]}"
        value = cleaned
    number = pd.to_numeric(pd.Series([value]), errors='coerce').iloc[0]
    if pd.isna(number):
        raise ValidationError(f"Unable to parse {field_name}: {value!r}")
    return float(number)


def _optional_amount(value: Any, field_name: str) -> Optional[float]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return to_amount(value, field_name)


@dataclass(frozen=True)
class Transaction:
    """A single income or expense record as returned by the store."""

    id: str
    date: datetime
    type: str
    amount: float
    category: str
    description: str = ''
    user_id: Optional[str] = None
    currency: str = 'USD'
    receipt_url: Optional[str] = None

    def __post_init__(self) -> None:
        # Dates are compared against naive bounds everywhere.
        object.__setattr__(self, 'date', to_datetime(self.date))

    @property
    def flow(self) -> str:
        """Direction of money movement; the sign of ``amount`` wins over ``type``."""
        if self.amount > 0:
            return INCOME
        if self.amount < 0:
            return EXPENSE
        return self.type

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> 'Transaction':
        """Build a transaction from a store row or JSON payload."""
        if 'amount' not in record:
            raise ValidationError("Transaction record is missing 'amount'")
        amount = to_amount(record.get('amount'))
        tx_type = str(record.get('type') or '').strip().lower()
        if tx_type not in TRANSACTION_TYPES:
            tx_type = INCOME if amount > 0 else EXPENSE
        return cls(
            id=str(record.get('id') or ''),
            date=to_datetime(record.get('date')),
            type=tx_type,
            amount=amount,
            category=str(record.get('category') or ''),
            description=str(record.get('description') or ''),
            user_id=record.get('user_id'),
            currency=str(record.get('currency') or 'USD'),
            receipt_url=record.get('receipt_url'),
        )


@dataclass(frozen=True)
class FilterCriteria:
    """User-selected filter over the transaction list.

    ``start_date`` and ``end_date`` are inclusive. A plain ``date`` bound
    covers the whole calendar day.
    """

    start_date: date
    end_date: date
    type: str = ALL
    category: str = ALL
    min_amount: Optional[float] = None
    max_amount: Optional[float] = None

    def validate(self) -> 'FilterCriteria':
        if bound_instant(self.start_date, end=False) > bound_instant(self.end_date, end=True):
            raise ValidationError(
                f"start_date {self.start_date} is after end_date {self.end_date}"
            )
        if self.type not in FILTER_TYPES:
            raise ValidationError(f"Unknown transaction type filter: {self.type!r}")
        if (
            self.min_amount is not None
            and self.max_amount is not None
            and self.min_amount > self.max_amount
        ):
            raise ValidationError(
                f"min_amount {self.min_amount} is greater than max_amount {self.max_amount}"
            )
        return self

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> 'FilterCriteria':
        """Parse form-style values; blank amount bounds mean "unset"."""
        start = values.get('start_date', values.get('startDate'))
        end = values.get('end_date', values.get('endDate'))
        if start is None or end is None:
            raise ValidationError("Both start_date and end_date are required")
        criteria = cls(
            start_date=parse_bound(start, 'start_date'),
            end_date=parse_bound(end, 'end_date'),
            type=str(values.get('type') or ALL).lower(),
            category=str(values.get('category') or ALL),
            min_amount=_optional_amount(values.get('min_amount', values.get('minAmount')), 'min_amount'),
            max_amount=_optional_amount(values.get('max_amount', values.get('maxAmount')), 'max_amount'),
        )
        return criteria.validate()

    @classmethod
    def current_month(cls, today: Optional[date] = None) -> 'FilterCriteria':
        """Default window used by the transaction list: month start to today."""
        today = today or date.today()
        if isinstance(today, datetime):
            today = today.date()
        return cls(start_date=today.replace(day=1), end_date=today)


def parse_bound(value: Any, field_name: str) -> date:
    if isinstance(value, (date, datetime)):
        return value
    parsed = to_datetime(value, field_name)
    if isinstance(value, str) and len(value.strip()) <= 10:
        return parsed.date()
    return parsed


def bound_instant(bound: date, end: bool) -> datetime:
    """Comparable instant for a bound; date-only end bounds extend to 23:59:59.999999."""
    if isinstance(bound, datetime):
        return bound.replace(tzinfo=None)
    if end:
        return datetime.combine(bound, datetime.max.time())
    return datetime.combine(bound, datetime.min.time())


@dataclass(frozen=True)
class Totals:
    income: float = 0.0
    expenses: float = 0.0

    @property
    def net_balance(self) -> float:
        return self.income - self.expenses


@dataclass(frozen=True)
class Bucket:
    """One day or month slot of a time series."""

    label: str
    start: datetime
    income: float = 0.0
    expenses: float = 0.0

    @property
    def net(self) -> float:
        return self.income - self.expenses


@dataclass(frozen=True)
class CategoryTotal:
    category: str
    total: float


@dataclass(frozen=True)
class Stats:
    """Headline figures for the dashboard cards.

    ``savings_rate`` is ``None`` when monthly income is zero.
    """

    total_balance: float
    monthly_income: float
    monthly_expenses: float
    savings_rate: Optional[int]
    window_totals: Totals = field(default_factory=Totals)


@dataclass(frozen=True)
class Report:
    transactions: List[Transaction]
    totals: Totals
    series: List[Bucket]
    category_breakdown: List[CategoryTotal]

    @property
    def net_balance(self) -> float:
        return self.totals.net_balance
