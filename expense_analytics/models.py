"""Value types shared by the analytics modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional, Union

import pandas as pd

DateLike = Union[date, datetime, pd.Timestamp, str, None]

NON_CASH_ALIASES = {'noncash', 'non-cash', 'non_cash', 'non cash', 'card', 'online', 'upi', 'bank'}


class TransactionKind(str, Enum):
    INCOME = 'income'
    EXPENSE = 'expense'

    @classmethod
    def coerce(cls, value: Any) -> 'TransactionKind':
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower() if value is not None else ''
        for member in cls:
            if text == member.value:
                return member
        raise ValueError(f"Unknown transaction kind '{value}'")


class PaymentChannel(str, Enum):
    CASH = 'cash'
    NON_CASH = 'noncash'

    @classmethod
    def coerce(cls, value: Any) -> 'PaymentChannel':
        """Map a stored channel to a member; absence means non-cash."""
        if isinstance(value, cls):
            return value
        if value is None or (isinstance(value, float) and pd.isna(value)):
            return cls.NON_CASH
        text = str(value).strip().lower()
        if text == cls.CASH.value:
            return cls.CASH
        if not text or text in NON_CASH_ALIASES:
            return cls.NON_CASH
        raise ValueError(f"Unknown payment channel '{value}'")


class ChannelFilter(str, Enum):
    ALL = 'all'
    NON_CASH = 'noncash'
    CASH = 'cash'


class Granularity(str, Enum):
    DAILY = 'daily'
    WEEKLY = 'weekly'
    MONTHLY = 'monthly'


class MonthOrder(str, Enum):
    CHRONOLOGICAL = 'chronological'
    FIRST_SEEN = 'first-seen'


@dataclass(frozen=True)
class Transaction:
    """A single income or expense record as supplied by the store.

    ``date`` keeps whatever the store handed over; it is parsed lazily by
    :func:`expense_analytics.dates.parse_day` so that an unparseable value
    only drops the record from time-bucketed views.
    """

    id: Any
    kind: TransactionKind
    title: str
    amount: float
    category: str
    date: DateLike
    note: Optional[str] = None
    payment_channel: PaymentChannel = PaymentChannel.NON_CASH

    @property
    def is_expense(self) -> bool:
        return self.kind == TransactionKind.EXPENSE


@dataclass
class Bucket:
    key: str
    label: str
    total: float = 0.0
    by_category: Dict[str, float] = field(default_factory=dict)
    income: float = 0.0
    start: Optional[date] = None
    end: Optional[date] = None


class RankedCategory(NamedTuple):
    category: str
    amount: float


@dataclass
class BucketSeries:
    """Ordered buckets plus one aligned sub-series per category."""

    granularity: Granularity
    buckets: List[Bucket]
    categories: List[str]
    stacked: Dict[str, List[float]]

    def __len__(self) -> int:
        return len(self.buckets)

    def __iter__(self):
        return iter(self.buckets)

    @property
    def keys(self) -> List[str]:
        return [bucket.key for bucket in self.buckets]

    @property
    def labels(self) -> List[str]:
        return [bucket.label for bucket in self.buckets]

    @property
    def totals(self) -> List[float]:
        return [bucket.total for bucket in self.buckets]

    @property
    def income(self) -> List[float]:
        return [bucket.income for bucket in self.buckets]

    def to_frame(self) -> pd.DataFrame:
        """Return the series as a DataFrame indexed by bucket key."""
        frame = pd.DataFrame(self.stacked, index=self.keys, columns=self.categories, dtype=float)
        frame.insert(0, 'Label', self.labels)
        frame['Total'] = self.totals
        frame['Income'] = self.income
        frame.index.name = 'Key'
        return frame


@dataclass(frozen=True)
class BalanceSummary:
    cash: float = 0.0
    non_cash: float = 0.0
    income: float = 0.0
    expense: float = 0.0

    @property
    def total(self) -> float:
        return self.cash + self.non_cash
