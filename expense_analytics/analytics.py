"""Transaction analytics for one computation pass.

:class:`TransactionAnalytics` wraps a single snapshot and exposes every
derived view (category totals, calendar buckets, channel balances, search
and colour slots) as methods.  The working frame is built once per
instance; a new snapshot means a new instance, nothing is updated in place.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import pandas as pd

from . import aggregation, bucketing, colors
from .balances import channel_balances
from .dates import parse_day
from .logging_setup import get_logger
from .models import (
    BalanceSummary,
    BucketSeries,
    ChannelFilter,
    DateLike,
    Granularity,
    MonthOrder,
    RankedCategory,
    Transaction,
)
from .search import search_transactions
from .snapshot import build_frame, without_transaction

_logger = get_logger("expense_analytics.analytics")


@dataclass
class AnalyticsReport:
    """Everything the rendering layer needs for one granularity."""

    granularity: Granularity
    ranked_categories: List[RankedCategory]
    category_totals: Dict[str, float]
    total_expense: float
    balances: BalanceSummary
    series: BucketSeries
    category_slots: Dict[str, int] = field(default_factory=dict)

    def percentage(self, category: str) -> float:
        return aggregation.percentage_of_total(self.category_totals.get(category, 0.0), self.total_expense)


class TransactionAnalytics:
    """Derived views over an immutable transaction snapshot."""

    def __init__(self, snapshot: Sequence[Transaction], *, today: DateLike = None):
        """Initialize with the snapshot fetched from the store."""
        self.snapshot = tuple(snapshot)
        self.today = parse_day(today) if today is not None else None
        self.data = build_frame(self.snapshot)
        _logger.debug("Prepared analytics pass over %d transactions", len(self.snapshot))

    def refresh(self, snapshot: Sequence[Transaction]) -> 'TransactionAnalytics':
        """Start a new pass over a re-fetched snapshot."""
        return TransactionAnalytics(snapshot, today=self.today)

    def without(self, transaction_id) -> 'TransactionAnalytics':
        """Pass over the snapshot as it looks once ``transaction_id`` is deleted."""
        return self.refresh(without_transaction(self.snapshot, transaction_id))

    # Category aggregation

    def category_totals(self) -> Dict[str, float]:
        return aggregation.category_totals(self.data)

    def ranked_categories(self) -> List[RankedCategory]:
        return aggregation.ranked_categories(self.data)

    def total_expense(self) -> float:
        return aggregation.total_expense(self.data)

    def total_income(self) -> float:
        return aggregation.total_income(self.data)

    def percentage_of_total(self, amount: float) -> float:
        return aggregation.percentage_of_total(amount, self.total_expense())

    def category_shares(self) -> pd.DataFrame:
        return aggregation.category_shares(self.data)

    # Calendar buckets

    def buckets(
        self,
        granularity: Granularity | str = Granularity.DAILY,
        *,
        month_order: MonthOrder | str = MonthOrder.CHRONOLOGICAL,
    ) -> BucketSeries:
        return bucketing.bucket_transactions(
            self.data, granularity, today=self.today, month_order=month_order
        )

    # Balances, search and colours

    def balances(self) -> BalanceSummary:
        return channel_balances(self.data)

    def search(self, query: str = '', channel: ChannelFilter | str = ChannelFilter.ALL) -> List[Transaction]:
        return search_transactions(self.snapshot, query, channel)

    def category_slots(self, palette_size: Optional[int] = None) -> Dict[str, int]:
        return colors.assign_category_slots(self.data, palette_size)

    def category_colors(self, palette: Optional[Sequence[str]] = None) -> Dict[str, str]:
        return colors.category_colors(self.data, palette)

    def report(
        self,
        granularity: Granularity | str = Granularity.DAILY,
        *,
        month_order: MonthOrder | str = MonthOrder.CHRONOLOGICAL,
        palette_size: Optional[int] = None,
    ) -> AnalyticsReport:
        """Compute every derived view for ``granularity`` in one go."""
        return AnalyticsReport(
            granularity=Granularity(granularity),
            ranked_categories=self.ranked_categories(),
            category_totals=self.category_totals(),
            total_expense=self.total_expense(),
            balances=self.balances(),
            series=self.buckets(granularity, month_order=month_order),
            category_slots=self.category_slots(palette_size),
        )
