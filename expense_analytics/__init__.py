"""Top-level package for the expense analytics engine.

The engine turns an immutable snapshot of income/expense transactions into
the derived views a spending dashboard needs.  The primary modules are:

* ``aggregation``: expense totals and ranking per category
* ``bucketing``: gap-filled daily/weekly/monthly series with per-category
  sub-series
* ``balances``: running balances split by payment channel
* ``search``: free-text and payment-channel filtering of history
* ``colors``: stable category to palette-slot assignment
* ``analytics``: :class:`TransactionAnalytics`, one pass over a snapshot

To print a report for an exported snapshot from the command line::

    python -m expense_analytics data/transactions.json --granularity weekly
"""

from .aggregation import category_totals, percentage_of_total, ranked_categories, total_expense
from .analytics import AnalyticsReport, TransactionAnalytics
from .balances import channel_balances
from .bucketing import bucket_transactions
from .colors import assign_category_slots, category_colors
from .models import (
    BalanceSummary,
    Bucket,
    BucketSeries,
    ChannelFilter,
    Granularity,
    MonthOrder,
    PaymentChannel,
    RankedCategory,
    Transaction,
    TransactionKind,
)
from .search import search_transactions
from .snapshot import build_frame, load_snapshot, sort_snapshot, without_transaction

__version__ = "0.1.0"

__all__ = [
    "AnalyticsReport",
    "BalanceSummary",
    "Bucket",
    "BucketSeries",
    "ChannelFilter",
    "Granularity",
    "MonthOrder",
    "PaymentChannel",
    "RankedCategory",
    "Transaction",
    "TransactionAnalytics",
    "TransactionKind",
    "assign_category_slots",
    "bucket_transactions",
    "build_frame",
    "category_colors",
    "category_totals",
    "channel_balances",
    "load_snapshot",
    "percentage_of_total",
    "ranked_categories",
    "search_transactions",
    "sort_snapshot",
    "total_expense",
    "without_transaction",
]
