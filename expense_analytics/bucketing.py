"""Calendar bucketing of transactions into daily, weekly and monthly series.

Each call projects a snapshot onto one granularity and returns a
:class:`~expense_analytics.models.BucketSeries`: the ordered buckets plus
one numeric sub-series per expense category, aligned with the buckets and
zero-filled so a stacked or grouped chart can be drawn directly.

Granularity rules:

* ``daily`` emits every calendar day from the earliest transaction date to
  today inclusive, including days without activity.  An empty snapshot
  yields the seven days ending today.
* ``weekly`` emits Monday-based weeks holding at least one expense.
* ``monthly`` emits months holding at least one transaction, either in
  chronological order (keys ``YYYY-MM``) or in the order months are first
  met while scanning the snapshot (keys ``Jan``, ``Feb``...).

Transactions whose date cannot be parsed are left out of every bucket;
they still count everywhere else.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Dict, List, Optional

import pandas as pd

from . import dates
from .config import get_empty_range_days
from .logging_setup import get_logger
from .models import Bucket, BucketSeries, DateLike, Granularity, MonthOrder, TransactionKind
from .snapshot import as_frame, canonical_order

_logger = get_logger("expense_analytics.bucketing")


def bucket_transactions(
    source,
    granularity: Granularity | str = Granularity.DAILY,
    *,
    today: DateLike = None,
    month_order: MonthOrder | str = MonthOrder.CHRONOLOGICAL,
) -> BucketSeries:
    """Bucket the expenses of ``source`` at ``granularity``.

    Parameters
    ----------
    source : sequence of Transaction or pandas.DataFrame
        The snapshot, or a frame built from it by
        :func:`expense_analytics.snapshot.build_frame`.
    granularity : Granularity or str
        ``daily``, ``weekly`` or ``monthly``.
    today : date-like, optional
        Upper bound of the daily range.  Defaults to the local date.
    month_order : MonthOrder or str
        Ordering of monthly buckets; ignored for other granularities.

    Returns
    -------
    BucketSeries
        Buckets with their per-category breakdown and the aligned
        stacked series.
    """
    granularity = Granularity(granularity)
    frame = canonical_order(as_frame(source))
    dated = frame[frame['Transaction Date'].notna()].copy()
    skipped = len(frame) - len(dated)
    if skipped:
        _logger.debug("Excluding %d transactions with unparseable dates from %s buckets",
                      skipped, granularity.value)
    dated['Day'] = dated['Transaction Date'].dt.date

    if granularity is Granularity.DAILY:
        dated['Bucket'] = dated['Day'].map(dates.day_key)
        skeleton = _daily_skeleton(dated, today)
    elif granularity is Granularity.WEEKLY:
        dated['Bucket'] = dated['Day'].map(dates.week_key)
        skeleton = _weekly_skeleton(dated)
    elif MonthOrder(month_order) is MonthOrder.FIRST_SEEN:
        dated['Bucket'] = dated['Day'].map(dates.month_abbr)
        skeleton = [Bucket(key=str(key), label=str(key)) for key in pd.unique(dated['Bucket'])]
    else:
        dated['Bucket'] = dated['Day'].map(dates.month_key)
        skeleton = _monthly_skeleton(dated)

    return _fill(granularity, skeleton, dated)


def daily_buckets(source, *, today: DateLike = None) -> BucketSeries:
    return bucket_transactions(source, Granularity.DAILY, today=today)


def weekly_buckets(source) -> BucketSeries:
    return bucket_transactions(source, Granularity.WEEKLY)


def monthly_buckets(source, *, month_order: MonthOrder | str = MonthOrder.CHRONOLOGICAL) -> BucketSeries:
    return bucket_transactions(source, Granularity.MONTHLY, month_order=month_order)


# ---------------------------------------------------------------------------
# Skeletons: the ordered, empty buckets for each granularity
# ---------------------------------------------------------------------------


def _daily_skeleton(dated: pd.DataFrame, today: DateLike) -> List[Bucket]:
    end = dates.parse_day(today) or dates.today()
    if dated.empty:
        start = end - timedelta(days=get_empty_range_days() - 1)
    else:
        start = min(dated['Day'])
        # future-dated entries stretch the range instead of being dropped
        end = max(end, max(dated['Day']))
    return [
        Bucket(key=dates.day_key(day), label=dates.day_label(day), start=day, end=day)
        for day in dates.day_range(start, end)
    ]


def _weekly_skeleton(dated: pd.DataFrame) -> List[Bucket]:
    expense_days = dated.loc[dated['Kind'] == TransactionKind.EXPENSE.value, 'Day']
    starts = sorted({dates.week_start(day) for day in expense_days})
    return [
        Bucket(
            key=dates.week_key(start),
            label=dates.week_label(start),
            start=start,
            end=start + timedelta(days=6),
        )
        for start in starts
    ]


def _monthly_skeleton(dated: pd.DataFrame) -> List[Bucket]:
    firsts: List[date] = sorted({day.replace(day=1) for day in dated['Day']})
    with_year = len({first.year for first in firsts}) > 1
    return [
        Bucket(
            key=dates.month_key(first),
            label=dates.month_label(first, with_year=with_year),
            start=first,
            end=dates.month_end(first),
        )
        for first in firsts
    ]


# ---------------------------------------------------------------------------
# Distribution
# ---------------------------------------------------------------------------


def _fill(granularity: Granularity, skeleton: List[Bucket], dated: pd.DataFrame) -> BucketSeries:
    keys = [bucket.key for bucket in skeleton]
    positions: Dict[str, int] = {key: index for index, key in enumerate(keys)}
    in_range = dated[dated['Bucket'].isin(keys)]

    expenses = in_range[in_range['Kind'] == TransactionKind.EXPENSE.value]
    categories = [str(category) for category in pd.unique(expenses['Category'])]
    stacked: Dict[str, List[float]] = {category: [0.0] * len(skeleton) for category in categories}

    if not expenses.empty:
        sums = expenses.groupby(['Bucket', 'Category'], sort=False)['Amount'].sum()
        for (key, category), amount in sums.items():
            skeleton[positions[key]].by_category[str(category)] = float(amount)

        matrix = (
            sums.unstack('Category', fill_value=0.0)
            .reindex(index=keys, columns=categories, fill_value=0.0)
        )
        stacked = {category: matrix[category].astype(float).tolist() for category in categories}

    income = in_range[in_range['Kind'] == TransactionKind.INCOME.value]
    if not income.empty:
        for key, amount in income.groupby('Bucket', sort=False)['Amount'].sum().items():
            skeleton[positions[key]].income = float(amount)

    for bucket in skeleton:
        bucket.by_category = {
            category: bucket.by_category[category]
            for category in categories
            if category in bucket.by_category
        }
        bucket.total = float(sum(bucket.by_category.values()))

    return BucketSeries(
        granularity=granularity,
        buckets=skeleton,
        categories=categories,
        stacked=stacked,
    )


def bucket_for(series: BucketSeries, key: str) -> Optional[Bucket]:
    """Look up a bucket by key."""
    for bucket in series.buckets:
        if bucket.key == key:
            return bucket
    return None
