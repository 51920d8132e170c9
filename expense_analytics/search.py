"""Free-text and payment-channel filtering for the history view."""

from __future__ import annotations

from typing import List, Sequence

from .models import ChannelFilter, Transaction
from .snapshot import channel_of


def matches_query(txn: Transaction, query: str) -> bool:
    """Case-insensitive substring match against title or category."""
    needle = (query or '').casefold()
    if not needle:
        return True
    title = str(txn.title or '').casefold()
    category = str(txn.category or '').casefold()
    return needle in title or needle in category


def matches_channel(txn: Transaction, channel: ChannelFilter | str = ChannelFilter.ALL) -> bool:
    channel = ChannelFilter(channel)
    if channel is ChannelFilter.ALL:
        return True
    return channel_of(txn).value == channel.value


def search_transactions(
    snapshot: Sequence[Transaction],
    query: str = '',
    channel: ChannelFilter | str = ChannelFilter.ALL,
) -> List[Transaction]:
    """Filter ``snapshot`` keeping its original order.

    Args:
        snapshot: Transactions as fetched from the store (newest first).
        query: Text looked up in title and category; empty matches all.
        channel: ``all``, ``cash`` or ``noncash``.

    Returns:
        The matching transactions, in snapshot order.

    Example:
        >>> [t.title for t in search_transactions(snapshot, 'food', 'cash')]
        ['Lunch']
    """
    channel = ChannelFilter(channel)
    return [
        txn for txn in snapshot
        if matches_query(txn, query) and matches_channel(txn, channel)
    ]
