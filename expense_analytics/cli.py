"""Command line report over an exported transaction snapshot."""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional, Sequence

import pandas as pd

from . import config
from .analytics import TransactionAnalytics
from .dates import parse_day
from .formatting import format_currency, format_percentage
from .logging_setup import configure_logging, get_logger
from .models import ChannelFilter, Granularity, MonthOrder, Transaction
from .snapshot import SnapshotFormatError, channel_of, load_snapshot

_logger = get_logger("expense_analytics.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='expense-analytics',
        description='Summarise spending from a CSV or JSON transaction export.',
    )
    parser.add_argument('snapshot', nargs='?', default=str(config.SNAPSHOT_PATH),
                        help='Path to the exported transactions (default: %(default)s)')
    parser.add_argument('--granularity', choices=[g.value for g in Granularity], default='daily',
                        help='Time bucket size for the spending series')
    parser.add_argument('--month-order', choices=[o.value for o in MonthOrder],
                        default=MonthOrder.CHRONOLOGICAL.value,
                        help='Ordering of monthly buckets')
    parser.add_argument('--search', default=None, help='Filter history by title or category text')
    parser.add_argument('--channel', choices=[c.value for c in ChannelFilter], default=None,
                        help='Filter history by payment channel')
    parser.add_argument('--today', default=None, help='Override the current date (YYYY-MM-DD)')
    parser.add_argument('--currency', default=None, help='Display currency (USD or INR)')
    parser.add_argument('--log-level', default=config.LOG_LEVEL, help='Logging level (e.g. INFO, DEBUG)')
    return parser


def _history_frame(transactions: Sequence[Transaction], symbol: str) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                'Date': txn.date,
                'Title': txn.title,
                'Category': txn.category,
                'Channel': channel_of(txn).value,
                'Amount': format_currency(-txn.amount if txn.is_expense else txn.amount, symbol),
            }
            for txn in transactions
        ],
        columns=['Date', 'Title', 'Category', 'Channel', 'Amount'],
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    today = None
    if args.today:
        today = parse_day(args.today)
        if today is None:
            parser.error(f"invalid --today value: {args.today!r}")

    try:
        snapshot = load_snapshot(args.snapshot)
    except FileNotFoundError:
        print(f"Snapshot not found: {args.snapshot}", file=sys.stderr)
        return 2
    except SnapshotFormatError as exc:
        print(f"Invalid snapshot: {exc}", file=sys.stderr)
        return 2

    symbol = config.get_currency_symbol(args.currency)
    analytics = TransactionAnalytics(snapshot, today=today)
    report = analytics.report(args.granularity, month_order=args.month_order)
    balances = report.balances

    print(f"Transactions: {len(snapshot)}")
    print(f"Total balance: {format_currency(balances.total, symbol)}")
    print(f"  Cash:     {format_currency(balances.cash, symbol)}")
    print(f"  Non-cash: {format_currency(balances.non_cash, symbol)}")
    print(f"Income: {format_currency(balances.income, symbol)}  Expense: {format_currency(balances.expense, symbol)}")

    print("\nExpenses by category:")
    if not report.ranked_categories:
        print("No expense data to display.")
    for category, amount in report.ranked_categories:
        share = format_percentage(report.percentage(category))
        print(f"  {category:<20} {format_currency(amount, symbol):>14} {share:>7}")

    print(f"\n{report.granularity.value.capitalize()} spending:")
    frame = report.series.to_frame()
    if frame.empty:
        print("No buckets to display.")
    else:
        print(frame.to_string())

    if args.search is not None or args.channel is not None:
        matches = analytics.search(args.search or '', args.channel or ChannelFilter.ALL)
        print(f"\nHistory ({len(matches)} of {len(snapshot)}):")
        if matches:
            print(_history_frame(matches, symbol).to_string(index=False))
        else:
            print("No transactions found.")

    _logger.info("Report finished for %s", args.snapshot)
    return 0


if __name__ == '__main__':
    sys.exit(main())
