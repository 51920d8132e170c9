"""Tests for snapshot ingestion and the canonical working frame."""

from __future__ import annotations

import io
import json
from datetime import date

import pandas as pd
import pytest

from expense_analytics.models import PaymentChannel, Transaction, TransactionKind
from expense_analytics.snapshot import (
    SnapshotFormatError,
    build_frame,
    canonical_order,
    load_snapshot,
    read_records,
    records_to_snapshot,
    sort_snapshot,
    without_transaction,
)


def _records():
    return [
        {'_id': 'a1', 'type': 'expense', 'title': 'Lunch', 'amount': 12.5, 'category': 'Food',
         'date': '2024-01-02T13:05:00', 'paymentChannel': 'cash'},
        {'_id': 'a2', 'type': 'income', 'title': 'Pay', 'amount': '3000', 'category': 'Salary',
         'date': '2024-01-05', 'note': 'January'},
        {'_id': 'a3', 'type': 'Expense', 'title': 'Taxi', 'amount': 20, 'category': 'Travel',
         'date': 'someday'},
    ]


def test_records_are_coerced_into_transactions() -> None:
    snapshot = records_to_snapshot(_records())

    assert [txn.id for txn in snapshot] == ['a1', 'a2', 'a3']
    assert snapshot[0].payment_channel is PaymentChannel.CASH
    assert snapshot[1].kind is TransactionKind.INCOME
    assert snapshot[1].amount == 3000.0
    assert snapshot[1].note == 'January'
    assert snapshot[1].payment_channel is PaymentChannel.NON_CASH
    # unparseable dates are kept as-is
    assert snapshot[2].date == 'someday'


def test_negative_amounts_are_stored_as_absolute_values() -> None:
    snapshot = records_to_snapshot([
        {'id': 1, 'kind': 'expense', 'title': 'Refund?', 'amount': '-8.50', 'category': 'Other', 'date': '2024-01-01'},
    ])
    assert snapshot[0].amount == 8.5


def test_unparseable_amount_defaults_to_zero() -> None:
    snapshot = records_to_snapshot([
        {'id': 1, 'kind': 'expense', 'title': 'Mystery', 'amount': 'n/a', 'category': 'Other', 'date': '2024-01-01'},
    ])
    assert snapshot[0].amount == 0.0


@pytest.mark.parametrize(
    'record',
    [
        {'id': 1, 'kind': 'transfer', 'title': 'X', 'amount': 1, 'category': 'Other', 'date': '2024-01-01'},
        {'id': 1, 'kind': 'expense', 'title': '', 'amount': 1, 'category': 'Other', 'date': '2024-01-01'},
        {'id': 1, 'kind': 'expense', 'title': 'X', 'amount': 1, 'date': '2024-01-01'},
        {'id': 1, 'kind': 'expense', 'title': 'X', 'amount': 1, 'category': 'Other', 'date': '2024-01-01',
         'paymentChannel': 'barter'},
    ],
)
def test_invalid_rows_raise_format_error(record) -> None:
    with pytest.raises(SnapshotFormatError):
        records_to_snapshot([record])


def test_sort_snapshot_is_date_descending_with_bad_dates_last() -> None:
    snapshot = sort_snapshot(records_to_snapshot(_records()))
    assert [txn.id for txn in snapshot] == ['a2', 'a1', 'a3']


def test_load_snapshot_reads_json_and_csv(tmp_path) -> None:
    json_path = tmp_path / 'transactions.json'
    json_path.write_text(json.dumps({'transactions': _records()}), encoding='utf-8')
    assert [txn.id for txn in load_snapshot(json_path)] == ['a2', 'a1', 'a3']

    csv_path = tmp_path / 'transactions.csv'
    pd.DataFrame(_records()).to_csv(csv_path, index=False)
    from_csv = load_snapshot(csv_path)
    assert [txn.id for txn in from_csv] == ['a2', 'a1', 'a3']
    assert from_csv[1].payment_channel is PaymentChannel.CASH
    assert from_csv[2].payment_channel is PaymentChannel.NON_CASH
    assert from_csv[0].note == 'January'
    assert from_csv[1].note is None


def test_read_records_accepts_buffers() -> None:
    buffer = io.StringIO(json.dumps(_records()))
    assert len(read_records(buffer)) == 3


def test_unsupported_extension(tmp_path) -> None:
    path = tmp_path / 'transactions.xml'
    path.write_text('<xml/>', encoding='utf-8')
    with pytest.raises(SnapshotFormatError):
        read_records(path)


def test_build_frame_parses_days_and_keeps_bad_rows() -> None:
    frame = build_frame(records_to_snapshot(_records()))

    assert list(frame['Position']) == [0, 1, 2]
    assert frame['Transaction Date'].iloc[0].date() == date(2024, 1, 2)
    assert pd.isna(frame['Transaction Date'].iloc[2])
    assert list(frame['Kind']) == ['expense', 'income', 'expense']
    assert list(frame['Payment Channel']) == ['cash', 'noncash', 'noncash']


def test_build_frame_of_empty_snapshot() -> None:
    frame = build_frame([])
    assert frame.empty
    assert 'Transaction Date' in frame.columns


def test_without_transaction_drops_only_that_id() -> None:
    snapshot = records_to_snapshot(_records())
    remaining = without_transaction(snapshot, 'a1')
    assert [txn.id for txn in remaining] == ['a2', 'a3']
    assert len(snapshot) == 3
    assert isinstance(remaining[0], Transaction)


def test_canonical_order_uses_time_then_id() -> None:
    snapshot = [
        Transaction('b', TransactionKind.EXPENSE, 'Dinner', 20, 'Food', '2024-01-01T19:00:00'),
        Transaction('c', TransactionKind.EXPENSE, 'Taxi', 8, 'Travel', '2024-01-01'),
        Transaction('a', TransactionKind.EXPENSE, 'Rent', 900, 'Rent', '2024-01-01'),
        Transaction('d', TransactionKind.EXPENSE, 'Odd', 1, 'Other', 'not-a-date'),
        Transaction('e', TransactionKind.EXPENSE, 'Coffee', 3, 'Food', '2024-01-02'),
    ]
    expected = ['e', 'b', 'a', 'c', 'd']

    assert list(canonical_order(build_frame(snapshot))['id']) == expected
    assert list(canonical_order(build_frame(snapshot[::-1]))['id']) == expected
    assert 'Timestamp' in build_frame(snapshot).columns
