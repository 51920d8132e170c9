"""Snapshot handling: canonical working frames and file ingestion.

A snapshot is the immutable, date-descending sequence of
:class:`~expense_analytics.models.Transaction` records handed over by the
store.  Every analytics pass starts from :func:`build_frame`, which turns
the snapshot into a pandas DataFrame with parsed day-granularity dates and
a ``Timestamp`` column holding the full wall-clock time, used only for
ordering, and a ``Position`` column recording input order.

The ingestion helpers read CSV or JSON exports of the store so that the
engine can be driven from the command line or from tests.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from .dates import parse_day, parse_timestamp
from .logging_setup import get_logger
from .models import PaymentChannel, Transaction, TransactionKind

_logger = get_logger("expense_analytics.snapshot")

FRAME_COLUMNS = [
    'id',
    'Kind',
    'Title',
    'Amount',
    'Category',
    'Note',
    'Payment Channel',
    'Transaction Date',
    'Timestamp',
    'Position',
]

FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    'id': ('id', '_id'),
    'kind': ('kind', 'type'),
    'title': ('title',),
    'amount': ('amount',),
    'category': ('category',),
    'note': ('note',),
    'date': ('date',),
    'payment_channel': ('paymentChannel', 'payment_channel', 'paymentMethod', 'payment_method'),
}


class SnapshotFormatError(ValueError):
    """Raised when an exported snapshot row cannot become a transaction."""


# ---------------------------------------------------------------------------
# Working frame
# ---------------------------------------------------------------------------


def build_frame(snapshot: Sequence[Transaction]) -> pd.DataFrame:
    """Return the canonical working DataFrame for one computation pass.

    Unparseable dates become ``NaT``; the rows stay in the frame so that
    balances and category totals still see them.
    """
    rows = [
        {
            'id': txn.id,
            'Kind': TransactionKind.coerce(txn.kind).value,
            'Title': '' if txn.title is None else str(txn.title),
            'Amount': txn.amount,
            'Category': '' if txn.category is None else str(txn.category),
            'Note': txn.note,
            'Payment Channel': channel_of(txn).value,
            'Transaction Date': parse_day(txn.date),
            'Timestamp': parse_timestamp(txn.date),
            'Position': position,
        }
        for position, txn in enumerate(snapshot)
    ]
    if not rows:
        return _empty_frame()

    frame = pd.DataFrame(rows, columns=FRAME_COLUMNS)
    frame['Amount'] = pd.to_numeric(frame['Amount'], errors='coerce').fillna(0.0).astype(float)
    frame['Transaction Date'] = pd.to_datetime(frame['Transaction Date'], errors='coerce')
    frame['Timestamp'] = pd.to_datetime(frame['Timestamp'], errors='coerce')
    invalid = frame['Transaction Date'].isna()
    if invalid.any():
        _logger.debug("%d transactions have unparseable dates", int(invalid.sum()))
    return frame


def _empty_frame() -> pd.DataFrame:
    return pd.DataFrame({
        'id': pd.Series(dtype=object),
        'Kind': pd.Series(dtype=object),
        'Title': pd.Series(dtype=object),
        'Amount': pd.Series(dtype=float),
        'Category': pd.Series(dtype=object),
        'Note': pd.Series(dtype=object),
        'Payment Channel': pd.Series(dtype=object),
        'Transaction Date': pd.Series(dtype='datetime64[ns]'),
        'Timestamp': pd.Series(dtype='datetime64[ns]'),
        'Position': pd.Series(dtype=int),
    })


def channel_of(txn: Transaction) -> PaymentChannel:
    """Payment channel of ``txn``; absent or unrecognised values count as non-cash."""
    try:
        return PaymentChannel.coerce(txn.payment_channel)
    except ValueError:
        _logger.warning("Transaction %r has unknown payment channel %r; treating as non-cash",
                        txn.id, txn.payment_channel)
        return PaymentChannel.NON_CASH


def sort_snapshot(snapshot: Iterable[Transaction]) -> Tuple[Transaction, ...]:
    """Order transactions newest first, the way the store returns them.

    The sort is stable; records with unparseable dates go last.
    """
    def _key(txn: Transaction):
        day = parse_day(txn.date)
        return (1, 0) if day is None else (0, -day.toordinal())

    return tuple(sorted(snapshot, key=_key))


def without_transaction(snapshot: Sequence[Transaction], transaction_id: Any) -> Tuple[Transaction, ...]:
    """Snapshot as it looks after the store deletes ``transaction_id``."""
    return tuple(txn for txn in snapshot if txn.id != transaction_id)


# ---------------------------------------------------------------------------
# File ingestion
# ---------------------------------------------------------------------------


def read_records(path_or_buffer) -> List[Dict[str, Any]]:
    """Load a CSV or JSON export into a list of plain dictionaries."""
    if hasattr(path_or_buffer, 'read'):
        name = getattr(path_or_buffer, 'name', 'uploaded_file.json').lower()
        if name.endswith('.csv'):
            return _frame_records(pd.read_csv(path_or_buffer, dtype=str, keep_default_na=False))
        return _json_records(json.load(path_or_buffer))

    path = Path(path_or_buffer)
    ext = path.suffix.lower()
    if ext == '.json':
        with path.open('r', encoding='utf-8') as handle:
            return _json_records(json.load(handle))
    if ext in {'.csv', ''}:
        encodings = ['utf-8', 'utf-8-sig', 'latin-1']
        last_error: Optional[Exception] = None
        for encoding in encodings:
            try:
                df = pd.read_csv(path, dtype=str, keep_default_na=False, encoding=encoding)
            except UnicodeDecodeError as exc:
                last_error = exc
                continue
            return _frame_records(df)
        raise SnapshotFormatError(f"Unable to decode '{path}': {last_error}")
    raise SnapshotFormatError(f"Unsupported file extension '{ext}'.")


def _frame_records(df: pd.DataFrame) -> List[Dict[str, Any]]:
    df.columns = [str(col).strip() for col in df.columns]
    return df.to_dict(orient='records')


def _json_records(payload: Any) -> List[Dict[str, Any]]:
    if isinstance(payload, Mapping):
        payload = payload.get('transactions', [])
    if not isinstance(payload, list):
        raise SnapshotFormatError("Expected a list of transactions or an object with a 'transactions' list.")
    return [dict(item) for item in payload]


def records_to_snapshot(records: Iterable[Mapping[str, Any]]) -> Tuple[Transaction, ...]:
    """Coerce raw export rows into transactions, preserving their order."""
    transactions: List[Transaction] = []
    issues: List[str] = []
    for index, record in enumerate(records):
        transactions.append(_coerce_record(index, record, issues))
    for issue in issues:
        _logger.warning(issue)
    return tuple(transactions)


def _field(record: Mapping[str, Any], name: str) -> Any:
    for alias in FIELD_ALIASES[name]:
        if alias in record:
            value = record[alias]
            if isinstance(value, str):
                value = value.strip()
            if value == '' or (isinstance(value, float) and pd.isna(value)):
                return None
            return value
    return None


def _coerce_record(index: int, record: Mapping[str, Any], issues: List[str]) -> Transaction:
    try:
        kind = TransactionKind.coerce(_field(record, 'kind'))
        channel = PaymentChannel.coerce(_field(record, 'payment_channel'))
    except ValueError as exc:
        raise SnapshotFormatError(f"Row {index}: {exc}") from exc

    title = _field(record, 'title')
    category = _field(record, 'category')
    if title is None or category is None:
        raise SnapshotFormatError(f"Row {index}: 'title' and 'category' are required.")

    raw_amount = _field(record, 'amount')
    amount = pd.to_numeric(pd.Series([raw_amount]), errors='coerce').iloc[0]
    if pd.isna(amount):
        issues.append(f"Row {index}: unable to parse amount {raw_amount!r}; defaulted to 0.0.")
        amount = 0.0
    elif amount < 0:
        issues.append(f"Row {index}: negative amount {amount} stored as {abs(amount)}.")
        amount = abs(amount)

    raw_date = _field(record, 'date')
    if parse_day(raw_date) is None:
        issues.append(f"Row {index}: unable to parse date {raw_date!r}; excluded from time series.")

    txn_id = _field(record, 'id')
    return Transaction(
        id=index if txn_id is None else txn_id,
        kind=kind,
        title=str(title),
        amount=float(amount),
        category=str(category),
        date=raw_date,
        note=None if _field(record, 'note') is None else str(_field(record, 'note')),
        payment_channel=channel,
    )


def load_snapshot(path_or_buffer) -> Tuple[Transaction, ...]:
    """Read an export and return it as a date-descending snapshot."""
    snapshot = sort_snapshot(records_to_snapshot(read_records(path_or_buffer)))
    _logger.info("Loaded %d transactions", len(snapshot))
    return snapshot


def as_frame(source) -> pd.DataFrame:
    """Accept either a snapshot or a frame produced by :func:`build_frame`."""
    if isinstance(source, pd.DataFrame):
        return source
    return build_frame(source)


def canonical_order(frame: pd.DataFrame) -> pd.DataFrame:
    """Newest-first view of ``frame`` that does not depend on input order.

    Rows are ordered by full timestamp descending, then by ``id`` and
    finally by ``Position``.  Unparseable dates go last.
    """
    if frame.empty:
        return frame
    keyed = frame.assign(_id_key=frame['id'].map(str))
    ordered = keyed.sort_values(
        ['Timestamp', '_id_key', 'Position'],
        ascending=[False, True, True],
        kind='mergesort',
        na_position='last',
    )
    return ordered.drop(columns='_id_key')
