"""Running balances split by payment channel."""

from __future__ import annotations

import numpy as np

from .models import BalanceSummary, PaymentChannel, TransactionKind
from .snapshot import as_frame


def channel_balances(source) -> BalanceSummary:
    """Scan the snapshot once: income adds to its channel, expense subtracts.

    Order does not matter and dates are not consulted, so transactions
    with unparseable dates are included.  An empty snapshot gives zeros.
    """
    frame = as_frame(source)
    if frame.empty:
        return BalanceSummary()

    is_income = (frame['Kind'] == TransactionKind.INCOME.value).to_numpy()
    signed = np.where(is_income, frame['Amount'].to_numpy(dtype=float), -frame['Amount'].to_numpy(dtype=float))
    is_cash = (frame['Payment Channel'] == PaymentChannel.CASH.value).to_numpy()

    return BalanceSummary(
        cash=float(signed[is_cash].sum()),
        non_cash=float(signed[~is_cash].sum()),
        income=float(frame['Amount'].to_numpy(dtype=float)[is_income].sum()),
        expense=float(frame['Amount'].to_numpy(dtype=float)[~is_income].sum()),
    )
