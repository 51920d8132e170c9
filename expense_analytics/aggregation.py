"""Category level expense aggregation.

Totals only consider expense transactions.  Dates play no part here, so a
transaction with an unparseable date still counts towards its category.
"""

from __future__ import annotations

from typing import Dict, List

import pandas as pd

from .models import RankedCategory, TransactionKind
from .snapshot import as_frame, canonical_order


def _expense_rows(frame: pd.DataFrame) -> pd.DataFrame:
    return frame[frame['Kind'] == TransactionKind.EXPENSE.value]


def _category_series(source) -> pd.Series:
    """Summed expense amount per category, in first-seen canonical order."""
    expenses = _expense_rows(canonical_order(as_frame(source)))
    if expenses.empty:
        return pd.Series(dtype=float)
    return expenses.groupby('Category', sort=False)['Amount'].sum()


def category_totals(source) -> Dict[str, float]:
    """Map each expense category to its summed amount."""
    return {str(category): float(amount) for category, amount in _category_series(source).items()}


def ranked_categories(source) -> List[RankedCategory]:
    """Categories by summed amount, largest first; ties keep first-seen order."""
    ranked = _category_series(source).sort_values(ascending=False, kind='stable')
    return [RankedCategory(str(category), float(amount)) for category, amount in ranked.items()]


def total_expense(source) -> float:
    return float(_expense_rows(as_frame(source))['Amount'].sum())


def total_income(source) -> float:
    frame = as_frame(source)
    return float(frame.loc[frame['Kind'] == TransactionKind.INCOME.value, 'Amount'].sum())


def percentage_of_total(amount: float, total: float) -> float:
    """Share of ``total`` represented by ``amount`` as a percentage.

    Returns ``0.0`` instead of dividing by zero when ``total`` is zero or
    missing.
    """
    if total is None or pd.isna(total) or total == 0:
        return 0.0
    if amount is None or pd.isna(amount):
        return 0.0
    return float(amount) / float(total) * 100


def category_shares(source) -> pd.DataFrame:
    """Ranked categories with their share of total expense.

    Returns a DataFrame with ``Category``, ``Amount`` and ``Percentage``
    columns, one row per expense category.
    """
    ranked = ranked_categories(source)
    if not ranked:
        return pd.DataFrame(columns=['Category', 'Amount', 'Percentage'])
    total = sum(item.amount for item in ranked)
    return pd.DataFrame(
        [
            {
                'Category': item.category,
                'Amount': item.amount,
                'Percentage': percentage_of_total(item.amount, total),
            }
            for item in ranked
        ],
        columns=['Category', 'Amount', 'Percentage'],
    )
