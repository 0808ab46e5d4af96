"""Time-bucketed and per-category aggregation for charts.

All functions accept a list of :class:`~wallet_dashboard.models.Transaction`
records and build a pandas DataFrame internally.  The charting helpers in
:mod:`visualization` consume the frames returned here.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Union

import pandas as pd

from .balance import Totals, totals
from .errors import ValidationError
from .models import Transaction, parse_date

DateLike = Union[date, datetime]

TIMEFRAMES = ('week', 'month', 'year')

FRAME_COLUMNS = [
    'id', 'Transaction Date', 'Type', 'Category', 'Description',
    'Amount', 'Payment Method', 'Location', 'Created At',
]
BUCKET_COLUMNS = ['Period', 'Label', 'Income', 'Expense', 'Balance']
MONTHLY_COLUMNS = ['Month', 'Total Income', 'Total Expenses', 'Net Amount']


def transactions_frame(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """Build a DataFrame view of the transactions with a datetime date column."""
    rows = [
        {
            'id': t.id,
            'Transaction Date': t.date,
            'Type': t.type.value,
            'Category': t.category,
            'Description': t.description,
            'Amount': t.amount,
            'Payment Method': t.payment_method.value,
            'Location': t.location,
            'Created At': t.created_at,
        }
        for t in transactions
    ]
    df = pd.DataFrame(rows, columns=FRAME_COLUMNS)
    df['Transaction Date'] = pd.to_datetime(df['Transaction Date'])
    df['Amount'] = pd.to_numeric(df['Amount']).astype(float)
    return df


def _bucket_starts(timeframe: str, today: date) -> pd.DatetimeIndex:
    end = pd.Timestamp(today)
    if timeframe == 'week':
        return pd.date_range(end=end, periods=7, freq='D')
    if timeframe == 'month':
        start = end.replace(day=1)
        return pd.date_range(start=start, end=start + pd.offsets.MonthEnd(0), freq='D')
    first_of_month = end.replace(day=1)
    return pd.date_range(end=first_of_month, periods=12, freq='MS')


def bucket_by_timeframe(
    transactions: Iterable[Transaction],
    timeframe: str,
    now: DateLike,
) -> pd.DataFrame:
    """Aggregate income, expense and balance into calendar buckets.

    Parameters
    ----------
    transactions : iterable of Transaction
        Full transaction list.
    timeframe : {'week', 'month', 'year'}
        ``week`` gives the 7 days ending today, ``month`` every day of the
        current month, ``year`` the 12 months ending with the current one.
    now : date or datetime
        Reference "today".

    Returns
    -------
    pandas.DataFrame
        One row per bucket, oldest first, with columns ``Period``,
        ``Label``, ``Income``, ``Expense`` and ``Balance``.  Transactions
        outside every bucket are dropped.
    """
    if timeframe not in TIMEFRAMES:
        raise ValidationError(
            f"Unknown timeframe '{timeframe}'. Expected one of: {', '.join(TIMEFRAMES)}"
        )
    today = now.date() if isinstance(now, datetime) else now
    starts = _bucket_starts(timeframe, today)
    freq = 'M' if timeframe == 'year' else 'D'

    df = transactions_frame(transactions)
    df['Period'] = df['Transaction Date'].dt.to_period(freq)
    pivot = (
        df.pivot_table(index='Period', columns='Type', values='Amount', aggfunc='sum', fill_value=0.0)
        if not df.empty
        else pd.DataFrame()
    )
    periods = starts.to_period(freq)
    pivot = pivot.reindex(index=periods, columns=['income', 'expense'], fill_value=0.0).fillna(0.0)

    # Chart labels: "Oct" for months, "19 Oct" for days
    labels = [f"{ts:%b}" if timeframe == 'year' else f"{ts.day} {ts:%b}" for ts in starts]
    result = pd.DataFrame({
        'Period': starts,
        'Label': labels,
        'Income': pivot['income'].to_numpy(dtype=float),
        'Expense': pivot['expense'].to_numpy(dtype=float),
    })
    result['Balance'] = result['Income'] - result['Expense']
    return result[BUCKET_COLUMNS]


def group_by_category(transactions: Iterable[Transaction]) -> Dict[str, float]:
    """Sum expense amounts by category.

    Categories without expenses do not appear in the result.

    Example:
        >>> group_by_category(txns)
        {'food': 450.0, 'travel': 120.0}
    """
    df = transactions_frame(transactions)
    expense = df[df['Type'] == 'expense']
    if expense.empty:
        return {}
    grouped = expense.groupby('Category')['Amount'].sum().sort_values(ascending=False)
    return {str(category): float(total) for category, total in grouped.items() if total > 0}


def monthly_totals(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """Income, expenses and net amount for each month that has transactions."""
    df = transactions_frame(transactions)
    if df.empty:
        return pd.DataFrame(columns=MONTHLY_COLUMNS)
    df['Month'] = df['Transaction Date'].dt.to_period('M')
    pivot = df.pivot_table(index='Month', columns='Type', values='Amount', aggfunc='sum', fill_value=0.0)
    pivot = pivot.reindex(columns=['income', 'expense'], fill_value=0.0).sort_index()
    result = pd.DataFrame({
        'Month': pivot.index.astype(str),
        'Total Income': pivot['income'].to_numpy(dtype=float),
        'Total Expenses': pivot['expense'].to_numpy(dtype=float),
    })
    result['Net Amount'] = result['Total Income'] - result['Total Expenses']
    return result[MONTHLY_COLUMNS]


def filter_by_date_range(
    transactions: Iterable[Transaction],
    start: Optional[DateLike] = None,
    end: Optional[DateLike] = None,
) -> List[Transaction]:
    """Keep transactions dated within [start, end]; a missing bound is open."""
    lower = parse_date(start) if start is not None else None
    upper = parse_date(end) if end is not None else None
    return [
        t for t in transactions
        if (lower is None or t.date >= lower) and (upper is None or t.date <= upper)
    ]


def report_summary(
    transactions: Iterable[Transaction],
    start: Optional[DateLike] = None,
    end: Optional[DateLike] = None,
) -> Totals:
    return totals(filter_by_date_range(transactions, start, end))
