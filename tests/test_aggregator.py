"""Unit tests for wallet_dashboard.aggregator."""

from __future__ import annotations

from datetime import date, datetime, timezone

import pandas as pd
import pytest

from wallet_dashboard import aggregator as agg
from wallet_dashboard.errors import ValidationError
from wallet_dashboard.models import new_transaction

NOW = datetime(2026, 10, 19, 18, 0, tzinfo=timezone.utc)
TODAY = NOW.date()


def _txn(amount, when, txn_type='expense', category=None):
    category = category or ('salary' if txn_type == 'income' else 'food')
    return new_transaction(
        {'amount': amount, 'type': txn_type, 'category': category, 'description': 'x', 'date': when},
        clock=lambda: NOW,
    )


def test_week_always_has_seven_buckets() -> None:
    result = agg.bucket_by_timeframe([], 'week', TODAY)
    assert len(result) == 7
    assert list(result.columns) == ['Period', 'Label', 'Income', 'Expense', 'Balance']
    assert result['Period'].iloc[0] == pd.Timestamp('2026-10-13')
    assert result['Period'].iloc[-1] == pd.Timestamp('2026-10-19')
    assert result['Label'].iloc[-1] == '19 Oct'
    assert (result[['Income', 'Expense', 'Balance']] == 0).all().all()


def test_week_buckets_sum_by_day() -> None:
    transactions = [
        _txn(1000, '2026-10-19', 'income'),
        _txn(300, '2026-10-19'),
        _txn(40, '2026-10-16'),
        _txn(60, '2026-10-16', category='travel'),
        _txn(999, '2026-10-12'),
        _txn(999, '2026-10-20'),
    ]
    result = agg.bucket_by_timeframe(transactions, 'week', NOW).set_index('Period')
    assert len(result) == 7
    today = result.loc[pd.Timestamp('2026-10-19')]
    assert today['Income'] == 1000
    assert today['Expense'] == 300
    assert today['Balance'] == 700
    assert result.loc[pd.Timestamp('2026-10-16'), 'Expense'] == 100
    assert result['Expense'].sum() == 400


def test_month_has_one_bucket_per_day() -> None:
    assert len(agg.bucket_by_timeframe([], 'month', TODAY)) == 31
    february = agg.bucket_by_timeframe([_txn(10, '2026-02-28')], 'month', date(2026, 2, 14))
    assert len(february) == 28
    assert february['Label'].iloc[0] == '1 Feb'
    assert february['Expense'].iloc[-1] == 10


def test_year_has_twelve_monthly_buckets() -> None:
    transactions = [
        _txn(500, '2025-11-15', 'income'),
        _txn(200, '2026-10-01'),
        _txn(999, '2025-10-31'),
    ]
    result = agg.bucket_by_timeframe(transactions, 'year', TODAY)
    assert len(result) == 12
    assert result['Period'].iloc[0] == pd.Timestamp('2025-11-01')
    assert result['Label'].iloc[0] == 'Nov'
    assert result['Label'].iloc[-1] == 'Oct'
    assert result['Income'].iloc[0] == 500
    assert result['Expense'].iloc[-1] == 200
    assert result['Expense'].sum() == 200


def test_unknown_timeframe_is_rejected() -> None:
    with pytest.raises(ValidationError):
        agg.bucket_by_timeframe([], 'decade', TODAY)


def test_group_by_category_sums_expenses_only() -> None:
    transactions = [
        _txn(100, '2026-10-01'),
        _txn(50, '2026-09-01'),
        _txn(75, '2026-10-02', category='travel'),
        _txn(5000, '2026-10-01', 'income'),
    ]
    result = agg.group_by_category(transactions)
    assert result == {'food': 150.0, 'travel': 75.0}
    assert sum(result.values()) == 225.0


def test_group_by_category_empty() -> None:
    assert agg.group_by_category([]) == {}
    assert agg.group_by_category([_txn(10, '2026-10-01', 'income')]) == {}


def test_monthly_totals() -> None:
    transactions = [
        _txn(1000, '2026-09-05', 'income'),
        _txn(400, '2026-09-10'),
        _txn(200, '2026-10-01'),
    ]
    result = agg.monthly_totals(transactions)
    assert list(result['Month']) == ['2026-09', '2026-10']
    assert list(result['Total Income']) == [1000.0, 0.0]
    assert list(result['Total Expenses']) == [400.0, 200.0]
    assert list(result['Net Amount']) == [600.0, -200.0]
    assert agg.monthly_totals([]).empty


def test_filter_by_date_range_is_inclusive() -> None:
    transactions = [_txn(1, '2026-10-01'), _txn(2, '2026-10-10'), _txn(3, '2026-10-20')]
    selected = agg.filter_by_date_range(transactions, date(2026, 10, 1), '2026-10-10')
    assert [t.amount for t in selected] == [1, 2]
    assert len(agg.filter_by_date_range(transactions, None, None)) == 3
    assert [t.amount for t in agg.filter_by_date_range(transactions, start='2026-10-10')] == [2, 3]


def test_report_summary() -> None:
    transactions = [
        _txn(1000, '2026-10-05', 'income'),
        _txn(250, '2026-10-06'),
        _txn(999, '2026-09-01'),
    ]
    summary = agg.report_summary(transactions, '2026-10-01', '2026-10-31')
    assert summary.income == 1000
    assert summary.expense == 250
    assert summary.balance == 750


def test_transactions_frame_columns() -> None:
    df = agg.transactions_frame([_txn(10, '2026-10-01')])
    assert list(df.columns) == agg.FRAME_COLUMNS
    assert df['Transaction Date'].iloc[0] == pd.Timestamp('2026-10-01')
    assert df['Type'].iloc[0] == 'expense'
