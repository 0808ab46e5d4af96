from __future__ import annotations

import math
from datetime import date, datetime, timezone

import pandas as pd

from wallet_dashboard import aggregator as agg
from wallet_dashboard import visualization as viz
from wallet_dashboard.budget_tracker import BudgetHealth, BudgetStatus, compute_budget_status
from wallet_dashboard.models import BudgetPeriod, new_budget, new_transaction

NOW = datetime(2026, 10, 19, tzinfo=timezone.utc)


def _txn(amount, category='food'):
    return new_transaction(
        {'amount': amount, 'type': 'expense', 'category': category, 'description': 'x', 'date': '2026-10-18'},
        clock=lambda: NOW,
    )


def test_spending_chart_has_three_series() -> None:
    buckets = agg.bucket_by_timeframe([_txn(50)], 'week', date(2026, 10, 19))
    fig = viz.create_spending_chart(buckets)
    assert [trace.name for trace in fig.data] == ['Income', 'Expense', 'Balance']
    assert len(fig.data[0].x) == 7


def test_empty_inputs_give_placeholder_figures() -> None:
    assert viz.create_spending_chart(pd.DataFrame()).layout.title.text == "No data to display"
    assert viz.create_category_pie_chart({}).layout.title.text == "No data to display"
    assert viz.create_monthly_totals_chart(agg.monthly_totals([])).layout.title.text == "No data to display"
    assert viz.create_budget_progress_chart([]).layout.title.text == "No budgets to display"


def test_category_pie_chart_uses_labels() -> None:
    fig = viz.create_category_pie_chart({'food': 100.0, 'travel': 50.0})
    assert set(fig.data[0].labels) == {'Food & Dining', 'Travel'}


def test_budget_progress_chart_caps_and_colours() -> None:
    budgets = [
        new_budget({'category': 'food', 'budget_limit': 100}, clock=lambda: NOW),
        new_budget({'category': 'travel', 'budget_limit': 100}, clock=lambda: NOW),
        new_budget({'category': 'bills', 'budget_limit': 100}, clock=lambda: NOW),
    ]
    transactions = [_txn(150), _txn(85, 'travel'), _txn(10, 'bills')]
    statuses = compute_budget_status(budgets, transactions, NOW)
    fig = viz.create_budget_progress_chart(statuses)
    bar = fig.data[0]
    assert list(bar.x) == [100.0, 85.0, 10.0]
    assert list(bar.marker.color) == [
        viz.STATUS_COLORS['exceeded'],
        viz.STATUS_COLORS['warning'],
        viz.STATUS_COLORS['normal'],
    ]
    assert bar.text[0] == '150.0%'


def test_budget_progress_chart_labels_unbounded_utilisation() -> None:
    status = BudgetStatus(
        category='food', limit=0.0, spent=40.0, remaining=-40.0, percentage=math.inf,
        status=BudgetHealth.EXCEEDED, period=BudgetPeriod.MONTHLY,
        window_start=date(2026, 10, 1), window_end=date(2026, 10, 31),
    )
    bar = viz.create_budget_progress_chart([status]).data[0]
    assert list(bar.x) == [100.0]
    assert bar.text[0] == '∞%'
