"""Plotly visualisation helpers for the wallet dashboard.

Each function accepts an object returned by :mod:`aggregator` or
:mod:`budget_tracker` and produces an interactive Plotly figure that
Streamlit renders via ``st.plotly_chart``.  Empty inputs produce an empty
figure titled "No data to display" rather than raising.
"""

from __future__ import annotations

from typing import Dict, Sequence

import numpy as np
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from .budget_tracker import BudgetStatus
from .categories import category_label
from .config import CURRENCY, EXCEEDED_THRESHOLD, WARNING_THRESHOLD
from .formatting import format_percentage

SERIES_COLORS = {
    'Income': '#22c55e',
    'Expense': '#ef4444',
    'Balance': '#3b82f6',
}
PIE_COLORS = ['#0088FE', '#00C49F', '#FFBB28', '#FF8042', '#8884D8', '#82CA9D']
STATUS_COLORS = {
    'normal': '#22c55e',
    'warning': '#f59e0b',
    'exceeded': '#ef4444',
}


def _empty_figure(title: str = "No data to display") -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title=title)
    return fig


def create_spending_chart(buckets: pd.DataFrame, title: str | None = None) -> go.Figure:
    """Area chart of income, expense and balance per bucket.

    Parameters
    ----------
    buckets : pandas.DataFrame
        Output of :func:`aggregator.bucket_by_timeframe`.
    title : str, optional
        Chart title.

    Returns
    -------
    plotly.graph_objects.Figure
        Three filled line traces sharing the bucket labels on the x axis.
    """
    if buckets.empty:
        return _empty_figure()
    fig = go.Figure()
    for column, color in SERIES_COLORS.items():
        fig.add_trace(go.Scatter(
            x=buckets['Label'],
            y=buckets[column],
            name=column,
            mode='lines',
            line=dict(color=color, width=2, shape='spline'),
            fill='tozeroy',
            hovertemplate=f"%{{x}}<br>{column}: {CURRENCY} %{{y:,.0f}}<extra></extra>",
        ))
    fig.update_layout(
        title=title or "Income vs expenses",
        xaxis_title="",
        yaxis_title=f"Amount ({CURRENCY})",
        legend=dict(orientation='h', yanchor='bottom', y=1.02),
        hovermode='x unified',
    )
    return fig


def create_category_pie_chart(spending: Dict[str, float], title: str | None = None) -> go.Figure:
    """Pie chart of expense totals by category.

    Parameters
    ----------
    spending : dict
        Mapping of category to total, as returned by
        :func:`aggregator.group_by_category`.
    title : str, optional
        Title for the chart.
    """
    if not spending:
        return _empty_figure()
    df = pd.DataFrame(
        [(category_label(c), v) for c, v in spending.items()],
        columns=["Category", "Value"],
    )
    fig = px.pie(df, names="Category", values="Value", color_discrete_sequence=PIE_COLORS)
    fig.update_layout(title=title or "Spending by category")
    return fig


def create_budget_progress_chart(statuses: Sequence[BudgetStatus], title: str | None = None) -> go.Figure:
    """Horizontal bars showing each budget's utilisation, capped at 100%."""
    if not statuses:
        return _empty_figure("No budgets to display")
    percentages = np.array([s.percentage for s in statuses], dtype=float)
    capped = np.minimum(percentages, 100.0)
    colors = np.select(
        [percentages >= EXCEEDED_THRESHOLD, percentages >= WARNING_THRESHOLD],
        [STATUS_COLORS['exceeded'], STATUS_COLORS['warning']],
        default=STATUS_COLORS['normal'],
    )
    labels = [category_label(s.category) for s in statuses]
    fig = go.Figure(go.Bar(
        x=capped,
        y=labels,
        orientation='h',
        marker_color=list(colors),
        text=[format_percentage(p) for p in percentages],
        textposition='auto',
    ))
    fig.update_layout(
        title=title or "Budget utilisation",
        xaxis=dict(title="Percent used", range=[0, 100]),
        yaxis_title="",
    )
    return fig


def create_monthly_totals_chart(monthly: pd.DataFrame, title: str | None = None) -> go.Figure:
    """Grouped bars of monthly income and expenses."""
    if monthly.empty:
        return _empty_figure()
    long_df = monthly.melt(
        id_vars="Month",
        value_vars=["Total Income", "Total Expenses"],
        var_name="Metric",
        value_name="Amount",
    )
    fig = px.bar(
        long_df,
        x="Month",
        y="Amount",
        color="Metric",
        barmode="group",
        color_discrete_map={
            "Total Income": SERIES_COLORS['Income'],
            "Total Expenses": SERIES_COLORS['Expense'],
        },
    )
    fig.update_layout(
        title=title or "Monthly totals",
        xaxis_title="Month",
        yaxis_title=f"Amount ({CURRENCY})",
    )
    return fig
