"""Streamlit app for the Wallet Dashboard.

This module only renders: every number it shows comes from the record
store, budget tracker and aggregator.  To run the dashboard from the
command line::

    streamlit run wallet_dashboard/dashboard.py

or use ``run_dashboard.py`` at the project root.
"""

from __future__ import annotations

import os
import sys
from datetime import date
from typing import List

import pandas as pd
import streamlit as st

# Conditional imports to support execution both as part of a package
# and directly as a standalone script via ``streamlit run``.
if __package__:
    from . import aggregator as agg
    from . import visualization as viz
    from .balance import totals
    from .budget_tracker import BudgetAlert, BudgetHealth
    from .categories import PaymentMethod, categories_for, category_icon, category_label, payment_method_label
    from .config import DEFAULT_PAGE_SIZE, configure_logging
    from .errors import StorageError, ValidationError
    from .formatting import format_currency, format_date, format_percentage
    from .models import BudgetPeriod, Transaction, TransactionType
    from .notifications import build_notifications
    from .record_store import RecordStore
    from .repository import open_repository
else:
    CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
    PARENT_DIR = os.path.dirname(CURRENT_DIR)
    if PARENT_DIR not in sys.path:
        sys.path.insert(0, PARENT_DIR)
    from wallet_dashboard import aggregator as agg  # type: ignore
    from wallet_dashboard import visualization as viz  # type: ignore
    from wallet_dashboard.balance import totals  # type: ignore
    from wallet_dashboard.budget_tracker import BudgetAlert, BudgetHealth  # type: ignore
    from wallet_dashboard.categories import (  # type: ignore
        PaymentMethod, categories_for, category_icon, category_label, payment_method_label,
    )
    from wallet_dashboard.config import DEFAULT_PAGE_SIZE, configure_logging  # type: ignore
    from wallet_dashboard.errors import StorageError, ValidationError  # type: ignore
    from wallet_dashboard.formatting import format_currency, format_date, format_percentage  # type: ignore
    from wallet_dashboard.models import BudgetPeriod, Transaction, TransactionType  # type: ignore
    from wallet_dashboard.notifications import build_notifications  # type: ignore
    from wallet_dashboard.record_store import RecordStore  # type: ignore
    from wallet_dashboard.repository import open_repository  # type: ignore

TIMEFRAME_LABELS = {'Week': 'week', 'Month': 'month', 'Year': 'year'}
STATUS_BADGES = {
    BudgetHealth.NORMAL: '✅ On track',
    BudgetHealth.WARNING: '⚠️ Approaching limit',
    BudgetHealth.EXCEEDED: '🚨 Budget exceeded',
}


def _show_alert(alert: BudgetAlert) -> None:
    """Display a budget alert as a toast."""
    st.toast(f"{alert.title} {alert.message}")


def get_store() -> RecordStore:
    """Return the session's record store, creating it on first use."""
    store = st.session_state.get('record_store')
    if store is None:
        store = RecordStore(open_repository())
        store.add_listener(_show_alert)
        st.session_state['record_store'] = store
    return store


def transactions_table(transactions: List[Transaction]) -> pd.DataFrame:
    """Rows for the transactions table, newest first."""
    return pd.DataFrame([
        {
            'Date': format_date(t.date),
            'Category': f"{category_icon(t.category)} {category_label(t.category)}",
            'Description': t.description,
            'Type': t.type.value.title(),
            'Amount': format_currency(t.signed_amount),
            'Payment': payment_method_label(t.payment_method),
            'Location': t.location or '',
        }
        for t in transactions
    ])


def render_add_transaction(store: RecordStore) -> None:
    st.sidebar.header("Add transaction")
    txn_type = st.sidebar.radio(
        "Type", options=[t.value for t in TransactionType], format_func=str.title, horizontal=True
    )
    with st.sidebar.form("add_transaction", clear_on_submit=True):
        amount = st.number_input("Amount", min_value=0.0, step=100.0)
        category = st.selectbox("Category", options=categories_for(txn_type), format_func=category_label)
        description = st.text_input("Description")
        method = st.selectbox(
            "Payment method", options=[m.value for m in PaymentMethod], format_func=payment_method_label
        )
        location = st.text_input("Location (optional)")
        txn_date = st.date_input("Date", value=store.clock().date())
        submitted = st.form_submit_button("Add")
    if not submitted:
        return
    try:
        store.add_transaction({
            'amount': amount,
            'type': txn_type,
            'category': category,
            'description': description,
            'payment_method': method,
            'location': location,
            'date': txn_date,
        })
    except ValidationError as exc:
        st.sidebar.error(f"Invalid transaction: {exc}")
    except StorageError as exc:
        st.sidebar.error(f"Could not save transaction: {exc}")
    else:
        st.sidebar.success("Transaction added")


def render_overview(transactions: List[Transaction], today: date) -> None:
    label = st.radio("Timeframe", options=list(TIMEFRAME_LABELS), horizontal=True, index=0)
    buckets = agg.bucket_by_timeframe(transactions, TIMEFRAME_LABELS[label], today)
    st.plotly_chart(viz.create_spending_chart(buckets), use_container_width=True)
    left, right = st.columns(2)
    with left:
        st.plotly_chart(viz.create_category_pie_chart(agg.group_by_category(transactions)), use_container_width=True)
    with right:
        st.plotly_chart(viz.create_monthly_totals_chart(agg.monthly_totals(transactions)), use_container_width=True)


def render_budgets(store: RecordStore) -> None:
    with st.form("add_budget", clear_on_submit=True):
        cols = st.columns(3)
        category = cols[0].selectbox(
            "Category", options=categories_for(TransactionType.EXPENSE), format_func=category_label
        )
        limit = cols[1].number_input("Limit", min_value=0.0, step=1000.0)
        period = cols[2].selectbox("Period", options=[p.value for p in BudgetPeriod], format_func=str.title)
        submitted = st.form_submit_button("Save budget")
    if submitted:
        try:
            store.add_budget({'category': category, 'budget_limit': limit, 'period': period})
        except ValidationError as exc:
            st.error(f"Invalid budget: {exc}")
        except StorageError as exc:
            st.error(f"Could not save budget: {exc}")
        else:
            st.success(f"Budget saved for {category_label(category)}")

    statuses = store.budget_status()
    if not statuses:
        st.info("No budgets yet. Add one above to start tracking.")
        return
    st.plotly_chart(viz.create_budget_progress_chart(statuses), use_container_width=True)
    for status in statuses:
        cols = st.columns([3, 2, 2, 1])
        cols[0].markdown(f"**{category_icon(status.category)} {category_label(status.category)}** ({status.period.value})")
        cols[1].write(f"{format_currency(status.spent)} / {format_currency(status.limit)}")
        cols[2].write(f"{STATUS_BADGES[status.status]} ({format_percentage(status.percentage)})")
        if cols[3].button("Delete", key=f"delete_{status.category}"):
            store.delete_budget(status.category)
            st.rerun()


def render_transactions(transactions: List[Transaction]) -> None:
    if not transactions:
        st.info("No transactions recorded yet.")
        return
    total_pages = max(1, -(-len(transactions) // DEFAULT_PAGE_SIZE))
    page = st.number_input("Page", min_value=1, max_value=total_pages, value=1, step=1)
    start = (int(page) - 1) * DEFAULT_PAGE_SIZE
    st.dataframe(transactions_table(transactions[start:start + DEFAULT_PAGE_SIZE]), hide_index=True)
    st.caption(f"Page {int(page)} of {total_pages} ({len(transactions)} transactions)")


def render_report(transactions: List[Transaction]) -> None:
    cols = st.columns(2)
    start = cols[0].date_input("From", value=None)
    end = cols[1].date_input("To", value=None)
    selected = agg.filter_by_date_range(transactions, start, end)
    summary = totals(selected)
    metrics = st.columns(3)
    metrics[0].metric("Income", format_currency(summary.income))
    metrics[1].metric("Expenses", format_currency(summary.expense))
    metrics[2].metric("Net", format_currency(summary.balance))
    if selected:
        st.dataframe(transactions_table(selected), hide_index=True)


def main() -> None:
    """Entry point for the Streamlit app."""
    configure_logging()
    st.set_page_config(page_title="Wallet", page_icon="💰", layout="wide")
    st.title("💰 Wallet")

    try:
        store = get_store()
        render_add_transaction(store)
        transactions = store.list_transactions()
        summary = totals(transactions)
        limits = [s.as_category_limit() for s in store.budget_status()]
    except StorageError as exc:
        st.error(f"Storage unavailable: {exc}")
        st.stop()
        return

    metrics = st.columns(3)
    metrics[0].metric("Balance", format_currency(summary.balance))
    metrics[1].metric("Income", format_currency(summary.income))
    metrics[2].metric("Expenses", format_currency(summary.expense))

    notifications = build_notifications(summary.income, summary.expense, limits)
    if notifications:
        with st.expander(f"🔔 Notifications ({len(notifications)})", expanded=False):
            for note in notifications:
                st.markdown(f"{note.icon} {note.message}")

    overview_tab, budgets_tab, transactions_tab, report_tab = st.tabs([
        "📊 Overview",
        "🎯 Budgets",
        "🧾 Transactions",
        "📈 Reports",
    ])
    with overview_tab:
        render_overview(transactions, store.clock().date())
    with budgets_tab:
        render_budgets(store)
    with transactions_tab:
        render_transactions(transactions)
    with report_tab:
        render_report(transactions)


if __name__ == "__main__":  # pragma: no cover
    main()
