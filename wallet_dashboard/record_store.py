"""Record store: the single entry point for wallet mutations.

``RecordStore`` validates input, writes through an injected
:class:`~wallet_dashboard.repository.Repository` and recomputes derived
values (balance, budget status) from the repository on demand.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Mapping, Optional

from . import balance as balance_tracker
from .budget_tracker import BudgetAlert, BudgetStatus, alert_for, compute_budget_status, status_for
from .config import RECENT_TRANSACTIONS_LIMIT
from .models import (
    Budget,
    Clock,
    Transaction,
    TransactionType,
    new_budget,
    new_transaction,
    utc_now,
)
from .repository import Repository

logger = logging.getLogger(__name__)

AlertListener = Callable[[BudgetAlert], None]


class RecordStore:
    """Holds transactions and budgets behind a repository.

    Transactions are append-only.  Budgets are upserted by category and
    deleted by category.
    """

    def __init__(self, repository: Repository, clock: Optional[Clock] = None):
        """Initialize the record store.

        Args:
            repository: Backend used for every read and write.
            clock: Callable returning the current UTC time, injectable for tests.
        """
        self.repository = repository
        self.clock = clock or utc_now
        self._listeners: List[AlertListener] = []

    def add_listener(self, listener: AlertListener) -> None:
        """Register a callback invoked with each :class:`BudgetAlert`."""
        self._listeners.append(listener)

    def add_transaction(self, data: Mapping[str, Any]) -> Transaction:
        """Validate and store a new transaction.

        The stored balance is updated incrementally.  For expenses, the
        budget covering the category is re-evaluated and listeners receive
        an alert when it is at or above the warning threshold.

        Raises:
            ValidationError: If the input is invalid
            StorageError: If the repository write fails
        """
        transaction = new_transaction(data, clock=self.clock)
        self.repository.save_transaction(transaction)
        new_balance = balance_tracker.apply_transaction(self.repository.load_balance(), transaction)
        self.repository.save_balance(new_balance)
        logger.info(
            "Added %s of %.2f in %s (balance %.2f)",
            transaction.type.value, transaction.amount, transaction.category, new_balance,
        )
        if transaction.type is TransactionType.EXPENSE:
            self._check_budget(transaction)
        return transaction

    def _check_budget(self, transaction: Transaction) -> None:
        budget = next(
            (b for b in self.repository.load_budgets() if b.category == transaction.category), None
        )
        if budget is None:
            return
        status = status_for(budget, self.repository.load_transactions(), self.clock())
        # Backdated expenses outside the window leave the budget unchanged
        if not status.window_start <= transaction.date <= status.window_end:
            return
        alert = alert_for(status)
        if alert is None:
            return
        for listener in self._listeners:
            listener(alert)

    def add_budget(self, data: Mapping[str, Any]) -> Budget:
        """Validate and upsert a budget by category.

        A budget replacing an existing one gets a new id, so callers must
        not hold on to budget ids across upserts.
        """
        budget = new_budget(data, clock=self.clock)
        self.repository.save_budget(budget)
        logger.info("Saved %s budget for %s: %.2f", budget.period.value, budget.category, budget.budget_limit)
        return budget

    def delete_budget(self, category: str) -> None:
        """Remove the budget for ``category``.  Missing budgets are ignored."""
        self.repository.delete_budget(category)
        logger.info("Deleted budget for %s", category)

    def list_transactions(self) -> List[Transaction]:
        """All transactions, newest date first (ties broken by creation time)."""
        transactions = self.repository.load_transactions()
        return sorted(transactions, key=lambda t: (t.date, t.created_at), reverse=True)

    def list_budgets(self) -> List[Budget]:
        return self.repository.load_budgets()

    def transactions_by_type(self, txn_type: Any) -> List[Transaction]:
        wanted = TransactionType(getattr(txn_type, 'value', txn_type))
        return [t for t in self.list_transactions() if t.type is wanted]

    def recent_transactions(self, limit: int = RECENT_TRANSACTIONS_LIMIT) -> List[Transaction]:
        return self.list_transactions()[:limit]

    def balance(self) -> float:
        """Balance recomputed from the full transaction list."""
        return balance_tracker.compute_balance(self.repository.load_transactions())

    def stored_balance(self) -> float:
        """Incrementally maintained balance scalar as persisted."""
        return self.repository.load_balance()

    def reconcile_balance(self) -> float:
        """Overwrite the stored balance with the recomputed one."""
        recomputed = self.balance()
        stored = self.repository.load_balance()
        if recomputed != stored:
            logger.warning("Stored balance %.2f drifted from %.2f; resetting", stored, recomputed)
        self.repository.save_balance(recomputed)
        return recomputed

    def budget_status(self, now=None) -> List[BudgetStatus]:
        return compute_budget_status(
            self.repository.load_budgets(),
            self.repository.load_transactions(),
            now or self.clock(),
        )
