"""Running balance over the transaction stream."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .models import Transaction


@dataclass(frozen=True)
class Totals:
    income: float
    expense: float

    @property
    def balance(self) -> float:
        return self.income - self.expense

    @property
    def spending_percentage(self) -> float:
        """Expenses as a percentage of income (0 when there is no income)."""
        return self.expense * 100.0 / self.income if self.income else 0.0


def compute_balance(transactions: Iterable[Transaction]) -> float:
    """Net balance: income adds, expense subtracts.  Empty input gives 0."""
    return float(sum(t.signed_amount for t in transactions))


def totals(transactions: Iterable[Transaction]) -> Totals:
    income = 0.0
    expense = 0.0
    for txn in transactions:
        if txn.is_income:
            income += txn.amount
        else:
            expense += txn.amount
    return Totals(income=income, expense=expense)


def apply_transaction(balance: float, transaction: Transaction) -> float:
    """Incrementally update a stored balance with one new transaction."""
    return balance + transaction.signed_amount
