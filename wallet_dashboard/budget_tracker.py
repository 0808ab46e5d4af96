"""Budget utilisation tracking.

For each budget the amount spent is recomputed from the transaction list
every time it is asked for.  Nothing is cached, so ``spent`` can never
drift from the expense transactions inside the current period window.
"""

from __future__ import annotations

import calendar
import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from .config import EXCEEDED_THRESHOLD, WARNING_THRESHOLD
from .categories import category_label
from .formatting import format_currency
from .models import Budget, BudgetPeriod, CategoryLimit, Transaction, TransactionType

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime]


class BudgetHealth(str, Enum):
    NORMAL = 'normal'
    WARNING = 'warning'
    EXCEEDED = 'exceeded'


@dataclass(frozen=True)
class BudgetStatus:
    category: str
    limit: float
    spent: float
    remaining: float
    percentage: float
    status: BudgetHealth
    period: BudgetPeriod
    window_start: date
    window_end: date

    def as_category_limit(self) -> CategoryLimit:
        return CategoryLimit(category=self.category, limit=self.limit, spent=self.spent)


@dataclass(frozen=True)
class BudgetAlert:
    """One-shot event raised when an expense pushes a budget past a threshold."""

    category: str
    percentage: float
    status: BudgetHealth
    limit: float
    spent: float

    @property
    def title(self) -> str:
        if self.status is BudgetHealth.EXCEEDED:
            return "Budget Exceeded! 🚨"
        return "Budget Warning! ⚠️"

    @property
    def message(self) -> str:
        label = category_label(self.category)
        if self.status is BudgetHealth.EXCEEDED:
            return (
                f"Your {label} spending has exceeded the budget limit "
                f"of {format_currency(self.limit)}"
            )
        return f"You've used {self.percentage:.1f}% of your {label} budget"


def _as_date(value: DateLike) -> date:
    return value.date() if isinstance(value, datetime) else value


def period_window(period: BudgetPeriod, now: DateLike) -> Tuple[date, date]:
    """Return the inclusive (start, end) dates of the period containing ``now``.

    Monthly and yearly windows are calendar months and years.  Weekly
    windows run Monday to Sunday.
    """
    today = _as_date(now)
    period = BudgetPeriod(period)
    if period is BudgetPeriod.MONTHLY:
        last_day = calendar.monthrange(today.year, today.month)[1]
        return today.replace(day=1), today.replace(day=last_day)
    if period is BudgetPeriod.WEEKLY:
        start = today - timedelta(days=today.weekday())
        return start, start + timedelta(days=6)
    return date(today.year, 1, 1), date(today.year, 12, 31)


def spent_in_window(
    transactions: Iterable[Transaction],
    category: str,
    start: date,
    end: date,
) -> float:
    return float(sum(
        t.amount
        for t in transactions
        if t.type is TransactionType.EXPENSE
        and t.category == category
        and start <= t.date <= end
    ))


def utilisation(spent: float, limit: float) -> float:
    """Spent as a percentage of the limit.

    Limits are validated positive on creation; a zero limit still yields
    ``inf`` rather than raising.
    """
    if limit == 0:
        return math.inf
    return spent * 100.0 / limit


def classify(percentage: float) -> BudgetHealth:
    if percentage >= EXCEEDED_THRESHOLD:
        return BudgetHealth.EXCEEDED
    if percentage >= WARNING_THRESHOLD:
        return BudgetHealth.WARNING
    return BudgetHealth.NORMAL


def status_for(budget: Budget, transactions: Sequence[Transaction], now: DateLike) -> BudgetStatus:
    start, end = period_window(budget.period, now)
    spent = spent_in_window(transactions, budget.category, start, end)
    percentage = utilisation(spent, budget.budget_limit)
    return BudgetStatus(
        category=budget.category,
        limit=budget.budget_limit,
        spent=spent,
        remaining=budget.budget_limit - spent,
        percentage=percentage,
        status=classify(percentage),
        period=budget.period,
        window_start=start,
        window_end=end,
    )


def compute_budget_status(
    budgets: Iterable[Budget],
    transactions: Iterable[Transaction],
    now: DateLike,
) -> List[BudgetStatus]:
    """Compute spent, remaining, percentage and health for every budget.

    Args:
        budgets: Budgets to evaluate.
        transactions: The full transaction list.
        now: Reference time that selects each budget's period window.

    Returns:
        One :class:`BudgetStatus` per budget, in input order.

    Example:
        >>> statuses = compute_budget_status([food_budget], txns, date(2026, 10, 19))
        >>> statuses[0].status
        <BudgetHealth.WARNING: 'warning'>
    """
    snapshot = list(transactions)
    return [status_for(budget, snapshot, now) for budget in budgets]


def category_limits(
    budgets: Iterable[Budget],
    transactions: Iterable[Transaction],
    now: DateLike,
) -> List[CategoryLimit]:
    return [s.as_category_limit() for s in compute_budget_status(budgets, transactions, now)]


def alert_for(status: BudgetStatus) -> Optional[BudgetAlert]:
    if status.status is BudgetHealth.NORMAL:
        return None
    logger.info(
        "Budget %s at %.1f%% of %s (%s)",
        status.category, status.percentage, status.limit, status.status.value,
    )
    return BudgetAlert(
        category=status.category,
        percentage=status.percentage,
        status=status.status,
        limit=status.limit,
        spent=status.spent,
    )
