"""Notification feed shown in the dashboard header.

Two sources feed it: overall expenses measured against income, and each
budget's utilisation.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List

from .budget_tracker import utilisation
from .categories import category_label
from .config import EXCEEDED_THRESHOLD, SPENDING_NOTICE_THRESHOLD, WARNING_THRESHOLD
from .formatting import format_currency
from .models import CategoryLimit


class Severity(str, Enum):
    CRITICAL = 'critical'
    HIGH = 'high'
    MEDIUM = 'medium'
    LOW = 'low'


@dataclass(frozen=True)
class Notification:
    id: str
    icon: str
    message: str
    severity: Severity


def spending_notifications(total_income: float, total_expenses: float) -> List[Notification]:
    # Without income there is no meaningful ratio to report
    if total_income <= 0:
        return []
    percentage = total_expenses * 100.0 / total_income
    if percentage >= EXCEEDED_THRESHOLD:
        return [Notification(
            id='exceed-100',
            icon='🚨',
            message=(
                f"Warning: Your expenses ({format_currency(total_expenses)}) have exceeded "
                f"your income ({format_currency(total_income)})"
            ),
            severity=Severity.CRITICAL,
        )]
    if percentage >= WARNING_THRESHOLD:
        return [Notification(
            id='exceed-80',
            icon='⚠️',
            message=f"Alert: Your expenses are at {percentage:.1f}% of your income",
            severity=Severity.HIGH,
        )]
    if percentage >= SPENDING_NOTICE_THRESHOLD:
        return [Notification(
            id='exceed-70',
            icon='⚠️',
            message=f"Notice: Your expenses have reached {percentage:.1f}% of your income",
            severity=Severity.MEDIUM,
        )]
    return []


def budget_notifications(limits: Iterable[CategoryLimit]) -> List[Notification]:
    notifications: List[Notification] = []
    for limit in limits:
        percentage = utilisation(limit.spent, limit.limit)
        label = category_label(limit.category)
        if percentage >= EXCEEDED_THRESHOLD:
            notifications.append(Notification(
                id=f'budget-exceed-{limit.category}',
                icon='💸',
                message=(
                    f"Budget Alert: Your {label} spending ({format_currency(limit.spent)}) "
                    f"has exceeded the budget limit ({format_currency(limit.limit)})"
                ),
                severity=Severity.CRITICAL,
            ))
        elif percentage >= WARNING_THRESHOLD:
            notifications.append(Notification(
                id=f'budget-warning-{limit.category}',
                icon='📊',
                message=f"Budget Warning: Your {label} spending is at {percentage:.1f}% of the budget",
                severity=Severity.HIGH,
            ))
    return notifications


def build_notifications(
    total_income: float,
    total_expenses: float,
    limits: Iterable[CategoryLimit],
) -> List[Notification]:
    """Overall spending notices first, then one entry per strained budget."""
    return spending_notifications(total_income, total_expenses) + budget_notifications(limits)
