"""Closed category and payment method enumerations.

Income and expense categories are kept apart so a transaction's category
can be validated against its type at the boundary.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List

FALLBACK_CATEGORY_ICON = '✨'
FALLBACK_PAYMENT_ICON = '💳'


class IncomeCategory(str, Enum):
    SALARY = 'salary'
    FREELANCE = 'freelance'
    INVESTMENTS = 'investments'
    GIFTS = 'gifts'
    OTHER_INCOME = 'other_income'


class ExpenseCategory(str, Enum):
    FOOD = 'food'
    TRANSPORTATION = 'transportation'
    SHOPPING = 'shopping'
    ENTERTAINMENT = 'entertainment'
    BILLS = 'bills'
    HOUSING = 'housing'
    HEALTHCARE = 'healthcare'
    EDUCATION = 'education'
    TRAVEL = 'travel'
    OTHER_EXPENSES = 'other_expenses'


class PaymentMethod(str, Enum):
    CASH = 'cash'
    CARD = 'card'
    BANK = 'bank'
    MOBILE = 'mobile'


CATEGORY_LABELS: Dict[str, str] = {
    IncomeCategory.SALARY.value: 'Salary',
    IncomeCategory.FREELANCE.value: 'Freelance',
    IncomeCategory.INVESTMENTS.value: 'Investments',
    IncomeCategory.GIFTS.value: 'Gifts',
    IncomeCategory.OTHER_INCOME.value: 'Other Income',
    ExpenseCategory.FOOD.value: 'Food & Dining',
    ExpenseCategory.TRANSPORTATION.value: 'Transportation',
    ExpenseCategory.SHOPPING.value: 'Shopping',
    ExpenseCategory.ENTERTAINMENT.value: 'Entertainment',
    ExpenseCategory.BILLS.value: 'Bills & Utilities',
    ExpenseCategory.HOUSING.value: 'Housing',
    ExpenseCategory.HEALTHCARE.value: 'Healthcare',
    ExpenseCategory.EDUCATION.value: 'Education',
    ExpenseCategory.TRAVEL.value: 'Travel',
    ExpenseCategory.OTHER_EXPENSES.value: 'Other Expenses',
}

CATEGORY_ICONS: Dict[str, str] = {
    IncomeCategory.SALARY.value: '💰',
    IncomeCategory.FREELANCE.value: '💼',
    IncomeCategory.INVESTMENTS.value: '📈',
    IncomeCategory.GIFTS.value: '🎁',
    IncomeCategory.OTHER_INCOME.value: '💵',
    ExpenseCategory.FOOD.value: '🍽️',
    ExpenseCategory.TRANSPORTATION.value: '🚗',
    ExpenseCategory.SHOPPING.value: '🛍️',
    ExpenseCategory.ENTERTAINMENT.value: '🎬',
    ExpenseCategory.BILLS.value: '📱',
    ExpenseCategory.HOUSING.value: '🏠',
    ExpenseCategory.HEALTHCARE.value: '🏥',
    ExpenseCategory.EDUCATION.value: '📚',
    ExpenseCategory.TRAVEL.value: '✈️',
    ExpenseCategory.OTHER_EXPENSES.value: '📝',
}

PAYMENT_METHOD_LABELS: Dict[str, str] = {
    PaymentMethod.CASH.value: 'Cash',
    PaymentMethod.CARD.value: 'Card',
    PaymentMethod.BANK.value: 'Bank Transfer',
    PaymentMethod.MOBILE.value: 'Mobile Payment',
}

PAYMENT_METHOD_ICONS: Dict[str, str] = {
    PaymentMethod.CASH.value: '💵',
    PaymentMethod.CARD.value: '💳',
    PaymentMethod.BANK.value: '🏦',
    PaymentMethod.MOBILE.value: '📱',
}


def categories_for(transaction_type: str) -> List[str]:
    """Return the category values allowed for a transaction type.

    Example:
        >>> categories_for('income')[:2]
        ['salary', 'freelance']
    """
    if getattr(transaction_type, 'value', transaction_type) == 'income':
        return [c.value for c in IncomeCategory]
    return [c.value for c in ExpenseCategory]


def category_label(category: str) -> str:
    value = getattr(category, 'value', category)
    return CATEGORY_LABELS.get(value, str(value).replace('_', ' ').title())


def category_icon(category: str) -> str:
    return CATEGORY_ICONS.get(getattr(category, 'value', category), FALLBACK_CATEGORY_ICON)


def payment_method_label(method: str) -> str:
    value = getattr(method, 'value', method)
    return f"{payment_method_icon(value)} {PAYMENT_METHOD_LABELS.get(value, str(value).title())}"


def payment_method_icon(method: str) -> str:
    return PAYMENT_METHOD_ICONS.get(getattr(method, 'value', method), FALLBACK_PAYMENT_ICON)
