"""Core record types for the wallet.

Transactions and budgets are immutable dataclasses.  All user input is
validated here, at the boundary, by :func:`new_transaction` and
:func:`new_budget`; everything downstream can assume well-formed records.

Dates are native :class:`datetime.date` objects and payment methods are
:class:`PaymentMethod` members.  Both are converted to plain strings only
when a record is serialised with ``to_record``.
"""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional

import pandas as pd

from .categories import ExpenseCategory, PaymentMethod, categories_for
from .errors import ValidationError

Clock = Callable[[], datetime]


class TransactionType(str, Enum):
    INCOME = 'income'
    EXPENSE = 'expense'


class BudgetPeriod(str, Enum):
    MONTHLY = 'monthly'
    WEEKLY = 'weekly'
    YEARLY = 'yearly'


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Transaction:
    id: str
    amount: float
    type: TransactionType
    category: str
    description: str
    date: date
    payment_method: PaymentMethod = PaymentMethod.CASH
    location: Optional[str] = None
    created_at: datetime = field(default_factory=utc_now)

    @property
    def is_income(self) -> bool:
        return self.type is TransactionType.INCOME

    @property
    def is_expense(self) -> bool:
        return self.type is TransactionType.EXPENSE

    @property
    def signed_amount(self) -> float:
        """Amount with the sign it contributes to the balance."""
        return self.amount if self.is_income else -self.amount

    def to_record(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'amount': self.amount,
            'type': self.type.value,
            'category': self.category,
            'description': self.description,
            'date': self.date.isoformat(),
            'payment_method': self.payment_method.value,
            'location': self.location,
            'created_at': self.created_at.isoformat(),
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> 'Transaction':
        """Rebuild a transaction from its stored form.

        Stored records are re-validated so a hand-edited or corrupt store
        cannot smuggle invalid values past the boundary.
        """
        validated = new_transaction(record)
        return cls(
            id=str(record.get('id') or validated.id),
            amount=validated.amount,
            type=validated.type,
            category=validated.category,
            description=validated.description,
            date=validated.date,
            payment_method=validated.payment_method,
            location=validated.location,
            created_at=parse_timestamp(record.get('created_at')),
        )


@dataclass(frozen=True)
class Budget:
    id: str
    category: str
    budget_limit: float
    period: BudgetPeriod = BudgetPeriod.MONTHLY
    created_at: datetime = field(default_factory=utc_now)

    def to_record(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'category': self.category,
            'budget_limit': self.budget_limit,
            'period': self.period.value,
            'created_at': self.created_at.isoformat(),
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> 'Budget':
        validated = new_budget(record)
        return cls(
            id=str(record.get('id') or validated.id),
            category=validated.category,
            budget_limit=validated.budget_limit,
            period=validated.period,
            created_at=parse_timestamp(record.get('created_at')),
        )


@dataclass(frozen=True)
class CategoryLimit:
    """Derived view of a budget: never persisted."""

    category: str
    limit: float
    spent: float


def new_transaction(data: Mapping[str, Any], clock: Optional[Clock] = None) -> Transaction:
    """Validate raw input and build a new :class:`Transaction`.

    Args:
        data: Mapping with ``amount``, ``type``, ``category``, ``description``
            and optionally ``date``, ``payment_method`` and ``location``.
        clock: Callable returning the current UTC time.

    Returns:
        A transaction with a fresh id and ``created_at`` timestamp.

    Raises:
        ValidationError: If any field is missing or invalid.
    """
    clock = clock or utc_now
    now = clock()
    txn_type = _parse_enum(TransactionType, data.get('type'), 'type')
    amount = _parse_positive(data.get('amount'), 'amount')
    category = _require_text(data.get('category'), 'category')
    allowed = categories_for(txn_type)
    if category not in allowed:
        raise ValidationError(
            f"Unknown {txn_type.value} category '{category}'. Expected one of: {', '.join(allowed)}"
        )
    description = _require_text(data.get('description'), 'description')
    raw_date = data.get('date')
    txn_date = now.date() if raw_date in (None, '') else parse_date(raw_date)
    method = _parse_enum(PaymentMethod, data.get('payment_method') or PaymentMethod.CASH, 'payment_method')
    location = data.get('location')
    location = location.strip() or None if isinstance(location, str) else None
    return Transaction(
        id=new_id(),
        amount=amount,
        type=txn_type,
        category=category,
        description=description,
        date=txn_date,
        payment_method=method,
        location=location,
        created_at=now,
    )


def new_budget(data: Mapping[str, Any], clock: Optional[Clock] = None) -> Budget:
    """Validate raw input and build a new :class:`Budget`.

    Accepts the limit under either ``budget_limit`` or ``limit``.
    """
    clock = clock or utc_now
    category = _require_text(data.get('category'), 'category')
    expense_categories = [c.value for c in ExpenseCategory]
    if category not in expense_categories:
        raise ValidationError(
            f"Budgets can only be set on expense categories, got '{category}'"
        )
    raw_limit = data.get('budget_limit', data.get('limit'))
    limit = _parse_positive(raw_limit, 'budget_limit')
    period = _parse_enum(BudgetPeriod, data.get('period') or BudgetPeriod.MONTHLY, 'period')
    return Budget(
        id=new_id(),
        category=category,
        budget_limit=limit,
        period=period,
        created_at=clock(),
    )


def parse_date(value: Any) -> date:
    """Convert a date-like value (date, datetime, ISO string) into a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, (str, int, float)) or isinstance(value, bool):
        raise ValidationError(f"Invalid date: {value!r}")
    try:
        ts = pd.to_datetime(value, errors='coerce')
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"Invalid date: {value!r}") from None
    if ts is None or pd.isna(ts):
        raise ValidationError(f"Invalid date: {value!r}")
    return ts.date()


def parse_timestamp(value: Any) -> datetime:
    """Convert a stored timestamp into an aware UTC datetime.

    Missing or unreadable timestamps collapse to the epoch so that they
    sort last among transactions sharing a date.
    """
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    epoch = datetime.fromtimestamp(0, tz=timezone.utc)
    if not isinstance(value, (str, int, float)) or isinstance(value, bool):
        return epoch
    try:
        ts = pd.to_datetime(value, errors='coerce', utc=True)
    except (TypeError, ValueError, OverflowError):
        return epoch
    if ts is None or pd.isna(ts):
        return epoch
    return ts.to_pydatetime()


def _parse_positive(value: Any, name: str) -> float:
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{name} is required and must be a positive number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(number) or number <= 0:
        raise ValidationError(f"{name} must be greater than 0, got {value!r}")
    return number


def _require_text(value: Any, name: str) -> str:
    value = getattr(value, 'value', value)
    if value is None or not str(value).strip():
        raise ValidationError(f"{name} cannot be empty")
    return str(value).strip()


def _parse_enum(enum_cls, value: Any, name: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        allowed = ', '.join(member.value for member in enum_cls)
        raise ValidationError(f"Invalid {name} {value!r}. Expected one of: {allowed}") from None
