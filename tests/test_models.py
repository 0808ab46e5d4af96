from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from wallet_dashboard.categories import PaymentMethod
from wallet_dashboard.errors import ValidationError
from wallet_dashboard.models import (
    Budget,
    BudgetPeriod,
    Transaction,
    TransactionType,
    new_budget,
    new_transaction,
)

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def _clock():
    return NOW


def _input(**overrides):
    data = {
        'amount': 2500,
        'type': 'expense',
        'category': 'food',
        'description': 'Groceries',
        'date': '2026-10-18',
        'payment_method': 'card',
    }
    data.update(overrides)
    return data


def test_new_transaction_assigns_id_and_timestamp() -> None:
    txn = new_transaction(_input(), clock=_clock)
    assert txn.id
    assert txn.created_at == NOW
    assert txn.type is TransactionType.EXPENSE
    assert txn.amount == 2500.0
    assert txn.date == date(2026, 10, 18)
    assert txn.payment_method is PaymentMethod.CARD


def test_new_transaction_ids_are_unique() -> None:
    first = new_transaction(_input(), clock=_clock)
    second = new_transaction(_input(), clock=_clock)
    assert first.id != second.id


@pytest.mark.parametrize('amount', [0, -10, 'abc', None, float('nan'), True])
def test_new_transaction_rejects_bad_amounts(amount) -> None:
    with pytest.raises(ValidationError):
        new_transaction(_input(amount=amount), clock=_clock)


@pytest.mark.parametrize('field', ['category', 'description'])
def test_new_transaction_rejects_empty_required_text(field) -> None:
    with pytest.raises(ValidationError):
        new_transaction(_input(**{field: '   '}), clock=_clock)


def test_category_must_match_transaction_type() -> None:
    with pytest.raises(ValidationError):
        new_transaction(_input(type='income', category='food'), clock=_clock)
    txn = new_transaction(_input(type='income', category='salary'), clock=_clock)
    assert txn.is_income


def test_new_transaction_rejects_unknown_type_and_method() -> None:
    with pytest.raises(ValidationError):
        new_transaction(_input(type='refund'), clock=_clock)
    with pytest.raises(ValidationError):
        new_transaction(_input(payment_method='cheque'), clock=_clock)


def test_new_transaction_rejects_unparseable_date() -> None:
    with pytest.raises(ValidationError):
        new_transaction(_input(date='not a date'), clock=_clock)


def test_new_transaction_defaults() -> None:
    txn = new_transaction(
        {'amount': 10, 'type': 'income', 'category': 'gifts', 'description': 'Birthday'},
        clock=_clock,
    )
    assert txn.date == NOW.date()
    assert txn.payment_method is PaymentMethod.CASH
    assert txn.location is None


def test_new_transaction_accepts_datetime_date() -> None:
    txn = new_transaction(_input(date=datetime(2026, 10, 1, 23, 59)), clock=_clock)
    assert txn.date == date(2026, 10, 1)


def test_signed_amount() -> None:
    assert new_transaction(_input(), clock=_clock).signed_amount == -2500.0
    income = new_transaction(_input(type='income', category='salary'), clock=_clock)
    assert income.signed_amount == 2500.0


def test_transaction_from_record_keeps_identity() -> None:
    txn = new_transaction(_input(location='Kigali'), clock=_clock)
    restored = Transaction.from_record(txn.to_record())
    assert restored == txn


def test_new_budget_validation() -> None:
    budget = new_budget({'category': 'food', 'limit': 500}, clock=_clock)
    assert budget.budget_limit == 500.0
    assert budget.period is BudgetPeriod.MONTHLY
    with pytest.raises(ValidationError):
        new_budget({'category': 'food', 'budget_limit': 0}, clock=_clock)
    with pytest.raises(ValidationError):
        new_budget({'category': '', 'budget_limit': 100}, clock=_clock)
    with pytest.raises(ValidationError):
        new_budget({'category': 'salary', 'budget_limit': 100}, clock=_clock)
    with pytest.raises(ValidationError):
        new_budget({'category': 'food', 'budget_limit': 100, 'period': 'daily'}, clock=_clock)


def test_budget_from_record_uses_stored_fields() -> None:
    record = {
        'id': 'b-1',
        'category': 'travel',
        'budget_limit': 1200,
        'period': 'yearly',
        'created_at': '2026-01-02T03:04:05+00:00',
    }
    budget = Budget.from_record(record)
    assert budget.id == 'b-1'
    assert budget.period is BudgetPeriod.YEARLY
    assert budget.created_at == datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
