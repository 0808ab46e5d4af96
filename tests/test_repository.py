from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest

from wallet_dashboard import repository as repo_module
from wallet_dashboard.errors import StorageError
from wallet_dashboard.models import new_budget, new_transaction
from wallet_dashboard.repository import (
    STORAGE_KEYS,
    InMemoryRepository,
    JsonFileRepository,
    JsonFileStore,
    KeyValueRepository,
    open_repository,
)

NOW = datetime(2026, 10, 19, tzinfo=timezone.utc)


def _txn(amount=100, when='2026-10-10'):
    return new_transaction(
        {'amount': amount, 'type': 'expense', 'category': 'food', 'description': 'lunch', 'date': when},
        clock=lambda: NOW,
    )


def _budget(category='food', limit=500):
    return new_budget({'category': category, 'budget_limit': limit}, clock=lambda: NOW)


def test_missing_keys_fall_back_to_defaults() -> None:
    repo = InMemoryRepository()
    assert repo.load_transactions() == []
    assert repo.load_budgets() == []
    assert repo.load_balance() == 0


def test_corrupt_json_falls_back_to_defaults() -> None:
    store = {
        STORAGE_KEYS['transactions']: '[{"id": ',
        STORAGE_KEYS['budgets']: '{"not": "a list"}',
        STORAGE_KEYS['balance']: 'NaN-ish',
    }
    repo = KeyValueRepository(store)
    assert repo.load_transactions() == []
    assert repo.load_budgets() == []
    assert repo.load_balance() == 0


def test_invalid_records_are_skipped() -> None:
    good = _txn().to_record()
    bad = {**_txn().to_record(), 'amount': -3}
    repo = KeyValueRepository({STORAGE_KEYS['transactions']: json.dumps([good, bad, 'junk'])})
    loaded = repo.load_transactions()
    assert [t.id for t in loaded] == [good['id']]


@pytest.mark.parametrize("bad_date", [['2026-10-01', '2026-10-02'], {'day': 1}])
def test_records_with_non_scalar_dates_are_skipped(bad_date) -> None:
    good = _txn().to_record()
    bad = {**_txn().to_record(), 'date': bad_date}
    repo = KeyValueRepository({STORAGE_KEYS['transactions']: json.dumps([good, bad])})
    assert [t.id for t in repo.load_transactions()] == [good['id']]


@pytest.mark.parametrize("bad_created_at", [['2026-10-01', '2026-10-02'], {'at': 1}])
def test_non_scalar_created_at_collapses_to_epoch(bad_created_at) -> None:
    good = _txn().to_record()
    odd = {**_txn().to_record(), 'created_at': bad_created_at}
    repo = KeyValueRepository({STORAGE_KEYS['transactions']: json.dumps([good, odd])})
    loaded = {t.id: t for t in repo.load_transactions()}
    assert set(loaded) == {good['id'], odd['id']}
    assert loaded[odd['id']].created_at == datetime.fromtimestamp(0, tz=timezone.utc)


def test_transactions_are_stored_newest_first() -> None:
    repo = InMemoryRepository()
    first, second = _txn(1), _txn(2)
    repo.save_transaction(first)
    repo.save_transaction(second)
    stored = json.loads(repo.store[STORAGE_KEYS['transactions']])
    assert [r['id'] for r in stored] == [second.id, first.id]


def test_save_budget_replaces_in_place() -> None:
    repo = InMemoryRepository()
    repo.save_budget(_budget('food', 100))
    repo.save_budget(_budget('travel', 200))
    repo.save_budget(_budget('food', 300))
    budgets = repo.load_budgets()
    assert [(b.category, b.budget_limit) for b in budgets] == [('food', 300), ('travel', 200)]


def test_delete_budget_without_match_leaves_store_untouched() -> None:
    repo = InMemoryRepository()
    repo.save_budget(_budget('food'))
    raw_before = repo.store[STORAGE_KEYS['budgets']]
    repo.delete_budget('travel')
    assert repo.store[STORAGE_KEYS['budgets']] == raw_before


def test_balance_accepts_integer_json() -> None:
    repo = KeyValueRepository({STORAGE_KEYS['balance']: '250'})
    assert repo.load_balance() == 250.0
    repo.save_balance(12.5)
    assert repo.load_balance() == 12.5


def test_json_file_repository_persists(tmp_path) -> None:
    repo = JsonFileRepository(tmp_path)
    txn = _txn()
    repo.save_transaction(txn)
    repo.save_budget(_budget())
    repo.save_balance(-100)

    assert (tmp_path / 'wallet_transactions.json').exists()
    reopened = JsonFileRepository(tmp_path)
    assert reopened.load_transactions() == [txn]
    assert reopened.load_budgets()[0].category == 'food'
    assert reopened.load_balance() == -100


def test_json_file_with_corrupt_content(tmp_path) -> None:
    (tmp_path / 'wallet_budgets.json').write_text('{{{', encoding='utf-8')
    assert JsonFileRepository(tmp_path).load_budgets() == []


def test_json_file_with_undecodable_bytes(tmp_path) -> None:
    (tmp_path / 'wallet_budgets.json').write_bytes(b'\xff\xfe[\x80]')
    repo = JsonFileRepository(tmp_path)
    assert repo.load_budgets() == []
    repo.save_budget(_budget())
    assert [b.category for b in repo.load_budgets()] == ['food']


def test_json_file_store_mapping(tmp_path) -> None:
    store = JsonFileStore(tmp_path / 'kv')
    assert len(store) == 0
    store['a'] = '1'
    store['b'] = '2'
    assert sorted(store) == ['a', 'b']
    assert store['a'] == '1'
    del store['a']
    assert 'a' not in store
    with pytest.raises(KeyError):
        store['missing']


def test_json_file_store_write_failure(tmp_path) -> None:
    blocker = tmp_path / 'blocker'
    blocker.write_text('', encoding='utf-8')
    store = JsonFileStore(blocker / 'nested')
    with pytest.raises(StorageError):
        store['wallet_balance'] = '1'


def test_open_repository(tmp_path, monkeypatch) -> None:
    assert isinstance(open_repository('memory'), InMemoryRepository)
    monkeypatch.setattr(repo_module, 'DB_PATH', tmp_path / 'wallet.db')
    from wallet_dashboard.db import SqliteRepository
    assert isinstance(open_repository('sqlite'), SqliteRepository)
    with pytest.raises(ValueError):
        open_repository('redis')
