"""Repositories that persist transactions, budgets and the balance scalar.

The aggregation code never touches a store directly: the record store is
handed a :class:`Repository` and goes through its ``load``/``save``
operations.  Three implementations are provided:

* :class:`KeyValueRepository` over any ``get``/``set`` mapping of JSON text,
  with :class:`InMemoryRepository` and :class:`JsonFileRepository` built on it
* :class:`~wallet_dashboard.db.SqliteRepository` for the relational backend
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Iterator, List, MutableMapping, Optional

from .config import BACKEND, DB_PATH, STORE_DIR, ensure_data_directories
from .errors import StorageError, ValidationError
from .models import Budget, Transaction

logger = logging.getLogger(__name__)

STORAGE_KEYS = {
    'transactions': 'wallet_transactions',
    'budgets': 'wallet_budgets',
    'balance': 'wallet_balance',
}


class Repository(ABC):
    """Persistence contract used by :class:`~wallet_dashboard.record_store.RecordStore`."""

    @abstractmethod
    def load_transactions(self) -> List[Transaction]:
        """Return every stored transaction."""

    @abstractmethod
    def save_transaction(self, transaction: Transaction) -> None:
        """Append a new transaction."""

    @abstractmethod
    def load_budgets(self) -> List[Budget]:
        """Return every stored budget."""

    @abstractmethod
    def save_budget(self, budget: Budget) -> None:
        """Insert a budget, replacing any budget for the same category."""

    @abstractmethod
    def delete_budget(self, category: str) -> None:
        """Remove the budget for ``category``; a missing budget is not an error."""

    @abstractmethod
    def load_balance(self) -> float:
        """Return the stored balance scalar (0 when never saved)."""

    @abstractmethod
    def save_balance(self, amount: float) -> None:
        """Persist the balance scalar."""


class KeyValueRepository(Repository):
    """Repository over a key-value store holding JSON text.

    Corrupt or mistyped values are treated as missing: the default (an
    empty list or 0) is returned and a warning is logged.
    """

    def __init__(self, store: Optional[MutableMapping[str, str]] = None):
        """Initialize the repository.

        Args:
            store: Mapping of key to JSON text.  Defaults to a new dict.
        """
        self.store: MutableMapping[str, str] = store if store is not None else {}

    def _get(self, key: str, default: Any, expected: Optional[tuple] = None) -> Any:
        try:
            raw = self.store.get(key)
        except UnicodeDecodeError as exc:
            logger.warning("Ignoring undecodable value for %s: %s", key, exc)
            return default
        if raw is None:
            return default
        try:
            value = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError, TypeError) as exc:
            logger.warning("Ignoring corrupt value for %s: %s", key, exc)
            return default
        expected = expected or (type(default),)
        if isinstance(value, bool) or not isinstance(value, expected):
            logger.warning("Ignoring %s: unexpected %s value", key, type(value).__name__)
            return default
        return value

    def _set(self, key: str, value: Any) -> None:
        self.store[key] = json.dumps(value)

    def _records(self, key: str) -> List[Dict[str, Any]]:
        return [r for r in self._get(key, []) if isinstance(r, dict)]

    def load_transactions(self) -> List[Transaction]:
        transactions: List[Transaction] = []
        for record in self._records(STORAGE_KEYS['transactions']):
            try:
                transactions.append(Transaction.from_record(record))
            except ValidationError as exc:
                logger.warning("Skipping invalid stored transaction %s: %s", record.get('id'), exc)
        return transactions

    def save_transaction(self, transaction: Transaction) -> None:
        records = self._records(STORAGE_KEYS['transactions'])
        # Newest first
        records.insert(0, transaction.to_record())
        self._set(STORAGE_KEYS['transactions'], records)

    def load_budgets(self) -> List[Budget]:
        budgets: List[Budget] = []
        for record in self._records(STORAGE_KEYS['budgets']):
            try:
                budgets.append(Budget.from_record(record))
            except ValidationError as exc:
                logger.warning("Skipping invalid stored budget %s: %s", record.get('category'), exc)
        return budgets

    def save_budget(self, budget: Budget) -> None:
        records = self._records(STORAGE_KEYS['budgets'])
        for index, record in enumerate(records):
            if record.get('category') == budget.category:
                records[index] = budget.to_record()
                break
        else:
            records.append(budget.to_record())
        self._set(STORAGE_KEYS['budgets'], records)

    def delete_budget(self, category: str) -> None:
        records = self._records(STORAGE_KEYS['budgets'])
        remaining = [r for r in records if r.get('category') != category]
        if len(remaining) != len(records):
            self._set(STORAGE_KEYS['budgets'], remaining)

    def load_balance(self) -> float:
        return float(self._get(STORAGE_KEYS['balance'], 0.0, expected=(int, float)))

    def save_balance(self, amount: float) -> None:
        self._set(STORAGE_KEYS['balance'], float(amount))


class InMemoryRepository(KeyValueRepository):
    """Dict-backed repository, used by tests and the ``memory`` backend."""

    def __init__(self):
        super().__init__({})


class JsonFileStore(MutableMapping[str, str]):
    """Key-value store keeping one ``<key>.json`` file per key in a directory."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def __getitem__(self, key: str) -> str:
        target = self._path(key)
        if not target.exists():
            raise KeyError(key)
        try:
            with target.open('r', encoding='utf-8') as handle:
                return handle.read()
        except OSError as exc:
            raise StorageError(f"Failed to read {target}: {exc}") from exc

    def __setitem__(self, key: str, value: str) -> None:
        target = self._path(key)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with target.open('w', encoding='utf-8') as handle:
                handle.write(value)
        except OSError as exc:
            raise StorageError(f"Failed to write {target}: {exc}") from exc

    def __delitem__(self, key: str) -> None:
        target = self._path(key)
        if not target.exists():
            raise KeyError(key)
        try:
            target.unlink()
        except OSError as exc:
            raise StorageError(f"Failed to delete {target}: {exc}") from exc

    def __iter__(self) -> Iterator[str]:
        if not self.directory.exists():
            return iter(())
        return iter(sorted(p.stem for p in self.directory.glob('*.json')))

    def __len__(self) -> int:
        return sum(1 for _ in self)


class JsonFileRepository(KeyValueRepository):
    """Key-value repository persisted as JSON files under ``directory``."""

    def __init__(self, directory: Optional[Path] = None):
        if directory is None:
            ensure_data_directories()
            directory = STORE_DIR
        super().__init__(JsonFileStore(directory))


def open_repository(backend: Optional[str] = None) -> Repository:
    """Create the repository selected by ``backend`` or ``WALLET_BACKEND``.

    Raises:
        ValueError: If the backend name is unknown
    """
    name = (backend or BACKEND).strip().lower()
    if name == 'json':
        return JsonFileRepository()
    if name == 'sqlite':
        from .db import SqliteRepository
        return SqliteRepository(DB_PATH)
    if name == 'memory':
        return InMemoryRepository()
    raise ValueError(f"Unknown storage backend '{name}'. Expected json, sqlite or memory")
