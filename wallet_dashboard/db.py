from __future__ import annotations

import logging
import math
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional

import pandas as pd

from .categories import CATEGORY_ICONS, ExpenseCategory, IncomeCategory, category_label
from .config import DB_PATH, DEFAULT_PAGE_SIZE
from .errors import StorageError, ValidationError
from .models import Budget, Transaction, TransactionType, utc_now
from .repository import Repository

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
PRAGMA journal_mode=WAL;
PRAGMA synchronous=NORMAL;

CREATE TABLE IF NOT EXISTS transactions (
    id TEXT PRIMARY KEY,
    amount REAL NOT NULL CHECK (amount > 0),
    type TEXT NOT NULL CHECK (type IN ('income', 'expense')),
    category TEXT NOT NULL,
    description TEXT NOT NULL,
    date TEXT NOT NULL,
    payment_method TEXT,
    location TEXT,
    created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS ix_txn_date ON transactions (date);
CREATE INDEX IF NOT EXISTS ix_txn_category ON transactions (category);
CREATE INDEX IF NOT EXISTS ix_txn_type ON transactions (type);

CREATE TABLE IF NOT EXISTS budgets (
    id TEXT PRIMARY KEY,
    category TEXT NOT NULL UNIQUE,
    budget_limit REAL NOT NULL CHECK (budget_limit > 0),
    period TEXT NOT NULL CHECK (period IN ('monthly', 'weekly', 'yearly')),
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS categories (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    type TEXT NOT NULL CHECK (type IN ('income', 'expense')),
    icon TEXT,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS user_balance (
    id TEXT PRIMARY KEY,
    current_balance REAL NOT NULL DEFAULT 0,
    last_updated TEXT NOT NULL
);
"""

MONTHLY_TOTALS_SQL = """
SELECT substr(date, 1, 7) AS Month,
       SUM(CASE WHEN type = 'income' THEN amount ELSE 0 END) AS "Total Income",
       SUM(CASE WHEN type = 'expense' THEN amount ELSE 0 END) AS "Total Expenses"
FROM transactions
GROUP BY substr(date, 1, 7)
ORDER BY Month
"""

BALANCE_ROW_ID = 'default'


@dataclass(frozen=True)
class TransactionPage:
    transactions: List[Transaction]
    total: int
    current_page: int
    total_pages: int


class SqliteRepository(Repository):
    """Relational backend storing records in a SQLite database."""

    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = Path(db_path or DB_PATH)
        self.init_db()

    @contextmanager
    def connect(self) -> Iterator[sqlite3.Connection]:
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(self.db_path))
        except (OSError, sqlite3.Error) as exc:
            raise StorageError(f"Could not open database {self.db_path}: {exc}") from exc
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise StorageError(f"Database operation failed: {exc}") from exc
        finally:
            conn.close()

    def init_db(self) -> None:
        with self.connect() as conn:
            conn.executescript(SCHEMA_SQL)
            self._seed_categories(conn)

    def _seed_categories(self, conn: sqlite3.Connection) -> None:
        """Insert the fixed income/expense categories if they are missing."""
        now = utc_now().isoformat()
        rows = [
            (c.value, category_label(c.value), 'income', CATEGORY_ICONS.get(c.value), now)
            for c in IncomeCategory
        ] + [
            (c.value, category_label(c.value), 'expense', CATEGORY_ICONS.get(c.value), now)
            for c in ExpenseCategory
        ]
        conn.executemany(
            "INSERT OR IGNORE INTO categories (id, name, type, icon, created_at) VALUES (?, ?, ?, ?, ?)",
            rows,
        )

    # Transactions

    def load_transactions(self) -> List[Transaction]:
        with self.connect() as conn:
            rows = conn.execute(
                "SELECT * FROM transactions ORDER BY date DESC, created_at DESC"
            ).fetchall()
        return self._to_transactions(rows)

    def save_transaction(self, transaction: Transaction) -> None:
        record = transaction.to_record()
        with self.connect() as conn:
            conn.execute(
                "INSERT INTO transactions (id, amount, type, category, description, date, "
                "payment_method, location, created_at) "
                "VALUES (:id, :amount, :type, :category, :description, :date, "
                ":payment_method, :location, :created_at)",
                record,
            )
        logger.debug("Inserted transaction %s", transaction.id)

    def page_transactions(
        self,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
        txn_type: Optional[str] = None,
    ) -> TransactionPage:
        """Fetch one page of transactions, newest date first.

        Args:
            page: 1-based page number
            limit: Page size
            txn_type: Optional 'income' or 'expense' filter

        Returns:
            TransactionPage with the rows plus total count and page count
        """
        if page < 1 or limit < 1:
            raise ValidationError("page and limit must be positive")
        where = ""
        params: list = []
        if txn_type is not None:
            where = " WHERE type = ?"
            params.append(TransactionType(getattr(txn_type, 'value', txn_type)).value)
        offset = (page - 1) * limit
        with self.connect() as conn:
            total = conn.execute(f"SELECT COUNT(*) FROM transactions{where}", params).fetchone()[0]
            rows = conn.execute(
                f"SELECT * FROM transactions{where} ORDER BY date DESC, created_at DESC LIMIT ? OFFSET ?",
                params + [limit, offset],
            ).fetchall()
        return TransactionPage(
            transactions=self._to_transactions(rows),
            total=total,
            current_page=page,
            total_pages=math.ceil(total / limit) if total else 0,
        )

    def monthly_totals(self) -> pd.DataFrame:
        with self.connect() as conn:
            df = pd.read_sql_query(MONTHLY_TOTALS_SQL, conn)
        df['Net Amount'] = df['Total Income'] - df['Total Expenses']
        return df

    def _to_transactions(self, rows) -> List[Transaction]:
        transactions: List[Transaction] = []
        for row in rows:
            try:
                transactions.append(Transaction.from_record(dict(row)))
            except ValidationError as exc:
                logger.warning("Skipping invalid transaction row %s: %s", row['id'], exc)
        return transactions

    # Budgets

    def load_budgets(self) -> List[Budget]:
        with self.connect() as conn:
            rows = conn.execute("SELECT * FROM budgets ORDER BY rowid").fetchall()
        budgets: List[Budget] = []
        for row in rows:
            try:
                budgets.append(Budget.from_record(dict(row)))
            except ValidationError as exc:
                logger.warning("Skipping invalid budget row %s: %s", row['category'], exc)
        return budgets

    def save_budget(self, budget: Budget) -> None:
        record = budget.to_record()
        with self.connect() as conn:
            updated = conn.execute(
                "UPDATE budgets SET id = :id, budget_limit = :budget_limit, period = :period, "
                "created_at = :created_at WHERE category = :category",
                record,
            ).rowcount
            if not updated:
                conn.execute(
                    "INSERT INTO budgets (id, category, budget_limit, period, created_at) "
                    "VALUES (:id, :category, :budget_limit, :period, :created_at)",
                    record,
                )

    def delete_budget(self, category: str) -> None:
        with self.connect() as conn:
            conn.execute("DELETE FROM budgets WHERE category = ?", (category,))

    # Categories

    def list_categories(self, txn_type: Optional[str] = None) -> pd.DataFrame:
        sql = "SELECT id, name, type, icon FROM categories"
        params: list = []
        if txn_type is not None:
            sql += " WHERE type = ?"
            params.append(TransactionType(getattr(txn_type, 'value', txn_type)).value)
        sql += " ORDER BY name"
        with self.connect() as conn:
            return pd.read_sql_query(sql, conn, params=params)

    # Balance

    def load_balance(self) -> float:
        with self.connect() as conn:
            row = conn.execute(
                "SELECT current_balance FROM user_balance WHERE id = ?", (BALANCE_ROW_ID,)
            ).fetchone()
        return float(row['current_balance']) if row else 0.0

    def save_balance(self, amount: float) -> None:
        with self.connect() as conn:
            conn.execute(
                "INSERT INTO user_balance (id, current_balance, last_updated) VALUES (?, ?, ?) "
                "ON CONFLICT(id) DO UPDATE SET current_balance = excluded.current_balance, "
                "last_updated = excluded.last_updated",
                (BALANCE_ROW_ID, float(amount), utc_now().isoformat()),
            )

