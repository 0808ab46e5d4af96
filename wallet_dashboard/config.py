"""Configuration management for the wallet dashboard.

This module centralizes all configuration values including paths,
storage backend selection, and environment variable overrides.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

# Base project root - assumes this file is in wallet_dashboard/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directories
DATA_DIR = Path(os.getenv("WALLET_DATA_DIR", _PROJECT_ROOT / "data"))
STORE_DIR = DATA_DIR / "store"

# Database
DB_PATH = Path(
    os.getenv("WALLET_DB_PATH", DATA_DIR / "wallet.db")
).resolve()

# Storage backend: 'json', 'sqlite' or 'memory'
BACKEND = os.getenv("WALLET_BACKEND", "json").strip().lower()

CURRENCY = os.getenv("WALLET_CURRENCY", "RWF")

LOG_LEVEL = os.getenv("WALLET_LOG_LEVEL", "WARNING").upper()

# Budget utilisation thresholds, in percent of the limit
WARNING_THRESHOLD = 80.0
EXCEEDED_THRESHOLD = 100.0

# Overall spending (expenses as percent of income) notice level
SPENDING_NOTICE_THRESHOLD = 70.0

DEFAULT_PAGE_SIZE = 20
RECENT_TRANSACTIONS_LIMIT = 5


def ensure_data_directories() -> None:
    """Create all required data directories if they don't exist."""
    for directory in [DATA_DIR, STORE_DIR]:
        directory.mkdir(parents=True, exist_ok=True)


def get_db_path() -> str:
    """Get the database path as a string."""
    return str(DB_PATH)


def configure_logging(level: str | None = None) -> None:
    """Apply the configured log level to the package logger."""
    level_value = getattr(logging, (level or LOG_LEVEL).upper(), logging.WARNING)
    if not isinstance(level_value, int):
        level_value = logging.WARNING
    logging.basicConfig(
        level=level_value,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("wallet_dashboard").setLevel(level_value)
