"""Exception types raised by the wallet core.

Deleting a budget that does not exist is not an error, so there is no
not-found exception here.
"""

from __future__ import annotations


class WalletError(Exception):
    """Base class for all wallet errors."""


class ValidationError(WalletError, ValueError):
    """Raised when user input fails validation (bad amount, empty field...)."""


class StorageError(WalletError):
    """Raised when a storage backend fails to read or write."""
