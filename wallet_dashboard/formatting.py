"""Formatting utilities for currency and date display."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Union

from .config import CURRENCY


def format_currency(amount: Union[float, int], currency: Optional[str] = None) -> str:
    """Format a currency amount without minor units.

    Args:
        amount: The amount to format
        currency: Currency code prefix, defaults to the configured currency

    Returns:
        Formatted currency string (e.g., "RWF 1,235")

    Example:
        >>> format_currency(1234.56)
        'RWF 1,235'
        >>> format_currency(-500, currency='USD')
        '-USD 500'
    """
    code = currency or CURRENCY
    sign = '-' if amount < 0 else ''
    return f"{sign}{code} {abs(amount):,.0f}"


def format_date(value: Union[date, datetime]) -> str:
    """Format a date as e.g. "October 19, 2026"."""
    return f"{value:%B} {value.day}, {value.year}"


def format_percentage(value: float) -> str:
    if value == float('inf'):
        return '∞%'
    return f"{value:.1f}%"
