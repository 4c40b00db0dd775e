"""Formatting utilities for currency and percentage display."""

from __future__ import annotations

from typing import Optional, Union

from . import config


def format_currency(amount: Union[float, int], include_sign: bool = True, currency: Optional[str] = None) -> str:
    """Format a currency amount with thousands separators and two decimals.

    Negative amounts put the minus sign before the currency symbol.

    Args:
        amount: The amount to format
        include_sign: Whether to include the currency symbol
        currency: Currency code; defaults to ``config.CURRENCY``

    Returns:
        Formatted currency string (e.g., "$1,234.56" or "-$200.00")

    Example:
        >>> format_currency(1234.56)
        '$1,234.56'
        >>> format_currency(-200)
        '-$200.00'
        >>> format_currency(1234.56, include_sign=False)
        '1,234.56'
    """
    formatted = f"{abs(amount):,.2f}"
    symbol = config.get_currency_symbol(currency) if include_sign else ''
    prefix = '-' if amount < 0 else ''
    return f"{prefix}{symbol}{formatted}"


def format_rate(rate: Optional[int]) -> str:
    """Render a savings rate; ``None`` (undefined) renders as ``N/A``.

    Example:
        >>> format_rate(34)
        '34%'
        >>> format_rate(None)
        'N/A'
    """
    if rate is None:
        return config.UNDEFINED_RATE_LABEL
    return f"{rate}%"
