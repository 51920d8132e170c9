"""Formatting utilities for amounts and percentages in text output."""

from __future__ import annotations

from typing import Union


def format_currency(amount: Union[float, int], symbol: str = '$', include_sign: bool = True) -> str:
    """Format a currency amount with thousands separators.

    Args:
        amount: The amount to format
        symbol: Display symbol for the configured currency
        include_sign: Whether to include the currency symbol

    Returns:
        Formatted currency string (e.g., "$1,234.56" or "-₹50.00")

    Example:
        >>> format_currency(1234.56)
        '$1,234.56'
        >>> format_currency(-50, symbol='₹')
        '-₹50.00'
    """
    formatted = f"{abs(amount):,.2f}"
    if include_sign:
        formatted = f"{symbol}{formatted}"
    return f"-{formatted}" if amount < 0 else formatted


def format_percentage(value: float) -> str:
    """Format a 0-100 percentage with one decimal place."""
    return f"{value:.1f}%"
