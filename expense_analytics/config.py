"""Configuration management for the expense analytics engine.

This module centralizes paths, display preferences and the JSON defaults
(palette, currency symbols, bucketing fallbacks), together with the
environment variable overrides.
"""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

# Base project root - assumes this file is in expense_analytics/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

DEFAULTS_PATH = Path(__file__).parent / "defaults.json"

# Data directories
DATA_DIR = Path(os.getenv("EXPENSE_ANALYTICS_DATA_DIR", _PROJECT_ROOT / "data"))

# Snapshot export consumed by the CLI when no path is given
SNAPSHOT_PATH = Path(
    os.getenv("EXPENSE_ANALYTICS_SNAPSHOT", DATA_DIR / "transactions.json")
).resolve()

# Display currency; cosmetic only, never used in computation
CURRENCY = os.getenv("EXPENSE_ANALYTICS_CURRENCY", "USD").upper()

LOG_LEVEL = os.getenv("EXPENSE_ANALYTICS_LOG_LEVEL")


def load_defaults(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load the packaged defaults file.

    Args:
        path: Alternative JSON file, mainly for tests.

    Returns:
        Dictionary with ``palette``, ``currency_symbols`` and
        ``bucketing`` sections.

    Raises:
        FileNotFoundError: If the defaults file doesn't exist.
        json.JSONDecodeError: If the defaults file is invalid JSON.

    Example:
        >>> load_defaults()['bucketing']['empty_range_days']
        7
    """
    target = path or DEFAULTS_PATH
    if not target.exists():
        raise FileNotFoundError(f"Defaults file not found: {target}")
    with open(target, 'r', encoding='utf-8') as f:
        return json.load(f)


@lru_cache(maxsize=None)
def _packaged_defaults() -> Dict[str, Any]:
    """Parsed ``defaults.json``, read once per process."""
    return load_defaults()


def get_config_value(*keys: str, default: Any = None) -> Any:
    """Get a nested defaults value by key path, or ``default`` when absent.

    Example:
        >>> get_config_value('currency_symbols', 'INR')
        '₹'
    """
    try:
        value: Any = _packaged_defaults()
        for key in keys:
            value = value[key]
        return value
    except (KeyError, TypeError, FileNotFoundError):
        return default


def get_currency_symbol(currency: Optional[str] = None) -> str:
    """Return the display symbol for ``currency`` (defaults to ``CURRENCY``)."""
    code = (currency or CURRENCY).upper()
    symbols = get_config_value('currency_symbols', default={}) or {}
    return symbols.get(code, '$')


def get_empty_range_days() -> int:
    """Days shown by the daily series when there is nothing to bucket."""
    return int(get_config_value('bucketing', 'empty_range_days', default=7))
