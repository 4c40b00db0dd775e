"""Configuration management for the finance tracker.

This module centralizes all configuration values including paths,
defaults, and environment variable overrides.
"""

from __future__ import annotations

import os
from pathlib import Path

# Base project root - assumes this file is in finance_tracker/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directories
DATA_DIR = Path(os.getenv("FINANCE_TRACKER_DATA_DIR", _PROJECT_ROOT / "data"))

# Database
DB_PATH = Path(
    os.getenv("FINANCE_TRACKER_DB_PATH", DATA_DIR / "transactions.db")
).resolve()

# Display currency for formatted amounts (single currency only)
CURRENCY = os.getenv("FINANCE_TRACKER_CURRENCY", "USD")
CURRENCY_SYMBOLS = {"USD": "$", "EUR": "€", "GBP": "£", "JPY": "¥"}

# Logging level used when ``configure_logging`` is called without one
LOG_LEVEL = os.getenv("FINANCE_TRACKER_LOG_LEVEL")

# Placeholder shown when the savings rate is undefined (zero income)
UNDEFINED_RATE_LABEL = "N/A"


def ensure_data_directories() -> None:
    """Create all required data directories if they don't exist."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)


def get_currency_symbol(currency: str | None = None) -> str:
    """Return the display symbol for ``currency`` (defaults to ``CURRENCY``)."""
    code = (currency or CURRENCY).upper()
    return CURRENCY_SYMBOLS.get(code, f"{code} ")
