"""Exception types raised by the aggregation and reporting helpers."""

from __future__ import annotations


class FinanceTrackerError(Exception):
    """Base class for all errors raised by ``finance_tracker``."""


class ValidationError(FinanceTrackerError, ValueError):
    """Raised for malformed filter, window or record parameters."""


class DivisionUndefined(FinanceTrackerError, ZeroDivisionError):
    """Raised when a ratio is requested against a zero denominator."""
