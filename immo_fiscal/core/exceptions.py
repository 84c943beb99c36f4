"""Custom exceptions for immo_fiscal.

Domain-specific exception types raised by the calculation core.
"""

from __future__ import annotations

from typing import Any


class FiscalCoreError(Exception):
    """Base exception for all immo_fiscal errors."""
    pass


# --- Input Errors ---

class ValidationError(FiscalCoreError):
    """Invalid input value provided to the calculation core."""

    def __init__(self, field: str, value: Any, reason: str = ""):
        self.field = field
        self.value = value
        self.reason = reason
        msg = f"Invalid value for '{field}': {value!r}"
        if reason:
            msg += f" - {reason}"
        super().__init__(msg)


# --- Calculation Errors ---

class AmortizationError(FiscalCoreError):
    """Error replaying a loan amortization schedule."""
    pass


# --- Configuration Errors ---

class ConfigurationError(FiscalCoreError):
    """Error in tax tables or application configuration."""
    pass
