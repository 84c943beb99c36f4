"""Core infrastructure: exceptions, logging, settings and numeric helpers."""

from .exceptions import (
    AmortizationError,
    ConfigurationError,
    FiscalCoreError,
    ValidationError,
)
from .settings import AppSettings, get_settings

__all__ = [
    "AppSettings",
    "get_settings",
    # Exceptions
    "FiscalCoreError",
    "ValidationError",
    "AmortizationError",
    "ConfigurationError",
]
