"""Financial calculation core of the property/tax dashboard.

Income tax (brackets, family quotient, décote), loan amortization tables
and rental tax regime comparison, as pure functions over plain records.
"""

from immo_fiscal.core.exceptions import (
    AmortizationError,
    ConfigurationError,
    FiscalCoreError,
    ValidationError,
)
from immo_fiscal.domain.calculator import (
    LoanAmortizationEngine,
    build_tax_snapshot,
    compare_regimes,
    compute_tax,
    compute_tax_for_profile,
    declaration_summary_tax,
    total_tax,
    yearly_interest,
)
from immo_fiscal.domain.models import Loan, TaxResult, YearlyInterestRow

__version__ = "0.1.0"

__all__ = [
    "LoanAmortizationEngine",
    "build_tax_snapshot",
    "compare_regimes",
    "compute_tax",
    "compute_tax_for_profile",
    "declaration_summary_tax",
    "total_tax",
    "yearly_interest",
    "Loan",
    "TaxResult",
    "YearlyInterestRow",
    # Exceptions
    "FiscalCoreError",
    "ValidationError",
    "AmortizationError",
    "ConfigurationError",
]
