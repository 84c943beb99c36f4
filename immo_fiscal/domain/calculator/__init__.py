"""Pure calculation functions: income tax, loan amortization, rental regimes."""

from .amortization import (
    LoanAmortizationEngine,
    annuity_payment,
    monthly_schedule,
    total_interest_closed_form,
    yearly_interest,
)
from .brackets import (
    TAX_BRACKETS_2025,
    register_brackets,
    resolve_brackets,
    tax_for_bracket,
    total_tax,
    validate_brackets,
)
from .declaration import build_tax_snapshot, declaration_summary_tax
from .income_tax import (
    apply_decote,
    apply_family_quotient,
    compute_decote,
    compute_tax,
    compute_tax_for_profile,
    household_parts,
)
from .regimes import compare_regimes, micro_foncier, regime_reel

__all__ = [
    "LoanAmortizationEngine",
    "annuity_payment",
    "monthly_schedule",
    "total_interest_closed_form",
    "yearly_interest",
    "TAX_BRACKETS_2025",
    "register_brackets",
    "resolve_brackets",
    "tax_for_bracket",
    "total_tax",
    "validate_brackets",
    "build_tax_snapshot",
    "declaration_summary_tax",
    "apply_decote",
    "apply_family_quotient",
    "compute_decote",
    "compute_tax",
    "compute_tax_for_profile",
    "household_parts",
    "compare_regimes",
    "micro_foncier",
    "regime_reel",
]
