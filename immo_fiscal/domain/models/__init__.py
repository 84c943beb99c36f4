"""Data models for immo_fiscal."""

from .loan import (
    AmortizationProfile,
    Loan,
    LoanInterestDetail,
    MonthlyEntry,
    RepaymentType,
    YearlyInterestRow,
)
from .regime import FilingStatus, RealCharges, RegimeComparison, RegimeResult, RentalRegime
from .tax import (
    FinancialProfile,
    HouseholdSituation,
    QuotientBreakdown,
    RentalImpactResult,
    RentalRegimeChoice,
    TaxBracket,
    TaxResult,
    TaxSnapshot,
)

__all__ = [
    "AmortizationProfile",
    "Loan",
    "LoanInterestDetail",
    "MonthlyEntry",
    "RepaymentType",
    "YearlyInterestRow",
    "FilingStatus",
    "RealCharges",
    "RegimeComparison",
    "RegimeResult",
    "RentalRegime",
    "FinancialProfile",
    "HouseholdSituation",
    "QuotientBreakdown",
    "RentalImpactResult",
    "RentalRegimeChoice",
    "TaxBracket",
    "TaxResult",
    "TaxSnapshot",
]
