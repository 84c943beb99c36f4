"""Rental tax regime models (micro-foncier vs régime réel)."""

from __future__ import annotations

from enum import Enum

from pydantic import Field, computed_field

from .base import CoreModel


class RentalRegime(str, Enum):
    MICRO_FONCIER = "micro_foncier"
    REGIME_REEL = "regime_reel"


class FilingStatus(str, Enum):
    """Filing status used to pick the simplified flat income tax rate."""

    SINGLE = "single"
    MARRIED = "married"
    PACS = "pacs"

    @classmethod
    def _missing_(cls, value: object) -> FilingStatus | None:
        if isinstance(value, str) and value.strip().lower() in ("couple", "family"):
            return cls.MARRIED
        return None


class RealCharges(CoreModel):
    """Deductible charges of the régime réel, in € per year."""

    property_tax: float = Field(default=0.0, ge=0, description="Taxe foncière")
    insurance: float = Field(default=0.0, ge=0, description="Landlord insurance")
    maintenance: float = Field(default=0.0, ge=0, description="Maintenance and repairs")
    management_fees: float = Field(default=0.0, ge=0, description="Agency fees")
    loan_interest: float = Field(default=0.0, ge=0, description="Loan interest paid in the year")
    other: float = Field(default=0.0, ge=0, description="Other deductible charges")

    @computed_field
    @property
    def total(self) -> float:
        return (
            self.property_tax
            + self.insurance
            + self.maintenance
            + self.management_fees
            + self.loan_interest
            + self.other
        )


class RegimeResult(CoreModel):
    """Tax on rental income under one regime."""

    regime: RentalRegime
    gross_rental_income: float
    deduction: float
    taxable_income: float
    social_tax: float
    income_tax: float
    total_tax: float
    effective_rate: float = Field(default=0.0, description="Total tax / gross rents, in %")


class RegimeComparison(CoreModel):
    """Side-by-side micro-foncier and régime réel figures."""

    micro_foncier: RegimeResult
    regime_reel: RegimeResult

    @computed_field
    @property
    def is_micro_better(self) -> bool:
        return self.micro_foncier.total_tax < self.regime_reel.total_tax

    @computed_field
    @property
    def recommended(self) -> RentalRegime | None:
        """Regime with the lower total tax, None on a tie."""
        if self.micro_foncier.total_tax < self.regime_reel.total_tax:
            return RentalRegime.MICRO_FONCIER
        if self.regime_reel.total_tax < self.micro_foncier.total_tax:
            return RentalRegime.REGIME_REEL
        return None

    @computed_field
    @property
    def difference(self) -> float:
        return abs(self.micro_foncier.total_tax - self.regime_reel.total_tax)
