"""Income tax data models.

Bracket tables, household profiles and the immutable results returned by
the income tax engine.
"""

from __future__ import annotations

from enum import Enum

from pydantic import Field, computed_field

from .base import CoreModel


class HouseholdSituation(str, Enum):
    """Household composition used to derive quotient parts."""

    SINGLE = "single"
    COUPLE = "couple"
    FAMILY = "family"


class TaxBracket(CoreModel):
    """One slice of a progressive tax table. ``max`` of None is unbounded."""

    min: float = Field(..., ge=0, description="Lower bound in €")
    max: float | None = Field(None, description="Upper bound in €, None if unbounded")
    rate: float = Field(..., ge=0, le=1, description="Marginal rate as a fraction")


class FinancialProfile(CoreModel):
    """Household financial inputs for the yearly income tax computation."""

    salary: float = Field(default=0.0, ge=0, description="Annual taxable salary in €")
    rental_income_gross: float = Field(default=0.0, ge=0, description="Gross rents in €")
    rental_charges: float = Field(default=0.0, ge=0, description="Deductible rental charges in €")
    per_contribution: float = Field(default=0.0, ge=0, description="PER retirement contribution in €")
    child_count: int = Field(default=0, ge=0, description="Number of dependent children")
    household_situation: HouseholdSituation = Field(default=HouseholdSituation.SINGLE)


class QuotientBreakdown(CoreModel):
    """Intermediate figures of the family quotient step (unrounded)."""

    parts: float
    tax_per_part: float
    raw_tax: float
    basic_tax: float
    family_benefit: float
    max_benefit: float
    capped: bool
    tax: float


class TaxResult(CoreModel):
    """Final income tax, rounded to the unit."""

    tax: int = Field(..., ge=0, description="Income tax due in €")
    taxable_income: int = Field(..., description="Net taxable income in €")
    effective_rate: int = Field(default=0, description="Tax / taxable income, in %")


class TaxSnapshot(CoreModel):
    """Computed tax record stored per user and fiscal year by the caller."""

    year: int
    salary: float = Field(..., ge=0)
    rental_net: float
    computed_tax: int = Field(..., ge=0)


class RentalRegimeChoice(str, Enum):
    """Rental income netting used by the rental impact simulation."""

    MICRO = "micro"
    REEL = "reel"


class RentalImpactResult(CoreModel):
    """Tax with and without rental income for the same household."""

    gross_salary: float
    taxable_salary: float
    rental_income: float
    rental_charges: float
    works: float
    regime: RentalRegimeChoice
    rental_net: float
    income_tax_without_rental: float
    income_tax_with_rental: float
    social_levy: float
    total_without_rental: float
    total_with_rental: float
    effective_rate_without_rental: float
    effective_rate_with_rental: float

    @computed_field
    @property
    def tax_delta(self) -> float:
        """Additional tax caused by the rental income."""
        return self.total_with_rental - self.total_without_rental

    @computed_field
    @property
    def gross_profit(self) -> float:
        """Rents minus charges and works, before tax."""
        return self.rental_income - self.rental_charges - self.works

    @computed_field
    @property
    def net_profit(self) -> float:
        """Property profit after the additional tax."""
        return self.gross_profit - self.tax_delta
