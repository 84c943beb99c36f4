"""Loan and yearly interest table models.

A loan is read-only input coming from the surrounding application; the
yearly rows are the per-year interest/principal table produced by the
amortization engine.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any

from pydantic import AliasChoices, Field, ValidationInfo, computed_field, field_validator

from immo_fiscal.core.numeric import total_months

from .base import CoreModel


class RepaymentType(str, Enum):
    """How the capital is repaid."""

    AMORTIZING = "amortizing"
    INTEREST_ONLY = "interest_only"

    @classmethod
    def _missing_(cls, value: object) -> RepaymentType | None:
        legacy = {
            "in fine": cls.INTEREST_ONLY,
            "in_fine": cls.INTEREST_ONLY,
            "amortissable": cls.AMORTIZING,
        }
        if isinstance(value, str):
            return legacy.get(value.strip().lower())
        return None


class AmortizationProfile(str, Enum):
    """Shape of the monthly installments of an amortizing loan."""

    LINEAR_PRINCIPAL = "linear_principal"
    CONSTANT_ANNUITY = "constant_annuity"

    @classmethod
    def _missing_(cls, value: object) -> AmortizationProfile | None:
        legacy = {
            "constant": cls.LINEAR_PRINCIPAL,
            "classique": cls.CONSTANT_ANNUITY,
        }
        if isinstance(value, str):
            return legacy.get(value.strip().lower())
        return None


class Loan(CoreModel):
    """Property loan as stored by the application.

    Build loans from persistence rows with ``Loan.from_record``, which reports
    invalid fields as the core ``ValidationError``. Direct construction
    (``Loan(...)``) is pydantic's own and raises ``pydantic.ValidationError``.
    """

    id: str = Field(default="", description="Loan identifier")
    name: str = Field(default="", description="Display name")
    amount: float = Field(..., gt=0, description="Borrowed capital in €")
    annual_interest_rate: float = Field(
        ...,
        ge=0,
        le=100,
        validation_alias=AliasChoices("annual_interest_rate", "annualInterestRate", "interest_rate"),
        description="Nominal annual rate %",
    )
    annual_insurance_rate: float = Field(
        default=0.0,
        ge=0,
        le=100,
        validation_alias=AliasChoices("annual_insurance_rate", "annualInsuranceRate", "insurance_rate"),
        description="Annual insurance rate % of the initial capital",
    )
    start_date: date
    end_date: date
    repayment_type: RepaymentType = Field(default=RepaymentType.AMORTIZING)
    amortization_profile: AmortizationProfile = Field(default=AmortizationProfile.CONSTANT_ANNUITY)
    monthly_payment: float | None = Field(None, ge=0, description="Stored P&I installment in €")

    @field_validator("id", "name", mode="before")
    @classmethod
    def _as_text(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("annual_insurance_rate", mode="before")
    @classmethod
    def _no_insurance(cls, v: Any) -> Any:
        return 0.0 if v is None else v

    @field_validator("repayment_type", mode="before")
    @classmethod
    def _repayment_label(cls, v: Any) -> Any:
        if v is None or v == "":
            return RepaymentType.AMORTIZING
        return RepaymentType(v) if isinstance(v, str) else v

    @field_validator("amortization_profile", mode="before")
    @classmethod
    def _profile_label(cls, v: Any) -> Any:
        if v is None or v == "":
            return AmortizationProfile.CONSTANT_ANNUITY
        return AmortizationProfile(v) if isinstance(v, str) else v

    @field_validator("monthly_payment", mode="before")
    @classmethod
    def _computed_when_zero(cls, v: Any) -> Any:
        # A stored payment of 0 means "not provided"
        return None if v in (None, "", 0) else v

    @field_validator("end_date")
    @classmethod
    def _end_after_start(cls, v: date, info: ValidationInfo) -> date:
        start = info.data.get("start_date")
        if start is not None and total_months(start, v) <= 0:
            raise ValueError("loan duration must be positive (end_date precedes start_date)")
        return v

    @computed_field
    @property
    def duration_months(self) -> int:
        """Term in months, first and last month included."""
        return total_months(self.start_date, self.end_date)

    @computed_field
    @property
    def monthly_rate(self) -> float:
        """Periodic interest rate as a fraction."""
        return self.annual_interest_rate / 100.0 / 12.0

    @property
    def is_interest_only(self) -> bool:
        return self.repayment_type is RepaymentType.INTEREST_ONLY


class LoanInterestDetail(CoreModel):
    """One loan's contribution to a calendar year."""

    loan_id: str
    loan_name: str
    loan_type: str
    interest: float
    amount: float = Field(..., description="Borrowed capital of the loan in €")
    principal_paid: float = 0.0
    insurance: float = 0.0
    remaining_capital: float = 0.0


class YearlyInterestRow(CoreModel):
    """Per-year interest/principal totals across all active loans."""

    year: int
    total_interest: float = 0.0
    total_principal: float = 0.0
    total_insurance: float = 0.0
    details: list[LoanInterestDetail] = Field(default_factory=list)


class MonthlyEntry(CoreModel):
    """One replayed installment of a loan schedule."""

    year: int
    month: int
    interest: float
    principal: float
    insurance: float
    remaining_capital: float
