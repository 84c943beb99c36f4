"""Rental income tax regimes: micro-foncier vs régime réel.

The income tax part uses a flat rate per filing status (11% single, 9%
married/pacs). This is a simplified proxy and intentionally differs from the
bracketed engine in ``income_tax``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Union

from immo_fiscal.core.exceptions import ValidationError
from immo_fiscal.core.logging import get_logger
from immo_fiscal.core.numeric import require_non_negative
from immo_fiscal.domain.models import (
    FilingStatus,
    RealCharges,
    RegimeComparison,
    RegimeResult,
    RentalRegime,
)

log = get_logger(__name__)

SOCIAL_TAX_RATE = 0.172
MICRO_FONCIER_ABATEMENT = 0.30

FLAT_INCOME_TAX_RATES = {
    FilingStatus.SINGLE: 0.11,
    FilingStatus.MARRIED: 0.09,
    FilingStatus.PACS: 0.09,
}

ChargesInput = Union[RealCharges, Mapping[str, Any], float, int]


def flat_income_tax_rate(status: FilingStatus | str) -> float:
    """Flat income tax proxy for a filing status."""
    try:
        return FLAT_INCOME_TAX_RATES[FilingStatus(status)]
    except ValueError:
        raise ValidationError(
            "situation", status, f"expected one of {[s.value for s in FilingStatus]}"
        ) from None


def _real_charges_total(charges: ChargesInput) -> float:
    if isinstance(charges, (int, float)) and not isinstance(charges, bool):
        return require_non_negative("real_charges", charges)
    return RealCharges.from_record(charges).total


def _regime_result(
    regime: RentalRegime,
    rental_income: float,
    deduction: float,
    taxable: float,
    rate: float,
) -> RegimeResult:
    social_tax = taxable * SOCIAL_TAX_RATE
    income_tax = taxable * rate
    total = income_tax + social_tax
    return RegimeResult(
        regime=regime,
        gross_rental_income=rental_income,
        deduction=deduction,
        taxable_income=taxable,
        social_tax=social_tax,
        income_tax=income_tax,
        total_tax=total,
        effective_rate=total / rental_income * 100 if rental_income > 0 else 0.0,
    )


def micro_foncier(rental_income: float, situation: FilingStatus | str = FilingStatus.SINGLE) -> RegimeResult:
    """Tax under the micro-foncier regime (flat 30% deemed deduction)."""
    rental_income = require_non_negative("rental_income", rental_income)
    deduction = rental_income * MICRO_FONCIER_ABATEMENT
    return _regime_result(
        RentalRegime.MICRO_FONCIER,
        rental_income,
        deduction,
        rental_income - deduction,
        flat_income_tax_rate(situation),
    )


def regime_reel(
    rental_income: float,
    charges: ChargesInput,
    situation: FilingStatus | str = FilingStatus.SINGLE,
) -> RegimeResult:
    """Tax under the régime réel (actual charges deducted)."""
    rental_income = require_non_negative("rental_income", rental_income)
    total_charges = _real_charges_total(charges)
    return _regime_result(
        RentalRegime.REGIME_REEL,
        rental_income,
        total_charges,
        max(0.0, rental_income - total_charges),
        flat_income_tax_rate(situation),
    )


def compare_regimes(
    rental_income: float,
    charges: ChargesInput,
    situation: FilingStatus | str = FilingStatus.SINGLE,
) -> RegimeComparison:
    """Compute both regimes and the recommended one (lower total tax)."""
    comparison = RegimeComparison(
        micro_foncier=micro_foncier(rental_income, situation),
        regime_reel=regime_reel(rental_income, charges, situation),
    )
    log.debug(
        "regimes_compared",
        rental_income=rental_income,
        micro_total=comparison.micro_foncier.total_tax,
        reel_total=comparison.regime_reel.total_tax,
        recommended=comparison.recommended.value if comparison.recommended else None,
    )
    return comparison
