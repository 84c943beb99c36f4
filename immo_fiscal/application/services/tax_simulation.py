"""Rental income impact simulation.

Compares the household income tax with and without the rental income,
adds the social levy on net rents and derives the net property profit.
Uses the bracket table per part, without quotient cap or décote.
"""

from __future__ import annotations

from collections.abc import Sequence

from immo_fiscal.core.exceptions import ValidationError
from immo_fiscal.core.logging import get_logger
from immo_fiscal.core.numeric import require_non_negative
from immo_fiscal.domain.calculator.brackets import resolve_brackets, total_tax
from immo_fiscal.domain.calculator.regimes import SOCIAL_TAX_RATE
from immo_fiscal.domain.models import RentalImpactResult, RentalRegimeChoice, TaxBracket

log = get_logger(__name__)

SALARY_ALLOWANCE_RATE = 0.10
MICRO_TAXABLE_SHARE = 0.70


def income_tax_by_parts(
    net_income: float,
    parts: float,
    brackets: Sequence[TaxBracket],
) -> float:
    """Bracket tax on the income per part, multiplied back by the parts."""
    return total_tax(net_income / parts, brackets) * parts


def rental_net_income(
    rents: float,
    charges: float,
    works: float,
    regime: RentalRegimeChoice,
) -> float:
    """Taxable rental income for the chosen regime."""
    if rents <= 0:
        return 0.0
    if regime is RentalRegimeChoice.MICRO:
        return rents * MICRO_TAXABLE_SHARE
    return max(rents - (charges + works), 0.0)


def simulate_rental_income_impact(
    gross_salary: float,
    parts: float,
    *,
    per_deductible: float = 0.0,
    rental_income: float = 0.0,
    rental_charges: float = 0.0,
    works: float = 0.0,
    regime: RentalRegimeChoice | str = RentalRegimeChoice.REEL,
    other_taxable_income: float = 0.0,
    brackets: Sequence[TaxBracket] | None = None,
) -> RentalImpactResult:
    """Simulate the tax with and without rental income.

    Raises:
        ValidationError: If the salary is not positive, parts < 1, an amount
            is negative or the regime is unknown.
    """
    gross_salary = require_non_negative("gross_salary", gross_salary)
    if gross_salary <= 0:
        raise ValidationError("gross_salary", gross_salary, "must be > 0")
    if parts < 1:
        raise ValidationError("parts", parts, "must be >= 1")
    per_deductible = require_non_negative("per_deductible", per_deductible)
    rental_income = require_non_negative("rental_income", rental_income)
    rental_charges = require_non_negative("rental_charges", rental_charges)
    works = require_non_negative("works", works)
    other_taxable_income = require_non_negative("other_taxable_income", other_taxable_income)
    try:
        regime = RentalRegimeChoice(regime)
    except ValueError:
        raise ValidationError("regime", regime, "expected 'micro' or 'reel'") from None

    brackets = resolve_brackets(brackets)

    taxable_salary = max(gross_salary - gross_salary * SALARY_ALLOWANCE_RATE - per_deductible, 0.0)
    rental_net = rental_net_income(rental_income, rental_charges, works, regime)

    income_without = taxable_salary + other_taxable_income
    income_with = income_without + rental_net

    ir_without = income_tax_by_parts(income_without, parts, brackets)
    ir_with = income_tax_by_parts(income_with, parts, brackets)
    social_levy = rental_net * SOCIAL_TAX_RATE

    result = RentalImpactResult(
        gross_salary=gross_salary,
        taxable_salary=taxable_salary,
        rental_income=rental_income,
        rental_charges=rental_charges,
        works=works,
        regime=regime,
        rental_net=rental_net,
        income_tax_without_rental=ir_without,
        income_tax_with_rental=ir_with,
        social_levy=social_levy,
        total_without_rental=ir_without,
        total_with_rental=ir_with + social_levy,
        effective_rate_without_rental=ir_without / income_without * 100 if income_without > 0 else 0.0,
        effective_rate_with_rental=ir_with / income_with * 100 if income_with > 0 else 0.0,
    )

    log.debug(
        "rental_impact_simulated",
        regime=regime.value,
        rental_net=rental_net,
        tax_delta=result.tax_delta,
    )
    return result
