"""Personal income tax engine.

Composes the bracket table, the family quotient (quotient familial) with its
benefit cap, and the décote rebate into a single ``compute_tax`` entry point.

Internal steps keep full precision; rounding to the unit only happens on the
returned ``TaxResult``.
"""

from __future__ import annotations

from collections.abc import Sequence

from immo_fiscal.core.exceptions import ValidationError
from immo_fiscal.core.logging import get_logger
from immo_fiscal.core.numeric import require_non_negative, round_unit
from immo_fiscal.domain.models import (
    FinancialProfile,
    HouseholdSituation,
    QuotientBreakdown,
    TaxBracket,
    TaxResult,
)

from .brackets import resolve_brackets, tax_for_bracket, total_tax

log = get_logger(__name__)

# Plafonnement du quotient familial, per half part (2025)
MAX_BENEFIT_PER_HALF_PART = 1678.0

# Flat reference used as the base of the quotient cap
QUOTIENT_CAP_REFERENCE = TaxBracket(min=0, max=None, rate=0.30)

# Décote (single-person parameters)
DECOTE_THRESHOLD = 1840.0
DECOTE_BASE = 833.0
DECOTE_RATE = 0.4525

# PER: 90% of the contribution, capped at 10% of the salary
PER_DEDUCTIBLE_SHARE = 0.9
PER_SALARY_CAP = 0.10


def _situation(value: HouseholdSituation | str) -> HouseholdSituation:
    try:
        return HouseholdSituation(value)
    except ValueError:
        raise ValidationError(
            "situation", value, f"expected one of {[s.value for s in HouseholdSituation]}"
        ) from None


def _children(value: int) -> int:
    count = require_non_negative("children", value)
    if count != int(count):
        raise ValidationError("children", value, "must be a whole number")
    return int(count)


def household_parts(situation: HouseholdSituation | str, children: int = 0) -> float:
    """Number of quotient parts of a household.

    single -> 1, couple -> 2, family -> 2 + 0.5 per child.
    """
    situation = _situation(situation)
    children = _children(children)

    if situation is HouseholdSituation.COUPLE:
        return 2.0
    if situation is HouseholdSituation.FAMILY:
        return 2.0 + children * 0.5
    return 1.0


def apply_family_quotient(
    taxable_income: float,
    parts: float,
    brackets: Sequence[TaxBracket] | None = None,
) -> QuotientBreakdown:
    """Tax the income per part, rescale, and cap the quotient benefit.

    The cap compares against a flat 30% reference on the whole income and
    only applies to households with more than one part.
    """
    if parts < 1:
        raise ValidationError("parts", parts, "must be >= 1")
    brackets = resolve_brackets(brackets)

    tax_per_part = total_tax(taxable_income / parts, brackets)
    raw_tax = tax_per_part * parts

    basic_tax = tax_for_bracket(taxable_income, QUOTIENT_CAP_REFERENCE)
    family_benefit = basic_tax - raw_tax
    max_benefit = MAX_BENEFIT_PER_HALF_PART * (parts - 1) * 2

    capped = parts > 1 and family_benefit > max_benefit
    tax = basic_tax - max_benefit if capped else raw_tax

    return QuotientBreakdown(
        parts=parts,
        tax_per_part=tax_per_part,
        raw_tax=raw_tax,
        basic_tax=basic_tax,
        family_benefit=family_benefit,
        max_benefit=max_benefit,
        capped=capped,
        tax=tax,
    )


def compute_decote(tax: float) -> float:
    """Décote rebate for a pre-rebate tax amount (0 above the threshold)."""
    if tax <= DECOTE_THRESHOLD:
        return max(0.0, DECOTE_BASE - tax * DECOTE_RATE)
    return 0.0


def apply_decote(tax: float) -> float:
    """Tax after the décote, never negative."""
    return max(0.0, tax - compute_decote(tax))


def per_deduction(per_contribution: float, salary: float) -> float:
    """Deductible part of a PER contribution."""
    return min(per_contribution * PER_DEDUCTIBLE_SHARE, salary * PER_SALARY_CAP)


def compute_tax(
    salary: float,
    rental_income: float,
    rental_charges: float,
    per_contribution: float,
    children: int,
    situation: HouseholdSituation | str,
    *,
    brackets: Sequence[TaxBracket] | None = None,
) -> TaxResult:
    """Compute the household income tax.

    Args:
        salary: Annual taxable salary in €
        rental_income: Gross rents in €
        rental_charges: Deductible rental charges in €
        per_contribution: PER contribution in €
        children: Number of dependent children
        situation: single, couple or family
        brackets: Bracket table, defaults to the configured fiscal year

    Returns:
        TaxResult with tax, taxable income and effective rate (%), rounded

    Raises:
        ValidationError: On negative amounts or an unknown situation
    """
    try:
        salary = require_non_negative("salary", salary)
        rental_income = require_non_negative("rental_income", rental_income)
        rental_charges = require_non_negative("rental_charges", rental_charges)
        per_contribution = require_non_negative("per_contribution", per_contribution)
        parts = household_parts(situation, children)
    except ValidationError as e:
        log.warning("tax_input_rejected", field=e.field, value=e.value, reason=e.reason)
        raise

    rental_net = rental_income - rental_charges
    taxable_income = salary - per_deduction(per_contribution, salary) + rental_net

    quotient = apply_family_quotient(taxable_income, parts, brackets)
    tax = apply_decote(quotient.tax)

    effective_rate = round_unit(tax / taxable_income * 100) if taxable_income > 0 else 0

    log.debug(
        "income_tax_computed",
        taxable_income=taxable_income,
        parts=parts,
        pre_decote_tax=quotient.tax,
        quotient_capped=quotient.capped,
        tax=tax,
    )

    return TaxResult(
        tax=round_unit(tax),
        taxable_income=round_unit(taxable_income),
        effective_rate=effective_rate,
    )


def compute_tax_for_profile(
    profile: FinancialProfile | dict,
    *,
    brackets: Sequence[TaxBracket] | None = None,
) -> TaxResult:
    """Record-based wrapper around ``compute_tax``."""
    profile = FinancialProfile.from_record(profile)
    return compute_tax(
        profile.salary,
        profile.rental_income_gross,
        profile.rental_charges,
        profile.per_contribution,
        profile.child_count,
        profile.household_situation,
        brackets=brackets,
    )
