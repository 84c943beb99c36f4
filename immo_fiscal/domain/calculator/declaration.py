"""Tax estimate used when saving a yearly declaration summary.

This is a separate approximation from ``income_tax.compute_tax``: cumulative
ceilings applied to salary plus net rental income, no quotient and no décote.
The two give different numbers and are kept apart on purpose.
"""

from __future__ import annotations

import math

from immo_fiscal.core.exceptions import ValidationError
from immo_fiscal.core.logging import get_logger
from immo_fiscal.core.numeric import require_non_negative, round_unit
from immo_fiscal.domain.models import TaxSnapshot

log = get_logger(__name__)

# (ceiling, rate) pairs, each slice starting at the previous ceiling
DECLARATION_TRANCHES: tuple[tuple[float, float], ...] = (
    (11294, 0.0),
    (28797, 0.11),
    (82341, 0.30),
    (177106, 0.41),
    (math.inf, 0.45),
)


def declaration_summary_tax(salary: float, rental_net: float) -> int:
    """Estimate the tax of a declaration from salary and net rental income."""
    salary = require_non_negative("salary", salary)
    income = salary + rental_net

    tax = 0.0
    previous_ceiling = 0.0
    for ceiling, rate in DECLARATION_TRANCHES:
        if income > previous_ceiling:
            tax += (min(income, ceiling) - previous_ceiling) * rate
        previous_ceiling = ceiling
    return round_unit(tax)


def build_tax_snapshot(year: int, salary: float, rental_net: float) -> TaxSnapshot:
    """Build the computed-tax record the caller persists per user and year."""
    if not isinstance(year, int) or year <= 0:
        raise ValidationError("year", year, "must be a positive calendar year")

    computed = declaration_summary_tax(salary, rental_net)
    log.debug("tax_snapshot_built", year=year, rental_net=rental_net, computed_tax=computed)
    return TaxSnapshot(
        year=year,
        salary=float(salary),
        rental_net=float(rental_net),
        computed_tax=computed,
    )
