"""Progressive bracket tax calculation.

Applies a French income tax bracket table (barème) to an income value.
Tables are validated when registered and when supplied by a caller.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from immo_fiscal.core.exceptions import ConfigurationError
from immo_fiscal.core.settings import get_settings
from immo_fiscal.domain.models import TaxBracket

BRACKET_TABLES: dict[int, tuple[TaxBracket, ...]] = {}


def tax_for_bracket(income: float, bracket: TaxBracket) -> float:
    """Tax due on the slice of income falling into one bracket.

    Args:
        income: Taxable income in €
        bracket: Bracket to apply

    Returns:
        Tax for this slice in € (unrounded)
    """
    width = max(0.0, income - bracket.min)
    if bracket.max is not None:
        width = min(width, bracket.max - bracket.min)
    return width * bracket.rate


def validate_brackets(
    brackets: Sequence[TaxBracket | Mapping[str, Any]],
) -> tuple[TaxBracket, ...]:
    """Check a bracket table is sorted, non-overlapping and ends unbounded.

    Entries may be TaxBracket models or plain mappings.

    Raises:
        ConfigurationError: If the table is malformed.
        ValidationError: If an entry is not a valid bracket.
    """
    if not brackets:
        raise ConfigurationError("Bracket table is empty")

    table = tuple(TaxBracket.from_record(b) for b in brackets)

    previous_max: float | None = None
    for i, bracket in enumerate(table):
        last = i == len(table) - 1
        if bracket.max is None and not last:
            raise ConfigurationError(f"Bracket {i} is unbounded but is not the last one")
        if bracket.max is not None and bracket.max < bracket.min:
            raise ConfigurationError(f"Bracket {i} has max < min")
        if previous_max is not None and bracket.min <= previous_max:
            raise ConfigurationError(f"Bracket {i} overlaps the previous bracket")
        previous_max = bracket.max

    if table[-1].max is not None:
        raise ConfigurationError("Last bracket must be unbounded")
    return table


def register_brackets(
    year: int,
    brackets: Sequence[TaxBracket | Mapping[str, Any]],
) -> tuple[TaxBracket, ...]:
    """Validate a fiscal year's table and make it available to brackets_for_year."""
    table = validate_brackets(brackets)
    BRACKET_TABLES[year] = table
    return table


# Barème 2025 (revenus 2024)
TAX_BRACKETS_2025 = register_brackets(2025, (
    TaxBracket(min=0, max=11294, rate=0.0),
    TaxBracket(min=11295, max=28797, rate=0.11),
    TaxBracket(min=28798, max=82341, rate=0.30),
    TaxBracket(min=82342, max=177106, rate=0.41),
    TaxBracket(min=177107, max=None, rate=0.45),
))


def total_tax(income: float, brackets: Sequence[TaxBracket] = TAX_BRACKETS_2025) -> float:
    """Sum the per-bracket tax, in bracket order."""
    tax = 0.0
    for bracket in brackets:
        tax += tax_for_bracket(income, bracket)
    return tax


def brackets_for_year(year: int) -> tuple[TaxBracket, ...]:
    """Bracket table of a fiscal year.

    Raises:
        ConfigurationError: If no table is known for that year.
    """
    try:
        return BRACKET_TABLES[year]
    except KeyError:
        raise ConfigurationError(
            f"No tax bracket table for fiscal year {year} (known: {sorted(BRACKET_TABLES)})"
        ) from None


def resolve_brackets(
    brackets: Sequence[TaxBracket | Mapping[str, Any]] | None = None,
) -> tuple[TaxBracket, ...]:
    """Caller-supplied table after validation, else the configured year's table."""
    if brackets is None:
        return brackets_for_year(get_settings().fiscal_year)
    return validate_brackets(brackets)
