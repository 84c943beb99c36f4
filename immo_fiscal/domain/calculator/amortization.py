"""Loan amortization engine.

Builds the per-year interest/principal table of a set of loans. Amortizing
loans are replayed month by month from their start date: interest of a month
is charged on the capital remaining before that month's payment, and only
the months of the requested year are summed into its row.

Three repayment models are supported:
- interest only (in fine): interest on the full capital, capital repaid at maturity
- amortizing, linear principal: constant capital share, declining installments
- amortizing, constant annuity: constant installment, rising capital share
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

import numpy_financial as npf

from immo_fiscal.core.exceptions import AmortizationError, ValidationError
from immo_fiscal.core.logging import get_logger
from immo_fiscal.core.numeric import active_months_in_year
from immo_fiscal.core.settings import get_settings
from immo_fiscal.domain.models import (
    AmortizationProfile,
    Loan,
    LoanInterestDetail,
    MonthlyEntry,
    YearlyInterestRow,
)

log = get_logger(__name__)


def annuity_payment(capital: float, monthly_rate: float, months: int) -> float:
    """Constant monthly installment (principal + interest).

    Falls back to capital / months when the rate is zero.
    """
    if capital <= 0 or months <= 0:
        return 0.0
    if monthly_rate <= 0:
        return capital / months
    return float(-npf.pmt(monthly_rate, months, capital))


def calculate_insurance(principal: float, annual_insurance_pct: float) -> float:
    """Monthly insurance premium on the initial capital."""
    if principal <= 0:
        return 0.0
    return (principal * (annual_insurance_pct / 100.0)) / 12.0


def _month_of(loan: Loan, index: int) -> tuple[int, int]:
    """(year, month) of the installment at 0-based index."""
    m0 = loan.start_date.month - 1 + index
    return loan.start_date.year + m0 // 12, m0 % 12 + 1


def _iter_installments(loan: Loan) -> Iterator[tuple[int, int, float, float, float]]:
    """Replay an amortizing loan from its first month.

    Yields:
        (year, month, interest, principal_paid, remaining_capital) per month

    Raises:
        AmortizationError: If a stored installment does not cover the first
            month's interest, so the capital would never be repaid.
    """
    n = loan.duration_months
    if n <= 0:
        return

    rate = loan.monthly_rate
    capital = loan.amount

    if loan.amortization_profile is AmortizationProfile.LINEAR_PRINCIPAL:
        monthly_principal = loan.amount / n
        for i in range(n):
            interest = capital * rate
            remaining = max(0.0, capital - monthly_principal)
            year, month = _month_of(loan, i)
            yield year, month, interest, capital - remaining, remaining
            capital = remaining
        return

    payment = loan.monthly_payment or annuity_payment(loan.amount, rate, n)
    if payment <= capital * rate:
        raise AmortizationError(
            f"Loan {loan.id!r}: installment {payment:.2f} does not cover "
            f"the first month's interest {capital * rate:.2f}"
        )
    for i in range(n):
        interest = capital * rate
        remaining = max(0.0, capital - (payment - interest))
        year, month = _month_of(loan, i)
        yield year, month, interest, capital - remaining, remaining
        capital = remaining


@dataclass
class YearAmounts:
    """One loan's totals for one calendar year."""

    interest: float = 0.0
    principal: float = 0.0
    insurance: float = 0.0
    remaining_capital: float = 0.0


Memo = dict[tuple[Loan, int], YearAmounts]


class LoanAmortizationEngine:
    """Per-year interest table for a portfolio of loans.

    Replays are memoized for the duration of one ``yearly_interest`` call,
    keyed by (loan, year). The memo is filled from a single pass over a loan's
    schedule, which sums months in the same order as a fresh replay, so
    memoized and fresh results are identical. The engine itself holds no
    state between calls.
    """

    def __init__(self, use_cache: bool | None = None):
        if use_cache is None:
            use_cache = get_settings().replay_cache_enabled
        self.use_cache = use_cache

    def yearly_interest(
        self,
        loans: Iterable[Loan | Mapping[str, Any]],
        start_year: int,
        end_year: int,
    ) -> list[YearlyInterestRow]:
        """Compute one row per year of [start_year, end_year].

        Args:
            loans: Loan models or persistence rows. Rows go through
                ``Loan.from_record``; models are used as given.
            start_year: First calendar year
            end_year: Last calendar year (inclusive)

        Returns:
            List of YearlyInterestRow, empty when start_year > end_year

        Raises:
            ValidationError: If a loan record is invalid
            AmortizationError: If a stored installment cannot repay its loan
        """
        for field, value in (("start_year", start_year), ("end_year", end_year)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValidationError(field, value, "must be an integer year")

        try:
            parsed = [Loan.from_record(loan) for loan in loans]
        except ValidationError as e:
            log.warning("loan_rejected", field=e.field, value=e.value, reason=e.reason)
            raise

        memo: Memo | None = {} if self.use_cache else None
        rows: list[YearlyInterestRow] = []
        for year in range(start_year, end_year + 1):
            details: list[LoanInterestDetail] = []
            for loan in parsed:
                if year < loan.start_date.year or year > loan.end_date.year:
                    continue
                try:
                    amounts = self.year_amounts(loan, year, memo)
                except AmortizationError as e:
                    log.warning("loan_schedule_rejected", loan_id=loan.id, error=str(e))
                    raise
                details.append(
                    LoanInterestDetail(
                        loan_id=loan.id,
                        loan_name=loan.name,
                        loan_type=loan.repayment_type.value,
                        interest=amounts.interest,
                        amount=loan.amount,
                        principal_paid=amounts.principal,
                        insurance=amounts.insurance,
                        remaining_capital=amounts.remaining_capital,
                    )
                )
            rows.append(
                YearlyInterestRow(
                    year=year,
                    total_interest=sum(d.interest for d in details),
                    total_principal=sum(d.principal_paid for d in details),
                    total_insurance=sum(d.insurance for d in details),
                    details=details,
                )
            )

        log.debug(
            "yearly_interest_computed",
            loans=len(parsed),
            start_year=start_year,
            end_year=end_year,
            memo_entries=0 if memo is None else len(memo),
        )
        return rows

    def year_amounts(self, loan: Loan, year: int, memo: Memo | None = None) -> YearAmounts:
        """Interest, principal and insurance of a loan for one year.

        ``memo`` is a caller-owned replay cache; without one the loan is
        replayed from its start.
        """
        first, last = active_months_in_year(loan.start_date, loan.end_date, year)
        if first == 0:
            return YearAmounts(remaining_capital=loan.amount if year < loan.start_date.year else 0.0)

        insurance = calculate_insurance(loan.amount, loan.annual_insurance_rate) * (last - first + 1)

        if loan.is_interest_only:
            return self._interest_only_year(loan, year, last - first + 1, insurance)

        if memo is None:
            return self._replay_year(loan, year, insurance)

        # every year between start and end holds at least one installment
        if (loan, year) not in memo:
            memo.update(_replay_by_year(loan))
        amounts = memo[(loan, year)]
        return YearAmounts(amounts.interest, amounts.principal, insurance, amounts.remaining_capital)

    def _interest_only_year(self, loan: Loan, year: int, months: int, insurance: float) -> YearAmounts:
        interest = loan.amount * (loan.annual_interest_rate / 100.0) * (months / 12)
        at_maturity = year == loan.end_date.year
        return YearAmounts(
            interest=interest,
            principal=loan.amount if at_maturity else 0.0,
            insurance=insurance,
            remaining_capital=0.0 if at_maturity else loan.amount,
        )

    def _replay_year(self, loan: Loan, year: int, insurance: float) -> YearAmounts:
        """Replay from the loan's start up to and including ``year``."""
        result = YearAmounts(insurance=insurance)
        for y, _month, interest, principal, remaining in _iter_installments(loan):
            if y > year:
                break
            if y == year:
                result.interest += interest
                result.principal += principal
                result.remaining_capital = remaining
        return result


def _replay_by_year(loan: Loan) -> Memo:
    """One pass over the schedule, summed per calendar year."""
    per_year: dict[int, YearAmounts] = {}
    for y, _month, interest, principal, remaining in _iter_installments(loan):
        amounts = per_year.setdefault(y, YearAmounts())
        amounts.interest += interest
        amounts.principal += principal
        amounts.remaining_capital = remaining
    return {(loan, y): amounts for y, amounts in per_year.items()}


def yearly_interest(
    loans: Iterable[Loan | Mapping[str, Any]],
    start_year: int,
    end_year: int,
) -> list[YearlyInterestRow]:
    """Stateless entry point: per-year interest table of the given loans."""
    return LoanAmortizationEngine().yearly_interest(loans, start_year, end_year)


def monthly_schedule(loan: Loan | Mapping[str, Any]) -> list[MonthlyEntry]:
    """Full month-by-month schedule of a loan."""
    loan = Loan.from_record(loan)
    premium = calculate_insurance(loan.amount, loan.annual_insurance_rate)

    if loan.is_interest_only:
        n = loan.duration_months
        monthly_interest = loan.amount * loan.monthly_rate
        entries = []
        for i in range(n):
            year, month = _month_of(loan, i)
            last = i == n - 1
            entries.append(
                MonthlyEntry(
                    year=year,
                    month=month,
                    interest=monthly_interest,
                    principal=loan.amount if last else 0.0,
                    insurance=premium,
                    remaining_capital=0.0 if last else loan.amount,
                )
            )
        return entries

    return [
        MonthlyEntry(
            year=year,
            month=month,
            interest=interest,
            principal=principal,
            insurance=premium,
            remaining_capital=remaining,
        )
        for year, month, interest, principal, remaining in _iter_installments(loan)
    ]


def total_interest_closed_form(loan: Loan | Mapping[str, Any]) -> float:
    """Total interest over the whole term, from the closed-form expressions."""
    loan = Loan.from_record(loan)
    n = loan.duration_months
    r = loan.monthly_rate

    if loan.is_interest_only:
        return loan.amount * (loan.annual_interest_rate / 100.0) * n / 12
    if r <= 0:
        return 0.0
    if loan.amortization_profile is AmortizationProfile.LINEAR_PRINCIPAL:
        return loan.amount * r * (n + 1) / 2
    payment = loan.monthly_payment or annuity_payment(loan.amount, r, n)
    return n * payment - loan.amount
