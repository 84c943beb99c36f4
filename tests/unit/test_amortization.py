"""Unit tests for immo_fiscal.domain.calculator.amortization module."""

from datetime import date

import pytest

from immo_fiscal.core.exceptions import AmortizationError, ValidationError
from immo_fiscal.domain.calculator.amortization import (
    LoanAmortizationEngine,
    annuity_payment,
    calculate_insurance,
    monthly_schedule,
    total_interest_closed_form,
    yearly_interest,
)
from immo_fiscal.domain.models import Loan, YearlyInterestRow


class TestAnnuityPayment:
    """Tests for annuity_payment function."""

    def test_standard_loan(self):
        """200k€ over 20 years at 3.5%: around 1160€/month."""
        pmt = annuity_payment(200_000, 0.035 / 12, 240)
        assert 1150 < pmt < 1170

    def test_matches_closed_formula(self):
        r, n, c = 0.03 / 12, 180, 150_000
        expected = c * r * (1 + r) ** n / ((1 + r) ** n - 1)
        assert annuity_payment(c, r, n) == pytest.approx(expected)

    def test_zero_rate(self):
        """Zero rate falls back to capital / months."""
        assert annuity_payment(120_000, 0.0, 120) == 1000.0

    def test_zero_duration(self):
        assert annuity_payment(100_000, 0.003, 0) == 0.0


class TestInsurance:
    def test_monthly_premium(self):
        assert calculate_insurance(200_000, 0.36) == pytest.approx(60.0)

    def test_zero_principal(self):
        assert calculate_insurance(0, 0.36) == 0.0


class TestInterestOnly:
    """In fine loans: constant interest, capital repaid at maturity."""

    def test_full_years(self, interest_only_loan):
        rows = yearly_interest([interest_only_loan], 2020, 2029)
        assert len(rows) == 10
        for row in rows:
            assert row.total_interest == pytest.approx(3_600)

    def test_total_over_term(self, interest_only_loan):
        rows = yearly_interest([interest_only_loan], 2020, 2029)
        assert sum(r.total_interest for r in rows) == pytest.approx(36_000)

    def test_capital_repaid_at_maturity(self, interest_only_loan):
        rows = yearly_interest([interest_only_loan], 2028, 2029)
        assert rows[0].total_principal == 0.0
        assert rows[0].details[0].remaining_capital == 120_000
        assert rows[1].total_principal == 120_000
        assert rows[1].details[0].remaining_capital == 0.0

    def test_partial_years(self):
        """Start in April and end in March: 9 then 3 active months."""
        loan = Loan(
            id="p",
            amount=120_000,
            annual_interest_rate=3.0,
            start_date=date(2020, 4, 1),
            end_date=date(2029, 3, 1),
            repayment_type="interest_only",
        )
        rows = yearly_interest([loan], 2020, 2029)
        assert rows[0].total_interest == pytest.approx(2_700)
        assert rows[5].total_interest == pytest.approx(3_600)
        assert rows[-1].total_interest == pytest.approx(900)

    def test_start_and_end_in_same_year(self):
        loan = Loan(
            id="short",
            amount=12_000,
            annual_interest_rate=5.0,
            start_date=date(2024, 3, 1),
            end_date=date(2024, 10, 1),
            repayment_type="in fine",
        )
        rows = yearly_interest([loan], 2024, 2024)
        assert rows[0].total_interest == pytest.approx(12_000 * 0.05 * 8 / 12)


class TestLinearPrincipal:
    """Constant principal share, declining interest."""

    def test_first_year_interest(self, linear_loan):
        """sum_k 0.2% x (100000 - (k-1) x 416.67) over 12 months = 2345"""
        rows = yearly_interest([linear_loan], 2021, 2021)
        assert rows[0].total_interest == pytest.approx(2_345)
        assert rows[0].total_principal == pytest.approx(5_000)

    def test_principal_sums_to_amount(self, linear_loan):
        rows = yearly_interest([linear_loan], 2021, 2040)
        assert sum(r.total_principal for r in rows) == pytest.approx(100_000, abs=0.01)

    def test_final_capital_is_zero(self, linear_loan):
        rows = yearly_interest([linear_loan], 2040, 2040)
        assert rows[0].details[0].remaining_capital == pytest.approx(0.0, abs=1e-6)

    def test_interest_declines(self, linear_loan):
        rows = yearly_interest([linear_loan], 2021, 2040)
        interests = [r.total_interest for r in rows]
        assert interests == sorted(interests, reverse=True)

    def test_matches_closed_form(self, linear_loan):
        """C x r x (n + 1) / 2 = 100000 x 0.002 x 241 / 2 = 24100"""
        rows = yearly_interest([linear_loan], 2021, 2040)
        assert total_interest_closed_form(linear_loan) == pytest.approx(24_100)
        assert sum(r.total_interest for r in rows) == pytest.approx(24_100, abs=1e-2)


class TestConstantAnnuity:
    """Constant installments, rising principal share."""

    def test_matches_closed_form(self, annuity_loan):
        rows = yearly_interest([annuity_loan], 2024, 2043)
        total = sum(r.total_interest for r in rows)
        assert total == pytest.approx(total_interest_closed_form(annuity_loan), abs=1e-2)

    def test_principal_sums_to_amount(self, annuity_loan):
        rows = yearly_interest([annuity_loan], 2024, 2043)
        assert sum(r.total_principal for r in rows) == pytest.approx(200_000, abs=0.01)

    def test_insurance_on_initial_capital(self, annuity_loan):
        rows = yearly_interest([annuity_loan], 2024, 2025)
        assert rows[0].total_insurance == pytest.approx(720)
        assert rows[1].total_insurance == pytest.approx(720)

    def test_stored_payment_used(self, annuity_loan):
        """A stored installment equal to the annuity gives the same table."""
        payment = annuity_payment(200_000, annuity_loan.monthly_rate, 240)
        stored = annuity_loan.model_copy(update={"monthly_payment": payment})
        assert yearly_interest([stored], 2024, 2030) == yearly_interest([annuity_loan], 2024, 2030)

    def test_zero_rate_linear_fallback(self):
        loan = Loan(
            id="zero",
            amount=24_000,
            annual_interest_rate=0.0,
            start_date=date(2022, 1, 1),
            end_date=date(2023, 12, 1),
        )
        rows = yearly_interest([loan], 2022, 2023)
        assert all(r.total_interest == 0.0 for r in rows)
        assert rows[0].total_principal == pytest.approx(12_000)
        assert rows[1].details[0].remaining_capital == pytest.approx(0.0, abs=1e-9)

    def test_large_stored_payment_floors_at_zero(self):
        """A stored payment larger than needed pays the loan off early."""
        loan = Loan(
            id="fast",
            amount=10_000,
            annual_interest_rate=2.0,
            start_date=date(2022, 1, 1),
            end_date=date(2026, 12, 1),
            monthly_payment=2_000,
        )
        schedule = monthly_schedule(loan)
        assert all(m.remaining_capital >= 0 for m in schedule)
        assert schedule[-1].remaining_capital == 0.0

    @pytest.mark.parametrize("use_cache", [True, False])
    def test_stored_payment_below_interest(self, use_cache):
        """An installment that never repays the capital is rejected."""
        loan = Loan(
            id="stuck",
            amount=100_000,
            annual_interest_rate=6.0,
            start_date=date(2022, 1, 1),
            end_date=date(2041, 12, 1),
            monthly_payment=400,
        )
        with pytest.raises(AmortizationError, match="stuck"):
            LoanAmortizationEngine(use_cache=use_cache).yearly_interest([loan], 2022, 2023)
        with pytest.raises(AmortizationError):
            monthly_schedule(loan)


class TestYearRange:
    """Row layout and loan activity rules."""

    def test_one_row_per_year(self, linear_loan):
        rows = yearly_interest([linear_loan], 2018, 2022)
        assert [r.year for r in rows] == [2018, 2019, 2020, 2021, 2022]
        assert all(isinstance(r, YearlyInterestRow) for r in rows)

    def test_inactive_years_have_empty_details(self, linear_loan):
        rows = yearly_interest([linear_loan], 2018, 2020)
        assert all(r.details == [] and r.total_interest == 0 for r in rows)

    def test_loans_outside_range_excluded(self, interest_only_loan, linear_loan):
        rows = yearly_interest([interest_only_loan, linear_loan], 2041, 2042)
        assert all(r.details == [] for r in rows)

    def test_details_per_loan(self, interest_only_loan, linear_loan):
        rows = yearly_interest([interest_only_loan, linear_loan], 2021, 2021)
        row = rows[0]
        assert [d.loan_id for d in row.details] == ["in-fine-1", "linear-1"]
        assert row.details[0].loan_type == "interest_only"
        assert row.details[1].loan_type == "amortizing"
        assert row.details[0].amount == 120_000
        assert row.total_interest == pytest.approx(3_600 + 2_345)

    def test_empty_range(self, linear_loan):
        assert yearly_interest([linear_loan], 2025, 2024) == []

    def test_no_loans(self):
        rows = yearly_interest([], 2024, 2025)
        assert [r.total_interest for r in rows] == [0.0, 0.0]

    def test_non_integer_year(self, linear_loan):
        with pytest.raises(ValidationError) as exc_info:
            yearly_interest([linear_loan], "2024", 2025)
        assert exc_info.value.field == "start_year"

    def test_invalid_row_reports_core_error(self, loan_record):
        """Rows are validated through Loan.from_record."""
        with pytest.raises(ValidationError) as exc_info:
            yearly_interest([{**loan_record, "amount": -1}], 2024, 2025)
        assert exc_info.value.field == "amount"


class TestReplayCache:
    """Memoized and fresh replays must agree to the last bit."""

    def test_cache_parity(self, interest_only_loan, linear_loan, annuity_loan):
        loans = [interest_only_loan, linear_loan, annuity_loan]
        cached = LoanAmortizationEngine(use_cache=True).yearly_interest(loans, 2019, 2045)
        fresh = LoanAmortizationEngine(use_cache=False).yearly_interest(loans, 2019, 2045)
        assert cached == fresh

    def test_cache_disabled_by_setting(self, monkeypatch):
        monkeypatch.setenv("IMMOFISCAL_REPLAY_CACHE_ENABLED", "false")
        assert LoanAmortizationEngine().use_cache is False

    def test_engine_reuse(self, linear_loan):
        """Repeated calls on one engine give the same rows."""
        engine = LoanAmortizationEngine(use_cache=True)
        first = engine.yearly_interest([linear_loan], 2021, 2030)
        second = engine.yearly_interest([linear_loan], 2025, 2030)
        assert first[4:] == second
        assert engine.yearly_interest([linear_loan], 2021, 2030) == first

    def test_long_lived_engine_keeps_no_state(self, linear_loan):
        """The replay memo lives for one call only."""
        engine = LoanAmortizationEngine(use_cache=True)
        state = dict(vars(engine))
        for i in range(50):
            loan = linear_loan.model_copy(update={"id": f"linear-{i}", "amount": 100_000 + i})
            engine.yearly_interest([loan], 2020, 2020)
        assert vars(engine) == state

    def test_caller_owned_memo(self, linear_loan):
        engine = LoanAmortizationEngine()
        memo = {}
        amounts = engine.year_amounts(linear_loan, 2025, memo)
        assert len(memo) == 20
        assert amounts == engine.year_amounts(linear_loan, 2025)


class TestMonthlySchedule:
    def test_length(self, linear_loan):
        schedule = monthly_schedule(linear_loan)
        assert len(schedule) == 240
        assert (schedule[0].year, schedule[0].month) == (2021, 1)
        assert (schedule[-1].year, schedule[-1].month) == (2040, 12)

    def test_first_month_interest(self, linear_loan):
        assert monthly_schedule(linear_loan)[0].interest == pytest.approx(200)

    def test_interest_only_schedule(self, interest_only_loan):
        schedule = monthly_schedule(interest_only_loan)
        assert schedule[0].interest == pytest.approx(300)
        assert schedule[-1].principal == 120_000
        assert sum(m.principal for m in schedule) == 120_000
