"""Pytest fixtures for immo_fiscal tests."""

import os
import sys
from datetime import date

import pytest

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from immo_fiscal.core.settings import get_settings  # noqa: E402
from immo_fiscal.domain.models import Loan  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop cached settings so env overrides in one test don't leak."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def interest_only_loan():
    """120k€ in fine loan at 3% over 10 full calendar years."""
    return Loan(
        id="in-fine-1",
        name="Prêt in fine Lyon",
        amount=120_000,
        annual_interest_rate=3.0,
        start_date=date(2020, 1, 1),
        end_date=date(2029, 12, 31),
        repayment_type="interest_only",
    )


@pytest.fixture
def linear_loan():
    """100k€ at 2.4% with constant principal over 240 months."""
    return Loan(
        id="linear-1",
        name="Prêt amortissement constant",
        amount=100_000,
        annual_interest_rate=2.4,
        start_date=date(2021, 1, 1),
        end_date=date(2040, 12, 1),
        repayment_type="amortizing",
        amortization_profile="linear_principal",
    )


@pytest.fixture
def annuity_loan():
    """200k€ at 3.5% with constant installments over 240 months."""
    return Loan(
        id="annuity-1",
        name="Prêt classique Paris",
        amount=200_000,
        annual_interest_rate=3.5,
        annual_insurance_rate=0.36,
        start_date=date(2024, 1, 5),
        end_date=date(2043, 12, 5),
        repayment_type="amortizing",
        amortization_profile="constant_annuity",
    )


@pytest.fixture
def loan_record():
    """Loan row as returned by the persistence layer (legacy labels)."""
    return {
        "id": 7,
        "name": "Prêt studio",
        "amount": 90_000,
        "interest_rate": 1.8,
        "insurance_rate": None,
        "start_date": "2019-06-15",
        "end_date": "2034-05-15",
        "repayment_type": "amortissable",
        "amortization_profile": "classique",
        "monthly_payment": 0,
    }
