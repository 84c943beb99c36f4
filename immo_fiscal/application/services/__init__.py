"""Application services built on the calculation core."""

from .reporting import ResultExporter, interest_detail_frame, interest_table_frame
from .tax_simulation import simulate_rental_income_impact

__all__ = [
    "ResultExporter",
    "interest_detail_frame",
    "interest_table_frame",
    "simulate_rental_income_impact",
]
