"""Reporting helpers for computed results.

Turns the yearly interest table into a DataFrame for tables and charts, and
saves computed results to JSON files for the reporting collaborators.
"""

from __future__ import annotations

import json
import os
from collections.abc import Sequence
from datetime import datetime
from typing import Any

import pandas as pd
from pydantic import BaseModel

from immo_fiscal.core.logging import get_logger
from immo_fiscal.core.settings import get_settings
from immo_fiscal.domain.models import YearlyInterestRow

log = get_logger(__name__)

INTEREST_TABLE_COLUMNS = ["Année", "Intérêts", "Capital Remboursé", "Assurance", "Prêts Actifs"]


def interest_table_frame(rows: Sequence[YearlyInterestRow]) -> pd.DataFrame:
    """One line per year with interest, principal and insurance totals."""
    records = [
        {
            "Année": row.year,
            "Intérêts": row.total_interest,
            "Capital Remboursé": row.total_principal,
            "Assurance": row.total_insurance,
            "Prêts Actifs": len(row.details),
        }
        for row in rows
    ]
    return pd.DataFrame(records, columns=INTEREST_TABLE_COLUMNS)


def interest_detail_frame(rows: Sequence[YearlyInterestRow]) -> pd.DataFrame:
    """Long-format table: one line per (year, loan)."""
    records = [
        {"year": row.year, **detail.model_dump()}
        for row in rows
        for detail in row.details
    ]
    return pd.DataFrame(records)


class ResultExporter:
    """Handles exporting of computed results to JSON."""

    def __init__(self, output_dir: str | None = None):
        """Initialize exporter.

        Args:
            output_dir: Directory where results will be saved. Defaults to the
                IMMOFISCAL_EXPORT_DIR setting.
        """
        self.output_dir = output_dir or get_settings().export_dir

    def _ensure_dir(self):
        if not os.path.exists(self.output_dir):
            os.makedirs(self.output_dir)
            log.info("created_output_directory", path=self.output_dir)

    def save_results(
        self,
        results: list[BaseModel] | BaseModel,
        prefix: str = "calcul",
        metadata: dict[str, Any] | None = None,
    ) -> str:
        """Save computed records to a timestamped JSON file.

        Args:
            results: Result model(s), e.g. YearlyInterestRow list or TaxResult.
            prefix: Filename prefix.
            metadata: Optional metadata to include in the file.

        Returns:
            Path to the saved file.
        """
        if isinstance(results, BaseModel):
            results = [results]

        self._ensure_dir()
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filepath = os.path.join(self.output_dir, f"{prefix}_{timestamp}.json")

        payload = {
            "metadata": {
                "timestamp": datetime.now().isoformat(),
                "count": len(results),
                **(metadata or {}),
            },
            "results": [r.model_dump(mode="json") for r in results],
        }

        try:
            with open(filepath, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
        except OSError as e:
            log.error("results_save_failed", path=filepath, error=str(e))
            raise

        log.info("results_saved", path=filepath, count=len(results))
        return filepath
