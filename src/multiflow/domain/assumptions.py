# src/multiflow/domain/assumptions.py
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class EvaluationAssumptions(BaseModel):
    standard_operating_expense_rate: float = Field(35.0, ge=0.0, le=100.0)  # percent
    cashflow_break_even_threshold: float = Field(500.0, ge=0.0)  # monthly $
    default_loan_term_years: int = Field(30, gt=0)
    default_appreciation_rate: float = 0.0  # percent
    target_dcr: float = Field(1.25, gt=0.0)

    # Form pre-fill values; only applied through prefilled()
    prefill_appreciation_rate: float = 3.0
    prefill_marginal_tax_rate: float = 24.0
    prefill_land_value_percent: float = 20.0

    @classmethod
    def from_config(cls, cfg: Any) -> "EvaluationAssumptions":
        return cls(
            standard_operating_expense_rate=cfg.STANDARD_OPERATING_EXPENSE_RATE,
            cashflow_break_even_threshold=cfg.CASHFLOW_BREAK_EVEN_THRESHOLD,
            default_loan_term_years=cfg.DEFAULT_LOAN_TERM_YEARS,
            default_appreciation_rate=cfg.DEFAULT_APPRECIATION_RATE,
            target_dcr=cfg.DEFAULT_TARGET_DCR,
            prefill_appreciation_rate=cfg.PREFILL_APPRECIATION_RATE,
            prefill_marginal_tax_rate=cfg.PREFILL_MARGINAL_TAX_RATE,
            prefill_land_value_percent=cfg.PREFILL_LAND_VALUE_PERCENT,
        )

    def prefilled(self) -> dict[str, float]:
        """Values a new-deal form starts with for the optional evaluator inputs."""
        return {
            "appreciation_rate": self.prefill_appreciation_rate,
            "marginal_tax_rate": self.prefill_marginal_tax_rate,
            "land_value_percent": self.prefill_land_value_percent,
        }
