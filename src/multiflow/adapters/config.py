# src/multiflow/adapters/config.py
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    # App & logging
    ENV: str = Field(default="dev")
    LOG_LEVEL: str = Field(default="INFO")

    # -----------------------------
    # Evaluator defaults (percent units)
    # -----------------------------
    STANDARD_OPERATING_EXPENSE_RATE: float = Field(default=35.0)
    CASHFLOW_BREAK_EVEN_THRESHOLD: float = Field(default=500.0)  # monthly $
    DEFAULT_LOAN_TERM_YEARS: int = Field(default=30)
    DEFAULT_APPRECIATION_RATE: float = Field(default=0.0)
    DEFAULT_TARGET_DCR: float = Field(default=1.25)

    # -----------------------------
    # New-deal form pre-fills
    # -----------------------------
    PREFILL_APPRECIATION_RATE: float = Field(default=3.0)
    PREFILL_MARGINAL_TAX_RATE: float = Field(default=24.0)
    PREFILL_LAND_VALUE_PERCENT: float = Field(default=20.0)

    model_config = SettingsConfigDict(
        env_prefix="MULTIFLOW_",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator(
        "STANDARD_OPERATING_EXPENSE_RATE",
        "DEFAULT_APPRECIATION_RATE",
        "PREFILL_APPRECIATION_RATE",
        "PREFILL_MARGINAL_TAX_RATE",
        "PREFILL_LAND_VALUE_PERCENT",
        mode="before",
    )
    @classmethod
    def _to_non_negative_percent(cls, v: Any) -> Any:
        if v is None:
            return v
        if isinstance(v, str):
            v = v.strip().replace("%", "")
        try:
            f = float(v)
        except Exception as err:
            raise ValueError("rate must be numeric or percent-like") from err
        if f < 0:
            raise ValueError("rate must be non-negative")
        return f

    @field_validator("CASHFLOW_BREAK_EVEN_THRESHOLD", mode="before")
    @classmethod
    def _threshold_non_negative(cls, v: Any) -> Any:
        f = float(v)
        if f < 0:
            raise ValueError("CASHFLOW_BREAK_EVEN_THRESHOLD must be >= 0")
        return f

    @field_validator("DEFAULT_TARGET_DCR", mode="before")
    @classmethod
    def _dcr_positive(cls, v: Any) -> Any:
        f = float(v)
        if f <= 0:
            raise ValueError("DEFAULT_TARGET_DCR must be > 0")
        return f

    @field_validator("DEFAULT_LOAN_TERM_YEARS", mode="before")
    @classmethod
    def _term_positive(cls, v: Any) -> Any:
        n = int(v)
        if n <= 0:
            raise ValueError("DEFAULT_LOAN_TERM_YEARS must be > 0")
        return n


config = AppConfig()
