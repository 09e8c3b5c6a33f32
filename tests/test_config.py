import pytest

from multiflow.adapters.config import AppConfig
from multiflow.domain.assumptions import EvaluationAssumptions


def test_defaults():
    cfg = AppConfig()
    assert cfg.STANDARD_OPERATING_EXPENSE_RATE == 35.0
    assert cfg.CASHFLOW_BREAK_EVEN_THRESHOLD == 500.0
    assert cfg.DEFAULT_LOAN_TERM_YEARS == 30
    assert cfg.DEFAULT_TARGET_DCR == 1.25


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("MULTIFLOW_CASHFLOW_BREAK_EVEN_THRESHOLD", "250")
    monkeypatch.setenv("MULTIFLOW_DEFAULT_APPRECIATION_RATE", "3.5%")
    monkeypatch.setenv("MULTIFLOW_DEFAULT_LOAN_TERM_YEARS", "15")

    assumptions = EvaluationAssumptions.from_config(AppConfig())
    assert assumptions.cashflow_break_even_threshold == 250.0
    assert assumptions.default_appreciation_rate == 3.5
    assert assumptions.default_loan_term_years == 15


@pytest.mark.parametrize(
    "name, value",
    [
        ("MULTIFLOW_CASHFLOW_BREAK_EVEN_THRESHOLD", "-1"),
        ("MULTIFLOW_DEFAULT_TARGET_DCR", "0"),
        ("MULTIFLOW_DEFAULT_LOAN_TERM_YEARS", "0"),
        ("MULTIFLOW_STANDARD_OPERATING_EXPENSE_RATE", "-5"),
        ("MULTIFLOW_PREFILL_MARGINAL_TAX_RATE", "lots"),
    ],
)
def test_invalid_env_values(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError):
        AppConfig()


def test_prefilled_values():
    assert EvaluationAssumptions().prefilled() == {
        "appreciation_rate": 3.0,
        "marginal_tax_rate": 24.0,
        "land_value_percent": 20.0,
    }
