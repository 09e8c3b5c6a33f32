# tests/test_cli.py
import json
import os
import subprocess
import sys
from pathlib import Path

import pytest
from typer.testing import CliRunner

from entrypoints.cli.evaluate import app

runner = CliRunner()

TRIPLEX = {
    "id": "triplex-1",
    "address": "12 Elm St",
    "purchase_price": 300000,
    "rent_roll": [{"MonthlyRent": 1000, "UnitType": "2br/1ba"}] * 3,
    "use_standard_operating_expense": True,
    "operating_expense_rate": 35,
    "annual_taxes": 6000,
    "annual_insurance": 1200,
    "loan_term_years": 30,
    "down_payment_percent": 20,
    "interest_rate": 6,
}


@pytest.fixture
def deal_file(tmp_path):
    path = tmp_path / "deal.json"
    path.write_text(json.dumps(TRIPLEX))
    return path


def test_evaluate_prints_json(deal_file):
    result = runner.invoke(app, ["evaluate", str(deal_file)])
    assert result.exit_code == 0, result.output

    data = json.loads(result.stdout)
    assert data["base_grade"] == "D/F"
    assert data["profile"]["name"] == "Balanced"
    assert data["metrics"]["net_operating_income"] == pytest.approx(23_400.0)


def test_evaluate_with_stored_profiles(deal_file, tmp_path):
    profiles = tmp_path / "profiles.json"
    profiles.write_text(
        json.dumps(
            [
                {"id": "p1", "name": "Cash", "weight_cash_flow": 1},
                {"id": "p2", "name": "Debt", "weight_dcr": 1, "color_hex": "#0000FFFF"},
            ]
        )
    )
    result = runner.invoke(app, ["evaluate", str(deal_file), "--profiles", str(profiles), "--profile-id", "p2"])
    assert result.exit_code == 0, result.output

    data = json.loads(result.stdout)
    assert data["profile"] == {"name": "Debt", "color_hex": "#0000FFFF"}
    # DCR ~1.355 scores ~85.5 on its own
    assert data["weighted_grade"] == "A"


def test_evaluate_threshold_option(deal_file):
    result = runner.invoke(app, ["evaluate", str(deal_file), "--threshold", "0"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["pillars"][0]["threshold"] == 0.0


def test_evaluate_insufficient_inputs(tmp_path):
    path = tmp_path / "deal.json"
    path.write_text(json.dumps({"purchase_price": 250000}))

    result = runner.invoke(app, ["evaluate", str(path)])
    assert result.exit_code == 1


def test_evaluate_invalid_deal(tmp_path):
    path = tmp_path / "deal.json"
    path.write_text(json.dumps({"address": "no price"}))

    result = runner.invoke(app, ["evaluate", str(path)])
    assert result.exit_code == 2


def test_max_offer(deal_file):
    result = runner.invoke(app, ["max-offer", str(deal_file), "--target-dcr", "1.25"])
    assert result.exit_code == 0, result.output
    assert float(result.stdout.strip()) == pytest.approx(325_240.0, rel=1e-3)


def test_amortize():
    result = runner.invoke(
        app,
        ["amortize", "--price", "300000", "--down", "20", "--rate", "6", "--taxes", "6000", "--insurance", "1200"],
    )
    assert result.exit_code == 0, result.output

    data = json.loads(result.stdout)
    assert data["loan_amount"] == pytest.approx(240_000.0)
    assert data["monthly_total"] == pytest.approx(1438.92 + 600.0, abs=0.01)


def test_amortize_rejects_zero_price():
    result = runner.invoke(app, ["amortize", "--price", "0", "--down", "20", "--rate", "6"])
    assert result.exit_code == 1


def test_evaluate_stdout_is_only_the_evaluation(deal_file):
    root = Path(__file__).resolve().parents[1]
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join([str(root / "src"), str(root), env.get("PYTHONPATH", "")])

    proc = subprocess.run(
        [sys.executable, "-m", "entrypoints.cli.evaluate", "evaluate", str(deal_file)],
        cwd=root,
        env=env,
        capture_output=True,
        text=True,
        check=False,
    )
    assert proc.returncode == 0, proc.stderr

    data = json.loads(proc.stdout)
    assert data["deal_id"] == "triplex-1"
    # structured log lines go to stderr
    assert "deal_evaluated" in proc.stderr


def test_evaluate_rejects_negative_profile_weight(deal_file, tmp_path):
    profiles = tmp_path / "profiles.json"
    profiles.write_text(json.dumps([{"id": "p1", "name": "Broken", "weight_dcr": -5}]))

    result = runner.invoke(app, ["evaluate", str(deal_file), "--profiles", str(profiles)])
    assert result.exit_code == 2
    assert not isinstance(result.exception, ValueError)


def test_prefill():
    result = runner.invoke(app, ["prefill"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == {
        "appreciation_rate": 3.0,
        "marginal_tax_rate": 24.0,
        "land_value_percent": 20.0,
    }
