# entrypoints/cli/evaluate.py
import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Optional

import typer
from loguru import logger

from multiflow.adapters.memory_repo import InMemoryGradeProfileRepository
from multiflow.analysis.amortization import mortgage_breakdown
from multiflow.analysis.offer import maximum_allowable_offer_for_deal
from multiflow.domain.grading import GradeProfile, effective_profile
from multiflow.services.deal_evaluator import default_assumptions, evaluate_deal, parse_deal

app = typer.Typer(help="MultiFlow deal evaluator (metrics, grades, pillars, max offer).")

LOCAL_USER = "local"


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as err:
        raise typer.BadParameter(f"could not read {path}: {err}") from err


def _load_profile(profiles_path: Optional[Path], profile_id: Optional[str], deal_profile_id: Optional[str]) -> GradeProfile:
    if profiles_path is None:
        return GradeProfile.default_profile()

    records = _read_json(profiles_path)
    if isinstance(records, dict):
        records = [records]
    try:
        repo = InMemoryGradeProfileRepository.from_records(records, user_id=LOCAL_USER)
    except (TypeError, ValueError) as err:
        raise typer.BadParameter(f"invalid grade profile in {profiles_path}: {err}") from err
    return effective_profile(
        repo.fetch_profiles(LOCAL_USER),
        default_profile_id=repo.fetch_default_profile_id(LOCAL_USER),
        override_id=profile_id or deal_profile_id,
    )


@app.command()
def evaluate(
    payload: Path = typer.Argument(..., help="Deal JSON (property store record or form payload)"),
    profiles: Optional[Path] = typer.Option(None, "--profiles", help="Grade profile JSON (object or list)"),
    profile_id: Optional[str] = typer.Option(None, "--profile-id", help="Grade profile to use"),
    target_dcr: Optional[float] = typer.Option(None, "--target-dcr", help="DCR the max offer must clear"),
    threshold: Optional[float] = typer.Option(None, "--threshold", help="Monthly cash-flow break-even target"),
) -> None:
    """
    Evaluate one deal and print the full evaluation as JSON.
    """
    try:
        deal = parse_deal(_read_json(payload))
    except ValueError as err:
        typer.echo(f"Invalid deal: {err}", err=True)
        raise typer.Exit(code=2)

    assumptions = default_assumptions()
    if threshold is not None:
        assumptions = assumptions.model_copy(update={"cashflow_break_even_threshold": threshold})

    profile = _load_profile(profiles, profile_id, deal.grade_profile_id)
    logger.info("Evaluating deal", payload=str(payload), profile=profile.name)

    result = evaluate_deal(deal, profile=profile, assumptions=assumptions, target_dcr=target_dcr)
    if result is None:
        typer.echo("Add financing inputs (down payment % and interest rate) to evaluate.", err=True)
        raise typer.Exit(code=1)

    typer.echo(json.dumps(result.to_dict(), indent=2))


@app.command("max-offer")
def max_offer(
    payload: Path = typer.Argument(..., help="Deal JSON"),
    target_dcr: float = typer.Option(..., "--target-dcr", help="DCR the offer must clear"),
) -> None:
    """
    Print the highest purchase price that still clears the target DCR.
    """
    try:
        deal = parse_deal(_read_json(payload))
    except ValueError as err:
        typer.echo(f"Invalid deal: {err}", err=True)
        raise typer.Exit(code=2)

    offer = maximum_allowable_offer_for_deal(deal, target_dcr, assumptions=default_assumptions())
    if offer is None:
        typer.echo("Cannot compute a maximum offer with these inputs.", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"{offer:.2f}")


@app.command()
def amortize(
    price: float = typer.Option(..., "--price", help="Purchase price"),
    down: float = typer.Option(..., "--down", help="Down payment, percent"),
    rate: float = typer.Option(..., "--rate", help="Interest rate, percent"),
    term: int = typer.Option(30, "--term", help="Loan term, years"),
    taxes: float = typer.Option(0.0, "--taxes", help="Annual taxes"),
    insurance: float = typer.Option(0.0, "--insurance", help="Annual insurance"),
) -> None:
    """
    Print the first-year principal / interest / escrow breakdown.
    """
    breakdown = mortgage_breakdown(price, down, rate, term, taxes, insurance)
    if breakdown is None:
        typer.echo("Price and term must be positive.", err=True)
        raise typer.Exit(code=1)

    typer.echo(json.dumps(asdict(breakdown), indent=2))


@app.command()
def prefill() -> None:
    """
    Print the starting values a new-deal form uses for appreciation, marginal
    tax rate and land value %.
    """
    typer.echo(json.dumps(default_assumptions().prefilled(), indent=2))


if __name__ == "__main__":
    app()
