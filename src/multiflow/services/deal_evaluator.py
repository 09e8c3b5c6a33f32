from __future__ import annotations

from typing import Any

from multiflow.adapters.config import config
from multiflow.adapters.logging_utils import get_logger
from multiflow.analysis.amortization import mortgage_breakdown
from multiflow.analysis.expenses import expense_module_for
from multiflow.analysis.finance import cash_flow_state, compute_deal_metrics
from multiflow.analysis.offer import maximum_allowable_offer
from multiflow.analysis.pillars import evaluate_pillars
from multiflow.analysis.scoring import weighted_score
from multiflow.domain.assumptions import EvaluationAssumptions
from multiflow.domain.deal import DealInputs
from multiflow.domain.evaluation import DealEvaluation
from multiflow.domain.grading import GradeProfile
from multiflow.services.guardrails import collect_guardrail_flags
from multiflow.services.validation import validate_and_prepare_payload

logger = get_logger(__name__)


def default_assumptions() -> EvaluationAssumptions:
    return EvaluationAssumptions.from_config(config)


def evaluate_deal(
    deal: DealInputs,
    *,
    profile: GradeProfile | None = None,
    assumptions: EvaluationAssumptions | None = None,
    target_dcr: float | None = None,
) -> DealEvaluation | None:
    """
    Main evaluation entrypoint.

    expenses -> first-year mortgage split -> metrics -> {threshold grade,
    weighted grade, pillars, max offer}. Returns None when the deal lacks the
    financing inputs needed for metrics; callers show "add more inputs".
    """
    assumptions = assumptions or default_assumptions()
    profile = profile or GradeProfile.default_profile()
    target = assumptions.target_dcr if target_dcr is None else target_dcr

    expenses = expense_module_for(deal)
    metrics = compute_deal_metrics(deal, assumptions, expenses=expenses)
    if metrics is None:
        logger.info(
            "deal_insufficient_inputs",
            extra={
                "context": {
                    "deal_id": deal.id,
                    "has_down_payment": deal.down_payment_percent is not None,
                    "has_interest_rate": deal.interest_rate is not None,
                }
            },
        )
        return None

    term = deal.loan_term_years or assumptions.default_loan_term_years
    # compute_deal_metrics returned, so both financing inputs are present
    down_payment_percent = float(deal.down_payment_percent or 0.0)
    interest_rate = float(deal.interest_rate or 0.0)

    mortgage = mortgage_breakdown(
        purchase_price=deal.purchase_price,
        down_payment_percent=down_payment_percent,
        interest_rate=interest_rate,
        term_years=term,
        annual_taxes=expenses.effective_annual_taxes,
        annual_insurance=expenses.effective_annual_insurance,
    )
    principal_paydown = mortgage.annual_principal if mortgage is not None else 0.0

    appreciation = deal.appreciation_rate
    if appreciation is None:
        appreciation = assumptions.default_appreciation_rate
    threshold = assumptions.cashflow_break_even_threshold

    score = weighted_score(
        metrics=metrics,
        purchase_price=deal.purchase_price,
        annual_principal_paydown=principal_paydown,
        appreciation_rate=appreciation,
        cashflow_threshold=threshold,
        profile=profile,
    )

    pillars = evaluate_pillars(
        purchase_price=deal.purchase_price,
        annual_cash_flow=metrics.annual_cash_flow,
        annual_principal_paydown=principal_paydown,
        appreciation_rate=appreciation,
        cashflow_threshold=threshold,
        marginal_tax_rate=deal.marginal_tax_rate,
        land_value_percent=deal.land_value_percent,
    )

    max_offer = maximum_allowable_offer(
        metrics=metrics,
        down_payment_percent=deal.down_payment_percent,
        interest_rate=deal.interest_rate,
        term_years=term,
        target_dcr=target,
    )

    flags = collect_guardrail_flags(
        purchase_price=deal.purchase_price,
        metrics=metrics,
        weighted_grade=score.grade,
        max_offer=max_offer,
    )

    evaluation = DealEvaluation(
        deal_id=deal.id,
        address=deal.address,
        purchase_price=deal.purchase_price,
        accounting=deal.accounting,
        metrics=metrics,
        mortgage=mortgage,
        expenses=expenses,
        base_grade=metrics.grade,
        weighted_score=score,
        weighted_grade=score.grade,
        profile_name=profile.name,
        profile_color_hex=profile.color_hex,
        pillars=pillars,
        cash_flow_state=cash_flow_state(metrics.annual_cash_flow, threshold),
        target_dcr=target,
        max_offer=max_offer,
        flags=flags,
    )

    logger.info(
        "deal_evaluated",
        extra={
            "context": {
                "deal_id": deal.id,
                "base_grade": evaluation.base_grade.value,
                "weighted_grade": evaluation.weighted_grade.value,
                "weighted_total": score.total,
            }
        },
    )
    return evaluation


def parse_deal(raw_payload: dict[str, Any]) -> DealInputs:
    """Validate a raw payload into DealInputs; raises ValueError on malformed input."""
    payload = validate_and_prepare_payload(raw_payload)
    return DealInputs(**payload)


def evaluate_payload(
    raw_payload: dict[str, Any],
    *,
    profile: GradeProfile | None = None,
    assumptions: EvaluationAssumptions | None = None,
    target_dcr: float | None = None,
) -> DealEvaluation | None:
    return evaluate_deal(
        parse_deal(raw_payload),
        profile=profile,
        assumptions=assumptions,
        target_dcr=target_dcr,
    )
