# src/multiflow/analysis/offer.py
from __future__ import annotations

from multiflow.analysis.amortization import annual_payment_per_dollar
from multiflow.analysis.finance import compute_deal_metrics
from multiflow.domain.assumptions import EvaluationAssumptions
from multiflow.domain.deal import DealInputs
from multiflow.domain.metrics import DealMetrics


def maximum_allowable_offer(
    metrics: DealMetrics,
    down_payment_percent: float | None,
    interest_rate: float | None,
    term_years: float,
    target_dcr: float,
) -> float | None:
    """
    Highest purchase price whose debt service still clears `target_dcr`.

    Holds NOI fixed, sizes the loan so NOI / debt service == target, then
    grosses the loan up by the loan-to-value ratio.
    """
    if target_dcr <= 0:
        return None
    if down_payment_percent is None or interest_rate is None:
        return None
    if term_years <= 0:
        return None

    debt_service_target = metrics.net_operating_income / target_dcr

    per_dollar = annual_payment_per_dollar(interest_rate, term_years)
    if per_dollar <= 0:
        return None
    max_loan = debt_service_target / per_dollar

    ltv = 1.0 - down_payment_percent / 100.0
    if ltv <= 0:
        return None

    return max(max_loan / ltv, 0.0)


def maximum_allowable_offer_for_deal(
    deal: DealInputs,
    target_dcr: float,
    assumptions: EvaluationAssumptions | None = None,
    metrics: DealMetrics | None = None,
) -> float | None:
    assumptions = assumptions or EvaluationAssumptions()

    if target_dcr <= 0:
        return None

    metrics = metrics or compute_deal_metrics(deal, assumptions)
    if metrics is None:
        return None

    term = deal.loan_term_years or assumptions.default_loan_term_years
    return maximum_allowable_offer(
        metrics=metrics,
        down_payment_percent=deal.down_payment_percent,
        interest_rate=deal.interest_rate,
        term_years=term,
        target_dcr=target_dcr,
    )
