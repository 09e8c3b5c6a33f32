# src/multiflow/services/guardrails.py
from __future__ import annotations

from multiflow.adapters.logging_utils import get_logger
from multiflow.domain.evaluation import GuardrailFlag
from multiflow.domain.grading import Grade
from multiflow.domain.metrics import DealMetrics

logger = get_logger(__name__)


def collect_guardrail_flags(
    *,
    purchase_price: float,
    metrics: DealMetrics,
    weighted_grade: Grade,
    max_offer: float | None,
) -> tuple[GuardrailFlag, ...]:
    """
    Simple, high-leverage sanity checks on an evaluated deal.

    These do *not* block anything; they flag deals so the caller can
    highlight them next to the numbers.
    """
    flags: list[GuardrailFlag] = []

    # ------------------------------------------------------------------
    # 1) Income present
    # ------------------------------------------------------------------
    if metrics.total_annual_rent <= 0:
        flags.append(
            GuardrailFlag(
                code="NO_RENT_ROLL",
                severity="warning",
                message="No rent entered; income-based metrics are zero.",
                context={"total_annual_rent": metrics.total_annual_rent},
            )
        )

    # ------------------------------------------------------------------
    # 2) Debt coverage / cash flow
    # ------------------------------------------------------------------
    dcr = metrics.debt_coverage_ratio
    if 0 < dcr < 1.0:
        flags.append(
            GuardrailFlag(
                code="DCR_BELOW_ONE",
                severity="warning",
                message="DCR below 1.0: NOI does not cover debt service.",
                context={"dcr": dcr},
            )
        )

    if metrics.annual_cash_flow < 0:
        flags.append(
            GuardrailFlag(
                code="NEGATIVE_CASH_FLOW",
                severity="warning",
                message=f"Negative cash flow: ${metrics.monthly_cash_flow:,.0f}/mo",
                context={"annual_cash_flow": metrics.annual_cash_flow},
            )
        )

    # ------------------------------------------------------------------
    # 3) Price vs maximum allowable offer
    # ------------------------------------------------------------------
    if max_offer is not None and purchase_price > max_offer:
        flags.append(
            GuardrailFlag(
                code="PRICE_ABOVE_MAX_OFFER",
                severity="warning",
                message="Purchase price is above the maximum allowable offer for the target DCR.",
                context={"purchase_price": purchase_price, "max_offer": max_offer},
            )
        )

    # ------------------------------------------------------------------
    # 4) Threshold grade vs weighted grade
    # ------------------------------------------------------------------
    if metrics.grade is not weighted_grade:
        flags.append(
            GuardrailFlag(
                code="GRADE_SCALES_DISAGREE",
                severity="info",
                message="Threshold grade and profile-weighted grade differ.",
                context={"base_grade": metrics.grade.value, "weighted_grade": weighted_grade.value},
            )
        )

    if flags:
        logger.info(
            "deal_guardrails_flags",
            extra={"context": {"flags": [f.code for f in flags]}},
        )

    return tuple(flags)
