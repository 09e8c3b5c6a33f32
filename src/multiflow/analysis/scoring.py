# src/multiflow/analysis/scoring.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from multiflow.domain.grading import Grade, GradeProfile, ScoredMetric
from multiflow.domain.metrics import DealMetrics

Breakpoints = Sequence[tuple[float, float]]

_MIN_SPAN = 0.000001


# =====================================================================
# Scoring curves: metric -> ascending (value, score 0-100) anchors
# =====================================================================

FIXED_CURVES: dict[ScoredMetric, tuple[tuple[float, float], ...]] = {
    ScoredMetric.CASH_ON_CASH: ((0.00, 0.0), (0.08, 60.0), (0.12, 85.0), (0.15, 100.0)),
    ScoredMetric.DCR: ((1.00, 0.0), (1.20, 60.0), (1.35, 85.0), (1.50, 100.0)),
    ScoredMetric.CAP_RATE: ((0.03, 0.0), (0.06, 60.0), (0.08, 85.0), (0.10, 100.0)),
    # equity gain as a fraction of purchase price
    ScoredMetric.EQUITY_GAIN: ((0.00, 0.0), (0.02, 60.0), (0.04, 85.0), (0.06, 100.0)),
}


def cash_flow_curve(cashflow_threshold_monthly: float) -> tuple[tuple[float, float], ...]:
    """Annual cash-flow anchors, shifted by the user's monthly break-even target."""
    break_even_annual = max(cashflow_threshold_monthly, 0.0) * 12.0
    return (
        (0.0, 0.0),
        (break_even_annual, 50.0),
        (break_even_annual + 5_000.0, 80.0),
        (break_even_annual + 10_000.0, 100.0),
    )


def scoring_curves(cashflow_threshold_monthly: float) -> dict[ScoredMetric, tuple[tuple[float, float], ...]]:
    curves = dict(FIXED_CURVES)
    curves[ScoredMetric.CASH_FLOW] = cash_flow_curve(cashflow_threshold_monthly)
    return curves


def piecewise_score(value: float, breakpoints: Breakpoints) -> float:
    """
    Linear interpolation between anchors, clamped to the end scores outside
    the anchor range.
    """
    if not breakpoints:
        return 0.0

    first_x, first_y = breakpoints[0]
    last_x, last_y = breakpoints[-1]
    if value <= first_x:
        return first_y
    if value >= last_x:
        return last_y

    for (x1, y1), (x2, y2) in zip(breakpoints, breakpoints[1:]):
        if x1 <= value <= x2:
            t = (value - x1) / max(x2 - x1, _MIN_SPAN)
            return y1 + (y2 - y1) * t
    return 0.0


# =====================================================================
# Weighted composite grade
# =====================================================================


def equity_gain(purchase_price: float, annual_principal_paydown: float, appreciation_rate: float) -> float:
    """Year-one equity: principal paid down plus (non-negative) appreciation."""
    appreciation = max(purchase_price * (appreciation_rate / 100.0), 0.0)
    return annual_principal_paydown + appreciation


def metric_values(
    metrics: DealMetrics,
    purchase_price: float,
    annual_principal_paydown: float,
    appreciation_rate: float,
) -> dict[ScoredMetric, float]:
    gain = equity_gain(purchase_price, annual_principal_paydown, appreciation_rate)
    return {
        ScoredMetric.CASH_ON_CASH: metrics.cash_on_cash,
        ScoredMetric.DCR: metrics.debt_coverage_ratio,
        ScoredMetric.CAP_RATE: metrics.cap_rate,
        ScoredMetric.CASH_FLOW: metrics.annual_cash_flow,
        ScoredMetric.EQUITY_GAIN: gain / max(purchase_price, 1.0),
    }


@dataclass(frozen=True)
class WeightedScore:
    values: Mapping[ScoredMetric, float]
    scores: Mapping[ScoredMetric, float]
    weights: Mapping[ScoredMetric, float]
    total: float

    @property
    def grade(self) -> Grade:
        return grade_from_score(self.total)

    def summary(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "grade": self.grade.value,
            "components": {
                m.value: {
                    "value": self.values[m],
                    "score": self.scores[m],
                    "weight": self.weights[m],
                }
                for m in ScoredMetric
            },
        }


def grade_from_score(score: float) -> Grade:
    if score >= 85:
        return Grade.A
    if score >= 70:
        return Grade.B
    if score >= 55:
        return Grade.C
    return Grade.D_OR_F


def weighted_score(
    metrics: DealMetrics,
    purchase_price: float,
    annual_principal_paydown: float,
    appreciation_rate: float,
    cashflow_threshold: float,
    profile: GradeProfile,
) -> WeightedScore:
    """
    Score each metric 0-100 on its curve and combine with the profile's
    normalized weights.
    """
    values = metric_values(metrics, purchase_price, annual_principal_paydown, appreciation_rate)
    curves = scoring_curves(cashflow_threshold)
    weights = profile.normalized_weights()

    scores = {m: piecewise_score(values[m], curves[m]) for m in ScoredMetric}
    total = sum(scores[m] * weights[m] for m in ScoredMetric)

    return WeightedScore(values=values, scores=scores, weights=weights, total=total)


def weighted_grade(
    metrics: DealMetrics,
    purchase_price: float,
    annual_principal_paydown: float,
    appreciation_rate: float,
    cashflow_threshold: float,
    profile: GradeProfile,
) -> Grade:
    return weighted_score(
        metrics=metrics,
        purchase_price=purchase_price,
        annual_principal_paydown=annual_principal_paydown,
        appreciation_rate=appreciation_rate,
        cashflow_threshold=cashflow_threshold,
        profile=profile,
    ).grade
