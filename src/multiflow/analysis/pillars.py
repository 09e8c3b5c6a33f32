from __future__ import annotations

import math

from multiflow.analysis.scoring import equity_gain
from multiflow.domain.pillars import Pillar, PillarEvaluation, PillarResult, PillarStatus

BORDERLINE_BAND = 0.10            # +/- share of the monthly threshold
RESIDENTIAL_RECOVERY_YEARS = 27.5  # straight-line depreciation period


def format_currency(value: float) -> str:
    """Whole dollars, halves rounded away from zero: -1234.5 -> "-$1,235"."""
    rounded = math.copysign(math.floor(abs(value) + 0.5), value)
    sign = "-" if rounded < 0 else ""
    return f"{sign}${abs(rounded):,.0f}"


def _cash_flow_result(annual_cash_flow: float, threshold_input: float) -> PillarResult:
    monthly = annual_cash_flow / 12.0
    threshold = max(threshold_input, 0.0)
    band = threshold * BORDERLINE_BAND if threshold > 0 else 0.0

    is_borderline = threshold > 0 and abs(monthly - threshold) <= band
    if is_borderline:
        status = PillarStatus.BORDERLINE
    elif monthly >= threshold:
        status = PillarStatus.MET
    else:
        status = PillarStatus.NOT_MET

    delta = monthly - threshold
    delta_sign = "+" if delta >= 0 else "-"
    return PillarResult(
        pillar=Pillar.CASH_FLOW,
        status=status,
        detail=f"Delta vs threshold: {delta_sign}{format_currency(abs(delta))}/mo",
        value=annual_cash_flow,
        monthly_value=monthly,
        annual_value=annual_cash_flow,
        threshold=threshold,
    )


def _tax_result(
    purchase_price: float,
    marginal_tax_rate: float | None,
    land_value_percent: float | None,
) -> PillarResult:
    if marginal_tax_rate is None or land_value_percent is None:
        return PillarResult(
            pillar=Pillar.TAX_INCENTIVES,
            status=PillarStatus.NEEDS_INPUT,
            detail="Add marginal tax rate and land value % to evaluate.",
        )

    basis = max(purchase_price * (1.0 - land_value_percent / 100.0), 0.0)
    annual_depreciation = basis / RESIDENTIAL_RECOVERY_YEARS
    tax_benefit = annual_depreciation * (marginal_tax_rate / 100.0)
    return PillarResult(
        pillar=Pillar.TAX_INCENTIVES,
        status=PillarStatus.MET if tax_benefit > 0 else PillarStatus.NOT_MET,
        detail=f"Estimated annual tax benefit: {format_currency(tax_benefit)}",
        value=tax_benefit,
    )


def evaluate_pillars(
    purchase_price: float,
    annual_cash_flow: float,
    annual_principal_paydown: float,
    appreciation_rate: float,
    cashflow_threshold: float,
    marginal_tax_rate: float | None = None,
    land_value_percent: float | None = None,
) -> PillarEvaluation:
    """
    Check the four wealth-building pillars independently.

    Cash flow is borderline within +/-10% of the monthly threshold; the tax
    pillar needs both a marginal tax rate and a land value % before it can be
    judged.
    """
    appreciation = max(purchase_price * (appreciation_rate / 100.0), 0.0)
    gain = equity_gain(purchase_price, annual_principal_paydown, appreciation_rate)

    paydown = PillarResult(
        pillar=Pillar.MORTGAGE_PAYDOWN,
        status=PillarStatus.MET if annual_principal_paydown > 0 else PillarStatus.NOT_MET,
        detail=f"Year 1 principal paydown: {format_currency(annual_principal_paydown)}",
        value=annual_principal_paydown,
    )
    equity = PillarResult(
        pillar=Pillar.EQUITY,
        status=PillarStatus.MET if gain > 0 else PillarStatus.NOT_MET,
        detail=(
            f"Year 1 equity gain: {format_currency(gain)} "
            f"(Appreciation: {format_currency(appreciation)} + "
            f"Paydown: {format_currency(annual_principal_paydown)})"
        ),
        value=gain,
    )

    return PillarEvaluation(
        results=(
            _cash_flow_result(annual_cash_flow, cashflow_threshold),
            paydown,
            equity,
            _tax_result(purchase_price, marginal_tax_rate, land_value_percent),
        )
    )
