# src/multiflow/analysis/amortization.py
from __future__ import annotations

import math

from multiflow.domain.metrics import MortgageBreakdown


def _monthly_rate(annual_rate_percent: float) -> float:
    return (annual_rate_percent / 100.0) / 12.0


def annual_payment_per_dollar(annual_rate_percent: float, years: float) -> float:
    """
    Annual P&I per $1 of loan.

    M = r(1+r)^n / ((1+r)^n - 1), times 12
    r = monthly rate, n = number of monthly payments.
    A zero rate repays straight-line: 1 / years. (1+r)^n - 1 goes through
    expm1/log1p so tiny positive rates stay accurate instead of rounding to 0.
    """
    n = years * 12.0
    if n <= 0:
        return 0.0

    r = _monthly_rate(annual_rate_percent)
    if r == 0:
        return 1.0 / years

    growth_less_one = math.expm1(n * math.log1p(r))
    if growth_less_one <= 0:
        return 1.0 / years
    return (r * (growth_less_one + 1.0) / growth_less_one) * 12.0


def annual_payment(loan_amount: float, annual_rate_percent: float, years: float) -> float:
    """Level annual P&I on a fixed-rate loan. Zero for no loan or no term."""
    if loan_amount <= 0 or years <= 0:
        return 0.0
    return loan_amount * annual_payment_per_dollar(annual_rate_percent, years)


def loan_amount_for(purchase_price: float, down_payment_percent: float) -> float:
    return max(purchase_price * (1.0 - down_payment_percent / 100.0), 0.0)


def mortgage_breakdown(
    purchase_price: float,
    down_payment_percent: float,
    interest_rate: float,
    term_years: float,
    annual_taxes: float,
    annual_insurance: float,
) -> MortgageBreakdown | None:
    """
    First-year payment split.

    Walks the first 12 months of the schedule so the principal/interest totals
    reflect "this year", not the life of the loan. Returns None when there is
    no price or no term to amortize over.
    """
    if purchase_price <= 0 or term_years <= 0:
        return None

    loan_amount = loan_amount_for(purchase_price, down_payment_percent)
    annual_pi = annual_payment(loan_amount, interest_rate, term_years)
    monthly_pi = annual_pi / 12.0
    r = _monthly_rate(interest_rate)

    balance = loan_amount
    annual_interest = 0.0
    annual_principal = 0.0
    for _ in range(12):
        interest = balance * r
        principal = max(monthly_pi - interest, 0.0)
        annual_interest += interest
        annual_principal += principal
        balance = max(balance - principal, 0.0)

    monthly_taxes = annual_taxes / 12.0
    monthly_insurance = annual_insurance / 12.0

    return MortgageBreakdown(
        loan_amount=loan_amount,
        monthly_principal=annual_principal / 12.0,
        monthly_interest=annual_interest / 12.0,
        monthly_taxes=monthly_taxes,
        monthly_insurance=monthly_insurance,
        monthly_total=monthly_pi + monthly_taxes + monthly_insurance,
        annual_principal=annual_principal,
        annual_interest=annual_interest,
        annual_taxes=annual_taxes,
        annual_insurance=annual_insurance,
        annual_total=annual_pi + annual_taxes + annual_insurance,
    )
