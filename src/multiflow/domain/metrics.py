from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from multiflow.domain.grading import Grade


@dataclass(frozen=True)
class MortgageBreakdown:
    """
    First-year split of the loan payment.

    Annual principal/interest are the sums of the first 12 scheduled months.
    The monthly fields are those annual totals divided by 12 (a yearly
    average, not month one's split).
    """
    loan_amount: float
    monthly_principal: float
    monthly_interest: float
    monthly_taxes: float
    monthly_insurance: float
    monthly_total: float
    annual_principal: float
    annual_interest: float
    annual_taxes: float
    annual_insurance: float
    annual_total: float

    @property
    def annual_total_pi(self) -> float:
        return self.annual_principal + self.annual_interest

    @property
    def monthly_pi(self) -> float:
        return self.annual_total_pi / 12.0


@dataclass(frozen=True)
class DealMetrics:
    total_annual_rent: float    # gross scheduled rent, annual
    net_operating_income: float # annual NOI
    cap_rate: float             # NOI / purchase price
    annual_debt_service: float  # annual P&I
    annual_cash_flow: float     # after debt service
    cash_on_cash: float         # annual cash flow / down payment
    debt_coverage_ratio: float  # NOI / annual debt service
    grade: Grade                # threshold grade from CoC + DCR

    @property
    def monthly_cash_flow(self) -> float:
        return self.annual_cash_flow / 12.0


class CashFlowState(str, Enum):
    POSITIVE = "positive"
    BREAK_EVEN = "breakEven"
    NEGATIVE = "negative"

    @property
    def label(self) -> str:
        return _CASH_FLOW_STATE_LABELS[self]


_CASH_FLOW_STATE_LABELS = {
    CashFlowState.POSITIVE: "Positive",
    CashFlowState.BREAK_EVEN: "Break-Even",
    CashFlowState.NEGATIVE: "Negative",
}
