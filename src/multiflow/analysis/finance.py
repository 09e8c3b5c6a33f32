from __future__ import annotations

from multiflow.analysis.amortization import annual_payment, loan_amount_for
from multiflow.analysis.expenses import ExpenseModule, expense_module_for
from multiflow.domain.assumptions import EvaluationAssumptions
from multiflow.domain.deal import DealInputs, ExpenseAccounting
from multiflow.domain.grading import Grade
from multiflow.domain.metrics import CashFlowState, DealMetrics

# Down payment floor for cash-on-cash on 0% down deals.
DOWN_PAYMENT_FLOOR = 0.0001


def grade_for(cash_on_cash: float, dcr: float) -> Grade:
    """
    Threshold grade from cash-on-cash and DCR, checked top-down.

    A: CoC > 10% and DCR > 1.35
    B: 7% <= CoC <= 10% and 1.25 <= DCR <= 1.35
    C: 4% <= CoC < 7% and 1.15 <= DCR < 1.25
    anything else is D/F
    """
    if cash_on_cash > 0.10 and dcr > 1.35:
        return Grade.A
    if 0.07 <= cash_on_cash <= 0.10 and 1.25 <= dcr <= 1.35:
        return Grade.B
    if 0.04 <= cash_on_cash < 0.07 and 1.15 <= dcr < 1.25:
        return Grade.C
    return Grade.D_OR_F


def cash_flow_state(annual_cash_flow: float, threshold: float) -> CashFlowState:
    """Badge state: within +/- threshold of zero is break-even, otherwise by sign."""
    if abs(annual_cash_flow) < threshold:
        return CashFlowState.BREAK_EVEN
    if annual_cash_flow > 0:
        return CashFlowState.POSITIVE
    return CashFlowState.NEGATIVE


def _finalize_metrics(
    *,
    purchase_price: float,
    down_payment_percent: float,
    total_annual_rent: float,
    net_operating_income: float,
    annual_debt_service: float,
    annual_cash_flow: float,
) -> DealMetrics:
    down_payment = max(purchase_price * (down_payment_percent / 100.0), DOWN_PAYMENT_FLOOR)
    cash_on_cash = annual_cash_flow / down_payment

    cap_rate = 0.0
    if purchase_price > 0:
        cap_rate = net_operating_income / purchase_price

    dcr = 0.0
    if annual_debt_service > 0:
        dcr = net_operating_income / annual_debt_service

    return DealMetrics(
        total_annual_rent=total_annual_rent,
        net_operating_income=net_operating_income,
        cap_rate=cap_rate,
        annual_debt_service=annual_debt_service,
        annual_cash_flow=annual_cash_flow,
        cash_on_cash=cash_on_cash,
        debt_coverage_ratio=dcr,
        grade=grade_for(cash_on_cash, dcr),
    )


def compute_blended_rate_metrics(
    purchase_price: float,
    down_payment_percent: float,
    interest_rate: float,
    loan_term_years: float,
    total_annual_rent: float,
    expense_rate: float,
    annual_taxes: float,
    annual_insurance: float,
) -> DealMetrics:
    """
    Metrics under a single blended operating-expense rate.

    `expense_rate` is a fraction (0.35) and does not cover taxes or insurance,
    so both come out of cash flow after debt service. No vacancy haircut.
    """
    noi = total_annual_rent * (1.0 - expense_rate)
    debt_service = annual_payment(
        loan_amount_for(purchase_price, down_payment_percent),
        interest_rate,
        loan_term_years,
    )
    cash_flow = noi - debt_service - annual_taxes - annual_insurance

    return _finalize_metrics(
        purchase_price=purchase_price,
        down_payment_percent=down_payment_percent,
        total_annual_rent=total_annual_rent,
        net_operating_income=noi,
        annual_debt_service=debt_service,
        annual_cash_flow=cash_flow,
    )


def compute_itemized_metrics(
    purchase_price: float,
    down_payment_percent: float,
    interest_rate: float,
    loan_term_years: float,
    expenses: ExpenseModule,
) -> DealMetrics:
    """
    Metrics from itemized expenses.

    The expense module's NOI already carries taxes, insurance and vacancy, so
    cash flow is NOI less debt service only.
    """
    noi = expenses.net_operating_income
    debt_service = annual_payment(
        loan_amount_for(purchase_price, down_payment_percent),
        interest_rate,
        loan_term_years,
    )

    return _finalize_metrics(
        purchase_price=purchase_price,
        down_payment_percent=down_payment_percent,
        total_annual_rent=expenses.gross_annual_rent,
        net_operating_income=noi,
        annual_debt_service=debt_service,
        annual_cash_flow=noi - debt_service,
    )


def compute_deal_metrics(
    deal: DealInputs,
    assumptions: EvaluationAssumptions | None = None,
    expenses: ExpenseModule | None = None,
) -> DealMetrics | None:
    """
    Metrics for a stored deal, or None when financing inputs are missing.

    Down payment % and interest rate are required; the loan term falls back to
    the configured default.
    """
    assumptions = assumptions or EvaluationAssumptions()

    if deal.down_payment_percent is None or deal.interest_rate is None:
        return None

    term = deal.loan_term_years or assumptions.default_loan_term_years
    if term <= 0:
        return None

    expenses = expenses or expense_module_for(deal)

    if deal.accounting is ExpenseAccounting.ITEMIZED:
        return compute_itemized_metrics(
            purchase_price=deal.purchase_price,
            down_payment_percent=deal.down_payment_percent,
            interest_rate=deal.interest_rate,
            loan_term_years=term,
            expenses=expenses,
        )

    rate_percent = deal.operating_expense_rate
    if rate_percent is None:
        rate_percent = assumptions.standard_operating_expense_rate

    return compute_blended_rate_metrics(
        purchase_price=deal.purchase_price,
        down_payment_percent=deal.down_payment_percent,
        interest_rate=deal.interest_rate,
        loan_term_years=term,
        total_annual_rent=deal.gross_annual_rent,
        expense_rate=rate_percent / 100.0,
        annual_taxes=expenses.effective_annual_taxes,
        annual_insurance=expenses.effective_annual_insurance,
    )
