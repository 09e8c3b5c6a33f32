import pytest
from hypothesis import given, strategies as st

from multiflow.analysis.amortization import (
    annual_payment,
    annual_payment_per_dollar,
    mortgage_breakdown,
)


def test_textbook_loan_payment():
    """
    $240,000 at 6% over 30 years: r = 0.5%/mo, n = 360.
    """
    annual = annual_payment(240_000.0, 6.0, 30)

    assert annual / 12 == pytest.approx(1438.92, abs=0.01)
    assert annual == pytest.approx(17_267.06, abs=0.05)
    # the hand-rounded figure quoted in the deal walkthrough
    assert annual == pytest.approx(17_270.28, rel=1e-3)


def test_zero_rate_is_straight_line():
    annual = annual_payment(120_000.0, 0.0, 30)
    assert annual == pytest.approx(120_000.0 / 30)


def test_no_loan_or_no_term_means_no_payment():
    assert annual_payment(0.0, 6.0, 30) == 0.0
    assert annual_payment(-5_000.0, 6.0, 30) == 0.0
    assert annual_payment(100_000.0, 6.0, 0) == 0.0


def test_payment_per_dollar_scales_to_payment():
    per_dollar = annual_payment_per_dollar(6.5, 30)
    assert per_dollar * 180_000.0 == pytest.approx(annual_payment(180_000.0, 6.5, 30))

    assert annual_payment_per_dollar(0.0, 25) == pytest.approx(1 / 25)
    assert annual_payment_per_dollar(5.0, 0) == 0.0


def test_breakdown_first_year_split():
    b = mortgage_breakdown(300_000.0, 20.0, 6.0, 30, 6_000.0, 1_200.0)
    assert b is not None

    assert b.loan_amount == pytest.approx(240_000.0)
    # early in a 30-year loan, interest dominates
    assert b.annual_interest > b.annual_principal > 0
    # first month's interest is 1,200; twelve months is a bit less than 14,400
    assert 14_000.0 < b.annual_interest < 14_400.0
    assert b.annual_taxes == 6_000.0
    assert b.monthly_taxes == pytest.approx(500.0)
    assert b.monthly_insurance == pytest.approx(100.0)
    assert b.monthly_total == pytest.approx(1438.92 + 500.0 + 100.0, abs=0.01)


def test_breakdown_rejects_missing_price_or_term():
    assert mortgage_breakdown(0.0, 20.0, 6.0, 30, 0.0, 0.0) is None
    assert mortgage_breakdown(300_000.0, 20.0, 6.0, 0, 0.0, 0.0) is None


def test_breakdown_all_cash_purchase():
    b = mortgage_breakdown(300_000.0, 100.0, 6.0, 30, 3_000.0, 900.0)
    assert b is not None
    assert b.loan_amount == 0.0
    assert b.annual_principal == 0.0
    assert b.annual_interest == 0.0
    assert b.annual_total == pytest.approx(3_900.0)


def test_breakdown_zero_rate_is_all_principal():
    b = mortgage_breakdown(100_000.0, 0.0, 0.0, 10, 0.0, 0.0)
    assert b is not None
    assert b.annual_interest == 0.0
    assert b.annual_principal == pytest.approx(10_000.0)


@given(
    price=st.floats(min_value=10_000.0, max_value=2_000_000.0),
    down=st.floats(min_value=0.0, max_value=99.0),
    rate=st.floats(min_value=0.0, max_value=15.0),
    term=st.integers(min_value=1, max_value=40),
    taxes=st.floats(min_value=0.0, max_value=50_000.0),
    insurance=st.floats(min_value=0.0, max_value=20_000.0),
)
def test_breakdown_is_internally_consistent(price, down, rate, term, taxes, insurance):
    b = mortgage_breakdown(price, down, rate, term, taxes, insurance)
    assert b is not None

    annual_pi = annual_payment(b.loan_amount, rate, term)
    assert b.annual_principal + b.annual_interest == pytest.approx(annual_pi, rel=1e-9, abs=1e-6)
    assert b.annual_total_pi == pytest.approx(annual_pi, rel=1e-9, abs=1e-6)

    assert b.monthly_principal == pytest.approx(b.annual_principal / 12)
    assert b.monthly_interest == pytest.approx(b.annual_interest / 12)
    assert b.monthly_taxes == pytest.approx(b.annual_taxes / 12)
    assert b.monthly_insurance == pytest.approx(b.annual_insurance / 12)
    assert b.monthly_total == pytest.approx(b.annual_total / 12, rel=1e-9, abs=1e-6)


@pytest.mark.parametrize("rate", [1e-15, 2.716e-85, 5e-324])
def test_vanishing_rate_behaves_like_zero_rate(rate):
    assert annual_payment(240_000.0, rate, 30) == pytest.approx(8_000.0)
    assert annual_payment_per_dollar(rate, 30) == pytest.approx(1 / 30)

    b = mortgage_breakdown(10_000.0, 0.0, rate, 1, 0.0, 0.0)
    assert b is not None
    assert b.annual_principal == pytest.approx(10_000.0)
    assert b.annual_interest == pytest.approx(0.0, abs=1e-6)
