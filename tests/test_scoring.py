import pytest
from hypothesis import given, strategies as st

from multiflow.analysis.finance import compute_deal_metrics
from multiflow.analysis.scoring import (
    FIXED_CURVES,
    cash_flow_curve,
    equity_gain,
    grade_from_score,
    piecewise_score,
    weighted_score,
)
from multiflow.domain.grading import Grade, GradeProfile, ScoredMetric
from multiflow.domain.metrics import DealMetrics

CURVE = ((0.0, 0.0), (10.0, 50.0), (20.0, 100.0))


def _metrics(**overrides):
    base = dict(
        total_annual_rent=36_000.0,
        net_operating_income=23_400.0,
        cap_rate=0.078,
        annual_debt_service=17_267.06,
        annual_cash_flow=-1_067.06,
        cash_on_cash=-0.0178,
        debt_coverage_ratio=1.3552,
        grade=Grade.D_OR_F,
    )
    base.update(overrides)
    return DealMetrics(**base)


def test_piecewise_clamps_outside_range():
    assert piecewise_score(-5.0, CURVE) == 0.0
    assert piecewise_score(25.0, CURVE) == 100.0


def test_piecewise_interpolates_between_anchors():
    assert piecewise_score(5.0, CURVE) == pytest.approx(25.0)
    assert piecewise_score(15.0, CURVE) == pytest.approx(75.0)
    assert piecewise_score(10.0, CURVE) == pytest.approx(50.0)


def test_piecewise_coincident_anchors_do_not_divide_by_zero():
    curve = ((0.0, 0.0), (0.0, 50.0), (1.0, 100.0))
    assert piecewise_score(0.5, curve) == pytest.approx(75.0)


def test_piecewise_empty_curve_scores_zero():
    assert piecewise_score(1.0, ()) == 0.0


def test_cash_flow_curve_follows_threshold():
    assert cash_flow_curve(500.0)[1] == (6_000.0, 50.0)
    assert cash_flow_curve(-100.0)[1] == (0.0, 50.0)
    assert piecewise_score(6_000.0 + 5_000.0, cash_flow_curve(500.0)) == pytest.approx(80.0)


@pytest.mark.parametrize(
    "score, expected",
    [
        (100.0, Grade.A),
        (85.0, Grade.A),
        (84.99, Grade.B),
        (70.0, Grade.B),
        (69.99, Grade.C),
        (55.0, Grade.C),
        (54.99, Grade.D_OR_F),
        (0.0, Grade.D_OR_F),
    ],
)
def test_grade_from_score_cutoffs(score, expected):
    assert grade_from_score(score) is expected


def test_equity_gain_ignores_negative_appreciation():
    assert equity_gain(300_000.0, 2_000.0, 3.0) == pytest.approx(11_000.0)
    assert equity_gain(300_000.0, 2_000.0, -2.0) == pytest.approx(2_000.0)


def test_balanced_profile_on_textbook_triplex(triplex, assumptions, balanced_profile):
    metrics = compute_deal_metrics(triplex, assumptions)
    score = weighted_score(
        metrics=metrics,
        purchase_price=triplex.purchase_price,
        annual_principal_paydown=2_947.0,
        appreciation_rate=0.0,
        cashflow_threshold=500.0,
        profile=balanced_profile,
    )

    assert score.scores[ScoredMetric.CASH_ON_CASH] == 0.0
    assert score.scores[ScoredMetric.CASH_FLOW] == 0.0
    assert score.scores[ScoredMetric.CAP_RATE] == pytest.approx(82.5)
    assert score.total == pytest.approx(40.8, abs=0.5)
    assert score.grade is Grade.D_OR_F


def test_all_zero_profile_scores_zero():
    profile = GradeProfile(name="Nothing")
    score = weighted_score(_metrics(cash_on_cash=0.2), 300_000.0, 3_000.0, 3.0, 500.0, profile)

    assert all(w == 0.0 for w in score.weights.values())
    assert score.total == 0.0
    assert score.grade is Grade.D_OR_F


def test_single_metric_profile_is_that_metrics_score():
    profile = GradeProfile(name="DCR only", weight_dcr=7)
    score = weighted_score(_metrics(debt_coverage_ratio=1.5), 300_000.0, 0.0, 0.0, 500.0, profile)
    assert score.total == pytest.approx(100.0)


def test_summary_lists_every_metric(balanced_profile):
    summary = weighted_score(_metrics(), 300_000.0, 2_947.0, 0.0, 500.0, balanced_profile).summary()
    assert set(summary["components"]) == {m.value for m in ScoredMetric}
    assert summary["grade"] == "D/F"


weights = st.one_of(st.just(0.0), st.floats(min_value=0.01, max_value=1_000.0))


@given(a=weights, b=weights, c=weights, d=weights, e=weights)
def test_normalized_weights_sum_to_one(a, b, c, d, e):
    profile = GradeProfile(
        name="p",
        weight_cash_on_cash=a,
        weight_dcr=b,
        weight_cap_rate=c,
        weight_cash_flow=d,
        weight_equity_gain=e,
    )
    total = sum(profile.normalized_weights().values())
    if a + b + c + d + e > 0:
        assert total == pytest.approx(1.0)
    else:
        assert total == 0.0


@given(
    lo=st.floats(min_value=-1.0, max_value=3.0),
    delta=st.floats(min_value=0.0, max_value=2.0),
    metric=st.sampled_from(sorted(FIXED_CURVES, key=lambda m: m.value)),
)
def test_fixed_curves_are_monotonic(lo, delta, metric):
    curve = FIXED_CURVES[metric]
    low = piecewise_score(lo, curve)
    high = piecewise_score(lo + delta, curve)

    assert 0.0 <= low <= 100.0
    assert high >= low - 1e-9


@given(
    coc=st.floats(min_value=-0.5, max_value=0.5),
    dcr=st.floats(min_value=0.0, max_value=3.0),
    bump=st.floats(min_value=0.0, max_value=0.5),
)
def test_better_coverage_or_yield_never_lowers_grade(coc, dcr, bump):
    profile = GradeProfile.default_profile()

    def grade(c, d):
        return weighted_score(_metrics(cash_on_cash=c, debt_coverage_ratio=d), 300_000.0, 3_000.0, 0.0, 500.0, profile).grade

    base = grade(coc, dcr)
    assert grade(coc + bump, dcr) >= base
    assert grade(coc, dcr + bump) >= base
