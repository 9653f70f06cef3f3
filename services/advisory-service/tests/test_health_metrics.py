import pytest

from aggregation import compute_aggregates
from finance_model import FinancialProfile
from health_metrics import (
    emergency_fund_months,
    emergency_fund_needed,
    emergency_fund_status,
    grade_from_counts,
    health_label,
    health_metrics,
    health_score,
    life_insurance_needed,
    savings_ratio,
    solvency_ratio,
    status_from_ratio,
)
from factories import make_crisis_profile, make_healthy_profile, make_profile


class TestRatios:
    def test_savings_ratio_example_is_healthy(self):
        profile = make_profile(income=10_000_000, rent=7_000_000)

        metrics = {metric.name: metric for metric in health_metrics(profile)}

        assert metrics["Rasio Tabungan"].value == pytest.approx(30.0)
        assert metrics["Rasio Tabungan"].status == "healthy"

    def test_savings_ratio_is_never_negative(self):
        aggregates = compute_aggregates(make_profile(income=5_000_000, rent=8_000_000))

        assert savings_ratio(aggregates) == 0.0

    def test_zero_income_yields_zero_ratios(self):
        metrics = health_metrics(make_profile(income=0, rent=1_000_000))

        assert [metric.value for metric in metrics[:3]] == [0.0, 0.0, 0.0]

    def test_solvency_is_full_without_assets_or_liabilities(self):
        assert solvency_ratio(compute_aggregates(FinancialProfile())) == 100.0

    @pytest.mark.parametrize(
        "ratio, kind, expected",
        [
            (45, "expense", "healthy"),
            (60, "expense", "warning"),
            (75, "expense", "danger"),
            (15, "savings", "warning"),
            (5, "savings", "danger"),
            (30, "debt", "healthy"),
            (20, "solvency", "warning"),
        ],
    )
    def test_status_thresholds(self, ratio, kind, expected):
        assert status_from_ratio(ratio, kind) == expected

    def test_unknown_kind_is_warning(self):
        assert status_from_ratio(10, "liquidity") == "warning"


class TestEmergencyFund:
    def test_single_without_dependents_needs_three_months(self):
        profile = make_profile(rent=5_000_000)

        assert emergency_fund_months(profile) == 3
        assert emergency_fund_needed(profile) == pytest.approx(15_000_000)

    @pytest.mark.parametrize(
        "marital_status, dependents, months",
        [("menikah", 0, 6), ("lajang", 1, 6), ("menikah", 2, 9), ("menikah", 3, 12)],
    )
    def test_months_grow_with_family(self, marital_status, dependents, months):
        profile = make_profile(marital_status=marital_status, dependents=dependents)

        assert emergency_fund_months(profile) == months

    def test_status_bands(self):
        assert emergency_fund_status(make_profile(rent=4_000_000, emergency=12_000_000)).status == "aman"
        assert emergency_fund_status(make_profile(rent=4_000_000, emergency=7_000_000)).status == "kurang"
        assert emergency_fund_status(make_profile(rent=4_000_000, emergency=1_000_000)).status == "kritis"

    def test_monthly_target_rounds_up(self):
        status = emergency_fund_status(make_profile(rent=4_000_000, emergency=1))

        assert status.gap == pytest.approx(11_999_999)
        assert status.monthly_target == 1_000_000


class TestHealthScore:
    def test_healthy_profile_scores_a(self):
        score = health_score(make_healthy_profile())

        assert score.grade == "A"
        assert score.score == 100
        assert health_label(score.score) == "Sangat Baik"

    def test_crisis_profile_scores_f(self):
        score = health_score(make_crisis_profile())

        assert score.grade == "F"
        assert score.critical >= 2

    @pytest.mark.parametrize(
        "counts, grade",
        [((2, 0, 0), "F"), ((1, 0, 0), "D"), ((0, 2, 0), "C"), ((0, 1, 0), "B"), ((0, 0, 1), "A")],
    )
    def test_grade_bands(self, counts, grade):
        assert grade_from_counts(*counts)[1] == grade

    def test_score_is_bounded(self):
        for counts in [(9, 9, 9), (0, 0, 0), (0, 9, 0), (1, 9, 0)]:
            score, _ = grade_from_counts(*counts)
            assert 0 <= score <= 100


@pytest.mark.parametrize(
    "marital_status, dependents, multiple",
    [("lajang", 0, 5), ("menikah", 0, 7), ("menikah", 2, 10)],
)
def test_life_insurance_multiple(marital_status, dependents, multiple):
    profile = make_profile(income=10_000_000, marital_status=marital_status, dependents=dependents)

    assert life_insurance_needed(profile) == pytest.approx(120_000_000 * multiple)
