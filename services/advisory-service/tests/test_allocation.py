import pytest

from aggregation import compute_aggregates
from allocation import compute_allocation, goals_monthly_need, is_debt_crisis, recommended_budget
from factories import make_crisis_profile, make_debt, make_goal, make_healthy_profile, make_profile


def contributions(allocation):
    return (
        allocation.emergency
        + allocation.insurance
        + allocation.goals
        + allocation.investment
        + allocation.additional_debt
    )


class TestNormalMode:
    def test_waterfall_order(self):
        # surplus 6M, emergency gap 12M, no critical-illness cover, one goal
        profile = make_profile(
            income=10_000_000,
            rent=4_000_000,
            goals=[make_goal("nikah", 12_000_000, months=12)],
        )

        allocation = compute_allocation(profile)

        assert allocation.is_debt_crisis is False
        assert allocation.emergency == pytest.approx(1_000_000)
        assert allocation.insurance == pytest.approx(900_000)
        assert allocation.goals == pytest.approx(1_000_000)
        assert allocation.investment == pytest.approx(3_100_000)
        assert contributions(allocation) == pytest.approx(allocation.available_surplus)

    def test_healthy_profile_invests_everything(self):
        allocation = compute_allocation(make_healthy_profile())

        assert allocation.emergency == 0
        assert allocation.insurance == 0
        assert allocation.investment == pytest.approx(6_000_000)

    def test_negative_surplus_allocates_nothing(self):
        allocation = compute_allocation(make_profile(income=5_000_000, rent=6_000_000))

        assert allocation.available_surplus == 0
        assert contributions(allocation) == 0

    def test_rental_upgrade_reduces_available_surplus(self):
        profile = make_healthy_profile()

        allocation = compute_allocation(profile, rental_upgrade_amount=5_000_000)

        assert allocation.available_surplus == pytest.approx(4_000_000)
        assert allocation.rental_upgrade_amount == 5_000_000

    def test_goals_need_is_straight_line(self):
        profile = make_profile(goals=[make_goal("a", 6_000_000, months=6, collected=3_000_000), make_goal("b", 0)])

        assert goals_monthly_need(profile) == pytest.approx(500_000)


class TestDebtCrisisMode:
    def test_crisis_threshold_is_six_months_of_income(self):
        below = make_profile(income=10_000_000, property_value=500_000_000, debts=[make_debt("d", 60_000_000, 10)])
        above = make_profile(income=10_000_000, property_value=500_000_000, debts=[make_debt("d", 61_000_000, 10)])

        assert is_debt_crisis(compute_aggregates(below)) is False
        assert is_debt_crisis(compute_aggregates(above)) is True

    def test_severe_crisis_forces_growth_to_zero(self):
        allocation = compute_allocation(make_crisis_profile())

        assert allocation.is_debt_crisis is True
        assert allocation.is_severe_crisis is True
        assert allocation.investment == 0
        assert allocation.goals == 0
        assert allocation.emergency == pytest.approx(300_000)
        assert allocation.lifestyle_cut == pytest.approx(1_000_000)
        assert allocation.additional_debt == pytest.approx(2_700_000 + 1_000_000)

    def test_recommended_budget_reflects_cuts(self):
        profile = make_crisis_profile()
        allocation = compute_allocation(profile)

        rows = {row.category: row.amount for row in recommended_budget(profile, allocation)}

        assert rows["Gaya Hidup"] == pytest.approx(1_000_000)
        assert rows["Cicilan Hutang"] == pytest.approx(3_000_000 + 3_700_000)
        assert "Investasi" not in rows


def test_allocation_is_deterministic():
    profile = make_profile(rent=3_000_000, goals=[make_goal("g", 5_000_000, months=10)])

    assert compute_allocation(profile) == compute_allocation(profile)
