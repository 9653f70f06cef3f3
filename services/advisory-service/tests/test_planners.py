from datetime import date

import pytest

from debt_planner import (
    avalanche_order,
    debt_analysis,
    debt_label,
    debt_payoff_plans,
    estimated_interest,
    payoff_strategy,
)
from finance_model import DebtItem
from goal_planner import goal_instruments, goal_plan, goal_plans, sinking_fund_payment
from investment import investment_recommendations, portfolio_risk_tier
from factories import make_debt, make_goal, make_healthy_profile, make_profile


class TestDebtPlanner:
    def test_avalanche_puts_highest_rate_first(self):
        profile = make_profile(
            debts=[make_debt("d18", 5_000_000, 18.0), make_debt("d30", 2_000_000, 30.0)],
        )

        assert payoff_strategy(profile, "avalanche").order == ["d30", "d18"]

    def test_snowball_puts_smallest_balance_first(self):
        profile = make_profile(
            debts=[make_debt("big", 9_000_000, 30.0), make_debt("small", 1_000_000, 10.0)],
        )

        assert payoff_strategy(profile, "snowball").order == ["small", "big"]

    def test_avalanche_rates_are_non_increasing(self):
        debts = [make_debt(str(i), 1_000_000, rate) for i, rate in enumerate([12, 36, 18, 36, 5])]

        rates = [debt.interest_rate for debt in avalanche_order(debts)]

        assert rates == sorted(rates, reverse=True)

    def test_ties_keep_input_order(self):
        debts = [make_debt("first", 1_000_000, 20), make_debt("second", 2_000_000, 20)]

        assert [debt.id for debt in avalanche_order(debts)] == ["first", "second"]

    def test_interest_is_single_period_estimate(self):
        debt = make_debt("d1", 12_000_000, 24.0, months=6)

        assert estimated_interest(debt) == pytest.approx(12_000_000 * 0.24 * 0.5)

    def test_plans_are_ranked_and_labelled(self):
        profile = make_profile(
            debts=[make_debt("d1", 1_000_000, 10, debt_type="kpr"), make_debt("d2", 1_000_000, 40, debt_type="paylater")]
        )

        plans = debt_payoff_plans(profile)

        assert [(plan.priority, plan.debt_name) for plan in plans] == [(1, "PayLater"), (2, "KPR")]

    def test_unknown_debt_type_falls_back(self):
        debt = DebtItem(id="x", debt_type="arisan")

        assert debt_label(debt) == "Hutang Lainnya"

    def test_snowball_reports_no_savings(self):
        profile = make_profile(debts=[make_debt("d1", 10_000_000, 24, months=12)])

        assert payoff_strategy(profile, "snowball").monthly_savings == 0
        assert payoff_strategy(profile, "avalanche").monthly_savings == pytest.approx(240_000)

    def test_analysis_prefers_avalanche_with_high_interest(self):
        profile = make_profile(
            income=10_000_000,
            debts=[make_debt("cc", 5_000_000, 36, payment=4_500_000)],
        )

        analysis = debt_analysis(profile)

        assert analysis.status == "kritis"
        assert analysis.high_interest_debt_ids == ["cc"]
        assert analysis.recommended_method == "avalanche"

    def test_empty_debt_list(self):
        strategy = payoff_strategy(make_profile(), "avalanche")

        assert strategy.order == []
        assert strategy.payoff_months == 0


class TestInvestmentRecommender:
    def test_safety_table_until_emergency_fund_is_full(self):
        recommendations = investment_recommendations(make_profile(rent=4_000_000, emergency=0))

        assert [row.instrument for row in recommendations] == ["Tabungan/Deposito", "Reksadana Pasar Uang"]

    @pytest.mark.parametrize("tolerance, tier", [("rendah", "konservatif"), ("sedang", "moderat"), ("tinggi", "agresif")])
    def test_tier_from_tolerance(self, tolerance, tier):
        profile = make_healthy_profile()
        profile.risk_profile.tolerance = tolerance

        assert portfolio_risk_tier(profile) == tier

    def test_age_caps_the_tier(self):
        older = make_healthy_profile(age=45)
        older.risk_profile.tolerance = "tinggi"
        senior = make_healthy_profile(age=55)
        senior.risk_profile.tolerance = "tinggi"

        assert portfolio_risk_tier(older) == "moderat"
        assert portfolio_risk_tier(senior) == "konservatif"

    @pytest.mark.parametrize("tolerance", ["rendah", "sedang", "tinggi"])
    def test_allocations_sum_to_hundred(self, tolerance):
        profile = make_healthy_profile()
        profile.risk_profile.tolerance = tolerance

        assert sum(row.allocation for row in investment_recommendations(profile)) == 100


class TestGoalPlanner:
    def test_sinking_fund_rounds_up(self):
        payment = sinking_fund_payment(12_000_000, 12, 0.05)

        assert payment == float(int(payment))
        assert 970_000 < payment < 1_000_000

    def test_sinking_fund_edge_cases(self):
        assert sinking_fund_payment(0, 12, 0.05) == 0.0
        assert sinking_fund_payment(1_000_000, 0, 0.05) == 1_000_000
        assert sinking_fund_payment(1_200_000, 12, 0.0) == pytest.approx(100_000)

    def test_instruments_by_horizon(self):
        assert goal_instruments(make_goal("g", 1, months=6, risk_tier="konservatif"))[0] == "Deposito"
        assert goal_instruments(make_goal("g", 1, months=24, risk_tier="moderat"))[0] == "Reksadana Campuran"
        assert goal_instruments(make_goal("g", 1, months=60, risk_tier="agresif"))[0] == "Saham Indonesia (LQ45/IDX30)"

    def test_projected_completion_clamps_month_end(self):
        goal = make_goal("g", 10_000_000, months=1)

        plan = goal_plan(goal, make_profile(), today=date(2026, 1, 31))

        assert plan.projected_completion == date(2026, 2, 28)

    def test_on_track_compares_surplus(self):
        profile = make_profile(
            income=10_000_000,
            rent=9_000_000,
            goals=[make_goal("cheap", 1_200_000, months=12), make_goal("pricey", 120_000_000, months=12)],
        )

        plans = {plan.goal_id: plan for plan in goal_plans(profile, today=date(2026, 10, 18))}

        assert plans["cheap"].on_track is True
        assert plans["pricey"].on_track is False
