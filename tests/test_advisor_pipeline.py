"""End-to-end advisory pipeline: profile → analysis → allocation → report → summary."""

from __future__ import annotations

import dataclasses
import json
from datetime import datetime, timezone

import pytest
from advisor import generate_advisor_report, report_summary
from aggregation import compute_aggregates
from allocation import compute_allocation, recommended_budget
from debt_planner import payoff_strategy
from feasibility import assess_lifestyle_intent
from health_metrics import emergency_fund_needed, health_metrics, health_score
from narrative_intents import detect_narrative_intents

from factories import make_crisis_profile, make_debt, make_healthy_profile, make_profile

FIXED_NOW = datetime(2026, 10, 18, tzinfo=timezone.utc)


def _serialize(report) -> str:
    return json.dumps(dataclasses.asdict(report), sort_keys=True, default=str)


@pytest.mark.integration
def test_surplus_and_savings_ratio() -> None:
    profile = make_profile(income=10_000_000, rent=7_000_000)

    assert compute_aggregates(profile).surplus == pytest.approx(3_000_000)
    savings = next(metric for metric in health_metrics(profile) if metric.name == "Rasio Tabungan")
    assert savings.value == pytest.approx(30.0)
    assert savings.status == "healthy"


@pytest.mark.integration
def test_avalanche_order() -> None:
    profile = make_profile(debts=[make_debt("d18", 5_000_000, 18), make_debt("d30", 2_000_000, 30)])

    assert payoff_strategy(profile, "avalanche").order == ["d30", "d18"]


@pytest.mark.integration
def test_single_person_emergency_need() -> None:
    assert emergency_fund_needed(make_profile(rent=5_000_000)) == pytest.approx(15_000_000)


@pytest.mark.integration
def test_purchase_story_feasibility() -> None:
    profile = make_profile(income=10_000_000, rent=8_000_000)
    intents = detect_narrative_intents("saya mau beli iPhone 20 juta")

    assessment = assess_lifestyle_intent(intents.lifestyle_upgrade, profile)

    assert intents.lifestyle_upgrade.amount == pytest.approx(20_000_000)
    assert assessment.months_to_save == 10
    assert assessment.status == "MARGINAL"


@pytest.mark.integration
def test_debt_crisis_stops_growth_contributions() -> None:
    profile = make_crisis_profile()
    aggregates = compute_aggregates(profile)

    allocation = compute_allocation(profile)

    assert aggregates.net_worth < 0
    assert aggregates.total_liabilities == pytest.approx(aggregates.monthly_income * 13)
    assert allocation.is_debt_crisis and allocation.is_severe_crisis
    assert allocation.investment == 0
    assert allocation.goals == 0


@pytest.mark.integration
@pytest.mark.parametrize("factory", [make_healthy_profile, make_crisis_profile])
def test_report_is_reproducible_and_consistent(factory) -> None:
    profile = factory(story="Saya bingung soal asuransi, mau pindah kontrakan sewa 4 juta")

    first = generate_advisor_report(profile, now=FIXED_NOW)
    second = generate_advisor_report(profile, now=FIXED_NOW)

    assert _serialize(first) == _serialize(second)
    assert first.allocation == compute_allocation(profile, rental_upgrade_amount=4_000_000)
    assert first.diagnosis.overall_grade == health_score(profile).grade
    assert first.feasibility is not None
    assert [strategy.priority for strategy in first.strategies] == list(range(1, len(first.strategies) + 1))

    summary = report_summary(profile, first)
    assert summary.grade == first.diagnosis.overall_grade
    assert summary.net_worth == pytest.approx(compute_aggregates(profile).net_worth)


@pytest.mark.integration
def test_feasible_rental_upgrade_is_budgeted_into_report() -> None:
    profile = make_healthy_profile(rent=2_000_000, story="Saya mau pindah kos 3 juta biar dekat kantor")

    report = generate_advisor_report(profile, now=FIXED_NOW)

    assert report.feasibility is not None
    assert report.feasibility.status == "FEASIBLE"
    assert report.allocation == compute_allocation(profile, rental_upgrade_amount=3_000_000)
    assert report.allocation.available_surplus == pytest.approx(compute_allocation(profile).available_surplus - 1_000_000)
    assert report.recommended_budget == recommended_budget(profile, report.allocation)

    rows = {row.category: row.amount for row in report.recommended_budget}
    assert rows["Tempat Tinggal"] == pytest.approx(3_000_000)
    assert sum(rows.values()) == pytest.approx(compute_aggregates(profile).monthly_income)


@pytest.mark.integration
def test_rejected_rental_upgrade_keeps_current_allocation() -> None:
    profile = make_profile(income=10_000_000, rent=3_000_000, story="mau pindah kontrakan sewa 10 juta")

    report = generate_advisor_report(profile, now=FIXED_NOW)

    assert report.feasibility.status == "NOT_FEASIBLE"
    assert report.allocation == compute_allocation(profile)
