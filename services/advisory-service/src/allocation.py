"""
Unified allocation waterfall for the monthly surplus.

Every report section that shows a contribution amount (strategies, action plan,
recommended budget, API responses) reads the `Allocation` produced here. The
waterfall has two modes:

- normal: emergency fund, insurance gap, goals, then investment;
- debt crisis (negative net worth or liabilities above 6x monthly income):
  a minimal emergency buffer and everything else to extra debt payments, with
  forced lifestyle/subscription cuts when the crisis is severe.
"""

from __future__ import annotations

import logging
from typing import List

from aggregation import breakdown_amount, compute_aggregates, expense_breakdown, insurance_premiums
from finance_model import Allocation, BreakdownItem, FinancialAggregates, FinancialProfile
from health_metrics import emergency_fund_needed

logger = logging.getLogger(__name__)

CRISIS_LIABILITY_MULTIPLE = 6
SEVERE_CRISIS_LIABILITY_MULTIPLE = 12

EMERGENCY_FILL_MONTHS = 12
EMERGENCY_SURPLUS_SHARE = 0.30
INSURANCE_INCOME_SHARE = 0.10
INSURANCE_SURPLUS_SHARE = 0.15

CRISIS_EMERGENCY_SURPLUS_SHARE = 0.10
CRISIS_EMERGENCY_FILL_MONTHS = 6
SEVERE_LIFESTYLE_CUT = 0.50
SEVERE_SUBSCRIPTION_INCOME_CAP = 0.02


def is_debt_crisis(aggregates: FinancialAggregates) -> bool:
    return (
        aggregates.net_worth < 0
        or aggregates.total_liabilities > aggregates.monthly_income * CRISIS_LIABILITY_MULTIPLE
    )


def is_severe_debt_crisis(aggregates: FinancialAggregates) -> bool:
    return (
        aggregates.net_worth < 0
        and aggregates.total_liabilities > aggregates.monthly_income * SEVERE_CRISIS_LIABILITY_MULTIPLE
    )


def goals_monthly_need(profile: FinancialProfile) -> float:
    """Straight-line monthly need across all goals (shortfall / months, ignoring returns)."""
    total = 0.0
    for goal in profile.goals:
        remaining = goal.target_amount - goal.collected_amount
        if remaining > 0 and goal.timeframe_months > 0:
            total += remaining / goal.timeframe_months
    return total


def compute_allocation(profile: FinancialProfile, rental_upgrade_amount: float | None = None) -> Allocation:
    """
    Distribute the available monthly surplus across competing needs.

    Args:
        profile: FinancialProfile to allocate for.
        rental_upgrade_amount: Optional new monthly rent; when positive it replaces the
            current rent and the extra housing cost is taken out of the surplus first.
    Returns:
        Allocation whose contributions never exceed the available surplus (plus the
        forced lifestyle/subscription cuts in a severe crisis).
    """
    aggregates = compute_aggregates(profile)
    income = aggregates.monthly_income
    insurance = profile.insurance
    breakdown = expense_breakdown(profile)

    current_rent = breakdown_amount(breakdown, "Tempat Tinggal")
    additional_housing = 0.0
    if rental_upgrade_amount and rental_upgrade_amount > 0:
        additional_housing = rental_upgrade_amount - current_rent
    available = max(0.0, aggregates.surplus - additional_housing)

    has_health = insurance.has_health
    has_life = insurance.has_policy("jiwa")
    has_critical = insurance.has_policy("penyakit_kritis")

    emergency = insurance_gap = goals = investment = additional_debt = 0.0
    lifestyle_cut = subscription_cut = 0.0
    crisis = is_debt_crisis(aggregates)
    severe = is_severe_debt_crisis(aggregates)

    if crisis:
        reserve = profile.emergency_fund.current_balance
        minimal_target = aggregates.monthly_expenses
        if reserve < minimal_target and available > 0:
            emergency = min(
                (minimal_target - reserve) / CRISIS_EMERGENCY_FILL_MONTHS,
                available * CRISIS_EMERGENCY_SURPLUS_SHARE,
            )
        additional_debt = max(0.0, available - emergency)

        if severe:
            lifestyle = breakdown_amount(breakdown, "Gaya Hidup")
            if lifestyle > 0:
                lifestyle_cut = lifestyle * SEVERE_LIFESTYLE_CUT
            subscriptions = breakdown_amount(breakdown, "Langganan")
            cap = income * SEVERE_SUBSCRIPTION_INCOME_CAP
            if subscriptions > cap:
                subscription_cut = subscriptions - cap
            additional_debt += lifestyle_cut + subscription_cut
    else:
        gap = max(0.0, emergency_fund_needed(profile, aggregates) - profile.emergency_fund.current_balance)
        if gap > 0:
            emergency = min(gap / EMERGENCY_FILL_MONTHS, available * EMERGENCY_SURPLUS_SHARE)

        needs_life = profile.personal.dependents > 0 and not has_life
        if not has_health or needs_life or not has_critical:
            premium_gap = max(0.0, income * INSURANCE_INCOME_SHARE - insurance_premiums(profile))
            if premium_gap > 0:
                insurance_gap = min(premium_gap, available * INSURANCE_SURPLUS_SHARE)

        remaining = available - emergency - insurance_gap
        if profile.goals and remaining > 0:
            goals = min(goals_monthly_need(profile), remaining)
        investment = max(0.0, remaining - goals)

    logger.debug(
        {
            "event": "allocation_computed",
            "debt_crisis": crisis,
            "severe_crisis": severe,
            "available_surplus": round(available, 2),
        }
    )

    return Allocation(
        available_surplus=available,
        emergency=emergency,
        insurance=insurance_gap,
        goals=goals,
        investment=investment,
        additional_debt=additional_debt,
        lifestyle_cut=lifestyle_cut,
        subscription_cut=subscription_cut,
        is_debt_crisis=crisis,
        is_severe_crisis=severe,
        has_health_insurance=has_health,
        has_life_insurance=has_life,
        has_critical_illness=has_critical,
        rental_upgrade_amount=rental_upgrade_amount if rental_upgrade_amount and rental_upgrade_amount > 0 else None,
    )


def recommended_budget(profile: FinancialProfile, allocation: Allocation) -> List[BreakdownItem]:
    """
    Express an allocation as a full monthly budget.

    Current essential categories are kept as-is, lifestyle and subscriptions shrink by
    the crisis cuts, and the surplus contributions appear as their own rows.
    """
    current = expense_breakdown(profile)
    housing = breakdown_amount(current, "Tempat Tinggal")
    if allocation.rental_upgrade_amount:
        housing = allocation.rental_upgrade_amount

    rows = [
        ("Tempat Tinggal", housing),
        ("Tagihan", breakdown_amount(current, "Tagihan")),
        ("Makan & Minum", breakdown_amount(current, "Makan & Minum")),
        ("Belanja Bulanan", breakdown_amount(current, "Belanja Bulanan")),
        ("Transportasi", breakdown_amount(current, "Transportasi")),
        ("Gaya Hidup", breakdown_amount(current, "Gaya Hidup") - allocation.lifestyle_cut),
        ("Langganan", breakdown_amount(current, "Langganan") - allocation.subscription_cut),
        ("Kewajiban Keluarga", breakdown_amount(current, "Kewajiban Keluarga")),
        ("Cicilan Hutang", breakdown_amount(current, "Cicilan Hutang") + allocation.additional_debt),
        ("Asuransi", breakdown_amount(current, "Asuransi") + allocation.insurance),
        ("Dana Darurat", allocation.emergency),
        ("Investasi", allocation.investment),
        ("Tujuan Keuangan", allocation.goals),
        ("Lainnya", breakdown_amount(current, "Lainnya")),
    ]
    return [BreakdownItem(category=name, amount=float(amount)) for name, amount in rows if amount > 0]
