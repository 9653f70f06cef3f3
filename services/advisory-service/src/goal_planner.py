from __future__ import annotations

import calendar
import math
from datetime import date
from typing import Dict, List

from aggregation import monthly_surplus
from finance_model import FinancialGoal, FinancialProfile, GoalPlan

ANNUAL_RETURN_BY_TIER: Dict[str, float] = {
    "konservatif": 0.05,
    "moderat": 0.08,
    "agresif": 0.12,
}
DEFAULT_ANNUAL_RETURN = 0.05

# tier -> (short <=12 months, medium 13-36 months, long >36 months)
GOAL_INSTRUMENTS: Dict[str, tuple[List[str], List[str], List[str]]] = {
    "konservatif": (
        ["Deposito", "Tabungan Berjangka", "Reksadana Pasar Uang (RDPU)"],
        ["Deposito", "Reksadana Pasar Uang (RDPU)", "Obligasi Negara (ORI/SBR)", "Emas (logam mulia)"],
        ["Reksadana Pasar Uang (RDPU)", "Reksadana Pendapatan Tetap", "Obligasi Negara", "Emas (logam mulia)"],
    ),
    "moderat": (
        ["Reksadana Pasar Uang (RDPU)", "Deposito", "Obligasi Negara"],
        ["Reksadana Campuran", "Reksadana Pendapatan Tetap", "Emas", "Obligasi Negara"],
        [
            "Reksadana Campuran",
            "Reksadana Saham (30-50%)",
            "Reksadana Pendapatan Tetap (50-70%)",
            "ETF S&P 500 (porsi kecil)",
        ],
    ),
    "agresif": (
        ["Reksadana Pasar Uang (RDPU)", "Reksadana Campuran", "Hindari saham/kripto untuk jangka pendek"],
        ["Reksadana Saham", "Reksadana Campuran", "Saham blue chip (LQ45)", "ETF S&P 500 (VOO/SPY)"],
        [
            "Saham Indonesia (LQ45/IDX30)",
            "ETF S&P 500 (VOO/SPY)",
            "Reksadana Saham",
            "Kripto (max 5-10% portofolio)",
        ],
    ),
}


def sinking_fund_payment(shortfall: float, months: int, annual_return: float) -> float:
    """
    Equal monthly deposit that grows to `shortfall` after `months` at `annual_return`.

    Args:
        shortfall: Amount still missing; non-positive shortfalls need no deposit.
        months: Number of deposits; a non-positive horizon means the whole shortfall is due now.
        annual_return: Nominal annual rate as a fraction, compounded monthly.
    Returns:
        The payment rounded up to the next whole rupiah (zero-rate falls back to shortfall / months).
    """
    if shortfall <= 0:
        return 0.0
    if months <= 0:
        return float(math.ceil(shortfall))
    monthly_rate = annual_return / 12
    if monthly_rate == 0:
        return shortfall / months
    payment = shortfall * monthly_rate / ((1 + monthly_rate) ** months - 1)
    return float(math.ceil(payment))


def goal_monthly_required(goal: FinancialGoal) -> float:
    annual_return = ANNUAL_RETURN_BY_TIER.get(goal.risk_tier, DEFAULT_ANNUAL_RETURN)
    return sinking_fund_payment(goal.target_amount - goal.collected_amount, goal.timeframe_months, annual_return)


def goal_instruments(goal: FinancialGoal) -> List[str]:
    short, medium, long = GOAL_INSTRUMENTS.get(goal.risk_tier, GOAL_INSTRUMENTS["agresif"])
    if goal.timeframe_months <= 12:
        return list(short)
    if goal.timeframe_months <= 36:
        return list(medium)
    return list(long)


def _add_months(start: date, months: int) -> date:
    month_index = start.month - 1 + max(0, months)
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def goal_plan(goal: FinancialGoal, profile: FinancialProfile, today: date | None = None) -> GoalPlan:
    monthly_required = goal_monthly_required(goal)
    return GoalPlan(
        goal_id=goal.id,
        goal_name=goal.name,
        target_amount=goal.target_amount,
        current_amount=goal.collected_amount,
        monthly_required=monthly_required,
        timeline_months=goal.timeframe_months,
        recommended_instruments=goal_instruments(goal),
        projected_completion=_add_months(today or date.today(), goal.timeframe_months),
        on_track=monthly_surplus(profile) >= monthly_required,
    )


def goal_plans(profile: FinancialProfile, today: date | None = None) -> List[GoalPlan]:
    return [goal_plan(goal, profile, today) for goal in profile.goals]
