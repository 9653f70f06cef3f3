"""
Ratio classification and the single health score shared by every report view.

The overall score is not an average of ratios: it bands the number of critical,
serious and moderate issues into letter grades. `grade_from_counts` is the only
place that banding lives; the diagnosis grade and the usage summary both read
`health_score`.
"""

from __future__ import annotations

import math
from typing import Literal, Tuple

from aggregation import compute_aggregates
from finance_model import (
    EmergencyFundStatus,
    FinancialAggregates,
    FinancialProfile,
    HealthMetric,
    HealthScore,
    MetricStatus,
)

RatioKind = Literal["expense", "savings", "debt", "solvency"]

# (healthy bound, warning bound, higher_is_better)
RATIO_THRESHOLDS: dict[str, Tuple[float, float, bool]] = {
    "expense": (50.0, 70.0, False),
    "savings": (20.0, 10.0, True),
    "debt": (30.0, 50.0, False),
    "solvency": (50.0, 20.0, True),
}


def _percent(numerator: float, denominator: float) -> float:
    if denominator == 0:
        return 0.0
    return numerator / denominator * 100


def expense_ratio(aggregates: FinancialAggregates) -> float:
    """Non-debt spending as a percentage of income."""
    non_debt = aggregates.monthly_expenses - aggregates.monthly_debt_payments
    return _percent(non_debt, aggregates.monthly_income)


def savings_ratio(aggregates: FinancialAggregates) -> float:
    return max(0.0, _percent(aggregates.surplus, aggregates.monthly_income))


def debt_service_ratio(aggregates: FinancialAggregates) -> float:
    return _percent(aggregates.monthly_debt_payments, aggregates.monthly_income)


def solvency_ratio(aggregates: FinancialAggregates) -> float:
    if aggregates.total_assets == 0:
        return 100.0 if aggregates.total_liabilities == 0 else 0.0
    return _percent(aggregates.total_assets - aggregates.total_liabilities, aggregates.total_assets)


def status_from_ratio(ratio: float, kind: str) -> MetricStatus:
    thresholds = RATIO_THRESHOLDS.get(kind)
    if thresholds is None:
        return "warning"
    healthy, warning, higher_is_better = thresholds
    if higher_is_better:
        if ratio >= healthy:
            return "healthy"
        if ratio >= warning:
            return "warning"
        return "danger"
    if ratio <= healthy:
        return "healthy"
    if ratio <= warning:
        return "warning"
    return "danger"


def health_metrics(profile: FinancialProfile) -> list[HealthMetric]:
    """
    Compute the four headline ratios with their status and target labels.

    Args:
        profile: FinancialProfile to evaluate.
    Returns:
        Metrics in fixed order: expense, savings, debt, solvency.
    """
    aggregates = compute_aggregates(profile)
    rows = [
        ("expense", "Rasio Pengeluaran", expense_ratio(aggregates), "Persentase pendapatan untuk pengeluaran", "< 50%"),
        ("savings", "Rasio Tabungan", savings_ratio(aggregates), "Persentase pendapatan yang ditabung", "> 20%"),
        ("debt", "Rasio Hutang", debt_service_ratio(aggregates), "Persentase cicilan dari pendapatan", "< 30%"),
        ("solvency", "Rasio Solvabilitas", solvency_ratio(aggregates), "Kemampuan melunasi semua hutang", "> 50%"),
    ]
    return [
        HealthMetric(
            name=name,
            value=value,
            status=status_from_ratio(value, kind),
            description=description,
            target=target,
        )
        for kind, name, value, description, target in rows
    ]


# ---------------------------------------------------------------------------
# Emergency fund and protection needs
# ---------------------------------------------------------------------------


def emergency_fund_months(profile: FinancialProfile) -> int:
    personal = profile.personal
    months = 6 if personal.marital_status == "menikah" else 3
    if personal.dependents >= 1:
        months = max(months, 6)
    if personal.dependents >= 2:
        months = 9
    if personal.dependents >= 3:
        months = 12
    return months


def emergency_fund_needed(profile: FinancialProfile, aggregates: FinancialAggregates | None = None) -> float:
    aggregates = aggregates or compute_aggregates(profile)
    return aggregates.monthly_expenses * emergency_fund_months(profile)


def emergency_coverage(profile: FinancialProfile, aggregates: FinancialAggregates | None = None) -> float:
    """Current reserve as a percentage of the need; 100 when nothing needs covering."""
    needed = emergency_fund_needed(profile, aggregates)
    if needed <= 0:
        return 100.0
    return profile.emergency_fund.current_balance / needed * 100


def emergency_fund_monthly_target(profile: FinancialProfile, aggregates: FinancialAggregates | None = None) -> float:
    gap = emergency_fund_needed(profile, aggregates) - profile.emergency_fund.current_balance
    if gap <= 0:
        return 0.0
    return float(math.ceil(gap / 12))


def emergency_fund_status(profile: FinancialProfile) -> EmergencyFundStatus:
    aggregates = compute_aggregates(profile)
    needed = emergency_fund_needed(profile, aggregates)
    current = profile.emergency_fund.current_balance
    coverage = emergency_coverage(profile, aggregates)
    if coverage >= 100:
        status = "aman"
    elif coverage >= 50:
        status = "kurang"
    else:
        status = "kritis"
    return EmergencyFundStatus(
        months_target=emergency_fund_months(profile),
        needed=needed,
        current=current,
        gap=max(0.0, needed - current),
        coverage_percent=coverage,
        monthly_target=emergency_fund_monthly_target(profile, aggregates),
        status=status,
    )


def life_insurance_needed(profile: FinancialProfile) -> float:
    """Sum assured rule of thumb: 5x (single), 7x (married) or 10x (dependents) annual income."""
    annual_income = compute_aggregates(profile).monthly_income * 12
    multiplier = 5
    if profile.personal.marital_status == "menikah":
        multiplier = 7
    if profile.personal.dependents >= 1:
        multiplier = 10
    return annual_income * multiplier


# ---------------------------------------------------------------------------
# Health score
# ---------------------------------------------------------------------------


def grade_from_counts(critical: int, serious: int, moderate: int) -> Tuple[int, str]:
    """
    Map issue counts to a 0-100 score and a letter grade.

    Bands: F (2+ critical), D (1 critical), C (2+ serious), B (1 serious), A (none).
    Within a band the score drops as issues accumulate.
    """
    if critical >= 2:
        score, grade = 20 + max(0, 15 - critical * 5), "F"
    elif critical >= 1:
        score, grade = 40 + max(0, 14 - serious * 3), "D"
    elif serious >= 2:
        score, grade = 55 + max(0, 14 - serious * 3), "C"
    elif serious >= 1:
        score, grade = 70 + max(0, 14 - moderate * 3), "B"
    else:
        score, grade = 85 + max(0, 15 - moderate * 5), "A"
    return min(100, max(0, score)), grade


def count_issues(profile: FinancialProfile, aggregates: FinancialAggregates | None = None) -> Tuple[int, int, int]:
    aggregates = aggregates or compute_aggregates(profile)
    income = aggregates.monthly_income
    liabilities = aggregates.total_liabilities
    coverage = emergency_coverage(profile, aggregates)
    dsr = debt_service_ratio(aggregates)
    solvency = solvency_ratio(aggregates)
    insurance = profile.insurance

    critical = 0
    if aggregates.surplus < 0:
        critical += 1
    if coverage < 25:
        critical += 1
    if aggregates.net_worth < 0:
        critical += 2
    if liabilities > income * 12 and liabilities > aggregates.total_assets:
        critical += 1

    serious = 0
    if 25 <= coverage < 50:
        serious += 1
    if dsr > 50:
        serious += 1
    if not insurance.has_health:
        serious += 1
    if profile.personal.dependents > 0 and not insurance.has_policy("jiwa"):
        serious += 1
    if 0 <= solvency < 20:
        serious += 1
    if income * 6 < liabilities <= income * 12:
        serious += 1

    moderate = 0
    if 30 < dsr <= 50:
        moderate += 1
    if 50 <= coverage < 100:
        moderate += 1
    if 20 <= solvency < 50:
        moderate += 1

    return critical, serious, moderate


def health_score(profile: FinancialProfile) -> HealthScore:
    critical, serious, moderate = count_issues(profile)
    score, grade = grade_from_counts(critical, serious, moderate)
    return HealthScore(score=score, grade=grade, critical=critical, serious=serious, moderate=moderate)


def health_label(score: int) -> str:
    if score >= 80:
        return "Sangat Baik"
    if score >= 60:
        return "Baik"
    if score >= 40:
        return "Perlu Perhatian"
    return "Kritis"
