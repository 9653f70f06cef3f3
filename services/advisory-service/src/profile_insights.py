"""
Descriptive insights shown alongside the report: life stage, income stability and protection needs.

These are independent of the advisory pipeline and never feed back into the
allocation or the health score.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Literal

from aggregation import compute_aggregates
from diagnosis import UMR
from finance_model import EmergencyFundStatus, FinancialProfile
from formatting import format_currency
from health_metrics import emergency_fund_status

IncomeStability = Literal["stabil", "fluktuatif", "tidak_stabil"]
ProtectionKind = Literal["health", "critical_illness", "life"]

BPJS_COVERAGE_BY_CLASS = {
    "kelas_1": 50_000_000,
    "kelas_2": 30_000_000,
    "kelas_3": 20_000_000,
}
DEFAULT_BPJS_COVERAGE = 30_000_000

HOSPITAL_DAYS_PER_YEAR = 180
HEALTH_LIMIT_BUFFER = 200_000_000
CRITICAL_ILLNESS_RECOVERY_YEARS = 3
CRITICAL_ILLNESS_FLOOR = 500_000_000
CRITICAL_ILLNESS_ROUNDING = 100_000_000
RETIREMENT_AGE = 55
DEPENDENT_SUPPORT_YEARS = 20
EDUCATION_COST_PER_DEPENDENT = 500_000_000


@dataclass
class LifeStage:
    name: str
    description: str
    focus: str


@dataclass
class ProtectionGap:
    kind: ProtectionKind
    name: str
    gap_amount: float
    priority: Literal["tinggi", "sedang"]
    recommendation: str


@dataclass
class InsuranceNeeds:
    recommended_health_class: str
    estimated_daily_cost: float
    ideal_health_limit: float
    current_health_coverage: float
    health_gap: float
    critical_illness_need: float
    critical_illness_coverage: float
    critical_illness_gap: float
    human_life_value: float
    family_need: float
    life_need: float
    life_coverage: float
    life_gap: float
    productive_years_left: int
    gaps: List[ProtectionGap] = field(default_factory=list)
    status: Literal["underinsured", "adequate"] = "adequate"
    recommendation: str = ""


@dataclass
class ProfileInsights:
    life_stage: LifeStage
    income_stability: IncomeStability
    emergency_fund: EmergencyFundStatus
    insurance_needs: InsuranceNeeds


def life_stage(age: int) -> LifeStage:
    if age < 30:
        return LifeStage(
            name="Wealth Accumulation",
            description="Masa awal karir dengan horizon investasi panjang",
            focus="Bangun dana darurat, hindari hutang konsumtif, mulai investasi rutin",
        )
    if age < 45:
        return LifeStage(
            name="Growth & Protection",
            description="Pendapatan bertumbuh bersamaan dengan tanggung jawab keluarga",
            focus="Lengkapi proteksi keluarga dan percepat pertumbuhan aset",
        )
    if age < 55:
        return LifeStage(
            name="Preservation",
            description="Menjelang pensiun, menjaga kekayaan lebih penting dari mengejar return",
            focus="Kurangi risiko portofolio dan pastikan dana pensiun mencukupi",
        )
    return LifeStage(
        name="Distribution",
        description="Masa pensiun, aset mulai digunakan untuk kebutuhan hidup",
        focus="Arus kas pensiun yang stabil dan perencanaan warisan",
    )


def income_stability(employment_status: str) -> IncomeStability:
    if employment_status == "karyawan":
        return "stabil"
    if employment_status in ("freelancer", "pengusaha"):
        return "fluktuatif"
    return "tidak_stabil"


def _health_class(monthly_income: float) -> tuple[str, float]:
    if monthly_income >= UMR * 3:
        return "VIP", 2_000_000.0
    if monthly_income >= UMR * 2:
        return "Kelas 1 RS Swasta", 1_000_000.0
    return "Standar RS Swasta", 500_000.0


def insurance_needs(profile: FinancialProfile) -> InsuranceNeeds:
    """
    Estimate health, critical-illness and life protection needs against current cover.

    Assumptions:
        Health: daily room cost by income band for 180 days plus a 200M buffer; BPJS
        counts 20-50M by class. Critical illness: three years of expenses, at least
        500M, rounded up to the next 100M. Life: the larger of human life value
        (income until age 55) and family need (20 years of expenses with dependents,
        debts and 500M education per dependent, less liquid assets).
    """
    aggregates = compute_aggregates(profile)
    personal = profile.personal
    insurance = profile.insurance
    annual_income = aggregates.monthly_income * 12
    annual_expenses = aggregates.monthly_expenses * 12

    health_class, daily_cost = _health_class(aggregates.monthly_income)
    ideal_health = daily_cost * HOSPITAL_DAYS_PER_YEAR + HEALTH_LIMIT_BUFFER
    health_cover = 0.0
    if insurance.bpjs.held:
        health_cover += BPJS_COVERAGE_BY_CLASS.get(insurance.bpjs.coverage_class, DEFAULT_BPJS_COVERAGE)
    if insurance.private_health.held:
        health_cover += sum(benefit.annual_limit for benefit in insurance.private_health.benefits)
    health_gap = max(0.0, ideal_health - health_cover)

    ci_need = max(annual_expenses * CRITICAL_ILLNESS_RECOVERY_YEARS, CRITICAL_ILLNESS_FLOOR)
    ci_need = math.ceil(ci_need / CRITICAL_ILLNESS_ROUNDING) * CRITICAL_ILLNESS_ROUNDING
    ci_cover = sum(p.benefit_value for p in insurance.other_policies if p.policy_type == "penyakit_kritis")
    ci_gap = max(0.0, ci_need - ci_cover)

    productive_years = max(0, RETIREMENT_AGE - personal.age)
    hlv = annual_income * productive_years
    support_years = DEPENDENT_SUPPORT_YEARS if personal.dependents > 0 else 0
    family_need = (
        annual_expenses * support_years
        + aggregates.total_liabilities
        + personal.dependents * EDUCATION_COST_PER_DEPENDENT
        - aggregates.liquid_assets
    )
    life_need = max(hlv, family_need)
    life_cover = sum(p.benefit_value for p in insurance.other_policies if p.policy_type == "jiwa")
    life_gap = max(0.0, life_need - life_cover)

    gaps: List[ProtectionGap] = []
    if health_gap > 0:
        gaps.append(
            ProtectionGap(
                kind="health",
                name="Asuransi Kesehatan",
                gap_amount=health_gap,
                priority="tinggi",
                recommendation=f"Tambah asuransi kesehatan dengan limit {format_currency(health_gap)}/tahun",
            )
        )
    if ci_gap > 0:
        gaps.append(
            ProtectionGap(
                kind="critical_illness",
                name="Asuransi Penyakit Kritis",
                gap_amount=ci_gap,
                priority="tinggi" if personal.age > 40 else "sedang",
                recommendation=f"Tambah proteksi penyakit kritis UP {format_currency(ci_gap)}",
            )
        )
    if life_gap > 0 and personal.dependents > 0:
        gaps.append(
            ProtectionGap(
                kind="life",
                name="Asuransi Jiwa",
                gap_amount=life_gap,
                priority="tinggi",
                recommendation=f"Tambah asuransi jiwa berjangka UP {format_currency(life_gap)}",
            )
        )

    if gaps:
        recommendation = f"Terdapat {len(gaps)} gap proteksi yang perlu ditutup. Prioritaskan {gaps[0].name}."
    else:
        recommendation = "Proteksi asuransi sudah memadai. Review berkala setiap tahun."

    return InsuranceNeeds(
        recommended_health_class=health_class,
        estimated_daily_cost=daily_cost,
        ideal_health_limit=ideal_health,
        current_health_coverage=health_cover,
        health_gap=health_gap,
        critical_illness_need=float(ci_need),
        critical_illness_coverage=float(ci_cover),
        critical_illness_gap=ci_gap,
        human_life_value=hlv,
        family_need=family_need,
        life_need=life_need,
        life_coverage=float(life_cover),
        life_gap=life_gap,
        productive_years_left=productive_years,
        gaps=gaps,
        status="underinsured" if gaps else "adequate",
        recommendation=recommendation,
    )


def profile_insights(profile: FinancialProfile) -> ProfileInsights:
    return ProfileInsights(
        life_stage=life_stage(profile.personal.age),
        income_stability=income_stability(profile.personal.employment_status),
        emergency_fund=emergency_fund_status(profile),
        insurance_needs=insurance_needs(profile),
    )
