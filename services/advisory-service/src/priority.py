from __future__ import annotations

from typing import Iterable, List

from aggregation import compute_aggregates
from finance_model import Diagnosis, DiagnosisItem, FinancialAggregates, FinancialProfile, PriorityIssue
from formatting import format_currency
from health_metrics import emergency_fund_needed, life_insurance_needed

HOSPITALIZATION_COST_ESTIMATE = 100_000_000

CRITICAL_URGENCY = "Harus ditangani dalam 30 hari"
IMPORTANT_URGENCY = "Selesaikan dalam 3-6 bulan"
OPTIMIZATION_URGENCY = "Optimasi setelah fondasi stabil"


def _has(issue: str, *fragments: str) -> bool:
    return any(fragment in issue for fragment in fragments)


def short_explanation(issue: str) -> str:
    """One-line reason shown next to an issue in the focus list."""
    if _has(issue, "Keluarga", "Terproteksi"):
        return "Seluruh pendapatan keluarga bergantung pada Anda tanpa perlindungan pengganti penghasilan."
    if _has(issue, "Dana Darurat"):
        return "Tidak ada buffer finansial untuk menghadapi situasi darurat atau kehilangan pekerjaan."
    if _has(issue, "Cashflow", "Negatif"):
        return "Pengeluaran melebihi pendapatan, kondisi ini tidak berkelanjutan."
    if _has(issue, "Hutang", "DSR"):
        return "Cicilan yang tidak terkontrol berpotensi membatasi fleksibilitas keuangan ke depan."
    if _has(issue, "Kesehatan"):
        return "Proteksi kesehatan belum memadai untuk menanggung biaya rumah sakit."
    if _has(issue, "Proteksi", "Asuransi"):
        return "Gap proteksi perlu ditutup untuk melindungi aset dan penghasilan."
    if _has(issue, "Tujuan", "Dana"):
        return "Beberapa tujuan besar belum memiliki rencana pendanaan yang jelas."
    if _has(issue, "Investasi"):
        return "Alokasi investasi belum optimal untuk pertumbuhan kekayaan jangka panjang."
    return "Perlu perhatian untuk menjaga stabilitas keuangan Anda."


def _dependent_context(profile: FinancialProfile) -> str:
    personal = profile.personal
    if personal.dependents > 0:
        return f"{personal.dependents} tanggungan yang bergantung pada penghasilan Anda"
    if personal.marital_status == "menikah":
        return "pasangan Anda"
    return "diri Anda sendiri"


def justification(issue: str, profile: FinancialProfile, aggregates: FinancialAggregates) -> str:
    """
    Longer reasoning attached to critical issues, phrased around the household's situation.

    Args:
        issue: Diagnosis issue label.
        profile: FinancialProfile for dependent and marital context.
        aggregates: Aggregates supplying the amounts quoted in the text.
    Returns:
        Indonesian sentence starting with "Karena".
    """
    if _has(issue, "Keluarga", "Terproteksi"):
        return (
            f"Karena seluruh pendapatan keluarga bergantung pada Anda ({_dependent_context(profile)}), jika terjadi "
            "risiko kesehatan atau kematian, keluarga akan kehilangan sumber penghasilan "
            f"{format_currency(aggregates.monthly_income)}/bulan tanpa perlindungan pengganti."
        )
    if _has(issue, "Dana Darurat"):
        return (
            f"Karena dana darurat Anda baru {format_currency(profile.emergency_fund.current_balance)} dari kebutuhan "
            f"{format_currency(emergency_fund_needed(profile, aggregates))}, jika terjadi kehilangan pekerjaan atau "
            "emergency medis, Anda tidak memiliki buffer finansial yang memadai."
        )
    if _has(issue, "Cashflow", "Negatif"):
        return (
            f"Karena pengeluaran melebihi pendapatan sebesar {format_currency(abs(aggregates.surplus))}/bulan, kondisi "
            "ini akan menggerus tabungan dan berpotensi menambah hutang jika tidak segera diperbaiki."
        )
    if _has(issue, "Hutang", "DSR"):
        return (
            f"Karena total kewajiban hutang Anda {format_currency(aggregates.total_liabilities)} dengan cicilan yang "
            "signifikan, ini membatasi fleksibilitas keuangan dan menunda pencapaian tujuan finansial lainnya."
        )
    if _has(issue, "Kesehatan"):
        return (
            "Karena biaya rawat inap rumah sakit bisa mencapai puluhan juta rupiah, tanpa proteksi kesehatan yang "
            "memadai, satu kejadian medis bisa menguras seluruh tabungan Anda."
        )
    return (
        "Karena kondisi ini memiliki dampak langsung pada stabilitas keuangan Anda, penanganan segera diperlukan "
        "untuk menghindari konsekuensi finansial yang lebih besar."
    )


def _weakness_impact(issue: str, profile: FinancialProfile, aggregates: FinancialAggregates) -> float:
    if issue == "Cashflow Negatif":
        return abs(aggregates.surplus) * 12
    if "Dana Darurat" in issue:
        return emergency_fund_needed(profile, aggregates) - profile.emergency_fund.current_balance
    if "Hutang" in issue:
        return aggregates.total_liabilities
    return 0.0


def _risk_impact(issue: str, profile: FinancialProfile) -> float:
    if "Kesehatan" in issue:
        return float(HOSPITALIZATION_COST_ESTIMATE)
    if "Keluarga" in issue:
        return life_insurance_needed(profile)
    return 0.0


def _with_severity(items: Iterable[DiagnosisItem], *severities: str) -> List[DiagnosisItem]:
    return [item for item in items if item.severity in severities]


def classify_priority_issues(
    diagnosis: Diagnosis,
    profile: FinancialProfile,
    aggregates: FinancialAggregates | None = None,
) -> List[PriorityIssue]:
    """
    Rank every diagnosis item into KRITIS, PENTING or OPTIMISASI.

    Critical weaknesses come before critical hidden risks; serious items from both
    lists follow; everything moderate or minor (false securities included) closes
    the list. Ranks are sequential from 1.
    """
    aggregates = aggregates or compute_aggregates(profile)
    income = aggregates.monthly_income
    issues: List[PriorityIssue] = []

    def add(item: DiagnosisItem, classification: str, urgency: str, impact: float, deadline: str) -> None:
        issues.append(
            PriorityIssue(
                rank=len(issues) + 1,
                classification=classification,
                issue=item.issue,
                urgency=urgency,
                impact=impact,
                deadline=deadline,
                short_explanation=short_explanation(item.issue),
                justification=justification(item.issue, profile, aggregates) if classification == "KRITIS" else None,
            )
        )

    for item in _with_severity(diagnosis.weaknesses, "kritis"):
        add(item, "KRITIS", CRITICAL_URGENCY, _weakness_impact(item.issue, profile, aggregates), "30 hari")
    for item in _with_severity(diagnosis.hidden_risks, "kritis"):
        add(item, "KRITIS", CRITICAL_URGENCY, _risk_impact(item.issue, profile), "30 hari")

    for item in _with_severity(diagnosis.weaknesses + diagnosis.hidden_risks, "serius"):
        add(item, "PENTING", IMPORTANT_URGENCY, income * 3, "3-6 bulan")

    everything = diagnosis.weaknesses + diagnosis.hidden_risks + diagnosis.false_securities
    for item in _with_severity(everything, "moderat", "ringan"):
        add(item, "OPTIMISASI", OPTIMIZATION_URGENCY, income, "6-12 bulan")

    return issues
