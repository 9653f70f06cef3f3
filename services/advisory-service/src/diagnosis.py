"""
Stage one of the advisory pipeline: independent threshold checks over the profile.

Items are grouped into weaknesses, hidden risks and false securities. Items
raised by the user's own story come first so they stay visible at the top of
each list. The overall grade is not recounted from these items; it is read from
`health_score` so the diagnosis and the dashboard score never disagree.
"""

from __future__ import annotations

from typing import List

from aggregation import compute_aggregates
from debt_planner import HIGH_INTEREST_RATE
from finance_model import Diagnosis, DiagnosisItem, FinancialAggregates, FinancialProfile, NarrativeIntents
from formatting import format_currency, format_decimal, format_percent
from health_metrics import (
    debt_service_ratio,
    emergency_coverage,
    emergency_fund_needed,
    expense_ratio,
    health_label,
    health_score,
    savings_ratio,
)

UMR = 5_000_000  # Jakarta minimum wage used as the income yardstick
NARRATIVE_EVIDENCE = "Disampaikan dalam cerita keuangan Anda"


def _narrative_item(issue: str, severity: str, impact: str) -> DiagnosisItem:
    return DiagnosisItem(issue=issue, severity=severity, impact=impact, evidence=NARRATIVE_EVIDENCE)


def _narrative_items(intents: NarrativeIntents) -> tuple[list[DiagnosisItem], list[DiagnosisItem], list[DiagnosisItem]]:
    weaknesses: List[DiagnosisItem] = []
    hidden_risks: List[DiagnosisItem] = []
    false_securities: List[DiagnosisItem] = []
    if not intents.raw_keywords:
        return weaknesses, hidden_risks, false_securities

    if intents.mentions_insurance and intents.mentions_confusion:
        hidden_risks.append(
            _narrative_item(
                "Kebutuhan Proteksi Belum Terstruktur",
                "moderat",
                "Anda secara eksplisit menyampaikan kebingungan terkait kebutuhan asuransi. Ini menunjukkan "
                "adanya kebutuhan proteksi finansial yang belum sepenuhnya terstruktur.",
            )
        )
    if intents.mentions_job_loss:
        hidden_risks.append(
            _narrative_item(
                "Kekhawatiran Keamanan Pekerjaan",
                "serius",
                "Anda menyebutkan kekhawatiran terkait stabilitas pekerjaan. Ini memerlukan prioritas pada "
                "dana darurat dan diversifikasi penghasilan.",
            )
        )
    if intents.mentions_marriage:
        weaknesses.append(
            _narrative_item(
                "Persiapan Dana Pernikahan",
                "moderat",
                "Anda menyebutkan rencana pernikahan. Biaya pernikahan di Indonesia rata-rata Rp50-200 juta "
                "tergantung skala. Perlu perencanaan khusus.",
            )
        )
    if intents.mentions_housing and intents.mentions_confusion:
        weaknesses.append(
            _narrative_item(
                "Strategi Kepemilikan Rumah Belum Jelas",
                "moderat",
                "Anda menyebutkan ketertarikan pada rumah/properti tapi masih bingung. Perlu analisis "
                "kemampuan KPR dan strategi DP.",
            )
        )
    if intents.mentions_investment and intents.mentions_confusion:
        false_securities.append(
            _narrative_item(
                "Kebingungan Pilihan Investasi",
                "ringan",
                "Anda menyebutkan ketertarikan pada investasi tapi masih ragu. Tanpa kejelasan, ada risiko "
                "memilih instrumen yang tidak sesuai profil risiko.",
            )
        )
    if intents.mentions_education and intents.mentions_children:
        hidden_risks.append(
            _narrative_item(
                "Biaya Pendidikan Anak Perlu Direncanakan",
                "moderat",
                "Biaya pendidikan naik 10-15%/tahun. Tanpa perencanaan, dana bisa tidak mencukupi saat dibutuhkan.",
            )
        )
    if intents.mentions_debt:
        weaknesses.append(
            _narrative_item(
                "Kekhawatiran Terkait Hutang",
                "serius",
                "Anda menyebutkan masalah hutang dalam cerita keuangan Anda. Hutang yang tidak terkelola dapat "
                "menggerus kekayaan dan membatasi kemampuan finansial jangka panjang.",
            )
        )
    if intents.mentions_side_income:
        hidden_risks.append(
            _narrative_item(
                "Bisnis/Usaha Sampingan Perlu Evaluasi",
                "moderat",
                "Anda menyebutkan memiliki bisnis atau usaha sampingan. Bisnis membutuhkan modal kerja, cadangan "
                "kas, dan pemisahan keuangan pribadi-bisnis yang jelas.",
            )
        )
    return weaknesses, hidden_risks, false_securities


def _weaknesses(profile: FinancialProfile, aggregates: FinancialAggregates) -> List[DiagnosisItem]:
    items: List[DiagnosisItem] = []
    income = aggregates.monthly_income
    surplus = aggregates.surplus
    coverage = emergency_coverage(profile, aggregates)
    needed = emergency_fund_needed(profile, aggregates)
    current = profile.emergency_fund.current_balance
    dsr = debt_service_ratio(aggregates)
    liabilities = aggregates.total_liabilities

    if surplus < 0:
        items.append(
            DiagnosisItem(
                issue="Cashflow Negatif",
                severity="kritis",
                impact=(
                    f"Anda kehilangan {format_currency(abs(surplus))}/bulan. Dalam 12 bulan, potensi kerugian "
                    f"{format_currency(abs(surplus) * 12)}."
                ),
                evidence=(
                    f"Pendapatan {format_currency(income)} < Pengeluaran "
                    f"{format_currency(aggregates.monthly_expenses)}"
                ),
            )
        )

    if coverage < 25:
        items.append(
            DiagnosisItem(
                issue="Dana Darurat Hampir Tidak Ada",
                severity="kritis",
                impact=(
                    "Jika terjadi PHK atau sakit, Anda tidak memiliki buffer finansial. Risiko terlilit hutang "
                    "sangat tinggi."
                ),
                evidence=(
                    f"Dana darurat hanya {format_percent(coverage, 0)} dari kebutuhan "
                    f"({format_currency(current)} dari {format_currency(needed)})"
                ),
            )
        )
    elif coverage < 50:
        items.append(
            DiagnosisItem(
                issue="Dana Darurat Kurang Memadai",
                severity="serius",
                impact="Buffer finansial hanya bertahan maksimal 2-3 bulan dalam kondisi darurat.",
                evidence=f"Dana darurat {format_percent(coverage, 0)} dari kebutuhan",
            )
        )

    if dsr > 50:
        items.append(
            DiagnosisItem(
                issue="Beban Hutang Sangat Tinggi",
                severity="kritis",
                impact="Lebih dari separuh pendapatan habis untuk cicilan. Tidak ada ruang untuk menabung atau investasi.",
                evidence=f"DSR {format_percent(dsr)} (standar sehat: <30%)",
            )
        )
    elif dsr > 35:
        items.append(
            DiagnosisItem(
                issue="Beban Hutang Di Atas Normal",
                severity="serius",
                impact="Ruang gerak finansial terbatas. Sulit menghadapi kenaikan suku bunga atau penurunan pendapatan.",
                evidence=f"DSR {format_percent(dsr)} (standar sehat: <30%)",
            )
        )

    spending = expense_ratio(aggregates)
    if spending > 80:
        items.append(
            DiagnosisItem(
                issue="Gaya Hidup Melebihi Kemampuan",
                severity="serius",
                impact="Tidak ada ruang untuk saving dan investasi. Kekayaan tidak akan bertumbuh.",
                evidence=f"Rasio pengeluaran {format_percent(spending)} dari pendapatan",
            )
        )

    saved = savings_ratio(aggregates)
    if saved < 10 and surplus > 0:
        items.append(
            DiagnosisItem(
                issue="Rasio Tabungan Terlalu Rendah",
                severity="moderat",
                impact="Pertumbuhan kekayaan sangat lambat. Target pensiun dan tujuan keuangan sulit tercapai.",
                evidence=f"Hanya {format_percent(saved)} pendapatan yang bisa ditabung (ideal: 20%+)",
            )
        )

    if aggregates.net_worth < 0:
        debt_to_annual_income = liabilities / (income * 12) * 100 if income > 0 else 0.0
        items.append(
            DiagnosisItem(
                issue="Kekayaan Bersih Negatif - Hutang Melebihi Aset",
                severity="kritis",
                impact=(
                    f"Total hutang Anda ({format_currency(liabilities)}) melebihi total aset "
                    f"({format_currency(aggregates.total_assets)}) sebesar {format_currency(abs(aggregates.net_worth))}. "
                    "Ini adalah kondisi krisis finansial yang memerlukan penanganan segera. Prioritas utama adalah "
                    "pelunasan hutang, BUKAN investasi atau dana darurat."
                ),
                evidence=(
                    f"Kekayaan bersih: {format_currency(aggregates.net_worth)}. Rasio hutang terhadap pendapatan "
                    f"tahunan: {format_percent(debt_to_annual_income, 0)}"
                ),
            )
        )

    if liabilities > income * 12 and aggregates.net_worth >= 0:
        multiple = liabilities / income if income > 0 else 0.0
        items.append(
            DiagnosisItem(
                issue="Total Hutang Sangat Tinggi",
                severity="serius",
                impact=(
                    f"Total hutang {format_currency(liabilities)} setara dengan lebih dari 12 bulan pendapatan. "
                    "Meskipun aset masih lebih besar, beban hutang ini berisiko tinggi."
                ),
                evidence=f"Hutang = {format_decimal(multiple)}x pendapatan bulanan",
            )
        )
    return items


def _hidden_risks(profile: FinancialProfile, aggregates: FinancialAggregates) -> List[DiagnosisItem]:
    items: List[DiagnosisItem] = []
    personal = profile.personal
    insurance = profile.insurance
    coverage = emergency_coverage(profile, aggregates)

    if not insurance.has_health:
        items.append(
            DiagnosisItem(
                issue="Tanpa Proteksi Kesehatan",
                severity="kritis",
                impact="Satu kali rawat inap bisa menghabiskan seluruh tabungan. Biaya RS swasta Rp1-5 juta/hari.",
                evidence="Tidak memiliki BPJS maupun asuransi kesehatan swasta",
            )
        )

    if personal.dependents > 0 and not insurance.has_policy("jiwa"):
        annual_income = aggregates.monthly_income * 12
        items.append(
            DiagnosisItem(
                issue="Keluarga Tidak Terproteksi",
                severity="kritis",
                impact=(
                    f"Jika terjadi sesuatu pada Anda, keluarga kehilangan sumber penghasilan "
                    f"{format_currency(annual_income)}/tahun tanpa pengganti."
                ),
                evidence=(
                    f"Memiliki {personal.dependents} tanggungan tanpa asuransi jiwa. "
                    f"Ideal: UP {format_currency(annual_income * 10)}"
                ),
            )
        )

    high_interest = [debt for debt in profile.debts if debt.interest_rate > HIGH_INTEREST_RATE]
    if high_interest:
        balance = sum(debt.balance for debt in high_interest)
        annual_interest = sum(debt.balance * debt.interest_rate / 100 for debt in high_interest)
        items.append(
            DiagnosisItem(
                issue="Hutang Berbunga Tinggi Menggerus Kekayaan",
                severity="serius",
                impact=(
                    f"Anda membayar bunga {format_currency(annual_interest)}/tahun untuk hutang "
                    f"{format_currency(balance)}. Uang ini seharusnya bisa untuk investasi."
                ),
                evidence=f"{len(high_interest)} hutang dengan bunga >20% p.a.",
            )
        )

    if personal.employment_status in ("freelancer", "pengusaha") and coverage < 100:
        items.append(
            DiagnosisItem(
                issue="Pendapatan Tidak Stabil Tanpa Buffer Memadai",
                severity="moderat",
                impact="Pendapatan fluktuatif membutuhkan dana darurat 9-12 bulan, bukan 3-6 bulan.",
                evidence=f"Status: {personal.employment_status}, dana darurat: {format_percent(coverage, 0)}",
            )
        )

    if aggregates.total_assets > 0:
        real = profile.assets.real
        illiquid_share = (real.property + real.vehicles) / aggregates.total_assets * 100
        if illiquid_share > 80:
            items.append(
                DiagnosisItem(
                    issue="Aset Terlalu Terkonsentrasi di Properti/Kendaraan",
                    severity="moderat",
                    impact="Aset tidak likuid. Jika butuh uang cepat, sulit menjual properti dengan harga wajar.",
                    evidence=f"{format_percent(illiquid_share, 0)} aset dalam bentuk properti/kendaraan",
                )
            )
    return items


def _is_unit_link(profile: FinancialProfile) -> bool:
    return any(
        policy.policy_type == "jiwa"
        and ("unit" in policy.product.lower() or "unit" in policy.main_benefit.lower())
        for policy in profile.insurance.other_policies
    )


def _false_securities(profile: FinancialProfile, aggregates: FinancialAggregates) -> List[DiagnosisItem]:
    items: List[DiagnosisItem] = []
    insurance = profile.insurance
    income = aggregates.monthly_income

    if insurance.bpjs.held and not insurance.private_health.held and income > UMR * 2:
        items.append(
            DiagnosisItem(
                issue="BPJS Saja Tidak Cukup untuk Gaya Hidup Anda",
                severity="moderat",
                impact=(
                    "BPJS memiliki batasan: antrian panjang, kelas kamar terbatas, tidak semua RS. Untuk pendapatan "
                    "Anda, perlu asuransi swasta sebagai top-up."
                ),
                evidence=f"Pendapatan {format_currency(income)}/bulan (>2x UMR) tapi hanya mengandalkan BPJS",
            )
        )

    if _is_unit_link(profile):
        items.append(
            DiagnosisItem(
                issue="Unit Link Bukan Investasi yang Efisien",
                severity="ringan",
                impact=(
                    "Biaya admin unit link 1-3%/tahun menggerus return. Lebih baik pisahkan: asuransi jiwa murni "
                    "+ investasi reksadana."
                ),
                evidence="Memiliki polis unit link",
            )
        )

    liquid = aggregates.liquid_assets
    cash_share = profile.assets.liquid.bank_savings / liquid * 100 if liquid > 0 else 0.0
    if cash_share > 60 and liquid > emergency_fund_needed(profile, aggregates) * 2:
        items.append(
            DiagnosisItem(
                issue="Terlalu Banyak Uang di Tabungan",
                severity="moderat",
                impact="Uang di tabungan menghasilkan 2-3%/tahun, kalah dari inflasi 4-5%. Kekayaan riil menyusut.",
                evidence=f"{format_percent(cash_share, 0)} aset likuid di tabungan bank biasa",
            )
        )
    return items


def _summary(grade: str, score: int, weaknesses: list, hidden_risks: list) -> str:
    critical = sum(1 for item in weaknesses + hidden_risks if item.severity == "kritis")
    serious = sum(1 for item in weaknesses + hidden_risks if item.severity == "serius")
    if critical:
        return f"Nilai {grade} ({score}/100, {health_label(score)}): {critical} masalah kritis perlu ditangani segera."
    if serious:
        return f"Nilai {grade} ({score}/100, {health_label(score)}): {serious} masalah serius perlu diperbaiki."
    return f"Nilai {grade} ({score}/100, {health_label(score)}): fondasi keuangan Anda cukup kuat."


def diagnose(
    profile: FinancialProfile,
    intents: NarrativeIntents | None = None,
    aggregates: FinancialAggregates | None = None,
) -> Diagnosis:
    """
    Enumerate weaknesses, hidden risks and false securities for a profile.

    Args:
        profile: FinancialProfile to diagnose.
        intents: Narrative flags; story-driven items are placed before threshold items.
        aggregates: Precomputed aggregates, recomputed when omitted.
    Returns:
        Diagnosis whose overall grade equals `health_score(profile).grade`.
    """
    aggregates = aggregates or compute_aggregates(profile)
    weaknesses, hidden_risks, false_securities = _narrative_items(intents or NarrativeIntents())
    weaknesses += _weaknesses(profile, aggregates)
    hidden_risks += _hidden_risks(profile, aggregates)
    false_securities += _false_securities(profile, aggregates)

    score = health_score(profile)
    return Diagnosis(
        weaknesses=weaknesses,
        hidden_risks=hidden_risks,
        false_securities=false_securities,
        overall_grade=score.grade,
        summary=_summary(score.grade, score.score, weaknesses, hidden_risks),
    )
