"""Closing letter for the advisory report. Pure string composition over already-computed results."""

from __future__ import annotations

from typing import List

from diagnosis import UMR
from finance_model import (
    Diagnosis,
    FeasibilityAssessment,
    FinancialAggregates,
    FinancialProfile,
    NarrativeIntents,
    PriorityIssue,
    RecommendedStrategy,
)
from formatting import format_currency

SIGNATURE = "Salam hangat,\nAI Financial Advisor YouthFinance"


def _insurance_paragraph(profile: FinancialProfile, aggregates: FinancialAggregates, intents: NarrativeIntents) -> str:
    if intents.mentions_confusion:
        return (
            "Terkait pertanyaan Anda mengenai apakah perlu memiliki asuransi tambahan selain BPJS, berdasarkan "
            "kondisi keuangan dan rencana hidup yang Anda sampaikan, asuransi tambahan bersifat opsional namun "
            "direkomendasikan sebagai mitigasi risiko finansial.\n\n"
            "Fokus utama sebaiknya pada asuransi kesehatan murni atau asuransi jiwa berjangka, dengan premi yang "
            "tetap proporsional terhadap pendapatan Anda (maks 10%) dan tidak mengganggu tujuan keuangan lain."
        )
    text = "Mengenai kebutuhan proteksi asuransi yang Anda sampaikan: BPJS Kesehatan adalah fondasi wajib. "
    dependents = profile.personal.dependents
    if dependents > 0:
        text += f"Karena Anda memiliki {dependents} tanggungan, asuransi jiwa berjangka sangat direkomendasikan. "
    if aggregates.monthly_income > UMR * 2:
        text += "Dengan level pendapatan Anda, asuransi kesehatan swasta sebagai top-up BPJS juga layak dipertimbangkan."
    else:
        text += "BPJS sudah cukup memadai untuk saat ini, fokuskan pada dana darurat terlebih dahulu."
    return text


def _rental_paragraph(new_rent: float, feasibility: FeasibilityAssessment) -> str:
    text = "Mengenai keinginan pindah ke tempat sewaan yang lebih baik yang Anda sampaikan: "
    if feasibility.status == "FEASIBLE":
        return text + (
            f"berdasarkan kondisi keuangan Anda, upgrade sewa ke {format_currency(new_rent)}/bulan LAYAK dilakukan. "
            f"Surplus Anda akan tetap sehat di {format_currency(feasibility.surplus_after)}/bulan setelah upgrade."
        )
    if feasibility.status == "MARGINAL":
        return text + (
            f"upgrade sewa ke {format_currency(new_rent)}/bulan MEMUNGKINKAN namun perlu penyesuaian prioritas. "
            f"Surplus Anda akan turun menjadi {format_currency(feasibility.surplus_after)}/bulan. {feasibility.message}"
        )
    text += (
        f"saat ini upgrade ke {format_currency(new_rent)}/bulan BELUM DISARANKAN karena akan membebani keuangan "
        f"Anda. {feasibility.message}"
    )
    if feasibility.alternatives:
        text += f" Saran: {feasibility.alternatives[0]}"
    return text


def narrative_paragraphs(
    profile: FinancialProfile,
    aggregates: FinancialAggregates,
    intents: NarrativeIntents,
    feasibility: FeasibilityAssessment | None,
    emergency_need: float,
) -> List[str]:
    """One acknowledgment paragraph per concern raised in the user's story, in a fixed order."""
    paragraphs: List[str] = []
    if not intents.raw_keywords:
        return paragraphs

    if intents.mentions_insurance:
        paragraphs.append(_insurance_paragraph(profile, aggregates, intents))

    if intents.mentions_marriage:
        paragraphs.append(
            "Mengenai rencana pernikahan yang Anda sampaikan: ini adalah life event yang membutuhkan perencanaan "
            "finansial khusus. Saya menyarankan untuk membuat rekening terpisah khusus dana pernikahan dan "
            "memprioritaskan saving untuk tujuan ini tanpa mengorbankan dana darurat."
        )

    upgrade = intents.lifestyle_upgrade
    if intents.mentions_rental_upgrade and upgrade is not None and feasibility is not None:
        paragraphs.append(_rental_paragraph(upgrade.amount or 0.0, feasibility))
    elif intents.mentions_home_purchase or (intents.mentions_housing and not intents.mentions_rental_upgrade):
        paragraphs.append(
            "Mengenai keinginan memiliki rumah yang Anda sampaikan: berdasarkan kemampuan finansial Anda saat ini, "
            f"properti dengan cicilan maksimal {format_currency(aggregates.monthly_income * 0.3)}/bulan adalah "
            "batas aman. Fokuskan pada mengumpulkan DP 20% terlebih dahulu sebelum mengambil KPR."
        )

    if intents.mentions_investment and intents.mentions_confusion:
        paragraphs.append(
            "Mengenai kebingungan pilihan investasi yang Anda sampaikan: tidak perlu merasa overwhelmed. "
            f"Berdasarkan profil risiko {profile.risk_profile.tolerance} Anda, mulailah dengan reksadana yang sesuai "
            "yang memberikan diversifikasi otomatis. Konsistensi investasi rutin lebih penting daripada timing "
            "pasar yang sempurna."
        )

    if intents.mentions_job_loss:
        paragraphs.append(
            "Mengenai kekhawatiran terkait keamanan pekerjaan yang Anda sampaikan: ini adalah concern yang valid "
            "dan bijaksana. Prioritaskan untuk membangun dana darurat minimal 6 bulan pengeluaran "
            f"({format_currency(emergency_need)}). Pertimbangkan juga untuk mengembangkan skill atau side income "
            "sebagai backup."
        )

    if intents.mentions_debt:
        text = "Mengenai hutang yang Anda sampaikan dalam cerita keuangan: "
        if aggregates.total_liabilities > 0:
            text += (
                f"berdasarkan data, total kewajiban Anda saat ini {format_currency(aggregates.total_liabilities)} "
                f"dengan cicilan {format_currency(aggregates.monthly_debt_payments)}/bulan. "
            )
        text += (
            "Hutang bukan sesuatu yang perlu ditakuti selama dikelola dengan baik. Prioritaskan pelunasan hutang "
            "berbunga tinggi terlebih dahulu. Jika hutang tersebut adalah hutang bisnis, pastikan untuk memisahkan "
            "keuangan pribadi dan bisnis agar tidak saling membebani."
        )
        paragraphs.append(text)

    if intents.mentions_side_income:
        paragraphs.append(
            "Mengenai bisnis/usaha yang Anda sampaikan: memiliki bisnis sampingan adalah langkah bagus untuk "
            "diversifikasi penghasilan. Namun, bisnis yang sedang defisit membutuhkan evaluasi serius. Pertanyaan "
            "kunci: apakah bisnis ini bisa diperbaiki dengan strategi yang berbeda, atau apakah sudah waktunya untuk "
            "cut loss dan fokus pada karir utama? Jangan sampai kerugian bisnis menggerus tabungan dan keuangan "
            "pribadi Anda."
        )
    return paragraphs


def next_steps(critical: List[PriorityIssue]) -> List[str]:
    steps = ["Dalam 7 hari: Set up sistem tracking pengeluaran dan auto-debit tabungan"]
    if any("Proteksi" in issue.issue or "Kesehatan" in issue.issue for issue in critical):
        steps.append("Dalam 30 hari: Amankan proteksi asuransi untuk keluarga")
    steps.append("Review progress setiap bulan dan sesuaikan strategi jika diperlukan")
    return [f"{number}. {step}" for number, step in enumerate(steps, start=1)]


def write_conclusion(
    profile: FinancialProfile,
    aggregates: FinancialAggregates,
    diagnosis: Diagnosis,
    issues: List[PriorityIssue],
    strategies: List[RecommendedStrategy],
    intents: NarrativeIntents,
    feasibility: FeasibilityAssessment | None,
    emergency_need: float,
) -> str:
    """
    Compose the advisor's closing letter.

    Sections appear in order: greeting, assessment, answers to the user's story,
    critical issues, the first strategy, positive aspects (only with a surplus),
    numbered next steps and the closing.
    """
    name = profile.personal.full_name or "Bapak/Ibu"
    sections: List[str] = [
        f"Kepada {name},",
        (
            "Berdasarkan analisis komprehensif kondisi keuangan Anda, dengan pendapatan "
            f"{format_currency(aggregates.monthly_income)}/bulan dan kekayaan bersih "
            f"{format_currency(aggregates.net_worth)}, kondisi finansial Anda mendapat nilai {diagnosis.overall_grade}."
        ),
    ]

    paragraphs = narrative_paragraphs(profile, aggregates, intents, feasibility, emergency_need)
    if paragraphs:
        sections.append("**MENGENAI PERTANYAAN ANDA:**\n" + "\n\n".join(paragraphs))

    critical = [issue for issue in issues if issue.classification == "KRITIS"]
    if critical:
        lines = [
            "**PERHATIAN UTAMA:**",
            f"Saya mengidentifikasi {len(critical)} masalah KRITIS yang harus segera ditangani:",
        ]
        lines += [
            f"{number}. {issue.issue} - dampak finansial {format_currency(issue.impact)}"
            for number, issue in enumerate(critical, start=1)
        ]
        lines.append(
            "\nMasalah-masalah ini tidak boleh ditunda karena dapat mengakibatkan kerugian signifikan atau risiko "
            "besar bagi keluarga Anda."
        )
        sections.append("\n".join(lines))

    if strategies:
        first = strategies[0]
        sections.append(
            "**REKOMENDASI PRIORITAS:**\n"
            f"Langkah pertama yang harus Anda ambil adalah: {first.name}.\n"
            f"Target: {first.objective}\n"
            f"Timeframe: {first.timeframe}"
        )

    if aggregates.surplus > 0:
        sections.append(
            "**ASPEK POSITIF:**\n"
            f"Anda memiliki cashflow positif {format_currency(aggregates.surplus)}/bulan. Ini adalah modal yang baik "
            "untuk memperbaiki kondisi keuangan. Kunci keberhasilan adalah disiplin mengalokasikan surplus ini "
            "sesuai prioritas."
        )

    sections.append("**LANGKAH SELANJUTNYA:**\n" + "\n".join(next_steps(critical)))
    sections.append(
        "Ingat: Perjalanan menuju kebebasan finansial adalah maraton, bukan sprint. Yang penting adalah konsistensi "
        "dan disiplin dalam menjalankan rencana ini. Jika ada perubahan signifikan dalam situasi keuangan Anda, "
        "segera lakukan review ulang."
    )
    sections.append(SIGNATURE)
    return "\n\n".join(sections)
