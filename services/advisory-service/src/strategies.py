"""
Stage three of the advisory pipeline: turn priority issues and narrative intents into strategies.

Order is fixed: debt-crisis strategies, then strategies answering the user's own
story, then strategies per priority issue type, then growth investing when no
critical issue remains. Every contribution amount (emergency fund, insurance,
investment) comes from the report's shared `Allocation`; nothing here reruns
the waterfall.
"""

from __future__ import annotations

import math
from dataclasses import replace
from typing import List, Optional

from aggregation import compute_aggregates
from allocation import is_debt_crisis
from debt_planner import debt_label
from finance_model import (
    Allocation,
    FeasibilityAssessment,
    FinancialAggregates,
    FinancialGoal,
    FinancialProfile,
    NarrativeIntents,
    PriorityIssue,
    RecommendedStrategy,
)
from formatting import format_currency, format_decimal, format_percent
from health_metrics import debt_service_ratio, emergency_fund_needed

STRATEGY_DEBT_RATE = 15.0  # percent per year; debts above this get the avalanche strategy
TERM_LIFE_PREMIUM_RATE = 0.003  # yearly premium as a share of the sum assured
GROWTH_RETURN_ASSUMPTION = 0.10

MARRIAGE_GOAL_WORDS = ("nikah", "menikah", "pernikahan", "wedding", "kawin")
HOUSING_GOAL_WORDS = ("rumah", "properti", "apartemen", "dp", "house")

INVESTMENT_FOCUS_BY_TOLERANCE = {
    "rendah": "Fokus: Deposito (40%), Reksadana Pasar Uang (40%), Emas (20%)",
    "sedang": "Fokus: Reksadana Campuran (50%), Saham/Reksadana Saham (30%), Emas (20%)",
    "tinggi": "Fokus: Saham/Reksadana Saham (60%), Reksadana Campuran (30%), Crypto (10% maks)",
}

STATUS_LINES = {
    "FEASIBLE": "STATUS: LAYAK",
    "MARGINAL": "STATUS: MARGINAL (BISA TETAPI PERLU HATI-HATI)",
    "NOT_FEASIBLE": "STATUS: TIDAK LAYAK",
}


def _strategy(name: str, objective: str, target_amount: float, timeframe: str, actions: List[str],
              tradeoffs: List[str], expected_outcome: str, target_percentage: float | None = None) -> RecommendedStrategy:
    return RecommendedStrategy(
        priority=0,
        name=name,
        objective=objective,
        target_amount=float(target_amount),
        timeframe=timeframe,
        actions=actions,
        tradeoffs=tradeoffs,
        expected_outcome=expected_outcome,
        target_percentage=target_percentage,
    )


def _find_goal(profile: FinancialProfile, category: str, words: tuple[str, ...]) -> Optional[FinancialGoal]:
    for goal in profile.goals:
        if goal.category == category:
            return goal
        name = goal.name.lower()
        if any(word in name for word in words):
            return goal
    return None


def _years(months: int) -> str:
    return format_decimal(months / 12)


# ---------------------------------------------------------------------------
# Debt crisis
# ---------------------------------------------------------------------------


def crisis_strategies(profile: FinancialProfile, aggregates: FinancialAggregates, allocation: Allocation) -> List[RecommendedStrategy]:
    """Acceleration, extra income, spending cuts and restructuring for a household in a debt crisis."""
    debt = aggregates.total_liabilities
    if not is_debt_crisis(aggregates) or debt <= 0:
        return []

    income = aggregates.monthly_income
    surplus = aggregates.surplus
    payments = aggregates.monthly_debt_payments
    expenses = aggregates.monthly_expenses
    net_worth = aggregates.net_worth
    dsr = debt_service_ratio(aggregates)
    deficit = abs(surplus) if surplus < 0 else 0.0
    heavy_debt = income > 0 and debt / (income * 12) > 1
    extra_payment = allocation.additional_debt
    # new earnings on top of the surplus, so not part of the allocation
    income_boost = max(payments * 0.5, income * 0.1 if heavy_debt else 0.0)

    strategies: List[RecommendedStrategy] = []
    strategies.append(
        _strategy(
            "Akselerasi Pelunasan Hutang",
            (
                f"Mengatasi kondisi kekayaan bersih negatif ({format_currency(net_worth)}) dengan memprioritaskan "
                "pelunasan hutang"
                if net_worth < 0
                else f"Mengurangi beban hutang yang sangat tinggi ({format_currency(debt)})"
            ),
            extra_payment,
            "Segera dimulai",
            [
                f"KONDISI KRITIS: {'Kekayaan bersih negatif' if net_worth < 0 else 'Total hutang sangat tinggi'}",
                f"Total hutang: {format_currency(debt)} | Cicilan saat ini: {format_currency(payments)}/bulan",
                f"DSR (Debt Service Ratio): {format_percent(dsr)} dari pendapatan",
                (
                    f"DEFISIT {format_currency(deficit)}/bulan - perlu tambahan penghasilan atau pangkas pengeluaran"
                    if surplus < 0
                    else f"Surplus {format_currency(surplus)}/bulan - bisa dialokasikan untuk cicilan tambahan"
                ),
                f"Alokasi surplus untuk cicilan tambahan: {format_currency(extra_payment)}/bulan",
                "Gunakan metode Avalanche: lunasi hutang dengan bunga tertinggi terlebih dahulu "
                "(Kartu Kredit, PayLater, Pinjol, lalu KTA)",
                "Hubungi bank/fintech untuk restrukturisasi jika cicilan melebihi 50% pendapatan",
            ],
            [
                "Fokus pelunasan hutang berarti menunda investasi dan tujuan keuangan lainnya",
                "Dana darurat dijaga minimal (1-2 bulan) sampai hutang terkendali",
                "Gaya hidup perlu dikurangi signifikan selama masa pelunasan",
            ],
            (
                "Kekayaan bersih menjadi positif dan terbebas dari jebakan hutang"
                if net_worth < 0
                else "Hutang turun ke level sehat (maksimal 3x pendapatan bulanan)"
            ),
            target_percentage=round(extra_payment / income * 100) if income > 0 else 0,
        )
    )

    if surplus < 0 or debt > income * 12:
        extra_income = deficit + income_boost
        strategies.append(
            _strategy(
                "Mencari Penghasilan Tambahan",
                (
                    f"Menutup defisit {format_currency(deficit)}/bulan dan mempercepat pelunasan hutang"
                    if surplus < 0
                    else f"Mempercepat pelunasan hutang {format_currency(debt)} yang sangat tinggi"
                ),
                extra_income,
                "1-2 bulan ke depan",
                [
                    f"TARGET: Tambahan penghasilan minimal {format_currency(extra_income)}/bulan",
                    "Opsi penghasilan tambahan yang bisa dieksekusi segera:",
                    "- Freelance di bidang keahlian Anda (desain, programming, penulisan)",
                    "- Part-time akhir pekan (F&B, retail, driver online)",
                    "- Jual barang tidak terpakai di marketplace",
                    "- Monetisasi hobi (fotografi, crafting, les privat)",
                    "- Jika punya kendaraan: pertimbangkan rental atau ride-sharing",
                    (
                        f"Penghasilan tambahan ini akan menutup defisit dan tersisa "
                        f"{format_currency(extra_income - deficit)} untuk cicilan ekstra"
                        if surplus < 0
                        else "Seluruh penghasilan tambahan dialokasikan 100% untuk pelunasan hutang"
                    ),
                ],
                [
                    "Membutuhkan waktu dan energi ekstra di luar pekerjaan utama",
                    "Perlu keseimbangan agar tidak burnout",
                    "Penghasilan tambahan mungkin tidak stabil di awal",
                ],
                f"Dengan tambahan {format_currency(extra_income)}/bulan, estimasi pelunasan hutang bisa dipercepat 30-50%",
            )
        )

    if surplus < 0 or expenses > income * 0.8:
        cut = deficit * 0.5 if surplus < 0 else expenses * 0.15
        spend_share = expenses / income * 100 if income > 0 else 0.0
        cut_actions = [
            f"Pengeluaran saat ini: {format_currency(expenses)}/bulan ({format_percent(spend_share, 0)} dari pendapatan)",
            "Area yang bisa dipangkas:",
            "- Langganan streaming/subscription yang tidak esensial",
            "- Makan di luar diganti masak sendiri, lebih hemat 50-70%",
            "- Transportasi umum jika memungkinkan",
            "- Tunda pembelian barang non-esensial",
            "- Cari alternatif hiburan gratis/murah",
        ]
        if allocation.is_severe_crisis:
            cut_actions.append(
                f"Wajib: pangkas gaya hidup {format_currency(allocation.lifestyle_cut)} dan langganan "
                f"{format_currency(allocation.subscription_cut)} per bulan"
            )
        cut_actions.append(f"Target: pangkas {format_currency(cut)}/bulan dan alokasikan langsung ke cicilan hutang")
        strategies.append(
            _strategy(
                "Pemangkasan Pengeluaran Darurat",
                f"Mengurangi pengeluaran {format_currency(cut)}/bulan untuk dialokasikan ke pelunasan hutang",
                cut,
                "Mulai bulan ini",
                cut_actions,
                [
                    "Kualitas hidup sementara menurun selama fase pelunasan",
                    "Butuh disiplin tinggi menahan keinginan belanja",
                    "Ini bersifat sementara sampai hutang terkendali",
                ],
                f"Pengeluaran turun {format_currency(cut)}/bulan, mempercepat pelunasan hutang",
            )
        )

    if dsr > 50:
        strategies.append(
            _strategy(
                "Negosiasi & Restrukturisasi Hutang",
                f"Menurunkan beban cicilan dari {format_percent(dsr, 0)} menjadi maksimal 30% pendapatan",
                payments - income * 0.3,
                "2-4 minggu",
                [
                    f"DSR saat ini: {format_percent(dsr)} (standar sehat: <30%)",
                    "Langkah negosiasi dengan kreditur:",
                    "1. Hubungi CS bank/fintech, minta opsi restrukturisasi",
                    "2. Opsi: perpanjangan tenor (cicilan turun), keringanan bunga, atau grace period",
                    "3. Jika ditolak, minta bicara dengan supervisor atau ajukan tertulis",
                    "4. Untuk pinjol/kartu kredit: tanyakan program penyelesaian (settlement)",
                    "Siapkan alasan kuat (PHK, sakit, penghasilan turun) beserta bukti pendapatan",
                    "Hindari mengambil hutang baru untuk menutup hutang lama (gali lubang tutup lubang)",
                ],
                [
                    "Proses negosiasi membutuhkan waktu dan kesabaran",
                    "Perpanjangan tenor berarti total bunga yang dibayar lebih besar",
                    "Mungkin mempengaruhi credit score sementara",
                ],
                "Cicilan bulanan turun sehingga cashflow menjadi positif dan bisa mulai menabung lagi",
            )
        )
    return strategies


# ---------------------------------------------------------------------------
# Narrative
# ---------------------------------------------------------------------------


def _savings_plan_lines(label: str, surplus: float, required: float, remaining: float, months: int,
                        shorter_alternative: str) -> List[str]:
    lines = [
        f"SURPLUS TERSEDIA: {format_currency(surplus)}/bulan",
        f"KEBUTUHAN UNTUK {label}: {format_currency(required)}/bulan "
        f"(target {format_currency(remaining)} dibagi {months} bulan)",
    ]
    if surplus <= 0:
        lines.append("SURPLUS NEGATIF: Perbaiki arus kas terlebih dahulu")
    elif surplus >= required:
        share = round(required / surplus * 100)
        lines.append(f"FEASIBLE: Alokasikan {format_currency(required)} ({share}% dari surplus)")
        lines.append(f"Sisa surplus untuk tujuan lain: {format_currency(surplus - required)}/bulan")
    else:
        lines.append(f"TIDAK FEASIBLE: Kebutuhan melebihi surplus sebesar {format_currency(required - surplus)}/bulan")
        lines.append(f"Opsi 1: Perpanjang timeframe menjadi {math.ceil(remaining / surplus)} bulan")
        lines.append(f"Opsi 2: {shorter_alternative}")
    return lines


def _insurance_strategy(allocation: Allocation) -> RecommendedStrategy:
    missing = []
    if not allocation.has_health_insurance:
        missing.append("Asuransi Kesehatan")
    if not allocation.has_life_insurance:
        missing.append("Asuransi Jiwa")
    if not allocation.has_critical_illness:
        missing.append("Asuransi Penyakit Kritis")
    return _strategy(
        "Optimalisasi Proteksi Asuransi",
        "Menjawab kebutuhan proteksi yang Anda sampaikan dengan struktur asuransi yang tepat",
        allocation.insurance,
        "30-60 hari",
        [
            f"Proteksi yang belum dimiliki: {', '.join(missing)}" if missing else "Proteksi dasar sudah lengkap",
            (
                f"Rekomendasi tambahan premi: {format_currency(allocation.insurance)}/bulan"
                if allocation.insurance > 0
                else "Budget asuransi sudah optimal"
            ),
            "Pertahankan BPJS Kesehatan sebagai proteksi dasar (wajib)",
            "Evaluasi asuransi kesehatan swasta dengan sistem cashless untuk RS pilihan",
            "Pertimbangkan asuransi jiwa berjangka (term life) jika memiliki tanggungan",
            "Hindari unit link, pilih asuransi murni yang lebih cost-effective",
        ],
        [
            "Premi asuransi adalah biaya tetap yang mengurangi alokasi investasi",
            "Asuransi jiwa berjangka tidak ada nilai tunai, tapi premi jauh lebih murah",
        ],
        "Struktur proteksi yang jelas: BPJS, top-up kesehatan, dan term life sesuai kebutuhan",
        target_percentage=10,
    )


def _marriage_instrument(months: int) -> tuple[str, str]:
    if months <= 12:
        return "Deposito atau Tabungan Berjangka", "Timeframe pendek (<1 tahun), prioritaskan keamanan dan likuiditas"
    if months <= 24:
        return "Reksadana Pasar Uang atau Deposito", "Timeframe 1-2 tahun, seimbangkan return dan keamanan"
    if months <= 36:
        return "Reksadana Obligasi atau Campuran", "Timeframe 2-3 tahun, bisa sedikit agresif untuk return lebih baik"
    return "Reksadana Saham atau ETF", "Timeframe panjang (>3 tahun), maksimalkan potensi growth"


def _marriage_strategy(profile: FinancialProfile, aggregates: FinancialAggregates) -> RecommendedStrategy:
    goal = _find_goal(profile, "pernikahan", MARRIAGE_GOAL_WORDS)
    budget = goal.target_amount if goal and goal.target_amount else aggregates.monthly_income * 20
    source = "dari tujuan keuangan Anda" if goal else "estimasi berdasarkan pendapatan"
    saved = goal.collected_amount if goal else 0.0
    months = goal.timeframe_months if goal and goal.timeframe_months else 24
    remaining = budget - saved
    required = math.ceil(remaining / months) if remaining > 0 else 0
    surplus = aggregates.surplus
    feasible = surplus >= required
    share = round(required / surplus * 100) if surplus > 0 else 0
    instrument, reason = _marriage_instrument(months)

    actions = [
        f"Target dana pernikahan: {format_currency(budget)} ({source})",
        f"Timeframe: {months} bulan ({_years(months)} tahun)",
        (
            f"Dana terkumpul: {format_currency(saved)}, sisa kebutuhan: {format_currency(remaining)}"
            if saved > 0
            else f"Mulai dari nol dengan kebutuhan total {format_currency(remaining)}"
        ),
        f"Instrumen rekomendasi: {instrument} ({reason})",
    ]
    actions += _savings_plan_lines(
        "GOAL INI", surplus, required, remaining, months, f"Kurangi target budget menjadi {format_currency(max(0.0, surplus) * months)}"
    )
    return _strategy(
        "Perencanaan Dana Pernikahan",
        "Mempersiapkan dana pernikahan tanpa mengorbankan fondasi keuangan",
        budget,
        f"{months} bulan",
        actions,
        [
            (
                f"Alokasikan {share}% surplus untuk dana pernikahan"
                if feasible
                else "Perlu menyesuaikan timeline atau skala acara dengan kemampuan"
            ),
            "Investasi growth mungkin ditunda, fokus ke instrumen aman",
        ],
        f"Dana {format_currency(budget)} siap dalam {months} bulan dengan tabungan {format_currency(required)}/bulan",
    )


def _rental_strategy(profile: FinancialProfile, intents: NarrativeIntents,
                     feasibility: FeasibilityAssessment) -> RecommendedStrategy:
    upgrade = intents.lifestyle_upgrade
    current_rent = profile.expenses.housing.rent
    new_rent = upgrade.amount or 0.0
    additional = max(0.0, new_rent - current_rent)

    actions = [
        f"Keinginan: {upgrade.description}",
        f"Target sewa baru: {format_currency(new_rent)}/bulan",
        f"Sewa saat ini: {format_currency(current_rent)}/bulan" if current_rent > 0 else "Belum ada data sewa saat ini",
    ]
    if additional > 0:
        actions.append(f"Biaya tambahan: {format_currency(additional)}/bulan")
    actions += [
        f"Surplus saat ini: {format_currency(feasibility.current_surplus)}/bulan",
        f"Surplus setelah upgrade: {format_currency(feasibility.surplus_after)}/bulan",
        f"Rasio tabungan setelah upgrade: {format_percent(feasibility.savings_ratio_after)}",
        STATUS_LINES[feasibility.status],
        feasibility.message,
    ]
    prefix = "Alternatif" if feasibility.status == "MARGINAL" else "Saran"
    actions += [f"{prefix}: {alternative}" for alternative in feasibility.alternatives]

    tradeoffs = {
        "FEASIBLE": ["Upgrade layak dilakukan dengan kondisi keuangan saat ini"],
        "MARGINAL": ["Bisa dilakukan tapi perlu mengurangi pengeluaran di area lain"],
        "NOT_FEASIBLE": ["Perlu menunda atau mencari opsi lebih terjangkau"],
    }[feasibility.status]
    return _strategy(
        "Analisis Upgrade Tempat Tinggal",
        "Menganalisis kelayakan pindah ke kontrakan/kos dengan harga baru",
        new_rent,
        "Keputusan segera",
        actions,
        tradeoffs,
        (
            f"Pindah ke tempat baru dengan sewa {format_currency(new_rent)}/bulan, surplus tetap sehat"
            if feasibility.status == "FEASIBLE"
            else "Perlu adjustment sebelum upgrade tempat tinggal"
        ),
    )


def _purchase_strategy(intents: NarrativeIntents, feasibility: FeasibilityAssessment) -> RecommendedStrategy:
    upgrade = intents.lifestyle_upgrade
    amount = upgrade.amount or 0.0
    months = feasibility.months_to_save

    actions = [
        f"Keinginan: {upgrade.description}",
        f"Harga target: {format_currency(amount)}" if amount > 0 else "Nominal belum disebutkan dalam cerita",
        f"Surplus saat ini: {format_currency(feasibility.current_surplus)}/bulan",
        (
            f"Waktu menabung: {months} bulan untuk mencapai target"
            if months is not None
            else "Tidak bisa menabung karena surplus negatif"
        ),
        {
            "FEASIBLE": "STATUS: LAYAK",
            "MARGINAL": "STATUS: MEMUNGKINKAN TAPI PERLU WAKTU",
            "NOT_FEASIBLE": "STATUS: TIDAK LAYAK SAAT INI",
        }[feasibility.status],
        feasibility.message,
    ]
    actions += [f"Saran: {alternative}" for alternative in feasibility.alternatives]

    tradeoffs = {
        "FEASIBLE": ["Pembelian dapat dilakukan dalam waktu singkat tanpa mengorbankan tabungan"],
        "MARGINAL": ["Perlu waktu menabung, pertimbangkan prioritas keuangan lain"],
        "NOT_FEASIBLE": ["Tidak realistis dengan kondisi saat ini, perlu meningkatkan pendapatan atau mengurangi target"],
    }[feasibility.status]
    return _strategy(
        "Analisis Pembelian Barang",
        f"Menganalisis kelayakan pembelian: {upgrade.description}",
        amount,
        f"{months} bulan menabung" if months is not None and months <= 12 else "Perlu perencanaan jangka panjang",
        actions,
        tradeoffs,
        (
            f"{upgrade.description} tercapai dalam {months} bulan"
            if feasibility.status == "FEASIBLE"
            else "Perlu adjustment ekspektasi atau timeline"
        ),
    )


def _home_strategy(profile: FinancialProfile, aggregates: FinancialAggregates) -> RecommendedStrategy:
    income = aggregates.monthly_income
    goal = _find_goal(profile, "rumah", HOUSING_GOAL_WORDS)
    down_payment = goal.target_amount if goal and goal.target_amount else income * 24
    saved = goal.collected_amount if goal else 0.0
    months = goal.timeframe_months if goal and goal.timeframe_months else 36
    remaining = down_payment - saved
    required = math.ceil(remaining / months) if remaining > 0 else 0
    surplus = aggregates.surplus
    feasible = surplus >= required
    share = round(required / surplus * 100) if surplus > 0 else 0

    actions = [
        f"Target DP: {format_currency(down_payment)}",
        f"Timeframe: {months} bulan ({_years(months)} tahun)",
        (
            f"Dana terkumpul: {format_currency(saved)}, sisa: {format_currency(remaining)}"
            if saved > 0
            else f"Mulai dari nol dengan kebutuhan {format_currency(remaining)}"
        ),
        "Instrumen: Reksadana Pasar Uang atau Deposito (aman, likuid)",
        f"Untuk properti sekitar {format_currency(down_payment * 5)} (DP 20%)",
        f"Maksimal cicilan KPR ideal: {format_currency(income * 0.3)}/bulan (30% pendapatan)",
    ]
    actions += _savings_plan_lines("DP", surplus, required, remaining, months, "Cari properti lebih murah atau DP lebih kecil")
    return _strategy(
        "Strategi Kepemilikan Rumah",
        "Membangun DP rumah dan mempersiapkan kemampuan KPR",
        down_payment,
        f"{months} bulan",
        actions,
        [
            f"Alokasikan {share}% surplus untuk DP rumah" if feasible else "Perlu menyesuaikan timeline atau target properti",
            "DP besar berarti cicilan ringan, DP kecil bisa lebih cepat tapi cicilan berat",
        ],
        f"DP {format_currency(down_payment)} siap dalam {months} bulan dengan tabungan {format_currency(required)}/bulan",
        target_percentage=20,
    )


def _investment_clarity_strategy(profile: FinancialProfile, allocation: Allocation) -> RecommendedStrategy:
    tolerance = profile.risk_profile.tolerance
    return _strategy(
        "Pemilihan Investasi Sesuai Profil",
        "Memberikan kejelasan pilihan investasi berdasarkan profil risiko dan timeframe Anda",
        allocation.investment,
        "Ongoing",
        [
            f"Profil risiko Anda: {tolerance}",
            f"Rekomendasi investasi: {format_currency(allocation.investment)}/bulan",
            INVESTMENT_FOCUS_BY_TOLERANCE.get(tolerance, INVESTMENT_FOCUS_BY_TOLERANCE["tinggi"]),
            "Mulai dengan reksadana untuk diversifikasi otomatis",
            "Hindari trading aktif jika tidak punya waktu belajar",
            "Konsisten: investasi rutin lebih penting dari timing pasar",
        ],
        [
            "Return tinggi berarti risiko tinggi, pastikan sesuai toleransi",
            "Crypto sangat volatil, hanya untuk dana yang siap hilang",
        ],
        "Portofolio investasi sesuai profil risiko dan tujuan keuangan",
    )


def _debt_concern_strategy(aggregates: FinancialAggregates) -> RecommendedStrategy:
    debt = aggregates.total_liabilities
    return _strategy(
        "Strategi Pengelolaan Hutang",
        "Mengatasi kekhawatiran hutang yang Anda sampaikan dengan rencana pelunasan yang terstruktur",
        debt,
        "12-36 bulan tergantung jumlah",
        [
            (
                f"Total hutang tercatat: {format_currency(debt)} dengan cicilan "
                f"{format_currency(aggregates.monthly_debt_payments)}/bulan"
                if debt > 0
                else "Anda menyebut hutang di cerita, tapi data hutang belum diisi. "
                "Lengkapi data hutang untuk analisis lebih akurat."
            ),
            "Buat daftar lengkap semua hutang: jenis, sisa, bunga, dan cicilan bulanan",
            "Prioritaskan pelunasan hutang dengan bunga tertinggi (avalanche method)",
            "Alokasikan minimal 30% surplus untuk percepatan pelunasan hutang",
            "Hindari hutang baru selama proses pelunasan",
            "Jika ada hutang bisnis: pisahkan keuangan pribadi dan bisnis",
        ],
        [
            "Investasi growth mungkin perlu ditunda hingga hutang berbunga tinggi lunas",
            "Mungkin perlu mengurangi gaya hidup sementara untuk percepatan pelunasan",
        ],
        "Beban hutang berkurang, cashflow membaik, stres finansial berkurang",
    )


def _side_income_strategy(aggregates: FinancialAggregates) -> RecommendedStrategy:
    return _strategy(
        "Optimalisasi Bisnis & Penghasilan Tambahan",
        "Menstabilkan dan mengoptimalkan bisnis yang Anda sampaikan",
        aggregates.monthly_income * 0.2 * 12,
        "6-12 bulan",
        [
            "Pisahkan rekening pribadi dan rekening bisnis (wajib)",
            "Buat laporan keuangan bisnis sederhana: pemasukan, pengeluaran, profit",
            "Siapkan dana cadangan bisnis: minimal 3 bulan biaya operasional",
            "Jika bisnis mengalami defisit: evaluasi apakah perlu tambahan modal atau pivot",
            "Jangan gunakan uang pribadi untuk menutup kerugian bisnis tanpa batas",
            "Pertimbangkan apakah bisnis ini viable atau perlu dilikuidasi",
        ],
        [
            "Bisnis membutuhkan waktu dan modal: pastikan tidak mengorbankan keuangan pribadi",
            "Bisnis yang terus defisit mungkin perlu keputusan sulit (tutup/pivot)",
        ],
        "Bisnis terkelola dengan baik, tidak mengganggu keuangan pribadi",
    )


def narrative_strategies(
    profile: FinancialProfile,
    aggregates: FinancialAggregates,
    intents: NarrativeIntents,
    allocation: Allocation,
    feasibility: FeasibilityAssessment | None,
) -> List[RecommendedStrategy]:
    strategies: List[RecommendedStrategy] = []
    upgrade = intents.lifestyle_upgrade

    if intents.mentions_insurance:
        strategies.append(_insurance_strategy(allocation))
    if intents.mentions_marriage:
        strategies.append(_marriage_strategy(profile, aggregates))
    if intents.mentions_rental_upgrade and upgrade is not None and feasibility is not None:
        strategies.append(_rental_strategy(profile, intents, feasibility))
    if upgrade is not None and upgrade.type == "purchase" and feasibility is not None:
        strategies.append(_purchase_strategy(intents, feasibility))
    if intents.mentions_home_purchase or (intents.mentions_housing and not intents.mentions_rental_upgrade):
        strategies.append(_home_strategy(profile, aggregates))
    if intents.mentions_investment and intents.mentions_confusion:
        strategies.append(_investment_clarity_strategy(profile, allocation))
    if intents.mentions_debt:
        strategies.append(_debt_concern_strategy(aggregates))
    if intents.mentions_side_income:
        strategies.append(_side_income_strategy(aggregates))
    return strategies


# ---------------------------------------------------------------------------
# Priority issues
# ---------------------------------------------------------------------------


def _mentions(issues: List[PriorityIssue], *fragments: str) -> bool:
    return any(fragment in issue.issue for issue in issues for fragment in fragments)


def issue_strategies(
    profile: FinancialProfile,
    aggregates: FinancialAggregates,
    issues: List[PriorityIssue],
    allocation: Allocation,
) -> List[RecommendedStrategy]:
    strategies: List[RecommendedStrategy] = []
    income = aggregates.monthly_income
    surplus = aggregates.surplus

    if _mentions(issues, "Cashflow"):
        target_cut = abs(surplus) + income * 0.1
        strategies.append(
            _strategy(
                "Perbaikan Cashflow Darurat",
                "Mengubah cashflow negatif menjadi positif dengan surplus minimal 10%",
                target_cut,
                "30 hari",
                [
                    f"Potong pengeluaran non-esensial sebesar {format_currency(target_cut)}/bulan",
                    "Identifikasi 3 pengeluaran terbesar dan negosiasikan penurunan",
                    "Pertimbangkan side income atau lembur untuk tambahan pendapatan",
                    "Siapkan pencatatan anggaran harian/mingguan",
                ],
                [
                    "Mungkin perlu menurunkan standar gaya hidup sementara",
                    "Membutuhkan disiplin ketat dalam 3 bulan pertama",
                ],
                f"Surplus positif {format_currency(income * 0.1)}/bulan dalam 30 hari",
                target_percentage=10,
            )
        )

    if _mentions(issues, "Dana Darurat"):
        needed = emergency_fund_needed(profile, aggregates)
        gap = max(0.0, needed - profile.emergency_fund.current_balance)
        contribution = allocation.emergency
        months = math.ceil(gap / contribution) if contribution > 0 else 24
        strategies.append(
            _strategy(
                "Pembangunan Dana Darurat",
                f"Membangun dana darurat {format_currency(needed)} (3-12 bulan pengeluaran)",
                contribution,
                f"{months} bulan",
                [
                    f"Alokasikan {format_currency(contribution)}/bulan via auto-debit",
                    "Simpan di deposito atau reksadana pasar uang (likuid, aman)",
                    "Jangan investasikan dana darurat di instrumen berisiko",
                    "Review dan sesuaikan target setiap 6 bulan",
                ],
                [
                    "Investasi pertumbuhan ditunda sampai dana darurat tercapai 50%",
                    "Return rendah (4-6%) tapi prioritas adalah keamanan",
                ],
                f"Dana darurat {format_currency(needed)} tercapai dalam {months} bulan",
            )
        )

    if _mentions(issues, "Hutang"):
        costly = sorted(
            (debt for debt in profile.debts if debt.interest_rate > STRATEGY_DEBT_RATE),
            key=lambda debt: debt.interest_rate,
            reverse=True,
        )
        if costly:
            first = costly[0]
            extra = allocation.additional_debt
            paid_monthly = first.monthly_payment + extra
            months = f"{math.ceil(first.balance / paid_monthly)} bulan" if paid_monthly > 0 else "Belum dapat dihitung"
            strategies.append(
                _strategy(
                    "Akselerasi Pelunasan Hutang (Avalanche Method)",
                    "Lunasi hutang berbunga tertinggi terlebih dahulu untuk minimalisir bunga",
                    first.balance,
                    months,
                    [
                        f"Prioritas: {debt_label(first)} (bunga {format_decimal(first.interest_rate)}%)",
                        (
                            f"Tambah pembayaran {format_currency(extra)}/bulan di atas cicilan minimum"
                            if extra > 0
                            else "Arahkan bonus, THR atau pemasukan tak terduga sebagai pembayaran ekstra"
                        ),
                        "Setelah lunas, gulirkan ke hutang bunga tertinggi berikutnya",
                        "Hindari hutang baru selama proses pelunasan",
                    ],
                    [
                        "Alokasi investasi dikurangi selama pelunasan hutang",
                        "Perlu disiplin menghindari hutang konsumtif baru",
                    ],
                    f"Hemat bunga {format_currency(first.balance * first.interest_rate / 100)} per tahun",
                )
            )

    if _mentions(issues, "Proteksi", "Kesehatan", "Keluarga"):
        sum_assured = income * 12 * 10
        monthly_premium = sum_assured * TERM_LIFE_PREMIUM_RATE / 12
        strategies.append(
            _strategy(
                "Pengamanan Proteksi Keluarga",
                "Memastikan keluarga terlindungi dari risiko kesehatan dan kematian",
                sum_assured,
                "30-60 hari",
                [
                    "Aktifkan BPJS Kesehatan jika belum (wajib)",
                    f"Pertimbangkan asuransi jiwa berjangka UP {format_currency(sum_assured)} "
                    f"(premi sekitar {format_currency(monthly_premium)}/bulan)",
                    "Tambah asuransi kesehatan swasta sebagai top-up BPJS jika pendapatan > 2x UMR",
                    "Pertimbangkan critical illness coverage jika usia >35 tahun",
                ],
                [
                    f"Premi asuransi menambah pengeluaran tetap sekitar {format_currency(monthly_premium)}/bulan",
                    "Pilih asuransi murni (term life), bukan unit link",
                ],
                "Keluarga terlindungi dengan coverage memadai sesuai kebutuhan",
            )
        )

    has_foundation = not any(issue.classification == "KRITIS" for issue in issues)
    if has_foundation and surplus > 0 and allocation.investment > 0:
        monthly = allocation.investment
        strategies.append(
            _strategy(
                "Strategi Investasi Pertumbuhan",
                "Mengembangkan kekayaan jangka panjang sesuai profil risiko",
                monthly * 12,
                "12 bulan pertama, ongoing",
                [
                    f"Mulai investasi rutin {format_currency(monthly)}/bulan",
                    f"Alokasi berdasarkan profil risiko {profile.risk_profile.tolerance}",
                    "Diversifikasi: reksadana saham, obligasi, dan emas",
                    "Review dan rebalancing portofolio setiap 6 bulan",
                ],
                [
                    "Investasi memiliki risiko, nilai bisa turun jangka pendek",
                    "Butuh komitmen jangka panjang (minimal 3-5 tahun)",
                ],
                f"Akumulasi {format_currency(monthly * 12 * (1 + GROWTH_RETURN_ASSUMPTION))} dalam 1 tahun "
                "(asumsi return 10%)",
            )
        )
    return strategies


def design_strategies(
    issues: List[PriorityIssue],
    intents: NarrativeIntents,
    profile: FinancialProfile,
    allocation: Allocation,
    feasibility: FeasibilityAssessment | None = None,
    aggregates: FinancialAggregates | None = None,
) -> List[RecommendedStrategy]:
    """
    Build the ordered strategy list for a report.

    Args:
        issues: Ranked priority issues.
        intents: Narrative flags from the user's story.
        profile: FinancialProfile being advised.
        allocation: The report's shared allocation; its contributions are the numeric targets.
        feasibility: Assessment of the detected lifestyle intent, when there is one.
        aggregates: Precomputed aggregates, recomputed when omitted.
    Returns:
        Strategies with priorities numbered 1..n in output order.
    """
    aggregates = aggregates or compute_aggregates(profile)
    strategies = (
        crisis_strategies(profile, aggregates, allocation)
        + narrative_strategies(profile, aggregates, intents, allocation, feasibility)
        + issue_strategies(profile, aggregates, issues, allocation)
    )
    return [replace(strategy, priority=priority) for priority, strategy in enumerate(strategies, start=1)]
