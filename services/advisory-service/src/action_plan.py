from __future__ import annotations

from typing import List

from aggregation import compute_aggregates
from debt_planner import HIGH_INTEREST_RATE, debt_label
from finance_model import ActionItem, ActionPlanTimeline, Allocation, FinancialAggregates, FinancialProfile
from formatting import format_currency, format_decimal
from health_metrics import emergency_fund_needed

BPJS_FEE_PER_MEMBER = 150_000
TERM_LIFE_PREMIUM_RATE = 0.003
PASSIVE_INCOME_ASSET_MONTHS = 60


def _short_term(profile: FinancialProfile, aggregates: FinancialAggregates, allocation: Allocation) -> List[ActionItem]:
    personal = profile.personal
    items = [
        ActionItem(
            action="Set up sistem tracking pengeluaran (aplikasi atau spreadsheet)",
            amount=0.0,
            deadline="Minggu 1",
            frequency="sekali",
            rationale="Tidak bisa mengelola apa yang tidak diukur. Tracking adalah fondasi kontrol keuangan.",
        )
    ]

    if allocation.emergency > 0:
        items.append(
            ActionItem(
                action=f"Set up auto-debit tabungan/dana darurat {format_currency(allocation.emergency)}/bulan",
                amount=allocation.emergency,
                deadline="Minggu 1",
                frequency="bulanan",
                rationale="Pay yourself first. Otomatisasi mencegah godaan spending.",
            )
        )

    if not profile.insurance.bpjs.held:
        items.append(
            ActionItem(
                action="Daftar BPJS Kesehatan untuk seluruh anggota keluarga",
                amount=float(BPJS_FEE_PER_MEMBER * (personal.dependents + 1)),
                deadline="Minggu 2",
                frequency="bulanan",
                rationale="BPJS adalah proteksi kesehatan dasar wajib dengan biaya terjangkau.",
            )
        )

    if personal.dependents > 0 and not profile.insurance.has_policy("jiwa"):
        sum_assured = aggregates.monthly_income * 12 * 10
        items.append(
            ActionItem(
                action=f"Aktifkan asuransi jiwa berjangka UP {format_currency(sum_assured)}",
                amount=sum_assured * TERM_LIFE_PREMIUM_RATE / 12,
                deadline="Bulan 1",
                frequency="bulanan",
                rationale=f"Melindungi {personal.dependents} tanggungan jika terjadi sesuatu pada pencari nafkah.",
            )
        )

    if allocation.is_debt_crisis and allocation.additional_debt > 0:
        items.append(
            ActionItem(
                action=f"Alihkan {format_currency(allocation.additional_debt)}/bulan ke pelunasan hutang tambahan",
                amount=allocation.additional_debt,
                deadline="Mulai bulan ini",
                frequency="bulanan",
                rationale="Dalam kondisi krisis hutang, surplus diprioritaskan untuk menurunkan pokok hutang.",
            )
        )
    else:
        costly = next((debt for debt in profile.debts if debt.interest_rate > HIGH_INTEREST_RATE), None)
        # the normal waterfall has no debt slot; extra payments come from windfalls
        if costly is not None:
            items.append(
                ActionItem(
                    action=f"Arahkan bonus/THR untuk pelunasan ekstra {debt_label(costly)}",
                    amount=0.0,
                    deadline="Mulai bulan ini",
                    frequency="sekali",
                    rationale=f"Hutang bunga {format_decimal(costly.interest_rate)}% menggerus kekayaan. Prioritas pelunasan.",
                )
            )
    return items


def _mid_term(profile: FinancialProfile, aggregates: FinancialAggregates, allocation: Allocation) -> List[ActionItem]:
    items: List[ActionItem] = []
    needed = emergency_fund_needed(profile, aggregates)
    current = profile.emergency_fund.current_balance

    if current < needed * 0.5:
        items.append(
            ActionItem(
                action=f"Capai dana darurat 50% ({format_currency(needed * 0.5)})",
                amount=needed * 0.5 - current,
                deadline="Bulan 6",
                frequency="sekali",
                rationale="Milestone 50% memberikan buffer minimum untuk kondisi darurat ringan.",
            )
        )

    if allocation.investment > 0:
        items.append(
            ActionItem(
                action=f"Mulai investasi rutin {format_currency(allocation.investment)}/bulan",
                amount=allocation.investment,
                deadline="Bulan 4",
                frequency="bulanan",
                rationale="Setelah dana darurat 30%+, mulai investasi untuk pertumbuhan kekayaan.",
            )
        )

    if allocation.goals > 0:
        items.append(
            ActionItem(
                action=f"Sisihkan {format_currency(allocation.goals)}/bulan untuk tujuan keuangan",
                amount=allocation.goals,
                deadline="Bulan 3",
                frequency="bulanan",
                rationale="Tabungan tujuan dipisahkan dari dana darurat agar tidak terpakai.",
            )
        )

    items.append(
        ActionItem(
            action=(
                f"Tambah proteksi asuransi {format_currency(allocation.insurance)}/bulan"
                if allocation.insurance > 0
                else "Review kecukupan proteksi asuransi (kesehatan, jiwa, penyakit kritis)"
            ),
            amount=allocation.insurance,
            deadline="Bulan 6",
            frequency="tahunan",
            rationale="Kebutuhan proteksi berubah seiring perubahan pendapatan dan tanggungan.",
        )
    )

    costly = [debt for debt in profile.debts if debt.interest_rate > HIGH_INTEREST_RATE]
    if costly:
        smallest = min(costly, key=lambda debt: debt.balance)
        items.append(
            ActionItem(
                action=f"Lunasi {debt_label(smallest)}, hutang berbunga tinggi dengan saldo terkecil",
                amount=smallest.balance,
                deadline="Bulan 12",
                frequency="sekali",
                rationale="Quick win untuk momentum. Cicilan yang selesai dialihkan ke hutang berikutnya.",
            )
        )
    return items


def _long_term(profile: FinancialProfile, aggregates: FinancialAggregates) -> List[ActionItem]:
    items: List[ActionItem] = []
    needed = emergency_fund_needed(profile, aggregates)
    if needed - profile.emergency_fund.current_balance > 0:
        items.append(
            ActionItem(
                action=f"Dana darurat 100% tercapai ({format_currency(needed)})",
                amount=needed,
                deadline="Tahun 2",
                frequency="sekali",
                rationale="Fondasi keuangan lengkap. Bebas fokus pada pertumbuhan kekayaan.",
            )
        )

    for goal in profile.goals:
        items.append(
            ActionItem(
                action=f"Progress tujuan: {goal.name}",
                amount=goal.target_amount,
                deadline=f"{goal.timeframe_months} bulan",
                frequency="sekali",
                rationale=f"Tujuan prioritas {goal.priority}. Investasi sesuai timeframe.",
            )
        )

    items.append(
        ActionItem(
            action="Review komprehensif: rebalancing portfolio, update tujuan keuangan",
            amount=0.0,
            deadline="Setiap tahun",
            frequency="tahunan",
            rationale="Pastikan alokasi aset masih sesuai dengan usia dan tujuan.",
        )
    )

    income = aggregates.monthly_income
    if aggregates.total_assets > income * PASSIVE_INCOME_ASSET_MONTHS:
        items.append(
            ActionItem(
                action="Develop sumber passive income (dividen, properti sewaan, dll)",
                amount=income * 12,
                deadline="Tahun 5",
                frequency="tahunan",
                rationale="Diversifikasi sumber pendapatan menuju financial independence.",
            )
        )
    return items


def build_action_plan(
    profile: FinancialProfile,
    allocation: Allocation,
    aggregates: FinancialAggregates | None = None,
) -> ActionPlanTimeline:
    """
    Bucket concrete actions into 0-3 month, 3-12 month and longer horizons.

    Args:
        profile: FinancialProfile being advised.
        allocation: The report's shared allocation; every recurring amount comes from it.
        aggregates: Precomputed aggregates, recomputed when omitted.
    Returns:
        ActionPlanTimeline; expense tracking is always the first short-term item and
        the annual review is always present in the long term.
    """
    aggregates = aggregates or compute_aggregates(profile)
    return ActionPlanTimeline(
        short_term=_short_term(profile, aggregates, allocation),
        mid_term=_mid_term(profile, aggregates, allocation),
        long_term=_long_term(profile, aggregates),
    )
