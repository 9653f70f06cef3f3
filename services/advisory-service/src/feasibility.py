from __future__ import annotations

import math
from typing import List

from aggregation import compute_aggregates
from finance_model import FeasibilityAssessment, FeasibilityStatus, FinancialProfile, LifestyleUpgradeIntent
from formatting import format_currency, format_percent

MIN_SAVINGS_RATIO = 10.0
IDEAL_SAVINGS_RATIO = 20.0

QUICK_PURCHASE_MONTHS = 3
PLANNED_PURCHASE_MONTHS = 12
MAX_PURCHASE_MONTHS = 24
MONTHS_DISPLAY_CAP = 100


def _ratio(value: float, income: float) -> float:
    return value / income * 100 if income > 0 else 0.0


def assess_recurring_change(profile: FinancialProfile, new_amount: float, current_amount: float) -> FeasibilityAssessment:
    """
    Classify a recurring monthly cost change such as moving to a pricier rental.

    Args:
        profile: FinancialProfile providing income and current expenses.
        new_amount: Proposed monthly cost for the category.
        current_amount: What the category costs today.
    Returns:
        FeasibilityAssessment with the projected surplus and savings ratio.
    """
    aggregates = compute_aggregates(profile)
    income = aggregates.monthly_income
    additional = max(0.0, new_amount - current_amount)
    surplus_after = aggregates.surplus - additional
    ratio_after = _ratio(surplus_after, income)

    alternatives: List[str] = []
    status: FeasibilityStatus
    if surplus_after <= 0:
        status = "NOT_FEASIBLE"
        message = (
            "Upgrade ini akan membuat pengeluaran melebihi pendapatan "
            f"(surplus menjadi {format_currency(surplus_after)})."
        )
        alternatives = [
            "Cari pilihan yang lebih terjangkau",
            "Tingkatkan pendapatan terlebih dahulu",
            "Kurangi pengeluaran di kategori lain",
        ]
    elif ratio_after < MIN_SAVINGS_RATIO:
        status = "NOT_FEASIBLE"
        message = (
            f"Upgrade ini akan mengurangi kemampuan menabung hingga {format_percent(ratio_after)} (minimal 10%)."
        )
        alternatives = ["Cari pilihan dengan harga 20-30% lebih murah", "Tunda upgrade hingga pendapatan naik"]
    elif ratio_after < IDEAL_SAVINGS_RATIO:
        status = "MARGINAL"
        message = f"Upgrade ini memungkinkan tapi mengurangi tabungan ke {format_percent(ratio_after)} dari ideal 20%."
        alternatives = ["Pertimbangkan opsi yang sedikit lebih murah"]
    else:
        status = "FEASIBLE"
        message = (
            f"Upgrade ini layak! Surplus masih {format_currency(surplus_after)}/bulan "
            f"dengan rasio tabungan {format_percent(ratio_after)}."
        )

    return FeasibilityAssessment(
        status=status,
        message=message,
        current_surplus=aggregates.surplus,
        surplus_after=surplus_after,
        savings_ratio_after=ratio_after,
        alternatives=alternatives,
    )


def assess_one_time_purchase(profile: FinancialProfile, amount: float) -> FeasibilityAssessment:
    """
    Classify a one-time purchase by how many months of surplus it takes to save for it.

    The monthly surplus is unchanged by the purchase itself.
    """
    aggregates = compute_aggregates(profile)
    surplus = aggregates.surplus
    months: int | None = math.ceil(amount / surplus) if surplus > 0 else None

    alternatives: List[str] = []
    status: FeasibilityStatus
    if months is None:
        status = "NOT_FEASIBLE"
        message = "Tidak bisa menabung untuk pembelian ini karena cashflow negatif."
        alternatives = ["Perbaiki cashflow terlebih dahulu", "Kurangi pengeluaran bulanan"]
    elif months <= QUICK_PURCHASE_MONTHS:
        status = "FEASIBLE"
        message = f"Layak! Dengan surplus {format_currency(surplus)}/bulan, target tercapai dalam {months} bulan."
    elif months <= PLANNED_PURCHASE_MONTHS:
        status = "MARGINAL"
        message = (
            f"Memungkinkan dalam {months} bulan dengan menabung "
            f"{format_currency(math.ceil(amount / months))}/bulan."
        )
        alternatives = ["Pertimbangkan versi lebih terjangkau", "Cari promo/diskon untuk mempercepat"]
    elif months <= MAX_PURCHASE_MONTHS:
        status = "MARGINAL"
        message = f"Butuh {months} bulan menabung. Pertimbangkan untuk menunda atau cari alternatif."
        alternatives = ["Pertimbangkan barang bekas/refurbished", "Tunggu promo besar seperti 11.11 atau 12.12"]
    else:
        shown = "> 100" if months > MONTHS_DISPLAY_CAP else str(months)
        status = "NOT_FEASIBLE"
        message = f"Butuh {shown} bulan menabung. Tidak realistis dengan kondisi saat ini."
        alternatives = ["Cari alternatif dengan harga lebih rendah", "Tingkatkan pendapatan terlebih dahulu"]

    return FeasibilityAssessment(
        status=status,
        message=message,
        current_surplus=surplus,
        surplus_after=surplus,
        savings_ratio_after=_ratio(surplus, aggregates.monthly_income),
        months_to_save=months,
        alternatives=alternatives,
    )


def assess_lifestyle_intent(intent: LifestyleUpgradeIntent | None, profile: FinancialProfile) -> FeasibilityAssessment | None:
    """
    Dispatch a detected lifestyle intent to the matching classifier.

    Rental upgrades are recurring changes against the current rent; purchases are
    one-time savings targets. Home purchases are planned through the housing
    strategy instead and yield None, as does a missing intent or a rental upgrade
    whose new rent was never stated.
    """
    if intent is None:
        return None
    amount = intent.amount or 0.0
    if intent.type == "rental_upgrade":
        if amount <= 0:
            return None
        return assess_recurring_change(profile, amount, profile.expenses.housing.rent)
    if intent.type == "purchase":
        return assess_one_time_purchase(profile, amount)
    return None
