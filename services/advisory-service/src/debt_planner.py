from __future__ import annotations

from typing import List, Literal

from aggregation import compute_aggregates
from finance_model import DebtAnalysis, DebtItem, DebtPayoffPlan, DebtPayoffStrategy, FinancialProfile
from health_metrics import debt_service_ratio

PayoffMethod = Literal["avalanche", "snowball"]

DEBT_TYPE_LABELS = {
    "kta": "KTA",
    "paylater": "PayLater",
    "kartu_kredit": "Kartu Kredit",
    "pinjol_legal": "Pinjaman Online",
    "cicilan_hp": "Cicilan HP",
    "kendaraan": "Cicilan Kendaraan",
    "kpr": "KPR",
    "lainnya": "Hutang Lainnya",
}
FALLBACK_DEBT_LABEL = "Hutang Lainnya"

HIGH_INTEREST_RATE = 20.0  # percent per year
AVALANCHE_SAVINGS_SHARE = 0.10


def debt_label(debt: DebtItem) -> str:
    return DEBT_TYPE_LABELS.get(debt.debt_type, FALLBACK_DEBT_LABEL)


def estimated_interest(debt: DebtItem) -> float:
    """
    Approximate remaining interest as balance x annual rate x remaining years.

    This is a single-period estimate on the current balance, not an amortization
    schedule; it overstates interest for loans that amortize quickly.
    """
    return debt.balance * debt.interest_rate / 100 * debt.remaining_months / 12


def avalanche_order(debts: List[DebtItem]) -> List[DebtItem]:
    """Highest annual rate first; ties keep their input order (sorted() is stable)."""
    return sorted(debts, key=lambda debt: debt.interest_rate, reverse=True)


def snowball_order(debts: List[DebtItem]) -> List[DebtItem]:
    """Smallest remaining balance first; ties keep their input order."""
    return sorted(debts, key=lambda debt: debt.balance)


def debt_payoff_plans(profile: FinancialProfile) -> List[DebtPayoffPlan]:
    """
    Describe every debt in Avalanche order with its estimated interest cost.

    Args:
        profile: FinancialProfile holding the debt list.
    Returns:
        DebtPayoffPlan rows ranked 1..n, highest interest rate first.
    """
    return [
        DebtPayoffPlan(
            debt_id=debt.id,
            debt_name=debt_label(debt),
            balance=debt.balance,
            monthly_payment=debt.monthly_payment,
            interest_rate=debt.interest_rate,
            payoff_months=debt.remaining_months,
            total_interest=estimated_interest(debt),
            priority=rank,
        )
        for rank, debt in enumerate(avalanche_order(profile.debts), start=1)
    ]


def payoff_strategy(profile: FinancialProfile, method: PayoffMethod = "avalanche") -> DebtPayoffStrategy:
    debts = profile.debts
    ordered = avalanche_order(debts) if method == "avalanche" else snowball_order(debts)
    total_interest = float(sum(estimated_interest(debt) for debt in debts))
    payoff_months = max((debt.remaining_months for debt in debts), default=0)
    monthly_savings = total_interest * AVALANCHE_SAVINGS_SHARE if method == "avalanche" else 0.0

    return DebtPayoffStrategy(
        method=method,
        order=[debt.id for debt in ordered],
        total_interest_paid=total_interest,
        payoff_months=payoff_months,
        monthly_savings=monthly_savings,
    )


def _dsr_status(dsr: float) -> str:
    if dsr <= 30:
        return "sehat"
    if dsr <= 40:
        return "waspada"
    return "kritis"


def debt_analysis(profile: FinancialProfile) -> DebtAnalysis:
    aggregates = compute_aggregates(profile)
    dsr = debt_service_ratio(aggregates)
    high_interest = [debt.id for debt in profile.debts if debt.interest_rate > HIGH_INTEREST_RATE]

    return DebtAnalysis(
        total_debt=aggregates.total_liabilities,
        monthly_payments=aggregates.monthly_debt_payments,
        debt_service_ratio=dsr,
        status=_dsr_status(dsr),
        high_interest_debt_ids=high_interest,
        avalanche=payoff_strategy(profile, "avalanche"),
        snowball=payoff_strategy(profile, "snowball"),
        recommended_method="avalanche" if high_interest else "snowball",
    )
