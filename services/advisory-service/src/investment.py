from __future__ import annotations

from typing import Dict, List, Tuple

from finance_model import FinancialProfile, InvestmentRecommendation, RiskTier
from health_metrics import emergency_fund_needed

# instrument, allocation %, description, risk level, expected return
_Row = Tuple[str, int, str, str, str]

SAFETY_FIRST_TABLE: List[_Row] = [
    ("Tabungan/Deposito", 80, "Lengkapi dana darurat sebelum berinvestasi", "low", "3-5% per tahun"),
    ("Reksadana Pasar Uang", 20, "Likuid dan stabil sebagai cadangan tambahan", "low", "4-6% per tahun"),
]

ALLOCATION_TABLES: Dict[str, List[_Row]] = {
    "konservatif": [
        ("Reksadana Pasar Uang", 40, "Stabil dan mudah dicairkan", "low", "4-6% per tahun"),
        ("Reksadana Pendapatan Tetap", 40, "Obligasi pemerintah dan korporasi", "low", "6-8% per tahun"),
        ("Reksadana Campuran", 15, "Gabungan saham dan obligasi", "medium", "8-12% per tahun"),
        ("Emas", 5, "Pelindung nilai terhadap inflasi", "low", "5-10% per tahun"),
    ],
    "moderat": [
        ("Reksadana Saham", 35, "Indeks saham Indonesia (IDX30/LQ45)", "high", "10-15% per tahun"),
        ("S&P 500 ETF (VOO/SPY)", 25, "Diversifikasi global ke pasar AS", "medium", "8-12% per tahun"),
        ("Reksadana Pendapatan Tetap", 25, "Penyeimbang portofolio", "low", "6-8% per tahun"),
        ("Emas", 10, "Lindung nilai", "low", "5-10% per tahun"),
        ("Crypto (BTC/ETH)", 5, "Spekulatif, porsi kecil saja", "high", "Sangat volatil"),
    ],
    "agresif": [
        ("Reksadana Saham", 40, "Saham pertumbuhan Indonesia", "high", "12-18% per tahun"),
        ("S&P 500 ETF (VOO)", 20, "Pasar saham AS", "medium", "8-12% per tahun"),
        ("Nasdaq 100 ETF (QQQ)", 15, "Saham teknologi AS", "high", "10-15% per tahun"),
        ("Crypto (BTC/ETH)", 15, "Aset digital", "high", "Sangat volatil"),
        ("Emerging Markets ETF (VWO)", 10, "Diversifikasi negara berkembang", "high", "8-14% per tahun"),
    ],
}

_TOLERANCE_TO_TIER = {"rendah": "konservatif", "tinggi": "agresif"}


def portfolio_risk_tier(profile: FinancialProfile) -> RiskTier:
    """
    Translate stated tolerance into a portfolio tier, tightened by age.

    Over 50 always gets the conservative tier; over 40 is capped at moderate.
    """
    tier = _TOLERANCE_TO_TIER.get(profile.risk_profile.tolerance, "moderat")
    age = profile.personal.age
    if age > 50:
        return "konservatif"
    if age > 40 and tier == "agresif":
        return "moderat"
    return tier


def _to_recommendations(rows: List[_Row]) -> List[InvestmentRecommendation]:
    return [
        InvestmentRecommendation(
            instrument=instrument,
            allocation=allocation,
            description=description,
            risk_level=risk_level,
            expected_return=expected_return,
        )
        for instrument, allocation, description, risk_level, expected_return in rows
    ]


def investment_recommendations(profile: FinancialProfile) -> List[InvestmentRecommendation]:
    """
    Pick the allocation table for the profile.

    Returns the two-row safety table while the emergency fund is below its need,
    otherwise the table for `portfolio_risk_tier`. Allocations always sum to 100.
    """
    if profile.emergency_fund.current_balance < emergency_fund_needed(profile):
        return _to_recommendations(SAFETY_FIRST_TABLE)
    return _to_recommendations(ALLOCATION_TABLES[portfolio_risk_tier(profile)])
