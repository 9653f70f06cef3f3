from __future__ import annotations

from typing import Dict, List

from finance_model import BreakdownItem, CustomExpense, FinancialAggregates, FinancialProfile

# Monthly multipliers for custom expense frequencies. Unknown values count as monthly.
FREQUENCY_MULTIPLIERS: Dict[str, float] = {
    "harian": 30.0,
    "mingguan": 4.0,
    "bulanan": 1.0,
    "tahunan": 1.0 / 12.0,
}

DAYS_PER_MONTH = 30  # meals and snacks are bought every day
WORKDAYS_PER_MONTH = 22  # commuting and parking only on workdays

# Conservative haircut applied to near-cash funds when counting liquidity
BOND_FUND_LIQUIDITY = 0.95
EQUITY_FUND_LIQUIDITY = 0.90


def normalize_to_monthly(amount: float, frequency: str) -> float:
    return amount * FREQUENCY_MULTIPLIERS.get(frequency, 1.0)


def custom_expenses_total(expenses: List[CustomExpense]) -> float:
    return float(sum(normalize_to_monthly(item.amount, item.frequency) for item in expenses))


def monthly_income(profile: FinancialProfile) -> float:
    """
    Combine recurring monthly income with annual irregular income spread over twelve months.

    Args:
        profile: FinancialProfile whose income section holds monthly and annual figures.
    Returns:
        Monthly income as a float; zero when nothing is reported.
    """
    income = profile.income
    recurring = income.monthly_salary + income.monthly_allowance + income.spouse_income + income.side_income
    irregular = (
        income.annual_bonus
        + income.annual_dividends
        + income.annual_business_income
        + income.annual_other_passive
    ) / 12
    return float(recurring + irregular)


def monthly_debt_payments(profile: FinancialProfile) -> float:
    return float(sum(debt.monthly_payment for debt in profile.debts))


def total_liabilities(profile: FinancialProfile) -> float:
    return float(sum(debt.balance for debt in profile.debts))


def housing_cost(profile: FinancialProfile) -> float:
    housing = profile.expenses.housing
    return housing.rent + housing.electricity + housing.water + housing.internet + housing.household_supplies


def food_cost(profile: FinancialProfile) -> float:
    consumption = profile.expenses.consumption
    return consumption.daily_meals * DAYS_PER_MONTH + consumption.daily_snacks * DAYS_PER_MONTH


def transport_cost(profile: FinancialProfile) -> float:
    transport = profile.expenses.transport
    return (
        transport.daily_transport * WORKDAYS_PER_MONTH
        + transport.daily_parking * WORKDAYS_PER_MONTH
        + transport.vehicle_service
    )


def lifestyle_cost(profile: FinancialProfile) -> float:
    lifestyle = profile.expenses.lifestyle
    return lifestyle.supplements + lifestyle.gym + lifestyle.entertainment


def subscription_cost(profile: FinancialProfile) -> float:
    subscriptions = profile.expenses.subscriptions
    active = sum(item.monthly_cost for item in subscriptions.items() if item.active)
    return subscriptions.phone_data + active + subscriptions.other_cost


def family_obligation_cost(profile: FinancialProfile) -> float:
    # Unexpected costs are a buffer estimate, not a monthly outflow.
    family = profile.expenses.family
    return family.school_fees + family.daycare


def bpjs_cost(profile: FinancialProfile) -> float:
    bpjs = profile.insurance.bpjs
    return bpjs.monthly_fee if bpjs.held else 0.0


def insurance_premiums(profile: FinancialProfile) -> float:
    """All premiums currently paid: BPJS (if held), private health (if held), other policies."""
    insurance = profile.insurance
    total = bpjs_cost(profile)
    if insurance.private_health.held:
        total += insurance.private_health.monthly_premium
    total += sum(policy.monthly_premium for policy in insurance.other_policies)
    return float(total)


def monthly_expenses(profile: FinancialProfile) -> float:
    """
    Sum every monthly outflow the profile describes.

    Args:
        profile: FinancialProfile with itemized categories, custom expenses and debts.
    Returns:
        Monthly expenses including debt installments.
    Assumptions:
        Daily items use 30 days (meals, snacks) or 22 workdays (transport, parking);
        the BPJS fee and subscription items only count when held/active.
    """
    groceries = profile.expenses.consumption.groceries
    return float(
        housing_cost(profile)
        + food_cost(profile)
        + groceries
        + transport_cost(profile)
        + lifestyle_cost(profile)
        + bpjs_cost(profile)
        + subscription_cost(profile)
        + custom_expenses_total(profile.custom_expenses)
        + family_obligation_cost(profile)
        + monthly_debt_payments(profile)
    )


def liquid_cash_total(profile: FinancialProfile) -> float:
    liquid = profile.assets.liquid
    return liquid.bank_savings + liquid.time_deposits + liquid.e_wallet + liquid.cash


def investment_total(profile: FinancialProfile) -> float:
    inv = profile.assets.investments
    return (
        inv.money_market_fund
        + inv.bond_fund
        + inv.equity_fund
        + inv.idx_stocks
        + inv.us_etf
        + inv.crypto
        + inv.government_bonds
        + inv.gold
        + inv.other_value
    )


def real_asset_total(profile: FinancialProfile) -> float:
    real = profile.assets.real
    return real.property + real.vehicles + real.valuables


def total_assets(profile: FinancialProfile) -> float:
    return float(liquid_cash_total(profile) + investment_total(profile) + real_asset_total(profile))


def liquid_assets(profile: FinancialProfile) -> float:
    """Cash plus near-cash funds, with bond and equity funds discounted for settlement risk."""
    inv = profile.assets.investments
    return float(
        liquid_cash_total(profile)
        + inv.money_market_fund
        + inv.bond_fund * BOND_FUND_LIQUIDITY
        + inv.equity_fund * EQUITY_FUND_LIQUIDITY
    )


def net_worth(profile: FinancialProfile) -> float:
    return total_assets(profile) - total_liabilities(profile)


def monthly_surplus(profile: FinancialProfile) -> float:
    return monthly_income(profile) - monthly_expenses(profile)


def compute_aggregates(profile: FinancialProfile) -> FinancialAggregates:
    """
    Build the canonical aggregate snapshot for a profile.

    Values are recomputed on every call; callers that mutate the profile simply call again.
    """
    income = monthly_income(profile)
    expenses = monthly_expenses(profile)
    cash = float(liquid_cash_total(profile))
    invested = float(investment_total(profile))
    real = float(real_asset_total(profile))
    assets = cash + invested + real
    liabilities = total_liabilities(profile)

    return FinancialAggregates(
        monthly_income=income,
        monthly_expenses=expenses,
        monthly_debt_payments=monthly_debt_payments(profile),
        surplus=income - expenses,
        liquid_cash_total=cash,
        investment_total=invested,
        real_asset_total=real,
        total_assets=assets,
        total_liabilities=liabilities,
        net_worth=assets - liabilities,
        liquid_assets=liquid_assets(profile),
    )


def expense_breakdown(profile: FinancialProfile) -> List[BreakdownItem]:
    """
    Group current monthly spending into the display categories used by reports.

    Returns:
        Ordered BreakdownItem rows; categories with a zero amount are omitted.
    """
    expenses = profile.expenses
    housing = expenses.housing
    emergency = profile.emergency_fund
    regular_top_up = emergency.top_up_amount if emergency.top_up_frequency == "bulanan" else 0.0

    rows = [
        ("Tempat Tinggal", housing.rent),
        ("Tagihan", housing.electricity + housing.water + housing.internet),
        ("Makan & Minum", food_cost(profile)),
        ("Belanja Bulanan", housing.household_supplies + expenses.consumption.groceries),
        ("Transportasi", transport_cost(profile)),
        ("Gaya Hidup", lifestyle_cost(profile)),
        ("Langganan", subscription_cost(profile)),
        ("Kewajiban Keluarga", family_obligation_cost(profile)),
        ("Cicilan Hutang", monthly_debt_payments(profile)),
        ("Asuransi", insurance_premiums(profile)),
        ("Dana Darurat", regular_top_up),
        ("Investasi", 0.0),
        ("Lainnya", custom_expenses_total(profile.custom_expenses)),
    ]
    return [BreakdownItem(category=name, amount=float(amount)) for name, amount in rows if amount > 0]


def breakdown_amount(rows: List[BreakdownItem], category: str) -> float:
    for row in rows:
        if row.category == category:
            return row.amount
    return 0.0
