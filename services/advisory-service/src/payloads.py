"""
Pydantic request models for the advisory API.

Each model mirrors one dataclass in `finance_model` and converts to it with
`to_dataclass()`; every field is optional so a partially filled wizard still
produces a complete profile. Enumerated fields stay plain strings because the
core maps unknown values to its own fallbacks.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from finance_model import (
    AssetInfo,
    BpjsCoverage,
    ConsumptionExpenses,
    CustomExpense,
    DebtItem,
    EmergencyFundInfo,
    ExpenseInfo,
    FamilyObligations,
    FinancialGoal,
    FinancialProfile,
    HealthBenefit,
    HousingExpenses,
    IncomeInfo,
    InsuranceInfo,
    InsurancePolicy,
    Investments,
    LifestyleExpenses,
    LiquidCash,
    PersonalInfo,
    PrivateHealthCoverage,
    RealAssets,
    RiskProfile,
    SubscriptionExpenses,
    SubscriptionItem,
    TransportExpenses,
)


class PersonalPayload(BaseModel):
    full_name: str = ""
    age: int = Field(default=25, ge=0, le=120)
    marital_status: str = "lajang"
    dependents: int = Field(default=0, ge=0)
    domicile: str = ""
    occupation: str = ""
    employment_status: str = "karyawan"

    def to_dataclass(self) -> PersonalInfo:
        return PersonalInfo(**self.model_dump())


class IncomePayload(BaseModel):
    monthly_salary: float = 0.0
    monthly_allowance: float = 0.0
    spouse_income: float = 0.0
    side_income: float = 0.0
    annual_bonus: float = 0.0
    annual_dividends: float = 0.0
    annual_business_income: float = 0.0
    annual_other_passive: float = 0.0

    def to_dataclass(self) -> IncomeInfo:
        return IncomeInfo(**self.model_dump())


class HousingPayload(BaseModel):
    housing_type: str = "kost"
    rent: float = 0.0
    electricity: float = 0.0
    water: float = 0.0
    internet: float = 0.0
    household_supplies: float = 0.0


class ConsumptionPayload(BaseModel):
    daily_meals: float = 0.0
    daily_snacks: float = 0.0
    groceries: float = 0.0


class TransportPayload(BaseModel):
    daily_transport: float = 0.0
    daily_parking: float = 0.0
    vehicle_service: float = 0.0


class LifestylePayload(BaseModel):
    supplements: float = 0.0
    gym: float = 0.0
    entertainment: float = 0.0


class SubscriptionItemPayload(BaseModel):
    active: bool = False
    monthly_cost: float = 0.0

    def to_dataclass(self) -> SubscriptionItem:
        return SubscriptionItem(active=self.active, monthly_cost=self.monthly_cost)


class SubscriptionsPayload(BaseModel):
    phone_data: float = 0.0
    spotify: SubscriptionItemPayload = Field(default_factory=SubscriptionItemPayload)
    netflix: SubscriptionItemPayload = Field(default_factory=SubscriptionItemPayload)
    youtube_premium: SubscriptionItemPayload = Field(default_factory=SubscriptionItemPayload)
    google_storage: SubscriptionItemPayload = Field(default_factory=SubscriptionItemPayload)
    apple_icloud: SubscriptionItemPayload = Field(default_factory=SubscriptionItemPayload)
    amazon_prime: SubscriptionItemPayload = Field(default_factory=SubscriptionItemPayload)
    other_name: str = ""
    other_cost: float = 0.0

    def to_dataclass(self) -> SubscriptionExpenses:
        return SubscriptionExpenses(
            phone_data=self.phone_data,
            spotify=self.spotify.to_dataclass(),
            netflix=self.netflix.to_dataclass(),
            youtube_premium=self.youtube_premium.to_dataclass(),
            google_storage=self.google_storage.to_dataclass(),
            apple_icloud=self.apple_icloud.to_dataclass(),
            amazon_prime=self.amazon_prime.to_dataclass(),
            other_name=self.other_name,
            other_cost=self.other_cost,
        )


class FamilyPayload(BaseModel):
    school_fees: float = 0.0
    daycare: float = 0.0
    unexpected_costs: float = 0.0


class ExpensesPayload(BaseModel):
    housing: HousingPayload = Field(default_factory=HousingPayload)
    consumption: ConsumptionPayload = Field(default_factory=ConsumptionPayload)
    transport: TransportPayload = Field(default_factory=TransportPayload)
    lifestyle: LifestylePayload = Field(default_factory=LifestylePayload)
    subscriptions: SubscriptionsPayload = Field(default_factory=SubscriptionsPayload)
    family: FamilyPayload = Field(default_factory=FamilyPayload)

    def to_dataclass(self) -> ExpenseInfo:
        return ExpenseInfo(
            housing=HousingExpenses(**self.housing.model_dump()),
            consumption=ConsumptionExpenses(**self.consumption.model_dump()),
            transport=TransportExpenses(**self.transport.model_dump()),
            lifestyle=LifestyleExpenses(**self.lifestyle.model_dump()),
            subscriptions=self.subscriptions.to_dataclass(),
            family=FamilyObligations(**self.family.model_dump()),
        )


class CustomExpensePayload(BaseModel):
    id: str
    name: str
    category: str = "lainnya"
    frequency: str = "bulanan"
    amount: float = 0.0

    def to_dataclass(self) -> CustomExpense:
        return CustomExpense(**self.model_dump())


class DebtPayload(BaseModel):
    id: str
    debt_type: str = "lainnya"
    balance: float = Field(default=0.0, ge=0)
    interest_rate: float = Field(default=0.0, ge=0)
    monthly_payment: float = Field(default=0.0, ge=0)
    remaining_months: int = Field(default=0, ge=0)

    def to_dataclass(self) -> DebtItem:
        return DebtItem(**self.model_dump())


class EmergencyFundPayload(BaseModel):
    current_balance: float = 0.0
    storage_type: str = "tabungan"
    top_up_frequency: str = "bulanan"
    top_up_amount: float = 0.0

    def to_dataclass(self) -> EmergencyFundInfo:
        return EmergencyFundInfo(**self.model_dump())


class LiquidCashPayload(BaseModel):
    bank_savings: float = 0.0
    time_deposits: float = 0.0
    e_wallet: float = 0.0
    cash: float = 0.0


class InvestmentsPayload(BaseModel):
    money_market_fund: float = 0.0
    bond_fund: float = 0.0
    equity_fund: float = 0.0
    idx_stocks: float = 0.0
    us_etf: float = 0.0
    crypto: float = 0.0
    government_bonds: float = 0.0
    gold: float = 0.0
    other_name: str = ""
    other_value: float = 0.0


class RealAssetsPayload(BaseModel):
    property: float = 0.0
    vehicles: float = 0.0
    valuables: float = 0.0


class AssetsPayload(BaseModel):
    liquid: LiquidCashPayload = Field(default_factory=LiquidCashPayload)
    investments: InvestmentsPayload = Field(default_factory=InvestmentsPayload)
    real: RealAssetsPayload = Field(default_factory=RealAssetsPayload)

    def to_dataclass(self) -> AssetInfo:
        return AssetInfo(
            liquid=LiquidCash(**self.liquid.model_dump()),
            investments=Investments(**self.investments.model_dump()),
            real=RealAssets(**self.real.model_dump()),
        )


class BpjsPayload(BaseModel):
    held: bool = False
    coverage_class: str = "kelas_3"
    monthly_fee: float = 0.0
    members_covered: int = Field(default=1, ge=0)


class HealthBenefitPayload(BaseModel):
    name: str = ""
    annual_limit: float = 0.0
    claim_system: str = "cashless"
    notes: str = ""


class PrivateHealthPayload(BaseModel):
    held: bool = False
    company: str = ""
    product: str = ""
    monthly_premium: float = 0.0
    benefits: List[HealthBenefitPayload] = Field(default_factory=list)


class InsurancePolicyPayload(BaseModel):
    id: str
    policy_type: str = "lainnya"
    company: str = ""
    product: str = ""
    monthly_premium: float = 0.0
    main_benefit: str = ""
    benefit_value: float = 0.0
    term_years: int = 0


class InsurancePayload(BaseModel):
    bpjs: BpjsPayload = Field(default_factory=BpjsPayload)
    private_health: PrivateHealthPayload = Field(default_factory=PrivateHealthPayload)
    other_policies: List[InsurancePolicyPayload] = Field(default_factory=list)

    def to_dataclass(self) -> InsuranceInfo:
        private = self.private_health
        return InsuranceInfo(
            bpjs=BpjsCoverage(**self.bpjs.model_dump()),
            private_health=PrivateHealthCoverage(
                held=private.held,
                company=private.company,
                product=private.product,
                monthly_premium=private.monthly_premium,
                benefits=[HealthBenefit(**benefit.model_dump()) for benefit in private.benefits],
            ),
            other_policies=[InsurancePolicy(**policy.model_dump()) for policy in self.other_policies],
        )


class GoalPayload(BaseModel):
    id: str
    name: str
    category: str = "lainnya"
    target_amount: float = Field(default=0.0, ge=0)
    timeframe_months: int = Field(default=12, ge=0)
    priority: str = "sedang"
    risk_tier: str = "moderat"
    collected_amount: float = Field(default=0.0, ge=0)

    def to_dataclass(self) -> FinancialGoal:
        return FinancialGoal(**self.model_dump())


class RiskProfilePayload(BaseModel):
    tolerance: str = "sedang"
    experience: str = "pemula"
    drawdown_reaction: str = "tahan"
    objective: str = "pertumbuhan"

    def to_dataclass(self) -> RiskProfile:
        return RiskProfile(**self.model_dump())


class FinancialProfilePayload(BaseModel):
    personal: PersonalPayload = Field(default_factory=PersonalPayload)
    income: IncomePayload = Field(default_factory=IncomePayload)
    expenses: ExpensesPayload = Field(default_factory=ExpensesPayload)
    custom_expenses: List[CustomExpensePayload] = Field(default_factory=list)
    debts: List[DebtPayload] = Field(default_factory=list)
    emergency_fund: EmergencyFundPayload = Field(default_factory=EmergencyFundPayload)
    assets: AssetsPayload = Field(default_factory=AssetsPayload)
    insurance: InsurancePayload = Field(default_factory=InsurancePayload)
    goals: List[GoalPayload] = Field(default_factory=list)
    risk_profile: RiskProfilePayload = Field(default_factory=RiskProfilePayload)
    financial_story: str = ""

    def to_dataclass(self) -> FinancialProfile:
        return FinancialProfile(
            personal=self.personal.to_dataclass(),
            income=self.income.to_dataclass(),
            expenses=self.expenses.to_dataclass(),
            custom_expenses=[expense.to_dataclass() for expense in self.custom_expenses],
            debts=[debt.to_dataclass() for debt in self.debts],
            emergency_fund=self.emergency_fund.to_dataclass(),
            assets=self.assets.to_dataclass(),
            insurance=self.insurance.to_dataclass(),
            goals=[goal.to_dataclass() for goal in self.goals],
            risk_profile=self.risk_profile.to_dataclass(),
            financial_story=self.financial_story,
        )


class NarrativePayload(BaseModel):
    narrative: str = ""
    profile: Optional[FinancialProfilePayload] = None


class ReportPayload(BaseModel):
    profile: FinancialProfilePayload
    pdf_file_name: Optional[str] = None


class UsagePayload(BaseModel):
    name: str = ""
    monthly_income: float = 0.0
    health_score: int = 0
    primary_focus: str = ""
