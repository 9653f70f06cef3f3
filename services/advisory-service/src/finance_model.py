from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Literal

# Personal status enumerations
MaritalStatus = Literal["lajang", "menikah", "cerai"]
EmploymentStatus = Literal["karyawan", "freelancer", "pengusaha", "tidak_bekerja"]

# Custom expense frequencies (normalized to a monthly basis)
Frequency = Literal["harian", "mingguan", "bulanan", "tahunan"]

DebtType = Literal[
    "kta",
    "paylater",
    "kartu_kredit",
    "pinjol_legal",
    "cicilan_hp",
    "kendaraan",
    "kpr",
    "lainnya",
]

InsuranceType = Literal[
    "jiwa",
    "penyakit_kritis",
    "kecelakaan",
    "pendidikan",
    "properti",
    "kendaraan",
    "lainnya",
]

# Goal and portfolio risk tiers
RiskTier = Literal["konservatif", "moderat", "agresif"]
RiskTolerance = Literal["rendah", "sedang", "tinggi"]
GoalPriority = Literal["tinggi", "sedang", "rendah"]

Severity = Literal["kritis", "serius", "moderat", "ringan"]
PriorityClass = Literal["KRITIS", "PENTING", "OPTIMISASI"]
MetricStatus = Literal["healthy", "warning", "danger"]
FeasibilityStatus = Literal["FEASIBLE", "MARGINAL", "NOT_FEASIBLE"]
LifestyleIntentType = Literal["rental_upgrade", "home_purchase", "purchase"]


# ---------------------------------------------------------------------------
# Input profile
# ---------------------------------------------------------------------------


@dataclass
class PersonalInfo:
    full_name: str = ""
    age: int = 25
    marital_status: MaritalStatus = "lajang"
    dependents: int = 0
    domicile: str = ""
    occupation: str = ""
    employment_status: EmploymentStatus = "karyawan"


@dataclass
class IncomeInfo:
    # Recurring, already monthly
    monthly_salary: float = 0.0
    monthly_allowance: float = 0.0
    spouse_income: float = 0.0
    side_income: float = 0.0
    # Irregular, annual totals
    annual_bonus: float = 0.0
    annual_dividends: float = 0.0
    annual_business_income: float = 0.0
    annual_other_passive: float = 0.0


@dataclass
class HousingExpenses:
    housing_type: str = "kost"
    rent: float = 0.0
    electricity: float = 0.0
    water: float = 0.0
    internet: float = 0.0
    household_supplies: float = 0.0


@dataclass
class ConsumptionExpenses:
    daily_meals: float = 0.0  # per day
    daily_snacks: float = 0.0  # per day (coffee, jajan)
    groceries: float = 0.0  # per month


@dataclass
class TransportExpenses:
    daily_transport: float = 0.0  # per workday
    daily_parking: float = 0.0  # per workday
    vehicle_service: float = 0.0  # per month


@dataclass
class LifestyleExpenses:
    supplements: float = 0.0
    gym: float = 0.0
    entertainment: float = 0.0


@dataclass
class SubscriptionItem:
    active: bool = False
    monthly_cost: float = 0.0


@dataclass
class SubscriptionExpenses:
    phone_data: float = 0.0
    spotify: SubscriptionItem = field(default_factory=SubscriptionItem)
    netflix: SubscriptionItem = field(default_factory=SubscriptionItem)
    youtube_premium: SubscriptionItem = field(default_factory=SubscriptionItem)
    google_storage: SubscriptionItem = field(default_factory=SubscriptionItem)
    apple_icloud: SubscriptionItem = field(default_factory=SubscriptionItem)
    amazon_prime: SubscriptionItem = field(default_factory=SubscriptionItem)
    other_name: str = ""
    other_cost: float = 0.0

    def items(self) -> list[SubscriptionItem]:
        return [
            self.spotify,
            self.netflix,
            self.youtube_premium,
            self.google_storage,
            self.apple_icloud,
            self.amazon_prime,
        ]


@dataclass
class FamilyObligations:
    school_fees: float = 0.0
    daycare: float = 0.0
    unexpected_costs: float = 0.0


@dataclass
class CustomExpense:
    id: str
    name: str
    category: str = "lainnya"
    frequency: Frequency = "bulanan"
    amount: float = 0.0


@dataclass
class ExpenseInfo:
    housing: HousingExpenses = field(default_factory=HousingExpenses)
    consumption: ConsumptionExpenses = field(default_factory=ConsumptionExpenses)
    transport: TransportExpenses = field(default_factory=TransportExpenses)
    lifestyle: LifestyleExpenses = field(default_factory=LifestyleExpenses)
    subscriptions: SubscriptionExpenses = field(default_factory=SubscriptionExpenses)
    family: FamilyObligations = field(default_factory=FamilyObligations)


@dataclass
class DebtItem:
    id: str
    debt_type: DebtType = "lainnya"
    balance: float = 0.0
    interest_rate: float = 0.0  # annual, percent
    monthly_payment: float = 0.0
    remaining_months: int = 0


@dataclass
class EmergencyFundInfo:
    current_balance: float = 0.0
    storage_type: str = "tabungan"
    top_up_frequency: str = "bulanan"
    top_up_amount: float = 0.0


@dataclass
class LiquidCash:
    bank_savings: float = 0.0
    time_deposits: float = 0.0
    e_wallet: float = 0.0
    cash: float = 0.0


@dataclass
class Investments:
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


@dataclass
class RealAssets:
    property: float = 0.0
    vehicles: float = 0.0
    valuables: float = 0.0


@dataclass
class AssetInfo:
    liquid: LiquidCash = field(default_factory=LiquidCash)
    investments: Investments = field(default_factory=Investments)
    real: RealAssets = field(default_factory=RealAssets)


@dataclass
class BpjsCoverage:
    held: bool = False
    coverage_class: str = "kelas_3"
    monthly_fee: float = 0.0
    members_covered: int = 1


@dataclass
class HealthBenefit:
    name: str = ""
    annual_limit: float = 0.0
    claim_system: str = "cashless"
    notes: str = ""


@dataclass
class PrivateHealthCoverage:
    held: bool = False
    company: str = ""
    product: str = ""
    monthly_premium: float = 0.0
    benefits: list[HealthBenefit] = field(default_factory=list)


@dataclass
class InsurancePolicy:
    id: str
    policy_type: InsuranceType = "lainnya"
    company: str = ""
    product: str = ""
    monthly_premium: float = 0.0
    main_benefit: str = ""
    benefit_value: float = 0.0
    term_years: int = 0


@dataclass
class InsuranceInfo:
    bpjs: BpjsCoverage = field(default_factory=BpjsCoverage)
    private_health: PrivateHealthCoverage = field(default_factory=PrivateHealthCoverage)
    other_policies: list[InsurancePolicy] = field(default_factory=list)

    @property
    def has_health(self) -> bool:
        return self.bpjs.held or self.private_health.held

    def has_policy(self, policy_type: str) -> bool:
        return any(policy.policy_type == policy_type for policy in self.other_policies)


@dataclass
class FinancialGoal:
    id: str
    name: str
    category: str = "lainnya"
    target_amount: float = 0.0
    timeframe_months: int = 12
    priority: GoalPriority = "sedang"
    risk_tier: RiskTier = "moderat"
    collected_amount: float = 0.0


@dataclass
class RiskProfile:
    tolerance: RiskTolerance = "sedang"
    experience: str = "pemula"
    drawdown_reaction: str = "tahan"
    objective: str = "pertumbuhan"


@dataclass
class FinancialProfile:
    """
    Complete household picture supplied by the collection layer.

    The core treats it as read-only; every nested section defaults to zero/empty
    so partially filled profiles still flow through the whole pipeline.
    """

    personal: PersonalInfo = field(default_factory=PersonalInfo)
    income: IncomeInfo = field(default_factory=IncomeInfo)
    expenses: ExpenseInfo = field(default_factory=ExpenseInfo)
    custom_expenses: list[CustomExpense] = field(default_factory=list)
    debts: list[DebtItem] = field(default_factory=list)
    emergency_fund: EmergencyFundInfo = field(default_factory=EmergencyFundInfo)
    assets: AssetInfo = field(default_factory=AssetInfo)
    insurance: InsuranceInfo = field(default_factory=InsuranceInfo)
    goals: list[FinancialGoal] = field(default_factory=list)
    risk_profile: RiskProfile = field(default_factory=RiskProfile)
    financial_story: str = ""


# ---------------------------------------------------------------------------
# Derived outputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FinancialAggregates:
    monthly_income: float
    monthly_expenses: float
    monthly_debt_payments: float
    surplus: float
    liquid_cash_total: float
    investment_total: float
    real_asset_total: float
    total_assets: float
    total_liabilities: float
    net_worth: float
    liquid_assets: float


@dataclass
class BreakdownItem:
    category: str
    amount: float


@dataclass
class HealthMetric:
    name: str
    value: float
    status: MetricStatus
    description: str
    target: str


@dataclass(frozen=True, slots=True)
class HealthScore:
    score: int
    grade: str
    critical: int
    serious: int
    moderate: int


@dataclass
class EmergencyFundStatus:
    months_target: int
    needed: float
    current: float
    gap: float
    coverage_percent: float
    monthly_target: float
    status: Literal["aman", "kurang", "kritis"]


@dataclass
class DebtPayoffPlan:
    debt_id: str
    debt_name: str
    balance: float
    monthly_payment: float
    interest_rate: float
    payoff_months: int
    total_interest: float
    priority: int


@dataclass
class DebtPayoffStrategy:
    method: Literal["avalanche", "snowball"]
    order: list[str]
    total_interest_paid: float
    payoff_months: int
    monthly_savings: float


@dataclass
class DebtAnalysis:
    total_debt: float
    monthly_payments: float
    debt_service_ratio: float
    status: Literal["sehat", "waspada", "kritis"]
    high_interest_debt_ids: list[str]
    avalanche: DebtPayoffStrategy
    snowball: DebtPayoffStrategy
    recommended_method: Literal["avalanche", "snowball"]


@dataclass
class InvestmentRecommendation:
    instrument: str
    allocation: int
    description: str
    risk_level: Literal["low", "medium", "high"]
    expected_return: str


@dataclass
class GoalPlan:
    goal_id: str
    goal_name: str
    target_amount: float
    current_amount: float
    monthly_required: float
    timeline_months: int
    recommended_instruments: list[str]
    projected_completion: date
    on_track: bool


@dataclass(frozen=True, slots=True)
class Allocation:
    """Monthly split of available surplus; one instance is shared per report."""

    available_surplus: float
    emergency: float
    insurance: float
    goals: float
    investment: float
    additional_debt: float
    lifestyle_cut: float
    subscription_cut: float
    is_debt_crisis: bool
    is_severe_crisis: bool
    has_health_insurance: bool
    has_life_insurance: bool
    has_critical_illness: bool
    rental_upgrade_amount: float | None = None


@dataclass
class LifestyleUpgradeIntent:
    type: LifestyleIntentType
    description: str
    amount: float | None = None


@dataclass
class NarrativeIntents:
    mentions_insurance: bool = False
    mentions_marriage: bool = False
    mentions_confusion: bool = False
    mentions_investment: bool = False
    mentions_debt: bool = False
    mentions_emergency: bool = False
    mentions_housing: bool = False
    mentions_rental_upgrade: bool = False
    mentions_home_purchase: bool = False
    mentions_education: bool = False
    mentions_retirement: bool = False
    mentions_children: bool = False
    mentions_side_income: bool = False
    mentions_job_loss: bool = False
    mentions_purchase: bool = False
    lifestyle_upgrade: LifestyleUpgradeIntent | None = None
    raw_keywords: list[str] = field(default_factory=list)


@dataclass
class FeasibilityAssessment:
    status: FeasibilityStatus
    message: str
    current_surplus: float
    surplus_after: float
    savings_ratio_after: float
    months_to_save: int | None = None
    alternatives: list[str] = field(default_factory=list)


@dataclass
class DiagnosisItem:
    issue: str
    severity: Severity
    impact: str
    evidence: str


@dataclass
class Diagnosis:
    weaknesses: list[DiagnosisItem]
    hidden_risks: list[DiagnosisItem]
    false_securities: list[DiagnosisItem]
    overall_grade: str
    summary: str


@dataclass
class PriorityIssue:
    rank: int
    classification: PriorityClass
    issue: str
    urgency: str
    impact: float
    deadline: str
    short_explanation: str | None = None
    justification: str | None = None


@dataclass
class RecommendedStrategy:
    priority: int
    name: str
    objective: str
    target_amount: float
    timeframe: str
    actions: list[str]
    tradeoffs: list[str]
    expected_outcome: str
    target_percentage: float | None = None


@dataclass
class ActionItem:
    action: str
    amount: float
    deadline: str
    frequency: str
    rationale: str


@dataclass
class ActionPlanTimeline:
    short_term: list[ActionItem] = field(default_factory=list)
    mid_term: list[ActionItem] = field(default_factory=list)
    long_term: list[ActionItem] = field(default_factory=list)


@dataclass
class AdvisorReport:
    diagnosis: Diagnosis
    priority_issues: list[PriorityIssue]
    strategies: list[RecommendedStrategy]
    action_plan: ActionPlanTimeline
    advisor_conclusion: str
    generated_at: str
    intents: NarrativeIntents
    allocation: Allocation
    feasibility: FeasibilityAssessment | None = None
    recommended_budget: list[BreakdownItem] = field(default_factory=list)


@dataclass
class ReportSummary:
    score: int
    grade: str
    net_worth: float
    key_focus: list[str]
    top_focus: str
