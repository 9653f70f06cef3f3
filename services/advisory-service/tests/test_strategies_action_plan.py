import pytest

from action_plan import build_action_plan
from aggregation import compute_aggregates
from allocation import compute_allocation
from conclusion import SIGNATURE, next_steps, write_conclusion
from diagnosis import diagnose
from feasibility import assess_lifestyle_intent
from finance_model import NarrativeIntents
from health_metrics import emergency_fund_needed
from narrative_intents import detect_narrative_intents
from priority import classify_priority_issues
from strategies import crisis_strategies, design_strategies
from factories import make_crisis_profile, make_debt, make_goal, make_healthy_profile, make_profile


def build_strategies(profile, story=""):
    aggregates = compute_aggregates(profile)
    allocation = compute_allocation(profile)
    intents = detect_narrative_intents(story)
    feasibility = assess_lifestyle_intent(intents.lifestyle_upgrade, profile)
    issues = classify_priority_issues(diagnose(profile, intents, aggregates), profile, aggregates)
    return design_strategies(issues, intents, profile, allocation, feasibility, aggregates), allocation


class TestStrategies:
    def test_crisis_strategies_lead(self):
        strategies, _ = build_strategies(make_crisis_profile())

        assert [strategy.name for strategy in strategies] == [
            "Akselerasi Pelunasan Hutang",
            "Mencari Penghasilan Tambahan",
            "Pembangunan Dana Darurat",
            "Akselerasi Pelunasan Hutang (Avalanche Method)",
        ]

    def test_priorities_are_sequential(self):
        strategies, _ = build_strategies(make_crisis_profile(), "Saya bingung soal asuransi dan punya hutang kartu kredit")

        assert [strategy.priority for strategy in strategies] == list(range(1, len(strategies) + 1))

    def test_emergency_target_comes_from_allocation(self):
        strategies, allocation = build_strategies(make_crisis_profile())

        emergency = next(strategy for strategy in strategies if strategy.name == "Pembangunan Dana Darurat")
        assert emergency.target_amount == pytest.approx(allocation.emergency)
        assert emergency.target_amount == pytest.approx(300_000)

    def test_crisis_acceleration_target_is_allocated_debt(self):
        strategies, allocation = build_strategies(make_crisis_profile())

        assert allocation.additional_debt == pytest.approx(3_700_000)
        assert strategies[0].target_amount == pytest.approx(allocation.additional_debt)
        assert strategies[0].target_percentage == 37
        assert "Alokasi surplus untuk cicilan tambahan: Rp3.700.000/bulan" in strategies[0].actions

    def test_avalanche_extra_is_allocated_debt(self):
        strategies, _ = build_strategies(make_crisis_profile())

        avalanche = strategies[-1]
        assert avalanche.name == "Akselerasi Pelunasan Hutang (Avalanche Method)"
        assert "Tambah pembayaran Rp3.700.000/bulan di atas cicilan minimum" in avalanche.actions
        # 130M over 3M instalment plus 3.7M extra
        assert avalanche.timeframe == "20 bulan"

    def test_priorities_are_assigned_on_new_objects(self):
        profile = make_crisis_profile()
        aggregates = compute_aggregates(profile)
        allocation = compute_allocation(profile)
        crisis = crisis_strategies(profile, aggregates, allocation)

        numbered = design_strategies([], NarrativeIntents(), profile, allocation, aggregates=aggregates)

        assert [strategy.priority for strategy in crisis] == [0] * len(crisis)
        assert [strategy.priority for strategy in numbered] == list(range(1, len(numbered) + 1))
        assert [strategy.name for strategy in numbered] == [strategy.name for strategy in crisis]

    def test_healthy_profile_gets_growth_strategy_only(self):
        strategies, allocation = build_strategies(make_healthy_profile())

        assert [strategy.name for strategy in strategies] == ["Strategi Investasi Pertumbuhan"]
        assert strategies[0].target_amount == pytest.approx(allocation.investment * 12)

    def test_story_strategies_precede_issue_strategies(self):
        strategies, _ = build_strategies(make_healthy_profile(bpjs=False), "saya mau beli iPhone 20 juta")

        assert strategies[0].name == "Analisis Pembelian Barang"
        assert strategies[0].target_amount == pytest.approx(20_000_000)
        assert strategies[1].name == "Pengamanan Proteksi Keluarga"

    def test_insurance_story_uses_allocated_premium(self):
        profile = make_profile(rent=4_000_000, emergency=12_000_000)
        strategies, allocation = build_strategies(profile, "Saya bingung apakah perlu asuransi")

        insurance = next(strategy for strategy in strategies if strategy.name == "Optimalisasi Proteksi Asuransi")
        assert insurance.target_amount == pytest.approx(allocation.insurance)
        assert insurance.actions[0].startswith("Proteksi yang belum dimiliki:")
        assert "Asuransi Penyakit Kritis" in insurance.actions[0]


class TestActionPlan:
    def test_tracking_first_and_annual_review_always_present(self):
        for profile in (make_healthy_profile(), make_crisis_profile()):
            plan = build_action_plan(profile, compute_allocation(profile))

            assert plan.short_term[0].action.startswith("Set up sistem tracking pengeluaran")
            assert any(item.frequency == "tahunan" and "Review komprehensif" in item.action for item in plan.long_term)

    def test_recurring_amounts_match_allocation(self):
        profile = make_crisis_profile()
        allocation = compute_allocation(profile)

        plan = build_action_plan(profile, allocation)

        auto_debit = [item for item in plan.short_term if "auto-debit" in item.action]
        assert [item.amount for item in auto_debit] == [pytest.approx(allocation.emergency)]

    @pytest.mark.parametrize(
        "profile",
        [
            make_profile(rent=3_000_000, bank_savings=20_000_000, debts=[make_debt("cc", 5_000_000, 24.0, payment=500_000)]),
            make_crisis_profile(),
        ],
        ids=["high-interest-debt", "debt-crisis"],
    )
    def test_monthly_commitments_stay_within_allocated_surplus(self, profile):
        allocation = compute_allocation(profile)

        plan = build_action_plan(profile, allocation)

        monthly = sum(
            item.amount
            for item in plan.short_term + plan.mid_term + plan.long_term
            if item.frequency == "bulanan"
        )
        budget = allocation.available_surplus + allocation.lifestyle_cut + allocation.subscription_cut
        assert monthly + allocation.insurance <= budget + 1

    def test_high_interest_debt_outside_crisis_uses_windfalls(self):
        profile = make_profile(rent=3_000_000, bank_savings=20_000_000, debts=[make_debt("cc", 5_000_000, 24.0, payment=500_000)])

        plan = build_action_plan(profile, compute_allocation(profile))

        windfall = next(item for item in plan.short_term if item.action.startswith("Arahkan bonus/THR"))
        assert windfall.amount == 0
        assert windfall.frequency == "sekali"

    def test_quick_win_targets_high_interest_debt(self):
        profile = make_profile(
            rent=3_000_000,
            debts=[
                make_debt("motor", 2_000_000, 8.0, payment=500_000, debt_type="kendaraan"),
                make_debt("kk-1", 6_000_000, 30.0, payment=600_000, debt_type="kartu_kredit"),
                make_debt("kk-2", 4_000_000, 26.0, payment=400_000, debt_type="kartu_kredit"),
            ],
        )

        plan = build_action_plan(profile, compute_allocation(profile))

        quick_win = next(item for item in plan.mid_term if item.action.startswith("Lunasi "))
        assert quick_win.amount == pytest.approx(4_000_000)

    def test_no_quick_win_without_high_interest_debt(self):
        profile = make_profile(rent=3_000_000, debts=[make_debt("motor", 2_000_000, 8.0, payment=500_000)])

        plan = build_action_plan(profile, compute_allocation(profile))

        assert not any(item.action.startswith("Lunasi ") for item in plan.mid_term)

    def test_full_emergency_fund_skips_auto_debit(self):
        profile = make_healthy_profile()

        plan = build_action_plan(profile, compute_allocation(profile))

        assert not any("auto-debit" in item.action for item in plan.short_term)

    def test_goals_appear_in_long_term(self):
        profile = make_healthy_profile(goals=[make_goal("rumah", 200_000_000, months=60, name="DP Rumah")])

        plan = build_action_plan(profile, compute_allocation(profile))

        assert "Progress tujuan: DP Rumah" in [item.action for item in plan.long_term]


class TestConclusion:
    def build(self, profile, story=""):
        aggregates = compute_aggregates(profile)
        intents = detect_narrative_intents(story)
        feasibility = assess_lifestyle_intent(intents.lifestyle_upgrade, profile)
        diagnosis = diagnose(profile, intents, aggregates)
        issues = classify_priority_issues(diagnosis, profile, aggregates)
        strategies = design_strategies(issues, intents, profile, compute_allocation(profile), feasibility, aggregates)
        return write_conclusion(
            profile,
            aggregates,
            diagnosis,
            issues,
            strategies,
            intents,
            feasibility,
            emergency_fund_needed(profile, aggregates),
        )

    def test_greeting_and_signature(self):
        conclusion = self.build(make_crisis_profile())

        assert conclusion.startswith("Kepada Budi Santoso,")
        assert conclusion.endswith(SIGNATURE)
        assert "**PERHATIAN UTAMA:**" in conclusion

    def test_anonymous_greeting(self):
        assert self.build(make_healthy_profile(name="")).startswith("Kepada Bapak/Ibu,")

    def test_positive_section_needs_surplus(self):
        assert "**ASPEK POSITIF:**" in self.build(make_healthy_profile())
        assert "**ASPEK POSITIF:**" not in self.build(make_profile(income=5_000_000, rent=6_000_000))

    def test_story_section_only_with_story(self):
        assert "**MENGENAI PERTANYAAN ANDA:**" not in self.build(make_healthy_profile())

    def test_next_steps_are_numbered_contiguously(self):
        profile = make_healthy_profile(bpjs=False)
        issues = classify_priority_issues(diagnose(profile), profile)

        steps = next_steps([issue for issue in issues if issue.classification == "KRITIS"])

        assert steps == [
            "1. Dalam 7 hari: Set up sistem tracking pengeluaran dan auto-debit tabungan",
            "2. Dalam 30 hari: Amankan proteksi asuransi untuk keluarga",
            "3. Review progress setiap bulan dan sesuaikan strategi jika diperlukan",
        ]
        assert next_steps([])[-1].startswith("2. ")


def test_empty_intents_produce_no_story_strategies():
    profile = make_healthy_profile()

    strategies = design_strategies([], NarrativeIntents(), profile, compute_allocation(profile))

    assert [strategy.name for strategy in strategies] == ["Strategi Investasi Pertumbuhan"]
