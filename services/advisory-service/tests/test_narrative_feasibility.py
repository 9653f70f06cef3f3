import pytest

from feasibility import assess_lifestyle_intent, assess_one_time_purchase, assess_recurring_change
from finance_model import LifestyleUpgradeIntent
from narrative_intents import detect_narrative_intents, extract_amount
from factories import make_profile


class TestAmountExtraction:
    @pytest.mark.parametrize(
        "text, amount",
        [
            ("saya mau beli iphone 20 juta", 20_000_000),
            ("budget sekitar 2,5jt", 2_500_000),
            ("sewa 750 ribu", 750_000),
            ("harga Rp 3.500.000 per bulan", 3_500_000),
        ],
    )
    def test_recognized_formats(self, text, amount):
        assert extract_amount(text) == pytest.approx(amount)

    def test_no_amount(self):
        assert extract_amount("belum tahu berapa") is None
        assert extract_amount(None) is None


class TestIntentDetection:
    def test_blank_story_has_no_intents(self):
        intents = detect_narrative_intents("   ")

        assert intents.raw_keywords == []
        assert intents.lifestyle_upgrade is None

    def test_purchase_example(self):
        intents = detect_narrative_intents("saya mau beli iPhone 20 juta")

        assert intents.mentions_purchase is True
        assert intents.lifestyle_upgrade.type == "purchase"
        assert intents.lifestyle_upgrade.amount == pytest.approx(20_000_000)
        assert "pembelian barang" in intents.raw_keywords

    def test_rental_upgrade_carries_new_rent(self):
        intents = detect_narrative_intents("Saya ingin pindah kontrakan yang lebih besar, sewa 4 juta")

        assert intents.mentions_rental_upgrade is True
        assert intents.lifestyle_upgrade.type == "rental_upgrade"
        assert intents.lifestyle_upgrade.amount == pytest.approx(4_000_000)
        assert "upgrade kontrakan" in intents.raw_keywords

    def test_home_purchase(self):
        intents = detect_narrative_intents("Tahun depan saya mau beli rumah sendiri")

        assert intents.mentions_home_purchase is True
        assert intents.lifestyle_upgrade.type == "home_purchase"

    def test_keywords_follow_fixed_order(self):
        intents = detect_narrative_intents("Saya bingung soal asuransi dan mau menikah tahun depan")

        assert intents.raw_keywords[:3] == ["asuransi", "pernikahan", "kebingungan"]
        assert intents.mentions_confusion is True

    def test_detection_is_case_insensitive(self):
        assert detect_narrative_intents("TAKUT KENA PHK").mentions_job_loss is True


class TestFeasibility:
    def test_purchase_example_is_marginal(self):
        profile = make_profile(income=10_000_000, rent=8_000_000)

        result = assess_one_time_purchase(profile, 20_000_000)

        assert result.months_to_save == 10
        assert result.status == "MARGINAL"

    @pytest.mark.parametrize(
        "amount, status",
        [(5_000_000, "FEASIBLE"), (40_000_000, "MARGINAL"), (60_000_000, "NOT_FEASIBLE")],
    )
    def test_purchase_bands(self, amount, status):
        profile = make_profile(income=10_000_000, rent=8_000_000)

        assert assess_one_time_purchase(profile, amount).status == status

    def test_purchase_with_negative_cashflow(self):
        result = assess_one_time_purchase(make_profile(income=5_000_000, rent=6_000_000), 1_000_000)

        assert result.status == "NOT_FEASIBLE"
        assert result.months_to_save is None

    def test_very_long_purchase_caps_display(self):
        result = assess_one_time_purchase(make_profile(income=10_000_000, rent=9_900_000), 50_000_000)

        assert "> 100 bulan" in result.message

    @pytest.mark.parametrize(
        "new_rent, status",
        [(3_000_000, "FEASIBLE"), (6_500_000, "MARGINAL"), (7_500_000, "NOT_FEASIBLE"), (9_000_000, "NOT_FEASIBLE")],
    )
    def test_recurring_bands(self, new_rent, status):
        # surplus 6M on 10M income with 2M rent
        profile = make_profile(income=10_000_000, rent=2_000_000, entertainment=2_000_000)

        assert assess_recurring_change(profile, new_rent, 2_000_000).status == status

    def test_feasibility_is_monotone_in_surplus(self):
        order = {"NOT_FEASIBLE": 0, "MARGINAL": 1, "FEASIBLE": 2}
        statuses = [
            order[assess_one_time_purchase(make_profile(income=income, rent=4_000_000), 12_000_000).status]
            for income in (4_000_000, 5_000_000, 5_500_000, 6_000_000, 8_000_000, 10_000_000)
        ]

        assert statuses == sorted(statuses)

    def test_dispatch(self):
        profile = make_profile(income=10_000_000, rent=2_000_000)

        rental = assess_lifestyle_intent(LifestyleUpgradeIntent(type="rental_upgrade", description="", amount=3_000_000), profile)
        home = assess_lifestyle_intent(LifestyleUpgradeIntent(type="home_purchase", description="", amount=None), profile)

        assert rental.surplus_after == pytest.approx(7_000_000)
        assert home is None
        assert assess_lifestyle_intent(None, profile) is None

    def test_rental_upgrade_without_amount_is_not_assessed(self):
        profile = make_profile(income=10_000_000, rent=2_000_000)
        intents = detect_narrative_intents("saya mau pindah kos yang lebih dekat kantor")

        assert intents.lifestyle_upgrade.type == "rental_upgrade"
        assert intents.lifestyle_upgrade.amount is None
        assert assess_lifestyle_intent(intents.lifestyle_upgrade, profile) is None
