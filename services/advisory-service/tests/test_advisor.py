import copy
from datetime import datetime, timezone

import pytest

from advisor import DEFAULT_FOCUS, generate_advisor_report, key_focus, report_summary
from allocation import compute_allocation
from conclusion import SIGNATURE
from health_metrics import health_score
from factories import make_crisis_profile, make_healthy_profile, make_profile

FIXED_NOW = datetime(2026, 10, 18, 9, 30, tzinfo=timezone.utc)


class TestGenerateAdvisorReport:
    def test_fixed_timestamp_makes_report_reproducible(self):
        profile = make_crisis_profile(story="Saya punya hutang kartu kredit dan bingung soal asuransi")

        assert generate_advisor_report(profile, now=FIXED_NOW) == generate_advisor_report(profile, now=FIXED_NOW)

    def test_generated_at_is_iso_timestamp(self):
        report = generate_advisor_report(make_healthy_profile(), now=FIXED_NOW)

        assert report.generated_at == "2026-10-18T09:30:00+00:00"

    def test_profile_is_not_mutated(self):
        profile = make_crisis_profile(story="mau pindah kontrakan sewa 4 juta")
        snapshot = copy.deepcopy(profile)

        generate_advisor_report(profile, now=FIXED_NOW)

        assert profile == snapshot

    @pytest.mark.parametrize("factory", [make_healthy_profile, make_crisis_profile])
    def test_report_allocation_matches_standalone_allocation(self, factory):
        profile = factory()

        assert generate_advisor_report(profile, now=FIXED_NOW).allocation == compute_allocation(profile)

    def test_grade_matches_health_score(self):
        profile = make_crisis_profile()

        report = generate_advisor_report(profile, now=FIXED_NOW)

        assert report.diagnosis.overall_grade == health_score(profile).grade == "F"

    def test_conclusion_frame(self):
        report = generate_advisor_report(make_crisis_profile(), now=FIXED_NOW)

        assert report.advisor_conclusion.startswith("Kepada Budi Santoso,")
        assert report.advisor_conclusion.endswith(SIGNATURE)

    def test_story_intents_and_feasibility_are_attached(self):
        report = generate_advisor_report(make_healthy_profile(story="saya mau beli iPhone 20 juta"), now=FIXED_NOW)

        assert report.intents.mentions_purchase is True
        assert report.feasibility is not None
        assert report.feasibility.months_to_save == 4
        assert report.strategies[0].name == "Analisis Pembelian Barang"

    def test_home_purchase_has_no_feasibility(self):
        report = generate_advisor_report(make_healthy_profile(story="saya ingin beli rumah"), now=FIXED_NOW)

        assert report.intents.lifestyle_upgrade.type == "home_purchase"
        assert report.feasibility is None


class TestSummary:
    def test_key_focus_takes_top_three_issues(self):
        profile = make_crisis_profile(bpjs=False)
        report = generate_advisor_report(profile, now=FIXED_NOW)

        assert key_focus(report) == [issue.issue for issue in report.priority_issues[:3]]

    def test_key_focus_falls_back_when_nothing_to_fix(self):
        report = generate_advisor_report(make_healthy_profile(), now=FIXED_NOW)

        assert key_focus(report) == [DEFAULT_FOCUS]

    def test_report_summary(self):
        profile = make_crisis_profile()
        report = generate_advisor_report(profile, now=FIXED_NOW)

        summary = report_summary(profile, report)

        assert summary.grade == "F"
        assert summary.net_worth == pytest.approx(5_000_000 - 130_000_000)
        assert summary.top_focus == "Dana Darurat Hampir Tidak Ada"
        assert summary.key_focus[0] == summary.top_focus

    def test_negative_cashflow_report_has_no_positive_section(self):
        report = generate_advisor_report(make_profile(income=5_000_000, rent=6_000_000), now=FIXED_NOW)

        assert report.priority_issues[0].issue == "Cashflow Negatif"
        assert "**ASPEK POSITIF:**" not in report.advisor_conclusion
