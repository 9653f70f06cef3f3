"""
Advisory pipeline orchestration.

Stages run in data-dependency order: aggregation, intents and their feasibility,
the allocation, then diagnosis, priority classification, strategy design, the
action plan and the closing letter. The allocation is computed exactly once per
report and handed to every stage that quotes a contribution amount. A rental
upgrade from the story that is feasible or marginal is budgeted into that single
allocation.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List

from shared.observability.privacy import hash_payload

from action_plan import build_action_plan
from aggregation import compute_aggregates
from allocation import compute_allocation, recommended_budget
from conclusion import write_conclusion
from diagnosis import diagnose
from feasibility import assess_lifestyle_intent
from finance_model import AdvisorReport, FeasibilityAssessment, FinancialProfile, NarrativeIntents, ReportSummary
from health_metrics import emergency_fund_needed, health_score
from narrative_intents import detect_narrative_intents
from priority import classify_priority_issues
from strategies import design_strategies

logger = logging.getLogger(__name__)

DEFAULT_FOCUS = "Pertahankan kondisi keuangan"
KEY_FOCUS_LIMIT = 3
ACCEPTED_UPGRADE_STATUSES = ("FEASIBLE", "MARGINAL")


def accepted_rental_upgrade(intents: NarrativeIntents, feasibility: FeasibilityAssessment | None) -> float | None:
    """New monthly rent to budget for, when the story asks for a rental upgrade that is not rejected."""
    upgrade = intents.lifestyle_upgrade
    if upgrade is None or upgrade.type != "rental_upgrade" or feasibility is None:
        return None
    if feasibility.status not in ACCEPTED_UPGRADE_STATUSES:
        return None
    return upgrade.amount


def generate_advisor_report(profile: FinancialProfile, now: datetime | None = None) -> AdvisorReport:
    """
    Run the full advisory pipeline for a profile.

    Args:
        profile: FinancialProfile to advise; never mutated.
        now: Timestamp recorded as `generated_at`; defaults to the current UTC time.
            Passing a fixed value makes the whole report reproducible.
    Returns:
        AdvisorReport carrying the shared allocation, its recommended budget, the
        detected intents and the lifestyle feasibility assessment alongside the
        narrative sections.
    """
    aggregates = compute_aggregates(profile)
    intents = detect_narrative_intents(profile.financial_story)
    feasibility = assess_lifestyle_intent(intents.lifestyle_upgrade, profile)
    allocation = compute_allocation(profile, accepted_rental_upgrade(intents, feasibility))

    diagnosis = diagnose(profile, intents, aggregates)
    issues = classify_priority_issues(diagnosis, profile, aggregates)
    strategies = design_strategies(issues, intents, profile, allocation, feasibility, aggregates)
    action_plan = build_action_plan(profile, allocation, aggregates)
    conclusion = write_conclusion(
        profile,
        aggregates,
        diagnosis,
        issues,
        strategies,
        intents,
        feasibility,
        emergency_fund_needed(profile, aggregates),
    )

    generated_at = (now or datetime.now(timezone.utc)).isoformat()
    logger.info(
        {
            "event": "advisor_report_generated",
            "story_hash": hash_payload(profile.financial_story),
            "grade": diagnosis.overall_grade,
            "priority_issue_count": len(issues),
            "strategy_count": len(strategies),
            "debt_crisis": allocation.is_debt_crisis,
            "intent_keywords": intents.raw_keywords,
        }
    )

    return AdvisorReport(
        diagnosis=diagnosis,
        priority_issues=issues,
        strategies=strategies,
        action_plan=action_plan,
        advisor_conclusion=conclusion,
        generated_at=generated_at,
        intents=intents,
        allocation=allocation,
        feasibility=feasibility,
        recommended_budget=recommended_budget(profile, allocation),
    )


def key_focus(report: AdvisorReport) -> List[str]:
    focus = [issue.issue for issue in report.priority_issues[:KEY_FOCUS_LIMIT]]
    return focus or [DEFAULT_FOCUS]


def report_summary(profile: FinancialProfile, report: AdvisorReport) -> ReportSummary:
    """Headline numbers stored with a session snapshot and sent to usage logging."""
    score = health_score(profile)
    focus = key_focus(report)
    return ReportSummary(
        score=score.score,
        grade=score.grade,
        net_worth=compute_aggregates(profile).net_worth,
        key_focus=focus,
        top_focus=focus[0],
    )
