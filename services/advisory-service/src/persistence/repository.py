"""Data access helpers for advisory sessions and usage logs."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Tuple

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session

from persistence.models import AdvisorSession, AuditEvent, UsageLog

# (label, exclusive upper bound); the last band is open-ended
INCOME_RANGES: Tuple[Tuple[str, float | None], ...] = (
    ("< 3 Juta", 3_000_000),
    ("3-5 Juta", 5_000_000),
    ("5-8 Juta", 8_000_000),
    ("8-15 Juta", 15_000_000),
    ("15-30 Juta", 30_000_000),
    ("> 30 Juta", None),
)
RECENT_ENTRY_LIMIT = 10
DAILY_WINDOW_DAYS = 30


def income_range_label(monthly_income: float) -> str:
    for label, upper in INCOME_RANGES:
        if upper is None or monthly_income < upper:
            return label
    return INCOME_RANGES[-1][0]


@dataclass
class UsageStats:
    total_users: int
    average_income: float
    users_per_day: List[Dict[str, Any]] = field(default_factory=list)
    income_distribution: List[Dict[str, Any]] = field(default_factory=list)
    recent_entries: List[UsageLog] = field(default_factory=list)


class AdvisorSessionRepository:
    """Stores report snapshots; a snapshot is written once and never updated."""

    def __init__(self, db: Session):
        self._db = db

    def create_session(
        self,
        session_id: str,
        *,
        user_name: str,
        profile: dict[str, Any],
        report: dict[str, Any],
        summary: dict[str, Any],
        pdf_file_name: str | None = None,
        source_ip: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> AdvisorSession:
        record = AdvisorSession(
            id=session_id,
            user_name=user_name,
            profile=profile,
            report=report,
            summary=summary,
            pdf_file_name=pdf_file_name,
        )
        self._db.add(record)
        self._record_event(
            subject_type="advisor_session",
            subject_id=session_id,
            action="report_generated",
            source_ip=source_ip,
            details=details,
        )
        self._db.commit()
        self._db.refresh(record)
        return record

    def get_session(self, session_id: str) -> AdvisorSession | None:
        return self._db.get(AdvisorSession, session_id)

    def list_recent(self, limit: int = RECENT_ENTRY_LIMIT) -> List[AdvisorSession]:
        statement = select(AdvisorSession).order_by(AdvisorSession.created_at.desc()).limit(limit)
        return list(self._db.scalars(statement))

    def delete_session(self, session_id: str, *, source_ip: str | None = None) -> bool:
        record = self.get_session(session_id)
        if record is None:
            return False
        self._db.delete(record)
        self._record_event(
            subject_type="advisor_session",
            subject_id=session_id,
            action="session_deleted",
            source_ip=source_ip,
            details=None,
        )
        self._db.commit()
        return True

    def _record_event(self, **kwargs: Any) -> None:
        self._db.add(AuditEvent(**kwargs))


class UsageLogRepository:
    """Usage log writes plus the aggregate queries behind the admin dashboard."""

    def __init__(self, db: Session):
        self._db = db

    def log_usage(
        self,
        *,
        name: str,
        monthly_income: float,
        health_score: int = 0,
        primary_focus: str = "",
        source_ip: str | None = None,
    ) -> UsageLog:
        entry = UsageLog(
            name=name.strip(),
            monthly_income=monthly_income,
            health_score=health_score,
            primary_focus=primary_focus,
        )
        self._db.add(entry)
        # flush first so the autoincrement id is available for the audit row
        self._db.flush()
        self._record_event(entry.id, "usage_logged", source_ip, {"income_range": income_range_label(monthly_income)})
        self._db.commit()
        self._db.refresh(entry)
        return entry

    def get_entry(self, entry_id: int) -> UsageLog | None:
        return self._db.get(UsageLog, entry_id)

    def delete_entry(self, entry_id: int, *, source_ip: str | None = None) -> bool:
        entry = self.get_entry(entry_id)
        if entry is None:
            return False
        self._db.delete(entry)
        self._record_event(entry_id, "usage_deleted", source_ip, None)
        self._db.commit()
        return True

    def stats(self, *, today: date | None = None, recent_limit: int = RECENT_ENTRY_LIMIT) -> UsageStats:
        """
        Aggregate usage for the admin dashboard.

        Args:
            today: Reference day for the 30-day daily series; defaults to the current UTC date.
            recent_limit: How many of the newest entries to include.
        Returns:
            UsageStats with income bands in ascending order; empty bands are omitted.
        """
        total = self._db.scalar(select(func.count(UsageLog.id))) or 0
        average = self._db.scalar(select(func.avg(UsageLog.monthly_income))) or 0.0

        band = case(
            *[(UsageLog.monthly_income < upper, label) for label, upper in INCOME_RANGES if upper is not None],
            else_=INCOME_RANGES[-1][0],
        )
        counts = dict(self._db.execute(select(band, func.count(UsageLog.id)).group_by(band)).all())
        distribution = [
            {"range": label, "count": counts[label]} for label, _ in INCOME_RANGES if counts.get(label)
        ]

        today = today or datetime.now(timezone.utc).date()
        since = datetime.combine(today - timedelta(days=DAILY_WINDOW_DAYS), datetime.min.time())
        created = self._db.scalars(select(UsageLog.created_at).where(UsageLog.created_at >= since))
        per_day = Counter(timestamp.date().isoformat() for timestamp in created)

        recent = select(UsageLog).order_by(UsageLog.created_at.desc(), UsageLog.id.desc()).limit(recent_limit)

        return UsageStats(
            total_users=int(total),
            average_income=float(average),
            users_per_day=[{"date": day, "count": per_day[day]} for day in sorted(per_day)],
            income_distribution=distribution,
            recent_entries=list(self._db.scalars(recent)),
        )

    def _record_event(self, entry_id: int, action: str, source_ip: str | None, details: dict[str, Any] | None) -> None:
        self._db.add(
            AuditEvent(
                subject_type="usage_log",
                subject_id=str(entry_id),
                action=action,
                source_ip=source_ip,
                details=details,
            )
        )
