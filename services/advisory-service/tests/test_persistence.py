from __future__ import annotations

from pathlib import Path

import pytest
from sqlalchemy.orm import sessionmaker

from persistence.database import build_engine, init_db
from persistence.models import AuditEvent
from persistence.repository import AdvisorSessionRepository, UsageLogRepository, income_range_label


@pytest.fixture()
def session_factory(tmp_path: Path):
    engine = build_engine(f"sqlite:///{tmp_path / 'advisor.db'}")
    init_db(engine)
    yield sessionmaker(bind=engine, expire_on_commit=False, future=True)
    engine.dispose()


def test_advisor_session_survives_new_engine(tmp_path: Path) -> None:
    """Report snapshots persist even after a new engine/session is created."""
    url = f"sqlite:///{tmp_path / 'nested' / 'advisor.db'}"

    engine_one = build_engine(url)
    init_db(engine_one)
    with sessionmaker(bind=engine_one, expire_on_commit=False, future=True)() as session:
        AdvisorSessionRepository(session).create_session(
            "session-1",
            user_name="Budi",
            profile={"income": {"monthly_salary": 10_000_000}},
            report={"diagnosis": {"overall_grade": "A"}},
            summary={"score": 100, "grade": "A"},
            pdf_file_name="laporan-budi.pdf",
        )
    engine_one.dispose()

    engine_two = build_engine(url)
    with sessionmaker(bind=engine_two, expire_on_commit=False, future=True)() as session:
        restored = AdvisorSessionRepository(session).get_session("session-1")

    assert restored is not None
    assert restored.profile == {"income": {"monthly_salary": 10_000_000}}
    assert restored.summary["grade"] == "A"
    assert restored.pdf_file_name == "laporan-budi.pdf"
    engine_two.dispose()


def test_session_audit_events(session_factory) -> None:
    with session_factory() as session:
        repo = AdvisorSessionRepository(session)
        repo.create_session(
            "audit-session",
            user_name="Sari",
            profile={},
            report={},
            summary={},
            source_ip="127.0.0.1",
            details={"grade": "C"},
        )
        assert repo.delete_session("audit-session", source_ip="127.0.0.1") is True
        assert repo.delete_session("audit-session") is False

        events = (
            session.query(AuditEvent)
            .filter(AuditEvent.subject_id == "audit-session")
            .order_by(AuditEvent.id)
            .all()
        )

    assert [event.action for event in events] == ["report_generated", "session_deleted"]
    assert events[0].subject_type == "advisor_session"
    assert events[0].details == {"grade": "C"}
    assert events[0].source_ip == "127.0.0.1"


@pytest.mark.parametrize(
    "income, label",
    [
        (0, "< 3 Juta"),
        (2_999_999, "< 3 Juta"),
        (3_000_000, "3-5 Juta"),
        (7_500_000, "5-8 Juta"),
        (8_000_000, "8-15 Juta"),
        (15_000_000, "15-30 Juta"),
        (30_000_000, "> 30 Juta"),
    ],
)
def test_income_range_label(income, label) -> None:
    assert income_range_label(income) == label


class TestUsageLog:
    def test_log_usage_strips_name_and_audits(self, session_factory) -> None:
        with session_factory() as session:
            entry = UsageLogRepository(session).log_usage(
                name="  Budi  ", monthly_income=12_000_000, health_score=80, primary_focus="Dana Darurat"
            )
            events = session.query(AuditEvent).filter(AuditEvent.subject_type == "usage_log").all()

        assert entry.id is not None
        assert entry.name == "Budi"
        assert [(event.subject_id, event.action) for event in events] == [(str(entry.id), "usage_logged")]
        assert events[0].details == {"income_range": "8-15 Juta"}

    def test_delete_entry(self, session_factory) -> None:
        with session_factory() as session:
            repo = UsageLogRepository(session)
            entry = repo.log_usage(name="Sari", monthly_income=4_000_000)

            assert repo.delete_entry(entry.id) is True
            assert repo.get_entry(entry.id) is None
            assert repo.delete_entry(entry.id) is False

    def test_stats(self, session_factory) -> None:
        incomes = [2_000_000, 4_000_000, 4_500_000, 20_000_000]
        with session_factory() as session:
            repo = UsageLogRepository(session)
            for index, income in enumerate(incomes):
                repo.log_usage(name=f"user-{index}", monthly_income=income)

            stats = repo.stats(recent_limit=3)

        assert stats.total_users == 4
        assert stats.average_income == pytest.approx(sum(incomes) / len(incomes))
        assert stats.income_distribution == [
            {"range": "< 3 Juta", "count": 1},
            {"range": "3-5 Juta", "count": 2},
            {"range": "15-30 Juta", "count": 1},
        ]
        assert sum(day["count"] for day in stats.users_per_day) == 4
        assert [entry.name for entry in stats.recent_entries] == ["user-3", "user-2", "user-1"]

    def test_stats_on_empty_table(self, session_factory) -> None:
        with session_factory() as session:
            stats = UsageLogRepository(session).stats()

        assert stats.total_users == 0
        assert stats.average_income == 0.0
        assert stats.income_distribution == []
        assert stats.users_per_day == []
        assert stats.recent_entries == []


def test_list_recent_sessions(session_factory) -> None:
    with session_factory() as session:
        repo = AdvisorSessionRepository(session)
        for index in range(3):
            repo.create_session(f"s-{index}", user_name=f"user-{index}", profile={}, report={}, summary={})

        recent = repo.list_recent(limit=2)

    assert len(recent) == 2
    assert {record.id for record in recent} <= {"s-0", "s-1", "s-2"}
