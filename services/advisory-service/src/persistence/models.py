"""SQLAlchemy models for advisory session snapshots, usage logs and audit events."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import DateTime, Float, Integer, JSON, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


class AdvisorSession(Base):
    """Immutable snapshot of one generated report: the input profile, the report and its summary."""

    __tablename__ = "advisor_sessions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    user_name: Mapped[str] = mapped_column(String(200), default="", nullable=False)

    profile: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False)
    report: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False)
    summary: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False)

    # File name a client used when exporting the report, if any
    pdf_file_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )


class UsageLog(Base):
    """One completed analysis, recorded for the admin dashboard."""

    __tablename__ = "usage_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    monthly_income: Mapped[float] = mapped_column(Float, nullable=False)
    health_score: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    primary_focus: Mapped[str] = mapped_column(String(255), default="", nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )


class AuditEvent(Base):
    """Tracks writes and deletes against sessions and usage logs."""

    __tablename__ = "audit_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    subject_type: Mapped[str] = mapped_column(String(32), nullable=False)
    subject_id: Mapped[str] = mapped_column(String(36), nullable=False)
    action: Mapped[str] = mapped_column(String(64), nullable=False)
    source_ip: Mapped[Optional[str]] = mapped_column(String(45), nullable=True)
    details: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
