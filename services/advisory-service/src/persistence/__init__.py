"""Persistence primitives for the advisory service."""

from persistence.database import (
    DEFAULT_DB_FILENAME,
    DEFAULT_DB_PATH,
    SessionLocal,
    build_engine,
    get_database_url,
    get_engine,
    get_session,
    init_db,
)
from persistence.models import AdvisorSession, AuditEvent, Base, UsageLog

__all__ = [
    "AdvisorSession",
    "AuditEvent",
    "Base",
    "UsageLog",
    "DEFAULT_DB_FILENAME",
    "DEFAULT_DB_PATH",
    "SessionLocal",
    "build_engine",
    "get_database_url",
    "get_engine",
    "get_session",
    "init_db",
]
