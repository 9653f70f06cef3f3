from __future__ import annotations

"""
Environment-driven settings for the advisory service.

Every knob the HTTP surface needs (admin credentials, rate limits, CORS origins
and the database URL) is parsed and validated here once so that `main.py` and
the persistence layer never read `os.environ` directly.
"""

import os
from dataclasses import dataclass
from typing import Optional, Tuple

DEFAULT_RATE_LIMIT_PER_MIN = 60
DEFAULT_RATE_LIMIT_BURST = 20
DEFAULT_CORS_ORIGINS = ("http://localhost:3000", "http://localhost:8501")


class ServiceSettingsError(RuntimeError):
    """Raised when service configuration cannot be constructed."""


@dataclass(frozen=True, slots=True)
class ServiceSettings:
    admin_password: Optional[str]
    rate_limit_per_min: int
    rate_limit_burst: int
    cors_origins: Tuple[str, ...]
    database_url: Optional[str] = None

    @property
    def admin_enabled(self) -> bool:
        return bool(self.admin_password)


def load_service_settings(
    *,
    admin_password_env: str = "ADVISOR_ADMIN_PASSWORD",
    rate_limit_env: str = "ADVISOR_RATE_LIMIT_PER_MIN",
    burst_env: str = "ADVISOR_RATE_LIMIT_BURST",
    cors_env: str = "ADVISOR_CORS_ORIGINS",
    database_url_env: str = "ADVISOR_DB_URL",
) -> ServiceSettings:
    """
    Construct ServiceSettings from the environment.

    Args:
        admin_password_env: Env var holding the admin dashboard password; admin
            endpoints are disabled when it is unset.
        rate_limit_env: Env var with the sustained requests-per-minute per client.
        burst_env: Env var with the burst allowance per client.
        cors_env: Comma-separated list of allowed origins.
        database_url_env: SQLAlchemy URL; the persistence layer falls back to a
            local SQLite file when empty.
    """

    rate_limit = _parse_positive_int(os.getenv(rate_limit_env), DEFAULT_RATE_LIMIT_PER_MIN, rate_limit_env)
    burst = _parse_positive_int(os.getenv(burst_env), DEFAULT_RATE_LIMIT_BURST, burst_env)

    return ServiceSettings(
        admin_password=(os.getenv(admin_password_env) or "").strip() or None,
        rate_limit_per_min=rate_limit,
        rate_limit_burst=burst,
        cors_origins=_parse_origins(os.getenv(cors_env)),
        database_url=(os.getenv(database_url_env) or "").strip() or None,
    )


def _parse_positive_int(raw_value: Optional[str], default: int, env_key: str) -> int:
    if raw_value is None or raw_value.strip() == "":
        return default

    try:
        value = int(raw_value)
    except ValueError as exc:
        raise ServiceSettingsError(f"{env_key} must be an integer (received '{raw_value}')") from exc
    if value <= 0:
        raise ServiceSettingsError(f"{env_key} must be positive (received '{raw_value}')")
    return value


def _parse_origins(raw_value: Optional[str]) -> Tuple[str, ...]:
    if raw_value is None or raw_value.strip() == "":
        return DEFAULT_CORS_ORIGINS
    return tuple(origin.strip() for origin in raw_value.split(",") if origin.strip())
