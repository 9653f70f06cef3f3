"""
Shared utilities for the advisory services.

This package contains code used by more than one entry point:
- service_settings: Environment-driven configuration for the HTTP surface
- observability: Telemetry, logging, and privacy utilities
"""

from .service_settings import (
    DEFAULT_RATE_LIMIT_BURST,
    DEFAULT_RATE_LIMIT_PER_MIN,
    ServiceSettings,
    ServiceSettingsError,
    load_service_settings,
)

__all__ = [
    "DEFAULT_RATE_LIMIT_BURST",
    "DEFAULT_RATE_LIMIT_PER_MIN",
    "ServiceSettings",
    "ServiceSettingsError",
    "load_service_settings",
]
