"""
Shared observability helpers (telemetry, request context and privacy guards).

The advisory service imports from this package so that every log line carries
the same request and trace fields and never contains raw personal data.
"""

from .privacy import hash_payload, mask_name, short_hash
from .telemetry import (
    CORRELATION_ID_HEADER,
    RequestContextToken,
    bind_request_context,
    current_request_id,
    ensure_request_id,
    reset_request_context,
    setup_telemetry,
)

__all__ = [
    "hash_payload",
    "mask_name",
    "short_hash",
    "CORRELATION_ID_HEADER",
    "RequestContextToken",
    "bind_request_context",
    "current_request_id",
    "ensure_request_id",
    "reset_request_context",
    "setup_telemetry",
]
