"""
Privacy helpers applied before anything user-provided reaches a log line.

Financial stories, names and raw profiles are personal data; logs only ever see
their hashes or masked forms.
"""

from __future__ import annotations

import dataclasses
import hashlib
import json
from typing import Any

HASH_PREFIX_LENGTH = 12


def hash_payload(value: Any) -> str:
    """
    Return a stable SHA-256 hash for the provided payload without leaking contents.

    Strings are encoded as UTF-8 and bytes are used as-is. Dataclass instances
    are converted with `dataclasses.asdict` and everything else is serialized as
    sorted-key JSON, so equal profiles always hash to the same digest.
    """

    if value is None:
        normalized = b"null"
    elif isinstance(value, bytes):
        normalized = value
    elif isinstance(value, str):
        normalized = value.encode("utf-8")
    else:
        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            value = dataclasses.asdict(value)
        normalized = json.dumps(value, sort_keys=True, default=str).encode("utf-8")

    return hashlib.sha256(normalized).hexdigest()


def short_hash(value: Any) -> str:
    """Truncated `hash_payload` for correlating log lines by eye."""

    return hash_payload(value)[:HASH_PREFIX_LENGTH]


def mask_name(name: str | None) -> str:
    """
    Keep the first letter of each word of a personal name.

    "Budi Santoso" becomes "B*** S******"; blank names become an empty string.
    """

    if not name or not name.strip():
        return ""
    return " ".join(word[0] + "*" * (len(word) - 1) for word in name.split())
