"""Normalization and deduplication of untrusted user-record input.

Every record entering or leaving the store passes through
:func:`sanitize_users`, so the store never holds a record without a usable
username and a complete credential.
"""

import math
from collections.abc import Mapping
from typing import Any

from .types import HashedCredential, LegacyCredential, UserRecord, normalize_username


def coerce_timestamp(value: Any) -> int:
    """Coerce a loosely typed timestamp to epoch milliseconds, ``0`` when unusable."""
    if not value:
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number):
        return 0
    return int(number)


def _as_text(value: Any) -> str:
    return str(value) if value else ""


def _sanitize_one(candidate: Any) -> UserRecord | None:
    if isinstance(candidate, UserRecord):
        candidate = candidate.to_dict()
    if not isinstance(candidate, Mapping):
        return None

    username = _as_text(candidate.get("username")).strip()
    if not username or not normalize_username(username):
        return None

    created_at = coerce_timestamp(candidate.get("createdAt"))
    updated_at = coerce_timestamp(candidate.get("updatedAt"))

    # Legacy plaintext wins over hash fields when both are present
    password = candidate.get("password")
    if isinstance(password, str) and password:
        return UserRecord(username, LegacyCredential(password), created_at, updated_at)

    password_hash = _as_text(candidate.get("passwordHash"))
    salt = _as_text(candidate.get("salt"))
    if not password_hash or not salt:
        return None
    return UserRecord(username, HashedCredential(password_hash, salt), created_at, updated_at)


def sanitize_users(raw: Any) -> list[UserRecord]:
    """Turn an arbitrary candidate list into well-formed, unique records.

    Args:
        raw: Anything; only a list or tuple of mappings (or records) yields output

    Returns:
        Records in input order of first occurrence. Later duplicates of a
        normalized username are dropped silently.
    """
    if not isinstance(raw, (list, tuple)):
        return []

    out: list[UserRecord] = []
    seen: set[str] = set()
    for candidate in raw:
        # The duplicate check runs before credential validation, so a malformed
        # first occurrence still shadows later entries for the same name.
        key = _candidate_key(candidate)
        if key is None or key in seen:
            continue
        seen.add(key)
        record = _sanitize_one(candidate)
        if record is not None:
            out.append(record)
    return out


def _candidate_key(candidate: Any) -> str | None:
    if isinstance(candidate, UserRecord):
        return candidate.normalized_username or None
    if not isinstance(candidate, Mapping):
        return None
    username = _as_text(candidate.get("username")).strip()
    return normalize_username(username) or None
