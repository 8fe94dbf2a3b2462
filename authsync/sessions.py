"""Single-slot login sessions kept in the local key-value store."""

import json
import logging
from datetime import timedelta

from .clock import Clock, now_ms
from .sanitizer import coerce_timestamp
from .storage.base import KeyValueStore
from .store import StorageKeys, dump_json
from .types import Session

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL = timedelta(hours=12)
REMEMBER_SESSION_TTL = timedelta(days=30)


def _to_ms(duration: timedelta) -> int:
    return int(duration.total_seconds() * 1000)


class SessionManager:
    """Issues, reads and revokes the one session this device holds.

    Sessions are never refreshed in place; a new login replaces the slot with
    a freshly dated session. Expiry is checked passively on read.
    """

    def __init__(
        self,
        kv: KeyValueStore,
        keys: StorageKeys | None = None,
        default_ttl: timedelta = DEFAULT_SESSION_TTL,
        remember_ttl: timedelta = REMEMBER_SESSION_TTL,
        clock: Clock = now_ms,
    ):
        if default_ttl <= timedelta(0) or remember_ttl <= timedelta(0):
            raise ValueError("Session TTLs must be positive")
        self.kv = kv
        self.keys = keys or StorageKeys()
        self.default_ttl = default_ttl
        self.remember_ttl = remember_ttl
        self.clock = clock

    def ttl_for(self, remember: bool) -> timedelta:
        return self.remember_ttl if remember else self.default_ttl

    def issue(self, username: str, remember: bool = False) -> Session:
        now = self.clock()
        session = Session(
            username=username,
            created_at=now,
            expires_at=now + _to_ms(self.ttl_for(remember)),
        )
        self.kv.set(self.keys.session, dump_json(session.to_dict()))
        return session

    def current(self) -> Session | None:
        """Return the stored session if it is well-formed and unexpired.

        Anything else clears the slot as a side effect and reports ``None``.
        """
        raw = self.kv.get(self.keys.session)
        if raw is None:
            return None

        session = self._parse(raw)
        if session is None:
            logger.debug("Discarding malformed session")
            self.kv.remove(self.keys.session)
            return None
        if session.is_expired(self.clock()):
            logger.debug(f"Session for {session.username!r} expired")
            self.kv.remove(self.keys.session)
            return None
        return session

    def revoke(self) -> None:
        self.kv.remove(self.keys.session)

    @staticmethod
    def _parse(raw: str) -> Session | None:
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            return None
        if not isinstance(data, dict):
            return None

        username = data.get("username")
        expires_at = coerce_timestamp(data.get("expiresAt"))
        if not isinstance(username, str) or not username or not expires_at:
            return None
        return Session(
            username=username,
            created_at=coerce_timestamp(data.get("createdAt")),
            expires_at=expires_at,
        )
