"""Typed access to the user records kept in the local key-value store."""

import json
import logging
from dataclasses import dataclass

from .clock import Clock, now_ms
from .sanitizer import coerce_timestamp, sanitize_users
from .storage.base import KeyValueStore
from .types import CredentialStoreSnapshot, UserRecord, normalize_username

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "authsync"


@dataclass(frozen=True)
class StorageKeys:
    """Key layout inside the local store for one namespace."""

    namespace: str = DEFAULT_NAMESPACE

    @property
    def users(self) -> str:
        return f"{self.namespace}.users"

    @property
    def users_updated_at(self) -> str:
        return f"{self.namespace}.users.updatedAt"

    @property
    def session(self) -> str:
        return f"{self.namespace}.session"


def dump_json(value) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


class LocalCredentialStore:
    """Reads and writes the record set and its version timestamp.

    Records are sanitized on the way in and on the way out. A corrupt or
    missing users entry reads as an empty set; exceptions raised by the
    key-value store itself propagate.
    """

    def __init__(
        self,
        kv: KeyValueStore,
        keys: StorageKeys | None = None,
        clock: Clock = now_ms,
    ):
        self.kv = kv
        self.keys = keys or StorageKeys()
        self.clock = clock

    def get_users(self) -> list[UserRecord]:
        raw = self.kv.get(self.keys.users)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"Ignoring unparseable user list under {self.keys.users!r}")
            return []
        return sanitize_users(data)

    def set_users(self, users: list[UserRecord], *, touch: bool = True) -> None:
        """Persist ``users``; ``touch`` also bumps the store version to now."""
        payload = [user.to_dict() for user in sanitize_users(users)]
        self.kv.set(self.keys.users, dump_json(payload))
        if touch:
            self.set_version(self.clock())

    def get_version(self) -> int:
        return coerce_timestamp(self.kv.get(self.keys.users_updated_at))

    def set_version(self, timestamp: int) -> None:
        self.kv.set(self.keys.users_updated_at, str(int(timestamp) or self.clock()))

    def has_users(self) -> bool:
        return len(self.get_users()) > 0

    def find_user(self, username: str) -> UserRecord | None:
        """Case-insensitive lookup by normalized username."""
        key = normalize_username(username)
        if not key:
            return None
        for user in self.get_users():
            if user.normalized_username == key:
                return user
        return None

    def replace_user(self, record: UserRecord) -> None:
        """Swap the stored record with the same normalized username and bump the version."""
        users = self.get_users()
        for i, user in enumerate(users):
            if user.normalized_username == record.normalized_username:
                users[i] = record
                break
        else:
            users.append(record)
        self.set_users(users, touch=True)

    def snapshot(self) -> CredentialStoreSnapshot:
        return CredentialStoreSnapshot(users=self.get_users(), updated_at=self.get_version())
