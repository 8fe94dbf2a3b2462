"""Core data types for the credential store."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union


def normalize_username(username: Any) -> str:
    """Return the lookup key for a username: trimmed and lowercased."""
    return str(username or "").strip().lower()


@dataclass(frozen=True)
class LegacyCredential:
    """Plaintext password awaiting migration to a salted hash."""

    password: str

    def __repr__(self) -> str:
        return "LegacyCredential(password=***)"


@dataclass(frozen=True)
class HashedCredential:
    """Salted one-way digest of a password."""

    password_hash: str
    salt: str


Credential = Union[LegacyCredential, HashedCredential]


@dataclass(frozen=True)
class UserRecord:
    """A stored user: display username plus one credential variant.

    Timestamps are epoch milliseconds. ``created_at`` is set once;
    ``updated_at`` moves on every credential mutation and drives
    last-write-wins merging.
    """

    username: str
    credential: Credential
    created_at: int = 0
    updated_at: int = 0

    @property
    def normalized_username(self) -> str:
        return normalize_username(self.username)

    @property
    def is_legacy(self) -> bool:
        return isinstance(self.credential, LegacyCredential)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the wire form shared by local storage and the remote document."""
        data: dict[str, Any] = {"username": self.username}
        match self.credential:
            case LegacyCredential(password=password):
                data["password"] = password
            case HashedCredential(password_hash=password_hash, salt=salt):
                data["passwordHash"] = password_hash
                data["salt"] = salt
        data["createdAt"] = self.created_at
        data["updatedAt"] = self.updated_at
        return data


@dataclass
class CredentialStoreSnapshot:
    """The full record set plus the version timestamp of the whole set."""

    users: list[UserRecord] = field(default_factory=list)
    updated_at: int = 0

    def to_document(self) -> dict[str, Any]:
        return {
            "users": [user.to_dict() for user in self.users],
            "updatedAt": self.updated_at,
        }


@dataclass(frozen=True)
class Session:
    """The single login session held by this device."""

    username: str
    created_at: int
    expires_at: int

    def is_expired(self, now: int) -> bool:
        """A session is still valid at exactly ``expires_at``."""
        return now > self.expires_at

    def to_dict(self) -> dict[str, Any]:
        return {
            "username": self.username,
            "createdAt": self.created_at,
            "expiresAt": self.expires_at,
        }


@dataclass
class AuthResult:
    """Uniform outcome of a facade operation.

    Expected failures (validation, credential mismatch) are reported here
    instead of being raised.
    """

    ok: bool
    error: str | None = None
    username: str | None = None
    session: Session | None = None

    @classmethod
    def success(cls, username: str | None = None, session: Session | None = None) -> AuthResult:
        return cls(ok=True, username=username, session=session)

    @classmethod
    def failure(cls, error: str) -> AuthResult:
        return cls(ok=False, error=error)

    def to_dict(self) -> dict[str, Any]:
        if not self.ok:
            return {"ok": False, "error": self.error}
        data: dict[str, Any] = {"ok": True}
        if self.username is not None:
            data["username"] = self.username
        if self.session is not None:
            data["session"] = self.session.to_dict()
        return data
