"""
Salted password digests and legacy-credential migration.

Passwords are stored as ``sha256(salt + "|" + password)`` in hex, with a
random hex salt per record. This is a single-pass digest, not a slow key
derivation function: brute-force resistance is weak. Stored hashes depend on
the exact construction, so it must not change without a migration path for
existing records.
"""

import hashlib
import hmac
import logging
import secrets
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from .clock import Clock, now_ms
from .types import HashedCredential, LegacyCredential, UserRecord

logger = logging.getLogger(__name__)

DEFAULT_SALT_BYTES = 16


class CryptoProvider(ABC):
    """Source of random bytes and one-way digests."""

    @abstractmethod
    async def random_bytes(self, length: int) -> bytes:
        """Return ``length`` cryptographically strong random bytes."""
        pass

    @abstractmethod
    async def sha256_hex(self, data: str) -> str:
        """Return the hex SHA-256 digest of the UTF-8 encoding of ``data``."""
        pass


class StdlibCryptoProvider(CryptoProvider):
    """CryptoProvider backed by :mod:`secrets` and :mod:`hashlib`."""

    async def random_bytes(self, length: int) -> bytes:
        return secrets.token_bytes(length)

    async def sha256_hex(self, data: str) -> str:
        return hashlib.sha256(data.encode("utf-8")).hexdigest()


@dataclass
class MigrationResult:
    """Outcome of :meth:`CredentialHasher.migrate_legacy`."""

    records: list[UserRecord] = field(default_factory=list)
    changed: bool = False


class CredentialHasher:
    """Generates salts, computes digests and upgrades legacy records."""

    def __init__(
        self,
        crypto: CryptoProvider | None = None,
        salt_bytes: int = DEFAULT_SALT_BYTES,
        clock: Clock = now_ms,
    ):
        """
        Args:
            crypto: Random/hash provider, the stdlib one when omitted
            salt_bytes: Salt length in bytes (hex length is twice this)
            clock: Returns the current time in epoch milliseconds
        """
        if salt_bytes < 1:
            raise ValueError("Salt length must be positive")
        self.crypto = crypto or StdlibCryptoProvider()
        self.salt_bytes = salt_bytes
        self.clock = clock

    async def random_salt(self, length: int | None = None) -> str:
        data = await self.crypto.random_bytes(length or self.salt_bytes)
        return data.hex()

    async def hash_password(self, password: str, salt: str) -> str:
        return await self.crypto.sha256_hex(f"{salt}|{password}")

    async def verify(self, record: UserRecord, password: str) -> bool:
        """Check ``password`` against either credential variant."""
        match record.credential:
            case LegacyCredential(password=stored):
                return hmac.compare_digest(stored.encode("utf-8"), password.encode("utf-8"))
            case HashedCredential(password_hash=password_hash, salt=salt):
                candidate = await self.hash_password(password, salt)
                return hmac.compare_digest(candidate.encode("utf-8"), password_hash.encode("utf-8"))
        return False

    async def hashed_record(
        self,
        base: UserRecord | str,
        password: str,
        now: int | None = None,
    ) -> UserRecord:
        """Build a hashed record for ``password`` under a fresh salt.

        ``base`` is either an existing record, whose username and creation time
        are kept, or a bare username for a brand new record.
        """
        now = self.clock() if now is None else now
        salt = await self.random_salt()
        password_hash = await self.hash_password(password, salt)
        if isinstance(base, UserRecord):
            username, created_at = base.username, base.created_at or now
        else:
            username, created_at = base, now
        return UserRecord(
            username=username,
            credential=HashedCredential(password_hash=password_hash, salt=salt),
            created_at=created_at,
            updated_at=now,
        )

    async def migrate_legacy(self, records: list[UserRecord]) -> MigrationResult:
        """Replace every legacy record with a hashed one.

        Already hashed records are returned untouched, so running this on its
        own output reports ``changed=False``.
        """
        now = self.clock()
        migrated: list[UserRecord] = []
        changed = False
        for record in records:
            if isinstance(record.credential, LegacyCredential):
                migrated.append(
                    await self.hashed_record(record, record.credential.password, now)
                )
                changed = True
            else:
                migrated.append(record)

        if changed:
            logger.info(
                f"Migrated {sum(1 for r in records if r.is_legacy)} legacy credential(s) to salted hashes"
            )
        return MigrationResult(records=migrated, changed=changed)
