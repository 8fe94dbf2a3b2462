"""
Public authentication API used by the presentation layer.

Every mutating operation returns an :class:`~authsync.types.AuthResult`.
Validation problems and wrong credentials come back as ``ok=False`` with a
human-readable message; only local storage failures raise.

Unknown usernames and wrong passwords produce the same message so that a
caller cannot probe which accounts exist.
"""

import logging

from .exceptions import AuthenticationError, AuthValidationError, InvalidCredentialsError
from .hashing import CredentialHasher
from .sessions import SessionManager
from .store import LocalCredentialStore
from .sync import SyncOrchestrator, SyncReport
from .types import AuthResult, Session, UserRecord, normalize_username

logger = logging.getLogger(__name__)

DEFAULT_MIN_PASSWORD_LENGTH = 4
DEFAULT_MAX_USERNAME_LENGTH = 32

MSG_ALREADY_SET_UP = "Login has already been set up."
MSG_MISSING_CREDENTIALS = "Please enter a username and password."
MSG_PASSWORD_TOO_SHORT = "Password is too short (at least {min_length} characters)."
MSG_PASSWORD_MISMATCH = "Password confirmation does not match."
MSG_USERNAME_TOO_LONG = "Username is too long."
MSG_INVALID_CREDENTIALS = "Invalid username or password."
MSG_MISSING_FIELDS = "Please fill in all fields."
MSG_NEW_PASSWORD_TOO_SHORT = "New password is too short (at least {min_length} characters)."

# Hashed in place of a real record when the username is unknown, so both
# failure paths do the same work.
_DUMMY_SALT = "0" * 32


def _text(value) -> str:
    return str(value) if value else ""


class AuthFacade:
    """Login, first-user setup, password change and logout over a synced store."""

    def __init__(
        self,
        store: LocalCredentialStore,
        hasher: CredentialHasher,
        orchestrator: SyncOrchestrator,
        sessions: SessionManager,
        min_password_length: int = DEFAULT_MIN_PASSWORD_LENGTH,
        max_username_length: int = DEFAULT_MAX_USERNAME_LENGTH,
    ):
        self.store = store
        self.hasher = hasher
        self.orchestrator = orchestrator
        self.sessions = sessions
        self.min_password_length = min_password_length
        self.max_username_length = max_username_length

    # Readiness and synchronization

    async def ready(self) -> SyncReport:
        return await self.orchestrator.ready()

    async def sync_users_now(self) -> SyncReport:
        return await self.orchestrator.sync_now()

    # Queries

    def has_users(self) -> bool:
        return self.store.has_users()

    def get_users(self) -> list[UserRecord]:
        return self.store.get_users()

    def get_session(self) -> Session | None:
        return self.sessions.current()

    def is_logged_in(self) -> bool:
        return self.get_session() is not None

    # Mutations

    async def create_first_user(
        self, username: str, password: str, confirm_password: str
    ) -> AuthResult:
        """Bootstrap the very first account; fails once any user exists."""
        await self.ready()
        name = _text(username).strip()
        password = _text(password)
        confirm_password = _text(confirm_password)

        try:
            self._check_first_user(name, password, confirm_password)
        except AuthValidationError as e:
            return AuthResult.failure(e.message)

        record = await self.hasher.hashed_record(name, password)
        self.store.set_users([record], touch=True)
        logger.info(f"Created first user {name!r}")
        await self.sync_users_now()
        return AuthResult.success(username=name)

    async def login(self, username: str, password: str, remember: bool = False) -> AuthResult:
        """Verify credentials and start a session.

        A matching legacy record is migrated to a salted hash before the session
        is issued. The result carries the stored display form of the username.
        """
        await self.ready()
        password = _text(password)
        try:
            if not normalize_username(username) or not password:
                raise AuthValidationError(MSG_MISSING_CREDENTIALS)
            record = await self._verify(username, password)
        except (AuthValidationError, AuthenticationError) as e:
            return AuthResult.failure(e.message)

        if record.is_legacy:
            self.store.replace_user(await self.hasher.hashed_record(record, password))
            logger.info(f"Migrated legacy credential for {record.username!r} on login")
            await self.sync_users_now()

        session = self.sessions.issue(record.username, remember=bool(remember))
        return AuthResult.success(username=record.username, session=session)

    async def change_password(
        self, username: str, old_password: str, new_password: str
    ) -> AuthResult:
        await self.ready()
        old_password = _text(old_password)
        new_password = _text(new_password)
        try:
            if not normalize_username(username) or not old_password or not new_password:
                raise AuthValidationError(MSG_MISSING_FIELDS)
            if len(new_password) < self.min_password_length:
                raise AuthValidationError(
                    MSG_NEW_PASSWORD_TOO_SHORT.format(min_length=self.min_password_length)
                )
            record = await self._verify(username, old_password)
        except (AuthValidationError, AuthenticationError) as e:
            return AuthResult.failure(e.message)

        self.store.replace_user(await self.hasher.hashed_record(record, new_password))
        logger.info(f"Password changed for {record.username!r}")
        await self.sync_users_now()
        return AuthResult.success(username=record.username)

    def logout(self) -> AuthResult:
        self.sessions.revoke()
        return AuthResult.success()

    # Helpers

    def _check_first_user(self, name: str, password: str, confirm_password: str) -> None:
        if self.store.has_users():
            raise AuthValidationError(MSG_ALREADY_SET_UP)
        if not name or not password:
            raise AuthValidationError(MSG_MISSING_CREDENTIALS)
        if len(password) < self.min_password_length:
            raise AuthValidationError(
                MSG_PASSWORD_TOO_SHORT.format(min_length=self.min_password_length)
            )
        if password != confirm_password:
            raise AuthValidationError(MSG_PASSWORD_MISMATCH)
        if len(name) > self.max_username_length:
            raise AuthValidationError(MSG_USERNAME_TOO_LONG)

    async def _verify(self, username: str, password: str) -> UserRecord:
        record = self.store.find_user(username)
        if record is None:
            await self.hasher.hash_password(password, _DUMMY_SALT)
            raise InvalidCredentialsError(MSG_INVALID_CREDENTIALS)
        if not await self.hasher.verify(record, password):
            raise InvalidCredentialsError(MSG_INVALID_CREDENTIALS)
        return record
