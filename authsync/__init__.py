"""
Local-first credential store with opportunistic remote synchronization.

The public entry point is :class:`AuthFacade`, usually obtained from
:func:`build_facade`.
"""

__version__ = "0.1.0"

from .bootstrap import AuthSyncBootstrap, build_facade
from .config import AuthSyncConfig, AuthSyncConfigLoader
from .exceptions import (
    AuthenticationError,
    AuthSyncError,
    AuthValidationError,
    ConfigurationError,
    InvalidCredentialsError,
    RemoteStoreError,
    StorageError,
)
from .facade import AuthFacade
from .hashing import CredentialHasher, CryptoProvider, MigrationResult, StdlibCryptoProvider
from .merge import merge_users
from .sanitizer import sanitize_users
from .sessions import SessionManager
from .store import LocalCredentialStore, StorageKeys
from .sync import CoalescedCall, PullResult, PullStatus, SyncOrchestrator, SyncReport
from .types import (
    AuthResult,
    CredentialStoreSnapshot,
    HashedCredential,
    LegacyCredential,
    Session,
    UserRecord,
    normalize_username,
)

__all__ = [
    "__version__",
    "AuthFacade",
    "AuthResult",
    "AuthSyncBootstrap",
    "AuthSyncConfig",
    "AuthSyncConfigLoader",
    "AuthSyncError",
    "AuthenticationError",
    "AuthValidationError",
    "CoalescedCall",
    "ConfigurationError",
    "CredentialHasher",
    "CredentialStoreSnapshot",
    "CryptoProvider",
    "HashedCredential",
    "InvalidCredentialsError",
    "LegacyCredential",
    "LocalCredentialStore",
    "MigrationResult",
    "PullResult",
    "PullStatus",
    "RemoteStoreError",
    "Session",
    "SessionManager",
    "StdlibCryptoProvider",
    "StorageError",
    "StorageKeys",
    "SyncOrchestrator",
    "SyncReport",
    "UserRecord",
    "build_facade",
    "merge_users",
    "normalize_username",
    "sanitize_users",
]
