"""Configuration models and loading."""

from .loader import DEFAULT_CONFIG_FILE, AuthSyncConfigLoader
from .schema import (
    AuthSyncConfig,
    RemoteBackend,
    RemoteConfig,
    SessionConfig,
    StorageBackend,
    StorageConfig,
)

__all__ = [
    "DEFAULT_CONFIG_FILE",
    "AuthSyncConfig",
    "AuthSyncConfigLoader",
    "RemoteBackend",
    "RemoteConfig",
    "SessionConfig",
    "StorageBackend",
    "StorageConfig",
]
