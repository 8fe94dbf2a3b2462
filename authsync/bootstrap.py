"""Wiring of the credential store components from configuration."""

import logging

from bevy import Container, get_registry

from .clock import Clock, now_ms
from .config.schema import AuthSyncConfig, RemoteBackend, StorageBackend
from .exceptions import ConfigurationError
from .facade import AuthFacade
from .hashing import CredentialHasher, CryptoProvider
from .remote.base import RemoteDocumentStore
from .remote.http import HttpRemoteStore
from .remote.memory import MemoryRemoteStore
from .sessions import SessionManager
from .storage.base import KeyValueStore
from .storage.file import FileKeyValueStore
from .storage.memory import MemoryKeyValueStore
from .store import LocalCredentialStore, StorageKeys
from .sync import SyncOrchestrator

logger = logging.getLogger(__name__)


class AuthSyncBootstrap:
    """Builds the components and registers them in a bevy container."""

    def __init__(self, config: AuthSyncConfig, clock: Clock = now_ms):
        self.config = config
        self.clock = clock

    def create_kv_store(self) -> KeyValueStore:
        storage = self.config.storage
        if storage.backend == StorageBackend.MEMORY:
            return MemoryKeyValueStore()
        if storage.backend == StorageBackend.FILE:
            return FileKeyValueStore(storage.path)
        raise ConfigurationError(f"Unknown storage backend: {storage.backend}")

    def create_remote_store(self) -> RemoteDocumentStore | None:
        remote = self.config.remote
        if remote.backend == RemoteBackend.NONE:
            return None
        if remote.backend == RemoteBackend.MEMORY:
            return MemoryRemoteStore()
        if remote.backend == RemoteBackend.HTTP:
            return HttpRemoteStore(
                remote.url,
                headers=remote.headers,
                timeout=remote.timeout,
            )
        raise ConfigurationError(f"Unknown remote backend: {remote.backend}")

    def setup(
        self,
        container: Container,
        kv: KeyValueStore | None = None,
        remote: RemoteDocumentStore | None = None,
        crypto: CryptoProvider | None = None,
    ) -> AuthFacade:
        """Create every component, register it in ``container`` and return the facade.

        ``kv``, ``remote`` and ``crypto`` override what the configuration would
        build, which is how tests plug in fakes.
        """
        config = self.config
        kv = kv if kv is not None else self.create_kv_store()
        remote = remote if remote is not None else self.create_remote_store()
        keys = StorageKeys(config.namespace)

        store = LocalCredentialStore(kv, keys=keys, clock=self.clock)
        hasher = CredentialHasher(crypto, salt_bytes=config.salt_bytes, clock=self.clock)
        orchestrator = SyncOrchestrator(
            store,
            hasher,
            remote=remote,
            remote_timeout=config.remote.timeout,
            clock=self.clock,
        )
        sessions = SessionManager(
            kv,
            keys=keys,
            default_ttl=config.session.default_ttl,
            remember_ttl=config.session.remember_ttl,
            clock=self.clock,
        )
        facade = AuthFacade(
            store,
            hasher,
            orchestrator,
            sessions,
            min_password_length=config.min_password_length,
            max_username_length=config.max_username_length,
        )

        container.add(KeyValueStore, kv)
        if remote is not None:
            container.add(RemoteDocumentStore, remote)
        container.add(LocalCredentialStore, store)
        container.add(CredentialHasher, hasher)
        container.add(SyncOrchestrator, orchestrator)
        container.add(SessionManager, sessions)
        container.add(AuthFacade, facade)

        logger.debug(
            f"authsync ready: namespace={config.namespace!r}, "
            f"storage={config.storage.backend.value}, remote={config.remote.backend.value}"
        )
        return facade


def create_container() -> Container:
    return get_registry().create_container()


def build_facade(
    config: AuthSyncConfig | None = None,
    container: Container | None = None,
    *,
    kv: KeyValueStore | None = None,
    remote: RemoteDocumentStore | None = None,
    crypto: CryptoProvider | None = None,
    clock: Clock = now_ms,
) -> AuthFacade:
    """Build a ready-to-use facade, registering components in ``container``."""
    config = config or AuthSyncConfig()
    container = container if container is not None else create_container()
    return AuthSyncBootstrap(config, clock=clock).setup(
        container, kv=kv, remote=remote, crypto=crypto
    )
