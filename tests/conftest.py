"""
Pytest configuration and shared fixtures for authsync tests.
"""

import pytest

from authsync.bootstrap import build_facade
from authsync.config import AuthSyncConfig
from authsync.hashing import CredentialHasher
from authsync.remote.memory import MemoryRemoteStore
from authsync.sessions import SessionManager
from authsync.storage.memory import MemoryKeyValueStore
from authsync.store import LocalCredentialStore
from authsync.sync import SyncOrchestrator
from tests.helpers import FakeClock


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def kv():
    return MemoryKeyValueStore()


@pytest.fixture
def remote():
    return MemoryRemoteStore()


@pytest.fixture
def store(kv, clock):
    return LocalCredentialStore(kv, clock=clock)


@pytest.fixture
def hasher(clock):
    return CredentialHasher(clock=clock)


@pytest.fixture
def orchestrator(store, hasher, remote, clock):
    return SyncOrchestrator(store, hasher, remote=remote, remote_timeout=1.0, clock=clock)


@pytest.fixture
def sessions(kv, clock):
    return SessionManager(kv, clock=clock)


@pytest.fixture
def config():
    return AuthSyncConfig(storage={"backend": "memory"}, remote={"backend": "memory"})


@pytest.fixture
def facade(config, kv, remote, clock):
    return build_facade(config, kv=kv, remote=remote, clock=clock)
