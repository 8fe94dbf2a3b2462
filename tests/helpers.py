"""
Helper utilities for tests.
"""

import asyncio

from authsync.remote.memory import MemoryRemoteStore
from authsync.storage.memory import MemoryKeyValueStore

START_MS = 1_700_000_000_000
HOUR_MS = 60 * 60 * 1000
DAY_MS = 24 * HOUR_MS


class FakeClock:
    """Manually advanced clock returning epoch milliseconds."""

    def __init__(self, now: int = START_MS):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> int:
        self.now += ms
        return self.now


class GatedRemoteStore(MemoryRemoteStore):
    """Memory remote store whose reads block until ``gate`` is set."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.gate = asyncio.Event()

    async def get_auth_document(self):
        await self.gate.wait()
        return await super().get_auth_document()


class HangingRemoteStore(MemoryRemoteStore):
    """Memory remote store whose reads never finish in time."""

    async def get_auth_document(self):
        await asyncio.sleep(60)
        return await super().get_auth_document()


class FlakyKeyValueStore(MemoryKeyValueStore):
    """Memory store that raises on reads while ``broken`` is set."""

    def __init__(self):
        super().__init__()
        self.broken = False

    def get(self, key):
        if self.broken:
            raise OSError("disk on fire")
        return super().get(key)


def hashed_user(username: str, updated_at: int = 100, created_at: int = 50, **extra) -> dict:
    data = {
        "username": username,
        "passwordHash": extra.pop("passwordHash", "ab" * 32),
        "salt": extra.pop("salt", "cd" * 16),
        "createdAt": created_at,
        "updatedAt": updated_at,
    }
    data.update(extra)
    return data


def legacy_user(username: str, password: str, updated_at: int = 100, created_at: int = 50) -> dict:
    return {
        "username": username,
        "password": password,
        "createdAt": created_at,
        "updatedAt": updated_at,
    }
