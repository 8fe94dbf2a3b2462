"""
Synchronization of the local record set with the remote document store.

A sync pass migrates legacy credentials, pulls the remote document, merges
it with the local records under last-write-wins, stores the result locally
and pushes it back when it differs from what the remote holds. The remote
side is strictly best-effort: when it is missing, unreachable, slow or
failing, the pass degrades to local-only and still succeeds. Only failures
of the local store propagate.

Concurrent callers share one in-flight pass through :class:`CoalescedCall`.
"""

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

from .clock import Clock, now_ms
from .hashing import CredentialHasher
from .merge import merge_users
from .remote.base import AUTH_DOCUMENT_SCHEMA, RemoteDocumentStore
from .sanitizer import coerce_timestamp, sanitize_users
from .store import LocalCredentialStore
from .types import CredentialStoreSnapshot

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_REMOTE_TIMEOUT = 10.0


class CoalescedCall(Generic[T]):
    """Shares one pending task among every caller that arrives while it runs.

    A finished task is never joined, even before its done-callback has
    cleared the handle, so the next call after completion starts fresh work
    instead of returning a stale result. A cancelled caller does not cancel
    the shared task.
    """

    def __init__(self, factory: Callable[[], Awaitable[T]]):
        self._factory = factory
        self._task: asyncio.Future[T] | None = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    async def __call__(self) -> T:
        task = self._task
        if task is None or task.done():
            task = asyncio.ensure_future(self._factory())
            self._task = task
            task.add_done_callback(self._clear)
        return await asyncio.shield(task)

    def _clear(self, task: asyncio.Future[T]) -> None:
        if self._task is task:
            self._task = None
        if not task.cancelled():
            # Mark the exception retrieved; every waiter re-raises it anyway.
            task.exception()


class PullStatus(Enum):
    """How a remote pull ended."""

    OK = "ok"
    EMPTY = "empty"
    UNAVAILABLE = "unavailable"
    ERROR = "error"


@dataclass
class PullResult:
    """Best-effort result of reading the remote document.

    Anything but ``OK`` carries no users and version ``0``.
    """

    status: PullStatus
    users: list[Any] = field(default_factory=list)
    updated_at: int = 0
    error: str | None = None


@dataclass
class SyncReport:
    """Outcome of one sync pass. ``ok`` is always true when a report exists."""

    ok: bool = True
    version: int = 0
    user_count: int = 0
    pull_status: PullStatus = PullStatus.UNAVAILABLE
    pushed: bool = False
    migrated: bool = False


def canonical_json(document: dict[str, Any]) -> str:
    return json.dumps(document, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


class SyncOrchestrator:
    """Drives migrate → pull → merge → push and gates readiness on the first pass."""

    def __init__(
        self,
        store: LocalCredentialStore,
        hasher: CredentialHasher,
        remote: RemoteDocumentStore | None = None,
        remote_timeout: float | None = DEFAULT_REMOTE_TIMEOUT,
        clock: Clock = now_ms,
    ):
        """
        Args:
            store: Local record store
            hasher: Used to migrate legacy credentials
            remote: Remote document store, or None to run local-only
            remote_timeout: Seconds allowed per remote call; None waits forever
            clock: Returns the current time in epoch milliseconds
        """
        self.store = store
        self.hasher = hasher
        self.remote = remote
        self.remote_timeout = remote_timeout
        self.clock = clock

        self._sync_call: CoalescedCall[SyncReport] = CoalescedCall(self._run_sync)
        self._ready_call: CoalescedCall[SyncReport] = CoalescedCall(self._run_ready)
        self._ready_report: SyncReport | None = None

    @property
    def is_ready(self) -> bool:
        return self._ready_report is not None

    async def ready(self) -> SyncReport:
        """Wait until at least one sync pass has completed.

        Once a pass has succeeded this returns immediately; a failed first
        pass is not remembered, so the next call tries again.
        """
        if self._ready_report is not None:
            return self._ready_report
        return await self._ready_call()

    async def sync_now(self) -> SyncReport:
        """Run a sync pass, or join the one already in flight."""
        return await self._sync_call()

    async def _run_ready(self) -> SyncReport:
        report = await self.sync_now()
        self._ready_report = report
        return report

    async def _run_sync(self) -> SyncReport:
        await self._init_remote()

        migration = await self.hasher.migrate_legacy(self.store.get_users())
        if migration.changed:
            self.store.set_users(migration.records, touch=True)

        pull = await self._pull()
        remote_users = sanitize_users(pull.users)
        remote_version = pull.updated_at

        local_users = self.store.get_users()
        local_version = self.store.get_version()

        merged = merge_users(local_users, remote_users)
        version = max(remote_version, local_version, self.clock())

        self.store.set_users(merged, touch=False)
        self.store.set_version(version)

        merged_doc = CredentialStoreSnapshot(users=merged, updated_at=version).to_document()
        remote_doc = CredentialStoreSnapshot(
            users=remote_users, updated_at=remote_version
        ).to_document()

        pushed = False
        if canonical_json(merged_doc) != canonical_json(remote_doc):
            pushed = await self._push(
                {
                    "schema": AUTH_DOCUMENT_SCHEMA,
                    "updatedAt": version,
                    "users": merged_doc["users"],
                }
            )

        logger.debug(
            f"Sync finished: {len(merged)} user(s), version {version}, "
            f"remote {pull.status.value}, pushed={pushed}"
        )
        return SyncReport(
            ok=True,
            version=version,
            user_count=len(merged),
            pull_status=pull.status,
            pushed=pushed,
            migrated=migration.changed,
        )

    async def _remote_call(self, awaitable: Awaitable[T]) -> T:
        if self.remote_timeout is None:
            return await awaitable
        return await asyncio.wait_for(awaitable, self.remote_timeout)

    async def _init_remote(self) -> None:
        if self.remote is None:
            return
        try:
            await self._remote_call(self.remote.init())
        except Exception as e:
            logger.debug(f"Remote store init failed: {e!r}")

    async def _remote_ready(self) -> bool:
        await self._remote_call(self.remote.init())
        return bool(await self._remote_call(self.remote.ready()))

    async def _pull(self) -> PullResult:
        if self.remote is None:
            return PullResult(PullStatus.UNAVAILABLE)
        try:
            if not await self._remote_ready():
                logger.debug("Remote store not ready, syncing locally only")
                return PullResult(PullStatus.UNAVAILABLE)
            document = await self._remote_call(self.remote.get_auth_document())
        except Exception as e:
            logger.warning(f"Remote pull failed, syncing locally only: {e!r}")
            return PullResult(PullStatus.ERROR, error=str(e) or type(e).__name__)

        if not isinstance(document, dict):
            return PullResult(PullStatus.EMPTY)
        users = document.get("users") or []
        return PullResult(
            PullStatus.OK,
            users=users if isinstance(users, list) else [],
            updated_at=coerce_timestamp(document.get("updatedAt")),
        )

    async def _push(self, document: dict[str, Any]) -> bool:
        if self.remote is None:
            return False
        try:
            if not await self._remote_ready():
                return False
            accepted = await self._remote_call(self.remote.set_auth_document(document))
        except Exception as e:
            logger.warning(f"Remote push failed: {e!r}")
            return False
        return bool(accepted)
