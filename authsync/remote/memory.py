"""In-process remote document store."""

import copy
from typing import Any

from ..exceptions import RemoteStoreError
from .base import RemoteDocumentStore


class MemoryRemoteStore(RemoteDocumentStore):
    """Remote store that keeps the document in memory.

    Several facades can share one instance to simulate devices syncing through
    the same backend. ``available`` switches the store off to exercise offline
    behaviour, and the counters record how often it was read and written.
    """

    def __init__(self, document: dict[str, Any] | None = None, available: bool = True):
        self.document = copy.deepcopy(document) if document is not None else None
        self.available = available
        self.initialized = False
        self.get_count = 0
        self.set_count = 0

    async def init(self) -> None:
        self.initialized = True

    async def ready(self) -> bool:
        return self.available and self.initialized

    async def get_auth_document(self) -> dict[str, Any] | None:
        if not self.available:
            raise RemoteStoreError("Remote store is offline")
        self.get_count += 1
        return copy.deepcopy(self.document)

    async def set_auth_document(self, document: dict[str, Any]) -> bool:
        if not self.available:
            raise RemoteStoreError("Remote store is offline")
        self.set_count += 1
        self.document = copy.deepcopy(document)
        return True
