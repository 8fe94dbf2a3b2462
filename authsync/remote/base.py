"""Remote document store interface."""

from abc import ABC, abstractmethod
from typing import Any

AUTH_DOCUMENT_SCHEMA = 1


class RemoteDocumentStore(ABC):
    """Asynchronous access to the single auth document of an application.

    Any method may raise or hang; the sync orchestrator treats both, as well
    as ``ready()`` returning ``False``, as "remote unavailable".
    """

    @abstractmethod
    async def init(self) -> None:
        """Prepare the connection. Must be safe to call repeatedly."""
        pass

    @abstractmethod
    async def ready(self) -> bool:
        """Return whether the store can currently serve requests."""
        pass

    @abstractmethod
    async def get_auth_document(self) -> dict[str, Any] | None:
        """Fetch ``{"users": [...], "updatedAt": int}`` or ``None`` if there is none yet."""
        pass

    @abstractmethod
    async def set_auth_document(self, document: dict[str, Any]) -> bool:
        """Replace the document with ``{"schema": 1, "updatedAt": int, "users": [...]}``.

        Returns:
            True if the write was accepted
        """
        pass
