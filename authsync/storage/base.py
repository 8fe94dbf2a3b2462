"""Local key-value store interface."""

from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """Durable, synchronous, process-local string storage.

    Implementations raise :class:`~authsync.exceptions.StorageError` (or let
    their own exceptions escape) when the backing medium fails; callers do not
    recover from that.
    """

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the value stored under ``key`` or ``None``."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete ``key``; a missing key is not an error."""
        pass
