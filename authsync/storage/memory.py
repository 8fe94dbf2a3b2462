"""Thread-safe in-memory key-value store."""

from threading import RLock

from .base import KeyValueStore


class MemoryKeyValueStore(KeyValueStore):
    """Dictionary-backed store, mostly for tests and throwaway sessions.

    Reads always observe the latest write from the same process.
    """

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})
        self._lock = RLock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f"Values must be strings, got {type(value).__name__}")
        with self._lock:
            self._data[key] = value

    def remove(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)
