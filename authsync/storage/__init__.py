"""Local key-value stores."""

from .base import KeyValueStore
from .file import FileKeyValueStore
from .memory import MemoryKeyValueStore

__all__ = [
    "KeyValueStore",
    "FileKeyValueStore",
    "MemoryKeyValueStore",
]
