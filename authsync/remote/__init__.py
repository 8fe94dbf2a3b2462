"""Remote document stores."""

from .base import AUTH_DOCUMENT_SCHEMA, RemoteDocumentStore
from .http import HttpRemoteStore
from .memory import MemoryRemoteStore

__all__ = [
    "AUTH_DOCUMENT_SCHEMA",
    "RemoteDocumentStore",
    "HttpRemoteStore",
    "MemoryRemoteStore",
]
