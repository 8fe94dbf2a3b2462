"""
HTTP-backed remote document store.

The auth document lives at a single URL: ``GET`` returns it as JSON (``404``
when it does not exist yet) and ``PUT`` replaces it.
"""

import logging
from typing import Any

import httpx

from ..exceptions import RemoteStoreError
from .base import RemoteDocumentStore

logger = logging.getLogger(__name__)


class HttpRemoteStore(RemoteDocumentStore):
    """Remote document store speaking JSON over HTTP via :mod:`httpx`."""

    def __init__(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        timeout: float | None = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Args:
            url: Absolute URL of the auth document
            headers: Extra request headers, e.g. an ``Authorization`` header
            timeout: Per-request timeout in seconds, None to wait forever
            transport: Optional custom transport (used by tests)
        """
        if not url:
            raise ValueError("Remote document URL cannot be empty")
        self.url = url
        self.headers = dict(headers or {})
        self.timeout = timeout
        self.transport = transport
        self._client: httpx.AsyncClient | None = None

    async def init(self) -> None:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                headers=self.headers,
                timeout=self.timeout,
                transport=self.transport,
            )

    async def ready(self) -> bool:
        return self._client is not None and not self._client.is_closed

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _require_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            raise RemoteStoreError("HTTP remote store used before init()")
        return self._client

    async def get_auth_document(self) -> dict[str, Any] | None:
        client = self._require_client()
        try:
            response = await client.get(self.url)
        except httpx.HTTPError as e:
            raise RemoteStoreError(f"GET {self.url} failed: {e}") from e

        if response.status_code == 404:
            return None
        if response.is_error:
            raise RemoteStoreError(
                f"GET {self.url} returned HTTP {response.status_code}",
                details={"status_code": response.status_code},
            )
        try:
            document = response.json()
        except ValueError as e:
            raise RemoteStoreError(f"GET {self.url} returned invalid JSON") from e
        if document is not None and not isinstance(document, dict):
            raise RemoteStoreError(f"GET {self.url} returned a non-object document")
        return document

    async def set_auth_document(self, document: dict[str, Any]) -> bool:
        client = self._require_client()
        try:
            response = await client.put(self.url, json=document)
        except httpx.HTTPError as e:
            raise RemoteStoreError(f"PUT {self.url} failed: {e}") from e

        if response.is_error:
            logger.warning(f"PUT {self.url} rejected with HTTP {response.status_code}")
            return False
        return True
