"""Outbound HTTP used by the keep-alive job."""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Optional

import httpx

from ..errors import RequestTimeoutError, TransportError

logger = logging.getLogger("catalog_api.clients.http_client")


@dataclass
class HttpResponse:
    status_code: int
    headers: Dict[str, str] = field(default_factory=dict)
    text: str = ""


class HttpClient(ABC):
    @abstractmethod
    async def request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        timeout_ms: int = 30000,
    ) -> HttpResponse:
        """Issue one request and return the fully read response.

        Raises RequestTimeoutError when no complete response arrives within
        ``timeout_ms`` and TransportError for any other network failure.
        HTTP error statuses are returned, not raised.
        """

    async def aclose(self):
        pass


class HttpxClient(HttpClient):
    """HttpClient backed by a shared ``httpx.AsyncClient``.

    ``transport`` is passed straight to httpx so tests can plug in an
    ``httpx.MockTransport``.
    """

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._client = httpx.AsyncClient(transport=transport, follow_redirects=True)

    async def request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        timeout_ms: int = 30000,
    ) -> HttpResponse:
        timeout_s = timeout_ms / 1000
        try:
            # httpx timeouts are per phase; wait_for bounds the whole exchange.
            # Cancellation closes the in-flight response and frees the connection.
            response = await asyncio.wait_for(
                self._client.request(method, url, headers=headers, timeout=timeout_s),
                timeout=timeout_s,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            raise RequestTimeoutError(url, timeout_ms) from exc
        except httpx.TransportError as exc:
            raise TransportError(f"{type(exc).__name__}: {str(exc) or 'connection failed'}") from exc

        return HttpResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            text=response.text,
        )

    async def aclose(self):
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *_):
        await self.aclose()
