"""
HTTP transport used by SquareClient.

The client only depends on the small Transport interface below, so tests and
callers can swap in any HTTP stack. HttpxTransport is the default.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

import httpx

from .exceptions import TransportError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransportResponse:
    """Raw result of one HTTP exchange"""
    status_code: int
    body: bytes = b""
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


class Transport:
    """Interface for sending a single authenticated HTTP request"""

    async def send(self, method: str, url: str, *,
                   headers: Mapping[str, str],
                   json: Optional[Dict[str, Any]] = None,
                   params: Optional[Dict[str, Any]] = None) -> TransportResponse:
        raise NotImplementedError

    async def aclose(self) -> None:
        return None


class HttpxTransport(Transport):
    """Transport backed by httpx.AsyncClient"""

    def __init__(self, timeout: Optional[float] = 30.0,
                 client: Optional[httpx.AsyncClient] = None):
        """
        Args:
            timeout: Per-request timeout in seconds (None disables it)
            client: Optional pre-configured httpx.AsyncClient; it is then
                owned by the caller and not closed by aclose()
        """
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def send(self, method: str, url: str, *,
                   headers: Mapping[str, str],
                   json: Optional[Dict[str, Any]] = None,
                   params: Optional[Dict[str, Any]] = None) -> TransportResponse:
        try:
            response = await self._client.request(
                method,
                url,
                headers=dict(headers),
                json=json,
                params=params,
            )
        except httpx.TimeoutException as e:
            logger.error(f"Request to {url} timed out: {e}")
            raise TransportError(f"Request timed out: {e}", cause=e) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Request to {url} failed: {e}")
            raise TransportError(f"Request failed: {e}", cause=e) from e

        return TransportResponse(
            status_code=response.status_code,
            body=response.content,
            headers=dict(response.headers),
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
