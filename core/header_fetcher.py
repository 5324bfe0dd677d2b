"""Header-only HTTP fetching used by format detection.

A fetcher opens a request, hands back the status line and headers, and lets
the caller drop the connection before any of the body is read.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

import httpx

from core.errors import HeadersTimeoutError, NetworkError
from core.http_client import get_shared_client

if TYPE_CHECKING:
    from core.app_config import AppConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HeaderResponse:
    status_code: int
    headers: Mapping[str, str] = field(default_factory=dict)

    def header(self, name: str) -> str | None:
        value = self.headers.get(name)
        if value is None:
            value = self.headers.get(name.lower())
        return value


class HeaderRequest(Protocol):
    def wait(self, timeout: float) -> HeaderResponse:
        """Block until response headers arrive."""
        ...

    def abort(self) -> None:
        """Drop the connection. Safe to call before or after ``wait``."""
        ...


class HeaderFetcher(Protocol):
    def open(self, url: str) -> HeaderRequest:
        ...


class HttpxHeaderRequest:
    """One streamed GET whose body is never consumed."""

    def __init__(self, client: httpx.Client, url: str):
        self._client = client
        self._url = url
        self._response: httpx.Response | None = None
        self._aborted = False

    def wait(self, timeout: float) -> HeaderResponse:
        if self._aborted:
            raise NetworkError(f"Request to {self._url} was aborted")
        try:
            request = self._client.build_request("GET", self._url, timeout=httpx.Timeout(timeout))
            self._response = self._client.send(request, stream=True)
        except httpx.TimeoutException as e:
            raise HeadersTimeoutError(f"Request timeout after {timeout:g}s", timeout=timeout) from e
        except (httpx.TransportError, httpx.InvalidURL) as e:
            raise NetworkError(str(e) or e.__class__.__name__, cause=e) from e

        logger.debug(
            "Headers <- %s | status=%s content-type=%s content-length=%s",
            self._url,
            self._response.status_code,
            self._response.headers.get("content-type", ""),
            self._response.headers.get("content-length", ""),
        )
        return HeaderResponse(
            status_code=self._response.status_code,
            headers=self._response.headers,
        )

    def abort(self) -> None:
        self._aborted = True
        if self._response is not None:
            self._response.close()
            self._response = None


class HttpxHeaderFetcher:
    """Fetcher backed by the shared pooled ``httpx.Client``."""

    def __init__(self, config: "AppConfig | None" = None, client: httpx.Client | None = None):
        self._config = config
        self._client = client

    def open(self, url: str) -> HttpxHeaderRequest:
        client = self._client or get_shared_client(self._config)
        logger.debug("Header request -> %s", url)
        return HttpxHeaderRequest(client, url)
