"""Shared HTTP plumbing for provider clients.

Clients wrap an `httpx.AsyncClient`. One is created on demand unless the
caller injects its own (tests inject a client built on `httpx.MockTransport`).
Transport problems are mapped onto the provider error taxonomy here, so the
clients and the aggregator never see raw httpx exceptions.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any, Self

import httpx

from holiday_atlas.core.exceptions import (
    ItemTimeoutError,
    NetworkError,
    ResponseParseError,
    UpstreamError,
)

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {"Accept": "application/json"}


class HttpProvider:
    """Base class for provider clients backed by `httpx.AsyncClient`."""

    def __init__(
        self,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout, headers=DEFAULT_HEADERS, follow_redirects=True
            )
        return self._client

    async def aclose(self) -> None:
        """Close the underlying client if this provider created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def _request(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        accept: tuple[int, ...] = (),
    ) -> httpx.Response:
        """GET `url`, raising provider errors for failures.

        Any 2xx status passes; `accept` lists extra statuses treated as valid.
        """
        try:
            response = await self._get_client().get(
                url, params=params, headers=DEFAULT_HEADERS
            )
        except httpx.TimeoutException as e:
            raise ItemTimeoutError(f"request timeout: {_redact(url)}") from e
        except httpx.HTTPError as e:
            raise NetworkError(f"request failed: {_redact(url)}: {e}") from e

        if not response.is_success and response.status_code not in accept:
            logger.debug("GET %s -> %d", _redact(url), response.status_code)
            raise UpstreamError(response.status_code)
        return response

    async def _get_json(self, url: str, *, params: dict[str, Any] | None = None) -> Any:
        response = await self._request(url, params=params)
        try:
            return response.json()
        except ValueError as e:
            raise ResponseParseError(f"response is not valid JSON: {_redact(url)}") from e

    async def _get_text(self, url: str) -> str:
        response = await self._request(url)
        return response.text


def _redact(url: str) -> str:
    """Drop the query string, which may carry an API key."""
    return url.split("?", 1)[0]
