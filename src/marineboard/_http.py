"""Low-level HTTP transport layer wrapping httpx."""

from __future__ import annotations

from typing import Any

import httpx

from marineboard.exceptions import (
    MalformedResponse,
    SourceTimeout,
    SourceUnavailable,
    UpstreamHTTPError,
)

DEFAULT_TIMEOUT = 10.0


def _check_status(response: httpx.Response) -> httpx.Response:
    """Raise for error status codes, otherwise return the response."""
    if response.status_code >= 400:
        raise UpstreamHTTPError(
            status_code=response.status_code,
            message=response.text[:200],
        )
    return response


def _decode_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise MalformedResponse(f"Invalid JSON from {response.url}: {exc}") from exc


class AsyncTransport:
    """Asynchronous HTTP transport using httpx.AsyncClient."""

    def __init__(
        self,
        base_url: str = "",
        timeout: float = DEFAULT_TIMEOUT,
        headers: dict[str, str] | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers=headers or {},
        )

    async def __aenter__(self) -> AsyncTransport:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: list[tuple[str, str]] | None = None,
        json: Any = None,
    ) -> httpx.Response:
        try:
            response = await self._client.request(method, endpoint, params=params, json=json)
        except httpx.TimeoutException as exc:
            raise SourceTimeout(str(exc)) from exc
        except httpx.HTTPError as exc:
            raise SourceUnavailable(f"{type(exc).__name__}: {exc}") from exc
        return _check_status(response)

    async def get_text(self, endpoint: str, params: list[tuple[str, str]] | None = None) -> str:
        """Perform an async GET request and return the body as text."""
        response = await self._request("GET", endpoint, params=params)
        return response.text

    async def get_json(self, endpoint: str, params: list[tuple[str, str]] | None = None) -> Any:
        """Perform an async GET request and return parsed JSON."""
        response = await self._request("GET", endpoint, params=params)
        return _decode_json(response)

    async def put_json(self, endpoint: str, payload: Any) -> Any:
        """Perform an async PUT request with a JSON body and return parsed JSON."""
        response = await self._request("PUT", endpoint, json=payload)
        return _decode_json(response)

    async def close(self) -> None:
        await self._client.aclose()
