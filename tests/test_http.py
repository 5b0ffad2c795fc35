"""Tests for the HTTP transport layer."""

from __future__ import annotations

import httpx
import pytest
import respx

from marineboard._http import AsyncTransport
from marineboard.exceptions import (
    MalformedResponse,
    SourceTimeout,
    SourceUnavailable,
    UpstreamHTTPError,
)

BASE_URL = "https://example.test"


class TestAsyncTransport:
    @respx.mock
    @pytest.mark.asyncio
    async def test_get_json_success(self) -> None:
        respx.get(f"{BASE_URL}/points").mock(
            return_value=httpx.Response(200, json={"hours": []})
        )
        transport = AsyncTransport(base_url=BASE_URL)
        result = await transport.get_json("/points", [("lat", "1.0")])
        assert result == {"hours": []}
        await transport.close()

    @respx.mock
    @pytest.mark.asyncio
    async def test_get_with_params(self) -> None:
        route = respx.get(f"{BASE_URL}/points", params={"lat": "1.0", "lng": "2.0"}).mock(
            return_value=httpx.Response(200, json={})
        )
        async with AsyncTransport(base_url=BASE_URL) as transport:
            await transport.get_json("/points", [("lat", "1.0"), ("lng", "2.0")])
        assert route.called

    @respx.mock
    @pytest.mark.asyncio
    async def test_get_text(self) -> None:
        respx.get(f"{BASE_URL}/data.txt").mock(
            return_value=httpx.Response(200, text="#A B\n1 2\n")
        )
        async with AsyncTransport(base_url=BASE_URL) as transport:
            assert await transport.get_text("/data.txt") == "#A B\n1 2\n"

    @respx.mock
    @pytest.mark.asyncio
    async def test_sends_headers(self) -> None:
        route = respx.get(f"{BASE_URL}/points").mock(
            return_value=httpx.Response(200, json={})
        )
        async with AsyncTransport(base_url=BASE_URL, headers={"Authorization": "key"}) as transport:
            await transport.get_json("/points")
        assert route.calls.last.request.headers["Authorization"] == "key"

    @respx.mock
    @pytest.mark.asyncio
    async def test_get_404(self) -> None:
        respx.get(f"{BASE_URL}/points").mock(
            return_value=httpx.Response(404, text="Not Found")
        )
        async with AsyncTransport(base_url=BASE_URL) as transport:
            with pytest.raises(UpstreamHTTPError) as exc_info:
                await transport.get_json("/points")
        assert exc_info.value.status_code == 404

    @respx.mock
    @pytest.mark.asyncio
    async def test_http_error_is_source_unavailable(self) -> None:
        respx.get(f"{BASE_URL}/points").mock(
            return_value=httpx.Response(503, text="Service Unavailable")
        )
        async with AsyncTransport(base_url=BASE_URL) as transport:
            with pytest.raises(SourceUnavailable):
                await transport.get_json("/points")

    @respx.mock
    @pytest.mark.asyncio
    async def test_connection_error(self) -> None:
        respx.get(f"{BASE_URL}/points").mock(side_effect=httpx.ConnectError("fail"))
        async with AsyncTransport(base_url=BASE_URL) as transport:
            with pytest.raises(SourceUnavailable):
                await transport.get_json("/points")

    @respx.mock
    @pytest.mark.asyncio
    async def test_timeout_error(self) -> None:
        respx.get(f"{BASE_URL}/points").mock(side_effect=httpx.ReadTimeout("timeout"))
        async with AsyncTransport(base_url=BASE_URL) as transport:
            with pytest.raises(SourceTimeout):
                await transport.get_json("/points")

    @respx.mock
    @pytest.mark.asyncio
    async def test_invalid_json(self) -> None:
        respx.get(f"{BASE_URL}/points").mock(
            return_value=httpx.Response(200, text="<html>oops</html>")
        )
        async with AsyncTransport(base_url=BASE_URL) as transport:
            with pytest.raises(MalformedResponse):
                await transport.get_json("/points")

    @respx.mock
    @pytest.mark.asyncio
    async def test_put_json(self) -> None:
        route = respx.put(f"{BASE_URL}/blob").mock(
            return_value=httpx.Response(200, json={"ok": True})
        )
        async with AsyncTransport(base_url=BASE_URL) as transport:
            result = await transport.put_json("/blob", {"content": "x"})
        assert result == {"ok": True}
        assert route.calls.last.request.content == b'{"content":"x"}'
