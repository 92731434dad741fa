import json

import httpx
import pytest

from square_commerce.client import SquareClient
from square_commerce.exceptions import TransportError
from square_commerce.transport import HttpxTransport


class TestHttpxTransport:
    """Tests for the default httpx-backed transport"""

    @pytest.mark.asyncio
    async def test_sends_request(self):
        """Test that method, headers, params and JSON body reach httpx"""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"ok": True}, headers={"X-Test": "1"})

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        transport = HttpxTransport(client=http_client)

        response = await transport.send("POST", "https://example.test/v2/things",
                                        headers={"Authorization": "Bearer t"},
                                        json={"a": 1}, params={"limit": 5})

        assert response.status_code == 200
        assert json.loads(response.text) == {"ok": True}
        assert response.headers["x-test"] == "1"
        assert seen == {
            "method": "POST",
            "url": "https://example.test/v2/things?limit=5",
            "auth": "Bearer t",
            "body": {"a": 1},
        }
        await http_client.aclose()

    @pytest.mark.asyncio
    async def test_timeout_becomes_transport_error(self):
        """Test that httpx timeouts surface as TransportError"""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        transport = HttpxTransport(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))
        with pytest.raises(TransportError) as exc_info:
            await transport.send("GET", "https://example.test/v2/locations", headers={})
        assert isinstance(exc_info.value.cause, httpx.TimeoutException)

    @pytest.mark.asyncio
    async def test_connect_error_becomes_transport_error(self):
        """Test that connection failures surface as TransportError"""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        transport = HttpxTransport(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))
        with pytest.raises(TransportError):
            await transport.send("GET", "https://example.test/v2/locations", headers={})

    @pytest.mark.asyncio
    async def test_invalid_url_becomes_transport_error(self):
        """Test that a malformed URL surfaces as TransportError"""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.InvalidURL("Invalid port: 'abc'")

        transport = HttpxTransport(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))
        with pytest.raises(TransportError) as exc_info:
            await transport.send("GET", "https://example.test/v2/locations", headers={})
        assert isinstance(exc_info.value.cause, httpx.InvalidURL)

    @pytest.mark.asyncio
    async def test_health_check_false_on_invalid_url(self):
        """Test that health_check reports False instead of raising"""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.InvalidURL("Invalid port: 'abc'")

        transport = HttpxTransport(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))
        async with SquareClient("token", transport=transport) as client:
            assert await client.health_check() is False

    @pytest.mark.asyncio
    async def test_caller_owned_client_left_open(self):
        """Test that aclose() does not close an injected httpx client"""
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(
            lambda request: httpx.Response(200)))
        transport = HttpxTransport(client=http_client)
        await transport.aclose()
        assert not http_client.is_closed
        await http_client.aclose()

    @pytest.mark.asyncio
    async def test_client_end_to_end(self):
        """Test a full client call over a mocked httpx transport"""
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.headers["Square-Version"] == "2024-12-18"
            return httpx.Response(200, json={"locations": [{"id": "L1", "name": "Main"}]})

        transport = HttpxTransport(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))
        async with SquareClient("token", transport=transport) as client:
            locations = await client.locations().list().collect()

        assert [location.id for location in locations] == ["L1"]
