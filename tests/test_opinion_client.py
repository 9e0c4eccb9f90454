"""Tests for the upstream Opinion OpenAPI client."""

import asyncio

import httpx
import pytest

from clients.opinion import OpinionClient, TransportError, UpstreamError

BASE = "https://upstream.test/openapi"
ADDRESS = "0x1111111111111111111111111111111111111111"


def make_client(handler, api_key="secret"):
    return OpinionClient(base_url=BASE, api_key=api_key, transport=httpx.MockTransport(handler))


class TestRequests:
    """URL, query and header construction."""

    def test_positions_request(self):
        seen = {}

        def handler(request):
            seen["url"] = request.url
            seen["key"] = request.headers.get("apikey")
            return httpx.Response(200, json={"errno": 0, "result": {"list": []}})

        body = asyncio.run(make_client(handler).get_positions(ADDRESS, page=2, limit=10))

        assert body == {"errno": 0, "result": {"list": []}}
        assert seen["url"].path == f"/openapi/positions/user/{ADDRESS}"
        assert seen["url"].params["page"] == "2"
        assert seen["url"].params["limit"] == "10"
        assert seen["key"] == "secret"

    def test_trades_default_limit(self):
        seen = {}

        def handler(request):
            seen["url"] = request.url
            return httpx.Response(200, json={"code": 0, "data": []})

        asyncio.run(make_client(handler).get_trades(ADDRESS))

        assert seen["url"].path == f"/openapi/trade/user/{ADDRESS}"
        assert seen["url"].params["page"] == "1"
        assert seen["url"].params["limit"] == "100"

    def test_no_key_header_when_unconfigured(self):
        seen = {}

        def handler(request):
            seen["headers"] = request.headers
            return httpx.Response(200, json={})

        asyncio.run(make_client(handler, api_key="").get_trades(ADDRESS))
        assert "apikey" not in seen["headers"]


class TestErrors:
    """Upstream and transport failures."""

    def test_non_2xx_raises_with_body(self):
        def handler(request):
            return httpx.Response(429, json={"message": "slow down"})

        with pytest.raises(UpstreamError) as exc_info:
            asyncio.run(make_client(handler).get_positions(ADDRESS))

        assert exc_info.value.status_code == 429
        assert exc_info.value.body == {"message": "slow down"}

    def test_non_json_body_is_wrapped(self):
        def handler(request):
            return httpx.Response(500, text="<html>oops</html>")

        with pytest.raises(UpstreamError) as exc_info:
            asyncio.run(make_client(handler).get_trades(ADDRESS))

        assert exc_info.value.body == {"raw": "<html>oops</html>"}

    def test_malformed_2xx_is_bad_gateway(self):
        def handler(request):
            return httpx.Response(200, text="not json")

        with pytest.raises(UpstreamError) as exc_info:
            asyncio.run(make_client(handler).get_trades(ADDRESS))

        assert exc_info.value.status_code == 502

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(TransportError):
            asyncio.run(make_client(handler).get_positions(ADDRESS))


class TestMarketFallback:
    """Binary lookup with categorical fallback."""

    def test_binary_market(self):
        paths = []

        def handler(request):
            paths.append(request.url.path)
            return httpx.Response(200, json={"errno": 0, "result": {"marketTitle": "Binary"}})

        body = asyncio.run(make_client(handler).get_market("42"))

        assert body["result"]["marketTitle"] == "Binary"
        assert paths == ["/openapi/market/42"]

    def test_falls_back_to_categorical(self):
        paths = []

        def handler(request):
            paths.append(request.url.path)
            if "categorical" in request.url.path:
                return httpx.Response(200, json={"errno": 0, "result": {"marketTitle": "Categorical"}})
            return httpx.Response(200, json={"errno": 10200, "errmsg": "market not found"})

        body = asyncio.run(make_client(handler).get_market("42"))

        assert body["result"]["marketTitle"] == "Categorical"
        assert paths == ["/openapi/market/42", "/openapi/market/categorical/42"]

    def test_failed_fallback_keeps_primary_body(self):
        def handler(request):
            if "categorical" in request.url.path:
                return httpx.Response(404, json={"error": "nope"})
            return httpx.Response(200, json={"code": 1, "msg": "market not found"})

        body = asyncio.run(make_client(handler).get_market("42"))

        assert body == {"code": 1, "msg": "market not found"}

    def test_market_id_is_escaped(self):
        paths = []

        def handler(request):
            paths.append(request.url.raw_path)
            return httpx.Response(200, json={"errno": 0, "result": {}})

        asyncio.run(make_client(handler).get_market("a/b"))
        assert paths[0].split(b"?")[0] == b"/openapi/market/a%2Fb"
