import httpx
import pytest

from libs.http_client.models import Request, Response
from libs.http_client.pool import PoolLimits


class TestRequest:
    def test_create_request(self):
        req = Request(method="GET", url="https://example.com")
        assert req.method == "GET"
        assert req.url == "https://example.com"
        assert req.headers == {}
        assert req.body == b""
        assert req.timeout == 30.0

    def test_request_immutable(self):
        req = Request(method="GET", url="https://example.com")
        with pytest.raises(AttributeError):
            req.method = "POST"


class TestResponse:
    def _response(self, body: bytes, content_type: str | None = None, status_code: int = 200):
        headers = httpx.Headers({"content-type": content_type} if content_type else {})
        req = Request(method="GET", url="https://example.com")
        return Response(status_code=status_code, headers=headers, body=body, latency_ms=0, request=req)

    def test_text_uses_charset(self):
        resp = self._response("café".encode("latin-1"), "text/plain; charset=latin-1")
        assert resp.encoding == "latin-1"
        assert resp.text() == "café"

    def test_text_defaults_to_utf8(self):
        resp = self._response("café".encode("utf-8"), "text/plain")
        assert resp.text() == "café"

    def test_text_with_unknown_charset_falls_back(self):
        resp = self._response(b"plain", "text/plain; charset=no-such-codec")
        assert resp.text() == "plain"


class TestPoolLimits:
    def test_default_values(self):
        limits = PoolLimits()
        assert limits.max_connections == 100
        assert limits.max_keepalive == 20
        assert limits.keepalive_expiry == 30.0

    def test_to_httpx_limits(self):
        limits = PoolLimits(max_connections=50, max_keepalive=10)
        httpx_limits = limits.to_httpx_limits()
        assert httpx_limits.max_connections == 50
        assert httpx_limits.max_keepalive_connections == 10

    def test_rejects_non_positive_connections(self):
        with pytest.raises(ValueError):
            PoolLimits(max_connections=0).to_httpx_limits()
