import logging

import httpx
import pytest
from tenacity import wait_none

from libs.http_client.middleware import logging_middleware, retry_middleware
from libs.http_client.models import Request, Response


def _response(req: Request, status_code: int) -> Response:
    return Response(status_code=status_code, headers=httpx.Headers(), body=b"", latency_ms=0, request=req)


class TestRetryMiddleware:
    @pytest.mark.asyncio
    async def test_no_retry_on_success(self):
        req = Request(method="GET", url="https://example.com")
        call_count = 0

        async def next_fn(r: Request) -> Response:
            nonlocal call_count
            call_count += 1
            return _response(r, 200)

        middleware = retry_middleware(max_retries=3, wait=wait_none())
        result = await middleware(req, next_fn)

        assert result.status_code == 200
        assert call_count == 1

    @pytest.mark.asyncio
    async def test_retry_on_503(self):
        req = Request(method="GET", url="https://example.com")
        call_count = 0

        async def next_fn(r: Request) -> Response:
            nonlocal call_count
            call_count += 1
            if call_count < 3:
                return _response(r, 503)
            return _response(r, 200)

        middleware = retry_middleware(max_retries=3, wait=wait_none())
        result = await middleware(req, next_fn)

        assert result.status_code == 200
        assert call_count == 3

    @pytest.mark.asyncio
    async def test_max_retries_exceeded_returns_last_response(self):
        req = Request(method="GET", url="https://example.com")
        call_count = 0

        async def next_fn(r: Request) -> Response:
            nonlocal call_count
            call_count += 1
            return _response(r, 503)

        middleware = retry_middleware(max_retries=2, wait=wait_none())
        result = await middleware(req, next_fn)

        assert result.status_code == 503
        assert call_count == 3  # 1 initial + 2 retries

    @pytest.mark.asyncio
    async def test_no_retry_on_client_error(self):
        req = Request(method="GET", url="https://example.com")
        call_count = 0

        async def next_fn(r: Request) -> Response:
            nonlocal call_count
            call_count += 1
            return _response(r, 404)

        middleware = retry_middleware(max_retries=3, wait=wait_none())
        result = await middleware(req, next_fn)

        assert result.status_code == 404
        assert call_count == 1

    @pytest.mark.asyncio
    async def test_retry_on_connection_error(self):
        req = Request(method="GET", url="https://example.com")
        call_count = 0

        async def next_fn(r: Request) -> Response:
            nonlocal call_count
            call_count += 1
            if call_count == 1:
                raise httpx.ConnectError("connection refused")
            return _response(r, 200)

        middleware = retry_middleware(max_retries=1, wait=wait_none())
        result = await middleware(req, next_fn)

        assert result.status_code == 200
        assert call_count == 2

    @pytest.mark.asyncio
    async def test_exhausted_errors_are_reraised(self):
        req = Request(method="GET", url="https://example.com")
        call_count = 0

        async def next_fn(r: Request) -> Response:
            nonlocal call_count
            call_count += 1
            raise httpx.ReadTimeout("too slow")

        middleware = retry_middleware(max_retries=2, wait=wait_none())
        with pytest.raises(httpx.ReadTimeout):
            await middleware(req, next_fn)
        assert call_count == 3

    @pytest.mark.asyncio
    async def test_zero_retries_means_single_attempt(self):
        req = Request(method="GET", url="https://example.com")
        call_count = 0

        async def next_fn(r: Request) -> Response:
            nonlocal call_count
            call_count += 1
            return _response(r, 500)

        middleware = retry_middleware(max_retries=0, wait=wait_none())
        result = await middleware(req, next_fn)

        assert result.status_code == 500
        assert call_count == 1

    def test_negative_retries_rejected(self):
        with pytest.raises(ValueError):
            retry_middleware(max_retries=-1)


class TestLoggingMiddleware:
    @pytest.mark.asyncio
    async def test_logs_request_and_response(self, caplog):
        req = Request(method="GET", url="https://example.com")
        log = logging.getLogger("tests.http_client")

        async def next_fn(r: Request) -> Response:
            return _response(r, 204)

        with caplog.at_level(logging.INFO, logger="tests.http_client"):
            await logging_middleware(log)(req, next_fn)

        messages = [record.getMessage() for record in caplog.records]
        assert "-> GET https://example.com" in messages
        assert any(message.startswith("<- 204") for message in messages)
