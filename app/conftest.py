"""Pytest fixtures shared by the transport and builtin suites"""

from collections.abc import Awaitable, Callable

import httpx
import pytest
from tenacity import wait_none

from configs import HttpBuiltinConfig
from core.http_builtin import HttpBuiltin
from libs.http_client import ResponseCacheStore

Handler = Callable[[httpx.Request], httpx.Response | Awaitable[httpx.Response]]


class RecordedTransport(httpx.MockTransport):
    """MockTransport that keeps every request it dispatches."""

    def __init__(self, handler: Handler):
        self.requests: list[httpx.Request] = []
        self.closed = False

        def recording(request: httpx.Request):
            self.requests.append(request)
            return handler(request)

        super().__init__(recording)

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def settings():
    """Settings with no retry backoff so retries do not sleep"""
    return HttpBuiltinConfig(
        HTTP_BUILTIN_RETRY_BACKOFF_MIN=0,
        HTTP_BUILTIN_RETRY_BACKOFF_MAX=0,
        HTTP_BUILTIN_DEFAULT_TIMEOUT=5.0,
    )


@pytest.fixture
def cache_store():
    return ResponseCacheStore(capacity=16)


@pytest.fixture
def recorded_transport():
    return RecordedTransport


@pytest.fixture
def make_builtin(settings, cache_store):
    """Build an isolated HttpBuiltin around a request handler"""

    def factory(handler: Handler) -> tuple[HttpBuiltin, RecordedTransport]:
        transport = RecordedTransport(handler)
        builtin = HttpBuiltin(
            settings=settings,
            cache_store=cache_store,
            transport=transport,
            retry_wait=wait_none(),
        )
        return builtin, transport

    return factory
