import asyncio
import time
from typing import Any

import httpx

from .cache import ResponseCacheStore
from .models import Request, Response
from .pool import PoolLimits
from .types import Middleware

DEFAULT_MAX_REDIRECTS = 10


class BorrowedTransport(httpx.AsyncBaseTransport):
    """Delegates to a transport owned elsewhere; closing it is left to the owner."""

    def __init__(self, transport: httpx.AsyncBaseTransport):
        self._transport = transport

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        return await self._transport.handle_async_request(request)

    async def aclose(self) -> None:
        return None


class HttpClient:
    """Middleware chain around one ``httpx.AsyncClient``.

    A ``transport`` passed in is shared: the client never closes it. Without
    one, the client opens its own connection pool and closes it on exit.
    Passing ``cache`` routes every dispatch through the shared response cache.
    """

    def __init__(
        self,
        middlewares: list[Middleware] | None = None,
        pool_limits: PoolLimits | None = None,
        default_timeout: float = 30.0,
        follow_redirects: bool = True,
        max_redirects: int = DEFAULT_MAX_REDIRECTS,
        transport: httpx.AsyncBaseTransport | None = None,
        cache: ResponseCacheStore | None = None,
        force_cache: bool = False,
    ):
        if default_timeout <= 0:
            raise ValueError(f"default_timeout must be positive, got {default_timeout}")
        if max_redirects < 0:
            raise ValueError(f"max_redirects must not be negative, got {max_redirects}")
        self._middlewares = middlewares or []
        self._pool_limits = pool_limits or PoolLimits()
        self._limits = self._pool_limits.to_httpx_limits()
        self._default_timeout = default_timeout
        self._follow_redirects = follow_redirects
        self._max_redirects = max_redirects
        self._transport = transport
        self._cache = cache
        self._force_cache = force_cache
        self._owned_transport: httpx.AsyncHTTPTransport | None = None
        self._client: httpx.AsyncClient | None = None

    @property
    def follow_redirects(self) -> bool:
        return self._follow_redirects

    @property
    def middlewares(self) -> list[Middleware]:
        return list(self._middlewares)

    @property
    def default_timeout(self) -> float:
        return self._default_timeout

    @property
    def cache(self) -> ResponseCacheStore | None:
        return self._cache

    @property
    def force_cache(self) -> bool:
        return self._force_cache

    def _build_transport(self) -> httpx.AsyncBaseTransport:
        transport = self._transport
        if transport is None:
            self._owned_transport = httpx.AsyncHTTPTransport(limits=self._limits)
            transport = self._owned_transport
        if self._cache is not None:
            transport = self._cache.transport(transport, force=self._force_cache)
        # The cache storage and any injected transport outlive this client
        return BorrowedTransport(transport)

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._default_timeout,
                follow_redirects=self._follow_redirects,
                max_redirects=self._max_redirects,
                transport=self._build_transport(),
            )
        return self._client

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None
        if self._owned_transport:
            await self._owned_transport.aclose()
            self._owned_transport = None

    async def __aenter__(self) -> "HttpClient":
        await self._ensure_client()
        return self

    async def __aexit__(self, *_args: Any) -> None:
        await self.close()

    def build_request(
        self,
        method: str,
        url: str,
        headers: dict[str, str] | None = None,
        body: bytes = b"",
        timeout: float | None = None,
    ) -> Request:
        return Request(
            method=method,
            url=url,
            headers=dict(headers or {}),
            body=body,
            timeout=timeout if timeout is not None else self._default_timeout,
        )

    async def send(self, request: Request) -> Response:
        if self._middlewares:
            return await self._execute_with_middleware(request, 0)
        return await self._do_request(request)

    async def _execute_with_middleware(self, request: Request, index: int) -> Response:
        if index >= len(self._middlewares):
            return await self._do_request(request)

        middleware = self._middlewares[index]

        async def next_fn(req: Request) -> Response:
            return await self._execute_with_middleware(req, index + 1)

        return await middleware(request, next_fn)

    async def _do_request(self, request: Request) -> Response:
        client = await self._ensure_client()
        start_time = time.time()

        # httpx timeouts are per phase; the request timeout bounds the whole attempt
        try:
            async with asyncio.timeout(request.timeout):
                http_response = await client.request(
                    method=request.method,
                    url=request.url,
                    headers={name: value.encode("utf-8") for name, value in request.headers.items()},
                    content=request.body or None,
                    timeout=request.timeout,
                )
        except TimeoutError as exc:
            raise httpx.TimeoutException(
                f"{request.method} {request.url} exceeded {request.timeout}s"
            ) from exc

        latency_ms = int((time.time() - start_time) * 1000)

        return Response(
            status_code=http_response.status_code,
            headers=httpx.Headers(http_response.headers.multi_items()),
            body=http_response.content,
            latency_ms=latency_ms,
            request=request,
            from_cache=bool(http_response.extensions.get("from_cache", False)),
        )
