import logging

import httpx
from tenacity import wait_exponential
from tenacity.wait import wait_base

from configs import HttpBuiltinConfig, app_config
from core.http_builtin.entities import RequestSpec
from core.http_builtin.errors import TransportConstructionError
from libs.http_client import (
    HttpClient,
    Middleware,
    PoolLimits,
    ResponseCacheStore,
    logging_middleware,
    retry_middleware,
)

logger = logging.getLogger(__name__)


class TransportFactory:
    """Builds one ``HttpClient`` per request spec.

    Middlewares run outermost first: logging, then retry. The response cache
    sits below them at the transport, so retry consults the cache again on
    every attempt and redirect hops are cached individually.
    """

    def __init__(
        self,
        cache_store: ResponseCacheStore,
        settings: HttpBuiltinConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        retry_wait: wait_base | None = None,
    ):
        self._cache_store = cache_store
        self._settings = settings or app_config
        self._transport = transport
        self._retry_wait = retry_wait

    @property
    def cache_store(self) -> ResponseCacheStore:
        return self._cache_store

    def _backoff(self) -> wait_base:
        if self._retry_wait is not None:
            return self._retry_wait
        return wait_exponential(
            multiplier=1,
            min=self._settings.HTTP_BUILTIN_RETRY_BACKOFF_MIN,
            max=self._settings.HTTP_BUILTIN_RETRY_BACKOFF_MAX,
        )

    def _pool_limits(self) -> PoolLimits:
        return PoolLimits(
            max_connections=self._settings.HTTP_BUILTIN_POOL_MAX_CONNECTIONS,
            max_keepalive=self._settings.HTTP_BUILTIN_POOL_MAX_KEEPALIVE,
            keepalive_expiry=self._settings.HTTP_BUILTIN_POOL_KEEPALIVE_EXPIRY,
        )

    def middlewares_for(self, spec: RequestSpec) -> list[Middleware]:
        middlewares: list[Middleware] = [logging_middleware(logger)]
        if spec.max_retry_attempts is not None:
            middlewares.append(retry_middleware(spec.max_retry_attempts, wait=self._backoff()))
        return middlewares

    def build(self, spec: RequestSpec) -> HttpClient:
        try:
            return HttpClient(
                middlewares=self.middlewares_for(spec),
                pool_limits=self._pool_limits(),
                default_timeout=self._settings.HTTP_BUILTIN_DEFAULT_TIMEOUT,
                follow_redirects=spec.enable_redirect is not False,
                max_redirects=self._settings.HTTP_BUILTIN_MAX_REDIRECTS,
                transport=self._transport,
                cache=self._cache_store if spec.cache is True else None,
                force_cache=spec.force_cache is True,
            )
        except (ValueError, TypeError) as exc:
            raise TransportConstructionError(f"Failed to build the HTTP client: {exc}") from exc
