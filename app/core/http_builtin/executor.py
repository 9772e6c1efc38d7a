import logging
import threading
import time
from typing import Any

import httpx
from tenacity.wait import wait_base

from configs import HttpBuiltinConfig, app_config
from core.http_builtin.assembler import assemble_request
from core.http_builtin.decoder import decode_body
from core.http_builtin.entities import RequestSpec, ResponseResult
from core.http_builtin.errors import HttpBuiltinError, NetworkError
from core.http_builtin.transport import TransportFactory
from core.http_builtin.validator import check_supported_options
from libs.http_client import ResponseCacheStore

logger = logging.getLogger(__name__)


def status_line(status_code: int) -> str:
    reason = httpx.codes.get_reason_phrase(status_code)
    return f"{status_code} {reason}" if reason else str(status_code)


def reported_status_code(spec: RequestSpec, status_code: int) -> int:
    # raiseError=false withholds the numeric code; the status line is kept
    if spec.raise_error is False:
        return 0
    return status_code


class HttpBuiltin:
    """Executes request specs.

    Owns the response cache shared by every call that enables caching, so one
    instance per process (or per logical client pool) is expected. Tests can
    build isolated instances with their own store and transport.

    A ``transport`` passed in is shared by every call and never closed here;
    its owner closes it. Without one, each call opens and closes its own pool.
    """

    def __init__(
        self,
        settings: HttpBuiltinConfig | None = None,
        cache_store: ResponseCacheStore | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        retry_wait: wait_base | None = None,
    ):
        self._settings = settings or app_config
        if cache_store is None:
            cache_store = ResponseCacheStore(
                capacity=self._settings.HTTP_BUILTIN_CACHE_MAX_ENTRIES,
                ttl=self._settings.HTTP_BUILTIN_CACHE_TTL,
            )
        self.cache_store = cache_store
        self._factory = TransportFactory(
            cache_store=self.cache_store,
            settings=self._settings,
            transport=transport,
            retry_wait=retry_wait,
        )

    async def execute(self, spec: RequestSpec) -> ResponseResult:
        logger.info(f"http.send {spec.method} {spec.url}")
        start_time = time.time()
        try:
            result = await self._execute(spec)
        except HttpBuiltinError as exc:
            logger.error(
                f"http.send {spec.method} {spec.url} failed at {exc.stage}: "
                f"{type(exc).__name__}: {exc}"
            )
            raise
        latency_ms = int((time.time() - start_time) * 1000)
        logger.info(f"http.send {spec.method} {spec.url} -> {result.status} ({latency_ms}ms)")
        return result

    async def _execute(self, spec: RequestSpec) -> ResponseResult:
        check_supported_options(spec)
        client = self._factory.build(spec)
        request = assemble_request(client, spec)

        try:
            async with client:
                response = await client.send(request)
        except httpx.TimeoutException as exc:
            raise NetworkError(f"Request to {spec.url} timed out: {exc}", is_timeout=True) from exc
        except httpx.RequestError as exc:
            raise NetworkError(f"Request to {spec.url} failed: {type(exc).__name__}: {exc}") from exc

        raw_body = response.text()
        return ResponseResult(
            status=status_line(response.status_code),
            status_code=reported_status_code(spec, response.status_code),
            body=decode_body(spec, response.headers, raw_body),
            raw_body=raw_body,
            headers=response.headers.multi_items(),
            error={},
        )


_default_builtin: HttpBuiltin | None = None
_default_lock = threading.Lock()


def get_default_builtin() -> HttpBuiltin:
    """Process-wide instance built from ``app_config``, created on first use."""
    global _default_builtin
    with _default_lock:
        if _default_builtin is None:
            _default_builtin = HttpBuiltin()
        return _default_builtin


async def send(data: RequestSpec | dict[str, Any], builtin: HttpBuiltin | None = None) -> ResponseResult:
    """Returns the HTTP response to the given request."""
    spec = data if isinstance(data, RequestSpec) else RequestSpec.from_wire(data)
    return await (builtin or get_default_builtin()).execute(spec)
