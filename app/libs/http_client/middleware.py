import logging

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    retry_if_result,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from .models import Request, Response
from .types import Middleware, NextFn

logger = logging.getLogger(__name__)


def is_transient_error(exception: BaseException) -> bool:
    """Timeouts, dropped connections and broken responses are worth another attempt."""
    return isinstance(
        exception, (httpx.TimeoutException, httpx.NetworkError, httpx.RemoteProtocolError)
    )


def is_transient_response(response: Response) -> bool:
    return 500 <= response.status_code < 600


def _log_retry(retry_state: RetryCallState) -> None:
    outcome = retry_state.outcome
    if outcome is None:
        return
    if outcome.failed:
        reason = f"{type(outcome.exception()).__name__}: {outcome.exception()}"
    else:
        reason = f"status {outcome.result().status_code}"
    delay = retry_state.next_action.sleep if retry_state.next_action else 0
    logger.warning(
        f"retrying after attempt {retry_state.attempt_number} ({reason}), sleeping {delay:.2f}s"
    )


def _last_outcome(retry_state: RetryCallState) -> Response:
    # Exhausted: hand back the final response, or re-raise the final error
    assert retry_state.outcome is not None
    return retry_state.outcome.result()


def retry_middleware(
    max_retries: int = 3,
    wait: wait_base | None = None,
) -> Middleware:
    """Re-dispatch transient failures with exponential backoff.

    ``max_retries`` counts retries, so at most ``max_retries + 1`` attempts are
    made. 4xx responses are returned as-is.
    """
    if max_retries < 0:
        raise ValueError(f"max_retries must not be negative, got {max_retries}")
    backoff = wait if wait is not None else wait_exponential(multiplier=1, min=1, max=30)

    async def middleware(request: Request, next: NextFn) -> Response:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(max_retries + 1),
            wait=backoff,
            retry=retry_if_exception(is_transient_error) | retry_if_result(is_transient_response),
            before_sleep=_log_retry,
            retry_error_callback=_last_outcome,
        )
        return await retrying(next, request)

    return middleware


def logging_middleware(logger: logging.Logger | None = None) -> Middleware:
    log = logger or logging.getLogger(__name__)

    async def middleware(request: Request, next: NextFn) -> Response:
        log.info(f"-> {request.method} {request.url}")
        response = await next(request)
        cached = " cached" if response.from_cache else ""
        log.info(f"<- {response.status_code} ({response.latency_ms}ms){cached}")
        return response

    return middleware
