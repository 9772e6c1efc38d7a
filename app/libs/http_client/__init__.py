"""HTTP Client module."""

from .cache import ResponseCacheStore
from .client import DEFAULT_MAX_REDIRECTS, BorrowedTransport, HttpClient
from .middleware import (
    is_transient_error,
    is_transient_response,
    logging_middleware,
    retry_middleware,
)
from .models import Request, Response
from .pool import PoolLimits
from .types import Middleware, NextFn

__all__ = [
    "DEFAULT_MAX_REDIRECTS",
    "BorrowedTransport",
    "HttpClient",
    "Request",
    "Response",
    "PoolLimits",
    "Middleware",
    "NextFn",
    "ResponseCacheStore",
    "retry_middleware",
    "logging_middleware",
    "is_transient_error",
    "is_transient_response",
]
