"""Shared HTTP response cache.

Caching follows RFC 9111 through hishel. One in-memory storage is shared by
every client that enables caching; each client wraps its transport with a
controller for its mode:

- default: store and serve according to the response's freshness headers,
  revalidating stale entries with ``If-None-Match`` / ``If-Modified-Since``.
- forced: store any successful response and serve it without revalidation,
  however stale.
"""

import logging
from datetime import timedelta

import hishel
import httpx

logger = logging.getLogger(__name__)

CACHEABLE_METHODS = ["GET", "HEAD"]
FORCED_STATUS_CODES = [200, 201, 202, 203, 204, 205, 206, 207, 208, 226]


class ResponseCacheStore:
    """Process-wide response cache bounded to ``capacity`` entries.

    The storage evicts the least frequently used entry once full. ``ttl``
    (seconds) drops entries after a fixed time whatever their headers say.
    """

    def __init__(self, capacity: int = 1000, ttl: float | None = None):
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        if ttl is not None and ttl <= 0:
            raise ValueError(f"ttl must be positive, got {ttl}")
        self._capacity = capacity
        self._ttl = ttl
        self._storage = self._new_storage()
        self._controller = hishel.Controller(cacheable_methods=CACHEABLE_METHODS)
        self._forced_controller = hishel.Controller(
            cacheable_methods=CACHEABLE_METHODS,
            cacheable_status_codes=FORCED_STATUS_CODES,
            allow_stale=True,
            force_cache=True,
        )

    def _new_storage(self) -> hishel.AsyncInMemoryStorage:
        ttl = timedelta(seconds=self._ttl) if self._ttl is not None else None
        return hishel.AsyncInMemoryStorage(ttl=ttl, capacity=self._capacity)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def storage(self) -> hishel.AsyncInMemoryStorage:
        return self._storage

    def controller(self, force: bool = False) -> hishel.Controller:
        return self._forced_controller if force else self._controller

    def transport(self, transport: httpx.AsyncBaseTransport, force: bool = False) -> hishel.AsyncCacheTransport:
        """Wrap ``transport`` so its responses go through this cache."""
        return hishel.AsyncCacheTransport(
            transport=transport,
            storage=self._storage,
            controller=self.controller(force),
        )

    def clear(self) -> None:
        # Transports built before this call keep the old storage until closed
        self._storage = self._new_storage()
        logger.info(f"response cache cleared (capacity={self._capacity})")
