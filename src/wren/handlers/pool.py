"""Handler pool: per-category LIFO caches of idle handler instances.

Handler instances are reused across requests instead of being built per
request. Each category (``HandlerType.key``) has its own bucket, capped
at ``AppConfig.handler_pool_max`` idle instances; extras given back
beyond the cap are dropped.

Thread safety:
    Under asyncio, ``take`` and ``give`` never suspend, so no two
    requests observe a half-updated bucket. Free-threaded and
    multi-threaded ASGI servers break that assumption, so every bucket
    carries its own lock.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from wren.handlers.base import BaseHandler, HandlerType

if TYPE_CHECKING:
    from wren.app import App

logger = logging.getLogger("wren.handlers")


class _Bucket:
    __slots__ = ("idle", "lock")

    def __init__(self) -> None:
        self.idle: list[BaseHandler] = []
        self.lock = threading.Lock()


class HandlerPool:
    """Cache of constructed handler instances, keyed by category.

    Usage::

        pool = HandlerPool(app)
        handler = pool.take(ParameterHandler)
        ...
        pool.give(handler)
    """

    __slots__ = ("_app", "_buckets", "_lock", "max")

    def __init__(self, app: App, max_size: int | None = None) -> None:
        self._app = app
        self.max: int = max_size if max_size is not None else app.config.handler_pool_max
        self._buckets: dict[str, _Bucket] = {}
        # Guards bucket creation only
        self._lock = threading.Lock()

    def _bucket(self, key: str) -> _Bucket:
        bucket = self._buckets.get(key)
        if bucket is None:
            with self._lock:
                bucket = self._buckets.setdefault(key, _Bucket())
        return bucket

    def take(self, handler_type: HandlerType) -> BaseHandler:
        """Return the most recently given-back instance, or a new one."""
        bucket = self._bucket(handler_type.key)
        with bucket.lock:
            if bucket.idle:
                return bucket.idle.pop()
        return handler_type(self._app)

    def give(self, handler: BaseHandler) -> int:
        """Reset *handler* and keep it if its bucket has room.

        Returns the bucket size afterwards.
        """
        handler.reset()
        bucket = self._bucket(handler.key)
        with bucket.lock:
            if len(bucket.idle) < self.max:
                bucket.idle.append(handler)
            else:
                logger.debug("Handler pool full for %s (%d); dropping instance", handler.key, self.max)
            return len(bucket.idle)

    def size(self, handler_type: HandlerType) -> int:
        """Idle instances currently held for *handler_type*'s category."""
        bucket = self._buckets.get(handler_type.key)
        return len(bucket.idle) if bucket is not None else 0

    def __len__(self) -> int:
        return sum(len(bucket.idle) for bucket in self._buckets.values())
