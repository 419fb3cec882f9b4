"""Pipeline composer: builds the nested continuation chain for a request.

The global chain runs first; when its last handler calls ``next()``, the
route's local chain (if any) starts; the last handler of whichever chain
runs last calls ``run()``, which invokes the view method. Every handler
instance taken along the way goes back to the pool once its own call
has settled, whether it returned, raised, or short-circuited.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from enum import Enum
from typing import Any

from wren.errors import ConfigurationError
from wren.handlers.base import BaseHandler, HandlerType, Next, RequestContext
from wren.handlers.pool import HandlerPool

type Continuation = Callable[[], Awaitable[Any]]


class Phase(Enum):
    """Which chain a handler position belongs to."""

    GLOBAL = "global"
    LOCAL = "local"


class Composer:
    """Composes handler types into an onion of zero-argument continuations.

    Usage::

        composer = Composer(pool, (ExceptionHandler, ParameterHandler))
        first = pool.take(composer.chain[0]).bind(context)
        result = await composer.compose(first, 0, composer.chain)()
    """

    __slots__ = ("chain", "pool")

    def __init__(self, pool: HandlerPool, chain: Sequence[HandlerType]) -> None:
        if not chain:
            msg = "The global handler chain is empty; nothing could call the view."
            raise ConfigurationError(msg)
        self.pool = pool
        self.chain: tuple[HandlerType, ...] = tuple(chain)

    def start(self, context: RequestContext) -> Continuation:
        """Take the first global handler for *context* and compose from it."""
        first = self.pool.take(self.chain[0]).bind(context)
        return self.compose(first, 0, self.chain, Phase.GLOBAL)

    def compose(
        self,
        current: BaseHandler,
        position: int,
        chain: Sequence[HandlerType],
        phase: Phase = Phase.GLOBAL,
    ) -> Continuation:
        """Return a continuation that runs *current* and everything after it."""
        if not chain:
            msg = "Cannot compose an empty handler chain."
            raise ConfigurationError(msg)

        context = current._bound()
        following: Next

        if position + 1 < len(chain):
            next_type = chain[position + 1]

            def following() -> Awaitable[Any]:
                successor = self.pool.take(next_type).bind(context)
                return self.compose(successor, position + 1, chain, phase)()

        elif phase is Phase.GLOBAL and context.route is not None and context.route.handlers:
            local = context.route.handlers

            def following() -> Awaitable[Any]:
                successor = self.pool.take(local[0]).bind(context)
                return self.compose(successor, 0, local, Phase.LOCAL)()

        else:
            following = current.run

        async def continuation() -> Any:
            try:
                return await current.handle(following)
            finally:
                self.pool.give(current)

        return continuation
