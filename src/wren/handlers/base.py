"""Handler contract: the common shape of every chain link.

A handler is a class. The app takes instances from a ``HandlerPool``,
binds each one to the request's ``RequestContext`` for a single pass
through the chain, then resets and returns it to the pool::

    class Timing(BaseHandler):
        async def handle(self, next: Next) -> Any:
            start = time.monotonic()
            try:
                return await next()
            finally:
                self.response.set_header("X-Time", f"{time.monotonic() - start:.3f}")

Code before ``await next()`` runs on the way in, code after it on the
way out. Returning without calling ``next()`` short-circuits the rest
of the chain.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar

from wren._internal.invoke import invoke
from wren.errors import NotFound

if TYPE_CHECKING:
    from wren.app import App
    from wren.http.request import Request
    from wren.http.response import Response
    from wren.routing.route import Route

# The rest of the chain, as seen from one handler
type Next = Callable[[], Awaitable[Any]]

# A handler class reference
type HandlerType = type[BaseHandler]


@dataclass(slots=True)
class RequestContext:
    """Everything one request carries through the chain.

    Built once by the dispatcher and handed to every handler instance the
    request takes. ``args`` is filled by ``ParameterHandler`` and consumed
    by ``run()``.
    """

    app: App
    request: Request
    response: Response
    route: Route | None
    args: list[Any] = field(default_factory=list)


class BaseHandler:
    """Base class for chain handlers.

    ``key`` names the pool category; it defaults to the dotted class
    name so every subclass gets its own bucket. Subclasses that keep
    their own per-request attributes must clear them in ``reset()``.
    """

    key: ClassVar[str] = "wren.handlers.base.BaseHandler"

    __slots__ = ("app", "context")

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "key" not in cls.__dict__:
            cls.key = f"{cls.__module__}.{cls.__qualname__}"

    def __init__(self, app: App) -> None:
        self.app = app
        self.context: RequestContext | None = None

    # -- Static hooks (called once per app, at freeze) --

    @classmethod
    def configure(cls, app: App, config: Any = None) -> HandlerType:
        """Store *config* for this handler type on *app*."""
        if config is not None:
            app.handler_options[cls.key] = config
        return cls

    @classmethod
    def init(cls, app: App, config: Any = None) -> HandlerType:
        """Prepare this handler type before the first request.

        Called once for every handler type the app uses, global or
        route-local. The default just forwards to ``configure()``.
        """
        return cls.configure(app, config)

    # -- Lifecycle --

    def bind(self, context: RequestContext) -> BaseHandler:
        """Attach this instance to one request."""
        self.context = context
        return self

    def reset(self) -> BaseHandler:
        """Drop all request state so the instance can be pooled."""
        self.context = None
        return self

    # -- Request-scoped accessors --

    def _bound(self) -> RequestContext:
        if self.context is None:
            msg = f"{type(self).__name__} is not bound to a request."
            raise RuntimeError(msg)
        return self.context

    @property
    def options(self) -> Any:
        """Configuration stored for this handler type, if any."""
        return self.app.handler_options.get(self.key)

    @property
    def request(self) -> Request:
        return self._bound().request

    @property
    def response(self) -> Response:
        return self._bound().response

    @property
    def route(self) -> Route | None:
        return self._bound().route

    @property
    def args(self) -> list[Any]:
        return self._bound().args

    # -- Chain step --

    async def handle(self, next: Next) -> Any:  # noqa: A002
        """Process the request. The default passes straight through."""
        return await next()

    async def run(self) -> Any:
        """Call the route's view method with the resolved arguments."""
        route = self.route
        if route is None:
            raise NotFound(self.request.method, self.request.url)
        return await invoke(route.target, *self.args)
