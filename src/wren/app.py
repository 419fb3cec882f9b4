"""Wren application class.

Mutable during setup (views, global handlers, lifecycle hooks).
Frozen at runtime when ``__call__()`` is first invoked.
"""

import inspect
import logging
import threading
from collections.abc import Callable, Iterable
from typing import Any

from wren._internal.asgi import Receive, Scope, Send
from wren.config import AppConfig
from wren.errors import ConfigurationError
from wren.handlers.base import HandlerType
from wren.handlers.composer import Composer
from wren.handlers.exception import ExceptionHandler
from wren.handlers.parameter import ParameterHandler
from wren.handlers.pool import HandlerPool
from wren.metadata import Metadata, is_view
from wren.routing.route import Route
from wren.routing.router import Router
from wren.server.handler import handle_request

logger = logging.getLogger("wren.app")

# Global chain used when the app adds none of its own
DEFAULT_HANDLERS: tuple[HandlerType, ...] = (ExceptionHandler, ParameterHandler)


class App:
    """The wren application.

    Usage::

        @view()
        class HelloView:
            @get()
            def index(self):
                return "Hello, world!"

        app = App(views=[HelloView])

    Mutable during setup (views, handlers, hooks). Frozen at runtime when
    ``__call__()`` is first invoked, after which the route table, the
    metadata table, and the global chain no longer change.

    Thread safety:
        Setup is single-threaded (module import time). The freeze
        transition uses a Lock + double-check so exactly one thread
        compiles the app, even when several ASGI workers call
        ``__call__()`` concurrently on first request.
    """

    __slots__ = (
        "_composer",
        "_freeze_lock",
        "_frozen",
        "_handler_list",
        "_metadata",
        "_pool",
        # Compiled state (populated by _freeze)
        "_router",
        "_shutdown_hooks",
        "_startup_hooks",
        "_view_list",
        "config",
        "handler_options",
    )

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        views: Iterable[type] = (),
    ) -> None:
        self.config: AppConfig = config or AppConfig()
        # Handler type key -> options given through configure()
        self.handler_options: dict[str, Any] = {}
        self._view_list: list[type] = []
        self._handler_list: list[tuple[HandlerType, Any]] = []
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

        # Compiled state: set during _freeze()
        self._router: Router | None = None
        self._metadata: Metadata | None = None
        self._pool: HandlerPool | None = None
        self._composer: Composer | None = None

        for view_cls in views:
            self.add_view(view_cls)

    # -- Registration --

    def add_view(self, view_cls: type) -> None:
        """Serve the routes declared by a ``@view`` class."""
        self._check_not_frozen()
        if not is_view(view_cls):
            msg = f"{view_cls!r} is not a view; decorate it with @view()."
            raise ConfigurationError(msg)
        self._view_list.append(view_cls)

    def add_handler(self, handler_type: HandlerType, config: Any = None) -> None:
        """Append *handler_type* to the global chain.

        The global chain runs, in the order handlers were added, for every
        request. Adding none keeps the default ``ExceptionHandler,
        ParameterHandler`` chain; adding any replaces it, so include both
        where they belong.
        """
        self._check_not_frozen()
        self._handler_list.append((handler_type, config))

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register a function to run once when the server starts.

        Sync or async::

            @app.on_startup
            async def connect():
                ...
        """
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register a function to run once when the server stops."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- Compiled state --

    @property
    def router(self) -> Router:
        self._ensure_frozen()
        assert self._router is not None
        return self._router

    @property
    def metadata(self) -> Metadata:
        self._ensure_frozen()
        assert self._metadata is not None
        return self._metadata

    @property
    def pool(self) -> HandlerPool:
        self._ensure_frozen()
        assert self._pool is not None
        return self._pool

    @property
    def chain(self) -> tuple[HandlerType, ...]:
        """The global handler chain, outermost first."""
        self._ensure_frozen()
        assert self._composer is not None
        return self._composer.chain

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Handles the lifespan scope directly, then delegates HTTP scopes
        to the request handler.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(scope, receive, send)
            return

        self._ensure_frozen()

        assert self._router is not None
        assert self._composer is not None

        await handle_request(
            scope,
            receive,
            send,
            app=self,
            router=self._router,
            composer=self._composer,
        )

    async def _handle_lifespan(
        self,
        scope: Scope,
        receive: Receive,
        send: Send,
    ) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the app at startup (before first HTTP request), then
        runs registered startup/shutdown hooks and signals completion
        back to the server.
        """
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    self._ensure_frozen()
                    await self.startup()
                    await send({"type": "lifespan.startup.complete"})
                except Exception as exc:
                    logger.exception("Startup failed")
                    await send(
                        {
                            "type": "lifespan.startup.failed",
                            "message": str(exc),
                        }
                    )
                    return

            elif msg_type == "lifespan.shutdown":
                await self.shutdown()
                await send({"type": "lifespan.shutdown.complete"})
                return

    async def startup(self) -> None:
        """Run startup hooks in registration order."""
        for hook in self._startup_hooks:
            result = hook()
            if inspect.isawaitable(result):
                await result

    async def shutdown(self) -> None:
        """Run shutdown hooks in registration order."""
        for hook in self._shutdown_hooks:
            result = hook()
            if inspect.isawaitable(result):
                await result

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the app into its frozen runtime state.

        MUST only be called while holding _freeze_lock.
        """
        if self.config.handler_pool_max < 0:
            msg = f"handler_pool_max must be >= 0, got {self.config.handler_pool_max}."
            raise ConfigurationError(msg)

        # 1. Global chain: ExceptionHandler is the mandatory safety net
        declared = self._handler_list or [(h, None) for h in DEFAULT_HANDLERS]
        chain = tuple(handler_type for handler_type, _ in declared)
        if not any(issubclass(h, ExceptionHandler) for h in chain):
            msg = (
                "The global handler chain has no ExceptionHandler; failures would "
                "reach the client untranslated. Add it with app.add_handler(ExceptionHandler)."
            )
            raise ConfigurationError(msg)

        # 2. Metadata table from view declarations
        metadata = Metadata.build(self._view_list)

        # 3. Route table, one view instance per view class
        router = Router()
        for view_cls in self._view_list:
            instance = view_cls()
            for endpoint in metadata.endpoints(view_cls):
                router.add(
                    Route(
                        method=endpoint.method,
                        path=endpoint.path,
                        view=view_cls,
                        name=endpoint.member,
                        target=getattr(instance, endpoint.member),
                        handlers=metadata.route_handlers(view_cls, endpoint.member),
                        params=metadata.params(view_cls, endpoint.member),
                    )
                )
        router.compile()

        # 4. Static initializers, once per handler type in use
        configs: dict[HandlerType, Any] = dict(metadata.options)
        for handler_type, config in declared:
            if config is not None:
                configs[handler_type] = config
        in_use = dict.fromkeys(chain)
        for route in router.routes:
            in_use.update(dict.fromkeys(route.handlers))
        for handler_type in in_use:
            handler_type.init(self, configs.get(handler_type))

        # 5. Pool and composer
        pool = HandlerPool(self)
        self._composer = Composer(pool, chain)
        self._pool = pool
        self._router = router
        self._metadata = metadata
        self._frozen = True

        logger.debug(
            "Frozen: %d routes, global chain %s",
            len(router.routes),
            [h.__qualname__ for h in chain],
        )

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register views, handlers, and hooks before the first request."
            )
            raise RuntimeError(msg)
