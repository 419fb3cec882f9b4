"""View declarations: class and method decorators.

Decorators only record what they were given as attributes on the
decorated class or function. Nothing is registered globally; the app
reads the attributes once, when it freezes, into a ``Metadata`` table.

Usage::

    @view("/users")
    @handler(AuthHandler)
    class UserView:
        @get("/{{id}}")
        @handler(AuditHandler, {"level": "info"})
        async def show(self, id: Annotated[str, PathVariable()]):
            ...

Route-local handlers run in the order they are written, method-level
handlers before class-level ones.
"""

from collections.abc import Callable
from typing import Any, TypeVar

from wren.handlers.base import HandlerType

T = TypeVar("T")

VIEW_ATTR = "__wren_view__"
ENDPOINTS_ATTR = "__wren_endpoints__"
HANDLERS_ATTR = "__wren_handlers__"


def view(prefix: str = "") -> Callable[[type[T]], type[T]]:
    """Mark a class as a view whose routes live under *prefix*."""

    def decorator(cls: type[T]) -> type[T]:
        setattr(cls, VIEW_ATTR, prefix)
        return cls

    return decorator


def route(method: str, path: str = "") -> Callable[[T], T]:
    """Mark a view method as the target for *method* on *path*.

    Stack several to serve more than one method or path.
    """

    def decorator(func: T) -> T:
        endpoints = getattr(func, ENDPOINTS_ATTR, ())
        setattr(func, ENDPOINTS_ATTR, ((method.upper(), path), *endpoints))
        return func

    return decorator


def get(path: str = "") -> Callable[[T], T]:
    return route("GET", path)


def post(path: str = "") -> Callable[[T], T]:
    return route("POST", path)


def put(path: str = "") -> Callable[[T], T]:
    return route("PUT", path)


def patch(path: str = "") -> Callable[[T], T]:
    return route("PATCH", path)


def delete(path: str = "") -> Callable[[T], T]:
    return route("DELETE", path)


def head(path: str = "") -> Callable[[T], T]:
    return route("HEAD", path)


def options(path: str = "") -> Callable[[T], T]:
    return route("OPTIONS", path)


def handler(handler_type: HandlerType, config: Any = None) -> Callable[[T], T]:
    """Add *handler_type* to the route-local chain of a view class or method.

    *config* is passed to ``handler_type.init(app, config)`` once, when the
    app freezes.
    """

    def decorator(target: T) -> T:
        # Only the target's own declarations; a subclass view does not
        # append to its base class's tuple.
        own = vars(target).get(HANDLERS_ATTR, ())
        # Decorators apply bottom-up; prepend to keep written order.
        setattr(target, HANDLERS_ATTR, ((handler_type, config), *own))
        return target

    return decorator
