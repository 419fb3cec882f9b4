"""Parameter binding: resolves view arguments before the view runs.

Reads the matched route's ``ParamInjection`` list and produces one
argument per entry through a fixed injector table keyed by
``InjectionKind``. Every argument is fully resolved (the body read and
decoded) before ``next()`` is called.
"""

from __future__ import annotations

import inspect
import json
import logging
from collections.abc import Callable
from typing import Any

from wren.errors import BadRequest, NotFound
from wren.handlers.base import BaseHandler, Next
from wren.injection import InjectionKind
from wren.routing.route import Route

logger = logging.getLogger("wren.handlers")

type Injector = Callable[[BaseHandler, str | None, Route], Any]


def media_type(content_type: str | None) -> str:
    """``"Application/JSON; charset=utf-8"`` -> ``"application/json"``."""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


async def read_body(handler: BaseHandler, content_type: str | None) -> Any:
    """Read the whole body and decode it by the effective content type."""
    raw = await handler.request.body()
    match media_type(content_type or handler.request.content_type):
        case "application/json":
            return json.loads(raw)
        case "application/octet-stream":
            return raw
        case _:
            return raw.decode("utf-8")


def _path_variable(handler: BaseHandler, key: str | None, route: Route) -> str | None:
    captured = route.template.match(handler.request.path)
    if captured is None or key is None:
        return None
    return captured.get(key)


INJECTORS: dict[InjectionKind, Injector] = {
    InjectionKind.HTTP_REQUEST: lambda handler, key, route: handler.request,
    InjectionKind.HTTP_RESPONSE: lambda handler, key, route: handler.response,
    InjectionKind.PATH_QUERY: lambda handler, key, route: (
        handler.request.query.get(key) if key is not None else None
    ),
    InjectionKind.PATH_VARIABLE: _path_variable,
    InjectionKind.REQUEST_BODY: lambda handler, key, route: read_body(handler, key),
    InjectionKind.REQUEST_HEADER: lambda handler, key, route: (
        handler.request.headers.lookup(key) if key is not None else None
    ),
}


class ParameterHandler(BaseHandler):
    """Resolve the matched route's declared arguments.

    Raises ``NotFound`` when the request matched no route, and a single
    ``BadRequest`` when any argument cannot be produced (unreadable or
    malformed body, client disconnect, read timeout).
    """

    __slots__ = ()

    async def handle(self, next: Next) -> Any:  # noqa: A002
        if not self.response.has_header("content-type"):
            self.response.set_header("content-type", self.app.config.default_content_type)

        route = self.route
        if route is None:
            raise NotFound(self.request.method, self.request.url)

        args = self.args
        args.clear()
        try:
            for injection in route.params:
                value = INJECTORS[injection.kind](self, injection.key, route)
                if inspect.isawaitable(value):
                    value = await value
                args.append(value)
        except Exception as exc:
            logger.debug("Argument binding failed for %s: %r", route, exc)
            msg = f"Bad request: {exc}"
            raise BadRequest(msg) from exc

        return await next()
