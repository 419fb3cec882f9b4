"""ASGI handler: runs one HTTP request through the handler chain.

The only component that touches raw ASGI directly. Converts the scope
to a typed ``Request``, resolves the route, drives the composed chain,
and sends whatever it settles with back through ASGI ``send()``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from wren._internal.asgi import Receive, Scope, Send
from wren.handlers.base import RequestContext
from wren.handlers.composer import Composer
from wren.http.request import Request
from wren.http.response import Response
from wren.routing.router import Router
from wren.server.sender import send_response, send_value

if TYPE_CHECKING:
    from wren.app import App

logger = logging.getLogger("wren.server")


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    app: App,
    router: Router,
    composer: Composer,
) -> None:
    """Process a single HTTP request through the full chain."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive, body_timeout=app.config.body_timeout)
    response = Response()
    context = RequestContext(
        app=app,
        request=request,
        response=response,
        route=router.resolve(request.method, request.path),
    )

    first = composer.pool.take(composer.chain[0]).bind(context)
    try:
        value = await composer.compose(first, 0, composer.chain)()
    except Exception:
        # Only reachable when a handler placed before ExceptionHandler fails
        logger.exception("Unhandled failure for %s %s", request.method, request.url)
        await send_response(Response(500), b"", send)
        return

    await send_value(value, response, send, fallback=app.config.exception_response)
