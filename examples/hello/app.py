"""Hello: the smallest wren app, with a logging handler around it.

The global chain is ``RequestLogger -> ExceptionHandler ->
ParameterHandler``: every request is logged on the way in and on the
way out, failures are translated, and the view's arguments are bound.

Serve it with any ASGI server, e.g.::

    uvicorn app:app
"""

import logging
import time
from typing import Annotated, Any

from wren import (
    App,
    BaseHandler,
    ExceptionHandler,
    Next,
    ParameterHandler,
    PathVariable,
    get,
    view,
)

logger = logging.getLogger("hello")


class RequestLogger(BaseHandler):
    """Logs each request before the view runs and its status after."""

    async def handle(self, next: Next) -> Any:
        logger.info("-> %s %s", self.request.method, self.request.url)
        start = time.perf_counter()
        try:
            return await next()
        finally:
            logger.info(
                "<- %s %s %d (%.1f ms)",
                self.request.method,
                self.request.url,
                self.response.status,
                (time.perf_counter() - start) * 1000,
            )


@view()
class HelloView:
    @get()
    def index(self) -> str:
        return "Hello, world!"

    @get("/hello/{{name}}")
    async def greet(self, name: Annotated[str, PathVariable()]) -> dict[str, str]:
        return {"greeting": f"Hello, {name}!"}


app = App(views=[HelloView])
app.add_handler(RequestLogger)
app.add_handler(ExceptionHandler)
app.add_handler(ParameterHandler)
