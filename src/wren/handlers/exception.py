"""Exception translation: the chain's mandatory safety net.

Wraps everything after it. ``HTTPError`` becomes its own status, message,
headers, and content; any other exception is logged with its traceback
and answered with status 500 and a fixed fallback body, so internal
detail never reaches the client.
"""

import json
import logging
from typing import Any

from wren.errors import HTTPError
from wren.handlers.base import BaseHandler, Next
from wren.http.response import reason_phrase

logger = logging.getLogger("wren.handlers")


def to_wire(body: Any) -> str | bytes:
    """Text and bytes pass through; anything else becomes JSON text."""
    if isinstance(body, (str, bytes)):
        return body
    return json.dumps(body)


class ExceptionHandler(BaseHandler):
    """Translate failures from the rest of the chain into responses.

    The 500 fallback body comes from handler options
    (``app.add_handler(ExceptionHandler, {"response": ...})``), else from
    ``AppConfig.exception_response``.
    """

    __slots__ = ()

    @property
    def fallback(self) -> Any:
        options = self.options
        if isinstance(options, dict) and "response" in options:
            return options["response"]
        return self.app.config.exception_response

    async def handle(self, next: Next) -> Any:  # noqa: A002
        try:
            return await next()
        except HTTPError as exc:
            logger.error(
                "HTTP %d %s %s: %s %r",
                exc.status,
                self.request.method,
                self.request.url,
                exc.detail,
                exc.content,
                exc_info=self.app.config.debug,
            )
            self.response.status = exc.status
            self.response.message = exc.detail or reason_phrase(exc.status)
            if exc.content is None:
                self.response.set_header("content-type", "text/plain; charset=utf-8")
            for name, value in exc.headers:
                self.response.set_header(name, value)
            body = exc.content if exc.content is not None else exc.detail
        except Exception:
            logger.exception("500 %s %s", self.request.method, self.request.url)
            self.response.status = 500
            self.response.message = reason_phrase(500)
            body = self.fallback
        try:
            return to_wire(body)
        except (TypeError, ValueError):
            logger.exception(
                "Cannot serialize the %d body for %s %s",
                self.response.status,
                self.request.method,
                self.request.url,
            )
            self.response.status = 500
            self.response.message = reason_phrase(500)
            return to_wire(self.fallback)
