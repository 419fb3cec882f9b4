"""Wren exception hierarchy.

Shared across Router, App, the handler chain, and views so every module
raises and catches the same types.
"""

from dataclasses import dataclass
from typing import Any


class WrenError(Exception):
    """Base for all wren-specific errors."""


class ConfigurationError(WrenError):
    """Raised when app configuration is invalid.

    Typically caught during ``App._freeze()`` at startup.
    """


class ClientDisconnect(WrenError):
    """The client went away before the request body was fully received."""


@dataclass(frozen=True, slots=True)
class HTTPError(WrenError):
    """An error that maps directly to an HTTP status code.

    Raised by views and handlers. ``ExceptionHandler`` catches these,
    applies ``status``, ``detail`` (as the status message) and ``headers``
    to the response, and writes ``content`` as the body. When ``content``
    is ``None`` the detail text is written instead.
    """

    status: int
    detail: str = ""
    content: Any = None
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class BadRequest(HTTPError):  # noqa: N818
    """400: the request could not be turned into view arguments."""

    def __init__(self, detail: str = "Bad Request", content: Any = None) -> None:
        super().__init__(status=400, detail=detail, content=content)


class NotFound(HTTPError):  # noqa: N818
    """404: no route resolves for the request method and path.

    Carries both so the failure can be logged and inspected.
    """

    def __init__(self, method: str, path: str, content: Any = None) -> None:
        super().__init__(status=404, detail=f"Can't {method} {path}", content=content)
        object.__setattr__(self, "method", method)
        object.__setattr__(self, "path", path)
