"""Response values a view can return.

A view normally returns plain data (text, bytes, a dict, a stream). When
it also needs to choose the status or headers, it returns a
``BaseResponse`` wrapping that data; the dispatcher applies the envelope
to the outgoing response and writes ``data`` by the usual rules.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any


@dataclass(frozen=True, slots=True)
class BaseResponse:
    """Data plus the status line and headers to send it with.

    Chain ``.with_*()`` calls to adjust it; each returns a new value::

        return BaseResponse({"id": 7}, status=201).with_header("Location", "/users/7")
    """

    data: Any = None
    status: int = 200
    message: str = "OK"
    headers: tuple[tuple[str, str], ...] = ()

    def with_status(self, status: int, message: str | None = None) -> BaseResponse:
        """Return a copy with a different status (and optionally message)."""
        if message is None:
            return replace(self, status=status)
        return replace(self, status=status, message=message)

    def with_header(self, name: str, value: str) -> BaseResponse:
        """Return a copy with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))


def Redirect(  # noqa: N802
    url: str,
    *,
    temporarily: bool = False,
    data: Any = None,
    headers: tuple[tuple[str, str], ...] = (),
) -> BaseResponse:
    """A redirect to *url*: 302 Found if *temporarily*, else 301 Moved Permanently."""
    if temporarily:
        status, message = 302, "Found"
    else:
        status, message = 301, "Moved Permanently"
    return BaseResponse(
        data=data,
        status=status,
        message=message,
        headers=(*headers, ("location", url)),
    )
