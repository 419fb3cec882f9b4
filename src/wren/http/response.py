"""Mutable outgoing HTTP response.

One ``Response`` is created per request and shared by every handler in
the chain, so any layer can set the status or a header before the body
is written. The body itself is whatever the chain settles with; the
sender turns the pair into ASGI messages.
"""

from collections.abc import Iterable
from http import HTTPStatus

type HeaderValue = str | int | Iterable[str]


def reason_phrase(status: int) -> str:
    """Standard reason phrase for *status*, or an empty string."""
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return ""


class Response:
    """Status, status message, and headers for one request.

    Header names are case-insensitive; ``set_header`` replaces any
    previous value. A list value is sent as repeated header lines.
    """

    __slots__ = ("_headers", "message", "status")

    def __init__(self, status: int = 200, message: str | None = None) -> None:
        self.status = status
        self.message = message if message is not None else reason_phrase(status)
        # lowercase name -> (original name, values)
        self._headers: dict[str, tuple[str, tuple[str, ...]]] = {}

    def __repr__(self) -> str:
        return f"Response(status={self.status}, message={self.message!r})"

    def set_header(self, name: str, value: HeaderValue) -> None:
        """Set *name* to *value*, replacing any existing value."""
        if isinstance(value, (str, int)):
            values: tuple[str, ...] = (str(value),)
        else:
            values = tuple(str(v) for v in value)
        self._headers[name.lower()] = (name, values)

    def get_header(self, name: str) -> str | None:
        """Return the first value of *name*, or ``None``."""
        entry = self._headers.get(name.lower())
        if entry is None or not entry[1]:
            return None
        return entry[1][0]

    def has_header(self, name: str) -> bool:
        return name.lower() in self._headers

    def remove_header(self, name: str) -> None:
        self._headers.pop(name.lower(), None)

    @property
    def headers(self) -> tuple[tuple[str, str], ...]:
        """Every header line as ``(name, value)`` pairs, in set order."""
        return tuple(
            (name, value) for name, values in self._headers.values() for value in values
        )

    @property
    def content_type(self) -> str | None:
        return self.get_header("content-type")
