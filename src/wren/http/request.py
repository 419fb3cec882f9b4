"""Immutable HTTP request.

Frozen metadata with async body access. The request is honest about
what it is: received data that doesn't change.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from dataclasses import dataclass, field
from typing import Any

import anyio

from wren._internal.asgi import Receive, Scope
from wren.errors import ClientDisconnect
from wren.http.headers import Headers
from wren.http.query import QueryParams


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Metadata (method, path, headers, query) is frozen at creation.
    The body is read asynchronously via ``.body()`` and cached, so any
    number of handlers and bindings may ask for it.
    """

    method: str
    path: str
    headers: Headers
    query: QueryParams
    http_version: str = "1.1"
    client: tuple[str, int] | None = None

    # Private: ASGI receive callable for body streaming
    _receive: Receive | None = field(default=None, repr=False, compare=False)

    # Private: seconds allowed for the whole body read (None = no limit)
    _body_timeout: float | None = field(default=None, repr=False, compare=False)

    # Private: mutable cache for the body bytes
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def url(self) -> str:
        """Request target as sent: path plus query string."""
        if self.query.raw:
            return f"{self.path}?{self.query.raw}"
        return self.path

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    async def body(self) -> bytes:
        """Read the full request body.

        Result is cached: the ASGI receive is consumed once, then the
        same bytes are returned on subsequent calls.

        Raises ``ClientDisconnect`` if the client goes away mid-body and
        ``TimeoutError`` if the body does not arrive within the configured
        deadline.
        """
        if "_body" in self._cache:
            return self._cache["_body"]
        with anyio.fail_after(self._body_timeout):
            chunks = [chunk async for chunk in self.stream()]
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncGenerator[bytes]:
        """Stream the request body in chunks."""
        if self._receive is None:
            return
        while True:
            message = await self._receive()
            if message["type"] == "http.disconnect":
                raise ClientDisconnect("client disconnected while sending the body")
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    async def text(self) -> str:
        """Read the body as text (UTF-8)."""
        raw = await self.body()
        return raw.decode("utf-8")

    @classmethod
    def from_asgi(
        cls,
        scope: Scope,
        receive: Receive,
        *,
        body_timeout: float | None = None,
    ) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers(tuple(scope.get("headers", ()))),
            query=QueryParams(scope.get("query_string", b"")),
            http_version=scope.get("http_version", "1.1"),
            client=tuple(client) if client else None,
            _receive=receive,
            _body_timeout=body_timeout,
        )
