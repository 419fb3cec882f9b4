"""Raw ASGI shapes, as the server hands them to the app.

Handlers and views never see these; they work with ``Request`` and
``Response``.
"""

from collections.abc import Awaitable, Callable, MutableMapping
from typing import Any

type Message = MutableMapping[str, Any]
type Scope = MutableMapping[str, Any]
type Receive = Callable[[], Awaitable[Message]]
type Send = Callable[[Message], Awaitable[None]]
