"""API: a JSON REST API over an in-memory item store.

Shows path variables, query parameters, JSON bodies, ``BaseResponse``
for status and headers, ``HTTPError`` for failures, and a route-local
handler that guards the write endpoints with a token header.

Serve it with any ASGI server, e.g.::

    uvicorn app:app
"""

import threading
from dataclasses import asdict, dataclass
from typing import Annotated, Any

from wren import (
    App,
    AppConfig,
    BaseHandler,
    BaseResponse,
    HTTPError,
    Next,
    PathQuery,
    PathVariable,
    RequestBody,
    delete,
    get,
    handler,
    post,
    put,
    view,
)

# ---------------------------------------------------------------------------
# In-memory storage
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Item:
    id: int
    title: str
    done: bool = False


_items: dict[int, Item] = {}
_next_id = 1
_lock = threading.Lock()


def _get_next_id() -> int:
    global _next_id
    with _lock:
        n = _next_id
        _next_id += 1
        return n


def _find(item_id: str) -> Item:
    with _lock:
        item = _items.get(int(item_id)) if item_id.isdigit() else None
    if item is None:
        raise HTTPError(status=404, detail="Item not found", content={"error": "not found"})
    return item


def _title(payload: Any) -> str:
    title = payload.get("title") if isinstance(payload, dict) else None
    if not isinstance(title, str) or not title.strip():
        raise HTTPError(status=422, detail="Invalid item", content={"error": "title required"})
    return title.strip()


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


class TokenAuth(BaseHandler):
    """Rejects the request unless ``X-Token`` matches the configured token."""

    async def handle(self, next: Next) -> Any:
        if self.request.headers.get("x-token") != self.options["token"]:
            raise HTTPError(
                status=401,
                detail="Unauthorized",
                content={"error": "unauthorized"},
                headers=(("www-authenticate", "Token"),),
            )
        return await next()


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------


@view("/api/items")
class ItemView:
    @get()
    def list_items(
        self,
        limit: Annotated[str | None, PathQuery()],
        offset: Annotated[str | None, PathQuery()],
    ) -> dict[str, Any]:
        """List items, paged with ``?limit=`` and ``?offset=``."""
        size = min(max(int(limit or 50), 1), 100)
        start = max(int(offset or 0), 0)
        with _lock:
            everything = sorted(_items.values(), key=lambda i: i.id)
        page = everything[start : start + size]
        return {
            "data": [asdict(i) for i in page],
            "meta": {"limit": size, "offset": start, "total": len(everything)},
        }

    @get("/{{item_id}}")
    def get_item(self, item_id: Annotated[str, PathVariable()]) -> dict[str, Any]:
        return asdict(_find(item_id))

    @post()
    @handler(TokenAuth, {"token": "secret"})
    async def create_item(self, payload: Annotated[Any, RequestBody()]) -> BaseResponse:
        item = Item(id=_get_next_id(), title=_title(payload))
        with _lock:
            _items[item.id] = item
        return BaseResponse(asdict(item), status=201, message="Created").with_header(
            "location", f"/api/items/{item.id}"
        )

    @put("/{{item_id}}")
    @handler(TokenAuth)
    async def update_item(
        self,
        item_id: Annotated[str, PathVariable()],
        payload: Annotated[Any, RequestBody()],
    ) -> dict[str, Any]:
        current = _find(item_id)
        done = payload.get("done", current.done) if isinstance(payload, dict) else current.done
        item = Item(id=current.id, title=_title(payload), done=bool(done))
        with _lock:
            _items[item.id] = item
        return asdict(item)

    @delete("/{{item_id}}")
    @handler(TokenAuth)
    def delete_item(self, item_id: Annotated[str, PathVariable()]) -> BaseResponse:
        item = _find(item_id)
        with _lock:
            _items.pop(item.id, None)
        return BaseResponse(status=204, message="No Content")


app = App(AppConfig(exception_response={"error": "internal"}), views=[ItemView])
