"""ASGI response sending: turns the settled chain value into ASGI messages.

Buffered values (text, bytes, JSON-able data) are sent as one body with
a content length. Iterators and async iterators of chunks are passed
through with chunked transfer encoding.
"""

import json
import logging
from collections.abc import AsyncIterable, Iterator
from typing import Any

from wren._internal.asgi import Send
from wren.http.response import Response, reason_phrase
from wren.responses import BaseResponse

logger = logging.getLogger("wren.server")

type Chunks = Iterator[str | bytes] | AsyncIterable[str | bytes]


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


def _encode(chunk: str | bytes) -> bytes:
    return chunk.encode("utf-8") if isinstance(chunk, str) else chunk


def is_stream(value: Any) -> bool:
    """True for generators, iterators, and async iterables of chunks."""
    if isinstance(value, (str, bytes, bytearray, dict, list, tuple)):
        return False
    return isinstance(value, (Iterator, AsyncIterable))


def apply_envelope(value: BaseResponse, response: Response) -> Any:
    """Copy a ``BaseResponse``'s status and headers onto *response*; return its data."""
    response.status = value.status
    response.message = value.message or reason_phrase(value.status)
    for name, header_value in value.headers:
        response.set_header(name, header_value)
    return value.data


def encode_body(value: Any, response: Response) -> bytes:
    """Serialize a buffered value, filling in a content type if none was set."""
    if value is None:
        return b""
    if isinstance(value, str):
        if not response.has_header("content-type"):
            response.set_header("content-type", "text/plain; charset=utf-8")
        return value.encode("utf-8")
    if isinstance(value, (bytes, bytearray)):
        if not response.has_header("content-type"):
            response.set_header("content-type", "application/octet-stream")
        return bytes(value)
    if not response.has_header("content-type"):
        response.set_header("content-type", "application/json")
    return json.dumps(value).encode("utf-8")


def _raw_headers(response: Response) -> list[tuple[bytes, bytes]]:
    return [
        (name.lower().encode("latin-1"), value.encode("latin-1"))
        for name, value in response.headers
    ]


async def send_value(
    value: Any,
    response: Response,
    send: Send,
    *,
    fallback: Any = None,
) -> None:
    """Write whatever the chain settled with to the client, then close.

    A buffered value that cannot be serialized is logged and replaced by
    a 500 response carrying *fallback*.
    """
    if isinstance(value, BaseResponse):
        value = apply_envelope(value, response)
    if is_stream(value):
        await send_streaming_response(response, value, send)
        return
    try:
        body = encode_body(value, response)
    except (TypeError, ValueError):
        logger.exception("Cannot serialize the %d response body", response.status)
        response = Response(500)
        body = encode_body(fallback, response)
    await send_response(response, body, send)


async def send_response(response: Response, body: bytes, send: Send) -> None:
    """Send *response* with a fully buffered *body*."""
    raw_headers = _raw_headers(response)
    if not _body_allowed(response.status):
        body = b""
    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": body,
        }
    )


async def send_streaming_response(response: Response, chunks: Chunks, send: Send) -> None:
    """Send a streaming body via chunked transfer encoding.

    Sends headers immediately, then each chunk as an ASGI body message
    with ``more_body=True``. Closes with an empty body, also when the
    stream fails part-way (the failure is logged; the status is already
    on the wire).
    """
    if not response.has_header("content-type"):
        response.set_header("content-type", "application/octet-stream")
    raw_headers = _raw_headers(response)
    raw_headers.append((b"transfer-encoding", b"chunked"))

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )

    try:
        if isinstance(chunks, AsyncIterable):
            async for chunk in chunks:
                if chunk:
                    await send(
                        {"type": "http.response.body", "body": _encode(chunk), "more_body": True}
                    )
        else:
            for chunk in chunks:
                if chunk:
                    await send(
                        {"type": "http.response.body", "body": _encode(chunk), "more_body": True}
                    )
    except Exception:
        logger.exception("Stream failed after the response started")

    await send(
        {
            "type": "http.response.body",
            "body": b"",
            "more_body": False,
        }
    )
