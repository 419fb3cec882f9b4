"""Tests for wren.handlers.exception: failure translation and logging."""

import json
import logging
from typing import Any

import pytest

from wren.app import App
from wren.config import AppConfig
from wren.decorators import get, view
from wren.errors import BadRequest, HTTPError
from wren.handlers.exception import ExceptionHandler, to_wire
from wren.handlers.parameter import ParameterHandler
from wren.testing import TestClient


class Teapot(HTTPError):
    def __init__(self) -> None:
        super().__init__(
            status=418,
            detail="I'm a teapot",
            content={"brew": "coffee"},
            headers=(("x-pot", "tea"),),
        )


@view()
class FailingView:
    @get("/ok")
    def ok(self) -> dict[str, Any]:
        return {"ok": True}

    @get("/teapot")
    def teapot(self) -> None:
        raise Teapot

    @get("/text-content")
    def text_content(self) -> None:
        raise HTTPError(status=409, detail="Conflict", content="already exists")

    @get("/bad")
    def bad(self) -> None:
        raise BadRequest("nope")

    @get("/unserializable")
    def unserializable(self) -> None:
        raise HTTPError(status=422, detail="Invalid", content={"ids": {1, 2}})

    @get("/crash")
    def crash(self) -> None:
        raise RuntimeError("secret internals")


def _app(config: AppConfig | None = None, exception_config: Any = None) -> App:
    app = App(config, views=[FailingView])
    app.add_handler(ExceptionHandler, exception_config)
    app.add_handler(ParameterHandler)
    return app


class TestToWire:
    def test_text_passes_through(self) -> None:
        assert to_wire("plain") == "plain"
        assert to_wire(b"raw") == b"raw"

    def test_structures_become_json(self) -> None:
        assert json.loads(to_wire({"status": False})) == {"status": False}


class TestSuccess:
    @pytest.mark.anyio
    async def test_value_passes_through(self) -> None:
        async with TestClient(_app()) as client:
            response = await client.get("/ok")
        assert response.status == 200
        assert response.json() == {"ok": True}


class TestHTTPError:
    @pytest.mark.anyio
    async def test_status_headers_and_content(self) -> None:
        async with TestClient(_app()) as client:
            response = await client.get("/teapot")
        assert response.status == 418
        assert response.header("x-pot") == "tea"
        assert response.json() == {"brew": "coffee"}

    @pytest.mark.anyio
    async def test_text_content_is_not_reencoded(self) -> None:
        async with TestClient(_app()) as client:
            response = await client.get("/text-content")
        assert response.status == 409
        assert response.text == "already exists"

    @pytest.mark.anyio
    async def test_detail_is_body_without_content(self) -> None:
        async with TestClient(_app()) as client:
            response = await client.get("/bad")
        assert response.status == 400
        assert response.text == "nope"
        assert response.header("content-type") == "text/plain; charset=utf-8"

    @pytest.mark.anyio
    async def test_content_keeps_json_type(self) -> None:
        async with TestClient(_app()) as client:
            response = await client.get("/teapot")
        assert response.header("content-type") == "application/json"

    @pytest.mark.anyio
    async def test_unserializable_content_falls_back_to_500(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.ERROR, logger="wren.handlers"):
            async with TestClient(_app()) as client:
                response = await client.get("/unserializable")
        assert response.status == 500
        assert response.json() == {"status": False}
        record = next(r for r in caplog.records if "Cannot serialize" in r.getMessage())
        assert record.getMessage() == "Cannot serialize the 422 body for GET /unserializable"
        assert isinstance(record.exc_info[1], TypeError)

    @pytest.mark.anyio
    async def test_logged_at_error(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.ERROR, logger="wren.handlers"):
            async with TestClient(_app()) as client:
                await client.get("/teapot")
        assert any("HTTP 418 GET /teapot" in r.getMessage() for r in caplog.records)
        assert all(r.exc_info is None for r in caplog.records)

    @pytest.mark.anyio
    async def test_debug_logs_traceback(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.ERROR, logger="wren.handlers"):
            async with TestClient(_app(AppConfig(debug=True))) as client:
                await client.get("/teapot")
        record = next(r for r in caplog.records if "HTTP 418" in r.getMessage())
        assert record.exc_info is not None
        assert isinstance(record.exc_info[1], Teapot)


class TestInternalFailure:
    @pytest.mark.anyio
    async def test_default_fallback_body(self) -> None:
        async with TestClient(_app()) as client:
            response = await client.get("/crash")
        assert response.status == 500
        assert response.json() == {"status": False}
        assert "secret" not in response.text

    @pytest.mark.anyio
    async def test_fallback_from_config(self) -> None:
        app = _app(AppConfig(exception_response="oops"))
        async with TestClient(app) as client:
            response = await client.get("/crash")
        assert response.status == 500
        assert response.text == "oops"

    @pytest.mark.anyio
    async def test_fallback_from_handler_options(self) -> None:
        app = _app(exception_config={"response": {"error": "internal"}})
        async with TestClient(app) as client:
            response = await client.get("/crash")
        assert response.json() == {"error": "internal"}

    @pytest.mark.anyio
    async def test_traceback_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.ERROR, logger="wren.handlers"):
            async with TestClient(_app()) as client:
                await client.get("/crash")
        records = [r for r in caplog.records if r.getMessage() == "500 GET /crash"]
        assert records
        assert records[0].exc_info is not None
        assert "secret internals" in str(records[0].exc_info[1])

    @pytest.mark.anyio
    async def test_handler_failure_below_is_translated(self) -> None:
        from wren.handlers.base import BaseHandler, Next

        class Broken(BaseHandler):
            async def handle(self, next: Next) -> Any:
                raise KeyError("missing")

        app = App(views=[FailingView])
        app.add_handler(ExceptionHandler)
        app.add_handler(Broken)
        async with TestClient(app) as client:
            response = await client.get("/ok")
        assert response.status == 500
