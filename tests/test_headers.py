"""Tests for wren.http.headers: immutable, case-insensitive request headers."""

from wren.http.headers import Headers


def _headers(*pairs: tuple[str, str]) -> Headers:
    return Headers(tuple((k.encode("latin-1"), v.encode("latin-1")) for k, v in pairs))


class TestHeaders:
    def test_case_insensitive(self) -> None:
        headers = _headers(("Content-Type", "text/html"))
        assert headers["content-type"] == "text/html"
        assert headers["CONTENT-TYPE"] == "text/html"
        assert "Content-type" in headers

    def test_missing(self) -> None:
        headers = _headers()
        assert headers.get("x-missing") is None
        assert headers.get("x-missing", "d") == "d"
        assert 42 not in headers

    def test_repeated_values(self) -> None:
        headers = _headers(("accept", "a"), ("Accept", "b"), ("host", "h"))
        assert headers["accept"] == "a"
        assert headers.get_list("ACCEPT") == ["a", "b"]
        assert list(headers) == ["accept", "host"]
        assert len(headers) == 2

    def test_lookup_shapes(self) -> None:
        headers = _headers(("x-one", "1"), ("x-many", "a"), ("x-many", "b"))
        assert headers.lookup("x-none") is None
        assert headers.lookup("x-one") == "1"
        assert headers.lookup("x-many") == ["a", "b"]

    def test_from_dict(self) -> None:
        headers = Headers.from_dict({"X-Token": "abc"})
        assert headers.raw == ((b"x-token", b"abc"),)
        assert headers["x-token"] == "abc"
