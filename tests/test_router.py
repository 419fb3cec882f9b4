"""Tests for wren.routing: path templates and the trie router."""

import pytest

from wren.errors import ConfigurationError
from wren.routing import PathTemplate, Route, Router
from wren.routing.route import parse_path, split_path


class _View:
    pass


def _route(path: str, method: str = "GET", name: str = "target") -> Route:
    return Route(method=method, path=path, view=_View, name=name, target=lambda: name)


def _router(*routes: Route) -> Router:
    router = Router()
    for r in routes:
        router.add(r)
    router.compile()
    return router


class TestParsePath:
    def test_static(self) -> None:
        segments = parse_path("/api/v2/users")
        assert [s.value for s in segments] == ["api", "v2", "users"]
        assert not any(s.is_variable for s in segments)

    def test_variable(self) -> None:
        segments = parse_path("/user/{{id}}")
        assert segments[1].is_variable
        assert segments[1].variable == "id"

    def test_root(self) -> None:
        assert parse_path("/") == ()

    def test_empty_variable_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="Empty path variable"):
            parse_path("/user/{{}}")

    @pytest.mark.parametrize("path", ["/user/{id}", "/user/{{id}", "/user/x{{id}}"])
    def test_malformed_braces_rejected(self, path: str) -> None:
        with pytest.raises(ConfigurationError, match="malformed"):
            parse_path(path)

    def test_split_ignores_query_and_fragment(self) -> None:
        assert split_path("/a/b/?x=1#top") == ["a", "b"]


class TestPathTemplate:
    def test_match_captures(self) -> None:
        template = PathTemplate.compile("/pair/{{a}}/{{b}}")
        assert template.variables == ("a", "b")
        assert template.match("/pair/1/2") == {"a": "1", "b": "2"}

    def test_match_static(self) -> None:
        assert PathTemplate.compile("/health").match("/health") == {}

    def test_no_match(self) -> None:
        template = PathTemplate.compile("/user/{{id}}")
        assert template.match("/user") is None
        assert template.match("/users/1") is None
        assert template.match("/user/1/extra") is None


class TestRoute:
    def test_template_compiled(self) -> None:
        route = _route("/user/{{id}}")
        assert route.template.variables == ("id",)

    def test_str(self) -> None:
        assert str(_route("/x", name="show")) == "GET /x -> _View.show"


class TestRouterResolve:
    def test_static(self) -> None:
        router = _router(_route("/"), _route("/health", name="health"))
        found = router.resolve("GET", "/health")
        assert found is not None
        assert found.name == "health"
        assert router.resolve("GET", "/").name == "target"

    def test_variable(self) -> None:
        router = _router(_route("/user/{{id}}"))
        assert router.resolve("GET", "/user/42") is not None

    def test_static_wins_over_variable(self) -> None:
        router = _router(_route("/user/{{id}}", name="show"), _route("/user/me", name="me"))
        assert router.resolve("GET", "/user/me").name == "me"
        assert router.resolve("GET", "/user/7").name == "show"

    def test_backtracks_to_variable(self) -> None:
        router = _router(
            _route("/user/me/settings", name="settings"),
            _route("/user/{{id}}/posts", name="posts"),
        )
        assert router.resolve("GET", "/user/me/posts").name == "posts"

    def test_query_ignored(self) -> None:
        router = _router(_route("/search"))
        assert router.resolve("GET", "/search?q=x") is not None

    def test_unknown_path_is_none(self) -> None:
        assert _router(_route("/a")).resolve("GET", "/b") is None

    def test_unknown_method_is_none(self) -> None:
        assert _router(_route("/a")).resolve("POST", "/a") is None

    def test_methods_share_path(self) -> None:
        router = _router(_route("/a", "GET", "read"), _route("/a", "POST", "write"))
        assert router.resolve("POST", "/a").name == "write"
        assert len(router.routes) == 2


class TestRouterRegistration:
    def test_duplicate_rejected(self) -> None:
        router = Router()
        router.add(_route("/a"))
        with pytest.raises(ConfigurationError, match="Duplicate route"):
            router.add(_route("/a/"))

    def test_duplicate_variable_names_still_conflict(self) -> None:
        router = Router()
        router.add(_route("/user/{{id}}"))
        with pytest.raises(ConfigurationError):
            router.add(_route("/user/{{name}}"))

    def test_add_after_compile(self) -> None:
        router = _router()
        with pytest.raises(RuntimeError):
            router.add(_route("/late"))
