"""Compiled router with trie-based path matching.

Routes are registered while the app is being set up and compiled into
an immutable lookup structure when the app freezes.
"""

from wren.errors import ConfigurationError
from wren.routing.route import Route, split_path


class _TrieNode:
    """A node in the route trie. Mutable during compilation only."""

    __slots__ = ("children", "routes_by_method", "variable_child")

    def __init__(self) -> None:
        # Static segment children: "users" -> node
        self.children: dict[str, _TrieNode] = {}
        # Single variable child (one variable per level)
        self.variable_child: _TrieNode | None = None
        # Routes at this node, keyed by HTTP method
        self.routes_by_method: dict[str, Route] = {}


class Router:
    """Compiled router with trie-based path matching.

    Usage::

        router = Router()
        router.add(route)
        router.compile()
        route = router.resolve("GET", "/user/42")  # Route or None
    """

    __slots__ = ("_compiled", "_root")

    def __init__(self) -> None:
        self._root = _TrieNode()
        self._compiled = False

    def add(self, route: Route) -> None:
        """Add a route to the router. Must be called before compile()."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        node = self._root
        for segment in route.template.segments:
            if segment.is_variable:
                if node.variable_child is None:
                    node.variable_child = _TrieNode()
                node = node.variable_child
            else:
                node = node.children.setdefault(segment.value, _TrieNode())

        existing = node.routes_by_method.get(route.method)
        if existing is not None:
            msg = f"Duplicate route: {route} conflicts with {existing}."
            raise ConfigurationError(msg)
        node.routes_by_method[route.method] = route

    @property
    def routes(self) -> list[Route]:
        """Return all registered routes, depth-first."""
        result: list[Route] = []
        self._collect_routes(self._root, result)
        return result

    def _collect_routes(self, node: _TrieNode, result: list[Route]) -> None:
        result.extend(node.routes_by_method.values())
        for child in node.children.values():
            self._collect_routes(child, result)
        if node.variable_child is not None:
            self._collect_routes(node.variable_child, result)

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def resolve(self, method: str, path: str) -> Route | None:
        """Return the route for *method* and *path*, or ``None``.

        *path* may carry a query string; it is ignored for matching.
        Static segments win over variables at the same depth.
        """
        node = self._match_node(self._root, split_path(path), 0, method)
        if node is None:
            return None
        return node.routes_by_method[method]

    def _match_node(
        self,
        node: _TrieNode,
        parts: list[str],
        index: int,
        method: str,
    ) -> _TrieNode | None:
        """Recursively match path parts against the trie."""
        if index == len(parts):
            if method in node.routes_by_method:
                return node
            return None

        part = parts[index]

        # 1. Try static child first (exact match)
        if part in node.children:
            result = self._match_node(node.children[part], parts, index + 1, method)
            if result is not None:
                return result

        # 2. Try variable child
        if node.variable_child is not None:
            return self._match_node(node.variable_child, parts, index + 1, method)

        return None
