"""Route, PathTemplate, and PathSegment frozen dataclasses."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from wren.errors import ConfigurationError

if TYPE_CHECKING:
    from wren.handlers.base import HandlerType
    from wren.injection import ParamInjection


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route path.

    Static:   ``/users``    (variable=None)
    Variable: ``/{{id}}``   (variable="id")
    """

    value: str
    variable: str | None = None

    @property
    def is_variable(self) -> bool:
        return self.variable is not None


def split_path(path: str) -> list[str]:
    """Split a request path into non-empty segments, ignoring any query."""
    path = path.split("?", 1)[0].split("#", 1)[0]
    return [part for part in path.strip("/").split("/") if part]


def parse_path(path: str) -> tuple[PathSegment, ...]:
    """Parse a route path string into segments.

    Examples::

        "/users"          -> (PathSegment("users"),)
        "/users/{{id}}"   -> (PathSegment("users"), PathSegment("{{id}}", variable="id"))
    """
    segments: list[PathSegment] = []
    for part in split_path(path):
        if part.startswith("{{") and part.endswith("}}"):
            name = part[2:-2].strip()
            if not name:
                msg = f"Empty path variable in route path {path!r}."
                raise ConfigurationError(msg)
            segments.append(PathSegment(value=part, variable=name))
        elif "{" in part or "}" in part:
            msg = (
                f"Route path {path!r} has a malformed segment {part!r}. "
                "Path variables are written as whole segments: /users/{{id}}"
            )
            raise ConfigurationError(msg)
        else:
            segments.append(PathSegment(value=part))
    return tuple(segments)


@dataclass(frozen=True, slots=True)
class PathTemplate:
    """A compiled path template such as ``/user/{{id}}``."""

    pattern: str
    segments: tuple[PathSegment, ...]

    @classmethod
    def compile(cls, pattern: str) -> PathTemplate:
        return cls(pattern=pattern, segments=parse_path(pattern))

    @property
    def variables(self) -> tuple[str, ...]:
        return tuple(s.variable for s in self.segments if s.variable is not None)

    def match(self, path: str) -> dict[str, str] | None:
        """Capture variable segments of *path*, or ``None`` if it doesn't fit."""
        parts = split_path(path)
        if len(parts) != len(self.segments):
            return None
        captured: dict[str, str] = {}
        for segment, part in zip(self.segments, parts, strict=True):
            if segment.variable is not None:
                captured[segment.variable] = part
            elif segment.value != part:
                return None
        return captured


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route: one HTTP method and path bound to a view method.

    Created when the app freezes and read-shared by every request.
    ``handlers`` is the route-local chain, run after the global chain;
    ``params`` describes how each argument of ``target`` is produced.
    """

    method: str
    path: str
    view: type
    name: str
    target: Callable[..., Any]
    handlers: tuple[HandlerType, ...] = ()
    params: tuple[ParamInjection, ...] = ()
    template: PathTemplate = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "template", PathTemplate.compile(self.path))

    def __str__(self) -> str:
        return f"{self.method} {self.path} -> {self.view.__qualname__}.{self.name}"
