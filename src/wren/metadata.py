"""Metadata table: the frozen view of every view declaration.

Built once when the app freezes from the attributes the decorators left
behind, then only read. Answers three questions for the app:

- which routes a view declares (``endpoints``)
- which handler types apply to a view or one of its methods (``handlers``)
- how each argument of a view method is produced (``params``)
"""

from __future__ import annotations

import inspect
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Annotated, Any, get_origin

from wren.decorators import ENDPOINTS_ATTR, HANDLERS_ATTR, VIEW_ATTR
from wren.errors import ConfigurationError
from wren.handlers.base import BaseHandler, HandlerType
from wren.injection import KEYED_KINDS, ParamInjection

type _Target = tuple[type, str | None]


@dataclass(frozen=True, slots=True)
class Endpoint:
    """One declared route of a view: HTTP method, full path, and member name."""

    method: str
    path: str
    member: str


def join_path(prefix: str, path: str) -> str:
    """``("/users", "/{{id}}")`` -> ``"/users/{{id}}"``; always one leading slash."""
    parts = [part.strip("/") for part in (prefix, path) if part.strip("/")]
    return "/" + "/".join(parts)


def is_view(cls: Any) -> bool:
    return isinstance(cls, type) and hasattr(cls, VIEW_ATTR)


def _declared_handlers(target: Any) -> tuple[tuple[HandlerType, Any], ...]:
    declared = getattr(target, HANDLERS_ATTR, ())
    for handler_type, _ in declared:
        if not (isinstance(handler_type, type) and issubclass(handler_type, BaseHandler)):
            msg = f"{handler_type!r} on {target!r} is not a BaseHandler subclass."
            raise ConfigurationError(msg)
    return declared


def injections_for(func: Any) -> tuple[ParamInjection, ...]:
    """Read the ``Annotated`` markers of every parameter after ``self``."""
    sig = inspect.signature(func, eval_str=True)
    params = list(sig.parameters.values())[1:]
    result: list[ParamInjection] = []
    for param in params:
        if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD, param.KEYWORD_ONLY):
            msg = f"{func.__qualname__}: parameter {param.name!r} must be positional."
            raise ConfigurationError(msg)
        marker = None
        if get_origin(param.annotation) is Annotated:
            marker = next(
                (m for m in param.annotation.__metadata__ if isinstance(m, ParamInjection)),
                None,
            )
        if marker is None:
            msg = (
                f"{func.__qualname__}: parameter {param.name!r} has no injection marker. "
                f"Annotate it, e.g. {param.name}: Annotated[str, PathQuery()]"
            )
            raise ConfigurationError(msg)
        if marker.key is None and marker.kind in KEYED_KINDS:
            marker = ParamInjection(marker.kind, param.name)
        result.append(marker)
    return tuple(result)


class Metadata:
    """Immutable lookup of view declarations.

    Usage::

        metadata = Metadata.build([UserView, HealthView])
        metadata.endpoints(UserView)
        metadata.handlers(UserView, "show")   # route-local chain
        metadata.params(UserView, "show")
    """

    __slots__ = ("_endpoints", "_handlers", "_options", "_params")

    def __init__(
        self,
        endpoints: Mapping[type, tuple[Endpoint, ...]],
        handlers: Mapping[_Target, tuple[HandlerType, ...]],
        params: Mapping[_Target, tuple[ParamInjection, ...]],
        options: Mapping[HandlerType, Any],
    ) -> None:
        self._endpoints = MappingProxyType(dict(endpoints))
        self._handlers = MappingProxyType(dict(handlers))
        self._params = MappingProxyType(dict(params))
        self._options = MappingProxyType(dict(options))

    @classmethod
    def build(cls, views: Iterable[type]) -> Metadata:
        """Read decorator attributes from *views* into a frozen table."""
        endpoints: dict[type, tuple[Endpoint, ...]] = {}
        handlers: dict[_Target, tuple[HandlerType, ...]] = {}
        params: dict[_Target, tuple[ParamInjection, ...]] = {}
        options: dict[HandlerType, Any] = {}

        def record(declared: tuple[tuple[HandlerType, Any], ...]) -> tuple[HandlerType, ...]:
            for handler_type, config in declared:
                if config is None:
                    continue
                previous = options.setdefault(handler_type, config)
                if previous != config:
                    msg = f"{handler_type.__qualname__} is configured twice with different options."
                    raise ConfigurationError(msg)
            return tuple(handler_type for handler_type, _ in declared)

        for view_cls in views:
            if not is_view(view_cls):
                msg = f"{view_cls!r} is not a view; decorate it with @view()."
                raise ConfigurationError(msg)
            prefix = getattr(view_cls, VIEW_ATTR)
            handlers[(view_cls, None)] = record(_declared_handlers(view_cls))

            found: list[Endpoint] = []
            for member, func in inspect.getmembers(view_cls, inspect.isfunction):
                declared = getattr(func, ENDPOINTS_ATTR, ())
                if not declared:
                    continue
                for method, path in declared:
                    found.append(Endpoint(method, join_path(prefix, path), member))
                handlers[(view_cls, member)] = record(_declared_handlers(func))
                params[(view_cls, member)] = injections_for(func)
            endpoints[view_cls] = tuple(found)

        return cls(endpoints, handlers, params, options)

    def endpoints(self, target: type) -> tuple[Endpoint, ...]:
        return self._endpoints.get(target, ())

    def handlers(self, target: type, member: str | None = None) -> tuple[HandlerType, ...]:
        """Handler types declared on *target* itself, or on one of its methods."""
        return self._handlers.get((target, member), ())

    def route_handlers(self, target: type, member: str) -> tuple[HandlerType, ...]:
        """The route-local chain for one view method: method handlers, then class handlers."""
        return self.handlers(target, member) + self.handlers(target)

    def params(self, target: type, name: str) -> tuple[ParamInjection, ...]:
        return self._params.get((target, name), ())

    @property
    def options(self) -> Mapping[HandlerType, Any]:
        """Handler configs given through ``@handler(type, config)``."""
        return self._options
