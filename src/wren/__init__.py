"""Wren: a decorator-driven async HTTP service framework.

Requests run through a chain of handler classes: a global chain shared
by every route, then the matched route's own chain, then the view
method. Handler instances are pooled and reused across requests.

Basic usage::

    from typing import Annotated

    from wren import App, PathVariable, get, view

    @view("/greet")
    class GreetView:
        @get("/{{name}}")
        def greet(self, name: Annotated[str, PathVariable()]):
            return {"hello": name}

    app = App(views=[GreetView])  # any ASGI server can serve this
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "BadRequest",
    "BaseHandler",
    "BaseResponse",
    "ConfigurationError",
    "ExceptionHandler",
    "HTTPError",
    "HTTPRequest",
    "HTTPResponse",
    "InjectionKind",
    "Next",
    "NotFound",
    "ParamInjection",
    "ParameterHandler",
    "PathQuery",
    "PathVariable",
    "Redirect",
    "Request",
    "RequestBody",
    "RequestHeader",
    "Response",
    "WrenError",
    "delete",
    "get",
    "handler",
    "head",
    "options",
    "patch",
    "post",
    "put",
    "route",
    "view",
]

_DECORATORS = ("delete", "get", "handler", "head", "options", "patch", "post", "put", "route", "view")
_INJECTION = (
    "HTTPRequest",
    "HTTPResponse",
    "InjectionKind",
    "ParamInjection",
    "PathQuery",
    "PathVariable",
    "RequestBody",
    "RequestHeader",
)
_HANDLERS = ("BaseHandler", "ExceptionHandler", "Next", "ParameterHandler")
_ERRORS = ("BadRequest", "ConfigurationError", "HTTPError", "NotFound", "WrenError")


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wren`` fast while providing a clean top-level API.
    """
    if name == "App":
        from wren.app import App

        return App

    if name == "AppConfig":
        from wren.config import AppConfig

        return AppConfig

    if name == "Request":
        from wren.http.request import Request

        return Request

    if name == "Response":
        from wren.http.response import Response

        return Response

    if name in ("BaseResponse", "Redirect"):
        from wren import responses as _responses

        return getattr(_responses, name)

    if name in _DECORATORS:
        from wren import decorators as _decorators

        return getattr(_decorators, name)

    if name in _INJECTION:
        from wren import injection as _injection

        return getattr(_injection, name)

    if name in _HANDLERS:
        from wren import handlers as _handlers

        return getattr(_handlers, name)

    if name in _ERRORS:
        from wren import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
