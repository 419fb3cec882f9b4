"""Parameter injection vocabulary.

A view method declares how each of its arguments is produced by
annotating the parameter with a marker::

    from typing import Annotated

    @get("/{{id}}")
    async def show(
        self,
        id: Annotated[str, PathVariable()],
        verbose: Annotated[str | None, PathQuery("v")],
        payload: Annotated[dict, RequestBody()],
    ): ...

Each marker is a ``ParamInjection``: a closed ``InjectionKind`` plus the
key it applies to. Markers created without a key take the parameter
name when the app builds its metadata table.
"""

from dataclasses import dataclass
from enum import Enum


class InjectionKind(Enum):
    """How one bound argument is produced."""

    HTTP_REQUEST = "http_request"
    HTTP_RESPONSE = "http_response"
    PATH_QUERY = "path_query"
    PATH_VARIABLE = "path_variable"
    REQUEST_BODY = "request_body"
    REQUEST_HEADER = "request_header"


# Kinds whose key defaults to the parameter name
KEYED_KINDS = frozenset(
    {InjectionKind.PATH_QUERY, InjectionKind.PATH_VARIABLE, InjectionKind.REQUEST_HEADER}
)


@dataclass(frozen=True, slots=True)
class ParamInjection:
    """One declared argument binding: *kind* applied to *key*.

    For ``REQUEST_BODY`` the key is an optional content-type override.
    """

    kind: InjectionKind
    key: str | None = None


# -- Markers --


def HTTPRequest() -> ParamInjection:  # noqa: N802
    """Inject the live ``Request``."""
    return ParamInjection(InjectionKind.HTTP_REQUEST)


def HTTPResponse() -> ParamInjection:  # noqa: N802
    """Inject the live ``Response`` (to set status or headers)."""
    return ParamInjection(InjectionKind.HTTP_RESPONSE)


def PathQuery(key: str | None = None) -> ParamInjection:  # noqa: N802
    """Inject the query-string value for *key*, or ``None``."""
    return ParamInjection(InjectionKind.PATH_QUERY, key)


def PathVariable(key: str | None = None) -> ParamInjection:  # noqa: N802
    """Inject the path segment captured by ``{{key}}`` in the route path."""
    return ParamInjection(InjectionKind.PATH_VARIABLE, key)


def RequestBody(content_type: str | None = None) -> ParamInjection:  # noqa: N802
    """Inject the decoded request body.

    *content_type* overrides the request's ``Content-Type`` header when
    choosing the decoder.
    """
    return ParamInjection(InjectionKind.REQUEST_BODY, content_type)


def RequestHeader(key: str | None = None) -> ParamInjection:  # noqa: N802
    """Inject the request header *key* (``None``, a string, or a list if repeated)."""
    return ParamInjection(InjectionKind.REQUEST_HEADER, key)
