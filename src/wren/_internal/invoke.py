"""Invoke helpers: call sync or async view methods uniformly.

View methods can be ``def`` or ``async def``. Any code that calls a
user-provided callable must handle both cases. This module provides a
single helper so the sync/async check lives in exactly one place.

Usage::

    from wren._internal.invoke import invoke

    result = await invoke(route.target, *args)
"""

import inspect
from typing import Any


async def invoke(target: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *target* and await the result if it is awaitable."""
    result = target(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
