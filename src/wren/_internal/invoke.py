"""Invoke helpers — call sync or async callables uniformly.

Wren middleware and handlers can be ``def`` or ``async def``. Any code
that calls a user-provided callable must handle both cases. This module
provides a single helper so the sync/async check lives in exactly one place.

Usage::

    from wren._internal.invoke import invoke

    result = await invoke(handler, ctx)
"""

import inspect
from typing import Any


async def invoke(fn: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *fn* and await the result if it's awaitable."""
    result = fn(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
