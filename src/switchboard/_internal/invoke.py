"""Invoke helper — call sync or async handlers uniformly.

Switchboard handlers can be ``def`` or ``async def``. The dispatcher
runs every handler through this helper so the sync/async check lives
in exactly one place.

Usage::

    from switchboard._internal.invoke import invoke

    await invoke(handler, request, respond)
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a handler and await the result if it's awaitable.

    Works with both sync and async callables::

        # sync handler
        def ping(request, respond):
            respond(200)

        # async handler; may suspend before responding
        async def users(request, respond):
            record = await load(request.query["id"])
            respond(200, record)
    """
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
