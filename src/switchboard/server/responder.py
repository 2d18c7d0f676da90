"""The single-use ``respond`` callback handed to every handler.

A handler answers by calling ``respond(status, payload, content_type)``.
The first call wins; later calls are logged and ignored so a request can
never produce two responses.
"""

import asyncio
import logging
from typing import Any

from switchboard.http.response import HandlerResult

logger = logging.getLogger("switchboard.server")


class Responder:
    """Callable that records exactly one ``HandlerResult`` per request.

    Safe to call from the handler's own task, from a callback scheduled on
    the loop, or after the handler coroutine has returned.
    """

    __slots__ = ("_future", "method", "path")

    def __init__(self, method: str, path: str) -> None:
        self.method = method
        self.path = path
        self._future: asyncio.Future[HandlerResult] = asyncio.get_running_loop().create_future()

    def __call__(
        self,
        status: int | None = None,
        payload: Any = None,
        content_type: Any = None,
    ) -> None:
        self.resolve(HandlerResult.create(status, payload, content_type))

    def resolve(self, result: HandlerResult) -> None:
        """Record *result* unless a response was already recorded."""
        if self._future.done():
            logger.warning(
                "Handler for %s /%s responded more than once; extra response ignored",
                self.method,
                self.path,
            )
            return
        self._future.set_result(result)

    @property
    def responded(self) -> bool:
        return self._future.done()

    @property
    def future(self) -> "asyncio.Future[HandlerResult]":
        """Resolves with the first result handed to ``respond``."""
        return self._future
