"""ASGI handler — the unified request pipeline.

The only component that touches raw ASGI directly. Collects and decodes
the body, builds the ``RequestDescriptor``, resolves a handler through the
``RouteTable``, runs it as a cancellable task, and emits exactly one
response whatever the handler does.
"""

import asyncio
import logging
from collections.abc import Callable

from switchboard._internal.asgi import Receive, Scope, Send
from switchboard._internal.invoke import invoke
from switchboard.errors import HTTPError
from switchboard.http.body import collect_body, parse_json_object
from switchboard.http.request import RequestDescriptor, normalize_path
from switchboard.http.response import HandlerResult, Response
from switchboard.routing.table import RouteTable
from switchboard.server.errors import (
    handle_handler_failure,
    handle_handler_timeout,
    handle_http_error,
)
from switchboard.server.responder import Responder
from switchboard.server.sender import emit

logger = logging.getLogger("switchboard.server")


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    table: RouteTable,
    handler_timeout: float | None = 30.0,
    max_body_size: int | None = None,
) -> Response | None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return None

    method = scope["method"].lower()
    path = normalize_path(scope.get("path", ""))

    try:
        text = await collect_body(receive, max_size=max_body_size)
    except HTTPError as exc:
        return await emit(send, method, path, handle_http_error(exc, method, path))

    request = RequestDescriptor.from_asgi(scope, parse_json_object(text))
    handler = table.resolve(request.path)
    result = await dispatch(handler, request, timeout=handler_timeout)
    return await emit(send, request.method, request.path, result)


async def dispatch(
    handler: object,
    request: RequestDescriptor,
    *,
    timeout: float | None = 30.0,
) -> HandlerResult:
    """Invoke *handler* and wait for its single response.

    The handler runs in its own task, so a failure raised before or after
    it suspends is caught here. Whichever comes first wins: the handler's
    ``respond`` call, its failure (500), or the timeout (504).
    """
    respond = Responder(request.method, request.path)
    task = asyncio.ensure_future(invoke(handler, request, respond))

    try:
        return await asyncio.wait_for(_first_outcome(task, request, respond), timeout)
    except TimeoutError:
        task.cancel()
        if not respond.responded:
            respond.resolve(handle_handler_timeout(request, timeout))
        return respond.future.result()


async def _first_outcome(
    task: "asyncio.Future[object]",
    request: RequestDescriptor,
    respond: Responder,
) -> HandlerResult:
    """Wait for a response; a handler failure that comes first becomes the 500."""
    await asyncio.wait({task, respond.future}, return_when=asyncio.FIRST_COMPLETED)
    if respond.responded:
        # The handler may keep working after it responds; log what it raises later.
        task.add_done_callback(_log_late_failure(respond))
        return respond.future.result()
    # Finished without responding: a failure answers now, otherwise wait
    # for a respond() the handler scheduled elsewhere. A handler that lets
    # a CancelledError escape has failed too.
    try:
        task.result()
    except (Exception, asyncio.CancelledError) as exc:
        respond.resolve(handle_handler_failure(exc, request))
    return await respond.future


def _log_late_failure(respond: Responder) -> Callable[["asyncio.Future[object]"], None]:
    def callback(task: "asyncio.Future[object]") -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Handler for %s /%s failed after responding",
                respond.method,
                respond.path,
                exc_info=exc,
            )

    return callback
