"""Fallback results for requests the handler could not answer.

Maps pipeline errors, handler failures, and handler timeouts to the
fixed JSON responses clients see. Diagnostic detail goes to the log,
never into the response body.
"""

import logging

from switchboard.errors import HTTPError
from switchboard.http.request import RequestDescriptor
from switchboard.http.response import ContentType, HandlerResult

logger = logging.getLogger("switchboard.server")

UNKNOWN_ERROR_MESSAGE = "An unknown error has occurred"
TIMEOUT_MESSAGE = "The handler did not respond in time"


def handle_http_error(exc: HTTPError, method: str, path: str) -> HandlerResult:
    """Map a pipeline ``HTTPError`` (e.g. an oversized body) to a JSON result."""
    logger.debug("%d %s /%s: %s", exc.status, method, path, exc.detail)
    return HandlerResult(
        status=exc.status,
        payload={"error": exc.detail or f"Error {exc.status}"},
        content_type=ContentType.JSON,
    )


def handle_handler_failure(
    exc: BaseException, request: RequestDescriptor
) -> HandlerResult:
    """Log a handler failure and return the fixed 500 result."""
    logger.error("500 %s /%s", request.method, request.path, exc_info=exc)
    return HandlerResult(500, {"error": UNKNOWN_ERROR_MESSAGE}, ContentType.JSON)


def handle_render_failure(exc: BaseException, method: str, path: str) -> HandlerResult:
    """Log a payload that could not be serialized and return the fixed 500 result."""
    logger.error("500 %s /%s: response could not be rendered", method, path, exc_info=exc)
    return HandlerResult(500, {"error": UNKNOWN_ERROR_MESSAGE}, ContentType.JSON)


def handle_handler_timeout(
    request: RequestDescriptor, timeout: float | None
) -> HandlerResult:
    """Log a handler that never responded and return the 504 result."""
    logger.error(
        "504 %s /%s: handler did not respond within %ss", request.method, request.path, timeout
    )
    return HandlerResult(504, {"error": TIMEOUT_MESSAGE}, ContentType.JSON)
