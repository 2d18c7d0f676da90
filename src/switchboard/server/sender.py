"""Response emission — renders handler results and sends them over ASGI.

``render`` applies the per-content-type defaulting table, so a payload of
the wrong shape is replaced by an empty value instead of failing.
``send_response`` writes the start message and the body exactly once.
"""

import json
import logging
from collections.abc import Mapping
from typing import Any

from switchboard._internal.asgi import Send
from switchboard.http.response import ContentType, HandlerResult, Response
from switchboard.server.errors import handle_render_failure

logger = logging.getLogger("switchboard.server")


def _encode(payload: Any) -> bytes:
    if isinstance(payload, bytes):
        return payload
    if isinstance(payload, str):
        return payload.encode("utf-8")
    return b""


def render_body(content_type: ContentType, payload: Any) -> bytes:
    """Serialize *payload* for *content_type*, substituting the documented default.

    - ``json``: a mapping, else ``{}``, as JSON text.
    - ``html``: a string, else ``""``.
    - every other tag: the payload as-is (``str`` or ``bytes``), else ``""``.
    """
    match content_type:
        case ContentType.JSON:
            body = dict(payload) if isinstance(payload, Mapping) else {}
            return json.dumps(body, separators=(",", ":"), default=str).encode("utf-8")
        case ContentType.HTML:
            return payload.encode("utf-8") if isinstance(payload, str) else b""
        case (
            ContentType.FAVICON
            | ContentType.CSS
            | ContentType.PNG
            | ContentType.JPG
            | ContentType.PLAIN
        ):
            return _encode(payload)


def render(result: HandlerResult) -> Response:
    """Translate a ``HandlerResult`` into the response sent on the wire."""
    return Response(
        body=render_body(result.content_type, result.payload),
        status=result.status,
        content_type=result.content_type.mime_type,
    )


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


async def send_response(response: Response, send: Send, *, include_body: bool = True) -> None:
    """Translate a ``Response`` into ASGI send() calls.

    With ``include_body=False`` (HEAD requests) the headers still carry the
    length of the body that a GET would have sent.
    """
    body = response.body if _body_allowed(response.status) else b""
    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": [
                (b"content-type", response.content_type.encode("latin-1")),
                (b"content-length", str(len(body)).encode("latin-1")),
            ],
        }
    )
    await send({"type": "http.response.body", "body": body if include_body else b""})


async def emit(send: Send, method: str, path: str, result: HandlerResult) -> Response:
    """Render *result*, send it, and log the request line.

    A payload that cannot be serialized is replaced by the fixed 500 result.
    """
    try:
        response = render(result)
    except (TypeError, ValueError, RecursionError) as exc:
        response = render(handle_render_failure(exc, method, path))
    await send_response(response, send, include_body=method != "head")
    logger.info("%s /%s -> %d", method, path, response.status)
    return response
