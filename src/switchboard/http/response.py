"""Handler results and wire responses.

A handler answers with a ``HandlerResult`` (status, payload, content-type
tag). The emitter turns that into a ``Response``: the exact status,
content-type header, and body bytes that go over the wire.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class ContentType(StrEnum):
    """The closed set of content-type tags a handler may answer with."""

    JSON = "json"
    HTML = "html"
    FAVICON = "favicon"
    CSS = "css"
    PNG = "png"
    JPG = "jpg"
    PLAIN = "plain"

    @property
    def mime_type(self) -> str:
        """Value sent in the ``Content-Type`` header."""
        return _MIME_TYPES[self]

    @classmethod
    def parse(cls, tag: object) -> "ContentType":
        """Map a tag (member or string) to a member; anything unknown is JSON."""
        if isinstance(tag, cls):
            return tag
        if isinstance(tag, str):
            try:
                return cls(tag.lower())
            except ValueError:
                return cls.JSON
        return cls.JSON


_MIME_TYPES: dict[ContentType, str] = {
    ContentType.JSON: "application/json",
    ContentType.HTML: "text/html",
    ContentType.FAVICON: "image/x-icon",
    ContentType.CSS: "text/css",
    ContentType.PNG: "image/png",
    ContentType.JPG: "image/jpeg",
    ContentType.PLAIN: "text/plain",
}


def coerce_status(status: object) -> int:
    """Return *status* when it is a usable HTTP status code, else 200."""
    if isinstance(status, int) and not isinstance(status, bool) and 100 <= status <= 599:
        return status
    return 200


@dataclass(frozen=True, slots=True)
class HandlerResult:
    """What a handler produced through its ``respond`` callback.

    ``payload`` is kept exactly as given; shape defaulting happens when the
    emitter renders the result, so a mismatched payload never raises here.
    """

    status: int = 200
    payload: Any = None
    content_type: ContentType = ContentType.JSON

    @classmethod
    def create(
        cls,
        status: object = None,
        payload: Any = None,
        content_type: object = None,
    ) -> "HandlerResult":
        """Build a result from loosely typed ``respond`` arguments."""
        return cls(
            status=coerce_status(status),
            payload=payload,
            content_type=ContentType.parse(content_type),
        )


@dataclass(frozen=True, slots=True)
class Response:
    """A fully rendered HTTP response."""

    body: bytes = b""
    status: int = 200
    content_type: str = "application/json"

    @property
    def text(self) -> str:
        """Body as string."""
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """Parse the body as JSON."""
        import json as json_module

        return json_module.loads(self.body)
