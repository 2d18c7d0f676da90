"""Request body collection and best-effort JSON decoding.

The body arrives as a sequence of ASGI ``http.request`` messages. Each
chunk is fed through one stateful UTF-8 decoder so multi-byte sequences
split across chunk boundaries decode correctly; malformed bytes become
U+FFFD instead of raising.
"""

import codecs
import json
from typing import Any

from switchboard._internal.asgi import Receive
from switchboard.errors import PayloadTooLarge


async def collect_body(receive: Receive, *, max_size: int | None = None) -> str:
    """Read the whole request body from *receive* as UTF-8 text.

    Stops at the first message without ``more_body`` or at
    ``http.disconnect``. An empty body yields ``""``.

    Raises:
        PayloadTooLarge: If more than *max_size* bytes arrive. ``None``
            disables the bound.
    """
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    parts: list[str] = []
    received = 0

    while True:
        message = await receive()
        if message.get("type") == "http.disconnect":
            break

        chunk = message.get("body", b"")
        if chunk:
            received += len(chunk)
            if max_size is not None and received > max_size:
                raise PayloadTooLarge(max_size)
            parts.append(decoder.decode(chunk))

        if not message.get("more_body", False):
            break

    parts.append(decoder.decode(b"", final=True))
    return "".join(parts)


def parse_json_object(text: str) -> dict[str, Any]:
    """Decode *text* as a JSON object, or return ``{}``.

    Never raises: empty input, malformed JSON, and documents whose top
    level is not an object all produce an empty dict.
    """
    if not text:
        return {}
    try:
        value = json.loads(text)
    except (ValueError, RecursionError):
        return {}
    return value if isinstance(value, dict) else {}
