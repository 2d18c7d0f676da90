"""Static asset handler.

Serves files from a directory for any path containing the static marker
(``public/`` by default). The part of the path after the marker names the
file, so ``public/css/app.css`` serves ``<directory>/css/app.css``.
"""

from pathlib import Path

import anyio

from switchboard.http.request import RequestDescriptor
from switchboard.http.response import ContentType
from switchboard.routing.table import STATIC_MARKER
from switchboard.server.responder import Responder

# File suffix -> content-type tag; anything else is served as plain text
SUFFIX_TYPES: dict[str, ContentType] = {
    ".css": ContentType.CSS,
    ".png": ContentType.PNG,
    ".jpg": ContentType.JPG,
    ".jpeg": ContentType.JPG,
    ".ico": ContentType.FAVICON,
    ".html": ContentType.HTML,
    ".htm": ContentType.HTML,
}

# Tags whose body is text rather than raw bytes
_TEXT_TYPES = frozenset({ContentType.HTML, ContentType.CSS, ContentType.PLAIN})


def content_type_for(path: str | Path) -> ContentType:
    """Pick the content-type tag for a file name."""
    return SUFFIX_TYPES.get(Path(path).suffix.lower(), ContentType.PLAIN)


class StaticAssets:
    """Handler that serves files from a directory.

    Security: resolves symlinks and verifies the final path is within the
    configured directory to prevent path traversal.

    Usage::

        app = App()
        app.static(StaticAssets("./public"))
    """

    __slots__ = ("_directory", "_marker")

    def __init__(self, directory: str | Path, *, marker: str = STATIC_MARKER) -> None:
        self._directory = Path(directory).resolve()
        self._marker = marker

    @property
    def directory(self) -> Path:
        return self._directory

    def relative_name(self, path: str) -> str:
        """Return the asset name that follows the marker in *path*."""
        _, _, name = path.partition(self._marker)
        return name.strip("/")

    async def __call__(self, request: RequestDescriptor, respond: Responder) -> None:
        if request.method not in ("get", "head"):
            respond(405)
            return

        name = self.relative_name(request.path)
        file_path = (self._directory / name).resolve() if name else self._directory
        if not file_path.is_relative_to(self._directory) or not file_path.is_file():
            respond(404)
            return

        tag = content_type_for(file_path)
        data = await anyio.Path(file_path).read_bytes()
        if tag in _TEXT_TYPES:
            respond(200, data.decode("utf-8", errors="replace"), tag)
        else:
            respond(200, data, tag)
