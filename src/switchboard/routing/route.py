"""Route and matcher frozen dataclasses."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from switchboard.http.request import normalize_path


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen exact-match route.

    ``path`` is stored normalized, so ``"/api/users/"`` and ``"api/users"``
    declare the same route.
    """

    path: str
    handler: Callable[..., Any]
    name: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", normalize_path(self.path))


@dataclass(frozen=True, slots=True)
class ContainsMatcher:
    """Matches any path containing ``marker`` anywhere.

    Used for static assets, whose sub-paths (``public/css/app.css``)
    cannot be enumerated as table keys.
    """

    marker: str
    handler: Callable[..., Any]

    def matches(self, path: str) -> bool:
        return self.marker in path
