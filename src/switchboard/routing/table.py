"""Immutable route table with two-tier resolution.

Resolution order is fixed and explicit:

1. Prefix matchers, in declaration order (the static-asset ``public/``
   marker). A match here wins even over an exact table entry.
2. Exact lookup of the normalized path.
3. The not-found handler.
"""

from collections.abc import Callable, Iterable, Iterator
from types import MappingProxyType
from typing import Any

from switchboard.errors import ConfigurationError
from switchboard.routing.route import ContainsMatcher, Route

STATIC_MARKER = "public/"


class RouteTable:
    """Read-only mapping from normalized path to handler.

    Built once at freeze time and shared by every concurrent request;
    there is no mutation path after construction.

    Usage::

        table = RouteTable(
            [Route("/ping", ping), Route("/api/users", users)],
            not_found=not_found,
            matchers=[ContainsMatcher("public/", assets)],
        )
        table.resolve("api/users")  # -> users
    """

    __slots__ = ("_exact", "_matchers", "_not_found", "_routes")

    def __init__(
        self,
        routes: Iterable[Route],
        *,
        not_found: Callable[..., Any],
        matchers: Iterable[ContainsMatcher] = (),
    ) -> None:
        exact: dict[str, Route] = {}
        for route in routes:
            if route.path in exact:
                msg = (
                    f"Duplicate route {route.path!r}: already bound to "
                    f"{_handler_name(exact[route.path].handler)}."
                )
                raise ConfigurationError(msg)
            exact[route.path] = route

        self._routes: tuple[Route, ...] = tuple(exact.values())
        self._exact: MappingProxyType[str, Route] = MappingProxyType(exact)
        self._matchers: tuple[ContainsMatcher, ...] = tuple(matchers)
        self._not_found = not_found

    def resolve(self, path: str) -> Callable[..., Any]:
        """Return the handler for an already-normalized *path*."""
        for matcher in self._matchers:
            if matcher.matches(path):
                return matcher.handler
        route = self._exact.get(path)
        if route is not None:
            return route.handler
        return self._not_found

    @property
    def routes(self) -> tuple[Route, ...]:
        """Exact routes in registration order."""
        return self._routes

    @property
    def matchers(self) -> tuple[ContainsMatcher, ...]:
        return self._matchers

    @property
    def not_found(self) -> Callable[..., Any]:
        return self._not_found

    def __contains__(self, path: object) -> bool:
        return path in self._exact

    def __iter__(self) -> Iterator[str]:
        return iter(self._exact)

    def __len__(self) -> int:
        return len(self._exact)


def _handler_name(handler: Callable[..., Any]) -> str:
    return getattr(handler, "__qualname__", None) or type(handler).__name__
