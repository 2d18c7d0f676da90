"""Switchboard exception hierarchy.

Shared across the route table, app, dispatcher, and transport so every
module raises and catches the same types.
"""

from dataclasses import dataclass


class SwitchboardError(Exception):
    """Base for all switchboard-specific errors."""


class ConfigurationError(SwitchboardError):
    """Raised when app or server configuration is invalid.

    Typically caught during ``App._freeze()`` or before the transport starts.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(SwitchboardError):
    """An error that maps directly to an HTTP status code.

    Raised inside the request pipeline (never by handlers, which answer
    through ``respond``). The dispatcher turns these into JSON error bodies.
    """

    status: int
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class PayloadTooLarge(HTTPError):  # noqa: N818
    """413 — the request body exceeded the configured size bound."""

    def __init__(self, limit: int, detail: str = "Payload too large") -> None:
        super().__init__(status=413, detail=detail)
        object.__setattr__(self, "limit", limit)


class ServerStartupError(SwitchboardError):
    """Raised when an endpoint fails to start listening (e.g. port in use)."""
