"""Immutable request descriptor handed to handlers.

The descriptor is the normalized, fully assembled view of one inbound
request. It is built once per request from the ASGI scope plus the
decoded body payload, and never changes afterwards.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import parse_qs

from switchboard._internal.asgi import Scope

# Header and query values: a single string, or every value when the name repeats
MultiValue = str | list[str]


def normalize_path(raw: str) -> str:
    """Strip every leading and trailing slash from *raw*.

    Internal slashes are kept verbatim, so a multi-segment route is a
    single string key::

        normalize_path("/api/users/")  -> "api/users"
        normalize_path("//x/y//")      -> "x/y"
        normalize_path("/")            -> ""
    """
    return raw.strip("/")


def _collapse(pairs: Iterable[tuple[str, str]]) -> dict[str, MultiValue]:
    grouped: dict[str, list[str]] = {}
    for name, value in pairs:
        grouped.setdefault(name, []).append(value)
    return {name: values[0] if len(values) == 1 else values for name, values in grouped.items()}


def parse_query(query_string: bytes) -> dict[str, MultiValue]:
    """Parse a raw query component into flat string pairs.

    Blank values are kept. A key given more than once maps to the list
    of its values in arrival order.
    """
    parsed = parse_qs(query_string.decode("latin-1"), keep_blank_values=True)
    return {key: values[0] if len(values) == 1 else values for key, values in parsed.items()}


def parse_headers(raw: Iterable[tuple[bytes, bytes]]) -> dict[str, MultiValue]:
    """Decode raw ASGI header pairs; names are lower-cased."""
    return _collapse(
        (name.decode("latin-1").lower(), value.decode("latin-1")) for name, value in raw
    )


@dataclass(frozen=True, slots=True)
class RequestDescriptor:
    """One inbound request, normalized.

    Attributes:
        path: Request path with leading/trailing slashes removed.
        method: Lower-cased HTTP method, passed through unvalidated.
        query: Query parameters; repeated keys hold a list.
        headers: Lower-cased header names; repeated headers hold a list.
        payload: JSON object decoded from the body, ``{}`` when the body
            is empty or not a JSON object.
    """

    path: str
    method: str
    query: dict[str, MultiValue] = field(default_factory=dict)
    headers: dict[str, MultiValue] = field(default_factory=dict)
    payload: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_asgi(cls, scope: Scope, payload: dict[str, Any] | None = None) -> "RequestDescriptor":
        """Build a descriptor from an ASGI HTTP scope and a decoded payload."""
        return cls(
            path=normalize_path(scope.get("path", "")),
            method=scope["method"].lower(),
            query=parse_query(scope.get("query_string", b"")),
            headers=parse_headers(scope.get("headers", ())),
            payload=payload if payload is not None else {},
        )
