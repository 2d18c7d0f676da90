"""Liveness and not-found handlers."""

from switchboard.http.request import RequestDescriptor
from switchboard.server.responder import Responder


def ping(request: RequestDescriptor, respond: Responder) -> None:
    """Answer 200 with an empty JSON object."""
    respond(200)


def not_found(request: RequestDescriptor, respond: Responder) -> None:
    """Answer 404 with an empty JSON object."""
    respond(404)
