"""Built-in handlers.

Every handler follows the same contract: ``handler(request, respond)``,
answering through exactly one ``respond(status, payload, content_type)``.
"""

from switchboard.handlers.builtin import not_found, ping
from switchboard.handlers.static import StaticAssets

__all__ = ["StaticAssets", "not_found", "ping"]
