"""Switchboard — a minimal HTTP/HTTPS request dispatcher.

Normalizes each request, decodes its JSON body, resolves the path against
an immutable route table, and turns the handler's single ``respond`` call
into an HTTP response.

Basic usage::

    from switchboard import App

    app = App()

    @app.route("/ping")
    def ping(request, respond):
        respond(200)

    app.run()
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "ConfigurationError",
    "ContentType",
    "HTTPError",
    "HandlerResult",
    "RequestDescriptor",
    "Responder",
    "ServerStartupError",
    "ServerConfig",
    "SwitchboardError",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import switchboard`` fast while providing a clean top-level API.
    """
    if name == "App":
        from switchboard.app import App

        return App

    if name == "ServerConfig":
        from switchboard.config import ServerConfig

        return ServerConfig

    if name == "RequestDescriptor":
        from switchboard.http.request import RequestDescriptor

        return RequestDescriptor

    if name in ("ContentType", "HandlerResult"):
        from switchboard.http import response

        return getattr(response, name)

    if name == "Responder":
        from switchboard.server.responder import Responder

        return Responder

    if name in ("ConfigurationError", "HTTPError", "ServerStartupError", "SwitchboardError"):
        from switchboard import errors

        return getattr(errors, name)

    msg = f"module 'switchboard' has no attribute {name!r}"
    raise AttributeError(msg)
