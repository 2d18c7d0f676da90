"""Switchboard application class.

Mutable during setup (route, static, and not-found registration).
Frozen into an immutable ``RouteTable`` when ``app.run()`` or
``__call__()`` is first invoked.
"""

import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from switchboard._internal.asgi import Receive, Scope, Send
from switchboard._internal.types import Handler
from switchboard.config import ServerConfig
from switchboard.errors import ConfigurationError
from switchboard.routing.route import ContainsMatcher, Route
from switchboard.routing.table import STATIC_MARKER, RouteTable
from switchboard.server.handler import handle_request


@dataclass(slots=True)
class _PendingRoute:
    """A route waiting to be frozen into the table."""

    path: str
    handler: Handler
    name: str | None


class App:
    """The switchboard application.

    Mutable during setup, frozen at runtime when ``app.run()`` or
    ``__call__()`` is first invoked. Every handler is called as
    ``handler(request, respond)``::

        app = App()

        @app.route("/ping")
        def ping(request, respond):
            respond(200)

    Thread safety:
        The setup phase is single-threaded (decorators at import time).
        The freeze transition uses a Lock + double-check so exactly one
        thread builds the table, even when several pounce workers receive
        their first request at the same time.
    """

    __slots__ = (
        "_freeze_lock",
        "_frozen",
        "_not_found_handler",
        "_pending_routes",
        "_static_handler",
        # Compiled state (populated by _freeze)
        "_table",
        "config",
    )

    def __init__(self, config: ServerConfig | None = None) -> None:
        self.config: ServerConfig = config or ServerConfig()
        self._pending_routes: list[_PendingRoute] = []
        self._static_handler: Handler | None = None
        self._not_found_handler: Handler | None = None
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()
        self._table: RouteTable | None = None

    # -- Route registration --

    def route(self, path: str, *, name: str | None = None) -> Callable[[Handler], Handler]:
        """Register a handler for an exact path via decorator.

        Args:
            path: Route path. Leading and trailing slashes are ignored, so
                ``"/api/users/"`` and ``"api/users"`` are the same route.
            name: Optional display name for ``switchboard routes``.
        """

        def decorator(func: Handler) -> Handler:
            self.add_route(path, func, name=name)
            return func

        return decorator

    def add_route(self, path: str, handler: Handler, *, name: str | None = None) -> None:
        """Register *handler* for *path* without a decorator."""
        self._check_not_frozen()
        self._pending_routes.append(_PendingRoute(path, handler, name))

    def static(self, handler: Handler | None = None) -> Any:
        """Set the handler for paths containing ``public/``.

        Works as ``app.static(handler)`` or as a bare decorator factory,
        ``@app.static()``. Without a registration, a ``StaticAssets``
        handler for ``config.static_dir`` is used.
        """

        def decorator(func: Handler) -> Handler:
            self._check_not_frozen()
            self._static_handler = func
            return func

        return decorator(handler) if handler is not None else decorator

    def not_found(self, handler: Handler | None = None) -> Any:
        """Set the handler for paths with no route.

        Same calling forms as ``static``. Defaults to a 404 with ``{}``.
        """

        def decorator(func: Handler) -> Handler:
            self._check_not_frozen()
            self._not_found_handler = func
            return func

        return decorator(handler) if handler is not None else decorator

    @property
    def table(self) -> RouteTable:
        """The frozen route table (freezes the app if needed)."""
        self._ensure_frozen()
        assert self._table is not None
        return self._table

    # -- Server --

    def run(self) -> None:
        """Freeze the app and serve it on the configured endpoints."""
        self._ensure_frozen()

        from switchboard.server.bootstrap import run_servers

        run_servers(self, self.config)

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Acknowledges lifespan scopes and hands HTTP scopes to the
        request pipeline.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        await handle_request(
            scope,
            receive,
            send,
            table=self.table,
            handler_timeout=self.config.handler_timeout,
            max_body_size=self.config.max_body_size,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol, freezing the app at startup."""
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    self._ensure_frozen()
                except ConfigurationError as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Build the immutable route table.

        MUST only be called while holding _freeze_lock.
        """
        from switchboard.handlers import StaticAssets, not_found

        static_handler = self._static_handler or StaticAssets(self.config.static_dir)
        self._table = RouteTable(
            (Route(p.path, p.handler, p.name) for p in self._pending_routes),
            not_found=self._not_found_handler or not_found,
            matchers=(ContainsMatcher(STATIC_MARKER, static_handler),),
        )
        self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes and handlers before calling app.run()."
            )
            raise ConfigurationError(msg)
