"""Transport bootstrap — plain and TLS pounce servers for one app.

Both endpoints serve the same ASGI callable. The HTTPS server runs on a
background thread with its own event loop; the HTTP server runs in the
foreground. In production mode TLS is terminated upstream and only the
HTTP endpoint is started.
"""

import logging
import threading
import time
from pathlib import Path
from typing import TYPE_CHECKING

from switchboard.config import ServerConfig
from switchboard.errors import ConfigurationError, ServerStartupError

if TYPE_CHECKING:
    from pounce.server import Server

logger = logging.getLogger("switchboard.transport")


def build_server(
    app: object,
    config: ServerConfig,
    *,
    port: int,
    ssl_certfile: str | None = None,
    ssl_keyfile: str | None = None,
) -> "Server":
    """Create (but do not start) a pounce server for one endpoint."""
    from pounce.config import ServerConfig as PounceConfig
    from pounce.server import Server

    pounce_config = PounceConfig(
        host=config.host,
        port=port,
        workers=config.workers,
        log_level=config.log_level,
        ssl_certfile=ssl_certfile,
        ssl_keyfile=ssl_keyfile,
    )
    return Server(pounce_config, app)


def _tls_material(config: ServerConfig) -> tuple[str, str]:
    """Return the PEM certificate and key paths, checking they exist."""
    certfile = Path(config.ssl_certfile)
    keyfile = Path(config.ssl_keyfile)
    missing = [str(p) for p in (certfile, keyfile) if not p.is_file()]
    if missing:
        msg = (
            f"TLS is enabled but certificate material is missing: {', '.join(missing)}. "
            "Provide ssl_certfile/ssl_keyfile or set production=True."
        )
        raise ConfigurationError(msg)
    return str(certfile), str(keyfile)


def start_in_background(
    server: "Server",
    config: ServerConfig,
    *,
    startup_timeout: float = 5.0,
) -> threading.Thread:
    """Run the HTTPS *server* on a daemon thread and wait until it has bound.

    Raises:
        ServerStartupError: If the server stops before binding its port.
    """
    failures: list[BaseException] = []

    def serve() -> None:
        try:
            server.run()
        except Exception as exc:
            failures.append(exc)
            logger.error("HTTPS server on port %d stopped", config.https_port, exc_info=exc)

    thread = threading.Thread(target=serve, name="switchboard-https", daemon=True)
    thread.start()

    deadline = time.monotonic() + startup_timeout
    while server.bound_addr is None and thread.is_alive() and time.monotonic() < deadline:
        time.sleep(0.01)

    if server.bound_addr is None:
        if not thread.is_alive():
            msg = f"HTTPS server failed to start on port {config.https_port}"
            raise ServerStartupError(msg) from (failures[0] if failures else None)
        logger.warning(
            "HTTPS server has not bound port %d after %.1fs; continuing",
            config.https_port,
            startup_timeout,
        )
    else:
        logger.info(
            "HTTPS server is listening on port %d in %s mode", config.https_port, config.env_name
        )
    return thread


def run_servers(app: object, config: ServerConfig) -> None:
    """Serve *app* on the HTTP port and, unless in production, the HTTPS port.

    Blocks until the HTTP server stops.

    Raises:
        ConfigurationError: If TLS is enabled and the PEM files are missing.
        ServerStartupError: If the HTTPS server cannot bind its port.
    """
    if config.tls_enabled:
        certfile, keyfile = _tls_material(config)
        https_server = build_server(
            app,
            config,
            port=config.https_port,
            ssl_certfile=certfile,
            ssl_keyfile=keyfile,
        )
        start_in_background(https_server, config)
    else:
        logger.info("TLS endpoint disabled in %s mode", config.env_name)

    http_server = build_server(app, config, port=config.http_port)
    logger.info("HTTP server is listening on port %d in %s mode", config.http_port, config.env_name)
    http_server.run()
