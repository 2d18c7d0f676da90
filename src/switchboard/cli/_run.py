"""``switchboard run`` — start the servers for an app.

Configuration is layered: ``ServerConfig.from_env()`` first, with
``--env`` swapping the profile, then the remaining flags override single
fields. The result replaces the app's config before it freezes.
"""

import argparse
import logging
import os
import sys
from dataclasses import replace

from switchboard.cli._resolve import resolve_app
from switchboard.config import ENV_PREFIX, ServerConfig
from switchboard.errors import ConfigurationError, ServerStartupError


def build_config(args: argparse.Namespace) -> ServerConfig:
    """Derive the effective config from the environment and CLI flags."""
    environ = dict(os.environ)
    if args.env:
        environ[f"{ENV_PREFIX}ENV"] = args.env
    config = ServerConfig.from_env(environ)

    overrides: dict[str, object] = {}
    if args.host:
        overrides["host"] = args.host
    if args.http_port is not None:
        overrides["http_port"] = args.http_port
    if args.https_port is not None:
        overrides["https_port"] = args.https_port
    if args.production:
        overrides["production"] = True
    return replace(config, **overrides) if overrides else config


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run_server(args: argparse.Namespace) -> None:
    """Resolve ``args.app``, apply the effective config, and serve it."""
    try:
        app = resolve_app(args.app)
        config = build_config(args)
    except (ModuleNotFoundError, AttributeError, TypeError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    app.config = config
    configure_logging(config.log_level)

    try:
        app.run()
    except (ConfigurationError, ServerStartupError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
