"""Server configuration.

ServerConfig is a frozen dataclass — immutable after creation,
IDE-autocompletable, no string-key dict lookups. Named environment
profiles and ``SWITCHBOARD_*`` variables cover deployment differences.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path

from switchboard.errors import ConfigurationError

ENV_PREFIX = "SWITCHBOARD_"


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """Server configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = ServerConfig(http_port=8080, production=True)
    """

    # Transport
    host: str = "0.0.0.0"
    http_port: int = 3000
    https_port: int = 3001
    workers: int = 1

    # Profile name shown in startup logs
    env_name: str = "staging"

    # TLS is terminated upstream in production, so the HTTPS endpoint is skipped
    production: bool = False
    ssl_certfile: str | Path = "https/cert.pem"
    ssl_keyfile: str | Path = "https/key.pem"

    # Limits (None = unbounded)
    handler_timeout: float | None = 30.0
    max_body_size: int | None = 16 * 1024 * 1024  # 16 MB

    # Static assets served for paths containing "public/"
    static_dir: str | Path = "public"

    # Logging
    log_level: str = "info"

    @property
    def tls_enabled(self) -> bool:
        return not self.production

    @classmethod
    def for_environment(cls, name: str | None) -> "ServerConfig":
        """Return the named profile; unknown or empty names select ``staging``."""
        return ENVIRONMENTS.get((name or "").strip().lower(), ENVIRONMENTS["staging"])

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ServerConfig":
        """Build a config from ``SWITCHBOARD_*`` environment variables.

        ``SWITCHBOARD_ENV`` selects the profile; the remaining variables
        override individual fields on top of it.

        Raises:
            ConfigurationError: If a numeric or boolean variable is malformed.
        """
        env = os.environ if environ is None else environ
        config = cls.for_environment(env.get(f"{ENV_PREFIX}ENV"))

        overrides: dict[str, object] = {}
        for field_name, parse in _ENV_FIELDS.items():
            raw = env.get(f"{ENV_PREFIX}{field_name.upper()}")
            if raw is None or raw == "":
                continue
            try:
                overrides[field_name] = parse(raw)
            except ValueError as exc:
                msg = f"Invalid value for {ENV_PREFIX}{field_name.upper()}: {raw!r}"
                raise ConfigurationError(msg) from exc

        return replace(config, **overrides) if overrides else config


def _parse_bool(raw: str) -> bool:
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    raise ValueError(raw)


def _parse_optional_float(raw: str) -> float | None:
    return None if raw.strip().lower() == "none" else float(raw)


def _parse_optional_int(raw: str) -> int | None:
    return None if raw.strip().lower() == "none" else int(raw)


_ENV_FIELDS = {
    "host": str,
    "http_port": int,
    "https_port": int,
    "workers": int,
    "production": _parse_bool,
    "ssl_certfile": str,
    "ssl_keyfile": str,
    "handler_timeout": _parse_optional_float,
    "max_body_size": _parse_optional_int,
    "static_dir": str,
    "log_level": str,
}

ENVIRONMENTS: dict[str, ServerConfig] = {
    "staging": ServerConfig(http_port=3000, https_port=3001, env_name="staging"),
    "production": ServerConfig(
        http_port=5000, https_port=5001, env_name="production", production=True
    ),
}
