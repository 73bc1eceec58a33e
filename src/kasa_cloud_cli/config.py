"""Runtime configuration for kasactl.

Settings come from environment variables so the CLI can be pointed at a
different cloud endpoint or credential record without extra flags:

* ``KASA_CLOUD_URL`` - cloud API endpoint
* ``KASA_CONFIG`` - credential record path
* ``KASA_HTTP_TIMEOUT`` - per-request timeout in seconds
* ``KASA_APP_TYPE`` - app identity sent with the login request
* ``KASA_LOG_LEVEL`` - logging level name
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from .const import (
    DEFAULT_APP_TYPE,
    DEFAULT_CLOUD_URL,
    DEFAULT_CONFIG_FILENAME,
    DEFAULT_HTTP_TIMEOUT,
)

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)-5s [%(name)s] %(message)s"
QUIET_LOGGERS = ("httpx", "httpcore")


def get_env(name: str, default: str | None = None) -> str | None:
    """Get an environment variable, treating blank values as unset."""
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip()


def get_env_float(name: str, default: float) -> float:
    """Get float environment variable.

    Args:
        name: Environment variable name
        default: Default value if not found or invalid

    Returns:
        Float value from environment or default
    """
    raw = get_env(name)
    if raw is None:
        return default

    try:
        return float(raw)
    except ValueError:
        logger.warning(
            "Invalid float value for %s: '%s'. Using default: %s",
            name,
            raw,
            default,
        )
        return default


def default_config_path() -> Path:
    """Return the credential record location used when nothing overrides it."""
    return Path.home() / DEFAULT_CONFIG_FILENAME


def resolve_config_path(override: str | Path | None = None) -> Path:
    """Resolve the credential record path.

    An explicit override (the ``--config`` flag) wins over ``KASA_CONFIG``,
    which wins over ``~/.tplink.toml``.
    """
    if override is not None and str(override) != "":
        return Path(override).expanduser()
    env_path = get_env("KASA_CONFIG")
    if env_path:
        return Path(env_path).expanduser()
    return default_config_path()


@dataclass(slots=True)
class CloudConfig:
    """Connection settings for the cloud API."""

    base_url: str = DEFAULT_CLOUD_URL
    timeout: float = DEFAULT_HTTP_TIMEOUT
    app_type: str = DEFAULT_APP_TYPE

    @classmethod
    def from_env(cls) -> "CloudConfig":
        """Build the configuration from ``KASA_*`` environment variables."""
        timeout = get_env_float("KASA_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT)
        if timeout <= 0:
            logger.warning(
                "KASA_HTTP_TIMEOUT must be positive, using %s",
                DEFAULT_HTTP_TIMEOUT,
            )
            timeout = DEFAULT_HTTP_TIMEOUT
        return cls(
            base_url=get_env("KASA_CLOUD_URL", DEFAULT_CLOUD_URL) or DEFAULT_CLOUD_URL,
            timeout=timeout,
            # appType may legitimately be blank, so read it without get_env
            app_type=os.getenv("KASA_APP_TYPE", DEFAULT_APP_TYPE),
        )


def configure_logging(verbose: bool = False) -> None:
    """Set up root logging for the CLI process.

    Handlers are only installed when nothing else (pytest, an embedding
    application) has configured logging already.
    """
    level_name = (get_env("KASA_LOG_LEVEL", "WARNING") or "WARNING").upper()
    level = logging.getLevelNamesMapping().get(level_name, logging.WARNING)
    if verbose:
        level = logging.DEBUG
    if not logging.getLogger().handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("kasa_cloud_cli").setLevel(level)
    # httpx logs request URLs, which carry the session token as a query param
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
