"""Configuration management for logtap.

Handles default connection settings from logtap.toml, with environment
variable overrides.
"""

import logging
import os
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

from .dialects import Dialect

logger = logging.getLogger(__name__)

_ENV_OVERRIDES = {
    "LOGTAP_HOST": ("host", str),
    "LOGTAP_CAPACITY": ("capacity", int),
    "LOGTAP_COMMAND_TIMEOUT": ("command_timeout", float),
}


def _find_config_file() -> Optional[Path]:
    """Find logtap.toml in current or parent directories."""
    current = Path.cwd()

    for parent in [current] + list(current.parents):
        config_file = parent / "logtap.toml"
        if config_file.exists():
            return config_file

    return None


def _load_config(path: Optional[Path] = None) -> dict:
    """Load raw configuration from file."""
    if path is None:
        path = _find_config_file()

    if path is None or not path.exists():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


@dataclass
class LogtapConfig:
    """Connection and buffering settings.

    Attributes:
        host: Browser debugging host.
        chrome_port: Default Chrome remote debugging port.
        firefox_port: Default Firefox debugger server port.
        capacity: Maximum records kept per store (console, network).
        command_timeout: Seconds to wait for a command reply, None waits forever.
        connect_timeout: Seconds to wait for the WebSocket to open.
        discovery_timeout: Seconds allowed for the target list HTTP call.
    """

    host: str = "localhost"
    chrome_port: int = Dialect.CHROME.default_port
    firefox_port: int = Dialect.FIREFOX.default_port
    capacity: int = 1000
    command_timeout: float | None = 30.0
    connect_timeout: float = 5.0
    discovery_timeout: float = 2.0

    def port_for(self, dialect: Dialect) -> int:
        """Default port for a dialect."""
        return self.chrome_port if dialect is Dialect.CHROME else self.firefox_port

    @classmethod
    def load(cls, path: Optional[Path] = None, env: Optional[dict] = None) -> "LogtapConfig":
        """Build config from logtap.toml [default] table and LOGTAP_* variables.

        Unknown keys are ignored with a warning. A command_timeout of 0 means
        wait forever.
        """
        data = _load_config(path).get("default", {})
        known = {f.name for f in fields(cls)}

        values = {}
        for key, value in data.items():
            if key in known:
                values[key] = value
            else:
                logger.warning(f"Ignoring unknown config key: {key}")

        env = os.environ if env is None else env
        for var, (key, cast) in _ENV_OVERRIDES.items():
            if raw := env.get(var):
                try:
                    values[key] = cast(raw)
                except ValueError:
                    logger.warning(f"Ignoring invalid {var}={raw!r}")

        if not values.get("command_timeout", cls.command_timeout):
            values["command_timeout"] = None

        return cls(**values)


__all__ = ["LogtapConfig"]
