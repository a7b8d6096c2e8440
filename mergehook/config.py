"""Runtime configuration for the mergehook service.

This module provides the RunnerConfig dataclass which controls the listen
address, the registry and error-log locations, the interpreter used to run
scripts, and logging behaviour.

Usage
-----
Create a configuration with defaults:

>>> config = RunnerConfig()
>>> config.port
6666

Or load from environment variables:

>>> import os
>>> os.environ["MERGEHOOK_PORT"] = "8080"
>>> config = RunnerConfig.from_env()
>>> config.port
8080

"""

from __future__ import annotations

import dataclasses as dc
import os
from pathlib import Path

# TCP port number range limits
MIN_PORT = 1
MAX_PORT = 65535

DEFAULT_HOST = "0.0.0.0"  # noqa: S104 - the receiver is reached by an external platform
DEFAULT_PORT = 6666
DEFAULT_SHELL = "/bin/bash"


class ConfigError(ValueError):
    """Raised when an environment variable holds an unusable value."""


def parse_port(raw: str, *, env_var: str = "MERGEHOOK_PORT") -> int:
    """Parse and validate a TCP port number string.

    Raises
    ------
    ConfigError
        If *raw* is not an integer in the range 1-65535.

    """
    try:
        port = int(raw)
    except ValueError as exc:
        msg = f"{env_var} must be an integer, got: {raw!r}"
        raise ConfigError(msg) from exc
    if not (MIN_PORT <= port <= MAX_PORT):
        msg = f"{env_var} {port} outside valid range {MIN_PORT}-{MAX_PORT}"
        raise ConfigError(msg)
    return port


@dc.dataclass(frozen=True, slots=True)
class RunnerConfig:
    """Configuration for the webhook receiver process.

    Attributes
    ----------
    host
        Bind address for the HTTP server.
    port
        Listen port for the HTTP server.
    registry_path
        YAML file mapping hook keys to script paths.
    error_log_path
        File that receives every error-level log entry.
    shell
        Absolute path of the interpreter that runs each script.
    log_level
        femtologging threshold. TRACE entries are dropped at the default.
    log_discard
        Raw comma separated list of channels to discard.

    """

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    registry_path: Path = Path("config.yml")
    error_log_path: Path = Path("error.log")
    shell: str = DEFAULT_SHELL
    log_level: str = "INFO"
    log_discard: str = ""

    @staticmethod
    def _read(env_var: str, default: str) -> str:
        """Read a stripped env var, falling back to a default when blank."""
        raw = os.environ.get(env_var, "").strip()
        return raw or default

    @classmethod
    def from_env(cls) -> RunnerConfig:
        """Create configuration from environment variables.

        Reads ``MERGEHOOK_HOST``, ``MERGEHOOK_PORT``, ``MERGEHOOK_CONFIG``,
        ``MERGEHOOK_ERROR_LOG``, ``MERGEHOOK_SHELL``,
        ``MERGEHOOK_LOG_LEVEL`` and ``MERGEHOOK_LOG_DISCARD``.

        Raises
        ------
        ConfigError
            If the port is invalid or the shell path is not absolute.

        """
        port = parse_port(cls._read("MERGEHOOK_PORT", str(DEFAULT_PORT)))

        shell = cls._read("MERGEHOOK_SHELL", DEFAULT_SHELL)
        if not Path(shell).is_absolute():
            msg = f"MERGEHOOK_SHELL must be an absolute path, got: {shell!r}"
            raise ConfigError(msg)

        return cls(
            host=cls._read("MERGEHOOK_HOST", DEFAULT_HOST),
            port=port,
            registry_path=Path(cls._read("MERGEHOOK_CONFIG", "config.yml")),
            error_log_path=Path(cls._read("MERGEHOOK_ERROR_LOG", "error.log")),
            shell=shell,
            log_level=cls._read("MERGEHOOK_LOG_LEVEL", "INFO"),
            log_discard=os.environ.get("MERGEHOOK_LOG_DISCARD", ""),
        )


__all__ = [
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "DEFAULT_SHELL",
    "ConfigError",
    "RunnerConfig",
    "parse_port",
]
