"""mergehook runtime entrypoint.

This module provides the ASGI application factory used by Granian and the
``main()`` entrypoint that starts the server. The factory configures
logging, opens the error log, loads the script registry once and wires the
dispatcher; it runs in every process that serves requests.

Configuration is driven by environment variables (see
:class:`mergehook.config.RunnerConfig`):

- ``MERGEHOOK_HOST``: Bind address (default ``0.0.0.0``)
- ``MERGEHOOK_PORT``: Listen port (default ``6666``)
- ``MERGEHOOK_CONFIG``: Script registry YAML file (default ``config.yml``)
- ``MERGEHOOK_ERROR_LOG``: Error log file (default ``error.log``)
- ``MERGEHOOK_SHELL``: Script interpreter (default ``/bin/bash``)
- ``MERGEHOOK_LOG_LEVEL``: Log level (default ``INFO``)
- ``MERGEHOOK_LOG_DISCARD``: Comma separated channels to discard

Run the service directly with ``python -m mergehook.runtime``.
"""

from __future__ import annotations

import os
import typing as typ

from mergehook.config import ConfigError, RunnerConfig
from mergehook.logging import (
    configure_logging,
    get_logger,
    install_error_log,
    log_error,
    log_exception,
    log_info,
    log_warning,
    normalize_channels,
)

if typ.TYPE_CHECKING:
    import falcon.asgi

__all__ = ["bootstrap", "create_app", "load_config", "main"]

logger = get_logger(__name__)

_bootstrapped_pid: int | None = None


def load_config() -> RunnerConfig:
    """Read configuration from the environment.

    Raises
    ------
    SystemExit
        If any configured value is invalid.

    """
    try:
        return RunnerConfig.from_env()
    except ConfigError as exc:
        # Use error() not exception() - validation failures need no traceback
        log_error(logger, "Invalid configuration: %s", exc)
        raise SystemExit(1) from exc


def bootstrap(config: RunnerConfig) -> None:
    """Configure logging and open the error log for this process.

    Runs once per process; later calls in the same process are no-ops.

    Raises
    ------
    SystemExit
        If the error log file cannot be opened.

    """
    global _bootstrapped_pid  # noqa: PLW0603 - per-process logging setup
    if _bootstrapped_pid == os.getpid():
        return

    discard, unknown = normalize_channels(config.log_discard)
    normalized_level, invalid_level = configure_logging(
        config.log_level, discard=discard
    )
    if invalid_level:
        log_warning(
            logger,
            "Invalid MERGEHOOK_LOG_LEVEL %r, falling back to %s",
            config.log_level,
            normalized_level,
        )
    if unknown:
        log_warning(
            logger,
            "Ignoring unknown MERGEHOOK_LOG_DISCARD channels: %s",
            ", ".join(unknown),
        )

    try:
        install_error_log(config.error_log_path)
    except OSError as exc:
        log_exception(
            logger, f"Failed to open error log file {config.error_log_path}", exc
        )
        raise SystemExit(1) from exc

    _bootstrapped_pid = os.getpid()


def create_app() -> falcon.asgi.App:
    """Create the Falcon ASGI application from environment configuration.

    Returns
    -------
    falcon.asgi.App
        Application whose dispatcher uses the registry loaded from
        ``MERGEHOOK_CONFIG`` and runs scripts with ``MERGEHOOK_SHELL``.

    """
    from mergehook.api.app import AppDependencies
    from mergehook.api.app import create_app as _create_api_app
    from mergehook.dispatch import Dispatcher, ScriptExecutor
    from mergehook.registry import load_registry

    config = load_config()
    bootstrap(config)

    registry = load_registry(config.registry_path)
    dispatcher = Dispatcher(registry, ScriptExecutor(shell=config.shell))
    return _create_api_app(AppDependencies(dispatcher=dispatcher))


def main() -> None:
    """Start the mergehook server using Granian.

    A single worker is used so that the execution lock is shared by every
    request.
    """
    from granian import Granian
    from granian.constants import Interfaces

    config = load_config()
    bootstrap(config)

    log_info(
        logger,
        "Starting mergehook on %s:%d (registry=%s, shell=%s)",
        config.host,
        config.port,
        config.registry_path,
        config.shell,
    )

    server = Granian(
        "mergehook.runtime:create_app",
        address=config.host,
        port=config.port,
        interface=Interfaces.ASGI,
        workers=1,
        factory=True,
    )
    server.serve()


if __name__ == "__main__":
    main()
