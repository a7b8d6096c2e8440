"""Logging helpers for femtologging integration.

This module centralizes log level normalization, channel discarding and
formatting so mergehook emits pre-formatted log messages consistently.
Four channels are exposed (trace, info, warning, error); each one can be
discarded independently of the femtologging level threshold. Error entries
can additionally be persisted to a file through :class:`ErrorLogHandler`.

Example:
>>> from mergehook.logging import get_logger, log_info
>>> logger = get_logger(__name__)
>>> log_info(logger, "Started %s", "worker")

"""

from __future__ import annotations

import datetime as dt
import enum
import threading
import typing as typ
from pathlib import Path

from femtologging import basicConfig, get_logger

if typ.TYPE_CHECKING:
    import collections.abc as cabc

ROOT_LOGGER_NAME = "mergehook"


class LogLevel(enum.StrEnum):
    """Supported log levels for femtologging."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogChannel(enum.StrEnum):
    """Independently discardable log channels."""

    TRACE = "TRACE"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


_discarded: set[str] = set()


def normalize_log_level(level: str | None) -> tuple[str, bool]:
    """Normalize a log level string and report invalid inputs.

    Parameters
    ----------
    level : str | None
        Raw log level string to normalize.

    Returns
    -------
    tuple[str, bool]
        The normalized log level and a flag indicating invalid input.

    """
    if not level:
        return ("INFO", True)

    normalized = level.strip().upper()
    if normalized in LogLevel.__members__:
        return (normalized, False)

    return ("INFO", True)


def normalize_channels(raw: str | None) -> tuple[frozenset[str], list[str]]:
    """Parse a comma separated channel list.

    Parameters
    ----------
    raw : str | None
        Channel names such as ``"trace,info"``. Case and surrounding
        whitespace are ignored.

    Returns
    -------
    tuple[frozenset[str], list[str]]
        The recognised channels and the entries that were not recognised.

    """
    channels: set[str] = set()
    unknown: list[str] = []
    for part in (raw or "").split(","):
        name = part.strip().upper()
        if not name:
            continue
        if name == "WARN":
            name = "WARNING"
        if name in LogChannel.__members__:
            channels.add(name)
        else:
            unknown.append(part.strip())
    return (frozenset(channels), unknown)


def configure_logging(
    level: str,
    *,
    discard: cabc.Iterable[str] = (),
    force: bool = False,
) -> tuple[str, bool]:
    """Configure femtologging and return the normalized level.

    Parameters
    ----------
    level : str
        Raw log level string to normalize.
    discard : Iterable[str], optional
        Channels whose messages are dropped before reaching femtologging.
    force : bool, optional
        Whether to replace any existing handler configuration.

    Returns
    -------
    tuple[str, bool]
        The normalized log level and a flag indicating invalid input.

    """
    normalized, invalid = normalize_log_level(level)
    set_discarded_channels(discard)
    basicConfig(level=normalized, force=force)
    return (normalized, invalid)


def set_discarded_channels(channels: cabc.Iterable[str]) -> None:
    """Replace the set of discarded channels."""
    _discarded.clear()
    _discarded.update(str(channel).upper() for channel in channels)


def discarded_channels() -> frozenset[str]:
    """Return the channels currently discarded."""
    return frozenset(_discarded)


def _format_message(template: str, *args: object) -> str:
    """Format a message using percent-style interpolation."""
    return template % args


class _SupportsLog(typ.Protocol):
    """Protocol for femtologging-compatible loggers."""

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> str | None: ...


def _log_at_level(
    logger: _SupportsLog,
    level: str,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log a message at the specified level unless its channel is discarded."""
    if level in _discarded:
        return
    logger.log(
        level,
        _format_message(template, *args),
        exc_info=exc_info,
        stack_info=False,
    )


def log_trace(logger: _SupportsLog, template: str, *args: object) -> None:
    """Log a TRACE message with percent-style formatting."""
    _log_at_level(logger, "TRACE", template, *args)


def log_info(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log an INFO message with percent-style formatting.

    Parameters
    ----------
    logger : _SupportsLog
        Logger that receives the formatted message.
    template : str
        Message template using percent-style placeholders.
    *args : object
        Values to interpolate into the template.
    exc_info : object | None, optional
        Exception information to attach to the log record.

    """
    _log_at_level(logger, "INFO", template, *args, exc_info=exc_info)


def log_warning(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log a WARNING message with percent-style formatting.

    Parameters
    ----------
    logger : _SupportsLog
        Logger that receives the formatted message.
    template : str
        Message template using percent-style placeholders.
    *args : object
        Values to interpolate into the template.
    exc_info : object | None, optional
        Exception information to attach to the log record.

    """
    _log_at_level(logger, "WARNING", template, *args, exc_info=exc_info)


def log_error(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log an ERROR message with percent-style formatting.

    Parameters
    ----------
    logger : _SupportsLog
        Logger that receives the formatted message.
    template : str
        Message template using percent-style placeholders.
    *args : object
        Values to interpolate into the template.
    exc_info : object | None, optional
        Exception information to attach to the log record.

    """
    _log_at_level(logger, "ERROR", template, *args, exc_info=exc_info)


def log_exception(logger: _SupportsLog, message: str, exc: BaseException) -> None:
    """Log an exception with exc_info wired into femtologging."""
    _log_at_level(logger, "ERROR", "%s", message, exc_info=exc)


class ErrorLogHandler:
    """femtologging handler persisting ERROR records to a file.

    The file is opened in append mode on construction so that an unusable
    path fails at startup rather than on the first error. Records below
    ERROR are ignored.

    Parameters
    ----------
    path
        File that receives error entries.
    stream
        Optional text stream that mirrors error entries. The console
        already receives them through the handler installed by
        :func:`configure_logging`, so nothing is mirrored by default.

    """

    def __init__(self, path: Path | str, *, stream: typ.TextIO | None = None) -> None:
        """Open *path* for appending."""
        self.path = Path(path)
        self._file = self.path.open("a", encoding="utf-8")
        self._stream = stream
        self._lock = threading.Lock()

    def handle(self, logger: str, level: str, message: str) -> None:
        """Handle a log record from the femtologging worker thread."""
        if str(level).upper() not in {"ERROR", "CRITICAL"}:
            return
        stamp = dt.datetime.now().strftime("%Y/%m/%d %H:%M:%S")  # noqa: DTZ005 - local time like the console handler
        line = f"ERROR:{stamp} {logger}: {message}\n"
        with self._lock:
            self._file.write(line)
            self._file.flush()
            if self._stream is not None:
                self._stream.write(line)
                self._stream.flush()

    def handle_record(self, record: dict[str, object]) -> None:
        """Handle structured record payloads from femtologging."""
        self.handle(
            str(record.get("logger", "")),
            str(record.get("level", "")),
            str(record.get("message", "")),
        )

    def close(self) -> None:
        """Close the underlying file."""
        with self._lock:
            self._file.close()


def install_error_log(
    path: Path | str,
    *,
    logger_name: str = ROOT_LOGGER_NAME,
) -> ErrorLogHandler:
    """Attach an :class:`ErrorLogHandler` for *path* to the package logger.

    Raises
    ------
    OSError
        If the error log file cannot be opened.

    """
    handler = ErrorLogHandler(path)
    get_logger(logger_name).add_handler(handler)
    return handler


__all__ = [
    "ROOT_LOGGER_NAME",
    "ErrorLogHandler",
    "LogChannel",
    "LogLevel",
    "configure_logging",
    "discarded_channels",
    "get_logger",
    "install_error_log",
    "log_error",
    "log_exception",
    "log_info",
    "log_trace",
    "log_warning",
    "normalize_channels",
    "normalize_log_level",
    "set_discarded_channels",
]
