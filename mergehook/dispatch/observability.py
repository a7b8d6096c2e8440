"""Emit structured observability events for hook dispatch and script runs.

This module defines event identifiers and a logger wrapper used by the
dispatcher and the script executor. Rejections and failures are logged at
ERROR so they reach the error-log file; accepted hooks and completed runs
are logged at INFO; per-request tracing uses TRACE.

Usage
-----
>>> event_logger = DispatchEventLogger()
>>> event_logger.log_script_started(script_path="/srv/deploy.sh", pid=4242)

"""

from __future__ import annotations

import enum
import typing as typ

from mergehook.logging import get_logger, log_error, log_info, log_trace

if typ.TYPE_CHECKING:
    import datetime as dt

logger = get_logger(__name__)


class DispatchEventType(enum.StrEnum):
    """Structured log event types for the dispatch lifecycle."""

    REQUEST_RECEIVED = "dispatch.request.received"
    REQUEST_IGNORED = "dispatch.request.ignored"
    BODY_READ_FAILED = "dispatch.body.read_failed"
    DECODE_FAILED = "dispatch.body.decode_failed"
    UNSUPPORTED_HOOK = "dispatch.hook.unsupported"
    NOT_MERGED = "dispatch.hook.not_merged"
    NO_SCRIPT = "dispatch.hook.no_script"
    HOOK_ACCEPTED = "dispatch.hook.accepted"
    SCRIPT_STARTED = "dispatch.script.started"
    SCRIPT_COMPLETED = "dispatch.script.completed"
    SCRIPT_FAILED = "dispatch.script.failed"
    LAUNCH_FAILED = "dispatch.script.launch_failed"


class DispatchEventLogger:
    """Emit dispatch events via femtologging."""

    def log_request_received(self, *, method: str, uri: str) -> None:
        """Trace an inbound request."""
        log_trace(
            logger,
            "[%s] method=%s url=%s",
            DispatchEventType.REQUEST_RECEIVED,
            method,
            uri,
        )

    def log_request_ignored(self, *, method: str, uri: str) -> None:
        """Log a read-only request that is ignored."""
        log_error(
            logger,
            "[%s] ignore %s request url=%s",
            DispatchEventType.REQUEST_IGNORED,
            method,
            uri,
        )

    def log_body_read_failed(self, *, error: BaseException) -> None:
        """Log a failure to read the request body."""
        log_error(
            logger,
            "[%s] error_type=%s error_message=%s",
            DispatchEventType.BODY_READ_FAILED,
            type(error).__name__,
            str(error),
            exc_info=error,
        )

    def log_decode_failed(self, *, error: BaseException) -> None:
        """Log a request body that is not a valid hook payload."""
        log_error(
            logger,
            "[%s] error_type=%s error_message=%s",
            DispatchEventType.DECODE_FAILED,
            type(error).__name__,
            str(error),
        )

    def log_unsupported_hook(self, *, hook_name: str | None) -> None:
        """Log a hook type other than merge-request hooks."""
        log_error(
            logger,
            "[%s] hook not running, unsupported hook_name=%s",
            DispatchEventType.UNSUPPORTED_HOOK,
            hook_name,
        )

    def log_not_merged(self, *, project: str) -> None:
        """Log a merge-request hook whose pull request is not merged."""
        log_error(
            logger,
            "[%s] hook not running, pull request not merged project=%s",
            DispatchEventType.NOT_MERGED,
            project,
        )

    def log_no_script(self, *, uri: str) -> None:
        """Log a request whose URL carries no ``/hooks`` segment."""
        log_error(
            logger,
            "[%s] hook not running, no script to run url=%s",
            DispatchEventType.NO_SCRIPT,
            uri,
        )

    def log_hook_accepted(self, *, project: str, key: str, script_path: str) -> None:
        """Log a merged pull request that passed the URL guard."""
        log_info(
            logger,
            "[%s] received hook request project=%s key=%s script=%s",
            DispatchEventType.HOOK_ACCEPTED,
            project,
            key,
            script_path or "<none>",
        )

    def log_script_started(self, *, script_path: str, pid: int) -> None:
        """Log a launched script process."""
        log_info(
            logger,
            "[%s] script=%s pid=%d",
            DispatchEventType.SCRIPT_STARTED,
            script_path,
            pid,
        )

    def log_script_completed(
        self,
        *,
        script_path: str,
        pid: int,
        duration: dt.timedelta,
    ) -> None:
        """Log a script that exited with status zero."""
        log_info(
            logger,
            "[%s] script=%s pid=%d duration_seconds=%.3f",
            DispatchEventType.SCRIPT_COMPLETED,
            script_path,
            pid,
            duration.total_seconds(),
        )

    def log_script_failed(
        self,
        *,
        script_path: str,
        pid: int,
        returncode: int,
        duration: dt.timedelta,
    ) -> None:
        """Log a script that exited with a non-zero status."""
        log_error(
            logger,
            "[%s] script=%s pid=%d exit_status=%d duration_seconds=%.3f",
            DispatchEventType.SCRIPT_FAILED,
            script_path,
            pid,
            returncode,
            duration.total_seconds(),
        )

    def log_launch_failed(self, *, script_path: str, error: BaseException) -> None:
        """Log a script whose process could not be started or awaited."""
        log_error(
            logger,
            "[%s] script=%s error_type=%s error_message=%s",
            DispatchEventType.LAUNCH_FAILED,
            script_path,
            type(error).__name__,
            str(error),
            exc_info=error,
        )
