"""Detached, serialised execution of configured shell scripts.

:class:`ScriptExecutor` owns the process-wide execution lock. Every call to
:meth:`ScriptExecutor.submit` spawns an asyncio task that is detached from
the HTTP request that triggered it: the task waits for the lock, runs
``<shell> <script_path>`` to completion and releases the lock. At most one
script runs at a time regardless of which hook key triggered it. There is
no timeout and no cancellation, so a hanging script blocks every later run.

Usage
-----
>>> executor = ScriptExecutor(shell="/bin/bash")
>>> task = executor.submit("/srv/deploy/site.sh")  # inside a running loop
>>> await executor.join()

"""

from __future__ import annotations

import asyncio
import contextlib
import datetime as dt
import typing as typ

from mergehook.config import DEFAULT_SHELL

from .observability import DispatchEventLogger

__all__ = ["Launcher", "ScriptExecutor", "ScriptProcess", "spawn_script"]


class ScriptProcess(typ.Protocol):
    """Subset of :class:`asyncio.subprocess.Process` used by the executor."""

    @property
    def pid(self) -> int: ...

    async def wait(self) -> int: ...


Launcher = typ.Callable[[str, str], typ.Awaitable[ScriptProcess]]


async def spawn_script(shell: str, script_path: str) -> ScriptProcess:
    """Start ``shell script_path`` as a child process.

    The child inherits the server's environment, working directory and
    standard streams.
    """
    return await asyncio.create_subprocess_exec(shell, script_path)


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.UTC)


class ScriptExecutor:
    """Run scripts one at a time in tasks detached from the caller.

    Parameters
    ----------
    shell
        Absolute path of the interpreter passed each script path.
    lock
        Mutual-exclusion primitive guarding execution. A fresh
        :class:`asyncio.Lock` is used when omitted; tests may inject a
        tracing variant.
    launcher
        Coroutine function starting a process for ``(shell, script_path)``.
    event_logger
        Structured logger for script lifecycle events.
    clock
        Callable returning the current time, used for durations.

    """

    def __init__(  # noqa: PLR0913 - collaborators are injected for tests
        self,
        *,
        shell: str = DEFAULT_SHELL,
        lock: contextlib.AbstractAsyncContextManager[typ.Any] | None = None,
        launcher: Launcher | None = None,
        event_logger: DispatchEventLogger | None = None,
        clock: typ.Callable[[], dt.datetime] = _utcnow,
    ) -> None:
        """Configure the executor with its collaborators."""
        self.shell = shell
        self._lock = lock if lock is not None else asyncio.Lock()
        self._launcher: Launcher = launcher or spawn_script
        self._event_logger = event_logger or DispatchEventLogger()
        self._clock = clock
        self._tasks: set[asyncio.Task[int | None]] = set()

    @property
    def pending(self) -> int:
        """Return the number of submitted runs that have not finished."""
        return len(self._tasks)

    def submit(self, script_path: str) -> asyncio.Task[int | None]:
        """Schedule *script_path* for execution without awaiting it.

        Must be called from a running event loop. The executor holds a
        reference to the task until it completes.
        """
        task = asyncio.create_task(
            self.run(script_path),
            name=f"mergehook-script:{script_path}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def run(self, script_path: str) -> int | None:
        """Run *script_path* under the execution lock.

        Returns
        -------
        int | None
            The exit status, or ``None`` when the process could not be
            started or awaited. Failures are logged, never raised.

        """
        async with self._lock:
            started_at = self._clock()
            try:
                process = await self._launcher(self.shell, script_path)
            except (OSError, ValueError) as exc:
                self._event_logger.log_launch_failed(
                    script_path=script_path, error=exc
                )
                return None

            pid = process.pid
            self._event_logger.log_script_started(script_path=script_path, pid=pid)
            try:
                returncode = await process.wait()
            except OSError as exc:
                self._event_logger.log_launch_failed(
                    script_path=script_path, error=exc
                )
                return None

            duration = self._clock() - started_at
            if returncode == 0:
                self._event_logger.log_script_completed(
                    script_path=script_path, pid=pid, duration=duration
                )
            else:
                self._event_logger.log_script_failed(
                    script_path=script_path,
                    pid=pid,
                    returncode=returncode,
                    duration=duration,
                )
            return returncode

    async def join(self) -> None:
        """Wait until every submitted run has finished.

        Runs submitted while waiting are awaited as well. Nothing is
        cancelled.
        """
        while self._tasks:
            await asyncio.gather(*list(self._tasks))
