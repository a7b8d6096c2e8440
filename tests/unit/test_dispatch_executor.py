"""Unit tests for the detached script executor."""

from __future__ import annotations

import asyncio
import datetime as dt
import itertools
import typing as typ
from unittest import mock

import pytest

from mergehook.dispatch import DispatchEventLogger, ScriptExecutor
from tests.helpers.executors import RecordingLauncher, TracingLock

if typ.TYPE_CHECKING:
    from pathlib import Path


def _executor(
    launcher: RecordingLauncher,
    *,
    lock: TracingLock | None = None,
    event_logger: DispatchEventLogger | None = None,
) -> ScriptExecutor:
    return ScriptExecutor(
        shell="/bin/bash",
        lock=lock,
        launcher=launcher,
        event_logger=event_logger,
    )


class TestRun:
    """Tests for ScriptExecutor.run."""

    @pytest.mark.asyncio
    async def test_passes_script_as_only_argument(
        self, launcher: RecordingLauncher
    ) -> None:
        """The shell receives the configured path as its sole argument."""
        returncode = await _executor(launcher).run("/srv/site.sh")

        assert returncode == 0
        assert launcher.calls == [("/bin/bash", "/srv/site.sh")]

    @pytest.mark.asyncio
    async def test_lock_wraps_each_run(
        self, launcher: RecordingLauncher, tracing_lock: TracingLock
    ) -> None:
        """Each run acquires then releases the lock exactly once."""
        executor = _executor(launcher, lock=tracing_lock)

        await executor.run("/srv/a.sh")
        await executor.run("/srv/b.sh")

        assert tracing_lock.events == ["acquire", "release", "acquire", "release"]

    @pytest.mark.asyncio
    async def test_launch_failure_is_logged_and_releases_lock(
        self, tracing_lock: TracingLock
    ) -> None:
        """An OSError at launch is logged, not raised, and frees the lock."""
        error = FileNotFoundError("no such interpreter")
        launcher = RecordingLauncher(launch_errors={"/srv/a.sh": error})
        event_logger = mock.create_autospec(DispatchEventLogger, instance=True)
        executor = _executor(launcher, lock=tracing_lock, event_logger=event_logger)

        assert await executor.run("/srv/a.sh") is None

        event_logger.log_launch_failed.assert_called_once_with(
            script_path="/srv/a.sh", error=error
        )
        event_logger.log_script_started.assert_not_called()
        assert tracing_lock.events == ["acquire", "release"]

    @pytest.mark.asyncio
    async def test_invalid_argument_is_logged_as_launch_failure(
        self, tracing_lock: TracingLock
    ) -> None:
        """A ValueError from the launcher, such as an embedded NUL, is logged."""
        error = ValueError("embedded null byte")
        launcher = RecordingLauncher(launch_errors={"/srv/a\x00.sh": error})
        event_logger = mock.create_autospec(DispatchEventLogger, instance=True)
        executor = _executor(launcher, lock=tracing_lock, event_logger=event_logger)

        assert await executor.run("/srv/a\x00.sh") is None

        event_logger.log_launch_failed.assert_called_once_with(
            script_path="/srv/a\x00.sh", error=error
        )
        assert tracing_lock.events == ["acquire", "release"]

    @pytest.mark.asyncio
    async def test_non_zero_exit_is_logged(self) -> None:
        """A failing script is reported with its exit status."""
        launcher = RecordingLauncher(returncodes={"/srv/a.sh": 3})
        event_logger = mock.create_autospec(DispatchEventLogger, instance=True)
        executor = _executor(launcher, event_logger=event_logger)

        assert await executor.run("/srv/a.sh") == 3

        event_logger.log_script_failed.assert_called_once()
        kwargs = event_logger.log_script_failed.call_args.kwargs
        assert kwargs["returncode"] == 3
        assert kwargs["script_path"] == "/srv/a.sh"
        event_logger.log_script_completed.assert_not_called()

    @pytest.mark.asyncio
    async def test_completion_reports_duration(self, launcher: RecordingLauncher) -> None:
        """Completion is logged with the clock-derived duration and pid."""
        start = dt.datetime(2024, 7, 1, tzinfo=dt.UTC)
        ticks = itertools.count()
        event_logger = mock.create_autospec(DispatchEventLogger, instance=True)
        executor = ScriptExecutor(
            launcher=launcher,
            event_logger=event_logger,
            clock=lambda: start + dt.timedelta(seconds=5 * next(ticks)),
        )

        await executor.run("/srv/a.sh")

        started = event_logger.log_script_started.call_args.kwargs
        completed = event_logger.log_script_completed.call_args.kwargs
        assert completed["duration"] == dt.timedelta(seconds=5)
        assert completed["pid"] == started["pid"]


class TestSubmit:
    """Tests for detached submission."""

    @pytest.mark.asyncio
    async def test_submit_does_not_wait(self, launcher: RecordingLauncher) -> None:
        """submit() returns before the script has run."""
        executor = _executor(launcher)

        task = executor.submit("/srv/a.sh")

        assert not task.done()
        assert executor.pending == 1
        await executor.join()
        assert executor.pending == 0
        assert task.result() == 0

    @pytest.mark.asyncio
    async def test_concurrent_runs_never_overlap(self) -> None:
        """Runs for any keys are serialised by the shared lock."""
        launcher = RecordingLauncher(duration=0.02)
        executor = _executor(launcher)

        for path in ("/srv/a.sh", "/srv/b.sh", "/srv/a.sh", "/srv/c.sh"):
            executor.submit(path)
        await executor.join()

        assert len(launcher.timeline) == 8
        assert not launcher.overlapped()

    @pytest.mark.asyncio
    async def test_second_run_waits_for_first_exit(self) -> None:
        """The second script starts only after the first one exits."""
        launcher = RecordingLauncher(duration=0.02)
        executor = _executor(launcher)

        executor.submit("/srv/a.sh")
        executor.submit("/srv/b.sh")
        await asyncio.sleep(0.005)

        assert launcher.timeline == [("start", "/srv/a.sh")]
        await executor.join()
        first_end = launcher.timeline.index(("end", "/srv/a.sh"))
        second_start = launcher.timeline.index(("start", "/srv/b.sh"))
        assert first_end < second_start

    @pytest.mark.asyncio
    async def test_failure_does_not_block_later_runs(self) -> None:
        """A launch failure releases the lock for queued runs."""
        launcher = RecordingLauncher(
            launch_errors={"/srv/a.sh": PermissionError("denied")}
        )
        executor = _executor(launcher)

        first = executor.submit("/srv/a.sh")
        second = executor.submit("/srv/b.sh")
        await executor.join()

        assert first.result() is None
        assert second.result() == 0


class TestRealProcess:
    """Runs an actual child process through the default launcher."""

    @pytest.mark.asyncio
    async def test_runs_script_with_shell(self, tmp_path: Path) -> None:
        """The default launcher executes the script via the shell."""
        marker = tmp_path / "ran"
        script = tmp_path / "deploy.sh"
        script.write_text(f'echo merged > "{marker}"\n', encoding="utf-8")
        executor = ScriptExecutor(shell="/bin/sh")

        returncode = await executor.run(str(script))

        assert returncode == 0
        assert marker.read_text(encoding="utf-8").strip() == "merged"

    @pytest.mark.asyncio
    async def test_reports_exit_status(self, tmp_path: Path) -> None:
        """A script's exit status is returned."""
        script = tmp_path / "fail.sh"
        script.write_text("exit 4\n", encoding="utf-8")

        assert await ScriptExecutor(shell="/bin/sh").run(str(script)) == 4

    @pytest.mark.asyncio
    async def test_nul_in_script_path(self, tmp_path: Path) -> None:
        """A script path the OS cannot accept fails without raising."""
        executor = ScriptExecutor(shell="/bin/sh")

        task = executor.submit(str(tmp_path / "deploy\x00.sh"))
        await executor.join()

        assert task.result() is None

    @pytest.mark.asyncio
    async def test_missing_interpreter(self, tmp_path: Path) -> None:
        """A missing interpreter is a logged launch failure."""
        executor = ScriptExecutor(shell=str(tmp_path / "no-shell"))

        assert await executor.run(str(tmp_path / "deploy.sh")) is None
