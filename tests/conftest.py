"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import typing as typ

import pytest

from mergehook.dispatch import Dispatcher, ScriptExecutor
from mergehook.logging import set_discarded_channels
from mergehook.registry import ScriptRegistry
from tests.helpers.executors import RecordingLauncher, TracingLock

if typ.TYPE_CHECKING:
    import collections.abc as cabc


@pytest.fixture(autouse=True)
def _reset_log_channels() -> cabc.Iterator[None]:
    """Keep every log channel enabled between tests."""
    set_discarded_channels(())
    yield
    set_discarded_channels(())


@pytest.fixture
def launcher() -> RecordingLauncher:
    """Return a launcher double recording script runs."""
    return RecordingLauncher()


@pytest.fixture
def tracing_lock() -> TracingLock:
    """Return an execution lock that records acquire/release order."""
    return TracingLock()


@pytest.fixture
def registry() -> ScriptRegistry:
    """Return a registry with two scripts and one blank entry."""
    return ScriptRegistry(
        {
            "widgets": "/srv/deploy/widgets.sh",
            "gadgets": "/srv/deploy/gadgets.sh",
            "blank": "   ",
        }
    )


@pytest.fixture
def executor(launcher: RecordingLauncher, tracing_lock: TracingLock) -> ScriptExecutor:
    """Return an executor wired to the launcher and lock doubles."""
    return ScriptExecutor(shell="/bin/bash", lock=tracing_lock, launcher=launcher)


@pytest.fixture
def dispatcher(registry: ScriptRegistry, executor: ScriptExecutor) -> Dispatcher:
    """Return a dispatcher over the shared registry and executor."""
    return Dispatcher(registry, executor)
