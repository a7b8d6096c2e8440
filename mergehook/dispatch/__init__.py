"""Dispatch of merged pull-request hooks to configured shell scripts.

Usage
-----
Wire a dispatcher from a registry and an executor::

    from mergehook.dispatch import Dispatcher, ScriptExecutor
    from mergehook.registry import load_registry

    dispatcher = Dispatcher(load_registry("config.yml"), ScriptExecutor())
    response = dispatcher.handle("POST", "/hooks/site", body)

"""

from mergehook.dispatch.dispatcher import (
    HOOKS_MARKER,
    IGNORED_METHODS,
    Dispatcher,
    registry_key,
)
from mergehook.dispatch.executor import ScriptExecutor, spawn_script
from mergehook.dispatch.messages import RESPONSE_CODE, DispatchMessage
from mergehook.dispatch.observability import DispatchEventLogger, DispatchEventType

__all__ = [
    "HOOKS_MARKER",
    "IGNORED_METHODS",
    "RESPONSE_CODE",
    "DispatchEventLogger",
    "DispatchEventType",
    "DispatchMessage",
    "Dispatcher",
    "ScriptExecutor",
    "registry_key",
    "spawn_script",
]
