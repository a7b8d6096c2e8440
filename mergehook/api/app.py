"""Application factory for the mergehook Falcon ASGI application.

This module provides ``create_app()`` which builds the Falcon ASGI
application around a single catch-all sink. There is no REST routing:
every path and method reaches the dispatcher.

Usage
-----
Create an app from explicit dependencies::

    from mergehook.api.app import AppDependencies, create_app
    from mergehook.dispatch import Dispatcher, ScriptExecutor
    from mergehook.registry import load_registry

    deps = AppDependencies(
        dispatcher=Dispatcher(load_registry("config.yml"), ScriptExecutor()),
    )
    app = create_app(deps)

"""

from __future__ import annotations

import dataclasses as dc

import falcon.asgi

from mergehook.api.resources import HookSink
from mergehook.dispatch import Dispatcher, ScriptExecutor
from mergehook.registry import ScriptRegistry

__all__ = ["AppDependencies", "create_app"]


@dc.dataclass(frozen=True, slots=True)
class AppDependencies:
    """Dependencies for the Falcon ASGI application.

    Attributes
    ----------
    dispatcher
        Dispatcher shared by every request. Its registry is read-only and
        its executor owns the process-wide execution lock.

    """

    dispatcher: Dispatcher


def _default_dependencies() -> AppDependencies:
    """Return dependencies with an empty registry and default executor."""
    return AppDependencies(
        dispatcher=Dispatcher(ScriptRegistry.empty(), ScriptExecutor()),
    )


def create_app(
    dependencies: AppDependencies | None = None,
) -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    Parameters
    ----------
    dependencies
        Optional application dependencies. When ``None``, the app runs with
        an empty registry, so no hook ever triggers a script.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    deps = dependencies or _default_dependencies()

    app = falcon.asgi.App()
    app.add_sink(HookSink(deps.dispatcher), prefix="/")
    return app
