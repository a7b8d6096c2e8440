"""mergehook HTTP API layer.

This package provides the Falcon Asynchronous Server Gateway Interface
(ASGI) application that receives merge-request webhooks.

Usage
-----
Create and run the application::

    from mergehook.api import create_app

    app = create_app()              # empty registry, nothing ever runs
    app = create_app(dependencies)  # dispatcher with a loaded registry

Public API
----------
create_app
    Application factory that mounts the catch-all hook sink.
"""

from mergehook.api.app import AppDependencies, create_app

__all__ = ["AppDependencies", "create_app"]
