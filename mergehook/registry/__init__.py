"""Script registry mapping webhook keys to shell scripts.

The registry is loaded once at process start from a YAML file and is
read-only afterwards. A missing or malformed file yields an empty registry
rather than stopping the service.

Usage
-----
Load the registry and look up a script::

    from mergehook.registry import load_registry

    registry = load_registry("config.yml")
    script = registry.script_for("my-project")

"""

from mergehook.registry.errors import RegistryError, RegistryLoadError
from mergehook.registry.loader import load_registry, parse_registry
from mergehook.registry.mapping import ScriptRegistry

__all__ = [
    "RegistryError",
    "RegistryLoadError",
    "ScriptRegistry",
    "load_registry",
    "parse_registry",
]
