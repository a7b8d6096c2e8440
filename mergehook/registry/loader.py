"""YAML loaders for the script registry file.

The registry file is a flat YAML mapping from hook key to script path::

    my-project: /srv/deploy/my-project.sh
    docs: /srv/deploy/docs.sh

"""

from __future__ import annotations

from pathlib import Path

import msgspec
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from mergehook.logging import get_logger, log_error, log_info

from .errors import RegistryLoadError
from .mapping import ScriptRegistry

YAML_VERSION = (1, 2)

logger = get_logger(__name__)


def parse_registry(path: Path | str) -> ScriptRegistry:
    """Parse a YAML registry file using a YAML 1.2 compliant loader.

    Scalar keys and values are converted to strings and ``null`` values
    become empty strings, which the dispatcher treats as "no script".

    Raises
    ------
    RegistryLoadError
        If the file cannot be read, is not valid YAML, or is not a flat
        mapping of scalars.

    """
    path_obj = Path(path)
    yaml = _yaml()

    try:
        loaded = yaml.load(path_obj.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, YAMLError) as exc:
        raise RegistryLoadError(path_obj, f"failed to parse YAML: {exc}") from exc

    if loaded is None:
        raise RegistryLoadError(path_obj, "registry file is empty")
    if not isinstance(loaded, dict):
        raise RegistryLoadError(
            path_obj, f"expected a mapping, got {type(loaded).__name__}"
        )

    normalised = {_scalar(key): _scalar(value) for key, value in loaded.items()}
    try:
        scripts = msgspec.convert(normalised, type=dict[str, str])
    except msgspec.ValidationError as exc:
        raise RegistryLoadError(path_obj, f"schema validation failed: {exc}") from exc

    return ScriptRegistry(scripts, source=path_obj)


def load_registry(path: Path | str) -> ScriptRegistry:
    """Load the registry, logging failures and falling back to an empty one.

    The service keeps running with an empty registry when the file is
    missing or malformed; every lookup then misses and no script runs.
    """
    path_obj = Path(path)
    try:
        registry = parse_registry(path_obj)
    except RegistryLoadError as exc:
        log_error(logger, "%s", exc)
        return ScriptRegistry.empty(source=path_obj)

    log_info(
        logger,
        "Loaded script registry from %s (%d keys)",
        path_obj,
        len(registry),
    )
    return registry


def _scalar(value: object) -> object:
    """Return scalars as strings; leave collections for schema validation."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    return value


def _yaml() -> YAML:
    yaml = YAML(typ="safe")
    yaml.version = YAML_VERSION
    yaml.allow_duplicate_keys = False
    return yaml
