"""Immutable mapping from hook keys to script paths."""

from __future__ import annotations

import collections.abc as cabc
import types
import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path


class ScriptRegistry(cabc.Mapping[str, str]):
    """Read-only lookup of script paths keyed by the last URL segment.

    The registry is built once at startup and never mutated, so it can be
    shared between concurrent requests without synchronisation.

    Parameters
    ----------
    scripts
        Key to script path mapping. The mapping is copied.
    source
        File the mapping was loaded from, if any.

    """

    __slots__ = ("_scripts", "source")

    def __init__(
        self,
        scripts: cabc.Mapping[str, str] | None = None,
        *,
        source: Path | None = None,
    ) -> None:
        """Copy *scripts* into a read-only view."""
        self._scripts: cabc.Mapping[str, str] = types.MappingProxyType(
            dict(scripts or {})
        )
        self.source = source

    @classmethod
    def empty(cls, *, source: Path | None = None) -> ScriptRegistry:
        """Return a registry without any scripts."""
        return cls({}, source=source)

    def script_for(self, key: str) -> str:
        """Return the script path for *key*, or an empty string when unknown."""
        return self._scripts.get(key, "")

    def __getitem__(self, key: str) -> str:
        """Return the script path configured for *key*."""
        return self._scripts[key]

    def __iter__(self) -> cabc.Iterator[str]:
        """Iterate over configured keys."""
        return iter(self._scripts)

    def __len__(self) -> int:
        """Return the number of configured keys."""
        return len(self._scripts)

    def __repr__(self) -> str:
        """Return a debugging representation."""
        return f"ScriptRegistry({dict(self._scripts)!r}, source={self.source!r})"
