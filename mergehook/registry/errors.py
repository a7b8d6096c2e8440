"""Errors specific to the script registry."""

from __future__ import annotations

from pathlib import Path


class RegistryError(Exception):
    """Base class for registry errors."""


class RegistryLoadError(RegistryError):
    """Raised when the registry file cannot be read or parsed."""

    def __init__(self, path: Path | str, reason: str) -> None:
        """Initialise with the registry path and failure reason."""
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Failed to load script registry {self.path}: {reason}")
