"""Exception hierarchy for visinventory."""

from __future__ import annotations


class VisInventoryError(RuntimeError):
    """Base class for errors raised by visinventory."""


class ConfigError(VisInventoryError):
    """Raised when the configuration file cannot be parsed."""


class ManifestError(VisInventoryError):
    """Raised when a package manifest is missing or unreadable."""


class DocumentError(VisInventoryError):
    """Raised when a saved-object file cannot be read or parsed."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


__all__ = ["ConfigError", "DocumentError", "ManifestError", "VisInventoryError"]
