"""Package manifest loading (manifest.yml)."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Dict

import yaml

from .errors import ManifestError

MANIFEST_FILENAME = "manifest.yml"


def load_manifest(path: Path) -> Dict[str, Any]:
    """Parse a package manifest into a plain mapping."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ManifestError(f"Manifest not found: {path}") from exc
    except OSError as exc:
        raise ManifestError(f"Cannot read manifest {path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise ManifestError(f"Manifest {path} is not valid UTF-8: {exc}") from exc
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ManifestError(f"Failed to parse {path}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ManifestError(f"{path} must contain a mapping at the root")
    # Dates and other YAML-native scalars are kept JSON-friendly for the sinks.
    return _jsonable(loaded)


def _jsonable(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(key): _jsonable(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_jsonable(item) for item in value]
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


class ManifestCache:
    """Loads each manifest once per run; safe to share between worker threads."""

    def __init__(self) -> None:
        self._entries: Dict[Path, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    def get(self, path: Path) -> Dict[str, Any]:
        key = path.resolve()
        with self._lock:
            cached = self._entries.get(key)
        if cached is not None:
            return cached
        manifest = load_manifest(key)
        with self._lock:
            self._entries.setdefault(key, manifest)
            return self._entries[key]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


__all__ = ["MANIFEST_FILENAME", "ManifestCache", "load_manifest"]
