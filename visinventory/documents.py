"""Schema-tolerant accessors over saved-object documents.

Saved objects are plain JSON mappings whose shape depends on the Kibana
version that exported them. Every lookup here returns ``None`` (or an empty
container) instead of raising when a key is missing or holds the wrong type.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from .errors import DocumentError

SavedObjectDocument = Dict[str, Any]


def get_path(node: Any, path: str) -> Any:
    """Follow a dotted key path through nested mappings.

    Returns ``None`` as soon as a segment is missing or a non-mapping is
    encountered.
    """
    current = node
    for key in path.split("."):
        if not isinstance(current, dict) or key not in current:
            return None
        current = current[key]
    return current


def get_mapping(node: Any, path: str) -> Optional[Dict[str, Any]]:
    value = get_path(node, path)
    return value if isinstance(value, dict) else None


def get_sequence(node: Any, path: str) -> List[Any]:
    value = get_path(node, path)
    return value if isinstance(value, list) else []


def get_str(node: Any, path: str) -> str:
    value = get_path(node, path)
    return value if isinstance(value, str) else ""


def has_key(node: Any, path: str) -> bool:
    """Return True when the final key of ``path`` exists, whatever its value."""
    parent_path, _, key = path.rpartition(".")
    parent = get_path(node, parent_path) if parent_path else node
    return isinstance(parent, dict) and key in parent


def load_document(path: Path) -> SavedObjectDocument:
    """Read a saved-object JSON file, raising DocumentError when unusable."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DocumentError(str(path), f"unreadable ({exc.strerror or exc})") from exc
    except UnicodeDecodeError as exc:
        raise DocumentError(str(path), f"not valid UTF-8 (byte {exc.start})") from exc
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DocumentError(str(path), f"invalid JSON ({exc.msg} at line {exc.lineno})") from exc
    if not isinstance(payload, dict):
        raise DocumentError(str(path), "top-level value is not an object")
    return payload


__all__ = [
    "SavedObjectDocument",
    "get_mapping",
    "get_path",
    "get_sequence",
    "get_str",
    "has_key",
    "load_document",
]
