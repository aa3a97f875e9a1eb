"""Decoding of JSON-encoded string fields inside saved-object documents."""

from __future__ import annotations

import json
from typing import Any, Dict, Tuple

from .documents import SavedObjectDocument, get_mapping

# Parent path and key of each field older exports store as a JSON string.
ENCODED_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("attributes", "uiStateJSON"),
    ("attributes", "visState"),
    ("attributes.kibanaSavedObjectMeta", "searchSourceJSON"),
)


def decode_document(doc: SavedObjectDocument) -> SavedObjectDocument:
    """Decode nested JSON fields in place and return the same document.

    Each field is decoded independently; a malformed or already structured
    value is left exactly as found. Afterwards the TSVB filter fields are
    forced back to strings, which is the shape the index expects for them.
    """
    for parent_path, key in ENCODED_FIELDS:
        parent = get_mapping(doc, parent_path)
        if parent is not None:
            _decode_field(parent, key)
    _encode_filters(doc)
    return doc


def _decode_field(parent: Dict[str, Any], key: str) -> None:
    raw = parent.get(key)
    if not isinstance(raw, str):
        return
    try:
        decoded = json.loads(raw)
    except ValueError:
        return
    if isinstance(decoded, dict):
        parent[key] = decoded


def _encode_filters(doc: SavedObjectDocument) -> None:
    params = get_mapping(doc, "attributes.visState.params")
    if params is None:
        return
    _encode_filter(params)
    series = params.get("series")
    if isinstance(series, list):
        for entry in series:
            if isinstance(entry, dict):
                _encode_filter(entry)


def _encode_filter(container: Dict[str, Any]) -> None:
    if "filter" not in container:
        return
    value = container["filter"]
    if not isinstance(value, str):
        container["filter"] = json.dumps(value, separators=(",", ":"))


__all__ = ["ENCODED_FIELDS", "decode_document"]
