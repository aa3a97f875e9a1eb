"""Dashboard reference index: saved-object id -> owning dashboard title."""

from __future__ import annotations

from typing import Dict, Iterable, Optional

from .documents import SavedObjectDocument, get_sequence, get_str

ReferenceIndex = Dict[str, str]


def index_references(
    dashboard: SavedObjectDocument, index: Optional[ReferenceIndex] = None
) -> ReferenceIndex:
    """Record every id the dashboard references against its title.

    An id already present is overwritten, so when several dashboards of a
    package share an object the last one processed wins.
    """
    if index is None:
        index = {}
    title = get_str(dashboard, "attributes.title")
    for reference in get_sequence(dashboard, "references"):
        if not isinstance(reference, dict):
            continue
        ref_id = reference.get("id")
        if isinstance(ref_id, str) and ref_id:
            index[ref_id] = title
    return index


def build_reference_index(dashboards: Iterable[SavedObjectDocument]) -> ReferenceIndex:
    index: ReferenceIndex = {}
    for dashboard in dashboards:
        index_references(dashboard, index)
    return index


def dashboard_for(index: ReferenceIndex, doc: SavedObjectDocument) -> str:
    ref_id = doc.get("id")
    if not isinstance(ref_id, str):
        return ""
    return index.get(ref_id, "")


__all__ = ["ReferenceIndex", "build_reference_index", "dashboard_for", "index_references"]
