"""Dashboard panel resolution."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from .documents import get_mapping, has_key
from .models import BY_REFERENCE, BY_VALUE, PanelDescriptor

# Panel type -> key under embeddableConfig that holds the inlined object.
EMBEDDED_KEYS: Dict[str, str] = {
    "visualization": "savedVis",
    "lens": "attributes",
    "map": "attributes",
}


def normalize_panels(raw: Any) -> List[Dict[str, Any]]:
    """Return the panel entries of a ``panelsJSON`` value in document order.

    Legacy dashboards store the list as a JSON string, newer ones as an
    array. Undecodable strings and unexpected types yield an empty list.
    """
    panels: Any
    if isinstance(raw, str):
        try:
            panels = json.loads(raw)
        except ValueError:
            return []
    else:
        panels = raw
    if not isinstance(panels, list):
        return []
    return [panel for panel in panels if isinstance(panel, dict)]


def classify_panel(panel: Dict[str, Any]) -> Optional[PanelDescriptor]:
    """Classify a single panel entry.

    Panels without a string ``type`` link to a separately stored object and
    carry no embedded document. Typed panels are by-value only when their
    ``embeddableConfig`` holds the inlined object; otherwise ``None``.
    """
    panel_type = panel.get("type")
    if not isinstance(panel_type, str):
        return PanelDescriptor(doc=None, so_type="", link=BY_REFERENCE)

    embedded_key = EMBEDDED_KEYS.get(panel_type)
    if embedded_key is None:
        return None
    config = get_mapping(panel, "embeddableConfig")
    if config is None or not has_key(config, embedded_key):
        return None
    return PanelDescriptor(doc=panel, so_type=panel_type, link=BY_VALUE)


def resolve_panels(raw: Any) -> List[PanelDescriptor]:
    """Return the by-value panels of a dashboard in document order."""
    descriptors: List[PanelDescriptor] = []
    for panel in normalize_panels(raw):
        descriptor = classify_panel(panel)
        if descriptor is not None and descriptor.is_by_value:
            descriptors.append(descriptor)
    return descriptors


__all__ = ["EMBEDDED_KEYS", "classify_panel", "normalize_panels", "resolve_panels"]
