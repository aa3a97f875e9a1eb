"""Visualization classification for normalized saved objects."""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from .documents import SavedObjectDocument, get_mapping, get_str
from .models import BY_VALUE, Classification

TSVB_TYPE = "metrics"
LEGACY_SO_TYPE = "visualization"
FIXED_TYPE_SO_TYPES = frozenset({"lens", "map", "search"})


class VisualizationClassifier:
    """Derives type, TSVB sub-type, title and legacy status of a record.

    Classification is best effort: fields that cannot be resolved for the
    document's shape come back empty rather than raising.
    """

    def classify(self, doc: SavedObjectDocument, so_type: str, link: str) -> Classification:
        by_value = link == BY_VALUE
        source = self._vis_source(doc, so_type, by_value)

        vis_type = self._vis_type(source, so_type)
        tsvb_type = ""
        if vis_type == TSVB_TYPE and source is not None:
            tsvb_type = get_str(source, "params.type")

        return Classification(
            vis_type=vis_type,
            vis_tsvb_type=tsvb_type,
            vis_title=self._title(doc, source, by_value),
            is_legacy=so_type == LEGACY_SO_TYPE,
        )

    # ------------------------------------------------------------------
    # Internals

    @staticmethod
    def _vis_source(
        doc: SavedObjectDocument, so_type: str, by_value: bool
    ) -> Optional[Dict[str, Any]]:
        """Return the mapping holding ``type``/``params`` for this shape."""
        if by_value:
            if so_type == LEGACY_SO_TYPE:
                return get_mapping(doc, "embeddableConfig.savedVis")
            return get_mapping(doc, "embeddableConfig.attributes")
        if so_type == LEGACY_SO_TYPE:
            return get_mapping(doc, "attributes.visState")
        return get_mapping(doc, "attributes")

    @staticmethod
    def _vis_type(source: Optional[Dict[str, Any]], so_type: str) -> str:
        if so_type in FIXED_TYPE_SO_TYPES:
            return so_type
        if so_type == LEGACY_SO_TYPE and source is not None:
            return get_str(source, "type")
        return ""

    @staticmethod
    def _title(
        doc: SavedObjectDocument, source: Optional[Dict[str, Any]], by_value: bool
    ) -> str:
        if by_value:
            titles: Sequence[str] = (
                get_str(source, "title"),
                get_str(doc, "embeddableConfig.title"),
                get_str(doc, "title"),
            )
        else:
            titles = (
                get_str(doc, "attributes.title"),
                get_str(doc, "attributes.visState.title"),
            )
        return next((title for title in titles if title), "")


_DEFAULT = VisualizationClassifier()


def classify(doc: SavedObjectDocument, so_type: str, link: str) -> Classification:
    """Classify ``doc`` with the default classifier."""
    return _DEFAULT.classify(doc, so_type, link)


__all__ = ["TSVB_TYPE", "VisualizationClassifier", "classify"]
