"""Inventory of Kibana visualizations shipped as saved objects."""

from .classifier import VisualizationClassifier, classify
from .decoder import decode_document
from .models import (
    BY_REFERENCE,
    BY_VALUE,
    Classification,
    CommitInfo,
    Ownership,
    PanelDescriptor,
    VisualizationRecord,
)
from .panels import normalize_panels, resolve_panels
from .references import build_reference_index, index_references
from .walker import CorpusWalker, WalkContext

__all__ = [
    "BY_REFERENCE",
    "BY_VALUE",
    "Classification",
    "CommitInfo",
    "CorpusWalker",
    "Ownership",
    "PanelDescriptor",
    "VisualizationClassifier",
    "VisualizationRecord",
    "WalkContext",
    "build_reference_index",
    "classify",
    "decode_document",
    "index_references",
    "normalize_panels",
    "resolve_panels",
]
