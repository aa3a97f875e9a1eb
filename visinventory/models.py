"""Core data models shared across visinventory components."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

BY_REFERENCE = "by_reference"
BY_VALUE = "by_value"


@dataclass(frozen=True)
class CommitInfo:
    """Last commit that touched a saved-object file."""

    hash: str
    author: str
    date: str

    @classmethod
    def empty(cls) -> "CommitInfo":
        return cls(hash="", author="", date="")

    def to_dict(self) -> Dict[str, str]:
        return {"hash": self.hash, "author": self.author, "date": self.date}


@dataclass(frozen=True)
class PanelDescriptor:
    """One dashboard panel, classified by how it links to its visualization."""

    doc: Optional[Dict[str, Any]]
    so_type: str
    link: str

    @property
    def is_by_value(self) -> bool:
        return self.link == BY_VALUE


@dataclass(frozen=True)
class Classification:
    """Derived visualization facts used for legacy reporting."""

    vis_type: str = ""
    vis_tsvb_type: str = ""
    vis_title: str = ""
    is_legacy: bool = False


@dataclass(frozen=True)
class Ownership:
    """Team ownership resolved from a package manifest."""

    gh_owner: str = ""
    owning_group: str = ""


@dataclass
class VisualizationRecord:
    """Normalized output unit handed to the sinks."""

    doc: Dict[str, Any]
    so_type: str
    app: str
    source: str
    link: str
    path: str
    dashboard: str = ""
    commit: CommitInfo = field(default_factory=CommitInfo.empty)
    manifest: Dict[str, Any] = field(default_factory=dict)
    classification: Classification = field(default_factory=Classification)
    ownership: Ownership = field(default_factory=Ownership)

    def to_dict(self) -> Dict[str, Any]:
        """Return the flat document shape expected by the legacy_vis index."""
        return {
            "doc": self.doc,
            "soType": self.so_type,
            "app": self.app,
            "source": self.source,
            "link": self.link,
            "dashboard": self.dashboard,
            "path": self.path,
            "commit": self.commit.to_dict(),
            "manifest": self.manifest,
            "vis_type": self.classification.vis_type,
            "vis_tsvb_type": self.classification.vis_tsvb_type,
            "vis_title": self.classification.vis_title,
            "is_legacy": self.classification.is_legacy,
            "gh_owner": self.ownership.gh_owner,
            "owning_group": self.ownership.owning_group,
        }
