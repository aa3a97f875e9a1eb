"""Corpus traversal: turns package folders into visualization records."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .classifier import VisualizationClassifier
from .config import InventoryConfig
from .decoder import decode_document
from .documents import SavedObjectDocument, get_path, get_str, load_document
from .errors import DocumentError, ManifestError
from .git.provenance import CommitLookup, NullCommitLookup
from .logging import get_logger
from .manifest import MANIFEST_FILENAME, ManifestCache
from .models import BY_REFERENCE, BY_VALUE, CommitInfo, VisualizationRecord
from .ownership import resolve_ownership
from .panels import resolve_panels
from .references import ReferenceIndex, dashboard_for, index_references

KIBANA_FOLDER = "kibana"
DASHBOARD_FOLDER = "dashboard"
BEATS_KIBANA_FOLDER = "7"
BEATS_SOURCE = "beat"
BEATS_FOLDERS: Tuple[str, ...] = ("visualization", "lens", "map")


@dataclass
class WalkContext:
    """Per-run state threaded through the walker instead of module globals."""

    config: InventoryConfig
    commits: CommitLookup | NullCommitLookup
    manifests: ManifestCache = field(default_factory=ManifestCache)
    classifier: VisualizationClassifier = field(default_factory=VisualizationClassifier)

    @classmethod
    def from_config(
        cls, config: InventoryConfig, *, git_runner: Callable[..., str] | None = None
    ) -> "WalkContext":
        commits: CommitLookup | NullCommitLookup
        if config.provenance:
            commits = CommitLookup(runner=git_runner)
        else:
            commits = NullCommitLookup()
        return cls(config=config, commits=commits)


class CorpusWalker:
    """Collects visualization records from integration and beats trees."""

    def __init__(self, context: WalkContext | None = None) -> None:
        if context is None:
            context = WalkContext.from_config(InventoryConfig(root=Path.cwd()))
        self.context = context
        self.logger = get_logger("walker")

    @property
    def config(self) -> InventoryConfig:
        return self.context.config

    def process(self, package_dir: Path | str) -> List[VisualizationRecord]:
        """Return the records of one integration package.

        Raises ManifestError when the package has no usable manifest.yml.
        """
        package_path = Path(package_dir)
        manifest = self.context.manifests.get(package_path / MANIFEST_FILENAME)
        records = self.collect_kibana_folder(
            package_path / KIBANA_FOLDER,
            app=package_path.name,
            source=self.config.source,
            manifest=manifest,
        )
        self.logger.info("Collected %d vis in %s", len(records), package_path.name)
        return records

    def collect_integrations(self, integrations_root: Path | str) -> List[VisualizationRecord]:
        """Walk ``<root>/packages/*`` and concatenate records in package order."""
        packages_dir = Path(integrations_root) / "packages"
        self.logger.info("Collecting integrations from %s", packages_dir)
        try:
            packages = sorted(entry for entry in packages_dir.iterdir() if entry.is_dir())
        except OSError as exc:
            self.logger.error("Cannot enumerate packages in %s: %s", packages_dir, exc)
            return []

        if self.config.workers > 1 and len(packages) > 1:
            with ThreadPoolExecutor(max_workers=self.config.workers) as executor:
                batches = list(executor.map(self._process_or_skip, packages))
        else:
            batches = [self._process_or_skip(package) for package in packages]

        records: List[VisualizationRecord] = []
        for batch in batches:
            records.extend(batch)
        return records

    def collect_beats(self, beats_root: Path | str) -> List[VisualizationRecord]:
        """Collect every ``7`` kibana folder below ``beats_root``."""
        root = Path(beats_root)
        records: List[VisualizationRecord] = []
        if not root.is_dir():
            self.logger.error("Beats directory not found: %s", root)
            return records
        for kibana_dir in _find_beats_folders(root):
            relative = kibana_dir.parent.relative_to(root).as_posix()
            app = root.name if relative == "." else relative
            found = self.collect_kibana_folder(
                kibana_dir, app=app, source=BEATS_SOURCE, folders=BEATS_FOLDERS
            )
            self.logger.info("Collected %d vis in %s", len(found), app)
            records.extend(found)
        return records

    def collect_kibana_folder(
        self,
        kibana_dir: Path,
        *,
        app: str,
        source: str,
        manifest: Optional[Dict[str, Any]] = None,
        folders: Optional[Sequence[str]] = None,
    ) -> List[VisualizationRecord]:
        """Collect by-value panels, then standalone objects, from one folder."""
        manifest = manifest or {}
        records, index = self._collect_dashboards(kibana_dir, app, source, manifest)
        for folder in folders if folders is not None else self.config.folders:
            records.extend(
                self._collect_standalone(kibana_dir / folder, folder, app, source, manifest, index)
            )
        return records

    # ------------------------------------------------------------------
    # Internals

    def _process_or_skip(self, package_dir: Path) -> List[VisualizationRecord]:
        try:
            return self.process(package_dir)
        except (ManifestError, OSError) as exc:
            self.logger.warning("Skipping package %s: %s", package_dir.name, exc)
            return []

    def _collect_dashboards(
        self, kibana_dir: Path, app: str, source: str, manifest: Dict[str, Any]
    ) -> Tuple[List[VisualizationRecord], ReferenceIndex]:
        index: ReferenceIndex = {}
        records: List[VisualizationRecord] = []
        for path in self._iter_documents(kibana_dir / DASHBOARD_FOLDER):
            dashboard = self._load(path)
            if dashboard is None:
                continue
            commit = self._commit(path)
            index_references(dashboard, index)
            title = get_str(dashboard, "attributes.title")
            for panel in resolve_panels(get_path(dashboard, "attributes.panelsJSON")):
                records.append(
                    self._record(
                        panel.doc or {},
                        panel.so_type,
                        app=app,
                        source=source,
                        link=BY_VALUE,
                        dashboard=title,
                        path=path,
                        commit=commit,
                        manifest=manifest,
                    )
                )
        return records, index

    def _collect_standalone(
        self,
        folder_dir: Path,
        so_type: str,
        app: str,
        source: str,
        manifest: Dict[str, Any],
        index: ReferenceIndex,
    ) -> List[VisualizationRecord]:
        records: List[VisualizationRecord] = []
        for path in self._iter_documents(folder_dir):
            doc = self._load(path)
            if doc is None:
                continue
            decode_document(doc)
            records.append(
                self._record(
                    doc,
                    so_type,
                    app=app,
                    source=source,
                    link=BY_REFERENCE,
                    dashboard=dashboard_for(index, doc),
                    path=path,
                    commit=self._commit(path),
                    manifest=manifest,
                )
            )
        return records

    def _record(
        self,
        doc: SavedObjectDocument,
        so_type: str,
        *,
        app: str,
        source: str,
        link: str,
        dashboard: str,
        path: Path,
        commit: CommitInfo,
        manifest: Dict[str, Any],
    ) -> VisualizationRecord:
        return VisualizationRecord(
            doc=doc,
            so_type=so_type,
            app=app,
            source=source,
            link=link,
            dashboard=dashboard,
            path=str(path),
            commit=commit,
            manifest=manifest,
            classification=self.context.classifier.classify(doc, so_type, link),
            ownership=resolve_ownership(manifest, self.config.ownership.groups),
        )

    def _iter_documents(self, folder: Path) -> List[Path]:
        if not folder.is_dir():
            return []
        try:
            return sorted(
                entry for entry in folder.iterdir() if entry.is_file() and entry.suffix == ".json"
            )
        except OSError as exc:
            self.logger.warning("Cannot list %s: %s", folder, exc)
            return []

    def _load(self, path: Path) -> Optional[SavedObjectDocument]:
        try:
            return load_document(path)
        except DocumentError as exc:
            self.logger.warning("Skipping saved object %s", exc)
            return None

    def _commit(self, path: Path) -> CommitInfo:
        return self.context.commits.lookup(path) or CommitInfo.empty()


def _find_beats_folders(root: Path) -> List[Path]:
    """Depth-first search for ``7`` folders in sorted entry order.

    A ``7`` folder is collected but not descended into; its sibling
    directories are still searched.
    """
    try:
        entries = sorted(root.iterdir())
    except OSError:
        return []
    found: List[Path] = []
    for entry in entries:
        if not entry.is_dir():
            continue
        if entry.name == BEATS_KIBANA_FOLDER:
            found.append(entry)
        else:
            found.extend(_find_beats_folders(entry))
    return found


__all__ = ["CorpusWalker", "WalkContext"]
