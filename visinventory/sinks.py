"""Output sinks for collected visualization records."""

from __future__ import annotations

import json
import secrets
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Sequence, Union

from .models import VisualizationRecord

RecordLike = Union[VisualizationRecord, Dict[str, Any]]

DEFAULT_INDEX = "legacy_vis"
DEFAULT_CHUNK_SIZE = 250

# Mapping used when (re)creating the legacy_vis index.
INDEX_MAPPINGS: Dict[str, Any] = {
    "properties": {
        "doc": {"type": "flattened", "depth_limit": 50},
        "manifest": {"type": "flattened"},
        "soType": {"type": "keyword"},
        "app": {"type": "keyword"},
        "source": {"type": "keyword"},
        "link": {"type": "keyword"},
        "dashboard": {"type": "keyword"},
        "path": {"type": "keyword"},
        "commit": {
            "properties": {
                "hash": {"type": "keyword"},
                "author": {"type": "keyword"},
                "date": {"type": "date"},
            }
        },
        "vis_type": {"type": "keyword"},
        "vis_tsvb_type": {"type": "keyword"},
        "vis_title": {"type": "keyword"},
        "is_legacy": {"type": "boolean"},
        "gh_owner": {"type": "keyword"},
        "owning_group": {"type": "keyword"},
    }
}


def as_document(record: RecordLike) -> Dict[str, Any]:
    if isinstance(record, VisualizationRecord):
        document = record.to_dict()
    else:
        document = dict(record)
    commit = document.get("commit")
    # The index maps commit.date as a date; an empty string would be rejected.
    if isinstance(commit, dict) and not commit.get("date"):
        document["commit"] = {**commit, "date": None}
    return document


def write_json(records: Iterable[RecordLike], path: Path) -> int:
    """Write records as a pretty-printed JSON array, replacing ``path``."""
    documents = [
        record.to_dict() if isinstance(record, VisualizationRecord) else dict(record)
        for record in records
    ]
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(documents, indent=2), encoding="utf-8")
    return len(documents)


def read_json(path: Path) -> List[Dict[str, Any]]:
    """Load a result file previously written by :func:`write_json`."""
    payload = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(payload, list):
        raise ValueError(f"{path} does not contain a JSON array of records")
    return [item for item in payload if isinstance(item, dict)]


def iter_bulk_chunks(
    records: Sequence[RecordLike],
    *,
    index: str = DEFAULT_INDEX,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> Iterator[List[Dict[str, Any]]]:
    """Yield bulk ``operations`` lists (action line, document) per chunk."""
    if chunk_size < 1:
        raise ValueError("chunk_size must be positive")
    for start in range(0, len(records), chunk_size):
        operations: List[Dict[str, Any]] = []
        for record in records[start : start + chunk_size]:
            operations.append({"index": {"_index": index, "_id": secrets.token_hex(16)}})
            operations.append(as_document(record))
        yield operations


def write_bulk(
    records: Sequence[RecordLike],
    path: Path,
    *,
    index: str = DEFAULT_INDEX,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> int:
    """Write an NDJSON ``_bulk`` payload; returns the number of chunks.

    One chunk is ``2 * chunk_size`` consecutive lines, so the file can be
    split and replayed request by request.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    chunks = 0
    with path.open("w", encoding="utf-8") as handle:
        for operations in iter_bulk_chunks(records, index=index, chunk_size=chunk_size):
            for line in operations:
                handle.write(json.dumps(line, separators=(",", ":")))
                handle.write("\n")
            chunks += 1
    return chunks


__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "DEFAULT_INDEX",
    "INDEX_MAPPINGS",
    "as_document",
    "iter_bulk_chunks",
    "read_json",
    "write_bulk",
    "write_json",
]
