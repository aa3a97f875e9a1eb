"""Legacy visualization reports over collected records."""

from __future__ import annotations

from collections import Counter
from typing import Any, Dict, Iterable, List, Optional, Union

from .classifier import LEGACY_SO_TYPE
from .models import VisualizationRecord

RecordLike = Union[VisualizationRecord, Dict[str, Any]]


def _field(record: RecordLike, key: str) -> Any:
    if isinstance(record, VisualizationRecord):
        return {"soType": record.so_type, "app": record.app}.get(key)
    return record.get(key)


def legacy_counts_by_app(records: Iterable[RecordLike]) -> Dict[str, int]:
    """Count legacy (``soType == visualization``) records per app."""
    counts: Counter[str] = Counter()
    for record in records:
        if _field(record, "soType") == LEGACY_SO_TYPE:
            counts[str(_field(record, "app") or "")] += 1
    return dict(sorted(counts.items()))


def legacy_total(records: Iterable[RecordLike]) -> int:
    return sum(legacy_counts_by_app(records).values())


def diff_counts(
    before: Dict[str, int], after: Dict[str, int]
) -> List[Dict[str, Optional[int] | str]]:
    """Apps whose legacy count changed between two snapshots.

    Apps that disappeared report ``afterCount`` as ``None``; apps that only
    exist afterwards report ``beforeCount`` as ``None``.
    """
    changes: List[Dict[str, Optional[int] | str]] = []
    for name in sorted(set(before) | set(after)):
        before_count = before.get(name)
        after_count = after.get(name)
        if before_count != after_count:
            changes.append(
                {"name": name, "beforeCount": before_count, "afterCount": after_count}
            )
    return changes


def exceeds_legacy_limit(records: Iterable[RecordLike], limit: int) -> bool:
    return legacy_total(records) > limit


__all__ = ["diff_counts", "exceeds_legacy_limit", "legacy_counts_by_app", "legacy_total"]
