"""Ownership resolution from package manifests."""

from __future__ import annotations

from typing import Any, Mapping, Sequence, Tuple

from .config import DEFAULT_OWNERSHIP_GROUPS
from .documents import get_str
from .models import Ownership


def resolve_ownership(
    manifest: Mapping[str, Any] | None,
    groups: Sequence[Tuple[str, str]] = DEFAULT_OWNERSHIP_GROUPS,
) -> Ownership:
    """Return the GitHub owner and owning group declared by a manifest.

    ``owner.github`` is usually ``org/team``. The team slug is matched
    against ``groups`` in order by substring; the first hit names the group,
    otherwise the slug itself is used.
    """
    gh_owner = get_str(dict(manifest or {}), "owner.github").strip()
    if not gh_owner:
        return Ownership()

    team = gh_owner.rsplit("/", 1)[-1].lower()
    for pattern, group in groups:
        if pattern.lower() in team:
            return Ownership(gh_owner=gh_owner, owning_group=group)
    return Ownership(gh_owner=gh_owner, owning_group=team)


__all__ = ["resolve_ownership"]
