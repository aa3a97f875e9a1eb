"""Git helpers."""

from .provenance import CommitLookup, NullCommitLookup

__all__ = ["CommitLookup", "NullCommitLookup"]
