"""Commit provenance lookup for saved-object files."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable, Iterable, Optional

from ..logging import get_logger
from ..models import CommitInfo

# hash, "author <email>", strict ISO-8601 author date; one per line.
_LOG_FORMAT = "%H%n%an <%ae>%n%aI"


class CommitLookup:
    """Finds the last commit that touched a file via ``git log``."""

    def __init__(self, runner: Callable[..., str] | None = None) -> None:
        self._runner = runner or self._default_runner
        self.logger = get_logger("provenance")

    def lookup(self, path: Path | str) -> Optional[CommitInfo]:
        """Return commit metadata for ``path`` or ``None`` when unavailable."""
        file_path = Path(path)
        args = ["git", "log", "-1", f"--format={_LOG_FORMAT}", "--", file_path.name]
        try:
            output = self._run(args, cwd=file_path.parent)
        except (subprocess.SubprocessError, OSError) as exc:
            self.logger.debug("No commit data for %s: %s", file_path, exc)
            return None
        return parse_log_output(output)

    def _run(self, args: Iterable[str], *, cwd: Path) -> str:
        return self._runner(args, cwd=cwd, capture_output=True)

    @staticmethod
    def _default_runner(
        args: Iterable[str],
        *,
        cwd: Path,
        capture_output: bool = False,
    ) -> str:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            check=True,
            text=True,
            capture_output=capture_output,
        )
        return completed.stdout if capture_output else ""


class NullCommitLookup:
    """Lookup used when provenance is disabled; never shells out."""

    def lookup(self, path: Path | str) -> Optional[CommitInfo]:
        return None


def parse_log_output(output: str) -> Optional[CommitInfo]:
    lines = [line.strip() for line in output.strip().splitlines()]
    if len(lines) < 3 or not lines[0]:
        return None
    commit_hash, author, date = lines[:3]
    return CommitInfo(hash=commit_hash, author=author, date=date)


__all__ = ["CommitLookup", "NullCommitLookup", "parse_log_output"]
