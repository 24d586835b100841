"""Data models for porcelain status parsing."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class ChangeStatus(str, Enum):
    MODIFIED = "modified"
    ADDED = "added"
    DELETED = "deleted"
    UNTRACKED = "untracked"
    RENAMED = "renamed"
    UNKNOWN = "unknown"

    @classmethod
    def from_code(cls, code: str) -> "ChangeStatus":
        """Map a porcelain status character to a ChangeStatus."""
        return _STATUS_CODES.get(code, cls.UNKNOWN)


_STATUS_CODES = {
    "M": ChangeStatus.MODIFIED,
    "A": ChangeStatus.ADDED,
    "D": ChangeStatus.DELETED,
    "?": ChangeStatus.UNTRACKED,
    "R": ChangeStatus.RENAMED,
}

_STAGED_LABELS = {
    ChangeStatus.MODIFIED: "modified (staged)",
    ChangeStatus.ADDED: "new file (staged)",
    ChangeStatus.DELETED: "deleted (staged)",
    ChangeStatus.RENAMED: "renamed (staged)",
}

_UNSTAGED_LABELS = {
    ChangeStatus.MODIFIED: "modified",
    ChangeStatus.ADDED: "new file",
    ChangeStatus.DELETED: "deleted",
    ChangeStatus.UNTRACKED: "untracked",
    ChangeStatus.RENAMED: "renamed",
}


@dataclass(frozen=True, slots=True)
class FileChange:
    """One file's change state within a repository."""

    filename: str
    status: ChangeStatus
    staged: bool = False
    orig_filename: Optional[str] = None  # set on renames

    @property
    def bucket(self) -> str:
        """'staged', 'unstaged' or 'untracked'."""
        if self.staged:
            return "staged"
        if self.status == ChangeStatus.UNTRACKED:
            return "untracked"
        return "unstaged"

    @property
    def label(self) -> str:
        if self.staged:
            return _STAGED_LABELS.get(self.status, "staged")
        return _UNSTAGED_LABELS.get(self.status, "unknown")


@dataclass(frozen=True)
class ParsedStatus:
    """Changes parsed from one porcelain listing, with per-bucket counts."""

    changes: Tuple[FileChange, ...] = field(default_factory=tuple)
    staged_count: int = 0
    unstaged_count: int = 0
    untracked_count: int = 0

    @property
    def total(self) -> int:
        return len(self.changes)
