"""Repository status and scan report models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from uncommitted.git.models import FileChange


@dataclass(frozen=True)
class RepositoryStatus:
    """Aggregated status of one repository with uncommitted changes."""

    path: str
    branch: Optional[str] = None
    remote_branch: Optional[str] = None
    has_remote: bool = False
    remote_url: Optional[str] = None
    is_pushed: bool = False
    ahead: int = 0
    behind: int = 0
    changes: Tuple[FileChange, ...] = ()

    @property
    def staged_count(self) -> int:
        return sum(1 for c in self.changes if c.bucket == "staged")

    @property
    def unstaged_count(self) -> int:
        return sum(1 for c in self.changes if c.bucket == "unstaged")

    @property
    def untracked_count(self) -> int:
        return sum(1 for c in self.changes if c.bucket == "untracked")

    @property
    def remote_host_label(self) -> str:
        if not self.has_remote:
            return "No remote configured"
        if self.remote_url and "github.com" in self.remote_url:
            return "GitHub"
        return "Remote configured"


@dataclass
class ScanReport:
    """Complete result of a scan run, in discovery order."""

    root: str = ""
    repositories: List[RepositoryStatus] = field(default_factory=list)
    skipped_dirs: List[str] = field(default_factory=list)
    scanned_repos: int = 0
    scan_duration_ms: float = 0.0

    @property
    def total_staged(self) -> int:
        return sum(r.staged_count for r in self.repositories)

    @property
    def total_unstaged(self) -> int:
        return sum(r.unstaged_count for r in self.repositories)

    @property
    def total_untracked(self) -> int:
        return sum(r.untracked_count for r in self.repositories)

    @property
    def total_changes(self) -> int:
        return sum(len(r.changes) for r in self.repositories)

    @property
    def is_empty(self) -> bool:
        """True when no repository with uncommitted changes was found."""
        return not self.repositories
