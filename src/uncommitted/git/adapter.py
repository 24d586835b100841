"""Git subprocess wrapper — read-only queries against one repository.

Each query spawns a single ``git`` process scoped to the repository root and
returns a typed optional answer. A failing query (git missing, timeout,
no upstream, not really a repository) is an ordinary "unknown" state and
degrades to ``None`` / ``False`` / ``[]``; it never aborts a scan.
"""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import List, Optional, Protocol, Tuple, runtime_checkable

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10
GIT_DIR = ".git"


class GitError(Exception):
    """Raised when git is unavailable or returns an unexpected error."""


@runtime_checkable
class GitQueries(Protocol):
    """Read-only questions the aggregator asks about one repository."""

    def current_branch(self) -> Optional[str]:
        ...

    def remote_url(self, remote: str) -> Optional[str]:
        ...

    def upstream_branch(self) -> Optional[str]:
        ...

    def has_remote_ref(self, remote: str, branch: str) -> bool:
        ...

    def ahead_behind(self) -> Optional[Tuple[int, int]]:
        ...

    def is_ignored(self, path: str) -> bool:
        ...

    def status_lines(self) -> List[str]:
        ...


def is_git_repo(path: Path) -> bool:
    """Return True if *path* holds a ``.git`` marker (directory or file)."""
    return os.path.exists(path / GIT_DIR)


def _run_git(
    args: List[str], cwd: Path, timeout: float = DEFAULT_TIMEOUT
) -> subprocess.CompletedProcess:
    """Run a git command and return the completed process.

    Raises GitError when git cannot be started or does not finish in time.
    A non-zero exit status is returned to the caller, not raised.
    """
    try:
        return subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            encoding="utf-8",
            errors="surrogateescape",
        )
    except FileNotFoundError as exc:
        raise GitError("git is not installed or not on PATH") from exc
    except subprocess.TimeoutExpired as exc:
        raise GitError(
            f"git command timed out after {timeout}s: git {' '.join(args)}"
        ) from exc
    except OSError as exc:
        raise GitError(f"could not run git in {cwd}: {exc}") from exc


def _first_line(text: str) -> Optional[str]:
    for line in text.split("\n"):
        line = line.rstrip("\r")
        if line:
            return line
    return None


class GitCli:
    """GitQueries implementation backed by the ``git`` executable."""

    def __init__(self, repo_root: Path, *, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.repo_root = Path(repo_root)
        self.timeout = timeout

    def _query(self, args: List[str]) -> Optional[subprocess.CompletedProcess]:
        try:
            return _run_git(args, cwd=self.repo_root, timeout=self.timeout)
        except GitError as exc:
            logger.debug("%s: %s", self.repo_root, exc)
            return None

    def _line(self, args: List[str]) -> Optional[str]:
        result = self._query(args)
        if result is None or result.returncode != 0:
            return None
        return _first_line(result.stdout)

    def current_branch(self) -> Optional[str]:
        branch = self._line(["rev-parse", "--abbrev-ref", "HEAD"])
        # Detached HEAD reports the literal "HEAD"
        if branch == "HEAD":
            return None
        return branch

    def remote_url(self, remote: str) -> Optional[str]:
        return self._line(["remote", "get-url", remote])

    def upstream_branch(self) -> Optional[str]:
        return self._line(
            ["rev-parse", "--abbrev-ref", "--symbolic-full-name", "@{u}"]
        )

    def has_remote_ref(self, remote: str, branch: str) -> bool:
        ref = self._line(
            ["rev-parse", "--verify", "--quiet", f"refs/remotes/{remote}/{branch}"]
        )
        return ref is not None

    def ahead_behind(self) -> Optional[Tuple[int, int]]:
        line = self._line(["rev-list", "--left-right", "--count", "HEAD...@{u}"])
        if line is None:
            return None
        parts = line.split()
        if len(parts) != 2:
            logger.debug("%s: unexpected rev-list output %r", self.repo_root, line)
            return None
        try:
            ahead, behind = int(parts[0]), int(parts[1])
        except ValueError:
            logger.debug("%s: unexpected rev-list output %r", self.repo_root, line)
            return None
        return max(ahead, 0), max(behind, 0)

    def is_ignored(self, path: str) -> bool:
        # --no-index checks ignore rules even for tracked files
        result = self._query(["check-ignore", "-q", "--no-index", "--", path])
        return result is not None and result.returncode == 0

    def status_lines(self) -> List[str]:
        result = self._query(["-c", "core.quotePath=false", "status", "--porcelain"])
        if result is None:
            return []
        if result.returncode != 0:
            logger.debug(
                "%s: git status failed: %s", self.repo_root, result.stderr.strip()
            )
            return []
        # Split on newlines only; paths may hold other line-break characters
        return [line for line in result.stdout.split("\n") if line]
