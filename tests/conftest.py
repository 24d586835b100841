"""Shared test fixtures — porcelain samples, fake git queries, temp git repos."""

from __future__ import annotations

import subprocess
import sys
import textwrap
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple

import pytest


@pytest.hookimpl(tryfirst=True)
def pytest_sessionfinish(session: pytest.Session) -> None:
    # pytest removes old tmp_path trees recursively at session finish; the
    # deep-nesting scanner test leaves one deeper than the default limit.
    # Raised only here so the tests themselves run under the default limit.
    sys.setrecursionlimit(max(sys.getrecursionlimit(), 10000))


def git(repo: Path, *args: str) -> subprocess.CompletedProcess:
    """Run git in *repo*, failing the test on error."""
    return subprocess.run(
        ["git", *args],
        cwd=repo, capture_output=True, text=True, check=True,
    )


def init_repo(path: Path, *, commit: bool = True) -> Path:
    """Create a git repository at *path* on branch ``main``."""
    path.mkdir(parents=True, exist_ok=True)
    subprocess.run(["git", "init", str(path)], capture_output=True, check=True)
    git(path, "symbolic-ref", "HEAD", "refs/heads/main")
    git(path, "config", "user.email", "test@test.com")
    git(path, "config", "user.name", "Test")
    git(path, "config", "commit.gpgsign", "false")
    if commit:
        (path / "README.md").write_text("# Test\n")
        git(path, "add", ".")
        git(path, "commit", "-m", "init")
    return path


@dataclass
class FakeQueries:
    """In-memory GitQueries double; records every call it receives."""

    branch: Optional[str] = "main"
    remotes: Dict[str, str] = field(default_factory=dict)
    upstream: Optional[str] = None
    cached_refs: Set[Tuple[str, str]] = field(default_factory=set)
    divergence: Optional[Tuple[int, int]] = None
    ignored: Set[str] = field(default_factory=set)
    lines: List[str] = field(default_factory=list)
    calls: List[str] = field(default_factory=list)

    def current_branch(self) -> Optional[str]:
        self.calls.append("current_branch")
        return self.branch

    def remote_url(self, remote: str) -> Optional[str]:
        self.calls.append("remote_url")
        return self.remotes.get(remote)

    def upstream_branch(self) -> Optional[str]:
        self.calls.append("upstream_branch")
        return self.upstream

    def has_remote_ref(self, remote: str, branch: str) -> bool:
        self.calls.append("has_remote_ref")
        return (remote, branch) in self.cached_refs

    def ahead_behind(self) -> Optional[Tuple[int, int]]:
        self.calls.append("ahead_behind")
        return self.divergence

    def is_ignored(self, path: str) -> bool:
        self.calls.append("is_ignored")
        return path in self.ignored

    def status_lines(self) -> List[str]:
        self.calls.append("status_lines")
        return list(self.lines)


@pytest.fixture
def sample_status_mixed() -> str:
    """Porcelain listing with every bucket represented."""
    return textwrap.dedent("""\
        M  staged.py
         M unstaged.py
        MM both.py
        A  added.py
         D gone.py
        R  old.py -> new.py
        ?? notes.txt
    """)


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository with one commit."""
    return init_repo(tmp_path / "repo")


@pytest.fixture
def pushed_repo(tmp_path: Path) -> Tuple[Path, Path]:
    """A repository whose ``main`` tracks ``origin/main`` on a local bare remote."""
    remote = tmp_path / "remote.git"
    subprocess.run(["git", "init", "--bare", str(remote)], capture_output=True, check=True)
    repo = init_repo(tmp_path / "work")
    git(repo, "remote", "add", "origin", str(remote))
    git(repo, "push", "-u", "origin", "main")
    return repo, remote
