"""Tests for the directory walk and end-to-end scans."""

import os
from pathlib import Path

import pytest

from uncommitted.config.schema import UncommittedConfig
from uncommitted.scanner.engine import ScanError, resolve_start, scan

from conftest import FakeQueries, git, init_repo


def _marker(path: Path) -> Path:
    """Create a directory that looks like a repository root."""
    (path / ".git").mkdir(parents=True)
    return path.resolve()


class _Recorder:
    """queries_factory that hands out FakeQueries and remembers the roots."""

    def __init__(self, lines_by_name=None):
        self.lines_by_name = lines_by_name or {}
        self.roots = []

    def __call__(self, repo_root: Path) -> FakeQueries:
        self.roots.append(repo_root)
        return FakeQueries(lines=self.lines_by_name.get(repo_root.name, ["?? x"]))


class TestResolveStart:
    def test_missing_directory(self, tmp_path: Path):
        with pytest.raises(ScanError):
            resolve_start(tmp_path / "nope")

    def test_file_is_rejected(self, tmp_path: Path):
        f = tmp_path / "file.txt"
        f.write_text("x")
        with pytest.raises(ScanError, match="Not a directory"):
            resolve_start(f)

    def test_defaults_to_cwd(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert resolve_start(None) == tmp_path.resolve()


class TestWalk:
    def test_repository_root_not_descended(self, tmp_path: Path):
        outer = _marker(tmp_path / "outer")
        _marker(outer / "nested")
        (outer / ".git" / "modules").mkdir()
        _marker(outer / ".git" / "modules" / "sub")

        rec = _Recorder()
        scan(tmp_path, queries_factory=rec)
        assert rec.roots == [outer]

    def test_start_is_repository(self, tmp_path: Path):
        repo = _marker(tmp_path / "repo")
        rec = _Recorder()
        report = scan(repo, queries_factory=rec)
        assert rec.roots == [repo.resolve()]
        assert len(report.repositories) == 1

    def test_hidden_directories_skipped(self, tmp_path: Path):
        _marker(tmp_path / ".cache" / "repo")
        visible = _marker(tmp_path / "src" / "repo")

        rec = _Recorder()
        scan(tmp_path, queries_factory=rec)
        assert rec.roots == [visible]

    def test_hidden_included_when_configured(self, tmp_path: Path):
        hidden = _marker(tmp_path / ".config" / "dotfiles")
        cfg = UncommittedConfig()
        cfg.scan.skip_hidden = False

        rec = _Recorder()
        scan(tmp_path, cfg, queries_factory=rec)
        assert hidden in rec.roots

    def test_deep_nesting(self, tmp_path: Path):
        deep = _marker(tmp_path / "a" / "b" / "c" / "d" / "repo")
        rec = _Recorder()
        scan(tmp_path, queries_factory=rec)
        assert rec.roots == [deep]

    def test_nesting_deeper_than_recursion_limit(self, tmp_path: Path):
        deep = tmp_path
        for _ in range(1100):
            deep = deep / "a"
            deep.mkdir()
        deep = _marker(deep)

        rec = _Recorder()
        scan(tmp_path, queries_factory=rec)
        assert rec.roots == [deep]

    def test_clean_repositories_dropped(self, tmp_path: Path):
        _marker(tmp_path / "clean")
        _marker(tmp_path / "dirty")
        rec = _Recorder({"clean": [], "dirty": ["M  a.py"]})

        report = scan(tmp_path, queries_factory=rec)
        assert report.scanned_repos == 2
        assert [Path(r.path).name for r in report.repositories] == ["dirty"]

    def test_report_follows_discovery_order(self, tmp_path: Path):
        for name in ("one", "two", "three"):
            _marker(tmp_path / name)
        rec = _Recorder()
        report = scan(tmp_path, queries_factory=rec)
        assert [r.path for r in report.repositories] == [str(p) for p in rec.roots]

    def test_files_ignored(self, tmp_path: Path):
        (tmp_path / "notes.txt").write_text("x")
        rec = _Recorder()
        report = scan(tmp_path, queries_factory=rec)
        assert rec.roots == []
        assert report.is_empty

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
    def test_symlink_cycle_terminates(self, tmp_path: Path):
        repo = _marker(tmp_path / "a" / "repo")
        (tmp_path / "a" / "loop").symlink_to(tmp_path, target_is_directory=True)

        rec = _Recorder()
        scan(tmp_path, queries_factory=rec)
        assert rec.roots == [repo]

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
    def test_symlinks_not_followed_when_disabled(self, tmp_path: Path):
        target = _marker(tmp_path.parent / f"{tmp_path.name}-outside" / "repo")
        (tmp_path / "link").symlink_to(target.parent, target_is_directory=True)
        cfg = UncommittedConfig()
        cfg.scan.follow_symlinks = False

        rec = _Recorder()
        scan(tmp_path, cfg, queries_factory=rec)
        assert rec.roots == []

    @pytest.mark.skipif(
        not hasattr(os, "geteuid") or os.geteuid() == 0,
        reason="permission checks do not apply to root",
    )
    def test_unreadable_directory_skipped(self, tmp_path: Path):
        locked = tmp_path.resolve() / "locked"
        _marker(locked / "hidden-repo")
        visible = _marker(tmp_path / "open")
        locked.chmod(0)
        try:
            rec = _Recorder()
            report = scan(tmp_path, queries_factory=rec)
        finally:
            locked.chmod(0o755)
        assert rec.roots == [visible]
        assert report.skipped_dirs == [str(locked)]

    def test_on_repository_callback(self, tmp_path: Path):
        repo = _marker(tmp_path / "repo")
        seen = []
        scan(tmp_path, queries_factory=_Recorder(), on_repository=seen.append)
        assert seen == [repo]


class TestEndToEnd:
    def test_one_clean_one_dirty(self, tmp_path: Path):
        init_repo(tmp_path / "clean")
        dirty = init_repo(tmp_path / "dirty")
        (dirty / "a.txt").write_text("a\n")
        (dirty / "b.txt").write_text("b\n")
        git(dirty, "add", "a.txt", "b.txt")
        (dirty / "c.txt").write_text("c\n")

        report = scan(tmp_path)
        assert report.scanned_repos == 2
        assert len(report.repositories) == 1
        repo = report.repositories[0]
        assert repo.path == str(dirty.resolve())
        assert repo.staged_count == 2
        assert repo.untracked_count == 1
        assert repo.unstaged_count == 0
        assert report.total_staged == 2
        assert report.total_untracked == 1

    def test_no_remote(self, tmp_path: Path):
        repo = init_repo(tmp_path / "solo")
        (repo / "README.md").write_text("edited\n")
        (repo / "new.txt").write_text("new\n")

        report = scan(tmp_path)
        status = report.repositories[0]
        assert status.has_remote is False
        assert status.is_pushed is False
        assert (status.ahead, status.behind) == (0, 0)

    def test_nothing_found(self, tmp_path: Path):
        (tmp_path / "docs").mkdir()
        (tmp_path / "docs" / "readme.txt").write_text("x")

        report = scan(tmp_path)
        assert report.is_empty
        assert report.scanned_repos == 0
        assert report.total_changes == 0

    def test_ahead_of_upstream(self, pushed_repo):
        repo, _remote = pushed_repo
        (repo / "next.txt").write_text("next\n")
        git(repo, "add", "next.txt")
        git(repo, "commit", "-m", "next")
        (repo / "wip.txt").write_text("wip\n")

        report = scan(repo.parent)
        status = next(r for r in report.repositories if Path(r.path).name == "work")
        assert status.remote_branch == "origin/main"
        assert status.is_pushed is True
        assert (status.ahead, status.behind) == (1, 0)
