"""Scan coordinator — walks the directory tree and collects repositories.

The walk is depth-first and strictly sequential, driven by an explicit
stack rather than recursion. A directory holding a
``.git`` marker is handed to the aggregator and never descended into, so
repository metadata is never traversed. Unreadable directories are skipped
and recorded on the report.
"""

from __future__ import annotations

import logging
import os
import time
from pathlib import Path
from typing import Callable, List, Optional, Set, Union

from uncommitted.config.schema import UncommittedConfig
from uncommitted.git.adapter import GitCli, GitQueries, is_git_repo
from uncommitted.repos.aggregator import collect_status
from uncommitted.repos.models import ScanReport

logger = logging.getLogger(__name__)

QueriesFactory = Callable[[Path], GitQueries]
RepositoryCallback = Callable[[Path], None]


class ScanError(Exception):
    """Raised when the starting directory cannot be resolved."""


def resolve_start(start: Union[str, Path, None]) -> Path:
    """Resolve the starting directory, defaulting to the working directory."""
    try:
        path = Path.cwd() if start is None else Path(start).expanduser()
        path = path.resolve(strict=True)
    except (OSError, RuntimeError) as exc:
        raise ScanError(f"Cannot resolve start directory: {start or '.'}") from exc
    if not path.is_dir():
        raise ScanError(f"Not a directory: {path}")
    return path


class _Walker:
    def __init__(
        self,
        config: UncommittedConfig,
        report: ScanReport,
        queries_factory: QueriesFactory,
        on_repository: Optional[RepositoryCallback],
    ) -> None:
        self._config = config
        self._report = report
        self._queries_factory = queries_factory
        self._on_repository = on_repository
        self._seen: Set[str] = set()

    def walk(self, root: Path) -> None:
        # Explicit stack so depth is not bounded by the interpreter's
        # recursion limit; children are pushed reversed to keep preorder.
        stack: List[Path] = [root]
        while stack:
            path = stack.pop()
            stack.extend(reversed(self._visit(path)))

    def _visit(self, path: Path) -> List[Path]:
        """Handle one directory and return the subdirectories to walk."""
        real = os.path.realpath(path)
        if real in self._seen:
            logger.debug("Already visited %s (via %s), skipping", real, path)
            return []
        self._seen.add(real)

        if is_git_repo(path):
            self._visit_repository(path)
            return []

        try:
            with os.scandir(path) as it:
                entries = list(it)
        except OSError as exc:
            logger.warning("Skipping unreadable directory %s: %s", path, exc.strerror or exc)
            self._report.skipped_dirs.append(str(path))
            return []

        scan_cfg = self._config.scan
        children: List[Path] = []
        for entry in entries:
            if scan_cfg.skip_hidden and entry.name.startswith("."):
                continue
            try:
                if not entry.is_dir(follow_symlinks=scan_cfg.follow_symlinks):
                    continue
            except OSError:
                continue
            children.append(Path(entry.path))
        return children

    def _visit_repository(self, path: Path) -> None:
        self._report.scanned_repos += 1
        if self._on_repository is not None:
            self._on_repository(path)
        status = collect_status(
            path,
            self._queries_factory(path),
            remote=self._config.scan.remote,
        )
        if status is not None:
            self._report.repositories.append(status)


def scan(
    start: Union[str, Path, None] = None,
    config: Optional[UncommittedConfig] = None,
    *,
    queries_factory: Optional[QueriesFactory] = None,
    on_repository: Optional[RepositoryCallback] = None,
) -> ScanReport:
    """Scan the tree under *start* and return a ScanReport.

    *queries_factory* builds the git adapter for each repository root;
    it defaults to the ``git`` executable with the configured timeout.
    """
    started = time.perf_counter()
    config = config or UncommittedConfig()
    root = resolve_start(start)

    if queries_factory is None:
        timeout = config.scan.git_timeout

        def queries_factory(repo_root: Path) -> GitQueries:
            return GitCli(repo_root, timeout=timeout)

    report = ScanReport(root=str(root))
    _Walker(config, report, queries_factory, on_repository).walk(root)

    report.scan_duration_ms = round((time.perf_counter() - started) * 1000, 2)
    logger.info(
        "Scanned %d repositories under %s, %d with changes",
        report.scanned_repos,
        root,
        len(report.repositories),
    )
    return report
