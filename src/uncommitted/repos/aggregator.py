"""Per-repository status aggregation.

Asks the git adapter for branch, remote and divergence facts, parses the
porcelain listing, and builds a RepositoryStatus. Repositories without any
change are dropped here so they never reach the report.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from uncommitted.git.adapter import DEFAULT_TIMEOUT, GitCli, GitQueries
from uncommitted.git.status_parser import parse_status
from uncommitted.repos.models import RepositoryStatus

logger = logging.getLogger(__name__)

DEFAULT_REMOTE = "origin"


def collect_status(
    repo_root: Path,
    queries: Optional[GitQueries] = None,
    *,
    remote: str = DEFAULT_REMOTE,
    timeout: float = DEFAULT_TIMEOUT,
) -> Optional[RepositoryStatus]:
    """Build the status record for *repo_root*, or None if it is clean."""
    if queries is None:
        queries = GitCli(repo_root, timeout=timeout)

    branch = queries.current_branch()
    remote_url = queries.remote_url(remote)
    has_remote = remote_url is not None
    upstream = queries.upstream_branch()
    is_pushed = upstream is not None

    # No upstream link: fall back to a cached <remote>/<branch> ref.
    # Local refs only, so this can be stale until the next fetch.
    if not is_pushed and has_remote and branch:
        is_pushed = queries.has_remote_ref(remote, branch)

    ahead = behind = 0
    if upstream is not None:
        counts = queries.ahead_behind()
        if counts is not None:
            ahead, behind = max(counts[0], 0), max(counts[1], 0)

    parsed = parse_status(queries.status_lines(), queries.is_ignored)
    if not parsed.changes:
        logger.debug("%s: clean", repo_root)
        return None

    logger.info(
        "%s: %d staged, %d unstaged, %d untracked",
        repo_root,
        parsed.staged_count,
        parsed.unstaged_count,
        parsed.untracked_count,
    )
    return RepositoryStatus(
        path=str(repo_root),
        branch=branch,
        remote_branch=upstream,
        has_remote=has_remote,
        remote_url=remote_url,
        is_pushed=is_pushed,
        ahead=ahead,
        behind=behind,
        changes=parsed.changes,
    )
