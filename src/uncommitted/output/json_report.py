"""JSON reporter for scripting."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from uncommitted.repos.models import RepositoryStatus, ScanReport


def _repo_to_dict(repo: RepositoryStatus) -> Dict[str, Any]:
    changes: List[Dict[str, Any]] = []
    for c in repo.changes:
        changes.append({
            "file": c.filename,
            "status": c.status.value,
            "staged": c.staged,
            "label": c.label,
            **({"orig_file": c.orig_filename} if c.orig_filename else {}),
        })

    return {
        "path": repo.path,
        "branch": repo.branch,
        "remote_branch": repo.remote_branch,
        "has_remote": repo.has_remote,
        "remote_url": repo.remote_url,
        "is_pushed": repo.is_pushed,
        "ahead": repo.ahead,
        "behind": repo.behind,
        "staged": repo.staged_count,
        "unstaged": repo.unstaged_count,
        "untracked": repo.untracked_count,
        "changes": changes,
    }


def to_dict(report: ScanReport) -> Dict[str, Any]:
    """Convert ScanReport to a JSON-serialisable dict."""
    return {
        "version": "1.0",
        "root": report.root,
        "scanned_repositories": report.scanned_repos,
        "total_repositories": len(report.repositories),
        "totals": {
            "staged": report.total_staged,
            "unstaged": report.total_unstaged,
            "untracked": report.total_untracked,
        },
        "repositories": [_repo_to_dict(r) for r in report.repositories],
        "skipped_dirs": report.skipped_dirs,
        "scan_duration_ms": report.scan_duration_ms,
    }


def render(report: ScanReport) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(report), indent=2)
