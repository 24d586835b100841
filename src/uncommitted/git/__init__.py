"""Git interface layer — query adapter, status parsing, models."""

from uncommitted.git.adapter import GitCli, GitError, GitQueries, is_git_repo
from uncommitted.git.models import ChangeStatus, FileChange, ParsedStatus
from uncommitted.git.status_parser import StatusParser, parse_status

__all__ = [
    "ChangeStatus",
    "FileChange",
    "GitCli",
    "GitError",
    "GitQueries",
    "ParsedStatus",
    "StatusParser",
    "is_git_repo",
    "parse_status",
]
