"""Rich terminal reporter — framed repository blocks, colour-coded statuses."""

from __future__ import annotations

from typing import List, Optional

from rich import box
from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from uncommitted.git.models import ChangeStatus, FileChange
from uncommitted.repos.models import RepositoryStatus, ScanReport

TITLE = "GIT UNCOMMITTED CHANGES SCANNER"
NOTHING_FOUND = "✓ No uncommitted changes found in any git repository!"
SCANNING = "Scanning for git repositories with uncommitted changes..."

STAGED_STYLE = "green"
UNSTAGED_STYLE = "yellow"
UNTRACKED_STYLE = "magenta"
ALERT_STYLE = "red"
FRAME_STYLE = "cyan"

_STATUS_STYLE = {
    ChangeStatus.MODIFIED: UNSTAGED_STYLE,
    ChangeStatus.ADDED: STAGED_STYLE,
    ChangeStatus.DELETED: ALERT_STYLE,
    ChangeStatus.UNTRACKED: UNTRACKED_STYLE,
    ChangeStatus.RENAMED: "blue",
    ChangeStatus.UNKNOWN: "white",
}

_STATUS_COLUMN_WIDTH = 20
_ELLIPSIS = "..."


def status_style(change: FileChange) -> str:
    """Colour for one change: staged always green, otherwise by status."""
    if change.staged:
        return STAGED_STYLE
    return _STATUS_STYLE.get(change.status, "white")


def truncate(text: str, width: int, *, keep: str = "head") -> str:
    """Fit *text* into *width* columns, marking the cut with an ellipsis.

    ``keep="tail"`` preserves the end of the string, which suits paths.
    """
    if width <= 0:
        return ""
    if len(text) <= width:
        return text
    if width <= len(_ELLIPSIS):
        return text[:width]
    room = width - len(_ELLIPSIS)
    if keep == "tail":
        return _ELLIPSIS + text[-room:]
    return text[:room] + _ELLIPSIS


def printable(text: str) -> str:
    """Replace undecodable filename bytes so the console can encode *text*."""
    return text.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


def _display_name(change: FileChange) -> str:
    if change.orig_filename:
        return printable(f"{change.orig_filename} -> {change.filename}")
    return printable(change.filename)


def _branch_line(repo: RepositoryStatus) -> Text:
    line = Text()
    line.append("Branch: ", style="bold")
    line.append(printable(repo.branch or "(unknown)"), style="green")
    if repo.remote_branch:
        line.append(" -> ")
        line.append(printable(repo.remote_branch), style="blue")
    return line


def _remote_line(repo: RepositoryStatus) -> Text:
    line = Text()
    line.append("Remote: ", style="bold")
    if not repo.has_remote:
        line.append(repo.remote_host_label, style=ALERT_STYLE)
        return line

    host_style = "blue" if repo.remote_host_label == "GitHub" else "green"
    line.append(repo.remote_host_label, style=host_style)
    if repo.is_pushed:
        line.append(" (pushed)", style="green")
    else:
        line.append(" (not pushed)", style=UNSTAGED_STYLE)
    return line


def _divergence_line(repo: RepositoryStatus) -> Optional[Text]:
    if repo.ahead <= 0 and repo.behind <= 0:
        return None
    line = Text()
    if repo.ahead > 0:
        line.append(f"↑ {repo.ahead} ahead", style="green")
    if repo.ahead > 0 and repo.behind > 0:
        line.append("  ")
    if repo.behind > 0:
        line.append(f"↓ {repo.behind} behind", style=ALERT_STYLE)
    return line


def _summary_line(repo: RepositoryStatus) -> Text:
    parts = [
        (repo.staged_count, "staged", STAGED_STYLE),
        (repo.unstaged_count, "modified", UNSTAGED_STYLE),
        (repo.untracked_count, "untracked", UNTRACKED_STYLE),
    ]
    line = Text()
    line.append("Summary: ", style="bold")
    shown = [(n, word, style) for n, word, style in parts if n > 0]
    for i, (n, word, style) in enumerate(shown):
        if i:
            line.append(" ")
        line.append(f"{n} {word}", style=style)
    return line


def _changes_table(repo: RepositoryStatus, width: int) -> Table:
    # Frame borders plus padding take four columns
    name_width = max(width - _STATUS_COLUMN_WIDTH - 8, 10)
    table = Table(
        box=box.SIMPLE_HEAD,
        show_edge=False,
        pad_edge=False,
        header_style="bold",
    )
    table.add_column("File", width=name_width, no_wrap=True)
    table.add_column("Status", width=_STATUS_COLUMN_WIDTH, no_wrap=True)
    for change in repo.changes:
        style = status_style(change)
        table.add_row(
            Text(truncate(_display_name(change), name_width), style=style),
            Text(change.label, style=style),
        )
    return table


def repository_panel(repo: RepositoryStatus, width: int = 80) -> Panel:
    """Build the framed block for one repository."""
    lines: List[RenderableType] = [_branch_line(repo), _remote_line(repo)]
    divergence = _divergence_line(repo)
    if divergence is not None:
        lines.append(divergence)
    lines.append(_summary_line(repo))
    lines.append(_changes_table(repo, width))

    title = Text(truncate(printable(repo.path), width - 6, keep="tail"), style="bold white")
    return Panel(
        Group(*lines),
        title=title,
        title_align="left",
        box=box.DOUBLE,
        border_style=FRAME_STYLE,
        width=width,
    )


def _banner(width: int) -> Panel:
    return Panel(
        Text(f"  {TITLE}  ", style="bold white on blue", justify="center"),
        box=box.DOUBLE,
        border_style=FRAME_STYLE,
        width=width,
    )


def _summary_panel(report: ScanReport, width: int) -> Panel:
    count = len(report.repositories)
    heading = Text(
        f"SUMMARY: {count} repositories with uncommitted changes",
        justify="center",
    )
    totals = Text()
    totals.append(str(report.total_staged), style=STAGED_STYLE)
    totals.append(" staged  |  ")
    totals.append(str(report.total_unstaged), style=UNSTAGED_STYLE)
    totals.append(" modified  |  ")
    totals.append(str(report.total_untracked), style=UNTRACKED_STYLE)
    totals.append(" untracked")

    body: List[RenderableType] = [heading, totals]
    if report.skipped_dirs:
        body.append(
            Text(f"Skipped {len(report.skipped_dirs)} unreadable directories", style="dim")
        )
    return Panel(
        Group(*body),
        box=box.DOUBLE,
        border_style=FRAME_STYLE,
        width=width,
    )


def render_scanning(console: Optional[Console] = None) -> None:
    console = console or Console()
    console.print(f"[yellow]{SCANNING}[/yellow]")


def render(
    report: ScanReport,
    *,
    width: int = 80,
    show_summary: bool = True,
    console: Optional[Console] = None,
) -> None:
    """Print the scan report to stdout using Rich."""
    console = console or Console()

    if report.is_empty:
        console.print()
        console.print(f"[bold green]{NOTHING_FOUND}[/bold green]")
        console.print()
        return

    console.print()
    console.print(_banner(width))
    console.print()

    for repo in report.repositories:
        console.print(repository_panel(repo, width))
        console.print()

    if show_summary:
        console.print(_summary_panel(report, width))
        console.print()
