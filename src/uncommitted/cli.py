"""uncommitted CLI — scan a directory tree for repositories with uncommitted changes."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from uncommitted import __version__

app = typer.Typer(
    name="uncommitted",
    help="Find git repositories with uncommitted changes under a directory.",
    add_completion=False,
)

console = Console(stderr=True)


def _configure_logging(verbose: bool, debug: bool) -> None:
    level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=debug, show_time=debug)],
        force=True,
    )


def _version_callback(value: bool) -> None:
    if value:
        print(f"uncommitted {__version__}")
        raise typer.Exit()


@app.command()
def main(
    path: Optional[str] = typer.Argument(
        None, help="Directory to scan (defaults to the current directory)"
    ),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | json"),
    width: Optional[int] = typer.Option(None, "--width", "-w", help="Frame width for terminal output"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .uncommitted.toml"),
    remote: Optional[str] = typer.Option(None, "--remote", "-r", help="Remote name to check (default: origin)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log each repository as it is visited"),
    debug: bool = typer.Option(False, "--debug", help="Debug logging, including failed git queries"),
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """Report staged, unstaged and untracked files in every repository under PATH."""
    from uncommitted.config.loader import ConfigError, load_config
    from uncommitted.config.schema import MIN_WIDTH, OUTPUT_FORMATS
    from uncommitted.output import json_report, terminal
    from uncommitted.scanner.engine import ScanError, resolve_start, scan

    _configure_logging(verbose, debug)
    log = logging.getLogger(__name__)

    # --- Start directory ---
    try:
        root = resolve_start(path)
    except ScanError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    # --- Load config ---
    try:
        cfg = load_config(root, config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=2) from exc

    # --- CLI overrides ---
    if format:
        if format not in OUTPUT_FORMATS:
            console.print(f"[bold red]Invalid format:[/bold red] {escape(format)}")
            raise typer.Exit(code=2)
        cfg.output.format = format  # type: ignore[assignment]
    if width is not None:
        if width < MIN_WIDTH:
            console.print(f"[bold red]Invalid width:[/bold red] {width} (minimum {MIN_WIDTH})")
            raise typer.Exit(code=2)
        cfg.output.width = width
    if remote:
        cfg.scan.remote = remote

    log.debug("Start directory: %s", root)
    log.debug("Remote: %s, git timeout: %ss", cfg.scan.remote, cfg.scan.git_timeout)

    out = Console()
    if cfg.output.format == "terminal":
        terminal.render_scanning(out)

    # --- Run scan ---
    try:
        report = scan(
            root,
            cfg,
            on_repository=lambda repo: log.info("Checking %s", repo),
        )
    except ScanError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    if debug:
        console.print(f"[dim]Scan duration: {report.scan_duration_ms:.0f}ms[/dim]")

    # --- Output ---
    if cfg.output.format == "json":
        print(json_report.render(report))
    else:
        terminal.render(
            report,
            width=cfg.output.width,
            show_summary=cfg.output.show_summary,
            console=out,
        )

    if report.skipped_dirs:
        log.info("Skipped %d unreadable directories", len(report.skipped_dirs))
