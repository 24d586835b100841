"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

OutputFormat = Literal["terminal", "json"]

OUTPUT_FORMATS = ("terminal", "json")
MIN_WIDTH = 40


@dataclass
class ScanConfig:
    remote: str = "origin"  # remote name used for URL lookup and cached refs
    git_timeout: float = 10.0  # seconds per git invocation
    follow_symlinks: bool = True
    skip_hidden: bool = True


@dataclass
class OutputConfig:
    format: OutputFormat = "terminal"
    width: int = 80
    show_summary: bool = True


@dataclass
class UncommittedConfig:
    version: str = "1.0"
    scan: ScanConfig = field(default_factory=ScanConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
