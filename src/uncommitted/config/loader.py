"""Load and merge configuration from .uncommitted.toml and env vars."""

from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from uncommitted.config.defaults import CONFIG_FILENAME
from uncommitted.config.schema import (
    MIN_WIDTH,
    OUTPUT_FORMATS,
    OutputConfig,
    ScanConfig,
    UncommittedConfig,
)


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(start_dir: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = start_dir / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    raw = data.get(section, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in raw.items() if k in valid_fields}
    return cls(**filtered)


def _validate(cfg: UncommittedConfig) -> None:
    if cfg.output.format not in OUTPUT_FORMATS:
        raise ConfigError(f"Invalid output format: {cfg.output.format}")
    if not isinstance(cfg.output.width, int) or cfg.output.width < MIN_WIDTH:
        raise ConfigError(f"output.width must be an integer >= {MIN_WIDTH}")
    if not isinstance(cfg.scan.git_timeout, (int, float)) or cfg.scan.git_timeout <= 0:
        raise ConfigError("scan.git_timeout must be a positive number")
    if not isinstance(cfg.scan.remote, str) or not cfg.scan.remote:
        raise ConfigError("scan.remote must be a non-empty string")
    for name, value in (
        ("scan.follow_symlinks", cfg.scan.follow_symlinks),
        ("scan.skip_hidden", cfg.scan.skip_hidden),
        ("output.show_summary", cfg.output.show_summary),
    ):
        if not isinstance(value, bool):
            raise ConfigError(f"{name} must be true or false")


def _merge_env_overrides(cfg: UncommittedConfig) -> None:
    """Apply UNCOMMITTED_* environment variable overrides."""
    if val := os.environ.get("UNCOMMITTED_FORMAT"):
        if val in OUTPUT_FORMATS:
            cfg.output.format = val  # type: ignore[assignment]
    if val := os.environ.get("UNCOMMITTED_WIDTH"):
        try:
            width = int(val)
        except ValueError:
            pass
        else:
            if width >= MIN_WIDTH:
                cfg.output.width = width
    if val := os.environ.get("UNCOMMITTED_REMOTE"):
        cfg.scan.remote = val.strip() or cfg.scan.remote
    if val := os.environ.get("UNCOMMITTED_GIT_TIMEOUT"):
        try:
            timeout = float(val)
        except ValueError:
            pass
        else:
            if timeout > 0:
                cfg.scan.git_timeout = timeout


def load_config(
    start_dir: Path,
    config_override: Optional[str] = None,
) -> UncommittedConfig:
    """Load, validate, and return an UncommittedConfig."""
    config_path = find_config_file(start_dir, config_override)

    if config_path is None:
        cfg = UncommittedConfig()
    else:
        raw = _parse_toml(config_path)
        try:
            cfg = UncommittedConfig(
                version=str(raw.get("version", "1.0")),
                scan=_build_section(raw, ScanConfig, "scan"),
                output=_build_section(raw, OutputConfig, "output"),
            )
        except TypeError as exc:
            raise ConfigError(f"Invalid configuration in {config_path}: {exc}") from exc
        _validate(cfg)

    _merge_env_overrides(cfg)
    return cfg
