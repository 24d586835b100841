"""uncommitted — find git repositories with uncommitted changes."""

__version__ = "0.1.0"
