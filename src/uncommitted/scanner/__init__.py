"""Scanner — directory walk and repository collection."""

from uncommitted.scanner.engine import ScanError, resolve_start, scan

__all__ = ["ScanError", "resolve_start", "scan"]
