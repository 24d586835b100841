"""Repository status models and aggregation."""

from uncommitted.repos.aggregator import collect_status
from uncommitted.repos.models import RepositoryStatus, ScanReport

__all__ = ["RepositoryStatus", "ScanReport", "collect_status"]
