"""Git activity metrics: models, aggregation, computation and caching."""

from .aggregator import aggregate_repo_metrics, first_commit_per_day
from .models import Block, DateRange, GitMetrics, RepoMetrics

__all__ = [
    "Block",
    "DateRange",
    "GitMetrics",
    "RepoMetrics",
    "aggregate_repo_metrics",
    "first_commit_per_day",
]
