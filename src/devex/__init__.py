"""Git activity metrics for developer-experience self-experiments."""

__version__ = "0.1.0"

# Import main components
from .config import Config
from .logging import get_logger
from .metrics import Block, GitMetrics, RepoMetrics, aggregate_repo_metrics
from .metrics.cache import MetricsCache, MetricsService
from .metrics.engine import MetricsEngine, compute_git_metrics

__all__ = [
    "Block",
    "Config",
    "GitMetrics",
    "MetricsCache",
    "MetricsEngine",
    "MetricsService",
    "RepoMetrics",
    "aggregate_repo_metrics",
    "compute_git_metrics",
    "get_logger",
]
