"""Per-block caching of computed git metrics."""

from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from pydantic import ValidationError

from ..exceptions import StorageError
from ..logging import get_logger
from ..paths import get_metrics_path
from ..storage import read_json, write_json
from .engine import MetricsEngine, RepositoryEntry
from .models import Block, GitMetrics

logger = get_logger(__name__)


class MetricsCache:
    """Stores one GitMetrics document per (experiment, block).

    Entries never expire on their own: a cached document stays valid until
    it is explicitly recomputed, even if the block is edited afterwards.
    """

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)
        self.cache_stats = {
            "hits": 0,
            "misses": 0,
            "stores": 0,
        }

    def path_for(self, experiment: str, block_id: str) -> Path:
        return get_metrics_path(self.data_dir, experiment, block_id)

    def get(self, experiment: str, block_id: str) -> Optional[GitMetrics]:
        """Cached metrics for the block, or None if never computed."""
        path = self.path_for(experiment, block_id)
        document = read_json(path)

        if document is None:
            self.cache_stats["misses"] += 1
            logger.debug("Metrics cache miss", experiment=experiment, block=block_id)
            return None

        try:
            metrics = GitMetrics.model_validate(document)
        except ValidationError as e:
            raise StorageError.from_exception(
                f"Cached metrics are corrupt: {path}", e, details={"errors": e.error_count()}
            )

        self.cache_stats["hits"] += 1
        logger.debug("Metrics cache hit", experiment=experiment, block=block_id)
        return metrics

    def put(self, experiment: str, metrics: GitMetrics) -> Path:
        """Replace the cached document for ``metrics.block_id``."""
        path = self.path_for(experiment, metrics.block_id)
        write_json(path, metrics.to_document())
        self.cache_stats["stores"] += 1
        logger.info("Metrics cached", experiment=experiment, block=metrics.block_id, path=str(path))
        return path

    def get_cache_stats(self) -> Dict[str, Any]:
        """Get cache performance statistics."""
        total_requests = self.cache_stats["hits"] + self.cache_stats["misses"]
        hit_rate = self.cache_stats["hits"] / total_requests if total_requests > 0 else 0.0
        return {**self.cache_stats, "hit_rate": hit_rate, "total_requests": total_requests}


class MetricsService:
    """Compute-or-read access to block metrics.

    A plain request returns the cached document when one exists and does no
    collection at all. ``refresh=True`` always recomputes every repository
    and overwrites the cached document wholesale.
    """

    def __init__(self, engine: MetricsEngine, cache: MetricsCache):
        self.engine = engine
        self.cache = cache
        self.last_from_cache = False

    def get_metrics(
        self,
        experiment: str,
        block: Block,
        repositories: Sequence[RepositoryEntry],
        refresh: bool = False,
    ) -> GitMetrics:
        if not refresh:
            cached = self.cache.get(experiment, block.id)
            if cached is not None:
                self.last_from_cache = True
                return cached

        metrics = self.engine.compute_git_metrics(block, repositories)
        self.cache.put(experiment, metrics)
        self.last_from_cache = False
        return metrics
