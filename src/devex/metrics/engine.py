"""Computation of per-block git metrics across configured repositories."""

from datetime import datetime
from pathlib import Path
from typing import Dict, Optional, Sequence, Union

from ..config import GitHubConfig, GlobalConfig, config, load_global_config, resolve_github_token
from ..core.timeutils import utcnow
from ..exceptions import DevexError
from ..git.github import GitHubClient, GitHubCollector
from ..git.identifiers import resolve_repo_identifier
from ..git.local import LocalGitCollector
from ..git.models import GitHubRepo, LocalRepo, Repository
from ..logging import get_logger
from ..paths import get_config_path, get_data_dir
from .aggregator import aggregate_repo_metrics
from .models import Block, DateRange, GitMetrics, RepoMetrics

logger = get_logger(__name__)

RepositoryEntry = Union[Repository, str]


def _as_repository(entry: RepositoryEntry) -> Repository:
    if isinstance(entry, Repository):
        return entry
    return Repository(path=entry)


class MetricsEngine:
    """Runs the collectors for each configured repository and aggregates the results.

    Repositories are processed one at a time. A repository that cannot be
    collected is logged, recorded in ``failures`` and left out of the
    result; it never stops the others.

    Without an explicit ``github_collector`` the engine opens its own GitHub
    client on first use, authenticated with the token resolved from
    ``github_config`` and ``global_config``. That client is closed by
    ``close()``; use the engine as a context manager to release it.
    """

    def __init__(
        self,
        local_collector: Optional[LocalGitCollector] = None,
        github_collector: Optional[GitHubCollector] = None,
        github_config: Optional[GitHubConfig] = None,
        global_config: Optional[GlobalConfig] = None,
    ):
        self.local_collector = local_collector or LocalGitCollector()
        self.github_config = github_config or config.github
        self.global_config = global_config
        self._github_collector = github_collector
        self._owned_client: Optional[GitHubClient] = None
        self.failures: Dict[str, str] = {}

    @property
    def github_collector(self) -> GitHubCollector:
        if self._github_collector is None:
            self._owned_client = GitHubClient(
                token=resolve_github_token(self.github_config, self.global_config),
                base_url=self.github_config.api_url,
                timeout=self.github_config.request_timeout,
            )
            self._github_collector = GitHubCollector(self._owned_client)
        return self._github_collector

    def close(self) -> None:
        """Close the GitHub client this engine opened, if any."""
        if self._owned_client is not None:
            self._owned_client.close()
            self._owned_client = None
            self._github_collector = None

    def __enter__(self) -> "MetricsEngine":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def compute_repo_metrics(self, repository: Repository, start: datetime, end: datetime) -> RepoMetrics:
        """Collect metrics for one repository, dispatching on its identifier."""
        identifier = resolve_repo_identifier(repository.path)

        if isinstance(identifier, LocalRepo):
            return self.local_collector.collect(identifier.path, start, end, branch=repository.branch)
        if isinstance(identifier, GitHubRepo):
            return self.github_collector.collect(
                identifier.owner, identifier.repo, start, end, branch=repository.branch
            )
        raise TypeError(f"Unsupported repository identifier: {identifier!r}")

    def compute_git_metrics(
        self,
        block: Block,
        repositories: Sequence[RepositoryEntry],
        now: Optional[datetime] = None,
    ) -> GitMetrics:
        """Compute metrics for ``block`` across ``repositories``.

        The window is ``[block.start_date, block.end_date)``; an open block
        runs until ``now``.
        """
        start = block.start_date
        end = block.end_date or now or utcnow()
        self.failures = {}

        results: Dict[str, RepoMetrics] = {}
        for entry in repositories:
            repository = _as_repository(entry)
            try:
                results[repository.path] = self.compute_repo_metrics(repository, start, end)
            except (DevexError, OSError) as e:
                logger.warning(
                    "Could not compute metrics for repository",
                    repository=repository.path,
                    error=str(e),
                )
                self.failures[repository.path] = str(e)

        logger.info(
            "Computed git metrics",
            block=block.id,
            repositories=len(results),
            failed=len(self.failures),
        )

        return GitMetrics(
            block_id=block.id,
            computed_at=utcnow(),
            date_range=DateRange(start=start, end=end),
            repositories=results,
            totals=aggregate_repo_metrics(results),
        )


def create_metrics_engine(
    github_config: Optional[GitHubConfig] = None,
    global_config: Optional[GlobalConfig] = None,
    data_dir: Optional[Path] = None,
) -> MetricsEngine:
    """Build an engine for the current user.

    When ``global_config`` is not given it is loaded from ``config.json`` in
    the data directory, so a token stored there is used whenever
    ``GITHUB_TOKEN`` is unset. No GitHub client is opened until a GitHub
    repository is collected.
    """
    if global_config is None:
        root = get_data_dir(data_dir or config.app.data_dir)
        global_config = load_global_config(get_config_path(root))
    return MetricsEngine(github_config=github_config or config.github, global_config=global_config)


def compute_git_metrics(
    block: Block,
    repositories: Sequence[RepositoryEntry],
    engine: Optional[MetricsEngine] = None,
) -> GitMetrics:
    """Compute git metrics for a block across all configured repositories."""
    if engine is not None:
        return engine.compute_git_metrics(block, repositories)
    with create_metrics_engine() as owned:
        return owned.compute_git_metrics(block, repositories)
