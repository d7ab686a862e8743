"""Aggregation of per-repository metrics into block totals."""

from datetime import datetime
from typing import Dict, Iterable, List

from ..core.timeutils import ensure_utc, utc_day_key
from .models import RepoMetrics


def first_commit_per_day(timestamps: Iterable[datetime]) -> List[datetime]:
    """Earliest timestamp of each UTC calendar day, sorted ascending."""
    by_day: Dict[str, datetime] = {}
    for ts in timestamps:
        ts = ensure_utc(ts)
        day = utc_day_key(ts)
        existing = by_day.get(day)
        if existing is None or ts < existing:
            by_day[day] = ts
    return sorted(by_day.values())


def aggregate_repo_metrics(repositories: Dict[str, RepoMetrics]) -> RepoMetrics:
    """Combine per-repository metrics into a totals record.

    Counts are summed. ``avg_commits_per_day`` is the mean of the per-repo
    averages rather than their sum, so one very active repository does not
    dominate a block comparison. First-commit times are merged and reduced
    to one (earliest) timestamp per day. An empty mapping gives all zeros.
    """
    metrics = list(repositories.values())
    if not metrics:
        return RepoMetrics()

    all_first_commits: List[datetime] = []
    for m in metrics:
        all_first_commits.extend(m.first_commit_times)

    return RepoMetrics(
        commits=sum(m.commits for m in metrics),
        lines_added=sum(m.lines_added for m in metrics),
        lines_removed=sum(m.lines_removed for m in metrics),
        files_changed=sum(m.files_changed for m in metrics),
        test_files_changed=sum(m.test_files_changed for m in metrics),
        doc_files_changed=sum(m.doc_files_changed for m in metrics),
        avg_commits_per_day=sum(m.avg_commits_per_day for m in metrics) / len(metrics),
        first_commit_times=first_commit_per_day(all_first_commits),
        estimated=any(m.estimated for m in metrics),
    )
