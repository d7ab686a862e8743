"""Commit activity metrics for local git working trees."""

import re
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import git
from git import GitCommandError, GitCommandNotFound

from ..core.timeutils import days_in_window, format_timestamp, parse_timestamp
from ..exceptions import GitCommandFailedError, NotAGitRepositoryError
from ..logging import get_logger
from ..metrics.aggregator import first_commit_per_day
from ..metrics.models import RepoMetrics
from .classify import ChangedFiles

logger = get_logger(__name__)

NUMSTAT_LINE = re.compile(r"^(\d+|-)\t(\d+|-)\t(.+)$")


@dataclass
class LocalCommit:
    """A commit hash with its author timestamp."""
    sha: str
    authored_at: datetime


class LocalGitCollector:
    """Collects authored commit activity from a local working tree.

    Commits are filtered to the repository's configured ``user.email`` when
    one is set; otherwise every commit in the window is counted.
    """

    def collect(
        self,
        repo_path: str,
        start: datetime,
        end: datetime,
        branch: Optional[str] = None,
    ) -> RepoMetrics:
        """Compute metrics for ``repo_path`` over ``[start, end)``."""
        cmd = self._open(repo_path)

        author_email = self.get_user_email(cmd)
        if author_email is None:
            logger.warning(
                "No git user.email configured; counting commits from all authors",
                repository=repo_path,
            )

        filters = self._build_filters(start, end, branch, author_email)
        commits = self.list_commits(cmd, filters)
        changed, lines_added, lines_removed = self.collect_numstat(cmd, filters)

        logger.debug(
            "Collected local repository metrics",
            repository=repo_path,
            commits=len(commits),
            files=changed.files_changed,
        )

        return RepoMetrics(
            commits=len(commits),
            lines_added=lines_added,
            lines_removed=lines_removed,
            files_changed=changed.files_changed,
            test_files_changed=changed.test_files_changed,
            doc_files_changed=changed.doc_files_changed,
            avg_commits_per_day=len(commits) / days_in_window(start, end),
            first_commit_times=first_commit_per_day(c.authored_at for c in commits),
        )

    def _open(self, repo_path: str) -> git.Git:
        """Return a git command wrapper bound to ``repo_path`` after verifying it."""
        if not Path(repo_path).is_dir():
            raise NotAGitRepositoryError(f"Not a git repository or path doesn't exist: {repo_path}")

        cmd = git.Git(repo_path)
        try:
            inside = cmd.rev_parse("--is-inside-work-tree")
        except GitCommandError as e:
            raise NotAGitRepositoryError.from_exception(
                f"Not a git repository or path doesn't exist: {repo_path}", e
            )
        except GitCommandNotFound as e:
            raise GitCommandFailedError.from_exception("git executable not found", e)

        if inside.strip() != "true":
            raise NotAGitRepositoryError(f"Not inside a git working tree: {repo_path}")
        return cmd

    def get_user_email(self, cmd: git.Git) -> Optional[str]:
        """The repository's effective ``user.email``, or None when unset."""
        try:
            email = cmd.config("user.email").strip()
        except GitCommandError:
            return None
        return email or None

    def _build_filters(
        self,
        start: datetime,
        end: datetime,
        branch: Optional[str],
        author_email: Optional[str],
    ) -> List[str]:
        # The branch must precede the option arguments.
        args: List[str] = [branch] if branch else []
        args.append(f"--after={format_timestamp(start)}")
        args.append(f"--before={format_timestamp(end)}")
        if author_email:
            args.append(f"--author={author_email}")
        return args

    def list_commits(self, cmd: git.Git, filters: List[str]) -> List[LocalCommit]:
        """Commit hashes and author timestamps matching ``filters``."""
        output = self._log(cmd, filters, "--format=%H|%aI")

        commits = []
        for line in output.splitlines():
            line = line.strip()
            if not line:
                continue
            sha, _, date_str = line.partition("|")
            try:
                authored_at = parse_timestamp(date_str)
            except ValueError as e:
                raise GitCommandFailedError.from_exception(
                    f"Unexpected git log output: {line!r}", e, details={"sha": sha}
                )
            commits.append(LocalCommit(sha=sha, authored_at=authored_at))
        return commits

    def collect_numstat(self, cmd: git.Git, filters: List[str]):
        """Sum line deltas and gather distinct touched paths.

        Returns ``(changed_files, lines_added, lines_removed)``. Binary files
        report ``-`` for both counts and contribute no lines.
        """
        output = self._log(cmd, filters, "--numstat", "--format=")

        changed = ChangedFiles()
        lines_added = 0
        lines_removed = 0
        for line in output.splitlines():
            match = NUMSTAT_LINE.match(line)
            if not match:
                continue
            added, removed, path = match.groups()
            lines_added += 0 if added == "-" else int(added)
            lines_removed += 0 if removed == "-" else int(removed)
            changed.add(path)
        return changed, lines_added, lines_removed

    def _log(self, cmd: git.Git, filters: List[str], *extra: str) -> str:
        try:
            return cmd.log(*filters, *extra)
        except GitCommandError as e:
            raise GitCommandFailedError.from_exception(
                f"git log failed (exit {e.status})",
                e,
                details={"stderr": str(e.stderr).strip()},
            )
        except GitCommandNotFound as e:
            raise GitCommandFailedError.from_exception("git executable not found", e)
