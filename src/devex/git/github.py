"""Commit activity metrics for GitHub repositories via the REST API.

Listing commits is cheap (100 per request), but line and file statistics
need one request per commit. To bound API usage, detail is fetched for at
most ``MAX_DETAILED_COMMITS`` evenly spaced commits; when the window holds
more than that, line counts are extrapolated linearly from the sample and
the result is flagged ``estimated``. File counts always reflect only the
commits that were actually fetched.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, TypeVar

import httpx

from ..core.constants import (
    COMMITS_PAGE_SIZE,
    DEFAULT_GITHUB_API_URL,
    DEFAULT_REQUEST_TIMEOUT,
    GITHUB_ACCEPT_HEADER,
    MAX_COMMIT_PAGES,
    MAX_DETAILED_COMMITS,
    USER_AGENT,
)
from ..core.timeutils import days_in_window, format_timestamp, parse_timestamp
from ..exceptions import RemoteApiError, RemoteAuthError, RemoteNotFoundError
from ..logging import get_logger
from ..metrics.aggregator import first_commit_per_day
from ..metrics.models import RepoMetrics
from .classify import ChangedFiles

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass
class RemoteCommit:
    """A commit SHA with its author timestamp, as listed by the API."""
    sha: str
    authored_at: datetime


def sample_evenly(items: Sequence[T], limit: int) -> List[T]:
    """Pick at most ``limit`` items spread evenly across ``items``."""
    n = len(items)
    if n <= limit:
        return list(items)
    return [items[i * n // limit] for i in range(limit)]


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class GitHubClient:
    """Thin synchronous GitHub REST client.

    Every request carries a bounded timeout. Error responses are translated
    into the ``RemoteApiError`` family so callers can tell auth problems
    from missing repositories.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: str = DEFAULT_GITHUB_API_URL,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.token = token
        headers = {
            "Accept": GITHUB_ACCEPT_HEADER,
            "User-Agent": USER_AGENT,
        }
        if token:
            headers["Authorization"] = f"token {token}"

        # Renamed and transferred repositories answer with a 301.
        self._client = httpx.Client(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )

    @property
    def has_token(self) -> bool:
        return bool(self.token)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def get_json(self, path: str, params: Optional[Dict[str, Any]] = None, subject: Optional[str] = None) -> Any:
        """GET ``path`` and return the decoded JSON body."""
        subject = subject or path
        try:
            response = self._client.get(path, params=params)
        except httpx.HTTPError as e:
            raise RemoteApiError.from_exception(f"GitHub API request failed for {subject}: {e}", e)

        self._raise_for_status(response, subject)

        try:
            return response.json()
        except ValueError as e:
            raise RemoteApiError.from_exception(f"GitHub API returned invalid JSON for {subject}", e)

    def _raise_for_status(self, response: httpx.Response, subject: str) -> None:
        status = response.status_code
        if response.is_success:
            return

        details = {"status": status, "path": response.request.url.path}
        if status in (401, 403):
            if response.headers.get("X-RateLimit-Remaining") == "0":
                details["rate_limited"] = True
            raise RemoteAuthError(
                f"GitHub API auth failed for {subject}. Set GITHUB_TOKEN env var.",
                details=details,
                status_code=status,
            )
        if status == 404:
            raise RemoteNotFoundError(
                f"Repository {subject} not found or is private. Check the name or set GITHUB_TOKEN.",
                details=details,
                status_code=status,
            )
        raise RemoteApiError(
            f"GitHub API error for {subject}: {status} {response.reason_phrase}",
            details=details,
            status_code=status,
        )

    def get_authenticated_login(self) -> Optional[str]:
        """Login of the token's owner, or None if it cannot be determined."""
        if not self.has_token:
            return None
        try:
            data = self.get_json("/user", subject="authenticated user")
        except RemoteApiError as e:
            logger.debug("Could not resolve GitHub identity", error=str(e))
            return None
        if isinstance(data, dict):
            return data.get("login") or None
        return None


class GitHubCollector:
    """Collects authored commit activity for GitHub repositories.

    ``author`` restricts counted commits to one GitHub login. When it is not
    given and the client holds a token, the token owner's login is looked up
    once and reused for every repository.
    """

    def __init__(self, client: GitHubClient, author: Optional[str] = None):
        self.client = client
        self._author = author
        self._author_resolved = author is not None

    def author_login(self) -> Optional[str]:
        if not self._author_resolved:
            self._author = self.client.get_authenticated_login()
            self._author_resolved = True
        return self._author

    def collect(
        self,
        owner: str,
        repo: str,
        start: datetime,
        end: datetime,
        branch: Optional[str] = None,
    ) -> RepoMetrics:
        """Compute metrics for ``owner/repo`` over ``[start, end)``."""
        full_name = f"{owner}/{repo}"
        author = self.author_login()
        if author is None:
            logger.warning(
                "GitHub identity unknown; counting commits from all authors",
                repository=full_name,
            )

        commits = self.list_commits(owner, repo, start, end, branch=branch, author=author)
        sample = sample_evenly(commits, MAX_DETAILED_COMMITS)
        sampled = len(sample) < len(commits)

        changed = ChangedFiles()
        lines_added = 0
        lines_removed = 0
        fetched = 0
        for commit in sample:
            try:
                detail = self.get_commit_detail(owner, repo, commit.sha)
            except RemoteApiError as e:
                logger.debug("Skipping commit detail", repository=full_name, sha=commit.sha, error=str(e))
                continue
            fetched += 1
            stats = detail.get("stats") or {}
            lines_added += stats.get("additions") or 0
            lines_removed += stats.get("deletions") or 0
            changed.update(f["filename"] for f in detail.get("files") or [] if f.get("filename"))

        if sampled and fetched:
            scale = len(commits) / fetched
            lines_added = round_half_up(lines_added * scale)
            lines_removed = round_half_up(lines_removed * scale)
            logger.info(
                "Extrapolated line counts from sampled commits",
                repository=full_name,
                sampled=fetched,
                total=len(commits),
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
            estimated=sampled,
        )

    def list_commits(
        self,
        owner: str,
        repo: str,
        start: datetime,
        end: datetime,
        branch: Optional[str] = None,
        author: Optional[str] = None,
    ) -> List[RemoteCommit]:
        """All commits in the window, following pagination up to the page cap."""
        full_name = f"{owner}/{repo}"
        params: Dict[str, Any] = {
            "since": format_timestamp(start),
            "until": format_timestamp(end),
            "per_page": COMMITS_PAGE_SIZE,
        }
        if branch:
            params["sha"] = branch
        if author:
            params["author"] = author

        commits: List[RemoteCommit] = []
        for page in range(1, MAX_COMMIT_PAGES + 1):
            data = self.client.get_json(
                f"/repos/{owner}/{repo}/commits",
                params={**params, "page": page},
                subject=full_name,
            )
            if not isinstance(data, list):
                raise RemoteApiError(f"Unexpected commit list payload for {full_name}")

            for item in data:
                commit = self._parse_commit(item)
                if commit is not None:
                    commits.append(commit)

            if len(data) < COMMITS_PAGE_SIZE:
                break
        else:
            logger.warning(
                "Stopped at commit page limit; later commits are excluded",
                repository=full_name,
                limit=MAX_COMMIT_PAGES * COMMITS_PAGE_SIZE,
            )

        return commits

    def get_commit_detail(self, owner: str, repo: str, sha: str) -> Dict[str, Any]:
        data = self.client.get_json(f"/repos/{owner}/{repo}/commits/{sha}", subject=f"{owner}/{repo}@{sha[:7]}")
        if not isinstance(data, dict):
            raise RemoteApiError(f"Unexpected commit payload for {owner}/{repo}@{sha}")
        return data

    @staticmethod
    def _parse_commit(item: Dict[str, Any]) -> Optional[RemoteCommit]:
        info = item.get("commit") or {}
        signature = info.get("author") or info.get("committer") or {}
        date = signature.get("date")
        if not item.get("sha") or not date:
            return None
        try:
            authored_at = parse_timestamp(str(date))
        except ValueError as e:
            raise RemoteApiError.from_exception(
                f"Invalid commit date from GitHub: {date!r}", e, details={"sha": item["sha"]}
            )
        return RemoteCommit(sha=item["sha"], authored_at=authored_at)
