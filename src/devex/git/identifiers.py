"""Classification of configured repository strings.

Resolution order:

1. ``/path``, ``~/path``, ``./path``, ``../path`` - local (``~`` expanded).
2. ``[http[s]://][www.]github.com/<owner>/<repo>[.git]`` - GitHub.
3. ``<owner>/<repo>`` - GitHub shorthand.
4. Anything else - local, treated as a possibly-relative path.

Because rule 3 runs before the fallback, a two-segment relative path such as
``org/repo`` is always read as a GitHub repository, even when a directory of
that name exists. Prefix it with ``./`` to force a local lookup.
"""

import os
import re

from .models import GitHubRepo, LocalRepo, RepoIdentifier

LOCAL_PREFIXES = ("/", "~", ".")

GITHUB_URL_PATTERN = re.compile(
    r"(?:https?://)?(?:www\.)?github\.com/([^/]+)/([^/]+?)(?:\.git)?$"
)
SHORTHAND_PATTERN = re.compile(r"^([^/]+)/([^/]+)$")


def resolve_repo_identifier(value: str) -> RepoIdentifier:
    """Resolve a configured repository string to a local or GitHub identifier."""
    if value.startswith(LOCAL_PREFIXES):
        path = os.path.expanduser(value) if value.startswith("~") else value
        return LocalRepo(path=path)

    url_match = GITHUB_URL_PATTERN.search(value)
    if url_match:
        return GitHubRepo(owner=url_match.group(1), repo=url_match.group(2))

    short_match = SHORTHAND_PATTERN.match(value)
    if short_match:
        return GitHubRepo(owner=short_match.group(1), repo=short_match.group(2))

    return LocalRepo(path=value)
