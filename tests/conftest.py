"""Pytest configuration and fixtures."""

import shutil
import tempfile
from datetime import datetime, timezone
from pathlib import Path

import git
import pytest

from devex.metrics.models import Block, RepoMetrics


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_path = tempfile.mkdtemp(prefix="devex_test_")
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def isolated_git_config(monkeypatch, temp_dir):
    """Keep the developer's global/system git config out of the tests."""
    home = temp_dir / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(home / ".gitconfig"))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    return home


def make_repo_metrics(**overrides) -> RepoMetrics:
    """RepoMetrics with zeroed defaults, overridden by keyword."""
    return RepoMetrics(**overrides)


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def git_date(when: datetime) -> str:
    """Git's internal date format, accepted by GitPython for commit dates."""
    return f"{int(when.timestamp())} +0000"


class GitRepoBuilder:
    """Creates commits with explicit authors and dates in a scratch repository."""

    def __init__(self, path: Path):
        self.path = path
        self.repo = git.Repo.init(path)

    def set_user(self, email: str, name: str = "Test User") -> None:
        with self.repo.config_writer() as writer:
            writer.set_value("user", "email", email)
            writer.set_value("user", "name", name)

    def commit(self, files, message="Commit", email="test@example.com", name="Test User", when=None):
        """Write ``files`` (path -> content) and commit them as the given author."""
        for rel_path, content in files.items():
            target = self.path / rel_path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content)
        self.repo.index.add(list(files))

        actor = git.Actor(name, email)
        kwargs = {}
        if when is not None:
            kwargs["author_date"] = git_date(when)
            kwargs["commit_date"] = git_date(when)
        return self.repo.index.commit(message, author=actor, committer=actor, **kwargs)


@pytest.fixture
def git_repo(temp_dir, isolated_git_config):
    """A fresh git repository whose configured user is test@example.com."""
    builder = GitRepoBuilder(temp_dir / "repo")
    builder.set_user("test@example.com")
    return builder


@pytest.fixture
def sample_block():
    return Block(id="no-ai-1", start_date=utc(2025, 1, 13), end_date=utc(2025, 1, 20), expected_duration=7)
