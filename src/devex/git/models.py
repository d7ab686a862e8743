"""Data models for configured repositories and their resolved identifiers."""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict


class Repository(BaseModel):
    """A repository entry from the global config."""
    model_config = ConfigDict(frozen=True)

    path: str
    branch: Optional[str] = None


class LocalRepo(BaseModel):
    """A repository checked out on this machine."""
    model_config = ConfigDict(frozen=True)

    path: str


class GitHubRepo(BaseModel):
    """A repository hosted on GitHub."""
    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


RepoIdentifier = Union[LocalRepo, GitHubRepo]
