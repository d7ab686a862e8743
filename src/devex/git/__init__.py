"""Repository identifiers, file classification and commit activity collectors."""

from .classify import ChangedFiles, is_doc_file, is_test_file
from .identifiers import resolve_repo_identifier
from .models import GitHubRepo, LocalRepo, RepoIdentifier, Repository

__all__ = [
    "ChangedFiles",
    "GitHubRepo",
    "LocalRepo",
    "RepoIdentifier",
    "Repository",
    "is_doc_file",
    "is_test_file",
    "resolve_repo_identifier",
]
