"""Custom exceptions for the devex metrics engine."""

from typing import Any, Dict, Optional


class DevexError(Exception):
    """Base exception for devex errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        """Initialize with message, optional details, and cause."""
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

        # Set the cause for proper exception chaining
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        """String representation with details."""
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message

    @classmethod
    def from_exception(cls, message: str, cause: Exception, details: Optional[Dict[str, Any]] = None):
        """Create exception with proper chaining from another exception."""
        return cls(message, details, cause)


class ConfigurationError(DevexError):
    """Exception raised for configuration-related errors."""
    pass


class StorageError(DevexError):
    """Exception raised when a stored document cannot be read or written."""
    pass


class BlockNotFoundError(DevexError):
    """Exception raised when a block cannot be located."""
    pass


class CollectionError(DevexError):
    """Base exception for per-repository collection failures.

    The metrics engine catches these at the repository boundary; they never
    abort collection of sibling repositories.
    """
    pass


class NotAGitRepositoryError(CollectionError):
    """Exception raised when a local path is not inside a git working tree."""
    pass


class GitCommandFailedError(CollectionError):
    """Exception raised when a git invocation exits non-zero."""
    pass


class RemoteApiError(CollectionError):
    """Exception raised for GitHub API errors."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, details, cause)
        self.status_code = status_code


class RemoteAuthError(RemoteApiError):
    """GitHub rejected the credentials (401/403)."""
    pass


class RemoteNotFoundError(RemoteApiError):
    """Repository does not exist or is private (404)."""
    pass
