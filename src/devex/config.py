"""Configuration management for devex.

Two layers feed the metrics engine:

* ``Config`` - process settings read from the environment and ``.env``
  (log level, data directory, GitHub API access).
* ``GlobalConfig`` - the user's persisted ``config.json`` in the data
  directory (tracked repositories, active experiment, stored GitHub token).
"""

from pathlib import Path
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.constants import (
    CONFIG_VERSION,
    DEFAULT_GITHUB_API_URL,
    DEFAULT_LOG_LEVEL,
    DEFAULT_REQUEST_TIMEOUT,
    MAX_REQUEST_TIMEOUT,
)
from .exceptions import ConfigurationError, StorageError
from .git.models import Repository
from .storage import read_json


class AppConfig(BaseSettings):
    """Application configuration settings."""

    # Logging
    log_level: str = Field(default=DEFAULT_LOG_LEVEL, alias="LOG_LEVEL")
    log_format: str = Field(default="console", alias="LOG_FORMAT")

    # Storage
    data_dir: Optional[Path] = Field(default=None, alias="DEVEX_DATA_DIR")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
    )

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        """Only console and json renderers are supported."""
        v = v.lower()
        if v not in ("console", "json"):
            raise ConfigurationError("LOG_FORMAT must be 'console' or 'json'")
        return v


class GitHubConfig(BaseSettings):
    """GitHub API configuration settings."""

    token: Optional[str] = Field(default=None, alias="GITHUB_TOKEN")
    api_url: str = Field(default=DEFAULT_GITHUB_API_URL, alias="GITHUB_API_URL")
    request_timeout: float = Field(
        default=DEFAULT_REQUEST_TIMEOUT, alias="GITHUB_REQUEST_TIMEOUT", gt=0, le=MAX_REQUEST_TIMEOUT
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
    )

    @field_validator("api_url")
    @classmethod
    def strip_trailing_slash(cls, v):
        return v.rstrip("/")


class Config:
    """Main configuration class."""

    def __init__(self) -> None:
        self.app = AppConfig()
        self.github = GitHubConfig()

    @classmethod
    def load(cls) -> "Config":
        """Load configuration from environment and .env file."""
        return cls()


class StoredGitHubSettings(BaseModel):
    """The ``github`` section of config.json."""
    model_config = ConfigDict(extra="ignore")

    token: Optional[str] = None


class GlobalConfig(BaseModel):
    """The persisted user configuration (``config.json``).

    Only the fields the metrics engine consumes are modelled; anything else
    in the file is ignored.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    version: int = CONFIG_VERSION
    active_experiment: Optional[str] = None
    repositories: List[Repository] = Field(default_factory=list)
    github: Optional[StoredGitHubSettings] = None

    @field_validator("repositories", mode="before")
    @classmethod
    def coerce_repository_entries(cls, v: Any) -> Any:
        """Accept bare path strings alongside ``{path, branch}`` objects."""
        if v is None:
            return []
        if isinstance(v, list):
            return [{"path": item} if isinstance(item, str) else item for item in v]
        return v


def load_global_config(path: Path) -> GlobalConfig:
    """Load config.json, falling back to defaults when it does not exist."""
    try:
        data = read_json(path)
    except StorageError as e:
        raise ConfigurationError.from_exception(f"Failed to load config: {path}", e)

    if data is None:
        return GlobalConfig()

    try:
        return GlobalConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError.from_exception(
            f"Invalid config file: {path}", e, details={"errors": e.error_count()}
        )


def resolve_github_token(
    github_config: GitHubConfig, global_config: Optional[GlobalConfig] = None
) -> Optional[str]:
    """GitHub token, with the environment taking priority over config.json."""
    if github_config.token:
        return github_config.token
    if global_config is not None and global_config.github is not None:
        return global_config.github.token or None
    return None


# Global configuration instance
config = Config.load()
