"""System-wide constants and configuration values."""

from typing import Final

# GitHub API Constants
DEFAULT_GITHUB_API_URL: Final[str] = "https://api.github.com"
GITHUB_ACCEPT_HEADER: Final[str] = "application/vnd.github.v3+json"
USER_AGENT: Final[str] = "devex-cli"
DEFAULT_REQUEST_TIMEOUT: Final[int] = 30  # seconds
MAX_REQUEST_TIMEOUT: Final[int] = 300  # seconds

# Pagination Constants
COMMITS_PAGE_SIZE: Final[int] = 100
MAX_COMMIT_PAGES: Final[int] = 50

# Sampling Constants
MAX_DETAILED_COMMITS: Final[int] = 20

# Time Constants
SECONDS_PER_DAY: Final[int] = 24 * 60 * 60

# Data Directory Constants
DATA_DIR_ENV_VAR: Final[str] = "DEVEX_DATA_DIR"
CONFIG_FILE_NAME: Final[str] = "config.json"
CONFIG_VERSION: Final[int] = 1

# Logging Constants
DEFAULT_LOG_LEVEL: Final[str] = "INFO"
