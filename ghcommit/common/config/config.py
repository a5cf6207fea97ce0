"""
Configuration module.

Values are read from the environment (and an optional .env file) once at
import time. Nothing here is required at import; callers that need a value
use get_env() so the error surfaces where the setting is used.
"""

import os
from typing import Optional

from dotenv import load_dotenv

from ghcommit.common.exception.exceptions import ConfigurationError

# Load environment variables from .env file
load_dotenv()


def get_env(key: str) -> str:
    """Get environment variable or raise ConfigurationError if not found."""
    value = os.getenv(key)
    if not value:
        raise ConfigurationError(f"{key} not found")
    return value


def get_token() -> Optional[str]:
    """Get the GitHub token, preferring GITHUB_TOKEN over GH_TOKEN."""
    return os.getenv("GITHUB_TOKEN") or os.getenv("GH_TOKEN")


# GitHub API Configuration
GITHUB_API_URL = os.getenv("GITHUB_API_URL", "https://api.github.com").rstrip("/")
GITHUB_GRAPHQL_URL = os.getenv("GITHUB_GRAPHQL_URL", f"{GITHUB_API_URL}/graphql")
GITHUB_API_VERSION = os.getenv("GITHUB_API_VERSION", "2022-11-28")

# Default "owner/repo" used by the command line entry point
GITHUB_REPOSITORY = os.getenv("GITHUB_REPOSITORY", "")

# Request timeout in seconds
GH_REQUEST_TIMEOUT = float(os.getenv("GH_REQUEST_TIMEOUT", "150"))
GH_CONNECT_TIMEOUT = float(os.getenv("GH_CONNECT_TIMEOUT", "60"))

# Upper bound on concurrent filesystem inspections while building a tree
GH_MAX_CONCURRENT_FILE_READS = int(os.getenv("GH_MAX_CONCURRENT_FILE_READS", "8"))
