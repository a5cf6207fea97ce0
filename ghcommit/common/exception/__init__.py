from ghcommit.common.exception.exceptions import (
    ConfigurationError,
    GhCommitError,
    GitHubAPIError,
    GitHubErrorKind,
    RefNotFoundError,
    RefResolutionError,
)

__all__ = [
    "ConfigurationError",
    "GhCommitError",
    "GitHubAPIError",
    "GitHubErrorKind",
    "RefNotFoundError",
    "RefResolutionError",
]
