"""
Exception types raised while building a remote commit.
"""

from enum import Enum
from typing import Optional


class GhCommitError(Exception):
    """Base class for all ghcommit errors."""

    pass


class ConfigurationError(GhCommitError):
    """Raised when a required field or setting is missing."""

    pass


class RefNotFoundError(GhCommitError):
    """Raised when an explicitly requested base branch does not exist."""

    def __init__(self, ref_name: str, message: Optional[str] = None):
        self.ref_name = ref_name
        super().__init__(message or f"Branch '{ref_name}' not found")


class RefResolutionError(GhCommitError):
    """Raised when a submodule's HEAD cannot be resolved to a commit SHA."""

    def __init__(self, ref_name: str, message: Optional[str] = None):
        self.ref_name = ref_name
        super().__init__(message or f"Unable to resolve ref '{ref_name}'")


class GitHubErrorKind(str, Enum):
    """Structured classification of a failed GitHub API call."""

    REFERENCE_NOT_FOUND = "reference_not_found"
    REFERENCE_EXISTS = "reference_exists"
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    CONFLICT = "conflict"
    VALIDATION = "validation"
    GRAPHQL = "graphql"
    TRANSPORT = "transport"
    UNKNOWN = "unknown"


class GitHubAPIError(GhCommitError):
    """Raised when the GitHub API rejects a request or cannot be reached."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        kind: GitHubErrorKind = GitHubErrorKind.UNKNOWN,
    ):
        self.status_code = status_code
        self.kind = kind
        super().__init__(message)

    @property
    def is_reference_not_found(self) -> bool:
        return self.kind == GitHubErrorKind.REFERENCE_NOT_FOUND
