"""
ghcommit - create commits on GitHub through the git data API.

Builds a tree from local files, creates a commit on top of the resolved base
state, and points a branch at it without a local working copy.
"""

from ghcommit.services.commit.service import CommitService, perform_commit
from ghcommit.services.github.models.types import CommitRequest, CommitResult

__version__ = "0.1.0"

__all__ = [
    "CommitRequest",
    "CommitResult",
    "CommitService",
    "perform_commit",
]
