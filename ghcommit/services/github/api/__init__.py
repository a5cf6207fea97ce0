"""
GitHub API Module

Handles all GitHub API interactions needed to write a commit:
- REST requests (git trees, commits, refs)
- GraphQL queries (branch and default branch lookup)
"""

from ghcommit.services.github.api.client import GitHubAPIClient
from ghcommit.services.github.api.git_data import GitDataOperations

__all__ = [
    "GitHubAPIClient",
    "GitDataOperations",
]
