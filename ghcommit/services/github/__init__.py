"""
GitHub Service Package

Main Components:
- API Client: GitHub REST and GraphQL interactions
- Git Data Operations: trees, commits and refs
- Models: request/result records and GraphQL payload models
"""

from ghcommit.services.github.api.client import GitHubAPIClient
from ghcommit.services.github.api.git_data import GitDataOperations

__all__ = ["GitHubAPIClient", "GitDataOperations"]
