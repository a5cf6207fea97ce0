"""
Shared types and models for GitHub git data operations.
"""

from ghcommit.services.github.models.graphql import GraphQLCommitTarget, GraphQLRef, GraphQLTree
from ghcommit.services.github.models.types import (
    CommitRequest,
    CommitResult,
    FileInspection,
    FileMode,
    ObjectKind,
    RefState,
    RefWriteOutcome,
    TreeEntry,
)

__all__ = [
    "CommitRequest",
    "CommitResult",
    "FileInspection",
    "FileMode",
    "GraphQLCommitTarget",
    "GraphQLRef",
    "GraphQLTree",
    "ObjectKind",
    "RefState",
    "RefWriteOutcome",
    "TreeEntry",
]
