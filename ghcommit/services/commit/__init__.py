"""
Commit Module

Builds a remote commit from local files:
- Base state resolution
- Filesystem inspection and submodule ref resolution
- Tree entry construction
- Branch ref create-or-update
"""

from ghcommit.services.commit.base_resolver import resolve_base
from ghcommit.services.commit.filesystem import inspect_path, mode_from_posix
from ghcommit.services.commit.ref_store import (
    DirectoryRefStore,
    InMemoryRefStore,
    RefStore,
    parse_packed_refs,
    resolve_head_commit,
)
from ghcommit.services.commit.ref_upsert import RefUpsertCoordinator, RefWriteState
from ghcommit.services.commit.service import CommitService, perform_commit
from ghcommit.services.commit.tree_builder import TreeEntryBuilder

__all__ = [
    "CommitService",
    "DirectoryRefStore",
    "InMemoryRefStore",
    "RefStore",
    "RefUpsertCoordinator",
    "RefWriteState",
    "TreeEntryBuilder",
    "inspect_path",
    "mode_from_posix",
    "parse_packed_refs",
    "perform_commit",
    "resolve_base",
    "resolve_head_commit",
]
