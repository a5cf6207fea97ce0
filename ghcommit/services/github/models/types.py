"""
Shared types and models for building remote commits.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ghcommit.common.constants import (
    MODE_DIRECTORY,
    MODE_EXECUTABLE_FILE,
    MODE_REGULAR_FILE,
    MODE_SUBMODULE,
    MODE_SYMLINK,
)


class FileMode(str, Enum):
    REGULAR_FILE = MODE_REGULAR_FILE
    EXECUTABLE_FILE = MODE_EXECUTABLE_FILE
    DIRECTORY = MODE_DIRECTORY
    SUBMODULE = MODE_SUBMODULE
    SYMLINK = MODE_SYMLINK


class ObjectKind(str, Enum):
    BLOB = "blob"
    TREE = "tree"
    COMMIT = "commit"


@dataclass(frozen=True)
class CommitRequest:
    """Everything needed to build one commit against a remote branch."""

    owner: str
    repository: str
    branch: str
    message: str
    additions: Tuple[str, ...] = ()
    deletions: Tuple[str, ...] = ()
    root_directory: Optional[str] = None
    allow_empty: bool = False
    base_sha: Optional[str] = None
    base_branch: Optional[str] = None
    omit_parent: bool = False
    delete_missing_as_noop: bool = False
    force_push: bool = False

    def __post_init__(self):
        # Accept any iterable of paths but store tuples so the record stays immutable
        object.__setattr__(self, "additions", tuple(self.additions or ()))
        object.__setattr__(self, "deletions", tuple(self.deletions or ()))

    @property
    def has_changes(self) -> bool:
        return bool(self.additions or self.deletions)

    @property
    def is_noop(self) -> bool:
        """True when there is nothing to commit and empty commits are not allowed."""
        return not self.has_changes and not self.allow_empty


@dataclass(frozen=True)
class RefState:
    """A resolved (commit, tree) pair used as parent and base tree.

    is_target_branch is True when the target branch itself was resolved,
    False when it was looked up and found absent, and None when the base
    came from an explicit SHA or branch.
    """

    commit_sha: str
    tree_sha: str
    branch_name: Optional[str] = None
    is_target_branch: Optional[bool] = None


@dataclass(frozen=True)
class TreeEntry:
    """One entry of a tree creation request."""

    path: str
    mode: FileMode
    kind: ObjectKind
    content: Optional[str] = None
    sha: Optional[str] = None
    deleted: bool = False

    def __post_init__(self):
        if self.deleted and (self.content is not None or self.sha is not None):
            raise ValueError(f"Deleted entry {self.path} cannot carry content or sha")
        if self.kind != ObjectKind.BLOB and self.content is not None:
            raise ValueError(f"{self.kind.value} entry {self.path} cannot carry inline content")

    def to_payload(self) -> Dict[str, Any]:
        """Build the JSON body item for POST git/trees."""
        payload: Dict[str, Any] = {
            "path": self.path,
            "mode": self.mode.value,
            "type": self.kind.value,
        }
        if self.deleted:
            payload["sha"] = None
        elif self.sha is not None:
            payload["sha"] = self.sha
        elif self.content is not None:
            payload["content"] = self.content
        return payload


@dataclass(frozen=True)
class FileInspection:
    """What the filesystem says about one requested path."""

    path: str
    exists: bool
    is_directory: bool = False
    is_symlink: bool = False
    posix_mode: int = 0
    is_submodule: bool = False
    submodule_commit_sha: Optional[str] = None


@dataclass(frozen=True)
class CommitResult:
    commit_sha: str


@dataclass
class RefWriteOutcome:
    """How the branch ref ended up pointing at the new commit."""

    sha: str
    created: bool = False
    attempts: List[str] = field(default_factory=list)
