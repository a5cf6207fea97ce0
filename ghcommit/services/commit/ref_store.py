"""
Submodule HEAD resolution.

A submodule's pinned commit is found by reading its git metadata:
HEAD, then the loose ref file it points at, then packed-refs. The
algorithm only needs two capabilities, so it runs against any RefStore:
the directory-backed one used in production or an in-memory one.
"""

import logging
from pathlib import Path
from typing import Dict, Mapping, Optional, Protocol

from ghcommit.common.constants import HEAD_FILE, PACKED_REFS_FILE, SYMBOLIC_REF_PREFIX
from ghcommit.common.exception.exceptions import RefResolutionError

logger = logging.getLogger(__name__)


class RefStore(Protocol):
    """Read-only view of a git directory."""

    def read_file(self, relative_path: str) -> Optional[str]:
        """Return the file's text, or None if it does not exist."""
        ...

    def packed_refs(self) -> Dict[str, str]:
        """Return {ref name: sha} from packed-refs (empty if there is none)."""
        ...


def parse_packed_refs(text: str) -> Dict[str, str]:
    """Parse a packed-refs file into {ref name: sha}.

    Comment lines (#) and peeled tag lines (^) are skipped.
    """
    refs: Dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or line.startswith("^"):
            continue
        parts = line.split(" ", 1)
        if len(parts) != 2:
            logger.debug(f"Skipping malformed packed-refs line: {raw_line!r}")
            continue
        sha, name = parts
        refs[name.strip()] = sha
    return refs


class DirectoryRefStore:
    """RefStore backed by a git directory on disk."""

    def __init__(self, git_dir: Path):
        self.git_dir = Path(git_dir)

    def read_file(self, relative_path: str) -> Optional[str]:
        path = self.git_dir / relative_path
        if not path.is_file():
            return None
        return path.read_text(encoding="utf-8")

    def packed_refs(self) -> Dict[str, str]:
        text = self.read_file(PACKED_REFS_FILE)
        if text is None:
            return {}
        return parse_packed_refs(text)

    def __repr__(self) -> str:
        return f"DirectoryRefStore(git_dir='{self.git_dir}')"


class InMemoryRefStore:
    """RefStore over a mapping of relative path to file content."""

    def __init__(self, files: Mapping[str, str]):
        self.files = dict(files)

    def read_file(self, relative_path: str) -> Optional[str]:
        return self.files.get(relative_path)

    def packed_refs(self) -> Dict[str, str]:
        text = self.files.get(PACKED_REFS_FILE)
        if text is None:
            return {}
        return parse_packed_refs(text)


def resolve_head_commit(store: RefStore) -> str:
    """Resolve HEAD to a commit SHA.

    A detached HEAD holds the SHA itself. A symbolic HEAD names a ref,
    which is read from its loose file first and from packed-refs only when
    the loose file is absent; a loose ref always overrides a stale packed
    entry.

    Raises:
        RefResolutionError: If HEAD is missing or the ref it names is in
            neither place
    """
    head = store.read_file(HEAD_FILE)
    if head is None:
        raise RefResolutionError(HEAD_FILE, f"{HEAD_FILE} not found in {store!r}")

    head = head.strip()
    if not head.startswith(SYMBOLIC_REF_PREFIX):
        return head

    ref_name = head[len(SYMBOLIC_REF_PREFIX):].strip()

    loose = store.read_file(ref_name)
    if loose is not None and loose.strip():
        return loose.strip()

    sha = store.packed_refs().get(ref_name)
    if sha is None:
        raise RefResolutionError(ref_name)

    logger.debug(f"Resolved {ref_name} to {sha} from packed-refs")
    return sha
