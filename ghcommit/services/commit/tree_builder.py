"""
Tree entry construction.

Turns the requested additions and deletions into the entries sent to the
git trees API. Filesystem inspections run concurrently in the default
executor, bounded by a semaphore; the returned list always follows the
request order (additions first, then deletions).
"""

import asyncio
import errno
import logging
import os
from pathlib import Path, PurePosixPath
from typing import List, Optional

from ghcommit.common.config.config import GH_MAX_CONCURRENT_FILE_READS
from ghcommit.common.exception.exceptions import ConfigurationError
from ghcommit.services.commit.filesystem import file_mode_for, inspect_path
from ghcommit.services.github.models.types import (
    CommitRequest,
    FileInspection,
    FileMode,
    ObjectKind,
    RefState,
    TreeEntry,
)

logger = logging.getLogger(__name__)


def normalize_tree_path(path: str) -> str:
    """Normalize a caller path into a tree path ("./a//b" -> "a/b").

    Raises:
        ConfigurationError: If the path is empty, absolute or contains ".."
    """
    tree_path = PurePosixPath(path.replace(os.sep, "/"))
    if tree_path.is_absolute() or ".." in tree_path.parts or not tree_path.parts:
        raise ConfigurationError(f"Invalid tree path '{path}': must be relative to the root directory")
    return str(tree_path)


def read_blob_content(full_path: Path) -> str:
    """Read a file's content byte for byte as UTF-8 text.

    Line endings are kept as they are on disk. Bytes that are not valid
    UTF-8 are replaced with U+FFFD.
    """
    data = full_path.read_bytes()
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        logger.warning(f"{full_path} is not valid UTF-8, invalid bytes will be replaced")
        return data.decode("utf-8", errors="replace")


def object_kind_for(inspection: FileInspection) -> ObjectKind:
    if inspection.is_submodule:
        return ObjectKind.COMMIT
    if inspection.is_directory:
        return ObjectKind.TREE
    return ObjectKind.BLOB


def missing_path_entry(path: str) -> TreeEntry:
    """Deletion entry for a path that is not on disk."""
    return TreeEntry(path=path, mode=FileMode.REGULAR_FILE, kind=ObjectKind.BLOB, deleted=True)


class TreeEntryBuilder:
    """Builds tree entries for a commit request."""

    def __init__(self, max_concurrency: Optional[int] = None):
        self.max_concurrency = max(1, max_concurrency or GH_MAX_CONCURRENT_FILE_READS)

    async def build_entries(
        self, request: CommitRequest, base_state: Optional[RefState] = None
    ) -> List[TreeEntry]:
        """Build one entry per requested path.

        Args:
            request: Commit request with additions and deletions
            base_state: Base the entries will be applied to

        Returns:
            Entries in request order

        Raises:
            FileNotFoundError: If a path is missing and delete_missing_as_noop is not set
            RefResolutionError: If a submodule's commit cannot be resolved
            ConfigurationError: If a path is not a valid relative tree path
        """
        if base_state is not None:
            logger.debug(
                f"Building {len(request.additions)} additions and {len(request.deletions)} "
                f"deletions on top of tree {base_state.tree_sha}"
            )

        root = Path(request.root_directory) if request.root_directory else None
        jobs = [(path, normalize_tree_path(path), False) for path in request.additions]
        jobs += [(path, normalize_tree_path(path), True) for path in request.deletions]

        semaphore = asyncio.Semaphore(self.max_concurrency)
        loop = asyncio.get_running_loop()

        async def build_one(path: str, tree_path: str, deleted: bool) -> TreeEntry:
            async with semaphore:
                return await loop.run_in_executor(
                    None,
                    self._build_entry,
                    root,
                    path,
                    tree_path,
                    deleted,
                    request.delete_missing_as_noop,
                )

        entries = await asyncio.gather(*(build_one(*job) for job in jobs))
        return list(entries)

    def _build_entry(
        self,
        root: Optional[Path],
        path: str,
        tree_path: str,
        deleted: bool,
        delete_missing_as_noop: bool,
    ) -> TreeEntry:
        full_path = root / path if root else Path(path)
        inspection = inspect_path(full_path, tree_path)

        if not inspection.exists:
            if not delete_missing_as_noop:
                raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(full_path))
            logger.debug(f"{tree_path} does not exist, treating it as a deletion")
            return missing_path_entry(tree_path)

        mode = file_mode_for(inspection)
        kind = object_kind_for(inspection)

        if deleted:
            return TreeEntry(path=tree_path, mode=mode, kind=kind, deleted=True)

        if inspection.is_submodule:
            return TreeEntry(
                path=tree_path, mode=mode, kind=kind, sha=inspection.submodule_commit_sha
            )

        if inspection.is_directory:
            return TreeEntry(path=tree_path, mode=mode, kind=kind)

        try:
            if inspection.is_symlink:
                content = os.readlink(full_path)
            else:
                content = read_blob_content(full_path)
        except FileNotFoundError:
            # Removed between inspection and read
            if not delete_missing_as_noop:
                raise
            return missing_path_entry(tree_path)

        return TreeEntry(path=tree_path, mode=mode, kind=kind, content=content)
