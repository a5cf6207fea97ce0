"""
Local filesystem inspection for tree entry construction.

Classifies a path as a regular file, executable, symlink, directory or
submodule mount point, and resolves the commit a submodule is pinned to.
"""

import logging
import os
import stat
from pathlib import Path
from typing import Optional, Union

from ghcommit.common.constants import DOT_GIT, GITDIR_PREFIX
from ghcommit.services.commit.ref_store import DirectoryRefStore, resolve_head_commit
from ghcommit.services.github.models.types import FileInspection, FileMode

logger = logging.getLogger(__name__)

_EXECUTE_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


def mode_from_posix(posix_mode: int, is_submodule: bool = False) -> FileMode:
    """Map POSIX st_mode bits onto a git tree entry mode.

    Unrecognized file types fall back to the regular file mode.
    """
    if stat.S_ISLNK(posix_mode):
        return FileMode.SYMLINK
    if stat.S_ISDIR(posix_mode):
        return FileMode.SUBMODULE if is_submodule else FileMode.DIRECTORY
    if stat.S_ISREG(posix_mode) and posix_mode & _EXECUTE_BITS:
        return FileMode.EXECUTABLE_FILE
    return FileMode.REGULAR_FILE


def read_gitdir_pointer(mount_point: Path) -> Optional[Path]:
    """Return the git directory a submodule's .git file points at.

    Returns None unless mount_point/.git is a regular file containing a
    "gitdir: <path>" line. Relative paths are resolved against mount_point.
    """
    dot_git = mount_point / DOT_GIT
    try:
        if not stat.S_ISREG(os.lstat(dot_git).st_mode):
            return None
    except FileNotFoundError:
        return None

    for line in dot_git.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line.startswith(GITDIR_PREFIX):
            continue
        gitdir = Path(line[len(GITDIR_PREFIX):].strip())
        if not gitdir.is_absolute():
            gitdir = mount_point / gitdir
        return gitdir
    return None


def inspect_path(full_path: Union[str, Path], path: Optional[str] = None) -> FileInspection:
    """Inspect a filesystem entry without following symlinks.

    Args:
        full_path: Location on disk
        path: Tree path to record (defaults to full_path)

    Returns:
        FileInspection; exists is False when nothing is at full_path

    Raises:
        RefResolutionError: If full_path is a submodule whose HEAD cannot be resolved
    """
    full_path = Path(full_path)
    path = path if path is not None else str(full_path)

    try:
        st = os.lstat(full_path)
    except FileNotFoundError:
        return FileInspection(path=path, exists=False)

    if stat.S_ISLNK(st.st_mode):
        return FileInspection(path=path, exists=True, is_symlink=True, posix_mode=st.st_mode)

    if not stat.S_ISDIR(st.st_mode):
        return FileInspection(path=path, exists=True, posix_mode=st.st_mode)

    gitdir = read_gitdir_pointer(full_path)
    if gitdir is None:
        return FileInspection(path=path, exists=True, is_directory=True, posix_mode=st.st_mode)

    commit_sha = resolve_head_commit(DirectoryRefStore(gitdir))
    logger.debug(f"{path} is a submodule pinned at {commit_sha}")
    return FileInspection(
        path=path,
        exists=True,
        is_directory=True,
        posix_mode=st.st_mode,
        is_submodule=True,
        submodule_commit_sha=commit_sha,
    )


def file_mode_for(inspection: FileInspection) -> FileMode:
    """Tree entry mode for an inspected path."""
    return mode_from_posix(inspection.posix_mode, is_submodule=inspection.is_submodule)
