"""Git object model constants."""

# ============================================================================
# Tree Entry Modes
# ============================================================================

# Mode strings accepted by the git trees API
MODE_REGULAR_FILE = "100644"
MODE_EXECUTABLE_FILE = "100755"
MODE_DIRECTORY = "040000"
MODE_SUBMODULE = "160000"
MODE_SYMLINK = "120000"

# ============================================================================
# Ref Names
# ============================================================================

# Prefix used by HEAD files that point at another ref
SYMBOLIC_REF_PREFIX = "ref:"

# Prefix of the gitdir pointer line inside a submodule's .git file
GITDIR_PREFIX = "gitdir:"

HEADS_PREFIX = "heads/"
REFS_HEADS_PREFIX = "refs/heads/"

PACKED_REFS_FILE = "packed-refs"
HEAD_FILE = "HEAD"
DOT_GIT = ".git"

__all__ = [
    'MODE_REGULAR_FILE',
    'MODE_EXECUTABLE_FILE',
    'MODE_DIRECTORY',
    'MODE_SUBMODULE',
    'MODE_SYMLINK',
    'SYMBOLIC_REF_PREFIX',
    'GITDIR_PREFIX',
    'HEADS_PREFIX',
    'REFS_HEADS_PREFIX',
    'PACKED_REFS_FILE',
    'HEAD_FILE',
    'DOT_GIT',
]
