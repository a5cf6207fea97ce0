"""
Base state resolution.

Picks the commit/tree pair a new commit builds on, in strict priority:
explicit base SHA, explicit base branch, the target branch itself, then
the repository's default branch.
"""

import logging
from typing import Tuple

from ghcommit.common.exception.exceptions import ConfigurationError, RefNotFoundError
from ghcommit.services.github.models.types import CommitRequest, RefState

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("owner", "repository", "branch", "message")
TARGET_FIELDS = REQUIRED_FIELDS[:3]


def validate_fields(request: CommitRequest, fields: Tuple[str, ...] = REQUIRED_FIELDS) -> None:
    """Raise ConfigurationError for the first of fields that is missing."""
    for field_name in fields:
        if not getattr(request, field_name):
            raise ConfigurationError(f"{field_name} is required")


async def resolve_base(git_data, request: CommitRequest) -> RefState:
    """Resolve the base state for a commit request.

    Args:
        git_data: Object exposing lookup_ref, lookup_default_branch and
            lookup_commit_tree (see GitDataOperations)
        request: Commit request

    Returns:
        RefState to use as parent and base tree

    Raises:
        ConfigurationError: If owner, repository or branch is missing
        RefNotFoundError: If the explicit base branch does not exist
    """
    validate_fields(request, TARGET_FIELDS)
    owner, repo = request.owner, request.repository

    if request.base_sha:
        tree_sha = await git_data.lookup_commit_tree(owner, repo, request.base_sha)
        logger.info(f"Using explicit base commit {request.base_sha} (tree {tree_sha})")
        return RefState(commit_sha=request.base_sha, tree_sha=tree_sha)

    if request.base_branch:
        state = await git_data.lookup_ref(owner, repo, request.base_branch)
        if state is None:
            raise RefNotFoundError(
                request.base_branch,
                f"Base branch '{request.base_branch}' not found in {owner}/{repo}",
            )
        logger.info(f"Using base branch {request.base_branch} at {state.commit_sha}")
        return RefState(
            commit_sha=state.commit_sha,
            tree_sha=state.tree_sha,
            branch_name=state.branch_name or request.base_branch,
            is_target_branch=True if request.base_branch == request.branch else None,
        )

    state = await git_data.lookup_ref(owner, repo, request.branch)
    if state is not None:
        logger.info(f"Branch {request.branch} exists at {state.commit_sha}, updating it")
        return RefState(
            commit_sha=state.commit_sha,
            tree_sha=state.tree_sha,
            branch_name=state.branch_name or request.branch,
            is_target_branch=True,
        )

    default = await git_data.lookup_default_branch(owner, repo)
    logger.info(
        f"Branch {request.branch} does not exist, basing it on default branch "
        f"{default.branch_name} at {default.commit_sha}"
    )
    return RefState(
        commit_sha=default.commit_sha,
        tree_sha=default.tree_sha,
        branch_name=default.branch_name,
        is_target_branch=False,
    )
