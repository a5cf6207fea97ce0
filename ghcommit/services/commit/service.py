"""
Commit Service - writes one commit to a remote branch.

Flow: resolve the base state, build tree entries from the local
filesystem, create the tree and the commit, then update or create the
branch ref. Remote writes are strictly sequential since each one needs
the SHA returned by the previous call.
"""

import logging
from typing import Optional

from ghcommit.services.commit.base_resolver import resolve_base, validate_fields
from ghcommit.services.commit.ref_upsert import RefUpsertCoordinator
from ghcommit.services.commit.tree_builder import TreeEntryBuilder
from ghcommit.services.github.api.client import GitHubAPIClient
from ghcommit.services.github.api.git_data import GitDataOperations
from ghcommit.services.github.models.types import CommitRequest, CommitResult

logger = logging.getLogger(__name__)


def _as_git_data(client):
    if isinstance(client, GitHubAPIClient):
        return GitDataOperations(client=client)
    return client


async def perform_commit(
    client,
    request: CommitRequest,
    builder: Optional[TreeEntryBuilder] = None,
) -> Optional[CommitResult]:
    """Create a commit on request.branch from local files.

    Args:
        client: GitDataOperations (or any object with the same methods), or
            a GitHubAPIClient which is wrapped in GitDataOperations
        request: What to commit and where
        builder: Tree entry builder (creates new if not provided)

    Returns:
        CommitResult, or None when the request has nothing to commit; in
        that case the remote is never contacted

    Raises:
        ConfigurationError: If a required field is missing
        RefNotFoundError: If the explicit base branch does not exist
        FileNotFoundError: If a path is missing and not tolerated
        RefResolutionError: If a submodule's commit cannot be resolved
        GitHubAPIError: If a remote call fails
    """
    if request.is_noop:
        logger.info("No files to commit and empty commits not allowed, skipping")
        return None

    validate_fields(request)
    git_data = _as_git_data(client)
    owner, repo = request.owner, request.repository

    base = await resolve_base(git_data, request)

    tree_sha = base.tree_sha
    if request.has_changes:
        entries = await (builder or TreeEntryBuilder()).build_entries(request, base)
        tree_sha = await git_data.create_tree(owner, repo, entries, base_tree_sha=base.tree_sha)
    else:
        logger.info(f"Creating empty commit on tree {tree_sha}")

    parents = [] if request.omit_parent else [base.commit_sha]
    commit_sha = await git_data.create_commit(owner, repo, request.message, tree_sha, parents)

    coordinator = RefUpsertCoordinator(git_data)
    coordinator.commit_created(commit_sha)
    outcome = await coordinator.upsert(request, target_exists=base.is_target_branch)

    action = "Created" if outcome.created else "Updated"
    logger.info(f"{action} branch {request.branch} in {owner}/{repo} at {outcome.sha}")
    return CommitResult(commit_sha=outcome.sha)


class CommitService:
    """
    Entry point for writing commits through the GitHub git data API.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        client: Optional[GitHubAPIClient] = None,
        max_concurrency: Optional[int] = None,
    ):
        """Initialize commit service.

        Args:
            token: GitHub API token (defaults to config)
            client: Preconfigured API client (overrides token)
            max_concurrency: Upper bound on concurrent file inspections
        """
        self.api_client = client or GitHubAPIClient(token=token)
        self.git_data = GitDataOperations(client=self.api_client)
        self.builder = TreeEntryBuilder(max_concurrency=max_concurrency)

    async def commit(self, request: CommitRequest) -> Optional[CommitResult]:
        """Create a commit; see perform_commit."""
        return await perform_commit(self.git_data, request, builder=self.builder)
