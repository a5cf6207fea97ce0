"""
Create-or-update of the target branch ref.

The update is attempted first whenever the branch may exist; only a
structured "reference does not exist" failure falls back to creating the
ref. Every other failure propagates unchanged.
"""

import logging
from enum import Enum
from typing import Optional

from ghcommit.common.exception.exceptions import GitHubAPIError
from ghcommit.services.github.api.git_data import heads_ref, qualified_heads_ref
from ghcommit.services.github.models.types import CommitRequest, RefWriteOutcome

logger = logging.getLogger(__name__)


class RefWriteState(str, Enum):
    UNWRITTEN = "unwritten"
    COMMIT_CREATED = "commit_created"
    UPDATED = "updated"
    CREATED = "created"
    FAILED = "failed"


class RefUpsertCoordinator:
    """Points a branch at a new commit, creating the branch if needed."""

    def __init__(self, git_data):
        """Initialize the coordinator.

        Args:
            git_data: Object exposing update_ref, create_ref and lookup_ref
                (see GitDataOperations)
        """
        self.git_data = git_data
        self.state = RefWriteState.UNWRITTEN
        self.commit_sha: Optional[str] = None

    def commit_created(self, commit_sha: str) -> None:
        """Record the commit the ref will point at."""
        self.commit_sha = commit_sha
        self.state = RefWriteState.COMMIT_CREATED

    async def upsert(
        self, request: CommitRequest, target_exists: Optional[bool] = None
    ) -> RefWriteOutcome:
        """Update or create refs/heads/<request.branch>.

        Args:
            request: Commit request naming the branch and force flag
            target_exists: Whether the branch is known to exist; None means
                unknown, in which case it is looked up first

        Returns:
            RefWriteOutcome with the SHA the branch points at

        Raises:
            GitHubAPIError: From the ref write, unless it is the "reference
                does not exist" failure handled by creating the ref
        """
        if self.state != RefWriteState.COMMIT_CREATED or self.commit_sha is None:
            raise RuntimeError(f"Cannot write ref in state {self.state.value}")

        try:
            if target_exists is None:
                existing = await self.git_data.lookup_ref(
                    request.owner, request.repository, request.branch
                )
                target_exists = existing is not None

            if not target_exists:
                return await self._create(request, RefWriteOutcome(sha=""))

            outcome = RefWriteOutcome(sha="")
            try:
                outcome.attempts.append("update")
                outcome.sha = await self.git_data.update_ref(
                    request.owner,
                    request.repository,
                    heads_ref(request.branch),
                    self.commit_sha,
                    force=request.force_push,
                )
            except GitHubAPIError as e:
                if not e.is_reference_not_found:
                    raise
                logger.info(f"Branch {request.branch} disappeared before update, creating it")
                return await self._create(request, outcome)

            self.state = RefWriteState.UPDATED
            return outcome
        except Exception:
            self.state = RefWriteState.FAILED
            raise

    async def _create(self, request: CommitRequest, outcome: RefWriteOutcome) -> RefWriteOutcome:
        outcome.attempts.append("create")
        outcome.sha = await self.git_data.create_ref(
            request.owner,
            request.repository,
            qualified_heads_ref(request.branch),
            self.commit_sha,
        )
        outcome.created = True
        self.state = RefWriteState.CREATED
        return outcome
