"""
GitHub git data operations (trees, commits, refs).
"""

import logging
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import quote

from ghcommit.common.constants import HEADS_PREFIX, REFS_HEADS_PREFIX
from ghcommit.common.exception.exceptions import RefNotFoundError
from ghcommit.services.github.api.client import GitHubAPIClient
from ghcommit.services.github.models.graphql import GraphQLRef
from ghcommit.services.github.models.types import RefState, TreeEntry

logger = logging.getLogger(__name__)

_REF_FIELDS = """
      name
      target {
        ... on Commit {
          oid
          tree {
            oid
          }
        }
      }
"""

BRANCH_QUERY = f"""query($owner: String!, $repo: String!, $ref: String!) {{
  repository(owner: $owner, name: $repo) {{
    ref(qualifiedName: $ref) {{{_REF_FIELDS}    }}
  }}
}}"""

DEFAULT_BRANCH_QUERY = f"""query($owner: String!, $repo: String!) {{
  repository(owner: $owner, name: $repo) {{
    defaultBranchRef {{{_REF_FIELDS}    }}
  }}
}}"""


class GitDataOperations:
    """Handles GitHub git data operations used to write a commit."""

    def __init__(self, client: Optional[GitHubAPIClient] = None):
        """Initialize git data operations.

        Args:
            client: GitHub API client (creates new if not provided)
        """
        self.client = client or GitHubAPIClient()

    async def create_tree(
        self,
        owner: str,
        repo: str,
        entries: Sequence[TreeEntry],
        base_tree_sha: Optional[str] = None,
    ) -> str:
        """Create a tree object.

        Paths present in base_tree_sha but not listed in entries are kept;
        deleted entries remove their path.

        Args:
            owner: Repository owner
            repo: Repository name
            entries: Tree entries to write
            base_tree_sha: Tree to apply the entries on top of

        Returns:
            SHA of the new tree
        """
        data: Dict[str, Any] = {"tree": [entry.to_payload() for entry in entries]}
        if base_tree_sha:
            data["base_tree"] = base_tree_sha

        response = await self.client.post(f"repos/{owner}/{repo}/git/trees", data=data)
        sha = response["sha"]

        logger.info(f"Created tree {sha} in {owner}/{repo} ({len(entries)} entries)")
        return sha

    async def create_commit(
        self,
        owner: str,
        repo: str,
        message: str,
        tree_sha: str,
        parent_shas: List[str],
    ) -> str:
        """Create a commit object.

        Args:
            owner: Repository owner
            repo: Repository name
            message: Commit message
            tree_sha: Tree the commit records
            parent_shas: Parent commits (empty for a root commit)

        Returns:
            SHA of the new commit
        """
        response = await self.client.post(
            f"repos/{owner}/{repo}/git/commits",
            data={"message": message, "tree": tree_sha, "parents": list(parent_shas)},
        )
        sha = response["sha"]

        logger.info(f"Created commit {sha} in {owner}/{repo} (parents: {parent_shas})")
        return sha

    async def update_ref(
        self,
        owner: str,
        repo: str,
        ref: str,
        sha: str,
        force: bool = False,
    ) -> str:
        """Move an existing ref.

        Args:
            owner: Repository owner
            repo: Repository name
            ref: Ref name without the refs/ prefix, e.g. "heads/main"
            sha: Commit to point at
            force: Allow non fast-forward updates

        Returns:
            SHA the ref points at afterwards

        Raises:
            GitHubAPIError: kind REFERENCE_NOT_FOUND if the ref does not exist
        """
        response = await self.client.patch(
            f"repos/{owner}/{repo}/git/refs/{quote(ref, safe='/')}",
            data={"sha": sha, "force": force},
        )
        resulting_sha = response["object"]["sha"]

        logger.info(f"Updated ref {ref} in {owner}/{repo} to {resulting_sha} (force={force})")
        return resulting_sha

    async def create_ref(self, owner: str, repo: str, ref: str, sha: str) -> str:
        """Create a new ref.

        Args:
            owner: Repository owner
            repo: Repository name
            ref: Fully qualified ref name, e.g. "refs/heads/feature"
            sha: Commit to point at

        Returns:
            SHA the new ref points at
        """
        response = await self.client.post(
            f"repos/{owner}/{repo}/git/refs",
            data={"ref": ref, "sha": sha},
        )
        resulting_sha = response["object"]["sha"]

        logger.info(f"Created ref {ref} in {owner}/{repo} at {resulting_sha}")
        return resulting_sha

    async def lookup_ref(self, owner: str, repo: str, branch: str) -> Optional[RefState]:
        """Look up a branch by name.

        Returns:
            RefState for the branch, or None if it does not exist
        """
        data = await self.client.graphql(
            BRANCH_QUERY, {"owner": owner, "repo": repo, "ref": branch}
        )
        ref = (data.get("repository") or {}).get("ref")
        if not ref:
            logger.debug(f"Branch {branch} not found in {owner}/{repo}")
            return None
        return GraphQLRef.model_validate(ref).to_ref_state()

    async def lookup_default_branch(self, owner: str, repo: str) -> RefState:
        """Look up the repository's default branch.

        Raises:
            GitHubAPIError: If the repository cannot be read
            RefNotFoundError: If the repository has no default branch (empty repository)
        """
        data = await self.client.graphql(
            DEFAULT_BRANCH_QUERY, {"owner": owner, "repo": repo}
        )
        ref = (data.get("repository") or {}).get("defaultBranchRef")
        if not ref:
            raise RefNotFoundError(
                "<default>", f"Repository {owner}/{repo} has no default branch"
            )
        return GraphQLRef.model_validate(ref).to_ref_state()

    async def lookup_commit_tree(self, owner: str, repo: str, commit_sha: str) -> str:
        """Get the tree SHA of a commit."""
        response = await self.client.get(f"repos/{owner}/{repo}/git/commits/{commit_sha}")
        return response["tree"]["sha"]


def heads_ref(branch: str) -> str:
    """Ref name used by update_ref, e.g. "heads/main"."""
    return f"{HEADS_PREFIX}{branch}"


def qualified_heads_ref(branch: str) -> str:
    """Ref name used by create_ref, e.g. "refs/heads/main"."""
    return f"{REFS_HEADS_PREFIX}{branch}"
