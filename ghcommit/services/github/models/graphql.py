"""
Pydantic models for the GraphQL ref queries.

Only the fields the commit flow reads are modelled.
"""

from typing import Optional

from pydantic import BaseModel, Field

from ghcommit.services.github.models.types import RefState


class GraphQLTree(BaseModel):
    oid: str = Field(..., description="Tree SHA")


class GraphQLCommitTarget(BaseModel):
    """The Commit object a ref points at."""

    oid: str = Field(..., description="Commit SHA")
    tree: GraphQLTree


class GraphQLRef(BaseModel):
    """A branch ref as returned by repository.ref / repository.defaultBranchRef."""

    name: str
    target: GraphQLCommitTarget

    def to_ref_state(self, is_target_branch: Optional[bool] = None) -> RefState:
        return RefState(
            commit_sha=self.target.oid,
            tree_sha=self.target.tree.oid,
            branch_name=self.name,
            is_target_branch=is_target_branch,
        )
