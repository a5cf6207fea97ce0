"""Integration tests for perform_commit against an in-memory git data service."""

from unittest.mock import AsyncMock, patch

import pytest

from ghcommit.common.exception.exceptions import (
    ConfigurationError,
    GitHubAPIError,
    GitHubErrorKind,
    RefNotFoundError,
)
from ghcommit.services.commit.service import CommitService, perform_commit
from ghcommit.services.github.api.client import GitHubAPIClient
from ghcommit.services.github.api.git_data import GitDataOperations
from ghcommit.services.github.models.types import (
    CommitRequest,
    CommitResult,
    FileMode,
    ObjectKind,
    RefState,
    TreeEntry,
)
from tests.fixtures.git_fixtures import MAIN_COMMIT, MAIN_TREE, FakeGitData, create_submodule

FEATURE_COMMIT = "1" * 40
FEATURE_TREE = "2" * 40
SUB_SHA = "7" * 40


def make_request(root=None, **kwargs) -> CommitRequest:
    defaults = {"owner": "octo", "repository": "demo", "branch": "feat-x", "message": "add file"}
    if root is not None:
        defaults["root_directory"] = str(root)
    defaults.update(kwargs)
    return CommitRequest(**defaults)


class TestNoop:
    """Test requests with nothing to commit."""

    @pytest.mark.asyncio
    async def test_no_changes_and_no_empty_flag_makes_no_calls(self, fake_git_data):
        result = await perform_commit(fake_git_data, make_request())

        assert result is None
        assert fake_git_data.calls == []

    @pytest.mark.asyncio
    async def test_noop_wins_over_missing_fields(self, fake_git_data):
        """An empty request is skipped before required fields are checked."""
        result = await perform_commit(fake_git_data, make_request(owner="", message=""))

        assert result is None
        assert fake_git_data.calls == []

    @pytest.mark.asyncio
    async def test_api_client_never_contacted(self):
        client = AsyncMock(spec=GitHubAPIClient)

        assert await perform_commit(client, make_request()) is None
        assert client.mock_calls == []


class TestValidation:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("field_name", ["owner", "repository", "branch", "message"])
    async def test_missing_required_field(self, fake_git_data, field_name):
        request = make_request(allow_empty=True, **{field_name: ""})

        with pytest.raises(ConfigurationError) as exc_info:
            await perform_commit(fake_git_data, request)

        assert str(exc_info.value) == f"{field_name} is required"
        assert fake_git_data.calls == []


class TestNewBranch:
    """Test committing to a branch that does not exist yet."""

    @pytest.mark.asyncio
    async def test_new_branch_from_default_branch(self, fake_git_data, tmp_path):
        (tmp_path / "a.txt").write_text("hello")
        (tmp_path / "a.txt").chmod(0o644)

        result = await perform_commit(fake_git_data, make_request(tmp_path, additions=["a.txt"]))

        assert fake_git_data.call_names == [
            "lookup_ref",
            "lookup_default_branch",
            "create_tree",
            "create_commit",
            "create_ref",
        ]
        tree_sha = fake_git_data.commits[result.commit_sha]["tree"]
        entries, base_tree = fake_git_data.trees[tree_sha]
        assert base_tree == MAIN_TREE
        assert entries == [
            TreeEntry(path="a.txt", mode=FileMode.REGULAR_FILE, kind=ObjectKind.BLOB, content="hello")
        ]
        commit = fake_git_data.commits[result.commit_sha]
        assert commit["parents"] == [MAIN_COMMIT]
        assert commit["message"] == "add file"
        assert fake_git_data.branches["feat-x"].commit_sha == result.commit_sha

    @pytest.mark.asyncio
    async def test_same_request_twice_creates_then_updates(self, fake_git_data, tmp_path):
        (tmp_path / "a.txt").write_text("hello")
        request = make_request(tmp_path, additions=["a.txt"])

        first = await perform_commit(fake_git_data, request)
        assert "create_ref" in fake_git_data.call_names
        assert "update_ref" not in fake_git_data.call_names

        fake_git_data.calls.clear()
        second = await perform_commit(fake_git_data, request)

        assert "update_ref" in fake_git_data.call_names
        assert "create_ref" not in fake_git_data.call_names
        assert fake_git_data.commits[second.commit_sha]["parents"] == [first.commit_sha]
        assert fake_git_data.branches["feat-x"].commit_sha == second.commit_sha


class TestExistingBranch:
    """Test committing on top of an existing branch."""

    @pytest.fixture
    def git_data(self):
        git_data = FakeGitData()
        git_data.branches["feat-x"] = RefState(
            commit_sha=FEATURE_COMMIT, tree_sha=FEATURE_TREE, branch_name="feat-x"
        )
        git_data.commit_trees[FEATURE_COMMIT] = FEATURE_TREE
        return git_data

    @pytest.mark.asyncio
    async def test_updates_branch_with_parent(self, git_data, tmp_path):
        (tmp_path / "b.txt").write_text("b")

        result = await perform_commit(git_data, make_request(tmp_path, additions=["b.txt"]))

        assert git_data.call_names == ["lookup_ref", "create_tree", "create_commit", "update_ref"]
        assert git_data.calls[1] == ("create_tree", FEATURE_TREE)
        assert git_data.commits[result.commit_sha]["parents"] == [FEATURE_COMMIT]
        assert git_data.calls[-1][3] is False

    @pytest.mark.asyncio
    async def test_force_push_and_root_commit(self, git_data, tmp_path):
        (tmp_path / "b.txt").write_text("b")

        result = await perform_commit(
            git_data,
            make_request(tmp_path, additions=["b.txt"], force_push=True, omit_parent=True),
        )

        assert git_data.commits[result.commit_sha]["parents"] == []
        assert git_data.calls[-1] == ("update_ref", "heads/feat-x", result.commit_sha, True)

    @pytest.mark.asyncio
    async def test_empty_commit_reuses_base_tree(self, git_data):
        result = await perform_commit(git_data, make_request(allow_empty=True))

        assert "create_tree" not in git_data.call_names
        commit = git_data.commits[result.commit_sha]
        assert commit["tree"] == FEATURE_TREE
        assert commit["parents"] == [FEATURE_COMMIT]

    @pytest.mark.asyncio
    async def test_branch_deleted_between_lookup_and_update(self, git_data, tmp_path):
        """A vanished branch is recreated through the create fallback."""
        (tmp_path / "b.txt").write_text("b")
        original_create_commit = git_data.create_commit

        async def create_commit_then_delete_branch(*args, **kwargs):
            sha = await original_create_commit(*args, **kwargs)
            del git_data.branches["feat-x"]
            return sha

        git_data.create_commit = create_commit_then_delete_branch

        result = await perform_commit(git_data, make_request(tmp_path, additions=["b.txt"]))

        assert git_data.call_names[-2:] == ["update_ref", "create_ref"]
        assert git_data.branches["feat-x"].commit_sha == result.commit_sha


class TestExplicitBase:
    """Test explicit base SHA and base branch."""

    @pytest.mark.asyncio
    async def test_explicit_sha_beats_explicit_branch(self, tmp_path):
        base_sha, base_tree = "e" * 40, "f" * 40
        git_data = FakeGitData(commit_trees={base_sha: base_tree})
        (tmp_path / "a.txt").write_text("a")

        result = await perform_commit(
            git_data,
            make_request(tmp_path, additions=["a.txt"], base_sha=base_sha, base_branch="nope"),
        )

        assert ("lookup_ref", "nope") not in git_data.calls
        assert git_data.calls[0] == ("lookup_commit_tree", base_sha)
        assert git_data.commits[result.commit_sha]["parents"] == [base_sha]
        assert ("create_tree", base_tree) in git_data.calls
        # Existence of the target is checked right before the ref write
        assert git_data.call_names[-2:] == ["lookup_ref", "create_ref"]

    @pytest.mark.asyncio
    async def test_explicit_base_branch_missing(self, fake_git_data, tmp_path):
        (tmp_path / "a.txt").write_text("a")

        with pytest.raises(RefNotFoundError):
            await perform_commit(
                fake_git_data, make_request(tmp_path, additions=["a.txt"], base_branch="release")
            )

        assert "create_tree" not in fake_git_data.call_names

    @pytest.mark.asyncio
    async def test_explicit_base_branch_onto_existing_target(self, fake_git_data, tmp_path):
        (tmp_path / "a.txt").write_text("a")
        fake_git_data.branches["feat-x"] = RefState(
            commit_sha=FEATURE_COMMIT, tree_sha=FEATURE_TREE, branch_name="feat-x"
        )

        result = await perform_commit(
            fake_git_data,
            make_request(tmp_path, additions=["a.txt"], base_branch="main", force_push=True),
        )

        assert fake_git_data.commits[result.commit_sha]["parents"] == [MAIN_COMMIT]
        assert fake_git_data.call_names[-2:] == ["lookup_ref", "update_ref"]


class TestFileHandling:
    """Test file-level behavior through the whole flow."""

    @pytest.mark.asyncio
    async def test_missing_deletion_tolerated(self, fake_git_data, tmp_path):
        result = await perform_commit(
            fake_git_data,
            make_request(tmp_path, deletions=["gone.txt"], delete_missing_as_noop=True),
        )

        assert isinstance(result, CommitResult)
        tree_sha = fake_git_data.commits[result.commit_sha]["tree"]
        entries, _ = fake_git_data.trees[tree_sha]
        assert entries == [
            TreeEntry(path="gone.txt", mode=FileMode.REGULAR_FILE, kind=ObjectKind.BLOB, deleted=True)
        ]

    @pytest.mark.asyncio
    async def test_missing_file_aborts_before_any_write(self, fake_git_data, tmp_path):
        with pytest.raises(FileNotFoundError):
            await perform_commit(fake_git_data, make_request(tmp_path, additions=["gone.txt"]))

        assert "create_tree" not in fake_git_data.call_names
        assert "create_commit" not in fake_git_data.call_names

    @pytest.mark.asyncio
    async def test_submodule_and_files_together(self, fake_git_data, tmp_path):
        (tmp_path / "README.md").write_text("# demo\n")
        create_submodule(
            tmp_path, "lib", "ref: refs/heads/main\n",
            packed_refs=f"{SUB_SHA} refs/heads/main\n",
        )

        result = await perform_commit(
            fake_git_data,
            make_request(tmp_path, additions=["README.md", "lib"]),
        )

        entries, _ = fake_git_data.trees[fake_git_data.commits[result.commit_sha]["tree"]]
        assert [entry.path for entry in entries] == ["README.md", "lib"]
        assert entries[1] == TreeEntry(
            path="lib", mode=FileMode.SUBMODULE, kind=ObjectKind.COMMIT, sha=SUB_SHA
        )


class TestRemoteFailures:
    @pytest.mark.asyncio
    async def test_non_fast_forward_rejection_surfaces(self, tmp_path):
        (tmp_path / "a.txt").write_text("a")
        git_data = AsyncMock(spec=GitDataOperations)
        git_data.lookup_ref.return_value = RefState(
            commit_sha=FEATURE_COMMIT, tree_sha=FEATURE_TREE, branch_name="feat-x"
        )
        git_data.create_tree.return_value = "t" * 40
        git_data.create_commit.return_value = "c" * 40
        git_data.update_ref.side_effect = GitHubAPIError(
            "Update is not a fast forward", status_code=422, kind=GitHubErrorKind.VALIDATION
        )

        with pytest.raises(GitHubAPIError, match="not a fast forward"):
            await perform_commit(git_data, make_request(tmp_path, additions=["a.txt"]))

        git_data.create_ref.assert_not_awaited()


class TestCommitService:
    @pytest.mark.asyncio
    async def test_commit_uses_git_data_operations(self, tmp_path):
        (tmp_path / "a.txt").write_text("a")
        service = CommitService(token="test-token", max_concurrency=1)

        with patch(
            "ghcommit.services.commit.service.perform_commit",
            AsyncMock(return_value=CommitResult(commit_sha="c" * 40)),
        ) as mock_perform:
            result = await service.commit(make_request(tmp_path, additions=["a.txt"]))

        assert result == CommitResult(commit_sha="c" * 40)
        assert mock_perform.await_args.args[0] is service.git_data
        assert mock_perform.await_args.kwargs["builder"] is service.builder
        assert service.api_client.token == "test-token"

    @pytest.mark.asyncio
    async def test_api_client_is_wrapped(self, tmp_path):
        (tmp_path / "a.txt").write_text("a")
        client = AsyncMock(spec=GitHubAPIClient)
        client.graphql.side_effect = [
            {"repository": {"ref": None}},
            {"repository": {"defaultBranchRef": {
                "name": "main",
                "target": {"oid": MAIN_COMMIT, "tree": {"oid": MAIN_TREE}},
            }}},
        ]
        client.post.side_effect = [
            {"sha": "t" * 40},
            {"sha": "c" * 40},
            {"ref": "refs/heads/feat-x", "object": {"sha": "c" * 40}},
        ]

        result = await perform_commit(client, make_request(tmp_path, additions=["a.txt"]))

        assert result == CommitResult(commit_sha="c" * 40)
        paths = [call.args[0] for call in client.post.await_args_list]
        assert paths == [
            "repos/octo/demo/git/trees",
            "repos/octo/demo/git/commits",
            "repos/octo/demo/git/refs",
        ]
        client.patch.assert_not_awaited()
