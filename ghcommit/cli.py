"""
Command line entry point.

Usage:
    ghcommit --repository owner/repo --branch feature -m "message" file1 file2

Environment variables:
    GITHUB_TOKEN / GH_TOKEN: API token
    GITHUB_REPOSITORY: Default owner/repo
    GITHUB_API_URL: REST API root (GitHub Enterprise)
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional, Tuple

from ghcommit.common.config.config import GITHUB_REPOSITORY
from ghcommit.common.exception.exceptions import ConfigurationError, GhCommitError
from ghcommit.services.commit.service import CommitService
from ghcommit.services.github.models.types import CommitRequest

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="ghcommit",
        description="Create a commit on a GitHub branch from local files via the git data API",
    )
    parser.add_argument("files", nargs="*", help="Files to add or update")
    parser.add_argument(
        "--repository",
        default=GITHUB_REPOSITORY,
        help="Repository as owner/repo (default: $GITHUB_REPOSITORY)",
    )
    parser.add_argument("--owner", help="Repository owner (overrides --repository)")
    parser.add_argument("--repo", help="Repository name (overrides --repository)")
    parser.add_argument("-b", "--branch", required=True, help="Branch to commit to")
    parser.add_argument("-m", "--message", required=True, help="Commit message")
    parser.add_argument("-C", "--directory", help="Directory the file paths are relative to")
    parser.add_argument(
        "--add", action="append", default=[], metavar="PATH", help="File to add (repeatable)"
    )
    parser.add_argument(
        "--delete", action="append", default=[], metavar="PATH", help="File to delete (repeatable)"
    )
    parser.add_argument("--empty", action="store_true", help="Allow an empty commit")
    parser.add_argument("--parent", metavar="SHA", help="Base the commit on this commit")
    parser.add_argument("--base-branch", help="Base the commit on this branch")
    parser.add_argument("--no-parent", action="store_true", help="Create a root commit")
    parser.add_argument(
        "--delete-if-not-exist",
        action="store_true",
        help="Treat missing files as deletions instead of failing",
    )
    parser.add_argument("--force", action="store_true", help="Allow non fast-forward updates")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def split_repository(args: argparse.Namespace) -> Tuple[str, str]:
    """Resolve owner and repo from --owner/--repo or --repository."""
    owner, repo = args.owner, args.repo
    if args.repository and "/" in args.repository:
        default_owner, default_repo = args.repository.split("/", 1)
        owner = owner or default_owner
        repo = repo or default_repo
    if not owner or not repo:
        raise ConfigurationError("repository is required (use --repository owner/repo)")
    return owner, repo


def build_request(args: argparse.Namespace) -> CommitRequest:
    owner, repo = split_repository(args)
    return CommitRequest(
        owner=owner,
        repository=repo,
        branch=args.branch,
        message=args.message,
        additions=list(args.files) + list(args.add),
        deletions=list(args.delete),
        root_directory=args.directory,
        allow_empty=args.empty,
        base_sha=args.parent,
        base_branch=args.base_branch,
        omit_parent=args.no_parent,
        delete_missing_as_noop=args.delete_if_not_exist,
        force_push=args.force,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    try:
        request = build_request(args)
        result = asyncio.run(CommitService().commit(request))
    except (GhCommitError, FileNotFoundError) as e:
        logger.error(str(e))
        return 1

    if result is None:
        logger.info("Nothing to commit")
        return 0

    print(result.commit_sha)
    return 0


if __name__ == "__main__":
    sys.exit(main())
