"""Git repository operations."""

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import NamedTuple

from git import Commit, Repo
from git.exc import BadName, BadObject, GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from pruner.errors import EncodingError, RepositoryError

logger = logging.getLogger(__name__)


class RawBranch(NamedTuple):
    """A local branch as listed by the repository, name still undecoded."""

    name: bytes
    commit_id: str
    commit_time: datetime
    is_head: bool


class GitRepo:
    """Git repository operations."""

    def __init__(self, path: Path) -> None:
        """Initialize repository."""
        try:
            self.repo: Repo = Repo(path, search_parent_directories=True)
        except (GitCommandError, ValueError, InvalidGitRepositoryError, NoSuchPathError) as err:
            raise RepositoryError(f"Failed to open repository: {err}") from err
        if self.repo.bare:
            raise RepositoryError("Cannot operate on bare repository")
        logger.debug("Opened repository at %s", self.repo.working_tree_dir)

    def get_current_branch_name(self) -> str:
        """Get current branch name."""
        try:
            return self.repo.active_branch.name
        except TypeError:
            # Detached HEAD, no branch is checked out
            return ""
        except (GitCommandError, ValueError) as err:
            raise RepositoryError(f"Failed to get current branch: {err}") from err

    def list_local_branches(self) -> list[RawBranch]:
        """List local branches with their head commits, in ref enumeration order.

        Names are returned as the raw bytes of the ref name so that callers can
        decide how to treat names that are not valid text.

        Raises:
            EncodingError: If a packed branch name is not valid UTF-8
            RepositoryError: If the branches cannot be listed or a branch does not
                resolve to a commit
        """
        current = self.get_current_branch_name()
        try:
            heads = list(self.repo.heads)
        except UnicodeDecodeError as err:
            # packed-refs is read as UTF-8, loose refs as file names
            raise EncodingError(f"A branch name in packed-refs is not valid UTF-8: {err}") from err
        except (GitCommandError, ValueError, OSError) as err:
            raise RepositoryError(f"Failed to list branches: {err}") from err

        branches = []
        for head in heads:
            try:
                commit = head.commit
            except (GitCommandError, ValueError, BadName, BadObject) as err:
                raise RepositoryError(f"Failed to resolve branch {head.path}: {err}") from err
            branches.append(
                RawBranch(
                    name=os.fsencode(head.name),
                    commit_id=commit.hexsha,
                    commit_time=commit.committed_datetime,
                    is_head=head.name == current,
                )
            )
        return branches

    def delete_branch(self, branch_name: str) -> None:
        """Delete a local branch, merged or not."""
        try:
            # Always use -D, the user has already decided
            self.repo.git.branch("-D", branch_name)
        except GitCommandError as err:
            raise RepositoryError(f"Failed to delete branch {branch_name}: {err}") from err
        logger.debug("Deleted branch %s", branch_name)

    def resolve_commit(self, commit_id: str) -> Commit:
        """Look up a commit by its full hex sha.

        Raises:
            RepositoryError: If the commit no longer exists, e.g. after garbage collection
        """
        try:
            return self.repo.commit(commit_id)
        except (GitCommandError, ValueError, BadName, BadObject) as err:
            raise RepositoryError(f"Commit {commit_id} is not reachable: {err}") from err

    def create_branch(self, branch_name: str, commit_id: str) -> None:
        """Create a local branch pointing at a commit.

        Raises:
            RepositoryError: If the branch already exists or the commit is missing
        """
        try:
            self.repo.git.branch(branch_name, commit_id)
        except GitCommandError as err:
            raise RepositoryError(f"Failed to create branch {branch_name}: {err}") from err
        logger.debug("Created branch %s at %s", branch_name, commit_id)
