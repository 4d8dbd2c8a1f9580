"""Test configuration and fixtures."""

import io
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Generator, Optional

import pytest
from git import Actor, Repo
from rich.console import Console

from pruner.errors import RepositoryError
from pruner.git import RawBranch
from pruner.terminal import Terminal

# Commit dates as "<unix timestamp> <offset>", the format git stores
BRANCH_DATES = {
    "feature/old": "1577836800 +0200",  # 2020-01-01
    "feature/current": "1590969600 +0000",  # 2020-06-01
    "feature/mid": "1609459200 -0500",  # 2021-01-01
    "feature/new": "1640995200 +0000",  # 2022-01-01
}


@pytest.fixture
def test_repo(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a repository with trunk branches and feature branches of known age.

    Review order is feature/old, feature/current (checked out), feature/mid,
    feature/new.
    """
    local_path = tmp_path / "local"
    local_path.mkdir()
    local_repo = Repo.init(local_path)

    # Set up git config
    author = Actor("Test User", "test@example.com")
    local_repo.config_writer().set_value("user", "name", author.name).release()
    local_repo.config_writer().set_value("user", "email", author.email).release()

    # Create initial commit, newer than every feature branch
    readme = local_path / "README.md"
    readme.write_text("# Test Repository")
    local_repo.index.add(["README.md"])
    initial_date = "1672531200 +0000"  # 2023-01-01
    local_repo.index.commit(
        "Initial commit", author=author, committer=author, author_date=initial_date, commit_date=initial_date
    )

    # Both trunk names exist whatever the default branch of this git is
    for trunk in ("main", "master"):
        if trunk not in local_repo.heads:
            local_repo.create_head(trunk)
    main_branch = local_repo.heads.main
    main_branch.checkout()

    def create_branch(name: str, date: str) -> None:
        """Create a branch holding one commit made at the given date."""
        main_branch.checkout()
        branch = local_repo.create_head(name)
        branch.checkout()

        file_name = name.replace("/", "_") + ".txt"
        (local_path / file_name).write_text(f"{name} content")
        local_repo.index.add([file_name])
        local_repo.index.commit(f"Add {name}", author=author, committer=author, author_date=date, commit_date=date)

    # Enumeration order is alphabetical, different from commit order
    for name, date in BRANCH_DATES.items():
        create_branch(name, date)

    local_repo.heads["feature/current"].checkout()

    yield local_path

    # Cleanup is handled by pytest's tmp_path fixture


def branch_shas(path: Path) -> dict[str, str]:
    """Map every local branch of the repository to its head sha."""
    return {head.name: head.commit.hexsha for head in Repo(path).heads}


class FakeRepo:
    """In-memory stand-in for GitRepo."""

    def __init__(self, branches: list[RawBranch]) -> None:
        self.branches = list(branches)
        self.commit_times = {branch.commit_id: branch.commit_time for branch in branches}
        self.unreachable: set[str] = set()
        self.calls: list[tuple[str, str]] = []

    @property
    def names(self) -> list[str]:
        return [branch.name.decode() for branch in self.branches]

    def list_local_branches(self) -> list[RawBranch]:
        return list(self.branches)

    def delete_branch(self, branch_name: str) -> None:
        self.calls.append(("delete", branch_name))
        for branch in self.branches:
            if branch.name == branch_name.encode():
                self.branches.remove(branch)
                return
        raise RepositoryError(f"Failed to delete branch {branch_name}: not found")

    def resolve_commit(self, commit_id: str) -> str:
        self.calls.append(("resolve", commit_id))
        if commit_id in self.unreachable or commit_id not in self.commit_times:
            raise RepositoryError(f"Commit {commit_id} is not reachable")
        return commit_id

    def create_branch(self, branch_name: str, commit_id: str) -> None:
        self.calls.append(("create", branch_name))
        if branch_name in self.names:
            raise RepositoryError(f"Failed to create branch {branch_name}: already exists")
        self.branches.append(RawBranch(branch_name.encode(), commit_id, self.commit_times[commit_id], False))

    @property
    def mutations(self) -> list[tuple[str, str]]:
        return [call for call in self.calls if call[0] != "resolve"]


def raw_branch(name: str, hour: int, is_head: bool = False, commit_id: Optional[str] = None) -> RawBranch:
    """Build a listed branch whose commit happened at the given hour of 2020-01-01 UTC."""
    commit_time = datetime(2020, 1, 1, tzinfo=timezone.utc) + timedelta(hours=hour)
    return RawBranch(name.encode(), commit_id or (name.encode().hex() * 40)[:40], commit_time, is_head)


@pytest.fixture
def fake_repo() -> FakeRepo:
    """Two reviewable branches, A older than B."""
    return FakeRepo([raw_branch("B", 2), raw_branch("A", 1)])


class ScriptedInput:
    """Binary input that yields the given chunks one read at a time."""

    def __init__(self, chunks: list[bytes]) -> None:
        self.buffer = self
        self.chunks = list(chunks)

    def isatty(self) -> bool:
        return False

    def read(self, size: int = -1) -> bytes:
        return self.chunks.pop(0) if self.chunks else b""


@pytest.fixture
def make_terminal() -> Callable[..., Terminal]:
    """Build a terminal fed with keypresses, writing to an in-memory console."""

    def factory(keys: bytes = b"", chunks: Optional[list[bytes]] = None) -> Terminal:
        stdin = ScriptedInput(chunks) if chunks is not None else io.TextIOWrapper(io.BytesIO(keys))
        console = Console(file=io.StringIO(), width=200)
        return Terminal(stdin, console)

    return factory


def output_of(terminal: Terminal) -> str:
    return terminal.console.file.getvalue()
