"""Interactive review loop.

Branches are offered one at a time. For each one the user presses a single
key to keep it, delete it, undo the last deletion, or quit. Only the most
recent deletion can be undone: every delete overwrites the undo register and
every undo attempt clears it.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from rich.markup import escape

from pruner.branches import BranchRecord
from pruner.errors import InvalidInputError
from pruner.git import GitRepo
from pruner.terminal import Terminal

logger = logging.getLogger(__name__)

HELP_LINES = (
    "Here are what the commands mean:",
    "k - Keep the branch",
    "d - Delete the branch",
    "u - Undo the last deletion",
    "s - Show the branch",
    "q - Quit",
    "? - Print this help",
)


class Action(Enum):
    """Command keys accepted at the prompt."""

    KEEP = "k"
    DELETE = "d"
    UNDO = "u"
    SHOW = "s"
    HELP = "?"
    QUIT = "q"

    @classmethod
    def from_key(cls, key: str) -> "Action":
        try:
            return cls(key)
        except ValueError:
            raise InvalidInputError(key) from None


@dataclass(frozen=True)
class DeletedBranch:
    """Undo register entry: enough to recreate a deleted branch."""

    name: str
    commit_id: str


@dataclass
class ReviewSummary:
    """What happened to each reviewed branch."""

    kept: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    restored: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    quit: bool = False


class ReviewSession:
    """Drive the working set through the keep/delete/undo decision loop."""

    def __init__(self, repo: GitRepo, terminal: Terminal) -> None:
        self.repo = repo
        self.terminal = terminal
        self.undo: Optional[DeletedBranch] = None
        self.summary = ReviewSummary()

    def run(self, branches: list[BranchRecord]) -> ReviewSummary:
        """Review every branch in order until the list runs out or the user quits.

        Raises:
            InvalidInputError: On an unrecognized key
            RepositoryError: If a delete or undo fails
            TerminalError: If reading or writing the terminal fails
        """
        if not branches:
            self.terminal.write("found no branches (master / main are ignored)")
            return self.summary

        for branch in branches:
            if branch.is_head:
                self.terminal.write(f"skip [cyan]{escape(branch.name)}[/cyan], it is the current branch")
                self.summary.skipped.append(branch.name)
                continue

            if not self._review(branch):
                self.summary.quit = True
                if self.undo is not None:
                    logger.debug("Dropping undo entry for %s", self.undo.name)
                break

        return self.summary

    def _review(self, branch: BranchRecord) -> bool:
        """Prompt until the branch is kept or deleted. Returns False on quit."""
        while True:
            action = self._read_action(branch)

            if action is Action.HELP:
                for line in HELP_LINES:
                    self.terminal.write(line)
            elif action is Action.SHOW:
                self.terminal.write("show is not available yet")
            elif action is Action.UNDO:
                self._undo()
            elif action is Action.KEEP:
                self.terminal.write(f"keep [cyan]{escape(branch.name)}[/cyan]")
                self.summary.kept.append(branch.name)
                return True
            elif action is Action.DELETE:
                self._delete(branch)
                return True
            elif action is Action.QUIT:
                self.terminal.write("")
                return False

    def _read_action(self, branch: BranchRecord) -> Action:
        prompt = (
            f"[cyan]'{escape(branch.name)}'[/cyan] ([yellow]{branch.short_id}[/yellow]) "
            f"last commit at {branch.display_time} (k/d/u/s/q/?) > "
        )
        while True:
            self.terminal.write(prompt, end="")
            key = self.terminal.read_key()
            if key is not None:
                break
            # End of input: ask again rather than exit
            self.terminal.write("")

        self.terminal.write(escape(key))
        return Action.from_key(key)

    def _delete(self, branch: BranchRecord) -> None:
        self.repo.delete_branch(branch.name)
        self.undo = DeletedBranch(branch.name, branch.commit_id)
        self.summary.deleted.append(branch.name)
        self.terminal.write(f"deleted [cyan]{escape(branch.name)}[/cyan] (was {branch.short_id})")

    def _undo(self) -> None:
        entry, self.undo = self.undo, None
        if entry is None:
            self.terminal.write("nothing to undo")
            return

        self.repo.resolve_commit(entry.commit_id)
        self.repo.create_branch(entry.name, entry.commit_id)
        self.summary.deleted.remove(entry.name)
        self.summary.restored.append(entry.name)
        self.terminal.write(f"restored [cyan]{escape(entry.name)}[/cyan] at {entry.commit_id[:10]}")
