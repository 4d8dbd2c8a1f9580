"""Branch records and the ordered set of branches to review."""

import logging
from dataclasses import dataclass
from datetime import datetime

from pruner.errors import EncodingError
from pruner.git import GitRepo

logger = logging.getLogger(__name__)

# Default trunk branches, never offered for review
TRUNK_NAMES = frozenset({"master", "main"})


@dataclass(frozen=True)
class BranchRecord:
    """One local branch under review."""

    name: str
    commit_id: str
    commit_time: datetime
    is_head: bool = False

    @property
    def short_id(self) -> str:
        return self.commit_id[:10]

    @property
    def display_time(self) -> str:
        """Commit time in its own offset, e.g. ``2020-01-01 02:00:00 +02:00``."""
        offset = self.commit_time.strftime("%z")
        return f"{self.commit_time:%Y-%m-%d %H:%M:%S} {offset[:3]}:{offset[3:5]}"


def decode_name(raw: bytes) -> str:
    """Decode a raw branch name, which must be valid UTF-8."""
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as err:
        raise EncodingError(f"Branch name {raw!r} is not valid UTF-8: {err}") from err


def build_working_set(repo: GitRepo) -> list[BranchRecord]:
    """Build the list of branches to review.

    Trunk branches are dropped and the rest are ordered by last commit time,
    oldest first. Branches with equal commit times keep their listing order.

    Raises:
        EncodingError: If a branch name is not valid UTF-8
        RepositoryError: If the branches cannot be listed
    """
    records = []
    for raw in repo.list_local_branches():
        name = decode_name(raw.name)
        if name in TRUNK_NAMES:
            continue
        records.append(
            BranchRecord(
                name=name,
                commit_id=raw.commit_id,
                commit_time=raw.commit_time,
                is_head=raw.is_head,
            )
        )

    # sorted() is stable, ties keep enumeration order
    records = sorted(records, key=lambda record: record.commit_time)
    logger.debug("Reviewing %d branch(es)", len(records))
    return records
