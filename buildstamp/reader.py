"""Reading the version-control state of a working tree.

The reader runs in two phases. A cleanliness check gates everything: a dirty
tree yields a snapshot stamped with the capture time and no further query
is issued. A clean tree then goes through a fixed list of independent
steps, each pairing one git query with the fields it fills in. A step whose
query exits non-zero or prints nothing leaves its fields at their defaults
and never stops the steps after it.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from .constants import BuildstampConstants, GitQueries
from .git import GitCommand
from .snapshot import RepoSnapshot, decode_digest

logger = logging.getLogger(__name__)

Fields = Dict[str, Any]


def _set_tag(output: str, fields: Fields) -> None:
    fields["tag"] = output


def _set_branch(output: str, fields: Fields) -> None:
    fields["branch"] = output


def _set_hash_and_time(output: str, fields: Fields) -> None:
    commit_hash, _, commit_time = output.partition(GitQueries.HASH_TIME_SEPARATOR)
    fields["digest"] = decode_digest(commit_hash)
    try:
        fields["timestamp"] = int(commit_time)
    except ValueError:
        logger.warning(f"Unexpected commit time {commit_time!r}, keeping default")


def _set_commit_count(output: str, fields: Fields) -> None:
    try:
        fields["commit_count"] = int(output)
    except ValueError:
        logger.warning(f"Unexpected commit count {output!r}, leaving it unset")


class RepoStateReader:
    """Folds the results of git queries into a RepoSnapshot."""

    # (query, setter) pairs run in order on a clean tree
    STEPS: List[Tuple[List[str], Callable[[str, Fields], None]]] = [
        (GitQueries.EXACT_TAG, _set_tag),
        (GitQueries.CURRENT_BRANCH, _set_branch),
        (GitQueries.HASH_AND_TIME, _set_hash_and_time),
        (GitQueries.COMMIT_COUNT, _set_commit_count),
    ]

    def __init__(self, git: Optional[GitCommand] = None,
                 clock: Callable[[], float] = time.time):
        """Initialize the reader.

        Args:
            git: Command used to run queries. Looked up on PATH if omitted.
            clock: Wall-clock source for dirty snapshots.

        Raises:
            SetupError: If git has to be looked up and is not found.
        """
        self.git = git or GitCommand()
        self.clock = clock

    def read(self, working_tree: Union[str, Path]) -> RepoSnapshot:
        """Capture the state of a working tree.

        Args:
            working_tree: Directory inside the repository to query.

        Returns:
            A fully built snapshot.

        Raises:
            QueryError: If a query could not be launched.
            EncodingDefect: If git reports a malformed commit hash.
        """
        exit_code, output = self.git.run(working_tree, GitQueries.STATUS)
        if exit_code != 0 or output:
            logger.debug(f"Working tree {working_tree} is dirty (exit {exit_code})")
            return RepoSnapshot.dirty(self.clock())

        fields: Fields = {
            "is_dirty": False,
            "timestamp": BuildstampConstants.UNKNOWN_COMMIT_TIME,
        }
        for args, setter in self.STEPS:
            exit_code, output = self.git.run(working_tree, args)
            if exit_code != 0 or not output:
                logger.debug(f"git {' '.join(args)} gave nothing (exit {exit_code})")
                continue
            setter(output, fields)

        return RepoSnapshot(**fields)
