"""Locating and running the git executable."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import List, NamedTuple, Optional, Union

from .constants import BuildstampConstants
from .errors import QueryError, SetupError

logger = logging.getLogger(__name__)


class CommandResult(NamedTuple):
    exit_code: int
    output: str


def find_git(name: str = BuildstampConstants.GIT_EXECUTABLE,
             search_path: Optional[str] = None) -> str:
    """Find an executable by scanning a colon-separated search path.

    Args:
        name: Executable name, matched exactly.
        search_path: Directories to scan. Defaults to $PATH, or /usr/bin
            when $PATH is unset.

    Returns:
        Full path of the first executable match.

    Raises:
        SetupError: If no directory holds an executable of that name.
    """
    if search_path is None:
        search_path = os.environ.get("PATH", BuildstampConstants.DEFAULT_SEARCH_PATH)
    found = shutil.which(name, path=search_path)
    if found is None:
        raise SetupError(f"{name} not found in PATH")
    logger.debug(f"Using {name} at {found}")
    return found


class GitCommand:
    """Runs git queries against a working tree, one at a time."""

    def __init__(self, executable: Optional[str] = None):
        """Initialize with an explicit executable path, or look one up.

        Raises:
            SetupError: If no executable was given and git is not on PATH.
        """
        self.executable = executable or find_git()

    def run(self, working_tree: Union[str, Path], args: List[str]) -> CommandResult:
        """Run one query and wait for it to finish.

        Args:
            working_tree: Directory the command runs in.
            args: Arguments following the executable.

        Returns:
            Exit code and stripped standard output.

        Raises:
            QueryError: If the process could not be launched.
        """
        command = [self.executable, *args]
        logger.debug(f"Running {' '.join(command)} in {working_tree}")
        try:
            result = subprocess.run(
                command,
                cwd=str(working_tree),
                capture_output=True,
                text=True,
                errors="replace",
            )
        except OSError as e:
            raise QueryError(f"Could not run {' '.join(command)}: {e}") from e

        if result.stderr:
            logger.debug(f"{args[0]} stderr: {result.stderr.strip()}")
        return CommandResult(result.returncode, (result.stdout or "").strip())
