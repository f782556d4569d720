"""buildstamp CLI entry point.

Allows running via `python -m buildstamp` and provides the console script
defined in `pyproject.toml`.
"""

from __future__ import annotations

import argparse
import logging
import os
import stat
import sys
import tempfile
from typing import List, Optional

import blessed

from .constants import BuildstampConstants
from .encoder import ArtifactEncoder
from .errors import BuildstampError
from .git import GitCommand, find_git
from .reader import RepoStateReader
from .settings import SettingsKeys, get_persistence
from .version import get_version_string

logger = logging.getLogger(__name__)


def _target_mode(path: str) -> int:
    """Mode for the written file: the existing file's, else 0o666 less the umask."""
    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def write_atomically(path: str, content: str) -> None:
    """Write content to path through a temp file and rename.

    The file keeps the permissions of the one it replaces.

    Raises:
        OSError: If the file can't be written.
    """
    dir_name = os.path.dirname(path) or '.'
    temp_filename = None
    try:
        with tempfile.NamedTemporaryFile(
            mode='w',
            encoding='utf-8',
            dir=dir_name,
            prefix=BuildstampConstants.ATOMIC_SAVE_PREFIX,
            suffix=BuildstampConstants.ATOMIC_SAVE_SUFFIX,
            delete=False
        ) as temp_file:
            temp_filename = temp_file.name
            temp_file.write(content)
        os.chmod(temp_filename, _target_mode(path))
        os.replace(temp_filename, path)
    except OSError:
        if temp_filename is not None and os.path.exists(temp_filename):
            os.remove(temp_filename)
        raise


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=BuildstampConstants.APP_NAME,
        description="Generate a source-code constant describing a git working tree.",
    )
    parser.add_argument("working_tree", nargs="?", default=".",
                        help="directory inside the repository (default: current directory)")
    parser.add_argument("-o", "--output", help="write to this file instead of stdout")
    parser.add_argument("-f", "--format", choices=sorted(ArtifactEncoder.FORMATS),
                        help=f"output language (default: {BuildstampConstants.DEFAULT_FORMAT})")
    parser.add_argument("--git", help="name of the git executable to look up on PATH")
    parser.add_argument("--save-defaults", action="store_true",
                        help="remember --git and --format for later runs")
    parser.add_argument("-v", "--verbose", action="store_true", help="log each git query")
    parser.add_argument("-V", "--version", action="store_true", help="print version and exit")
    return parser


def report_error(message: str) -> None:
    """Print an error message to stderr, in red on a terminal."""
    term = blessed.Terminal(stream=sys.stderr)
    print(term.red(f"error: {message}"), file=sys.stderr)


def generate(working_tree: str, fmt: str, git_name: str) -> str:
    """Read a working tree and render it in the given format.

    Raises:
        BuildstampError: If git is missing or a query can't be launched.
    """
    git = GitCommand(find_git(git_name))
    snapshot = RepoStateReader(git).read(os.path.abspath(working_tree))
    logger.debug(f"Snapshot: {snapshot}")
    return ArtifactEncoder(fmt).encode(snapshot)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s: %(message)s",
    )

    if args.version:
        print(get_version_string())
        return 0

    persistence = get_persistence()
    defaults = persistence.load()
    fmt = args.format or defaults.get(SettingsKeys.FORMAT, BuildstampConstants.DEFAULT_FORMAT)
    git_name = args.git or defaults.get(SettingsKeys.GIT_EXECUTABLE, BuildstampConstants.GIT_EXECUTABLE)

    if args.save_defaults:
        saved = persistence.save({
            SettingsKeys.FORMAT: args.format,
            SettingsKeys.GIT_EXECUTABLE: args.git,
        })
        if not saved:
            report_error(f"could not save defaults to {persistence.settings_file}")
            return 1

    try:
        code = generate(args.working_tree, fmt, git_name)
        if args.output:
            write_atomically(args.output, code)
        else:
            print(code, end="")
    except (BuildstampError, OSError) as e:
        report_error(str(e))
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
