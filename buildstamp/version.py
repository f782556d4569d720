"""Version string for buildstamp itself.

The tool reports its own build state with the same pipeline it offers to
other projects: a live checkout is queried directly, an installed copy
falls back to the module generated at build time with
``buildstamp --format python -o buildstamp/_build_info.py``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import NamedTuple, Optional, Union

from .constants import BuildstampConstants, GitQueries
from .errors import BuildstampError
from .git import GitCommand
from .reader import RepoStateReader

logger = logging.getLogger(__name__)


class BuildInfo(NamedTuple):
    commit: Optional[str]
    date: Optional[str]
    dirty: bool


def _iso_date(timestamp: Union[int, float], utc_offset: Optional[int] = None) -> Optional[str]:
    if timestamp == BuildstampConstants.UNKNOWN_COMMIT_TIME:
        return None
    if utc_offset is None:
        moment = datetime.fromtimestamp(timestamp).astimezone()
    else:
        moment = datetime.fromtimestamp(timestamp, timezone(timedelta(seconds=utc_offset)))
    return moment.isoformat(timespec="seconds")


def _is_source_root(root: Path, package_dir: Path) -> bool:
    candidate = root / package_dir.name
    return (candidate / "__init__.py").is_file() and candidate.resolve() == package_dir


def _from_git_repo() -> Optional[BuildInfo]:
    here = Path(__file__).resolve().parent
    try:
        git = GitCommand()
        exit_code, root = git.run(here, GitQueries.TOPLEVEL)
        # Skip checkouts that merely contain an installed copy, e.g. in a .venv
        if exit_code != 0 or not root or not _is_source_root(Path(root), here):
            return None
        snapshot = RepoStateReader(git).read(root)
    except BuildstampError as e:
        logger.debug(f"No live build info: {e}")
        return None

    return BuildInfo(
        commit=snapshot.commit,
        date=_iso_date(snapshot.timestamp),
        dirty=snapshot.is_dirty,
    )


def _from_embedded_file() -> Optional[BuildInfo]:
    # Generated at build time by `buildstamp --format python`
    try:
        from ._build_info import BUILD_INFO  # type: ignore
    except ImportError:
        return None

    return BuildInfo(
        commit=BUILD_INFO.commit or None,
        date=_iso_date(BUILD_INFO.time_stamp, BUILD_INFO.utc_offset),
        dirty=BUILD_INFO.is_dirty,
    )


def get_build_info() -> BuildInfo:
    # Priority: live git repo -> embedded file -> unknowns
    for getter in (_from_git_repo, _from_embedded_file):
        info = getter()
        if info and (info.commit or info.date):
            return info
    return BuildInfo(commit=None, date=None, dirty=False)


def get_version_string() -> str:
    info = get_build_info()
    dirty_suffix = "-dirty" if info.dirty else ""
    # Short (7-character) hashes, like `git log --oneline`
    commit = info.commit[:7] if info.commit else "unknown"
    date = info.date or "unknown"
    return f"{commit}{dirty_suffix} {date}"
