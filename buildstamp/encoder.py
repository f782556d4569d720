"""Rendering a RepoSnapshot as a source-code declaration."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Dict, Optional

from .constants import BuildstampConstants
from .errors import EncodingDefect
from .snapshot import RepoSnapshot


SWIFT_TEMPLATE = """\
//
// Build info
//
import Foundation

public struct BuildInfo {{
    let timeStamp: Date     // Commit time, or time of a dirty build
    let timeZone: TimeZone  // Time zone of the build machine
    let isDirty: Bool       // Working tree wasn't clean. In this case only timeStamp is available
    let count: Int?         // Commit count
    let tag: String?        // Tag, if it exists
    let branch: String?     // Git branch name
    let digest: [UInt8]     // Commit sha1 digest (20 bytes)

    var commit: String {{
        digest.reduce("") {{ $0 + String(format: "%02x", $1) }}
    }}
}}
let buildInfo = BuildInfo(timeStamp: Date(timeIntervalSince1970: {timestamp}),
                          timeZone: TimeZone(secondsFromGMT: {utc_offset})!,
                          isDirty: {is_dirty},
                          count: {count},
                          tag: {tag},
                          branch: {branch},
                          digest: {digest})
"""

PYTHON_TEMPLATE = """\
# Auto-generated by buildstamp.
from typing import NamedTuple, Optional, Union


class BuildInfo(NamedTuple):
    time_stamp: Union[int, float]  # Commit time, or time of a dirty build
    utc_offset: int  # Seconds east of UTC on the build machine
    is_dirty: bool  # Working tree wasn't clean. In this case only time_stamp is available
    count: Optional[int]  # Commit count
    tag: Optional[str]  # Tag, if it exists
    branch: Optional[str]  # Git branch name
    digest: bytes  # Commit sha1 digest (20 bytes)

    @property
    def commit(self) -> str:
        return self.digest.hex()


BUILD_INFO = BuildInfo(time_stamp={timestamp},
                       utc_offset={utc_offset},
                       is_dirty={is_dirty},
                       count={count},
                       tag={tag},
                       branch={branch},
                       digest=bytes({digest}))
"""


def local_utc_offset() -> int:
    """Seconds east of UTC for the local zone right now."""
    offset = datetime.now().astimezone().utcoffset()
    return int(offset.total_seconds()) if offset is not None else 0


def format_byte_list(data: bytes) -> str:
    """Format bytes as a bracketed list of two-digit hex literals.

    >>> format_byte_list(bytes.fromhex("00ff10"))
    '[0x00, 0xff, 0x10]'
    """
    return "[" + ", ".join(f"0x{b:02x}" for b in data) + "]"


def swift_string(value: str) -> str:
    """Quote a string as a Swift string literal."""
    escaped = (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
        .replace("\0", "\\0")
    )
    return f'"{escaped}"'


def _optional(value, render: Callable, absent: str) -> str:
    return absent if value is None else render(value)


def _digest_bytes(snapshot: RepoSnapshot) -> bytes:
    if snapshot.digest is None:
        return b""
    if len(snapshot.digest) != BuildstampConstants.DIGEST_SIZE:
        raise EncodingDefect(f"Digest must be {BuildstampConstants.DIGEST_SIZE} bytes")
    return snapshot.digest


def render_swift(snapshot: RepoSnapshot, utc_offset: int) -> str:
    return SWIFT_TEMPLATE.format(
        timestamp=repr(snapshot.timestamp),
        utc_offset=utc_offset,
        is_dirty="true" if snapshot.is_dirty else "false",
        count=_optional(snapshot.commit_count, str, "nil"),
        tag=_optional(snapshot.tag, swift_string, "nil"),
        branch=_optional(snapshot.branch, swift_string, "nil"),
        digest=format_byte_list(_digest_bytes(snapshot)),
    )


def render_python(snapshot: RepoSnapshot, utc_offset: int) -> str:
    return PYTHON_TEMPLATE.format(
        timestamp=repr(snapshot.timestamp),
        utc_offset=utc_offset,
        is_dirty=repr(snapshot.is_dirty),
        count=repr(snapshot.commit_count),
        tag=repr(snapshot.tag),
        branch=repr(snapshot.branch),
        digest=format_byte_list(_digest_bytes(snapshot)),
    )


class ArtifactEncoder:
    """Renders snapshots into a declaration in one of several languages."""

    FORMATS: Dict[str, Callable[[RepoSnapshot, int], str]] = {
        "swift": render_swift,
        "python": render_python,
    }

    def __init__(self, fmt: str = BuildstampConstants.DEFAULT_FORMAT):
        """Initialize for an output format.

        Raises:
            ValueError: If the format is not one of FORMATS.
        """
        if fmt not in self.FORMATS:
            raise ValueError(
                f"Unknown format {fmt!r}, expected one of {', '.join(sorted(self.FORMATS))}"
            )
        self.fmt = fmt

    def encode(self, snapshot: RepoSnapshot, utc_offset: Optional[int] = None) -> str:
        """Render a snapshot.

        Args:
            snapshot: State to embed.
            utc_offset: Seconds east of UTC to embed. Read from the local
                zone at call time when omitted.

        Returns:
            Source text declaring a single BuildInfo value.

        Raises:
            EncodingDefect: If the snapshot's digest is not 20 bytes.
        """
        if utc_offset is None:
            utc_offset = local_utc_offset()
        return self.FORMATS[self.fmt](snapshot, utc_offset)
