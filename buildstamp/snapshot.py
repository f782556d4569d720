"""Immutable snapshot of a working tree's version-control state."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from .constants import BuildstampConstants
from .errors import EncodingDefect


def decode_hex(text: str) -> bytes:
    """Decode a hex string into bytes.

    Args:
        text: Hex digits, two per byte. Case is ignored.

    Returns:
        The decoded bytes.

    Raises:
        EncodingDefect: If the string has odd length or non-hex characters.
    """
    if len(text) % 2:
        raise EncodingDefect(f"Hex string has odd length {len(text)}: {text!r}")
    try:
        return bytes.fromhex(text)
    except ValueError as e:
        raise EncodingDefect(f"Invalid hex string {text!r}: {e}") from e


def decode_digest(text: str) -> bytes:
    """Decode a 40-character commit hash into its 20-byte digest."""
    if len(text) != BuildstampConstants.DIGEST_HEX_LENGTH:
        raise EncodingDefect(
            f"Commit hash must be {BuildstampConstants.DIGEST_HEX_LENGTH} "
            f"hex characters, got {len(text)}: {text!r}"
        )
    return decode_hex(text)


@dataclass(frozen=True)
class RepoSnapshot:
    """State of a working tree captured once per run.

    Attributes:
        is_dirty: True if tracked files have uncommitted changes
        timestamp: Commit time if clean, capture wall-clock time if dirty
        commit_count: Commits reachable from HEAD, None when unknown
        branch: Current branch name, None if detached or unresolved
        tag: Tag pointing exactly at HEAD, None if there is none
        digest: 20-byte commit hash, None when unknown
    """
    is_dirty: bool
    timestamp: Union[int, float]
    commit_count: Optional[int] = None
    branch: Optional[str] = None
    tag: Optional[str] = None
    digest: Optional[bytes] = None

    def __post_init__(self) -> None:
        if self.digest is not None and len(self.digest) != BuildstampConstants.DIGEST_SIZE:
            raise EncodingDefect(
                f"Digest must be {BuildstampConstants.DIGEST_SIZE} bytes, "
                f"got {len(self.digest)}"
            )

    @property
    def commit(self) -> Optional[str]:
        """Lowercase hex form of the digest."""
        if self.digest is None:
            return None
        return self.digest.hex()

    @classmethod
    def dirty(cls, captured_at: float) -> 'RepoSnapshot':
        """Create the snapshot of a tree that failed the cleanliness check."""
        return cls(is_dirty=True, timestamp=captured_at)
