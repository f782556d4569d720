"""Tests for the tool's own version string."""

from unittest.mock import Mock, patch

from buildstamp import version
from buildstamp.git import CommandResult
from buildstamp.version import BuildInfo, get_build_info, get_version_string


def test_version_string_clean():
    info = BuildInfo(commit="0123456789abcdef", date="2023-11-14T22:13:20+00:00", dirty=False)
    with patch.object(version, "get_build_info", return_value=info):
        assert get_version_string() == "0123456 2023-11-14T22:13:20+00:00"


def test_version_string_dirty():
    info = BuildInfo(commit=None, date="2023-11-14T22:13:20+00:00", dirty=True)
    with patch.object(version, "get_build_info", return_value=info):
        assert get_version_string() == "unknown-dirty 2023-11-14T22:13:20+00:00"


def test_unknown_when_no_source():
    with patch.object(version, "_from_git_repo", return_value=None), \
            patch.object(version, "_from_embedded_file", return_value=None):
        assert get_build_info() == BuildInfo(commit=None, date=None, dirty=False)
        assert get_version_string() == "unknown unknown"


def test_live_repo_preferred():
    live = BuildInfo(commit="abc", date=None, dirty=False)
    embedded = BuildInfo(commit="def", date=None, dirty=False)
    with patch.object(version, "_from_git_repo", return_value=live), \
            patch.object(version, "_from_embedded_file", return_value=embedded):
        assert get_build_info() is live


def test_iso_date_with_offset():
    assert version._iso_date(1700000000, 3600) == "2023-11-14T23:13:20+01:00"
    assert version._iso_date(0, 0) is None


def test_source_root_detection(tmp_path):
    """Test telling our own checkout from one that contains an installed copy."""
    package_dir = tmp_path / "checkout" / "buildstamp"
    package_dir.mkdir(parents=True)
    (package_dir / "__init__.py").write_text("", encoding="utf-8")
    assert version._is_source_root(tmp_path / "checkout", package_dir.resolve())

    installed = tmp_path / "other" / ".venv" / "lib" / "site-packages" / "buildstamp"
    installed.mkdir(parents=True)
    (installed / "__init__.py").write_text("", encoding="utf-8")
    assert not version._is_source_root(tmp_path / "other", installed.resolve())


def test_foreign_checkout_is_ignored(tmp_path):
    """Test that an enclosing repository of another project isn't reported."""
    git = Mock()
    git.run.return_value = CommandResult(0, str(tmp_path))
    with patch.object(version, "GitCommand", return_value=git), \
            patch.object(version, "RepoStateReader") as reader:
        assert version._from_git_repo() is None
    reader.assert_not_called()
    git.run.assert_called_once()
