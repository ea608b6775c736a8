"""
Tests for default download directory resolution.
"""

import pytest
from pathlib import Path
from unittest.mock import patch

from torkit.core.directory import (
    DirectoryError,
    get_default_download_dir,
    get_user_cache_dir,
)


class TestDefaultDownloadDir:
    """Test platform-specific default locations."""

    def test_linux_uses_home(self, isolated_home):
        """Test Linux default is a dot-directory in home."""
        assert get_default_download_dir("linux") == Path.home() / ".torkit"

    def test_android_uses_home(self, isolated_home):
        """Test Android default is a dot-directory in home."""
        assert get_default_download_dir("android") == Path.home() / ".torkit"

    def test_macos_uses_user_cache(self, isolated_home):
        """Test macOS default lives under ~/Library/Caches."""
        expected = Path.home() / "Library" / "Caches" / "TorKit"
        assert get_default_download_dir("macos") == expected

    def test_windows_uses_local_app_data(self, tmp_path, monkeypatch):
        """Test Windows default lives under LOCALAPPDATA."""
        monkeypatch.setenv("LOCALAPPDATA", str(tmp_path))
        assert get_default_download_dir("windows") == tmp_path / "TorKit"

    def test_windows_without_local_app_data(self, monkeypatch):
        """Test missing LOCALAPPDATA raises DirectoryError."""
        monkeypatch.delenv("LOCALAPPDATA", raising=False)
        with pytest.raises(DirectoryError, match="LOCALAPPDATA"):
            get_default_download_dir("windows")

    def test_defaults_to_host_os(self, isolated_home):
        """Test the host OS is used when none is given."""
        with patch("torkit.core.directory.host_os", return_value="linux"):
            assert get_default_download_dir() == Path.home() / ".torkit"


class TestUserCacheDir:
    """Test user cache directory lookup."""

    def test_linux_has_no_user_cache(self):
        """Test Linux has no user cache entry."""
        with pytest.raises(DirectoryError):
            get_user_cache_dir("linux")
