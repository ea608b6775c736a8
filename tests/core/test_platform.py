"""
Unit tests for the platform detection module.

Tests cover:
- Target rendering and parsing
- OS detection with mocking
- Architecture detection and normalization
- Host target detection and caching
"""

import pytest
from unittest.mock import patch

from torkit.core.exceptions import UnsupportedPlatformError
from torkit.core.platform import (
    Target,
    detect_target,
    host_os,
    clear_platform_cache,
    _detect_os,
    _detect_architecture,
)


class TestTargetRendering:
    """Tests for Target string rendering."""

    def test_renders_ten_targets(self):
        """Test every supported OS/architecture pair is present."""
        assert len(list(Target)) == 10

    def test_renderings_are_unique(self):
        """Test no two targets render identically."""
        rendered = [str(t) for t in Target]
        assert len(set(rendered)) == len(rendered)

    @pytest.mark.parametrize("target", list(Target))
    def test_rendering_is_lowercase_and_hyphenated(self, target):
        """Test renderings are stable lowercase os-arch strings."""
        rendered = str(target)
        assert rendered == rendered.lower()
        assert rendered.count("-") == 1
        assert rendered == f"{target.os}-{target.arch}"
        assert str(target) == rendered

    def test_known_renderings(self):
        """Test renderings used in release file names."""
        assert str(Target.ANDROID_X86_64) == "android-x86_64"
        assert str(Target.LINUX_I686) == "linux-i686"
        assert str(Target.MACOS_X86_64) == "macos-x86_64"
        assert str(Target.WINDOWS_X86_64) == "windows-x86_64"

    def test_os_and_arch(self):
        """Test os/arch components."""
        assert Target.MACOS_AARCH64.os == "macos"
        assert Target.MACOS_AARCH64.arch == "aarch64"
        assert Target.ANDROID_ARMV7.os == "android"


class TestTargetParse:
    """Tests for Target.parse."""

    def test_parse_exact(self):
        """Test parsing a rendered target."""
        assert Target.parse("linux-x86_64") is Target.LINUX_X86_64

    def test_parse_case_insensitive(self):
        """Test parsing ignores case and surrounding whitespace."""
        assert Target.parse("  MacOS-AArch64 ") is Target.MACOS_AARCH64

    def test_parse_unknown(self):
        """Test unknown targets raise UnsupportedPlatformError."""
        with pytest.raises(UnsupportedPlatformError, match="Unsupported target"):
            Target.parse("linux-aarch64")


class TestOSDetection:
    """Tests for operating system detection."""

    @patch("platform.system", return_value="Windows")
    def test_detect_windows(self, mock_system):
        """Test Windows detection."""
        assert _detect_os() == "windows"

    @patch("platform.platform", return_value="Linux-5.15.0-x86_64-with-glibc2.35")
    @patch("platform.system", return_value="Linux")
    def test_detect_linux(self, mock_system, mock_platform):
        """Test Linux detection."""
        assert _detect_os() == "linux"

    @patch("platform.platform", return_value="Linux-4.14.190-android-aarch64")
    @patch("platform.system", return_value="Linux")
    def test_detect_android(self, mock_system, mock_platform):
        """Test Android detection from the platform string."""
        assert _detect_os() == "android"

    @patch("platform.system", return_value="Darwin")
    def test_detect_macos(self, mock_system):
        """Test macOS detection."""
        assert _detect_os() == "macos"

    @patch("platform.system", return_value="FreeBSD")
    def test_detect_unsupported(self, mock_system):
        """Test unsupported OS raises."""
        with pytest.raises(UnsupportedPlatformError, match="Unsupported operating system"):
            _detect_os()

    @patch("platform.system", return_value="Darwin")
    def test_host_os(self, mock_system):
        """Test host_os uses OS detection."""
        assert host_os() == "macos"


class TestArchitectureDetection:
    """Tests for CPU architecture normalization."""

    @pytest.mark.parametrize(
        "machine,expected",
        [
            ("x86_64", "x86_64"),
            ("AMD64", "x86_64"),
            ("aarch64", "aarch64"),
            ("arm64", "aarch64"),
            ("i386", "i686"),
            ("i686", "i686"),
            ("x86", "i686"),
            ("armv7l", "armv7"),
            ("riscv64", "riscv64"),
        ],
    )
    def test_normalization(self, machine, expected):
        """Test machine names map onto bundle naming."""
        with patch("platform.machine", return_value=machine):
            assert _detect_architecture() == expected


class TestDetectTarget:
    """Tests for host target detection."""

    @patch("platform.machine", return_value="x86_64")
    @patch("platform.platform", return_value="Linux-6.1-x86_64")
    @patch("platform.system", return_value="Linux")
    def test_linux_x86_64(self, *mocks):
        """Test Linux x86_64 host."""
        assert detect_target() is Target.LINUX_X86_64

    @patch("platform.machine", return_value="arm64")
    @patch("platform.system", return_value="Darwin")
    def test_macos_arm64(self, *mocks):
        """Test Apple Silicon host."""
        assert detect_target() is Target.MACOS_AARCH64

    @patch("platform.machine", return_value="i686")
    @patch("platform.platform", return_value="Linux-4.14-android-i686")
    @patch("platform.system", return_value="Linux")
    def test_android_x86(self, *mocks):
        """Test Android x86 uses the 'x86' spelling."""
        assert detect_target() is Target.ANDROID_X86

    @patch("platform.machine", return_value="AMD64")
    @patch("platform.system", return_value="Windows")
    def test_default_uses_detection(self, *mocks):
        """Test Target.default() returns the detected host target."""
        assert Target.default() is Target.WINDOWS_X86_64

    @patch("platform.machine", return_value="aarch64")
    @patch("platform.platform", return_value="Linux-6.1-aarch64")
    @patch("platform.system", return_value="Linux")
    def test_unsupported_host(self, *mocks):
        """Test hosts without a published bundle raise."""
        with pytest.raises(UnsupportedPlatformError, match="linux-aarch64"):
            detect_target()

    def test_detection_is_cached(self):
        """Test detection runs once until the cache is cleared."""
        with patch("torkit.core.platform._detect_os", return_value="macos") as mock_os:
            with patch(
                "torkit.core.platform._detect_architecture", return_value="x86_64"
            ):
                detect_target()
                detect_target()
                assert mock_os.call_count == 1

                clear_platform_cache()
                detect_target()
                assert mock_os.call_count == 2
