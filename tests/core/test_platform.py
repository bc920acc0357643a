"""
Unit tests for the platform detection module.

Tests cover:
- Platform and architecture normalization
- Rejection of unknown identifiers
- Detection with mocked sys.platform / platform.machine()
- Cache behavior
"""

import pytest
from unittest.mock import patch

from ccachekit.core.exceptions import UnsupportedPlatformError
from ccachekit.core.platform import (
    Architecture,
    Platform,
    PlatformInfo,
    clear_platform_cache,
    detect_os,
    detect_platform,
    normalize_architecture,
    normalize_platform,
)


class TestPlatformInfo:
    """Tests for PlatformInfo dataclass."""

    def test_platform_string(self):
        """Test platform string generation."""
        info = PlatformInfo(Platform.LINUX, Architecture.AARCH64)
        assert info.platform_string() == "linux-aarch64"

    def test_str_includes_distribution(self):
        """Test string form mentions the distribution when known."""
        info = PlatformInfo(Platform.LINUX, Architecture.X86_64, "alpine")
        assert str(info) == "linux-x86_64 (alpine)"


class TestNormalization:
    """Tests for raw identifier normalization."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("linux", Platform.LINUX),
            ("darwin", Platform.DARWIN),
            ("win32", Platform.WINDOWS),
            ("cygwin", Platform.WINDOWS),
        ],
    )
    def test_known_platforms(self, raw, expected):
        """Test every supported sys.platform value."""
        assert normalize_platform(raw) is expected

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("x86_64", Architecture.X86_64),
            ("AMD64", Architecture.X86_64),
            ("aarch64", Architecture.AARCH64),
            ("arm64", Architecture.AARCH64),
        ],
    )
    def test_known_architectures(self, raw, expected):
        """Test every supported machine value, case-insensitively."""
        assert normalize_architecture(raw) is expected

    @pytest.mark.parametrize("raw", ["freebsd13", "aix", "sunos5", ""])
    def test_unknown_platform_raises(self, raw):
        """Test unknown platforms never fall back to a default."""
        with pytest.raises(UnsupportedPlatformError, match="Unsupported platform"):
            normalize_platform(raw)

    @pytest.mark.parametrize("raw", ["i686", "armv7l", "riscv64", "ppc64le"])
    def test_unknown_architecture_raises(self, raw):
        """Test unknown architectures never fall back to a default."""
        with pytest.raises(UnsupportedPlatformError, match="Unsupported architecture"):
            normalize_architecture(raw)


class TestDetectPlatform:
    """Tests for detect_platform()."""

    def test_detect_linux(self):
        """Test Linux detection records the distribution."""
        with patch("ccachekit.core.platform.sys.platform", "linux"), patch(
            "ccachekit.core.platform.platform.machine", return_value="x86_64"
        ), patch("ccachekit.core.platform.distro.id", return_value="ubuntu"):
            info = detect_platform()

        assert info == PlatformInfo(Platform.LINUX, Architecture.X86_64, "ubuntu")

    def test_detect_macos_arm(self):
        """Test macOS on Apple silicon."""
        with patch("ccachekit.core.platform.sys.platform", "darwin"), patch(
            "ccachekit.core.platform.platform.machine", return_value="arm64"
        ):
            info = detect_platform()

        assert info.platform is Platform.DARWIN
        assert info.arch is Architecture.AARCH64
        assert info.distribution == ""

    def test_detect_unsupported_arch(self):
        """Test detection fails on an unsupported machine."""
        with patch("ccachekit.core.platform.sys.platform", "linux"), patch(
            "ccachekit.core.platform.platform.machine", return_value="s390x"
        ):
            with pytest.raises(UnsupportedPlatformError):
                detect_platform()

    def test_detection_is_cached(self):
        """Test detection runs once until the cache is cleared."""
        with patch("ccachekit.core.platform.sys.platform", "win32"), patch(
            "ccachekit.core.platform.platform.machine", return_value="AMD64"
        ) as machine:
            first = detect_platform()
            second = detect_platform()
            assert first is second
            assert machine.call_count == 1

            clear_platform_cache()
            detect_platform()
            assert machine.call_count == 2

    def test_detect_os_ignores_architecture(self):
        """Test the operating system is detected on any architecture."""
        with patch("ccachekit.core.platform.sys.platform", "linux"), patch(
            "ccachekit.core.platform.platform.machine", return_value="ppc64le"
        ):
            assert detect_os() is Platform.LINUX
            with pytest.raises(UnsupportedPlatformError):
                detect_platform()

    def test_detect_os_unknown(self):
        """Test unknown operating systems still raise."""
        with patch("ccachekit.core.platform.sys.platform", "freebsd13"):
            with pytest.raises(UnsupportedPlatformError):
                detect_os()
