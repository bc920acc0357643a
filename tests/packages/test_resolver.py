"""
Unit tests for package resolution.
"""

from unittest.mock import patch

import pytest

from ccachekit.core.exceptions import ConfigError, UnsupportedCombinationError
from ccachekit.core.platform import Architecture, Platform, PlatformInfo
from ccachekit.packages.catalog import Catalog, PackageDescriptor, Variant
from ccachekit.packages.resolver import parse_variant, resolve


class TestParseVariant:
    """Test parse_variant()."""

    def test_known(self):
        """Test known variant names."""
        assert parse_variant("ccache") is Variant.CCACHE
        assert parse_variant(" sccache ") is Variant.SCCACHE
        assert parse_variant(Variant.CCACHE) is Variant.CCACHE

    def test_unknown(self):
        """Test unknown names raise ConfigError."""
        with pytest.raises(ConfigError, match="Unknown variant 'buildcache'"):
            parse_variant("buildcache")


class TestResolve:
    """Test resolve()."""

    def test_resolve_explicit_platform(self):
        """Test resolution against an explicit platform."""
        info = PlatformInfo(Platform.WINDOWS, Architecture.AARCH64)
        d = resolve("ccache", info)
        assert d.archive_filename == "ccache-4.12.2-windows-aarch64.zip"

    def test_resolve_detects_platform(self):
        """Test the host platform is detected when not given."""
        info = PlatformInfo(Platform.LINUX, Architecture.AARCH64)
        with patch("ccachekit.packages.resolver.detect_platform", return_value=info):
            d = resolve(Variant.SCCACHE)
        assert d.package_name == "sccache-v0.12.0-aarch64-unknown-linux-musl"

    def test_missing_combination_names_all_axes(self):
        """Test absence names variant, platform and architecture."""
        catalog = Catalog(
            [PackageDescriptor(Variant.CCACHE, Platform.LINUX, Architecture.X86_64, "4.12.2")]
        )
        info = PlatformInfo(Platform.DARWIN, Architecture.AARCH64)

        with pytest.raises(UnsupportedCombinationError) as exc_info:
            resolve("sccache", info, catalog)

        message = str(exc_info.value)
        assert "sccache" in message
        assert "darwin" in message
        assert "aarch64" in message
        assert exc_info.value.architecture == "aarch64"
