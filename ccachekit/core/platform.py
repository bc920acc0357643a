"""
Platform detection for ccachekit.

This module maps the host's raw platform and machine identifiers onto the
closed set of platforms and architectures the package catalog knows about.
Anything outside that set is an explicit error; detection never falls back
to a default.

Usage:
    from ccachekit.core.platform import detect_platform

    info = detect_platform()
    print(f"Running on {info.platform_string()}")
"""

import enum
import functools
import logging
import platform
import sys
from dataclasses import dataclass

import distro

from ccachekit.core.exceptions import UnsupportedPlatformError

logger = logging.getLogger(__name__)


class Platform(str, enum.Enum):
    """Operating systems for which release artifacts exist."""

    LINUX = "linux"
    WINDOWS = "windows"
    DARWIN = "darwin"

    def __str__(self) -> str:
        return self.value


class Architecture(str, enum.Enum):
    """CPU architectures for which release artifacts exist."""

    X86_64 = "x86_64"
    AARCH64 = "aarch64"

    def __str__(self) -> str:
        return self.value


# Raw sys.platform values understood by detection
_PLATFORMS = {
    "linux": Platform.LINUX,
    "darwin": Platform.DARWIN,
    "win32": Platform.WINDOWS,
    "cygwin": Platform.WINDOWS,
}

# Raw platform.machine() values (lowercased) understood by detection
_ARCHITECTURES = {
    "x86_64": Architecture.X86_64,
    "amd64": Architecture.X86_64,
    "aarch64": Architecture.AARCH64,
    "arm64": Architecture.AARCH64,
}


@dataclass(frozen=True)
class PlatformInfo:
    """
    Detected host platform.

    Attributes:
        platform: Operating system
        arch: CPU architecture
        distribution: Linux distribution id ('ubuntu', 'alpine', ...) or empty
    """

    platform: Platform
    arch: Architecture
    distribution: str = ""

    def platform_string(self) -> str:
        """
        Get canonical platform string.

        Example:
            >>> PlatformInfo(Platform.LINUX, Architecture.X86_64).platform_string()
            'linux-x86_64'
        """
        return f"{self.platform.value}-{self.arch.value}"

    def __str__(self) -> str:
        if self.distribution:
            return f"{self.platform_string()} ({self.distribution})"
        return self.platform_string()


def normalize_platform(raw: str) -> Platform:
    """
    Map a raw ``sys.platform`` value to a :class:`Platform`.

    Raises:
        UnsupportedPlatformError: If the value is not one of the known identifiers
    """
    try:
        return _PLATFORMS[raw]
    except KeyError:
        raise UnsupportedPlatformError(
            f"Unsupported platform: {raw!r}. "
            f"Supported: {', '.join(sorted(_PLATFORMS))}"
        ) from None


def normalize_architecture(raw: str) -> Architecture:
    """
    Map a raw ``platform.machine()`` value to an :class:`Architecture`.

    Raises:
        UnsupportedPlatformError: If the value is not one of the known identifiers
    """
    try:
        return _ARCHITECTURES[raw.lower()]
    except KeyError:
        raise UnsupportedPlatformError(
            f"Unsupported architecture: {raw!r}. "
            f"Supported: {', '.join(sorted(_ARCHITECTURES))}"
        ) from None


def detect_os() -> Platform:
    """
    Detect the host operating system alone.

    Installing through a system package manager only needs the operating
    system, so this works on architectures the catalog has no binaries for.

    Raises:
        UnsupportedPlatformError: If the operating system is not supported
    """
    return normalize_platform(sys.platform)


@functools.lru_cache(maxsize=1)
def detect_platform() -> PlatformInfo:
    """
    Detect the current platform.

    This function is cached - it only runs detection once per process.

    Returns:
        PlatformInfo for the host

    Raises:
        UnsupportedPlatformError: If the platform or architecture is not supported
    """
    os_name = normalize_platform(sys.platform)
    arch = normalize_architecture(platform.machine())
    distribution = distro.id() if os_name is Platform.LINUX else ""

    info = PlatformInfo(platform=os_name, arch=arch, distribution=distribution)
    logger.debug(f"Detected platform: {info}")
    return info


def clear_platform_cache():
    """
    Clear the platform detection cache.

    Useful for testing or when platform information changes.
    """
    detect_platform.cache_clear()


__all__ = [
    "Platform",
    "Architecture",
    "PlatformInfo",
    "normalize_platform",
    "normalize_architecture",
    "detect_os",
    "detect_platform",
    "clear_platform_cache",
]
