"""
Core functionality for ccachekit.

This package contains the foundational modules that other components depend on.
"""

from .exceptions import (
    CcacheKitError,
    ConfigError,
    StateError,
    UnsupportedPlatformError,
    UnsupportedCombinationError,
    CatalogError,
    DownloadError,
    ArchiveExtractionError,
    InsecureArchiveError,
    IntegrityError,
    CommandError,
    PackageManagerError,
    PackageManagerUnavailableError,
    InstallVerificationError,
    StoreError,
)

from .platform import (
    Platform,
    Architecture,
    PlatformInfo,
    detect_os,
    detect_platform,
    clear_platform_cache,
)

from .state import (
    RunState,
    StateManager,
)

__all__ = [
    # Exceptions
    "CcacheKitError",
    "ConfigError",
    "StateError",
    "UnsupportedPlatformError",
    "UnsupportedCombinationError",
    "CatalogError",
    "DownloadError",
    "ArchiveExtractionError",
    "InsecureArchiveError",
    "IntegrityError",
    "CommandError",
    "PackageManagerError",
    "PackageManagerUnavailableError",
    "InstallVerificationError",
    "StoreError",
    # Platform
    "Platform",
    "Architecture",
    "PlatformInfo",
    "detect_os",
    "detect_platform",
    "clear_platform_cache",
    # State
    "RunState",
    "StateManager",
]
