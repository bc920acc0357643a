"""
Centralized exception hierarchy for ccachekit.

This module defines all custom exceptions used across the codebase so that
every failure surfaces with a clear category: unsupported environment,
integrity failure, package manager failure, post-install verification
failure, or a failing external command.
"""

from typing import Optional, Sequence


# ============================================================================
# Base Exceptions
# ============================================================================


class CcacheKitError(Exception):
    """Base exception for all ccachekit errors."""

    pass


class ConfigError(CcacheKitError):
    """Raised when an option value cannot be parsed or is not recognized."""

    pass


class StateError(CcacheKitError):
    """Base exception for cross-phase state errors."""

    pass


# ============================================================================
# Platform / Catalog Exceptions
# ============================================================================


class UnsupportedPlatformError(CcacheKitError):
    """Raised when the host platform or architecture is outside the supported set."""

    pass


class UnsupportedCombinationError(CcacheKitError):
    """Raised when the catalog holds no package for a (variant, platform, arch) triple."""

    def __init__(self, variant: str, platform: str, architecture: str):
        self.variant = variant
        self.platform = platform
        self.architecture = architecture
        super().__init__(
            f"Unsupported combination: no {variant} package for "
            f"platform '{platform}' and architecture '{architecture}'"
        )


class CatalogError(CcacheKitError):
    """Raised when the package catalog data is malformed."""

    pass


# ============================================================================
# Download / Extraction / Integrity Exceptions
# ============================================================================


class DownloadError(CcacheKitError):
    """Raised when an archive cannot be downloaded."""

    pass


class ArchiveExtractionError(CcacheKitError):
    """Failed to extract a member from an archive."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Archive member path attempts to escape the extraction directory."""

    pass


class IntegrityError(CcacheKitError):
    """Raised when a downloaded binary cannot be proven to match its recorded checksum."""

    def __init__(
        self,
        message: str,
        actual: Optional[str] = None,
        expected: Optional[str] = None,
    ):
        self.actual = actual
        self.expected = expected
        super().__init__(message)


# ============================================================================
# Installation Exceptions
# ============================================================================


class CommandError(CcacheKitError):
    """Raised when an external command exits with an unexpected status."""

    def __init__(self, command: Sequence[str], returncode: int, stderr: str = ""):
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr
        msg = f"Command '{' '.join(self.command)}' failed with exit code {returncode}"
        if stderr.strip():
            msg += f": {stderr.strip()}"
        super().__init__(msg)


class PackageManagerError(CcacheKitError):
    """Base exception for package manager installation failures."""

    pass


class PackageManagerUnavailableError(PackageManagerError):
    """No suitable package manager, or the variant is not packaged by it."""

    pass


class InstallVerificationError(CcacheKitError):
    """Raised when the tool is still not on PATH after installation."""

    pass


# ============================================================================
# Cache Store Exceptions
# ============================================================================


class StoreError(CcacheKitError):
    """Raised when the blob store cannot restore or save an entry."""

    pass
