"""
Install strategy engine.

The install policy decides whether and how the compiler cache tool is
installed:

- ``yes``: package manager first, release binary as the fallback
- ``binary``: release binary only
- ``detect``: nothing if the tool is already on PATH, otherwise ``yes``
- ``no``: nothing

Whatever branch runs, the tool must be on PATH afterwards. That final check
is the only thing that decides whether installation succeeded.

The catalog entry is only resolved when a branch actually installs, so
`no`, and `detect` with the tool already present, work on hosts the catalog
does not cover.

Usage:
    from ccachekit.packages.strategy import InstallEngine, InstallPolicy

    engine = InstallEngine("ccache")
    tool_path = engine.run(InstallPolicy.DETECT)
"""

import enum
import logging
import os
import shutil
from pathlib import Path
from typing import Optional, Union

from ccachekit.ci.environment import add_path
from ccachekit.core.exceptions import (
    ConfigError,
    InstallVerificationError,
    PackageManagerError,
)
from ccachekit.core.platform import Platform, PlatformInfo, detect_os
from ccachekit.packages.catalog import Catalog, PackageDescriptor, Variant
from ccachekit.packages.extractor import fetch_and_extract
from ccachekit.packages.managers import install_with_package_manager
from ccachekit.packages.resolver import parse_variant, resolve

logger = logging.getLogger(__name__)


class InstallPolicy(str, enum.Enum):
    """How the compiler cache tool gets installed."""

    YES = "yes"
    BINARY = "binary"
    DETECT = "detect"
    NO = "no"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Union[str, "InstallPolicy"]) -> "InstallPolicy":
        """
        Convert an option value to a policy.

        Raises:
            ConfigError: If the value is not a known policy
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ConfigError(
                f"Unknown install policy '{value}'. "
                f"Expected one of: {', '.join(p.value for p in cls)}"
            ) from None


def default_install_dir(platform: Platform) -> Path:
    """
    Directory release binaries are installed into.

    Raises:
        InstallVerificationError: If USERPROFILE is not set on Windows
    """
    if platform is Platform.WINDOWS:
        user_profile = os.environ.get("USERPROFILE")
        if not user_profile:
            raise InstallVerificationError(
                "USERPROFILE environment variable is not set. "
                "Cannot determine the binary install directory."
            )
        return Path(user_profile) / ".cargo" / "bin"
    return Path("/usr/local/bin")


class InstallEngine:
    """
    Runs an install policy for one variant on the host.

    Attributes:
        variant: Compiler cache tool
        catalog: Catalog consulted for the release binary (embedded if None)
        update_package_index: Refresh the package index before installing
        install_dir: Directory release binaries are installed into
    """

    def __init__(
        self,
        variant: Union[str, Variant],
        platform_info: Optional[PlatformInfo] = None,
        catalog: Optional[Catalog] = None,
        update_package_index: bool = False,
        install_dir: Optional[Path] = None,
    ):
        self.variant = parse_variant(variant)
        self.catalog = catalog
        self.update_package_index = update_package_index
        self._platform_info = platform_info
        self._descriptor: Optional[PackageDescriptor] = None
        self._install_dir = Path(install_dir) if install_dir else None
        self._binary_dir: Optional[Path] = None

    @property
    def host_os(self) -> Platform:
        if self._platform_info is not None:
            return self._platform_info.platform
        return detect_os()

    @property
    def descriptor(self) -> PackageDescriptor:
        """
        Catalog entry for the host, resolved on first use.

        Raises:
            UnsupportedPlatformError: If the host architecture is not supported
            UnsupportedCombinationError: If the catalog has no entry for the host
        """
        if self._descriptor is None:
            self._descriptor = resolve(self.variant, self._platform_info, self.catalog)
        return self._descriptor

    @property
    def install_dir(self) -> Path:
        if self._install_dir is None:
            self._install_dir = default_install_dir(self.host_os)
        return self._install_dir

    @property
    def tool_name(self) -> str:
        return self.variant.value

    def find_tool(self) -> Optional[Path]:
        """Locate the tool on PATH."""
        found = shutil.which(self.tool_name)
        return Path(found) if found else None

    def run(self, policy: Union[str, InstallPolicy]) -> Path:
        """
        Execute a policy and verify the result.

        Returns:
            Path of the tool executable found on PATH

        Raises:
            InstallVerificationError: If the tool is not on PATH afterwards
            IntegrityError: If a downloaded binary fails verification
        """
        policy = InstallPolicy.parse(policy)
        logger.info(f"Install policy for {self.tool_name}: {policy.value}")

        if policy is InstallPolicy.NO:
            logger.info("Installation disabled")
        elif policy is InstallPolicy.DETECT:
            self.install_if_missing()
        elif policy is InstallPolicy.BINARY:
            self.install_binary()
        elif policy is InstallPolicy.YES:
            self.install_with_fallback()

        return self.verify()

    def install_if_missing(self) -> None:
        existing = self.find_tool()
        if existing:
            logger.info(f"{self.tool_name} already installed at {existing}")
            return
        self.install_with_fallback()

    def install_with_fallback(self) -> None:
        """
        Install with the package manager, falling back to the release binary.

        Raises:
            InstallVerificationError: If the package manager fails and the
                catalog has no verified binary for the host
        """
        try:
            install_with_package_manager(
                self.variant,
                self.host_os,
                update_index=self.update_package_index,
            )
            return
        except PackageManagerError as e:
            logger.warning(str(e))
            if not self.descriptor.checksum:
                raise InstallVerificationError(
                    f"Can't install {self.tool_name} automatically on "
                    f"{self.descriptor.platform.value}-{self.descriptor.architecture.value}: "
                    "the package manager did not install it and no verified release "
                    f"binary is available. Please install {self.tool_name} yourself "
                    "before running ccachekit."
                ) from e
            logger.info("Falling back to release binary installation")

        self.install_binary()

    def install_binary(self) -> Path:
        """Install the release binary and put its directory first on PATH."""
        descriptor = self.descriptor
        destination = self.install_dir / descriptor.executable_name
        fetch_and_extract(descriptor, destination)

        add_path(self.install_dir)
        self._binary_dir = self.install_dir
        return destination

    def verify(self) -> Path:
        """
        Check that the tool is on PATH.

        Raises:
            InstallVerificationError: If it is not
        """
        if self._binary_dir is not None:
            # Re-assert so a PATH entry added meanwhile cannot shadow the binary
            add_path(self._binary_dir)

        tool_path = self.find_tool()
        if tool_path is None:
            raise InstallVerificationError(
                f"{self.tool_name} is not available on PATH after installation. "
                "Check the installation logs above for errors and report an issue "
                "to the ccachekit maintainers if the problem persists."
            )

        logger.info(f"Using {self.tool_name} at {tool_path}")
        return tool_path


__all__ = ["InstallPolicy", "InstallEngine", "default_install_dir"]
