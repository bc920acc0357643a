"""
System package manager installation of compiler cache tools.

Each supported package manager is described by one
:class:`SystemPackageManager` record. Per platform, managers are probed in a
fixed order and the first one found on PATH is used.

Example:
    >>> from ccachekit.core.platform import Platform
    >>> from ccachekit.packages.catalog import Variant
    >>> from ccachekit.packages.managers import install_with_package_manager
    >>> install_with_package_manager(Variant.CCACHE, Platform.LINUX, update_index=True)
"""

import logging
import shutil
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Sequence, Tuple

from ccachekit.core.exceptions import (
    CommandError,
    PackageManagerError,
    PackageManagerUnavailableError,
)
from ccachekit.core.platform import Platform
from ccachekit.core.process import elevated, run_command
from ccachekit.packages.catalog import Variant

logger = logging.getLogger(__name__)

Command = Tuple[str, ...]


@dataclass(frozen=True)
class SystemPackageManager:
    """
    Description of one system package manager.

    Attributes:
        name: Executable probed on PATH
        install_command: Install command; the package name is appended
        update_command: Index refresh command
        update_ok_returncodes: Exit codes of the refresh command meaning success
        needs_elevation: Whether commands run through sudo (when available)
        unavailable: Variants this manager does not package
        pre_install: Extra commands to run before installing a given variant
    """

    name: str
    install_command: Command
    update_command: Command
    update_ok_returncodes: Tuple[int, ...] = (0,)
    needs_elevation: bool = False
    unavailable: frozenset = frozenset()
    pre_install: Mapping[Variant, Tuple[Command, ...]] = field(default_factory=dict)

    def is_present(self) -> bool:
        return shutil.which(self.name) is not None

    def supports(self, variant: Variant) -> bool:
        return variant not in self.unavailable

    def _run(self, command: Sequence[str], ok_returncodes=(0,)) -> None:
        if self.needs_elevation:
            command = elevated(command)
        run_command(command, ok_returncodes=ok_returncodes)

    def install(self, variant: Variant, update_index: bool = False) -> None:
        """
        Install a variant through this manager.

        Raises:
            CommandError: If any command fails
        """
        if update_index:
            self._run(self.update_command, self.update_ok_returncodes)

        for command in self.pre_install.get(variant, ()):
            self._run(command)

        self._run((*self.install_command, variant.value))


APT = SystemPackageManager(
    name="apt-get",
    install_command=("apt-get", "install", "-y"),
    update_command=("apt-get", "update"),
    needs_elevation=True,
)

APK = SystemPackageManager(
    name="apk",
    install_command=("apk", "add"),
    update_command=("apk", "update"),
)

# ccache comes from EPEL; sccache is not packaged for this family.
# `dnf check-update` exits with 100 when updates are available.
DNF = SystemPackageManager(
    name="dnf",
    install_command=("dnf", "install", "-y"),
    update_command=("dnf", "check-update"),
    update_ok_returncodes=(0, 100),
    unavailable=frozenset({Variant.SCCACHE}),
    pre_install={Variant.CCACHE: (("dnf", "install", "-y", "epel-release"),)},
)

BREW = SystemPackageManager(
    name="brew",
    install_command=("brew", "install"),
    update_command=("brew", "update"),
)

PACKAGE_MANAGERS: Dict[Platform, Tuple[SystemPackageManager, ...]] = {
    Platform.LINUX: (APT, APK, DNF),
    Platform.DARWIN: (BREW,),
    Platform.WINDOWS: (),
}


def detect_package_manager(platform: Platform) -> Optional[SystemPackageManager]:
    """Return the first package manager for the platform found on PATH."""
    for manager in PACKAGE_MANAGERS.get(platform, ()):
        if manager.is_present():
            logger.debug(f"Found package manager: {manager.name}")
            return manager
    return None


def package_manager_error_message(variant: Variant, error: Exception) -> str:
    return (
        f"Failed to install {variant.value} via package manager: '{error}'. "
        "Perhaps package manager index is not up to date? "
        "(either update it manually before running ccachekit or set "
        "'update-package-index' option to 'true')"
    )


def install_with_package_manager(
    variant: Variant, platform: Platform, update_index: bool = False
) -> SystemPackageManager:
    """
    Install a variant with the platform's package manager.

    Args:
        variant: Compiler cache tool
        platform: Host platform
        update_index: Refresh the package index first

    Returns:
        The package manager that was used

    Raises:
        PackageManagerUnavailableError: If no manager is found or it does not
            package the variant
        PackageManagerError: If any package manager command fails
    """
    manager = detect_package_manager(platform)
    if manager is None:
        tried = ", ".join(m.name for m in PACKAGE_MANAGERS.get(platform, ())) or "none"
        raise PackageManagerUnavailableError(
            f"No supported package manager found on {platform.value} (tried: {tried})"
        )

    if not manager.supports(variant):
        raise PackageManagerUnavailableError(
            f"{variant.value} is not available through {manager.name}"
        )

    logger.info(f"Installing {variant.value} with {manager.name}")
    try:
        manager.install(variant, update_index=update_index)
    except CommandError as e:
        raise PackageManagerError(package_manager_error_message(variant, e)) from e

    return manager


__all__ = [
    "SystemPackageManager",
    "APT",
    "APK",
    "DNF",
    "BREW",
    "PACKAGE_MANAGERS",
    "detect_package_manager",
    "install_with_package_manager",
]
