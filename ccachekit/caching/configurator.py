"""
Compiler cache tool configuration.

Points the installed tool at the workspace cache directory, applies the size
limit and the settings that keep hits stable across runners. How a variant is
configured follows its entry in :data:`VARIANT_TRAITS`: tools that run their
own server get their settings through the server's environment, the others
through ``--set-config``.

Usage:
    from ccachekit.caching.configurator import configure, zero_stats

    configure(Variant.CCACHE, Platform.LINUX, cache_dir=Path('/work/.ccache'),
              max_size='500M')
    zero_stats(Variant.CCACHE)
"""

import logging
import shutil
from pathlib import Path
from typing import Optional, Sequence

from ccachekit.core.exceptions import InstallVerificationError
from ccachekit.core.platform import Platform
from ccachekit.core.process import run_command
from ccachekit.packages.catalog import VARIANT_TRAITS, Variant

logger = logging.getLogger(__name__)

SYMLINK_DIR = Path("/usr/local/bin")

COMPILER_NAMES = ("gcc", "g++", "cc", "c++", "clang", "clang++", "emcc", "em++")

# mtimes of the compiler differ between runner images on these platforms
CONTENT_CHECK_PLATFORMS = frozenset({Platform.DARWIN, Platform.WINDOWS})


def apply_config_settings(
    variant: Variant,
    platform: Optional[Platform],
    cache_dir: Path,
    max_size: str,
    create_symlink: bool = False,
    symlink_dir: Path = SYMLINK_DIR,
) -> None:
    """
    Write settings with ``--set-config`` and optionally install compiler symlinks.

    An unknown platform gets no content-based compiler check.

    Raises:
        CommandError: If a tool command fails
        InstallVerificationError: If symlinks are requested but the tool is not on PATH
    """
    tool = variant.value
    run_command([tool, f"--set-config=cache_dir={cache_dir}"])
    run_command([tool, f"--set-config=max_size={max_size}"])
    run_command([tool, "--set-config=compression=true"])
    if platform in CONTENT_CHECK_PLATFORMS:
        run_command([tool, "--set-config=compiler_check=content"])

    if create_symlink:
        create_compiler_symlinks(variant, symlink_dir)

    logger.info(f"{tool.capitalize()} config:")
    run_command([tool, "-p"])


def create_compiler_symlinks(
    variant: Variant = Variant.CCACHE,
    symlink_dir: Path = SYMLINK_DIR,
    names: Sequence[str] = COMPILER_NAMES,
) -> None:
    """
    Link compiler names to the tool so plain compiler invocations go through it.

    Raises:
        InstallVerificationError: If the tool is not on PATH
        CommandError: If a link cannot be created
    """
    tool = shutil.which(variant.value)
    if tool is None:
        raise InstallVerificationError(
            f"{variant.value} not found on PATH; cannot create symlinks"
        )

    for name in names:
        run_command(["ln", "-s", tool, str(Path(symlink_dir) / name)])


def start_server(variant: Variant, cache_dir: Path, max_size: str) -> None:
    """Start the tool's server with the cache directory and size limit."""
    prefix = variant.value.upper()
    run_command(
        [variant.value, "--start-server"],
        env={
            f"{prefix}_IDLE_TIMEOUT": "0",
            f"{prefix}_DIR": str(cache_dir),
            f"{prefix}_CACHE_SIZE": max_size,
        },
    )


def configure(
    variant: Variant,
    platform: Optional[Platform],
    cache_dir: Path,
    max_size: str,
    create_symlink: bool = False,
    symlink_dir: Optional[Path] = None,
) -> None:
    """
    Configure the installed tool for this build.

    Args:
        variant: Compiler cache tool
        platform: Host operating system, or None if it is not a known one
        cache_dir: Cache directory restored and saved by ccachekit
        max_size: Size limit in the tool's notation (e.g. '500M')
        create_symlink: Link compiler names to the tool where supported
        symlink_dir: Directory the links are created in

    Raises:
        CommandError: If any tool command fails
    """
    traits = VARIANT_TRAITS[variant]

    if create_symlink and not traits.supports_symlinks:
        logger.warning(f"create-symlink is not supported for {variant.value}, ignoring")
        create_symlink = False

    if traits.runs_server:
        start_server(variant, cache_dir, max_size)
    else:
        apply_config_settings(
            variant,
            platform,
            cache_dir,
            max_size,
            create_symlink=create_symlink,
            symlink_dir=symlink_dir or SYMLINK_DIR,
        )


def zero_stats(variant: Variant) -> None:
    """Reset the tool's statistics so the save phase reports this job only."""
    run_command([variant.value, "-z"])


def show_stats(variant: Variant) -> None:
    run_command([variant.value, "-s"])


__all__ = [
    "COMPILER_NAMES",
    "configure",
    "apply_config_settings",
    "create_compiler_symlinks",
    "start_server",
    "zero_stats",
    "show_stats",
]
