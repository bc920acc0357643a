"""
Restore command implementation.

Installs the compiler cache tool when the install policy asks for it,
restores the cache directory and configures the tool for the build.
"""

import logging
import sys
import time
from pathlib import Path
from typing import Optional

from ccachekit.caching.configurator import configure, zero_stats
from ccachekit.caching.keys import build_keys
from ccachekit.caching.restore import restore_cache
from ccachekit.caching.store import BlobStore, DirectoryBlobStore
from ccachekit.ci.environment import log_group
from ccachekit.cli.commands.common import load_command_inputs, state_manager_for
from ccachekit.config.inputs import ActionInputs
from ccachekit.core.directory import get_cache_dir
from ccachekit.core.exceptions import UnsupportedPlatformError
from ccachekit.core.platform import Platform, PlatformInfo, detect_os
from ccachekit.core.state import StateManager
from ccachekit.packages.catalog import Catalog
from ccachekit.packages.strategy import InstallEngine

logger = logging.getLogger(__name__)


def _host_os(platform_info: Optional[PlatformInfo]) -> Optional[Platform]:
    if platform_info is not None:
        return platform_info.platform
    try:
        return detect_os()
    except UnsupportedPlatformError as e:
        logger.debug(f"Configuring for an unrecognised platform: {e}")
        return None


def restore_phase(
    inputs: ActionInputs,
    state_manager: StateManager,
    platform_info: Optional[PlatformInfo] = None,
    catalog: Optional[Catalog] = None,
    store: Optional[BlobStore] = None,
    cache_dir: Optional[Path] = None,
    install_dir: Optional[Path] = None,
) -> Optional[str]:
    """
    Run install, restore and configure.

    Args:
        inputs: Parsed options
        state_manager: Run state for this job (reset at the start)
        platform_info: Host platform (detected only when something needs it)
        catalog: Package catalog (bundled catalog when omitted)
        store: Blob store (directory store at ``inputs.store_dir`` when omitted)
        cache_dir: Cache directory (``<workspace>/.<variant>`` when omitted)
        install_dir: Directory release binaries are installed into

    Returns:
        The restored cache key, or None
    """
    variant = inputs.variant
    cache_dir = cache_dir or get_cache_dir(variant.value)
    store = store or DirectoryBlobStore(inputs.store_dir)

    state_manager.reset()
    state_manager.record(
        start_timestamp=int(time.time() * 1000),
        variant=variant.value,
        evict_old_files=inputs.evict_old_files,
        should_save=inputs.save,
        append_timestamp=inputs.append_timestamp,
    )

    with log_group(f"Install {variant.value}"):
        engine = InstallEngine(
            variant,
            platform_info,
            catalog=catalog,
            update_package_index=inputs.update_package_index,
            install_dir=install_dir,
        )
        engine.run(inputs.install)

    keys = build_keys(
        variant.value, inputs.key, inputs.restore_keys, inputs.append_timestamp
    )
    state_manager.record(primary_key=keys.primary)

    with log_group("Restore cache"):
        restored_key = restore_cache(
            store, [cache_dir], keys, state_manager, enabled=inputs.restore
        )

    host_os = _host_os(platform_info)
    platform_name = host_os.value if host_os else sys.platform
    with log_group(f"Configure {variant.value}, {platform_name}"):
        configure(
            variant,
            host_os,
            cache_dir,
            inputs.max_size,
            create_symlink=inputs.create_symlink,
        )
        zero_stats(variant)

    return restored_key


def run(args) -> int:
    """
    Run the restore command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    try:
        inputs = load_command_inputs(args)
        restore_phase(inputs, state_manager_for(args))
    except Exception as e:
        logger.error(f"Restoring cache failed: {e}")
        logger.debug("Restore failure details", exc_info=True)
        return 1

    return 0
