"""
Save phase.

Runs at the end of the job, in a separate process from the restore phase.
Everything it needs was recorded in the run state by the restore phase.

Example:
    >>> from ccachekit.caching.save import save_cache
    >>> save_cache(DirectoryBlobStore(store_dir), StateManager(state_file))
    'ccache-linux-2024-01-01T00:00:00.000Z'
"""

import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Sequence

from ccachekit.caching.configurator import show_stats
from ccachekit.caching.store import BlobStore
from ccachekit.core.directory import get_cache_dir
from ccachekit.core.exceptions import StateError
from ccachekit.core.process import run_command
from ccachekit.core.state import RunState, StateManager
from ccachekit.packages.catalog import VARIANT_TRAITS, Variant
from ccachekit.packages.resolver import parse_variant

logger = logging.getLogger(__name__)

EVICT_JOB = "job"


def format_timestamp(moment: datetime) -> str:
    """
    Format a time as UTC ISO-8601 with milliseconds.

    Example:
        >>> format_timestamp(datetime(2024, 1, 1, tzinfo=timezone.utc))
        '2024-01-01T00:00:00.000Z'
    """
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def save_key(state: RunState, now: Optional[datetime] = None) -> str:
    """
    Complete the primary key recorded by the restore phase.

    Raises:
        StateError: If no primary key was recorded
    """
    if state.primary_key is None:
        raise StateError("No primary key recorded. Did the restore phase run?")

    if not state.append_timestamp:
        return state.primary_key

    now = now or datetime.now(timezone.utc)
    return state.primary_key + format_timestamp(now)


def evict_age(evict_old_files: str, start_timestamp: Optional[int]) -> str:
    """
    Translate the evict-old-files option into a ccache age.

    ``job`` becomes the job's age in seconds; anything else is passed through.
    """
    if evict_old_files != EVICT_JOB:
        return evict_old_files

    if start_timestamp is None:
        raise StateError("No start timestamp recorded; cannot evict by job age")

    age = int(time.time() * 1000 - start_timestamp) // 1000
    return f"{age}s"


def evict_old_files(variant: Variant, state: RunState) -> None:
    """Evict cache entries older than the configured age where the tool supports it."""
    if not state.evict_old_files:
        return

    if not VARIANT_TRAITS[variant].supports_eviction:
        logger.warning(f"evict-old-files is not supported for {variant.value}, ignoring")
        return

    age = evict_age(state.evict_old_files, state.start_timestamp)
    run_command([variant.value, "--evict-older-than", age])


def _is_empty(path: Path) -> bool:
    return not path.is_dir() or not any(path.iterdir())


def save_cache(
    store: BlobStore,
    state_manager: StateManager,
    paths: Optional[Sequence[Path]] = None,
    now: Optional[datetime] = None,
) -> Optional[str]:
    """
    Run the save phase.

    Args:
        store: Blob store to save into
        state_manager: Run state written by the restore phase
        paths: Cache directories (defaults to the workspace cache directory)
        now: Save time (defaults to the current time)

    Returns:
        The key the cache was saved under, or None if nothing was saved

    Raises:
        StateError: If the restore phase left no usable state
        CommandError: If a tool command fails
        StoreError: If the cache cannot be written
    """
    state = state_manager.load()
    if state.variant is None:
        raise StateError("No run state recorded. Did the restore phase run?")

    if state.should_save is False:
        logger.info("Not saving cache because 'save' is set to 'false'.")
        return None

    variant = parse_variant(state.variant)
    paths = [Path(p) for p in paths] if paths else [get_cache_dir(variant.value)]

    evict_old_files(variant, state)
    show_stats(variant)

    if all(_is_empty(p) for p in paths):
        logger.info("Not saving cache because no objects are cached.")
        return None

    key = save_key(state, now)
    if not store.save(paths, key):
        return None

    logger.info(f'Saved cache with key "{key}".')
    return key


__all__ = [
    "format_timestamp",
    "save_key",
    "evict_age",
    "evict_old_files",
    "save_cache",
]
