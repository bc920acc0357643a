"""Restore client: restore the compiler cache directory from a blob store."""

import logging
from pathlib import Path
from typing import Optional, Sequence

from ccachekit.caching.keys import CacheKeys
from ccachekit.caching.store import BlobStore
from ccachekit.ci.environment import set_output
from ccachekit.core.state import StateManager

logger = logging.getLogger(__name__)


def restore_cache(
    store: BlobStore,
    paths: Sequence[Path],
    keys: CacheKeys,
    state_manager: StateManager,
    enabled: bool = True,
) -> Optional[str]:
    """
    Restore the cache directories and record the outcome.

    Args:
        store: Blob store to restore from
        paths: Cache directories
        keys: Primary key and fallback prefixes
        state_manager: Run state the outcome is recorded in
        enabled: False skips restoring entirely (``cache_hit`` stays unset)

    Returns:
        The restored key, or None on a miss or when skipped

    Raises:
        StoreError: If a matching entry cannot be restored
    """
    if not enabled:
        logger.info("Restore set to false, skip restoring cache.")
        return None

    restored_key = store.restore(list(paths), keys.primary, keys.fallbacks)
    cache_hit = restored_key is not None

    state_manager.record(restored_key=restored_key, cache_hit=cache_hit)
    set_output("cache-hit", cache_hit)
    set_output("restored-key", restored_key or "")

    if cache_hit:
        logger.info(f'Restored from cache key "{restored_key}".')
    else:
        logger.info("No cache found.")

    return restored_key


__all__ = ["restore_cache"]
