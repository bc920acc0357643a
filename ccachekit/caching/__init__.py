"""
Compiler cache management for ccachekit.

Modules:
    keys: Build namespaced cache keys
    store: Blob store contract and the directory-backed store
    restore: Restore the cache directory and record the outcome
    configurator: Configure the tool, start its server, zero statistics
    save: Evict, report statistics and save under the recorded key
"""

from .configurator import configure, show_stats, zero_stats
from .keys import CacheKeys, build_keys, parse_restore_keys
from .restore import restore_cache
from .save import save_cache, save_key
from .store import BlobStore, DirectoryBlobStore

__all__ = [
    "configure",
    "show_stats",
    "zero_stats",
    "CacheKeys",
    "build_keys",
    "parse_restore_keys",
    "restore_cache",
    "save_cache",
    "save_key",
    "BlobStore",
    "DirectoryBlobStore",
]
