"""
Cache key construction.

Keys are namespaced by variant so ccache and sccache caches never mix. When
timestamps are appended, the restore phase only knows the key up to the
separator: the keys built here end with a literal ``-`` and the save phase
completes them with the time of the save. Every saved key therefore starts
with the restore-time key, which makes the latter a working prefix for
fallback matching.

Example:
    >>> keys = build_keys("ccache", "linux-gcc", ["linux"], append_timestamp=True)
    >>> keys.primary
    'ccache-linux-gcc-'
    >>> keys.fallbacks
    ['ccache-linux-']
"""

from dataclasses import dataclass, field
from typing import Iterable, List

TIMESTAMP_MARKER = "-"


@dataclass(frozen=True)
class CacheKeys:
    """
    Keys used to restore a cache.

    Attributes:
        primary: Exact key tried first (also the prefix the cache is saved under)
        fallbacks: Prefixes tried in order when the primary key does not match
    """

    primary: str
    fallbacks: List[str] = field(default_factory=list)


def parse_restore_keys(text: str) -> List[str]:
    """Split newline separated restore keys, dropping blank entries."""
    if not text:
        return []
    return [line.strip() for line in text.split("\n") if line.strip()]


def build_keys(
    variant: str,
    primary: str,
    restore_keys: Iterable[str] = (),
    append_timestamp: bool = True,
) -> CacheKeys:
    """
    Build the namespaced primary key and fallback prefixes.

    Args:
        variant: Compiler cache tool, used as the namespace
        primary: User supplied fingerprint (may be empty)
        restore_keys: User supplied fallback fingerprints
        append_timestamp: Whether saved keys get a timestamp suffix

    Returns:
        CacheKeys with the namespaced values
    """
    prefix = f"{variant}-"
    marker = TIMESTAMP_MARKER if append_timestamp else ""

    primary_key = f"{prefix}{primary}{marker}" if primary else prefix

    fallbacks = []
    for key in restore_keys:
        key = key.strip()
        if key:
            fallbacks.append(f"{prefix}{key}{marker}")

    return CacheKeys(primary=primary_key, fallbacks=fallbacks)


__all__ = ["CacheKeys", "TIMESTAMP_MARKER", "parse_restore_keys", "build_keys"]
