"""
Blob stores for compiler cache directories.

A blob store keeps one archive of the cache directories per key. Restoring
tries the exact primary key first and then falls back to prefix matches, so
a cache saved as ``ccache-linux-2024-01-01T00:00:00.000Z`` is found by the
restore key ``ccache-linux-``.

Usage:
    from ccachekit.caching.store import DirectoryBlobStore

    store = DirectoryBlobStore(Path('/mnt/ci-cache'))
    matched = store.restore([Path('.ccache')], 'ccache-linux-', ['ccache-'])
    ...
    store.save([Path('.ccache')], 'ccache-linux-2024-01-01T00:00:00.000Z')
"""

import logging
import tarfile
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional, Sequence
from urllib.parse import quote, unquote

from ccachekit.core.exceptions import StoreError
from ccachekit.core.filesystem import validate_archive_path

logger = logging.getLogger(__name__)

ARCHIVE_SUFFIX = ".tar.gz"


class BlobStore(ABC):
    """
    Key-addressed storage for cache directories.

    Subclasses implement :meth:`restore` and :meth:`save`.
    """

    @abstractmethod
    def restore(
        self, paths: Sequence[Path], primary_key: str, fallback_keys: Sequence[str]
    ) -> Optional[str]:
        """
        Restore paths from the best matching entry.

        Args:
            paths: Directories to restore
            primary_key: Key tried first, exactly and then as a prefix
            fallback_keys: Prefixes tried in order afterwards

        Returns:
            The key that was restored, or None on a miss

        Raises:
            StoreError: If a matching entry cannot be restored
        """
        pass

    @abstractmethod
    def save(self, paths: Sequence[Path], key: str) -> bool:
        """
        Save paths under a key.

        Returns:
            True if an entry was written, False if the key already exists

        Raises:
            StoreError: If the entry cannot be written
        """
        pass


class DirectoryBlobStore(BlobStore):
    """
    Blob store backed by a local (or mounted) directory.

    Each key is one ``.tar.gz`` file whose name is the URL-quoted key. Among
    several entries matching the same prefix, the most recently written one
    wins.

    Attributes:
        root: Directory holding the archives
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    def _archive_path(self, key: str) -> Path:
        return self.root / f"{quote(key, safe='')}{ARCHIVE_SUFFIX}"

    def keys(self) -> List[str]:
        """List stored keys, newest first."""
        if not self.root.is_dir():
            return []

        archives = [
            p for p in self.root.iterdir() if p.is_file() and p.name.endswith(ARCHIVE_SUFFIX)
        ]
        archives.sort(key=lambda p: p.stat().st_mtime, reverse=True)
        return [unquote(p.name[: -len(ARCHIVE_SUFFIX)]) for p in archives]

    def find(self, primary_key: str, fallback_keys: Sequence[str] = ()) -> Optional[str]:
        """Return the key a restore would use, without restoring."""
        stored = self.keys()
        if primary_key in stored:
            return primary_key

        for prefix in [primary_key, *fallback_keys]:
            for key in stored:
                if key.startswith(prefix):
                    return key
        return None

    def restore(
        self, paths: Sequence[Path], primary_key: str, fallback_keys: Sequence[str]
    ) -> Optional[str]:
        key = self.find(primary_key, fallback_keys)
        if key is None:
            logger.debug(f"No entry in {self.root} matches '{primary_key}'")
            return None

        archive = self._archive_path(key)
        targets: Dict[str, Path] = {Path(p).name: Path(p).parent for p in paths}

        try:
            with tarfile.open(archive, "r:gz") as tar:
                for member in tar.getmembers():
                    top = member.name.replace("\\", "/").split("/", 1)[0]
                    parent = targets.get(top)
                    if parent is None:
                        logger.debug(f"Skipping unexpected member {member.name}")
                        continue

                    validate_archive_path(member.name, parent)
                    parent.mkdir(parents=True, exist_ok=True)
                    if hasattr(tarfile, "data_filter"):
                        tar.extract(member, parent, filter="data")
                    else:
                        tar.extract(member, parent)
        except (tarfile.TarError, OSError) as e:
            raise StoreError(f"Failed to restore '{key}' from {archive}: {e}") from e

        logger.debug(f"Restored {archive}")
        return key

    def save(self, paths: Sequence[Path], key: str) -> bool:
        archive = self._archive_path(key)
        if archive.exists():
            logger.warning(f"Cache entry '{key}' already exists, not saving")
            return False

        paths = [Path(p) for p in paths]
        missing = [str(p) for p in paths if not p.exists()]
        if missing:
            raise StoreError(f"Cannot save missing path(s): {', '.join(missing)}")

        self.root.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(dir=self.root, prefix=".save.", suffix=".tmp")
        temp_path = Path(temp_name)

        try:
            with open(fd, "wb") as f, tarfile.open(fileobj=f, mode="w:gz") as tar:
                for path in paths:
                    tar.add(path, arcname=path.name)
            temp_path.replace(archive)
        except (tarfile.TarError, OSError) as e:
            temp_path.unlink(missing_ok=True)
            raise StoreError(f"Failed to save '{key}' to {archive}: {e}") from e

        logger.debug(f"Saved {archive}")
        return True


__all__ = ["BlobStore", "DirectoryBlobStore"]
