"""
File system utilities for ccachekit.

This module provides the file operations the installer depends on:
- Single-member archive extraction (zip, tar with any compression)
- Safe file operations (atomic writes, safe deletion)
- Temporary working directories with guaranteed cleanup
- Executable permission handling

All operations handle platform differences transparently.
"""

import os
import shutil
import tarfile
import tempfile
import zipfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Union

from ccachekit.core.exceptions import (
    ArchiveExtractionError,
    CcacheKitError,
    InsecureArchiveError,
)

IS_WINDOWS = os.name == "nt"


class FilesystemError(CcacheKitError):
    """Base exception for filesystem operations."""

    pass


# ============================================================================
# Path Utilities
# ============================================================================


def is_relative_to(path: Path, parent: Path) -> bool:
    """
    Check if path is relative to parent.

    Example:
        >>> is_relative_to(Path('/a/b/c'), Path('/a'))
        True
        >>> is_relative_to(Path('/a/b'), Path('/c'))
        False
    """
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


# ============================================================================
# Archive Extraction
# ============================================================================


def validate_archive_path(path: str, destination: Path) -> None:
    """
    Validate that an archive member path is safe to extract.

    Prevents directory traversal attacks (e.g., paths containing '../').

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    member_path = (destination / path).resolve()

    if not is_relative_to(member_path, destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{path}' attempts directory traversal. "
            "This is a security risk and extraction has been blocked."
        )


def _normalize_member_name(name: str) -> str:
    name = name.replace("\\", "/")
    while name.startswith("./"):
        name = name[2:]
    return name


def is_zip_archive(archive_path: Union[str, Path]) -> bool:
    """Check whether an archive is handled as zip (by extension)."""
    return Path(archive_path).name.lower().endswith(".zip")


def extract_member(
    archive_path: Union[str, Path],
    member: str,
    destination: Union[str, Path],
    work_dir: Optional[Union[str, Path]] = None,
) -> Path:
    """
    Extract exactly one member of an archive to a destination file.

    Zip archives are extracted (member only) into ``work_dir`` and the file is
    copied to ``destination``. Tar archives, compressed or not, stream the
    member directly into ``destination`` without extracting anything else.

    Args:
        archive_path: Path to the archive file
        member: Member path inside the archive (e.g. 'ccache-4.12.2-darwin/ccache')
        destination: File path the member is written to
        work_dir: Scratch directory for zip extraction (defaults to the archive's directory)

    Returns:
        Path to the extracted file

    Raises:
        ArchiveExtractionError: If the archive cannot be read or lacks the member
        InsecureArchiveError: If the member path escapes the extraction directory
    """
    archive_path = Path(archive_path)
    destination = Path(destination)
    work_dir = Path(work_dir) if work_dir else archive_path.parent
    member = _normalize_member_name(member)

    if not archive_path.exists():
        raise ArchiveExtractionError(f"Archive not found: {archive_path}")

    destination.parent.mkdir(parents=True, exist_ok=True)

    try:
        if is_zip_archive(archive_path):
            _extract_zip_member(archive_path, member, destination, work_dir)
        else:
            _extract_tar_member(archive_path, member, destination)
    except ArchiveExtractionError:
        raise
    except (tarfile.TarError, zipfile.BadZipFile, OSError) as e:
        raise ArchiveExtractionError(
            f"Failed to extract '{member}' from {archive_path}: {e}"
        ) from e

    return destination


def _extract_zip_member(
    archive_path: Path, member: str, destination: Path, work_dir: Path
) -> None:
    """Extract a ZIP member to work_dir, then copy it out."""
    with zipfile.ZipFile(archive_path, "r") as zf:
        names = {_normalize_member_name(n): n for n in zf.namelist()}
        if member not in names:
            raise ArchiveExtractionError(
                f"Member '{member}' not found in {archive_path.name}"
            )

        validate_archive_path(member, work_dir)
        extracted = Path(zf.extract(names[member], work_dir))

    shutil.copyfile(extracted, destination)


def _extract_tar_member(archive_path: Path, member: str, destination: Path) -> None:
    """Stream a single tar member to destination."""
    with tarfile.open(archive_path, "r:*") as tar:
        info = None
        for candidate in tar:
            if _normalize_member_name(candidate.name) == member:
                info = candidate
                break

        if info is None or not info.isfile():
            raise ArchiveExtractionError(
                f"Member '{member}' not found in {archive_path.name}"
            )

        source = tar.extractfile(info)
        if source is None:
            raise ArchiveExtractionError(f"Cannot read '{member}' from {archive_path}")

        with source, open(destination, "wb") as out:
            shutil.copyfileobj(source, out)


# ============================================================================
# Safe File Operations
# ============================================================================


def atomic_write(
    file_path: Union[str, Path], content: Union[str, bytes], encoding: str = "utf-8"
) -> None:
    """
    Write file atomically using temp file + rename.

    If the write fails, the original file (if any) remains unchanged.

    Example:
        >>> atomic_write('state.json', '{"key": "value"}')
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    # Temp file in same directory (ensures same filesystem)
    temp_fd, temp_path_str = tempfile.mkstemp(
        dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp"
    )
    temp_path = Path(temp_path_str)

    try:
        if isinstance(content, str):
            with open(temp_fd, "w", encoding=encoding) as f:
                f.write(content)
        else:
            with open(temp_fd, "wb") as f:
                f.write(content)

        temp_path.replace(file_path)

    except Exception:
        temp_path.unlink(missing_ok=True)
        raise


def safe_rmtree(path: Union[str, Path]) -> None:
    """
    Remove a directory tree; a missing path is a no-op.

    Args:
        path: Directory to remove

    Raises:
        FilesystemError: If deletion fails
    """
    path = Path(path).resolve()

    if not path.exists():
        return

    if not path.is_dir():
        raise FilesystemError(f"Path is not a directory: {path}")

    try:
        if IS_WINDOWS:

            def handle_remove_readonly(func, path, exc):
                """Error handler for Windows read-only files."""
                if not os.access(path, os.W_OK):
                    os.chmod(path, 0o777)
                    func(path)
                else:
                    raise

            shutil.rmtree(path, onerror=handle_remove_readonly)
        else:
            shutil.rmtree(path)

    except Exception as e:
        raise FilesystemError(f"Failed to remove directory '{path}': {e}") from e


def make_executable(path: Union[str, Path]) -> None:
    """Set owner/group/other execute bits on a file (mode 0o755 at least)."""
    path = Path(path)
    mode = path.stat().st_mode
    os.chmod(path, mode | 0o755)


# ============================================================================
# Temporary Directory Management
# ============================================================================


@contextmanager
def temporary_directory(prefix: str = "ccachekit_") -> Iterator[Path]:
    """
    Context manager for a temporary directory that is always removed.

    The directory is removed on normal exit and when the body raises.

    Example:
        >>> with temporary_directory() as tmp:
        ...     (tmp / 'file.txt').write_text('test')
    """
    temp_dir = Path(tempfile.mkdtemp(prefix=prefix))

    try:
        yield temp_dir
    finally:
        if temp_dir.exists():
            safe_rmtree(temp_dir)


__all__ = [
    "FilesystemError",
    "is_relative_to",
    "validate_archive_path",
    "is_zip_archive",
    "extract_member",
    "atomic_write",
    "safe_rmtree",
    "make_executable",
    "temporary_directory",
]
