"""
SHA-256 verification of installed binaries.

Checksums are compared in constant time, and a mismatch is always fatal.
"""

import hashlib
import logging
import secrets
from pathlib import Path

from ccachekit.core.exceptions import IntegrityError

logger = logging.getLogger(__name__)


def compute_file_hash(file_path: Path, algorithm: str = "sha256") -> str:
    """
    Compute cryptographic hash of file.

    Args:
        file_path: Path to file
        algorithm: Hash algorithm name understood by :mod:`hashlib`

    Returns:
        Lowercase hex digest

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If algorithm is not supported
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    try:
        hasher = hashlib.new(algorithm.lower())
    except ValueError:
        raise ValueError(f"Unsupported hash algorithm: {algorithm}") from None

    with open(file_path, "rb") as f:
        while chunk := f.read(8192):
            hasher.update(chunk)

    return hasher.hexdigest()


def _constant_time_compare(a: str, b: str) -> bool:
    return secrets.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


def verify_sha256(file_path: Path, expected_sha256: str) -> str:
    """
    Verify a file's SHA-256 against an expected value.

    Args:
        file_path: File to check
        expected_sha256: Expected hex digest (case-insensitive)

    Returns:
        The computed digest

    Raises:
        IntegrityError: If the digests differ; the message names both values
    """
    expected = expected_sha256.strip().lower()
    actual = compute_file_hash(file_path, "sha256")

    if not _constant_time_compare(actual, expected):
        raise IntegrityError(
            f"SHA256 of {file_path} is {actual}, expected {expected}",
            actual=actual,
            expected=expected,
        )

    logger.info(f"SHA256 verified: {file_path} ({actual})")
    return actual


__all__ = ["compute_file_hash", "verify_sha256"]
