"""
Download, extraction and verification of release binaries.

``fetch_and_extract`` turns a package descriptor into a verified executable
at a destination path:

1. Build the download URL from the descriptor.
2. Download the archive into a fresh temporary working directory.
3. Extract the one executable member to the destination.
4. Verify its SHA-256 against the catalog.
5. Mark it executable on POSIX targets.
6. Remove the working directory, whatever happened.

Usage:
    from pathlib import Path
    from ccachekit.packages.extractor import fetch_and_extract
    from ccachekit.packages.resolver import resolve

    fetch_and_extract(resolve("sccache"), Path("/usr/local/bin/sccache"))
"""

import logging
from pathlib import Path
from typing import Union

from ccachekit.core.download import download_file
from ccachekit.core.exceptions import IntegrityError
from ccachekit.core.filesystem import extract_member, make_executable, temporary_directory
from ccachekit.core.platform import Platform
from ccachekit.core.verification import verify_sha256
from ccachekit.packages.catalog import PackageDescriptor

logger = logging.getLogger(__name__)


def fetch_and_extract(
    descriptor: PackageDescriptor, destination: Union[str, Path]
) -> Path:
    """
    Install a descriptor's executable at ``destination``.

    Args:
        descriptor: Package to install
        destination: Final path of the executable

    Returns:
        Path to the installed executable

    Raises:
        IntegrityError: If no checksum is recorded or the checksum does not match
        DownloadError: If the archive cannot be downloaded
        ArchiveExtractionError: If the executable is not in the archive
    """
    destination = Path(destination)

    if not descriptor.checksum:
        raise IntegrityError(
            f"No SHA256 recorded for {descriptor.package_name}; "
            "refusing to install an unverified binary"
        )

    url = descriptor.download_url
    logger.info(f"Installing {descriptor.package_name} to {destination}")

    with temporary_directory(prefix=f"ccachekit_{descriptor.variant.value}_") as work_dir:
        archive_path = work_dir / descriptor.archive_filename
        download_file(url, archive_path)

        logger.info(f"Extracting {descriptor.member_path}")
        extract_member(archive_path, descriptor.member_path, destination, work_dir)

        try:
            verify_sha256(destination, descriptor.checksum)
        except IntegrityError:
            destination.unlink(missing_ok=True)
            raise

    if descriptor.platform is not Platform.WINDOWS:
        make_executable(destination)
        logger.debug(f"Set executable permissions: {destination}")

    logger.info(f"Installed {descriptor.variant.value} {descriptor.version}")
    return destination


__all__ = ["fetch_and_extract"]
