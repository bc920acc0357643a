"""
HTTP download for release archives.

Downloads are streamed to disk with ``requests``. Failed transfers are not
retried.
"""

import logging
import time
from pathlib import Path
from typing import Union

import requests
from requests.exceptions import RequestException

from ccachekit.core.exceptions import DownloadError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


def download_file(
    url: str,
    destination: Union[str, Path],
    timeout: int = 30,
) -> Path:
    """
    Download a URL to a local file.

    Redirects are followed (GitHub release assets redirect to a CDN).

    Args:
        url: URL to download from
        destination: Local path to save file
        timeout: Connect/read timeout in seconds for each network operation

    Returns:
        Path to downloaded file

    Raises:
        DownloadError: If the request fails or returns an error status
        ValueError: If URL or destination is empty

    Example:
        >>> download_file(
        ...     "https://github.com/mozilla/sccache/releases/download/v0.12.0/"
        ...     "sccache-v0.12.0-x86_64-unknown-linux-musl.tar.gz",
        ...     Path("/tmp/work/sccache.tar.gz"),
        ... )
    """
    if not url:
        raise ValueError("URL cannot be empty")

    if not destination:
        raise ValueError("Destination path cannot be empty")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)

    logger.info(f"Downloading {url}")
    start_time = time.time()
    downloaded = 0

    try:
        with requests.get(
            url, stream=True, timeout=timeout, allow_redirects=True
        ) as response:
            response.raise_for_status()

            with open(destination, "wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
                        downloaded += len(chunk)

    except RequestException as e:
        destination.unlink(missing_ok=True)
        raise DownloadError(f"Failed to download {url}: {e}") from e

    elapsed = time.time() - start_time
    logger.info(
        f"Downloaded {downloaded / 1024 / 1024:.1f} MB to {destination} "
        f"in {elapsed:.1f}s"
    )
    return destination


__all__ = ["download_file"]
