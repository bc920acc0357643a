"""
Unit tests for fetch_and_extract.

Downloads are mocked with responses; archives are built on the fly.
"""

import sys
from contextlib import contextmanager
from unittest.mock import patch

import pytest
import responses

from ccachekit.core import filesystem
from ccachekit.core.exceptions import (
    ArchiveExtractionError,
    DownloadError,
    IntegrityError,
)
from ccachekit.core.platform import Architecture, Platform
from ccachekit.packages.catalog import PackageDescriptor, Variant
from ccachekit.packages.extractor import fetch_and_extract

BINARY = b"\x7fELF sccache"


@pytest.fixture
def work_dirs():
    """Record the temporary working directories fetch_and_extract uses."""
    created = []

    @contextmanager
    def recording(prefix="ccachekit_"):
        with filesystem.temporary_directory(prefix=prefix) as path:
            created.append(path)
            yield path

    with patch("ccachekit.packages.extractor.temporary_directory", recording):
        yield created


def sccache_linux(checksum):
    return PackageDescriptor(
        Variant.SCCACHE, Platform.LINUX, Architecture.X86_64, "v0.12.0", checksum
    )


def ccache_windows(checksum):
    return PackageDescriptor(
        Variant.CCACHE, Platform.WINDOWS, Architecture.X86_64, "4.12.2", checksum
    )


def serve(descriptor, body):
    responses.add(responses.GET, descriptor.download_url, body=body, status=200)


class TestFetchAndExtract:
    """Test the download, extract, verify pipeline."""

    @responses.activate
    def test_tar_gz_success(self, tmp_path, make_tar_gz, sha256_of, work_dirs):
        """Test a verified tar.gz member lands at the destination."""
        descriptor = sccache_linux(sha256_of(BINARY))
        archive = make_tar_gz(
            tmp_path / "a.tar.gz",
            {descriptor.member_path: BINARY, f"{descriptor.package_name}/LICENSE": b"l"},
        )
        serve(descriptor, archive.read_bytes())

        destination = tmp_path / "bin" / "sccache"
        result = fetch_and_extract(descriptor, destination)

        assert result == destination
        assert destination.read_bytes() == BINARY
        assert not (tmp_path / "bin" / "LICENSE").exists()
        assert len(work_dirs) == 1
        assert not work_dirs[0].exists()
        if sys.platform != "win32":
            assert destination.stat().st_mode & 0o755 == 0o755

    @responses.activate
    def test_zip_success(self, tmp_path, make_zip, sha256_of, work_dirs):
        """Test ccache Windows zip archives."""
        descriptor = ccache_windows(sha256_of(b"MZ ccache"))
        archive = make_zip(tmp_path / "a.zip", {descriptor.member_path: b"MZ ccache"})
        serve(descriptor, archive.read_bytes())

        destination = tmp_path / "bin" / "ccache.exe"
        fetch_and_extract(descriptor, destination)

        assert destination.read_bytes() == b"MZ ccache"
        assert not work_dirs[0].exists()

    @responses.activate
    def test_checksum_mismatch(self, tmp_path, make_tar_gz, work_dirs):
        """Test a mismatch is fatal, deletes the file and cleans up."""
        descriptor = sccache_linux("0" * 64)
        archive = make_tar_gz(tmp_path / "a.tar.gz", {descriptor.member_path: BINARY})
        serve(descriptor, archive.read_bytes())

        destination = tmp_path / "bin" / "sccache"
        with pytest.raises(IntegrityError) as exc_info:
            fetch_and_extract(descriptor, destination)

        assert exc_info.value.expected == "0" * 64
        assert not destination.exists()
        assert not work_dirs[0].exists()
        assert len(responses.calls) == 1

    def test_missing_checksum_refused_before_download(self, tmp_path, work_dirs):
        """Test descriptors without a checksum never reach the network."""
        descriptor = sccache_linux(None)

        with responses.RequestsMock() as rsps:
            with pytest.raises(IntegrityError, match="No SHA256 recorded"):
                fetch_and_extract(descriptor, tmp_path / "sccache")
            assert len(rsps.calls) == 0

        assert work_dirs == []

    @responses.activate
    def test_member_missing(self, tmp_path, make_tar_gz, sha256_of, work_dirs):
        """Test an archive without the executable."""
        descriptor = sccache_linux(sha256_of(BINARY))
        archive = make_tar_gz(tmp_path / "a.tar.gz", {"other/sccache": BINARY})
        serve(descriptor, archive.read_bytes())

        with pytest.raises(ArchiveExtractionError):
            fetch_and_extract(descriptor, tmp_path / "bin" / "sccache")

        assert not work_dirs[0].exists()

    @responses.activate
    def test_download_failure(self, tmp_path, sha256_of, work_dirs):
        """Test HTTP failures clean up the working directory."""
        descriptor = sccache_linux(sha256_of(BINARY))
        responses.add(responses.GET, descriptor.download_url, status=404)

        with pytest.raises(DownloadError):
            fetch_and_extract(descriptor, tmp_path / "bin" / "sccache")

        assert not work_dirs[0].exists()
