"""
Fixtures for end-to-end tests.

Provides a workspace, a blob store and a catalog whose sccache entry points
at an archive served by ``responses``.
"""

import pytest

from ccachekit.caching.store import DirectoryBlobStore
from ccachekit.core.platform import Architecture, Platform
from ccachekit.packages.catalog import Catalog, PackageDescriptor, Variant

SCCACHE_BINARY = b"#!/bin/sh\necho sccache\n"


@pytest.fixture
def temp_workspace(tmp_path):
    """Create the workspace directory GITHUB_WORKSPACE points at."""
    workspace = tmp_path / "workspace"
    workspace.mkdir(parents=True, exist_ok=True)
    return workspace


@pytest.fixture
def blob_store(tmp_path):
    return DirectoryBlobStore(tmp_path / "store")


@pytest.fixture
def sccache_release(tmp_path, make_tar_gz, sha256_of):
    """
    Build a fake sccache release archive and a catalog pinning its checksum.

    Returns:
        (catalog, descriptor, archive bytes)
    """
    descriptor = PackageDescriptor(
        Variant.SCCACHE,
        Platform.LINUX,
        Architecture.X86_64,
        "v0.12.0",
        sha256_of(SCCACHE_BINARY),
    )
    archive = make_tar_gz(
        tmp_path / descriptor.archive_filename,
        {descriptor.member_path: SCCACHE_BINARY},
    )
    return Catalog([descriptor]), descriptor, archive.read_bytes()
