"""
Pytest configuration and shared fixtures for ccachekit tests.
"""

import hashlib
import io
import os
import tarfile
import zipfile
from pathlib import Path

import pytest

from ccachekit.config.inputs import OPTION_DEFAULTS
from ccachekit.core.platform import Architecture, Platform, PlatformInfo, clear_platform_cache
from ccachekit.core.state import StateManager


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (requires --integration)",
    )
    config.addinivalue_line("markers", "e2e: end-to-end tests of the restore and save phases")


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Isolate every test from the runner environment it happens to run in."""
    for name in ("GITHUB_ACTIONS", "GITHUB_PATH", "GITHUB_OUTPUT", "RUNNER_TEMP"):
        monkeypatch.delenv(name, raising=False)
    for name in OPTION_DEFAULTS:
        monkeypatch.delenv(f"INPUT_{name.upper()}", raising=False)
    monkeypatch.setenv("PATH", os.environ.get("PATH", ""))
    monkeypatch.setenv("GITHUB_WORKSPACE", str(tmp_path / "workspace"))
    clear_platform_cache()
    yield
    clear_platform_cache()


@pytest.fixture
def linux_x86() -> PlatformInfo:
    return PlatformInfo(Platform.LINUX, Architecture.X86_64, "ubuntu")


@pytest.fixture
def state_manager(tmp_path: Path) -> StateManager:
    return StateManager(tmp_path / "runner" / "ccachekit" / "state.json")


@pytest.fixture
def github_files(tmp_path: Path, monkeypatch):
    """Point GITHUB_PATH / GITHUB_OUTPUT at files under tmp_path."""
    path_file = tmp_path / "github_path"
    output_file = tmp_path / "github_output"
    path_file.write_text("")
    output_file.write_text("")
    monkeypatch.setenv("GITHUB_PATH", str(path_file))
    monkeypatch.setenv("GITHUB_OUTPUT", str(output_file))
    return path_file, output_file


@pytest.fixture
def make_tar_gz():
    """Factory writing a .tar.gz whose members are {name: bytes}."""
    return _make_tar_gz


@pytest.fixture
def make_zip():
    """Factory writing a .zip whose members are {name: bytes}."""
    return _make_zip


@pytest.fixture
def sha256_of():
    return _sha256_of


def _make_tar_gz(path: Path, members: dict) -> Path:
    with tarfile.open(path, "w:gz") as tar:
        for name, data in members.items():
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = 0o644
            tar.addfile(info, io.BytesIO(data))
    return path


def _make_zip(path: Path, members: dict) -> Path:
    with zipfile.ZipFile(path, "w") as zf:
        for name, data in members.items():
            zf.writestr(name, data)
    return path


def _sha256_of(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()
