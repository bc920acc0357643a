"""
Directory layout for ccachekit.

Directory Structure:
    Workspace (``$GITHUB_WORKSPACE`` or the current directory):
        - .ccache/ or .sccache/ : Compiler cache directory that is restored and saved
        - .ccachekit/state.json : Run state when no runner temp directory exists

    Runner temp (``$RUNNER_TEMP``):
        - ccachekit/state.json  : Run state shared between restore and save

    Global (~/.ccachekit/ or %USERPROFILE%\\.ccachekit\\):
        - store/                : Default directory blob store
"""

import os
from pathlib import Path
from typing import Mapping, Optional

from ccachekit.core.exceptions import CcacheKitError


class DirectoryError(CcacheKitError):
    """Base exception for directory-related errors."""

    pass


def get_workspace_root(env: Optional[Mapping[str, str]] = None) -> Path:
    """
    Get the workspace the build runs in.

    Args:
        env: Environment mapping (defaults to ``os.environ``)

    Returns:
        ``$GITHUB_WORKSPACE`` when set, the current directory otherwise
    """
    env = os.environ if env is None else env
    workspace = env.get("GITHUB_WORKSPACE")
    return Path(workspace) if workspace else Path.cwd()


def get_cache_dir(variant: str, env: Optional[Mapping[str, str]] = None) -> Path:
    """
    Get the compiler cache directory for a variant.

    Example:
        >>> get_cache_dir("ccache", {"GITHUB_WORKSPACE": "/work"})
        PosixPath('/work/.ccache')
    """
    return get_workspace_root(env) / f".{variant}"


def get_global_dir() -> Path:
    """
    Get the platform-specific global ccachekit directory.

    Raises:
        DirectoryError: If USERPROFILE is not set on Windows
    """
    if os.name == "nt":
        user_profile = os.environ.get("USERPROFILE")
        if not user_profile:
            raise DirectoryError(
                "USERPROFILE environment variable is not set. "
                "Cannot determine global ccachekit directory."
            )
        return Path(user_profile) / ".ccachekit"
    return Path.home() / ".ccachekit"


def get_default_store_dir() -> Path:
    """Get the default directory used by the directory blob store."""
    return get_global_dir() / "store"


def get_state_file(env: Optional[Mapping[str, str]] = None) -> Path:
    """
    Get the path of the run state file.

    The restore and save phases run as separate processes, so the file must
    live somewhere both can see: the runner's temp directory when available,
    the workspace otherwise.
    """
    env = os.environ if env is None else env
    runner_temp = env.get("RUNNER_TEMP")
    if runner_temp:
        return Path(runner_temp) / "ccachekit" / "state.json"
    return get_workspace_root(env) / ".ccachekit" / "state.json"


__all__ = [
    "DirectoryError",
    "get_workspace_root",
    "get_cache_dir",
    "get_global_dir",
    "get_default_store_dir",
    "get_state_file",
]
