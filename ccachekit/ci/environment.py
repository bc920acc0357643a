"""
CI runner integration.

Exports PATH changes and step outputs the way the GitHub Actions runner
expects them (``$GITHUB_PATH`` / ``$GITHUB_OUTPUT`` files) and groups log
output. Outside a runner, only the current process environment is touched.
"""

import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Union

logger = logging.getLogger(__name__)


def is_github_actions() -> bool:
    return os.environ.get("GITHUB_ACTIONS") == "true"


def add_path(directory: Union[str, Path]) -> None:
    """
    Put a directory first on PATH for this process and later job steps.

    Prepending an entry that is already first is a no-op, so calling this
    repeatedly is safe.
    """
    directory = str(directory)
    current = os.environ.get("PATH", "")
    entries = current.split(os.pathsep) if current else []
    if not entries or entries[0] != directory:
        os.environ["PATH"] = os.pathsep.join([directory, *entries])

    github_path = os.environ.get("GITHUB_PATH")
    if github_path:
        with open(github_path, "a", encoding="utf-8") as f:
            f.write(f"{directory}\n")

    logger.debug(f"Added to PATH: {directory}")


def set_output(name: str, value) -> None:
    """Set a step output (no-op outside a runner apart from logging)."""
    if isinstance(value, bool):
        value = "true" if value else "false"

    github_output = os.environ.get("GITHUB_OUTPUT")
    if github_output:
        with open(github_output, "a", encoding="utf-8") as f:
            f.write(f"{name}={value}\n")

    logger.debug(f"Output {name}={value}")


@contextmanager
def log_group(title: str) -> Iterator[None]:
    """Group the log lines emitted inside the block under a title."""
    if is_github_actions():
        print(f"::group::{title}", flush=True)
    else:
        logger.info(f"==> {title}")
    try:
        yield
    finally:
        if is_github_actions():
            print("::endgroup::", flush=True)


__all__ = ["is_github_actions", "add_path", "set_output", "log_group"]
