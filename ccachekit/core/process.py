"""
External command execution.

Every command runs synchronously and blocks until it exits. Commands are
logged before they run, the way ``sh -x`` would echo them, so the CI log
shows exactly what was executed.
"""

import logging
import os
import shutil
import subprocess
from typing import Iterable, Mapping, Optional, Sequence

from ccachekit.core.exceptions import CommandError

logger = logging.getLogger(__name__)


def run_command(
    command: Sequence[str],
    env: Optional[Mapping[str, str]] = None,
    ok_returncodes: Iterable[int] = (0,),
) -> subprocess.CompletedProcess:
    """
    Run an external command and fail loudly on unexpected exit codes.

    Args:
        command: Program and arguments
        env: Extra environment variables merged over ``os.environ``
        ok_returncodes: Exit codes treated as success

    Returns:
        The completed process (stdout/stderr captured as text)

    Raises:
        CommandError: If the program is missing or exits with another code
    """
    command = [str(part) for part in command]
    logger.info(f"+ {' '.join(command)}")

    run_env = None
    if env:
        run_env = dict(os.environ)
        run_env.update(env)

    try:
        result = subprocess.run(command, capture_output=True, text=True, env=run_env)
    except FileNotFoundError as e:
        raise CommandError(command, 127, str(e)) from e

    if result.stdout:
        logger.info(result.stdout.rstrip())

    if result.returncode not in tuple(ok_returncodes):
        raise CommandError(command, result.returncode, result.stderr or "")

    if result.stderr:
        logger.debug(result.stderr.rstrip())

    return result


def elevated(command: Sequence[str]) -> list[str]:
    """
    Prefix a command with ``sudo`` when sudo is available.

    Without sudo (e.g. root containers) the command runs unprivileged.
    """
    sudo = shutil.which("sudo")
    if sudo:
        return [sudo, *command]

    logger.debug("sudo not found, running without elevation")
    return list(command)


__all__ = ["run_command", "elevated"]
