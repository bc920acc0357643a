"""
Save command implementation.

Saves the compiler cache directory under the key recorded by the restore
command.
"""

import logging

from ccachekit.caching.save import save_cache
from ccachekit.caching.store import DirectoryBlobStore
from ccachekit.ci.environment import log_group
from ccachekit.cli.commands.common import load_command_inputs, state_manager_for

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the save command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    try:
        inputs = load_command_inputs(args)
        with log_group("Save cache"):
            save_cache(DirectoryBlobStore(inputs.store_dir), state_manager_for(args))
    except Exception as e:
        logger.error(f"Saving cache failed: {e}")
        logger.debug("Save failure details", exc_info=True)
        return 1

    return 0
