"""
Helpers shared by the restore and save commands.
"""

from typing import Any, Dict

from ccachekit.config.inputs import OPTION_DEFAULTS, ActionInputs, load_inputs
from ccachekit.core.directory import get_state_file
from ccachekit.core.state import StateManager


def option_overrides(args) -> Dict[str, Any]:
    """Collect option values given on the command line."""
    return {
        name: getattr(args, name.replace("-", "_"), None) for name in OPTION_DEFAULTS
    }


def load_command_inputs(args) -> ActionInputs:
    return load_inputs(
        config_file=getattr(args, "config", None), overrides=option_overrides(args)
    )


def state_manager_for(args) -> StateManager:
    state_file = getattr(args, "state_file", None) or get_state_file()
    return StateManager(state_file)
