"""
CI runner integration for ccachekit.

This package handles the boundary with the CI runner: PATH export, step
outputs and log grouping.
"""

from .environment import add_path, is_github_actions, log_group, set_output

__all__ = ["add_path", "is_github_actions", "log_group", "set_output"]
