"""
ccachekit CLI module.

This module provides the command-line interface for ccachekit.
"""

from .parser import CLI, main

__all__ = ["CLI", "main"]
