"""
Entry point for running the ccachekit CLI as a module.

Usage: python -m ccachekit.cli {restore,save} [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
