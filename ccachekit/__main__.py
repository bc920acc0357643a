"""
Entry point for running the ccachekit CLI as a module.

Usage: python -m ccachekit {restore,save} [options]
"""

from ccachekit.cli.parser import main

if __name__ == "__main__":
    main()
