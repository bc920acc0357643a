"""
ccachekit CLI argument parser.

This module implements the command-line interface for ccachekit using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from ccachekit.config.inputs import OPTION_DEFAULTS

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("ccachekit")
except PackageNotFoundError:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)

OPTION_HELP: Dict[str, str] = {
    "variant": "Compiler cache tool: ccache or sccache",
    "install": "Install policy: yes, binary, detect or no",
    "key": "Primary cache key (fingerprint of the build)",
    "restore-keys": "Fallback key prefixes, one per line (repeatable)",
    "append-timestamp": "Append a timestamp to the key the cache is saved under",
    "restore": "Restore the cache",
    "save": "Save the cache at the end of the job",
    "max-size": "Maximum cache size (e.g. 500M)",
    "create-symlink": "Link compiler names to ccache in /usr/local/bin",
    "update-package-index": "Refresh the package index before installing",
    "evict-old-files": "Evict files older than this age before saving ('job' = job age)",
    "store-dir": "Directory of the blob store",
}

BOOLEAN_OPTIONS = (
    "append-timestamp",
    "restore",
    "save",
    "create-symlink",
    "update-package-index",
)


class CLI:
    """ccachekit command-line interface."""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="ccachekit",
            description="ccachekit - compiler cache provisioning for CI runners",
            epilog='Use "ccachekit COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        parser.add_argument(
            "--version", action="version", version=f"ccachekit {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="YAML file with option values",
        )
        parser.add_argument(
            "--state-file",
            type=Path,
            metavar="PATH",
            help="Run state file shared by restore and save "
            "(default: $RUNNER_TEMP/ccachekit/state.json)",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_restore_command(subparsers)
        self._add_save_command(subparsers)

        return parser

    def _add_option_arguments(self, parser, names: List[str]):
        for name in names:
            flag = f"--{name}"
            dest = name.replace("-", "_")
            help_text = f"{OPTION_HELP[name]} (default: '{OPTION_DEFAULTS[name]}')"

            if name == "restore-keys":
                parser.add_argument(
                    flag, dest=dest, action="append", metavar="KEY", help=help_text
                )
            elif name in BOOLEAN_OPTIONS:
                parser.add_argument(flag, dest=dest, metavar="BOOL", help=help_text)
            else:
                parser.add_argument(flag, dest=dest, metavar="VALUE", help=help_text)

    def _add_restore_command(self, subparsers):
        """Add 'restore' subcommand."""
        parser = subparsers.add_parser(
            "restore",
            help="Install, restore and configure the compiler cache",
            description="Install the compiler cache tool if needed, restore the "
            "cache directory and configure the tool for this build",
        )
        self._add_option_arguments(parser, list(OPTION_DEFAULTS))

    def _add_save_command(self, subparsers):
        """Add 'save' subcommand."""
        parser = subparsers.add_parser(
            "save",
            help="Save the compiler cache",
            description="Evict old files, print statistics and save the cache "
            "directory under the key recorded by 'restore'",
        )
        self._add_option_arguments(parser, ["store-dir"])

    def parse_args(self, args: Optional[List[str]] = None):
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130

    def _configure_logging(self, args):
        """Configure logging based on verbose/quiet flags."""
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Returns:
            Exit code from command handler
        """
        command_map = {
            "restore": "ccachekit.cli.commands.restore",
            "save": "ccachekit.cli.commands.save",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
