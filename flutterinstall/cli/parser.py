"""
flutterinstall CLI argument parser.

This module implements the command-line interface for flutterinstall using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from flutterinstall import __version__
from flutterinstall.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

COMMAND_MODULES = {
    "install": "flutterinstall.cli.commands.install",
    "resolve": "flutterinstall.cli.commands.resolve",
    "list": "flutterinstall.cli.commands.list_versions",
}


class CLI:
    """flutterinstall command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="flutterinstall",
            description="Install a Flutter SDK into the build agent tool cache",
            epilog='Use "flutterinstall COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        parser.add_argument(
            "--version", action="version", version=f"flutterinstall {__version__}"
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
            help="Path to settings file (default: ./flutterinstall.yaml)",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_install_command(subparsers)
        self._add_resolve_command(subparsers)
        self._add_list_command(subparsers)

        return parser

    def _add_install_command(self, subparsers):
        """Add 'install' subcommand."""
        parser = subparsers.add_parser(
            "install",
            help="Install Flutter and publish FlutterToolPath",
            description=(
                "Resolve, download and cache a Flutter SDK. Options not given "
                "on the command line are read from INPUT_CHANNEL, INPUT_VERSION "
                "and INPUT_CUSTOMVERSION."
            ),
        )
        parser.add_argument(
            "--channel", metavar="NAME", help="Release channel (e.g., stable, beta)"
        )
        parser.add_argument(
            "--sdk-version",
            dest="sdk_version",
            metavar="VERSION",
            help='Version to install, "latest", or "custom" to use --custom-version',
        )
        parser.add_argument(
            "--custom-version",
            metavar="VERSION",
            help='Version to install when --sdk-version is "custom"',
        )

    def _add_resolve_command(self, subparsers):
        """Add 'resolve' subcommand."""
        parser = subparsers.add_parser(
            "resolve",
            help="Show which Flutter release would be installed",
            description="Resolve a channel and version without downloading",
        )
        parser.add_argument(
            "--channel", metavar="NAME", required=True, help="Release channel"
        )
        parser.add_argument(
            "--sdk-version",
            dest="sdk_version",
            metavar="VERSION",
            default="latest",
            help='Version to resolve (default: "latest")',
        )
        parser.add_argument(
            "--arch",
            choices=["linux", "macos", "windows"],
            help="Architecture (default: host)",
        )

    def _add_list_command(self, subparsers):
        """Add 'list' subcommand."""
        parser = subparsers.add_parser(
            "list",
            help="List cached Flutter versions",
            description="List Flutter versions in the tool cache",
        )
        parser.add_argument(
            "--arch",
            choices=["linux", "macos", "windows"],
            help="Architecture (default: host)",
        )

    def run(self, argv: Optional[List[str]] = None) -> int:
        """
        Parse arguments and run the selected command.

        Args:
            argv: Command-line arguments (default: sys.argv[1:])

        Returns:
            Exit code
        """
        args = self.parser.parse_args(argv)
        self._configure_logging(args)

        if not args.command:
            self.parser.print_help()
            return 1

        return self._dispatch_command(args)

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
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
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        module_name = COMMAND_MODULES.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)

        try:
            return module.run(args)
        except ConfigurationError as e:
            logger.error(str(e))
            return 1


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
