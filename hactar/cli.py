#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
CLI interface for hactar.

Usage:
    hactar <command> [args]
    python3 -m hactar.cli <command> [args]
"""

import argparse
import sys

from hactar._version import __version__
from hactar.commands import dispatch_command
from hactar.manager import HactarManager


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hactar",
        description="hactar - Plex library storage scanner and dashboard",
    )
    parser.add_argument("--version", action="version", version=f"hactar {__version__}")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # configure command
    configure_parser = subparsers.add_parser(
        "configure", help="Configure Plex API credentials and settings"
    )
    configure_parser.add_argument("--server-url", help="Plex server URL (prompted if omitted)")
    configure_parser.add_argument("--token", help="Plex token (prompted if omitted)")

    # scan command
    scan_parser = subparsers.add_parser("scan", help="Scan a library and cache the results")
    scan_parser.add_argument(
        "library", nargs="?", help="Library key or title (choose interactively if omitted)"
    )

    # test command
    subparsers.add_parser("test", help="Test Plex connection and credentials")

    # dashboard command
    subparsers.add_parser("dashboard", help="Open the hactar TUI dashboard")

    # help command
    help_parser = subparsers.add_parser("help", help="Show detailed help information")
    help_parser.add_argument("topic", nargs="?", help="Command to get help for")

    return parser


def main(argv=None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        args = parser.parse_args(["help"])

    try:
        return dispatch_command(args, HactarManager())
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
