#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Command pattern implementation for the hactar CLI.

Each command is a class that implements the Command interface:
- execute(args, manager) -> int

Commands are registered in COMMAND_REGISTRY and dispatched via dispatch_command(),
which turns HactarError into an error line and exit code 1.
"""

import sys
from abc import ABC, abstractmethod
from argparse import Namespace
from typing import Dict, List, Optional, Type

from rich.prompt import Confirm, Prompt

from hactar.errors import HactarError
from hactar.formatting import mask_token
from hactar.logger import get_logger
from hactar.manager import HactarManager, validate_server, validate_token
from hactar.models import DEFAULT_SERVER_URL, Library

CANCEL_CHOICE = "0"


class Command(ABC):
    """Abstract base class for all CLI commands.

    Each command encapsulates the logic for one CLI action.
    Commands receive parsed args and a HactarManager instance.
    """

    @abstractmethod
    def execute(self, args: Namespace, manager: HactarManager) -> int:
        """Execute the command.

        Args:
            args: Parsed command-line arguments
            manager: HactarManager instance

        Returns:
            Exit code (0 for success, non-zero for errors)
        """
        pass


def offer_configuration(manager: HactarManager) -> int:
    """Ask whether to configure now, used when the server cannot be reached."""
    log = get_logger()
    log.warning("hactar is not configured or the Plex server cannot be reached.")
    if not Confirm.ask("Would you like to configure hactar now?", default=True):
        log.info('Run "hactar configure" when you are ready.')
        return 1
    return ConfigureCommand().execute(Namespace(server_url=None, token=None), manager)


# =============================================================================
# Configuration Commands
# =============================================================================


class ConfigureCommand(Command):
    """Prompt for (or accept) the server URL and token, save them and test them."""

    def execute(self, args: Namespace, manager: HactarManager) -> int:
        log = get_logger()
        log.info("Configuring hactar...")

        token = getattr(args, "token", None) or self._prompt_token()
        server_url = getattr(args, "server_url", None) or self._prompt_server()
        manager.perform_configuration(server_url, token)

        log.success("Configuration completed successfully!")
        log.info(f"Token: {mask_token(token)}")
        log.info(f"Server: {server_url}")

        log.info("Testing Plex API connection...")
        if manager.test_connection():
            log.success("Plex API connection successful!")
            log.info('You can now use "hactar scan" to scan your library!')
        else:
            log.warning("Plex API connection failed. Please check your token.")
        return 0

    @staticmethod
    def _prompt_token() -> str:
        while True:
            token = Prompt.ask("Enter your Plex token", password=True)
            try:
                validate_token(token)
                return token.strip()
            except HactarError as e:
                get_logger().warning(str(e))

    @staticmethod
    def _prompt_server() -> str:
        while True:
            server_url = Prompt.ask("Enter your Plex server url", default=DEFAULT_SERVER_URL)
            try:
                validate_server(server_url)
                return server_url.strip()
            except HactarError as e:
                get_logger().warning(str(e))


class TestCommand(Command):
    """Check the configuration, the credentials and the API connection."""

    def execute(self, args: Namespace, manager: HactarManager) -> int:
        log = get_logger()
        log.info("Testing hactar configuration and Plex API connection...")

        try:
            manager.config.load_config()
            log.success("Configuration loaded successfully")
            log.info(f"Config file: {manager.config.config_path}")
        except HactarError as e:
            log.error("Failed to load configuration")
            log.debug(f"Error: {e}")

        credentials = manager.config.get_credentials()
        if credentials is None:
            log.warning("No credentials found")
            log.info('Run "hactar configure" to set up your Plex token')
            return 1
        log.success("Credentials found")
        log.info(f"Token: {mask_token(credentials.token)}")
        log.info(f"Server URL: {credentials.server_url}")

        if not manager.test_connection():
            log.error("Plex API connection failed")
            log.info("  Please check your token and network connection")
            return 1
        log.success("Plex API connection successful")

        log.info("Testing library listing...")
        libraries = manager.plex.get_libraries()
        log.success(f"Library listing successful - Found {len(libraries)} results")
        if libraries:
            log.info(f"Libraries: {', '.join(lib.title for lib in libraries)}")

        log.results("Test completed!")
        return 0


# =============================================================================
# Scan Commands
# =============================================================================


class ScanCommand(Command):
    """Pick a library (or take its key), scan it and cache the result."""

    def execute(self, args: Namespace, manager: HactarManager) -> int:
        log = get_logger()
        log.info("Scanning for libraries...")

        try:
            libraries = manager.get_available_libraries()
        except HactarError:
            return offer_configuration(manager)

        if not libraries:
            log.warning("No movie or show libraries found on the server")
            return 1

        key = getattr(args, "library", None)
        library = self._find(libraries, key) if key else self._choose(libraries)
        if library is None:
            if key:
                log.error(f"Library not found: {key}")
                return 1
            log.info("Scan cancelled")
            return 0

        with log.status(f"Scanning {library.title}...") as spinner:

            def progress(done: int, total: int, title: str) -> None:
                spinner.update(f"Scanning {library.title}... {done}/{total} {title}")

            result = manager.perform_scan(library, progress=progress)
        log.success(f"Scanned {library.title}: {result.human_bytes or '0 B'} in {result.files} files")
        log.info(f"Found {len(result.data)} items")
        return 0

    @staticmethod
    def _find(libraries: List[Library], key: str) -> Optional[Library]:
        for library in libraries:
            if library.key == key or library.title.lower() == key.lower():
                return library
        return None

    @staticmethod
    def _choose(libraries: List[Library]) -> Optional[Library]:
        log = get_logger()
        log.line(f"  {CANCEL_CHOICE}. Cancel")
        for number, library in enumerate(libraries, start=1):
            log.line(f"  {number}. {library.title} ({library.type.value})")
        choices = [str(n) for n in range(len(libraries) + 1)]
        answer = Prompt.ask("Select a library to scan", choices=choices, default="1")
        if answer == CANCEL_CHOICE:
            return None
        return libraries[int(answer) - 1]


# =============================================================================
# Dashboard / Help
# =============================================================================


class DashboardCommand(Command):
    """Open the terminal dashboard."""

    def execute(self, args: Namespace, manager: HactarManager) -> int:
        if not sys.stdout.isatty():
            get_logger().error("Dashboard requires a TTY. Please run from a terminal.")
            return 1
        if not manager.test_connection():
            return offer_configuration(manager)

        from hactar.tui.app import run_app

        run_app(manager)
        return 0


COMMAND_HELP: Dict[str, Dict[str, str]] = {
    "configure": {
        "description": "Prompts for Plex Server URL and token, then stores them in ~/.hactar/config.json",
        "usage": "hactar configure [--server-url URL] [--token TOKEN]",
    },
    "scan": {
        "description": "Lists the server's libraries, scans the selected one and caches the results locally",
        "usage": "hactar scan [library]",
    },
    "test": {
        "description": "Tests connectivity to the Plex server using stored credentials",
        "usage": "hactar test",
    },
    "dashboard": {
        "description": (
            "Opens an interactive TUI dashboard showing storage statistics, library "
            "breakdowns and an item-by-item table. Requires a TTY"
        ),
        "usage": "hactar dashboard",
    },
    "help": {
        "description": "Displays help information for available commands",
        "usage": "hactar help [command]",
    },
}


class HelpCommand(Command):
    """Show general or per-command help."""

    def execute(self, args: Namespace, manager: HactarManager) -> int:
        name = getattr(args, "topic", None)
        if name:
            return self._command_help(name)
        self._general_help()
        return 0

    @staticmethod
    def _general_help() -> None:
        log = get_logger()
        log.console.print("hactar", style="bold blue")
        log.console.print("Plex Library Management", style="dim")
        log.line()
        log.info("Available Commands:")
        for name, help_info in COMMAND_HELP.items():
            log.console.print(f"  {name:<12} {help_info['description']}", style="cyan", markup=False)
            log.console.print(f"    Usage: {help_info['usage']}", style="dim", markup=False)
            log.line()
        log.info("Getting Started:")
        log.line('  1. Run "hactar configure" to set up your Plex token')
        log.line('  2. Use "hactar scan" to scan your library')
        log.line('  3. Open "hactar dashboard" to browse the results')
        log.line()
        log.info('Run "hactar help <command>" for command-specific help')

    @staticmethod
    def _command_help(name: str) -> int:
        log = get_logger()
        help_info = COMMAND_HELP.get(name)
        if help_info is None:
            log.error(f"Unknown command: {name}")
            log.info('Run "hactar help" to see all available commands')
            return 1
        log.console.print(f"Command: {name}", style="cyan", markup=False)
        log.console.print(help_info["description"], style="dim", markup=False)
        log.line()
        log.console.print("Usage:", style="yellow")
        log.line(f"  {help_info['usage']}")
        log.line()
        log.info("For general help, run: hactar help")
        return 0


# =============================================================================
# Command Registry
# =============================================================================

COMMAND_REGISTRY: Dict[str, Type[Command]] = {
    "configure": ConfigureCommand,
    "scan": ScanCommand,
    "test": TestCommand,
    "dashboard": DashboardCommand,
    "help": HelpCommand,
}


# =============================================================================
# Dispatch Function
# =============================================================================


def dispatch_command(args: Namespace, manager: HactarManager) -> int:
    """Dispatch to appropriate command handler.

    Args:
        args: Parsed arguments with 'command' attribute
        manager: HactarManager instance

    Returns:
        Exit code (0 for success, 1 for unknown command or HactarError)
    """
    command_name = args.command
    if command_name not in COMMAND_REGISTRY:
        get_logger().error(f"Unknown command: {command_name}")
        return 1

    command = COMMAND_REGISTRY[command_name]()
    try:
        return command.execute(args, manager)
    except HactarError as e:
        get_logger().error(str(e))
        return 1
