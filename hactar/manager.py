#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
HactarManager class - main entry point for hactar operations.

Ties together configuration, the Plex client and the scan cache so the
CLI commands and the dashboard share the same configure and scan logic.
"""

from typing import List, Optional

from hactar.config import ConfigManager
from hactar.errors import ConfigError, PlexError
from hactar.logger import get_logger
from hactar.models import MIN_TOKEN_LENGTH, Library, LibraryScanResult
from hactar.plex import PlexClient, ProgressCallback
from hactar.storage import StorageClient
from hactar.tui.cached_data import load_cached_data
from hactar.tui.models import CachedLibraryData


def validate_token(token: str) -> None:
    if not token or not token.strip():
        raise ConfigError("Token is required")
    if len(token.strip()) < MIN_TOKEN_LENGTH:
        raise ConfigError("Token seems too short")


def validate_server(server_url: str) -> None:
    if not server_url or not server_url.strip():
        raise ConfigError("Server url is required")


class HactarManager:
    """Facade over config, Plex API and local storage."""

    def __init__(
        self,
        config: Optional[ConfigManager] = None,
        storage: Optional[StorageClient] = None,
        plex: Optional[PlexClient] = None,
    ) -> None:
        self.config = config or ConfigManager()
        self.storage = storage or StorageClient()
        self.plex = plex or PlexClient(config_manager=self.config)

    def is_configured(self) -> bool:
        return self.config.is_configured()

    def test_connection(self) -> bool:
        return self.plex.test_connection()

    def perform_configuration(self, server_url: str, token: str) -> bool:
        """Validate and store credentials.

        Raises:
            ConfigError: A value is missing or the token is too short.
        """
        validate_token(token)
        validate_server(server_url)
        self.config.update_config(server_url=server_url.strip(), token=token.strip())
        self.plex.reset_credentials()
        get_logger().debug(f"Saved configuration to {self.config.config_path}")
        return True

    def get_available_libraries(self) -> List[Library]:
        """Libraries on the server.

        Raises:
            PlexError: The server cannot be reached with the stored credentials.
        """
        if not self.plex.test_connection():
            raise PlexError("Plex connection failed")
        return self.plex.get_libraries()

    def perform_scan(
        self,
        library: Library,
        progress: Optional[ProgressCallback] = None,
    ) -> LibraryScanResult:
        """Scan a library on the server and cache the result."""
        result = self.plex.get_library_items(library, progress=progress)
        path = self.storage.save_library(library.key, result)
        get_logger().debug(f"Cached {library.title} to {path}")
        return result

    def load_cached_data(self) -> List[CachedLibraryData]:
        return load_cached_data(self.storage)
