# SPDX-License-Identifier: MIT
"""Centralized path resolution for hactar.

All path resolution should go through this module to ensure consistency.
"""
import os
from pathlib import Path


class PathResolver:
    """Resolves paths for hactar components."""

    @staticmethod
    def home_dir() -> Path:
        """Get the hactar home directory.

        Resolution order:
        1. HACTAR_HOME env var
        2. ~/.hactar
        """
        home = os.environ.get("HACTAR_HOME")
        if home:
            return Path(home).expanduser()
        return Path.home() / ".hactar"

    @staticmethod
    def config_path() -> Path:
        """Get the path of config.json."""
        return PathResolver.home_dir() / "config.json"

    @staticmethod
    def storage_dir() -> Path:
        """Get the directory holding cached library scans."""
        return PathResolver.home_dir() / "storage"

    @staticmethod
    def library_cache_path(library_key: str) -> Path:
        """Get the cache file for one library, keyed by its section key."""
        return PathResolver.storage_dir() / f"{library_key}.json"
