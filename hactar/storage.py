# SPDX-License-Identifier: MIT
"""Flat JSON cache of library scans, one file per library key."""
import json
from pathlib import Path
from typing import List, Optional

from hactar.errors import StorageError
from hactar.logger import get_logger
from hactar.models import Library, LibraryScanResult
from hactar.paths import PathResolver


class StorageClient:
    """Reads and writes cached LibraryScanResult files."""

    def __init__(self, storage_dir: Optional[Path] = None) -> None:
        self._storage_dir = storage_dir

    @property
    def storage_dir(self) -> Path:
        return self._storage_dir or PathResolver.storage_dir()

    def _path_for(self, library_key: str) -> Path:
        if self._storage_dir is None:
            return PathResolver.library_cache_path(library_key)
        return self._storage_dir / f"{library_key}.json"

    def save_library(self, library_key: str, result: LibraryScanResult) -> Path:
        """Write a scan result, replacing any previous cache for the library."""
        path = self._path_for(library_key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = path.with_suffix(".json.tmp")
            tmp_path.write_text(json.dumps(result.to_dict(), indent=2))
            tmp_path.replace(path)
        except OSError as e:
            raise StorageError(f"Cannot write library cache {path}: {e}") from e
        return path

    def get_library_data(self, library_key: str) -> Optional[LibraryScanResult]:
        """Load the cached scan for a library, or None if absent or unreadable."""
        path = self._path_for(library_key)
        if not path.exists():
            return None
        try:
            with open(path) as f:
                data = json.load(f)
            return LibraryScanResult.from_dict(data)
        except (json.JSONDecodeError, OSError, ValueError, TypeError, AttributeError) as e:
            get_logger().warning(f"Ignoring unreadable cache {path.name}: {e}")
            return None

    def get_libraries(self) -> List[Library]:
        """List the libraries that have a cache file, sorted by key."""
        directory = self.storage_dir
        if not directory.is_dir():
            return []

        libraries = []
        for path in sorted(directory.glob("*.json"), key=lambda p: _key_order(p.stem)):
            result = self.get_library_data(path.stem)
            if result is None:
                continue
            libraries.append(
                Library(key=path.stem, title=result.library_name or path.stem, type=result.library_type)
            )
        return libraries


def _key_order(key: str):
    # Plex section keys are numeric; keep "2" before "10"
    return (0, int(key), key) if key.isdigit() else (1, 0, key)
