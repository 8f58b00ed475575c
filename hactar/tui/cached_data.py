# SPDX-License-Identifier: MIT
"""Loading the local scan cache and looking up nodes of the media tree."""
from typing import List, Optional

from hactar.models import Season, Show
from hactar.storage import StorageClient
from hactar.tui.models import CachedLibraryData


def load_cached_data(storage: StorageClient) -> List[CachedLibraryData]:
    """Load every cached library scan known to storage."""
    cached = []
    for lib in storage.get_libraries():
        cached.append(
            CachedLibraryData(
                key=lib.key,
                title=lib.title or "Untitled",
                data=storage.get_library_data(lib.key),
            )
        )
    return cached


def find_show_by_key(key: Optional[str], cached: List[CachedLibraryData]) -> Optional[Show]:
    if not key:
        return None
    for lib in cached:
        if lib.data is None:
            continue
        for item in lib.data.data:
            if isinstance(item, Show) and item.rating_key == key:
                return item
    return None


def find_season_by_key(
    key: Optional[str],
    cached: List[CachedLibraryData],
    show: Optional[Show] = None,
) -> Optional[Season]:
    """Find a season, looking in the given show first and then the whole cache."""
    if not key:
        return None
    if show is not None:
        for season in show.seasons:
            if season.rating_key == key:
                return season
    for lib in cached:
        if lib.data is None:
            continue
        for item in lib.data.data:
            if not isinstance(item, Show):
                continue
            for season in item.seasons:
                if season.rating_key == key:
                    return season
    return None


def total_storage(cached: List[CachedLibraryData]):
    """Sum of bytes and files over every library with data."""
    total_bytes = sum(lib.data.bytes for lib in cached if lib.data)
    total_files = sum(lib.data.files for lib in cached if lib.data)
    return total_bytes, total_files
