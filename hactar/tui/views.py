#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Row collectors for each dashboard view level.

Each collector flattens one node of the cached media tree into a list
of DashboardItem rows. Missing lists produce no rows; missing totals
are summed from the children.
"""

from typing import Iterable, List, Optional, Tuple

from hactar.formatting import bytes_to_human
from hactar.models import Episode, LibraryItem, LibraryScanResult, Media, Season, Show
from hactar.tui.models import CachedLibraryData, DashboardItem, SourceType

UNTITLED = "Untitled"


def _season_totals(season: Season) -> Tuple[int, int]:
    if season.bytes or season.files:
        return season.bytes, season.files
    episodes = season.episodes or []
    return sum(e.bytes for e in episodes), sum(e.files or 1 for e in episodes)


def _item_totals(item: Media) -> Tuple[int, int]:
    if item.bytes or item.files or not isinstance(item, Show):
        return item.bytes, item.files
    total_bytes = total_files = 0
    for season in item.seasons or []:
        season_bytes, season_files = _season_totals(season)
        total_bytes += season_bytes
        total_files += season_files
    return total_bytes, total_files


def _size_text(item: Media, num_bytes: int) -> str:
    return item.human_bytes or bytes_to_human(num_bytes)


def _library_row(item: LibraryItem, library: Optional[str] = None) -> DashboardItem:
    num_bytes, files = _item_totals(item)
    return DashboardItem(
        title=item.title or UNTITLED,
        size=_size_text(item, num_bytes),
        bytes=num_bytes,
        files=files,
        source_type=SourceType.SHOW if isinstance(item, Show) else SourceType.MOVIE,
        source_key=item.rating_key,
        library=library,
    )


def collect_overall(cached: Iterable[CachedLibraryData]) -> List[DashboardItem]:
    """Flatten the top-level items of every cached library."""
    rows = []
    for lib in cached:
        if lib.data is None:
            continue
        rows.extend(_library_row(item, lib.title) for item in lib.data.data or [] if item)
    return rows


def collect_library(result: Optional[LibraryScanResult]) -> List[DashboardItem]:
    """Top-level items of a single library."""
    if result is None:
        return []
    return [_library_row(item) for item in result.data or [] if item]


def collect_seasons(show: Optional[Show]) -> List[DashboardItem]:
    """Seasons of a show."""
    if show is None:
        return []
    rows = []
    for season in show.seasons or []:
        num_bytes, files = _season_totals(season)
        rows.append(
            DashboardItem(
                title=season.title or f"Season {season.season_index}",
                size=_size_text(season, num_bytes),
                bytes=num_bytes,
                files=files,
                source_type=SourceType.SEASON,
                source_key=season.rating_key,
                index=season.season_index,
            )
        )
    return rows


def collect_episodes(season: Optional[Season]) -> List[DashboardItem]:
    """Episodes of a season."""
    if season is None:
        return []
    rows = []
    for episode in season.episodes or []:
        rows.append(_episode_row(episode))
    return rows


def _episode_row(episode: Episode) -> DashboardItem:
    return DashboardItem(
        title=episode.title or f"Episode {episode.episode_index}",
        size=_size_text(episode, episode.bytes),
        bytes=episode.bytes,
        files=episode.files or 1,
        source_type=SourceType.EPISODE,
        source_key=episode.rating_key,
        index=episode.episode_index,
    )
