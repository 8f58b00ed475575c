#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Data models for the dashboard.

Rows shown in the items table, the cached library data they come from,
and the enums describing view levels and sorting.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from hactar.models import LibraryScanResult


class ViewLevel(str, Enum):
    """Depth of the dashboard hierarchy."""
    OVERALL = "overall"
    LIBRARY = "library"
    SHOW = "show"
    SEASON = "season"


class SourceType(str, Enum):
    """Kind of media a row was built from."""
    SHOW = "show"
    SEASON = "season"
    EPISODE = "episode"
    MOVIE = "movie"

    @property
    def is_leaf(self) -> bool:
        return self in (SourceType.MOVIE, SourceType.EPISODE)


class SortColumn(str, Enum):
    TITLE = "title"
    SIZE = "size"
    FILES = "files"
    INDEX = "index"
    LIBRARY = "library"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    def toggled(self) -> "SortDirection":
        return SortDirection.DESC if self == SortDirection.ASC else SortDirection.ASC


@dataclass(frozen=True)
class DashboardItem:
    """One row of the items table at the current view level."""
    title: str
    size: str
    bytes: int
    files: int
    source_type: SourceType
    source_key: str = ""
    index: Optional[int] = None
    library: Optional[str] = None


@dataclass
class CachedLibraryData:
    """A library known to the local cache, with its last scan (if any)."""
    key: str
    title: str
    data: Optional[LibraryScanResult] = None

    @property
    def has_data(self) -> bool:
        return self.data is not None
