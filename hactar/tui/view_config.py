# SPDX-License-Identifier: MIT
"""Column layout and default sort for each dashboard view level."""
from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Union

from hactar.models import LibraryType
from hactar.tui.models import SortColumn, SortDirection, ViewLevel


@dataclass(frozen=True)
class ColumnSpec:
    key: SortColumn
    label: str
    width: Optional[int] = None


@dataclass(frozen=True)
class ViewConfig:
    columns: Tuple[ColumnSpec, ...]
    default_sort_column: SortColumn
    default_sort_direction: SortDirection

    def has_column(self, column: SortColumn) -> bool:
        return any(c.key == column for c in self.columns)

    def column_for_hotkey(self, number: int) -> Optional[SortColumn]:
        """Column bound to number key 1..N, or None when out of range."""
        if 1 <= number <= len(self.columns):
            return self.columns[number - 1].key
        return None


_TITLE = ColumnSpec(SortColumn.TITLE, "Title", 40)
_SIZE = ColumnSpec(SortColumn.SIZE, "Size", 12)

_BY_SIZE = (SortColumn.SIZE, SortDirection.DESC)
_BY_INDEX = (SortColumn.INDEX, SortDirection.ASC)

OVERALL_VIEW = ViewConfig(
    (_TITLE, _SIZE, ColumnSpec(SortColumn.FILES, "Files", 8), ColumnSpec(SortColumn.LIBRARY, "Library", 16)),
    *_BY_SIZE,
)
MOVIE_LIBRARY_VIEW = ViewConfig((_TITLE, _SIZE), *_BY_SIZE)
SHOW_LIBRARY_VIEW = ViewConfig((_TITLE, _SIZE, ColumnSpec(SortColumn.FILES, "Episodes", 10)), *_BY_SIZE)
SHOW_VIEW = ViewConfig(
    (ColumnSpec(SortColumn.INDEX, "Season", 8), _TITLE, _SIZE, ColumnSpec(SortColumn.FILES, "Episodes", 10)),
    *_BY_INDEX,
)
SEASON_VIEW = ViewConfig((ColumnSpec(SortColumn.INDEX, "Episode", 8), _TITLE, _SIZE), *_BY_INDEX)

_LEVEL_VIEWS: Dict[ViewLevel, ViewConfig] = {
    ViewLevel.OVERALL: OVERALL_VIEW,
    ViewLevel.SHOW: SHOW_VIEW,
    ViewLevel.SEASON: SEASON_VIEW,
}


def resolve_view_config(
    level: Union[ViewLevel, str],
    library_kind: Optional[Union[LibraryType, str]] = None,
) -> ViewConfig:
    """Columns and default sort for a level; library views depend on the library kind."""
    level = ViewLevel(level)
    if level == ViewLevel.LIBRARY:
        if library_kind is not None and LibraryType(library_kind) == LibraryType.SHOW:
            return SHOW_LIBRARY_VIEW
        return MOVIE_LIBRARY_VIEW
    return _LEVEL_VIEWS[level]
