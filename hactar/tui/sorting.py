# SPDX-License-Identifier: MIT
"""Sorting of dashboard rows.

sort_items() never mutates its input and is stable in both directions,
so rows with equal keys keep their collected order.
"""
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from hactar.formatting import parse_size
from hactar.tui.models import DashboardItem, SortColumn, SortDirection


def _size_key(row: DashboardItem) -> int:
    return row.bytes or parse_size(row.size)


SORT_KEYS: Dict[SortColumn, Callable[[DashboardItem], Any]] = {
    SortColumn.TITLE: lambda row: (row.title or "").lower(),
    SortColumn.SIZE: _size_key,
    SortColumn.FILES: lambda row: row.files or 0,
    SortColumn.INDEX: lambda row: row.index or 0,
    SortColumn.LIBRARY: lambda row: (row.library or "").lower(),
}


# Column names as shown in headers that map onto another sort key
COLUMN_ALIASES: Dict[str, SortColumn] = {
    "episodes": SortColumn.FILES,
}


def resolve_column(column: Union[SortColumn, str]) -> Optional[SortColumn]:
    """Sort column for a name or alias, None when unknown."""
    if isinstance(column, SortColumn):
        return column
    name = str(column).lower()
    if name in COLUMN_ALIASES:
        return COLUMN_ALIASES[name]
    try:
        return SortColumn(name)
    except ValueError:
        return None


def sort_items(
    rows: Sequence[DashboardItem],
    column: Union[SortColumn, str],
    direction: Union[SortDirection, str] = SortDirection.ASC,
) -> List[DashboardItem]:
    """Return rows ordered by column; unknown columns keep the original order."""
    column = resolve_column(column)
    if column is None:
        return list(rows)
    key = SORT_KEYS[column]
    reverse = SortDirection(direction) == SortDirection.DESC
    return sorted(rows, key=key, reverse=reverse)
