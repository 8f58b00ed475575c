# SPDX-License-Identifier: MIT
"""Pure projections of dashboard state into display text.

Nothing here touches widgets; app.py feeds these results into Textual.
"""
from typing import List, Optional, Sequence, Tuple

from hactar.formatting import bytes_to_human, truncate_title
from hactar.tui.app_state import DashboardState
from hactar.tui.cached_data import total_storage
from hactar.tui.models import CachedLibraryData, DashboardItem, SortColumn, SortDirection, ViewLevel
from hactar.tui.view_config import ViewConfig, resolve_view_config

ALL_LIBRARIES = "[ All Libraries ]"
TITLE_WIDTH = 30
LIBRARY_WIDTH = 15
TOP_LIBRARIES = 5

CONTROLS_HELP = (
    "Controls:",
    "↑/↓ or J/K: Select | ←/→ or A/D: Pages | Home/End: First/Last",
    "Enter: Open | B/Backspace: Back | Tab: Next library",
    "1-4: Sort by column | R: Reverse sort | C: Configure | S: Scan | Q: Quit",
)


def view_config_for(state: DashboardState) -> ViewConfig:
    nav = state.navigation
    return resolve_view_config(nav.level, nav.library_kind)


def page_items(state: DashboardState) -> List[DashboardItem]:
    table = state.table
    start = (table.current_page - 1) * table.items_per_page
    return list(table.items[start:start + table.items_per_page])


def sort_indicator(direction: SortDirection) -> str:
    return "↑" if direction == SortDirection.ASC else "↓"


def table_header(state: DashboardState) -> List[Tuple[str, str]]:
    """(column key, label) pairs; the active sort column carries an arrow."""
    sort = state.table.sort
    header = []
    for column in view_config_for(state).columns:
        label = column.label
        if column.key == sort.column:
            label = f"{label} {sort_indicator(sort.direction)}"
        header.append((column.key.value, label))
    return header


def table_columns(state: DashboardState) -> List[Tuple[str, str, Optional[int]]]:
    """Header pairs plus the display width of each column."""
    widths = [column.width for column in view_config_for(state).columns]
    return [(key, label, width) for (key, label), width in zip(table_header(state), widths)]


def _cell(row: DashboardItem, column: SortColumn) -> str:
    if column == SortColumn.TITLE:
        return truncate_title(row.title, TITLE_WIDTH)
    if column == SortColumn.SIZE:
        return row.size
    if column == SortColumn.FILES:
        return str(row.files)
    if column == SortColumn.INDEX:
        return "" if row.index is None else str(row.index)
    return truncate_title(row.library or "", LIBRARY_WIDTH)


def table_rows(state: DashboardState) -> List[Tuple[str, ...]]:
    """Cells for the rows on the current page."""
    columns = [c.key for c in view_config_for(state).columns]
    return [tuple(_cell(row, column) for column in columns) for row in page_items(state)]


def breadcrumb(state: DashboardState, cached: Sequence[CachedLibraryData]) -> str:
    nav = state.navigation
    if nav.level == ViewLevel.OVERALL:
        return "All Libraries"
    parts = ["All Libraries"]
    if 1 <= nav.library_index <= len(cached):
        parts = [cached[nav.library_index - 1].title]
    if nav.current_show is not None:
        parts.append(nav.current_show.title or "Untitled")
    if nav.level == ViewLevel.SEASON and nav.current_season is not None:
        parts.append(nav.current_season.title or f"Season {nav.current_season.season_index}")
    return " > ".join(parts)


def status_lines(state: DashboardState, cached: Sequence[CachedLibraryData]) -> List[str]:
    table = state.table
    total = table.total_items
    start = (table.current_page - 1) * table.items_per_page + 1 if total else 0
    end = min(table.current_page * table.items_per_page, total)
    lines = [
        f"View: {breadcrumb(state, cached)}",
        f"Items: {start}-{end} of {total}",
        f"Page: {table.current_page}/{table.total_pages}",
        f"Sort: {table.sort.column.value} ({table.sort.direction.value})",
    ]
    if state.status:
        lines.append(state.status)
    lines.append("")
    lines.extend(CONTROLS_HELP)
    return lines


def storage_summary(cached: Sequence[CachedLibraryData]) -> List[str]:
    total_bytes, total_files = total_storage(list(cached))
    lines = [
        f"Total Storage: {bytes_to_human(total_bytes)}",
        f"Total Files: {total_files:,}",
        "",
        "Largest Libraries:",
    ]
    with_data = [lib for lib in cached if lib.data is not None]
    with_data.sort(key=lambda lib: lib.data.bytes, reverse=True)
    for lib in with_data[:TOP_LIBRARIES]:
        lines.append(f"{lib.title}: {bytes_to_human(lib.data.bytes)}")
    return lines


def library_list_labels(cached: Sequence[CachedLibraryData]) -> List[str]:
    return [ALL_LIBRARIES] + [lib.title for lib in cached]
