#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Navigation state machine for the dashboard.

Every transition takes a DashboardState and returns a new one; the input
is never mutated. Missing data never raises: transitions degrade to
no-ops and, where useful, leave a message in DashboardState.status.

Levels:
    overall -> library -> show -> season
"""

from dataclasses import replace
from typing import List, Optional, Sequence, Union

from hactar.models import LibraryScanResult, LibraryType, Season, Show
from hactar.tui.app_state import DashboardState, SortState
from hactar.tui.cached_data import find_season_by_key, find_show_by_key
from hactar.tui.models import CachedLibraryData, SortColumn, SourceType, ViewLevel
from hactar.tui.sorting import resolve_column, sort_items
from hactar.tui.view_config import resolve_view_config
from hactar.tui.views import collect_episodes, collect_library, collect_overall, collect_seasons

Payload = Union[Sequence[CachedLibraryData], LibraryScanResult, Show, Season, None]

MOVE_DIRECTIONS = ("up", "down", "pageup", "pagedown", "home", "end")


def no_cache_message(lib: CachedLibraryData) -> str:
    return f"No cached data for {lib.title}. Run 'hactar scan {lib.key}' first."


# =============================================================================
# Universal transition
# =============================================================================


def display_items(state: DashboardState, level: Union[ViewLevel, str], payload: Payload) -> DashboardState:
    """Show the rows of a level.

    Collects rows for the payload, applies the level's default sort,
    and resets pagination and selection.
    """
    level = ViewLevel(level)
    nav = state.navigation

    if level == ViewLevel.OVERALL:
        rows = collect_overall(payload or [])
        nav = replace(nav, level=level, library_kind=None, current_show=None, current_season=None)
    elif level == ViewLevel.LIBRARY:
        kind: Optional[LibraryType] = payload.library_type if payload is not None else None
        rows = collect_library(payload)
        nav = replace(nav, level=level, library_kind=kind, current_show=None, current_season=None)
    elif level == ViewLevel.SHOW:
        rows = collect_seasons(payload)
        nav = replace(nav, level=level, current_show=payload, current_season=None)
    else:
        rows = collect_episodes(payload)
        nav = replace(nav, level=level, current_season=payload)

    config = resolve_view_config(level, nav.library_kind)
    sort = SortState(config.default_sort_column, config.default_sort_direction)
    if rows:
        rows = sort_items(rows, sort.column, sort.direction)

    table = replace(state.table, items=tuple(rows), current_page=1, selected_index=0, sort=sort)
    return replace(state, navigation=nav, table=table, status="")


# =============================================================================
# Library switching
# =============================================================================


def select_library(state: DashboardState, cached: Sequence[CachedLibraryData], index: int) -> DashboardState:
    """Jump to a library list entry (0 is "All Libraries")."""
    total = len(cached) + 1
    index = index % total
    if index == 0:
        moved = replace(state, navigation=replace(state.navigation, library_index=0))
        return display_items(moved, ViewLevel.OVERALL, cached)

    lib = cached[index - 1]
    nav = replace(state.navigation, library_index=index)
    if not lib.has_data:
        return replace(state, navigation=nav, status=no_cache_message(lib))
    return display_items(replace(state, navigation=nav), ViewLevel.LIBRARY, lib.data)


def cycle_library(state: DashboardState, cached: Sequence[CachedLibraryData]) -> DashboardState:
    """Advance to the next library, wrapping back to "All Libraries"."""
    return select_library(state, cached, state.navigation.library_index + 1)


# =============================================================================
# Hierarchy
# =============================================================================


def drill_down(state: DashboardState, cached: Sequence[CachedLibraryData]) -> DashboardState:
    """Open the selected show or season; movies and episodes are leaves."""
    row = state.table.selected_item
    if row is None:
        return state
    if row.source_type.is_leaf:
        return replace(state, status=f"{row.title} has no items to open")

    if row.source_type == SourceType.SHOW:
        show = find_show_by_key(row.source_key, list(cached))
        if show is None:
            return replace(state, status=f"Show not found: {row.title}")
        return display_items(state, ViewLevel.SHOW, show)

    if row.source_type == SourceType.SEASON:
        season = find_season_by_key(row.source_key, list(cached), state.navigation.current_show)
        if season is None:
            return replace(state, status=f"Season not found: {row.title}")
        return display_items(state, ViewLevel.SEASON, season)

    return state


def navigate_back(state: DashboardState, cached: Sequence[CachedLibraryData]) -> DashboardState:
    """Go one level up; the overall view is the root."""
    nav = state.navigation

    if nav.level == ViewLevel.SEASON:
        if nav.current_show is None:
            return state
        return display_items(state, ViewLevel.SHOW, nav.current_show)

    if nav.level == ViewLevel.SHOW:
        lib = _library_at(cached, nav.library_index)
        if lib is None or not lib.has_data:
            return _to_overall(state, cached)
        return display_items(state, ViewLevel.LIBRARY, lib.data)

    if nav.level == ViewLevel.LIBRARY:
        return _to_overall(state, cached)

    return state


def _library_at(cached: Sequence[CachedLibraryData], library_index: int) -> Optional[CachedLibraryData]:
    if 1 <= library_index <= len(cached):
        return cached[library_index - 1]
    return None


def _to_overall(state: DashboardState, cached: Sequence[CachedLibraryData]) -> DashboardState:
    moved = replace(state, navigation=replace(state.navigation, library_index=0))
    return display_items(moved, ViewLevel.OVERALL, cached)


# =============================================================================
# Selection and pagination
# =============================================================================


def move_table_selection(state: DashboardState, direction: str) -> DashboardState:
    """Move the selection and keep current_page on the selected row's page."""
    table = state.table
    total = table.total_items
    if total == 0 or direction not in MOVE_DIRECTIONS:
        return state

    index = table.selected_index
    step = table.items_per_page
    if direction == "up":
        index -= 1
    elif direction == "down":
        index += 1
    elif direction == "pageup":
        index -= step
    elif direction == "pagedown":
        index += step
    elif direction == "home":
        index = 0
    else:
        index = total - 1

    index = max(0, min(total - 1, index))
    table = replace(table, selected_index=index, current_page=table.page_for(index))
    return replace(state, table=table)


def change_page(state: DashboardState, delta: int) -> DashboardState:
    """Move to an adjacent page and select its first row."""
    table = state.table
    if table.total_items == 0:
        return state
    page = max(1, min(table.total_pages, table.current_page + delta))
    if page == table.current_page:
        return state
    index = (page - 1) * table.items_per_page
    return replace(state, table=replace(table, current_page=page, selected_index=index))


# =============================================================================
# Sorting
# =============================================================================


def sort_by_column(state: DashboardState, column: Union[SortColumn, str]) -> DashboardState:
    """Re-sort the full row set by column, keeping the direction.

    Unknown column names leave the state unchanged.
    """
    column = resolve_column(column)
    if column is None:
        return state
    nav = state.navigation
    if column == SortColumn.LIBRARY and not resolve_view_config(nav.level, nav.library_kind).has_column(column):
        return state

    table = state.table
    sort = SortState(column, table.sort.direction)
    rows = sort_items(table.items, sort.column, sort.direction)
    table = replace(table, items=tuple(rows), sort=sort, current_page=1, selected_index=0)
    return replace(state, table=table, status="")


def toggle_sort_direction(state: DashboardState) -> DashboardState:
    table = state.table
    flipped = replace(table, sort=SortState(table.sort.column, table.sort.direction.toggled()))
    return sort_by_column(replace(state, table=flipped), flipped.sort.column)


def sort_by_hotkey(state: DashboardState, number: int) -> DashboardState:
    """Sort by the Nth visible column (1-based); out of range is a no-op."""
    nav = state.navigation
    column = resolve_view_config(nav.level, nav.library_kind).column_for_hotkey(number)
    if column is None:
        return state
    return sort_by_column(state, column)


def replace_status(state: DashboardState, message: str) -> DashboardState:
    return replace(state, status=message)


def initial_state(cached: List[CachedLibraryData]) -> DashboardState:
    """Overall view over everything in the cache."""
    return display_items(DashboardState(), ViewLevel.OVERALL, cached)
