# SPDX-License-Identifier: MIT
"""Tests for dashboard state dataclasses."""

from dataclasses import is_dataclass

from hactar.tui.app_state import DashboardState, NavigationState, SortState, TableState
from hactar.tui.models import DashboardItem, SortColumn, SortDirection, SourceType, ViewLevel


def rows(n):
    return tuple(
        DashboardItem(title=str(i), size="0 B", bytes=0, files=0, source_type=SourceType.MOVIE) for i in range(n)
    )


class TestSortState:
    def test_defaults(self):
        state = SortState()
        assert is_dataclass(state)
        assert state.column == SortColumn.SIZE
        assert state.direction == SortDirection.DESC


class TestNavigationState:
    def test_defaults(self):
        nav = NavigationState()
        assert nav.level == ViewLevel.OVERALL
        assert nav.library_index == 0
        assert nav.current_show is None
        assert nav.current_season is None


class TestTableState:
    def test_total_items_is_row_count(self):
        assert TableState(items=rows(45)).total_items == 45

    def test_total_pages(self):
        assert TableState().total_pages == 1
        assert TableState(items=rows(20)).total_pages == 1
        assert TableState(items=rows(21)).total_pages == 2

    def test_page_for(self):
        table = TableState(items=rows(45))
        assert table.page_for(0) == 1
        assert table.page_for(19) == 1
        assert table.page_for(20) == 2

    def test_selected_item(self):
        assert TableState().selected_item is None
        assert TableState(items=rows(3), selected_index=2).selected_item.title == "2"


class TestDashboardState:
    def test_defaults(self):
        state = DashboardState()
        assert state.status == ""
        assert state.table.items_per_page == 20
