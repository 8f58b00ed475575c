# SPDX-License-Identifier: MIT
"""Tests for per-level column layout and default sort."""

import pytest

from hactar.models import LibraryType
from hactar.tui.models import SortColumn, SortDirection, ViewLevel
from hactar.tui.view_config import resolve_view_config


def labels(config):
    return [(c.key.value, c.label) for c in config.columns]


class TestResolveViewConfig:
    def test_overall(self):
        config = resolve_view_config(ViewLevel.OVERALL)
        assert labels(config) == [("title", "Title"), ("size", "Size"), ("files", "Files"), ("library", "Library")]
        assert (config.default_sort_column, config.default_sort_direction) == (SortColumn.SIZE, SortDirection.DESC)

    def test_movie_library(self):
        config = resolve_view_config("library", LibraryType.MOVIE)
        assert labels(config) == [("title", "Title"), ("size", "Size")]

    def test_show_library(self):
        config = resolve_view_config("library", "show")
        assert labels(config) == [("title", "Title"), ("size", "Size"), ("files", "Episodes")]

    def test_show(self):
        config = resolve_view_config("show")
        assert labels(config)[0] == ("index", "Season")
        assert (config.default_sort_column, config.default_sort_direction) == (SortColumn.INDEX, SortDirection.ASC)

    def test_season(self):
        config = resolve_view_config("season")
        assert labels(config) == [("index", "Episode"), ("title", "Title"), ("size", "Size")]

    @pytest.mark.parametrize(
        "level,kind,number,expected",
        [
            ("overall", None, 4, SortColumn.LIBRARY),
            ("show", None, 1, SortColumn.INDEX),
            ("season", None, 2, SortColumn.TITLE),
            ("library", "movie", 3, None),
            ("overall", None, 0, None),
        ],
    )
    def test_hotkeys_depend_on_level(self, level, kind, number, expected):
        assert resolve_view_config(level, kind).column_for_hotkey(number) == expected

    def test_library_column_only_in_overall(self):
        assert resolve_view_config("overall").has_column(SortColumn.LIBRARY)
        assert not resolve_view_config("library", "show").has_column(SortColumn.LIBRARY)
