# SPDX-License-Identifier: MIT
"""State containers for the dashboard app.

The dataclasses group related state together semantically:

- SortState: Column and direction for table sorting
- NavigationState: Where in the library hierarchy the user is
- TableState: Rows, pagination and selection of the items table
- DashboardState: Top-level container passed through navigation transitions

Navigation functions treat DashboardState as a value: they build new
instances with dataclasses.replace() instead of mutating.
"""
import math
from dataclasses import dataclass, field
from typing import Optional, Tuple

from hactar.models import LibraryType, Season, Show
from hactar.tui.models import DashboardItem, SortColumn, SortDirection, ViewLevel

ITEMS_PER_PAGE = 20


@dataclass(frozen=True)
class SortState:
    """Sorting state for the items table."""

    column: SortColumn = SortColumn.SIZE
    direction: SortDirection = SortDirection.DESC


@dataclass(frozen=True)
class NavigationState:
    """Position in the overall -> library -> show -> season hierarchy.

    library_index 0 is "All Libraries"; 1..N index the cached libraries.
    """

    level: ViewLevel = ViewLevel.OVERALL
    library_index: int = 0
    library_kind: Optional[LibraryType] = None
    current_show: Optional[Show] = None
    current_season: Optional[Season] = None


@dataclass(frozen=True)
class TableState:
    """Rows currently listed plus pagination and selection."""

    items: Tuple[DashboardItem, ...] = ()
    current_page: int = 1
    items_per_page: int = ITEMS_PER_PAGE
    selected_index: int = 0
    sort: SortState = field(default_factory=SortState)

    @property
    def total_items(self) -> int:
        return len(self.items)

    @property
    def total_pages(self) -> int:
        return max(1, math.ceil(self.total_items / self.items_per_page))

    @property
    def selected_item(self) -> Optional[DashboardItem]:
        if 0 <= self.selected_index < self.total_items:
            return self.items[self.selected_index]
        return None

    def page_for(self, index: int) -> int:
        return index // self.items_per_page + 1


@dataclass(frozen=True)
class DashboardState:
    """Top-level container for dashboard state."""

    navigation: NavigationState = field(default_factory=NavigationState)
    table: TableState = field(default_factory=TableState)
    status: str = ""
