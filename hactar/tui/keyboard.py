#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Keyboard routing for the dashboard.

KEY_MAP binds every logical action to its keys. The router is the only
place that checks whether a modal is visible: while one is, every action
except opening and closing a modal is suppressed.
"""

from enum import Enum
from typing import Callable, Dict, Mapping, Optional, Tuple

from textual.binding import Binding


class RouteResult(str, Enum):
    HANDLED = "handled"
    SUPPRESSED = "suppressed"
    UNKNOWN = "unknown"


# (action, keys, footer description, shown in footer)
KEY_MAP: Tuple[Tuple[str, str, str, bool], ...] = (
    ("move_up", "up,k", "Up", False),
    ("move_down", "down,j", "Down", False),
    ("page_up", "pageup", "Page up", False),
    ("page_down", "pagedown", "Page down", False),
    ("first_row", "home", "First", False),
    ("last_row", "end", "Last", False),
    ("previous_page", "left,a", "Prev page", False),
    ("next_page", "right,d", "Next page", False),
    ("drill_down", "enter", "Open", True),
    ("navigate_back", "backspace,b", "Back", True),
    ("cycle_library", "tab", "Library", True),
    ("sort_1", "1", "Sort 1", False),
    ("sort_2", "2", "Sort 2", False),
    ("sort_3", "3", "Sort 3", False),
    ("sort_4", "4", "Sort 4", False),
    ("toggle_sort", "r", "Reverse", True),
    ("open_configure", "c", "Configure", True),
    ("open_scan", "s", "Scan", True),
    ("close_modal", "escape", "Close", False),
    ("quit", "q", "Quit", True),
)

MODAL_ACTIONS = frozenset({"open_configure", "open_scan", "close_modal"})

# tab is bound on Screen for focus traversal; ours has to win
PRIORITY_ACTIONS = frozenset({"cycle_library"})


def key_bindings() -> Dict[str, str]:
    """Map each physical key to its action."""
    bindings: Dict[str, str] = {}
    for action, keys, _, _ in KEY_MAP:
        for key in keys.split(","):
            if key in bindings:
                raise ValueError(f"Key {key!r} bound to both {bindings[key]} and {action}")
            bindings[key] = action
    return bindings


def textual_bindings() -> list:
    """Textual Binding objects routing every key through action_route()."""
    return [
        Binding(
            keys,
            f"route('{action}')",
            description,
            show=show,
            priority=action in PRIORITY_ACTIONS,
        )
        for action, keys, description, show in KEY_MAP
    ]


class KeyboardRouter:
    """Dispatches logical actions to handlers behind a single modal gate."""

    def __init__(
        self,
        handlers: Mapping[str, Callable[[], object]],
        is_modal_visible: Callable[[], bool],
    ) -> None:
        self.handlers = dict(handlers)
        self.is_modal_visible = is_modal_visible

    def is_allowed(self, action: str) -> bool:
        if action in MODAL_ACTIONS:
            return True
        return not self.is_modal_visible()

    def dispatch(self, action: str) -> RouteResult:
        handler: Optional[Callable[[], object]] = self.handlers.get(action)
        if handler is None:
            return RouteResult.UNKNOWN
        if not self.is_allowed(action):
            return RouteResult.SUPPRESSED
        handler()
        return RouteResult.HANDLED
