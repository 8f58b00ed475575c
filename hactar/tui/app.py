#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Main TUI application for the hactar dashboard.

Browses cached Plex library scans with:
- Library list with an "All Libraries" entry and a storage summary
- Paginated, sortable items table with show/season drill-down
- Configure and scan modals that own the keyboard while open
"""

import asyncio
from typing import List, Optional

from textual import work
from textual.actions import SkipAction
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.screen import ModalScreen
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Input,
    LoadingIndicator,
    OptionList,
    Static,
)
from textual.widgets.option_list import Option

from hactar.manager import HactarManager
from hactar.models import DEFAULT_SERVER_URL, Library
from hactar.tui import navigation
from hactar.tui.app_state import DashboardState
from hactar.tui.keyboard import KeyboardRouter, RouteResult, textual_bindings
from hactar.tui.modal import (
    CLOSE_DELAY,
    Feedback,
    FeedbackKind,
    ModalKind,
    ModalManager,
    ModalResult,
)
from hactar.tui.models import CachedLibraryData
from hactar.tui.render import (
    breadcrumb,
    library_list_labels,
    status_lines,
    storage_summary,
    table_columns,
    table_rows,
)

FEEDBACK_STYLES = {
    FeedbackKind.ERRORS: "red",
    FeedbackKind.SUCCESS: "green",
    FeedbackKind.PROGRESS: "yellow",
}


def _feedback_markup(feedback: Feedback) -> str:
    style = FEEDBACK_STYLES.get(feedback.kind)
    if not style:
        return ""
    return "\n".join(f"[{style}]{message}[/{style}]" for message in feedback.messages)


# =============================================================================
# Screens
# =============================================================================


class LoadingScreen(ModalScreen):
    """Full-screen loading modal shown while cached data loads."""

    BINDINGS = [
        # No escape binding - must wait for loading
    ]

    def compose(self) -> ComposeResult:
        with Vertical(id="loading-modal"):
            yield Static("[bold]Hactar[/bold]", classes="modal-title")
            yield LoadingIndicator()
            yield Static("Initializing...", id="loading-status")

    def update_status(self, text: str) -> None:
        self.query_one("#loading-status", Static).update(text)


class ConfigureScreen(ModalScreen):
    """Server URL and token form. Field values live in the ModalManager."""

    BINDINGS = [
        Binding("escape", "app.route('close_modal')", "Close"),
    ]

    def compose(self) -> ComposeResult:
        with Vertical(id="configure-modal"):
            yield Static("[bold]Configure[/bold]", classes="modal-title")
            yield Static("Server URL", classes="field-label")
            yield Input(placeholder=DEFAULT_SERVER_URL, id="server-url")
            yield Static("Token", classes="field-label")
            yield Input(placeholder="Plex token", password=True, id="token")
            yield Button("Save", id="save", variant="success")
            yield Static("", id="configure-feedback")
            yield Static("[dim]Tab: Next field | Enter: Save | Esc: Cancel[/dim]")

    def on_screen_resume(self) -> None:
        self.call_after_refresh(self.sync_from_form)

    def sync_from_form(self) -> None:
        form = self.app.modal.configure_form
        server_input = self.query_one("#server-url", Input)
        token_input = self.query_one("#token", Input)
        server_input.value = form.server_url
        token_input.value = form.token
        self.show_feedback(self.app.modal.feedback)
        server_input.focus()

    def show_feedback(self, feedback: Feedback) -> None:
        self.query_one("#configure-feedback", Static).update(_feedback_markup(feedback))

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "server-url":
            self.app.modal.set_server_url(event.value)
        elif event.input.id == "token":
            self.app.modal.set_token(event.value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.app.submit_configure()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "save":
            self.app.submit_configure()


class ScanScreen(ModalScreen):
    """Library picker; Enter scans the highlighted library."""

    BINDINGS = [
        Binding("escape", "app.route('close_modal')", "Close"),
    ]

    def compose(self) -> ComposeResult:
        with Vertical(id="scan-modal"):
            yield Static("[bold]Scan[/bold]", classes="modal-title")
            yield OptionList(Option("Loading libraries...", disabled=True), id="scan-libraries")
            yield Static("", id="scan-feedback")
            yield Static("[dim]↑↓: Select | Enter: Scan | Esc: Cancel[/dim]")

    def on_screen_resume(self) -> None:
        self.call_after_refresh(self._on_shown)

    def _on_shown(self) -> None:
        self.show_feedback(self.app.modal.feedback)
        self.query_one("#scan-libraries", OptionList).focus()
        self.app.load_scan_libraries()

    def show_libraries(self, libraries: List[Library], selected: Optional[int]) -> None:
        option_list = self.query_one("#scan-libraries", OptionList)
        option_list.clear_options()
        if not libraries:
            option_list.add_option(Option("No libraries found", disabled=True))
            return
        option_list.add_options([Option(lib.title, id=lib.key) for lib in libraries])
        if selected is not None:
            option_list.highlighted = selected

    def show_feedback(self, feedback: Feedback) -> None:
        self.query_one("#scan-feedback", Static).update(_feedback_markup(feedback))

    def on_option_list_option_highlighted(self, event: OptionList.OptionHighlighted) -> None:
        if event.option_index is not None:
            self.app.modal.select_library(event.option_index)

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        self.app.modal.select_library(event.option_index)
        self.app.execute_scan()


MODAL_SCREENS = {
    ModalKind.CONFIGURE: ConfigureScreen,
    ModalKind.SCAN: ScanScreen,
}


# =============================================================================
# App
# =============================================================================


class DashboardApp(App):
    """
    Main Textual application for hactar.

    Holds the DashboardState and replaces it with the result of each
    navigation transition, then redraws from the render projections.
    """

    TITLE = "Hactar Dashboard"
    CSS_PATH = "styles/app.tcss"

    BINDINGS = textual_bindings()

    def __init__(
        self,
        manager: Optional[HactarManager] = None,
        close_delay: float = CLOSE_DELAY,
    ) -> None:
        super().__init__()
        self.manager = manager or HactarManager()
        self.state = DashboardState()
        self.cached: List[CachedLibraryData] = []
        self.modal = ModalManager(close_delay=close_delay, on_change=self._on_modal_change)
        self.router = KeyboardRouter(self._route_handlers(), lambda: self.modal.is_visible)

    def _route_handlers(self):
        return {
            "move_up": lambda: self._move("up"),
            "move_down": lambda: self._move("down"),
            "page_up": lambda: self._move("pageup"),
            "page_down": lambda: self._move("pagedown"),
            "first_row": lambda: self._move("home"),
            "last_row": lambda: self._move("end"),
            "previous_page": lambda: self._apply(navigation.change_page(self.state, -1)),
            "next_page": lambda: self._apply(navigation.change_page(self.state, 1)),
            "drill_down": lambda: self._apply(navigation.drill_down(self.state, self.cached)),
            "navigate_back": lambda: self._apply(navigation.navigate_back(self.state, self.cached)),
            "cycle_library": lambda: self._apply(navigation.cycle_library(self.state, self.cached)),
            "sort_1": lambda: self._apply(navigation.sort_by_hotkey(self.state, 1)),
            "sort_2": lambda: self._apply(navigation.sort_by_hotkey(self.state, 2)),
            "sort_3": lambda: self._apply(navigation.sort_by_hotkey(self.state, 3)),
            "sort_4": lambda: self._apply(navigation.sort_by_hotkey(self.state, 4)),
            "toggle_sort": lambda: self._apply(navigation.toggle_sort_direction(self.state)),
            "open_configure": lambda: self.open_modal(ModalKind.CONFIGURE),
            "open_scan": lambda: self.open_modal(ModalKind.SCAN),
            "close_modal": self.close_modal,
            "quit": self.exit,
        }

    def compose(self) -> ComposeResult:
        """Compose the app layout."""
        yield Header()
        with Horizontal(id="body"):
            with Vertical(id="sidebar"):
                yield Static("Libraries", classes="section-title")
                yield OptionList(id="library-list")
                yield Static("Storage", classes="section-title")
                yield Static("", id="storage-summary")
            with Vertical(id="main-panel"):
                yield Static("", id="breadcrumb")
                yield DataTable(id="items-table")
                yield Static("", id="status-log")
        yield Footer()

    def on_mount(self) -> None:
        """Initialize on app mount."""
        table = self.query_one("#items-table", DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        # Keys are routed through the app; widgets must not consume them
        table.can_focus = False
        self.query_one("#library-list", OptionList).can_focus = False
        self.push_screen(LoadingScreen())
        self._load_all_async()

    @work(exclusive=True)
    async def _load_all_async(self) -> None:
        """Load cached library data off the event loop, then draw the overall view."""
        # Wait for the LoadingScreen to be fully composed
        for _ in range(50):  # Max 500ms wait
            await asyncio.sleep(0.01)
            if isinstance(self.screen, LoadingScreen) and self.screen.is_mounted:
                break

        loading = self.screen if isinstance(self.screen, LoadingScreen) else None
        try:
            if loading is not None:
                loading.update_status("Loading cached library data...")
                await asyncio.sleep(0)  # Yield to event loop for UI updates
            try:
                self.cached = await asyncio.to_thread(self.manager.load_cached_data)
            except Exception as e:
                self.cached = []
                self.notify(f"Error loading cached data: {e}", severity="error")
            self.state = navigation.initial_state(self.cached)
            if not self.cached:
                self.state = navigation.replace_status(
                    self.state, "No libraries found. Run 'hactar scan' first."
                )
        finally:
            if loading is not None:
                self.pop_screen()
        self.refresh_sidebar()
        self.refresh_view()

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def refresh_view(self) -> ModalResult:
        """Redraw the table and status panel from self.state."""
        try:
            table = self.query_one("#items-table", DataTable)
            status = self.query_one("#status-log", Static)
            crumb = self.query_one("#breadcrumb", Static)
        except NoMatches:
            return ModalResult.NOT_READY

        table.clear(columns=True)
        for key, label, width in table_columns(self.state):
            table.add_column(label, key=key, width=width)
        rows = table_rows(self.state)
        table.add_rows(rows)
        if rows:
            t = self.state.table
            table.move_cursor(row=t.selected_index - (t.current_page - 1) * t.items_per_page)

        crumb.update(breadcrumb(self.state, self.cached))
        status.update("\n".join(status_lines(self.state, self.cached)))
        self.sub_title = breadcrumb(self.state, self.cached)

        library_list = self.query_one("#library-list", OptionList)
        if library_list.option_count:
            library_list.highlighted = self.state.navigation.library_index
        return ModalResult.OK

    def refresh_sidebar(self) -> ModalResult:
        """Redraw the library list and storage summary from self.cached."""
        try:
            library_list = self.query_one("#library-list", OptionList)
            summary = self.query_one("#storage-summary", Static)
        except NoMatches:
            return ModalResult.NOT_READY
        library_list.clear_options()
        library_list.add_options(library_list_labels(self.cached))
        summary.update("\n".join(storage_summary(self.cached)))
        return ModalResult.OK

    def _apply(self, state: DashboardState) -> None:
        self.state = state
        self.refresh_view()

    def _move(self, direction: str) -> None:
        self._apply(navigation.move_table_selection(self.state, direction))

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        if event.option_list.id != "library-list" or self.modal.is_visible:
            return
        self._apply(navigation.select_library(self.state, self.cached, event.option_index))

    # -------------------------------------------------------------------------
    # Keyboard
    # -------------------------------------------------------------------------

    def action_route(self, action: str) -> None:
        """Single entry point for every key binding."""
        if self.router.dispatch(action) == RouteResult.SUPPRESSED:
            # Let the key reach the focused widget or the next binding
            raise SkipAction()

    # -------------------------------------------------------------------------
    # Modals
    # -------------------------------------------------------------------------

    def open_modal(self, kind: ModalKind) -> ModalResult:
        result = self.modal.open(kind)
        if result != ModalResult.OK:
            return result
        if kind == ModalKind.CONFIGURE:
            creds = self._saved_credentials()
            if creds is not None:
                self.modal.prefill_configure(creds.server_url, creds.token)
        name = kind.value
        if not self.is_screen_installed(name):
            self.install_screen(MODAL_SCREENS[kind](), name=name)
        self.push_screen(name)
        return ModalResult.OK

    def close_modal(self) -> ModalResult:
        result = self.modal.close()
        self._dismiss_modal_screen()
        return result

    def _dismiss_modal_screen(self) -> None:
        if isinstance(self.screen, (ConfigureScreen, ScanScreen)):
            self.pop_screen()

    def _saved_credentials(self):
        try:
            return self.manager.config.get_credentials()
        except Exception:
            return None

    def _on_modal_change(self, manager: ModalManager) -> None:
        screen = self.screen if self.is_running else None
        if isinstance(screen, (ConfigureScreen, ScanScreen)) and screen.is_mounted:
            try:
                screen.show_feedback(manager.feedback)
            except NoMatches:
                pass

    def submit_configure(self) -> None:
        self._submit_configure_async()

    def execute_scan(self) -> None:
        self._execute_scan_async()

    def load_scan_libraries(self) -> None:
        self._load_scan_libraries_async()

    @work(group="modal")
    async def _submit_configure_async(self) -> ModalResult:
        result = await self.modal.submit_configure(
            self._save_configuration,
            on_close=self._dismiss_modal_screen,
            on_refresh=self.reload_cached_data,
        )
        if result == ModalResult.OK:
            self.notify("Configuration saved")
        return result

    @work(group="modal")
    async def _execute_scan_async(self) -> ModalResult:
        result = await self.modal.execute_scan(
            self._scan_library,
            on_close=self._dismiss_modal_screen,
            on_refresh=self.reload_cached_data,
        )
        if result == ModalResult.OK:
            self.notify("Scan complete")
        return result

    @work(exclusive=True, group="scan-libraries")
    async def _load_scan_libraries_async(self) -> ModalResult:
        result = await self.modal.load_libraries(self._available_libraries)
        screen = self.screen
        if isinstance(screen, ScanScreen):
            form = self.modal.scan_form
            screen.show_libraries(form.libraries, form.selected_index)
        return result

    async def _save_configuration(self, server_url: str, token: str) -> bool:
        return await asyncio.to_thread(self.manager.perform_configuration, server_url, token)

    async def _available_libraries(self) -> List[Library]:
        return await asyncio.to_thread(self.manager.get_available_libraries)

    async def _scan_library(self, library: Library) -> bool:
        await asyncio.to_thread(self.manager.perform_scan, library)
        return True

    async def reload_cached_data(self) -> None:
        """Re-read the cache after a successful scan and redraw the current library."""
        try:
            self.cached = await asyncio.to_thread(self.manager.load_cached_data)
        except Exception as e:
            self.notify(f"Error loading cached data: {e}", severity="error")
            return
        self.state = navigation.select_library(
            self.state, self.cached, self.state.navigation.library_index
        )
        self.refresh_sidebar()
        self.refresh_view()


def run_app(manager: Optional[HactarManager] = None) -> None:
    """Run the dashboard."""
    app = DashboardApp(manager=manager)
    app.run()
