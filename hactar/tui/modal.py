#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Modal dialog state for the dashboard.

A single ModalManager owns both modal kinds (configure, scan). Forms are
created lazily on first open and kept when the modal closes, so reopening
shows the previous field values. Feedback (errors, success, progress) is
a single slot: setting one replaces whatever was shown before.

The manager never talks to the network or disk directly. Submitting a
form awaits an injected collaborator; failures from the collaborator are
caught here and turned into one generic message so the user can retry.
"""

import asyncio
import inspect
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Tuple, Union

from hactar.models import Library

CLOSE_DELAY = 1.5

SERVER_URL_REQUIRED = "Server URL is required"
TOKEN_REQUIRED = "Token is required"
CONFIG_SAVED = "Configuration saved successfully"
CONFIG_FAILED = "Failed to save configuration"
LIBRARIES_LOADING = "Loading libraries..."
LIBRARIES_FAILED = "Failed to load libraries"
SELECT_LIBRARY = "Please select a library to scan"
SCANNING = "Scanning library..."
SCAN_SUCCEEDED = "Library scanned successfully"
SCAN_FAILED = "Scan failed"

Callback = Callable[..., Union[Any, Awaitable[Any]]]


class ModalKind(str, Enum):
    NONE = "none"
    CONFIGURE = "configure"
    SCAN = "scan"


class ModalResult(str, Enum):
    """Outcome of a modal operation."""
    OK = "ok"
    NOT_READY = "not_ready"
    BLOCKED = "blocked"
    INVALID = "invalid"
    FAILED = "failed"
    BUSY = "busy"


class FeedbackKind(str, Enum):
    NONE = "none"
    ERRORS = "errors"
    SUCCESS = "success"
    PROGRESS = "progress"


@dataclass(frozen=True)
class Feedback:
    kind: FeedbackKind = FeedbackKind.NONE
    messages: Tuple[str, ...] = ()

    @property
    def text(self) -> str:
        return "\n".join(self.messages)


# =============================================================================
# Snapshot union returned by ModalManager.get_state()
# =============================================================================


@dataclass(frozen=True)
class NoModal:
    kind: ModalKind = ModalKind.NONE


@dataclass(frozen=True)
class ConfigureModal:
    server_url: str
    token: str
    errors: Tuple[str, ...] = ()
    kind: ModalKind = ModalKind.CONFIGURE


@dataclass(frozen=True)
class ScanModal:
    libraries: Tuple[Library, ...]
    selected_index: Optional[int]
    errors: Tuple[str, ...] = ()
    kind: ModalKind = ModalKind.SCAN


ModalState = Union[NoModal, ConfigureModal, ScanModal]


# =============================================================================
# Persistent forms
# =============================================================================


@dataclass
class ConfigureForm:
    server_url: str = ""
    token: str = ""

    def validate(self) -> List[str]:
        errors = []
        if not self.server_url.strip():
            errors.append(SERVER_URL_REQUIRED)
        if not self.token.strip():
            errors.append(TOKEN_REQUIRED)
        return errors


@dataclass
class ScanForm:
    libraries: List[Library] = field(default_factory=list)
    selected_index: Optional[int] = None

    @property
    def selected_library(self) -> Optional[Library]:
        if self.selected_index is None or not 0 <= self.selected_index < len(self.libraries):
            return None
        return self.libraries[self.selected_index]


async def _call(callback: Optional[Callback], *args: Any) -> Any:
    """Call a sync or async callback and return its result."""
    if callback is None:
        return None
    result = callback(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


class ModalManager:
    """Owns which modal is visible, its form and its feedback."""

    def __init__(
        self,
        close_delay: float = CLOSE_DELAY,
        on_change: Optional[Callable[["ModalManager"], None]] = None,
    ) -> None:
        self.close_delay = close_delay
        self.on_change = on_change
        self._kind = ModalKind.NONE
        self._configure: Optional[ConfigureForm] = None
        self._scan: Optional[ScanForm] = None
        self._feedback = Feedback()
        self._in_flight = False

    # -------------------------------------------------------------------------
    # Visibility
    # -------------------------------------------------------------------------

    @property
    def kind(self) -> ModalKind:
        return self._kind

    @property
    def is_visible(self) -> bool:
        return self._kind != ModalKind.NONE

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @property
    def feedback(self) -> Feedback:
        return self._feedback

    @property
    def configure_form(self) -> ConfigureForm:
        if self._configure is None:
            self._configure = ConfigureForm()
        return self._configure

    @property
    def scan_form(self) -> ScanForm:
        if self._scan is None:
            self._scan = ScanForm()
        return self._scan

    def open(self, kind: Union[ModalKind, str]) -> ModalResult:
        """Show a modal; blocked while another one is visible."""
        kind = ModalKind(kind)
        if kind == ModalKind.NONE:
            return self.close()
        if self.is_visible:
            return ModalResult.BLOCKED
        if kind == ModalKind.CONFIGURE and self._configure is None:
            self._configure = ConfigureForm()
        elif kind == ModalKind.SCAN and self._scan is None:
            self._scan = ScanForm()
        self._kind = kind
        self._feedback = Feedback()
        self._changed()
        return ModalResult.OK

    def close(self) -> ModalResult:
        """Hide whichever modal is visible. Always allowed."""
        self._kind = ModalKind.NONE
        self._changed()
        return ModalResult.OK

    def get_state(self) -> ModalState:
        errors = self._feedback.messages if self._feedback.kind == FeedbackKind.ERRORS else ()
        if self._kind == ModalKind.CONFIGURE:
            form = self.configure_form
            return ConfigureModal(form.server_url, form.token, errors)
        if self._kind == ModalKind.SCAN:
            form = self.scan_form
            return ScanModal(tuple(form.libraries), form.selected_index, errors)
        return NoModal()

    # -------------------------------------------------------------------------
    # Feedback slot
    # -------------------------------------------------------------------------

    def show_errors(self, errors: Sequence[str]) -> None:
        self._feedback = Feedback(FeedbackKind.ERRORS, tuple(errors))
        self._changed()

    def show_success(self, message: str) -> None:
        self._feedback = Feedback(FeedbackKind.SUCCESS, (message,))
        self._changed()

    def show_progress(self, message: str) -> None:
        self._feedback = Feedback(FeedbackKind.PROGRESS, (message,))
        self._changed()

    def clear_feedback(self) -> None:
        self._feedback = Feedback()
        self._changed()

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change(self)

    # -------------------------------------------------------------------------
    # Configure modal
    # -------------------------------------------------------------------------

    def set_server_url(self, value: str) -> None:
        self.configure_form.server_url = value

    def set_token(self, value: str) -> None:
        self.configure_form.token = value

    def prefill_configure(self, server_url: str, token: str) -> None:
        """Seed the form from saved config unless the user already typed something."""
        form = self.configure_form
        if not form.server_url and not form.token:
            form.server_url = server_url
            form.token = token

    def validate(self) -> List[str]:
        return self.configure_form.validate()

    async def submit_configure(
        self,
        on_submit: Callable[[str, str], Union[bool, Awaitable[bool]]],
        on_close: Optional[Callback] = None,
        on_refresh: Optional[Callback] = None,
    ) -> ModalResult:
        """Validate and save the configure form.

        on_submit receives (server_url, token) and returns True on success.
        """
        if self._kind != ModalKind.CONFIGURE:
            return ModalResult.NOT_READY
        if self._in_flight:
            return ModalResult.BUSY

        self.clear_feedback()
        errors = self.validate()
        if errors:
            self.show_errors(errors)
            return ModalResult.INVALID

        form = self.configure_form
        self._in_flight = True
        try:
            try:
                ok = await _call(on_submit, form.server_url.strip(), form.token.strip())
            except Exception:
                ok = False
            if not ok:
                self.show_errors([CONFIG_FAILED])
                return ModalResult.FAILED
            self.show_success(CONFIG_SAVED)
            await self._finish(on_close, on_refresh)
            return ModalResult.OK
        finally:
            self._in_flight = False

    # -------------------------------------------------------------------------
    # Scan modal
    # -------------------------------------------------------------------------

    async def load_libraries(
        self, loader: Callable[[], Union[Sequence[Library], Awaitable[Sequence[Library]]]]
    ) -> ModalResult:
        """Populate the library picker.

        A library selected before the reload stays selected when it is still
        listed; otherwise the first entry is selected.
        """
        form = self.scan_form
        previous = form.selected_library
        self.show_progress(LIBRARIES_LOADING)
        try:
            libraries = list(await _call(loader) or [])
        except Exception:
            form.libraries = []
            form.selected_index = None
            self.show_errors([LIBRARIES_FAILED])
            return ModalResult.FAILED
        form.libraries = libraries
        form.selected_index = 0 if libraries else None
        if previous is not None:
            for index, library in enumerate(libraries):
                if library.key == previous.key:
                    form.selected_index = index
                    break
        self.clear_feedback()
        return ModalResult.OK

    def select_library(self, index: int) -> ModalResult:
        form = self.scan_form
        if not 0 <= index < len(form.libraries):
            return ModalResult.INVALID
        form.selected_index = index
        self._changed()
        return ModalResult.OK

    def move_selection(self, delta: int) -> ModalResult:
        form = self.scan_form
        if not form.libraries:
            return ModalResult.NOT_READY
        current = form.selected_index or 0
        return self.select_library(max(0, min(len(form.libraries) - 1, current + delta)))

    async def execute_scan(
        self,
        on_scan: Callable[[Library], Union[bool, Awaitable[bool]]],
        on_close: Optional[Callback] = None,
        on_refresh: Optional[Callback] = None,
    ) -> ModalResult:
        """Scan the selected library through on_scan, which returns True on success."""
        if self._kind != ModalKind.SCAN:
            return ModalResult.NOT_READY
        if self._in_flight:
            return ModalResult.BUSY

        library = self.scan_form.selected_library
        if library is None:
            self.show_errors([SELECT_LIBRARY])
            return ModalResult.INVALID

        self._in_flight = True
        try:
            self.show_progress(SCANNING)
            try:
                ok = await _call(on_scan, library)
            except Exception:
                ok = False
            if not ok:
                self.show_errors([SCAN_FAILED])
                return ModalResult.FAILED
            self.show_success(SCAN_SUCCEEDED)
            await self._finish(on_close, on_refresh)
            return ModalResult.OK
        finally:
            self._in_flight = False

    async def _finish(self, on_close: Optional[Callback], on_refresh: Optional[Callback]) -> None:
        """Keep the success message up briefly, then refresh and close."""
        if self.close_delay > 0:
            await asyncio.sleep(self.close_delay)
        await _call(on_refresh)
        self.close()
        await _call(on_close)
