# SPDX-License-Identifier: MIT
"""Tests for the ModalManager state machine."""

import asyncio

import pytest

from hactar.models import Library, LibraryType
from hactar.tui.modal import (
    CONFIG_FAILED,
    CONFIG_SAVED,
    LIBRARIES_FAILED,
    SCAN_FAILED,
    SCAN_SUCCEEDED,
    SELECT_LIBRARY,
    SERVER_URL_REQUIRED,
    TOKEN_REQUIRED,
    ConfigureModal,
    FeedbackKind,
    ModalKind,
    ModalManager,
    ModalResult,
    NoModal,
    ScanModal,
)

LIBRARIES = [
    Library(key="1", title="Movies", type=LibraryType.MOVIE),
    Library(key="2", title="TV", type=LibraryType.SHOW),
]


class Recorder:
    """Collects callback invocations in order."""

    def __init__(self, result=True):
        self.result = result
        self.calls = []

    def submit(self, *args):
        self.calls.append(("submit", args))
        return self.result

    async def scan(self, library):
        self.calls.append(("scan", library.key))
        return self.result

    def refresh(self):
        self.calls.append(("refresh",))

    def close(self):
        self.calls.append(("close",))


@pytest.fixture
def manager():
    return ModalManager(close_delay=0)


class TestVisibility:
    def test_starts_closed(self, manager):
        assert not manager.is_visible
        assert isinstance(manager.get_state(), NoModal)

    def test_open_and_close(self, manager):
        assert manager.open("configure") == ModalResult.OK
        assert isinstance(manager.get_state(), ConfigureModal)
        assert manager.close() == ModalResult.OK
        assert manager.kind == ModalKind.NONE

    def test_second_modal_is_blocked(self, manager):
        manager.open(ModalKind.CONFIGURE)
        assert manager.open(ModalKind.SCAN) == ModalResult.BLOCKED
        assert manager.kind == ModalKind.CONFIGURE

    def test_form_survives_close(self, manager):
        manager.open("configure")
        manager.set_server_url("http://plex:32400")
        manager.close()
        manager.open("configure")
        assert manager.get_state().server_url == "http://plex:32400"

    def test_prefill_does_not_overwrite_typed_values(self, manager):
        manager.set_token("typed-token")
        manager.prefill_configure("http://saved", "saved-token")
        assert manager.configure_form.token == "typed-token"

    def test_on_change_notified(self):
        seen = []
        manager = ModalManager(close_delay=0, on_change=lambda m: seen.append(m.kind))
        manager.open("scan")
        manager.close()
        assert seen == [ModalKind.SCAN, ModalKind.NONE]

    def test_feedback_slot_replaces_previous(self, manager):
        manager.show_errors(["a", "b"])
        manager.show_progress("working")
        assert manager.feedback.kind == FeedbackKind.PROGRESS
        assert manager.feedback.text == "working"


class TestSubmitConfigure:
    @pytest.mark.asyncio
    async def test_empty_fields_report_both_errors(self, manager):
        recorder = Recorder()
        manager.open("configure")

        result = await manager.submit_configure(recorder.submit, recorder.close, recorder.refresh)

        assert result == ModalResult.INVALID
        assert manager.get_state().errors == (SERVER_URL_REQUIRED, TOKEN_REQUIRED)
        assert recorder.calls == []
        assert manager.is_visible

    @pytest.mark.asyncio
    async def test_whitespace_counts_as_empty(self, manager):
        manager.open("configure")
        manager.set_server_url("   ")
        manager.set_token("abcdefghijkl")
        await manager.submit_configure(Recorder().submit)
        assert manager.get_state().errors == (SERVER_URL_REQUIRED,)

    @pytest.mark.asyncio
    async def test_success_refreshes_then_closes(self, manager):
        recorder = Recorder()
        manager.open("configure")
        manager.set_server_url(" http://plex:32400 ")
        manager.set_token("abcdefghijkl")

        result = await manager.submit_configure(recorder.submit, recorder.close, recorder.refresh)

        assert result == ModalResult.OK
        assert recorder.calls == [
            ("submit", ("http://plex:32400", "abcdefghijkl")),
            ("refresh",),
            ("close",),
        ]
        assert not manager.is_visible
        assert manager.feedback.text == CONFIG_SAVED

    @pytest.mark.asyncio
    async def test_failure_keeps_modal_open(self, manager):
        manager.open("configure")
        manager.set_server_url("http://plex")
        manager.set_token("abcdefghijkl")

        result = await manager.submit_configure(Recorder(result=False).submit)

        assert result == ModalResult.FAILED
        assert manager.get_state().errors == (CONFIG_FAILED,)
        assert manager.is_visible
        assert not manager.in_flight

    @pytest.mark.asyncio
    async def test_exception_is_generic_failure(self, manager):
        def explode(url, token):
            raise RuntimeError("disk full")

        manager.open("configure")
        manager.set_server_url("http://plex")
        manager.set_token("abcdefghijkl")

        assert await manager.submit_configure(explode) == ModalResult.FAILED
        assert manager.get_state().errors == (CONFIG_FAILED,)

    @pytest.mark.asyncio
    async def test_requires_configure_modal(self, manager):
        assert await manager.submit_configure(Recorder().submit) == ModalResult.NOT_READY

    @pytest.mark.asyncio
    async def test_second_submit_while_in_flight_is_busy(self):
        manager = ModalManager(close_delay=0)
        gate = asyncio.Event()
        calls = []

        async def slow_submit(url, token):
            calls.append(url)
            await gate.wait()
            return True

        manager.open("configure")
        manager.set_server_url("http://plex")
        manager.set_token("abcdefghijkl")

        first = asyncio.ensure_future(manager.submit_configure(slow_submit))
        await asyncio.sleep(0)
        assert manager.in_flight
        assert await manager.submit_configure(slow_submit) == ModalResult.BUSY

        gate.set()
        assert await first == ModalResult.OK
        assert calls == ["http://plex"]


class TestScan:
    @pytest.mark.asyncio
    async def test_load_libraries_selects_first(self, manager):
        manager.open("scan")
        assert await manager.load_libraries(lambda: LIBRARIES) == ModalResult.OK

        state = manager.get_state()
        assert isinstance(state, ScanModal)
        assert [lib.title for lib in state.libraries] == ["Movies", "TV"]
        assert state.selected_index == 0
        assert manager.feedback.kind == FeedbackKind.NONE

    @pytest.mark.asyncio
    async def test_load_failure(self, manager):
        def broken():
            raise OSError("offline")

        manager.open("scan")
        assert await manager.load_libraries(broken) == ModalResult.FAILED
        assert manager.get_state().errors == (LIBRARIES_FAILED,)
        assert manager.get_state().selected_index is None

    @pytest.mark.asyncio
    async def test_scan_selected_library(self, manager):
        recorder = Recorder()
        manager.open("scan")
        await manager.load_libraries(lambda: LIBRARIES)
        manager.move_selection(1)

        result = await manager.execute_scan(recorder.scan, recorder.close, recorder.refresh)

        assert result == ModalResult.OK
        assert recorder.calls == [("scan", "2"), ("refresh",), ("close",)]
        assert manager.feedback.text == SCAN_SUCCEEDED

    @pytest.mark.asyncio
    async def test_scan_without_selection(self, manager):
        recorder = Recorder()
        manager.open("scan")

        assert await manager.execute_scan(recorder.scan) == ModalResult.INVALID
        assert manager.get_state().errors == (SELECT_LIBRARY,)
        assert recorder.calls == []

    @pytest.mark.asyncio
    async def test_scan_failure(self, manager):
        manager.open("scan")
        await manager.load_libraries(lambda: LIBRARIES)
        assert await manager.execute_scan(Recorder(result=False).scan) == ModalResult.FAILED
        assert manager.get_state().errors == (SCAN_FAILED,)
        assert manager.is_visible

    def test_selection_bounds(self, manager):
        manager.scan_form.libraries = list(LIBRARIES)
        assert manager.select_library(5) == ModalResult.INVALID
        assert manager.select_library(1) == ModalResult.OK
        assert manager.move_selection(10) == ModalResult.OK
        assert manager.scan_form.selected_index == 1
        assert manager.move_selection(-10) == ModalResult.OK
        assert manager.scan_form.selected_index == 0

    def test_move_without_libraries(self, manager):
        assert manager.move_selection(1) == ModalResult.NOT_READY

    @pytest.mark.asyncio
    async def test_failed_scan_keeps_selection_for_retry(self, manager):
        manager.open("scan")
        await manager.load_libraries(lambda: LIBRARIES)
        manager.select_library(1)

        assert await manager.execute_scan(Recorder(result=False).scan) == ModalResult.FAILED
        assert manager.get_state().selected_index == 1

        recorder = Recorder()
        assert await manager.execute_scan(recorder.scan) == ModalResult.OK
        assert recorder.calls[0] == ("scan", "2")

    @pytest.mark.asyncio
    async def test_reload_keeps_selected_library(self, manager):
        manager.open("scan")
        await manager.load_libraries(lambda: LIBRARIES)
        manager.select_library(1)

        reordered = [Library(key="3", title="Anime", type=LibraryType.SHOW)] + LIBRARIES
        await manager.load_libraries(lambda: reordered)
        assert manager.scan_form.selected_library.key == "2"

        await manager.load_libraries(lambda: LIBRARIES[:1])
        assert manager.scan_form.selected_index == 0


class TestCloseDelay:
    @pytest.mark.asyncio
    async def test_refresh_and_close_wait_for_delay(self):
        manager = ModalManager(close_delay=0.2)
        recorder = Recorder()
        manager.open("configure")
        manager.set_server_url("http://plex")
        manager.set_token("abcdefghijkl")

        task = asyncio.ensure_future(manager.submit_configure(recorder.submit, recorder.close, recorder.refresh))
        await asyncio.sleep(0.01)

        assert recorder.calls == [("submit", ("http://plex", "abcdefghijkl"))]
        assert manager.feedback.text == CONFIG_SAVED
        assert manager.is_visible

        assert await task == ModalResult.OK
        assert recorder.calls[1:] == [("refresh",), ("close",)]
        assert not manager.is_visible
