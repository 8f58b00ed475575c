"""
Pytest configuration and fixtures for hactar tests.
"""

import sys
from pathlib import Path

# Ensure project root is in sys.path for 'hactar' package imports
# This must happen before any imports from hactar
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import pytest

from hactar.errors import PlexError
from hactar.models import Episode, LibraryScanResult, LibraryType, Media, Season, Show
from hactar.tui.models import CachedLibraryData

GB = 1_000_000_000
MB = 1_000_000


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "tui: marks TUI tests")


@pytest.fixture
def hactar_home(tmp_path: Path, monkeypatch) -> Path:
    """Create and return a temporary hactar home directory.

    Sets HACTAR_HOME and resets the console logger.
    """
    home = tmp_path / ".hactar"
    home.mkdir()
    monkeypatch.setenv("HACTAR_HOME", str(home))
    monkeypatch.delenv("HACTAR_DEBUG", raising=False)

    from hactar.logger import reset_logger
    reset_logger()

    return home


@pytest.fixture(autouse=True)
def isolate_hactar_home(hactar_home: Path):
    """Autouse fixture that keeps every test away from the real ~/.hactar."""
    yield hactar_home

    from hactar.logger import reset_logger
    reset_logger()


# =============================================================================
# Media tree fixtures
# =============================================================================


@pytest.fixture
def movies_result() -> LibraryScanResult:
    """Movie library with a 1 GB and a 2 GB movie."""
    return LibraryScanResult(
        library_type=LibraryType.MOVIE,
        library_name="Movies",
        bytes=3 * GB,
        files=2,
        human_bytes="3 GB",
        data=[
            Media(rating_key="m1", title="Small Movie", bytes=GB, files=1, human_bytes="1 GB"),
            Media(rating_key="m2", title="Big Movie", bytes=2 * GB, files=1, human_bytes="2 GB"),
        ],
    )


@pytest.fixture
def tv_result() -> LibraryScanResult:
    """Show library: one show, one season, two 500 MB episodes.

    Show and season totals are left empty so they are summed from episodes.
    """
    season = Season(
        rating_key="s1",
        title="Season 1",
        season_index=1,
        episodes=[
            Episode(rating_key="e1", title="Pilot", episode_index=1, bytes=500 * MB, files=1),
            Episode(rating_key="e2", title="Second", episode_index=2, bytes=500 * MB, files=1),
        ],
    )
    return LibraryScanResult(
        library_type=LibraryType.SHOW,
        library_name="TV",
        bytes=GB,
        files=2,
        human_bytes="1 GB",
        data=[Show(rating_key="show1", title="The Show", seasons=[season])],
    )


@pytest.fixture
def cached(movies_result, tv_result):
    """Two cached libraries in storage key order: TV (key 1) and Movies (key 2)."""
    return [
        CachedLibraryData(key="1", title="TV", data=tv_result),
        CachedLibraryData(key="2", title="Movies", data=movies_result),
    ]


# =============================================================================
# Collaborator fakes
# =============================================================================


class FakePlex:
    """Stands in for PlexClient; records scans instead of calling the network."""

    def __init__(self, connected=True, libraries=None, result=None, fail_scan=False):
        self.connected = connected
        self.libraries = libraries or []
        self.result = result
        self.fail_scan = fail_scan
        self.resets = 0
        self.scanned = []

    def test_connection(self):
        return self.connected

    def get_libraries(self):
        return list(self.libraries)

    def get_library_items(self, library, progress=None):
        self.scanned.append(library.key)
        if self.fail_scan:
            raise PlexError("Plex API request failed: connection refused")
        if progress and self.result is not None:
            total = len(self.result.data)
            for done, item in enumerate(self.result.data, start=1):
                progress(done, total, item.title)
        return self.result

    def reset_credentials(self):
        self.resets += 1


@pytest.fixture
def make_manager():
    """Factory for a HactarManager backed by FakePlex and the isolated home dir."""
    from hactar.manager import HactarManager

    def _make(**plex_kwargs):
        return HactarManager(plex=FakePlex(**plex_kwargs))

    return _make
