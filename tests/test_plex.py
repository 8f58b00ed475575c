"""Tests for the Plex HTTP client (urlopen is patched)."""
import io
import json
import urllib.error
from unittest.mock import patch

import pytest

from hactar.errors import PlexError
from hactar.models import Library, LibraryType, Show, UserConfig
from hactar.plex import PlexClient

CREDS = UserConfig(token="abcdefghijkl", server_url="http://plex:32400")


class FakeResponse(io.BytesIO):
    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


def respond(routes):
    """Build a urlopen replacement answering by path prefix."""
    calls = []

    def fake_urlopen(request, timeout=None):
        url = request.full_url
        calls.append(request)
        path = url.split("32400", 1)[1].split("?", 1)[0]
        if path not in routes:
            raise urllib.error.HTTPError(url, 404, "Not Found", {}, None)
        return FakeResponse(json.dumps(routes[path]).encode())

    fake_urlopen.calls = calls
    return fake_urlopen


def episode(key, index, size):
    return {"ratingKey": key, "title": f"Ep {index}", "index": index, "Media": [{"Part": [{"size": size}]}]}


class TestRequest:
    def test_adds_token_and_accept_header(self):
        fake = respond({"/": {"MediaContainer": {"machineIdentifier": "abc"}}})
        with patch("urllib.request.urlopen", fake):
            assert PlexClient(credentials=CREDS).test_connection() is True

        request = fake.calls[0]
        assert "X-Plex-Token=abcdefghijkl" in request.full_url
        assert request.get_header("Accept") == "application/json"

    def test_http_error_becomes_error_payload(self):
        with patch("urllib.request.urlopen", respond({})):
            result = PlexClient(credentials=CREDS).request("/missing")
        assert result["error"].startswith("Plex API error: 404")

    def test_network_error_becomes_error_payload(self):
        def boom(request, timeout=None):
            raise urllib.error.URLError("refused")

        with patch("urllib.request.urlopen", boom):
            client = PlexClient(credentials=CREDS)
            assert "error" in client.request("/")
            assert client.test_connection() is False
            assert client.get_libraries() == []

    def test_missing_credentials(self, hactar_home):
        client = PlexClient()
        assert client.request("/") == {"error": "Plex credentials are not configured"}
        assert client.test_connection() is False


class TestLibraries:
    def test_only_movie_and_show_sections(self):
        routes = {
            "/library/sections": {
                "MediaContainer": {
                    "Directory": [
                        {"key": "1", "title": "Movies", "type": "movie"},
                        {"key": "2", "title": "Music", "type": "artist"},
                        {"key": "3", "title": "TV", "type": "show"},
                    ]
                }
            }
        }
        with patch("urllib.request.urlopen", respond(routes)):
            libraries = PlexClient(credentials=CREDS).get_libraries()

        assert [lib.title for lib in libraries] == ["Movies", "TV"]
        assert libraries[1].type == LibraryType.SHOW


class TestScan:
    def test_movie_library_totals(self):
        routes = {
            "/library/sections/1/all": {
                "MediaContainer": {
                    "Metadata": [
                        {"ratingKey": "10", "title": "A", "Media": [{"Part": [{"size": 1_000_000_000}]}]},
                        {"ratingKey": "11", "title": "B"},
                    ]
                }
            }
        }
        with patch("urllib.request.urlopen", respond(routes)):
            result = PlexClient(credentials=CREDS).get_library_items(Library("1", "Movies"))

        assert result.library_name == "Movies"
        assert result.bytes == 1_000_000_000
        assert result.files == 2
        assert result.human_bytes == "1 GB"
        assert result.data[1].bytes == 0

    def test_show_library_aggregates_seasons_and_episodes(self):
        routes = {
            "/library/sections/2/all": {"MediaContainer": {"Metadata": [{"ratingKey": "20", "title": "Show"}]}},
            "/library/metadata/20/children": {
                "MediaContainer": {"Metadata": [{"ratingKey": "21", "index": 1}]}
            },
            "/library/metadata/21/children": {
                "MediaContainer": {
                    "Metadata": [episode("22", 1, 500_000_000), episode("23", 2, 250_000_000)]
                }
            },
        }
        progress = []
        with patch("urllib.request.urlopen", respond(routes)):
            result = PlexClient(credentials=CREDS).get_library_items(
                Library("2", "TV", LibraryType.SHOW),
                progress=lambda done, total, title: progress.append((done, total, title)),
            )

        show = result.data[0]
        assert isinstance(show, Show)
        season = show.seasons[0]
        assert season.title == "1"
        assert season.bytes == 750_000_000
        assert season.files == 2
        assert season.human_bytes == "750 MB"
        assert show.bytes == 750_000_000
        assert result.files == 2
        assert progress == [(1, 1, "Show")]

    def test_failed_section_listing_raises(self):
        def boom(request, timeout=None):
            raise urllib.error.URLError("refused")

        with patch("urllib.request.urlopen", boom):
            with pytest.raises(PlexError, match="refused"):
                PlexClient(credentials=CREDS).get_library_items(Library("1", "Movies"))

    def test_failed_episode_listing_raises(self):
        routes = {
            "/library/sections/2/all": {"MediaContainer": {"Metadata": [{"ratingKey": "20", "title": "Show"}]}},
            "/library/metadata/20/children": {
                "MediaContainer": {"Metadata": [{"ratingKey": "21", "index": 1}]}
            },
        }
        with patch("urllib.request.urlopen", respond(routes)):
            with pytest.raises(PlexError, match="404"):
                PlexClient(credentials=CREDS).get_library_items(Library("2", "TV", LibraryType.SHOW))

    def test_reset_credentials_rereads_config(self, hactar_home):
        from hactar.config import ConfigManager

        client = PlexClient()
        assert client.credentials is None
        ConfigManager().update_config(server_url="http://plex:32400", token="abcdefghijkl")
        assert client.credentials is not None
        client.reset_credentials()
        assert client.credentials.token == "abcdefghijkl"
