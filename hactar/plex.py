#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Plex Media Server HTTP client.

Talks to the JSON flavour of the Plex API using the X-Plex-Token query
parameter. request() never raises: failures come back as an {"error": ...}
payload. Listing libraries and testing the connection degrade to an empty
list or False. A scan raises PlexError instead, so a failed request is never
mistaken for an empty library.
"""

import json
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Callable, Dict, List, Optional

from hactar._version import __version__
from hactar.config import ConfigManager
from hactar.errors import PlexError
from hactar.formatting import bytes_to_human
from hactar.logger import get_logger
from hactar.models import (
    Episode,
    Library,
    LibraryScanResult,
    LibraryType,
    Media,
    Season,
    Show,
    UserConfig,
)

REQUEST_TIMEOUT = 30

# Called with (done, total, title) while a library is scanned
ProgressCallback = Callable[[int, int, str], None]


def _part_size(metadata: Dict[str, Any]) -> int:
    """Size of the first file of the first media version, 0 when absent."""
    media = metadata.get("Media") or []
    if not media:
        return 0
    parts = media[0].get("Part") or []
    if not parts:
        return 0
    return int(parts[0].get("size") or 0)


class PlexClient:
    """Minimal Plex API client for library scans."""

    def __init__(
        self,
        credentials: Optional[UserConfig] = None,
        config_manager: Optional[ConfigManager] = None,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        self._credentials = credentials
        self._config_manager = config_manager or ConfigManager()
        self.timeout = timeout

    @property
    def credentials(self) -> Optional[UserConfig]:
        if self._credentials is None:
            self._credentials = self._config_manager.get_credentials()
        return self._credentials

    def _build_url(self, endpoint: str) -> str:
        creds = self.credentials
        base = creds.server_url.rstrip("/") if creds else ""
        query = urllib.parse.urlencode({"X-Plex-Token": creds.token if creds else ""})
        return f"{base}{endpoint}?{query}"

    def request(self, endpoint: str) -> Dict[str, Any]:
        """GET an endpoint and decode its JSON body.

        Returns:
            The decoded payload, or {"error": message} on any failure.
        """
        if self.credentials is None:
            return {"error": "Plex credentials are not configured"}

        req = urllib.request.Request(
            self._build_url(endpoint),
            headers={
                "Accept": "application/json",
                "User-Agent": f"hactar/{__version__}",
            },
        )
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as response:
                body = response.read()
        except urllib.error.HTTPError as e:
            return {"error": f"Plex API error: {e.code} {e.reason}"}
        except (urllib.error.URLError, OSError, ValueError) as e:
            return {"error": f"Plex API request failed: {e}"}

        try:
            data = json.loads(body.decode("utf-8") or "{}")
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            return {"error": f"Plex API returned invalid JSON: {e}"}
        if not isinstance(data, dict):
            return {"error": "Plex API returned an unexpected payload"}
        return data

    def _metadata(self, endpoint: str) -> List[Dict[str, Any]]:
        """Metadata entries of a container endpoint.

        Raises:
            PlexError: The request failed.
        """
        response = self.request(endpoint)
        if "error" in response:
            raise PlexError(response["error"])
        return (response.get("MediaContainer") or {}).get("Metadata") or []

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_libraries(self) -> List[Library]:
        """List the movie and show sections of the server."""
        response = self.request("/library/sections")
        if "error" in response:
            get_logger().debug(response["error"])
            return []
        directories = (response.get("MediaContainer") or {}).get("Directory") or []
        return [
            Library.from_dict(d)
            for d in directories
            if d.get("type") in (LibraryType.MOVIE.value, LibraryType.SHOW.value)
        ]

    def get_show_seasons(self, rating_key: str) -> List[Dict[str, Any]]:
        return self._metadata(f"/library/metadata/{rating_key}/children")

    def get_season_episodes(self, rating_key: str) -> List[Dict[str, Any]]:
        return self._metadata(f"/library/metadata/{rating_key}/children")

    def get_library_items(
        self,
        library: Library,
        progress: Optional[ProgressCallback] = None,
    ) -> LibraryScanResult:
        """Scan a library and aggregate bytes and file counts at every level.

        Raises:
            PlexError: Any request of the scan failed; no partial result is returned.
        """
        items = self._metadata(f"/library/sections/{library.key}/all")
        result = LibraryScanResult(library_type=library.type, library_name=library.title)

        if library.type == LibraryType.SHOW:
            for done, item in enumerate(items, start=1):
                show = self._scan_show(item)
                result.data.append(show)
                result.bytes += show.bytes
                result.files += show.files
                if progress:
                    progress(done, len(items), show.title)
        else:
            for item in items:
                size = _part_size(item)
                result.data.append(
                    Media(
                        rating_key=str(item.get("ratingKey", "")),
                        title=item.get("title") or "",
                        bytes=size,
                        files=1,
                        human_bytes=bytes_to_human(size),
                    )
                )
            result.bytes = sum(m.bytes for m in result.data)
            result.files = len(result.data)
            if progress:
                progress(len(items), len(items), library.title)

        result.human_bytes = bytes_to_human(result.bytes)
        return result

    def _scan_show(self, item: Dict[str, Any]) -> Show:
        show = Show(rating_key=str(item.get("ratingKey", "")), title=item.get("title") or "")
        for raw_season in self.get_show_seasons(show.rating_key):
            index = int(raw_season.get("index") or 0)
            season = Season(
                rating_key=str(raw_season.get("ratingKey", "")),
                title=raw_season.get("title") or str(index),
                season_index=index,
            )
            for raw_episode in self.get_season_episodes(season.rating_key):
                size = _part_size(raw_episode)
                season.episodes.append(
                    Episode(
                        rating_key=str(raw_episode.get("ratingKey", "")),
                        title=raw_episode.get("title") or "",
                        episode_index=int(raw_episode.get("index") or 0),
                        bytes=size,
                        files=1,
                        human_bytes=bytes_to_human(size),
                    )
                )
                season.bytes += size
                season.files += 1
            season.human_bytes = bytes_to_human(season.bytes)
            show.seasons.append(season)
            show.bytes += season.bytes
            show.files += season.files
        show.human_bytes = bytes_to_human(show.bytes)
        return show

    def test_connection(self) -> bool:
        """True when the server root answers with a machine identifier."""
        response = self.request("/")
        if "error" in response:
            get_logger().debug(response["error"])
            return False
        return bool((response.get("MediaContainer") or {}).get("machineIdentifier"))

    def reset_credentials(self) -> None:
        """Forget cached credentials so the next request re-reads the config."""
        self._credentials = None
