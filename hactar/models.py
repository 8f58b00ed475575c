#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Data models for hactar.

Contains the Plex media tree (movies, shows, seasons, episodes), the
cached library scan result and the persisted configuration. All models
convert to and from the camelCase JSON stored on disk.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from hactar._version import __version__


# =============================================================================
# Constants
# =============================================================================

DEFAULT_SERVER_URL = "http://localhost:32400"
MIN_TOKEN_LENGTH = 10


# =============================================================================
# Enums
# =============================================================================


class LibraryType(str, Enum):
    """Plex library section types that hactar understands."""
    MOVIE = "movie"
    SHOW = "show"


# =============================================================================
# Media Tree
# =============================================================================


@dataclass
class Media:
    """A leaf item with storage totals (a movie, or the base of the tree types)."""
    rating_key: str
    title: str
    bytes: int = 0
    files: int = 0
    human_bytes: str = ""

    def _base_dict(self) -> Dict[str, Any]:
        return {
            "ratingKey": self.rating_key,
            "title": self.title,
            "bytes": self.bytes,
            "files": self.files,
            "humanBytes": self.human_bytes,
        }

    def to_dict(self) -> Dict[str, Any]:
        return self._base_dict()

    @staticmethod
    def _base_kwargs(data: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "rating_key": str(data.get("ratingKey", "")),
            "title": data.get("title") or "",
            "bytes": int(data.get("bytes") or 0),
            "files": int(data.get("files") or 0),
            "human_bytes": data.get("humanBytes") or "",
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Media":
        return cls(**cls._base_kwargs(data))


@dataclass
class Episode(Media):
    """A single episode within a season."""
    episode_index: int = 0

    def to_dict(self) -> Dict[str, Any]:
        result = self._base_dict()
        result["episodeIndex"] = self.episode_index
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Episode":
        return cls(
            episode_index=int(data.get("episodeIndex") or 0),
            **cls._base_kwargs(data),
        )


@dataclass
class Season(Media):
    """A season of a show, with its episodes."""
    season_index: int = 0
    episodes: List[Episode] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        result = self._base_dict()
        result["seasonIndex"] = self.season_index
        result["episodes"] = [e.to_dict() for e in self.episodes]
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Season":
        return cls(
            season_index=int(data.get("seasonIndex") or 0),
            episodes=[Episode.from_dict(e) for e in data.get("episodes") or []],
            **cls._base_kwargs(data),
        )


@dataclass
class Show(Media):
    """A TV show, with its seasons."""
    seasons: List[Season] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        result = self._base_dict()
        result["seasons"] = [s.to_dict() for s in self.seasons]
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Show":
        return cls(
            seasons=[Season.from_dict(s) for s in data.get("seasons") or []],
            **cls._base_kwargs(data),
        )


LibraryItem = Union[Media, Show]


# =============================================================================
# Libraries
# =============================================================================


@dataclass
class Library:
    """A Plex library section (key, title and section type)."""
    key: str
    title: str
    type: LibraryType = LibraryType.MOVIE

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Library":
        return cls(
            key=str(data.get("key", "")),
            title=data.get("title") or "",
            type=LibraryType(data.get("type") or LibraryType.MOVIE.value),
        )


@dataclass
class LibraryScanResult:
    """Aggregated scan of one library, as cached on disk."""
    library_type: LibraryType
    library_name: str
    bytes: int = 0
    files: int = 0
    human_bytes: str = ""
    data: List[LibraryItem] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "libraryType": self.library_type.value,
            "libraryName": self.library_name,
            "bytes": self.bytes,
            "files": self.files,
            "humanBytes": self.human_bytes,
            "data": [item.to_dict() for item in self.data],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LibraryScanResult":
        library_type = LibraryType(data.get("libraryType") or LibraryType.MOVIE.value)
        items: List[LibraryItem] = []
        for raw in data.get("data") or []:
            if "seasons" in raw or library_type == LibraryType.SHOW:
                items.append(Show.from_dict(raw))
            else:
                items.append(Media.from_dict(raw))
        return cls(
            library_type=library_type,
            library_name=data.get("libraryName") or "",
            bytes=int(data.get("bytes") or 0),
            files=int(data.get("files") or 0),
            human_bytes=data.get("humanBytes") or "",
            data=items,
        )


# =============================================================================
# Configuration
# =============================================================================


@dataclass
class UserConfig:
    """Credentials for talking to the Plex server."""
    token: str = ""
    server_url: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"token": self.token, "serverUrl": self.server_url}


@dataclass
class AppSettings:
    """Application metadata stored alongside the credentials."""
    version: str = __version__
    config_dir: str = "~/.hactar"

    def to_dict(self) -> Dict[str, Any]:
        return {"version": self.version, "configDir": self.config_dir}


@dataclass
class ConfigFile:
    """Contents of config.json."""
    user: UserConfig = field(default_factory=UserConfig)
    app: AppSettings = field(default_factory=AppSettings)
    last_updated: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"user": self.user.to_dict(), "app": self.app.to_dict()}
        if self.last_updated:
            result["lastUpdated"] = self.last_updated
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConfigFile":
        user = data.get("user") or {}
        app = data.get("app") or {}
        defaults = AppSettings()
        return cls(
            user=UserConfig(
                token=user.get("token") or "",
                server_url=user.get("serverUrl") or "",
            ),
            app=AppSettings(
                version=app.get("version") or defaults.version,
                config_dir=app.get("configDir") or defaults.config_dir,
            ),
            last_updated=data.get("lastUpdated"),
        )
