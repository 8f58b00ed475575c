#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Exception hierarchy for hactar.

Commands catch HactarError at the dispatch boundary and turn it into
an error line plus a non-zero exit code.
"""


class HactarError(Exception):
    """Base class for all hactar errors."""


class ConfigError(HactarError):
    """Configuration file is missing required values or cannot be parsed."""


class StorageError(HactarError):
    """A cached scan result could not be written."""


class PlexError(HactarError):
    """The Plex server rejected a request or returned unusable data."""
