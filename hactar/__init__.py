# SPDX-License-Identifier: MIT
"""hactar - Plex library scanner with a terminal dashboard."""

from hactar._version import __version__

__all__ = ["__version__"]
