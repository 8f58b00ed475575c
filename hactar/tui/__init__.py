# SPDX-License-Identifier: MIT
"""Terminal dashboard for browsing cached Plex library scans."""
