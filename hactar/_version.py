# SPDX-License-Identifier: MIT
"""Single source of truth for the hactar version."""

__version__ = "1.0.0"
