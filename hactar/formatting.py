#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Size and text formatting shared by the CLI and the dashboard.

Sizes use decimal units (1 KB = 1000 B) so that a formatted value
parses back to the byte count it came from whenever the value has at
most one significant decimal in its unit.
"""

import re

SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")
_UNIT_BASE = 1000
_SIZE_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(B|KB|MB|GB|TB)\s*$", re.IGNORECASE)


def _strip_zero(value: float) -> str:
    text = f"{value:.1f}"
    if text.endswith(".0"):
        text = text[:-2]
    return text


def bytes_to_human(num_bytes: int) -> str:
    """Format a byte count as a human readable string.

    Examples:
        >>> bytes_to_human(0)
        '0 B'
        >>> bytes_to_human(1_500_000)
        '1.5 MB'
        >>> bytes_to_human(2_000_000_000)
        '2 GB'
    """
    if not num_bytes or num_bytes < 0:
        return "0 B"
    if num_bytes < _UNIT_BASE:
        return f"{int(num_bytes)} B"

    value = float(num_bytes)
    unit_index = 0
    while value >= _UNIT_BASE and unit_index < len(SIZE_UNITS) - 1:
        value /= _UNIT_BASE
        unit_index += 1

    # 999.96 KB rounds to "1000 KB"; roll over to the next unit instead
    if round(value, 1) >= _UNIT_BASE and unit_index < len(SIZE_UNITS) - 1:
        value /= _UNIT_BASE
        unit_index += 1

    return f"{_strip_zero(value)} {SIZE_UNITS[unit_index]}"


def parse_size(text: str) -> int:
    """Parse a string produced by bytes_to_human back into bytes.

    Returns 0 for anything that does not look like a size.
    """
    if not text:
        return 0
    match = _SIZE_PATTERN.match(str(text))
    if not match:
        return 0
    value = float(match.group(1))
    exponent = SIZE_UNITS.index(match.group(2).upper())
    return int(round(value * (_UNIT_BASE ** exponent)))


def truncate_title(title: str, max_length: int = 30, suffix: str = "...") -> str:
    """Shorten a title to max_length characters, suffix included."""
    if title is None:
        return ""
    if len(title) <= max_length:
        return title
    if max_length <= len(suffix):
        return title[:max_length]
    return title[: max_length - len(suffix)] + suffix


def mask_token(token: str) -> str:
    """Hide all but the last four characters of a token."""
    if not token:
        return ""
    return f"***{token[-4:]}"
