"""Byte size formatting and parsing."""

import re

_UNITS = ["B", "KB", "MB", "GB", "TB"]
_SIZE_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([KMGT]?B?)\s*$", re.IGNORECASE)


def format_size(size_bytes: int) -> str:
    """Human readable size, e.g. ``1.5 MB``."""
    size = float(max(size_bytes, 0))
    for unit in _UNITS:
        if size < 1024 or unit == _UNITS[-1]:
            if unit == "B":
                return f"{int(size)} B"
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size_bytes} B"


def parse_size(value: str) -> int:
    """
    Parse a size string such as ``10MB`` or ``512k`` into bytes.

    Raises:
        ValueError: If the string is not a size.
    """
    match = _SIZE_PATTERN.match(value)
    if not match:
        raise ValueError(f"Invalid size: {value!r}")
    number, unit = match.groups()
    unit = unit.upper()
    if unit and not unit.endswith("B"):
        unit += "B"
    exponent = _UNITS.index(unit) if unit else 0
    return int(float(number) * (1024 ** exponent))
