"""Human readable byte sizes."""

from __future__ import annotations

import math

_UNITS = ("B", "KB", "MB", "GB", "TB", "PB", "EB", "ZB", "YB")
_DELIMITER = 1024.0


def human_size(size: float) -> str:
    """Format a byte count as ``16B``, ``1.5KB``, ``2.25MB`` and so on."""
    negative = "-" if size < 0 else ""
    size = abs(size)
    if size < 1:
        return f"{negative}{_format_number(size)}B"
    exponent = min(int(math.floor(math.log(size) / math.log(_DELIMITER))), len(_UNITS) - 1)
    pretty = round(size / _DELIMITER ** exponent, 2)
    return f"{negative}{_format_number(pretty)}{_UNITS[exponent]}"


def maybe_size_to_text(size: int | None) -> str:
    if size is None:
        return "(unknown)"
    return f"({human_size(size)})"


def _format_number(value: float) -> str:
    if value == int(value):
        return str(int(value))
    return f"{value:.2f}".rstrip("0").rstrip(".")
