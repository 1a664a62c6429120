"""Short human-readable strings for attachment sizes and names."""

from __future__ import annotations

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB", "TB", "PB", "EB")


def bytes_to_human_size(size: int) -> str:
    """Format a byte count with 1024-based units, e.g. ``"8.0 MB"``.

    Values under 3 units get two decimals, under 30 one, larger none.
    """

    if size <= 0:
        return "0 Bytes"

    bucket = min((size.bit_length() - 1) // 10, len(_SIZE_UNITS) - 1)
    count = size / (1 << (10 * bucket))
    if bucket == 0:
        digits = 0
    elif count < 3:
        digits = 2
    elif count < 30:
        digits = 1
    else:
        digits = 0
    return f"{count:.{digits}f} {_SIZE_UNITS[bucket]}"


def preview_file_name(name: str, max_length: int = 16) -> str:
    """Shorten long file names to ``head…tail``."""

    if len(name) <= max_length:
        return name
    half = max_length // 2
    return f"{name[:half]}…{name[len(name) - half:]}"
