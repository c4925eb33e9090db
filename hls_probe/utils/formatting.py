"""Human-readable renderings of byte counts and bitrates."""

from __future__ import annotations

import math
from typing import Optional

MIB = 1024 * 1024
UNKNOWN = "Unknown"


def round_half_up(value: float) -> int:
    """Rounds ``x.5`` away from zero for positive values, unlike ``round``."""

    return int(math.floor(value + 0.5))


def format_bytes(value: Optional[float]) -> str:
    """Megabytes below 1024 MiB, gigabytes above, always binary units."""

    if not value:
        return UNKNOWN
    megabytes = value / MIB
    if megabytes < 1024:
        return f"{megabytes:.2f} MB"
    return f"{megabytes / 1024:.2f} GB"


def format_bandwidth(bits_per_second: Optional[int]) -> str:
    if not bits_per_second:
        return UNKNOWN
    return f"{bits_per_second / 1_000_000:.2f} Mbps"
