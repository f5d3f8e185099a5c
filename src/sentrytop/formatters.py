"""Display formatting for raw backend values."""

import math
from datetime import datetime

PROTOCOL_NAMES = {
    1: "ICMP",
    6: "TCP",
    17: "UDP",
}

BYTE_UNITS = ("B", "KB", "MB", "GB", "TB")


def protocol_name(protocol: int) -> str:
    """Map an IP protocol number to its name, or its digits if unknown."""
    return PROTOCOL_NAMES.get(protocol, str(protocol))


def format_bytes(size: float) -> str:
    """
    Format a byte count using base-1024 units.

    The largest unit that keeps the scaled value at or above 1 is chosen.
    Sizes past the terabyte range stay in TB.
    """
    if size == 0:
        return "0 B"
    # floor(log1024(size)) without float rounding at exact powers of 1024
    index = 0
    while index < len(BYTE_UNITS) - 1 and size >= 1024 ** (index + 1):
        index += 1
    return f"{size / 1024**index:.2f} {BYTE_UNITS[index]}"


def format_uptime(seconds: float) -> str:
    """
    Format a duration as ``1d 2h 3m 4s``.

    Leading zero units are dropped, but once a unit is shown every smaller
    unit is shown too. Seconds are always shown, floored.
    """
    days, rest = divmod(seconds, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, rest = divmod(rest, 60)

    parts = []
    if days > 0:
        parts.append(f"{int(days)}d")
    if hours > 0 or parts:
        parts.append(f"{int(hours)}h")
    if minutes > 0 or parts:
        parts.append(f"{int(minutes)}m")
    parts.append(f"{math.floor(rest)}s")
    return " ".join(parts)


def format_metric_value(value: float) -> str:
    """Format a scalar metric to two decimal places."""
    return f"{value:.2f}"


def format_clock(moment: datetime) -> str:
    """Local wall-clock label for a chart point."""
    return moment.strftime("%H:%M:%S")
