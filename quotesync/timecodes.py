"""Conversions between seconds and clock strings."""

import math


def format_time(seconds: float) -> str:
    """
    Format seconds as M:SS, or H:MM:SS from one hour up.

    Fractional seconds are truncated. Negative and non-finite values
    render as "0:00"; this never raises.
    """
    try:
        seconds = float(seconds)
    except (TypeError, ValueError):
        return "0:00"
    if not math.isfinite(seconds) or seconds < 0:
        return "0:00"

    total = int(seconds)
    hours = total // 3600
    minutes = (total % 3600) // 60
    secs = total % 60
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def parse_timestamp(timestamp: str) -> float:
    """
    Parse a subtitle timestamp into seconds.

    Accepts HH:MM:SS.mmm, HH:MM:SS,mmm (SRT) and MM:SS.mmm. Anything
    else parses as 0.0.
    """
    parts = timestamp.strip().replace(',', '.').split(':')
    try:
        if len(parts) == 3:
            hours, minutes, secs = int(parts[0]), int(parts[1]), float(parts[2])
            return hours * 3600 + minutes * 60 + secs
        if len(parts) == 2:
            minutes, secs = int(parts[0]), float(parts[1])
            return minutes * 60 + secs
    except ValueError:
        return 0.0
    return 0.0
