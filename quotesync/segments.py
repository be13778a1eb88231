"""Point-in-time lookup and windowing over ordered transcript segments."""

import math
from typing import Iterator, Optional, Sequence, Tuple

from quotesync.models import Segment


def find_segment_by_time(segments: Sequence[Segment], time: float) -> Optional[Segment]:
    """
    Find the segment that contains the given time.

    Segments are scanned in order and the first one with
    start <= time <= end wins, so a time sitting exactly on the boundary
    of two touching segments resolves to the earlier one.

    Args:
        segments: Segments sorted by start time
        time: Position in seconds

    Returns:
        The containing segment, or None when no segment covers the time
    """
    if not isinstance(time, (int, float)) or math.isnan(time):
        return None
    for segment in segments:
        if segment.start <= time <= segment.end:
            return segment
    return None


def iter_windows(segments: Sequence[Segment], size: int) -> Iterator[Tuple[int, Sequence[Segment]]]:
    """Yield (first_index, window) for every run of `size` consecutive segments."""
    if size < 1:
        return
    for first in range(len(segments) - size + 1):
        yield first, segments[first:first + size]
