"""Bind free-text summary quotes back to the transcript segments they came from.

Candidate quotes come from a language model. They are usually verbatim
slices of one segment or of a short run of consecutive segments, but may
be truncated, lightly paraphrased or merged across a segment boundary.
Matching runs in three passes over normalized text:

1. exact match, then containment, in a single segment; first segment wins;
2. the same against windows of 2..max_window consecutive segments,
   smallest window first, then earliest start;
3. similarity against every tight window of 1..max_window segments,
   highest score first, then earliest start, then smallest window.

A candidate that clears none of these is dropped. Returning no quote is
always preferred to attaching a timestamp the transcript cannot back.
"""

import re
from collections import Counter
from difflib import SequenceMatcher
from typing import Optional, Sequence

from quotesync.models import QuotedSegment, Segment
from quotesync.segments import iter_windows
from quotesync.timecodes import format_time

DEFAULT_MATCH_THRESHOLD = 0.6
DEFAULT_MAX_WINDOW = 3

_norm_rx = re.compile(r"[\W_]+", re.UNICODE)


# Filler words never count as evidence that a quote came from a segment
_STOPWORDS = frozenset("""
    about after also and any are because been before being but can could did
    does for from had has have her his how its just not our out she than that
    the their them then there these they this those was were what when where
    which who why will with would you your
""".split())


def normalize_text(text: str) -> str:
    """Casefold, turn punctuation runs into spaces and collapse whitespace."""
    return " ".join(_norm_rx.sub(" ", text.casefold()).split())


def _content_tokens(text: str) -> Counter:
    return Counter(
        token for token in text.split()
        if token not in _STOPWORDS and (len(token) > 2 or token.isdigit())
    )


def _contains(haystack: str, needle: str) -> bool:
    # Pad so containment only succeeds on whole-token boundaries
    return f" {needle} " in f" {haystack} "


def _similarity(candidate: str, target: str) -> float:
    """
    Score in [0, 1]: best of content-token coverage and character ratio.

    A target that shares no content token with the candidate scores 0.
    """
    candidate_tokens = _content_tokens(candidate)
    shared = sum((candidate_tokens & _content_tokens(target)).values())
    if not shared:
        return 0.0
    coverage = shared / sum(candidate_tokens.values())
    # autojunk would discard common characters once the target reaches 200 chars
    ratio = SequenceMatcher(None, candidate, target, autojunk=False).ratio()
    return max(coverage, ratio)


def _quote(candidate: str, window: Sequence[Segment]) -> QuotedSegment:
    start = window[0].start
    return QuotedSegment(
        start=start,
        end=window[-1].end,
        text=candidate,
        formatted=format_time(start),
    )


def align_quote(
    candidate: str,
    segments: Sequence[Segment],
    threshold: float = DEFAULT_MATCH_THRESHOLD,
    max_window: int = DEFAULT_MAX_WINDOW,
) -> Optional[QuotedSegment]:
    """
    Resolve a candidate quote to the transcript span it came from.

    Args:
        candidate: Quote text emitted by the summary generator
        segments: Transcript segments sorted by start time
        threshold: Minimum similarity score for the fuzzy pass
        max_window: Largest number of consecutive segments a quote may span

    Returns:
        QuotedSegment carrying the candidate text and the span's bounds,
        or None when the quote cannot be attributed
    """
    needle = normalize_text(candidate)
    if not needle or not segments:
        return None

    max_window = max(1, min(max_window, len(segments)))
    normalized = [normalize_text(segment.text) for segment in segments]

    def window_text(first: int, size: int) -> str:
        return " ".join(normalized[first:first + size])

    # Passes 1 and 2: smallest window first. Within a size an exact
    # match beats containment so a segment's own text maps back to it.
    for size in range(1, max_window + 1):
        windows = list(iter_windows(segments, size))
        for first, window in windows:
            if window_text(first, size) == needle:
                return _quote(candidate, window)
        for first, window in windows:
            if _contains(window_text(first, size), needle):
                return _quote(candidate, window)

    # Pass 3: similarity. A multi-segment window only competes when each
    # edge segment raises its score, otherwise the narrower window covers
    # it. Strict > keeps the earliest start and smallest window among ties.
    scores: dict[tuple[int, int], float] = {}
    for size in range(1, max_window + 1):
        for first in range(len(segments) - size + 1):
            scores[first, size] = _similarity(needle, window_text(first, size))

    best_score = 0.0
    best_window: Optional[Sequence[Segment]] = None
    for first in range(len(segments)):
        for size in range(1, max_window + 1):
            score = scores.get((first, size))
            if score is None:
                break
            if size > 1 and (score <= scores[first + 1, size - 1] or score <= scores[first, size - 1]):
                continue
            if score > best_score:
                best_score = score
                best_window = segments[first:first + size]

    if best_window is None or best_score < threshold:
        return None
    return _quote(candidate, best_window)
