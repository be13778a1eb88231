"""Parsers for SRT and WebVTT transcription responses."""

import re

from quotesync.timecodes import parse_timestamp

_SRT_HEADER = re.compile(r'^\d+\s*\n\d{2}:\d{2}')


def _parse_cue_times(line: str) -> tuple[float, float]:
    start, end = [part.strip().split(' ')[0] for part in line.split('-->', 1)]
    return parse_timestamp(start), parse_timestamp(end)


def parse_vtt(vtt_text: str) -> list[dict]:
    """
    Parse a WebVTT document into raw spans.

    Returns:
        List of {'start', 'end', 'text'} dicts in document order
    """
    spans = []
    lines = [line for line in vtt_text.splitlines() if line.strip()]
    timing_indexes = [i for i, line in enumerate(lines) if '-->' in line]
    # Numbered documents put a cue identifier on the line before each timing line
    numbered = bool(timing_indexes) and timing_indexes[0] > 0 and lines[timing_indexes[0] - 1].strip().isdigit()

    for i, line in enumerate(lines):
        if '-->' not in line:
            continue
        start, end = _parse_cue_times(line)

        # Cue text runs until the next timing line
        text_lines = []
        for follow in lines[i + 1:]:
            if '-->' in follow:
                break
            if not follow.startswith('WEBVTT'):
                text_lines.append(follow.strip())

        # Drop the next cue's identifier, which sits right before its timing line
        if numbered and text_lines and text_lines[-1].isdigit() and i + 1 + len(text_lines) < len(lines):
            text_lines.pop()

        if text_lines:
            spans.append({'start': start, 'end': end, 'text': ' '.join(text_lines)})

    return spans


def parse_srt(srt_text: str) -> list[dict]:
    """
    Parse an SRT document into raw spans.

    Returns:
        List of {'start', 'end', 'text'} dicts in document order
    """
    spans = []
    for entry in re.split(r'\n\s*\n', srt_text.replace('\r\n', '\n')):
        lines = entry.strip().split('\n')
        if len(lines) < 2 or '-->' not in lines[1]:
            continue
        start, end = _parse_cue_times(lines[1])
        text = ' '.join(line.strip() for line in lines[2:]).strip()
        if text:
            spans.append({'start': start, 'end': end, 'text': text})
    return spans


def looks_like_srt(text: str) -> bool:
    return bool(_SRT_HEADER.match(text.lstrip()))


def parse_subtitles(text: str) -> list[dict]:
    """Detect VTT or SRT and parse it; unrecognized text yields no spans."""
    if 'WEBVTT' in text:
        return parse_vtt(text)
    if looks_like_srt(text):
        return parse_srt(text)
    return []
