"""Writer for TXT format with timestamps."""

from pathlib import Path
from quotesync.models import Transcript
from quotesync.timecodes import format_time


def write_txt(transcript: Transcript, output_path: Path) -> None:
    """
    Write transcript to TXT file with timestamps.
    
    Format: [M:SS - M:SS] text
    """
    with open(output_path, 'w', encoding='utf-8') as f:
        for segment in transcript.segments:
            start_time = format_time(segment.start)
            end_time = format_time(segment.end)
            f.write(f"[{start_time} - {end_time}] {segment.text}\n")
