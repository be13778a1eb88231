"""Writer for JSON format."""

import json
from pathlib import Path
from quotesync.models import AudioSummaryWithQuotes, Transcript


def _dump(data: dict, output_path: Path) -> None:
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def write_transcript_json(transcript: Transcript, output_path: Path) -> None:
    """Write transcript to JSON file."""
    _dump(transcript.to_dict(), output_path)


def write_summary_json(summary: AudioSummaryWithQuotes, output_path: Path) -> None:
    """Write grounded summary, including the full transcript, to JSON file."""
    _dump(summary.to_dict(), output_path)
