"""Interactive main entry point for grounded audio summaries."""

import re
import sys
from pathlib import Path
from typing import Optional, Tuple
from urllib.parse import urlparse

from openai import OpenAI

from quotesync.config import Config
from quotesync.errors import QuoteSyncError
from quotesync.models import AudioSummaryWithQuotes, Transcript
from quotesync.summarizer import SummaryOptions, generate_summary_with_quotes
from quotesync.transcriber import transcribe_file_with_segments, transcribe_url_with_segments
from quotesync.writers.json_writer import write_summary_json, write_transcript_json
from quotesync.writers.markdown_writer import format_quote_markdown, write_summary_markdown
from quotesync.writers.txt_writer import write_txt


def is_url(source: str) -> bool:
    return urlparse(source).scheme in ('http', 'https')


def slugify(text: str) -> str:
    """Convert text to a filesystem-safe folder name."""
    text = re.sub(r'[<>:"/\\|?*]', '-', text)
    text = re.sub(r'\s+', ' ', text).strip(' .-')
    return text[:80] or "untitled"


def get_output_dir(source: str) -> Path:
    """Get the output directory for a source, named after the file or URL."""
    if is_url(source):
        parsed = urlparse(source)
        name = Path(parsed.path).stem or parsed.netloc
    else:
        name = Path(source).stem
    return Config.OUT_DIR / slugify(name)


def process_source(
    source: str,
    client: OpenAI,
    summarize: bool = True,
    language: Optional[str] = None,
) -> Tuple[Path, Transcript, Optional[AudioSummaryWithQuotes]]:
    """
    Process a single source: transcribe, summarize, and write outputs.

    Args:
        source: Local audio file path or http(s) URL
        client: OpenAI client shared by both backend calls
        summarize: If True, generate the grounded summary
        language: Optional language hint for transcription

    Returns:
        Tuple of (output_dir, transcript, summary)
    """
    if is_url(source):
        transcript = transcribe_url_with_segments(client, source, language=language)
    else:
        transcript = transcribe_file_with_segments(client, Path(source).expanduser(), language=language)

    output_dir = get_output_dir(source)
    output_dir.mkdir(parents=True, exist_ok=True)

    print("Writing transcript files...")
    write_transcript_json(transcript, output_dir / "transcript.json")
    write_txt(transcript, output_dir / "transcript_with_timestamps.txt")

    summary = None
    if summarize:
        summary = generate_summary_with_quotes(transcript, client, SummaryOptions(show_progress=True))
        write_summary_json(summary, output_dir / "summary.json")
        write_summary_markdown(summary, output_dir / "summary.md")
        print("✓ Summary saved to: summary.md")

    print("✓ All files saved successfully!")
    return output_dir, transcript, summary


def _print_summary(summary: AudioSummaryWithQuotes) -> None:
    print()
    print("=" * 60)
    print("SUMMARY")
    print("=" * 60)
    for section in summary.sections:
        if section.title:
            print(f"\n{section.title}")
            print("-" * len(section.title))
        print(section.content)
        for quote in section.quotes:
            print(format_quote_markdown(quote))
    print("=" * 60)


def main():
    """Interactive main function."""
    print("=" * 60)
    print("Grounded Audio Summaries")
    print("=" * 60)
    print()

    # Validate configuration
    try:
        Config.validate()
    except ValueError as e:
        print(f"✗ Configuration Error: {str(e)}", file=sys.stderr)
        print("\nPlease create a .env file with your OPENAI_API_KEY.")
        sys.exit(1)

    # Ensure output directory exists
    Config.OUT_DIR.mkdir(parents=True, exist_ok=True)

    client = OpenAI(api_key=Config.OPENAI_API_KEY, timeout=Config.REQUEST_TIMEOUT)

    while True:
        print()
        print("-" * 60)
        source = input("Audio file path or URL to summarize: ").strip()

        if not source:
            print("No source provided. Exiting...")
            break

        print()
        summarize = input("Generate a summary with grounded quotes? (y/n): ").strip().lower() in ('y', 'yes')
        print()

        try:
            output_dir, transcript, summary = process_source(source, client, summarize=summarize)
            if summary:
                _print_summary(summary)

            print()
            print("=" * 60)
            print(f"✓ Done! {len(transcript.segments)} segments transcribed")
            print(f"Files saved to: {output_dir}")
            print("=" * 60)

        except QuoteSyncError as e:
            print()
            print("=" * 60)
            if e.retryable:
                print(f"✗ Service temporarily unavailable, try again later: {str(e)}")
            else:
                print(f"✗ Failed to process source: {str(e)}")
            print("=" * 60)

        print()
        another = input("Would you like to process another file? (y/n): ").strip().lower()
        if another not in ('y', 'yes'):
            break

    print()
    print("Thank you for using Grounded Audio Summaries!")


if __name__ == "__main__":
    main()
