import shutil
import tempfile
import unittest
from unittest.mock import patch, MagicMock
import sys
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from quotesync.config import Config
from quotesync.main import get_output_dir, is_url, process_source, slugify
from quotesync.models import (
    AudioSummaryWithQuotes,
    QuotedSegment,
    Segment,
    SummarySectionWithQuotes,
    Transcript,
)

SEGMENTS = [Segment(id=0, start=0.0, end=5.0, text="A")]
TRANSCRIPT = Transcript(full_transcript="A", segments=SEGMENTS, duration=5.0)
SUMMARY = AudioSummaryWithQuotes(
    sections=[SummarySectionWithQuotes(
        title="Intro",
        content="Body",
        quotes=[QuotedSegment(start=0.0, end=5.0, text="A", formatted="0:00")],
    )],
    full_transcript="A",
    full_segments=SEGMENTS,
    summary_text="Intro\nBody",
)


class TestHelpers(unittest.TestCase):

    def test_is_url(self):
        self.assertTrue(is_url("https://example.com/a.mp3"))
        self.assertFalse(is_url("lecture.mp3"))

    def test_slugify(self):
        self.assertEqual(slugify('Lecture 1: "Intro"?'), "Lecture 1- -Intro")
        self.assertEqual(slugify("   "), "untitled")

    def test_get_output_dir(self):
        with patch.object(Config, 'OUT_DIR', Path("/tmp/out")):
            self.assertEqual(get_output_dir("/data/week 1.mp3"), Path("/tmp/out/week 1"))
            self.assertEqual(get_output_dir("https://example.com/talks/keynote.mp3"), Path("/tmp/out/keynote"))
            self.assertEqual(get_output_dir("https://example.com/"), Path("/tmp/out/example.com"))


class TestProcessSource(unittest.TestCase):

    def setUp(self):
        self.tmp_dir = Path(tempfile.mkdtemp())

    def tearDown(self):
        shutil.rmtree(self.tmp_dir, ignore_errors=True)

    @patch('quotesync.main.generate_summary_with_quotes')
    @patch('quotesync.main.transcribe_file_with_segments')
    def test_local_file(self, mock_transcribe, mock_summarize):
        mock_transcribe.return_value = TRANSCRIPT
        mock_summarize.return_value = SUMMARY
        client = MagicMock()

        with patch.object(Config, 'OUT_DIR', self.tmp_dir):
            output_dir, transcript, summary = process_source("lecture.mp3", client)

        self.assertEqual(output_dir, self.tmp_dir / "lecture")
        self.assertIs(transcript, TRANSCRIPT)
        self.assertIs(summary, SUMMARY)
        for name in ("transcript.json", "transcript_with_timestamps.txt", "summary.json", "summary.md"):
            self.assertTrue((output_dir / name).exists(), name)
        self.assertIn('> **[0:00]** "A"', (output_dir / "summary.md").read_text(encoding='utf-8'))

    @patch('quotesync.main.generate_summary_with_quotes')
    @patch('quotesync.main.transcribe_url_with_segments')
    def test_url_without_summary(self, mock_transcribe, mock_summarize):
        mock_transcribe.return_value = TRANSCRIPT

        with patch.object(Config, 'OUT_DIR', self.tmp_dir):
            output_dir, _, summary = process_source("https://example.com/talk.mp3", MagicMock(), summarize=False)

        self.assertIsNone(summary)
        mock_summarize.assert_not_called()
        self.assertFalse((output_dir / "summary.json").exists())


if __name__ == '__main__':
    unittest.main()
