import unittest
import sys
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from quotesync.subtitles import looks_like_srt, parse_srt, parse_subtitles, parse_vtt


VTT = """WEBVTT

00:00:00.000 --> 00:00:02.500
Hello there

00:00:02.500 --> 00:00:05.000 align:start
General Kenobi
"""

VTT_WITH_IDS = """WEBVTT

1
00:00:00.000 --> 00:00:02.000
Hi

2
00:00:02.000 --> 00:00:04.000
Bye
"""

SRT = """1
00:00:00,000 --> 00:00:01,500
First line
second line

2
00:00:01,500 --> 00:00:03,000
Next
"""


class TestSubtitleParsing(unittest.TestCase):

    def test_parse_vtt(self):
        self.assertEqual(parse_vtt(VTT), [
            {'start': 0.0, 'end': 2.5, 'text': 'Hello there'},
            {'start': 2.5, 'end': 5.0, 'text': 'General Kenobi'},
        ])

    def test_parse_vtt_drops_cue_identifiers(self):
        spans = parse_vtt(VTT_WITH_IDS)
        self.assertEqual([span['text'] for span in spans], ['Hi', 'Bye'])

    def test_parse_vtt_keeps_numeric_cue_text(self):
        vtt = (
            "WEBVTT\n\n"
            "00:00:00.000 --> 00:00:02.000\nThe answer is\n\n"
            "00:00:02.000 --> 00:00:03.000\n42\n\n"
            "00:00:03.000 --> 00:00:05.000\nthanks\n"
        )
        self.assertEqual([span['text'] for span in parse_vtt(vtt)], ['The answer is', '42', 'thanks'])

    def test_parse_srt_joins_multiline_text(self):
        self.assertEqual(parse_srt(SRT), [
            {'start': 0.0, 'end': 1.5, 'text': 'First line second line'},
            {'start': 1.5, 'end': 3.0, 'text': 'Next'},
        ])

    def test_detection(self):
        self.assertTrue(looks_like_srt(SRT))
        self.assertFalse(looks_like_srt(VTT))
        self.assertEqual(len(parse_subtitles(VTT)), 2)
        self.assertEqual(len(parse_subtitles(SRT)), 2)
        self.assertEqual(parse_subtitles("just some words"), [])


if __name__ == '__main__':
    unittest.main()
