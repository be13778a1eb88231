import re
import unittest
import sys
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from quotesync.timecodes import format_time, parse_timestamp


class TestFormatTime(unittest.TestCase):

    def test_minutes_and_seconds(self):
        self.assertEqual(format_time(0), "0:00")
        self.assertEqual(format_time(5), "0:05")
        self.assertEqual(format_time(65), "1:05")
        self.assertEqual(format_time(3599.99), "59:59")

    def test_hours(self):
        self.assertEqual(format_time(3600), "1:00:00")
        self.assertEqual(format_time(3661), "1:01:01")
        self.assertEqual(format_time(36000), "10:00:00")

    def test_fraction_is_truncated(self):
        self.assertEqual(format_time(59.9), "0:59")
        self.assertEqual(format_time(5.999), "0:05")

    def test_invalid_values_never_raise(self):
        for value in (-1, -0.5, float("nan"), float("inf"), float("-inf"), None, "abc"):
            self.assertEqual(format_time(value), "0:00", value)

    def test_output_shape(self):
        pattern = re.compile(r"^(\d+:\d{2}|\d+:\d{2}:\d{2})$")
        for value in (0, 0.4, 9, 61, 599, 3599, 3600, 7325.5, 86399):
            self.assertRegex(format_time(value), pattern)


class TestParseTimestamp(unittest.TestCase):

    def test_vtt_and_srt_formats(self):
        self.assertAlmostEqual(parse_timestamp("00:01:02.500"), 62.5)
        self.assertAlmostEqual(parse_timestamp("00:00:01,250"), 1.25)
        self.assertAlmostEqual(parse_timestamp("01:00:00.000"), 3600.0)

    def test_minutes_only(self):
        self.assertAlmostEqual(parse_timestamp("01:02.000"), 62.0)

    def test_garbage(self):
        self.assertEqual(parse_timestamp("garbage"), 0.0)
        self.assertEqual(parse_timestamp("aa:bb"), 0.0)


if __name__ == '__main__':
    unittest.main()
