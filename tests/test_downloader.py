import shutil
import tempfile
import unittest
from unittest.mock import patch, MagicMock
import sys
from pathlib import Path

from yt_dlp.utils import DownloadError

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from quotesync.downloader import download_audio
from quotesync.errors import BackendUnavailable, InvalidInput


def fake_youtube_dl(extract_info):
    ydl = MagicMock()
    ydl.extract_info.side_effect = extract_info
    ydl_class = MagicMock()
    ydl_class.return_value.__enter__.return_value = ydl
    return ydl_class


class TestDownloadAudio(unittest.TestCase):

    def setUp(self):
        self.tmp_dir = Path(tempfile.mkdtemp())

    def tearDown(self):
        shutil.rmtree(self.tmp_dir, ignore_errors=True)

    def test_rejects_non_http_urls(self):
        for url in ("ftp://example.com/a.mp3", "/local/file.mp3", "https://"):
            with self.assertRaises(InvalidInput):
                download_audio(url, self.tmp_dir)

    def test_download(self):
        def extract_info(url, download):
            (self.tmp_dir / "audio.webm.part").write_bytes(b"partial")
            (self.tmp_dir / "audio.webm").write_bytes(b"audio")

        with patch('quotesync.downloader.yt_dlp.YoutubeDL', fake_youtube_dl(extract_info)) as ydl_class:
            path = download_audio("https://example.com/watch?v=1", self.tmp_dir)

        self.assertEqual(path.name, "audio.webm")
        options = ydl_class.call_args.args[0]
        self.assertEqual(options['format'], 'bestaudio/best')
        self.assertTrue(options['noplaylist'])

    def test_unsupported_url(self):
        def extract_info(url, download):
            raise DownloadError("ERROR: Unsupported URL: https://example.com/")

        with patch('quotesync.downloader.yt_dlp.YoutubeDL', fake_youtube_dl(extract_info)):
            with self.assertRaises(InvalidInput):
                download_audio("https://example.com/", self.tmp_dir)

    def test_network_failure(self):
        def extract_info(url, download):
            raise DownloadError("ERROR: Unable to download webpage: timed out")

        with patch('quotesync.downloader.yt_dlp.YoutubeDL', fake_youtube_dl(extract_info)):
            with self.assertRaises(BackendUnavailable) as ctx:
                download_audio("https://example.com/talk", self.tmp_dir)
        self.assertTrue(ctx.exception.retryable)

    def test_nothing_downloaded(self):
        with patch('quotesync.downloader.yt_dlp.YoutubeDL', fake_youtube_dl(lambda url, download: None)):
            with self.assertRaises(BackendUnavailable):
                download_audio("https://example.com/talk", self.tmp_dir)


if __name__ == '__main__':
    unittest.main()
