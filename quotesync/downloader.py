"""Remote audio fetching using yt-dlp."""

from pathlib import Path
from urllib.parse import urlparse

import yt_dlp
from yt_dlp.utils import DownloadError

from quotesync.errors import BackendUnavailable, InvalidInput


def _find_downloaded_file(dest_dir: Path) -> Path:
    """Locate the media file yt-dlp wrote into dest_dir."""
    candidates = [
        f for f in sorted(dest_dir.iterdir())
        if f.is_file() and not f.name.endswith(('.part', '.ytdl', '.json'))
    ]
    if not candidates:
        raise BackendUnavailable("Audio file was not downloaded successfully")
    return candidates[0]


def download_audio(url: str, dest_dir: Path) -> Path:
    """
    Download the audio track behind a URL.

    Works for direct links to media files as well as any page yt-dlp
    has an extractor for.

    Args:
        url: http(s) URL of the media
        dest_dir: Directory the audio file is written to

    Returns:
        Path to the downloaded file
    """
    parsed = urlparse(url)
    if parsed.scheme not in ('http', 'https') or not parsed.netloc:
        raise InvalidInput(f"Not a downloadable URL: {url!r}")

    dest_dir.mkdir(parents=True, exist_ok=True)

    ydl_opts = {
        'format': 'bestaudio/best',
        'outtmpl': str(dest_dir / 'audio.%(ext)s'),
        'quiet': True,
        'no_warnings': True,
        'noplaylist': True,
        'writethumbnail': False,
        # Retry options for better reliability
        'retries': 10,
        'fragment_retries': 10,
        'file_access_retries': 3,
    }

    print("Downloading audio...")
    try:
        with yt_dlp.YoutubeDL(ydl_opts) as ydl:
            ydl.extract_info(url, download=True)
    except DownloadError as e:
        error_str = str(e)
        if "Unsupported URL" in error_str:
            raise InvalidInput(f"Unsupported URL: {url}") from e
        raise BackendUnavailable(f"Unable to fetch remote URL: {error_str}") from e

    audio_path = _find_downloaded_file(dest_dir)
    print(f"✓ Audio downloaded: {audio_path.name}")
    return audio_path
