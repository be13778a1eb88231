"""OpenAI Whisper API integration for segment-level transcription."""

import shutil
import tempfile
from pathlib import Path
from typing import Any, Mapping, Optional

from openai import OpenAI
from pydantic import ValidationError

from quotesync.config import Config
from quotesync.downloader import download_audio
from quotesync.errors import InvalidInput, MalformedResponse
from quotesync.models import Segment, Transcript
from quotesync.retry import call_with_retries
from quotesync.schemas import WhisperSegment, WhisperTranscription
from quotesync.subtitles import parse_subtitles

# Formats accepted by the Whisper transcription endpoint
SUPPORTED_FORMATS = {
    ".flac", ".m4a", ".mp3", ".mp4", ".mpeg", ".mpga", ".oga", ".ogg", ".wav", ".webm",
}
RESPONSE_FORMATS = {"verbose_json", "json", "srt", "vtt", "text"}
MAX_UPLOAD_BYTES = 25 * 1024 * 1024  # OpenAI Whisper upload limit


def _compress_audio(audio_path: Path, max_size_bytes: int) -> Path:
    """
    Re-encode audio at a lower bitrate so it fits within the upload limit.
    Requires pydub and ffmpeg.
    """
    try:
        from pydub import AudioSegment
    except ImportError as e:
        raise InvalidInput(
            f"{audio_path.name} exceeds the 25 MB upload limit and pydub is not available to compress it"
        ) from e

    original_size = audio_path.stat().st_size
    compressed_path = audio_path.parent / f"{audio_path.stem}_compressed.m4a"

    try:
        audio = AudioSegment.from_file(str(audio_path))
        duration_seconds = len(audio) / 1000.0

        # Target bitrate with a 20 kbps safety margin, never below 24 kbps (speech floor)
        target_bitrate_kbps = int((max_size_bytes * 8) / (duration_seconds * 1000)) - 20
        target_bitrate_kbps = max(24, min(target_bitrate_kbps, 48))
        print(f"  Attempting compression to {target_bitrate_kbps} kbps...")

        audio.export(
            str(compressed_path),
            format="ipod",  # ipod format = m4a
            bitrate=f"{target_bitrate_kbps}k",
            codec="aac"
        )
    except Exception as e:
        if compressed_path.exists():
            compressed_path.unlink()
        raise InvalidInput(f"Could not compress {audio_path.name}: {e}") from e

    final_size = compressed_path.stat().st_size
    print(f"  Compressed: {original_size / (1024*1024):.1f} MB -> {final_size / (1024*1024):.1f} MB")
    if final_size > max_size_bytes:
        compressed_path.unlink()
        raise InvalidInput(
            f"Compression failed: file still {final_size / (1024*1024):.2f} MB (limit: 25 MB)"
        )
    return compressed_path


def _response_to_payload(response: Any) -> Any:
    """Turn an SDK transcription response into plain data."""
    if hasattr(response, 'model_dump'):
        return response.model_dump()
    if hasattr(response, 'dict'):
        return response.dict()
    if isinstance(response, (Mapping, str)):
        return response
    raise MalformedResponse(
        f"Unexpected transcription response type: {type(response).__name__}"
    )


def build_transcript(payload: Any, language: Optional[str] = None) -> Transcript:
    """
    Normalize a raw speech-to-text payload into a Transcript.

    Accepts either a Whisper verbose_json/json mapping or the text of an
    SRT/VTT response.

    Args:
        payload: Backend response as plain data
        language: Language hint the caller sent, used when the backend
            does not report one

    Returns:
        Transcript with segments sorted by start and ids numbered from 0
    """
    raw_payload = payload
    if isinstance(payload, str):
        spans = parse_subtitles(payload)
        if spans:
            payload = {'segments': spans}
        else:
            payload = {'text': payload}

    if not isinstance(payload, Mapping):
        raise MalformedResponse(
            f"Transcription payload must be an object, got {type(payload).__name__}"
        )

    try:
        parsed = WhisperTranscription.model_validate(dict(payload))
    except ValidationError as e:
        raise MalformedResponse(f"Malformed transcription payload: {e}") from e

    if parsed.segments is None and parsed.text is None:
        raise MalformedResponse("Transcription payload has neither 'segments' nor 'text'")

    raw_segments = parsed.segments
    if raw_segments is None:
        # If no segments but we have text, create a single segment
        raw_segments = []
        if parsed.text and parsed.text.strip():
            end = max(0.0, float(parsed.duration or 0.0))
            raw_segments = [WhisperSegment(start=0.0, end=end, text=parsed.text)]

    segments: list[Segment] = []
    for raw in sorted(raw_segments, key=lambda s: s.start):
        text = raw.text.strip()
        if not text:
            continue
        start = max(0.0, float(raw.start))
        # Repair inverted spans instead of failing the whole transcript
        end = max(start, float(raw.end))
        segments.append(Segment(id=len(segments), start=start, end=end, text=text))

    full_transcript = (parsed.text or "").strip()
    if not full_transcript:
        full_transcript = " ".join(segment.text for segment in segments)

    last_end = segments[-1].end if segments else 0.0
    duration = last_end
    if parsed.duration is not None and parsed.duration >= last_end:
        duration = float(parsed.duration)

    return Transcript(
        full_transcript=full_transcript,
        segments=segments,
        duration=duration,
        language=parsed.language or language,
        raw=raw_payload,
    )


def transcribe_bytes_with_segments(
    client: OpenAI,
    data: bytes,
    filename: str,
    language: Optional[str] = None,
    response_format: str = "verbose_json",
    model: Optional[str] = None,
    max_retries: Optional[int] = None,
) -> Transcript:
    """
    Transcribe in-memory audio and return segments with timestamps.

    Args:
        client: OpenAI client used for the Whisper call
        data: Encoded audio file content
        filename: Original file name; its extension selects the format
        language: Optional ISO-639-1 language hint
        response_format: verbose_json (default), json, srt, vtt or text
        model: Whisper model name, defaults to Config.MODEL
        max_retries: Retries for transient failures, defaults to Config.MAX_RETRIES

    Returns:
        Transcript object with segments
    """
    if not data:
        raise InvalidInput("Audio content is empty")
    extension = Path(filename).suffix.lower()
    if extension not in SUPPORTED_FORMATS:
        raise InvalidInput(
            f"Unsupported audio format {extension or '(none)'!r}. "
            f"Supported formats: {', '.join(sorted(SUPPORTED_FORMATS))}"
        )
    if response_format not in RESPONSE_FORMATS:
        raise InvalidInput(f"Unsupported response format: {response_format!r}")
    if len(data) > MAX_UPLOAD_BYTES:
        raise InvalidInput(
            f"Audio is {len(data) / (1024*1024):.1f} MB, above OpenAI's 25 MB limit"
        )

    request_params = {
        "model": model or Config.MODEL,
        "file": (Path(filename).name, data),
        "response_format": response_format,
    }
    if language:
        request_params["language"] = language

    print("Transcribing audio...")
    response = call_with_retries(
        lambda: client.audio.transcriptions.create(**request_params),
        "Transcription",
        max_retries=Config.MAX_RETRIES if max_retries is None else max_retries,
    )

    transcript = build_transcript(_response_to_payload(response), language=language)
    print(f"✓ Transcription complete: {len(transcript.segments)} segments")
    return transcript


def transcribe_file_with_segments(
    client: OpenAI,
    audio_path: Path,
    language: Optional[str] = None,
    response_format: str = "verbose_json",
    model: Optional[str] = None,
    max_retries: Optional[int] = None,
) -> Transcript:
    """
    Transcribe a local audio file and return segments with timestamps.

    Files over the 25 MB upload limit are compressed first.

    Args:
        client: OpenAI client used for the Whisper call
        audio_path: Path to audio file
        language: Optional ISO-639-1 language hint
        response_format: verbose_json (default), json, srt, vtt or text
        model: Whisper model name, defaults to Config.MODEL
        max_retries: Retries for transient failures, defaults to Config.MAX_RETRIES

    Returns:
        Transcript object with segments
    """
    audio_path = Path(audio_path)
    if not audio_path.is_file():
        raise InvalidInput(f"File not found: {audio_path}")
    if audio_path.suffix.lower() not in SUPPORTED_FORMATS:
        raise InvalidInput(f"Unsupported audio format: {audio_path.suffix or '(none)'}")

    file_size_bytes = audio_path.stat().st_size
    if file_size_bytes == 0:
        raise InvalidInput(f"Audio file is empty: {audio_path}")

    upload_path = audio_path
    if file_size_bytes > MAX_UPLOAD_BYTES:
        print(f"⚠ File size ({file_size_bytes / (1024*1024):.1f} MB) exceeds OpenAI's 25 MB limit.")
        upload_path = _compress_audio(audio_path, MAX_UPLOAD_BYTES)

    try:
        data = upload_path.read_bytes()
    finally:
        if upload_path != audio_path and upload_path.exists():
            upload_path.unlink()

    return transcribe_bytes_with_segments(
        client,
        data,
        upload_path.name,
        language=language,
        response_format=response_format,
        model=model,
        max_retries=max_retries,
    )


def transcribe_url_with_segments(
    client: OpenAI,
    url: str,
    language: Optional[str] = None,
    response_format: str = "verbose_json",
    model: Optional[str] = None,
    max_retries: Optional[int] = None,
) -> Transcript:
    """
    Fetch remote audio and transcribe it with segments and timestamps.

    Args:
        client: OpenAI client used for the Whisper call
        url: http(s) URL of the media
        language: Optional ISO-639-1 language hint
        response_format: verbose_json (default), json, srt, vtt or text
        model: Whisper model name, defaults to Config.MODEL
        max_retries: Retries for transient failures, defaults to Config.MAX_RETRIES

    Returns:
        Transcript object with segments
    """
    work_dir = Path(tempfile.mkdtemp(prefix="quotesync_"))
    try:
        audio_path = download_audio(url, work_dir)
        return transcribe_file_with_segments(
            client,
            audio_path,
            language=language,
            response_format=response_format,
            model=model,
            max_retries=max_retries,
        )
    finally:
        shutil.rmtree(work_dir, ignore_errors=True)
