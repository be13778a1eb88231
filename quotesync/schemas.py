"""Validated shapes of the speech-to-text and generation backend responses."""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class BackendModel(BaseModel):
    """Base for backend payloads: unknown keys are tolerated and ignored."""

    model_config = ConfigDict(extra="ignore", frozen=True)


class WhisperSegment(BackendModel):
    """One timed span of a Whisper verbose_json response."""

    id: Optional[int] = None
    start: float
    end: float
    text: str


class WhisperTranscription(BackendModel):
    """Whisper verbose_json (or json) transcription response."""

    text: Optional[str] = None
    language: Optional[str] = None
    duration: Optional[float] = None
    segments: Optional[list[WhisperSegment]] = None


class GeneratedSection(BackendModel):
    """A summary section as emitted by the generation backend."""

    title: Optional[str] = None
    content: str
    quotes: Optional[list[str]] = None


class GeneratedSummary(BackendModel):
    """Structured summary returned by the generation backend."""

    sections: list[GeneratedSection]
