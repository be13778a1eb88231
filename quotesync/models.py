"""Data models for transcripts, segments and grounded summaries."""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class Segment:
    """A single segment of transcribed text with timing information."""
    id: int       # Chronological position, starting at 0
    start: float  # Start time in seconds
    end: float    # End time in seconds
    text: str     # Transcribed text

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'start': self.start,
            'end': self.end,
            'text': self.text,
        }


@dataclass
class Transcript:
    """Complete transcript with metadata."""
    full_transcript: str
    segments: list[Segment] = field(default_factory=list)
    duration: float = 0.0  # Duration in seconds
    language: Optional[str] = None
    raw: Any = None  # Backend payload, kept for diagnostics only

    def to_dict(self) -> dict:
        return {
            'full_transcript': self.full_transcript,
            'duration': self.duration,
            'language': self.language,
            'segments': [segment.to_dict() for segment in self.segments],
        }


@dataclass(frozen=True)
class QuotedSegment:
    """A summary quote anchored to a span of the transcript."""
    start: float
    end: float
    text: str
    formatted: str  # start rendered as M:SS or H:MM:SS

    def to_dict(self) -> dict:
        return {
            'start': self.start,
            'end': self.end,
            'text': self.text,
            'formatted': self.formatted,
        }


@dataclass
class SummarySectionWithQuotes:
    """One section of a summary with the quotes that support it."""
    content: str
    title: Optional[str] = None
    quotes: list[QuotedSegment] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            'title': self.title,
            'content': self.content,
            'quotes': [quote.to_dict() for quote in self.quotes],
        }


@dataclass
class AudioSummaryWithQuotes:
    """Complete summary with quotes grounded in the transcript."""
    sections: list[SummarySectionWithQuotes]
    full_transcript: str
    full_segments: list[Segment]
    summary_text: str

    def to_dict(self) -> dict:
        return {
            'summary_text': self.summary_text,
            'sections': [section.to_dict() for section in self.sections],
            'full_transcript': self.full_transcript,
            'full_segments': [segment.to_dict() for segment in self.full_segments],
        }
