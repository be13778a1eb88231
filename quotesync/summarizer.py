"""OpenAI GPT summary generation with quotes grounded in the transcript."""

import re
from dataclasses import dataclass, replace
from typing import Optional

from openai import OpenAI
from pydantic import ValidationError
from tqdm import tqdm

from quotesync.aligner import align_quote, normalize_text
from quotesync.config import Config
from quotesync.errors import ErrorKind, InvalidInput, MalformedResponse
from quotesync.models import (
    AudioSummaryWithQuotes,
    QuotedSegment,
    SummarySectionWithQuotes,
    Transcript,
)
from quotesync.retry import call_with_retries
from quotesync.schemas import GeneratedSummary

SUMMARY_PROMPT = """You are a study assistant. Your job is to turn a transcript of a lecture, meeting or recording into clear study notes, backed by quotes the reader can jump to in the audio.

Rules:
1.  **Sections**: Split the summary into at most {max_sections} sections ordered for reading. Each section has a short title and Markdown content.
2.  **Style**: Write {style}.
3.  **Quotes**: For each section pick up to {quotes_per_section} short excerpts that support it. Copy them WORD FOR WORD from the transcript. Never paraphrase, merge distant passages or invent quotes. An empty list is fine.
4.  **Content**: Only use information present in the transcript. If something is unclear, say so. Never guess.

Respond with a single JSON object and nothing else:
{{"sections": [{{"title": "...", "content": "...", "quotes": ["...", "..."]}}]}}
"""

_QUOTE_MARKS = "\"'“”‘’«»"
_LEADING_MARKER = re.compile(r'^\[[^\]]*\]\s*')


@dataclass
class SummaryOptions:
    """Knobs for one summary generation request."""
    model: Optional[str] = None  # Defaults to Config.SUMMARY_MODEL
    max_tokens: int = 1000
    temperature: float = 0.3
    max_sections: int = 5
    quotes_per_section: int = 2
    style: str = "concise, well-structured study notes"
    include_segments: bool = False  # Send per-segment lines as extra context
    match_threshold: Optional[float] = None  # Defaults to Config.QUOTE_MATCH_THRESHOLD
    max_window: Optional[int] = None  # Defaults to Config.QUOTE_MAX_WINDOW
    max_retries: Optional[int] = None  # Defaults to Config.MAX_RETRIES
    show_progress: bool = False


def _clean_candidate(candidate: str) -> str:
    """Strip wrapping quote marks and a leading [id]/[m:ss] marker."""
    cleaned = _LEADING_MARKER.sub("", candidate.strip())
    return cleaned.strip().strip(_QUOTE_MARKS).strip()


def _build_messages(transcript: Transcript, options: SummaryOptions) -> list[dict]:
    system_prompt = SUMMARY_PROMPT.format(
        max_sections=options.max_sections,
        style=options.style,
        quotes_per_section=options.quotes_per_section,
    )
    user_message = f"TRANSCRIPT:\n{transcript.full_transcript}"
    if options.include_segments and transcript.segments:
        segment_lines = "\n".join(f"[{segment.id}] {segment.text}" for segment in transcript.segments)
        user_message += f"\n\nTRANSCRIPT SEGMENTS:\n{segment_lines}"
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_message},
    ]


def parse_generated_summary(content: Optional[str]) -> GeneratedSummary:
    """
    Validate the generation backend's JSON answer.

    Args:
        content: Message content returned by the chat completion

    Returns:
        GeneratedSummary with every section validated
    """
    if not content:
        raise MalformedResponse("Summary response is empty")
    # Remove markdown code fences some models wrap JSON in
    cleaned = content.replace("```json", "").replace("```", "").strip()
    try:
        return GeneratedSummary.model_validate_json(cleaned)
    except ValidationError as e:
        raise MalformedResponse(f"Malformed summary response: {e}") from e


def render_summary_text(sections: list[SummarySectionWithQuotes]) -> str:
    """Flatten sections into plain text: title line, content, blank line between sections."""
    blocks = []
    for section in sections:
        lines = [section.title] if section.title else []
        lines.append(section.content.strip())
        blocks.append("\n".join(lines).strip())
    return "\n\n".join(block for block in blocks if block)


def assemble_summary(
    transcript: Transcript,
    generated: GeneratedSummary,
    match_threshold: Optional[float] = None,
    max_window: Optional[int] = None,
    show_progress: bool = False,
) -> AudioSummaryWithQuotes:
    """
    Ground every candidate quote of a generated summary in the transcript.

    Quotes that cannot be aligned are left out of their section. Kept quotes
    carry the candidate text exactly as generated. Within a
    section, quotes are ordered by start time.

    Args:
        transcript: Transcript the summary was generated from
        generated: Validated summary returned by the generation backend
        match_threshold: Similarity threshold for the fuzzy alignment pass
        max_window: Largest run of consecutive segments a quote may span
        show_progress: Show a tqdm progress bar while aligning

    Returns:
        AudioSummaryWithQuotes holding the sections and the full transcript
    """
    if match_threshold is None:
        match_threshold = Config.QUOTE_MATCH_THRESHOLD
    if max_window is None:
        max_window = Config.QUOTE_MAX_WINDOW

    sections: list[SummarySectionWithQuotes] = []
    dropped = 0
    for generated_section in tqdm(
        generated.sections,
        desc="Aligning quotes",
        unit="section",
        ncols=80,
        leave=False,
        disable=not show_progress,
    ):
        quotes: list[QuotedSegment] = []
        seen: set[str] = set()
        for candidate in generated_section.quotes or []:
            cleaned = _clean_candidate(candidate)
            key = normalize_text(cleaned)
            if not key or key in seen:
                continue
            seen.add(key)

            quote = align_quote(cleaned, transcript.segments, threshold=match_threshold, max_window=max_window)
            if quote is None:
                dropped += 1
                continue
            # Match on the cleaned text, show the quote as generated
            quotes.append(replace(quote, text=candidate))

        sections.append(SummarySectionWithQuotes(
            title=generated_section.title,
            content=generated_section.content,
            quotes=sorted(quotes, key=lambda q: q.start),
        ))

    if dropped:
        print(
            f"⚠ Dropped {dropped} quote(s) that could not be matched to the transcript "
            f"({ErrorKind.ALIGNMENT_UNRESOLVED.value})"
        )

    return AudioSummaryWithQuotes(
        sections=sections,
        full_transcript=transcript.full_transcript,
        full_segments=list(transcript.segments),
        summary_text=render_summary_text(sections),
    )


def generate_summary_with_quotes(
    transcript: Transcript,
    client: OpenAI,
    options: Optional[SummaryOptions] = None,
) -> AudioSummaryWithQuotes:
    """
    Summarize a transcript and attach time-anchored quotes to each section.

    The call is all or nothing: a backend failure or a malformed answer
    raises, and no partially grounded summary is ever returned.

    Args:
        transcript: Transcript object with segments
        client: OpenAI client used for the chat completion
        options: Generation settings, defaults to SummaryOptions()

    Returns:
        AudioSummaryWithQuotes
    """
    options = options or SummaryOptions()
    if not transcript.segments and not transcript.full_transcript.strip():
        raise InvalidInput("Cannot summarize an empty transcript")

    model = options.model or Config.SUMMARY_MODEL
    request_params = {
        "model": model,
        "messages": _build_messages(transcript, options),
        "response_format": {"type": "json_object"},
    }
    # gpt-5 models only support the default temperature and take max_completion_tokens
    if model.startswith("gpt-5"):
        request_params["max_completion_tokens"] = options.max_tokens
    else:
        request_params["max_tokens"] = options.max_tokens
        request_params["temperature"] = options.temperature

    print("Generating summary with GPT...")
    response = call_with_retries(
        lambda: client.chat.completions.create(**request_params),
        "Summary generation",
        max_retries=Config.MAX_RETRIES if options.max_retries is None else options.max_retries,
    )

    try:
        content = response.choices[0].message.content
    except (AttributeError, IndexError, TypeError) as e:
        raise MalformedResponse(f"Summary response has no message content: {e}") from e

    generated = parse_generated_summary(content)
    summary = assemble_summary(
        transcript,
        generated,
        match_threshold=options.match_threshold,
        max_window=options.max_window,
        show_progress=options.show_progress,
    )
    quote_count = sum(len(section.quotes) for section in summary.sections)
    print(f"✓ Summary complete: {len(summary.sections)} sections, {quote_count} grounded quotes")
    return summary
