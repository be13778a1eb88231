"""Writer for grounded summaries as Markdown."""

from pathlib import Path
from quotesync.models import AudioSummaryWithQuotes, QuotedSegment


def format_quote_markdown(quote: QuotedSegment) -> str:
    """Format a quote as a Markdown blockquote led by its timestamp."""
    return f'> **[{quote.formatted}]** "{quote.text}"'


def render_summary_markdown(summary: AudioSummaryWithQuotes) -> str:
    """Render every section with its quotes under it."""
    blocks = []
    for section in summary.sections:
        lines = []
        if section.title:
            lines.append(f"## {section.title}")
            lines.append("")
        lines.append(section.content.strip())
        if section.quotes:
            lines.append("")
            lines.extend(format_quote_markdown(quote) for quote in section.quotes)
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks) + "\n"


def write_summary_markdown(summary: AudioSummaryWithQuotes, output_path: Path) -> None:
    """
    Write summary to a Markdown file.
    
    Args:
        summary: Grounded summary to render
        output_path: Path where the Markdown will be saved
    """
    with open(output_path, 'w', encoding='utf-8') as f:
        f.write(render_summary_markdown(summary))
