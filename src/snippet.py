# src/snippet.py
"""Snippet preparation pipeline.

Takes a DiagramSnippet and produces the text handed to the downstream
compress-and-encode step:

- Draw.io XML is trimmed and sanitized once
- Mermaid source is trimmed and passed through unchanged

Usage:
    prepared = prepare_snippet(DiagramSnippet.from_text(raw))
    prepared.content      # text for the encoder
    prepared.result       # SanitizeResult for XML, None for Mermaid
"""

from dataclasses import dataclass

from models import DiagramSnippet, DiagramType
from observability import SanitizeEvent, Timer, emit_event
from xml_sanitizer import SanitizeResult, XmlSanitizer

# =============================================================================
# Errors
# =============================================================================


class SnippetError(ValueError):
    """A snippet that cannot be prepared at all."""


class EmptySnippetError(SnippetError):
    """Snippet is empty or whitespace only."""

    def __init__(self) -> None:
        super().__init__("Snippet is empty")


class SnippetTooLargeError(SnippetError):
    """Snippet exceeds the configured size limit."""

    def __init__(self, length: int, max_chars: int):
        self.length = length
        self.max_chars = max_chars
        super().__init__(f"Snippet is {length} characters, limit is {max_chars}")


# =============================================================================
# Pipeline
# =============================================================================


@dataclass
class PreparedSnippet:
    """Result of preparing a snippet.

    Attributes:
        diagram_type: Type the snippet was handled as
        content: Text to hand to the encoder
        sanitized: Whether the sanitizer ran
        result: Sanitizer result (XML only)
    """

    diagram_type: DiagramType
    content: str
    sanitized: bool = False
    result: SanitizeResult | None = None


def prepare_snippet(
    snippet: DiagramSnippet,
    *,
    max_chars: int | None = None,
    sample_rate: float = 0.10,
) -> PreparedSnippet:
    """Trim a snippet and sanitize it if it is Draw.io XML.

    Args:
        snippet: The raw snippet
        max_chars: Reject trimmed content longer than this (None or 0 for no limit)
        sample_rate: Tail sampling rate for the sanitize event

    Returns:
        PreparedSnippet carrying the text for the encoder.

    Raises:
        EmptySnippetError: If there is nothing but whitespace.
        SnippetTooLargeError: If the trimmed content exceeds max_chars.
    """
    content = snippet.content.strip()
    if not content:
        raise EmptySnippetError()
    if max_chars and len(content) > max_chars:
        raise SnippetTooLargeError(len(content), max_chars)

    if snippet.diagram_type == "mermaid":
        return PreparedSnippet(diagram_type="mermaid", content=content)

    event = SanitizeEvent(diagram_type=snippet.diagram_type, input_chars=len(content))
    with Timer() as timer:
        result = XmlSanitizer(content).run()
    event.wall_time_ms = timer.elapsed_ms
    event.record(result)
    emit_event(event, sample_rate=sample_rate)

    return PreparedSnippet(
        diagram_type=snippet.diagram_type,
        content=result.output,
        sanitized=True,
        result=result,
    )
