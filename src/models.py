# src/models.py
"""Domain models for diagram snippets.

A snippet is the raw text lifted from a page or a file together with the
kind of diagram it describes. Only Draw.io XML goes through the sanitizer;
Mermaid source is handed on untouched.
"""

import re
from dataclasses import dataclass
from typing import Literal, Self, get_args

# =============================================================================
# Type Aliases
# =============================================================================

DiagramType = Literal["xml", "mermaid"]

DIAGRAM_TYPES: tuple[str, ...] = get_args(DiagramType)

# Leading keywords of a Mermaid diagram definition
MERMAID_KEYWORDS = (
    "graph",
    "flowchart",
    "sequenceDiagram",
    "classDiagram",
    "stateDiagram",
    "erDiagram",
    "gantt",
    "pie",
    "gitGraph",
)

_MERMAID_START_RE = re.compile(r"\s*(?:" + "|".join(MERMAID_KEYWORDS) + ")")


def detect_type_from_text(text: str | None) -> DiagramType:
    """Guess the diagram type from the snippet text alone.

    Anything that does not open with a Mermaid keyword is treated as
    Draw.io XML, which is also the answer for empty input.
    """
    if not text:
        return "xml"
    if _MERMAID_START_RE.match(text):
        return "mermaid"
    return "xml"


# =============================================================================
# Domain Models
# =============================================================================


@dataclass(frozen=True, slots=True)
class DiagramSnippet:
    """Raw diagram text and its type. Immutable."""

    content: str
    diagram_type: DiagramType = "xml"

    @classmethod
    def from_text(cls, text: str, diagram_type: str | None = None) -> Self:
        """Create a snippet, detecting the type when none is given.

        Raises:
            ValueError: If diagram_type is not a known type.
        """
        if diagram_type is None:
            return cls(content=text, diagram_type=detect_type_from_text(text))
        if diagram_type not in DIAGRAM_TYPES:
            raise ValueError(f"Unknown diagram type: {diagram_type!r}")
        return cls(content=text, diagram_type=diagram_type)  # type: ignore[arg-type]
