# src/xml_sanitizer.py
"""Escaping for near-valid Draw.io diagram XML.

Diagram XML pasted from chat answers or written by hand is often almost, but
not quite, valid: attribute values contain a raw ``<``, text content contains
a bare ``&``, a double-quoted value embeds another ``"``. This module rewrites
such markup into XML that a strict parser accepts.

The rewrite is a single forward pass driven by a flat state machine. It tells
structural markup (tag delimiters, attribute quoting, comments, CDATA
sections) apart from content that merely looks like markup and escapes only
the content:

  - ``<``, ``>`` and ``&`` in text content and attribute values
  - an embedded quote inside an attribute value of the same quote style

Entity references that are already well formed (``&lt;``, ``&#60;``,
``&#x3C;``) are left alone, so sanitizing escaped input is a no-op.

There is no tag stack and no validation. Input that ends in the middle of a
tag, quoted value, comment or CDATA section is returned as far as it goes.

Example:
    >>> sanitize_xml('<mxCell value="x < y" />')
    '<mxCell value="x &lt; y" />'
"""

import re
import string
from dataclasses import dataclass, field
from enum import Enum, auto

# =============================================================================
# Constants
# =============================================================================

CDATA_OPEN = "<![CDATA["
CDATA_CLOSE = "]]>"
COMMENT_OPEN = "<!--"
COMMENT_CLOSE = "-->"

# Characters that may follow "<" for it to be read as the start of a tag,
# end tag, processing instruction or declaration
_TAG_START_CHARS = frozenset(string.ascii_letters + string.digits + "_:/?!")

# Bodies of well-formed entity references (the text between "&" and ";")
_HEX_REFERENCE_RE = re.compile(r"#x[0-9A-Fa-f]+")
_DECIMAL_REFERENCE_RE = re.compile(r"#[0-9]+")
_NAMED_REFERENCE_RE = re.compile(r"[A-Za-z][A-Za-z0-9]+")


class ParseState(Enum):
    """Position of the sanitizer within the markup."""

    TEXT = auto()
    TAG_OPEN = auto()  # just after "<"
    TAG_NAME = auto()  # inside the tag name
    ATTR_NAME = auto()  # after the tag name, between attributes
    ATTR_VALUE_DOUBLE = auto()
    ATTR_VALUE_SINGLE = auto()
    COMMENT = auto()
    CDATA = auto()


@dataclass
class SanitizeResult:
    """Outcome of one sanitizer pass.

    Attributes:
        output: The escaped markup
        final_state: State the machine was in when input ran out
        escapes: Number of replacements written, keyed by entity
    """

    output: str
    final_state: ParseState = ParseState.TEXT
    escapes: dict[str, int] = field(default_factory=dict)

    @property
    def unterminated(self) -> bool:
        """True when input ended inside a tag, value, comment or CDATA."""
        return self.final_state is not ParseState.TEXT

    @property
    def escape_count(self) -> int:
        return sum(self.escapes.values())


# =============================================================================
# Lookahead Tests
# =============================================================================


def is_pre_escaped_entity(source: str, index: int) -> bool:
    """Check whether the "&" at ``index`` starts a well-formed entity reference.

    Scans forward to the next ";" and classifies the text in between as a
    hexadecimal reference (``#x3C``), a decimal reference (``#60``) or a named
    reference of at least two characters (``lt``, ``nbsp``).

    Args:
        source: The full input text
        index: Position of the "&" to test

    Returns:
        True if the ampersand must be kept as is, False if it needs escaping.
    """
    if source[index : index + 1] != "&":
        return False

    semicolon = source.find(";", index + 1)
    if semicolon == -1:
        return False

    body = source[index + 1 : semicolon]
    if not body:
        return False

    return bool(
        _HEX_REFERENCE_RE.fullmatch(body)
        or _DECIMAL_REFERENCE_RE.fullmatch(body)
        or _NAMED_REFERENCE_RE.fullmatch(body)
    )


def is_attribute_terminator(next_char: str) -> bool:
    """Check whether a quote followed by ``next_char`` closes an attribute value.

    ``next_char`` is the empty string at end of input.
    """
    return next_char in ("", ">", "/", "?") or next_char.isspace()


# =============================================================================
# State Machine
# =============================================================================


class XmlSanitizer:
    """Single-use sanitizer for one input string.

    Holds the cursor, the current state and the output buffer for one pass.
    Nothing is shared between instances, so separate inputs can be sanitized
    concurrently.

    Usage:
        result = XmlSanitizer(text).run()
        result.output        # escaped markup
        result.final_state   # ParseState.TEXT unless input was truncated
    """

    def __init__(self, text: str):
        self.text = text
        self.state = ParseState.TEXT
        self.pos = 0
        self._buffer: list[str] = []
        self._tail = ""  # last three characters written
        self._escapes: dict[str, int] = {}
        self._handlers = {
            ParseState.TEXT: self._in_text,
            ParseState.TAG_OPEN: self._in_tag_open,
            ParseState.TAG_NAME: self._in_tag_name,
            ParseState.ATTR_NAME: self._in_attr_name,
            ParseState.ATTR_VALUE_DOUBLE: self._in_double_quoted,
            ParseState.ATTR_VALUE_SINGLE: self._in_single_quoted,
            ParseState.COMMENT: self._in_comment,
            ParseState.CDATA: self._in_cdata,
        }

    def run(self) -> SanitizeResult:
        """Consume the rest of the input and return the result."""
        end = len(self.text)
        while self.pos < end:
            handler = self._handlers[self.state]
            self.pos += handler(self.text[self.pos])

        return SanitizeResult(
            output="".join(self._buffer),
            final_state=self.state,
            escapes=dict(self._escapes),
        )

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    def _emit(self, piece: str) -> None:
        self._buffer.append(piece)
        self._tail = (self._tail + piece)[-3:]

    def _escape(self, entity: str) -> None:
        self._escapes[entity] = self._escapes.get(entity, 0) + 1
        self._emit(entity)

    def _peek(self) -> str:
        """Character after the cursor, or "" at end of input."""
        return self.text[self.pos + 1 : self.pos + 2]

    def _ampersand(self) -> None:
        if is_pre_escaped_entity(self.text, self.pos):
            self._emit("&")
        else:
            self._escape("&amp;")

    # -------------------------------------------------------------------------
    # State handlers: each returns the number of input characters consumed
    # -------------------------------------------------------------------------

    def _in_text(self, char: str) -> int:
        if char == "<":
            if self.text.startswith(CDATA_OPEN, self.pos):
                self._emit(CDATA_OPEN)
                self.state = ParseState.CDATA
                return len(CDATA_OPEN)
            if self.text.startswith(COMMENT_OPEN, self.pos):
                self._emit(COMMENT_OPEN)
                self.state = ParseState.COMMENT
                return len(COMMENT_OPEN)
            if self._peek() in _TAG_START_CHARS:
                self._emit(char)
                self.state = ParseState.TAG_OPEN
            else:
                # Stray "<" in content
                self._escape("&lt;")
        elif char == "&":
            self._ampersand()
        elif char == ">":
            self._escape("&gt;")
        else:
            self._emit(char)
        return 1

    def _in_tag_open(self, char: str) -> int:
        self._emit(char)
        self.state = ParseState.TEXT if char == ">" else ParseState.TAG_NAME
        return 1

    def _in_tag_name(self, char: str) -> int:
        self._emit(char)
        if char.isspace():
            self.state = ParseState.ATTR_NAME
        elif char == ">":
            self.state = ParseState.TEXT
        return 1

    def _in_attr_name(self, char: str) -> int:
        self._emit(char)
        if char == '"':
            self.state = ParseState.ATTR_VALUE_DOUBLE
        elif char == "'":
            self.state = ParseState.ATTR_VALUE_SINGLE
        elif char == ">":
            self.state = ParseState.TEXT
        return 1

    def _in_double_quoted(self, char: str) -> int:
        return self._in_attr_value(char, '"', "&quot;")

    def _in_single_quoted(self, char: str) -> int:
        return self._in_attr_value(char, "'", "&apos;")

    def _in_attr_value(self, char: str, quote: str, quote_entity: str) -> int:
        if char == quote:
            if is_attribute_terminator(self._peek()):
                self._emit(char)
                self.state = ParseState.ATTR_NAME
            else:
                self._escape(quote_entity)
        elif char == "&":
            self._ampersand()
        elif char == "<":
            self._escape("&lt;")
        elif char == ">":
            self._escape("&gt;")
        else:
            self._emit(char)
        return 1

    def _in_comment(self, char: str) -> int:
        self._emit(char)
        if self._tail == COMMENT_CLOSE:
            self.state = ParseState.TEXT
        return 1

    def _in_cdata(self, char: str) -> int:
        self._emit(char)
        if self._tail == CDATA_CLOSE:
            self.state = ParseState.TEXT
        return 1


def sanitize_xml(text: str | None) -> str:
    """Escape stray markup characters in near-valid XML.

    Never raises. Malformed input is escaped as far as the state machine can
    classify it and returned.

    Args:
        text: The markup to sanitize. If None, returns empty string.

    Returns:
        Markup with content characters escaped and structure left intact.
    """
    if text is None:
        return ""

    return XmlSanitizer(text).run().output
