# src/observability.py
"""
Wide event logging for sanitizer runs.

One comprehensive event per operation with high cardinality and high
dimensionality, rather than scattered log lines.

Usage:
    event = SanitizeEvent(diagram_type="xml", input_chars=len(text))
    # ... populate event fields during operation ...
    emit_event(event)
"""

import json
import random
import secrets
import sys
import time
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from typing import Any

from xml_sanitizer import SanitizeResult

# Runs slower than this are always logged
SLOW_SANITIZE_MS = 250


def generate_request_id() -> str:
    """Generate a unique request ID for tracing."""
    return secrets.token_hex(8)


@dataclass
class SanitizeEvent:
    """
    Canonical log line for a sanitize operation.

    Emitted once per snippet by the pipeline. Records how much was escaped
    and whether the input ended inside a tag, value, comment or CDATA
    section.
    """

    # Identifiers
    event_type: str = field(default="xml_sanitize", init=False)
    request_id: str = ""

    # Timing
    timestamp: str = ""
    wall_time_ms: float = 0

    # Input
    diagram_type: str = "xml"
    input_chars: int = 0
    output_chars: int = 0

    # Escapes written
    escape_count: int = 0
    lt_escaped: int = 0
    gt_escaped: int = 0
    amp_escaped: int = 0
    quot_escaped: int = 0
    apos_escaped: int = 0

    # Machine state at end of input
    final_state: str = "TEXT"
    unterminated: bool = False

    # Outcome
    outcome: str = "success"  # "success" | "error"

    def __post_init__(self) -> None:
        """Set derived fields after initialization."""
        if not self.timestamp:
            self.timestamp = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        if not self.request_id:
            self.request_id = generate_request_id()

    def record(self, result: SanitizeResult) -> None:
        """Copy counts and final state from a sanitizer result."""
        self.output_chars = len(result.output)
        self.escape_count = result.escape_count
        self.lt_escaped = result.escapes.get("&lt;", 0)
        self.gt_escaped = result.escapes.get("&gt;", 0)
        self.amp_escaped = result.escapes.get("&amp;", 0)
        self.quot_escaped = result.escapes.get("&quot;", 0)
        self.apos_escaped = result.escapes.get("&apos;", 0)
        self.final_state = result.final_state.name
        self.unterminated = result.unterminated


def should_sample(event: dict[str, Any], sample_rate: float = 0.10) -> bool:
    """
    Tail sampling strategy.

    Always keep:
    - Errors (100%)
    - Input that ended in an unterminated construct
    - Slow runs

    Sample:
    - Successful, fast operations (default 10%)

    Args:
        event: The event dict to evaluate
        sample_rate: Sampling rate for successful fast operations (default 10%)

    Returns:
        True if this event should be emitted, False to drop
    """
    if event.get("outcome") == "error":
        return True

    if event.get("unterminated"):
        return True

    if event.get("wall_time_ms", 0) > SLOW_SANITIZE_MS:
        return True

    return random.random() < sample_rate


def emit_event(
    event: SanitizeEvent | dict[str, Any],
    sample_rate: float = 0.10,
    force: bool = False,
) -> bool:
    """
    Emit an event with optional tail sampling.

    Events are written to stderr; stdout carries the sanitized markup.

    Args:
        event: The event to emit (dataclass or dict)
        sample_rate: Sampling rate for successful fast operations
        force: If True, skip sampling and always emit

    Returns:
        True if event was emitted, False if dropped by sampling
    """
    event_dict = event if isinstance(event, dict) else asdict(event)

    if force or should_sample(event_dict, sample_rate):
        print(json.dumps(event_dict), file=sys.stderr)
        return True
    return False


class Timer:
    """Context manager for timing operations."""

    def __init__(self) -> None:
        self.start_time: float = 0
        self.end_time: float = 0
        self.elapsed_ms: float = 0

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, *args: Any) -> None:
        self.end_time = time.perf_counter()
        self.elapsed_ms = (self.end_time - self.start_time) * 1000

    def elapsed(self) -> float:
        """Return elapsed time in milliseconds."""
        if self.end_time:
            return self.elapsed_ms
        return (time.perf_counter() - self.start_time) * 1000
