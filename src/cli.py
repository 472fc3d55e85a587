# src/cli.py
"""Command-line front end for the Draw.io sanitizer.

Reads a diagram snippet from a file or stdin, sanitizes it if it is Draw.io
XML, and writes the result to a file or stdout.

Usage:
    drawio-sanitize diagram.xml -o clean.xml
    pbpaste | drawio-sanitize --stats
    drawio-sanitize --type mermaid flow.mmd

Exit codes:
    0  success
    1  empty or oversized snippet, or an I/O error
    2  invalid arguments
    3  --strict and the markup ended inside a tag, value, comment or CDATA
"""

import argparse
import os
import sys
from pathlib import Path

from config import env_from_mapping, get_event_sample_rate, get_max_snippet_chars
from models import DIAGRAM_TYPES, DiagramSnippet
from snippet import PreparedSnippet, SnippetError, prepare_snippet
from utils import log_error, log_op

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_UNTERMINATED = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="drawio-sanitize",
        description="Escape stray markup characters in Draw.io diagram XML",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  drawio-sanitize diagram.xml -o clean.xml
  drawio-sanitize --stats < diagram.xml
        """,
    )
    parser.add_argument(
        "input",
        nargs="?",
        default="-",
        help="Snippet file to read (default: stdin)",
    )
    parser.add_argument("-o", "--output", help="Write the result here instead of stdout")
    parser.add_argument(
        "--type",
        dest="diagram_type",
        choices=["auto", *DIAGRAM_TYPES],
        default="auto",
        help="Diagram type; 'auto' detects Mermaid by its leading keyword",
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Print escape counts and the final parser state to stderr",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 3 if the markup ends inside a tag, value, comment or CDATA",
    )
    return parser


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _write_output(destination: str | None, content: str) -> None:
    if destination is None:
        sys.stdout.write(content)
        if not content.endswith("\n"):
            sys.stdout.write("\n")
        return
    Path(destination).write_text(content, encoding="utf-8")


def format_stats(prepared: PreparedSnippet) -> str:
    """One-line summary of what the sanitizer did."""
    result = prepared.result
    if result is None:
        return f"type={prepared.diagram_type} sanitized=no"

    counts = " ".join(f"{entity}={count}" for entity, count in sorted(result.escapes.items()))
    return (
        f"type={prepared.diagram_type} escapes={result.escape_count}"
        + (f" {counts}" if counts else "")
        + f" final_state={result.final_state.name}"
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    env = env_from_mapping(os.environ)

    try:
        raw = _read_input(args.input)
        diagram_type = None if args.diagram_type == "auto" else args.diagram_type
        snippet = DiagramSnippet.from_text(raw, diagram_type)
        prepared = prepare_snippet(
            snippet,
            max_chars=get_max_snippet_chars(env),
            sample_rate=get_event_sample_rate(env),
        )
        _write_output(args.output, prepared.content)
    except (SnippetError, OSError, UnicodeDecodeError) as e:
        log_error("cli_error", e, input=args.input)
        print(f"drawio-sanitize: {e}", file=sys.stderr)
        return EXIT_ERROR

    if args.output:
        log_op("cli_output_written", output=args.output, chars=len(prepared.content))

    if args.stats:
        print(format_stats(prepared), file=sys.stderr)

    if args.strict and prepared.result is not None and prepared.result.unterminated:
        print(
            f"drawio-sanitize: markup ends in state {prepared.result.final_state.name}",
            file=sys.stderr,
        )
        return EXIT_UNTERMINATED

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
