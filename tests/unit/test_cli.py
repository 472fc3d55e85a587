# tests/unit/test_cli.py
"""Tests for the drawio-sanitize command line."""

import io

import pytest

from src.cli import EXIT_ERROR, EXIT_OK, EXIT_UNTERMINATED, build_parser, main


@pytest.fixture
def stdin(monkeypatch):
    """Replace stdin with the given text."""

    def _set(text: str) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO(text))

    return _set


@pytest.mark.usefixtures("quiet_env")
class TestMain:
    def test_reads_stdin_writes_stdout(self, stdin, capsys):
        stdin('<mxCell value="x < y" />')

        assert main([]) == EXIT_OK
        assert capsys.readouterr().out == '<mxCell value="x &lt; y" />\n'

    def test_dash_means_stdin(self, stdin, capsys):
        stdin("<t>A & B</t>\n")

        assert main(["-"]) == EXIT_OK
        assert capsys.readouterr().out == "<t>A &amp; B</t>\n"

    def test_file_to_file(self, tmp_path, drawio_document):
        source = tmp_path / "diagram.xml"
        target = tmp_path / "clean.xml"
        source.write_text(drawio_document, encoding="utf-8")

        assert main([str(source), "-o", str(target)]) == EXIT_OK
        written = target.read_text(encoding="utf-8")
        assert 'value="Math: 0 &lt; x &lt; 10"' in written
        assert 'value="R&amp;D"' in written

    def test_mermaid_detected_and_passed_through(self, stdin, capsys):
        stdin("graph TD\n  A[x < y] --> B\n")

        assert main([]) == EXIT_OK
        assert capsys.readouterr().out == "graph TD\n  A[x < y] --> B\n"

    def test_explicit_type_overrides_detection(self, stdin, capsys):
        stdin("graph <b>")

        assert main(["--type", "xml"]) == EXIT_OK
        assert capsys.readouterr().out == "graph <b>\n"

    def test_explicit_mermaid_skips_sanitizer(self, stdin, capsys):
        stdin("<a>1 & 2</a>")

        assert main(["--type", "mermaid"]) == EXIT_OK
        assert capsys.readouterr().out == "<a>1 & 2</a>\n"

    def test_stats_on_stderr(self, stdin, capsys):
        stdin('<a v="1 < 2">3 > 2</a>')

        assert main(["--stats"]) == EXIT_OK
        captured = capsys.readouterr()
        assert captured.out == '<a v="1 &lt; 2">3 &gt; 2</a>\n'
        assert "escapes=2" in captured.err
        assert "&gt;=1" in captured.err
        assert "&lt;=1" in captured.err
        assert "final_state=TEXT" in captured.err

    def test_stats_for_mermaid(self, stdin, capsys):
        stdin("pie\n  \"a\": 1")

        assert main(["--stats"]) == EXIT_OK
        assert "type=mermaid sanitized=no" in capsys.readouterr().err

    def test_strict_fails_on_unterminated(self, stdin, capsys):
        stdin('<mxCell value="open')

        assert main(["--strict"]) == EXIT_UNTERMINATED
        captured = capsys.readouterr()
        assert captured.out == '<mxCell value="open\n'
        assert "ATTR_VALUE_DOUBLE" in captured.err

    def test_unterminated_without_strict_succeeds(self, stdin):
        stdin("<a><!-- open")
        assert main([]) == EXIT_OK

    def test_empty_input(self, stdin, capsys):
        stdin("   \n")

        assert main([]) == EXIT_ERROR
        assert "Snippet is empty" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.xml")]) == EXIT_ERROR
        assert "drawio-sanitize:" in capsys.readouterr().err

    def test_size_limit_from_environment(self, stdin, monkeypatch, capsys):
        monkeypatch.setenv("DRAWIO_MAX_SNIPPET_CHARS", "5")
        stdin("<root/>")

        assert main([]) == EXIT_ERROR
        assert "limit is 5" in capsys.readouterr().err


class TestBuildParser:
    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.input == "-"
        assert args.output is None
        assert args.diagram_type == "auto"
        assert args.stats is False
        assert args.strict is False

    def test_rejects_unknown_type(self):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["--type", "plantuml"])
        assert exc_info.value.code == 2
