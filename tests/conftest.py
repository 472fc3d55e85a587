# tests/conftest.py
"""Shared fixtures for the Draw.io sanitizer tests."""

import sys
from pathlib import Path

import pytest

# Add src directory to path so bare-name imports between modules resolve
_src_path = str(Path(__file__).parent.parent / "src")
if _src_path not in sys.path:
    sys.path.insert(0, _src_path)


# =============================================================================
# Shared Test Data
# =============================================================================

DRAWIO_DOCUMENT = """<mxfile host="app.diagrams.net">
  <diagram id="d1" name="Page-1">
    <mxGraphModel dx="800" dy="600">
      <root>
        <mxCell id="0" />
        <mxCell id="1" parent="0" />
        <mxCell id="2" value="Math: 0 < x < 10" style="text;html=1;align=center;" vertex="1" parent="1">
          <mxGeometry x="40" y="40" width="120" height="30" as="geometry" />
        </mxCell>
        <mxCell id="3" value="R&D" style="rounded=1;" vertex="1" parent="1" />
      </root>
    </mxGraphModel>
  </diagram>
</mxfile>"""


class MockEnv:
    """Mock environment exposing settings as attributes."""

    def __init__(self, **kwargs):
        for key, value in kwargs.items():
            setattr(self, key, value)

    def __getattr__(self, name):
        return None


@pytest.fixture
def drawio_document() -> str:
    """A small Draw.io document with unescaped content characters."""
    return DRAWIO_DOCUMENT


@pytest.fixture
def quiet_env(monkeypatch):
    """Disable sampled event output for CLI runs."""
    monkeypatch.setenv("DRAWIO_EVENT_SAMPLE_RATE", "0")
