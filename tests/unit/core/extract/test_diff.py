"""Unit tests for core/extract/diff.py"""

import pytest

from freedocs.core.extract.diff import classify_line, classify_lines
from freedocs.core.models import LineOp


@pytest.mark.parametrize("raw,text,op", [
    ("+ added line", "added line", LineOp.added),
    ("+added line", "added line", LineOp.added),
    ("- removed line", "removed line", LineOp.removed),
    ("-removed", "removed", LineOp.removed),
    ("plain line", "plain line", LineOp.unchanged),
    ("", "", LineOp.unchanged),
])
def test_classify_line(raw, text, op):
    """classify_line strips one marker and at most one following space."""
    line = classify_line(raw)
    assert line.text == text
    assert line.op == op
    assert line.original_text == raw


def test_classify_line_preserves_indentation_before_marker():
    """Whitespace before the marker is kept exactly."""
    line = classify_line("    + return x;")
    assert line.text == "    return x;"
    assert line.op == LineOp.added


def test_classify_line_keeps_extra_spaces_after_marker():
    """Only one space after the marker is consumed; code indentation survives."""
    line = classify_line("+     <groupId>org.x</groupId>")
    assert line.text == "    <groupId>org.x</groupId>"


def test_classify_line_strips_single_marker_only():
    """A doubled marker leaves the second one in the text."""
    assert classify_line("++x").text == "+x"
    assert classify_line("--flag").text == "-flag"


def test_classify_lines_splits_on_newline():
    """classify_lines classifies each physical line independently."""
    lines = classify_lines("a\n+ b\n- c")
    assert [l.op for l in lines] == [LineOp.unchanged, LineOp.added, LineOp.removed]
    assert [l.text for l in lines] == ["a", "b", "c"]
