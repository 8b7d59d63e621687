"""Per-line diff marker classification for instructional code listings"""

import re

from freedocs.core.models import Line, LineOp


ADDED_RE   = re.compile(r'^(\s*)\+ ?')
REMOVED_RE = re.compile(r'^(\s*)- ?')


def classify_line(line: str) -> Line:
    """Classify one physical line as added/removed/unchanged and strip a single marker.

    Leading whitespace before the marker is kept; at most one space after it is removed.
    """
    trimmed = line.lstrip()
    if trimmed.startswith('+'):
        return Line(text=ADDED_RE.sub(r'\1', line, count=1), original_text=line, op=LineOp.added)
    if trimmed.startswith('-'):
        return Line(text=REMOVED_RE.sub(r'\1', line, count=1), original_text=line, op=LineOp.removed)
    return Line(text=line, original_text=line, op=LineOp.unchanged)


def classify_lines(text: str) -> list[Line]:
    """Split text on newlines and classify every line independently."""
    return [classify_line(line) for line in text.split('\n')]
