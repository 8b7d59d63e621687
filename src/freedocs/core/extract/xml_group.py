"""Folding of XML code lines into atomic elements (e.g. a whole Maven dependency)

Copy modes act per line, so a grouped <dependency> is copied or dropped as a unit.
Nesting is tracked with a single flag: a <dependency> inside a <dependency>
closes the group at the first </dependency>.
"""

import re

from freedocs.core.models import Line, LineOp


GROUP_START_RE = re.compile(r'<(groupId|artifactId|version|scope|plugin|configuration)>')


def create_grouped_line(lines: list[Line]) -> Line:
    """Merge lines into one grouped line; a single line is returned as is."""
    if len(lines) == 1:
        return lines[0]
    op = next((line.op for line in lines if line.op != LineOp.unchanged), LineOp.unchanged)
    return Line(
        text='\n'.join(line.text for line in lines),
        original_text='\n'.join(line.original_text for line in lines),
        op=op,
        is_grouped=True,
        group_size=len(lines),
    )


def _is_continuation(text: str) -> bool:
    return '<' in text or '</' in text or not text


def group_xml_lines(lines: list[Line], language: str) -> list[Line]:
    """Group structurally related XML lines; non-XML input is returned unchanged."""
    if language != 'xml':
        return lines

    grouped: list[Line] = []
    current: list[Line] = []
    inside_dependency = False

    def flush() -> None:
        if current:
            grouped.append(create_grouped_line(current))
            current.clear()

    for line in lines:
        text = line.text.strip()

        if '<dependency>' in text:
            flush()
            current.append(line)
            inside_dependency = '</dependency>' not in text
            if not inside_dependency:
                flush()
        elif '</dependency>' in text:
            current.append(line)
            flush()
            inside_dependency = False
        elif inside_dependency:
            current.append(line)
        elif GROUP_START_RE.search(text):
            flush()
            current.append(line)
        elif current and _is_continuation(text):
            current.append(line)
        else:
            flush()
            grouped.append(line)

    flush()
    return grouped
