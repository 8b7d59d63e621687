"""Code content parsing: diff classification, language sniffing, and XML grouping"""

import logging

from freedocs.core.extract.diff import classify_lines
from freedocs.core.extract.language import detect_language
from freedocs.core.extract.xml_group import group_xml_lines
from freedocs.core.models import CodeBlock, Line, LineOp, ParseOptions
from freedocs.core.utils.text import normalize_spaces, unescape_html


logger = logging.getLogger(__name__)


def code_lines(text: str, options: ParseOptions) -> tuple[str, list[Line]]:
    """Return (language, lines) for a code text after deletion filtering and grouping."""
    text = normalize_spaces(unescape_html(text))
    language = detect_language(text)
    lines = classify_lines(text)
    if not options.show_deletions:
        # Filter before grouping so a hidden line never anchors a group boundary.
        lines = [line for line in lines if line.op != LineOp.removed]
    return language, group_xml_lines(lines, language)


def parse_code_content(
    text: str,
    source_type: str,
    options: ParseOptions,
    block_type: str = "code",
    ) -> CodeBlock:
    """Build a CodeBlock from raw text (one physical line per newline)."""
    language, lines = code_lines(text, options)
    logger.debug("Code block from %s: %d line(s), language=%s", source_type, len(lines), language)
    return CodeBlock(
        type=block_type,
        source_type=source_type,
        language=language,
        lines=lines,
        has_changes=any(line.op != LineOp.unchanged for line in lines),
    )


def code_text(block: CodeBlock) -> str:
    """Reassemble the raw text of a code block from its lines' original text."""
    return '\n'.join(line.original_text for line in block.lines)
