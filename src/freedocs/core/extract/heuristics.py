"""Code-vs-prose heuristics for paragraphs exported from Google Docs

Starting a code group needs strong evidence (is_code_like_paragraph); extending
an already started group is lenient (can_be_in_code_block).
"""

import re
from dataclasses import dataclass
from typing import Optional

from bs4 import Tag

from freedocs.core.utils.text import normalize_spaces


INSTRUCTIONAL_RE = re.compile(
    r'^(Add|Create|Update|Now|Next|Wait|Open|If|See|Note|The component|Creating the entity'
    r'|In this lab|As given|With the given information|Now we will create)\b',
    re.IGNORECASE,
)
GROUP_BREAK_RE   = re.compile(r'^(Now we will create|Next, add|Then, update)\b', re.IGNORECASE)
OUTLINE_RE       = re.compile(r'^\d+\.\d*\.?\s')
CODE_SYMBOLS_RE  = re.compile(r'[<>{}=;]')

INDENT_RE        = re.compile(r'^(\s{2,}|\t)')
MARKER_RE        = re.compile(r'^[+\-@]')
TAG_SHAPE_RE     = re.compile(r'<[A-Za-z][\w:.-]*(\s[^<>]*)?/?>')
KEYWORD_RE       = re.compile(
    r'\b(import|package|public|class|static|final|void|long|string|boolean|function|var|let|const)\b',
    re.IGNORECASE,
)
TRAILING_RE      = re.compile(r'[;{}]$')
MONOSPACE_RE     = re.compile(r'font-family\s*:[^;]*(monospace|courier|consolas|source code)', re.IGNORECASE)
BRACKETS_RE      = re.compile(r'[<>{}=]')


@dataclass(frozen=True)
class ElementFeatures:
    """What the heuristics need to know about one element, detached from the tree."""
    raw_text:     str
    trimmed_text: str
    style:        str = ""

    @classmethod
    def from_text(cls, text: str, style: str = "") -> "ElementFeatures":
        raw = normalize_spaces(text)
        return cls(raw_text=raw, trimmed_text=raw.strip(), style=style)

    @classmethod
    def from_element(cls, el: Tag, text: Optional[str] = None) -> "ElementFeatures":
        """Build features from an element, using its first styled span when it has no style of its own."""
        style = el.get('style') or ''
        if 'font-family' not in style:
            span = el.find('span', style=re.compile('font-family'))
            if span is not None:
                style = span.get('style', '')
        return cls.from_text(el.get_text() if text is None else text, style)


def _is_instructional(text: str) -> bool:
    """Prose that starts like an instruction or an outline number and has no code symbols."""
    if CODE_SYMBOLS_RE.search(text):
        return False
    return bool(INSTRUCTIONAL_RE.match(text) or OUTLINE_RE.match(text))


def is_code_like_paragraph(features: ElementFeatures) -> bool:
    """Return True when the element is strong enough evidence to start a code group."""
    text = features.trimmed_text
    if not text:
        return False
    if _is_instructional(text):
        return False

    return bool(
        INDENT_RE.match(features.raw_text)
        or MARKER_RE.match(text)
        or TAG_SHAPE_RE.search(text)
        or KEYWORD_RE.search(text)
        or TRAILING_RE.search(text)
        or MONOSPACE_RE.search(features.style)
        or BRACKETS_RE.search(text)
    )


def can_be_in_code_block(features: ElementFeatures) -> bool:
    """Return True when the element may extend a code group that has already started."""
    text = features.trimmed_text
    if not text:
        return True
    if GROUP_BREAK_RE.match(text):
        return False
    return not (OUTLINE_RE.match(text) and not CODE_SYMBOLS_RE.search(text))
