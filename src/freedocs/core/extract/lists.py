"""Hierarchical list numbering for flattened paragraphs and Google Docs <ol> classes

Google Docs splits one logical list into several <ol> elements and encodes the
nesting only in class names (lst-kix_<name>-<level>) plus a start attribute.
Paragraph-flattened lists keep the author's numbers verbatim.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Optional, Union

from bs4 import Comment, NavigableString, Tag

from freedocs.core.extract.code import code_lines
from freedocs.core.extract.formatting import contains_formatting, parse_formatted_content
from freedocs.core.extract.heuristics import ElementFeatures, is_code_like_paragraph
from freedocs.core.models import Line, LineOp, ListBlock, ListItem, ParseOptions
from freedocs.core.utils.text import escape_html, normalize_spaces, unescape_html


logger = logging.getLogger(__name__)

LIST_CLASS_RE         = re.compile(r'^lst-kix_(.+)-(\d+)$')
NUMBER_PREFIX_RE      = re.compile(r'^(\d+(?:\.\d+)*)\.\s*')
NUMBERED_PARAGRAPH_RE = re.compile(r'^(\d+(?:\.\d+)*)\.\s*(.*)$', re.DOTALL)
LEADING_INT_RE        = re.compile(r'^\s*(\d+)')

Number = Union[int, str]


def _int_attr(value, default: Optional[int] = None) -> Optional[int]:
    m = LEADING_INT_RE.match(str(value)) if value is not None else None
    return int(m.group(1)) if m else default


def list_identity(el: Tag) -> Optional[tuple[str, int]]:
    """Return (list_name, level) from an lst-kix_<name>-<level> class, else None."""
    for cls in el.get('class') or []:
        m = LIST_CLASS_RE.match(cls)
        if m:
            return m.group(1), int(m.group(2))
    return None


def item_text(li: Tag) -> str:
    """Text of a list item without the text of lists nested inside it."""
    owner = li.find_parent(['ul', 'ol'])
    parts = [
        str(s) for s in li.descendants
        if isinstance(s, NavigableString) and not isinstance(s, Comment)
        and s.find_parent(['ul', 'ol']) is owner
    ]
    return unescape_html(normalize_spaces(''.join(parts)).strip())


@dataclass
class ListCounters:
    """Per-parse cache of the last level-0 number shown for each list name."""
    parents: dict[str, int] = field(default_factory=dict)

    def parent_number(self, el: Tag, name: str) -> int:
        if name in self.parents:
            return self.parents[name]
        # Scan back for the last level-0 list of the same name.
        for prev in el.find_all_previous('ol'):
            if list_identity(prev) == (name, 0):
                items = prev.find_all('li')
                number = _int_attr(item_text(items[-1]), 1) if items else 1
                logger.debug("List %s: parent number %d recovered from text", name, number)
                return number
        return 1

    def number(self, el: Tag, name: str, level: int, start: int, index: int) -> Number:
        """Displayed number for item index of a class-numbered list.

        Levels deeper than 1 show 1 for every intermediate level.
        """
        local = start + index
        if level == 0:
            self.parents[name] = local
            return local
        parent = self.parent_number(el, name)
        return f"{parent}" + ".1" * (level - 1) + f".{local}"


def _strip_number_prefix(html: str, number: str) -> str:
    """Remove the authored number prefix from formatted html, keeping leading tags."""
    return re.sub(rf'^((?:<[^>]+>)*)\s*{re.escape(number)}\.\s*', r'\1', html, count=1)


def code_item(text: str, number: Optional[Number], options: ParseOptions) -> ListItem:
    language, lines = code_lines(text, options)
    return ListItem(
        type="code",
        text=text,
        custom_number=number,
        lines=lines,
        language=language,
        source_type="list-item",
        has_changes=any(line.op != LineOp.unchanged for line in lines),
    )


def text_item(el: Tag, text: str, number: Optional[Number], strip_prefix: bool) -> ListItem:
    has_formatting = el.find(['ul', 'ol']) is None and contains_formatting(el)
    html = escape_html(text)
    if has_formatting:
        html = parse_formatted_content(el).html
        if strip_prefix and number is not None:
            html = _strip_number_prefix(html, str(number))
    return ListItem(
        text=text,
        custom_number=number,
        lines=[Line(text=text, original_text=text)],
        has_formatting=has_formatting,
        html=html,
    )


def _list_item(el: Tag, text: str, number: Optional[Number], options: ParseOptions, strip_prefix: bool) -> ListItem:
    if options.auto_detect_code and is_code_like_paragraph(ElementFeatures.from_element(el, text)):
        return code_item(text, number, options)
    return text_item(el, text, number, strip_prefix)


def parse_list(el: Tag, options: ParseOptions, counters: ListCounters) -> ListBlock:
    """Parse a <ul>/<ol> (including nested items) into a list block.

    Number precedence for <ol> items: li[value], class numbering, a number
    prefix in the text (stripped), else None.
    """
    ordered = el.name == 'ol'
    start = _int_attr(el.get('start'), 1) if ordered else 1
    identity = list_identity(el) if ordered else None

    items = []
    for index, li in enumerate(el.find_all('li')):
        text = item_text(li)
        number: Optional[Number] = None
        stripped = False
        if ordered:
            value = _int_attr(li.get('value'))
            if value is not None:
                number = value
                if identity is not None and identity[1] == 0:
                    counters.parents[identity[0]] = value
            elif identity is not None:
                number = counters.number(el, identity[0], identity[1], start, index)
            else:
                m = NUMBER_PREFIX_RE.match(text)
                if m:
                    number, text, stripped = m.group(1), text[m.end():], True
        items.append(_list_item(li, text, number, options, stripped))

    logger.debug("%s list: %d item(s), start=%d", el.name, len(items), start)
    return ListBlock(
        type="ordered-list" if ordered else "unordered-list",
        items=items,
        start_value=start,
    )


def match_numbered_paragraph(text: str) -> Optional[tuple[str, str]]:
    """Return (number, content) when text reads like a flattened list item."""
    m = NUMBERED_PARAGRAPH_RE.match(text.strip())
    return (m.group(1), m.group(2)) if m else None


def numbered_paragraph_item(el: Tag, number: str, content: str, options: ParseOptions) -> ListItem:
    """List item for a paragraph that carries its own number; the number is kept verbatim."""
    return _list_item(el, content, number, options, strip_prefix=True)
