"""Normalization shared by the adapters: span cleanup, heading promotion, bullet lists, sections

The adapters mutate the DOM they are given; the registry loads a fresh one per call.
"""

import re
from dataclasses import dataclass
from typing import Callable, Iterator, Optional

from bs4 import BeautifulSoup, Tag

from freedocs.core.extract.blocks import HEADING_TAGS, find_container, is_wrapper
from freedocs.core.models import Section, SectionCode, SectionHeading, SectionList, SectionParagraph
from freedocs.core.utils.hashing import short_hash
from freedocs.core.utils.slug import slugify


FONT_SIZE_RE     = re.compile(r'font-size\s*:\s*(\d+(?:\.\d+)?)pt', re.IGNORECASE)
BOLD_RE          = re.compile(r'font-weight\s*:\s*(700|bold)', re.IGNORECASE)
FORMAT_CUE_RE    = re.compile(r'bold|italic|underline|font-weight|font-style|text-decoration', re.IGNORECASE)
BULLET_RE        = re.compile(r'^[•◦▪\-*]\s+')
HEADING_SIZES    = [(28, 1), (22, 2), (18, 3)]     # (minimum pt, level); all require bold
CAPS_HEADING_MAX = 60


@dataclass(frozen=True)
class Adapter:
    """A dialect detector (higher score wins) and its DOM-to-sections processor."""
    name:    str
    detect:  Callable[[BeautifulSoup], float]
    process: Callable[[BeautifulSoup], list[Section]]


def collapse_spans(soup: BeautifulSoup) -> None:
    """Drop empty spans and unwrap spans whose style carries no formatting cue."""
    for span in soup.find_all('span'):
        if span.decomposed:
            continue
        if not span.get_text().strip() and span.find(True) is None:
            span.decompose()
        elif not FORMAT_CUE_RE.search(span.get('style') or ''):
            span.unwrap()


def _font_size(style: str) -> Optional[float]:
    m = FONT_SIZE_RE.search(style)
    return float(m.group(1)) if m else None


def heading_level(font_size: Optional[float]) -> Optional[int]:
    if font_size is None:
        return None
    return next((level for size, level in HEADING_SIZES if font_size >= size), None)


def promote_headings(soup: BeautifulSoup) -> None:
    """Replace bold paragraphs set in a large font with h1/h2/h3."""
    for p in soup.find_all('p'):
        text = p.get_text().strip()
        if not text:
            continue
        style = p.get('style') or ''
        span = p.find('span', style=True)
        span_style = span.get('style') if span is not None else ''
        size = _font_size(style) or _font_size(span_style)
        bold = BOLD_RE.search(style) or BOLD_RE.search(span_style) or p.find(['b', 'strong'])
        level = heading_level(size) if bold else None
        if level:
            heading = soup.new_tag(f'h{level}')
            heading.string = text
            p.replace_with(heading)


def _is_bullet(el: Optional[Tag]) -> bool:
    return el is not None and el.name == 'p' and bool(BULLET_RE.match(el.get_text().lstrip()))


def rebuild_lists(soup: BeautifulSoup) -> None:
    """Turn runs of sibling paragraphs that start with a bullet glyph into a <ul>."""
    for p in soup.find_all('p'):
        if p.decomposed or not _is_bullet(p):
            continue
        members = []
        current = p
        while _is_bullet(current):
            members.append(current)
            current = current.find_next_sibling()

        ul = soup.new_tag('ul')
        for member in members:
            li = soup.new_tag('li')
            li.string = BULLET_RE.sub('', member.get_text().lstrip()).strip()
            ul.append(li)
        for member in members[1:]:
            member.decompose()
        p.replace_with(ul)


def _top_level(root: Tag) -> Iterator[Tag]:
    """Children of root, descending into wrapper divs."""
    for el in root.find_all(True, recursive=False):
        if is_wrapper(el):
            yield from _top_level(el)
        else:
            yield el


class _SectionBuilder:
    def __init__(self):
        self.sections: list[Section] = []
        self.id: Optional[str] = None
        self.heading: Optional[SectionHeading] = None
        self.blocks: list = []

    def flush(self) -> None:
        if self.id is not None:
            self.sections.append(Section(id=self.id, heading=self.heading, blocks=self.blocks))

    def start(self, level: int, text: str) -> None:
        self.flush()
        self.id = f"h:{slugify(text)}-{short_hash(text)}"
        self.heading = SectionHeading(level=level, text=text)
        self.blocks = []

    def add(self, block, seed: str) -> None:
        if self.id is None:
            self.id = f"intro-{short_hash(seed)}"
        self.blocks.append(block)


def extract_structure(soup: BeautifulSoup) -> list[Section]:
    """Group the container's top-level blocks into sections, one per heading."""
    builder = _SectionBuilder()
    for el in _top_level(find_container(soup)):
        tag = el.name
        if tag in HEADING_TAGS:
            builder.start(int(tag[1]), el.get_text().strip())
        elif tag in ('p', 'div'):
            text = el.get_text().strip()
            if text:
                builder.add(SectionParagraph(text=text), text)
        elif tag in ('ul', 'ol'):
            items = [li.get_text().strip() for li in el.find_all('li', recursive=False)]
            builder.add(SectionList(ordered=tag == 'ol', items=items), '\n'.join(items))
        elif tag in ('pre', 'code'):
            text = el.get_text()
            builder.add(SectionCode(text=text), text)
    builder.flush()
    return builder.sections


def normalize_structure(soup: BeautifulSoup) -> list[Section]:
    collapse_spans(soup)
    promote_headings(soup)
    rebuild_lists(soup)
    return extract_structure(soup)


def is_caps_heading(line: str) -> bool:
    return len(line) <= CAPS_HEADING_MAX and line.upper() == line and any(c.isalpha() for c in line)


def text_fallback_structure(soup: BeautifulSoup) -> list[Section]:
    """Rebuild the document from body text lines; short ALL-CAPS lines become h2."""
    text = (soup.body or soup).get_text('\n').replace('\r\n', '\n').replace('\r', '\n')
    lines = [line.strip() for line in text.split('\n') if line.strip()]

    doc = BeautifulSoup('<html><body></body></html>', 'lxml')
    for line in lines:
        el = doc.new_tag('h2' if is_caps_heading(line) else 'p')
        el.string = line
        doc.body.append(el)
    promote_headings(doc)
    return extract_structure(doc)
