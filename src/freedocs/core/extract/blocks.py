"""Document-order walk over the content container producing typed blocks

Every element is visited once. Consuming an element marks its whole subtree
visited except <img> descendants, which the walk reaches next and emits as
image blocks right after the consuming block.
"""

import logging
from itertools import chain
from typing import Iterator, Optional

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from freedocs.core.extract.code import code_text, parse_code_content
from freedocs.core.extract.formatting import parse_formatted_content
from freedocs.core.extract.heuristics import ElementFeatures, can_be_in_code_block, is_code_like_paragraph
from freedocs.core.extract.images import extract_image
from freedocs.core.extract.lists import (
    ListCounters,
    match_numbered_paragraph,
    numbered_paragraph_item,
    parse_list,
)
from freedocs.core.models import (
    CodeBlock,
    HeadingBlock,
    Line,
    ListBlock,
    ParagraphBlock,
    ParseOptions,
)
from freedocs.core.utils.text import normalize_spaces, unescape_html


logger = logging.getLogger(__name__)

CONTAINER_SELECTORS = ['.doc-content', '[role="main"]', '.contents']
HEADING_TAGS        = {'h1', 'h2', 'h3', 'h4', 'h5', 'h6'}
BLOCK_LEVEL_TAGS    = ['p', 'div', 'h1', 'h2', 'h3', 'h4', 'h5', 'h6',
                       'ul', 'ol', 'pre', 'blockquote', 'table']
LOOKAHEAD           = 10


def find_container(soup: BeautifulSoup) -> Tag:
    """Return the first known content container, else <body>, else the document."""
    for selector in CONTAINER_SELECTORS:
        found = soup.select_one(selector)
        if found is not None:
            logger.debug("Content container: %s", selector)
            return found
    return soup.body or soup


def block_text(el: Tag) -> str:
    """Element text with <br> as a newline."""
    parts = []
    for node in el.descendants:
        if isinstance(node, Tag):
            if node.name == 'br':
                parts.append('\n')
        elif isinstance(node, NavigableString) and not isinstance(node, Comment):
            parts.append(str(node))
    return normalize_spaces(''.join(parts))


def is_wrapper(el: Tag) -> bool:
    return el.name == 'div' and el.find(BLOCK_LEVEL_TAGS) is not None


class BlockParser:
    """Single-pass state machine over the flattened element list of a container."""

    def __init__(self, root: Tag, options: ParseOptions):
        self.options  = options
        self.elements = root.find_all(True)
        self.visited  = [False] * len(self.elements)
        self.ends     = self._subtree_ends()
        self.counters = ListCounters()
        self.blocks: list = []
        self._last_end = -1     # last element index consumed by the latest block

    def _subtree_ends(self) -> list[int]:
        """Index of the last descendant of each element (itself when it has none)."""
        position = {id(el): i for i, el in enumerate(self.elements)}
        ends = list(range(len(self.elements)))
        for i in reversed(range(len(self.elements))):
            children = self.elements[i].find_all(True, recursive=False)
            if children:
                ends[i] = ends[position[id(children[-1])]]
        return ends

    def _following(self, i: int) -> Iterator[int]:
        """Indices of the elements that follow i's subtree in document order, hopping subtrees."""
        j = self.ends[i] + 1
        while j < len(self.elements):
            yield j
            j = self.ends[j] + 1

    def _consume(self, i: int) -> None:
        for j in range(i, self.ends[i] + 1):
            if self.elements[j].name != 'img':
                self.visited[j] = True

    def _emit(self, block, end: int) -> None:
        self.blocks.append(block)
        self._last_end = end

    def _is_candidate(self, j: int) -> bool:
        """Unvisited leaf p/div that may join a paragraph group."""
        el = self.elements[j]
        return not self.visited[j] and el.name in ('p', 'div') and not is_wrapper(el)

    def parse(self) -> list:
        for i in range(len(self.elements)):
            if not self.visited[i]:
                self._dispatch(i)
        logger.debug("Parsed %d element(s) into %d block(s)", len(self.elements), len(self.blocks))
        return self.blocks

    def _dispatch(self, i: int) -> None:
        el = self.elements[i]
        name = el.name

        if name in HEADING_TAGS:
            self._heading(i)
        elif name == 'img':
            self.visited[i] = True
            if self.options.extract_images:
                image = extract_image(el, self.options.base_url)
                if image is not None:
                    self._emit(image, i)
        elif name in ('p', 'div'):
            if is_wrapper(el):
                self.visited[i] = True
            else:
                self._paragraph_like(i)
        elif name in ('pre', 'code'):
            self._code(i)
        elif name in ('ul', 'ol'):
            self._consume(i)
            self._emit(parse_list(el, self.options, self.counters), self.ends[i])
        elif name == 'blockquote':
            self._blockquote(i)
        else:
            self.visited[i] = True

    def _heading(self, i: int) -> None:
        el = self.elements[i]
        self._consume(i)
        formatted = parse_formatted_content(el)
        if not formatted.text:
            return
        self._emit(HeadingBlock(
            level=int(el.name[1]),
            text=formatted.text,
            html=formatted.html,
            has_formatting=formatted.has_formatting,
        ), self.ends[i])

    def _code(self, i: int) -> None:
        el = self.elements[i]
        self._consume(i)
        text = block_text(el).strip('\r\n')
        if text.strip():
            self._emit(parse_code_content(text, el.name, self.options), self.ends[i])

    def _blockquote(self, i: int) -> None:
        el = self.elements[i]
        self._consume(i)
        text = unescape_html(block_text(el).strip())
        if not text:
            return
        if self.options.auto_detect_code and is_code_like_paragraph(ElementFeatures.from_element(el, text)):
            block = parse_code_content(text, 'blockquote', self.options, block_type='blockquote-code')
        else:
            formatted = parse_formatted_content(el)
            block = ParagraphBlock(
                type='blockquote',
                text=text,
                html=formatted.html,
                has_formatting=formatted.has_formatting,
                lines=[Line(text=text, original_text=text)],
            )
        self._emit(block, self.ends[i])

    def _paragraph_like(self, i: int) -> None:
        el = self.elements[i]
        text = block_text(el)
        if self.options.auto_detect_code:
            if self._numbered_group(i) or self._code_group(i):
                return
            if is_code_like_paragraph(ElementFeatures.from_element(el, text)):
                self._single_code(i, text.strip('\r\n'))
                return
        self._paragraph(i)

    def _paragraph(self, i: int) -> None:
        el = self.elements[i]
        self._consume(i)
        formatted = parse_formatted_content(el)
        if not formatted.text:
            return
        self._emit(ParagraphBlock(
            text=formatted.text,
            html=formatted.html,
            has_formatting=formatted.has_formatting,
            lines=[Line(text=formatted.text, original_text=formatted.text)],
        ), self.ends[i])

    def _numbered_group(self, i: int) -> bool:
        """Consume consecutive paragraphs that start with an authored number."""
        if match_numbered_paragraph(block_text(self.elements[i])) is None:
            return False

        members, items = [], []
        for j in chain([i], self._following(i)):
            if not self._is_candidate(j):
                break
            match = match_numbered_paragraph(block_text(self.elements[j]))
            if match is None:
                break
            items.append(numbered_paragraph_item(self.elements[j], *match, self.options))
            members.append(j)

        if not items:
            return False
        for j in members:
            self._consume(j)
        logger.debug("Numbered paragraph group: %d item(s)", len(items))
        self._emit(ListBlock(type='ordered-list', items=items, start_value=1), self.ends[members[-1]])
        return True

    def _continues_after_blank(self, j: int) -> bool:
        """Bounded lookahead: does a non-blank group member follow the blank at j?"""
        for steps, k in enumerate(self._following(j)):
            if steps >= LOOKAHEAD or not self._is_candidate(k):
                return False
            features = ElementFeatures.from_element(self.elements[k], block_text(self.elements[k]))
            if features.trimmed_text:
                return can_be_in_code_block(features)
        return False

    def _code_group(self, i: int) -> bool:
        """Consume a code-like paragraph plus the paragraphs that continue it.

        A group needs two members; blank members only count when a non-blank
        member follows within the lookahead window.
        """
        first = self.elements[i]
        text = block_text(first)
        if not is_code_like_paragraph(ElementFeatures.from_element(first, text)):
            return False

        members, texts = [i], [text.strip('\r\n')]
        for j in self._following(i):
            if not self._is_candidate(j):
                break
            member_text = block_text(self.elements[j])
            features = ElementFeatures.from_element(self.elements[j], member_text)
            if not features.trimmed_text:
                if not self._continues_after_blank(j):
                    break
            elif not can_be_in_code_block(features):
                break
            members.append(j)
            texts.append(member_text.strip('\r\n'))

        if len(members) < 2 or not any(t.strip() for t in texts):
            return False
        for j in members:
            self._consume(j)
        logger.debug("Code group: %d paragraph(s)", len(members))
        block = parse_code_content('\n'.join(texts), 'paragraph-group', self.options)
        self._emit(block, self.ends[members[-1]])
        return True

    def _adjacent_to_last(self, i: int) -> bool:
        """True when nothing but ancestors of i or blank elements separates it from the last block."""
        ancestors = {id(p) for p in self.elements[i].parents}
        for j in range(self._last_end + 1, i):
            el = self.elements[j]
            if id(el) not in ancestors and block_text(el).strip():
                return False
        return True

    def _previous_code(self, i: int) -> Optional[CodeBlock]:
        if not self.blocks:
            return None
        last = self.blocks[-1]
        if isinstance(last, CodeBlock) and last.type == 'code' and self._adjacent_to_last(i):
            return last
        return None

    def _single_code(self, i: int, text: str) -> None:
        """A lone code-like paragraph extends the code block right before it, else stands alone."""
        self._consume(i)
        previous = self._previous_code(i)
        if previous is not None:
            merged = parse_code_content(f"{code_text(previous)}\n{text}", previous.source_type, self.options)
            self.blocks[-1] = merged
            self._last_end = self.ends[i]
            return
        self._emit(parse_code_content(text, 'paragraph', self.options), self.ends[i])


def parse_content_blocks(soup: BeautifulSoup, options: Optional[ParseOptions] = None) -> list:
    """Walk the document's content container and return its blocks in document order."""
    return BlockParser(find_container(soup), options or ParseOptions()).parse()
