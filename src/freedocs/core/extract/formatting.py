"""Inline formatting reduction to a safe <strong>/<em>/<u>/<a> subset

Text nodes are escaped during reduction, so the reduced html holds no raw markup
besides the tags it emits; escape_preserving_formatting never double-encodes it.
"""

import logging
import re
from dataclasses import dataclass
from urllib.parse import parse_qs, urlparse

from bs4 import Comment, NavigableString, Tag

from freedocs.core.utils.text import escape_html, normalize_spaces


logger = logging.getLogger(__name__)

FORMAT_TAGS = ['b', 'strong', 'i', 'em', 'u', 'a']

BOLD_STYLE_RE      = re.compile(r'font-weight\s*:\s*(bold|bolder|[6-9]00)', re.IGNORECASE)
ITALIC_STYLE_RE    = re.compile(r'font-style\s*:\s*italic', re.IGNORECASE)
UNDERLINE_STYLE_RE = re.compile(r'text-decoration(-line)?\s*:[^;]*underline', re.IGNORECASE)

# Google Docs class names that conventionally carry bold/italic/underline.
BOLD_CLASSES      = {'c1', 'c3', 'c5', 'bold', 'fw-bold'}
ITALIC_CLASSES    = {'c2', 'c4', 'italic', 'fst-italic'}
UNDERLINE_CLASSES = {'c6', 'c7', 'underline', 'text-decoration-underline'}

ALLOWED_TAG_RE = re.compile(
    r'</?(?:strong|em|u)>|<a href="(?!\s*javascript:)[^"<>]*">|</a>', re.IGNORECASE,
)
BARE_AMPERSAND_RE = re.compile(r'&(?!#?\w+;)')


@dataclass(frozen=True)
class FormattedContent:
    text:           str     # plain-text projection
    html:           str     # minimal markup, text escaped
    has_formatting: bool


def clean_url(url: str) -> str:
    """Neutralize javascript: links and unwrap Google redirect URLs."""
    if url.strip().lower().startswith('javascript:'):
        return '#'
    if 'google.com/url?' in url:
        params = parse_qs(urlparse(url).query)
        target = (params.get('q') or params.get('url') or [None])[0]
        if target:
            return target
        logger.debug("Google redirect URL without target: %s", url)
    return url


def span_styles(span: Tag) -> tuple[bool, bool, bool]:
    """Return (bold, italic, underline) implied by a span's inline style or class."""
    style = span.get('style') or ''
    classes = set(span.get('class') or [])
    return (
        bool(BOLD_STYLE_RE.search(style) or classes & BOLD_CLASSES),
        bool(ITALIC_STYLE_RE.search(style) or classes & ITALIC_CLASSES),
        bool(UNDERLINE_STYLE_RE.search(style) or classes & UNDERLINE_CLASSES),
    )


def contains_formatting(el: Tag) -> bool:
    """True if the element holds formatting tags or styled spans."""
    if el.find(FORMAT_TAGS) is not None:
        return True
    return any(any(span_styles(span)) for span in el.find_all('span'))


def _reduce(node) -> str:
    if isinstance(node, Comment):
        return ''
    if isinstance(node, NavigableString):
        return escape_html(normalize_spaces(str(node)))
    if not isinstance(node, Tag) or node.name in ('script', 'style'):
        return ''
    if node.name == 'br':
        return '\n'

    inner = ''.join(_reduce(child) for child in node.children)
    name = node.name

    if name == 'a':
        href = clean_url(node.get('href') or '')
        if href and not href.strip().lower().startswith('javascript:'):
            return f'<a href="{escape_html(href)}">{inner}</a>'
        return inner
    if name in ('b', 'strong'):
        return f'<strong>{inner}</strong>'
    if name in ('i', 'em'):
        return f'<em>{inner}</em>'
    if name == 'u':
        return f'<u>{inner}</u>'
    if name == 'span':
        bold, italic, underline = span_styles(node)
        if bold:
            inner = f'<strong>{inner}</strong>'
        if italic:
            inner = f'<em>{inner}</em>'
        if underline:
            inner = f'<u>{inner}</u>'
    return inner


def reduce_inline_formatting(el: Tag) -> str:
    """Serialize the element's children keeping only the allowed formatting tags."""
    return ''.join(_reduce(child) for child in el.children).strip()


def parse_formatted_content(el: Tag) -> FormattedContent:
    text = normalize_spaces(el.get_text()).strip()
    if not contains_formatting(el):
        return FormattedContent(text=text, html=escape_html(text), has_formatting=False)
    return FormattedContent(text=text, html=reduce_inline_formatting(el), has_formatting=True)


def _escape_unescaped(text: str) -> str:
    """Escape markup characters, leaving existing entities as they are."""
    text = BARE_AMPERSAND_RE.sub('&amp;', text)
    return text.replace('<', '&lt;').replace('>', '&gt;').replace('"', '&quot;').replace("'", '&#39;')


def escape_preserving_formatting(html: str) -> str:
    """Escape html except the allowed formatting tags, which are protected by sentinels."""
    protected: list[str] = []

    def protect(match: re.Match) -> str:
        protected.append(match.group(0))
        return f'{len(protected) - 1}'

    escaped = _escape_unescaped(ALLOWED_TAG_RE.sub(protect, html))
    return re.sub(r'(\d+)', lambda m: protected[int(m.group(1))], escaped)
