"""DOM construction, archive cleanup, and the parse entry point"""

import logging
import re
from typing import Optional

from bs4 import BeautifulSoup

from freedocs.core.export import generate_sanitized_html
from freedocs.core.extract.blocks import parse_content_blocks
from freedocs.core.models import ErrorBlock, ParseOptions, ParseResult
from freedocs.errors import ContentError


logger = logging.getLogger(__name__)

STRIP_TAGS = ['script', 'style', 'noscript']
# Wayback Machine toolbar and donation banner injected into archived pages.
ARCHIVE_CHROME_IDS = ['wm-ipp-base', 'wm-ipp', 'donato']

SAFE_TAGS = 'p|div|span|h[1-6]|ul|ol|li|br|strong|em|b|i|u|a|pre|code|blockquote'
DROP_BLOCK_RE  = re.compile(r'<(script|style)[\s\S]*?</\1\s*>', re.IGNORECASE)
DROP_VOID_RE   = re.compile(r'<(link|meta)[^>]*>', re.IGNORECASE)
OPEN_TAG_RE    = re.compile(r'<(\w+)[^>]*>')
UNSAFE_TAG_RE  = re.compile(rf'<(?!/?(?:{SAFE_TAGS})\b)[^>]*>', re.IGNORECASE)

ERROR_HTML = '<div class="error">Content could not be parsed safely</div>'
ERROR_MESSAGE = 'Content parsing failed - please try a different document'


def make_soup(content: str) -> BeautifulSoup:
    """Parse markup with lxml."""
    return BeautifulSoup(content, 'lxml')


def clean_content(soup: BeautifulSoup) -> BeautifulSoup:
    """Remove scripts, styles, archive toolbars, and inline event handlers in place."""
    doomed = soup.find_all(STRIP_TAGS) + soup.find_all(id=ARCHIVE_CHROME_IDS)
    for tag in doomed:
        if not tag.decomposed:
            tag.decompose()
    for tag in soup.find_all(True):
        for attr in [a for a in tag.attrs if a.lower().startswith('on')]:
            del tag[attr]
    return soup


def extract_safe_content(content: str) -> str:
    """Reduce markup to an allowlist of structural tags with every attribute removed."""
    safe = DROP_BLOCK_RE.sub('', content)
    safe = DROP_VOID_RE.sub('', safe)
    safe = OPEN_TAG_RE.sub(r'<\1>', safe)
    safe = UNSAFE_TAG_RE.sub('', safe)
    return f"<html><body>{safe}</body></html>"


def load_dom(content: str) -> Optional[BeautifulSoup]:
    """Build a cleaned DOM, retrying once on the safe subset; None when both attempts fail."""
    try:
        return clean_content(make_soup(content))
    except Exception as e:
        logger.warning("DOM construction failed (%s); retrying on safe subset", e)
    try:
        return clean_content(make_soup(extract_safe_content(content)))
    except Exception as e:
        logger.error("Safe-subset DOM construction failed: %s", e)
        return None


def validate_content(content) -> str:
    if not isinstance(content, str):
        raise ContentError(f"Invalid content type: {type(content).__name__}")
    if not content.strip():
        raise ContentError("No content received")
    return content


def parse_html(content, options: Optional[ParseOptions] = None) -> ParseResult:
    """Parse exported document HTML into blocks plus their sanitized rendering.

    Raises ContentError for empty or non-string content. Markup that cannot be
    parsed yields a single error block instead of an exception.
    """
    options = options or ParseOptions()
    content = validate_content(content)
    logger.debug("Parsing %d characters of HTML", len(content))

    soup = load_dom(content)
    if soup is None:
        return ParseResult(blocks=[ErrorBlock(content=ERROR_MESSAGE)], html=ERROR_HTML)

    blocks = parse_content_blocks(soup, options)
    return ParseResult(blocks=blocks, html=generate_sanitized_html(blocks))
