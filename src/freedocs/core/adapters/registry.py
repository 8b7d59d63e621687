"""Adapter registry: score dialect detectors, process with the winner, fall back to plain text"""

import logging
from typing import Optional

from bs4 import BeautifulSoup

from freedocs.core.adapters import docx_html, fallback_plain, google_basic, google_copy_paste
from freedocs.core.adapters.shared import Adapter
from freedocs.core.models import Section, UniversalResult
from freedocs.core.parse import clean_content, make_soup
from freedocs.core.utils.hashing import short_hash
from freedocs.errors import ContentError


logger = logging.getLogger(__name__)

ADAPTERS: list[Adapter] = [
    google_basic.ADAPTER,
    google_copy_paste.ADAPTER,
    docx_html.ADAPTER,
    fallback_plain.ADAPTER,
]
FALLBACK = fallback_plain.ADAPTER
DEFAULT_THRESHOLD = 1.0


def safe_detect(adapter: Adapter, soup: BeautifulSoup) -> float:
    """Run a detector; any exception scores 0."""
    try:
        return float(adapter.detect(soup) or 0)
    except Exception as e:
        logger.warning("Adapter %s detection failed: %s", adapter.name, e)
        return 0.0


def select_adapter(soup: BeautifulSoup, threshold: Optional[float] = None) -> tuple[Adapter, dict[str, float]]:
    """Return (adapter, scores); the plain-text fallback wins when the top score is below threshold."""
    threshold = DEFAULT_THRESHOLD if threshold is None else threshold
    scores = {a.name: safe_detect(a, soup) for a in ADAPTERS}
    best = max(ADAPTERS, key=lambda a: scores[a.name])     # ties keep registry order
    chosen = best if scores[best.name] >= threshold else FALLBACK
    logger.debug("Adapter scores %s; chose %s", scores, chosen.name)
    return chosen, scores


def _empty_section(html: str) -> Section:
    return Section(id=f"intro-{short_hash(html)}")


def parse_universal(html, debug: bool = False, threshold: Optional[float] = None) -> UniversalResult:
    """Parse HTML of any supported dialect into a heading/section AST.

    Never raises for string input: detection and processing failures fall back
    to the plain-text adapter, and the result always has at least one section.
    """
    if not isinstance(html, str):
        raise ContentError(f"Invalid content type: {type(html).__name__}")

    try:
        soup = make_soup(html)
    except Exception as e:
        logger.error("Could not build DOM for universal parse: %s", e)
        diagnostics = {'adapter': FALLBACK.name, 'scores': {}, 'error': str(e)} if debug else None
        return UniversalResult(sections=[_empty_section(html)], source=FALLBACK.name, diagnostics=diagnostics)

    chosen, scores = select_adapter(soup, threshold)
    clean_content(soup)

    source, error = chosen.name, None
    try:
        sections = chosen.process(soup)
    except Exception as e:
        logger.warning("Adapter %s failed (%s); falling back to %s", chosen.name, e, FALLBACK.name)
        error = str(e)
        source = FALLBACK.name
        sections = FALLBACK.process(clean_content(make_soup(html)))

    if not sections:
        sections = [_empty_section(html)]

    diagnostics = {'adapter': chosen.name, 'scores': scores, 'error': error} if debug else None
    return UniversalResult(sections=sections, source=source, diagnostics=diagnostics)
