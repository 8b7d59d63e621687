"""Google Docs URL validation, SSRF guard, and image URL normalization"""

import re
from typing import Optional
from urllib.parse import urljoin, urlparse


GOOGLE_DOCS_PATTERNS = [
    re.compile(r'^https://docs\.google\.com/document/d/([a-zA-Z0-9_-]+)'),
    re.compile(r'^https://drive\.google\.com/file/d/([a-zA-Z0-9_-]+)'),
]
ALLOWED_HOSTS = {'docs.google.com', 'drive.google.com'}
ARCHIVE_HOST = 'web.archive.org'

# /web/20240101000000im_/https://... or /web/20240101000000/https://...
ARCHIVED_ORIGINAL_RE = re.compile(r'/web/\d+(?:[a-z]{2}_)?/(.+)$')


def validate_google_docs_url(url) -> bool:
    """True for docs.google.com document URLs and drive.google.com file URLs."""
    if not url or not isinstance(url, str):
        return False
    return any(p.match(url) for p in GOOGLE_DOCS_PATTERNS)


def extract_doc_id(url) -> Optional[str]:
    if not url or not isinstance(url, str):
        return None
    for pattern in GOOGLE_DOCS_PATTERNS:
        m = pattern.match(url)
        if m:
            return m.group(1)
    return None


def to_mobile_basic(url) -> Optional[str]:
    """Return the mobilebasic export URL for a Google Docs URL, else None."""
    doc_id = extract_doc_id(url)
    if not doc_id:
        return None
    return f"https://docs.google.com/document/d/{doc_id}/mobilebasic"


def is_safe_url(url: str) -> bool:
    """Only https URLs on the exact Google Docs hosts are fetched."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme == 'https' and parsed.hostname in ALLOWED_HOSTS


def is_archive_url(url: str) -> bool:
    try:
        return urlparse(url).hostname == ARCHIVE_HOST
    except ValueError:
        return False


def original_from_archive(url: str) -> str:
    """Return the original URL wrapped by a Wayback Machine URL, or url unchanged."""
    if not is_archive_url(url):
        return url
    parsed = urlparse(url)
    rest = parsed.path + (f"?{parsed.query}" if parsed.query else '')
    m = ARCHIVED_ORIGINAL_RE.search(rest)
    return m.group(1) if m else url


def normalize_image_url(src: str, base_url: Optional[str] = None) -> str:
    """Resolve protocol-relative, root-relative, and relative image URLs.

    Protocol-relative URLs get https. Root-relative URLs resolve against the
    base URL's origin, or web.archive.org when there is no base.
    """
    src = (src or '').strip()
    if not src or src.startswith('data:'):
        return src
    if src.startswith('//'):
        return f"https:{src}"
    if src.startswith('/'):
        if base_url:
            base = urlparse(base_url)
            return f"{base.scheme}://{base.netloc}{src}"
        return f"https://{ARCHIVE_HOST}{src}"
    if urlparse(src).scheme:
        return src
    if base_url:
        return urljoin(base_url, src)
    return src
