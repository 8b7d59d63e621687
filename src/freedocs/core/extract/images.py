"""Image block extraction with archive-aware URL normalization"""

import logging
import re
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import parse_qs, urlparse

from bs4 import Tag

from freedocs.core.models import ImageBlock
from freedocs.fetch.urls import is_archive_url, normalize_image_url, original_from_archive


logger = logging.getLogger(__name__)

IMAGE_FORMATS = {'png', 'jpg', 'jpeg', 'gif', 'webp', 'svg', 'bmp', 'avif'}
STYLE_PX_RE = {
    'width':  re.compile(r'(?:^|;)\s*width\s*:\s*(\d+(?:\.\d+)?)px', re.IGNORECASE),
    'height': re.compile(r'(?:^|;)\s*height\s*:\s*(\d+(?:\.\d+)?)px', re.IGNORECASE),
}


def image_format(url: str) -> str:
    """Sniff the image format from the URL extension or a format/fm query parameter."""
    parsed = urlparse(url)
    filename = parsed.path.rsplit('/', 1)[-1]
    ext = filename.rsplit('.', 1)[-1].lower() if '.' in filename else ''
    if ext in IMAGE_FORMATS:
        return 'jpeg' if ext == 'jpg' else ext
    params = parse_qs(parsed.query)
    for key in ('format', 'fm'):
        value = (params.get(key) or [''])[0].lower()
        if value in IMAGE_FORMATS:
            return 'jpeg' if value == 'jpg' else value
    return 'unknown'


def _dimension(img: Tag, name: str) -> Optional[int]:
    value = img.get(name)
    if value:
        m = re.match(r'\s*(\d+)', str(value))
        if m:
            return int(m.group(1))
    m = STYLE_PX_RE[name].search(img.get('style') or '')
    return int(float(m.group(1))) if m else None


def extract_image(img: Tag, base_url: Optional[str] = None) -> Optional[ImageBlock]:
    """Build an ImageBlock from an <img>; returns None when it has no usable src."""
    src = normalize_image_url(img.get('src') or img.get('data-src') or '', base_url)
    if not src:
        logger.debug("Skipping <img> without src")
        return None

    archived = is_archive_url(src)
    return ImageBlock(
        src=src,
        alt=img.get('alt') or '',
        title=img.get('title') or '',
        width=_dimension(img, 'width'),
        height=_dimension(img, 'height'),
        format=image_format(original_from_archive(src) if archived else src),
        is_archive_image=archived,
        original_src=original_from_archive(src) if archived else src,
        metadata={'extractedAt': datetime.now(timezone.utc).isoformat()},
    )
