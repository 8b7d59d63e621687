"""HTML escaping helpers shared by the parser and the renderer"""

import html
import re


ESCAPED_ENTITY_RE = re.compile(r'&(lt|gt|amp);')


def escape_html(text: str) -> str:
    """Escape &, <, >, double and single quotes."""
    return html.escape(text, quote=True).replace('&#x27;', '&#39;')


def unescape_html(text: str) -> str:
    """Decode entities only when the text still carries escaped markup (double-escaped exports)."""
    if ESCAPED_ENTITY_RE.search(text):
        return html.unescape(text)
    return text


def normalize_spaces(text: str) -> str:
    """Replace non-breaking spaces with plain spaces."""
    return text.replace('\xa0', ' ')
