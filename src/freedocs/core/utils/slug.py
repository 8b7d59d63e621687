"""Slug generation for section and output file identifiers"""

import re


def slugify(text: str, max_length: int = 60) -> str:
    """Convert text to a lowercase, hyphen-separated slug; 'section' when nothing is left."""
    text = text.lower().replace('_', ' ')
    text = re.sub(r'[^a-z0-9\s-]', '', text).strip()
    text = re.sub(r'\s+', '-', text)
    return re.sub(r'-+', '-', text)[:max_length].strip('-') or 'section'
