"""Google Docs published / mobilebasic export adapter"""

import re

from bs4 import BeautifulSoup

from freedocs.core.adapters.shared import Adapter, normalize_structure


GDOCS_CLASS_RE = re.compile(r'class="c\d+"')


def detect(soup: BeautifulSoup) -> float:
    score = 0
    body_html = str(soup.body) if soup.body else ''
    if 'docs-internal-guid-' in body_html:
        score += 3
    if GDOCS_CLASS_RE.search(body_html):
        score += 2
    if soup.find('meta', attrs={'content': re.compile('Google Docs')}):
        score += 4
    # googleusercontent images carry =w/=h sizing params
    if len(soup.select('img[src*="=w"], img[src*="=h"]')) > 2:
        score += 1
    return score


ADAPTER = Adapter(name='googleBasic', detect=detect, process=normalize_structure)
