"""Google Docs clipboard fragment adapter (<!--StartFragment--> markers)"""

import re

from bs4 import BeautifulSoup

from freedocs.core.adapters.shared import Adapter, normalize_structure


INLINE_FONT_SIZE_RE = re.compile(r'font-size:\s*1\d+pt')


def detect(soup: BeautifulSoup) -> float:
    html = str(soup)
    score = 0
    if 'StartFragment' in html:
        score += 3
    if 'EndFragment' in html:
        score += 2
    if INLINE_FONT_SIZE_RE.search(html):
        score += 1
    if 'MsoNormal' in html:
        score -= 1      # more likely Word
    return score


ADAPTER = Adapter(name='googleCopyPaste', detect=detect, process=normalize_structure)
