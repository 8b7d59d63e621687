"""Word "Save as HTML" adapter"""

from bs4 import BeautifulSoup

from freedocs.core.adapters.shared import Adapter, normalize_structure


def detect(soup: BeautifulSoup) -> float:
    html = str(soup)
    score = 0
    if 'MsoNormal' in html:
        score += 3
    if 'mso-style-name' in html:
        score += 2
    if '<!--[if gte mso 9]' in html:
        score += 3
    return score


ADAPTER = Adapter(name='docxHtml', detect=detect, process=normalize_structure)
