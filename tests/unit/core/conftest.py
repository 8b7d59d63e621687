"""Shared fixtures for core unit tests"""

import pytest
from bs4 import BeautifulSoup

from freedocs.core.models import ParseOptions


SAMPLE_HTML = """\
<html><head><title>Lab 3</title></head>
<body><div class="doc-content">
<h1>Spring Lab</h1>
<p>Add the component which will help us serve requests.</p>
<p>+ &lt;dependency&gt;</p>
<p>+     &lt;groupId&gt;org.x&lt;/groupId&gt;</p>
<p>+ &lt;/dependency&gt;</p>
<p>Now we will create the <b>controller</b>.</p>
</div></body></html>
"""


def make_soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "lxml")


@pytest.fixture(name="soup")
def soup_fixture():
    """Factory turning an HTML string into a BeautifulSoup tree."""
    return make_soup


@pytest.fixture(name="options")
def options_fixture():
    return ParseOptions()


@pytest.fixture(name="sample_html")
def sample_html_fixture():
    return SAMPLE_HTML
