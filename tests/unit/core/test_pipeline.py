"""Unit tests for core/pipeline.py"""

import json

import pytest

from freedocs.config import Settings
from freedocs.core.models import ParseOptions
from freedocs.core.pipeline import (
    Source,
    load_source,
    parse_archived_content,
    run_copy,
    run_parse,
    run_universal,
)
from freedocs.errors import ContentError, InvalidUrlError
from freedocs.fetch.archive import ArchiveResult


DOC_URL = "https://docs.google.com/document/d/Lab_3-doc/edit"
SNAPSHOT = "https://web.archive.org/web/20240101000000/https://docs.google.com/document/d/Lab_3-doc/mobilebasic"


class FakeClient:
    """Archive client double recording the URLs it was asked for."""

    def __init__(self, html, cached=None):
        self.html = html
        self.cached = cached or {}
        self.requested = []

    def get_archive_snapshot(self, url):
        self.requested.append(url)
        return ArchiveResult(url=SNAPSHOT, service="archive.org")

    def get_cached_content(self, url):
        return self.cached.get(url)

    def get_archived_content(self, url):
        self.requested.append(url)
        return self.html


@pytest.fixture(name="source")
def source_fixture(sample_html):
    return Source(html=sample_html, slug="lab-3")


def test_load_source_file(tmp_path, sample_html):
    """A local file is read as is and slugged from its stem."""
    path = tmp_path / "My Lab_3.html"
    path.write_text(sample_html, encoding="utf-8")
    source = load_source(str(path), Settings())
    assert source.html == sample_html
    assert source.slug == "my-lab-3"
    assert source.base_url is None


def test_load_source_unreadable_file(tmp_path):
    path = tmp_path / "bad.html"
    path.write_bytes(b"\xff\xfe\x00bad")
    with pytest.raises(ContentError, match="Cannot read"):
        load_source(str(path), Settings())


@pytest.mark.parametrize("source", ["missing.html", "https://example.com/doc", "http://docs.google.com/document/d/x"])
def test_load_source_rejects_non_docs_urls(source):
    with pytest.raises(InvalidUrlError):
        load_source(source, Settings())


def test_load_source_url_goes_through_archive(sample_html):
    """A Docs URL is fetched as mobilebasic via the archive snapshot."""
    client = FakeClient(sample_html)
    source = load_source(DOC_URL, Settings(), client=client)
    assert client.requested == [
        "https://docs.google.com/document/d/Lab_3-doc/mobilebasic",
        SNAPSHOT,
    ]
    assert source.html == sample_html
    assert source.slug == "lab-3-doc"
    assert source.base_url == SNAPSHOT
    assert source.service == "archive.org"


def test_load_source_prefers_cached_content(sample_html):
    client = FakeClient("unused", cached={SNAPSHOT: sample_html})
    assert load_source(DOC_URL, Settings(), client=client).html == sample_html
    assert client.requested == ["https://docs.google.com/document/d/Lab_3-doc/mobilebasic"]


def test_parse_archived_content_resolves_images_against_url():
    client = FakeClient('<body><p>Pic:</p><img src="/web/1im_/https://e.com/a.png"></body>')
    result = parse_archived_content(SNAPSHOT, client)
    image = result.blocks[-1]
    assert image.src == "https://web.archive.org/web/1im_/https://e.com/a.png"
    assert image.original_src == "https://e.com/a.png"


def test_run_parse_writes_json_and_html(tmp_path, source):
    result, json_path, html_path = run_parse(source, ParseOptions(), tmp_path / "dist")
    assert json_path == tmp_path / "dist" / "lab-3.json"
    assert html_path == tmp_path / "dist" / "lab-3.html"

    blocks = json.loads(json_path.read_text(encoding="utf-8"))
    assert [b["type"] for b in blocks] == ["heading", "paragraph", "code", "paragraph"]
    assert html_path.read_text(encoding="utf-8") == result.html


def test_run_parse_wraps_unexpected_errors(tmp_path, source, monkeypatch):
    """Unexpected failures surface as RuntimeError naming the source."""
    def boom(*args, **kwargs):
        raise KeyError("x")

    monkeypatch.setattr("freedocs.core.pipeline.parse_html", boom)
    with pytest.raises(RuntimeError, match="Failed to parse lab-3"):
        run_parse(source, ParseOptions(), tmp_path)


def test_run_parse_content_error_propagates(tmp_path):
    with pytest.raises(ContentError):
        run_parse(Source(html="  ", slug="empty"), ParseOptions(), tmp_path)


def test_run_universal_unrecognized_dialect(source):
    """Without dialect markers the plain-text adapter rebuilds the document."""
    result = run_universal(source, debug=True)
    assert result.source == "fallbackPlain"
    assert result.sections[0].blocks[0].text == "Spring Lab"
    assert result.diagnostics["adapter"] == "fallbackPlain"


def test_run_universal_zero_threshold(source):
    """A zero threshold lets the first registered adapter keep the real headings."""
    result = run_universal(source, threshold=0)
    assert result.source == "googleBasic"
    assert result.sections[0].heading.text == "Spring Lab"


def test_run_copy_clean(source):
    """Clean copy keeps prose and strips the + markers from code."""
    text = run_copy(source, ParseOptions(), "clean")
    assert text.startswith("Spring Lab\n\nAdd the component")
    assert "<dependency>\n    <groupId>org.x</groupId>\n</dependency>" in text
    assert "+ <dependency>" not in text
