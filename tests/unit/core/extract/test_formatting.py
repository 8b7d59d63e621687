"""Unit tests for core/extract/formatting.py"""

import pytest

from freedocs.core.extract.formatting import (
    clean_url,
    contains_formatting,
    escape_preserving_formatting,
    parse_formatted_content,
    reduce_inline_formatting,
    span_styles,
)


@pytest.mark.parametrize("url,expected", [
    ("javascript:alert(1)", "#"),
    ("  JavaScript:void(0)", "#"),
    ("https://www.google.com/url?q=https://example.com/a&sa=D", "https://example.com/a"),
    ("https://example.com/page", "https://example.com/page"),
])
def test_clean_url(url, expected):
    """javascript: links are neutralized and Google redirects unwrapped."""
    assert clean_url(url) == expected


def test_span_styles_from_style_and_class(soup):
    """Inline styles and conventional class names both count."""
    doc = soup('<p><span style="font-weight:700">a</span><span class="c2">b</span>'
               '<span style="text-decoration: underline">c</span></p>')
    bold, italic, underline = [span_styles(s) for s in doc.find_all("span")]
    assert bold == (True, False, False)
    assert italic == (False, True, False)
    assert underline == (False, False, True)


def test_contains_formatting(soup):
    """Formatting tags or styled spans are detected; plain spans are not."""
    assert contains_formatting(soup("<p>a <em>b</em></p>").p)
    assert contains_formatting(soup('<p><span style="font-style:italic">b</span></p>').p)
    assert not contains_formatting(soup('<p><span class="c9">plain</span></p>').p)


def test_reduce_keeps_allowed_tags_only(soup):
    """b/i become strong/em, styled spans are rewritten, other tags vanish."""
    p = soup('<p>Hello <b>bold</b> and <span style="font-style:italic">it</span> '
             '<font color="red">red</font></p>').p
    assert reduce_inline_formatting(p) == "Hello <strong>bold</strong> and <em>it</em> red"


def test_reduce_does_not_mutate_tree(soup):
    """Reducing formatting leaves the source element untouched."""
    p = soup("<p><b>x</b></p>").p
    reduce_inline_formatting(p)
    assert p.b is not None


def test_reduce_links(soup):
    """Links keep a cleaned href; javascript: links are unwrapped to their text."""
    p = soup('<p><a href="https://www.google.com/url?q=https://ex.com/">ex</a> '
             '<a href="javascript:evil()">bad</a></p>').p
    assert reduce_inline_formatting(p) == '<a href="https://ex.com/">ex</a> bad'


def test_reduce_line_breaks(soup):
    """<br> turns into a newline."""
    assert reduce_inline_formatting(soup("<p>a<br>b</p>").p) == "a\nb"


def test_parse_formatted_content_plain(soup):
    """Without formatting, html equals the plain text."""
    content = parse_formatted_content(soup("<p>  just text </p>").p)
    assert content.text == "just text"
    assert content.html == "just text"
    assert not content.has_formatting


def test_parse_formatted_content_formatted(soup):
    content = parse_formatted_content(soup("<p>Save <u>now</u></p>").p)
    assert content.text == "Save now"
    assert content.html == "Save <u>now</u>"
    assert content.has_formatting


def test_escape_preserving_formatting():
    """Allowed tags survive while everything else is escaped once."""
    html = '<strong>1</strong> < 2 & <script>x</script> <a href="https://e.com/?a=1&amp;b=2">l</a>'
    assert escape_preserving_formatting(html) == (
        '<strong>1</strong> &lt; 2 &amp; &lt;script&gt;x&lt;/script&gt; '
        '<a href="https://e.com/?a=1&amp;b=2">l</a>'
    )


def test_reduce_escapes_tag_shaped_text(soup):
    """Escaped markup in text stays escaped next to real formatting."""
    p = soup('<p><b>Step</b> &lt;a href="javascript:alert(1)"&gt;click&lt;/a&gt;</p>').p
    assert reduce_inline_formatting(p) == (
        '<strong>Step</strong> &lt;a href=&quot;javascript:alert(1)&quot;&gt;click&lt;/a&gt;'
    )


def test_reduce_unwraps_redirected_javascript_link(soup):
    """A Google redirect pointing at javascript: is unwrapped to its text."""
    p = soup('<p><a href="https://www.google.com/url?q=javascript:alert(1)&amp;sa=D">go</a></p>').p
    assert reduce_inline_formatting(p) == "go"


def test_parse_formatted_content_plain_escapes_markup(soup):
    content = parse_formatted_content(soup("<p>a &lt;b&gt; &amp; c</p>").p)
    assert content.text == "a <b> & c"
    assert content.html == "a &lt;b&gt; &amp; c"


def test_escape_preserving_formatting_keeps_entities():
    """Existing entities are not encoded twice and javascript: anchors are not protected."""
    html = '<em>x</em> &lt;y&gt; &amp; <a href="javascript:alert(1)">z'
    assert escape_preserving_formatting(html) == (
        '<em>x</em> &lt;y&gt; &amp; &lt;a href=&quot;javascript:alert(1)&quot;&gt;z'
    )
