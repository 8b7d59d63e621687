"""Unit tests for core/extract/lists.py"""

from freedocs.core.extract.lists import (
    ListCounters,
    item_text,
    list_identity,
    match_numbered_paragraph,
    numbered_paragraph_item,
    parse_list,
)
from freedocs.core.models import LineOp, ParseOptions


def test_list_identity(soup):
    """lst-kix_<name>-<level> yields (name, level)."""
    doc = soup('<ol class="c4 lst-kix_abc123-2"></ol><ol class="c4"></ol>')
    first, second = doc.find_all("ol")
    assert list_identity(first) == ("abc123", 2)
    assert list_identity(second) is None


def test_item_text_excludes_nested_lists(soup):
    li = soup("<ul><li>Outer<ul><li>Inner</li></ul></li></ul>").li
    assert item_text(li) == "Outer"


def test_class_numbering_continues_across_split_lists(soup):
    """A level-0 list starting at 5 numbers 5, 6, 7; its level-1 child shows 7.1, 7.2."""
    doc = soup(
        '<ol class="lst-kix_x-0" start="5"><li>Alpha</li><li>Beta</li><li>Gamma</li></ol>'
        '<ol class="lst-kix_x-1" start="1"><li>Delta</li><li>Epsilon</li></ol>'
    )
    counters = ListCounters()
    top, child = [parse_list(ol, ParseOptions(), counters) for ol in doc.find_all("ol")]
    assert [i.custom_number for i in top.items] == [5, 6, 7]
    assert top.start_value == 5
    assert [i.custom_number for i in child.items] == ["7.1", "7.2"]


def test_deeper_levels_fill_intermediate_ones(soup):
    """Levels below 1 show 1 for each intermediate level."""
    doc = soup(
        '<ol class="lst-kix_y-0" start="2"><li>Alpha</li></ol>'
        '<ol class="lst-kix_y-2"><li>Deep</li></ol>'
    )
    counters = ListCounters()
    parse_list(doc.find_all("ol")[0], ParseOptions(), counters)
    deep = parse_list(doc.find_all("ol")[1], ParseOptions(), counters)
    assert deep.items[0].custom_number == "2.1.1"


def test_child_without_known_parent_defaults_to_one(soup):
    doc = soup('<ol class="lst-kix_z-1"><li>Orphan</li></ol>')
    block = parse_list(doc.ol, ParseOptions(), ListCounters())
    assert block.items[0].custom_number == "1.1"


def test_li_value_wins(soup):
    doc = soup('<ol class="lst-kix_v-0"><li value="9">Nine</li></ol>')
    assert parse_list(doc.ol, ParseOptions(), ListCounters()).items[0].custom_number == 9


def test_li_value_sets_parent_for_child_lists(soup):
    """An explicit value on a level-0 item becomes the parent number of the next sub-list."""
    doc = soup('<ol class="lst-kix_w-0"><li value="4">Four</li></ol><ol class="lst-kix_w-1"><li>Sub</li></ol>')
    counters = ListCounters()
    parse_list(doc.find_all("ol")[0], ParseOptions(), counters)
    child = parse_list(doc.find_all("ol")[1], ParseOptions(), counters)
    assert child.items[0].custom_number == "4.1"


def test_plain_item_html_is_escaped(soup):
    doc = soup("<ul><li>compare a &lt;b&gt; here</li></ul>")
    item = parse_list(doc.ul, ParseOptions(auto_detect_code=False), ListCounters()).items[0]
    assert item.text == "compare a <b> here"
    assert item.html == "compare a &lt;b&gt; here"


def test_text_prefix_is_stripped(soup):
    """A number typed into the item text becomes its custom number."""
    doc = soup("<ol><li>2. Do it</li><li>No number</li></ol>")
    block = parse_list(doc.ol, ParseOptions(), ListCounters())
    assert block.type == "ordered-list"
    assert (block.items[0].custom_number, block.items[0].text) == ("2", "Do it")
    assert block.items[1].custom_number is None


def test_prefix_stripped_from_formatted_html(soup):
    doc = soup("<ol><li>3. <b>Bold</b> step</li></ol>")
    item = parse_list(doc.ol, ParseOptions(), ListCounters()).items[0]
    assert item.text == "Bold step"
    assert item.has_formatting
    assert item.html == "<strong>Bold</strong> step"


def test_unordered_list_has_no_numbers(soup):
    doc = soup("<ul><li>Outer<ul><li>Inner</li></ul></li></ul>")
    block = parse_list(doc.ul, ParseOptions(), ListCounters())
    assert block.type == "unordered-list"
    assert [i.text for i in block.items] == ["Outer", "Inner"]
    assert all(i.custom_number is None for i in block.items)


def test_code_like_item_becomes_code(soup):
    """An item that looks like code is parsed into diff lines."""
    doc = soup("<ul><li>+ &lt;dependency&gt;</li></ul>")
    item = parse_list(doc.ul, ParseOptions(), ListCounters()).items[0]
    assert item.type == "code"
    assert item.language == "xml"
    assert item.lines[0].op == LineOp.added
    assert item.has_changes


def test_code_detection_can_be_disabled(soup):
    doc = soup("<ul><li>+ &lt;dependency&gt;</li></ul>")
    item = parse_list(doc.ul, ParseOptions(auto_detect_code=False), ListCounters()).items[0]
    assert item.type == "list-item"


def test_match_numbered_paragraph():
    """Authored numbers are returned verbatim."""
    assert match_numbered_paragraph("1. Install") == ("1", "Install")
    assert match_numbered_paragraph("1.2. Configure") == ("1.2", "Configure")
    assert match_numbered_paragraph("  1.1.3.  Deep") == ("1.1.3", "Deep")
    assert match_numbered_paragraph("Plain text") is None
    assert match_numbered_paragraph("2024 was a year") is None


def test_numbered_paragraph_item(soup):
    p = soup("<p>1.2. Configure the <i>port</i></p>").p
    item = numbered_paragraph_item(p, "1.2", "Configure the port", ParseOptions())
    assert item.custom_number == "1.2"
    assert item.text == "Configure the port"
    assert item.html == "Configure the <em>port</em>"
