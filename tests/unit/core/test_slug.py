"""Unit tests for core/utils/slug.py"""

import pytest

from freedocs.core.utils.slug import slugify


@pytest.mark.parametrize("text,expected", [
    ("Hello World", "hello-world"),
    ("my_file_name", "my-file-name"),
    ("  leading and trailing  ", "leading-and-trailing"),
    ("multiple---hyphens", "multiple-hyphens"),
    ("Special! Ch@rs#", "special-chrs"),
    ("1AbC_d-E9", "1abc-d-e9"),
])
def test_slugify_basic(text, expected):
    """slugify converts text to lowercase hyphenated slug."""
    assert slugify(text) == expected


@pytest.mark.parametrize("text", ["", "!!!", "   "])
def test_slugify_empty_falls_back(text):
    """Nothing sluggable left gives the 'section' placeholder."""
    assert slugify(text) == "section"


def test_slugify_strips_leading_trailing_hyphens():
    """slugify strips leading/trailing hyphens from result."""
    assert slugify("-leading and trailing-") == "leading-and-trailing"


def test_slugify_max_length():
    """slugify truncates to max_length without a dangling hyphen."""
    assert slugify("abc def", max_length=4) == "abc"
