import pytest

from src.exceptions import ValidationError
from src.utils.string_utils import clean_text, truncate_text
from src.utils.url_utils import extract_domain, is_absolute_url, resolve_url, validate_url


@pytest.mark.parametrize("href, expected", [
    ("/world/summit", "https://news.example.com/world/summit"),
    ("sports/final", "https://news.example.com/section/sports/final"),
    ("//cdn.example.com/story", "https://cdn.example.com/story"),
    ("https://other.example.org/a", "https://other.example.org/a"),
    ("  /padded  ", "https://news.example.com/padded"),
    ("/world/big story", "https://news.example.com/world/big%20story"),
    ("/already%20escaped", "https://news.example.com/already%20escaped"),
    ("/search?q=big story&page=2", "https://news.example.com/search?q=big%20story&page=2"),
])
def test_resolve_url(href, expected):
    assert resolve_url("https://news.example.com/section/", href) == expected


@pytest.mark.parametrize("href", [None, "", "   ", "#top", "javascript:void(0)", "mailto:desk@example.com"])
def test_resolve_url_drops_non_navigable_links(href):
    assert resolve_url("https://news.example.com/", href) is None


def test_validate_url():
    validate_url("https://www.bbc.com/news")
    validate_url("http://english.ahram.org.eg/")

    with pytest.raises(ValidationError):
        validate_url("www.bbc.com")
    with pytest.raises(ValidationError):
        validate_url("")


def test_extract_domain_and_absolute():
    assert extract_domain("https://www.chosun.com/national/") == "www.chosun.com"
    assert is_absolute_url("https://example.com")
    assert not is_absolute_url("/relative")


def test_string_helpers():
    assert clean_text("  a \n\t b  ") == "a b"
    assert truncate_text("abcdef", 5) == "ab..."
    assert truncate_text("abc", 5) == "abc"
