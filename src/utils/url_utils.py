import re
from typing import Optional
from urllib.parse import quote, urljoin, urlparse, urlsplit, urlunsplit

from ..exceptions import ValidationError


URL_PATTERN = re.compile(
    r'^https?://'
    r'(?:(?:[A-Z0-9](?:[A-Z0-9-]{0,61}[A-Z0-9])?\.)+[A-Z]{2,63}\.?|'
    r'localhost|'
    r'\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3})'
    r'(?::\d+)?'
    r'(?:/?|[/?#]\S+)$', re.IGNORECASE
)

NON_NAVIGABLE_SCHEMES = ('javascript:', 'mailto:', 'tel:', 'data:')

# Reserved and already-escaped characters stay as they are
URL_SAFE_CHARS = ":/?#[]@!$&'()*+,;=%"


def validate_url(url: str) -> None:
    if not url or not URL_PATTERN.match(url):
        raise ValidationError(f"Invalid URL: {url}")


def extract_domain(url: str) -> str:
    parsed = urlparse(url)
    return parsed.netloc


def is_absolute_url(url: str) -> bool:
    if not url:
        return False
    return url.startswith(('http://', 'https://'))


def encode_url(url: str) -> str:
    """Percent-encode path, query and fragment; the host is left for httpx (IDNA)"""
    parts = urlsplit(url)
    return urlunsplit((
        parts.scheme,
        parts.netloc,
        quote(parts.path, safe=URL_SAFE_CHARS),
        quote(parts.query, safe=URL_SAFE_CHARS),
        quote(parts.fragment, safe=URL_SAFE_CHARS),
    ))


def resolve_url(base_url: str, href: Optional[str]) -> Optional[str]:
    """Resolve a possibly-relative link against the page it was found on.

    Unsafe characters such as spaces are percent-encoded. Returns None for
    empty, fragment-only and non-navigable links.
    """
    if not href:
        return None

    href = href.strip()
    if not href or href.startswith('#') or href.lower().startswith(NON_NAVIGABLE_SCHEMES):
        return None

    resolved = encode_url(urljoin(base_url, href))
    if not is_absolute_url(resolved):
        return None
    return resolved
