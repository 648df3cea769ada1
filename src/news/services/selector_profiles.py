"""
CSS selector profiles for the fallback scrapers.

Profiles are keyed by domain; a site whose host ends with a registered domain
uses that profile, everything else uses the generic one. Adding a site-specific
profile means registering it here, not branching in the extractors.
"""

from dataclasses import dataclass
from typing import Dict, Tuple

from ...utils.url_utils import extract_domain


@dataclass(frozen=True)
class SelectorProfile:
    name: str
    headline_selectors: Tuple[str, ...]
    content_selectors: Tuple[str, ...]
    strip_tags: Tuple[str, ...] = ("script", "style", "noscript", "nav", "footer", "aside", "form")


GENERIC_PROFILE = SelectorProfile(
    name="generic",
    headline_selectors=(
        "h1 a", "h2 a", "h3 a",
        "article a",
        ".headline a", ".title a", ".card a",
        "h1", "h2", "h3",
    ),
    content_selectors=(
        "article",
        ".article",
        ".article-content",
        ".article-body",
        ".story-content",
        ".story-body",
        ".news-content",
        ".entry-content",
        ".post-content",
    ),
)


class SelectorRegistry:
    def __init__(self, default: SelectorProfile = GENERIC_PROFILE):
        self.default = default
        self._profiles: Dict[str, SelectorProfile] = {}

    def register(self, domain: str, profile: SelectorProfile) -> None:
        self._profiles[domain.lower().lstrip(".")] = profile

    def for_url(self, url: str) -> SelectorProfile:
        host = (extract_domain(url) or "").lower().split(":")[0]
        for domain, profile in self._profiles.items():
            if host == domain or host.endswith("." + domain):
                return profile
        return self.default


def default_registry() -> SelectorRegistry:
    registry = SelectorRegistry()
    registry.register("chosun.com", SelectorProfile(
        name="chosun",
        headline_selectors=("h2.news_title a", ".center-card h2 a", ".news_list_item a"),
        content_selectors=(".article", "#news_body_id"),
    ))
    return registry
