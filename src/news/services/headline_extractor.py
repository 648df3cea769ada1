"""
Headline Extractor
Finds up to N headlines on a site's front page:
1. Structured extraction through Firecrawl
2. If that errors or comes back empty, scrape the page directly with CSS selectors
"""

from typing import Dict, Iterable, List, Optional

import structlog
from bs4 import BeautifulSoup

from ...exceptions import NetworkError
from ...utils.string_utils import clean_text
from ...utils.url_utils import resolve_url
from ..catalog import Site
from ..models import FailureKind, Headline, StepResult
from .firecrawl_client import FirecrawlClient
from .html_fetcher import HtmlFetcher
from .selector_profiles import SelectorRegistry, default_registry

logger = structlog.get_logger(__name__)


class HeadlineExtractor:
    def __init__(
        self,
        firecrawl: FirecrawlClient,
        fetcher: HtmlFetcher,
        prompt: str,
        headlines_per_site: int = 5,
        selectors: Optional[SelectorRegistry] = None
    ):
        self.firecrawl = firecrawl
        self.fetcher = fetcher
        self.prompt = prompt
        self.headlines_per_site = headlines_per_site
        self.selectors = selectors or default_registry()

    async def extract_headlines(self, site: Site) -> StepResult[List[Headline]]:
        logger.info("headline_extraction_started", site=site.name, country=site.country)

        primary = await self.firecrawl.extract_headlines(site.url, self.prompt)
        if not primary.needs_fallback:
            headlines = self._collect(site.url, primary.items)
            if headlines:
                logger.info("headlines_extracted", site=site.name, count=len(headlines), method="firecrawl")
                return StepResult.ok(headlines)

        logger.info(
            "headline_fallback_started",
            site=site.name,
            reason=primary.error or primary.kind.value,
        )
        return await self.scrape_headlines(site)

    async def scrape_headlines(self, site: Site) -> StepResult[List[Headline]]:
        try:
            html = await self.fetcher.fetch(site.url)
        except NetworkError as e:
            logger.error("headline_scrape_failed", site=site.name, url=site.url, error=str(e))
            return StepResult.fail(FailureKind.NETWORK, str(e))

        headlines = self.parse_headlines(html, site.url)
        logger.info("headlines_extracted", site=site.name, count=len(headlines), method="html")

        if not headlines:
            return StepResult.fail(FailureKind.EMPTY, "No headlines found")
        return StepResult.ok(headlines)

    def parse_headlines(self, html: str, page_url: str) -> List[Headline]:
        """Pull (title, href) pairs out of a front page using the site's selector profile"""
        profile = self.selectors.for_url(page_url)
        soup = BeautifulSoup(html, "html.parser")

        candidates = []
        for element in soup.select(", ".join(profile.headline_selectors)):
            link = element if element.name == "a" else element.find("a", href=True) or element.find_parent("a", href=True)
            if link is None:
                continue
            candidates.append({
                "title": element.get_text(" ", strip=True),
                "url": link.get("href"),
            })

        return self._collect(page_url, candidates)

    def _collect(self, page_url: str, items: Iterable[Dict[str, Optional[str]]]) -> List[Headline]:
        """Resolve URLs, drop blanks and repeated titles, stop at the per-site limit"""
        headlines: List[Headline] = []
        seen_titles = set()

        for item in items:
            title = clean_text(item.get("title") or "")
            url = resolve_url(page_url, item.get("url"))
            if not title or not url or title in seen_titles:
                continue

            seen_titles.add(title)
            headlines.append(Headline(title=title, url=url))
            if len(headlines) >= self.headlines_per_site:
                break

        return headlines
