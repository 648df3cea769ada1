"""
Content Extractor
Extracts an article body for a headline, with the same two-tier strategy as the
headline extractor: Firecrawl first, direct scraping of article containers second.
"""

from datetime import datetime, timezone
from typing import Optional

import structlog
from bs4 import BeautifulSoup

from ...exceptions import NetworkError
from ...utils.string_utils import clean_text
from ..catalog import Site
from ..models import ArticleDraft, FailureKind, Headline, StepResult
from .firecrawl_client import FirecrawlClient
from .html_fetcher import HtmlFetcher
from .selector_profiles import SelectorRegistry, default_registry

logger = structlog.get_logger(__name__)


class ContentExtractor:
    def __init__(
        self,
        firecrawl: FirecrawlClient,
        fetcher: HtmlFetcher,
        prompt: str,
        selectors: Optional[SelectorRegistry] = None
    ):
        self.firecrawl = firecrawl
        self.fetcher = fetcher
        self.prompt = prompt
        self.selectors = selectors or default_registry()

    async def extract_content(self, headline: Headline, site: Site) -> StepResult[ArticleDraft]:
        logger.info("content_extraction_started", title=headline.title, site=site.name)

        primary = await self.firecrawl.extract_content(headline.url, self.prompt)
        content = primary.content if not primary.needs_fallback else ""
        method = "firecrawl"

        if not content:
            logger.info(
                "content_fallback_started",
                title=headline.title,
                reason=primary.error or primary.kind.value,
            )
            method = "html"
            try:
                html = await self.fetcher.fetch(headline.url)
            except NetworkError as e:
                logger.error("content_scrape_failed", title=headline.title, url=headline.url, error=str(e))
                return StepResult.fail(FailureKind.NETWORK, str(e))
            content = self.parse_content(html, headline.url)

        if not content:
            logger.warning("content_not_found", title=headline.title, url=headline.url)
            return StepResult.fail(FailureKind.EMPTY, "No article body found")

        logger.info("content_extracted", title=headline.title, length=len(content), method=method)
        return StepResult.ok(ArticleDraft(
            headline=headline,
            site=site.name,
            country=site.country,
            content=content,
            crawled_at=datetime.now(timezone.utc),
        ))

    def parse_content(self, html: str, page_url: str) -> str:
        """Concatenate text from the page's article containers"""
        profile = self.selectors.for_url(page_url)
        soup = BeautifulSoup(html, "html.parser")

        for element in soup(list(profile.strip_tags)):
            element.decompose()

        blocks = []
        seen = set()
        for element in soup.select(", ".join(profile.content_selectors)):
            # Nested matches (e.g. .article-body inside article) would repeat text
            if any(id(parent) in seen for parent in element.parents):
                continue
            seen.add(id(element))
            text = element.get_text(" ", strip=True)
            if text:
                blocks.append(text)

        return clean_text(" ".join(blocks))
