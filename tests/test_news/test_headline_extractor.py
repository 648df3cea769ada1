import pytest
from unittest.mock import AsyncMock

from src.exceptions import NetworkError
from src.news.models import ExtractionResult, FailureKind, Headline
from src.news.services.headline_extractor import HeadlineExtractor
from src.news.services.selector_profiles import SelectorProfile, SelectorRegistry


class TestHeadlineExtractor:
    @pytest.fixture(autouse=True)
    def setup_extractor(self, mock_firecrawl, mock_fetcher):
        self.firecrawl = mock_firecrawl
        self.fetcher = mock_fetcher
        self.extractor = HeadlineExtractor(
            self.firecrawl,
            self.fetcher,
            prompt="Find today's top headlines",
            headlines_per_site=3,
        )

    async def test_primary_items_skip_fallback(self, sample_site):
        self.firecrawl.extract_headlines.return_value = ExtractionResult.from_items([
            {"title": "One", "url": "https://news.example.com/1"},
            {"title": "Two", "url": "/2"},
        ])

        result = await self.extractor.extract_headlines(sample_site)

        assert result.success
        assert result.value == [
            Headline(title="One", url="https://news.example.com/1"),
            Headline(title="Two", url="https://news.example.com/2"),
        ]
        self.firecrawl.extract_headlines.assert_awaited_once_with(sample_site.url, "Find today's top headlines")
        self.fetcher.fetch.assert_not_awaited()

    async def test_primary_items_are_truncated(self, sample_site):
        self.firecrawl.extract_headlines.return_value = ExtractionResult.from_items([
            {"title": f"Story {i}", "url": f"https://news.example.com/{i}"} for i in range(8)
        ])

        result = await self.extractor.extract_headlines(sample_site)

        assert [h.title for h in result.value] == ["Story 0", "Story 1", "Story 2"]

    async def test_primary_error_falls_back_to_scraping(self, sample_site, front_page_html):
        self.firecrawl.extract_headlines.return_value = ExtractionResult.from_error("Request timed out")
        self.fetcher.fetch.return_value = front_page_html

        result = await self.extractor.extract_headlines(sample_site)

        assert result.success
        assert result.value == [
            Headline(title="Leaders meet at summit", url="https://news.example.com/world/summit"),
            Headline(title="Central bank holds rates", url="https://news.example.com/economy/rates"),
            Headline(title="Home team wins the final", url="https://news.example.com/sports/final"),
        ]
        self.fetcher.fetch.assert_awaited_once_with(sample_site.url)

    async def test_primary_empty_falls_back_to_scraping(self, sample_site, front_page_html):
        self.fetcher.fetch.return_value = front_page_html

        result = await self.extractor.extract_headlines(sample_site)

        assert result.success
        assert len(result.value) == 3
        self.fetcher.fetch.assert_awaited_once()

    async def test_network_error_then_two_scraped_headlines(self, sample_site):
        self.firecrawl.extract_headlines.return_value = ExtractionResult.from_error("HTTP 503")
        self.fetcher.fetch.return_value = """
            <h2><a href="/a">First story</a></h2>
            <h2><a href="/b">Second story</a></h2>
        """

        result = await self.extractor.extract_headlines(sample_site)

        assert [h.title for h in result.value] == ["First story", "Second story"]

    async def test_both_paths_empty_returns_empty_failure(self, sample_site):
        self.fetcher.fetch.return_value = "<html><body><p>No headlines here</p></body></html>"

        result = await self.extractor.extract_headlines(sample_site)

        assert not result.success
        assert result.failure == FailureKind.EMPTY
        assert result.value is None

    async def test_fallback_fetch_error_is_not_raised(self, sample_site):
        self.fetcher.fetch = AsyncMock(side_effect=NetworkError("HTTP 404"))

        result = await self.extractor.extract_headlines(sample_site)

        assert not result.success
        assert result.failure == FailureKind.NETWORK
        assert "404" in result.error

    def test_parse_headlines_results_are_absolute_and_unique(self, front_page_html):
        self.extractor.headlines_per_site = 10

        headlines = self.extractor.parse_headlines(front_page_html, "https://news.example.com/")

        titles = [h.title for h in headlines]
        assert len(titles) == len(set(titles))
        assert "About us" not in titles
        assert all(h.url.startswith(("http://", "https://")) for h in headlines)
        assert all(h.title for h in headlines)

    def test_parse_headlines_uses_site_profile(self):
        registry = SelectorRegistry()
        registry.register("special.example.com", SelectorProfile(
            name="special",
            headline_selectors=(".lead-story a",),
            content_selectors=("#body",),
        ))
        extractor = HeadlineExtractor(self.firecrawl, self.fetcher, prompt="", selectors=registry)
        html = """
            <h2><a href="/generic">Generic heading</a></h2>
            <div class="lead-story"><a href="/lead">Lead story</a></div>
        """

        headlines = extractor.parse_headlines(html, "https://special.example.com/")

        assert headlines == [Headline(title="Lead story", url="https://special.example.com/lead")]
