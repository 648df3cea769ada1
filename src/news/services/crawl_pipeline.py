"""
Crawl Pipeline
One run of the news digest:
1. Select random countries and expand them to sites
2. Process sites in fixed-size concurrent batches, batches strictly in order
3. Per site: extract headlines, then per headline (sequentially)
   extract content -> summarize -> persist
4. Return the collected per-article results

Only a selection fault aborts the run. Every other failure is absorbed where it
happens and shows up as fewer results.
"""

import asyncio
import random
import time
from enum import Enum
from typing import List, Optional, Sequence, TypeVar

import structlog

from ...config import Settings, get_settings
from ...exceptions import SelectionError
from ..catalog import Site, SiteCatalog, load_catalog, sites_for_countries
from ..models import ArticleRecord, Headline, ProcessResult, RunStats
from .clients import ServiceClients, create_service_clients
from .content_extractor import ContentExtractor
from .country_selector import select_countries
from .headline_extractor import HeadlineExtractor
from .notion_store import NotionStore
from .selector_profiles import default_registry
from .summarizer import Summarizer

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class PipelineState(str, Enum):
    IDLE = "idle"
    SELECTING_COUNTRIES = "selecting_countries"
    PROCESSING_SITE_BATCHES = "processing_site_batches"
    DONE = "done"


def batched(items: Sequence[T], size: int) -> List[List[T]]:
    """Split items into consecutive batches of at most `size` elements"""
    if size < 1:
        raise ValueError(f"Batch size must be at least 1, got {size}")
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


class CrawlPipeline:
    def __init__(
        self,
        catalog: SiteCatalog,
        headline_extractor: HeadlineExtractor,
        content_extractor: ContentExtractor,
        summarizer: Summarizer,
        persister: NotionStore,
        random_countries: int = 5,
        concurrency: int = 3,
        rng: Optional[random.Random] = None
    ):
        self.catalog = catalog
        self.headline_extractor = headline_extractor
        self.content_extractor = content_extractor
        self.summarizer = summarizer
        self.persister = persister
        self.random_countries = random_countries
        self.concurrency = concurrency
        self.rng = rng
        self.state = PipelineState.IDLE
        self.last_stats: Optional[RunStats] = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        clients: ServiceClients,
        catalog: Optional[SiteCatalog] = None
    ) -> "CrawlPipeline":
        selectors = default_registry()
        return cls(
            catalog=catalog if catalog is not None else load_catalog(settings.news_sites_file),
            headline_extractor=HeadlineExtractor(
                clients.firecrawl,
                clients.fetcher,
                prompt=settings.headline_prompt,
                headlines_per_site=settings.headlines_per_site,
                selectors=selectors,
            ),
            content_extractor=ContentExtractor(
                clients.firecrawl,
                clients.fetcher,
                prompt=settings.content_prompt,
                selectors=selectors,
            ),
            summarizer=Summarizer(
                clients.openai_client,
                model=settings.summary_model,
                max_tokens=settings.summary_max_tokens,
                temperature=settings.summary_temperature,
                system_prompt=settings.summary_system_prompt,
                prompt=settings.summary_prompt,
            ),
            persister=clients.notion,
            random_countries=settings.random_countries,
            concurrency=settings.concurrency,
        )

    def select_sites(self, stats: RunStats) -> List[Site]:
        self.state = PipelineState.SELECTING_COUNTRIES
        countries = select_countries(self.catalog, self.random_countries, rng=self.rng)
        sites = sites_for_countries(self.catalog, countries)

        stats.countries = list(countries)
        stats.sites_total = len(sites)
        logger.info("countries_selected", countries=countries, sites=len(sites))
        return sites

    async def run(self) -> List[ProcessResult]:
        """
        Run the complete pipeline once.

        Raises:
            SelectionError: when countries or sites cannot be selected
        """
        started = time.monotonic()
        stats = RunStats()
        self.last_stats = stats
        logger.info("crawl_run_started")

        try:
            sites = self.select_sites(stats)
        except SelectionError as e:
            self.state = PipelineState.IDLE
            logger.error("crawl_run_aborted", error=e.message, cause=e.cause)
            raise

        self.state = PipelineState.PROCESSING_SITE_BATCHES
        results: List[ProcessResult] = []
        lock = asyncio.Lock()

        batches = batched(sites, self.concurrency)
        for index, batch in enumerate(batches, start=1):
            logger.info("site_batch_started", batch=index, batches=len(batches), sites=[site.name for site in batch])
            await asyncio.gather(*(self.process_site(site, results, lock, stats) for site in batch))

        stats.duration_seconds = time.monotonic() - started
        self.state = PipelineState.DONE
        logger.info("crawl_run_completed", articles=len(results), **stats.to_dict())
        return results

    async def process_site(
        self,
        site: Site,
        results: List[ProcessResult],
        lock: asyncio.Lock,
        stats: RunStats
    ) -> int:
        """Process every headline of one site; returns the number of articles added"""
        logger.info("site_processing_started", site=site.name, country=site.country)
        added = 0

        try:
            extracted = await self.headline_extractor.extract_headlines(site)
            headlines = extracted.value or []
            if not headlines:
                stats.sites_without_headlines += 1
                logger.warning("site_has_no_headlines", site=site.name, reason=extracted.error)
                return 0

            stats.headlines_seen += len(headlines)
            for headline in headlines:
                result = await self.process_article(headline, site)
                if result is None:
                    continue

                async with lock:
                    results.append(result)
                    stats.articles_processed += 1
                    if result.page_id:
                        stats.articles_persisted += 1
                added += 1

            logger.info("site_processing_completed", site=site.name, processed=added, headlines=len(headlines))
            return added

        except Exception as e:
            stats.sites_failed += 1
            logger.error("site_processing_failed", site=site.name, error=str(e), exc_info=e)
            return added

        finally:
            stats.sites_completed += 1
            logger.info("crawl_progress", completed=stats.sites_completed, total=stats.sites_total)

    async def process_article(self, headline: Headline, site: Site) -> Optional[ProcessResult]:
        try:
            drafted = await self.content_extractor.extract_content(headline, site)
            if not drafted.success:
                return None

            summarized = await self.summarizer.summarize(drafted.value)
            if not summarized.success:
                return None

            record = ArticleRecord(draft=drafted.value, summary=summarized.value)
            persisted = await self.persister.persist(record)

            logger.info("article_processed", title=headline.title, persisted=persisted.success)
            return ProcessResult(
                title=record.title,
                summary=record.summary,
                page_id=persisted.value if persisted.success else None,
            )

        except Exception as e:
            logger.error("article_processing_failed", title=headline.title, site=site.name, error=str(e), exc_info=e)
            return None


async def run_crawl_job(settings: Optional[Settings] = None) -> List[ProcessResult]:
    """
    Entry point for cron callers: build clients, run once, close clients.
    """
    settings = settings or get_settings()
    async with create_service_clients(settings) as clients:
        pipeline = CrawlPipeline.from_settings(settings, clients)
        return await pipeline.run()
