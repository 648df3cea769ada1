from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ....config import Settings, get_settings
from ....exceptions import SelectionError
from ....news.catalog import SiteCatalog
from ....news.services.crawl_pipeline import CrawlPipeline
from ...dependencies import get_crawl_pipeline, get_site_catalog
from ..schemas import (
    CatalogResponse,
    CrawlErrorResponse,
    CrawlRunResponse,
    ProcessedArticle,
    SiteSchema,
)

logger = structlog.get_logger(__name__)

router = APIRouter()


async def run_crawl(pipeline: CrawlPipeline):
    logger.info("crawl_triggered")

    try:
        results = await pipeline.run()
    except SelectionError as e:
        logger.error("crawl_failed", error=e.message, cause=e.cause)
        return JSONResponse(
            status_code=500,
            content=CrawlErrorResponse(
                message="News crawl and summarization failed",
                error=e.cause,
            ).model_dump(),
        )

    articles = [ProcessedArticle(**result.to_dict()) for result in results]
    logger.info("crawl_finished", processed=len(articles))

    return CrawlRunResponse(
        message="News crawl and summarization completed",
        processed=len(articles),
        persisted=sum(1 for article in articles if article.page_id),
        articles=articles,
        completed_at=datetime.now(timezone.utc),
    )


@router.post("/run", response_model=CrawlRunResponse, responses={500: {"model": CrawlErrorResponse}})
async def trigger_crawl(pipeline: CrawlPipeline = Depends(get_crawl_pipeline)):
    """Run one crawl: select countries, extract, summarize and save articles"""
    return await run_crawl(pipeline)


@router.get("/catalog", response_model=CatalogResponse)
async def get_catalog(
    catalog: SiteCatalog = Depends(get_site_catalog),
    settings: Settings = Depends(get_settings)
):
    return CatalogResponse(
        countries={
            name: [SiteSchema(name=site.name, url=site.url) for site in country.sites]
            for name, country in catalog.items()
        },
        random_countries=settings.random_countries,
        headlines_per_site=settings.headlines_per_site,
        concurrency=settings.concurrency,
    )
