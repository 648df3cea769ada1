"""
Process-wide service clients.

Built once at startup (FastAPI lifespan or run_crawl_job) and handed to the
pipeline by reference; closed at shutdown.
"""

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Optional

import httpx
import openai
import structlog

from ...config import Settings
from .firecrawl_client import FirecrawlClient
from .html_fetcher import HtmlFetcher
from .notion_store import NotionStore

logger = structlog.get_logger(__name__)


@dataclass
class ServiceClients:
    http: httpx.AsyncClient
    firecrawl: FirecrawlClient
    fetcher: HtmlFetcher
    notion: NotionStore
    openai_client: Optional[openai.AsyncOpenAI] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "ServiceClients":
        http = httpx.AsyncClient(timeout=settings.request_timeout_seconds)

        openai_client = None
        if settings.openai_api_key:
            openai_client = openai.AsyncOpenAI(
                api_key=settings.openai_api_key,
                timeout=settings.request_timeout_seconds,
                max_retries=0,
            )
        else:
            logger.warning("openai_api_key_missing")

        if not settings.firecrawl_api_key:
            logger.warning("firecrawl_api_key_missing")
        if not (settings.notion_api_key and settings.notion_database_id):
            logger.warning("notion_credentials_missing")

        return cls(
            http=http,
            firecrawl=FirecrawlClient(
                http,
                api_key=settings.firecrawl_api_key,
                api_url=settings.firecrawl_api_url,
                timeout_seconds=settings.extraction_timeout_seconds,
            ),
            fetcher=HtmlFetcher(
                http,
                user_agent=settings.user_agent,
                timeout_seconds=settings.request_timeout_seconds,
            ),
            notion=NotionStore(
                http,
                api_key=settings.notion_api_key,
                database_id=settings.notion_database_id,
                api_url=settings.notion_api_url,
                notion_version=settings.notion_version,
                property_fields=settings.notion_property_fields,
                timeout_seconds=settings.request_timeout_seconds,
            ),
            openai_client=openai_client,
        )

    async def close(self) -> None:
        await self.http.aclose()
        if self.openai_client is not None:
            await self.openai_client.close()


@asynccontextmanager
async def create_service_clients(settings: Settings) -> AsyncIterator[ServiceClients]:
    clients = ServiceClients.from_settings(settings)
    try:
        yield clients
    finally:
        await clients.close()
