"""
Notion document store.

Maps an ArticleRecord onto the database's fixed properties (title, summary,
country, source, date, URL) and creates one page per article.
"""

from datetime import date
from typing import Any, Callable, Dict, Mapping, Optional

import httpx
import structlog

from ...config import DEFAULT_PROPERTY_FIELDS
from ...exceptions import NetworkError, PersistenceError
from ...utils.string_utils import truncate_text
from ..models import ArticleRecord, FailureKind, StepResult

logger = structlog.get_logger(__name__)

# Notion rejects rich text objects longer than this
NOTION_TEXT_LIMIT = 2000


class NotionStore:
    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: Optional[str],
        database_id: Optional[str],
        api_url: str = "https://api.notion.com/v1",
        notion_version: str = "2022-06-28",
        property_fields: Optional[Mapping[str, str]] = None,
        timeout_seconds: float = 30.0,
        today: Callable[[], date] = date.today
    ):
        self.client = client
        self.api_key = api_key
        self.database_id = database_id
        self.api_url = api_url.rstrip("/")
        self.notion_version = notion_version
        self.property_fields = {**DEFAULT_PROPERTY_FIELDS, **(property_fields or {})}
        self.timeout_seconds = timeout_seconds
        self.today = today

    @property
    def enabled(self) -> bool:
        return bool(self.api_key and self.database_id)

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
            "Notion-Version": self.notion_version,
        }

    def build_properties(self, record: ArticleRecord) -> Dict[str, Any]:
        fields = self.property_fields
        return {
            fields["title"]: {
                "title": [{"text": {"content": truncate_text(record.title, NOTION_TEXT_LIMIT)}}]
            },
            fields["summary"]: {
                "rich_text": [{"text": {"content": truncate_text(record.summary, NOTION_TEXT_LIMIT)}}]
            },
            fields["country"]: {
                # Select option names cannot contain commas
                "select": {"name": record.country.replace(",", " ")}
            },
            fields["source"]: {
                "rich_text": [{"text": {"content": truncate_text(record.site, NOTION_TEXT_LIMIT)}}]
            },
            fields["date"]: {
                "date": {"start": self.today().isoformat()}
            },
            fields["url"]: {
                "url": record.url
            },
        }

    async def create_page(self, properties: Dict[str, Any]) -> str:
        """
        Create one database page and return its id.

        Raises:
            NetworkError: on timeout, non-2xx status or transport failure
            PersistenceError: when the response carries no page id
        """
        payload = {
            "parent": {"database_id": self.database_id},
            "properties": properties,
        }

        try:
            response = await self.client.post(
                f"{self.api_url}/pages",
                json=payload,
                headers=self._get_headers(),
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
        except httpx.TimeoutException:
            raise NetworkError("Request timed out")
        except httpx.HTTPStatusError as e:
            raise NetworkError(f"HTTP {e.response.status_code}")
        except httpx.HTTPError as e:
            raise NetworkError(f"Request failed: {e}")

        try:
            page_id = response.json().get("id")
        except (ValueError, AttributeError):
            page_id = None

        if not page_id:
            raise PersistenceError("Notion response did not include a page id")
        return page_id

    async def persist(self, record: ArticleRecord) -> StepResult[str]:
        if not self.enabled:
            logger.warning("notion_store_disabled", title=record.title)
            return StepResult.fail(FailureKind.UPSTREAM, "Notion credentials not configured")

        logger.info("notion_save_started", title=record.title)
        try:
            page_id = await self.create_page(self.build_properties(record))
        except NetworkError as e:
            logger.error("notion_save_failed", title=record.title, error=str(e))
            return StepResult.fail(FailureKind.NETWORK, str(e))
        except PersistenceError as e:
            logger.error("notion_save_failed", title=record.title, error=str(e))
            return StepResult.fail(FailureKind.INVALID_RESPONSE, str(e))

        logger.info("notion_save_completed", title=record.title, page_id=page_id)
        return StepResult.ok(page_id)
