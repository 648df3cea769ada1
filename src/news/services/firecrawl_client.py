"""
Firecrawl structured extraction client.

Sends a URL, an instruction and a JSON schema to the scrape endpoint and maps the
response onto an ExtractionResult. Never raises: transport and upstream failures
come back as ExtractionResult.from_error so callers can fall back.
"""

from typing import Any, Dict, List, Optional

import httpx
import structlog

from ...exceptions import NetworkError
from ..models import ExtractionResult

logger = structlog.get_logger(__name__)


HEADLINE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "headlines": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "title": {"type": "string", "description": "News headline title"},
                    "url": {"type": "string", "description": "News article URL"},
                },
                "required": ["title", "url"],
            },
        }
    },
    "required": ["headlines"],
}

CONTENT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "content": {"type": "string", "description": "News article body text"},
    },
    "required": ["content"],
}


class FirecrawlClient:
    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: Optional[str],
        api_url: str = "https://api.firecrawl.dev/v1/scrape",
        timeout_seconds: float = 60.0
    ):
        self.client = client
        self.api_key = api_key
        self.api_url = api_url
        self.timeout_seconds = timeout_seconds

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

    async def scrape(self, url: str, prompt: str, schema: Dict[str, Any]) -> Dict[str, Any]:
        """
        Run one extraction request and return the extracted JSON payload.

        Raises:
            NetworkError: on timeout, non-2xx status or transport failure
        """
        payload = {
            "url": url,
            "formats": ["extract"],
            "extract": {"prompt": prompt, "schema": schema},
        }

        try:
            response = await self.client.post(
                self.api_url,
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
            body = response.json()
        except ValueError:
            raise NetworkError("Response was not valid JSON")

        return _unwrap_extract(body)

    async def extract_headlines(self, url: str, prompt: str) -> ExtractionResult:
        if not self.enabled:
            return ExtractionResult.from_error("Firecrawl API key not configured")

        logger.info("firecrawl_extract_started", url=url, kind="headlines")
        try:
            extracted = await self.scrape(url, prompt, HEADLINE_SCHEMA)
        except NetworkError as e:
            logger.error("firecrawl_extract_failed", url=url, kind="headlines", error=str(e))
            return ExtractionResult.from_error(str(e))

        items = _headline_items(extracted)
        logger.info("firecrawl_extract_completed", url=url, kind="headlines", items=len(items))
        return ExtractionResult.from_items(items)

    async def extract_content(self, url: str, prompt: str) -> ExtractionResult:
        if not self.enabled:
            return ExtractionResult.from_error("Firecrawl API key not configured")

        logger.info("firecrawl_extract_started", url=url, kind="content")
        try:
            extracted = await self.scrape(url, prompt, CONTENT_SCHEMA)
        except NetworkError as e:
            logger.error("firecrawl_extract_failed", url=url, kind="content", error=str(e))
            return ExtractionResult.from_error(str(e))

        content = extracted.get("content") if isinstance(extracted, dict) else None
        result = ExtractionResult.from_content(content if isinstance(content, str) else "")
        logger.info("firecrawl_extract_completed", url=url, kind="content", content_length=len(result.content))
        return result


def _unwrap_extract(body: Any) -> Any:
    """Pull the extracted payload out of the scrape response envelope"""
    if not isinstance(body, dict):
        return {}

    data = body.get("data")
    if not isinstance(data, dict):
        # Older API versions wrapped the payload in "result"
        data = body.get("result")
    if not isinstance(data, dict):
        return {}

    extracted = data.get("extract")
    if extracted is None:
        extracted = data.get("json")
    return extracted if extracted is not None else {}


def _headline_items(extracted: Any) -> List[Dict[str, str]]:
    if isinstance(extracted, dict):
        extracted = extracted.get("headlines") or extracted.get("items") or []
    if not isinstance(extracted, list):
        return []

    items = []
    for entry in extracted:
        if not isinstance(entry, dict):
            continue
        title, url = entry.get("title"), entry.get("url")
        if isinstance(title, str) and isinstance(url, str) and title.strip() and url.strip():
            items.append({"title": title.strip(), "url": url.strip()})
    return items
