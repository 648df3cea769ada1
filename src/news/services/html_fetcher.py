import httpx
import structlog

from ...exceptions import NetworkError
from ...utils.url_utils import is_absolute_url

logger = structlog.get_logger(__name__)


class HtmlFetcher:
    """Plain HTTP GET used by the fallback scrapers"""

    def __init__(self, client: httpx.AsyncClient, user_agent: str, timeout_seconds: float = 30.0):
        self.client = client
        self.user_agent = user_agent
        self.timeout_seconds = timeout_seconds

    async def fetch(self, url: str) -> str:
        """
        Fetch raw markup for a page.

        Raises:
            NetworkError: on invalid URL, timeout, non-2xx status or transport failure
        """
        if not is_absolute_url(url):
            raise NetworkError(f"Invalid URL: {url}")

        try:
            response = await self.client.get(
                url,
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout_seconds,
                follow_redirects=True,
            )
            response.raise_for_status()
        except httpx.TimeoutException:
            raise NetworkError("Request timed out")
        except httpx.HTTPStatusError as e:
            raise NetworkError(f"HTTP {e.response.status_code}")
        except httpx.InvalidURL as e:
            raise NetworkError(f"Invalid URL: {e}")
        except httpx.HTTPError as e:
            raise NetworkError(f"Request failed: {e}")

        logger.debug("html_fetched", url=url, length=len(response.text))
        return response.text
