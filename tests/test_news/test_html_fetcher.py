import httpx
import pytest

from src.exceptions import NetworkError
from src.news.services.headline_extractor import HeadlineExtractor
from src.news.services.html_fetcher import HtmlFetcher
from src.utils.url_utils import resolve_url


def make_fetcher(handler):
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HtmlFetcher(http, user_agent="NewsDigestTest/1.0")


async def test_fetch_sends_user_agent():
    captured = {}

    def handler(request):
        captured["user_agent"] = request.headers["User-Agent"]
        return httpx.Response(200, text="<html>ok</html>")

    html = await make_fetcher(handler).fetch("https://news.example.com/")

    assert html == "<html>ok</html>"
    assert captured["user_agent"] == "NewsDigestTest/1.0"


async def test_link_with_space_is_fetched_encoded():
    requested = []

    def handler(request):
        requested.append(request.url.raw_path)
        return httpx.Response(200, text="<html>story</html>")

    url = resolve_url("https://news.example.com/", "/world/big story")

    html = await make_fetcher(handler).fetch(url)

    assert html == "<html>story</html>"
    assert requested == [b"/world/big%20story"]


async def test_scraped_headline_with_space_reaches_fetcher(mock_firecrawl, sample_site):
    pages = {
        "/": '<html><body><h2><a href="/world/big story">Big story</a></h2></body></html>',
        "/world/big%20story": "<html><article>Body</article></html>",
    }

    def handler(request):
        return httpx.Response(200, text=pages[request.url.raw_path.decode()])

    fetcher = make_fetcher(handler)
    extractor = HeadlineExtractor(mock_firecrawl, fetcher, prompt="", headlines_per_site=3)

    result = await extractor.extract_headlines(sample_site)

    assert result.success
    headline = result.value[0]
    assert headline.url == "https://news.example.com/world/big%20story"
    assert await fetcher.fetch(headline.url) == "<html><article>Body</article></html>"


@pytest.mark.parametrize("url", ["", "/relative/path", "ftp://news.example.com/"])
async def test_non_http_url_is_rejected_without_request(url):
    def handler(request):
        raise AssertionError("no request expected")

    with pytest.raises(NetworkError):
        await make_fetcher(handler).fetch(url)


async def test_http_status_maps_to_network_error():
    def handler(request):
        return httpx.Response(503)

    with pytest.raises(NetworkError, match="HTTP 503"):
        await make_fetcher(handler).fetch("https://news.example.com/")
