import pytest
from datetime import datetime, timezone
from unittest.mock import MagicMock, AsyncMock

from src.config import Settings
from src.news.catalog import Site, build_catalog
from src.news.models import ArticleDraft, ExtractionResult, Headline, StepResult


@pytest.fixture
def test_settings():
    return Settings(
        _env_file=None,
        firecrawl_api_key="test-firecrawl-key",
        openai_api_key="test-openai-key",
        notion_api_key="test-notion-key",
        notion_database_id="test-database-id",
        random_countries=2,
        headlines_per_site=3,
        concurrency=3,
    )


@pytest.fixture
def sample_site():
    return Site(name="Example News", url="https://news.example.com/", country="Testland")


@pytest.fixture
def sample_headline():
    return Headline(title="Parliament passes budget", url="https://news.example.com/politics/budget")


@pytest.fixture
def sample_draft(sample_headline):
    return ArticleDraft(
        headline=sample_headline,
        site="Example News",
        country="Testland",
        content="Parliament passed the annual budget on Monday after a long debate.",
        crawled_at=datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc),
    )


@pytest.fixture
def small_catalog():
    return build_catalog({
        "Testland": [("Example News", "https://news.example.com/"), ("Daily Test", "https://daily.example.org/")],
        "Mockovia": [("Mock Times", "https://mocktimes.example.net/")],
        "Stubistan": [{"name": "Stub Post", "url": "https://stubpost.example.com/"}],
    })


@pytest.fixture
def front_page_html():
    return """
    <html>
      <head><title>Example News</title></head>
      <body>
        <nav><a href="/about">About us</a></nav>
        <h1><a href="/world/summit">Leaders meet at summit</a></h1>
        <h2><a href="https://news.example.com/economy/rates">Central bank holds rates</a></h2>
        <h2><a href="/world/summit">Leaders meet at summit</a></h2>
        <article><a href="sports/final">Home team wins the final</a></article>
        <div class="headline"><a href="#top">   </a></div>
        <h3><a href="/science/comet">Comet visible tonight</a></h3>
      </body>
    </html>
    """


@pytest.fixture
def article_html():
    return """
    <html>
      <body>
        <header>Site header</header>
        <article>
          <h1>Central bank holds rates</h1>
          <script>var tracking = 1;</script>
          <div class="article-body">
            <p>The central bank kept its key rate unchanged.</p>
            <p>Officials cited   easing inflation.</p>
          </div>
        </article>
        <aside>Related: other stories</aside>
        <footer>Copyright</footer>
      </body>
    </html>
    """


@pytest.fixture
def mock_firecrawl():
    client = MagicMock()
    client.extract_headlines = AsyncMock(return_value=ExtractionResult.empty())
    client.extract_content = AsyncMock(return_value=ExtractionResult.empty())
    return client


@pytest.fixture
def mock_fetcher():
    fetcher = MagicMock()
    fetcher.fetch = AsyncMock(return_value="<html></html>")
    return fetcher


@pytest.fixture
def mock_persister():
    persister = MagicMock()
    persister.persist = AsyncMock(return_value=StepResult.ok("page-123"))
    return persister


@pytest.fixture
def mock_openai_client():
    client = MagicMock()
    client.chat.completions.create = AsyncMock()
    return client


def make_completion(content):
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    return response


@pytest.fixture
def completion_factory():
    return make_completion


@pytest.fixture
async def async_client():
    from httpx import AsyncClient, ASGITransport
    from src.main import app

    # Use ASGITransport for direct app interaction
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
