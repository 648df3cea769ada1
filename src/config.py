import json
from functools import lru_cache
from typing import Dict, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/123.0.0.0 Safari/537.36"
)

DEFAULT_PROPERTY_FIELDS = {
    "title": "Title",
    "summary": "Summary",
    "country": "Country",
    "source": "Source",
    "date": "Date",
    "url": "URL",
}


class Settings(BaseSettings):

    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8080, description="API port")
    debug: bool = Field(default=False, description="Debug mode")

    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Log format (json or text)")
    suppress_client_logs: bool = Field(default=True, description="Lower httpx, httpcore and openai request logs to WARNING")

    # Crawler Configuration
    random_countries: int = Field(default=5, ge=0, description="Number of countries picked per run")
    headlines_per_site: int = Field(default=5, ge=1, description="Maximum headlines taken from each site")
    concurrency: int = Field(default=3, ge=1, description="Sites processed concurrently per batch")
    request_timeout_seconds: float = Field(default=30.0, gt=0, description="Timeout for page fetch, model and store calls")
    extraction_timeout_seconds: float = Field(default=60.0, gt=0, description="Timeout for structured extraction calls")
    retries: int = Field(default=2, ge=0, description="Declared retry count (only the single fallback path is used)")
    user_agent: str = Field(default=DEFAULT_USER_AGENT, description="User-Agent for direct page fetches")
    news_sites_file: Optional[str] = Field(default=None, description="JSON file overriding the built-in site catalog")

    # Structured Extraction (Firecrawl)
    firecrawl_api_key: Optional[str] = Field(default=None, description="Firecrawl API key")
    firecrawl_api_url: str = Field(default="https://api.firecrawl.dev/v1/scrape", description="Firecrawl scrape endpoint")
    headline_prompt: str = Field(
        default=(
            "Find the 5 most important news headlines of the day on the main page of this news site. "
            "Return each headline's title in the 'title' field and its link in the 'url' field as a JSON array. "
            "Convert relative links into absolute URLs."
        ),
        description="Instruction for headline extraction",
    )
    content_prompt: str = Field(
        default=(
            "Extract only the body text of this news article. Exclude advertisements, related article links "
            "and comment sections. Return the article body as plain text in the 'content' field."
        ),
        description="Instruction for article body extraction",
    )

    # Summarization (OpenAI)
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API key")
    summary_model: str = Field(default="gpt-4", description="Model used for article summaries")
    summary_max_tokens: int = Field(default=1024, ge=1, description="Max tokens for a summary")
    summary_temperature: float = Field(default=0.5, ge=0.0, le=2.0, description="Sampling temperature for summaries")
    summary_system_prompt: str = Field(
        default="You are a news summarization expert. Summarize the key points concisely.",
        description="System instruction for the summarizer",
    )
    summary_prompt: str = Field(
        default="Summarize the following news article in 3-4 concise sentences. Preserve the most important facts and figures.",
        description="Instruction prepended to the article text",
    )

    # Document Store (Notion)
    notion_api_key: Optional[str] = Field(default=None, description="Notion integration token")
    notion_database_id: Optional[str] = Field(default=None, description="Notion database receiving the articles")
    notion_api_url: str = Field(default="https://api.notion.com/v1", description="Notion API base URL")
    notion_version: str = Field(default="2022-06-28", description="Notion-Version header")
    notion_property_fields: Dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_PROPERTY_FIELDS),
        description="Mapping of record fields onto Notion database property names",
    )

    @field_validator("notion_property_fields", mode="before")
    @classmethod
    def parse_property_fields(cls, value):
        if value is None:
            return dict(DEFAULT_PROPERTY_FIELDS)
        if isinstance(value, str):
            value = json.loads(value)
        if isinstance(value, dict):
            return {**DEFAULT_PROPERTY_FIELDS, **value}
        return value

    class Config:
        env_file = [".env", ".env.local"]  # .env.local takes precedence over .env
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
