from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class ProcessedArticle(BaseModel):
    title: str
    summary: str
    page_id: Optional[str] = Field(None, description="Notion page id, absent when saving failed")


class CrawlRunResponse(BaseModel):
    status: str = Field("success", description="success or error")
    message: str = Field(..., description="Human readable message")
    processed: int = Field(..., description="Number of articles processed in this run")
    persisted: int = Field(0, description="Number of articles saved to the document store")
    articles: List[ProcessedArticle] = Field(default_factory=list)
    completed_at: datetime


class CrawlErrorResponse(BaseModel):
    status: str = Field("error", description="success or error")
    message: str
    error: Optional[str] = Field(None, description="Underlying cause")


class SiteSchema(BaseModel):
    name: str
    url: str


class CatalogResponse(BaseModel):
    countries: Dict[str, List[SiteSchema]]
    random_countries: int
    headlines_per_site: int
    concurrency: int
