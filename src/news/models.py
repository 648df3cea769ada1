"""
Data model for a crawl run.

Headline -> ArticleDraft (body extracted) -> ArticleRecord (summarized) -> ProcessResult.
Nothing here outlives a single run.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar


T = TypeVar("T")


@dataclass(frozen=True)
class Headline:
    """A (title, URL) pair found on a site's front page"""
    title: str
    url: str


@dataclass
class ArticleDraft:
    """Headline plus extracted body text"""
    headline: Headline
    site: str
    country: str
    content: str
    crawled_at: datetime

    @property
    def title(self) -> str:
        return self.headline.title

    @property
    def url(self) -> str:
        return self.headline.url


@dataclass
class ArticleRecord:
    """ArticleDraft plus its summary - the unit handed to the persister"""
    draft: ArticleDraft
    summary: str

    def __post_init__(self):
        if not self.draft.content or not self.draft.content.strip():
            raise ValueError("ArticleRecord requires a non-empty body")
        if not self.summary or not self.summary.strip():
            raise ValueError("ArticleRecord requires a non-empty summary")

    @property
    def title(self) -> str:
        return self.draft.title

    @property
    def url(self) -> str:
        return self.draft.url

    @property
    def site(self) -> str:
        return self.draft.site

    @property
    def country(self) -> str:
        return self.draft.country


@dataclass
class ProcessResult:
    """Per-article outcome returned to the caller of a run"""
    title: str
    summary: str
    page_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "summary": self.summary, "page_id": self.page_id}


class FailureKind(str, Enum):
    EMPTY = "empty"
    NETWORK = "network"
    INVALID_RESPONSE = "invalid_response"
    UPSTREAM = "upstream"
    UNEXPECTED = "unexpected"


class StepResult(Generic[T]):
    """Return contract of every leaf component: a value or a failure kind, never an exception"""

    def __init__(
        self,
        value: Optional[T] = None,
        failure: Optional[FailureKind] = None,
        error: Optional[str] = None
    ):
        self.value = value
        self.failure = failure
        self.error = error
        self.success = failure is None

    @classmethod
    def ok(cls, value: T) -> "StepResult[T]":
        return cls(value=value)

    @classmethod
    def fail(cls, failure: FailureKind, error: Optional[str] = None) -> "StepResult[T]":
        return cls(failure=failure, error=error or failure.value)

    def __repr__(self):
        status = "Success" if self.success else f"{self.failure.value}: {self.error}"
        return f"StepResult({status})"


class ExtractionKind(str, Enum):
    EMPTY = "empty"
    ITEMS = "items"
    CONTENT = "content"
    ERROR = "error"


class ExtractionResult:
    """Tagged outcome of a structured extraction call: Empty | Items | Content | Error"""

    def __init__(
        self,
        kind: ExtractionKind,
        items: Optional[List[Dict[str, Any]]] = None,
        content: str = "",
        error: Optional[str] = None
    ):
        self.kind = kind
        self.items = items or []
        self.content = content
        self.error = error

    @classmethod
    def empty(cls) -> "ExtractionResult":
        return cls(ExtractionKind.EMPTY)

    @classmethod
    def from_items(cls, items: List[Dict[str, Any]]) -> "ExtractionResult":
        if not items:
            return cls.empty()
        return cls(ExtractionKind.ITEMS, items=items)

    @classmethod
    def from_content(cls, content: str) -> "ExtractionResult":
        if not content or not content.strip():
            return cls.empty()
        return cls(ExtractionKind.CONTENT, content=content.strip())

    @classmethod
    def from_error(cls, cause: str) -> "ExtractionResult":
        return cls(ExtractionKind.ERROR, error=cause)

    @property
    def needs_fallback(self) -> bool:
        return self.kind in (ExtractionKind.EMPTY, ExtractionKind.ERROR)

    def __repr__(self):
        if self.kind == ExtractionKind.ITEMS:
            return f"ExtractionResult(items={len(self.items)})"
        if self.kind == ExtractionKind.CONTENT:
            return f"ExtractionResult(content_length={len(self.content)})"
        if self.kind == ExtractionKind.ERROR:
            return f"ExtractionResult(error={self.error!r})"
        return "ExtractionResult(empty)"


@dataclass
class RunStats:
    """Counters collected over one crawl run"""
    countries: List[str] = field(default_factory=list)
    sites_total: int = 0
    sites_completed: int = 0
    sites_failed: int = 0
    sites_without_headlines: int = 0
    headlines_seen: int = 0
    articles_processed: int = 0
    articles_persisted: int = 0
    duration_seconds: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "countries": list(self.countries),
            "sites_total": self.sites_total,
            "sites_completed": self.sites_completed,
            "sites_failed": self.sites_failed,
            "sites_without_headlines": self.sites_without_headlines,
            "headlines_seen": self.headlines_seen,
            "articles_processed": self.articles_processed,
            "articles_persisted": self.articles_persisted,
            "duration_seconds": round(self.duration_seconds, 2),
        }
