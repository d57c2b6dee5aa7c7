"""Data models for web article summarizer."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True)
class NewsItem:
    """A news item handed to the run: a title and, usually, a link to the article page."""

    title: str
    link: str | None = None
    keyword: str | None = None
    date: str | None = None


class NetworkErrorKind(str, Enum):
    TIMEOUT = "timeout"
    CONNECTION = "connection"
    HTTP_STATUS = "http_status"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class FetchRequest:
    url: str
    timeout_ms: int
    headers: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class FetchSuccess:
    body: str


@dataclass(frozen=True)
class FetchFailure:
    kind: NetworkErrorKind
    detail: str
    status_code: int | None = None

    @property
    def label(self) -> str:
        """Classification string, e.g. ``timeout`` or ``http_status:503``."""
        if self.kind is NetworkErrorKind.HTTP_STATUS:
            return f"http_status:{self.status_code}"
        return self.kind.value


FetchResult = FetchSuccess | FetchFailure


@dataclass(frozen=True)
class ExtractedContent:
    """Article text accepted by the extractor.

    ``truncated`` is set when the text was cut down to the configured maximum
    length; only the prefix survives.
    """

    text: str
    rule: str
    truncated: bool = False

    @property
    def length(self) -> int:
        return len(self.text)


class ExtractionFailureReason(str, Enum):
    TOO_SHORT = "too_short"
    NO_RULE_MATCHED = "no_rule_matched"


@dataclass(frozen=True)
class ExtractionFailure:
    reason: ExtractionFailureReason
    detail: str = ""


ExtractionResult = ExtractedContent | ExtractionFailure


@dataclass(frozen=True)
class ModelDescriptor:
    """A model entry from the provider catalog."""

    name: str
    supports_generation: bool
    display_name: str | None = None


@dataclass(frozen=True)
class SummarizationRequest:
    prompt: str
    model_name: str


@dataclass(frozen=True)
class Summary:
    text: str
    model_name: str


@dataclass(frozen=True)
class RateLimited:
    attempts: int


@dataclass(frozen=True)
class ModelUnavailable:
    model_name: str


@dataclass(frozen=True)
class OtherError:
    detail: str


SummarizationOutcome = Summary | RateLimited | ModelUnavailable | OtherError


@dataclass(frozen=True)
class ArticleRecord:
    """Result of processing one news item. ``analysis`` is always populated."""

    title: str
    link: str
    analysis: str
    keyword: str | None = None
    date: str | None = None
    status: str = "success"

    @classmethod
    def create_error(cls, item: NewsItem, message: str, date: str | None = None) -> "ArticleRecord":
        """Create a record carrying a placeholder message instead of a summary."""
        return cls(
            title=item.title,
            link=item.link or "",
            analysis=message,
            keyword=item.keyword,
            date=date,
            status="error",
        )

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "link": self.link,
            "analysis": self.analysis,
            "keyword": self.keyword,
            "date": self.date,
            "status": self.status,
        }
