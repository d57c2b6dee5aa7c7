"""Run orchestration: fetch, extract and summarize news items one at a time."""

import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from dateutil import parser as date_parser

from .config import Config
from .extractor import ContentExtractor
from .fetcher import HTMLFetcher
from .logger import get_logger
from .models import (
    ArticleRecord,
    ExtractionFailure,
    ExtractionFailureReason,
    FetchFailure,
    ModelDescriptor,
    ModelUnavailable,
    NewsItem,
    RateLimited,
    Summary,
)
from .providers.base import BaseAPIProvider
from .providers.gemini import GeminiAPI
from .resolver import ModelResolver
from .summarizer import SummarizationClient

logger = get_logger()


class PromptBuilder:
    """Render the summarization prompt for an article."""

    def __init__(self, template: str, language: str = "English"):
        self.template = template
        self.language = language

    def build(self, title: str, content: str) -> str:
        return self.template.format(title=title, content=content, language=self.language)


@dataclass
class RunContext:
    """Collaborators and per-run state shared by every item of one run.

    The resolved model is looked up on first use and then reused for the
    rest of the run.
    """

    config: Config
    provider: BaseAPIProvider
    fetcher: HTMLFetcher
    extractor: ContentExtractor
    resolver: ModelResolver
    client: SummarizationClient
    prompts: PromptBuilder
    sleep: Callable[[float], None] = time.sleep
    _model: ModelDescriptor | None = field(default=None, init=False, repr=False)

    @classmethod
    def create(
        cls,
        config: Config,
        provider: BaseAPIProvider | None = None,
        fetcher: HTMLFetcher | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> "RunContext":
        """
        Wire up a context from configuration.

        Args:
            config: Run configuration
            provider: LLM provider. If None, creates a GeminiAPI from the config.
            fetcher: Page fetcher. If None, creates new one.
            sleep: Sleep function used for backoff and inter-item delays

        Returns:
            RunContext ready for a run
        """
        provider = provider or GeminiAPI(api_key=config.api_key, api_version=config.api_version)
        return cls(
            config=config,
            provider=provider,
            fetcher=fetcher or HTMLFetcher(config),
            extractor=ContentExtractor(config),
            resolver=ModelResolver(config.fallback_model_name, config.preferred_model_tags),
            client=SummarizationClient(provider, config.fallback_model_name, sleep=sleep),
            prompts=PromptBuilder(config.prompt_template, config.summary_language),
            sleep=sleep,
        )

    @property
    def model(self) -> ModelDescriptor:
        if self._model is None:
            self._model = self.resolver.resolve(self.provider.list_models)
        return self._model


def normalize_date(date_str: str | None) -> str | None:
    """
    Normalize date to ISO 8601 format.

    Args:
        date_str: Date string in any format

    Returns:
        ISO 8601 formatted date string, or the original string if it cannot be parsed
    """
    if not date_str:
        return None

    try:
        return date_parser.parse(date_str).date().isoformat()
    except (ValueError, OverflowError) as e:
        logger.debug("Date normalization failed", extra={"date_str": date_str, "error": str(e)})
        return date_str


def describe_fetch_failure(failure: FetchFailure) -> str:
    return f"Could not load the article page ({failure.label})."


def describe_extraction_failure(failure: ExtractionFailure) -> str:
    if failure.reason is ExtractionFailureReason.TOO_SHORT:
        return "The article body is too short to summarize."
    return "Could not find the article body on the page."


class ArticleSummarizer:
    """Process news items sequentially into article records."""

    def __init__(self, context: RunContext):
        self.context = context

    def content_for(self, item: NewsItem) -> str | ArticleRecord:
        """Return the text to summarize, or an error record if it cannot be obtained."""
        if not item.link:
            return item.title

        fetched = self.context.fetcher.fetch(item.link)
        if isinstance(fetched, FetchFailure):
            return ArticleRecord.create_error(
                item, describe_fetch_failure(fetched), normalize_date(item.date)
            )

        extracted = self.context.extractor.extract(fetched.body, url=item.link)
        if isinstance(extracted, ExtractionFailure):
            return ArticleRecord.create_error(
                item, describe_extraction_failure(extracted), normalize_date(item.date)
            )
        return extracted.text

    def process_item(self, item: NewsItem) -> ArticleRecord:
        """
        Fetch, extract and summarize a single item.

        Args:
            item: News item to process

        Returns:
            ArticleRecord with the summary, or with a placeholder message on failure
        """
        content = self.content_for(item)
        if isinstance(content, ArticleRecord):
            return content

        config = self.context.config
        prompt = self.context.prompts.build(item.title, content)
        outcome = self.context.client.summarize(
            prompt,
            self.context.model.name,
            max_attempts=config.max_rate_limit_retries,
            backoff_ms=config.backoff_ms,
        )

        date = normalize_date(item.date)
        if isinstance(outcome, Summary):
            return ArticleRecord(
                title=item.title,
                link=item.link or "",
                analysis=outcome.text,
                keyword=item.keyword,
                date=date,
            )
        if isinstance(outcome, RateLimited):
            message = (
                "Summary unavailable: the AI service is rate limited "
                f"(gave up after {outcome.attempts} attempts)."
            )
        elif isinstance(outcome, ModelUnavailable):
            message = f"Summary unavailable: model {outcome.model_name} is not available."
        else:
            message = f"Summary failed ({outcome.detail})."
        return ArticleRecord.create_error(item, message, date)

    def run(self, items: Sequence[NewsItem]) -> list[ArticleRecord]:
        """
        Process every item in order.

        Args:
            items: News items

        Returns:
            One record per item, in input order
        """
        delay = self.context.config.inter_item_delay_ms / 1000
        records: list[ArticleRecord] = []

        for index, item in enumerate(items):
            if index and delay:
                self.context.sleep(delay)

            logger.info(
                "Processing item",
                extra={"progress": f"{index + 1}/{len(items)}", "title": item.title, "url": item.link},
            )
            try:
                record = self.process_item(item)
            except Exception as e:
                # every item yields a record
                logger.exception("Unexpected error while processing item", extra={"url": item.link})
                record = ArticleRecord.create_error(
                    item, f"Processing failed unexpectedly ({type(e).__name__}).", normalize_date(item.date)
                )
            records.append(record)

        logger.info(
            "Run complete",
            extra={
                "total": len(records),
                "success": sum(1 for r in records if r.status == "success"),
                "errors": sum(1 for r in records if r.status == "error"),
            },
        )
        return records


def run(
    items: Sequence[NewsItem], config: Config, context: RunContext | None = None
) -> list[ArticleRecord]:
    """
    Summarize a batch of news items.

    Args:
        items: News items to process
        config: Run configuration
        context: Pre-built context, e.g. with injected fakes. If None, one is created.

    Returns:
        One ArticleRecord per item, in input order
    """
    return ArticleSummarizer(context or RunContext.create(config)).run(items)
