"""Article text extraction with a prioritized chain of selection rules."""

from collections.abc import Sequence

import trafilatura
from bs4 import BeautifulSoup
from newspaper import Article
from newspaper.article import ArticleException
from soupsieve import SelectorSyntaxError

from .config import Config
from .logger import get_logger
from .models import (
    ExtractedContent,
    ExtractionFailure,
    ExtractionFailureReason,
    ExtractionResult,
)

logger = get_logger()


class ContentExtractor:
    """Extract readable article text from page markup.

    Rules are tried in order. A rule is either a CSS selector, whose matched
    nodes' texts are concatenated, or a named strategy (``@trafilatura``,
    ``@newspaper``) applied to the whole document. The first rule producing at
    least ``min_content_length`` characters wins, and its text is cut down to
    a ``max_content_length`` prefix. That truncation is lossy.
    """

    def __init__(self, config: Config | None = None):
        """
        Initialize content extractor.

        Args:
            config: Configuration with rules and length bounds. If None, uses defaults.
        """
        self.config = config or Config()

    def extract_with_selector(self, soup: BeautifulSoup, selector: str) -> str:
        """
        Concatenate the text of every node matching a CSS selector.

        Args:
            soup: Parsed document
            selector: CSS selector

        Returns:
            Trimmed text, empty if nothing matched
        """
        try:
            nodes = soup.select(selector)
        except SelectorSyntaxError as e:
            logger.warning("Invalid selector rule", extra={"rule": selector, "error": str(e)})
            return ""
        return " ".join(node.get_text(" ", strip=True) for node in nodes).strip()

    def extract_with_trafilatura(self, markup: str) -> str:
        """
        Extract main content using trafilatura.

        Args:
            markup: Raw page markup

        Returns:
            Trimmed text, empty if extraction fails
        """
        try:
            text = trafilatura.extract(markup, include_comments=False, include_tables=False)
        except ValueError as e:
            logger.debug("Trafilatura extraction failed", extra={"error": str(e)})
            return ""
        return text.strip() if text else ""

    def extract_with_newspaper(self, markup: str, url: str | None = None) -> str:
        """
        Extract article body using newspaper's parser on already fetched markup.

        Args:
            markup: Raw page markup
            url: Page URL, used by newspaper to resolve relative links

        Returns:
            Trimmed text, empty if extraction fails
        """
        try:
            article = Article(url or "http://localhost/")
            article.download(input_html=markup)
            article.parse()
        except (ArticleException, ValueError) as e:
            logger.debug("Newspaper extraction failed", extra={"url": url, "error": str(e)})
            return ""
        return article.text.strip() if article.text else ""

    def apply_rule(self, rule: str, soup: BeautifulSoup, markup: str, url: str | None = None) -> str:
        """Run a single rule and return its trimmed text."""
        if rule == "@trafilatura":
            return self.extract_with_trafilatura(markup)
        if rule == "@newspaper":
            return self.extract_with_newspaper(markup, url)
        return self.extract_with_selector(soup, rule)

    def truncate(self, text: str) -> tuple[str, bool]:
        """Cut text to the configured maximum length, keeping the prefix."""
        limit = self.config.max_content_length
        if len(text) <= limit:
            return text, False
        return text[:limit], True

    def extract(
        self, markup: str, rules: Sequence[str] | None = None, url: str | None = None
    ) -> ExtractionResult:
        """
        Extract article text from markup.

        Args:
            markup: Raw page markup
            rules: Ordered extraction rules. Defaults to the configured ones.
            url: Page URL, for logging and URL-aware strategies

        Returns:
            ExtractedContent on success. Otherwise an ExtractionFailure: TOO_SHORT
            when some rule produced non-empty text below the floor, NO_RULE_MATCHED
            when every rule produced empty text (zero length is never TOO_SHORT).
        """
        rules = tuple(rules) if rules is not None else self.config.extraction_rules
        floor = self.config.min_content_length
        soup = BeautifulSoup(markup or "", "html.parser")

        longest = 0
        for rule in rules:
            text = self.apply_rule(rule, soup, markup or "", url)
            if not text:
                continue
            if len(text) < floor:
                longest = max(longest, len(text))
                logger.debug(
                    "Rule matched too little text",
                    extra={"url": url, "rule": rule, "text_length": len(text)},
                )
                continue

            text, truncated = self.truncate(text)
            logger.info(
                "Extraction successful",
                extra={"url": url, "rule": rule, "text_length": len(text), "truncated": truncated},
            )
            return ExtractedContent(text=text, rule=rule, truncated=truncated)

        if longest:
            logger.warning(
                "Extracted text too short", extra={"url": url, "text_length": longest, "minimum": floor}
            )
            return ExtractionFailure(
                reason=ExtractionFailureReason.TOO_SHORT,
                detail=f"longest match was {longest} characters, minimum is {floor}",
            )

        logger.warning("No extraction rule matched", extra={"url": url, "rules": list(rules)})
        return ExtractionFailure(
            reason=ExtractionFailureReason.NO_RULE_MATCHED, detail=f"tried {len(rules)} rules"
        )
