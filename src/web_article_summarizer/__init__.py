"""Web Article Summarizer - Fetch news articles, extract their text and summarize them with an LLM."""

__version__ = "0.1.0"
__author__ = "Biagio Frusteri"
__license__ = "MIT"

from .config import Config
from .models import ArticleRecord, NewsItem
from .pipeline import ArticleSummarizer, RunContext, run

__all__ = ["ArticleRecord", "ArticleSummarizer", "Config", "NewsItem", "RunContext", "run"]
