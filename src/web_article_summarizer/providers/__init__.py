"""API Provider implementations for web article summarization."""

from .base import BaseAPIProvider
from .gemini import GeminiAPI

__all__ = ["BaseAPIProvider", "GeminiAPI"]
