"""Custom exceptions for web article summarizer."""


class WebArticleSummarizerError(Exception):
    """Base exception for all web article summarizer errors."""


class ConfigurationError(WebArticleSummarizerError):
    """Raised when required configuration (such as an API key) is missing."""


class ProviderError(WebArticleSummarizerError):
    """Raised when the LLM provider returns an error or an unusable response."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class RateLimitError(ProviderError):
    """Raised when the provider signals that the request quota is exhausted."""


class ModelNotFoundError(ProviderError):
    """Raised when the requested model identifier is unknown to the provider."""

    def __init__(self, message: str, model_name: str, status_code: int | None = 404):
        super().__init__(message, status_code=status_code)
        self.model_name = model_name
