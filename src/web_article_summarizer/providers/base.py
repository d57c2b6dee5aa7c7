"""Base class for LLM API providers."""

from abc import ABC, abstractmethod

from ..models import ModelDescriptor


class BaseAPIProvider(ABC):
    """Abstract base class for LLM API providers.

    Implementations raise ``RateLimitError`` when the quota is exhausted,
    ``ModelNotFoundError`` when the model identifier is unknown, and
    ``ProviderError`` for anything else.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name for identification."""

    @abstractmethod
    def list_models(self) -> list[ModelDescriptor]:
        """
        Query the provider's model catalog.

        Returns:
            Descriptors of the currently available models
        """

    @abstractmethod
    def generate(self, prompt: str, model_name: str) -> str:
        """
        Generate text for a prompt.

        Args:
            prompt: Input prompt
            model_name: Model identifier to call

        Returns:
            Generated text
        """
