"""Summarization calls that survive rate limits and retired models."""

import time
from collections.abc import Callable

from .exceptions import ModelNotFoundError, ProviderError, RateLimitError
from .logger import get_logger
from .models import (
    ModelUnavailable,
    OtherError,
    RateLimited,
    SummarizationOutcome,
    SummarizationRequest,
    Summary,
)
from .providers.base import BaseAPIProvider

logger = get_logger()


class SummarizationClient:
    """Send prompts to a provider with bounded retry behaviour.

    Per call:
        - a rate-limited answer is retried after a flat ``backoff_ms`` wait,
          until ``max_attempts`` calls in total have been rate limited;
        - a model-not-found answer switches to ``fallback_model`` once, unless
          the failing model already is the fallback;
        - any other provider error ends the call.

    So a call makes at most ``max_attempts`` rate-limited requests plus one
    model switch, and sleeps ``backoff_ms`` once per rate-limit retry.
    """

    def __init__(
        self,
        provider: BaseAPIProvider,
        fallback_model: str,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize summarization client.

        Args:
            provider: LLM provider to call
            fallback_model: Model to switch to when the requested one is not found
            sleep: Sleep function taking seconds. Injectable for tests.
        """
        self.provider = provider
        self.fallback_model = fallback_model
        self.sleep = sleep

    def summarize(
        self, text: str, model_name: str, max_attempts: int, backoff_ms: int
    ) -> SummarizationOutcome:
        """
        Summarize a prompt.

        Args:
            text: Prompt to send
            model_name: Model to call first
            max_attempts: Maximum number of calls that may be answered with a rate limit
            backoff_ms: Flat wait between rate-limited calls, in milliseconds

        Returns:
            Summary, RateLimited, ModelUnavailable or OtherError
        """
        max_attempts = max(1, max_attempts)
        request = SummarizationRequest(prompt=text, model_name=model_name)
        rate_limited = 0
        switched = False

        while True:
            try:
                summary = self.provider.generate(request.prompt, request.model_name)
            except RateLimitError as e:
                rate_limited += 1
                if rate_limited >= max_attempts:
                    logger.error(
                        "Rate limit retries exhausted",
                        extra={"model": request.model_name, "attempt": rate_limited},
                    )
                    return RateLimited(attempts=rate_limited)
                logger.warning(
                    "Rate limited, backing off",
                    extra={
                        "model": request.model_name,
                        "attempt": rate_limited,
                        "backoff_ms": backoff_ms,
                        "error": str(e),
                    },
                )
                self.sleep(backoff_ms / 1000)
                continue
            except ModelNotFoundError as e:
                if switched or request.model_name == self.fallback_model:
                    logger.error(
                        "Model unavailable", extra={"model": request.model_name, "error": str(e)}
                    )
                    return ModelUnavailable(model_name=request.model_name)
                logger.warning(
                    "Model not found, switching to fallback",
                    extra={"model": request.model_name, "fallback": self.fallback_model},
                )
                request = SummarizationRequest(prompt=text, model_name=self.fallback_model)
                switched = True
                continue
            except ProviderError as e:
                logger.error(
                    "Summarization failed", extra={"model": request.model_name, "error": str(e)}
                )
                return OtherError(detail=str(e))

            logger.info("Summary generated", extra={"model": request.model_name})
            return Summary(text=summary, model_name=request.model_name)
