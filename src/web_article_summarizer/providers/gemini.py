"""Google Gemini provider over the Generative Language REST API.

Endpoints:
    GET  {base}/{version}/models                      catalog, paged with nextPageToken
    POST {base}/{version}/models/{model}:generateContent

Error mapping:
    - 429: RateLimitError
    - 404: ModelNotFoundError
    - other non-2xx, transport failures, malformed or empty bodies: ProviderError
"""

import os

import requests

from ..exceptions import ConfigurationError, ModelNotFoundError, ProviderError, RateLimitError
from ..logger import get_logger
from ..models import ModelDescriptor
from .base import BaseAPIProvider

logger = get_logger()

GEMINI_API_BASE_URL = "https://generativelanguage.googleapis.com"
GENERATION_METHOD = "generateContent"
MODEL_PREFIX = "models/"
DEFAULT_TIMEOUT = 60.0


def _dict(value) -> dict:
    return value if isinstance(value, dict) else {}


def _list(value) -> list:
    return value if isinstance(value, list) else []


def normalize_model_name(name: str) -> str:
    """Strip the ``models/`` prefix the catalog puts on every name."""
    return name[len(MODEL_PREFIX):] if name.startswith(MODEL_PREFIX) else name


class GeminiAPI(BaseAPIProvider):
    """Gemini API client."""

    def __init__(
        self,
        api_key: str | None = None,
        api_version: str = "v1beta",
        base_url: str = GEMINI_API_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ):
        """
        Initialize Gemini client.

        Args:
            api_key: Gemini API key. If not provided, reads GEMINI_API_KEY or GOOGLE_API_KEY.
            api_version: REST API version segment, e.g. "v1beta" or "v1"
            base_url: API base URL
            timeout: Request timeout in seconds
            session: Optional requests session. If None, creates new one.

        Raises:
            ConfigurationError: If no API key is available
        """
        self._api_key = api_key or os.environ.get("GEMINI_API_KEY") or os.environ.get("GOOGLE_API_KEY")
        if not self._api_key:
            raise ConfigurationError(
                "Gemini API key required. Provide api_key or set GEMINI_API_KEY."
            )
        self.api_version = api_version
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def name(self) -> str:
        return "gemini"

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{self.api_version}/{path}"

    def _request(self, method: str, url: str, model_name: str | None = None, **kwargs) -> dict:
        headers = {"x-goog-api-key": self._api_key, "Content-Type": "application/json"}
        try:
            response = self.session.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise ProviderError(f"Request to Gemini failed: {e}") from e

        if response.status_code == 429:
            raise RateLimitError(
                f"Gemini rate limit exceeded: {self._error_message(response)}", status_code=429
            )
        if response.status_code == 404 and model_name is not None:
            raise ModelNotFoundError(
                f"Gemini model not found: {model_name}", model_name=model_name
            )
        if not 200 <= response.status_code < 300:
            raise ProviderError(
                f"Gemini API error {response.status_code}: {self._error_message(response)}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError("Gemini returned a non-JSON response") from e
        if not isinstance(data, dict):
            raise ProviderError(
                f"Gemini returned an unexpected response body ({type(data).__name__} instead of object)"
            )
        return data

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            return str(response.json()["error"]["message"])
        except (ValueError, KeyError, TypeError):
            return response.text[:200]

    def list_models(self) -> list[ModelDescriptor]:
        """
        List the models currently exposed by the API.

        Returns:
            Model descriptors in catalog order
        """
        models: list[ModelDescriptor] = []
        params: dict = {"pageSize": 1000}
        while True:
            data = self._request("GET", self._url("models"), params=params)
            entries = _list(data.get("models"))
            if any(not isinstance(entry, dict) or not isinstance(entry.get("name"), str) for entry in entries):
                raise ProviderError("Gemini returned a malformed model catalog")
            for entry in entries:
                methods = _list(entry.get("supportedGenerationMethods"))
                display_name = entry.get("displayName")
                models.append(
                    ModelDescriptor(
                        name=normalize_model_name(entry["name"]),
                        supports_generation=GENERATION_METHOD in methods,
                        display_name=display_name if isinstance(display_name, str) else None,
                    )
                )
            token = data.get("nextPageToken")
            if not token or not isinstance(token, str):
                break
            params = {"pageSize": 1000, "pageToken": token}

        logger.debug("Model catalog fetched", extra={"model_count": len(models)})
        return models

    def generate(self, prompt: str, model_name: str) -> str:
        """
        Generate text with a Gemini model.

        Args:
            prompt: Input prompt
            model_name: Model identifier, with or without the ``models/`` prefix

        Returns:
            Generated text

        Raises:
            RateLimitError: On HTTP 429
            ModelNotFoundError: On HTTP 404
            ProviderError: On any other failure or an empty answer
        """
        model_name = normalize_model_name(model_name)
        payload = {"contents": [{"parts": [{"text": prompt}]}]}
        data = self._request(
            "POST", self._url(f"{MODEL_PREFIX}{model_name}:{GENERATION_METHOD}"),
            model_name=model_name, json=payload,
        )

        candidates = [c for c in _list(data.get("candidates")) if isinstance(c, dict)]
        if not candidates:
            reason = _dict(data.get("promptFeedback")).get("blockReason", "no candidates")
            raise ProviderError(f"Gemini returned no answer ({reason})")

        parts = _list(_dict(candidates[0].get("content")).get("parts"))
        texts = [_dict(part).get("text") for part in parts]
        text = "".join(t for t in texts if isinstance(t, str)).strip()
        if not text:
            finish = candidates[0].get("finishReason", "unknown")
            raise ProviderError(f"Gemini returned an empty answer (finishReason={finish})")
        return text
