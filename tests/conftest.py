"""Shared fixtures for web article summarizer tests."""

import os
from collections import defaultdict, deque

import pytest
import requests

from web_article_summarizer.config import Config
from web_article_summarizer.exceptions import ProviderError
from web_article_summarizer.logger import get_logger
from web_article_summarizer.models import ModelDescriptor
from web_article_summarizer.providers.base import BaseAPIProvider


class FakeProvider(BaseAPIProvider):
    """Provider whose answers are scripted per model.

    Each scripted answer is either a string (returned) or an exception
    (raised). When a model's script runs out, ``default`` is used.
    """

    def __init__(self, scripts=None, default="Summary", catalog=None, catalog_error=None):
        self.scripts = defaultdict(deque)
        for model, answers in (scripts or {}).items():
            self.scripts[model].extend(answers)
        self.default = default
        self.catalog = catalog if catalog is not None else [
            ModelDescriptor(name="gemini-2.0-flash", supports_generation=True)
        ]
        self.catalog_error = catalog_error
        self.calls = []
        self.catalog_calls = 0

    @property
    def name(self) -> str:
        return "fake"

    def list_models(self):
        self.catalog_calls += 1
        if self.catalog_error:
            raise self.catalog_error
        return list(self.catalog)

    def generate(self, prompt, model_name):
        self.calls.append((prompt, model_name))
        script = self.scripts[model_name]
        answer = script.popleft() if script else self.default
        if isinstance(answer, Exception):
            raise answer
        if callable(answer):
            return answer(prompt)
        return answer


def make_response(status=200, body="", content_type="text/html; charset=utf-8", reason="OK"):
    """Build a real requests.Response without touching the network."""
    response = requests.Response()
    response.status_code = status
    response.reason = reason
    response._content = body.encode("utf-8")
    response.headers["Content-Type"] = content_type
    response.encoding = "utf-8"
    return response


def article_page(selector_html: str) -> str:
    return f"<html><head><title>t</title></head><body><nav>Menu</nav>{selector_html}</body></html>"


LONG_TEXT = (
    "The city council approved a new plan on Monday to expand mental health "
    "services for older residents across every district."
)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep the developer's env vars and .env file out of Config."""
    for key in list(os.environ):
        if key.startswith(("SUMMARIZER_", "GEMINI_")) or key == "GOOGLE_API_KEY":
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo setup_logging so handlers never outlive the stream they were bound to."""
    logger = get_logger()
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def config():
    return Config(
        api_key="test-key",
        backoff_ms=10,
        inter_item_delay_ms=0,
        max_rate_limit_retries=3,
    )


@pytest.fixture
def fake_provider():
    return FakeProvider()


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def record_sleep(sleeps):
    return sleeps.append


@pytest.fixture
def provider_error():
    return ProviderError("boom", status_code=500)
