"""Tests for the bounded HTML fetcher."""

from unittest.mock import MagicMock

import pytest
import requests

from web_article_summarizer.config import DEFAULT_USER_AGENT, Config
from web_article_summarizer.fetcher import HTMLFetcher
from web_article_summarizer.models import FetchFailure, FetchSuccess, NetworkErrorKind

from .conftest import make_response


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def fetcher(session):
    return HTMLFetcher(Config(timeout_ms=15000), session=session)


def test_success_returns_body(fetcher, session):
    session.get.return_value = make_response(body="<html>ok</html>")

    result = fetcher.fetch("http://example/x")

    assert result == FetchSuccess(body="<html>ok</html>")
    session.get.assert_called_once_with(
        "http://example/x", timeout=15.0, headers={"User-Agent": DEFAULT_USER_AGENT}
    )


def test_explicit_timeout_and_headers(fetcher, session):
    session.get.return_value = make_response(body="x")

    fetcher.fetch("http://example/x", timeout_ms=2500, headers={"User-Agent": "test"})

    session.get.assert_called_once_with(
        "http://example/x", timeout=2.5, headers={"User-Agent": "test"}
    )


def test_decodes_body_without_declared_charset(fetcher, session):
    response = make_response(content_type="text/html")
    response._content = ("<p>정신 건강 뉴스 기사 본문입니다. 고령화 사회와 디지털 헬스케어.</p>" * 10).encode(
        "utf-8"
    )
    response.encoding = None
    session.get.return_value = response

    result = fetcher.fetch("http://example/ko")

    assert "정신 건강" in result.body


@pytest.mark.parametrize(
    "error, kind",
    [
        (requests.Timeout("read timed out"), NetworkErrorKind.TIMEOUT),
        (requests.ConnectTimeout("connect timed out"), NetworkErrorKind.TIMEOUT),
        (requests.ConnectionError("refused"), NetworkErrorKind.CONNECTION),
        (requests.TooManyRedirects("loop"), NetworkErrorKind.UNKNOWN),
    ],
)
def test_transport_errors_are_classified(fetcher, session, error, kind):
    session.get.side_effect = error

    result = fetcher.fetch("http://example/x")

    assert isinstance(result, FetchFailure)
    assert result.kind is kind
    assert result.label == kind.value


def test_non_2xx_is_http_status_failure(fetcher, session):
    session.get.return_value = make_response(status=503, reason="Service Unavailable")

    result = fetcher.fetch("http://example/x")

    assert result == FetchFailure(
        kind=NetworkErrorKind.HTTP_STATUS, detail="503 Service Unavailable", status_code=503
    )
    assert result.label == "http_status:503"
