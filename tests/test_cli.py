"""Tests for the command-line entry point."""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from web_article_summarizer.cli import load_items, main
from web_article_summarizer.config import Config
from web_article_summarizer.exceptions import ConfigurationError
from web_article_summarizer.models import ArticleRecord, NewsItem


@pytest.fixture
def cli_runner():
    return CliRunner()


@pytest.fixture
def input_csv(tmp_path):
    path = tmp_path / "items.csv"
    path.write_text(
        "headline,url,keyword,published\n"
        "Clinic opens,http://example/1,mental health,2024-03-05\n"
        "Title only,,aging society,\n",
        encoding="utf-8",
    )
    return path


def test_load_items(input_csv):
    config = Config(title_column="headline", link_column="url", keyword_column="keyword", date_column="published")

    items = load_items(input_csv, config)

    assert items == [
        NewsItem("Clinic opens", "http://example/1", "mental health", "2024-03-05"),
        NewsItem("Title only", None, "aging society", None),
    ]


def test_load_items_missing_column(input_csv):
    with pytest.raises(ValueError, match="title"):
        load_items(input_csv, Config(link_column="url"))


def test_prints_records_as_json(cli_runner, input_csv, monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    records = [
        ArticleRecord("Clinic opens", "http://example/1", "Summary one."),
        ArticleRecord("Title only", "", "Could not load the article page (timeout).", status="error"),
    ]

    with patch("web_article_summarizer.cli.run", return_value=records) as mock_run:
        result = cli_runner.invoke(
            main,
            [str(input_csv), "--title-column", "headline", "--link-column", "url", "--log-level", "ERROR"],
        )

    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert [r["analysis"] for r in data] == ["Summary one.", "Could not load the article page (timeout)."]
    assert data[1]["status"] == "error"
    items, config = mock_run.call_args.args
    assert [i.title for i in items] == ["Clinic opens", "Title only"]
    assert config.api_key == "test-key"


def test_limit_option(cli_runner, input_csv):
    with patch("web_article_summarizer.cli.run", return_value=[]) as mock_run:
        result = cli_runner.invoke(
            main, [str(input_csv), "--title-column", "headline", "--link-column", "url", "--limit", "1"]
        )

    assert result.exit_code == 0, result.output
    items, _ = mock_run.call_args.args
    assert len(items) == 1


def test_missing_column_is_usage_error(cli_runner, input_csv):
    result = cli_runner.invoke(main, [str(input_csv)])

    assert result.exit_code == 2
    assert "Columns not found" in result.output


def test_missing_api_key(cli_runner, input_csv):
    with patch("web_article_summarizer.cli.run", side_effect=ConfigurationError("Gemini API key required")):
        result = cli_runner.invoke(main, [str(input_csv), "--title-column", "headline", "--link-column", "url"])

    assert result.exit_code == 1
    assert "Gemini API key required" in result.output


def test_invalid_environment_is_a_usage_error(cli_runner, input_csv, monkeypatch):
    monkeypatch.setenv("SUMMARIZER_TIMEOUT_MS", "0")

    with patch("web_article_summarizer.cli.run") as mock_run:
        result = cli_runner.invoke(main, [str(input_csv), "--title-column", "headline", "--link-column", "url"])

    assert result.exit_code == 2
    assert "timeout_ms" in result.output
    mock_run.assert_not_called()
