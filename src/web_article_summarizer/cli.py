"""Command-line entry point."""

import json
from pathlib import Path

import click
import pandas as pd

from .config import Config
from .exceptions import ConfigurationError
from .logger import get_logger, setup_logging
from .models import NewsItem
from .pipeline import run

logger = get_logger()


def _cell(row: pd.Series, column: str | None) -> str | None:
    if not column:
        return None
    value = row.get(column)
    if value is None or pd.isna(value):
        return None
    value = str(value).strip()
    return value or None


def load_items(input_csv: str | Path, config: Config) -> list[NewsItem]:
    """
    Load news items from a CSV file.

    Args:
        input_csv: Path to input CSV file
        config: Configuration with column mappings

    Returns:
        News items in file order

    Raises:
        ValueError: If a configured column is missing
    """
    df = pd.read_csv(input_csv, dtype=str)
    logger.info("CSV loaded", extra={"rows": len(df), "columns": list(df.columns)})

    required = [config.title_column, config.link_column]
    optional = [c for c in (config.keyword_column, config.date_column) if c]
    missing = [col for col in required + optional if col not in df.columns]
    if missing:
        raise ValueError(f"Columns not found in CSV: {missing}")

    return [
        NewsItem(
            title=_cell(row, config.title_column) or "",
            link=_cell(row, config.link_column),
            keyword=_cell(row, config.keyword_column),
            date=_cell(row, config.date_column),
        )
        for _, row in df.iterrows()
    ]


@click.command()
@click.argument("input_csv", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--title-column", default=None, help="Column holding article titles.")
@click.option("--link-column", default=None, help="Column holding article URLs.")
@click.option("--keyword-column", default=None, help="Optional column holding the search keyword.")
@click.option("--date-column", default=None, help="Optional column holding the publication date.")
@click.option("--limit", type=click.IntRange(min=1), default=None, help="Process only the first N items.")
@click.option("--log-level", default=None, help="Logging level (default: LOG_LEVEL env var or INFO).")
def main(input_csv, title_column, link_column, keyword_column, date_column, limit, log_level):
    """Summarize the articles listed in INPUT_CSV and print the records as JSON."""
    setup_logging(log_level)

    try:
        config = Config.from_env(
            title_column=title_column,
            link_column=link_column,
            keyword_column=keyword_column,
            date_column=date_column,
        )
        items = load_items(input_csv, config)
    except ValueError as e:
        raise click.UsageError(str(e)) from e

    if limit:
        items = items[:limit]

    try:
        records = run(items, config)
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e

    click.echo(json.dumps([r.to_dict() for r in records], ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
