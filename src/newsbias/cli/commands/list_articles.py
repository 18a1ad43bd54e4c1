"""List stored articles."""

from typing import Optional

import click

from newsbias.core.config import Config
from newsbias.core.enums import Category
from newsbias.database import ArticleRepository, DatabaseConnection
from newsbias.database.repository import DEFAULT_LIST_LIMIT
from newsbias.utils.exceptions import DatabaseError
from newsbias.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


@click.command(name="list")
@click.option(
    "--category",
    type=click.Choice([c.value for c in Category]),
    help="Only show articles in this category",
)
@click.option(
    "--limit",
    type=click.IntRange(min=1),
    default=DEFAULT_LIST_LIMIT,
    show_default=True,
    help="Maximum number of articles to show",
)
def list_articles(category: Optional[str], limit: int) -> None:
    """Browse stored articles, newest first.

    Examples:
        newsbias list
        newsbias list --category business --limit 5
    """
    try:
        config = Config()  # type: ignore
        config.validate_paths()
    except Exception as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        raise click.Abort()

    setup_logging(log_level=config.log_level, log_format=config.log_format)

    try:
        with DatabaseConnection(config.db_path) as db:
            articles = ArticleRepository(db).list_recent(
                category=Category(category) if category else None,
                limit=limit,
            )
    except DatabaseError as e:
        click.echo(f"\nFailed to list articles: {e}", err=True)
        logger.error("list_failed", category=category, error=str(e))
        raise click.Abort()

    if not articles:
        click.echo("No articles stored yet.")
        return

    click.echo(f"{'Published':<17} {'Category':<9} {'Lean':<7} {'Bias':>4}  {'Source':<20} Title")
    click.echo("-" * 100)
    for article in articles:
        trending = " *" if article.is_trending else ""
        click.echo(
            f"{article.published_at:%Y-%m-%d %H:%M} {article.category.value:<9} "
            f"{article.political_lean.value:<7} {article.bias_score.overall:>4}  "
            f"{article.source_name[:20]:<20} {article.title}{trending}"
        )
