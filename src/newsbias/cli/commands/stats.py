"""Statistics command."""

import click

from newsbias.core.config import Config
from newsbias.database import ArticleRepository, DatabaseConnection
from newsbias.utils.exceptions import DatabaseError
from newsbias.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


@click.command()
def stats() -> None:
    """Show stored article statistics.

    Examples:
        newsbias stats
    """
    # Load configuration
    try:
        config = Config()  # type: ignore
        config.validate_paths()
    except Exception as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        raise click.Abort()

    # Setup logging
    setup_logging(log_level=config.log_level, log_format=config.log_format)

    click.echo("newsbias Statistics")
    click.echo("=" * 50)

    db = DatabaseConnection(config.db_path)
    try:
        repo_stats = ArticleRepository(db).get_stats()
    except DatabaseError as e:
        click.echo(f"\nFailed to load statistics: {e}", err=True)
        logger.error("stats_failed", error=str(e))
        raise click.Abort()
    finally:
        db.close()

    click.echo(f"  Total articles:   {repo_stats.total_count:>6}")
    click.echo(f"  Last 24 hours:    {repo_stats.recent_count:>6}")
    click.echo(f"  Trending:         {repo_stats.trending_count:>6}")
    click.echo(f"  Analysis requests:{repo_stats.analysis_requests:>6}")

    if repo_stats.category_histogram:
        click.echo("\nBy Category:")
        click.echo("-" * 50)
        for category, count in sorted(repo_stats.category_histogram.items(), key=lambda kv: (-kv[1], kv[0])):
            click.echo(f"  {category.capitalize():<15} {count:>6}")
