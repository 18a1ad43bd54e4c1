"""Analyze a single article URL."""

import asyncio

import click

from newsbias.core.article import Article
from newsbias.core.config import Config
from newsbias.database.connection import DatabaseConnection
from newsbias.pipeline.factory import build_components
from newsbias.utils.exceptions import InvalidURLError, NewsBiasError
from newsbias.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


@click.command()
@click.argument("url")
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    help="Print the full analysis as JSON",
)
def analyze(url: str, as_json: bool) -> None:
    """Extract and score one article, reusing a stored analysis if present.

    Examples:
        newsbias analyze https://www.thehindu.com/news/national/article1.ece
        newsbias analyze --json https://indianexpress.com/article/india/x/
    """
    try:
        config = Config()  # type: ignore
        config.validate_paths()
    except Exception as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        raise click.Abort()

    setup_logging(log_level=config.log_level, log_format=config.log_format, log_dir=config.log_dir)

    db = DatabaseConnection(config.db_path)

    try:
        components = build_components(config, db)
        response = asyncio.run(components.on_demand.analyze_url(url))
    except InvalidURLError as e:
        raise click.BadParameter(str(e), param_hint="URL")
    except NewsBiasError as e:
        click.echo(f"\nAnalysis failed: {e}", err=True)
        logger.error("analyze_failed", url=url, error=str(e))
        raise click.Abort()
    finally:
        db.close()

    if as_json:
        click.echo(response.model_dump_json(indent=2))
        return

    _display_article(response.article, response.cached)


def _display_article(article: Article, cached: bool) -> None:
    score = article.bias_score
    sentiment = article.sentiment
    credibility = article.credibility

    click.echo(f"\n{article.title}")
    click.echo("=" * 70)
    click.echo(f"Source:    {article.source_name} ({article.extraction_method.value})")
    click.echo(f"Author:    {article.author}")
    click.echo(f"Category:  {article.category.value}  |  Lean: {article.political_lean.value}"
               f"  |  Party: {article.party_affinity.value}")
    click.echo(f"Reading:   {article.word_count} words, {article.read_time_minutes} min")
    if cached:
        click.echo(f"Cached:    yes ({article.view_count} views)")

    click.echo("\nBias Score:")
    click.echo(f"  Overall:    {score.overall:>3}")
    click.echo(f"  Emotional:  {score.emotional:>3}")
    click.echo(f"  Factual:    {score.factual:>3}")
    click.echo(f"  Balanced:   {score.balanced:>3}")

    click.echo("\nSentiment:")
    click.echo(f"  Positive {sentiment.positive}%  |  Neutral {sentiment.neutral}%"
               f"  |  Negative {sentiment.negative}%")

    click.echo("\nCredibility:")
    click.echo(f"  Source reliability: {credibility.source_reliability:>3}")
    click.echo(f"  Fact checking:      {credibility.fact_checking:>3}")
    click.echo(f"  Transparency:       {credibility.transparency:>3}")
    click.echo(f"  Author expertise:   {credibility.author_expertise:>3}")

    if article.bias_indicators:
        click.echo("\nIndicators:")
        for indicator in article.bias_indicators:
            click.echo(f"  [{indicator.impact.value:<6}] {indicator.type}: {indicator.description}")
            for example in indicator.examples:
                click.echo(f"           - {example}")

    click.echo(f"\n{article.excerpt}")
