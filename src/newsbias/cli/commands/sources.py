"""List configured news sources."""

import click

from newsbias.core.config import Config
from newsbias.services.source_registry import SourceRegistry
from newsbias.utils.exceptions import ConfigurationError


@click.command()
@click.option(
    "--feeds",
    "show_feeds",
    is_flag=True,
    help="Also list each source's feed URLs",
)
def sources(show_feeds: bool) -> None:
    """List the publishers in the source registry.

    Examples:
        newsbias sources
        newsbias sources --feeds
    """
    try:
        config = Config()  # type: ignore
        registry = SourceRegistry.from_data_dir(config.data_dir)
    except (ConfigurationError, ValueError) as e:
        click.echo(f"Error loading sources: {e}", err=True)
        raise click.Abort()

    click.echo(f"{'Source':<24} {'Topic':<10} {'Lean':<13} {'Reliability':>11}  Feeds")
    click.echo("-" * 70)
    for source in registry:
        click.echo(
            f"{source.name:<24} {source.topic_hint.value:<10} {source.bias_prior.value:<13} "
            f"{source.reliability_prior:>11}  {len(source.feed_urls)}"
        )
        if show_feeds:
            for feed_url in source.feed_urls:
                click.echo(f"    {feed_url}")
