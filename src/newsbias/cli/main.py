"""Command-line interface for newsbias."""

import click

from newsbias.__version__ import __version__
from newsbias.cli.commands import analyze, list_articles, run, sources, stats


@click.group()
@click.version_option(version=__version__, prog_name="newsbias")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """newsbias - political bias analysis for Indian news.

    Polls publisher feeds, extracts article text, scores bias, sentiment
    and credibility, and stores the results in a local SQLite database.
    """
    ctx.ensure_object(dict)


# Register commands
cli.add_command(run)
cli.add_command(analyze)
cli.add_command(stats)
cli.add_command(sources)
cli.add_command(list_articles)


def main() -> None:
    """Main entry point for CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
