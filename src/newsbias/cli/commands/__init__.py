"""CLI commands for newsbias."""

from newsbias.cli.commands.analyze import analyze
from newsbias.cli.commands.list_articles import list_articles
from newsbias.cli.commands.run import run
from newsbias.cli.commands.sources import sources
from newsbias.cli.commands.stats import stats

__all__ = ["run", "analyze", "stats", "sources", "list_articles"]
