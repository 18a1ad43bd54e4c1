"""Run ingestion cycle command."""

import asyncio
from typing import Optional

import click

from newsbias.core.article import CycleStats
from newsbias.core.config import Config
from newsbias.database.connection import DatabaseConnection
from newsbias.pipeline.factory import build_components
from newsbias.pipeline.orchestrator import IngestionOrchestrator
from newsbias.utils.exceptions import CollectionError, NewsBiasError
from newsbias.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


@click.command()
@click.option(
    "--cycles",
    type=click.IntRange(min=0),
    default=1,
    help="Number of cycles to run (0 runs until interrupted)",
)
@click.option(
    "--interval",
    type=click.FloatRange(min=0),
    default=1800.0,
    help="Seconds to wait between cycles",
)
@click.option(
    "--batch-size",
    type=click.IntRange(min=1),
    default=None,
    help="Override the number of articles processed concurrently",
)
def run(cycles: int, interval: float, batch_size: Optional[int]) -> None:
    """Poll every configured feed and store newly analyzed articles.

    Examples:
        newsbias run                          # One ingestion cycle
        newsbias run --cycles 0               # Every 30 minutes until Ctrl+C
        newsbias run --cycles 4 --interval 60 # Four cycles, one minute apart
    """
    # Load configuration
    try:
        config = Config()  # type: ignore
        if batch_size is not None:
            config.batch_size = batch_size
        config.validate_paths()
    except Exception as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        raise click.Abort()

    # Setup logging
    setup_logging(log_level=config.log_level, log_format=config.log_format, log_dir=config.log_dir)

    click.echo("newsbias Ingestion")
    click.echo("=" * 50)
    click.echo(f"Cycles: {cycles or 'until interrupted'}")
    click.echo(f"Batch size: {config.batch_size}")
    click.echo(f"Database: {config.db_path}")
    click.echo("=" * 50)

    db = DatabaseConnection(config.db_path)

    try:
        components = build_components(config, db)
        asyncio.run(_run_cycles(components.orchestrator, cycles, interval))
        click.echo("\nIngestion completed successfully!")

    except KeyboardInterrupt:
        click.echo("\nIngestion interrupted by user.", err=True)
        raise click.Abort()

    except NewsBiasError as e:
        click.echo(f"\nIngestion failed: {e}", err=True)
        logger.error("ingestion_failed", error=str(e), error_type=type(e).__name__)
        raise click.Abort()

    finally:
        db.close()


async def _run_cycles(orchestrator: IngestionOrchestrator, cycles: int, interval: float) -> None:
    completed = 0
    while cycles == 0 or completed < cycles:
        try:
            stats = await orchestrator.run_cycle()
            _display_cycle_results(completed + 1, stats)
        except CollectionError as e:
            # One failed cycle does not end a long-running loop
            if cycles == 1:
                raise
            click.echo(f"\nCycle {completed + 1} failed: {e}", err=True)

        completed += 1
        if cycles == 0 or completed < cycles:
            await asyncio.sleep(interval)


def _display_cycle_results(cycle: int, stats: CycleStats) -> None:
    """Display one cycle's statistics.

    Args:
        cycle: 1-based cycle number.
        stats: Statistics returned by the orchestrator.
    """
    click.echo(f"\nCycle {cycle} Results:")
    click.echo("-" * 50)
    click.echo(f"  Feeds polled:  {stats.feeds_polled:>6} ({stats.feeds_failed} failed)")
    click.echo(f"  Candidates:    {stats.candidates:>6} in {stats.batches} batches")
    click.echo(f"  Processed:     {stats.processed:>6}")
    click.echo(f"    - Saved:       {stats.saved:>6}")
    click.echo(f"    - Duplicates:  {stats.duplicates:>6}")
    click.echo(f"    - Skipped:     {stats.skipped:>6}")
    click.echo(f"    - Errors:      {stats.errors:>6}")

    minutes = int(stats.duration_seconds // 60)
    seconds = stats.duration_seconds % 60
    click.echo(f"  Duration:      {minutes}m {seconds:.1f}s")
