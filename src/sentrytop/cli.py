"""Command line entry point for sentrytop."""

import asyncio
import logging

import click
import httpx
from rich.console import Console
from rich.table import Table
from rich.text import Text

from sentrytop import __version__
from sentrytop.app import SentrytopApp
from sentrytop.config import DEFAULT_BASE_URL, DashboardConfig
from sentrytop.fetcher import DataSource, SnapshotFetcher
from sentrytop.logs import configure_logging
from sentrytop.render import CONNECTIONS_TABLE, HOSTS_TABLE
from sentrytop.scheduler import RefreshScheduler
from sentrytop.series import build_charts
from sentrytop.sink import RecordingSink

logger = logging.getLogger(__name__)


async def refresh_once(config: DashboardConfig, transport: httpx.AsyncBaseTransport | None = None):
    """Run a single refresh cycle into a RecordingSink and return it with the scheduler."""
    sink = RecordingSink()
    async with httpx.AsyncClient(
        base_url=config.base_url,
        timeout=config.request_timeout,
        transport=transport,
    ) as client:
        scheduler = RefreshScheduler(
            SnapshotFetcher(client, config.connection_limit, config.host_limit),
            sink,
            charts=build_charts(capacity=config.window_capacity),
        )
        await asyncio.gather(*scheduler.refresh())
    return sink, scheduler


def print_snapshot(console: Console, sink: RecordingSink) -> None:
    """Print everything one refresh rendered."""
    fields = Table(title="Metrics & System", show_header=False)
    fields.add_column("Slot", style="cyan")
    fields.add_column("Value")
    for slot_id, text in sink.fields.items():
        fields.add_row(slot_id, Text(text))
    console.print(fields)

    headers = {
        CONNECTIONS_TABLE: ("Source", "Destination", "Protocol", "Bytes", "Packets"),
        HOSTS_TABLE: ("IP Address", "Bytes"),
    }
    for table_id, columns in headers.items():
        if table_id not in sink.tables:
            continue
        table = Table(title=table_id.removesuffix("-table-body").capitalize())
        for column in columns:
            table.add_column(column)
        for row in sink.tables[table_id]:
            table.add_row(*(Text(cell) for cell in row))
        console.print(table)


@click.command()
@click.option("--url", "base_url", default=DEFAULT_BASE_URL, show_default=True,
              envvar="SENTRYTOP_URL", help="Base URL of the monitoring backend.")
@click.option("--interval", "refresh_interval", type=float, default=2.0, show_default=True,
              envvar="SENTRYTOP_INTERVAL", help="Seconds between refreshes.")
@click.option("--connections", "connection_limit", type=int, default=10, show_default=True,
              envvar="SENTRYTOP_CONNECTIONS", help="Top connections to request.")
@click.option("--hosts", "host_limit", type=int, default=10, show_default=True,
              envvar="SENTRYTOP_HOSTS", help="Top hosts to request.")
@click.option("--window", "window_capacity", type=int, default=30, show_default=True,
              envvar="SENTRYTOP_WINDOW", help="Points kept per chart series.")
@click.option("--timeout", "request_timeout", type=float, default=5.0, show_default=True,
              envvar="SENTRYTOP_TIMEOUT", help="Per-request timeout in seconds.")
@click.option("--drop-stale/--last-write-wins", default=False, show_default=True,
              envvar="SENTRYTOP_DROP_STALE", help="Discard responses older than one already shown.")
@click.option("--log-file", type=click.Path(dir_okay=False), default=None,
              envvar="SENTRYTOP_LOG_FILE", help="Write diagnostics to this file.")
@click.option("--log-level", default="WARNING", show_default=True,
              type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
              envvar="SENTRYTOP_LOG_LEVEL")
@click.option("--once", is_flag=True, help="Fetch one snapshot, print it and exit.")
@click.version_option(__version__, prog_name="sentrytop")
def main(once: bool, **options) -> None:
    """Live dashboard for a network monitoring backend."""
    try:
        config = DashboardConfig(**options).validate()
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc

    if once:
        configure_logging(config.log_level, config.log_file, stderr=True)
        sink, scheduler = asyncio.run(refresh_once(config))
        print_snapshot(Console(), sink)
        if all(scheduler.stats[source].successes == 0 for source in DataSource):
            raise click.ClickException(f"no data from {config.base_url}")
        return

    configure_logging(config.log_level, config.log_file)
    logger.info("Starting dashboard against %s", config.base_url)

    SentrytopApp(config).run()


if __name__ == "__main__":
    main()
