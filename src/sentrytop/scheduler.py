"""Refresh scheduler driving fetch and render on a fixed cadence."""

import asyncio
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sentrytop.errors import FetchError
from sentrytop.fetcher import DataSource, SnapshotFetcher
from sentrytop.formatters import format_clock
from sentrytop.render import (
    project_metrics,
    render_connections,
    render_hosts,
    render_metric_fields,
    render_system_info,
)
from sentrytop.series import ChartState, build_charts
from sentrytop.sink import RenderSink

logger = logging.getLogger(__name__)

MIN_INTERVAL = 0.1


@dataclass(slots=True)
class SourceStats:
    """Per-source request outcome counters."""

    requests: int = 0
    successes: int = 0
    failures: int = 0
    dropped: int = 0


class RefreshScheduler:
    """
    Polls every data source on a fixed interval and renders the results.

    Runs as tasks on the current asyncio loop. Each refresh dispatches one
    independent task per source and does not wait for the previous refresh
    to finish, so a slow source can render after a newer one. With
    ``drop_stale`` set, a response older than the last one rendered for the
    same source is discarded instead.
    """

    def __init__(
        self,
        fetcher: SnapshotFetcher,
        sink: RenderSink,
        charts: Iterable[ChartState] | None = None,
        interval: float = 2.0,
        drop_stale: bool = False,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """
        Initialize the RefreshScheduler.

        Args:
            fetcher: Source of snapshots.
            sink: Surface the snapshots are rendered into.
            charts: Chart state fed by the metrics source. Default: CPU, memory, network.
            interval: Seconds between refreshes. Default 2.0s.
            drop_stale: Discard out-of-order responses per source.
            clock: Provides the wall-clock time used for chart labels.
        """
        self._fetcher = fetcher
        self._sink = sink
        self._charts = list(charts) if charts is not None else build_charts()
        self._interval = max(MIN_INTERVAL, interval)
        self._drop_stale = drop_stale
        self._clock = clock
        self._timer: asyncio.Task[None] | None = None
        self._pending: set[asyncio.Task[None]] = set()
        self._issued = {source: 0 for source in DataSource}
        self._rendered = {source: 0 for source in DataSource}
        self.cycles = 0
        self.stats = {source: SourceStats() for source in DataSource}

    @property
    def interval(self) -> float:
        return self._interval

    @interval.setter
    def interval(self, value: float) -> None:
        self._interval = max(MIN_INTERVAL, value)  # takes effect after the current wait

    @property
    def charts(self) -> list[ChartState]:
        return self._charts

    @property
    def is_running(self) -> bool:
        return self._timer is not None and not self._timer.done()

    @property
    def pending(self) -> frozenset[asyncio.Task[None]]:
        """Fetch tasks that have not completed yet."""
        return frozenset(self._pending)

    def start(self) -> None:
        """Refresh immediately, then every ``interval`` seconds until stopped."""
        if self.is_running:
            return

        self.refresh()
        self._timer = asyncio.get_running_loop().create_task(
            self._tick_loop(), name="RefreshScheduler"
        )

    def stop(self) -> None:
        """Cancel the timer and every in-flight fetch."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        for task in list(self._pending):
            task.cancel()

    async def aclose(self) -> None:
        """Stop and wait for the cancelled tasks to unwind."""
        tasks = list(self._pending)
        timer = self._timer
        self.stop()
        if timer is not None:
            tasks.append(timer)
        await asyncio.gather(*tasks, return_exceptions=True)

    def refresh(self) -> list[asyncio.Task[None]]:
        """Dispatch one fetch per source and return the created tasks."""
        loop = asyncio.get_running_loop()
        self.cycles += 1
        tasks = []
        for source in DataSource:
            self._issued[source] += 1
            task = loop.create_task(
                self._update(source, self._issued[source]),
                name=f"fetch-{source.value}",
            )
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
            tasks.append(task)
        return tasks

    async def _tick_loop(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            self.refresh()

    async def _update(self, source: DataSource, sequence: int) -> None:
        stats = self.stats[source]
        stats.requests += 1
        try:
            snapshot = await self._fetcher.fetch(source)
        except FetchError as exc:
            stats.failures += 1
            logger.warning("Error fetching %s: %s", source.value, exc)
            return

        if self._drop_stale and sequence < self._rendered[source]:
            stats.dropped += 1
            logger.debug(
                "Dropping stale %s response #%d (already rendered #%d)",
                source.value,
                sequence,
                self._rendered[source],
            )
            return
        self._rendered[source] = max(self._rendered[source], sequence)

        try:
            self._render(source, snapshot)
        except Exception:
            stats.failures += 1
            logger.exception("Error rendering %s", source.value)
            return
        stats.successes += 1

    def _render(self, source: DataSource, snapshot: Any) -> None:
        if source is DataSource.METRICS:
            render_metric_fields(self._sink, snapshot)
            project_metrics(self._charts, snapshot, self._sink, format_clock(self._clock()))
        elif source is DataSource.CONNECTIONS:
            render_connections(self._sink, snapshot)
        elif source is DataSource.HOSTS:
            render_hosts(self._sink, snapshot)
        else:
            render_system_info(self._sink, snapshot)
