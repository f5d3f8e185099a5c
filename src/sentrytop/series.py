"""Sliding-window series state owned by each chart."""

from collections import deque
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from sentrytop.models import MetricSample, SeriesPoint

WINDOW_CAPACITY = 30


class SeriesBuffer:
    """
    Fixed-capacity, insertion-ordered window of SeriesPoint.

    Once full, each append drops the oldest point as part of the same
    operation, so the length never exceeds ``capacity``.
    """

    def __init__(self, capacity: int = WINDOW_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._points: deque[SeriesPoint] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._points.maxlen  # type: ignore[return-value]

    @property
    def is_full(self) -> bool:
        return len(self._points) == self.capacity

    def append(self, point: SeriesPoint) -> None:
        self._points.append(point)

    @property
    def points(self) -> list[SeriesPoint]:
        return list(self._points)

    @property
    def labels(self) -> list[str]:
        return [point.label for point in self._points]

    @property
    def values(self) -> list[float]:
        return [point.value for point in self._points]

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[SeriesPoint]:
        return iter(self._points)


@dataclass(slots=True, frozen=True)
class SeriesSpec:
    """A chart series fed by one metric name."""

    metric_name: str
    label: str


@dataclass(slots=True, frozen=True)
class ChartSpec:
    """Static description of a chart and its series."""

    chart_id: str
    title: str
    series: tuple[SeriesSpec, ...]


CPU_CHART = ChartSpec(
    chart_id="cpu-chart",
    title="CPU Usage %",
    series=(SeriesSpec("cpu.usage", "CPU Usage %"),),
)
MEMORY_CHART = ChartSpec(
    chart_id="memory-chart",
    title="Memory Usage %",
    series=(SeriesSpec("memory.usage_percent", "Memory Usage %"),),
)
NETWORK_CHART = ChartSpec(
    chart_id="network-chart",
    title="Bytes",
    series=(
        SeriesSpec("network.bytes_in_per_sec", "Bytes In"),
        SeriesSpec("network.bytes_out_per_sec", "Bytes Out"),
    ),
)

DEFAULT_CHARTS = (CPU_CHART, MEMORY_CHART, NETWORK_CHART)


class ChartState:
    """
    Owned state of one chart: one buffer per series over a shared label axis.

    All buffers are appended together, so every series stays the same length
    as the label sequence.
    """

    def __init__(self, spec: ChartSpec, capacity: int = WINDOW_CAPACITY) -> None:
        self.spec = spec
        self._buffers = tuple(SeriesBuffer(capacity) for _ in spec.series)

    @property
    def chart_id(self) -> str:
        return self.spec.chart_id

    @property
    def buffers(self) -> tuple[SeriesBuffer, ...]:
        return self._buffers

    @property
    def labels(self) -> list[str]:
        return self._buffers[0].labels

    def __len__(self) -> int:
        return len(self._buffers[0])

    def series_values(self) -> tuple[list[float], ...]:
        return tuple(buffer.values for buffer in self._buffers)

    def push(self, label: str, snapshot: Iterable[MetricSample]) -> None:
        """Append one point per series, using 0.0 for metrics the snapshot lacks."""
        values = {sample.name: sample.value for sample in snapshot}
        for series, buffer in zip(self.spec.series, self._buffers):
            buffer.append(SeriesPoint(label, values.get(series.metric_name, 0.0)))


def build_charts(
    specs: Iterable[ChartSpec] = DEFAULT_CHARTS,
    capacity: int = WINDOW_CAPACITY,
) -> list[ChartState]:
    """Create fresh chart state for each spec."""
    return [ChartState(spec, capacity) for spec in specs]
