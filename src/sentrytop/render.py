"""Projection of snapshots onto charts, tables and fields."""

from collections.abc import Iterable, Sequence

from sentrytop.formatters import format_bytes, format_metric_value, format_uptime, protocol_name
from sentrytop.models import ConnectionRecord, HostRecord, MetricSample, SystemInfo
from sentrytop.series import ChartState
from sentrytop.sink import RenderSink


def metric_slot(name: str) -> str:
    """Slot id for a scalar metric: 'cpu.usage' -> 'metric-cpu-usage'."""
    return "metric-" + name.replace(".", "-")


def table_slot(domain: str) -> str:
    return f"{domain}-table-body"


CONNECTIONS_TABLE = table_slot("connections")
HOSTS_TABLE = table_slot("hosts")


def system_slot(field: str) -> str:
    return f"system-{field}"


def connection_row(record: ConnectionRecord) -> list[str]:
    """Cells for one connection row; the packet count is left unformatted."""
    return [
        record.source,
        record.destination,
        protocol_name(record.protocol),
        format_bytes(record.total_bytes),
        str(record.total_packets),
    ]


def host_row(record: HostRecord) -> list[str]:
    return [record.ip, format_bytes(record.bytes)]


def render_connections(sink: RenderSink, snapshot: Sequence[ConnectionRecord]) -> bool:
    """Replace the connections table, keeping the backend's ranking."""
    return sink.replace_rows(CONNECTIONS_TABLE, [connection_row(record) for record in snapshot])


def render_hosts(sink: RenderSink, snapshot: Sequence[HostRecord]) -> bool:
    """Replace the hosts table, keeping the backend's ranking."""
    return sink.replace_rows(HOSTS_TABLE, [host_row(record) for record in snapshot])


def render_system_info(sink: RenderSink, info: SystemInfo) -> None:
    sink.set_field(system_slot("hostname"), info.hostname)
    sink.set_field(system_slot("platform"), info.platform)
    sink.set_field(system_slot("cpus"), str(info.num_cpus))
    sink.set_field(system_slot("uptime"), format_uptime(info.uptime_seconds))


def render_metric_fields(sink: RenderSink, snapshot: Iterable[MetricSample]) -> None:
    """Write each sample to its metric slot; samples without a slot are skipped."""
    for sample in snapshot:
        sink.set_field(metric_slot(sample.name), format_metric_value(sample.value))


def project_metrics(
    charts: Iterable[ChartState],
    snapshot: Sequence[MetricSample],
    sink: RenderSink,
    label: str,
) -> None:
    """Append one point to every chart and push each chart's window to the sink."""
    for chart in charts:
        chart.push(label, snapshot)
        sink.push_series(chart.chart_id, chart.labels, chart.series_values())
