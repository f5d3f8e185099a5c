"""sentrytop - Main Textual application."""

import re
from collections.abc import Sequence

import httpx
from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal, Vertical
from textual.css.query import QueryError
from textual.widgets import DataTable, Footer, Header, Sparkline, Static, Tab, Tabs

from sentrytop.config import DashboardConfig
from sentrytop.fetcher import SnapshotFetcher
from sentrytop.formatters import format_metric_value
from sentrytop.render import CONNECTIONS_TABLE, HOSTS_TABLE, metric_slot, system_slot
from sentrytop.scheduler import RefreshScheduler
from sentrytop.series import CPU_CHART, MEMORY_CHART, NETWORK_CHART, ChartSpec, build_charts
from sentrytop.views import Panel, ViewController

OVERVIEW_METRICS = (
    ("CPU", "cpu.usage"),
    ("Memory", "memory.usage_percent"),
    ("Bytes in/s", "network.bytes_in_per_sec"),
    ("Bytes out/s", "network.bytes_out_per_sec"),
)

SYSTEM_FIELDS = (
    ("Hostname", "hostname"),
    ("Platform", "platform"),
    ("CPUs", "cpus"),
    ("Uptime", "uptime"),
)

PANEL_TITLES = {
    Panel.OVERVIEW: "Overview",
    Panel.NETWORK: "Network",
    Panel.HOSTS: "Hosts",
    Panel.SYSTEM: "System",
}

_SLOT_ID = re.compile(r"^[A-Za-z_-][A-Za-z0-9_-]*$")


class ChartView(Vertical):
    """A chart: one sparkline per series under a caption with the latest values."""

    DEFAULT_CSS = """
    ChartView {
        height: auto;
        border: solid $primary;
        padding: 0 1;
    }

    ChartView Sparkline {
        height: 4;
        margin-bottom: 1;
    }
    """

    def __init__(self, spec: ChartSpec, **kwargs) -> None:
        """Initialize ChartView."""
        super().__init__(id=spec.chart_id, **kwargs)
        self.border_title = spec.title
        self._spec = spec
        self.labels: list[str] = []
        self.series: list[list[float]] = [[] for _ in spec.series]

    def compose(self) -> ComposeResult:
        """Compose the caption and sparklines."""
        yield Static(self._caption(), classes="chart-caption")
        for values in self.series:
            yield Sparkline(values, summary_function=max)

    def show(self, labels: Sequence[str], series: Sequence[Sequence[float]]) -> None:
        """Replace the plotted window and redraw at once."""
        self.labels = list(labels)
        self.series = [list(values) for values in series]
        try:
            self.query_one(".chart-caption", Static).update(self._caption())
            for sparkline, values in zip(self.query(Sparkline), self.series):
                sparkline.data = values
        except QueryError:
            pass  # Not composed yet; compose() picks up the stored data

    def _caption(self) -> str:
        if not self.labels:
            return "Waiting for data..."
        latest = "  ".join(
            f"{spec.label}: {format_metric_value(values[-1])}"
            for spec, values in zip(self._spec.series, self.series)
        )
        return f"{latest}  [dim]@ {self.labels[-1]}[/dim]"


class FieldValue(Static):
    """Addressable text slot that remembers its last value."""

    def __init__(self, **kwargs) -> None:
        """Initialize FieldValue."""
        super().__init__("-", **kwargs)
        self.value = "-"

    def set_text(self, text: str) -> None:
        self.value = text
        self.update(Text(text))  # verbatim, no markup


class FieldRow(Horizontal):
    """A caption and an addressable value slot."""

    DEFAULT_CSS = """
    FieldRow {
        height: 1;
    }

    FieldRow .field-caption {
        width: 16;
        color: $text-muted;
    }
    """

    def __init__(self, caption: str, slot_id: str) -> None:
        """Initialize FieldRow."""
        super().__init__()
        self._caption = caption
        self._slot_id = slot_id

    def compose(self) -> ComposeResult:
        """Compose caption and value."""
        yield Static(self._caption, classes="field-caption")
        yield FieldValue(id=self._slot_id)


class TextualSink:
    """RenderSink that writes into the app's widgets by id."""

    def __init__(self, app: App) -> None:
        self._app = app

    def _find(self, slot_id: str, expect_type):
        if not _SLOT_ID.match(slot_id):
            return None
        try:
            return self._app.query_one(f"#{slot_id}", expect_type)
        except QueryError:
            return None  # Slot not mounted

    def push_series(
        self, chart_id: str, labels: Sequence[str], series: Sequence[Sequence[float]]
    ) -> bool:
        chart = self._find(chart_id, ChartView)
        if chart is None:
            return False
        chart.show(labels, series)
        return True

    def replace_rows(self, table_id: str, rows: Sequence[Sequence[str]]) -> bool:
        table = self._find(table_id, DataTable)
        if table is None:
            return False
        table.clear()
        for row in rows:
            table.add_row(*(Text(cell) for cell in row))  # verbatim, no markup
        return True

    def set_field(self, slot_id: str, text: str) -> bool:
        field = self._find(slot_id, FieldValue)
        if field is None:
            return False
        field.set_text(text)
        return True


class SentrytopApp(App):
    """Main sentrytop application."""

    TITLE = "sentrytop"
    SUB_TITLE = "Network Monitor Dashboard"

    CSS = """
    Screen {
        layout: vertical;
    }

    .panel {
        height: 1fr;
        padding: 0 1;
    }

    #overview-fields, #system-fields {
        height: auto;
        border: solid $primary;
        padding: 0 1;
        margin-bottom: 1;
    }

    DataTable {
        height: 1fr;
        border: solid $primary;
    }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("n", "next_panel", "Next panel"),
        ("1", "show_panel('overview')", "Overview"),
        ("2", "show_panel('network')", "Network"),
        ("3", "show_panel('hosts')", "Hosts"),
        ("4", "show_panel('system')", "System"),
    ]

    def __init__(
        self,
        config: DashboardConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the SentrytopApp.

        Args:
            config: Dashboard settings. Defaults to DashboardConfig().
            client: HTTP client for the backend. When omitted one is created
                from the config and closed on exit.
        """
        super().__init__()
        self._config = config or DashboardConfig()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=self._config.base_url,
            timeout=self._config.request_timeout,
        )
        self._views = ViewController(tuple(Panel))
        self._sink = TextualSink(self)
        self._scheduler = RefreshScheduler(
            SnapshotFetcher(
                self._client,
                connection_limit=self._config.connection_limit,
                host_limit=self._config.host_limit,
            ),
            self._sink,
            charts=build_charts(capacity=self._config.window_capacity),
            interval=self._config.refresh_interval,
            drop_stale=self._config.drop_stale,
        )

    @property
    def views(self) -> ViewController:
        return self._views

    @property
    def scheduler(self) -> RefreshScheduler:
        return self._scheduler

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield Header()
        yield Tabs(*(Tab(PANEL_TITLES[panel], id=panel.value) for panel in self._views.panels))

        with Container(id="panel-overview", classes="panel"):
            with Vertical(id="overview-fields"):
                for caption, name in OVERVIEW_METRICS:
                    yield FieldRow(caption, metric_slot(name))
            yield ChartView(CPU_CHART)
            yield ChartView(MEMORY_CHART)

        with Container(id="panel-network", classes="panel"):
            yield ChartView(NETWORK_CHART)
            yield DataTable(id=CONNECTIONS_TABLE)

        with Container(id="panel-hosts", classes="panel"):
            yield DataTable(id=HOSTS_TABLE)

        with Container(id="panel-system", classes="panel"):
            with Vertical(id="system-fields"):
                for caption, field in SYSTEM_FIELDS:
                    yield FieldRow(caption, system_slot(field))

        yield Footer()

    def on_mount(self) -> None:
        """Set up tables, show the first panel and start refreshing."""
        connections = self.query_one(f"#{CONNECTIONS_TABLE}", DataTable)
        connections.cursor_type = "row"
        connections.add_columns("Source", "Destination", "Protocol", "Bytes", "Packets")

        hosts = self.query_one(f"#{HOSTS_TABLE}", DataTable)
        hosts.cursor_type = "row"
        hosts.add_columns("IP Address", "Bytes")

        self.show_panel(self._views.active)
        self._scheduler.start()

    async def on_unmount(self) -> None:
        """Cancel refreshes and release the HTTP client."""
        await self._scheduler.aclose()
        if self._owns_client:
            await self._client.aclose()

    def show_panel(self, panel: Panel) -> None:
        """Make ``panel`` the only visible panel."""
        for each, shown in self._views.select(panel).items():
            self.query_one(f"#panel-{each.value}").display = shown

        tabs = self.query_one(Tabs)
        if tabs.active != panel.value:
            tabs.active = panel.value

    def on_tabs_tab_activated(self, event: Tabs.TabActivated) -> None:
        """Follow tab clicks."""
        if event.tab is not None and event.tab.id is not None:
            self.show_panel(Panel(event.tab.id))

    def action_show_panel(self, name: str) -> None:
        """Handle number keys."""
        self.show_panel(Panel(name))

    def action_next_panel(self) -> None:
        """Handle next panel action."""
        self.show_panel(self._views.cycle())

    def action_quit(self) -> None:
        """Handle quit action with graceful cleanup."""
        self._scheduler.stop()
        self.exit()
