"""Rendering sink interface between the refresh pipeline and the screen."""

from collections.abc import Iterable, Sequence
from typing import Protocol


class RenderSink(Protocol):
    """
    Write-only surface the pipeline renders into.

    Every method returns False when the addressed slot does not exist;
    the write is then skipped, which is not an error.
    """

    def push_series(
        self, chart_id: str, labels: Sequence[str], series: Sequence[Sequence[float]]
    ) -> bool:
        """Replace a chart's data and redraw it without animation."""
        ...

    def replace_rows(self, table_id: str, rows: Sequence[Sequence[str]]) -> bool:
        """Replace every row of a table."""
        ...

    def set_field(self, slot_id: str, text: str) -> bool:
        """Set the text of a single field."""
        ...


class RecordingSink:
    """In-memory RenderSink that records the latest state of every slot."""

    def __init__(self, missing: Iterable[str] = ()) -> None:
        self.missing = set(missing)
        self.charts: dict[str, tuple[list[str], list[list[float]]]] = {}
        self.tables: dict[str, list[list[str]]] = {}
        self.fields: dict[str, str] = {}
        self.calls: list[tuple[str, str]] = []

    def push_series(
        self, chart_id: str, labels: Sequence[str], series: Sequence[Sequence[float]]
    ) -> bool:
        if chart_id in self.missing:
            return False
        self.charts[chart_id] = (list(labels), [list(values) for values in series])
        self.calls.append(("push_series", chart_id))
        return True

    def replace_rows(self, table_id: str, rows: Sequence[Sequence[str]]) -> bool:
        if table_id in self.missing:
            return False
        self.tables[table_id] = [list(row) for row in rows]
        self.calls.append(("replace_rows", table_id))
        return True

    def set_field(self, slot_id: str, text: str) -> bool:
        if slot_id in self.missing:
            return False
        self.fields[slot_id] = text
        self.calls.append(("set_field", slot_id))
        return True
