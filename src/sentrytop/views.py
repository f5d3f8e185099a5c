"""Tab selection state."""

from collections.abc import Sequence
from enum import Enum


class Panel(Enum):
    """Dashboard panels, in declaration order."""

    OVERVIEW = "overview"
    NETWORK = "network"
    HOSTS = "hosts"
    SYSTEM = "system"


def visibility(active: Panel, panels: Sequence[Panel]) -> dict[Panel, bool]:
    """Visibility flag of every panel when ``active`` is selected."""
    return {panel: panel is active for panel in panels}


class ViewController:
    """
    Exactly one panel is active at a time.

    Starts on the first declared panel and only changes on ``select`` or
    ``cycle``; the refresh pipeline never touches it.
    """

    def __init__(self, panels: Sequence[Panel] = tuple(Panel)) -> None:
        if not panels:
            raise ValueError("at least one panel is required")
        self._panels = tuple(panels)
        self._active = self._panels[0]

    @property
    def panels(self) -> tuple[Panel, ...]:
        return self._panels

    @property
    def active(self) -> Panel:
        return self._active

    def select(self, panel: Panel) -> dict[Panel, bool]:
        """Make ``panel`` the only visible panel and return the new visibility."""
        if panel not in self._panels:
            raise ValueError(f"unknown panel: {panel!r}")
        self._active = panel
        return self.visibility()

    def cycle(self) -> Panel:
        """Select the next panel, wrapping around, and return it."""
        index = self._panels.index(self._active)
        self.select(self._panels[(index + 1) % len(self._panels)])
        return self._active

    def visibility(self) -> dict[Panel, bool]:
        return visibility(self._active, self._panels)

    def is_visible(self, panel: Panel) -> bool:
        return panel is self._active

    def visible_panels(self) -> list[Panel]:
        return [panel for panel, shown in self.visibility().items() if shown]
