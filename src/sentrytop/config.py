"""Runtime configuration for sentrytop."""

from dataclasses import dataclass

from sentrytop.series import WINDOW_CAPACITY

DEFAULT_BASE_URL = "http://localhost:8080"


@dataclass(slots=True, frozen=True)
class DashboardConfig:
    """Settings for the backend connection and the refresh pipeline."""

    base_url: str = DEFAULT_BASE_URL
    refresh_interval: float = 2.0  # seconds
    connection_limit: int = 10
    host_limit: int = 10
    window_capacity: int = WINDOW_CAPACITY
    request_timeout: float = 5.0  # seconds
    drop_stale: bool = False
    log_file: str | None = None
    log_level: str = "WARNING"

    def validate(self) -> "DashboardConfig":
        """Raise ValueError for settings the pipeline cannot run with."""
        for name in ("refresh_interval", "connection_limit", "host_limit", "window_capacity", "request_timeout"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        if not self.base_url.startswith(("http://", "https://")):
            raise ValueError("base_url must be an http(s) URL")
        return self
