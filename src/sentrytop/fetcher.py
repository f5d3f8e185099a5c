"""Snapshot fetching from the monitoring backend."""

import json
import logging
from collections.abc import Callable
from enum import Enum
from typing import Any, TypeVar

import httpx

from sentrytop.errors import ParseError, TransportError
from sentrytop.models import (
    ConnectionRecord,
    HostRecord,
    MetricSample,
    SystemInfo,
    parse_connections,
    parse_hosts,
    parse_metrics,
    parse_system_info,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DataSource(Enum):
    """Backend data sources polled every refresh."""

    METRICS = "metrics"
    CONNECTIONS = "connections"
    HOSTS = "hosts"
    SYSTEM_INFO = "system_info"

    @property
    def path(self) -> str:
        return _PATHS[self]


_PATHS = {
    DataSource.METRICS: "/api/metrics",
    DataSource.CONNECTIONS: "/api/network/connections",
    DataSource.HOSTS: "/api/network/hosts",
    DataSource.SYSTEM_INFO: "/api/system/info",
}


class SnapshotFetcher:
    """
    Issues one GET per data source and parses the body into a typed snapshot.

    Every failure is raised as ``TransportError`` or ``ParseError``; callers
    decide how to report it. There is no retry.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        connection_limit: int = 10,
        host_limit: int = 10,
    ) -> None:
        """
        Initialize the SnapshotFetcher.

        Args:
            client: HTTP client, normally created with the backend ``base_url``.
            connection_limit: Number of top connections to request.
            host_limit: Number of top hosts to request.
        """
        self._client = client
        self.connection_limit = connection_limit
        self.host_limit = host_limit

    async def fetch_metrics(self) -> list[MetricSample]:
        return await self._fetch(DataSource.METRICS, parse_metrics)

    async def fetch_connections(self) -> list[ConnectionRecord]:
        return await self._fetch(
            DataSource.CONNECTIONS, parse_connections, {"limit": self.connection_limit}
        )

    async def fetch_hosts(self) -> list[HostRecord]:
        return await self._fetch(DataSource.HOSTS, parse_hosts, {"limit": self.host_limit})

    async def fetch_system_info(self) -> SystemInfo:
        return await self._fetch(DataSource.SYSTEM_INFO, parse_system_info)

    async def fetch(self, source: DataSource) -> Any:
        """Fetch the snapshot for ``source``."""
        handlers = {
            DataSource.METRICS: self.fetch_metrics,
            DataSource.CONNECTIONS: self.fetch_connections,
            DataSource.HOSTS: self.fetch_hosts,
            DataSource.SYSTEM_INFO: self.fetch_system_info,
        }
        return await handlers[source]()

    async def _fetch(
        self,
        source: DataSource,
        parse: Callable[[Any], T],
        params: dict[str, Any] | None = None,
    ) -> T:
        try:
            response = await self._client.get(source.path, params=params)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise TransportError(source.value, str(exc) or type(exc).__name__) from exc

        try:
            payload = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ParseError(source.value, f"invalid JSON body: {exc}") from exc

        try:
            snapshot = parse(payload)
        except ValueError as exc:
            raise ParseError(source.value, str(exc)) from exc

        logger.debug("Fetched %s from %s", source.value, response.url)
        return snapshot
