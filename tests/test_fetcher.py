"""Tests for the SnapshotFetcher class."""

import httpx
import pytest

from conftest import FakeBackend
from sentrytop.errors import FetchError, ParseError, TransportError
from sentrytop.fetcher import DataSource, SnapshotFetcher
from sentrytop.models import SystemInfo


def test_data_source_paths():
    """Test every source maps to its endpoint."""
    assert DataSource.METRICS.path == "/api/metrics"
    assert DataSource.CONNECTIONS.path == "/api/network/connections"
    assert DataSource.HOSTS.path == "/api/network/hosts"
    assert DataSource.SYSTEM_INFO.path == "/api/system/info"


def test_error_hierarchy():
    """Test both failure kinds are FetchErrors carrying the source."""
    error = ParseError("hosts", "bad body")
    assert isinstance(error, FetchError)
    assert issubclass(TransportError, FetchError)
    assert error.source == "hosts"
    assert str(error) == "hosts: bad body"


class TestSnapshotFetcher:
    """Tests for SnapshotFetcher."""

    @pytest.mark.asyncio
    async def test_fetch_all_sources(self, backend: FakeBackend):
        """Test each source yields its typed snapshot."""
        async with backend.client() as client:
            fetcher = SnapshotFetcher(client)

            metrics = await fetcher.fetch_metrics()
            connections = await fetcher.fetch_connections()
            hosts = await fetcher.fetch_hosts()
            info = await fetcher.fetch_system_info()

        assert metrics[0].name == "cpu.usage"
        assert [c.protocol for c in connections] == [6, 17]
        assert hosts[0].ip == "93.184.216.34"
        assert isinstance(info, SystemInfo)

    @pytest.mark.asyncio
    async def test_limit_query_parameter(self, backend: FakeBackend):
        """Test connections and hosts pass the result limit."""
        async with backend.client() as client:
            fetcher = SnapshotFetcher(client, connection_limit=10, host_limit=5)
            await fetcher.fetch_connections()
            await fetcher.fetch_hosts()
            await fetcher.fetch_metrics()

        params = [dict(request.url.params) for request in backend.requests]
        assert params == [{"limit": "10"}, {"limit": "5"}, {}]

    @pytest.mark.asyncio
    async def test_fetch_by_source(self, backend: FakeBackend):
        """Test the generic fetch dispatches to the right endpoint."""
        async with backend.client() as client:
            fetcher = SnapshotFetcher(client)
            for source in DataSource:
                await fetcher.fetch(source)

        assert backend.paths() == [source.path for source in DataSource]

    @pytest.mark.asyncio
    async def test_http_status_is_transport_error(self, backend: FakeBackend):
        """Test a non-2xx status is a transport failure."""
        backend.failing["/api/metrics"] = 503
        async with backend.client() as client:
            with pytest.raises(TransportError) as excinfo:
                await SnapshotFetcher(client).fetch_metrics()

        assert excinfo.value.source == "metrics"

    @pytest.mark.asyncio
    async def test_connection_error_is_transport_error(self, backend: FakeBackend):
        """Test an unreachable backend is a transport failure."""
        backend.failing["/api/network/hosts"] = 0
        async with backend.client() as client:
            with pytest.raises(TransportError):
                await SnapshotFetcher(client).fetch_hosts()

    @pytest.mark.asyncio
    async def test_invalid_json_is_parse_error(self):
        """Test a body that is not JSON is a parse failure."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>oops</html>")

        async with httpx.AsyncClient(base_url="http://backend.test", transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(ParseError) as excinfo:
                await SnapshotFetcher(client).fetch_system_info()

        assert excinfo.value.source == "system_info"

    @pytest.mark.asyncio
    async def test_wrong_shape_is_parse_error(self):
        """Test JSON with the wrong shape is a parse failure."""
        backend = FakeBackend({"/api/network/connections": {"connections": [{"source": "a"}]}})
        async with backend.client() as client:
            with pytest.raises(ParseError, match="destination"):
                await SnapshotFetcher(client).fetch_connections()
