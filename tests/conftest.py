"""Shared fixtures: canned backend payloads and a mock HTTP backend."""

import httpx
import pytest

METRICS_PAYLOAD = {
    "metrics": [
        {"name": "cpu.usage", "value": 42.5},
        {"name": "memory.usage_percent", "value": 63.25},
        {"name": "network.bytes_in_per_sec", "value": 2048.0},
        {"name": "network.bytes_out_per_sec", "value": 1024.0},
        {"name": "disk.io_wait", "value": 0.5},
    ]
}

CONNECTIONS_PAYLOAD = {
    "connections": [
        {
            "source": "10.0.0.2:51234",
            "destination": "93.184.216.34:443",
            "protocol": 6,
            "bytes_sent": 1024,
            "bytes_received": 1024,
            "packets_sent": 10,
            "packets_received": 12,
        },
        {
            "source": "10.0.0.2:5353",
            "destination": "224.0.0.251:5353",
            "protocol": 17,
            "bytes_sent": 300,
            "bytes_received": 0,
            "packets_sent": 3,
            "packets_received": 0,
        },
    ]
}

HOSTS_PAYLOAD = {
    "hosts": [
        {"ip": "93.184.216.34", "bytes": 1048576},
        {"ip": "10.0.0.1", "bytes": 512},
    ]
}

SYSTEM_PAYLOAD = {
    "hostname": "sensor-01",
    "platform": "Linux 6.1",
    "num_cpus": 8,
    "uptime": 3665,
}

PAYLOADS = {
    "/api/metrics": METRICS_PAYLOAD,
    "/api/network/connections": CONNECTIONS_PAYLOAD,
    "/api/network/hosts": HOSTS_PAYLOAD,
    "/api/system/info": SYSTEM_PAYLOAD,
}


class FakeBackend:
    """httpx mock transport serving canned payloads, with per-path failures."""

    def __init__(self, payloads: dict | None = None) -> None:
        self.payloads = dict(PAYLOADS if payloads is None else payloads)
        self.failing: dict[str, int] = {}  # path -> status code, 0 for connection error
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path in self.failing:
            status = self.failing[path]
            if status == 0:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(status, text="backend error")
        if path not in self.payloads:
            return httpx.Response(404, json={"error": "not found"})
        return httpx.Response(200, json=self.payloads[path])

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url="http://backend.test", transport=self.transport)

    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()
