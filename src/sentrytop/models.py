"""Data models for sentrytop.

Each record is an immutable snapshot of one backend entry. ``from_json``
builds a record from a decoded JSON object and raises ``ValueError`` when
the object does not have the expected shape.
"""

from dataclasses import dataclass
from typing import Any


def _require(data: Any, key: str) -> Any:
    if not isinstance(data, dict):
        raise ValueError(f"expected an object, got {type(data).__name__}")
    if key not in data:
        raise ValueError(f"missing field {key!r}")
    return data[key]


def _str_field(data: Any, key: str) -> str:
    value = _require(data, key)
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string")
    return value


def _number_field(data: Any, key: str) -> float:
    value = _require(data, key)
    # bool is an int subclass; JSON true/false is not a number here
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"field {key!r} must be a number")
    return value


def _non_negative_field(data: Any, key: str) -> float:
    value = _number_field(data, key)
    if value < 0:
        raise ValueError(f"field {key!r} must not be negative")
    return value


def _int_field(data: Any, key: str, non_negative: bool = False) -> int:
    value = _number_field(data, key)
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"field {key!r} must be an integer")
        value = int(value)
    if non_negative and value < 0:
        raise ValueError(f"field {key!r} must not be negative")
    return value


def _list_field(data: Any, key: str) -> list:
    value = _require(data, key)
    if not isinstance(value, list):
        raise ValueError(f"field {key!r} must be a list")
    return value


@dataclass(slots=True, frozen=True)
class MetricSample:
    """One named metric reading."""

    name: str  # dotted, e.g. 'cpu.usage'
    value: float

    @classmethod
    def from_json(cls, data: Any) -> "MetricSample":
        return cls(name=_str_field(data, "name"), value=_number_field(data, "value"))


@dataclass(slots=True, frozen=True)
class ConnectionRecord:
    """Traffic counters for one connection, as ranked by the backend."""

    source: str  # 'ip:port'
    destination: str
    protocol: int  # IP protocol number
    bytes_sent: int
    bytes_received: int
    packets_sent: int
    packets_received: int

    @property
    def total_bytes(self) -> int:
        return self.bytes_sent + self.bytes_received

    @property
    def total_packets(self) -> int:
        return self.packets_sent + self.packets_received

    @classmethod
    def from_json(cls, data: Any) -> "ConnectionRecord":
        return cls(
            source=_str_field(data, "source"),
            destination=_str_field(data, "destination"),
            protocol=_int_field(data, "protocol"),
            bytes_sent=_int_field(data, "bytes_sent", non_negative=True),
            bytes_received=_int_field(data, "bytes_received", non_negative=True),
            packets_sent=_int_field(data, "packets_sent", non_negative=True),
            packets_received=_int_field(data, "packets_received", non_negative=True),
        )


@dataclass(slots=True, frozen=True)
class HostRecord:
    """Byte total for one top-talker host."""

    ip: str
    bytes: int

    @classmethod
    def from_json(cls, data: Any) -> "HostRecord":
        return cls(ip=_str_field(data, "ip"), bytes=_int_field(data, "bytes", non_negative=True))


@dataclass(slots=True, frozen=True)
class SystemInfo:
    """Identity of the monitored host."""

    hostname: str
    platform: str
    num_cpus: int
    uptime_seconds: float

    @classmethod
    def from_json(cls, data: Any) -> "SystemInfo":
        return cls(
            hostname=_str_field(data, "hostname"),
            platform=_str_field(data, "platform"),
            num_cpus=_int_field(data, "num_cpus", non_negative=True),
            uptime_seconds=_non_negative_field(data, "uptime"),
        )


@dataclass(slots=True, frozen=True)
class SeriesPoint:
    """One labelled point of a chart series."""

    label: str
    value: float


def parse_metrics(payload: Any) -> list[MetricSample]:
    """Parse a ``/api/metrics`` body."""
    return [MetricSample.from_json(item) for item in _list_field(payload, "metrics")]


def parse_connections(payload: Any) -> list[ConnectionRecord]:
    """Parse a ``/api/network/connections`` body, keeping server order."""
    return [ConnectionRecord.from_json(item) for item in _list_field(payload, "connections")]


def parse_hosts(payload: Any) -> list[HostRecord]:
    """Parse a ``/api/network/hosts`` body, keeping server order."""
    return [HostRecord.from_json(item) for item in _list_field(payload, "hosts")]


def parse_system_info(payload: Any) -> SystemInfo:
    """Parse a ``/api/system/info`` body."""
    return SystemInfo.from_json(payload)
