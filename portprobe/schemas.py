"""Scan request schema and input validation."""

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator

DEFAULT_TIMEOUT_MS = 1000
MIN_PORT = 1
MAX_PORT = 65535


def validate_port(value: int) -> int:
    """Validate a single port number (1-65535)."""
    if not (MIN_PORT <= value <= MAX_PORT):
        raise ValueError(f"Port out of range (1-65535): {value}")
    return value


def _as_list(value: Any) -> Any:
    """Wrap scalars and materialize iterables so sequences can be validated."""
    if value is None:
        return []
    if isinstance(value, (str, bytes, int)):
        return [value]
    if isinstance(value, Iterable) and not isinstance(value, (list, dict)):
        return list(value)
    return value


class ScanRequest(BaseModel):
    """Hosts, ports and timeouts for one scan invocation."""

    model_config = ConfigDict(frozen=True)

    hosts: list[str]
    tcp_ports: list[int] = Field(default_factory=list)
    udp_ports: list[int] = Field(default_factory=list)
    tcp_timeout_ms: PositiveInt = DEFAULT_TIMEOUT_MS
    udp_timeout_ms: PositiveInt = DEFAULT_TIMEOUT_MS

    @field_validator("hosts", "tcp_ports", "udp_ports", mode="before")
    @classmethod
    def coerce_sequence(cls, value: Any) -> Any:
        return _as_list(value)

    @field_validator("hosts")
    @classmethod
    def validate_hosts(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("At least one host is required")
        for host in value:
            if not host.strip():
                raise ValueError("Host names must be non-empty")
        return value

    @field_validator("tcp_ports", "udp_ports")
    @classmethod
    def validate_ports(cls, value: list[int]) -> list[int]:
        for port in value:
            validate_port(port)
        return value

    @property
    def scan_tcp(self) -> bool:
        """TCP is scanned when TCP ports are given or no ports are given at all."""
        return bool(self.tcp_ports) or not self.udp_ports
