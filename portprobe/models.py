"""Data models for probe results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Protocol(str, Enum):
    """Transport used for a probe."""

    TCP = "tcp"
    UDP = "udp"  # reserved, no UDP probe exists


class ProbeOutcome(str, Enum):
    """Classification of a single connection attempt."""

    OPEN = "open"
    TIMEOUT = "timeout"
    ERROR = "error"


@dataclass(frozen=True)
class ScanResult:
    """Outcome of probing one host/port pair."""

    host: str
    port: int
    protocol: Protocol
    open: bool
    outcome: ProbeOutcome
    note: str | None = None
    elapsed_ms: float = 0.0

    def to_payload(self) -> dict[str, Any]:
        """Convert to JSON-serializable payload."""
        return {
            "host": self.host,
            "port": self.port,
            "protocol": self.protocol.value,
            "open": self.open,
            "outcome": self.outcome.value,
            "note": self.note,
            "elapsed_ms": self.elapsed_ms,
        }
