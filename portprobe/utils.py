"""Utility functions for the port prober."""

from __future__ import annotations

import logging
import re
import sys
from collections.abc import Iterator
from typing import TextIO

from portprobe.schemas import MAX_PORT, MIN_PORT

PORT_SPEC_PATTERN = re.compile(r"^[0-9,\-!\s]+$")


def _parse_port(value: str, segment: str) -> int:
    try:
        port = int(value)
    except ValueError as e:
        raise ValueError(f"Invalid port number: {segment}") from e
    if not (MIN_PORT <= port <= MAX_PORT):
        raise ValueError(f"Port out of range (1-65535): {segment}")
    return port


def _expand_segment(segment: str) -> list[int]:
    """Expand a single port or an inclusive range into ports."""
    if "-" in segment:
        parts = segment.split("-")
        if len(parts) != 2:
            raise ValueError(f"Invalid port range format: {segment}")
        start = _parse_port(parts[0].strip(), segment)
        end = _parse_port(parts[1].strip(), segment)
        if start > end:
            raise ValueError(f"Invalid port range (start > end): {segment}")
        return list(range(start, end + 1))
    return [_parse_port(segment, segment)]


def parse_port_spec(port_spec: str) -> list[int]:
    """Parse a port specification into an ordered list of ports.

    Includes keep their given order and duplicates; ports prefixed with ``!``
    are removed from the result.

    Args:
        port_spec: Port specification string (e.g., "22,80,8000-8010,!8005")

    Returns:
        List of ports to probe

    Raises:
        ValueError: If the specification is empty, malformed or out of range
    """
    if not port_spec or not isinstance(port_spec, str):
        raise ValueError("Port specification must be a non-empty string")

    port_spec = port_spec.strip()
    if not port_spec:
        raise ValueError("Port specification must be a non-empty string")

    if not PORT_SPEC_PATTERN.match(port_spec):
        raise ValueError(f"Port specification contains invalid characters: {port_spec}")

    includes: list[int] = []
    excludes: set[int] = set()
    for raw_segment in port_spec.split(","):
        segment = raw_segment.strip()
        if not segment:
            raise ValueError("Port specification contains empty segment")
        if segment.startswith("!"):
            excludes.update(_expand_segment(segment[1:].strip()))
        else:
            includes.extend(_expand_segment(segment))

    if not includes:
        raise ValueError(f"Port specification selects no ports: {port_spec}")

    return [port for port in includes if port not in excludes]


def read_hosts(stream: TextIO) -> Iterator[str]:
    """Yield host names from a line-oriented stream, skipping blanks and comments."""
    for line in stream:
        host = line.split("#", 1)[0].strip()
        if host:
            yield host


def configure_logging(level: str) -> logging.Logger:
    """Configure root logging on stderr so stdout stays free for the report.

    Args:
        level: Log level string

    Returns:
        Logger instance
    """
    logger = logging.getLogger("portprobe")
    root = logging.getLogger()
    root.handlers.clear()
    if isinstance(level, str):
        normalized_level = getattr(logging, level.upper(), logging.INFO)
    else:
        normalized_level = logging.INFO
    root.setLevel(normalized_level)

    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    return logger
