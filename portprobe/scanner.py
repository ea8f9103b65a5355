"""Scan orchestration across the host x port cross-product."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator

from portprobe.config import ProbeSettings
from portprobe.models import ScanResult
from portprobe.prober import probe_tcp
from portprobe.schemas import DEFAULT_TIMEOUT_MS, ScanRequest

Prober = Callable[[str, int, int, ProbeSettings | None], ScanResult]

logger = logging.getLogger(__name__)


def _probe_all(
    hosts: list[str],
    ports: list[int],
    timeout_ms: int,
    prober: Prober,
    config: ProbeSettings | None,
) -> Iterator[ScanResult]:
    total = len(hosts) * len(ports)
    logger.info(
        "Scanning %d host(s) x %d TCP port(s) (%d probes, timeout %d ms)",
        len(hosts),
        len(ports),
        total,
        timeout_ms,
    )

    open_count = 0
    for host in hosts:
        for port in ports:
            result = prober(host, port, timeout_ms, config)
            if result.open:
                open_count += 1
            logger.debug(
                "%s:%d %s%s",
                host,
                port,
                result.outcome.value,
                f" ({result.note})" if result.note and not result.open else "",
            )
            yield result

    logger.info("Scan complete: %d/%d ports open", open_count, total)


def iter_scan(
    hosts: str | Iterable[str],
    ports: int | Iterable[int],
    tcp_timeout_ms: int = DEFAULT_TIMEOUT_MS,
    *,
    prober: Prober = probe_tcp,
    config: ProbeSettings | None = None,
) -> Iterator[ScanResult]:
    """Probe every host/port pair in order, yielding results as they complete.

    The request is validated before this function returns, so malformed input
    raises here rather than on the first iteration.

    Args:
        hosts: One host or an ordered sequence of hosts
        ports: One TCP port or an ordered sequence of TCP ports
        tcp_timeout_ms: Per-probe connection timeout in milliseconds
        prober: Callable performing a single probe
        config: Probe settings passed through to the prober

    Returns:
        Iterator of ScanResult in host-major, port-minor order

    Raises:
        pydantic.ValidationError: If hosts, ports or timeout are invalid
    """
    request = ScanRequest(hosts=hosts, tcp_ports=ports, tcp_timeout_ms=tcp_timeout_ms)
    return _probe_all(request.hosts, request.tcp_ports, request.tcp_timeout_ms, prober, config)


def scan(
    hosts: str | Iterable[str],
    ports: int | Iterable[int],
    tcp_timeout_ms: int = DEFAULT_TIMEOUT_MS,
    *,
    prober: Prober = probe_tcp,
    config: ProbeSettings | None = None,
) -> list[ScanResult]:
    """Probe every host/port pair and return the complete report."""
    return list(iter_scan(hosts, ports, tcp_timeout_ms, prober=prober, config=config))


def run_scan(
    request: ScanRequest,
    *,
    prober: Prober = probe_tcp,
    config: ProbeSettings | None = None,
) -> list[ScanResult]:
    """Run a validated scan request.

    TCP ports are probed when given, or when no ports of either protocol are
    given (which probes nothing). UDP ports are accepted but not probed.

    Args:
        request: Validated scan request
        prober: Callable performing a single probe
        config: Probe settings passed through to the prober

    Returns:
        Ordered list of ScanResult
    """
    if request.udp_ports:
        logger.warning(
            "UDP probing is not implemented; ignoring %d UDP port(s)", len(request.udp_ports)
        )

    if not request.scan_tcp:
        return []

    return list(
        _probe_all(
            request.hosts, request.tcp_ports, request.tcp_timeout_ms, prober, config
        )
    )
