"""TCP port probe.

This module performs a single bounded connection attempt to one host/port
pair and classifies it as open, timed out, or failed. Connected ports receive
a short payload and, after a fixed wait, whatever the remote sent back is
captured as the result note.
"""

from __future__ import annotations

import errno
import logging
import os
import selectors
import socket
import time

from portprobe.config import ProbeSettings, settings
from portprobe.models import ProbeOutcome, Protocol, ScanResult

TIMEOUT_NOTE = "Connection to Port Timed Out"

# connect_ex() codes that mean the handshake is still in flight
_CONNECT_IN_PROGRESS = frozenset({
    0,
    errno.EINPROGRESS,
    errno.EWOULDBLOCK,
    errno.EALREADY,
})

logger = logging.getLogger(__name__)


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 3)


def _describe_error(exc: OSError) -> str:
    """Return human-readable text for a socket failure."""
    if exc.strerror:
        return exc.strerror
    text = str(exc)
    return text or type(exc).__name__


def _start_connect(host: str, port: int) -> socket.socket:
    """Resolve the target and begin a non-blocking connect.

    Raises:
        OSError: If resolution fails or the connect is rejected outright
    """
    try:
        family, sock_type, proto, _, address = socket.getaddrinfo(
            host, port, type=socket.SOCK_STREAM
        )[0]
    except UnicodeError as exc:
        # IDNA encoding rejects empty or over-long labels before any lookup
        raise socket.gaierror(socket.EAI_NONAME, f"Invalid host name: {exc}") from exc
    sock = socket.socket(family, sock_type, proto)
    try:
        sock.setblocking(False)
        code = sock.connect_ex(address)
        if code not in _CONNECT_IN_PROGRESS:
            raise OSError(code, os.strerror(code))
    except BaseException:
        sock.close()
        raise
    return sock


def _wait_connected(sock: socket.socket, timeout_s: float) -> bool:
    """Wait until the pending connect completes or the window elapses."""
    with selectors.DefaultSelector() as selector:
        selector.register(sock, selectors.EVENT_WRITE)
        return bool(selector.select(timeout_s))


def _exchange(sock: socket.socket, timeout_s: float, config: ProbeSettings) -> str:
    """Send the probe payload and collect whatever the remote returns."""
    sock.settimeout(timeout_s)
    if config.probe_payload:
        sock.sendall(config.probe_payload.encode(config.response_encoding, errors="replace"))

    # Fixed wait before draining, independent of timeout_s
    time.sleep(config.response_wait_seconds)

    chunks: list[bytes] = []
    received = 0
    with selectors.DefaultSelector() as selector:
        selector.register(sock, selectors.EVENT_READ)
        while received < config.max_response_bytes:
            if not selector.select(0):
                break
            chunk = sock.recv(min(config.read_chunk_size, config.max_response_bytes - received))
            if not chunk:
                break
            chunks.append(chunk)
            received += len(chunk)

    return b"".join(chunks).decode(config.response_encoding, errors="replace")


def probe_tcp(
    host: str,
    port: int,
    timeout_ms: int,
    config: ProbeSettings | None = None,
) -> ScanResult:
    """Probe a TCP port and classify the outcome.

    Never raises for connection failures: timeouts, refusals, resolution
    errors and stream errors are all returned as a closed ScanResult whose
    note describes what happened.

    Args:
        host: Target hostname or IP address
        port: Target port
        timeout_ms: Maximum time to wait for the connection, in milliseconds.
            Host name resolution happens before this window starts and is
            not counted against it.
        config: Probe settings (default: module-level settings)

    Returns:
        ScanResult for the host/port pair
    """
    config = config or settings
    target = f"{host}:{port}"
    start = time.perf_counter()

    def result(outcome: ProbeOutcome, note: str | None) -> ScanResult:
        return ScanResult(
            host=host,
            port=port,
            protocol=Protocol.TCP,
            open=outcome is ProbeOutcome.OPEN,
            outcome=outcome,
            note=note,
            elapsed_ms=_elapsed_ms(start),
        )

    if timeout_ms <= 0:
        logger.debug("Non-positive timeout for %s; treating as timed out", target)
        return result(ProbeOutcome.TIMEOUT, TIMEOUT_NOTE)

    sock: socket.socket | None = None
    try:
        sock = _start_connect(host, port)

        if not _wait_connected(sock, timeout_ms / 1000):
            logger.debug("Connection to %s timed out after %d ms", target, timeout_ms)
            return result(ProbeOutcome.TIMEOUT, TIMEOUT_NOTE)

        code = sock.getsockopt(socket.SOL_SOCKET, socket.SO_ERROR)
        if code:
            raise OSError(code, os.strerror(code))

        response = _exchange(sock, timeout_ms / 1000, config)
        sock.close()
        sock = None

        logger.debug("Port %s open (%d bytes received)", target, len(response))
        return result(ProbeOutcome.OPEN, response or None)

    except OSError as exc:
        note = _describe_error(exc)
        logger.debug("Probe of %s failed: %s", target, note)
        return result(ProbeOutcome.ERROR, note)

    finally:
        if sock is not None:
            sock.close()
