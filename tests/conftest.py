"""Pytest fixtures: loopback TCP listeners and fast probe settings."""

from __future__ import annotations

import socket
from collections.abc import Callable, Iterator
from threading import Event, Thread

import pytest

from portprobe.config import ProbeSettings

LOOPBACK = "127.0.0.1"
RESPONSE_WAIT_SECONDS = 0.2

ConnectionHandler = Callable[[socket.socket], None]


def drain_until_closed(conn: socket.socket) -> None:
    """Read from the connection until the client hangs up."""
    conn.settimeout(5)
    try:
        while conn.recv(1024):
            pass
    except OSError:
        pass


class LoopbackListener(Thread):
    """Accept connections on a loopback port and hand each to a handler."""

    def __init__(self, handler: ConnectionHandler) -> None:
        super().__init__(daemon=True)
        self._handler = handler
        self._stop_event = Event()
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._sock.bind((LOOPBACK, 0))
        self._sock.listen(16)
        self._sock.settimeout(0.1)
        self.port: int = self._sock.getsockname()[1]

    def stop(self) -> None:
        self._stop_event.set()

    def run(self) -> None:
        while not self._stop_event.is_set():
            try:
                conn, _ = self._sock.accept()
            except socket.timeout:
                continue
            except OSError:
                break
            with conn:
                try:
                    self._handler(conn)
                except OSError:
                    pass
        self._sock.close()


def _serve(handler: ConnectionHandler) -> Iterator[LoopbackListener]:
    listener = LoopbackListener(handler)
    listener.start()
    try:
        yield listener
    finally:
        listener.stop()
        listener.join(timeout=2)


@pytest.fixture
def fast_config() -> ProbeSettings:
    """Probe settings with a short post-connect wait."""
    return ProbeSettings(response_wait_seconds=RESPONSE_WAIT_SECONDS)


@pytest.fixture
def silent_server() -> Iterator[LoopbackListener]:
    """Listener that accepts and never writes."""
    yield from _serve(drain_until_closed)


@pytest.fixture
def banner_server() -> Iterator[LoopbackListener]:
    """Listener that greets every client with an SSH-style banner."""

    def handler(conn: socket.socket) -> None:
        conn.sendall(b"SSH-2.0-TestServer\r\n")
        drain_until_closed(conn)

    yield from _serve(handler)


@pytest.fixture
def echo_server() -> Iterator[LoopbackListener]:
    """Listener that answers the first message it receives."""

    def handler(conn: socket.socket) -> None:
        conn.settimeout(5)
        data = conn.recv(1024)
        conn.sendall(b"echo:" + data)
        drain_until_closed(conn)

    yield from _serve(handler)


@pytest.fixture
def chatty_server() -> Iterator[LoopbackListener]:
    """Listener that writes a large blob immediately."""

    def handler(conn: socket.socket) -> None:
        conn.sendall(b"x" * 5000)
        drain_until_closed(conn)

    yield from _serve(handler)


@pytest.fixture
def closed_port() -> int:
    """A loopback port with nothing listening on it."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind((LOOPBACK, 0))
        return sock.getsockname()[1]
