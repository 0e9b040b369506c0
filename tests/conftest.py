import socket
import threading
import time

import pytest

from portsweep.scanner.models import PortResult, PortStatus
from portsweep.scanner.slots import SlotPool


class Listener:
    """
    Loopback TCP server for exercising the scanner against real sockets.

    Modes:
      close  - accept and close immediately without sending anything
      banner - send *payload* right away, read the probe, then close
      reply  - read the client's probe, send *payload*, then close
      silent - accept and keep the connection open without sending
    """

    def __init__(self, mode: str, payload: bytes = b"") -> None:
        self.mode = mode
        self.payload = payload
        self.received = []
        self._conns = []
        self._stop = threading.Event()
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self.sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self.sock.bind(("127.0.0.1", 0))
        self.sock.listen(64)
        self.sock.settimeout(0.05)
        self.port = self.sock.getsockname()[1]
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    def _serve(self) -> None:
        while not self._stop.is_set():
            try:
                conn, _ = self.sock.accept()
            except socket.timeout:
                continue
            except OSError:
                break
            self._handle(conn)

    def _handle(self, conn: socket.socket) -> None:
        if self.mode == "silent":
            self._conns.append(conn)
            return
        try:
            if self.mode == "banner":
                conn.sendall(self.payload)
                # Drain the probe so closing does not reset the connection
                conn.settimeout(1.0)
                self.received.append(conn.recv(1024))
            elif self.mode == "reply":
                conn.settimeout(1.0)
                self.received.append(conn.recv(1024))
                conn.sendall(self.payload)
        except OSError:
            pass
        finally:
            conn.close()

    def close(self) -> None:
        self._stop.set()
        self._thread.join(timeout=2)
        for conn in self._conns:
            conn.close()
        self.sock.close()


@pytest.fixture
def listener():
    created = []

    def factory(mode: str, payload: bytes = b"") -> Listener:
        srv = Listener(mode, payload)
        created.append(srv)
        return srv

    yield factory
    for srv in created:
        srv.close()


@pytest.fixture
def closed_port():
    """A loopback port that was bound a moment ago and is now unused."""
    s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    s.bind(("127.0.0.1", 0))
    port = s.getsockname()[1]
    s.close()
    return port


class CheckedSlotPool(SlotPool):
    """Slot pool that counts any moment it holds more slots than its capacity."""

    violations = 0

    def _on_acquire(self, held: int) -> None:
        if held > self.capacity:
            CheckedSlotPool.violations += 1

    def _on_release(self, held: int) -> None:
        if not 0 <= held <= self.capacity:
            CheckedSlotPool.violations += 1


@pytest.fixture
def checked_pool():
    CheckedSlotPool.violations = 0
    return CheckedSlotPool


class FakeProber:
    """Connection prober stand-in: listed ports are open, the rest closed."""

    def __init__(self, open_ports=(), delay: float = 0.0) -> None:
        self.open_ports = set(open_ports)
        self.delay = delay
        self.lock = threading.Lock()
        self.intervals = []
        self.calls = []

    def probe(self, port):
        start = time.perf_counter()
        if self.delay:
            time.sleep(self.delay)
        with self.lock:
            self.calls.append(port)
            self.intervals.append((start, time.perf_counter()))
        if port in self.open_ports:
            return FakeSocket()
        return None


class FakeSocket:
    def __init__(self) -> None:
        self.closed = False

    def close(self) -> None:
        self.closed = True


class Collector:
    """Thread-safe result sink."""

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.results = []

    def __call__(self, result: PortResult) -> None:
        with self.lock:
            self.results.append(result)

    @property
    def open_ports(self):
        return sorted(r.port for r in self.results if r.status is PortStatus.OPEN)


@pytest.fixture
def fake_prober():
    return FakeProber


@pytest.fixture
def sink():
    return Collector()
