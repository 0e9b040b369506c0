"""
banner.py - Best-effort banner capture on an already-open connection.

A short probe is written first because many services stay silent until the
client says something.  Whatever the peer returns before it closes the
connection or the read deadline passes becomes the banner.  Nothing in
here raises on network errors: an unreadable service simply has no banner.
"""

import logging
import random
from abc import ABC, abstractmethod
import socket
import string
import time
from typing import Optional

from ..config import DEFAULT_PROBE

logger = logging.getLogger("portsweep")

RECV_CHUNK = 4096
DEFAULT_MAX_BYTES = 64 * 1024


# ══════════════════════════════════════════════════════════════════════ #
#  Probe payload strategies
# ══════════════════════════════════════════════════════════════════════ #
class ProbeStrategy(ABC):
    """Produces the bytes written to a service before reading its banner."""

    @abstractmethod
    def payload(self) -> bytes:
        """Return the probe for one connection."""


class StaticProbe(ProbeStrategy):
    """Always sends the same greeting."""

    def __init__(self, data: bytes = DEFAULT_PROBE) -> None:
        self.data = data

    def payload(self) -> bytes:
        return self.data

    def __repr__(self) -> str:
        return f"StaticProbe({self.data!r})"


class RandomProbe(ProbeStrategy):
    """
    Sends *length* pseudo-random printable characters followed by CRLF.

    A fresh sequence is generated for every connection.  Pass a seeded
    ``random.Random`` as *rng* for reproducible payloads.
    """

    ALPHABET = string.ascii_letters + string.digits

    def __init__(self, length: int = 8, rng: Optional[random.Random] = None) -> None:
        if length < 1:
            raise ValueError("Random probe length must be >= 1")
        self.length = length
        self._rng = rng or random.Random()

    def payload(self) -> bytes:
        body = "".join(self._rng.choice(self.ALPHABET) for _ in range(self.length))
        return body.encode("ascii") + b"\r\n"

    def __repr__(self) -> str:
        return f"RandomProbe(length={self.length})"


def decode_banner(data: bytes) -> str:
    """Decode raw service output permissively and trim trailing whitespace."""
    return data.decode("utf-8", errors="replace").rstrip()


# ══════════════════════════════════════════════════════════════════════ #
#  Collector
# ══════════════════════════════════════════════════════════════════════ #
class BannerCollector:
    """Send a probe on an open socket and read the reply within a deadline."""

    def __init__(
        self,
        timeout: float,
        probe: Optional[ProbeStrategy] = None,
        max_bytes: int = DEFAULT_MAX_BYTES,
    ) -> None:
        """
        Args:
            timeout:   Seconds allowed for the whole read phase.
            probe:     Payload strategy; defaults to the static greeting.
            max_bytes: Stop reading once this many bytes were received.
        """
        self.timeout = timeout
        self.probe = probe or StaticProbe()
        self.max_bytes = max_bytes

    def collect(self, sock: socket.socket) -> Optional[str]:
        """
        Capture a banner from *sock* and close it.

        Returns:
            The decoded banner, or None if the peer sent nothing.  A reply
            of only whitespace decodes to an empty string, not None.
        """
        try:
            self._send_probe(sock)
            data = self._read(sock)
        finally:
            try:
                sock.close()
            except OSError:
                pass
        if not data:
            return None
        return decode_banner(data)

    def _send_probe(self, sock: socket.socket) -> None:
        try:
            sock.settimeout(self.timeout)
            sock.sendall(self.probe.payload())
        except OSError as exc:
            # Some services close right after their greeting; still read it.
            logger.debug("Probe write failed on %s - %s", _peer(sock), exc)

    def _read(self, sock: socket.socket) -> bytes:
        chunks = []
        received = 0
        deadline = time.monotonic() + self.timeout

        while received < self.max_bytes:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                break
            try:
                sock.settimeout(remaining)
                chunk = sock.recv(min(RECV_CHUNK, self.max_bytes - received))
            except socket.timeout:
                break
            except OSError as exc:
                logger.debug("Banner read failed on %s - %s", _peer(sock), exc)
                break
            if not chunk:
                break
            chunks.append(chunk)
            received += len(chunk)

        return b"".join(chunks)


def _peer(sock: socket.socket) -> str:
    try:
        peer = sock.getpeername()
    except OSError:
        return "<disconnected>"
    if isinstance(peer, tuple):
        return f"{peer[0]}:{peer[1]}"
    return str(peer)
