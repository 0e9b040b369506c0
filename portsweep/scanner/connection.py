"""
connection.py - Single-attempt TCP connect probe.

An open port hands its connected socket back to the caller so the banner
collector can reuse it instead of connecting a second time.
"""

import ipaddress
import logging
import socket
from typing import Optional

logger = logging.getLogger("portsweep")


def address_family(address: str) -> int:
    """Return AF_INET or AF_INET6 for an IP address literal."""
    if ipaddress.ip_address(address).version == 6:
        return socket.AF_INET6
    return socket.AF_INET


class ConnectionProber:
    """TCP connect prober bound to one target address."""

    def __init__(self, address: str, timeout: float) -> None:
        """
        Args:
            address: Resolved IPv4 / IPv6 address of the target.
            timeout: Seconds to wait for the connect to complete.
        """
        self.address = address
        self.timeout = timeout
        self._family = address_family(address)

    def probe(self, port: int) -> Optional[socket.socket]:
        """
        Attempt one TCP connect to *address*:*port*.

        Returns:
            The connected socket if the port is open, otherwise None.
            The caller owns the returned socket and must close it.
        """
        sock = socket.socket(self._family, socket.SOCK_STREAM)
        try:
            sock.settimeout(self.timeout)
            sock.connect((self.address, port))
            return sock
        except socket.timeout:
            logger.debug("Port %d on %s timed out", port, self.address)
        except ConnectionRefusedError:
            logger.debug("Port %d on %s refused", port, self.address)
        except OSError as exc:
            logger.debug("Socket error on %s:%d - %s", self.address, port, exc)
        except Exception:
            sock.close()
            raise
        sock.close()
        return None
