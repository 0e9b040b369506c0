"""
resolver.py - Target resolution.

Turns the operator's target string into the single IP address the scanner
connects to.  Hostnames resolve to the first address the system resolver
returns.
"""

import ipaddress
import logging
import socket

logger = logging.getLogger("portsweep")


class ResolutionError(ValueError):
    """Raised when a target cannot be turned into an IP address."""


def resolve_target(target: str) -> str:
    """
    Resolve *target* to an IP address string.

    Supports:
      - IPv4 literal: "192.168.1.10"
      - IPv6 literal: "::1" (brackets are tolerated: "[::1]")
      - Hostname: "example.com"

    Raises:
        ResolutionError: if the target is empty or does not resolve.
    """
    target = target.strip()
    if target.startswith("[") and target.endswith("]"):
        target = target[1:-1]
    if not target:
        raise ResolutionError("Empty target")

    try:
        return str(ipaddress.ip_address(target))
    except ValueError:
        pass

    try:
        infos = socket.getaddrinfo(target, None, type=socket.SOCK_STREAM)
    except (socket.gaierror, UnicodeError) as exc:
        raise ResolutionError(f"Failed to resolve hostname '{target}': {exc}") from exc
    if not infos:
        raise ResolutionError(f"Failed to resolve hostname '{target}'")

    address = infos[0][4][0]
    logger.debug("Resolved %s -> %s", target, address)
    return address
