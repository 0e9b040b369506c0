"""
config.py - Scan configuration and its defaults.

A ScanConfig is built once from the command line (or directly by a
caller) and handed to the scanner unchanged for the whole run.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .scanner.banner import ProbeStrategy

# ── Defaults ────────────────────────────────────────────────────────────
MIN_PORT = 1
MAX_PORT = 65535

DEFAULT_START_PORT = MIN_PORT
DEFAULT_END_PORT = MAX_PORT
DEFAULT_CONCURRENCY = 200
DEFAULT_TIMEOUT_MS = 1000
DEFAULT_GRAB_BANNER = True
DEFAULT_PROBE = b"hai\r\n"


class ConfigError(ValueError):
    """Raised for any configuration that must stop the run before scanning."""


@dataclass(frozen=True)
class ScanConfig:
    """
    Immutable settings for one scan run.

    ``timeout`` and ``min_latency`` are in seconds.  ``probe`` selects the
    payload the banner collector sends; ``None`` means the static greeting.
    """

    address: str
    start_port: int = DEFAULT_START_PORT
    end_port: int = DEFAULT_END_PORT
    concurrency: int = DEFAULT_CONCURRENCY
    timeout: float = DEFAULT_TIMEOUT_MS / 1000.0
    grab_banner: bool = DEFAULT_GRAB_BANNER
    min_latency: float = 0.0
    probe: Optional["ProbeStrategy"] = None

    def __post_init__(self) -> None:
        if not self.address:
            raise ConfigError("Target address is empty")
        for name in ("start_port", "end_port"):
            value = getattr(self, name)
            if not MIN_PORT <= value <= MAX_PORT:
                raise ConfigError(
                    f"{name.replace('_', ' ').capitalize()} {value} is outside "
                    f"{MIN_PORT}-{MAX_PORT}"
                )
        if self.start_port > self.end_port:
            raise ConfigError(
                f"Invalid port range: {self.start_port}-{self.end_port}"
            )
        if self.concurrency < 1:
            raise ConfigError("Minimum 1 thread")
        if self.timeout <= 0:
            raise ConfigError("Timeout must be greater than zero")
        if self.min_latency < 0:
            raise ConfigError("Minimum latency cannot be negative")

    @property
    def port_count(self) -> int:
        return self.end_port - self.start_port + 1

    def ports(self) -> range:
        """Every port in the configured range, ascending."""
        return range(self.start_port, self.end_port + 1)
