from dataclasses import dataclass
from enum import Enum
from typing import Optional


class PortStatus(Enum):
    OPEN = "open"
    CLOSED = "closed"


@dataclass(frozen=True)
class PortResult:
    port: int
    status: PortStatus
    banner: Optional[str] = None
    elapsed_s: float = 0.0

    @property
    def is_open(self) -> bool:
        return self.status is PortStatus.OPEN


@dataclass(frozen=True)
class ScanSummary:
    """Counters for a finished scan; individual results are not kept."""

    scanned: int
    open_count: int
    elapsed_s: float
    peak_concurrency: int
