# Scanner package initialization
from .banner import BannerCollector, ProbeStrategy, RandomProbe, StaticProbe
from .connection import ConnectionProber
from .models import PortResult, PortStatus, ScanSummary
from .port_scanner import PortScanner
from .slots import ConcurrencySlot, SlotPool

__all__ = [
    "BannerCollector",
    "ConcurrencySlot",
    "ConnectionProber",
    "PortResult",
    "PortScanner",
    "PortStatus",
    "ProbeStrategy",
    "RandomProbe",
    "ScanSummary",
    "SlotPool",
    "StaticProbe",
]
