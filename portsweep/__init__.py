"""portsweep - concurrent TCP connect port scanner with banner capture."""

__version__ = "1.0.0"

from .config import ConfigError, ScanConfig
from .resolver import ResolutionError, resolve_target
from .scanner import PortResult, PortScanner, PortStatus, ScanSummary

__all__ = [
    "ConfigError",
    "PortResult",
    "PortScanner",
    "PortStatus",
    "ResolutionError",
    "ScanConfig",
    "ScanSummary",
    "resolve_target",
]
