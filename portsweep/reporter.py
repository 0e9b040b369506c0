"""
reporter.py - Console rendering of scan results.

Results arrive from many worker threads at once; every write to the
console goes through one lock so lines from different ports never
interleave.
"""

import logging
import sys
import threading
from typing import Optional, TextIO

from colorama import Fore, Style

from .scanner.models import PortResult, ScanSummary

logger = logging.getLogger("portsweep")


class ConsoleReporter:
    """Prints open ports (and, optionally, closed ones) as they are found."""

    def __init__(self, stream: Optional[TextIO] = None, show_closed: bool = False) -> None:
        self.stream = stream or sys.stdout
        self.show_closed = show_closed
        self._lock = threading.Lock()

    @property
    def lock(self) -> threading.Lock:
        """Console lock, shared with anything else writing to the stream."""
        return self._lock

    def _write(self, text: str) -> None:
        with self._lock:
            self.stream.write(text)
            self.stream.flush()

    def header(self, target: str, address: str) -> None:
        if target != address:
            self._write(
                f"{Fore.WHITE}Scanning host: {Fore.CYAN}{target} "
                f"{Fore.WHITE}({address}){Style.RESET_ALL}\n\n"
            )
        else:
            self._write(f"{Fore.WHITE}Scanning host: {Fore.CYAN}{address}{Style.RESET_ALL}\n\n")

    def emit(self, result: PortResult) -> None:
        """Render one result; closed ports are dropped unless show_closed."""
        text = self.format(result)
        if text:
            self._write(text)

    def format(self, result: PortResult) -> str:
        port = f"{Fore.GREEN}{Style.BRIGHT}{result.port}{Style.RESET_ALL}"
        if not result.is_open:
            if not self.show_closed:
                return ""
            return f"{Fore.RED}Port {result.port} is closed{Style.RESET_ALL}\n"
        if result.banner:
            return f"Port {port} is open, banner:\n\n{result.banner}\n\n"
        return f"Port {port} is open\n\n"

    def summary(self, summary: ScanSummary) -> None:
        self._write(
            f"{Fore.WHITE}Scanned {Fore.YELLOW}{summary.scanned}{Fore.WHITE} "
            f"port(s) in {Fore.YELLOW}{summary.elapsed_s:.2f}s{Fore.WHITE} - "
            f"{Fore.GREEN}{summary.open_count} open{Style.RESET_ALL}\n"
        )


class TerminalTitle:
    """
    Shows the port currently being probed in the terminal title.

    Uses the xterm OSC 2 sequence; colorama translates it into a console
    title call on Windows.  Purely decorative, so failures are ignored.
    """

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        enabled: Optional[bool] = None,
        lock: Optional[threading.Lock] = None,
    ) -> None:
        self.stream = stream or sys.stdout
        self._lock = lock or threading.Lock()
        if enabled is None:
            isatty = getattr(self.stream, "isatty", None)
            enabled = bool(isatty and isatty())
        self.enabled = enabled

    def set(self, title: str) -> None:
        if not self.enabled:
            return
        try:
            with self._lock:
                self.stream.write(f"\x1b]2;{title}\x07")
                self.stream.flush()
        except (OSError, ValueError) as exc:
            logger.debug("Could not set terminal title: %s", exc)

    def notify(self, port: int) -> None:
        self.set(f"Probing port {port}")
