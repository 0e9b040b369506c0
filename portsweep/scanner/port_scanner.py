"""
port_scanner.py - Multi-threaded TCP connect port scanner.

Fans a port range out over a ThreadPoolExecutor.  A fixed pool of
concurrency slots is the only backpressure: the dispatch loop blocks until
a slot is free, so no more than ``concurrency`` ports are ever in flight,
however large the range.  Every port produces exactly one PortResult.
"""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional

from ..config import ScanConfig
from .banner import BannerCollector
from .connection import ConnectionProber
from .models import PortResult, PortStatus, ScanSummary
from .slots import ConcurrencySlot, SlotPool

logger = logging.getLogger("portsweep")

ResultSink = Callable[[PortResult], None]
DispatchHook = Callable[[int], None]


class PortScanner:
    """TCP connect-scan port scanner bounded by a concurrency slot pool."""

    def __init__(
        self,
        config: ScanConfig,
        prober: Optional[ConnectionProber] = None,
        collector: Optional[BannerCollector] = None,
        pool_factory: Callable[[int], SlotPool] = SlotPool,
    ) -> None:
        """
        Args:
            config:       Settings for the run.
            prober:       Connect prober; built from *config* when omitted.
            collector:    Banner collector; built from *config* when omitted.
            pool_factory: Called with the concurrency limit to build the
                          slot pool for each scan.
        """
        self.config = config
        self.prober = prober or ConnectionProber(config.address, config.timeout)
        self.collector = collector or BannerCollector(config.timeout, config.probe)
        self.pool_factory = pool_factory

    # ------------------------------------------------------------------ #
    #  Single port
    # ------------------------------------------------------------------ #
    def _probe_port(self, port: int) -> PortResult:
        start = time.perf_counter()
        sock = self.prober.probe(port)
        elapsed = round(time.perf_counter() - start, 4)

        if sock is None:
            return PortResult(port, PortStatus.CLOSED, elapsed_s=elapsed)

        logger.info("Port %d/tcp OPEN on %s", port, self.config.address)
        if not self.config.grab_banner:
            sock.close()
            return PortResult(port, PortStatus.OPEN, elapsed_s=elapsed)

        try:
            banner = self.collector.collect(sock)
        except Exception as exc:
            # The port did connect; only the banner is lost.
            logger.error(
                "Banner capture failed on %s:%d - %s",
                self.config.address, port, exc,
                exc_info=True,
            )
            sock.close()
            banner = None
        return PortResult(port, PortStatus.OPEN, banner, elapsed)

    def _scan_port(
        self,
        port: int,
        slot: ConcurrencySlot,
        on_result: ResultSink,
        on_dispatch: Optional[DispatchHook] = None,
    ) -> None:
        """Port task: probe one port, emit its result, always free the slot."""
        start = time.perf_counter()
        try:
            _notify(on_dispatch, port)
            try:
                result = self._probe_port(port)
            except Exception as exc:
                logger.error(
                    "Unexpected error scanning %s:%d - %s",
                    self.config.address, port, exc,
                    exc_info=True,
                )
                result = PortResult(
                    port,
                    PortStatus.CLOSED,
                    elapsed_s=round(time.perf_counter() - start, 4),
                )

            floor = self.config.min_latency - (time.perf_counter() - start)
            if floor > 0:
                time.sleep(floor)

            try:
                on_result(result)
            except Exception as exc:
                logger.error("Result handler failed for port %d: %s", port, exc)
        finally:
            slot.release()

    # ------------------------------------------------------------------ #
    #  Range scan
    # ------------------------------------------------------------------ #
    def scan(
        self,
        on_result: ResultSink,
        on_dispatch: Optional[DispatchHook] = None,
    ) -> ScanSummary:
        """
        Scan every port in the configured range.

        Args:
            on_result:   Called once per port with its PortResult, from
                         worker threads, in completion order.
            on_dispatch: Fire-and-forget notification called with the port
                         number when its task starts.  Errors are ignored.

        Returns:
            ScanSummary with counters for the finished run.
        """
        config = self.config
        pool = self.pool_factory(config.concurrency)
        lock = threading.Lock()
        counts = {"scanned": 0, "open": 0}

        def sink(result: PortResult) -> None:
            with lock:
                counts["scanned"] += 1
                if result.is_open:
                    counts["open"] += 1
            on_result(result)

        logger.info(
            "Starting TCP connect scan on %s ports %d-%d "
            "(%d ports, %d threads, timeout=%.3fs, banner=%s)",
            config.address, config.start_port, config.end_port,
            config.port_count, config.concurrency, config.timeout,
            config.grab_banner,
        )
        start_all = time.perf_counter()

        with ThreadPoolExecutor(
            max_workers=config.concurrency, thread_name_prefix="portsweep"
        ) as executor:
            for port in config.ports():
                slot = pool.acquire(port)
                try:
                    executor.submit(self._scan_port, port, slot, sink, on_dispatch)
                except BaseException:
                    slot.release()
                    raise

        summary = ScanSummary(
            scanned=counts["scanned"],
            open_count=counts["open"],
            elapsed_s=round(time.perf_counter() - start_all, 3),
            peak_concurrency=pool.peak,
        )
        logger.info(
            "Port scan complete - %d open port(s) found on %s in %.2fs",
            summary.open_count, config.address, summary.elapsed_s,
        )
        return summary


def _notify(hook: Optional[DispatchHook], port: int) -> None:
    if hook is None:
        return
    try:
        hook(port)
    except Exception as exc:
        logger.debug("Dispatch notification failed for port %d: %s", port, exc)
