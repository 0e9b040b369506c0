"""
slots.py - Fixed-size pool of concurrency slots.

The coordinator draws one slot per port before dispatching work, so the
pool size is the hard upper bound on in-flight port probes.
"""

import logging
import threading
from typing import Optional

logger = logging.getLogger("portsweep")


class ConcurrencySlot:
    """A single permit from a :class:`SlotPool`.  Releasing twice is a no-op."""

    def __init__(self, pool: "SlotPool", port: int) -> None:
        self._pool = pool
        self.port = port
        self._released = False
        self._lock = threading.Lock()

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        with self._lock:
            if self._released:
                return
            self._released = True
        self._pool._release()

    def __enter__(self) -> "ConcurrencySlot":
        return self

    def __exit__(self, *exc_info) -> None:
        self.release()


class SlotPool:
    """Counting pool of :class:`ConcurrencySlot` permits."""

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(f"Slot pool capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self._semaphore = threading.BoundedSemaphore(capacity)
        self._lock = threading.Lock()
        self._held = 0
        self._peak = 0

    @property
    def held(self) -> int:
        return self._held

    @property
    def peak(self) -> int:
        return self._peak

    def acquire(self, port: int, timeout: Optional[float] = None) -> Optional[ConcurrencySlot]:
        """
        Block until a slot is free and return it bound to *port*.

        Returns ``None`` only when *timeout* is given and expires first.
        """
        if not self._semaphore.acquire(timeout=timeout):
            return None
        with self._lock:
            self._held += 1
            if self._held > self._peak:
                self._peak = self._held
            try:
                self._on_acquire(self._held)
            except BaseException:
                self._held -= 1
                self._semaphore.release()
                raise
        return ConcurrencySlot(self, port)

    def _release(self) -> None:
        try:
            with self._lock:
                self._held -= 1
                self._on_release(self._held)
        finally:
            # BoundedSemaphore raises ValueError if released past capacity
            self._semaphore.release()

    # Hooks for instrumented subclasses; called with the pool lock held.
    def _on_acquire(self, held: int) -> None:
        pass

    def _on_release(self, held: int) -> None:
        pass
