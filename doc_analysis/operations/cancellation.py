"""Cooperative cancellation for status checks and wait loops.

A ``CancellationToken`` is checked between poll iterations and before
each status request, and both wait loops sleep on it, so a cancel cuts a
pending delay short.  Cancelling never rolls back operation state: the
remote job keeps running, the client simply stops observing it.

asyncio callers may also cancel the awaiting task directly; that
surfaces as ``asyncio.CancelledError`` as usual.
"""

from __future__ import annotations

import asyncio
import contextlib
import threading
from typing import TYPE_CHECKING

from doc_analysis.core.exceptions import AnalysisError

if TYPE_CHECKING:
    from collections.abc import Callable


class OperationCancelledError(AnalysisError):
    """Raised when a caller cancels a status check or a wait."""

    default_stage = "operation"
    default_code = "OPERATION_CANCELLED"


class CancellationToken:
    """Thread-safe, one-way cancellation flag.

    ``cancel()`` may be called from any thread.  It wakes a blocking
    ``wait()`` directly and an asyncio ``wait_async()`` through its
    event loop.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._wakers: list[Callable[[], None]] = []

    def cancel(self) -> None:
        """Signal cancellation (idempotent)."""
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            wakers = list(self._wakers)
        for wake in wakers:
            wake()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        """Raise ``OperationCancelledError`` if the token has been cancelled."""
        if self._event.is_set():
            raise OperationCancelledError("Operation polling was cancelled")

    def wait(self, timeout: float) -> bool:
        """Block up to *timeout* seconds; return ``True`` if cancelled meanwhile."""
        return self._event.wait(timeout)

    async def wait_async(self, timeout: float) -> bool:
        """Asyncio variant of ``wait``; the running loop is not blocked."""
        if self._event.is_set():
            return True

        loop = asyncio.get_running_loop()
        woken = asyncio.Event()

        def wake() -> None:
            loop.call_soon_threadsafe(woken.set)

        with self._lock:
            self._wakers.append(wake)
        try:
            # Any cancel after this check calls wake().
            if not self._event.is_set():
                with contextlib.suppress(TimeoutError):
                    await asyncio.wait_for(woken.wait(), timeout)
            return self._event.is_set()
        finally:
            with self._lock:
                self._wakers.remove(wake)
