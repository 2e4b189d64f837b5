"""Generic wait-until-complete helpers for long-running operations.

Works on any ``LongRunningOperation``: repeatedly refresh the status,
stop once ``has_completed`` is observed, otherwise sleep and retry.

Delay between polls, in order of precedence:
    1. the caller's ``polling_interval``;
    2. the service's retry-after hint on the last response;
    3. ``default_interval`` (1 second unless the operation overrides it).

The blocking and asyncio variants share the same decisions; only the
refresh call and the sleep differ.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, TypeVar

from doc_analysis.core.constants import DEFAULT_POLL_INTERVAL_SECONDS
from doc_analysis.core.exceptions import ValidationError
from doc_analysis.operations.base import CompletedOperation, OperationTimeoutError
from doc_analysis.utils.helpers import parse_retry_after

if TYPE_CHECKING:
    from doc_analysis.operations.base import LongRunningOperation
    from doc_analysis.operations.cancellation import CancellationToken

logger = logging.getLogger(__name__)

T = TypeVar("T")


def wait_until_complete(
    operation: LongRunningOperation[T],
    polling_interval: float | None = None,
    cancellation: CancellationToken | None = None,
    *,
    default_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
    max_wait_seconds: float | None = None,
) -> CompletedOperation[T]:
    """Block until *operation* completes.

    Args:
        operation: The operation to poll.
        polling_interval: Fixed delay between polls in seconds; ``None``
            honours the service's retry-after hint.
        cancellation: Optional token checked before every poll and while
            sleeping.
        default_interval: Delay used when no other source supplies one.
        max_wait_seconds: Optional upper bound on total waiting time.

    Returns:
        ``CompletedOperation(raw_response, value)``.

    Raises:
        AnalysisFailedError: If the service reports the job as failed.
        ServiceError: If a status check fails at the transport level.
        OperationCancelledError: If *cancellation* fires.
        OperationTimeoutError: If *max_wait_seconds* elapses first.
    """
    _check_intervals(polling_interval, default_interval, max_wait_seconds)
    started = time.monotonic()
    poll_count = 0

    while True:
        if cancellation is not None:
            cancellation.raise_if_cancelled()

        operation.update_status(cancellation=cancellation)
        poll_count += 1

        if operation.has_completed:
            _log_completed(operation, poll_count, time.monotonic() - started)
            return CompletedOperation(operation.raw_response, operation.value)

        delay = _next_delay(operation, polling_interval, default_interval)
        delay = _bounded_delay(operation, delay, started, max_wait_seconds, poll_count)
        logger.debug(
            "Operation still running | operation_id=%s | poll_count=%d | next_poll_in=%.2fs",
            operation.id,
            poll_count,
            delay,
        )

        if cancellation is None:
            time.sleep(delay)
        elif cancellation.wait(delay):
            cancellation.raise_if_cancelled()


async def wait_until_complete_async(
    operation: LongRunningOperation[T],
    polling_interval: float | None = None,
    cancellation: CancellationToken | None = None,
    *,
    default_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
    max_wait_seconds: float | None = None,
) -> CompletedOperation[T]:
    """Asyncio variant of ``wait_until_complete``.

    Sleeps with ``asyncio.sleep``, or on the token when one is given so a
    cancel ends the delay at once.  Cancelling the awaiting task raises
    ``asyncio.CancelledError`` and leaves the operation untouched.
    """
    _check_intervals(polling_interval, default_interval, max_wait_seconds)
    started = time.monotonic()
    poll_count = 0

    while True:
        if cancellation is not None:
            cancellation.raise_if_cancelled()

        await operation.update_status_async(cancellation=cancellation)
        poll_count += 1

        if operation.has_completed:
            _log_completed(operation, poll_count, time.monotonic() - started)
            return CompletedOperation(operation.raw_response, operation.value)

        delay = _next_delay(operation, polling_interval, default_interval)
        delay = _bounded_delay(operation, delay, started, max_wait_seconds, poll_count)
        logger.debug(
            "Operation still running | operation_id=%s | poll_count=%d | next_poll_in=%.2fs",
            operation.id,
            poll_count,
            delay,
        )

        if cancellation is None:
            await asyncio.sleep(delay)
        elif await cancellation.wait_async(delay):
            cancellation.raise_if_cancelled()


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _check_intervals(
    polling_interval: float | None,
    default_interval: float,
    max_wait_seconds: float | None,
) -> None:
    if polling_interval is not None and polling_interval < 0:
        msg = f"polling_interval must be >= 0, got {polling_interval!r}"
        raise ValidationError(msg, stage="operation")
    if default_interval < 0:
        msg = f"default_interval must be >= 0, got {default_interval!r}"
        raise ValidationError(msg, stage="operation")
    if max_wait_seconds is not None and max_wait_seconds < 0:
        msg = f"max_wait_seconds must be >= 0, got {max_wait_seconds!r}"
        raise ValidationError(msg, stage="operation")


def _next_delay(
    operation: LongRunningOperation[T],
    polling_interval: float | None,
    default_interval: float,
) -> float:
    if polling_interval is not None:
        return polling_interval
    response = operation.raw_response
    suggested = parse_retry_after(response.headers if response is not None else None)
    return default_interval if suggested is None else suggested


def _bounded_delay(
    operation: LongRunningOperation[T],
    delay: float,
    started: float,
    max_wait_seconds: float | None,
    poll_count: int,
) -> float:
    """Clamp *delay* to the remaining wait budget; raise once it is spent."""
    if max_wait_seconds is None:
        return delay
    elapsed = time.monotonic() - started
    remaining = max_wait_seconds - elapsed
    if remaining <= 0:
        logger.warning(
            "Operation wait timed out | operation_id=%s | waited=%.1fs | poll_count=%d",
            operation.id,
            elapsed,
            poll_count,
        )
        raise OperationTimeoutError(operation.id, elapsed, poll_count)
    return min(delay, remaining)


def _log_completed(operation: LongRunningOperation[T], poll_count: int, elapsed: float) -> None:
    logger.info(
        "Operation completed | operation_id=%s | has_value=%s | poll_count=%d | elapsed=%.1fs",
        operation.id,
        operation.has_value,
        poll_count,
        elapsed,
    )
