"""LongRunningOperation abstract base class.

Defines the contract shared by every operation kind the client can
track.  The generic wait helpers in ``operations.polling`` depend only on
this interface, so each concrete operation implements status refresh and
result access once and inherits blocking and asyncio waiting.

Lifecycle:
    1. ``update_status()``       — one status check (no-op once completed).
    2. ``has_completed``         — monotonic terminal flag.
    3. ``value``                 — result, cached failure, or not-ready.
    4. ``wait_for_completion()`` — repeat 1-2 until terminal, then read 3.
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Generic, NamedTuple, TypeVar

from doc_analysis.core.constants import DEFAULT_POLL_INTERVAL_SECONDS
from doc_analysis.core.exceptions import AnalysisError, TransientError

if TYPE_CHECKING:
    import httpx

    from doc_analysis.operations.cancellation import CancellationToken

T = TypeVar("T")


class CompletedOperation(NamedTuple, Generic[T]):
    """Final raw response paired with the operation's value.

    Unpacks as ``raw_response, value = operation.wait_for_completion()``.
    """

    raw_response: httpx.Response | None
    value: T


class OperationNotCompleteError(AnalysisError):
    """The operation has not reached a terminal status yet.

    Not a failure: the remote job is still running.
    """

    default_stage = "operation"
    default_code = "OPERATION_NOT_COMPLETE"

    def __init__(self, operation_id: str) -> None:
        self.operation_id = operation_id
        super().__init__(f"Operation {operation_id!r} has not completed yet", retryable=True)


class OperationTimeoutError(TransientError):
    """Waiting exceeded ``max_wait_seconds``; the operation is still pending."""

    default_stage = "operation"
    default_code = "OPERATION_WAIT_TIMEOUT"

    def __init__(self, operation_id: str, waited_seconds: float, poll_count: int) -> None:
        self.operation_id = operation_id
        self.waited_seconds = waited_seconds
        self.poll_count = poll_count
        super().__init__(
            f"Operation {operation_id!r} still running after "
            f"{waited_seconds:.1f}s ({poll_count} status checks)"
        )


class LongRunningOperation(abc.ABC, Generic[T]):
    """Abstract base class for server-side long-running operations.

    Concrete implementations must override the identity, state and refresh
    members.  ``wait_for_completion`` and ``wait_for_completion_async`` are
    provided on top of them.
    """

    #: Fallback delay between polls when neither caller nor service suggests one.
    default_polling_interval: float = DEFAULT_POLL_INTERVAL_SECONDS

    @property
    @abc.abstractmethod
    def id(self) -> str:
        """Opaque identifier of the remote job."""

    @property
    @abc.abstractmethod
    def has_completed(self) -> bool:
        """``True`` once a terminal status has been observed; never reverts."""

    @property
    @abc.abstractmethod
    def has_value(self) -> bool:
        """``True`` once the operation has succeeded and its value is available."""

    @property
    @abc.abstractmethod
    def raw_response(self) -> httpx.Response | None:
        """Last status-check response; ``None`` until the first check."""

    @property
    @abc.abstractmethod
    def value(self) -> T:
        """Return the result.

        Raises:
            OperationNotCompleteError: If no terminal status was observed yet.
            AnalysisFailedError: The cached failure, if the operation failed.
        """

    @abc.abstractmethod
    def update_status(self, cancellation: CancellationToken | None = None) -> httpx.Response | None:
        """Check the remote job once and return the raw response.

        A no-op returning the cached response once completed.

        Raises:
            ServiceError: On transport or service faults (state untouched).
            AnalysisFailedError: When this check observes a failed job.
        """

    @abc.abstractmethod
    async def update_status_async(
        self,
        cancellation: CancellationToken | None = None,
    ) -> httpx.Response | None:
        """Asyncio variant of ``update_status``."""

    def wait_for_completion(
        self,
        polling_interval: float | None = None,
        cancellation: CancellationToken | None = None,
        *,
        max_wait_seconds: float | None = None,
    ) -> CompletedOperation[T]:
        """Poll until the operation completes; see ``polling.wait_until_complete``."""
        from doc_analysis.operations.polling import wait_until_complete

        return wait_until_complete(
            self,
            polling_interval,
            cancellation,
            default_interval=self.default_polling_interval,
            max_wait_seconds=max_wait_seconds,
        )

    async def wait_for_completion_async(
        self,
        polling_interval: float | None = None,
        cancellation: CancellationToken | None = None,
        *,
        max_wait_seconds: float | None = None,
    ) -> CompletedOperation[T]:
        """Asyncio variant of ``wait_for_completion``."""
        from doc_analysis.operations.polling import wait_until_complete_async

        return await wait_until_complete_async(
            self,
            polling_interval,
            cancellation,
            default_interval=self.default_polling_interval,
            max_wait_seconds=max_wait_seconds,
        )
