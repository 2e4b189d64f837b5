"""AnalyzeResultFetcher abstract base class.

Defines the status-check contract the operation pollers depend on.  A
poller never knows which concrete fetcher is behind it — the REST client
in production, an in-memory fake in tests.

Contract:
    ``get_analyze_receipt_result(operation_id)`` returns a ``StatusUpdate``
    (decoded status record + raw response) or raises a ``ServiceError``.
    Implementations must tolerate concurrent use by many pollers.
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING

from doc_analysis.core.exceptions import AnalysisError, ContractError

if TYPE_CHECKING:
    from doc_analysis.models.status import StatusUpdate
    from doc_analysis.operations.cancellation import CancellationToken


class AnalyzeResultFetcher(abc.ABC):
    """Abstract base class for receipt analysis status fetchers.

    Concrete implementations must override both the blocking and the
    asyncio variant.  Both must honour the optional cancellation token by
    raising ``OperationCancelledError`` before issuing a request once the
    token is cancelled.
    """

    @abc.abstractmethod
    def get_analyze_receipt_result(
        self,
        operation_id: str,
        *,
        cancellation: CancellationToken | None = None,
    ) -> StatusUpdate:
        """Fetch the current status of a receipt analysis operation.

        Args:
            operation_id: The operation identifier.
            cancellation: Optional token that aborts the request.

        Returns:
            A ``StatusUpdate`` with the decoded record and raw response.

        Raises:
            ServiceError: On transport or service errors.
            OperationCancelledError: If *cancellation* fired.
        """

    @abc.abstractmethod
    async def get_analyze_receipt_result_async(
        self,
        operation_id: str,
        *,
        cancellation: CancellationToken | None = None,
    ) -> StatusUpdate:
        """Asyncio variant of ``get_analyze_receipt_result``."""

    @property
    def default_polling_interval(self) -> float | None:
        """Delay between polls this fetcher was configured with, if any.

        Operations built on the fetcher use it when the caller gives no
        explicit default.
        """
        return None


# ---------------------------------------------------------------------------
# Service exceptions
# ---------------------------------------------------------------------------


class ServiceError(AnalysisError):
    """Base exception for transport and service faults during a status check.

    These errors are never cached by a poller; a later retry may succeed.

    Attributes:
        status_code: HTTP status code, or ``None`` if no response arrived.
        message: Human-readable error description.
        retryable: Whether the caller should retry the check.
    """

    default_stage = "status_check"
    default_code = "SERVICE_ERROR"

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        error_code: str = "",
        retryable: bool = False,
    ) -> None:
        self.status_code = status_code
        super().__init__(
            message,
            retryable=retryable,
            code=error_code or self.default_code,
            stage=self.default_stage,
        )

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"[{self.status_code}] {self.message}"


class ServiceRequestError(ServiceError):
    """The request never produced a response (timeout, connection reset)."""

    default_code = "SERVICE_REQUEST_FAILED"

    def __init__(self, message: str) -> None:
        super().__init__(message, retryable=True)


class ServiceAuthError(ServiceError):
    """Authentication or authorisation failure (401/403)."""

    default_code = "SERVICE_AUTH_FAILED"

    def __init__(self, message: str, *, status_code: int, error_code: str = "") -> None:
        super().__init__(message, status_code=status_code, error_code=error_code, retryable=False)


class ServiceResponseError(ServiceError):
    """The service answered with an error status."""

    default_code = "SERVICE_RESPONSE_ERROR"


class ServiceContractError(ContractError):
    """The service answered 2xx but the body does not match the status schema."""

    default_stage = "status_check"
    default_code = "SERVICE_CONTRACT_VIOLATION"
