"""Exception taxonomy for the receipt analysis client.

Every client exception inherits from ``AnalysisError`` and carries the
context a caller needs to decide whether to retry and what to log:
``stage``, ``code``, ``retryable`` and an optional ``correlation_id``.

Categories and where the client raises them
-------------------------------------------
- ``ValidationError`` (``validation``): bad operation ids, locations or
  intervals.  Never retryable.
- ``TransientError`` (``transient``): a wait that ran out of time while the
  job is still running.  Retryable.
- ``PermanentError`` (``permanent``): the service reported the analysis as
  failed.  Not retryable.
- ``ContractError`` (``contract``): a status body that does not match the
  expected schema.  Never retryable.

Exceptions outside these bases (service faults, not-ready, cancellation)
take their category from ``retryable``.
"""

from __future__ import annotations


class AnalysisError(Exception):
    """Base exception for all receipt-analysis errors.

    Attributes:
        message: Human-readable error description.
        stage: Component where the error occurred
            (``"status_check"``, ``"operation"``, ``"config"``).
        code: Machine-readable error code; service error codes are kept
            verbatim.
        retryable: Whether the caller may retry.
        correlation_id: Service request id, when known.
    """

    default_stage: str = ""
    default_code: str = ""
    default_retryable: bool = False
    #: Fixed category of a taxonomy base; ``None`` derives it from ``retryable``.
    default_category: str | None = None

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
        retryable: bool | None = None,
        correlation_id: str = "",
    ) -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        self.retryable = self.default_retryable if retryable is None else retryable
        self.correlation_id = correlation_id
        super().__init__(message)

    @property
    def category(self) -> str:
        if self.default_category is not None:
            return self.default_category
        return "transient" if self.retryable else "permanent"

    def to_error_dict(self) -> dict[str, object]:
        """Return a structured error payload with stable keys."""
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "retryable": self.retryable,
            "correlation_id": self.correlation_id,
        }


# ---------------------------------------------------------------------------
# Category base classes
# ---------------------------------------------------------------------------


class ValidationError(AnalysisError):
    """Invalid argument or reference."""

    default_code = "VALIDATION_FAILED"
    default_category = "validation"


class TransientError(AnalysisError):
    """Temporary condition; retrying later may succeed."""

    default_retryable = True
    default_category = "transient"


class PermanentError(AnalysisError):
    """Unrecoverable failure."""

    default_category = "permanent"


class ContractError(AnalysisError):
    """Service payload does not match the expected schema."""

    default_category = "contract"
