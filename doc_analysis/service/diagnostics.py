"""Structured failure construction for failed analysis operations.

When the service reports ``status: failed`` the poller hands the raw
response and the service error list to ``build_failed_operation_error``
exactly once; the resulting ``AnalysisFailedError`` is cached on the
operation and re-raised on every later result access.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from doc_analysis.core.exceptions import PermanentError

if TYPE_CHECKING:
    from collections.abc import Sequence

    import httpx

    from doc_analysis.models.status import ErrorEntry

UNKNOWN_ERROR_CODE = "UnknownError"
UNKNOWN_ERROR_MESSAGE = "The service reported a failure without error details."


class AnalysisFailedError(PermanentError):
    """The service reported the analysis operation as failed.

    Distinct from ``ServiceError``: the status check itself succeeded, the
    remote job did not.

    Attributes:
        code: Service error code of the first reported error.
        error_message: Service message of the first reported error.
        errors: Every error entry reported by the service.
        status_code: HTTP status of the status-check response.
        raw_response: The status-check response, for diagnostics.
    """

    default_stage = "operation"

    def __init__(
        self,
        message: str,
        *,
        error_code: str,
        error_message: str,
        errors: Sequence[ErrorEntry] = (),
        status_code: int | None = None,
        raw_response: httpx.Response | None = None,
        correlation_id: str = "",
    ) -> None:
        self.error_message = error_message
        self.errors = tuple(errors)
        self.status_code = status_code
        self.raw_response = raw_response
        super().__init__(message, code=error_code, correlation_id=correlation_id)


def build_failed_operation_error(
    raw_response: httpx.Response | None,
    errors: Sequence[ErrorEntry],
) -> AnalysisFailedError:
    """Build the structured failure for a failed operation.

    Args:
        raw_response: Response of the status check that reported failure.
        errors: Service-reported error entries (may be empty).

    Returns:
        An ``AnalysisFailedError`` whose ``code``/``error_message`` come from
        the first entry and whose text lists every entry.
    """
    if errors:
        error_code = errors[0].code or UNKNOWN_ERROR_CODE
        error_message = errors[0].message or UNKNOWN_ERROR_MESSAGE
    else:
        error_code = UNKNOWN_ERROR_CODE
        error_message = UNKNOWN_ERROR_MESSAGE

    status_code = raw_response.status_code if raw_response is not None else None
    reason = raw_response.reason_phrase if raw_response is not None else ""
    correlation_id = ""
    if raw_response is not None:
        correlation_id = raw_response.headers.get("apim-request-id", "")

    lines = ["Receipt analysis failed."]
    if status_code is not None:
        lines.append(f"Status: {status_code} ({reason})" if reason else f"Status: {status_code}")
    lines.append(f"ErrorCode: {error_code}")
    lines.append(f"Message: {error_message}")
    if len(errors) > 1:
        lines.append("Additional errors:")
        lines.extend(f"- {entry.code}: {entry.message}" for entry in errors[1:])

    return AnalysisFailedError(
        "\n".join(lines),
        error_code=error_code,
        error_message=error_message,
        errors=errors,
        status_code=status_code,
        raw_response=raw_response,
        correlation_id=correlation_id,
    )
