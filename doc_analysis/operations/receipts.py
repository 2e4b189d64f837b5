"""RecognizeReceiptsOperation — tracks a receipt analysis job.

The operation owns the job id, the last raw status response, and the
terminal outcome.  Every transition happens inside ``update_status`` /
``update_status_async``:

- ``succeeded`` → the analysis payload is materialized into a
  ``RecognizedReceiptCollection`` and published.
- ``failed``    → a structured ``AnalysisFailedError`` is built once from
  the service error list, published, and raised.
- anything else → only the raw response is replaced.

The value (or error) and the completed flag are a single ``Outcome``
attribute, so they are published by one assignment: a reader observing
``has_completed`` always observes the value or the error with it.

Refreshes on one instance are serialized (``threading.Lock`` for blocking
callers, ``asyncio.Lock`` for coroutines); a refresh that was queued
behind the completing one returns the cached response without a request.
Concurrent blocking and asyncio refreshes on the same instance are not
supported.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import TYPE_CHECKING

from doc_analysis.core.exceptions import ValidationError
from doc_analysis.models.outcome import PENDING, Failed, Pending, Succeeded
from doc_analysis.models.receipts import (
    FormField,
    FormPage,
    RecognizedReceipt,
    RecognizedReceiptCollection,
)
from doc_analysis.models.status import OperationStatus
from doc_analysis.operations.base import LongRunningOperation, OperationNotCompleteError
from doc_analysis.service.base import ServiceContractError
from doc_analysis.service.diagnostics import build_failed_operation_error
from doc_analysis.utils.helpers import parse_operation_id

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    import httpx

    from doc_analysis.core.exceptions import AnalysisError
    from doc_analysis.models.outcome import Outcome
    from doc_analysis.models.status import (
        AnalyzeResult,
        DocumentResult,
        ErrorEntry,
        FieldValue,
        ReadResult,
        StatusUpdate,
    )
    from doc_analysis.operations.cancellation import CancellationToken
    from doc_analysis.service.base import AnalyzeResultFetcher

    Materializer = Callable[[AnalyzeResult], RecognizedReceiptCollection]
    ErrorBuilder = Callable[[httpx.Response | None, Sequence[ErrorEntry]], AnalysisError]

logger = logging.getLogger(__name__)


class RecognizeReceiptsOperation(LongRunningOperation[RecognizedReceiptCollection]):
    """Tracks the status of a long-running receipt recognition job.

    Example usage::

        operation = RecognizeReceiptsOperation.from_operation_location(
            client, response.headers["Operation-Location"]
        )
        raw_response, receipts = operation.wait_for_completion()
        total = receipts[0].get_field_value("Total")
    """

    def __init__(
        self,
        operation_id: str,
        client: AnalyzeResultFetcher,
        *,
        materializer: Materializer | None = None,
        error_builder: ErrorBuilder | None = None,
        default_polling_interval: float | None = None,
    ) -> None:
        """Attach to an existing analysis job.

        Args:
            operation_id: The job's operation id.
            client: Status fetcher used for every status check.
            materializer: Converts a succeeded payload into the result
                collection (defaults to ``convert_to_recognized_receipts``).
            error_builder: Builds the structured failure for a failed job
                (defaults to ``build_failed_operation_error``).
            default_polling_interval: Fallback delay between polls in
                seconds when the service sends no retry-after hint.
                Defaults to the client's configured interval.

        Raises:
            ValidationError: If *operation_id* is empty.
        """
        if not operation_id or not operation_id.strip():
            msg = "operation_id must not be empty"
            raise ValidationError(msg, stage="operation", code="INVALID_OPERATION_ID")
        if default_polling_interval is None:
            default_polling_interval = client.default_polling_interval
        if default_polling_interval is not None:
            if default_polling_interval < 0:
                msg = f"default_polling_interval must be >= 0, got {default_polling_interval!r}"
                raise ValidationError(msg, stage="operation")
            self.default_polling_interval = default_polling_interval

        self._id = operation_id
        self._client = client
        self._materialize = materializer or convert_to_recognized_receipts
        self._build_error = error_builder or build_failed_operation_error
        self._response: httpx.Response | None = None
        self._outcome: Outcome[RecognizedReceiptCollection] = PENDING
        self._lock = threading.Lock()
        self._async_lock = asyncio.Lock()

    @classmethod
    def from_operation_location(
        cls,
        client: AnalyzeResultFetcher,
        operation_location: str,
        **kwargs: object,
    ) -> RecognizeReceiptsOperation:
        """Attach to a job using the ``Operation-Location`` returned at submission.

        The id is the final path segment of *operation_location*.

        Raises:
            ValidationError: If the location is empty or has no id segment.
        """
        return cls(parse_operation_id(operation_location), client, **kwargs)  # type: ignore[arg-type]

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def id(self) -> str:
        return self._id

    @property
    def has_completed(self) -> bool:
        return not isinstance(self._outcome, Pending)

    @property
    def has_value(self) -> bool:
        return isinstance(self._outcome, Succeeded)

    @property
    def raw_response(self) -> httpx.Response | None:
        return self._response

    @property
    def value(self) -> RecognizedReceiptCollection:
        """The recognized receipts.

        Never issues a request.

        Raises:
            OperationNotCompleteError: If the job has not reached a terminal
                status yet.
            AnalysisFailedError: The cached failure, if the job failed.
        """
        outcome = self._outcome
        if isinstance(outcome, Succeeded):
            return outcome.value
        if isinstance(outcome, Failed):
            raise outcome.error
        raise OperationNotCompleteError(self._id)

    # ------------------------------------------------------------------
    # Status refresh
    # ------------------------------------------------------------------

    def update_status(self, cancellation: CancellationToken | None = None) -> httpx.Response | None:
        """Check the job once; a no-op once completed.

        Returns:
            The raw response of this check, or the cached one.

        Raises:
            ServiceError: On transport or service faults; state is untouched.
            OperationCancelledError: If *cancellation* fired before the request.
            AnalysisFailedError: When this check observes the job as failed.
        """
        if self.has_completed:
            return self._response
        with self._lock:
            if self.has_completed:
                return self._response
            update = self._client.get_analyze_receipt_result(self._id, cancellation=cancellation)
            return self._apply(update)

    async def update_status_async(
        self,
        cancellation: CancellationToken | None = None,
    ) -> httpx.Response | None:
        """Asyncio variant of ``update_status``."""
        if self.has_completed:
            return self._response
        async with self._async_lock:
            if self.has_completed:
                return self._response
            update = await self._client.get_analyze_receipt_result_async(
                self._id, cancellation=cancellation
            )
            return self._apply(update)

    def _apply(self, update: StatusUpdate) -> httpx.Response:
        """Record *update* and perform the status transition."""
        self._response = update.raw_response
        status = update.result.status

        if not status.is_terminal:
            logger.debug(
                "Receipt analysis in progress | operation_id=%s | status=%s",
                self._id,
                status.value,
            )
            return update.raw_response

        if status is OperationStatus.SUCCEEDED:
            analyze_result = update.result.analyze_result
            if analyze_result is None:
                msg = f"Operation {self._id!r} succeeded without an analyzeResult payload"
                raise ServiceContractError(msg)
            value = self._materialize(analyze_result)
            # Value and completed flag are published by this one assignment.
            self._outcome = Succeeded(value)
            logger.info(
                "Receipt analysis succeeded | operation_id=%s | receipts=%d",
                self._id,
                len(value),
            )
            return update.raw_response

        error = self._build_error(update.raw_response, update.result.errors)
        self._outcome = Failed(error)
        logger.warning(
            "Receipt analysis failed | operation_id=%s | code=%s",
            self._id,
            error.code,
        )
        raise error


# ---------------------------------------------------------------------------
# Result materialization
# ---------------------------------------------------------------------------


def convert_to_recognized_receipts(analyze_result: AnalyzeResult) -> RecognizedReceiptCollection:
    """Build one ``RecognizedReceipt`` per document result, in service order."""
    pages = {read.page: _to_form_page(read) for read in analyze_result.read_results}
    receipts = tuple(_to_receipt(document, pages) for document in analyze_result.document_results)
    return RecognizedReceiptCollection(receipts)


def _to_receipt(document: DocumentResult, pages: dict[int, FormPage]) -> RecognizedReceipt:
    first_page = document.page_range[0] if document.page_range else 1
    last_page = document.page_range[-1] if document.page_range else first_page
    fields = {
        name: _to_form_field(name, value)
        for name, value in document.fields.items()
        if value is not None
    }
    return RecognizedReceipt(
        doc_type=document.doc_type,
        first_page=first_page,
        last_page=last_page,
        fields=fields,
        pages=tuple(pages[n] for n in range(first_page, last_page + 1) if n in pages),
    )


def _to_form_page(read: ReadResult) -> FormPage:
    return FormPage(
        page_number=read.page,
        width=read.width,
        height=read.height,
        unit=read.unit,
        text_angle=read.angle,
        lines=tuple(line.text for line in read.lines),
    )


def _to_form_field(name: str, field_value: FieldValue) -> FormField:
    return FormField(
        name=name,
        value_type=field_value.type,
        value=_typed_value(field_value),
        text=field_value.text,
        confidence=field_value.confidence,
        page_number=field_value.page,
    )


# Service type tag → ``FieldValue`` attribute holding the scalar value.
_SCALAR_VALUE_SLOTS = {
    "string": "value_string",
    "number": "value_number",
    "integer": "value_integer",
    "date": "value_date",
    "time": "value_time",
    "phoneNumber": "value_phone_number",
}


def _typed_value(field_value: FieldValue) -> object:
    """Return the value slot that matches the field's declared type."""
    slot = _SCALAR_VALUE_SLOTS.get(field_value.type)
    if slot is not None:
        return getattr(field_value, slot)
    if field_value.type == "array":
        return [_typed_value(item) for item in field_value.value_array or []]
    if field_value.type == "object":
        return {
            key: _typed_value(item)
            for key, item in (field_value.value_object or {}).items()
            if item is not None
        }
    return field_value.text
