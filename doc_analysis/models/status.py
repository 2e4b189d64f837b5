"""Wire models for the receipt analysis status payload.

Decodes the JSON document returned by
``GET .../prebuilt/receipt/analyzeResults/{operationId}``:

- ``OperationStatus``: Job lifecycle state (``notStarted`` → ``running`` →
  ``succeeded`` | ``failed``)
- ``AnalyzeOperationResult``: Top-level status record
- ``AnalyzeResult``: Analysis payload (read, page and document results,
  plus the service-reported error list)
- ``StatusUpdate``: Decoded record paired with the raw HTTP response

Design notes:
- Pydantic models with camelCase aliases mirror the service schema;
  Python code uses snake_case attribute names.
- Models are frozen; a decoded status record is never mutated.

References:
    Form Recognizer v2.0 REST API — Get Analyze Receipt Result
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

if TYPE_CHECKING:
    import httpx


class OperationStatus(enum.Enum):
    """Lifecycle state of a remote analysis job.

    Values:
        NOT_STARTED: Job accepted but not yet picked up.
        RUNNING:     Analysis in progress.
        SUCCEEDED:   Analysis finished; ``analyzeResult`` holds the payload.
        FAILED:      Analysis failed; ``analyzeResult.errors`` explains why.
    """

    NOT_STARTED = "notStarted"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @classmethod
    def _missing_(cls, value: object) -> OperationStatus | None:
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.lower():
                    return member
        return None

    @property
    def is_terminal(self) -> bool:
        """Whether the job will not transition further."""
        return self in (OperationStatus.SUCCEEDED, OperationStatus.FAILED)


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class ErrorEntry(_WireModel):
    """A single service-reported error."""

    code: str = ""
    message: str = ""
    target: str | None = None


class TextLine(_WireModel):
    """A line of recognized text on a page."""

    text: str = ""
    bounding_box: list[float] = Field(default_factory=list)


class ReadResult(_WireModel):
    """OCR output for one page.

    Attributes:
        page: 1-based page number.
        angle: Text orientation in degrees (clockwise).
        width: Page width in ``unit``.
        height: Page height in ``unit``.
        unit: ``"pixel"`` for images, ``"inch"`` for PDF.
        lines: Recognized text lines (only when ``includeTextDetails``).
    """

    page: int
    angle: float = 0.0
    width: float = 0.0
    height: float = 0.0
    unit: str = "pixel"
    lines: list[TextLine] = Field(default_factory=list)


class FieldValue(_WireModel):
    """A typed field value extracted from a document."""

    type: str = "string"
    text: str | None = None
    confidence: float | None = None
    page: int | None = None
    bounding_box: list[float] = Field(default_factory=list)
    value_string: str | None = None
    value_number: float | None = None
    value_integer: int | None = None
    value_date: str | None = None
    value_time: str | None = None
    value_phone_number: str | None = None
    value_array: list[FieldValue] | None = None
    value_object: dict[str, FieldValue | None] | None = None


class DocumentResult(_WireModel):
    """Fields extracted from one receipt within the analyzed input."""

    doc_type: str = ""
    page_range: list[int] = Field(default_factory=list)
    fields: dict[str, FieldValue | None] = Field(default_factory=dict)


class AnalyzeResult(_WireModel):
    """Analysis payload carried by a status record."""

    version: str = ""
    read_results: list[ReadResult] = Field(default_factory=list)
    document_results: list[DocumentResult] = Field(default_factory=list)
    errors: list[ErrorEntry] = Field(default_factory=list)


class AnalyzeOperationResult(_WireModel):
    """Decoded status record for a receipt analysis operation."""

    status: OperationStatus
    created_date_time: datetime | None = None
    last_updated_date_time: datetime | None = None
    analyze_result: AnalyzeResult | None = None

    @property
    def errors(self) -> list[ErrorEntry]:
        """Service-reported errors (empty when none were sent)."""
        if self.analyze_result is None:
            return []
        return list(self.analyze_result.errors)


@dataclass(frozen=True, slots=True)
class StatusUpdate:
    """Result of a single status check.

    Attributes:
        result: The decoded status record.
        raw_response: The HTTP response it was decoded from.
    """

    result: AnalyzeOperationResult
    raw_response: httpx.Response
