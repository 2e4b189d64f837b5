"""Typed models: wire status records, receipt results, operation outcomes."""

from doc_analysis.models.outcome import PENDING, Failed, Outcome, Pending, Succeeded
from doc_analysis.models.receipts import (
    FormField,
    FormPage,
    RecognizedReceipt,
    RecognizedReceiptCollection,
)
from doc_analysis.models.status import (
    AnalyzeOperationResult,
    AnalyzeResult,
    DocumentResult,
    ErrorEntry,
    FieldValue,
    OperationStatus,
    ReadResult,
    StatusUpdate,
    TextLine,
)

__all__ = [
    "PENDING",
    "AnalyzeOperationResult",
    "AnalyzeResult",
    "DocumentResult",
    "ErrorEntry",
    "Failed",
    "FieldValue",
    "FormField",
    "FormPage",
    "OperationStatus",
    "Outcome",
    "Pending",
    "ReadResult",
    "RecognizedReceipt",
    "RecognizedReceiptCollection",
    "StatusUpdate",
    "Succeeded",
    "TextLine",
]
