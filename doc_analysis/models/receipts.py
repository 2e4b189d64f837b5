"""Typed result models for recognized receipts.

- ``FormField``: A single named field (merchant name, total, ...)
- ``FormPage``: Page geometry and recognized text lines
- ``RecognizedReceipt``: Fields and pages for one receipt
- ``RecognizedReceiptCollection``: Immutable sequence of receipts — the
  value of a completed ``RecognizeReceiptsOperation``

Design notes:
- All models are frozen dataclasses; a published result is never mutated.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import overload


@dataclass(frozen=True, slots=True)
class FormField:
    """A field recognized on a receipt.

    Attributes:
        name: Field name as reported by the service (e.g. ``"Total"``).
        value_type: Service type tag (``"string"``, ``"number"``, ...).
        value: Typed value; lists for arrays, dicts for objects.
        text: Raw text the value was read from.
        confidence: Recognition confidence (0-1), if reported.
        page_number: 1-based page the field was found on, if reported.
    """

    name: str
    value_type: str
    value: object = None
    text: str | None = None
    confidence: float | None = None
    page_number: int | None = None


@dataclass(frozen=True, slots=True)
class FormPage:
    """Geometry and text of one analyzed page."""

    page_number: int
    width: float = 0.0
    height: float = 0.0
    unit: str = "pixel"
    text_angle: float = 0.0
    lines: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class RecognizedReceipt:
    """One receipt found in the analyzed input.

    Attributes:
        doc_type: Service document type (``"prebuilt:receipt"``).
        first_page: 1-based first page of the receipt.
        last_page: 1-based last page of the receipt.
        fields: Recognized fields keyed by name.
        pages: Pages spanned by the receipt.
    """

    doc_type: str
    first_page: int
    last_page: int
    fields: dict[str, FormField] = field(default_factory=dict)
    pages: tuple[FormPage, ...] = ()

    def get_field_value(self, name: str, default: object = None) -> object:
        """Return the typed value of field *name*, or *default*."""
        form_field = self.fields.get(name)
        if form_field is None:
            return default
        return form_field.value


@dataclass(frozen=True, slots=True)
class RecognizedReceiptCollection(Sequence[RecognizedReceipt]):
    """Immutable, indexable collection of recognized receipts."""

    receipts: tuple[RecognizedReceipt, ...] = ()

    @overload
    def __getitem__(self, index: int) -> RecognizedReceipt: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[RecognizedReceipt, ...]: ...

    def __getitem__(self, index: int | slice) -> RecognizedReceipt | tuple[RecognizedReceipt, ...]:
        return self.receipts[index]

    def __len__(self) -> int:
        return len(self.receipts)

    def __iter__(self) -> Iterator[RecognizedReceipt]:
        return iter(self.receipts)
