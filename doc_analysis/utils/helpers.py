"""Shared helper functions used by the service client and the pollers.

Centralises operation-id extraction from ``Operation-Location`` URLs and
the interpretation of the service's retry-after hints.
"""

from __future__ import annotations

import math
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from typing import TYPE_CHECKING
from urllib.parse import unquote, urlsplit

from doc_analysis.core.constants import RETRY_AFTER_HEADERS
from doc_analysis.core.exceptions import ValidationError

if TYPE_CHECKING:
    from collections.abc import Mapping


def parse_operation_id(operation_location: str) -> str:
    """Extract the operation id from an ``Operation-Location`` reference.

    The id is the final ``/``-delimited path segment.  Query strings and
    fragments are ignored, percent-escapes are decoded.

    Args:
        operation_location: Absolute URL, relative path, or bare id, e.g.
            ``"https://host/formrecognizer/v2.0/prebuilt/receipt/analyzeResults/abc-123"``.

    Returns:
        The operation id (``"abc-123"`` for the example above).

    Raises:
        ValidationError: If the reference is empty or ends with ``/``
            (no id segment to extract).
    """
    if not operation_location or not operation_location.strip():
        msg = "Operation location must not be empty"
        raise ValidationError(msg, stage="operation", code="INVALID_OPERATION_LOCATION")

    path = urlsplit(operation_location.strip()).path
    operation_id = unquote(path.rsplit("/", 1)[-1]).strip()
    if not operation_id:
        msg = f"Operation location has no trailing id segment: {operation_location!r}"
        raise ValidationError(msg, stage="operation", code="INVALID_OPERATION_LOCATION")
    return operation_id


def parse_retry_after(headers: Mapping[str, str] | None) -> float | None:
    """Return the server-suggested delay in seconds, or ``None``.

    Inspects ``retry-after-ms``, ``x-ms-retry-after-ms`` (milliseconds) and
    ``retry-after`` (seconds or an HTTP date), in that order.  Header
    names are matched case-insensitively; unparseable and non-finite
    values (``nan``, ``inf``) are skipped.
    """
    if not headers:
        return None

    lowered = {str(k).lower(): str(v) for k, v in headers.items()}
    for name in RETRY_AFTER_HEADERS:
        raw = lowered.get(name)
        if raw is None:
            continue
        raw = raw.strip()
        if name.endswith("-ms"):
            millis = _finite_float(raw)
            if millis is None:
                continue
            return max(millis / 1000.0, 0.0)
        seconds = _finite_float(raw)
        if seconds is not None:
            return max(seconds, 0.0)
        try:
            retry_at = parsedate_to_datetime(raw)
        except (TypeError, ValueError):
            continue
        if retry_at.tzinfo is None:
            retry_at = retry_at.replace(tzinfo=UTC)
        return max((retry_at - datetime.now(UTC)).total_seconds(), 0.0)
    return None


def _finite_float(raw: str) -> float | None:
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if math.isfinite(value) else None
