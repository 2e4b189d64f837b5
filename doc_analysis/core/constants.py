"""Shared client constants — single source of truth.

Centralises the REST path template, header names, and polling defaults
used by the service client and the operation pollers.

References:
    Form Recognizer v2.0 REST API — Get Analyze Receipt Result
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# REST API
# ---------------------------------------------------------------------------

DEFAULT_API_VERSION: str = "v2.0"
"""API version segment used when none is configured."""

ANALYZE_RECEIPT_RESULT_PATH: str = (
    "/formrecognizer/{api_version}/prebuilt/receipt/analyzeResults/{operation_id}"
)
"""Path template for the receipt analysis status endpoint."""

SUBSCRIPTION_KEY_HEADER: str = "Ocp-Apim-Subscription-Key"
"""Header carrying the Cognitive Services API key."""

# ---------------------------------------------------------------------------
# Polling
# ---------------------------------------------------------------------------

DEFAULT_POLL_INTERVAL_SECONDS: float = 1.0
"""Delay between status checks when neither caller nor service suggests one."""

DEFAULT_REQUEST_TIMEOUT_SECONDS: float = 30.0
"""Per-request timeout for a single status check."""

RETRY_AFTER_HEADERS: tuple[str, ...] = ("retry-after-ms", "x-ms-retry-after-ms", "retry-after")
"""Headers inspected (in order) for a server-suggested poll delay."""
