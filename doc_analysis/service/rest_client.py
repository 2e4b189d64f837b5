"""Receipt analysis REST client (status fetcher).

Concrete ``AnalyzeResultFetcher`` backed by ``httpx``.  Issues
``GET {endpoint}/formrecognizer/{api_version}/prebuilt/receipt/analyzeResults/{id}``
and decodes the body into an ``AnalyzeOperationResult``.

Error mapping:
    - timeouts and connection failures → ``ServiceRequestError`` (retryable)
    - 401 / 403                       → ``ServiceAuthError``
    - 429 / 5xx                       → ``ServiceResponseError`` (retryable)
    - other 4xx                       → ``ServiceResponseError``
    - 2xx with an unexpected body     → ``ServiceContractError``

The client holds one ``httpx.Client`` and one ``httpx.AsyncClient``; both
are safe to share across many operations.  Transient faults are reported,
not retried — retry policy belongs to the caller.

References:
    Form Recognizer v2.0 REST API — Get Analyze Receipt Result
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import httpx
import pydantic

from doc_analysis.core.constants import ANALYZE_RECEIPT_RESULT_PATH, SUBSCRIPTION_KEY_HEADER
from doc_analysis.models.status import AnalyzeOperationResult, StatusUpdate
from doc_analysis.service.base import (
    AnalyzeResultFetcher,
    ServiceAuthError,
    ServiceContractError,
    ServiceError,
    ServiceRequestError,
    ServiceResponseError,
)

if TYPE_CHECKING:
    from types import TracebackType

    from doc_analysis.core.config import ClientConfig
    from doc_analysis.operations.cancellation import CancellationToken

logger = logging.getLogger(__name__)


class ReceiptServiceClient(AnalyzeResultFetcher):
    """Status fetcher for the prebuilt receipt model.

    Example usage::

        config = ClientConfig.from_env()
        with ReceiptServiceClient(config) as client:
            operation = RecognizeReceiptsOperation("abc-123", client)
            _, receipts = operation.wait_for_completion()
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        transport: httpx.BaseTransport | None = None,
        async_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Create the client.

        Args:
            config: Endpoint, key, API version and timeouts.
            transport: Optional ``httpx`` transport for the blocking client.
            async_transport: Optional transport for the asyncio client.
                Defaults to *transport* when that also supports asyncio
                (e.g. ``httpx.MockTransport``).
        """
        self._config = config
        if async_transport is None and isinstance(transport, httpx.AsyncBaseTransport):
            async_transport = transport

        headers = {SUBSCRIPTION_KEY_HEADER: config.api_key, "Accept": "application/json"}
        timeout = httpx.Timeout(config.request_timeout_seconds)
        self._client = httpx.Client(
            base_url=config.base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )
        self._async_client = httpx.AsyncClient(
            base_url=config.base_url,
            headers=headers,
            timeout=timeout,
            transport=async_transport,
        )

    @property
    def config(self) -> ClientConfig:
        """Return the client configuration (read-only)."""
        return self._config

    @property
    def default_polling_interval(self) -> float | None:
        return self._config.poll_interval_seconds

    # ------------------------------------------------------------------
    # AnalyzeResultFetcher
    # ------------------------------------------------------------------

    def get_analyze_receipt_result(
        self,
        operation_id: str,
        *,
        cancellation: CancellationToken | None = None,
    ) -> StatusUpdate:
        """Fetch the receipt analysis status for *operation_id*.

        Raises:
            ServiceError: On transport, service, or payload errors.
            OperationCancelledError: If *cancellation* fired.
        """
        if cancellation is not None:
            cancellation.raise_if_cancelled()
        path = self.result_path(operation_id)
        logger.debug("Status check | operation_id=%s | path=%s", operation_id, path)

        try:
            response = self._client.get(path)
        except httpx.TimeoutException as exc:
            msg = f"Status check timed out for operation {operation_id!r}: {exc}"
            raise ServiceRequestError(msg) from exc
        except httpx.TransportError as exc:
            msg = f"Status check failed for operation {operation_id!r}: {exc}"
            raise ServiceRequestError(msg) from exc

        return _decode(operation_id, response)

    async def get_analyze_receipt_result_async(
        self,
        operation_id: str,
        *,
        cancellation: CancellationToken | None = None,
    ) -> StatusUpdate:
        """Asyncio variant of ``get_analyze_receipt_result``.

        Cancelling the awaiting task aborts the in-flight request.
        """
        if cancellation is not None:
            cancellation.raise_if_cancelled()
        path = self.result_path(operation_id)
        logger.debug("Status check | operation_id=%s | path=%s", operation_id, path)

        try:
            response = await self._async_client.get(path)
        except httpx.TimeoutException as exc:
            msg = f"Status check timed out for operation {operation_id!r}: {exc}"
            raise ServiceRequestError(msg) from exc
        except httpx.TransportError as exc:
            msg = f"Status check failed for operation {operation_id!r}: {exc}"
            raise ServiceRequestError(msg) from exc

        return _decode(operation_id, response)

    def result_path(self, operation_id: str) -> str:
        """Return the status endpoint path for *operation_id*."""
        return ANALYZE_RECEIPT_RESULT_PATH.format(
            api_version=self._config.api_version,
            operation_id=quote(operation_id, safe=""),
        )

    # ------------------------------------------------------------------
    # Resource management
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close the blocking HTTP client."""
        self._client.close()

    async def aclose(self) -> None:
        """Close the asyncio HTTP client."""
        await self._async_client.aclose()

    def __enter__(self) -> ReceiptServiceClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    async def __aenter__(self) -> ReceiptServiceClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()


# ---------------------------------------------------------------------------
# Module-level helpers
# ---------------------------------------------------------------------------


def _decode(operation_id: str, response: httpx.Response) -> StatusUpdate:
    """Turn a status response into a ``StatusUpdate`` or raise a ``ServiceError``."""
    if response.is_error:
        raise _error_for_response(operation_id, response)

    try:
        payload = response.json()
    except ValueError as exc:
        msg = f"Status response for operation {operation_id!r} is not valid JSON"
        raise ServiceContractError(msg) from exc

    try:
        result = AnalyzeOperationResult.model_validate(payload)
    except pydantic.ValidationError as exc:
        msg = f"Status response for operation {operation_id!r} does not match schema: {exc}"
        raise ServiceContractError(msg) from exc

    logger.debug(
        "Status decoded | operation_id=%s | status=%s | http_status=%d",
        operation_id,
        result.status.value,
        response.status_code,
    )
    return StatusUpdate(result=result, raw_response=response)


def _error_for_response(operation_id: str, response: httpx.Response) -> ServiceError:
    """Map an HTTP error response to the matching ``ServiceError``."""
    error_code, detail = _service_error_detail(response)
    status = response.status_code
    msg = f"Status check failed for operation {operation_id!r}: {detail}"

    if status in (401, 403):
        return ServiceAuthError(msg, status_code=status, error_code=error_code)

    retryable = status == 429 or status >= 500
    logger.warning(
        "Status check rejected | operation_id=%s | http_status=%d | code=%s | retryable=%s",
        operation_id,
        status,
        error_code or "-",
        retryable,
    )
    return ServiceResponseError(msg, status_code=status, error_code=error_code, retryable=retryable)


def _service_error_detail(response: httpx.Response) -> tuple[str, str]:
    """Return ``(error_code, message)`` from an error body, if it has one."""
    try:
        body: Any = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        error = body["error"]
        return str(error.get("code", "")), str(error.get("message", "")) or response.reason_phrase
    return "", response.reason_phrase or f"HTTP {response.status_code}"
