"""Service boundary: status fetchers and failure diagnostics.

- AnalyzeResultFetcher: Abstract status-check contract
- ReceiptServiceClient: httpx-backed REST implementation
- build_failed_operation_error: Structured failure for failed jobs
"""

from doc_analysis.service.base import (
    AnalyzeResultFetcher,
    ServiceAuthError,
    ServiceContractError,
    ServiceError,
    ServiceRequestError,
    ServiceResponseError,
)
from doc_analysis.service.diagnostics import AnalysisFailedError, build_failed_operation_error
from doc_analysis.service.rest_client import ReceiptServiceClient

__all__ = [
    "AnalysisFailedError",
    "AnalyzeResultFetcher",
    "ReceiptServiceClient",
    "ServiceAuthError",
    "ServiceContractError",
    "ServiceError",
    "ServiceRequestError",
    "ServiceResponseError",
    "build_failed_operation_error",
]
