"""Long-running operation pollers.

- LongRunningOperation: Generic operation contract
- RecognizeReceiptsOperation: Receipt analysis job tracker
- wait_until_complete / wait_until_complete_async: Generic wait loops
- CancellationToken: Cooperative cancellation for waits
"""

from doc_analysis.operations.base import (
    CompletedOperation,
    LongRunningOperation,
    OperationNotCompleteError,
    OperationTimeoutError,
)
from doc_analysis.operations.cancellation import CancellationToken, OperationCancelledError
from doc_analysis.operations.polling import wait_until_complete, wait_until_complete_async
from doc_analysis.operations.receipts import (
    RecognizeReceiptsOperation,
    convert_to_recognized_receipts,
)

__all__ = [
    "CancellationToken",
    "CompletedOperation",
    "LongRunningOperation",
    "OperationCancelledError",
    "OperationNotCompleteError",
    "OperationTimeoutError",
    "RecognizeReceiptsOperation",
    "convert_to_recognized_receipts",
    "wait_until_complete",
    "wait_until_complete_async",
]
