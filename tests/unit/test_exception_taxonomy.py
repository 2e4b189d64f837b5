"""Tests for the unified exception taxonomy.

Validates:
- AnalysisError hierarchy and structured attributes
- Category classification (validation, transient, permanent, contract)
- ``to_error_dict()`` produces stable payload keys
- Retry semantics are consistent with taxonomy class
- All client exceptions are AnalysisError subclasses
"""

from __future__ import annotations

from typing import ClassVar

from doc_analysis.core.config import ConfigValidationError
from doc_analysis.core.exceptions import (
    AnalysisError,
    ContractError,
    PermanentError,
    TransientError,
    ValidationError,
)
from doc_analysis.operations.base import OperationNotCompleteError, OperationTimeoutError
from doc_analysis.operations.cancellation import OperationCancelledError
from doc_analysis.service.base import (
    ServiceAuthError,
    ServiceContractError,
    ServiceError,
    ServiceRequestError,
    ServiceResponseError,
)
from doc_analysis.service.diagnostics import AnalysisFailedError


class TestAnalysisErrorBase:
    """AnalysisError base class behavior."""

    def test_default_attributes(self) -> None:
        err = AnalysisError("boom")
        assert err.message == "boom"
        assert err.stage == ""
        assert err.code == ""
        assert err.retryable is False
        assert err.correlation_id == ""

    def test_custom_attributes(self) -> None:
        err = AnalysisError(
            "fail",
            stage="status_check",
            code="SERVICE_ERROR",
            retryable=True,
            correlation_id="abc-123",
        )
        assert err.stage == "status_check"
        assert err.code == "SERVICE_ERROR"
        assert err.retryable is True
        assert err.correlation_id == "abc-123"

    def test_str_is_message(self) -> None:
        assert str(AnalysisError("human-readable error")) == "human-readable error"

    def test_to_error_dict_keys(self) -> None:
        d = AnalysisError("x", stage="s", code="C", retryable=True, correlation_id="id").to_error_dict()
        assert set(d.keys()) == {
            "category",
            "code",
            "stage",
            "message",
            "retryable",
            "correlation_id",
        }
        assert d["message"] == "x"
        assert d["retryable"] is True
        assert d["correlation_id"] == "id"


class TestCategoryBases:
    """Category base classes set correct defaults."""

    def test_validation_error_not_retryable(self) -> None:
        err = ValidationError("bad input")
        assert err.retryable is False
        assert err.category == "validation"
        assert err.code == "VALIDATION_FAILED"

    def test_transient_error_retryable(self) -> None:
        err = TransientError("timeout")
        assert err.retryable is True
        assert err.category == "transient"

    def test_permanent_error_not_retryable(self) -> None:
        err = PermanentError("gone")
        assert err.retryable is False
        assert err.category == "permanent"

    def test_contract_error_not_retryable(self) -> None:
        err = ContractError("schema drift")
        assert err.retryable is False
        assert err.category == "contract"

    def test_dynamic_category_from_retryable(self) -> None:
        assert AnalysisError("x", retryable=True).category == "transient"
        assert AnalysisError("x", retryable=False).category == "permanent"

    def test_base_category_is_fixed(self) -> None:
        assert ValidationError("x", retryable=True).category == "validation"
        assert ContractError("x", retryable=True).category == "contract"

    def test_class_defaults_apply_to_subclasses(self) -> None:
        class QuotaExhausted(TransientError):
            default_stage = "status_check"
            default_code = "QUOTA"

        err = QuotaExhausted("slow down")
        assert (err.stage, err.code, err.retryable) == ("status_check", "QUOTA", True)
        assert QuotaExhausted("x", code="OTHER", retryable=False).code == "OTHER"


class TestAllExceptionsAreAnalysisError:
    """Every custom exception inherits from AnalysisError."""

    EXCEPTION_CLASSES: ClassVar[list[type[AnalysisError]]] = [
        ConfigValidationError,
        ServiceError,
        ServiceRequestError,
        ServiceAuthError,
        ServiceResponseError,
        ServiceContractError,
        AnalysisFailedError,
        OperationNotCompleteError,
        OperationTimeoutError,
        OperationCancelledError,
    ]

    def test_all_subclass_analysis_error(self) -> None:
        for cls in self.EXCEPTION_CLASSES:
            assert issubclass(cls, AnalysisError), f"{cls.__name__} is not an AnalysisError"


class TestStageAndCode:
    """Every client exception has a default stage and code."""

    def test_config_validation_error(self) -> None:
        err = ConfigValidationError("DOC_ANALYSIS_API_KEY", "", "must not be empty")
        assert err.stage == "config"
        assert err.code == "CONFIG_VALIDATION_FAILED"
        assert err.key == "DOC_ANALYSIS_API_KEY"

    def test_service_request_error(self) -> None:
        err = ServiceRequestError("reset")
        assert err.stage == "status_check"
        assert err.code == "SERVICE_REQUEST_FAILED"
        assert err.retryable is True

    def test_service_auth_error(self) -> None:
        err = ServiceAuthError("bad key", status_code=401)
        assert err.code == "SERVICE_AUTH_FAILED"
        assert err.retryable is False
        assert isinstance(err, ServiceError)

    def test_service_response_error_keeps_service_code(self) -> None:
        err = ServiceResponseError("nope", status_code=404, error_code="NotFound")
        assert err.code == "NotFound"
        assert str(err) == "[404] nope"

    def test_service_contract_error(self) -> None:
        err = ServiceContractError("bad body")
        assert err.stage == "status_check"
        assert err.code == "SERVICE_CONTRACT_VIOLATION"
        assert err.category == "contract"

    def test_analysis_failed_error(self) -> None:
        err = AnalysisFailedError("failed", error_code="InvalidImage", error_message="corrupt")
        assert err.stage == "operation"
        assert err.code == "InvalidImage"
        assert err.category == "permanent"

    def test_operation_not_complete_error(self) -> None:
        err = OperationNotCompleteError("op-1")
        assert err.code == "OPERATION_NOT_COMPLETE"
        assert err.operation_id == "op-1"
        assert err.retryable is True

    def test_operation_timeout_error(self) -> None:
        err = OperationTimeoutError("op-1", 12.0, 5)
        assert err.code == "OPERATION_WAIT_TIMEOUT"
        assert err.category == "transient"
        assert "5 status checks" in str(err)

    def test_operation_cancelled_error(self) -> None:
        err = OperationCancelledError("stop")
        assert err.code == "OPERATION_CANCELLED"
        assert err.stage == "operation"


class TestRetrySemantics:
    """Retry decisions aligned to taxonomy classes."""

    def test_retryable_errors_report_transient_category(self) -> None:
        errors = [
            ServiceRequestError("x"),
            ServiceResponseError("x", status_code=503, retryable=True),
            OperationTimeoutError("op", 1.0, 1),
        ]
        for err in errors:
            assert err.category == "transient", f"{type(err).__name__} should be transient"
            assert err.retryable is True

    def test_non_retryable_errors_report_permanent_category(self) -> None:
        errors = [
            ServiceAuthError("x", status_code=403),
            ServiceResponseError("x", status_code=404),
            AnalysisFailedError("x", error_code="E", error_message="m"),
        ]
        for err in errors:
            assert err.category == "permanent", f"{type(err).__name__} should be permanent"
            assert err.retryable is False


class TestErrorDictStability:
    """to_error_dict() always includes required keys regardless of exception type."""

    REQUIRED_KEYS: ClassVar[set[str]] = {
        "category",
        "code",
        "stage",
        "message",
        "retryable",
        "correlation_id",
    }

    def test_service_error_dict(self) -> None:
        d = ServiceResponseError("throttled", status_code=429, retryable=True).to_error_dict()
        assert set(d.keys()) >= self.REQUIRED_KEYS
        assert d["stage"] == "status_check"
        assert d["category"] == "transient"

    def test_failed_operation_dict(self) -> None:
        err = AnalysisFailedError(
            "failed", error_code="E", error_message="m", correlation_id="corr-xyz"
        )
        d = err.to_error_dict()
        assert set(d.keys()) >= self.REQUIRED_KEYS
        assert d["correlation_id"] == "corr-xyz"
        assert d["code"] == "E"
