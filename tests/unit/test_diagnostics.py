"""Tests for failed-operation error construction."""

from __future__ import annotations

import httpx

from doc_analysis.models.status import ErrorEntry
from doc_analysis.service.diagnostics import (
    UNKNOWN_ERROR_CODE,
    UNKNOWN_ERROR_MESSAGE,
    AnalysisFailedError,
    build_failed_operation_error,
)


def _response(**kwargs) -> httpx.Response:
    return httpx.Response(200, json={"status": "failed"}, **kwargs)


class TestBuildFailedOperationError:
    """Structured failure from the service error list."""

    def test_first_entry_drives_code_and_message(self) -> None:
        err = build_failed_operation_error(_response(), [ErrorEntry(code="X", message="Y")])

        assert isinstance(err, AnalysisFailedError)
        assert err.code == "X"
        assert err.error_message == "Y"
        assert err.status_code == 200
        assert err.retryable is False

    def test_message_layout(self) -> None:
        err = build_failed_operation_error(
            _response(), [ErrorEntry(code="InvalidImage", message="The input is corrupt.")]
        )
        assert str(err).splitlines() == [
            "Receipt analysis failed.",
            "Status: 200 (OK)",
            "ErrorCode: InvalidImage",
            "Message: The input is corrupt.",
        ]

    def test_additional_errors_listed(self) -> None:
        errors = [
            ErrorEntry(code="A", message="first"),
            ErrorEntry(code="B", message="second"),
            ErrorEntry(code="C", message="third"),
        ]
        err = build_failed_operation_error(_response(), errors)

        lines = str(err).splitlines()
        assert "Additional errors:" in lines
        assert lines[-2:] == ["- B: second", "- C: third"]
        assert [e.code for e in err.errors] == ["A", "B", "C"]

    def test_empty_error_list_uses_unknown_defaults(self) -> None:
        err = build_failed_operation_error(_response(), [])
        assert err.code == UNKNOWN_ERROR_CODE
        assert err.error_message == UNKNOWN_ERROR_MESSAGE
        assert err.errors == ()

    def test_blank_entry_fields_use_unknown_defaults(self) -> None:
        err = build_failed_operation_error(_response(), [ErrorEntry()])
        assert err.code == UNKNOWN_ERROR_CODE
        assert err.error_message == UNKNOWN_ERROR_MESSAGE

    def test_raw_response_and_correlation_id(self) -> None:
        response = _response(headers={"apim-request-id": "req-42"})
        err = build_failed_operation_error(response, [ErrorEntry(code="X", message="Y")])
        assert err.raw_response is response
        assert err.correlation_id == "req-42"
        assert err.to_error_dict()["correlation_id"] == "req-42"

    def test_without_response(self) -> None:
        err = build_failed_operation_error(None, [ErrorEntry(code="X", message="Y")])
        assert err.status_code is None
        assert "Status:" not in str(err)
