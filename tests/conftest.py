"""Shared pytest fixtures for the receipt analysis test suite."""

from __future__ import annotations

from typing import Any

import pytest

from doc_analysis.core.config import ClientConfig
from tests.unit.test_fetcher_contract import (
    FakeAnalyzeResultFetcher,
    receipt_analyze_result,
    status_payload,
)

# ---------------------------------------------------------------------------
# Configuration fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def client_config() -> ClientConfig:
    """A valid client configuration pointing at a test endpoint."""
    return ClientConfig(
        endpoint="https://contoso.cognitiveservices.example/",
        api_key="test-key",
        poll_interval_seconds=0.0,
    )


# ---------------------------------------------------------------------------
# Payload fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def analyze_result_payload() -> dict[str, Any]:
    """Raw ``analyzeResult`` body with one itemized receipt."""
    return receipt_analyze_result()


@pytest.fixture()
def running_then_succeeded() -> FakeAnalyzeResultFetcher:
    """Fetcher answering ``running`` three times, then ``succeeded``."""
    return FakeAnalyzeResultFetcher(
        [
            status_payload("running"),
            status_payload("running"),
            status_payload("running"),
            status_payload("succeeded"),
        ]
    )


@pytest.fixture()
def failed_fetcher() -> FakeAnalyzeResultFetcher:
    """Fetcher answering ``failed`` with one service error on the first check."""
    return FakeAnalyzeResultFetcher([status_payload("failed", errors=[{"code": "X", "message": "Y"}])])
