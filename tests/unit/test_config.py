"""Tests for client configuration.

Covers:
- Default values
- Loading from environment variables
- Type coercion (string env vars → numeric fields)
- Fail-fast validation of endpoint, key and numeric ranges
"""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest

from doc_analysis.core.config import ClientConfig, ConfigValidationError

REQUIRED = {
    "DOC_ANALYSIS_ENDPOINT": "https://contoso.cognitiveservices.azure.com/",
    "DOC_ANALYSIS_API_KEY": "secret",
}


def _env(**overrides: str) -> dict[str, str]:
    return {**REQUIRED, **overrides}


class TestClientConfigDefaults:
    """Verify default configuration values."""

    def test_default_api_version(self) -> None:
        assert ClientConfig().api_version == "v2.0"

    def test_default_poll_interval(self) -> None:
        assert ClientConfig().poll_interval_seconds == 1.0

    def test_default_request_timeout(self) -> None:
        assert ClientConfig().request_timeout_seconds == 30.0

    def test_base_url_strips_trailing_slash(self) -> None:
        cfg = ClientConfig(endpoint="https://contoso.example//")
        assert cfg.base_url == "https://contoso.example"


class TestClientConfigFromEnv:
    """Verify loading from environment variables."""

    def test_loads_from_environment(self) -> None:
        """All env vars are read and coerced to correct types."""
        env = _env(
            DOC_ANALYSIS_API_VERSION="v2.1",
            DOC_ANALYSIS_POLL_INTERVAL_SECONDS="2.5",
            DOC_ANALYSIS_REQUEST_TIMEOUT_SECONDS="10",
        )
        with patch.dict(os.environ, env, clear=True):
            cfg = ClientConfig.from_env()

        assert cfg.endpoint == "https://contoso.cognitiveservices.azure.com/"
        assert cfg.api_key == "secret"
        assert cfg.api_version == "v2.1"
        assert cfg.poll_interval_seconds == 2.5
        assert cfg.request_timeout_seconds == 10.0

    def test_defaults_when_optional_env_missing(self) -> None:
        with patch.dict(os.environ, _env(), clear=True):
            cfg = ClientConfig.from_env()

        assert cfg.api_version == "v2.0"
        assert cfg.poll_interval_seconds == 1.0

    def test_frozen_immutability(self) -> None:
        """ClientConfig is frozen (immutable)."""
        cfg = ClientConfig()
        with pytest.raises(AttributeError):
            cfg.api_key = "other"  # type: ignore[misc]


class TestClientConfigValidation:
    """Fail-fast validation in from_env."""

    def test_missing_endpoint_rejected(self) -> None:
        with (
            patch.dict(os.environ, {"DOC_ANALYSIS_API_KEY": "k"}, clear=True),
            pytest.raises(ConfigValidationError, match="DOC_ANALYSIS_ENDPOINT"),
        ):
            ClientConfig.from_env()

    def test_relative_endpoint_rejected(self) -> None:
        with (
            patch.dict(os.environ, _env(DOC_ANALYSIS_ENDPOINT="contoso.example"), clear=True),
            pytest.raises(ConfigValidationError, match="http"),
        ):
            ClientConfig.from_env()

    def test_non_http_scheme_rejected(self) -> None:
        with (
            patch.dict(os.environ, _env(DOC_ANALYSIS_ENDPOINT="ftp://contoso.example"), clear=True),
            pytest.raises(ConfigValidationError, match="DOC_ANALYSIS_ENDPOINT"),
        ):
            ClientConfig.from_env()

    def test_missing_api_key_rejected(self) -> None:
        with (
            patch.dict(os.environ, _env(DOC_ANALYSIS_API_KEY=""), clear=True),
            pytest.raises(ConfigValidationError, match="DOC_ANALYSIS_API_KEY"),
        ):
            ClientConfig.from_env()

    def test_blank_api_version_rejected(self) -> None:
        with (
            patch.dict(os.environ, _env(DOC_ANALYSIS_API_VERSION="  "), clear=True),
            pytest.raises(ConfigValidationError, match="DOC_ANALYSIS_API_VERSION"),
        ):
            ClientConfig.from_env()

    def test_negative_poll_interval_rejected(self) -> None:
        with (
            patch.dict(os.environ, _env(DOC_ANALYSIS_POLL_INTERVAL_SECONDS="-1"), clear=True),
            pytest.raises(ConfigValidationError, match="must be >= 0"),
        ):
            ClientConfig.from_env()

    def test_zero_poll_interval_accepted(self) -> None:
        with patch.dict(os.environ, _env(DOC_ANALYSIS_POLL_INTERVAL_SECONDS="0"), clear=True):
            cfg = ClientConfig.from_env()
        assert cfg.poll_interval_seconds == 0.0

    def test_zero_timeout_rejected(self) -> None:
        with (
            patch.dict(os.environ, _env(DOC_ANALYSIS_REQUEST_TIMEOUT_SECONDS="0"), clear=True),
            pytest.raises(ConfigValidationError, match="must be > 0"),
        ):
            ClientConfig.from_env()

    def test_non_numeric_env_raises_value_error(self) -> None:
        """Non-numeric string for a float field → ValueError."""
        with (
            patch.dict(os.environ, _env(DOC_ANALYSIS_POLL_INTERVAL_SECONDS="abc"), clear=True),
            pytest.raises(ValueError),
        ):
            ClientConfig.from_env()

    def test_error_contains_key_and_value(self) -> None:
        with (
            patch.dict(os.environ, _env(DOC_ANALYSIS_REQUEST_TIMEOUT_SECONDS="-3"), clear=True),
            pytest.raises(ConfigValidationError) as exc_info,
        ):
            ClientConfig.from_env()
        assert exc_info.value.key == "DOC_ANALYSIS_REQUEST_TIMEOUT_SECONDS"
        assert exc_info.value.value == -3.0
