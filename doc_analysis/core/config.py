"""Client configuration loaded from environment variables.

All configuration values have sensible defaults; only the endpoint and
API key must be supplied for a real deployment.

Fail-fast validation:
    ``from_env()`` raises ``ConfigValidationError`` if any value is out
    of its valid range.  This catches bad configuration at startup rather
    than on the first status check.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from urllib.parse import urlparse

from doc_analysis.core.constants import (
    DEFAULT_API_VERSION,
    DEFAULT_POLL_INTERVAL_SECONDS,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
)
from doc_analysis.core.exceptions import AnalysisError


class ConfigValidationError(AnalysisError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Immutable client configuration.

    Attributes:
        endpoint: Cognitive Services endpoint, e.g.
            ``https://myresource.cognitiveservices.azure.com``.
        api_key: Subscription key sent with every request.
        api_version: REST API version path segment.
        poll_interval_seconds: Default delay between status checks when
            the service does not suggest one.
        request_timeout_seconds: Timeout for a single status request.
    """

    endpoint: str = ""
    api_key: str = ""
    api_version: str = DEFAULT_API_VERSION
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS
    request_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS

    @classmethod
    def from_env(cls) -> ClientConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a value is out of range or a required
                string value is empty.
            ValueError: If a numeric environment variable cannot be parsed
                (e.g. ``DOC_ANALYSIS_POLL_INTERVAL_SECONDS=abc``).
        """
        config = cls(
            endpoint=os.getenv("DOC_ANALYSIS_ENDPOINT", ""),
            api_key=os.getenv("DOC_ANALYSIS_API_KEY", ""),
            api_version=os.getenv("DOC_ANALYSIS_API_VERSION", DEFAULT_API_VERSION),
            poll_interval_seconds=float(
                os.getenv("DOC_ANALYSIS_POLL_INTERVAL_SECONDS", str(DEFAULT_POLL_INTERVAL_SECONDS))
            ),
            request_timeout_seconds=float(
                os.getenv(
                    "DOC_ANALYSIS_REQUEST_TIMEOUT_SECONDS", str(DEFAULT_REQUEST_TIMEOUT_SECONDS)
                )
            ),
        )
        _validate(config)
        return config

    @property
    def base_url(self) -> str:
        """Endpoint without a trailing slash."""
        return self.endpoint.rstrip("/")


def _validate(config: ClientConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    parsed = urlparse(config.endpoint)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigValidationError(
            "DOC_ANALYSIS_ENDPOINT",
            config.endpoint,
            "must be an absolute http(s) URL",
        )

    if not config.api_key:
        raise ConfigValidationError(
            "DOC_ANALYSIS_API_KEY",
            config.api_key,
            "must not be empty",
        )

    if not config.api_version.strip():
        raise ConfigValidationError(
            "DOC_ANALYSIS_API_VERSION",
            config.api_version,
            "must not be empty",
        )

    if config.poll_interval_seconds < 0:
        raise ConfigValidationError(
            "DOC_ANALYSIS_POLL_INTERVAL_SECONDS",
            config.poll_interval_seconds,
            "must be >= 0 (seconds)",
        )

    if config.request_timeout_seconds <= 0:
        raise ConfigValidationError(
            "DOC_ANALYSIS_REQUEST_TIMEOUT_SECONDS",
            config.request_timeout_seconds,
            "must be > 0 (seconds)",
        )
