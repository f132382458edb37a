"""Upstream-specific error hierarchy.

All upstream errors inherit from AgentMatrixError for consistent exception
handling. The provider layer classifies them into failure kinds.
"""

from __future__ import annotations

from agentmatrix.exceptions import AgentMatrixError


class LLMClientError(AgentMatrixError):
    """Base for all upstream client errors."""


class LLMConfigError(LLMClientError):
    """Missing or invalid client configuration (e.g., no API key)."""


class LLMRateLimitError(LLMClientError):
    """Rate limited or out of quota (429).

    Attributes:
        retry_after: Seconds to wait before retrying (from Retry-After header),
            or None if not provided.
    """

    def __init__(self, message: str = "Rate limited", retry_after: float | None = None) -> None:
        self.retry_after = retry_after
        if retry_after is not None:
            message = f"{message} (retry after {retry_after}s)"
        super().__init__(message)


class LLMAuthError(LLMClientError):
    """Authentication failed (401/403 or an invalid_api_key body)."""


class LLMResponseError(LLMClientError):
    """Unexpected response format from the upstream API."""


class LLMTimeoutError(LLMClientError):
    """The upstream call did not complete within the configured timeout."""


class LLMConnectionError(LLMClientError):
    """The upstream could not be reached (DNS, refused connection, reset)."""


class LLMStatusError(LLMClientError):
    """Non-2xx response that is neither an auth nor a quota failure.

    Attributes:
        status_code: HTTP status returned by the upstream.
        body: Raw response text (may be empty).
    """

    def __init__(self, status_code: int, body: str = "") -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"HTTP {status_code} - {body}" if body else f"HTTP {status_code}")
