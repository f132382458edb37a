"""Built-in OpenAI-compatible httpx client.

Provides a sync HTTP client for OpenAI-compatible chat completion APIs.
Each call performs exactly one request and maps every failure onto the
upstream error hierarchy; retry decisions belong to the provider layer.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from agentmatrix.llm.errors import (
    LLMAuthError,
    LLMConfigError,
    LLMConnectionError,
    LLMRateLimitError,
    LLMResponseError,
    LLMStatusError,
    LLMTimeoutError,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"

_AUTH_ERROR_STATUS_CODES = {401, 403}
_AUTH_ERROR_MARKERS = ("invalid_api_key",)


def raise_for_upstream(response: httpx.Response) -> None:
    """Raise the matching upstream error for a non-2xx response.

    Auth failures are recognized by status (401/403) or by an
    ``invalid_api_key`` marker in the body, whatever the status.
    """
    if response.is_success:
        return

    body = response.text
    if response.status_code in _AUTH_ERROR_STATUS_CODES or any(
        marker in body for marker in _AUTH_ERROR_MARKERS
    ):
        raise LLMAuthError(
            f"Authentication failed: HTTP {response.status_code} - {body}"
        )

    if response.status_code == 429:
        retry_after_raw = response.headers.get("Retry-After")
        retry_after: float | None = None
        if retry_after_raw is not None:
            try:
                retry_after = float(retry_after_raw)
            except (ValueError, TypeError):
                pass
        raise LLMRateLimitError(
            f"Rate limited: HTTP 429 - {body}",
            retry_after=retry_after,
        )

    raise LLMStatusError(response.status_code, body)


def post_json(client: httpx.Client, url: str, payload: dict[str, Any]) -> dict:
    """POST a JSON payload and return the decoded JSON object.

    Raises:
        LLMTimeoutError: The request timed out.
        LLMConnectionError: Any other transport failure.
        LLMAuthError, LLMRateLimitError, LLMStatusError: Non-2xx responses.
        LLMResponseError: The body is not a JSON object.
    """
    try:
        response = client.post(url, json=payload)
    except httpx.TimeoutException as exc:
        raise LLMTimeoutError(f"Request to {url} timed out: {exc}") from exc
    except httpx.TransportError as exc:
        raise LLMConnectionError(f"Request to {url} failed: {exc}") from exc

    raise_for_upstream(response)

    try:
        data = response.json()
    except ValueError as exc:
        raise LLMResponseError(
            f"Response is not valid JSON: {response.text[:200]}"
        ) from exc
    if not isinstance(data, dict):
        raise LLMResponseError(f"Expected a JSON object, got {type(data).__name__}")
    return data


class OpenAIClient:
    """Sync httpx client for OpenAI-compatible chat completions.

    Implements the LLMClient protocol. Fails fast: one request per call,
    with every failure raised as a typed upstream error.

    Usage::

        with OpenAIClient(api_key="sk-...") as client:
            response = client.chat([{"role": "user", "content": "Hello"}])
            text = OpenAIClient.extract_content(response)
    """

    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        default_model: str = "gpt-4o",
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the OpenAI-compatible client.

        Args:
            api_key: Sanitized API key. Required.
            base_url: API base URL. Defaults to https://api.openai.com/v1.
            default_model: Default model for chat requests.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (used by tests).

        Raises:
            LLMConfigError: If no API key is provided.
        """
        if not api_key:
            raise LLMConfigError("No API key provided for the OpenAI client.")
        self._base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self._default_model = default_model
        self._client = httpx.Client(
            timeout=timeout,
            transport=transport,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {api_key}",
            },
        )

    def chat(
        self,
        messages: list[dict[str, str]],
        *,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        **kwargs: Any,
    ) -> dict:
        """Send a single chat completion request.

        Args:
            messages: List of message dicts with 'role' and 'content'.
            model: Model to use. Falls back to default_model.
            temperature: Sampling temperature.
            max_tokens: Maximum tokens to generate.
            **kwargs: Additional payload parameters forwarded to the API
                (e.g. ``response_format``).

        Returns:
            Full response dict with 'choices', 'usage', 'model', etc.

        Raises:
            LLMAuthError: On 401/403 or an invalid_api_key body.
            LLMRateLimitError: On 429.
            LLMTimeoutError, LLMConnectionError: On transport failures.
            LLMStatusError: On any other non-2xx status.
            LLMResponseError: On unexpected response format.
        """
        payload: dict[str, Any] = {
            "model": model or self._default_model,
            "messages": messages,
        }
        if temperature is not None:
            payload["temperature"] = temperature
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens
        payload.update(kwargs)

        data = post_json(self._client, f"{self._base_url}/chat/completions", payload)
        if "choices" not in data:
            raise LLMResponseError(
                f"Unexpected response format: missing 'choices' key. "
                f"Response: {data}"
            )
        return data

    def close(self) -> None:
        """Close the underlying httpx client."""
        self._client.close()

    def __enter__(self) -> OpenAIClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    @staticmethod
    def extract_content(response: dict) -> str:
        """Extract the assistant's message content from a response dict.

        Raises:
            LLMResponseError: If the response format is unexpected.
        """
        try:
            return response["choices"][0]["message"].get("content") or ""
        except (KeyError, IndexError, TypeError, AttributeError) as exc:
            raise LLMResponseError(
                f"Cannot extract content from response: {exc}. "
                f"Response: {response}"
            ) from exc

    @staticmethod
    def extract_usage(response: dict) -> dict | None:
        """Extract usage information from a response dict.

        Returns:
            Usage dict with prompt_tokens, completion_tokens, total_tokens,
            or None if not present.
        """
        usage = response.get("usage")
        return usage if isinstance(usage, dict) else None
