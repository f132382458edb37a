"""Upstream client infrastructure for agentmatrix.

Provides an OpenAI-compatible HTTP client, a hosted-framework client,
the pluggable client protocol, and the upstream error hierarchy.
"""

from agentmatrix.llm.client import OpenAIClient
from agentmatrix.llm.errors import (
    LLMAuthError,
    LLMClientError,
    LLMConfigError,
    LLMConnectionError,
    LLMRateLimitError,
    LLMResponseError,
    LLMStatusError,
    LLMTimeoutError,
)
from agentmatrix.llm.hosted import HostedFrameworkClient
from agentmatrix.llm.protocols import LLMClient

__all__ = [
    "OpenAIClient",
    "HostedFrameworkClient",
    "LLMClient",
    "LLMClientError",
    "LLMConfigError",
    "LLMRateLimitError",
    "LLMAuthError",
    "LLMResponseError",
    "LLMTimeoutError",
    "LLMConnectionError",
    "LLMStatusError",
]
