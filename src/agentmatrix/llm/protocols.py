"""Upstream client protocols.

Defines the pluggable interface the simulation strategy talks to.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class LLMClient(Protocol):
    """Protocol for pluggable chat clients.

    Any object with chat() and close() methods matching this signature works.
    The built-in OpenAIClient implements this protocol; tests substitute
    in-memory fakes.
    """

    def chat(
        self,
        messages: list[dict[str, str]],
        *,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        **kwargs: Any,
    ) -> dict:
        """Send messages, return response dict."""
        ...

    def close(self) -> None:
        """Release underlying resources."""
        ...
