"""Client for frameworks that expose their own hosted run API.

Hosted endpoints accept ``{"model": ..., <input_field>: task}`` and answer
with a framework-specific JSON body. Error mapping is shared with the
OpenAI client.
"""

from __future__ import annotations

from typing import Any

import httpx

from agentmatrix.llm.client import post_json
from agentmatrix.llm.errors import LLMConfigError


class HostedFrameworkClient:
    """Sync httpx client for a single hosted framework endpoint.

    Usage::

        with HostedFrameworkClient("https://api.crewai.com/v1/run", api_key="...") as client:
            body = client.run("Plan a launch", model="gpt-41", input_field="prompt")
    """

    def __init__(
        self,
        endpoint: str,
        api_key: str,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not endpoint:
            raise LLMConfigError("No endpoint configured for hosted framework client.")
        if not api_key:
            raise LLMConfigError("No API key provided for hosted framework client.")
        self._endpoint = endpoint
        self._client = httpx.Client(
            timeout=timeout,
            transport=transport,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {api_key}",
            },
        )

    def run(self, task: str, *, model: str, input_field: str = "input") -> dict[str, Any]:
        """Submit one task and return the decoded response body."""
        return post_json(self._client, self._endpoint, {"model": model, input_field: task})

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> HostedFrameworkClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
