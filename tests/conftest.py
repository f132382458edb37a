"""Shared test fixtures for agentmatrix.

Provides pricing/registry fixtures, a recording sleep, and builders for
adapters wired to an httpx.MockTransport.
"""

from __future__ import annotations

import json
from collections.abc import Callable

import httpx
import pytest

from agentmatrix.frameworks import FrameworkPersona, default_registry
from agentmatrix.models.config import AdapterConfig
from agentmatrix.pricing import PricingTable
from agentmatrix.providers.adapter import ProviderAdapter
from agentmatrix.providers.simulation import SimulationStrategy

VALID_KEY = "sk-test-1234567890"


class RecordingSleep:
    """Stand-in for time.sleep that records requested delays."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


def chat_response(
    content: dict | str,
    *,
    total_tokens: int | None = 1234,
    model: str = "gpt-4o",
) -> dict:
    """Build a realistic OpenAI chat completion response dict."""
    if isinstance(content, dict):
        content = json.dumps(content)
    response: dict = {
        "id": "chatcmpl-test123",
        "object": "chat.completion",
        "model": model,
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
    }
    if total_tokens is not None:
        response["usage"] = {
            "prompt_tokens": total_tokens // 2,
            "completion_tokens": total_tokens - total_tokens // 2,
            "total_tokens": total_tokens,
        }
    return response


def simulated_content(**overrides) -> dict:
    """A well-formed simulator JSON object."""
    content = {
        "output": "Agents plan, act and reflect.",
        "steps": [
            "Defined graph state",
            "Retrieved sources",
            "Graded relevance",
            "Generated summary",
        ],
        "logs": "[node:retrieve] 3 docs\n[node:generate] done",
        "quality": 80,
        "coverage": 88,
    }
    content.update(overrides)
    return content


@pytest.fixture
def pricing() -> PricingTable:
    return PricingTable.default()


@pytest.fixture
def registry():
    return default_registry()


@pytest.fixture
def langgraph(registry) -> FrameworkPersona:
    return registry.get("langgraph")


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def make_adapter(langgraph, pricing, sleep) -> Callable[..., ProviderAdapter]:
    """Factory: adapter for LangGraph whose live path hits ``handler``."""

    def _make(
        handler: Callable[[httpx.Request], httpx.Response] | None = None,
        *,
        persona: FrameworkPersona | None = None,
        **config_kwargs,
    ) -> ProviderAdapter:
        settings = {"api_key": VALID_KEY, "retry_backoff": 0, "mock_latency": 0.1}
        settings.update(config_kwargs)
        config = AdapterConfig(**settings)

        def _unexpected(request: httpx.Request) -> httpx.Response:
            raise AssertionError(f"unexpected upstream call to {request.url}")

        transport = httpx.MockTransport(handler or _unexpected)
        return ProviderAdapter(
            persona or langgraph,
            config,
            pricing,
            strategy=SimulationStrategy.from_config(config, transport=transport),
            sleep=sleep,
        )

    return _make
