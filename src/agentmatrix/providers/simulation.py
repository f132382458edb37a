"""Simulation strategy: one real backend role-playing many frameworks.

A capable general-purpose model is asked to act as the target framework
and to return a structured JSON result. The JSON and the envelope's token
usage are validated against strict schemas; any violation becomes a
MALFORMED failure rather than an unrelated runtime error.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from agentmatrix.frameworks import FrameworkPersona
from agentmatrix.llm.client import OpenAIClient
from agentmatrix.llm.errors import LLMClientError, LLMResponseError
from agentmatrix.llm.protocols import LLMClient
from agentmatrix.models.config import AdapterConfig
from agentmatrix.prompts.simulate import (
    build_simulate_system_prompt,
    build_simulate_user_prompt,
)
from agentmatrix.providers.outcome import LiveOutcome, LivePayload

logger = logging.getLogger(__name__)

DEFAULT_QUALITY = 85
DEFAULT_COVERAGE = 90
DEFAULT_SAFETY = 95

LOGS_SEPARATOR = "\n\n---\nLOGS:\n"


class SimulatedResult(BaseModel):
    """Schema of the JSON object the simulator must return."""

    model_config = ConfigDict(extra="ignore")

    output: str
    steps: list[str] = Field(min_length=4, max_length=6)
    logs: str = ""
    quality: Optional[float] = Field(default=None, ge=0, le=100)
    coverage: Optional[float] = Field(default=None, ge=0, le=100)
    safety: Optional[float] = Field(default=None, ge=0, le=100)


class _Usage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    total_tokens: int = Field(ge=0)


ClientFactory = Callable[[str], LLMClient]


class SimulationStrategy:
    """Live path that role-plays a framework on an OpenAI-compatible backend.

    The client factory receives the sanitized credential and returns a
    fresh client; each attempt opens and closes its own client, so
    concurrent combinations share nothing.
    """

    def __init__(
        self,
        client_factory: ClientFactory,
        *,
        simulator_model: str = "gpt-4o",
        max_tokens: int = 1000,
    ) -> None:
        self._client_factory = client_factory
        self._simulator_model = simulator_model
        self._max_tokens = max_tokens

    @classmethod
    def from_config(
        cls,
        config: AdapterConfig,
        transport: httpx.BaseTransport | None = None,
    ) -> SimulationStrategy:
        def factory(api_key: str) -> LLMClient:
            return OpenAIClient(
                api_key=api_key,
                base_url=config.base_url,
                default_model=config.simulator_model,
                timeout=config.timeout,
                transport=transport,
            )

        return cls(
            factory,
            simulator_model=config.simulator_model,
            max_tokens=config.max_tokens,
        )

    def attempt(
        self,
        persona: FrameworkPersona,
        task: str,
        model_id: str,
        credential: str,
    ) -> LiveOutcome:
        """Run one live simulation. Never raises for upstream failures."""
        messages = [
            {"role": "system", "content": build_simulate_system_prompt(persona)},
            {"role": "user", "content": build_simulate_user_prompt(task, model_id)},
        ]
        try:
            client = self._client_factory(credential)
            try:
                response = client.chat(
                    messages,
                    model=self._simulator_model,
                    max_tokens=self._max_tokens,
                    response_format={"type": "json_object"},
                )
            finally:
                client.close()
            return LiveOutcome.success(self.parse_response(response))
        except (LLMClientError, ValueError) as exc:
            logger.debug("Simulation of %s failed: %s", persona.name, exc)
            return LiveOutcome.from_exception(exc)

    @staticmethod
    def parse_response(response: dict) -> LivePayload:
        """Validate a chat completion and normalize it into a LivePayload.

        Raises:
            LLMResponseError: If the content is not JSON or usage is missing.
            ValidationError: If the JSON does not match SimulatedResult.
        """
        content = OpenAIClient.extract_content(response)
        try:
            raw = json.loads(content)
        except ValueError as exc:
            raise LLMResponseError(f"Simulator returned non-JSON content: {content[:200]}") from exc
        result = SimulatedResult.model_validate(raw)

        usage = OpenAIClient.extract_usage(response)
        if usage is None:
            raise LLMResponseError("Simulator response carries no token usage")
        try:
            tokens = _Usage.model_validate(usage).total_tokens
        except ValidationError as exc:
            raise LLMResponseError(f"Unparseable token usage: {usage}") from exc

        output = result.output
        if result.logs:
            output = f"{output}{LOGS_SEPARATOR}{result.logs}"

        return LivePayload(
            output=output,
            tokens=tokens,
            steps=tuple(result.steps),
            quality=DEFAULT_QUALITY if result.quality is None else result.quality,
            coverage=DEFAULT_COVERAGE if result.coverage is None else result.coverage,
            safety=DEFAULT_SAFETY if result.safety is None else result.safety,
        )
